"""
randpass.validator
Decide whether a candidate password meets the generation options.
"""

from collections import Counter

from .classify import CharClass, classify_character
from .options import GenerationOptions


def count_classes(password: str) -> Counter:
    """Count how many characters of each CharClass appear in password."""
    return Counter(classify_character(ord(c)) for c in password)


def is_valid(password: str, options: GenerationOptions) -> bool:
    """
    True if the password satisfies every enabled constraint:
    - digit share >= min_digit_proportion (when digits are enabled)
    - symbol share >= min_symbol_proportion (when symbols are enabled and given)
    - 2 * |lowercase/letters - 0.5| <= max_case_variance (when both cases are
      enabled and the password has letters)
    Characters of any class count toward the length.
    """
    counts = count_classes(password)
    length = len(password)
    lowercase = counts[CharClass.LOWERCASE]
    letters = lowercase + counts[CharClass.UPPERCASE]

    if options.use_digits and length:
        if counts[CharClass.DIGIT] / length < options.min_digit_proportion:
            return False
    if options.use_symbols and options.symbols and length:
        if counts[CharClass.SYMBOL] / length < options.min_symbol_proportion:
            return False
    if letters and options.use_uppercase and options.use_lowercase:
        if 2 * abs(lowercase / letters - 0.5) > options.max_case_variance:
            return False
    return True
