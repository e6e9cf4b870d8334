"""
randpass.classify
Character classification shared by option checking and password validation.
"""

import string
from enum import Enum

SYMBOLS = frozenset(string.punctuation)


class CharClass(str, Enum):
    UPPERCASE = "uppercase"
    LOWERCASE = "lowercase"
    DIGIT = "digit"
    SYMBOL = "symbol"
    OTHER = "other"


def classify_character(code: int) -> CharClass:
    """
    Classify a character by its code point. Only ASCII letters and digits
    count as letters/digits; ASCII punctuation is a symbol; whitespace,
    control characters and everything outside ASCII are "other".
    """
    ch = chr(code)
    if "A" <= ch <= "Z":
        return CharClass.UPPERCASE
    if "a" <= ch <= "z":
        return CharClass.LOWERCASE
    if "0" <= ch <= "9":
        return CharClass.DIGIT
    if ch in SYMBOLS:
        return CharClass.SYMBOL
    return CharClass.OTHER


def remove_duplicate_characters(text: str) -> str:
    """Drop repeated characters, keeping the first occurrence of each."""
    return "".join(dict.fromkeys(text))
