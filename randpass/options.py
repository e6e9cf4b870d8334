"""
randpass.options
Password generation options and the checks that make them usable.
"""

import dataclasses
from dataclasses import dataclass
from typing import Any, Dict, Mapping

from .classify import CharClass, classify_character, remove_duplicate_characters
from .errors import InvalidOptionsError

DEFAULT_SYMBOLS = "!@#$%&*_?"

# camelCase names used by the original worker messages
_CAMEL_KEYS = {
    "passwordLength": "password_length",
    "useUppercase": "use_uppercase",
    "useLowercase": "use_lowercase",
    "useDigits": "use_digits",
    "useSymbols": "use_symbols",
    "minDigitProportion": "min_digit_proportion",
    "minSymbolProportion": "min_symbol_proportion",
    "maxCaseVariance": "max_case_variance",
}

_BOOL_FIELDS = ("use_uppercase", "use_lowercase", "use_digits", "use_symbols")
_RATIO_FIELDS = ("min_digit_proportion", "min_symbol_proportion", "max_case_variance")


def _parse_bool(name: str, value: Any) -> bool:
    # JSON and form payloads sometimes carry booleans as strings
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise InvalidOptionsError(f"{name} must be true or false, got {value!r}")


@dataclass(frozen=True)
class GenerationOptions:
    password_length: int = 9
    use_uppercase: bool = True
    use_lowercase: bool = True
    use_digits: bool = True
    use_symbols: bool = True
    symbols: str = DEFAULT_SYMBOLS
    min_digit_proportion: float = 0.01
    min_symbol_proportion: float = 0.01
    max_case_variance: float = 0.01

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GenerationOptions":
        """
        Build options from a JSON-style mapping. Missing keys take their
        defaults; unknown keys are rejected.
        """
        known = {f.name for f in dataclasses.fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in (data or {}).items():
            name = _CAMEL_KEYS.get(key, key)
            if name not in known:
                raise InvalidOptionsError(f"Unknown option: {key}")
            kwargs[name] = value
        try:
            if "password_length" in kwargs:
                kwargs["password_length"] = int(kwargs["password_length"])
            for name in _RATIO_FIELDS:
                if name in kwargs:
                    kwargs[name] = float(kwargs[name])
        except (TypeError, ValueError) as e:
            raise InvalidOptionsError(f"Invalid option value: {e}") from e
        for name in _BOOL_FIELDS:
            if name in kwargs:
                kwargs[name] = _parse_bool(name, kwargs[name])
        if "symbols" in kwargs and not isinstance(kwargs["symbols"], str):
            raise InvalidOptionsError("symbols must be a string")
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)

    def replace(self, **changes: Any) -> "GenerationOptions":
        return dataclasses.replace(self, **changes)


def normalize(options: GenerationOptions) -> GenerationOptions:
    """Return options with duplicate symbols removed."""
    symbols = remove_duplicate_characters(options.symbols)
    if symbols == options.symbols:
        return options
    return options.replace(symbols=symbols)


def check_options(options: GenerationOptions) -> None:
    """
    Raise InvalidOptionsError unless the options describe a usable alphabet:
    - length of at least 1
    - proportions and variance within [0, 1]
    - a non-empty symbol set made only of symbol characters
    - some enabled class (symbols alone need two or more distinct symbols)

    Options that are well formed but hard or impossible to satisfy (say an
    odd length with zero case variance) pass; generation times out on them.
    """
    if options.password_length < 1:
        raise InvalidOptionsError("password_length must be at least 1")
    for name in _RATIO_FIELDS:
        value = getattr(options, name)
        if not 0.0 <= value <= 1.0:
            raise InvalidOptionsError(f"{name} must be between 0 and 1, got {value}")
    if not options.symbols:
        raise InvalidOptionsError("At least one symbol must be provided")
    bad = [c for c in options.symbols if classify_character(ord(c)) is not CharClass.SYMBOL]
    if bad:
        raise InvalidOptionsError(f"Not symbol characters: {''.join(bad)!r}")
    distinct_symbols = len(remove_duplicate_characters(options.symbols))
    if not (
        options.use_uppercase
        or options.use_lowercase
        or options.use_digits
        or (options.use_symbols and distinct_symbols > 1)
    ):
        raise InvalidOptionsError("At least one character set must be enabled")
