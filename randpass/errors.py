"""
randpass.errors
Exception types raised by the generation core.
"""


class RandpassError(Exception):
    """Base class for randpass errors."""


class EntropyFailure(RandpassError):
    """The entropy source could not supply random bytes."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidOptionsError(RandpassError, ValueError):
    """Generation options that can never produce a password."""
