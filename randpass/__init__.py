"""randpass: constrained random password generation."""

__version__ = "0.1.0"
