"""
randpass.generator
Constrained password generator: draws candidates from a byte pool until one
meets the options or the timeout runs out.
"""

import logging
import string
import time
from typing import Optional

from .errors import InvalidOptionsError
from .options import GenerationOptions
from .sampler import UniformSampler
from .validator import is_valid

log = logging.getLogger(__name__)


def build_alphabet(options: GenerationOptions) -> str:
    """
    Concatenate the enabled character sets in a fixed order: uppercase,
    lowercase, digits, then the configured symbols.
    """
    pools = []
    if options.use_uppercase:
        pools.append(string.ascii_uppercase)
    if options.use_lowercase:
        pools.append(string.ascii_lowercase)
    if options.use_digits:
        pools.append(string.digits)
    if options.use_symbols:
        pools.append(options.symbols)
    return "".join(pools)


class PasswordGenerator:
    def __init__(self, sampler: Optional[UniformSampler] = None):
        self.sampler = sampler or UniformSampler()

    async def random_string(self, length: int, characters: str) -> str:
        """Random string of ``length`` characters, each equally likely."""
        chars = []
        for _ in range(length):
            chars.append(await self.sampler.choice(characters))
        return "".join(chars)

    async def generate(self, options: GenerationOptions, timeout_seconds: float) -> Optional[str]:
        """
        Generate a password satisfying ``options``.

        Returns None once ``timeout_seconds`` have elapsed without a valid
        candidate. The clock is only checked between candidates. Errors from
        the entropy layer propagate unchanged.
        """
        start = time.monotonic()
        alphabet = build_alphabet(options)
        if not alphabet:
            raise InvalidOptionsError("At least one character set must be enabled")
        if len(alphabet) > 0x100:
            raise InvalidOptionsError("Alphabet larger than 256 characters")

        attempts = 0
        while True:
            password = await self.random_string(options.password_length, alphabet)
            attempts += 1
            if time.monotonic() - start >= timeout_seconds:
                log.warning("Password generation timed out after %d attempts", attempts)
                return None
            if is_valid(password, options):
                log.debug("Generated password after %d attempts", attempts)
                return password


_default_generator: Optional[PasswordGenerator] = None


def default_generator() -> PasswordGenerator:
    """Process-wide generator sharing a single byte pool."""
    global _default_generator
    if _default_generator is None:
        _default_generator = PasswordGenerator()
    return _default_generator


async def generate_password(options: GenerationOptions, timeout_seconds: float) -> Optional[str]:
    return await default_generator().generate(options, timeout_seconds)
