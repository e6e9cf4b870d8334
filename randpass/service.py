"""
randpass.service
One generation request in, exactly one of ok / timeout / error out.
"""

import asyncio
import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .errors import EntropyFailure, InvalidOptionsError
from .generator import PasswordGenerator, default_generator
from .options import GenerationOptions
from .pool import DEFAULT_POOL_SIZE, RandomBytePool
from .sampler import UniformSampler

log = logging.getLogger(__name__)

STATUS_OK = "ok"
STATUS_TIMEOUT = "timeout"
STATUS_ERROR = "error"


@dataclass(frozen=True)
class GenerationResult:
    status: str
    password: Optional[str] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == STATUS_OK

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"status": self.status}
        if self.password is not None:
            out["password"] = self.password
        if self.message is not None:
            out["message"] = self.message
        return out


def generator_for_config(cfg: Dict[str, Any]) -> PasswordGenerator:
    """Generator whose pool has the configured size."""
    pool = RandomBytePool(capacity=int(cfg.get("pool_size") or DEFAULT_POOL_SIZE))
    return PasswordGenerator(UniformSampler(pool))


async def handle_generate_request(
    options: GenerationOptions,
    timeout_seconds: float,
    generator: Optional[PasswordGenerator] = None,
) -> GenerationResult:
    """
    Run one generation and report its outcome. A timeout is a result in its
    own right, not an error.
    """
    generator = generator or default_generator()
    try:
        password = await generator.generate(options, timeout_seconds)
    except (EntropyFailure, InvalidOptionsError) as e:
        log.error("Password generation failed: %s", e)
        return GenerationResult(STATUS_ERROR, message=str(e))
    if password is None:
        return GenerationResult(STATUS_TIMEOUT)
    return GenerationResult(STATUS_OK, password=password)


def run_generate_request(
    options: GenerationOptions,
    timeout_seconds: float,
    generator: Optional[PasswordGenerator] = None,
) -> GenerationResult:
    """
    Blocking wrapper for single-threaded callers such as the CLI. Threads that
    share a generator should go through GenerationWorker instead.
    """
    return asyncio.run(handle_generate_request(options, timeout_seconds, generator))


class GenerationWorker:
    """
    Runs generation on one long-lived event loop in a background thread.

    A pool's in-flight refill belongs to the loop that started it, so callers
    on other threads (e.g. web request handlers) submit their requests here
    instead of each spinning up a loop of their own against a shared pool.
    """

    def __init__(self, generator: Optional[PasswordGenerator] = None):
        self.generator = generator or PasswordGenerator()
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(
            target=self._loop.run_forever, name="randpass-worker", daemon=True
        )
        self._thread.start()

    def run(self, options: GenerationOptions, timeout_seconds: float) -> GenerationResult:
        """Submit one request and block until its result is ready."""
        future = asyncio.run_coroutine_threadsafe(
            handle_generate_request(options, timeout_seconds, self.generator), self._loop
        )
        return future.result()

    def close(self) -> None:
        if self._loop.is_closed():
            return
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join()
        self._loop.close()
