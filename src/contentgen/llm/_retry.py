from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

from contentgen import logger as logger_mod

from .errors import ProviderTimeoutError

log = logger_mod.get_logger()

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Deadline and retry budget for one provider.

    `retries` counts extra attempts, so a policy with retries=2 makes at most
    three attempts. Only deadline overruns are retried.
    """

    timeout_s: float
    retries: int = 1
    backoff_s: float = 0.5

    def __post_init__(self) -> None:
        # Clamp instead of raising; these come from fixed provider tables.
        if self.retries < 0:
            object.__setattr__(self, "retries", 0)

        if self.timeout_s <= 0:
            object.__setattr__(self, "timeout_s", 0.1)

        if self.backoff_s < 0:
            object.__setattr__(self, "backoff_s", 0.0)

    @property
    def max_attempts(self) -> int:
        return self.retries + 1


async def _race(operation: Callable[[], Awaitable[T]], timeout_s: float) -> tuple[bool, T | None]:
    """Run one attempt against the deadline.

    Returns (True, result) when the operation finished first. An exception
    raised by the operation propagates as is. On a deadline overrun the
    attempt is cancelled and (False, None) is returned.
    """

    task = asyncio.ensure_future(operation())
    try:
        done, _ = await asyncio.wait({task}, timeout=timeout_s)
    except BaseException:
        task.cancel()
        raise

    if task in done:
        return True, task.result()

    task.cancel()
    return False, None


async def with_timeout(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    *,
    context: str,
) -> T:
    """Await `operation()` under `policy`, retrying only when the deadline elapses.

    `operation` is called once per attempt and must be safe to repeat.
    """

    for attempt in range(policy.max_attempts):
        finished, result = await _race(operation, policy.timeout_s)
        if finished:
            return result  # type: ignore[return-value]

        if attempt == policy.retries:
            log.error(
                f"{context}: attempt {attempt + 1}/{policy.max_attempts} timed out "
                f"after {policy.timeout_s}s; giving up"
            )
            break

        log.warning(f"{context}: attempt {attempt + 1} timed out, retrying...")
        await asyncio.sleep(policy.backoff_s)

    raise ProviderTimeoutError("Request timed out")
