"""
nostr_io/retry.py — bounded retry with exponential backoff.

Attempts run from 0 to max_retries (max_retries + 1 calls in total). After
a failed attempt n the executor sleeps

    min(max_delay, base_delay * multiplier ** n)

optionally jittered by ±25%, and tries again. When attempts run out the
last exception is re-raised unchanged.

Presets:
  RetryExecutor.for_relays()      network calls: 3 retries, 2s × 1.5, cap 15s, jitter
  RetryExecutor.for_validation()  fetch-back:    2 retries, 1s × 2.0, cap 5s
"""

from __future__ import annotations

import random
import time
from collections.abc import Callable
from typing import TypeVar

from rich.console import Console
from rich.markup import escape

T = TypeVar("T")

console = Console(stderr=True)

DEFAULT_RETRIES = 3
JITTER_FRACTION = 0.25


class RetryExecutor:
    def __init__(
        self,
        max_retries: int = DEFAULT_RETRIES,
        base_delay: float = 2.0,
        multiplier: float = 1.5,
        max_delay: float = 15.0,
        jitter: bool = True,
        sleep: Callable[[float], None] = time.sleep,
        out: Console | None = None,
    ) -> None:
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        self.max_retries = max_retries
        self.base_delay  = base_delay
        self.multiplier  = multiplier
        self.max_delay   = max_delay
        self.jitter      = jitter
        self._sleep      = sleep
        self._out        = out or console

    @classmethod
    def for_relays(cls, **kwargs) -> RetryExecutor:
        return cls(max_retries=3, base_delay=2.0, multiplier=1.5, max_delay=15.0, jitter=True, **kwargs)

    @classmethod
    def for_validation(cls, **kwargs) -> RetryExecutor:
        return cls(max_retries=2, base_delay=1.0, multiplier=2.0, max_delay=5.0, jitter=False, **kwargs)

    def delay_for(self, attempt: int) -> float:
        """Delay (seconds) after failed attempt `attempt` (0-based)."""
        delay = min(self.max_delay, self.base_delay * self.multiplier ** attempt)
        if self.jitter:
            delay *= random.uniform(1 - JITTER_FRACTION, 1 + JITTER_FRACTION)
        return max(0.0, delay)

    def execute(self, operation: Callable[[], T], name: str = "operation") -> T:
        """
        Runs `operation` until it returns.

        Raises:
            Exception: whatever the last attempt raised, once retries run out.
        """
        for attempt in range(self.max_retries + 1):
            try:
                return operation()
            except Exception as exc:
                if attempt >= self.max_retries:
                    self._out.print(
                        f"[red]error:[/red] {name} failed after "
                        f"{self.max_retries + 1} attempts: {escape(str(exc))}"
                    )
                    raise
                delay = self.delay_for(attempt)
                self._out.print(
                    f"[yellow]warn:[/yellow] {name} failed "
                    f"(attempt {attempt + 1}/{self.max_retries + 1}): {escape(str(exc))} "
                    f"- retrying in {delay:.1f}s"
                )
                self._sleep(delay)
        raise AssertionError("unreachable")
