"""Debounce helper for event-loop callbacks."""

import asyncio
import functools
from typing import Any, Callable, Optional


class Debounced:
    """Callable wrapper that only fires after ``wait_ms`` of quiet.

    Every call cancels the pending invocation and schedules a new one with the
    latest arguments, so a burst of calls collapses into a single call of the
    wrapped function. Calls must happen while an event loop is running.
    """

    def __init__(self, fn: Callable[..., Any], wait_ms: float) -> None:
        self.fn = fn
        self.wait_ms = wait_ms
        self._handle: Optional[asyncio.TimerHandle] = None
        functools.update_wrapper(self, fn)

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.wait_ms / 1000, self._fire, args, kwargs)

    def _fire(self, args: tuple, kwargs: dict) -> None:
        self._handle = None
        self.fn(*args, **kwargs)

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def cancel(self) -> None:
        """Drop the pending invocation, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


def debounce(fn: Callable[..., Any], wait_ms: float) -> Debounced:
    """Wrap ``fn`` so it runs only once calls stop for ``wait_ms`` milliseconds.

    Examples:
        >>> import asyncio
        >>> calls = []
        >>> async def burst():
        ...     record = debounce(calls.append, 10)
        ...     for i in range(3):
        ...         record(i)
        ...     await asyncio.sleep(0.05)
        >>> asyncio.run(burst())
        >>> calls
        [2]
    """
    return Debounced(fn, wait_ms)


__all__ = [
    "Debounced",
    "debounce",
]
