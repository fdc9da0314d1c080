import os
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

SEARCH_DEBOUNCE_MS = int(os.getenv("SEARCH_DEBOUNCE_MS", "300"))


@dataclass
class PendingCall:
    deadline: float
    fn: Callable[..., Any]
    args: Tuple[Any, ...]


class Debouncer:
    """
    Coalesces bursts of calls into one, run after a quiet period.

    Only one call is ever pending: schedule() cancels the previous token
    before arming a new one. Nothing runs on its own; the owning event loop
    calls poll() (or flush()) to fire a due call.
    """

    def __init__(
        self,
        delay: float = SEARCH_DEBOUNCE_MS / 1000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.delay = delay
        self._clock = clock
        self._pending: Optional[PendingCall] = None

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def schedule(self, fn: Callable[..., Any], *args: Any) -> PendingCall:
        self.cancel()
        self._pending = PendingCall(deadline=self._clock() + self.delay, fn=fn, args=args)
        return self._pending

    def cancel(self) -> None:
        self._pending = None

    def poll(self) -> bool:
        if self._pending is None or self._clock() < self._pending.deadline:
            return False
        return self.flush()

    def flush(self) -> bool:
        call, self._pending = self._pending, None
        if call is None:
            return False
        call.fn(*call.args)
        return True
