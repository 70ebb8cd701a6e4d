import asyncio
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class Countdown:
    """
    One-second countdown driven by the asyncio event loop.

    Each tick is a ``loop.call_later`` callback, so ticks run on the same
    loop as everything else and need no locking. When no loop is running
    the countdown is armed but not scheduled and the owner advances it by
    calling ``tick()`` itself.

    ``on_expire`` fires exactly once, when the remaining time reaches zero.
    After expiry or ``cancel()`` the countdown never ticks again.
    """

    def __init__(
        self,
        seconds: int,
        on_expire: Callable[[], None],
        on_tick: Optional[Callable[[int], None]] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        interval: float = 1.0,
    ):
        if seconds <= 0:
            raise ValueError("countdown needs a positive number of seconds")
        self._remaining = seconds
        self._on_expire = on_expire
        self._on_tick = on_tick
        self._loop = loop
        self._interval = interval
        self._handle: Optional[asyncio.TimerHandle] = None
        self._started = False
        self._cancelled = False
        self._expired = False

    @property
    def remaining(self) -> int:
        return self._remaining

    @property
    def running(self) -> bool:
        return self._started and not (self._cancelled or self._expired)

    @property
    def scheduled(self) -> bool:
        return self._handle is not None

    @property
    def expired(self) -> bool:
        return self._expired

    def start(self) -> None:
        if self._started:
            raise RuntimeError("countdown already started")
        self._started = True

        if self._loop is None:
            try:
                self._loop = asyncio.get_running_loop()
            except RuntimeError:
                logger.debug("No running event loop; countdown will be advanced manually")
                return
        self._schedule()

    def tick(self) -> bool:
        """Advance by one second. Returns True if this tick expired the countdown."""
        if not self.running:
            return False

        self._remaining -= 1
        if self._on_tick is not None:
            self._on_tick(self._remaining)

        if self._remaining <= 0:
            self._remaining = 0
            self._expired = True
            self._unschedule()
            self._on_expire()
            return True
        return False

    def cancel(self) -> None:
        self._cancelled = True
        self._unschedule()

    def _schedule(self) -> None:
        self._handle = self._loop.call_later(self._interval, self._fire)

    def _unschedule(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        self.tick()
        if self.running:
            self._schedule()
