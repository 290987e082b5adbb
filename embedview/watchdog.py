"""Load watchdog: fails a frame that never reports an outcome.

One timer per target generation. Arming always cancels whatever was armed
before, so a timer can never outlive the target it was scoped to.
"""

import asyncio
import logging
from typing import Callable

logger = logging.getLogger(__name__)


class LoadWatchdog:
    def __init__(self, timeout: float, on_timeout: Callable[[int], None]):
        self.timeout = timeout
        self._on_timeout = on_timeout
        self._handle: asyncio.TimerHandle | None = None
        self._generation: int | None = None

    @property
    def armed(self) -> bool:
        return self._handle is not None

    @property
    def generation(self) -> int | None:
        """Generation the armed timer belongs to, or None when disarmed."""
        return self._generation

    @property
    def deadline(self) -> float | None:
        """Loop time at which the armed timer fires, or None when disarmed."""
        return self._handle.when() if self._handle is not None else None

    def arm(self, generation: int) -> None:
        """Start a fresh timer for ``generation``. Must run on the event loop."""
        loop = asyncio.get_running_loop()
        self.cancel()
        self._generation = generation
        self._handle = loop.call_later(self.timeout, self._fire, generation)
        logger.debug(f"Watchdog armed for generation {generation} ({self.timeout}s)")

    def cancel(self) -> None:
        if self._handle is None:
            return
        self._handle.cancel()
        logger.debug(f"Watchdog cancelled for generation {self._generation}")
        self._handle = None
        self._generation = None

    def _fire(self, generation: int) -> None:
        # Only the generation armed last may fire
        if generation != self._generation:
            logger.debug(f"Ignoring watchdog fire for superseded generation {generation}")
            return
        self._handle = None
        self._generation = None
        logger.debug(f"Watchdog fired for generation {generation}")
        self._on_timeout(generation)
