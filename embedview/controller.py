"""Embed controller: the state machine behind the preview page.

    idle --submit(valid)--> loading --loaded--> ready
    loading --failed | watchdog--> failed
    any --submit(empty/invalid)--> idle
    any --submit(valid)--> loading   (new generation, old watchdog cancelled)

Every accepted submit starts a new *generation*. Outcome callbacks and the
watchdog carry the generation they belong to, so a late answer for an old
target can never change the state of a newer one.

All methods are synchronous and must be called from the event loop thread;
each transition runs to completion before the next event is handled.
"""

import asyncio
import logging
from typing import Any

from embedview.activity_log import ActivityLog
from embedview.config import EMBED_TIMEOUT_SECONDS
from embedview.validation import parse_target
from embedview.views import EmbedSnapshot, LogEntry, Phase, Severity
from embedview.watchdog import LoadWatchdog

logger = logging.getLogger(__name__)


class EmbedController:
    def __init__(
        self,
        activity_log: ActivityLog | None = None,
        timeout: float = EMBED_TIMEOUT_SECONDS,
    ):
        self.activity_log = activity_log if activity_log is not None else ActivityLog()
        self.watchdog = LoadWatchdog(timeout, self._on_watchdog_fired)
        self._raw_input = ""
        self._target: str | None = None
        self._phase = Phase.IDLE
        self._generation = 0
        self._subscribers: list[asyncio.Queue] = []

    # -- read side --------------------------------------------------------

    @property
    def raw_input(self) -> str:
        return self._raw_input

    @property
    def target(self) -> str | None:
        return self._target

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def generation(self) -> int:
        return self._generation

    def snapshot(self) -> EmbedSnapshot:
        return EmbedSnapshot(
            raw_input=self._raw_input,
            target=self._target,
            phase=self._phase,
            generation=self._generation,
            watchdog_armed=self.watchdog.armed,
        )

    # -- events -----------------------------------------------------------

    def log_info(self, message: str) -> LogEntry:
        """Record an informational entry without touching the embed state."""
        return self._log("info", message)

    def set_input(self, text: str) -> None:
        """Track the text as the user types; nothing is validated yet."""
        self._raw_input = text
        self._publish_state()

    def submit(self, raw_input: str | None = None) -> LogEntry:
        """Validate the input and, if acceptable, start embedding it.

        Appends exactly one log entry and returns it. With no argument the
        last text passed to set_input is submitted.
        """
        text = self._raw_input if raw_input is None else raw_input

        if not text.strip():
            self._raw_input = text
            logger.warning("Rejected empty submission")
            return self._reset("Please enter a URL")

        url = parse_target(text)
        if url is None:
            self._raw_input = text
            logger.warning(f"Rejected invalid URL: {text!r}")
            return self._reset(f"Invalid URL: {text}")

        # Arm first: without a running loop this raises before any state changes
        generation = self._generation + 1
        self.watchdog.arm(generation)

        self._raw_input = text
        self._generation = generation
        self._target = url
        self._phase = Phase.LOADING
        entry = self._log("success", f"Valid URL loaded: {url}")
        logger.info(f"Embedding {url} (generation {self._generation})")
        self._publish_state()
        return entry

    def on_embed_loaded(self, generation: int | None = None) -> bool:
        """The frame rendered its target. Returns False if the report was stale."""
        if not self._accepts_outcome(generation, "loaded"):
            return False
        self.watchdog.cancel()
        self._phase = Phase.READY
        self._log("success", "Frame loaded successfully")
        logger.info(f"Frame ready: {self._target}")
        self._publish_state()
        return True

    def on_embed_failed(self, generation: int | None = None) -> bool:
        """The frame reported a load error. Returns False if the report was stale."""
        if not self._accepts_outcome(generation, "failed"):
            return False
        self.watchdog.cancel()
        self._phase = Phase.FAILED
        self._log("error", "Failed to load the frame")
        logger.warning(f"Frame failed to load: {self._target}")
        self._publish_state()
        return True

    # -- change feed ------------------------------------------------------

    def subscribe(self) -> asyncio.Queue:
        """Queue receiving a dict per log entry and per state change, in order."""
        queue: asyncio.Queue = asyncio.Queue()
        self._subscribers.append(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        if queue in self._subscribers:
            self._subscribers.remove(queue)

    # -- internals --------------------------------------------------------

    def _accepts_outcome(self, generation: int | None, outcome: str) -> bool:
        if generation is not None and generation != self._generation:
            logger.debug(
                f"Ignoring {outcome} report for generation {generation} "
                f"(current is {self._generation})"
            )
            return False
        if self._phase is not Phase.LOADING:
            logger.debug(f"Ignoring {outcome} report in phase {self._phase.value}")
            return False
        return True

    def _on_watchdog_fired(self, generation: int) -> None:
        if generation != self._generation or self._phase is not Phase.LOADING:
            logger.debug(f"Watchdog for generation {generation} fired after the outcome")
            return
        self._phase = Phase.FAILED
        self._log("error", f"Timed out loading the frame ({self.watchdog.timeout:g} seconds)")
        logger.warning(f"Frame timed out after {self.watchdog.timeout:g}s: {self._target}")
        self._publish_state()

    def _reset(self, message: str) -> LogEntry:
        self.watchdog.cancel()
        self._target = None
        self._phase = Phase.IDLE
        entry = self._log("error", message)
        self._publish_state()
        return entry

    def _log(self, severity: Severity, message: str) -> LogEntry:
        entry = self.activity_log.append(severity, message)
        self._publish({"type": "log", "entry": entry.model_dump(mode="json")})
        return entry

    def _publish_state(self) -> None:
        self._publish({"type": "state", "state": self.snapshot().model_dump(mode="json")})

    def _publish(self, event: dict[str, Any]) -> None:
        for queue in self._subscribers:
            queue.put_nowait(event)
