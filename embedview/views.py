from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Severity = Literal["success", "error", "info"]


class Phase(str, Enum):
    """Lifecycle stage of the currently embedded target."""

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class LogEntry(BaseModel):
    """One line of the activity log shown to the user.

    Entries are frozen: once appended they are never edited or removed.
    """

    model_config = ConfigDict(frozen=True)

    timestamp: str = Field(description="Time of day, formatted with the display format")
    severity: Severity
    message: str


class EmbedSnapshot(BaseModel):
    """Read-only view of the controller state handed to the display surface."""

    model_config = ConfigDict(frozen=True)

    raw_input: str = ""
    target: str | None = None
    phase: Phase = Phase.IDLE
    generation: int = 0
    watchdog_armed: bool = False


# Requests
class InputRequest(BaseModel):
    text: str = ""


class SubmitRequest(BaseModel):
    # None means "submit whatever was last typed"
    url: str | None = None


class EmbedOutcomeRequest(BaseModel):
    """Outcome reported by the iframe for the generation it was rendered with."""

    generation: int | None = Field(default=None, ge=0)


# Responses
class SubmitResponse(BaseModel):
    state: EmbedSnapshot
    entry: LogEntry


class EmbedOutcomeResponse(BaseModel):
    applied: bool
    state: EmbedSnapshot


class LogsResponse(BaseModel):
    entries: list[LogEntry]


# Errors
class EmbedViewError(Exception):
    """Exception raised when embedview is misconfigured."""

    pass
