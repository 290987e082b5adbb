"""Single-page iframe preview: validate a URL, embed it, log what happened."""

from embedview.activity_log import ActivityLog
from embedview.controller import EmbedController
from embedview.validation import validate
from embedview.views import EmbedSnapshot, EmbedViewError, LogEntry, Phase

__all__ = [
    "ActivityLog",
    "EmbedController",
    "EmbedSnapshot",
    "EmbedViewError",
    "LogEntry",
    "Phase",
    "validate",
]
