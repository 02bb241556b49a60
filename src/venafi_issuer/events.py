"""Diagnostic events emitted against an issuer."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum

logger = logging.getLogger(__name__)


class EventType(Enum):
    WARNING = "Warning"
    NORMAL = "Normal"


class EventSink(ABC):
    """Fire-and-forget receiver for issuer events."""

    @abstractmethod
    def record(self, event_type: EventType, reason: str, message_template: str, *args: object) -> None:
        """Record an event.

        Args:
            event_type: Severity of the event.
            reason: Short machine-readable reason, e.g. ``"FailedInit"``.
            message_template: ``%``-style message template.
            *args: Values substituted into ``message_template``.
        """


class LoggingEventSink(EventSink):
    """Event sink that writes events to the standard logging system."""

    def __init__(self, involved_object: str = "", _logger: logging.Logger | None = None) -> None:
        self._involved_object = involved_object
        self._logger = _logger or logger

    def record(self, event_type: EventType, reason: str, message_template: str, *args: object) -> None:
        level = logging.WARNING if event_type is EventType.WARNING else logging.INFO
        message = message_template % args if args else message_template
        if self._involved_object:
            self._logger.log(level, "%s %s [%s]: %s", event_type.value, reason, self._involved_object, message)
        else:
            self._logger.log(level, "%s %s: %s", event_type.value, reason, message)
