"""Typed side channel for warnings and errors produced during a run."""

import logging
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

WARNING = "warning"
ERROR = "error"
NOTICE = "notice"


@dataclass(frozen=True)
class Event:
    """A single warning or error raised during a run."""

    level: str  # warning | error | notice
    kind: str  # syntax | resolution | cycle | file | fatal
    message: str
    file: str | None = None
    line: int | None = None

    def __str__(self) -> str:
        """Format the event with its location, when known."""
        if self.file and self.line:
            return f"{self.message} ({self.file}:{self.line})"
        if self.file:
            return f"{self.message} ({self.file})"
        return self.message


class EventChannel:
    """Collects events and forwards them to an optional sink."""

    def __init__(self, sink: Callable[[Event], None] | None = None) -> None:
        """Initialize an empty channel."""
        self.sink = sink
        self.events: list[Event] = []

    def warn(
        self,
        kind: str,
        message: str,
        file: str | None = None,
        line: int | None = None,
    ) -> Event:
        """Record a recoverable problem."""
        event = Event(WARNING, kind, message, file, line)
        logger.warning("%s", event)
        return self._emit(event)

    def notice(
        self,
        kind: str,
        message: str,
        file: str | None = None,
        line: int | None = None,
    ) -> Event:
        """Record something worth knowing that is not a problem."""
        event = Event(NOTICE, kind, message, file, line)
        logger.info("%s", event)
        return self._emit(event)

    def error(
        self,
        message: str,
        file: str | None = None,
        line: int | None = None,
    ) -> Event:
        """Record a fatal, run-aborting problem."""
        event = Event(ERROR, "fatal", message, file, line)
        logger.error("%s", event)
        return self._emit(event)

    def _emit(self, event: Event) -> Event:
        self.events.append(event)
        if self.sink is not None:
            self.sink(event)
        return event

    @property
    def warnings(self) -> list[Event]:
        """Return the recorded warnings."""
        return [e for e in self.events if e.level == WARNING]

    @property
    def errors(self) -> list[Event]:
        """Return the recorded errors."""
        return [e for e in self.events if e.level == ERROR]

    def of_kind(self, kind: str) -> list[Event]:
        """Return the events of a given kind."""
        return [e for e in self.events if e.kind == kind]
