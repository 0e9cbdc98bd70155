"""In-process notifications for summarization lifecycle events."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Coroutine
from uuid import UUID, uuid4

from src.core.logging import get_logger

logger = get_logger(__name__)


class EventType(str, Enum):
    SUMMARIZATION_STARTED = "summarization.started"
    SUMMARIZATION_COMPLETED = "summarization.completed"
    SUMMARIZATION_ERROR = "summarization.error"

    BATCH_STARTED = "summarization.batch_started"
    BATCH_COMPLETED = "summarization.batch_completed"


@dataclass(frozen=True)
class Event:
    """A lifecycle notification. ``data`` never carries credentials."""

    type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    source: str | None = None
    event_id: UUID = field(default_factory=uuid4)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


EventHandler = Callable[[Event], Coroutine[Any, Any, None]]


class EventBus:
    """
    Delivers events to async handlers in subscription order.

    Handlers registered with ``subscribe_all`` see every event. A handler
    that raises is logged and skipped; the emitter never sees the error.
    """

    def __init__(self) -> None:
        # None matches every event type
        self._subscriptions: list[tuple[EventType | None, EventHandler]] = []

    def subscribe(self, event_type: EventType, handler: EventHandler) -> None:
        self._subscriptions.append((event_type, handler))

    def subscribe_all(self, handler: EventHandler) -> None:
        self._subscriptions.append((None, handler))

    async def emit(
        self,
        event_type: EventType,
        data: dict[str, Any] | None = None,
        source: str | None = None,
    ) -> Event:
        """Build an event and deliver it to matching handlers."""
        event = Event(type=event_type, data=data or {}, source=source)
        for wanted, handler in list(self._subscriptions):
            if wanted is not None and wanted is not event_type:
                continue
            try:
                await handler(event)
            except Exception:
                logger.exception("Event handler failed for %s", event_type.value)
        return event


_event_bus: EventBus | None = None


def get_event_bus() -> EventBus:
    """Process-wide bus shared by every gateway instance."""
    global _event_bus
    if _event_bus is None:
        _event_bus = EventBus()
    return _event_bus


def reset_event_bus() -> None:
    global _event_bus
    _event_bus = None
