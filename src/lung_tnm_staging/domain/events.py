"""Staging events and the in-process bus that delivers them.

:class:`~lung_tnm_staging.staging.orchestrator.TnmClassifier` publishes
``tnm.updated`` after every accepted edit and ``tnm.stage_changed`` when
the edit moved the stage group.  Whoever owns the clinical record
(persistence, display, report generation) subscribes here, so the staging
core never imports them.
"""

from __future__ import annotations

import threading
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Callable

TNM_UPDATED = "tnm.updated"
STAGE_CHANGED = "tnm.stage_changed"


@dataclass(frozen=True)
class Event:
    """One staging notification.

    ``payload`` carries ``changed_fields`` plus the ``before`` and ``after``
    codes as plain strings.
    """

    type: str
    payload: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))


StagingHandler = Callable[[Event], None]


class EventBus:
    """Synchronous publish/subscribe bus keyed by event type.

    Example
    -------
    >>> bus = EventBus()
    >>> seen: list[str] = []
    >>> bus.subscribe(STAGE_CHANGED, lambda e: seen.append(e.payload["after"]["stage"]))
    >>> bus.publish(STAGE_CHANGED, {"after": {"stage": "IIB"}})
    >>> seen
    ['IIB']
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[StagingHandler]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, event_type: str, handler: StagingHandler) -> None:
        with self._lock:
            self._handlers[event_type].append(handler)

    def publish(self, event_type: str, payload: dict[str, Any] | None = None) -> Event:
        """Deliver an event to the handlers of *event_type*, in subscription order.

        A handler that raises stops delivery; the exception reaches the
        publisher.
        """
        event = Event(type=event_type, payload=dict(payload or {}))
        with self._lock:
            handlers = tuple(self._handlers.get(event_type, ()))
        for handler in handlers:
            handler(event)
        return event
