"""Audit trail: the single write path for event status and its read side."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from trustgate.domain.errors import NotFoundError

if TYPE_CHECKING:
    from collections.abc import Callable
    from uuid import UUID

    from trustgate.domain.model import (
        ConfidenceLevel,
        Event,
        EventStatus,
        EventStatusChange,
    )
    from trustgate.domain.ports import TrustUnitOfWork

log = logging.getLogger(__name__)


@dataclass(slots=True)
class EventAuditReport:
    """Current gate state of an event together with its full status history."""

    event_id: UUID
    status: EventStatus
    confidence: ConfidenceLevel | None
    source_count: int
    history: list[EventStatusChange]

    @property
    def last_reason(self) -> str | None:
        return self.history[-1].reason if self.history else None


def record_creation(
    uow: TrustUnitOfWork,
    event: Event,
    *,
    changed_by: str | None = None,
) -> EventStatusChange:
    """Append the ``None -> status`` row for a freshly created event."""

    change = event.initial_status_change(changed_by=changed_by)
    uow.repositories.status_changes.append(change)
    return change


def record_transition(
    uow: TrustUnitOfWork,
    event: Event,
    to_status: EventStatus,
    *,
    reason: str,
    changed_by: str | None = None,
) -> EventStatusChange:
    """Move ``event`` to ``to_status`` and append the matching ledger row.

    Every status write goes through here so that no status change happens without an
    audit row. The caller commits.
    """

    previous = event.status
    change = event.transition_to(to_status, reason=reason, changed_by=changed_by)
    uow.repositories.status_changes.append(change)
    log.info("Event %s: %s -> %s (%s)", event.id, previous, to_status, reason)
    return change


def explain_event(
    event_id: UUID,
    *,
    unit_of_work_factory: Callable[[], TrustUnitOfWork],
) -> EventAuditReport:
    """Return the current status of an event and the ordered list of changes behind it."""

    with unit_of_work_factory() as uow:
        event = uow.repositories.events.get(event_id)
        if event is None:
            raise NotFoundError("Event", event_id)
        history = list(uow.repositories.status_changes.history(event_id))
        return EventAuditReport(
            event_id=event.id,
            status=event.status,
            confidence=event.confidence,
            source_count=event.source_count,
            history=history,
        )
