"""Create-or-link deduplication of incoming items into events."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from trustgate.domain.audit import record_creation
from trustgate.domain.errors import ConflictError, NotFoundError
from trustgate.domain.fingerprint import compute_fingerprint
from trustgate.domain.model import Event, EventEvidence, EvidenceRole

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime
    from uuid import UUID

    from trustgate.domain.model import SourceType
    from trustgate.domain.ports import TrustUnitOfWork

log = logging.getLogger(__name__)

DEDUP_ACTOR: Final[str] = "event-dedup"


@dataclass(slots=True, kw_only=True)
class EventLinkRequest:
    title: str
    occurred_at: datetime
    source_type: SourceType
    source_id: str
    snapshot_id: UUID


@dataclass(slots=True)
class EventLinkResult:
    event_id: UUID
    fingerprint: str
    created: bool


def create_or_link_event(
    request: EventLinkRequest,
    *,
    unit_of_work_factory: Callable[[], TrustUnitOfWork],
) -> EventLinkResult:
    """Attach a snapshot to the event sharing its fingerprint, creating the event if needed.

    Two writers creating the same event race on the unique fingerprint; the loser sees a
    ``ConflictError`` and retries once, which then takes the link path.
    """

    fingerprint = compute_fingerprint(request.title, request.occurred_at, request.source_type)
    try:
        return _create_or_link(request, fingerprint, unit_of_work_factory)
    except ConflictError:
        log.info("Fingerprint %s taken concurrently; retrying as a link", fingerprint)
        return _create_or_link(request, fingerprint, unit_of_work_factory)


def _create_or_link(
    request: EventLinkRequest,
    fingerprint: str,
    unit_of_work_factory: Callable[[], TrustUnitOfWork],
) -> EventLinkResult:
    with unit_of_work_factory() as uow:
        if uow.repositories.snapshots.get(request.snapshot_id) is None:
            raise NotFoundError("EvidenceSnapshot", request.snapshot_id)

        events = uow.repositories.events
        existing = events.get_by_fingerprint(fingerprint)
        if existing is None:
            event = Event(
                fingerprint=fingerprint,
                title=request.title,
                occurred_at=request.occurred_at,
                source_type=request.source_type,
                source_id=request.source_id,
                source_count=1,
            )
            events.add(event)
            events.link_evidence(
                EventEvidence(
                    event_id=event.id,
                    snapshot_id=request.snapshot_id,
                    role=EvidenceRole.PRIMARY,
                )
            )
            record_creation(uow, event, changed_by=DEDUP_ACTOR)
            uow.commit()
            log.info("Created event %s for fingerprint %s", event.id, fingerprint)
            return EventLinkResult(event_id=event.id, fingerprint=fingerprint, created=True)

        linked = {link.snapshot_id for link in events.evidence_links(existing.id)}
        if request.snapshot_id not in linked:
            events.link_evidence(
                EventEvidence(
                    event_id=existing.id,
                    snapshot_id=request.snapshot_id,
                    role=EvidenceRole.SUPPORTING,
                )
            )
            log.info("Linked snapshot %s to event %s", request.snapshot_id, existing.id)
        existing.source_count = events.count_evidence(existing.id)
        uow.commit()
        return EventLinkResult(event_id=existing.id, fingerprint=fingerprint, created=False)
