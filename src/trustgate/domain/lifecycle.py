"""Manual pipeline steps and the versioned artifact store."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Final

from trustgate.domain.audit import record_transition
from trustgate.domain.errors import NotFoundError
from trustgate.domain.model import EventArtifact, EventStatus

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from uuid import UUID

    from trustgate.domain.model import ArtifactType, Event
    from trustgate.domain.ports import TrustUnitOfWork

log = logging.getLogger(__name__)

PIPELINE_STEPS: Final[dict[EventStatus, EventStatus]] = {
    EventStatus.RAW: EventStatus.ENRICHED,
    EventStatus.ENRICHED: EventStatus.VERIFIED,
}
TERMINAL_STATUSES: Final[frozenset[EventStatus]] = frozenset(
    {EventStatus.PUBLISHED, EventStatus.BLOCKED}
)


def can_advance(current: EventStatus, target: EventStatus) -> bool:
    """Manual moves: one pipeline step forward, or moderation into BLOCKED."""

    if target == EventStatus.BLOCKED:
        return current not in TERMINAL_STATUSES
    return PIPELINE_STEPS.get(current) == target


def advance_event_status(
    event_id: UUID,
    to_status: EventStatus,
    *,
    reason: str,
    changed_by: str | None = None,
    unit_of_work_factory: Callable[[], TrustUnitOfWork],
) -> Event:
    with unit_of_work_factory() as uow:
        event = uow.repositories.events.get(event_id)
        if event is None:
            raise NotFoundError("Event", event_id)
        uow.repositories.events.refresh(event)
        if not can_advance(event.status, to_status):
            raise ValueError(f"Cannot move event {event_id} from {event.status} to {to_status}")
        record_transition(uow, event, to_status, reason=reason, changed_by=changed_by)
        uow.commit()
        return event


def record_artifact(
    event_id: UUID,
    artifact_type: ArtifactType | str,
    payload: Mapping[str, Any],
    *,
    model_used: str | None = None,
    prompt_version: str | None = None,
    unit_of_work_factory: Callable[[], TrustUnitOfWork],
) -> EventArtifact:
    """Store a new version of ``artifact_type`` for the event (versions start at 1)."""

    kind = str(artifact_type).upper()
    with unit_of_work_factory() as uow:
        if uow.repositories.events.get(event_id) is None:
            raise NotFoundError("Event", event_id)
        artifacts = uow.repositories.artifacts
        latest = artifacts.latest(event_id, kind)
        artifact = EventArtifact(
            event_id=event_id,
            artifact_type=kind,
            version=1 if latest is None else latest.version + 1,
            payload=dict(payload),
            model_used=model_used,
            prompt_version=prompt_version,
        )
        artifacts.add(artifact)
        uow.commit()

    log.info("Stored %s v%d for event %s", kind, artifact.version, event_id)
    return artifact


def latest_artifact(
    event_id: UUID,
    artifact_type: ArtifactType | str,
    *,
    unit_of_work_factory: Callable[[], TrustUnitOfWork],
) -> EventArtifact | None:
    with unit_of_work_factory() as uow:
        return uow.repositories.artifacts.latest(event_id, str(artifact_type).upper())
