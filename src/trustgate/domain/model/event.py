"""Events: the unit of publication, plus their evidence links and artifacts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .audit import EventStatusChange
from .entity import Entity, utc_now
from .enums import EventStatus, EvidenceRole

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from .enums import ConfidenceLevel, SourceType


@dataclass(eq=False, kw_only=True)
class Event(Entity):
    fingerprint: str
    title: str
    occurred_at: datetime
    source_type: SourceType
    source_id: str
    status: EventStatus = EventStatus.RAW
    confidence: ConfidenceLevel | None = None
    source_count: int = 0
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def initial_status_change(self, *, changed_by: str | None = None) -> EventStatusChange:
        """Audit row recording the creation of this event in its initial status."""

        return EventStatusChange(
            event_id=self.id,
            from_status=None,
            to_status=self.status,
            reason="Initial creation",
            changed_by=changed_by,
            changed_at=self.created_at,
        )

    def transition_to(
        self,
        status: EventStatus,
        *,
        reason: str,
        changed_by: str | None = None,
    ) -> EventStatusChange:
        """Move to ``status`` and return the audit row describing the move.

        Callers decide whether the move is allowed. A no-op move raises ``ValueError``
        from the audit row before the status is touched.
        """

        change = EventStatusChange(
            event_id=self.id,
            from_status=self.status,
            to_status=status,
            reason=reason,
            changed_by=changed_by,
        )
        self.status = status
        self.updated_at = change.changed_at
        return change

    def refresh_scores(self, *, confidence: ConfidenceLevel, source_count: int) -> None:
        self.confidence = confidence
        self.source_count = source_count
        self.updated_at = utc_now()


@dataclass(eq=False, kw_only=True)
class EventEvidence(Entity):
    """Join between an event and one evidence snapshot."""

    event_id: UUID
    snapshot_id: UUID
    role: EvidenceRole = EvidenceRole.PRIMARY


@dataclass(eq=False, kw_only=True)
class EventArtifact(Entity):
    """Versioned generated content. Only its existence matters to the publication gate."""

    event_id: UUID
    artifact_type: str
    version: int = 1
    payload: dict[str, Any] = field(default_factory=dict[str, Any])
    model_used: str | None = None
    prompt_version: str | None = None
    created_at: datetime = field(default_factory=utc_now)
