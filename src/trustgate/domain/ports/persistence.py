"""Ports for persisting the trust pipeline's aggregates."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from trustgate.domain.model import (
        EntityMention,
        EntityType,
        Event,
        EventArtifact,
        EventEvidence,
        EventStatusChange,
        EvidenceSnapshot,
        EvidenceSource,
        NamedEntity,
        Relationship,
        TrustTier,
    )


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class EvidenceSourceRepository(Protocol):
    """Evidence sources are created by upsert on their canonical URL."""

    def upsert(self, source: EvidenceSource) -> tuple[EvidenceSource, bool]:
        """Insert ``source`` unless its canonical URL exists; return the stored row and
        whether this call created it."""
        ...

    def get_by_canonical_url(self, canonical_url: str) -> EvidenceSource | None: ...


@runtime_checkable
class EvidenceSnapshotRepository(Repository["EvidenceSnapshot"], Protocol):
    def get(self, snapshot_id: UUID) -> EvidenceSnapshot | None: ...


@runtime_checkable
class EventRepository(Repository["Event"], Protocol):
    def get(self, event_id: UUID) -> Event | None: ...

    def get_by_fingerprint(self, fingerprint: str) -> Event | None: ...

    def refresh(self, event: Event) -> None:
        """Re-read ``event`` from storage and lock its row for the rest of the transaction."""
        ...

    def link_evidence(self, link: EventEvidence) -> None: ...

    def evidence_links(self, event_id: UUID) -> Sequence[EventEvidence]: ...

    def count_evidence(self, event_id: UUID) -> int: ...

    def evidence_tiers(self, event_id: UUID) -> list[TrustTier]:
        """Trust tier of the source behind every evidence snapshot linked to the event."""
        ...


@runtime_checkable
class StatusChangeLedger(Protocol):
    """Append-only audit trail; there is intentionally no update or delete."""

    def append(self, change: EventStatusChange) -> None: ...

    def history(self, event_id: UUID) -> Sequence[EventStatusChange]: ...


@runtime_checkable
class ArtifactRepository(Repository["EventArtifact"], Protocol):
    def artifact_types(self, event_id: UUID) -> set[str]: ...

    def latest(self, event_id: UUID, artifact_type: str) -> EventArtifact | None: ...


@runtime_checkable
class NamedEntityRepository(Repository["NamedEntity"], Protocol):
    def get_by_name_and_type(self, name: str, entity_type: EntityType) -> NamedEntity | None: ...


@runtime_checkable
class MentionRepository(Repository["EntityMention"], Protocol):
    def mentions_for_event(self, event_id: UUID) -> Sequence[tuple[EntityMention, NamedEntity]]: ...


@runtime_checkable
class RelationshipRepository(Repository["Relationship"], Protocol):
    def for_event(self, event_id: UUID) -> Sequence[Relationship]: ...

    def approved_for_entity(self, entity_id: UUID) -> Sequence[Relationship]: ...
