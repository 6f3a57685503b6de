"""Repository implementations backed by SQLAlchemy sessions.

The mappings carry no ORM relationships, so the flush order between tables is not
derived from foreign keys. Repositories for rows that others reference (snapshots,
events, named entities) flush on ``add``; a uniqueness clash therefore surfaces there.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import func, or_, select
from sqlalchemy.dialects import postgresql, sqlite

from trustgate.adapters.sqlalchemy.mappings import (
    entity_mention_table,
    event_artifact_table,
    event_evidence_table,
    event_status_change_table,
    event_table,
    evidence_snapshot_table,
    evidence_source_table,
    named_entity_table,
    relationship_table,
)
from trustgate.domain.model import (
    EntityMention,
    Event,
    EventArtifact,
    EventEvidence,
    EventStatusChange,
    EvidenceSnapshot,
    EvidenceSource,
    NamedEntity,
    Relationship,
    RelationshipStatus,
    TrustTier,
)

if TYPE_CHECKING:
    from uuid import UUID

    from sqlalchemy import CursorResult, Insert
    from sqlalchemy.orm import Session

    from trustgate.domain.model import EntityType


class SqlAlchemyEvidenceSourceRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def upsert(self, source: EvidenceSource) -> tuple[EvidenceSource, bool]:
        stmt = self._insert_ignoring_duplicates(
            {
                "id": source.id,
                "canonical_url": source.canonical_url,
                "raw_url": source.raw_url,
                "domain": source.domain,
                "trust_tier": source.trust_tier,
                "created_at": source.created_at,
            }
        )
        result = cast("CursorResult[object]", self.session.execute(stmt))
        created = result.rowcount == 1
        stored = self.get_by_canonical_url(source.canonical_url)
        if stored is None:
            raise LookupError(f"Evidence source {source.canonical_url} vanished after upsert")
        return stored, created

    def get_by_canonical_url(self, canonical_url: str) -> EvidenceSource | None:
        stmt = select(EvidenceSource).where(evidence_source_table.c.canonical_url == canonical_url)
        return self.session.execute(stmt).scalar_one_or_none()

    def _insert_ignoring_duplicates(self, values: dict[str, object]) -> Insert:
        dialect = self.session.get_bind().dialect.name
        if dialect == "sqlite":
            return (
                sqlite.insert(evidence_source_table)
                .values(values)
                .on_conflict_do_nothing(index_elements=["canonical_url"])
            )
        if dialect == "postgresql":
            return (
                postgresql.insert(evidence_source_table)
                .values(values)
                .on_conflict_do_nothing(index_elements=["canonical_url"])
            )
        raise NotImplementedError(f"Evidence source upsert is not supported on {dialect}")


class SqlAlchemyEvidenceSnapshotRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: EvidenceSnapshot) -> None:
        self.session.add(entity)
        self.session.flush()

    def get(self, snapshot_id: UUID) -> EvidenceSnapshot | None:
        return self.session.get(EvidenceSnapshot, snapshot_id)


class SqlAlchemyEventRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Event) -> None:
        self.session.add(entity)
        self.session.flush()

    def get(self, event_id: UUID) -> Event | None:
        return self.session.get(Event, event_id)

    def get_by_fingerprint(self, fingerprint: str) -> Event | None:
        stmt = select(Event).where(event_table.c.fingerprint == fingerprint)
        return self.session.execute(stmt).scalar_one_or_none()

    def refresh(self, event: Event) -> None:
        # FOR UPDATE holds the row until commit; SQLite ignores the clause.
        self.session.refresh(event, with_for_update=True)

    def link_evidence(self, link: EventEvidence) -> None:
        self.session.add(link)

    def evidence_links(self, event_id: UUID) -> list[EventEvidence]:
        stmt = select(EventEvidence).where(event_evidence_table.c.event_id == event_id)
        return list(self.session.execute(stmt).scalars())

    def count_evidence(self, event_id: UUID) -> int:
        stmt = (
            select(func.count())
            .select_from(event_evidence_table)
            .where(event_evidence_table.c.event_id == event_id)
        )
        return self.session.execute(stmt).scalar_one()

    def evidence_tiers(self, event_id: UUID) -> list[TrustTier]:
        stmt = (
            select(evidence_source_table.c.trust_tier)
            .select_from(event_evidence_table)
            .join(
                evidence_snapshot_table,
                evidence_snapshot_table.c.id == event_evidence_table.c.snapshot_id,
            )
            .join(
                evidence_source_table,
                evidence_source_table.c.id == evidence_snapshot_table.c.source_id,
            )
            .where(event_evidence_table.c.event_id == event_id)
            .order_by(evidence_snapshot_table.c.retrieved_at)
        )
        return [TrustTier(tier) for tier in self.session.execute(stmt).scalars()]


class SqlAlchemyStatusChangeLedger:
    """Append-only: rows are added and read, never updated or deleted."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def append(self, change: EventStatusChange) -> None:
        self.session.add(change)

    def history(self, event_id: UUID) -> list[EventStatusChange]:
        stmt = (
            select(EventStatusChange)
            .where(event_status_change_table.c.event_id == event_id)
            .order_by(
                event_status_change_table.c.changed_at,
                event_status_change_table.c.from_status.is_not(None),
            )
        )
        return list(self.session.execute(stmt).scalars())


class SqlAlchemyArtifactRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: EventArtifact) -> None:
        self.session.add(entity)

    def artifact_types(self, event_id: UUID) -> set[str]:
        stmt = (
            select(event_artifact_table.c.artifact_type)
            .where(event_artifact_table.c.event_id == event_id)
            .distinct()
        )
        return set(self.session.execute(stmt).scalars())

    def latest(self, event_id: UUID, artifact_type: str) -> EventArtifact | None:
        stmt = (
            select(EventArtifact)
            .where(event_artifact_table.c.event_id == event_id)
            .where(event_artifact_table.c.artifact_type == artifact_type)
            .order_by(event_artifact_table.c.version.desc())
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()


class SqlAlchemyNamedEntityRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: NamedEntity) -> None:
        self.session.add(entity)
        self.session.flush()

    def get_by_name_and_type(self, name: str, entity_type: EntityType) -> NamedEntity | None:
        stmt = (
            select(NamedEntity)
            .where(named_entity_table.c.name == name)
            .where(named_entity_table.c.type == entity_type)
        )
        return self.session.execute(stmt).scalar_one_or_none()


class SqlAlchemyMentionRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: EntityMention) -> None:
        self.session.add(entity)

    def mentions_for_event(self, event_id: UUID) -> list[tuple[EntityMention, NamedEntity]]:
        stmt = (
            select(EntityMention, NamedEntity)
            .join_from(
                EntityMention,
                NamedEntity,
                entity_mention_table.c.entity_id == named_entity_table.c.id,
            )
            .where(entity_mention_table.c.event_id == event_id)
        )
        return [(mention, entity) for mention, entity in self.session.execute(stmt).tuples()]


class SqlAlchemyRelationshipRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Relationship) -> None:
        self.session.add(entity)

    def for_event(self, event_id: UUID) -> list[Relationship]:
        stmt = select(Relationship).where(relationship_table.c.event_id == event_id)
        return list(self.session.execute(stmt).scalars())

    def approved_for_entity(self, entity_id: UUID) -> list[Relationship]:
        stmt = (
            select(Relationship)
            .where(relationship_table.c.status == RelationshipStatus.APPROVED)
            .where(
                or_(
                    relationship_table.c.source_entity_id == entity_id,
                    relationship_table.c.target_entity_id == entity_id,
                )
            )
            .order_by(relationship_table.c.occurred_at.desc())
        )
        return list(self.session.execute(stmt).scalars())


if TYPE_CHECKING:
    from trustgate.domain.ports.persistence import (
        ArtifactRepository,
        EventRepository,
        EvidenceSnapshotRepository,
        EvidenceSourceRepository,
        MentionRepository,
        NamedEntityRepository,
        RelationshipRepository,
        StatusChangeLedger,
    )

    _session_stub = cast("Session", object())
    _source_repo: EvidenceSourceRepository = SqlAlchemyEvidenceSourceRepository(_session_stub)
    _snapshot_repo: EvidenceSnapshotRepository = SqlAlchemyEvidenceSnapshotRepository(
        _session_stub
    )
    _event_repo: EventRepository = SqlAlchemyEventRepository(_session_stub)
    _ledger: StatusChangeLedger = SqlAlchemyStatusChangeLedger(_session_stub)
    _artifact_repo: ArtifactRepository = SqlAlchemyArtifactRepository(_session_stub)
    _entity_repo: NamedEntityRepository = SqlAlchemyNamedEntityRepository(_session_stub)
    _mention_repo: MentionRepository = SqlAlchemyMentionRepository(_session_stub)
    _relationship_repo: RelationshipRepository = SqlAlchemyRelationshipRepository(_session_stub)
