"""SQLAlchemy mapping metadata for the trust pipeline domain model."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Dialect,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    orm,
)
from sqlalchemy.orm import configure_mappers

from trustgate.domain.model import (
    ConfidenceLevel,
    EntityMention,
    EntityType,
    Event,
    EventArtifact,
    EventEvidence,
    EventStatus,
    EventStatusChange,
    EvidenceRole,
    EvidenceSnapshot,
    EvidenceSource,
    MentionRole,
    NamedEntity,
    Relationship,
    RelationshipStatus,
    SourceType,
    TrustTier,
)

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    """Timezone-aware datetimes in UTC, also on backends that drop the offset (SQLite)."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Evidence --------------------------------------------------------------------

evidence_source_table = Table(
    "evidence_source",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("canonical_url", String, nullable=False),
    Column("raw_url", String, nullable=False),
    Column("domain", String, nullable=False),
    Column("trust_tier", Enum(TrustTier, native_enum=False), nullable=False),
    Column("created_at", UTCDateTime(), nullable=False),
    UniqueConstraint("canonical_url"),
)

evidence_snapshot_table = Table(
    "evidence_snapshot",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("source_id", UUIDColumnType, ForeignKey("evidence_source.id"), nullable=False),
    Column("content_hash", String(64), nullable=False),
    Column("title", String, nullable=True),
    Column("full_text", Text, nullable=True),
    Column("author", String, nullable=True),
    Column("published_at", UTCDateTime(), nullable=True),
    Column("retrieved_at", UTCDateTime(), nullable=False),
    Index("ix_evidence_snapshot_source_id", "source_id"),
)

# Events ----------------------------------------------------------------------

event_table = Table(
    "event",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("fingerprint", String(32), nullable=False),
    Column("title", String, nullable=False),
    Column("occurred_at", UTCDateTime(), nullable=False),
    Column("source_type", Enum(SourceType, native_enum=False), nullable=False),
    Column("source_id", String, nullable=False),
    Column("status", Enum(EventStatus, native_enum=False), nullable=False),
    Column("confidence", Enum(ConfidenceLevel, native_enum=False), nullable=True),
    Column("source_count", Integer, nullable=False, default=0),
    Column("created_at", UTCDateTime(), nullable=False),
    Column("updated_at", UTCDateTime(), nullable=False),
    UniqueConstraint("fingerprint"),
    Index("ix_event_status", "status"),
)

event_evidence_table = Table(
    "event_evidence",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("event_id", UUIDColumnType, ForeignKey("event.id"), nullable=False),
    Column("snapshot_id", UUIDColumnType, ForeignKey("evidence_snapshot.id"), nullable=False),
    Column("role", Enum(EvidenceRole, native_enum=False), nullable=False),
    UniqueConstraint("event_id", "snapshot_id"),
)

event_status_change_table = Table(
    "event_status_change",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("event_id", UUIDColumnType, ForeignKey("event.id"), nullable=False),
    Column("from_status", Enum(EventStatus, native_enum=False), nullable=True),
    Column("to_status", Enum(EventStatus, native_enum=False), nullable=False),
    Column("reason", Text, nullable=False),
    Column("changed_by", String, nullable=True),
    Column("changed_at", UTCDateTime(), nullable=False),
    Index("ix_event_status_change_event_id", "event_id"),
)

event_artifact_table = Table(
    "event_artifact",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("event_id", UUIDColumnType, ForeignKey("event.id"), nullable=False),
    Column("artifact_type", String(32), nullable=False),
    Column("version", Integer, nullable=False),
    Column("payload", JSON, nullable=False),
    Column("model_used", String, nullable=True),
    Column("prompt_version", String, nullable=True),
    Column("created_at", UTCDateTime(), nullable=False),
    UniqueConstraint("event_id", "artifact_type", "version"),
)

# Entity graph ----------------------------------------------------------------

named_entity_table = Table(
    "named_entity",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("name", String, nullable=False),
    Column("type", Enum(EntityType, native_enum=False), nullable=False),
    Column("slug", String, nullable=False),
    Column("first_seen", UTCDateTime(), nullable=False),
    Column("last_seen", UTCDateTime(), nullable=False),
    UniqueConstraint("name", "type"),
)

entity_mention_table = Table(
    "entity_mention",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("event_id", UUIDColumnType, ForeignKey("event.id"), nullable=False),
    Column("entity_id", UUIDColumnType, ForeignKey("named_entity.id"), nullable=False),
    Column("role", Enum(MentionRole, native_enum=False), nullable=False),
    Column("confidence", Float, nullable=False),
    UniqueConstraint("event_id", "entity_id"),
)

relationship_table = Table(
    "relationship",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("source_entity_id", UUIDColumnType, ForeignKey("named_entity.id"), nullable=False),
    Column("target_entity_id", UUIDColumnType, ForeignKey("named_entity.id"), nullable=False),
    Column("type", String(32), nullable=False),
    Column("event_id", UUIDColumnType, ForeignKey("event.id"), nullable=False),
    Column("status", Enum(RelationshipStatus, native_enum=False), nullable=False),
    Column("status_reason", Text, nullable=False),
    Column("model_confidence", Float, nullable=True),
    Column("occurred_at", UTCDateTime(), nullable=False),
    Column("validated_at", UTCDateTime(), nullable=False),
    Index("ix_relationship_event_id", "event_id"),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    for entity_cls, table in (
        (EvidenceSource, evidence_source_table),
        (EvidenceSnapshot, evidence_snapshot_table),
        (Event, event_table),
        (EventEvidence, event_evidence_table),
        (EventStatusChange, event_status_change_table),
        (EventArtifact, event_artifact_table),
        (NamedEntity, named_entity_table),
        (EntityMention, entity_mention_table),
        (Relationship, relationship_table),
    ):
        mapper_registry.map_imperatively(entity_cls, table)

    configure_mappers()
    return mapper_registry

