"""Trust pipeline schema: evidence, events, audit ledger, artifacts and entity graph.

Revision ID: 0001_trust_pipeline
Revises:
Create Date: 2026-10-19 00:00:00
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001_trust_pipeline"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

_ENUM = sa.String(32)


def upgrade() -> None:
    op.create_table(
        "evidence_source",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("canonical_url", sa.String(), nullable=False),
        sa.Column("raw_url", sa.String(), nullable=False),
        sa.Column("domain", sa.String(), nullable=False),
        sa.Column("trust_tier", _ENUM, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_evidence_source"),
        sa.UniqueConstraint("canonical_url", name="uq_evidence_source_canonical_url"),
    )
    op.create_table(
        "evidence_snapshot",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("source_id", sa.Uuid(), nullable=False),
        sa.Column("content_hash", sa.String(64), nullable=False),
        sa.Column("title", sa.String(), nullable=True),
        sa.Column("full_text", sa.Text(), nullable=True),
        sa.Column("author", sa.String(), nullable=True),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("retrieved_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["source_id"],
            ["evidence_source.id"],
            name="fk_evidence_snapshot_source_id_evidence_source",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_evidence_snapshot"),
    )
    op.create_index("ix_evidence_snapshot_source_id", "evidence_snapshot", ["source_id"])

    op.create_table(
        "event",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("fingerprint", sa.String(32), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("occurred_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("source_type", _ENUM, nullable=False),
        sa.Column("source_id", sa.String(), nullable=False),
        sa.Column("status", _ENUM, nullable=False),
        sa.Column("confidence", _ENUM, nullable=True),
        sa.Column("source_count", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_event"),
        sa.UniqueConstraint("fingerprint", name="uq_event_fingerprint"),
    )
    op.create_index("ix_event_status", "event", ["status"])

    op.create_table(
        "event_evidence",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("event_id", sa.Uuid(), nullable=False),
        sa.Column("snapshot_id", sa.Uuid(), nullable=False),
        sa.Column("role", _ENUM, nullable=False),
        sa.ForeignKeyConstraint(
            ["event_id"], ["event.id"], name="fk_event_evidence_event_id_event"
        ),
        sa.ForeignKeyConstraint(
            ["snapshot_id"],
            ["evidence_snapshot.id"],
            name="fk_event_evidence_snapshot_id_evidence_snapshot",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_event_evidence"),
        sa.UniqueConstraint("event_id", "snapshot_id", name="uq_event_evidence_event_id"),
    )

    op.create_table(
        "event_status_change",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("event_id", sa.Uuid(), nullable=False),
        sa.Column("from_status", _ENUM, nullable=True),
        sa.Column("to_status", _ENUM, nullable=False),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("changed_by", sa.String(), nullable=True),
        sa.Column("changed_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["event_id"], ["event.id"], name="fk_event_status_change_event_id_event"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_event_status_change"),
    )
    op.create_index("ix_event_status_change_event_id", "event_status_change", ["event_id"])

    op.create_table(
        "event_artifact",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("event_id", sa.Uuid(), nullable=False),
        sa.Column("artifact_type", sa.String(32), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("payload", sa.JSON(), nullable=False),
        sa.Column("model_used", sa.String(), nullable=True),
        sa.Column("prompt_version", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["event_id"], ["event.id"], name="fk_event_artifact_event_id_event"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_event_artifact"),
        sa.UniqueConstraint(
            "event_id", "artifact_type", "version", name="uq_event_artifact_event_id"
        ),
    )

    op.create_table(
        "named_entity",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("type", _ENUM, nullable=False),
        sa.Column("slug", sa.String(), nullable=False),
        sa.Column("first_seen", sa.DateTime(timezone=True), nullable=False),
        sa.Column("last_seen", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_named_entity"),
        sa.UniqueConstraint("name", "type", name="uq_named_entity_name"),
    )

    op.create_table(
        "entity_mention",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("event_id", sa.Uuid(), nullable=False),
        sa.Column("entity_id", sa.Uuid(), nullable=False),
        sa.Column("role", _ENUM, nullable=False),
        sa.Column("confidence", sa.Float(), nullable=False),
        sa.ForeignKeyConstraint(
            ["event_id"], ["event.id"], name="fk_entity_mention_event_id_event"
        ),
        sa.ForeignKeyConstraint(
            ["entity_id"],
            ["named_entity.id"],
            name="fk_entity_mention_entity_id_named_entity",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_entity_mention"),
        sa.UniqueConstraint("event_id", "entity_id", name="uq_entity_mention_event_id"),
    )

    op.create_table(
        "relationship",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("source_entity_id", sa.Uuid(), nullable=False),
        sa.Column("target_entity_id", sa.Uuid(), nullable=False),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("event_id", sa.Uuid(), nullable=False),
        sa.Column("status", _ENUM, nullable=False),
        sa.Column("status_reason", sa.Text(), nullable=False),
        sa.Column("model_confidence", sa.Float(), nullable=True),
        sa.Column("occurred_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("validated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["source_entity_id"],
            ["named_entity.id"],
            name="fk_relationship_source_entity_id_named_entity",
        ),
        sa.ForeignKeyConstraint(
            ["target_entity_id"],
            ["named_entity.id"],
            name="fk_relationship_target_entity_id_named_entity",
        ),
        sa.ForeignKeyConstraint(
            ["event_id"], ["event.id"], name="fk_relationship_event_id_event"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_relationship"),
    )
    op.create_index("ix_relationship_event_id", "relationship", ["event_id"])


def downgrade() -> None:
    op.drop_index("ix_relationship_event_id", table_name="relationship")
    op.drop_table("relationship")
    op.drop_table("entity_mention")
    op.drop_table("named_entity")
    op.drop_table("event_artifact")
    op.drop_index("ix_event_status_change_event_id", table_name="event_status_change")
    op.drop_table("event_status_change")
    op.drop_table("event_evidence")
    op.drop_index("ix_event_status", table_name="event")
    op.drop_table("event")
    op.drop_index("ix_evidence_snapshot_source_id", table_name="evidence_snapshot")
    op.drop_table("evidence_snapshot")
    op.drop_table("evidence_source")
