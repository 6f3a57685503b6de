"""Public domain model surface."""

from __future__ import annotations

from trustgate.domain.model.audit import EventStatusChange
from trustgate.domain.model.entity import Entity, new_id, utc_now
from trustgate.domain.model.enums import (
    ArtifactType,
    ConfidenceLevel,
    EntityType,
    EventStatus,
    EvidenceRole,
    MentionRole,
    RelationshipStatus,
    RelationType,
    RiskLevel,
    SourceType,
    TrustTier,
)
from trustgate.domain.model.event import Event, EventArtifact, EventEvidence
from trustgate.domain.model.evidence import EvidenceSnapshot, EvidenceSource
from trustgate.domain.model.graph import EntityMention, NamedEntity, Relationship

__all__ = [  # noqa: RUF022
    # base
    "Entity",
    "new_id",
    "utc_now",
    # evidence
    "EvidenceSource",
    "EvidenceSnapshot",
    # events
    "Event",
    "EventEvidence",
    "EventArtifact",
    # audit
    "EventStatusChange",
    # graph
    "NamedEntity",
    "EntityMention",
    "Relationship",
    # enums
    "ArtifactType",
    "ConfidenceLevel",
    "EntityType",
    "EventStatus",
    "EvidenceRole",
    "MentionRole",
    "RelationType",
    "RelationshipStatus",
    "RiskLevel",
    "SourceType",
    "TrustTier",
]
