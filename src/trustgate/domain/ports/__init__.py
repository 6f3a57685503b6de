"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import (
    ArtifactRepository,
    EventRepository,
    EvidenceSnapshotRepository,
    EvidenceSourceRepository,
    MentionRepository,
    NamedEntityRepository,
    RelationshipRepository,
    Repository,
    StatusChangeLedger,
)
from .unit_of_work import (
    RepositoryCollection,
    TrustRepositories,
    TrustUnitOfWork,
    UnitOfWork,
)

__all__ = [
    "ArtifactRepository",
    "EventRepository",
    "EvidenceSnapshotRepository",
    "EvidenceSourceRepository",
    "MentionRepository",
    "NamedEntityRepository",
    "RelationshipRepository",
    "Repository",
    "RepositoryCollection",
    "StatusChangeLedger",
    "TrustRepositories",
    "TrustUnitOfWork",
    "UnitOfWork",
]
