"""SQLAlchemy adapter package for trustgate."""

from __future__ import annotations

from .mappings import mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyArtifactRepository,
    SqlAlchemyEventRepository,
    SqlAlchemyEvidenceSnapshotRepository,
    SqlAlchemyEvidenceSourceRepository,
    SqlAlchemyMentionRepository,
    SqlAlchemyNamedEntityRepository,
    SqlAlchemyRelationshipRepository,
    SqlAlchemyStatusChangeLedger,
)
from .unit_of_work import (
    SqlAlchemyUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyArtifactRepository",
    "SqlAlchemyEventRepository",
    "SqlAlchemyEvidenceSnapshotRepository",
    "SqlAlchemyEvidenceSourceRepository",
    "SqlAlchemyMentionRepository",
    "SqlAlchemyNamedEntityRepository",
    "SqlAlchemyRelationshipRepository",
    "SqlAlchemyStatusChangeLedger",
    "SqlAlchemyUnitOfWork",
    "StartupError",
    "configured_engine",
    "is_started",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
