"""Unit-of-work abstractions for coordinating repositories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

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


@runtime_checkable
class RepositoryCollection(Protocol):
    """Marker protocol for groups of repositories managed together."""


@runtime_checkable
class UnitOfWork[TRepositories: RepositoryCollection](Protocol):
    """One transaction around a repository collection.

    Leaving the context without ``commit`` discards every change. Storage errors are
    surfaced as ``ConflictError`` (uniqueness) or ``TransientStorageError``.
    """

    @property
    def repositories(self) -> TRepositories: ...

    def __enter__(self) -> UnitOfWork[TRepositories]: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


@dataclass(slots=True)
class TrustRepositories(RepositoryCollection):
    """Repositories required by the trust pipeline stages."""

    sources: EvidenceSourceRepository
    snapshots: EvidenceSnapshotRepository
    events: EventRepository
    status_changes: StatusChangeLedger
    artifacts: ArtifactRepository
    entities: NamedEntityRepository
    mentions: MentionRepository
    relationships: RelationshipRepository


type TrustUnitOfWork = UnitOfWork[TrustRepositories]
