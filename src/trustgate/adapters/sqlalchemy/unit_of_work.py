"""SQLAlchemy-backed unit of work for the trust pipeline."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.exc import DBAPIError, IntegrityError, InterfaceError, OperationalError
from sqlalchemy.orm import Session, sessionmaker

from trustgate.adapters.sqlalchemy.mappings import start_mappers
from trustgate.adapters.sqlalchemy.migrations import upgrade_head
from trustgate.adapters.sqlalchemy.repositories import (
    SqlAlchemyArtifactRepository,
    SqlAlchemyEventRepository,
    SqlAlchemyEvidenceSnapshotRepository,
    SqlAlchemyEvidenceSourceRepository,
    SqlAlchemyMentionRepository,
    SqlAlchemyNamedEntityRepository,
    SqlAlchemyRelationshipRepository,
    SqlAlchemyStatusChangeLedger,
)
from trustgate.config import DatabaseConfig, get_database_config
from trustgate.domain.errors import ConflictError, TransientStorageError, TrustPipelineError
from trustgate.domain.ports.unit_of_work import RepositoryCollection, TrustRepositories

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when a SQLAlchemy unit of work is used before initialisation."""


@dataclass(slots=True)
class _AdapterState:
    _engine: Engine | None = None
    _session_factory: sessionmaker[Session] | None = None

    @property
    def engine(self) -> Engine | None:
        return self._engine

    @engine.setter
    def engine(self, value: Engine | None) -> None:
        self._session_factory = None
        self._engine = value

    @property
    def session_factory(self) -> sessionmaker[Session]:
        if self._engine is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised. Call trustgate.adapters.sqlalchemy."
                "unit_of_work.startup() before requesting a unit of work."
            )
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        return self._session_factory


_STATE = _AdapterState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Initialise the engine, migrate the schema to head and prepare the session factory."""

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )

    if engine is None:
        if database_uri is None:
            database = get_database_config()
        else:
            database = DatabaseConfig(uri=database_uri)
        engine = create_engine(database.uri, echo=database.echo)
    start_mappers()
    upgrade_head(engine=engine)
    _STATE.engine = engine
    log.debug("SQLAlchemy adapter started on %s", engine.url)


def configured_engine() -> Engine | None:
    """Return the engine currently managed by the adapter (if any)."""

    return _STATE.engine


def is_started() -> bool:
    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the managed engine and reset state (primarily for tests)."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None


_TRANSLATED_ERRORS = (IntegrityError, OperationalError, InterfaceError)


def translate_storage_error(error: DBAPIError) -> TrustPipelineError:
    """Map a driver-level failure onto the domain error taxonomy."""

    if isinstance(error, IntegrityError):
        return ConflictError(str(error.orig))
    if isinstance(error, (OperationalError, InterfaceError)):
        return TransientStorageError(str(error.orig))
    raise TypeError(f"No domain error for {type(error).__name__}")


class BaseSqlAlchemyUnitOfWork[TRepositories: RepositoryCollection](ABC):
    """Generic SQLAlchemy unit of work with pluggable repository collections.

    Anything not committed is rolled back on exit. Exceptions always propagate; storage
    errors are re-raised as ``ConflictError`` or ``TransientStorageError``.
    """

    def __init__(self) -> None:
        self.session_factory: sessionmaker[Session] = _STATE.session_factory
        self._session: Session | None = None

    @abstractmethod
    def _build_repositories(self, session: Session) -> TRepositories: ...

    def __enter__(self) -> BaseSqlAlchemyUnitOfWork[TRepositories]:
        self.session = self.session_factory()
        self._repositories = self._build_repositories(self.session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        self.session.close()
        self.session = None
        if isinstance(exc_value, _TRANSLATED_ERRORS):
            raise translate_storage_error(exc_value) from exc_value
        return False  # don't swallow exceptions

    def commit(self) -> None:
        try:
            self.session.commit()
        except _TRANSLATED_ERRORS as exc:
            self.session.rollback()
            log.warning("Commit failed: %s", exc.orig)
            raise translate_storage_error(exc) from exc

    def rollback(self) -> None:
        self.session.rollback()

    @property
    def repositories(self) -> TRepositories:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._repositories

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._session

    @session.setter
    def session(self, session: Session | None) -> None:
        if self._session is not None and session is not None:
            raise StartupError("Unit of work session already initialised")
        self._session = session


class SqlAlchemyUnitOfWork(BaseSqlAlchemyUnitOfWork[TrustRepositories]):
    """Unit of work exposing every trust pipeline repository on one session."""

    def _build_repositories(self, session: Session) -> TrustRepositories:
        return TrustRepositories(
            sources=SqlAlchemyEvidenceSourceRepository(session),
            snapshots=SqlAlchemyEvidenceSnapshotRepository(session),
            events=SqlAlchemyEventRepository(session),
            status_changes=SqlAlchemyStatusChangeLedger(session),
            artifacts=SqlAlchemyArtifactRepository(session),
            entities=SqlAlchemyNamedEntityRepository(session),
            mentions=SqlAlchemyMentionRepository(session),
            relationships=SqlAlchemyRelationshipRepository(session),
        )


if TYPE_CHECKING:
    from trustgate.domain.ports.unit_of_work import TrustUnitOfWork

    _uow_check: TrustUnitOfWork = SqlAlchemyUnitOfWork()
