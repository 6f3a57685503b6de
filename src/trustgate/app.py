"""Application entry points for the pipeline jobs.

Each function is what a queue worker would call for one job. Storage is started on
demand, and a job whose target row has disappeared is logged and skipped (``None``)
rather than raised, so redelivered jobs for deleted rows drain quietly.
"""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING, Any

from trustgate.adapters.extraction import parse_entity_payload, parse_relationship_payload
from trustgate.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork, is_started, startup
from trustgate.config import get_gate_config
from trustgate.domain.audit import explain_event
from trustgate.domain.dedup import EventLinkRequest, EventLinkResult, create_or_link_event
from trustgate.domain.errors import NotFoundError
from trustgate.domain.evidence import record_evidence
from trustgate.domain.extraction import apply_relationship_claims, record_entity_mentions
from trustgate.domain.lifecycle import advance_event_status, record_artifact
from trustgate.domain.model import utc_now
from trustgate.domain.ports.unit_of_work import TrustUnitOfWork
from trustgate.domain.publication import score_event_confidence

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import datetime
    from uuid import UUID

    from trustgate.adapters.extraction.translator import RawPayload
    from trustgate.config import GateConfig
    from trustgate.domain.audit import EventAuditReport
    from trustgate.domain.evidence import EvidenceSubmission
    from trustgate.domain.extraction import RelationshipGateResult
    from trustgate.domain.model import ArtifactType, Event, EventArtifact, EventStatus
    from trustgate.domain.publication import ScoreResult

UnitOfWorkFactory = Callable[[], TrustUnitOfWork]

log = getLogger(__name__)


def _unit_of_work(factory: UnitOfWorkFactory | None) -> UnitOfWorkFactory:
    if factory is not None:
        return factory
    if not is_started():
        startup()
    return SqlAlchemyUnitOfWork


def ingest_item(
    submission: EvidenceSubmission,
    *,
    occurred_at: datetime | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> EventLinkResult:
    """Record the fetched item as evidence and fold it into its event."""

    moment = occurred_at or submission.published_at or submission.retrieved_at or utc_now()
    uow = _unit_of_work(unit_of_work_factory)
    evidence = record_evidence(submission, unit_of_work_factory=uow)
    result = create_or_link_event(
        EventLinkRequest(
            title=submission.title,
            occurred_at=moment,
            source_type=submission.source_type,
            source_id=submission.source_id,
            snapshot_id=evidence.snapshot_id,
        ),
        unit_of_work_factory=uow,
    )
    log.info(
        "Ingested %s: event=%s created=%s tier=%s",
        submission.url,
        result.event_id,
        result.created,
        evidence.trust_tier,
    )
    return result


def score_event(
    event_id: UUID,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    gates: GateConfig | None = None,
) -> ScoreResult | None:
    effective_gates = gates or get_gate_config()
    try:
        return score_event_confidence(
            event_id,
            unit_of_work_factory=_unit_of_work(unit_of_work_factory),
            policy=effective_gates.confidence_policy(),
        )
    except NotFoundError as exc:
        log.warning("Skipping confidence scoring: %s", exc)
        return None


def extract_entities(
    event_id: UUID,
    payload: RawPayload,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> int | None:
    """Store the entities of an entity-extraction payload; returns new mentions."""

    parsed = parse_entity_payload(payload)
    if parsed.rejected:
        log.warning("Event %s: %d entity item(s) rejected", event_id, len(parsed.rejected))
    try:
        return record_entity_mentions(
            event_id,
            parsed.claims,
            unit_of_work_factory=_unit_of_work(unit_of_work_factory),
        )
    except NotFoundError as exc:
        log.warning("Skipping entity extraction: %s", exc)
        return None


def extract_relationships(
    event_id: UUID,
    payload: RawPayload,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    gates: GateConfig | None = None,
) -> RelationshipGateResult | None:
    """Gate and store the relationships of a relationship-extraction payload."""

    effective_gates = gates or get_gate_config()
    parsed = parse_relationship_payload(payload)
    try:
        result = apply_relationship_claims(
            event_id,
            parsed.claims,
            unit_of_work_factory=_unit_of_work(unit_of_work_factory),
            min_corroboration=effective_gates.relationship_corroboration,
        )
    except NotFoundError as exc:
        log.warning("Skipping relationship extraction: %s", exc)
        return None
    result.skipped += len(parsed.rejected)
    return result


def store_artifact(
    event_id: UUID,
    artifact_type: ArtifactType | str,
    payload: Mapping[str, Any],
    *,
    model_used: str | None = None,
    prompt_version: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> EventArtifact | None:
    try:
        return record_artifact(
            event_id,
            artifact_type,
            payload,
            model_used=model_used,
            prompt_version=prompt_version,
            unit_of_work_factory=_unit_of_work(unit_of_work_factory),
        )
    except NotFoundError as exc:
        log.warning("Skipping artifact: %s", exc)
        return None


def advance_event(
    event_id: UUID,
    to_status: EventStatus,
    *,
    reason: str,
    changed_by: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> Event | None:
    try:
        return advance_event_status(
            event_id,
            to_status,
            reason=reason,
            changed_by=changed_by,
            unit_of_work_factory=_unit_of_work(unit_of_work_factory),
        )
    except NotFoundError as exc:
        log.warning("Skipping status change: %s", exc)
        return None


def event_history(
    event_id: UUID,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> EventAuditReport | None:
    try:
        return explain_event(event_id, unit_of_work_factory=_unit_of_work(unit_of_work_factory))
    except NotFoundError as exc:
        log.warning("No history: %s", exc)
        return None
