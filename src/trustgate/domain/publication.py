"""Publication gate: the event status state machine driven by confidence scoring.

Allowed moves::

    RAW -> ENRICHED -> VERIFIED -> PUBLISHED | QUARANTINED
    QUARANTINED -> PUBLISHED
    any non-terminal -> BLOCKED (moderation)

PUBLISHED never regresses and BLOCKED is terminal.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from trustgate.domain.audit import record_transition
from trustgate.domain.confidence import (
    DEFAULT_CONFIDENCE_POLICY,
    EvidenceTrustProfile,
    compute_confidence,
    confidence_to_status,
    tier_rank,
)
from trustgate.domain.errors import NotFoundError
from trustgate.domain.model import ArtifactType, EventStatus

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from uuid import UUID

    from trustgate.domain.confidence import ConfidencePolicy
    from trustgate.domain.model import ConfidenceLevel, TrustTier
    from trustgate.domain.ports import TrustUnitOfWork

log = logging.getLogger(__name__)

SCORER_ACTOR: Final[str] = "confidence-score-processor"

REQUIRED_ARTIFACTS: Final[tuple[ArtifactType, ...]] = (
    ArtifactType.HEADLINE,
    ArtifactType.SUMMARY,
    ArtifactType.WHAT_HAPPENED,
    ArtifactType.WHY_MATTERS,
)


@dataclass(frozen=True, slots=True)
class ArtifactCompleteness:
    complete: bool
    missing: tuple[ArtifactType, ...] = ()


@dataclass(slots=True)
class ScoreResult:
    """Outcome of one scoring run for a single event."""

    event_id: UUID
    confidence: ConfidenceLevel
    source_count: int
    previous_status: EventStatus
    status: EventStatus
    transitioned: bool
    missing_artifacts: tuple[ArtifactType, ...] = field(default_factory=tuple["ArtifactType", ...])


def check_artifact_completeness(present: Iterable[str]) -> ArtifactCompleteness:
    """Compare the artifact types that exist for an event against the required set."""

    existing = {str(item) for item in present}
    missing = tuple(kind for kind in REQUIRED_ARTIFACTS if kind.value not in existing)
    return ArtifactCompleteness(complete=not missing, missing=missing)


def effective_gate_status(
    confidence: ConfidenceLevel,
    completeness: ArtifactCompleteness,
) -> EventStatus:
    """Missing required artifacts force quarantine regardless of confidence."""

    if not completeness.complete:
        return EventStatus.QUARANTINED
    return confidence_to_status(confidence)


def should_transition(current: EventStatus, gate: EventStatus) -> bool:
    """Whether scoring may move an event from ``current`` to the ``gate`` status."""

    if current == EventStatus.BLOCKED:
        return False
    if current == EventStatus.PUBLISHED:
        return False
    if current == EventStatus.QUARANTINED:
        return gate == EventStatus.PUBLISHED
    return current != gate


def scoring_reason(
    confidence: ConfidenceLevel,
    profile: EvidenceTrustProfile,
    completeness: ArtifactCompleteness,
) -> str:
    ordered = sorted(profile.tiers, key=tier_rank, reverse=True)
    reason = (
        f"Confidence scoring: {confidence} ({profile.source_count} source(s), "
        f"tiers: [{', '.join(ordered)}])"
    )
    if completeness.missing:
        return f"{reason} [BLOCKED: missing {', '.join(completeness.missing)}]"
    return f"{reason} [artifacts complete]"


def score_event_confidence(
    event_id: UUID,
    *,
    unit_of_work_factory: Callable[[], TrustUnitOfWork],
    policy: ConfidencePolicy = DEFAULT_CONFIDENCE_POLICY,
) -> ScoreResult:
    """Score an event from its evidence and apply the publication gate.

    Confidence and the cached source count are always refreshed. The status changes
    (with one audit row) only when ``should_transition`` allows it, judged against the
    status re-read under a row lock right before the write, so a concurrent moderator
    or scorer that committed in between is seen. Running it twice is a no-op the second
    time.
    """

    with unit_of_work_factory() as uow:
        events = uow.repositories.events
        event = events.get(event_id)
        if event is None:
            raise NotFoundError("Event", event_id)

        profile = EvidenceTrustProfile.from_tiers(events.evidence_tiers(event_id))
        confidence = compute_confidence(profile, policy)
        artifact_types = uow.repositories.artifacts.artifact_types(event_id)
        completeness = check_artifact_completeness(artifact_types)
        gate = effective_gate_status(confidence, completeness)

        events.refresh(event)
        previous = event.status
        event.refresh_scores(confidence=confidence, source_count=profile.source_count)

        transitioned = should_transition(previous, gate)
        if transitioned:
            record_transition(
                uow,
                event,
                gate,
                reason=scoring_reason(confidence, profile, completeness),
                changed_by=SCORER_ACTOR,
            )
        else:
            log.debug(
                "Event %s stays %s (gate=%s, confidence=%s)", event_id, previous, gate, confidence
            )
        uow.commit()

        return ScoreResult(
            event_id=event_id,
            confidence=confidence,
            source_count=profile.source_count,
            previous_status=previous,
            status=event.status,
            transitioned=transitioned,
            missing_artifacts=completeness.missing,
        )
