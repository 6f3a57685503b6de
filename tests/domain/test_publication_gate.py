from __future__ import annotations

import pytest

from trustgate.domain.confidence import EvidenceTrustProfile
from trustgate.domain.model import ArtifactType, ConfidenceLevel, EventStatus, TrustTier
from trustgate.domain.publication import (
    REQUIRED_ARTIFACTS,
    ArtifactCompleteness,
    check_artifact_completeness,
    effective_gate_status,
    scoring_reason,
    should_transition,
)

GATES = (EventStatus.PUBLISHED, EventStatus.QUARANTINED)


def test_completeness_ignores_optional_and_unrelated_artifacts() -> None:
    result = check_artifact_completeness(
        ["HEADLINE", "SUMMARY", "WHAT_HAPPENED", "WHY_MATTERS", "ENTITY_EXTRACT"]
    )

    assert result == ArtifactCompleteness(complete=True, missing=())


def test_gm_take_is_never_required() -> None:
    without = check_artifact_completeness([kind.value for kind in REQUIRED_ARTIFACTS])
    only_take = check_artifact_completeness([ArtifactType.GM_TAKE.value])

    assert without.complete is True
    assert ArtifactType.GM_TAKE not in only_take.missing
    assert only_take.missing == REQUIRED_ARTIFACTS


def test_completeness_lists_missing_in_canonical_order() -> None:
    result = check_artifact_completeness([ArtifactType.SUMMARY, ArtifactType.GM_TAKE])

    assert not result.complete
    assert result.missing == (
        ArtifactType.HEADLINE,
        ArtifactType.WHAT_HAPPENED,
        ArtifactType.WHY_MATTERS,
    )


def test_missing_artifacts_force_quarantine() -> None:
    incomplete = check_artifact_completeness(["HEADLINE"])

    assert effective_gate_status(ConfidenceLevel.HIGH, incomplete) == EventStatus.QUARANTINED


def test_complete_artifacts_follow_confidence() -> None:
    complete = ArtifactCompleteness(complete=True)

    assert effective_gate_status(ConfidenceLevel.MEDIUM, complete) == EventStatus.PUBLISHED
    assert effective_gate_status(ConfidenceLevel.LOW, complete) == EventStatus.QUARANTINED


@pytest.mark.parametrize("gate", GATES)
def test_published_and_blocked_never_move(gate: EventStatus) -> None:
    assert should_transition(EventStatus.PUBLISHED, gate) is False
    assert should_transition(EventStatus.BLOCKED, gate) is False


def test_quarantined_only_moves_to_published() -> None:
    assert should_transition(EventStatus.QUARANTINED, EventStatus.PUBLISHED) is True
    assert should_transition(EventStatus.QUARANTINED, EventStatus.QUARANTINED) is False


@pytest.mark.parametrize("current", [EventStatus.RAW, EventStatus.ENRICHED, EventStatus.VERIFIED])
@pytest.mark.parametrize("gate", GATES)
def test_pipeline_statuses_always_move(current: EventStatus, gate: EventStatus) -> None:
    assert should_transition(current, gate) is True


def test_scoring_reason_formats() -> None:
    profile = EvidenceTrustProfile.from_tiers([TrustTier.LOW, TrustTier.AUTHORITATIVE])

    complete = scoring_reason(ConfidenceLevel.HIGH, profile, ArtifactCompleteness(complete=True))
    blocked = scoring_reason(
        ConfidenceLevel.HIGH,
        profile,
        check_artifact_completeness(["HEADLINE", "SUMMARY"]),
    )

    assert complete == (
        "Confidence scoring: HIGH (2 source(s), tiers: [AUTHORITATIVE, LOW]) [artifacts complete]"
    )
    assert blocked.endswith("[BLOCKED: missing WHAT_HAPPENED, WHY_MATTERS]")
