"""Safety gate for extracted relationship claims.

Approval depends on source quality and corroboration only. The model's own confidence
is stored with the relationship for later analysis but never influences the decision.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from trustgate.domain.model import RelationshipStatus, RelationType, RiskLevel, TrustTier

RISK_LEVELS: Final[dict[RelationType, RiskLevel]] = {
    RelationType.RELEASED: RiskLevel.LOW,
    RelationType.ANNOUNCED: RiskLevel.LOW,
    RelationType.PUBLISHED: RiskLevel.LOW,
    RelationType.PARTNERED: RiskLevel.LOW,
    RelationType.INTEGRATED: RiskLevel.LOW,
    RelationType.BEATS: RiskLevel.LOW,
    RelationType.CRITICIZED: RiskLevel.LOW,
    RelationType.ACQUIRED: RiskLevel.HIGH,
    RelationType.FUNDED: RiskLevel.HIGH,
    RelationType.BANNED: RiskLevel.HIGH,
}

DEFAULT_MIN_CORROBORATION: Final[int] = 2


@dataclass(frozen=True, slots=True)
class RelationshipClaim:
    """A relationship proposed by extraction, named by entity names as the model saw them."""

    source_entity: str
    target_entity: str
    type: str
    model_confidence: float | None = None


@dataclass(frozen=True, slots=True)
class SafetyResult:
    status: RelationshipStatus
    reason: str

    @property
    def approved(self) -> bool:
        return self.status == RelationshipStatus.APPROVED


def known_relation_type(value: str) -> RelationType | None:
    try:
        return RelationType(value.strip().upper())
    except ValueError:
        return None


def risk_level_for(value: str) -> RiskLevel:
    """Risk of a relationship type; unmapped types are treated as high risk."""

    relation_type = known_relation_type(value)
    if relation_type is None:
        return RiskLevel.HIGH
    return RISK_LEVELS[relation_type]


def validate_relationship(
    claim: RelationshipClaim,
    trust_tier: TrustTier,
    source_count: int,
    *,
    min_corroboration: int = DEFAULT_MIN_CORROBORATION,
) -> SafetyResult:
    """Decide whether ``claim`` may enter the public graph.

    ``trust_tier`` is the highest tier among the event's evidence and ``source_count``
    the number of evidence snapshots linked to it.
    """

    relation_type = known_relation_type(claim.type)
    if relation_type is None:
        return SafetyResult(
            status=RelationshipStatus.QUARANTINED,
            reason=f"Unknown relationship type {claim.type!r} is treated as high-risk",
        )

    if RISK_LEVELS[relation_type] == RiskLevel.LOW:
        return SafetyResult(
            status=RelationshipStatus.APPROVED,
            reason="Low-risk relationship with evidence",
        )

    if trust_tier == TrustTier.AUTHORITATIVE:
        return SafetyResult(
            status=RelationshipStatus.APPROVED,
            reason="Authoritative source for high-risk",
        )
    if source_count >= min_corroboration:
        return SafetyResult(
            status=RelationshipStatus.APPROVED,
            reason="Multiple sources confirm high-risk",
        )
    return SafetyResult(
        status=RelationshipStatus.QUARANTINED,
        reason=(
            f"High-risk requires authoritative source or {min_corroboration}+ sources "
            f"(have {trust_tier}, {source_count} source(s))"
        ),
    )
