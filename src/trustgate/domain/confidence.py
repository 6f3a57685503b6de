"""Confidence scoring from the trust profile of an event's evidence."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from trustgate.domain.model import ConfidenceLevel, EventStatus, TrustTier

if TYPE_CHECKING:
    from collections.abc import Iterable

_TIER_RANK: dict[TrustTier, int] = {
    TrustTier.LOW: 0,
    TrustTier.STANDARD: 1,
    TrustTier.AUTHORITATIVE: 2,
}


@dataclass(frozen=True, slots=True)
class EvidenceTrustProfile:
    """Source count plus the multiset of tiers across all linked evidence."""

    source_count: int
    tiers: tuple[TrustTier, ...] = field(default_factory=tuple["TrustTier", ...])

    @classmethod
    def from_tiers(cls, tiers: Iterable[TrustTier]) -> EvidenceTrustProfile:
        collected = tuple(tiers)
        return cls(source_count=len(collected), tiers=collected)

    @property
    def has_authoritative(self) -> bool:
        return TrustTier.AUTHORITATIVE in self.tiers

    @property
    def has_standard(self) -> bool:
        return TrustTier.STANDARD in self.tiers


@dataclass(frozen=True, slots=True)
class ConfidencePolicy:
    """Corroboration thresholds; the defaults are the documented rubric."""

    high_corroboration: int = 3
    medium_corroboration: int = 2


DEFAULT_CONFIDENCE_POLICY = ConfidencePolicy()


def compute_confidence(
    profile: EvidenceTrustProfile,
    policy: ConfidencePolicy = DEFAULT_CONFIDENCE_POLICY,
) -> ConfidenceLevel:
    """Rubric:

    - HIGH: any AUTHORITATIVE source, or ``high_corroboration``+ sources of any tier
    - MEDIUM: any STANDARD source, or ``medium_corroboration``+ sources of any tier
    - LOW: otherwise (including no evidence at all)
    """

    if profile.source_count == 0:
        return ConfidenceLevel.LOW
    if profile.has_authoritative or profile.source_count >= policy.high_corroboration:
        return ConfidenceLevel.HIGH
    if profile.has_standard or profile.source_count >= policy.medium_corroboration:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


def confidence_to_status(confidence: ConfidenceLevel) -> EventStatus:
    """The confidence gate: LOW is quarantined, everything else may publish."""

    if confidence == ConfidenceLevel.LOW:
        return EventStatus.QUARANTINED
    return EventStatus.PUBLISHED


def highest_tier(tiers: Iterable[TrustTier]) -> TrustTier:
    return max(tiers, key=tier_rank, default=TrustTier.LOW)


def tier_rank(tier: TrustTier) -> int:
    """Ordering key for tiers; higher means more trusted."""

    return _TIER_RANK[tier]
