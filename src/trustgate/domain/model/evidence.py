"""Evidence layer: where a claim came from and what it said at fetch time."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .entity import Entity, utc_now
from .enums import TrustTier

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID


@dataclass(eq=False, kw_only=True)
class EvidenceSource(Entity):
    """A canonical URL and its trust tier.

    The tier is assigned when the row is first created and is not re-evaluated on later
    fetches of the same URL.
    """

    canonical_url: str
    raw_url: str
    domain: str
    trust_tier: TrustTier = TrustTier.STANDARD
    created_at: datetime = field(default_factory=utc_now)


@dataclass(eq=False, kw_only=True)
class EvidenceSnapshot(Entity):
    """Immutable capture of one fetch of a source."""

    source_id: UUID
    content_hash: str
    title: str | None = None
    full_text: str | None = None
    author: str | None = None
    published_at: datetime | None = None
    retrieved_at: datetime = field(default_factory=utc_now)
