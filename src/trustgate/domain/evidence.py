"""Evidence ingestion: turn a fetched URL into a classified source and a snapshot."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from trustgate.domain.model import EvidenceSnapshot, EvidenceSource, utc_now
from trustgate.domain.trust import canonicalize_url, classify, content_hash, extract_domain

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime
    from uuid import UUID

    from trustgate.domain.model import SourceType, TrustTier
    from trustgate.domain.ports import TrustUnitOfWork

log = logging.getLogger(__name__)


@dataclass(slots=True, kw_only=True)
class EvidenceSubmission:
    """One fetched item as handed over by a feed fetcher."""

    url: str
    title: str
    source_type: SourceType
    source_id: str
    content: str | None = None
    author: str | None = None
    published_at: datetime | None = None
    retrieved_at: datetime | None = None


@dataclass(slots=True)
class EvidenceRecordResult:
    source_id: UUID
    snapshot_id: UUID
    trust_tier: TrustTier
    is_new_source: bool


def build_source(raw_url: str) -> EvidenceSource:
    """Canonicalize and classify ``raw_url`` into an unsaved source."""

    canonical = canonicalize_url(raw_url)
    domain = extract_domain(canonical)
    return EvidenceSource(
        canonical_url=canonical,
        raw_url=raw_url,
        domain=domain,
        trust_tier=classify(domain),
    )


def record_evidence(
    submission: EvidenceSubmission,
    *,
    unit_of_work_factory: Callable[[], TrustUnitOfWork],
) -> EvidenceRecordResult:
    """Upsert the evidence source for ``submission.url`` and store a new snapshot.

    An existing source keeps the tier it was given on creation.
    """

    candidate = build_source(submission.url)
    with unit_of_work_factory() as uow:
        source, created = uow.repositories.sources.upsert(candidate)
        snapshot = EvidenceSnapshot(
            source_id=source.id,
            content_hash=content_hash(submission.content),
            title=submission.title,
            full_text=submission.content,
            author=submission.author,
            published_at=submission.published_at,
            retrieved_at=submission.retrieved_at or utc_now(),
        )
        uow.repositories.snapshots.add(snapshot)
        uow.commit()

    if created:
        log.info("New evidence source %s (%s)", source.canonical_url, source.trust_tier)
    return EvidenceRecordResult(
        source_id=source.id,
        snapshot_id=snapshot.id,
        trust_tier=source.trust_tier,
        is_new_source=created,
    )
