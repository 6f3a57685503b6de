from __future__ import annotations

from typing import TYPE_CHECKING

from trustgate.domain import evidence as evidence_module
from trustgate.domain.evidence import EvidenceSubmission, record_evidence
from trustgate.domain.model import SourceType, TrustTier
from trustgate.domain.trust import content_hash

if TYPE_CHECKING:
    from collections.abc import Callable

    import pytest

    from trustgate.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork


def _submission(url: str, content: str = "body") -> EvidenceSubmission:
    return EvidenceSubmission(
        url=url,
        title="GPT-5 is here",
        source_type=SourceType.NEWSAPI,
        source_id=url,
        content=content,
        author="Jane Doe",
    )


def test_new_source_is_canonicalized_and_classified(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    result = record_evidence(
        _submission("http://WWW.OpenAI.com/index/gpt-5/?utm_source=x"),
        unit_of_work_factory=sqlite_unit_of_work,
    )

    assert result.is_new_source is True
    assert result.trust_tier == TrustTier.AUTHORITATIVE
    with sqlite_unit_of_work() as uow:
        source = uow.repositories.sources.get_by_canonical_url(
            "https://www.openai.com/index/gpt-5"
        )
        snapshot = uow.repositories.snapshots.get(result.snapshot_id)
    assert source is not None
    assert source.id == result.source_id
    assert source.domain == "openai.com"
    assert snapshot is not None
    assert snapshot.content_hash == content_hash("body")
    assert snapshot.author == "Jane Doe"


def test_refetch_reuses_source_and_adds_snapshot(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    first = record_evidence(
        _submission("https://techcrunch.com/story?utm_campaign=a"),
        unit_of_work_factory=sqlite_unit_of_work,
    )
    second = record_evidence(
        _submission("https://techcrunch.com/story/", content="updated body"),
        unit_of_work_factory=sqlite_unit_of_work,
    )

    assert second.is_new_source is False
    assert second.source_id == first.source_id
    assert second.snapshot_id != first.snapshot_id


def test_existing_source_keeps_its_tier(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    record_evidence(
        _submission("https://example.org/post"), unit_of_work_factory=sqlite_unit_of_work
    )
    monkeypatch.setattr(evidence_module, "classify", lambda _domain: TrustTier.AUTHORITATIVE)

    again = record_evidence(
        _submission("https://example.org/post"), unit_of_work_factory=sqlite_unit_of_work
    )

    assert again.trust_tier == TrustTier.STANDARD
