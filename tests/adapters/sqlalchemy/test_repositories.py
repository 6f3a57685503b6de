"""Tests for SQLAlchemy repositories."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
from sqlalchemy import update
from sqlalchemy.orm import Session

from trustgate.adapters.sqlalchemy.mappings import event_table
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
from trustgate.domain.evidence import build_source
from trustgate.domain.model import (
    EntityMention,
    EntityType,
    Event,
    EventArtifact,
    EventEvidence,
    EventStatus,
    EventStatusChange,
    EvidenceRole,
    EvidenceSnapshot,
    NamedEntity,
    Relationship,
    RelationshipStatus,
    SourceType,
    TrustTier,
)

BASE_TIME = datetime(2025, 3, 14, 9, 30, tzinfo=UTC)


def _event(fingerprint: str = "c" * 32) -> Event:
    return Event(
        fingerprint=fingerprint,
        title="Event",
        occurred_at=BASE_TIME,
        source_type=SourceType.NEWSAPI,
        source_id="n-1",
    )


def _snapshot(session: Session, url: str, *, offset_minutes: int = 0) -> EvidenceSnapshot:
    source, _ = SqlAlchemyEvidenceSourceRepository(session).upsert(build_source(url))
    snapshot = EvidenceSnapshot(
        source_id=source.id,
        content_hash="0" * 64,
        retrieved_at=BASE_TIME + timedelta(minutes=offset_minutes),
    )
    SqlAlchemyEvidenceSnapshotRepository(session).add(snapshot)
    return snapshot


def test_source_upsert_creates_once(sqlite_session: Session) -> None:
    repository = SqlAlchemyEvidenceSourceRepository(sqlite_session)

    first, created_first = repository.upsert(build_source("http://openai.com/blog/?utm_source=x"))
    second, created_second = repository.upsert(build_source("https://OPENAI.com/blog"))

    assert created_first is True
    assert created_second is False
    assert second.id == first.id
    assert first.canonical_url == "https://openai.com/blog"
    assert first.trust_tier == TrustTier.AUTHORITATIVE


def test_source_upsert_keeps_original_tier(sqlite_session: Session) -> None:
    repository = SqlAlchemyEvidenceSourceRepository(sqlite_session)
    original, _ = repository.upsert(build_source("https://example.com/post"))
    reclassified = build_source("https://example.com/post")
    reclassified.trust_tier = TrustTier.AUTHORITATIVE

    stored, created = repository.upsert(reclassified)

    assert created is False
    assert stored.id == original.id
    assert stored.trust_tier == TrustTier.STANDARD


def test_event_repository_evidence_queries(sqlite_session: Session) -> None:
    events = SqlAlchemyEventRepository(sqlite_session)
    event = _event()
    events.add(event)
    primary = _snapshot(sqlite_session, "https://reddit.com/r/ml/1")
    supporting = _snapshot(sqlite_session, "https://anthropic.com/news/x", offset_minutes=5)
    events.link_evidence(EventEvidence(event_id=event.id, snapshot_id=primary.id))
    events.link_evidence(
        EventEvidence(event_id=event.id, snapshot_id=supporting.id, role=EvidenceRole.SUPPORTING)
    )
    sqlite_session.commit()

    assert events.get_by_fingerprint(event.fingerprint) is event
    assert events.get_by_fingerprint("missing") is None
    assert events.count_evidence(event.id) == 2
    assert events.evidence_tiers(event.id) == [TrustTier.LOW, TrustTier.AUTHORITATIVE]
    roles = {link.snapshot_id: link.role for link in events.evidence_links(event.id)}
    assert roles == {primary.id: EvidenceRole.PRIMARY, supporting.id: EvidenceRole.SUPPORTING}


def test_status_ledger_orders_history(sqlite_session: Session) -> None:
    events = SqlAlchemyEventRepository(sqlite_session)
    ledger = SqlAlchemyStatusChangeLedger(sqlite_session)
    event = _event()
    events.add(event)
    steps = [
        (EventStatus.ENRICHED, EventStatus.VERIFIED, 2),
        (None, EventStatus.RAW, 0),
        (EventStatus.RAW, EventStatus.ENRICHED, 1),
    ]
    for from_status, to_status, minutes in steps:
        ledger.append(
            EventStatusChange(
                event_id=event.id,
                from_status=from_status,
                to_status=to_status,
                reason="step",
                changed_at=BASE_TIME + timedelta(minutes=minutes),
            )
        )
    sqlite_session.commit()

    history = ledger.history(event.id)

    assert [(row.from_status, row.to_status) for row in history] == [
        (None, EventStatus.RAW),
        (EventStatus.RAW, EventStatus.ENRICHED),
        (EventStatus.ENRICHED, EventStatus.VERIFIED),
    ]


def test_artifact_repository_latest_version(sqlite_session: Session) -> None:
    events = SqlAlchemyEventRepository(sqlite_session)
    artifacts = SqlAlchemyArtifactRepository(sqlite_session)
    event = _event()
    events.add(event)
    for version in (1, 2):
        artifacts.add(
            EventArtifact(
                event_id=event.id,
                artifact_type="HEADLINE",
                version=version,
                payload={"text": f"v{version}"},
            )
        )
    artifacts.add(EventArtifact(event_id=event.id, artifact_type="SUMMARY", payload={}))
    sqlite_session.commit()

    latest = artifacts.latest(event.id, "HEADLINE")

    assert latest is not None
    assert latest.version == 2
    assert latest.payload == {"text": "v2"}
    assert artifacts.artifact_types(event.id) == {"HEADLINE", "SUMMARY"}
    assert artifacts.latest(event.id, "WHY_MATTERS") is None


def test_entity_graph_repositories(sqlite_session: Session) -> None:
    events = SqlAlchemyEventRepository(sqlite_session)
    entities = SqlAlchemyNamedEntityRepository(sqlite_session)
    mentions = SqlAlchemyMentionRepository(sqlite_session)
    relationships = SqlAlchemyRelationshipRepository(sqlite_session)
    event = _event()
    events.add(event)
    openai = NamedEntity(name="OpenAI", type=EntityType.COMPANY, slug="openai")
    gpt = NamedEntity(name="GPT-5", type=EntityType.MODEL, slug="gpt-5")
    entities.add(openai)
    entities.add(gpt)
    mentions.add(EntityMention(event_id=event.id, entity_id=openai.id))
    approved = Relationship(
        source_entity_id=openai.id,
        target_entity_id=gpt.id,
        type="RELEASED",
        event_id=event.id,
        status=RelationshipStatus.APPROVED,
        status_reason="Low-risk relationship with evidence",
        occurred_at=BASE_TIME,
    )
    quarantined = Relationship(
        source_entity_id=gpt.id,
        target_entity_id=openai.id,
        type="ACQUIRED",
        event_id=event.id,
        status=RelationshipStatus.QUARANTINED,
        status_reason="needs sources",
        occurred_at=BASE_TIME,
    )
    relationships.add(approved)
    relationships.add(quarantined)
    sqlite_session.commit()

    assert entities.get_by_name_and_type("OpenAI", EntityType.COMPANY) is openai
    assert entities.get_by_name_and_type("OpenAI", EntityType.LAB) is None
    assert [entity.name for _, entity in mentions.mentions_for_event(event.id)] == ["OpenAI"]
    assert len(relationships.for_event(event.id)) == 2
    assert relationships.approved_for_entity(gpt.id) == [approved]
    assert relationships.approved_for_entity(openai.id) == [approved]


def test_event_refresh_rereads_status_under_row_lock(
    sqlite_session: Session, monkeypatch: pytest.MonkeyPatch
) -> None:
    events = SqlAlchemyEventRepository(sqlite_session)
    event = _event()
    events.add(event)
    sqlite_session.commit()
    sqlite_session.execute(
        update(event_table)
        .where(event_table.c.id == event.id)
        .values(status=EventStatus.BLOCKED)
    )

    calls: list[dict[str, Any]] = []
    original = Session.refresh

    def recording_refresh(self: Session, instance: object, *args: Any, **kwargs: Any) -> None:
        calls.append(kwargs)
        original(self, instance, *args, **kwargs)

    monkeypatch.setattr(Session, "refresh", recording_refresh)

    events.refresh(event)

    assert event.status == EventStatus.BLOCKED
    assert calls == [{"with_for_update": True}]
