from __future__ import annotations

from datetime import UTC, datetime
from uuid import uuid4

import pytest

from trustgate.domain.model import (
    EntityType,
    Event,
    EventStatus,
    EventStatusChange,
    NamedEntity,
    Relationship,
    RelationshipStatus,
    SourceType,
)


def _event() -> Event:
    return Event(
        fingerprint="f" * 32,
        title="Anthropic announces Claude",
        occurred_at=datetime(2025, 3, 14, tzinfo=UTC),
        source_type=SourceType.HN,
        source_id="123",
    )


def test_new_event_starts_raw_without_confidence() -> None:
    event = _event()

    assert event.status == EventStatus.RAW
    assert event.confidence is None
    assert event.source_count == 0


def test_initial_status_change_has_no_previous_status() -> None:
    event = _event()

    change = event.initial_status_change(changed_by="event-dedup")

    assert change.from_status is None
    assert change.to_status == EventStatus.RAW
    assert change.reason == "Initial creation"
    assert change.event_id == event.id


def test_transition_updates_status_and_returns_audit_row() -> None:
    event = _event()

    change = event.transition_to(EventStatus.ENRICHED, reason="enriched", changed_by="tester")

    assert event.status == EventStatus.ENRICHED
    assert change.from_status == EventStatus.RAW
    assert change.to_status == EventStatus.ENRICHED
    assert event.updated_at == change.changed_at


def test_transition_to_same_status_is_rejected() -> None:
    event = _event()

    with pytest.raises(ValueError, match="move away"):
        event.transition_to(EventStatus.RAW, reason="noop")
    assert event.status == EventStatus.RAW


def test_status_change_requires_reason() -> None:
    with pytest.raises(ValueError, match="reason"):
        EventStatusChange(
            event_id=uuid4(),
            from_status=EventStatus.RAW,
            to_status=EventStatus.ENRICHED,
            reason="   ",
        )


def test_relationship_requires_reason_and_exposes_public_flag() -> None:
    common = {
        "source_entity_id": uuid4(),
        "target_entity_id": uuid4(),
        "type": "RELEASED",
        "event_id": uuid4(),
        "occurred_at": datetime(2025, 3, 14, tzinfo=UTC),
    }

    approved = Relationship(status=RelationshipStatus.APPROVED, status_reason="ok", **common)
    quarantined = Relationship(
        status=RelationshipStatus.QUARANTINED, status_reason="needs sources", **common
    )

    assert approved.is_public
    assert not quarantined.is_public
    with pytest.raises(ValueError, match="reason"):
        Relationship(status=RelationshipStatus.APPROVED, status_reason="", **common)


def test_named_entity_last_seen_only_moves_forward() -> None:
    entity = NamedEntity(
        name="OpenAI",
        type=EntityType.COMPANY,
        slug="openai",
        first_seen=datetime(2025, 3, 14, tzinfo=UTC),
        last_seen=datetime(2025, 3, 14, tzinfo=UTC),
    )

    entity.seen_at(datetime(2025, 3, 1, tzinfo=UTC))
    assert entity.last_seen == datetime(2025, 3, 14, tzinfo=UTC)

    entity.seen_at(datetime(2025, 3, 20, tzinfo=UTC))
    assert entity.last_seen == datetime(2025, 3, 20, tzinfo=UTC)
