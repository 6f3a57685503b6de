"""Named entities, their mentions in events, and relationships between them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .entity import Entity, utc_now
from .enums import MentionRole, RelationshipStatus

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from .enums import EntityType


@dataclass(eq=False, kw_only=True)
class NamedEntity(Entity):
    name: str
    type: EntityType
    slug: str
    first_seen: datetime = field(default_factory=utc_now)
    last_seen: datetime = field(default_factory=utc_now)

    def seen_at(self, moment: datetime) -> None:
        if moment > self.last_seen:
            self.last_seen = moment


@dataclass(eq=False, kw_only=True)
class EntityMention(Entity):
    event_id: UUID
    entity_id: UUID
    role: MentionRole = MentionRole.MENTIONED
    confidence: float = 1.0


@dataclass(eq=False, kw_only=True)
class Relationship(Entity):
    """A gated claim ``source -[type]-> target`` extracted from one event.

    ``type`` is kept as the raw upper-cased string so claims with unmapped types can be
    stored (quarantined) rather than dropped.
    """

    source_entity_id: UUID
    target_entity_id: UUID
    type: str
    event_id: UUID
    status: RelationshipStatus
    status_reason: str
    occurred_at: datetime
    model_confidence: float | None = None
    validated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        if not self.status_reason.strip():
            raise ValueError("Relationship status requires a reason")

    @property
    def is_public(self) -> bool:
        return self.status == RelationshipStatus.APPROVED
