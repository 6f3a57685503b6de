"""Persisting extracted entities and gated relationships for an event."""

from __future__ import annotations

import logging
import re
import unicodedata
from dataclasses import dataclass
from typing import TYPE_CHECKING

from trustgate.domain.confidence import highest_tier
from trustgate.domain.errors import NotFoundError
from trustgate.domain.model import (
    EntityMention,
    MentionRole,
    NamedEntity,
    Relationship,
    RelationshipStatus,
    utc_now,
)
from trustgate.domain.safety import DEFAULT_MIN_CORROBORATION, validate_relationship

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping, Sequence
    from uuid import UUID

    from trustgate.domain.model import EntityType
    from trustgate.domain.ports import TrustUnitOfWork
    from trustgate.domain.safety import RelationshipClaim

log = logging.getLogger(__name__)

_NON_SLUG = re.compile(r"[^a-z0-9]+")


@dataclass(frozen=True, slots=True)
class EntityClaim:
    name: str
    type: EntityType
    role: MentionRole = MentionRole.MENTIONED
    confidence: float = 1.0


@dataclass(slots=True)
class RelationshipGateResult:
    event_id: UUID
    approved: int = 0
    quarantined: int = 0
    skipped: int = 0


def slugify(name: str) -> str:
    """URL-safe slug: accents folded, runs of other characters collapsed to one hyphen."""

    decomposed = unicodedata.normalize("NFD", name.lower())
    ascii_only = "".join(char for char in decomposed if not unicodedata.combining(char))
    return _NON_SLUG.sub("-", ascii_only).strip("-")


def record_entity_mentions(
    event_id: UUID,
    claims: Iterable[EntityClaim],
    *,
    unit_of_work_factory: Callable[[], TrustUnitOfWork],
) -> int:
    """Upsert each claimed entity and mention it once from the event.

    Returns the number of new mentions; replaying the same claims creates none.
    """

    now = utc_now()
    created = 0
    with unit_of_work_factory() as uow:
        if uow.repositories.events.get(event_id) is None:
            raise NotFoundError("Event", event_id)
        entities = uow.repositories.entities
        mentions = uow.repositories.mentions
        mentioned = {entity.id for _, entity in mentions.mentions_for_event(event_id)}

        for claim in claims:
            entity = entities.get_by_name_and_type(claim.name, claim.type)
            if entity is None:
                entity = NamedEntity(
                    name=claim.name,
                    type=claim.type,
                    slug=slugify(claim.name),
                    first_seen=now,
                    last_seen=now,
                )
                entities.add(entity)
                log.info("New entity %s (%s)", claim.name, claim.type)
            else:
                entity.seen_at(now)

            if entity.id in mentioned:
                continue
            mentions.add(
                EntityMention(
                    event_id=event_id,
                    entity_id=entity.id,
                    role=claim.role,
                    confidence=claim.confidence,
                )
            )
            mentioned.add(entity.id)
            created += 1
        uow.commit()
    return created


def apply_relationship_claims(
    event_id: UUID,
    claims: Iterable[RelationshipClaim],
    *,
    unit_of_work_factory: Callable[[], TrustUnitOfWork],
    min_corroboration: int = DEFAULT_MIN_CORROBORATION,
) -> RelationshipGateResult:
    """Run each claim through the safety gate and persist the verdict.

    Entity names are resolved against the entities mentioned by the event; a claim naming
    anything else is skipped. Quarantined claims are stored too, so the reason stays
    inspectable.
    """

    result = RelationshipGateResult(event_id=event_id)
    with unit_of_work_factory() as uow:
        event = uow.repositories.events.get(event_id)
        if event is None:
            raise NotFoundError("Event", event_id)

        tiers = uow.repositories.events.evidence_tiers(event_id)
        trust_tier = highest_tier(tiers)
        source_count = len(tiers)
        by_name = _entities_by_name(uow.repositories.mentions.mentions_for_event(event_id))
        existing = {
            (rel.source_entity_id, rel.target_entity_id, rel.type)
            for rel in uow.repositories.relationships.for_event(event_id)
        }
        now = utc_now()

        for claim in claims:
            source = _resolve(by_name, claim.source_entity)
            target = _resolve(by_name, claim.target_entity)
            if source is None or target is None:
                log.warning(
                    "Skipping relationship %s -> %s on event %s: entity not mentioned",
                    claim.source_entity,
                    claim.target_entity,
                    event_id,
                )
                result.skipped += 1
                continue

            relation_type = claim.type.strip().upper()
            key = (source.id, target.id, relation_type)
            if key in existing:
                log.debug("Relationship %s already recorded for event %s", key, event_id)
                result.skipped += 1
                continue

            verdict = validate_relationship(
                claim, trust_tier, source_count, min_corroboration=min_corroboration
            )
            uow.repositories.relationships.add(
                Relationship(
                    source_entity_id=source.id,
                    target_entity_id=target.id,
                    type=relation_type,
                    event_id=event_id,
                    status=verdict.status,
                    status_reason=verdict.reason,
                    model_confidence=claim.model_confidence,
                    occurred_at=event.occurred_at,
                    validated_at=now,
                )
            )
            existing.add(key)
            if verdict.status == RelationshipStatus.APPROVED:
                result.approved += 1
            else:
                result.quarantined += 1
            log.info(
                "Relationship %s -[%s]-> %s: %s (%s)",
                claim.source_entity,
                relation_type,
                claim.target_entity,
                verdict.status,
                verdict.reason,
            )
        uow.commit()
    return result


def approved_relationships_for_entity(
    entity_id: UUID,
    *,
    unit_of_work_factory: Callable[[], TrustUnitOfWork],
) -> list[Relationship]:
    """Relationships touching ``entity_id`` that are safe to show publicly."""

    with unit_of_work_factory() as uow:
        return list(uow.repositories.relationships.approved_for_entity(entity_id))


def _entities_by_name(
    pairs: Sequence[tuple[EntityMention, NamedEntity]],
) -> dict[str, NamedEntity]:
    return {entity.name: entity for _, entity in pairs}


def _resolve(by_name: Mapping[str, NamedEntity], name: str) -> NamedEntity | None:
    entity = by_name.get(name)
    if entity is not None:
        return entity
    folded = name.strip().casefold()
    for candidate_name, candidate in by_name.items():
        if candidate_name.casefold() == folded:
            return candidate
    return None
