"""Turn raw extraction payloads into domain claims, one item at a time."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, cast

from pydantic import BaseModel, ValidationError

from trustgate.domain.errors import ClaimValidationError
from trustgate.domain.extraction import EntityClaim
from trustgate.domain.safety import RelationshipClaim

from .schema import EntityExtractItem, RelationshipExtractItem

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

log = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"^\s*```[A-Za-z0-9_-]*\s*\n?(?P<body>.*?)\n?\s*```\s*$", re.DOTALL)

type RawPayload = str | bytes | Mapping[str, Any]


@dataclass(frozen=True, slots=True)
class RejectedItem:
    index: int
    message: str


@dataclass(slots=True)
class ParsedClaims[TClaim]:
    claims: list[TClaim] = field(default_factory=list)
    rejected: list[RejectedItem] = field(default_factory=list[RejectedItem])


def strip_code_fences(text: str) -> str:
    """Remove a surrounding Markdown code fence such as ```` ```json ... ``` ````."""

    match = _CODE_FENCE.match(text)
    return match.group("body").strip() if match else text.strip()


def decode_payload(raw: RawPayload) -> dict[str, Any]:
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ClaimValidationError(f"Extraction payload is not valid UTF-8: {exc}") from exc
    if isinstance(raw, str):
        try:
            decoded = json.loads(strip_code_fences(raw))
        except json.JSONDecodeError as exc:
            raise ClaimValidationError(f"Extraction payload is not valid JSON: {exc}") from exc
    else:
        decoded = dict(raw)
    if not isinstance(decoded, dict):
        raise ClaimValidationError("Extraction payload must be a JSON object")
    return cast(dict[str, Any], decoded)


def parse_entity_payload(raw: RawPayload) -> ParsedClaims[EntityClaim]:
    """Validate ``{"entities": [...]}``; malformed items are rejected individually."""

    return _parse_items(raw, "entities", EntityExtractItem, _entity_claim)


def parse_relationship_payload(raw: RawPayload) -> ParsedClaims[RelationshipClaim]:
    """Validate ``{"relationships": [...]}``; malformed items are rejected individually."""

    return _parse_items(raw, "relationships", RelationshipExtractItem, _relationship_claim)


def _parse_items[TItem: BaseModel, TClaim](
    raw: RawPayload,
    key: str,
    model: type[TItem],
    to_claim: Callable[[TItem], TClaim],
) -> ParsedClaims[TClaim]:
    document = decode_payload(raw)
    items = document.get(key)
    if not isinstance(items, list):
        raise ClaimValidationError(f"Extraction payload has no {key!r} list")

    parsed: ParsedClaims[TClaim] = ParsedClaims()
    for index, item in enumerate(cast(list[Any], items)):
        try:
            validated = model.model_validate(item)
        except ValidationError as exc:
            message = "; ".join(
                f"{'.'.join(str(part) for part in error['loc']) or key}: {error['msg']}"
                for error in exc.errors()
            )
            log.warning("Rejected %s item %d: %s", key, index, message)
            parsed.rejected.append(RejectedItem(index=index, message=message))
            continue
        parsed.claims.append(to_claim(validated))
    return parsed


def _entity_claim(item: EntityExtractItem) -> EntityClaim:
    return EntityClaim(name=item.name, type=item.type, role=item.role, confidence=item.confidence)


def _relationship_claim(item: RelationshipExtractItem) -> RelationshipClaim:
    return RelationshipClaim(
        source_entity=item.source_entity,
        target_entity=item.target_entity,
        type=item.type,
        model_confidence=item.confidence,
    )
