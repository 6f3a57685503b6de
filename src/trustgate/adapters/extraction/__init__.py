"""Extraction payload adapter: LLM JSON in, validated domain claims out."""

from __future__ import annotations

from .schema import EntityExtractItem, RelationshipExtractItem
from .translator import (
    ParsedClaims,
    RejectedItem,
    decode_payload,
    parse_entity_payload,
    parse_relationship_payload,
    strip_code_fences,
)

__all__ = [
    "EntityExtractItem",
    "ParsedClaims",
    "RejectedItem",
    "RelationshipExtractItem",
    "decode_payload",
    "parse_entity_payload",
    "parse_relationship_payload",
    "strip_code_fences",
]
