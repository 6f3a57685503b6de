from __future__ import annotations

import json

import pytest

from trustgate.adapters.extraction import (
    parse_entity_payload,
    parse_relationship_payload,
    strip_code_fences,
)
from trustgate.domain.errors import ClaimValidationError
from trustgate.domain.model import EntityType, MentionRole


def test_strip_code_fences() -> None:
    fenced = '```json\n{"entities": []}\n```'

    assert strip_code_fences(fenced) == '{"entities": []}'
    assert strip_code_fences('  {"a": 1} ') == '{"a": 1}'


def test_parse_entity_payload_normalises_enums() -> None:
    raw = json.dumps(
        {
            "entities": [
                {"name": " OpenAI ", "type": "company", "role": "subject", "confidence": 0.9},
                {"name": "GPT-5", "type": "MODEL"},
            ]
        }
    )

    parsed = parse_entity_payload(raw)

    assert parsed.rejected == []
    first, second = parsed.claims
    assert first.name == "OpenAI"
    assert first.type == EntityType.COMPANY
    assert first.role == MentionRole.SUBJECT
    assert second.role == MentionRole.MENTIONED
    assert second.confidence == 1.0


def test_parse_entity_payload_rejects_items_individually() -> None:
    payload = {
        "entities": [
            {"name": "OpenAI", "type": "COMPANY"},
            {"name": "Mystery", "type": "PLANET"},
            {"name": "", "type": "COMPANY"},
            {"name": "Claude", "type": "MODEL", "confidence": 1.5},
            "not an object",
        ]
    }

    parsed = parse_entity_payload(payload)

    assert [claim.name for claim in parsed.claims] == ["OpenAI"]
    assert [item.index for item in parsed.rejected] == [1, 2, 3, 4]
    assert "type" in parsed.rejected[0].message


def test_parse_relationship_payload_uses_aliases_and_ignores_extra_keys() -> None:
    raw = (
        "```json\n"
        '{"relationships": [{"sourceEntity": "OpenAI", "targetEntity": "GPT-5", '
        '"type": "released", "confidence": 0.8, "evidence": "quote"}]}\n'
        "```"
    )

    parsed = parse_relationship_payload(raw)

    (claim,) = parsed.claims
    assert claim.source_entity == "OpenAI"
    assert claim.target_entity == "GPT-5"
    assert claim.type == "RELEASED"
    assert claim.model_confidence == 0.8


def test_parse_relationship_payload_keeps_unknown_types() -> None:
    parsed = parse_relationship_payload(
        {"relationships": [{"sourceEntity": "A", "targetEntity": "B", "type": "sued"}]}
    )

    assert parsed.claims[0].type == "SUED"
    assert parsed.claims[0].model_confidence is None


def test_parse_relationship_payload_rejects_missing_fields() -> None:
    parsed = parse_relationship_payload(
        {"relationships": [{"sourceEntity": "A", "type": "RELEASED"}]}
    )

    assert parsed.claims == []
    assert "targetEntity" in parsed.rejected[0].message


@pytest.mark.parametrize(
    "raw",
    [
        "not json at all",
        "[1, 2, 3]",
        '{"something": []}',
        '{"entities": {"name": "x"}}',
        b'{"entities": [{"name": "\xff"}]}',
    ],
)
def test_undecodable_payload_raises(raw: str | bytes) -> None:
    with pytest.raises(ClaimValidationError):
        parse_entity_payload(raw)


def test_invalid_utf8_relationship_payload_raises() -> None:
    with pytest.raises(ClaimValidationError, match="UTF-8"):
        parse_relationship_payload(b'{"relationships": [{"type": "\xff"}]}')
