from __future__ import annotations

import pytest

from trustgate.domain.extraction import slugify


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("OpenAI", "openai"),
        ("Meta AI Research", "meta-ai-research"),
        ("GPT-4o (mini)", "gpt-4o-mini"),
        ("Mistral   AI!!", "mistral-ai"),
        ("Café Über", "cafe-uber"),
        ("--Edge--", "edge"),
    ],
)
def test_slugify(name: str, expected: str) -> None:
    assert slugify(name) == expected
