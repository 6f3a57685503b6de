from __future__ import annotations

import hashlib

import pytest

from trustgate.domain.model import TrustTier
from trustgate.domain.trust import canonicalize_url, classify, content_hash, extract_domain


@pytest.mark.parametrize(
    ("domain", "expected"),
    [
        ("openai.com", TrustTier.AUTHORITATIVE),
        ("blog.openai.com", TrustTier.AUTHORITATIVE),
        ("www.anthropic.com", TrustTier.AUTHORITATIVE),
        ("DeepMind.Google", TrustTier.AUTHORITATIVE),
        ("notopenai.com", TrustTier.STANDARD),
        ("reddit.com", TrustTier.LOW),
        ("old.reddit.com", TrustTier.LOW),
        ("news.ycombinator.com", TrustTier.LOW),
        ("x.com", TrustTier.LOW),
        ("techcrunch.com", TrustTier.STANDARD),
        ("unknown", TrustTier.STANDARD),
    ],
)
def test_classify_matches_on_label_boundaries(domain: str, expected: TrustTier) -> None:
    assert classify(domain) == expected


def test_canonicalize_strips_tracking_and_fragment() -> None:
    url = "http://Example.COM/story/?utm_source=feed&id=7&FBCLID=abc#comments"

    assert canonicalize_url(url) == "https://example.com/story?id=7"


def test_canonicalize_keeps_root_slash() -> None:
    assert canonicalize_url("https://example.com") == "https://example.com/"
    assert canonicalize_url("https://example.com/") == "https://example.com/"


def test_canonicalize_is_idempotent() -> None:
    once = canonicalize_url("http://www.example.com/a/b/?ref=hn&q=1")

    assert canonicalize_url(once) == once


def test_canonicalize_returns_unparseable_input_stripped() -> None:
    assert canonicalize_url("  not a url  ") == "not a url"
    assert canonicalize_url("http://[::1") == "http://[::1"


def test_extract_domain() -> None:
    assert extract_domain("https://www.OpenAI.com/blog") == "openai.com"
    assert extract_domain("https://research.example.org:8443/x") == "research.example.org"
    assert extract_domain("not a url") == "unknown"


def test_content_hash_treats_missing_content_as_empty() -> None:
    empty = hashlib.sha256(b"").hexdigest()

    assert content_hash(None) == empty
    assert content_hash("") == empty
    assert content_hash("abc") != empty
