"""Source identity and trust classification.

Everything here is pure: the same URL always canonicalizes to the same string and the
same domain always maps to the same tier.
"""

from __future__ import annotations

import hashlib
from typing import Final
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from trustgate.domain.model import TrustTier

TRACKING_PARAMS: Final[frozenset[str]] = frozenset(
    {
        # UTM
        "utm_source",
        "utm_medium",
        "utm_campaign",
        "utm_term",
        "utm_content",
        # click ids / referrers
        "ref",
        "fbclid",
        "gclid",
        "dclid",
        "msclkid",
        "twclid",
        # analytics
        "_ga",
        "_gl",
        "mc_cid",
        "mc_eid",
    }
)

AUTHORITATIVE_DOMAINS: Final[tuple[str, ...]] = (
    "openai.com",
    "anthropic.com",
    "deepmind.google",
    "ai.meta.com",
    "ai.google",
    "microsoft.com",
    "nvidia.com",
    "huggingface.co",
)

LOW_TRUST_DOMAINS: Final[tuple[str, ...]] = (
    "reddit.com",
    "twitter.com",
    "x.com",
    "news.ycombinator.com",
)

UNKNOWN_DOMAIN: Final[str] = "unknown"


def canonicalize_url(raw_url: str) -> str:
    """Return the canonical form used as the identity of an evidence source."""

    candidate = raw_url.strip()
    try:
        parts = urlsplit(candidate)
    except ValueError:
        return candidate
    if not parts.netloc:
        return candidate

    query = [
        (key, value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
        if key.lower() not in TRACKING_PARAMS
    ]
    path = parts.path or "/"
    if path != "/" and path.endswith("/"):
        path = path.rstrip("/") or "/"

    return urlunsplit(("https", parts.netloc.lower(), path, urlencode(query), ""))


def extract_domain(url: str) -> str:
    """Host of ``url`` lower-cased and without a leading ``www.``."""

    try:
        hostname = urlsplit(url.strip()).hostname
    except ValueError:
        return UNKNOWN_DOMAIN
    if not hostname:
        return UNKNOWN_DOMAIN
    return _strip_www(hostname)


def classify(domain: str) -> TrustTier:
    """Map a domain onto its trust tier; subdomains inherit their parent's tier."""

    normalized = _strip_www(domain.strip().lower().rstrip("."))
    if _matches_any(normalized, AUTHORITATIVE_DOMAINS):
        return TrustTier.AUTHORITATIVE
    if _matches_any(normalized, LOW_TRUST_DOMAINS):
        return TrustTier.LOW
    return TrustTier.STANDARD


def content_hash(content: str | None) -> str:
    return hashlib.sha256((content or "").encode("utf-8")).hexdigest()


def _strip_www(hostname: str) -> str:
    hostname = hostname.lower()
    return hostname[4:] if hostname.startswith("www.") else hostname


def _matches_any(domain: str, candidates: tuple[str, ...]) -> bool:
    return any(domain == candidate or domain.endswith(f".{candidate}") for candidate in candidates)
