"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class TrustTier(StrEnum):
    AUTHORITATIVE = "AUTHORITATIVE"
    STANDARD = "STANDARD"
    LOW = "LOW"


class SourceType(StrEnum):
    HN = "HN"
    GITHUB = "GITHUB"
    ARXIV = "ARXIV"
    NEWSAPI = "NEWSAPI"
    REDDIT = "REDDIT"
    LEADERBOARD = "LEADERBOARD"
    HUGGINGFACE = "HUGGINGFACE"
    PRODUCTHUNT = "PRODUCTHUNT"
    DEVTO = "DEVTO"
    YOUTUBE = "YOUTUBE"
    LOBSTERS = "LOBSTERS"


class EventStatus(StrEnum):
    RAW = "RAW"
    ENRICHED = "ENRICHED"
    VERIFIED = "VERIFIED"
    PUBLISHED = "PUBLISHED"
    QUARANTINED = "QUARANTINED"
    BLOCKED = "BLOCKED"


class ConfidenceLevel(StrEnum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class EvidenceRole(StrEnum):
    PRIMARY = "PRIMARY"
    SUPPORTING = "SUPPORTING"


class ArtifactType(StrEnum):
    HEADLINE = "HEADLINE"
    SUMMARY = "SUMMARY"
    WHAT_HAPPENED = "WHAT_HAPPENED"
    WHY_MATTERS = "WHY_MATTERS"
    GM_TAKE = "GM_TAKE"
    ENTITY_EXTRACT = "ENTITY_EXTRACT"
    RELATIONSHIP_EXTRACT = "RELATIONSHIP_EXTRACT"
    TOPIC_ASSIGN = "TOPIC_ASSIGN"


class EntityType(StrEnum):
    """Kinds of named things an event can mention."""

    COMPANY = "COMPANY"
    LAB = "LAB"
    MODEL = "MODEL"
    PRODUCT = "PRODUCT"
    PERSON = "PERSON"
    REGULATION = "REGULATION"
    DATASET = "DATASET"
    BENCHMARK = "BENCHMARK"


class MentionRole(StrEnum):
    SUBJECT = "SUBJECT"
    OBJECT = "OBJECT"
    MENTIONED = "MENTIONED"


class RelationType(StrEnum):
    RELEASED = "RELEASED"
    ANNOUNCED = "ANNOUNCED"
    PUBLISHED = "PUBLISHED"
    PARTNERED = "PARTNERED"
    INTEGRATED = "INTEGRATED"
    BEATS = "BEATS"
    CRITICIZED = "CRITICIZED"
    ACQUIRED = "ACQUIRED"
    FUNDED = "FUNDED"
    BANNED = "BANNED"


class RiskLevel(StrEnum):
    LOW = "LOW"
    HIGH = "HIGH"


class RelationshipStatus(StrEnum):
    APPROVED = "APPROVED"
    QUARANTINED = "QUARANTINED"
