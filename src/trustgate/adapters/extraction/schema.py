"""Schemas for entity and relationship extraction payloads produced by the LLM."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from trustgate.domain.model import EntityType, MentionRole


def _upper(value: Any) -> Any:
    return value.strip().upper() if isinstance(value, str) else value


class ExtractionModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


class EntityExtractItem(ExtractionModel):
    name: str = Field(min_length=1)
    type: EntityType
    role: MentionRole = MentionRole.MENTIONED
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("entity name must not be blank")
        return stripped

    @field_validator("type", "role", mode="before")
    @classmethod
    def _normalise_enum(cls, value: Any) -> Any:
        return _upper(value)


class RelationshipExtractItem(ExtractionModel):
    source_entity: str = Field(alias="sourceEntity", min_length=1)
    target_entity: str = Field(alias="targetEntity", min_length=1)
    # Unmapped types pass through and are quarantined by the safety gate.
    type: str = Field(min_length=1)
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)

    @field_validator("source_entity", "target_entity")
    @classmethod
    def _strip_entity(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("entity name must not be blank")
        return stripped

    @field_validator("type", mode="before")
    @classmethod
    def _normalise_type(cls, value: Any) -> Any:
        return _upper(value)
