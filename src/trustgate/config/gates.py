"""Threshold defaults for the confidence and relationship gates."""

from __future__ import annotations

from dataclasses import dataclass

from trustgate.domain.confidence import ConfidencePolicy

from .env import positive_int_env
from .errors import ConfigurationError

DEFAULT_HIGH_CORROBORATION = 3
DEFAULT_MEDIUM_CORROBORATION = 2
DEFAULT_RELATIONSHIP_CORROBORATION = 2


@dataclass(frozen=True, slots=True)
class GateConfig:
    high_corroboration: int = DEFAULT_HIGH_CORROBORATION
    medium_corroboration: int = DEFAULT_MEDIUM_CORROBORATION
    relationship_corroboration: int = DEFAULT_RELATIONSHIP_CORROBORATION

    def __post_init__(self) -> None:
        if self.medium_corroboration > self.high_corroboration:
            raise ConfigurationError(
                "Medium corroboration threshold cannot exceed the high threshold "
                f"({self.medium_corroboration} > {self.high_corroboration})"
            )

    def confidence_policy(self) -> ConfidencePolicy:
        return ConfidencePolicy(
            high_corroboration=self.high_corroboration,
            medium_corroboration=self.medium_corroboration,
        )


def get_gate_config() -> GateConfig:
    return GateConfig(
        high_corroboration=positive_int_env(
            "TRUSTGATE_HIGH_CORROBORATION", DEFAULT_HIGH_CORROBORATION
        ),
        medium_corroboration=positive_int_env(
            "TRUSTGATE_MEDIUM_CORROBORATION", DEFAULT_MEDIUM_CORROBORATION
        ),
        relationship_corroboration=positive_int_env(
            "TRUSTGATE_RELATIONSHIP_CORROBORATION", DEFAULT_RELATIONSHIP_CORROBORATION
        ),
    )
