"""Domain layer: trust classification, deduplication, gating and audit."""
