"""Error taxonomy shared by every pipeline stage.

- ``NotFoundError``: the referenced row is gone; job runners skip instead of retrying.
- ``ConflictError``: a uniqueness race lost at the storage layer; dedup retries as a link.
- ``ClaimValidationError``: one malformed claim; skip it and keep the rest of the batch.
- ``TransientStorageError``: storage unavailable; propagate for queue redelivery.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID


class TrustPipelineError(Exception):
    """Base class for errors raised by the trust pipeline."""


class NotFoundError(TrustPipelineError):
    def __init__(self, kind: str, identifier: UUID | str) -> None:
        super().__init__(f"{kind} {identifier} not found")
        self.kind = kind
        self.identifier = identifier


class ConflictError(TrustPipelineError):
    """Raised when a write collides with a concurrent writer on a unique key."""


class ClaimValidationError(TrustPipelineError):
    """Raised when an extracted claim or payload does not match the expected schema."""


class TransientStorageError(TrustPipelineError):
    """Raised when the storage layer is temporarily unavailable."""
