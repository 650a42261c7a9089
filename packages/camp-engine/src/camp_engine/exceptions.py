from __future__ import annotations

from typing import Any


class CampEngineError(Exception):
    """Base camp engine exception."""


class DataIntegrityError(CampEngineError):
    """Raised when a stored record cannot be turned into a valid entity."""

    def __init__(self, record_id: str, field: str, reason: str) -> None:
        super().__init__(f"invalid record {record_id}: {field} {reason}")
        self.record_id = record_id
        self.field = field
        self.reason = reason


class RemoteStoreError(CampEngineError):
    """Raised when the remote document store cannot be reached or refuses a call."""


class RemoteFetchError(RemoteStoreError):
    """Raised when reading records from the remote store failed."""


class RemoteWriteError(RemoteStoreError):
    """Raised when writing a record to the remote store failed."""


class SubmissionValidationError(CampEngineError):
    """Raised when a user-submitted form does not validate."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class RegistrationStateError(CampEngineError):
    """Raised on an illegal registration state transition."""


class DuplicateSubmissionError(CampEngineError):
    """Raised when a submission with the same idempotency key is still in flight."""


class CampOwnershipError(CampEngineError):
    """Raised when an administrator acts on a camp they do not own."""


class ProfileNotFoundError(CampEngineError):
    """Raised when no user profile document exists for a uid."""
