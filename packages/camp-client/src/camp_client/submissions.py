from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime
import logging
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from devkit.timezone import now_local

from camp_engine.exceptions import DuplicateSubmissionError, SubmissionValidationError
from camp_engine.models import Camp

from camp_client.idempotency import IdempotencyStore, InMemoryIdempotencyStore
from camp_client.store import COMPLAINTS_COLLECTION, FEEDBACK_COLLECTION, REGISTRATIONS_COLLECTION, DocumentStore

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=BaseModel)


class FeedbackForm(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    email: str = Field(min_length=1, max_length=254)
    feedback: str = Field(min_length=1, max_length=2000)
    rating: int = Field(ge=1, le=5)


class ComplaintForm(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    email: str = Field(min_length=1, max_length=254)
    complaint: str = Field(min_length=1, max_length=2000)


class RegistrationForm(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=200)
    email: str = Field(min_length=1, max_length=254)
    phone: str = Field(min_length=1, max_length=32)
    address: str = ""
    age: int | None = Field(default=None, ge=0, le=150)


@dataclass(frozen=True)
class SubmissionReceipt:
    document_id: str
    duplicate: bool = False


def validate_form(model: type[F], payload: F | Mapping[str, Any]) -> F:
    if isinstance(payload, model):
        return payload
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise SubmissionValidationError(f"invalid {model.__name__}", errors=exc.errors()) from exc


class SubmissionService:
    """Writes feedback, complaints and registrations at most once per key.

    The caller generates one idempotency key per user action and reuses it on
    retries; a repeated key returns the first write's document id.
    """

    def __init__(
        self,
        store: DocumentStore,
        idempotency_store: IdempotencyStore | None = None,
        clock: Callable[[], datetime] = now_local,
    ) -> None:
        self._store = store
        self._idempotency = idempotency_store or InMemoryIdempotencyStore()
        self._clock = clock

    async def submit_feedback(
        self,
        camp: Camp,
        form: FeedbackForm | Mapping[str, Any],
        idempotency_key: str,
    ) -> SubmissionReceipt:
        validated = validate_form(FeedbackForm, form)
        document = {
            "email": validated.email,
            "feedback": validated.feedback,
            "rating": validated.rating,
            "campId": camp.id,
            "campName": camp.health_camp_name,
            "healthCampName": camp.health_camp_name,
            "timestamp": self._clock().isoformat(),
        }
        return await self._write_once(FEEDBACK_COLLECTION, document, idempotency_key)

    async def submit_complaint(
        self,
        camp: Camp,
        form: ComplaintForm | Mapping[str, Any],
        idempotency_key: str,
    ) -> SubmissionReceipt:
        validated = validate_form(ComplaintForm, form)
        document = {
            "email": validated.email,
            "complaint": validated.complaint,
            "campId": camp.id,
            "campName": camp.health_camp_name,
            "healthCampName": camp.health_camp_name,
            "timestamp": self._clock().isoformat(),
        }
        return await self._write_once(COMPLAINTS_COLLECTION, document, idempotency_key)

    async def register(
        self,
        camp_id: str,
        form: RegistrationForm | Mapping[str, Any],
        idempotency_key: str,
    ) -> SubmissionReceipt:
        if not camp_id:
            raise SubmissionValidationError("camp id is required")
        validated = validate_form(RegistrationForm, form)
        document = {
            "campId": camp_id,
            "name": validated.name,
            "email": validated.email,
            "phone": validated.phone,
            "address": validated.address,
            "age": validated.age,
            "verified": False,
            "createdAt": self._clock().isoformat(),
        }
        return await self._write_once(REGISTRATIONS_COLLECTION, document, idempotency_key)

    async def _write_once(self, collection: str, document: dict[str, Any], key: str) -> SubmissionReceipt:
        if not key:
            raise SubmissionValidationError("idempotency key is required")
        if not await self._idempotency.claim(key):
            existing = await self._idempotency.result_for(key)
            if existing is None:
                raise DuplicateSubmissionError(f"submission {key} is still in progress")
            logger.info("submission_deduplicated", extra={"collection": collection, "document_id": existing})
            return SubmissionReceipt(document_id=existing, duplicate=True)

        document["idempotencyKey"] = key
        try:
            document_id = await self._store.add_document(collection, document)
        except BaseException:
            await self._idempotency.release(key)
            raise
        await self._idempotency.complete(key, document_id)
        logger.info("submission_written", extra={"collection": collection, "document_id": document_id})
        return SubmissionReceipt(document_id=document_id)
