from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass
import datetime as dt
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from camp_engine.exceptions import CampOwnershipError, RemoteWriteError
from camp_engine.migration import resolve_camp_references
from camp_engine.models import Camp, Complaint, Feedback, Registration
from camp_engine.normalizer import CampNormalizer, NormalizationResult
from camp_engine.reports import (
    CampRegistrationReport,
    build_registration_reports,
    complaints_for_camps,
    feedback_for_camps,
    render_registration_report_csv,
    verify_registration,
)

from camp_client.store import (
    CAMPS_COLLECTION,
    COMPLAINTS_COLLECTION,
    FEEDBACK_COLLECTION,
    REGISTRATIONS_COLLECTION,
    DocumentStore,
)
from camp_client.submissions import validate_form

logger = logging.getLogger(__name__)


class CampDraft(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    organization_name: str = Field(min_length=1)
    health_camp_name: str = Field(min_length=1)
    location: str = Field(min_length=1)
    date: dt.date
    time_from: dt.datetime
    time_to: dt.datetime
    description: str = Field(min_length=1)
    ambulances_available: str = Field(min_length=1)
    hospital_nearby: str = Field(min_length=1)
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    registration_url: str = Field(min_length=1)

    @model_validator(mode="after")
    def _check_session_bounds(self) -> "CampDraft":
        if self.time_to <= self.time_from:
            raise ValueError("time_to must be after time_from")
        return self

    def to_document(self, admin_id: str) -> dict[str, Any]:
        return {
            "organizationName": self.organization_name,
            "healthCampName": self.health_camp_name,
            "location": self.location,
            "date": self.date.isoformat(),
            "timeFrom": self.time_from.isoformat(),
            "timeTo": self.time_to.isoformat(),
            "description": self.description,
            "ambulancesAvailable": self.ambulances_available,
            "hospitalNearby": self.hospital_nearby,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "registrationUrl": self.registration_url,
            "adminId": admin_id,
        }


@dataclass(frozen=True)
class MigrationSummary:
    resolved: int
    orphaned: int
    ambiguous: int


class AdminService:
    def __init__(self, store: DocumentStore, normalizer: CampNormalizer | None = None) -> None:
        self._store = store
        self._normalizer = normalizer or CampNormalizer()

    async def camps_for_admin(self, admin_id: str) -> NormalizationResult:
        documents = await self._store.list_documents(CAMPS_COLLECTION, {"adminId": admin_id})
        return self._normalizer.normalize_camps(documents)

    async def create_camp(self, admin_id: str, draft: CampDraft | Mapping[str, Any]) -> str:
        validated = validate_form(CampDraft, draft)
        camp_id = await self._store.add_document(CAMPS_COLLECTION, validated.to_document(admin_id))
        logger.info("camp_created", extra={"camp_id": camp_id, "admin_id": admin_id})
        return camp_id

    async def update_camp(self, admin_id: str, camp_id: str, draft: CampDraft | Mapping[str, Any]) -> None:
        validated = validate_form(CampDraft, draft)
        await self._ensure_owner(admin_id, camp_id)
        await self._store.update_document(CAMPS_COLLECTION, camp_id, validated.to_document(admin_id))
        logger.info("camp_updated", extra={"camp_id": camp_id, "admin_id": admin_id})

    async def delete_camp(self, admin_id: str, camp_id: str) -> None:
        await self._ensure_owner(admin_id, camp_id)
        await self._store.delete_document(CAMPS_COLLECTION, camp_id)
        logger.info("camp_deleted", extra={"camp_id": camp_id, "admin_id": admin_id})

    async def feedback_for_admin(self, admin_id: str) -> list[Feedback]:
        camps, documents = await asyncio.gather(
            self._owned_camps(admin_id),
            self._store.list_documents(FEEDBACK_COLLECTION),
        )
        feedback = [self._normalizer.normalize_feedback(item) for item in documents]
        return feedback_for_camps((camp.health_camp_name for camp in camps), feedback)

    async def complaints_for_admin(self, admin_id: str) -> list[Complaint]:
        camps, documents = await asyncio.gather(
            self._owned_camps(admin_id),
            self._store.list_documents(COMPLAINTS_COLLECTION),
        )
        complaints = [self._normalizer.normalize_complaint(item) for item in documents]
        return complaints_for_camps((camp.health_camp_name for camp in camps), complaints)

    async def registrations_for_admin(self, admin_id: str) -> list[Registration]:
        return await self._registrations_for(await self._owned_camps(admin_id))

    async def registration_reports(self, admin_id: str) -> list[CampRegistrationReport]:
        camps = await self._owned_camps(admin_id)
        return build_registration_reports(camps, await self._registrations_for(camps))

    async def export_registration_report_csv(self, admin_id: str) -> str:
        return render_registration_report_csv(await self.registration_reports(admin_id))

    async def verify_registration(self, registration_id: str) -> Registration:
        document = await self._store.get_document(REGISTRATIONS_COLLECTION, registration_id)
        if document is None:
            raise RemoteWriteError(f"registration not found: {registration_id}")
        verified = verify_registration(self._normalizer.normalize_registration(document))
        await self._store.update_document(REGISTRATIONS_COLLECTION, registration_id, {"verified": True})
        logger.info("registration_verified", extra={"registration_id": registration_id})
        return verified

    async def migrate_legacy_references(self) -> MigrationSummary:
        camp_documents, feedback_documents, complaint_documents = await asyncio.gather(
            self._store.list_documents(CAMPS_COLLECTION),
            self._store.list_documents(FEEDBACK_COLLECTION),
            self._store.list_documents(COMPLAINTS_COLLECTION),
        )
        camps = self._normalizer.normalize_camps(camp_documents).accepted
        feedback = resolve_camp_references(
            camps, [self._normalizer.normalize_feedback(item) for item in feedback_documents]
        )
        complaints = resolve_camp_references(
            camps, [self._normalizer.normalize_complaint(item) for item in complaint_documents]
        )
        for collection, resolution in ((FEEDBACK_COLLECTION, feedback), (COMPLAINTS_COLLECTION, complaints)):
            for record_id, camp_id in resolution.updates.items():
                await self._store.update_document(collection, record_id, {"campId": camp_id})
        summary = MigrationSummary(
            resolved=len(feedback.resolved) + len(complaints.resolved),
            orphaned=len(feedback.orphaned) + len(complaints.orphaned),
            ambiguous=len(feedback.ambiguous) + len(complaints.ambiguous),
        )
        logger.info(
            "legacy_references_migrated",
            extra={"resolved": summary.resolved, "orphaned": summary.orphaned, "ambiguous": summary.ambiguous},
        )
        return summary

    async def _owned_camps(self, admin_id: str) -> list[Camp]:
        return (await self.camps_for_admin(admin_id)).accepted

    async def _registrations_for(self, camps: list[Camp]) -> list[Registration]:
        batches = await asyncio.gather(
            *(self._store.list_documents(REGISTRATIONS_COLLECTION, {"campId": camp.id}) for camp in camps)
        )
        return [self._normalizer.normalize_registration(item) for batch in batches for item in batch]

    async def _ensure_owner(self, admin_id: str, camp_id: str) -> None:
        document = await self._store.get_document(CAMPS_COLLECTION, camp_id)
        if document is None:
            raise RemoteWriteError(f"camp not found: {camp_id}")
        if document.data.get("adminId") != admin_id:
            raise CampOwnershipError(f"camp {camp_id} is not owned by {admin_id}")
