from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from camp_engine.exceptions import ProfileNotFoundError
from camp_engine.models import Document, UserProfile
from camp_engine.normalizer import CampNormalizer
from camp_engine.reports import RegisteredCamp, registrations_for_email

from camp_client.store import CAMPS_COLLECTION, REGISTRATIONS_COLLECTION, USERS_COLLECTION, DocumentStore
from camp_client.submissions import validate_form

logger = logging.getLogger(__name__)

_PROFILE_FIELDS = {
    "full_name": "fullName",
    "phone_number": "phoneNumber",
    "gender": "gender",
    "dob": "dob",
    "locality": "locality",
    "profile_image": "profileImage",
}


class ProfileUpdate(BaseModel):
    """Editable profile fields; ``uid`` and ``email`` stay fixed."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    full_name: str | None = Field(default=None, min_length=1, max_length=200)
    phone_number: str | None = Field(default=None, min_length=1, max_length=32)
    gender: str | None = Field(default=None, max_length=32)
    dob: str | None = Field(default=None, max_length=32)
    locality: str | None = Field(default=None, max_length=200)
    profile_image: str | None = Field(default=None, max_length=2048)

    def to_fields(self) -> dict[str, Any]:
        return {_PROFILE_FIELDS[name]: value for name, value in self.model_dump(exclude_unset=True).items()}


@dataclass(frozen=True)
class ProfileRegistrations:
    registered: list[RegisteredCamp]

    @property
    def verified(self) -> list[RegisteredCamp]:
        return [item for item in self.registered if item.verified]


class ProfileService:
    def __init__(self, store: DocumentStore, normalizer: CampNormalizer | None = None) -> None:
        self._store = store
        self._normalizer = normalizer or CampNormalizer()

    async def get_profile(self, uid: str) -> UserProfile:
        return self._normalizer.normalize_user_profile(await self._profile_document(uid))

    async def registrations_for_email(self, email: str) -> ProfileRegistrations:
        if not email:
            return ProfileRegistrations(registered=[])
        documents = await self._store.list_documents(REGISTRATIONS_COLLECTION, {"email": email})
        registrations = [self._normalizer.normalize_registration(item) for item in documents]
        camp_ids = sorted({item.camp_id for item in registrations if item.camp_id})
        camp_documents = await asyncio.gather(
            *(self._store.get_document(CAMPS_COLLECTION, camp_id) for camp_id in camp_ids)
        )
        camps = self._normalizer.normalize_camps(item for item in camp_documents if item is not None).accepted
        return ProfileRegistrations(registered=registrations_for_email(camps, registrations, email))

    async def update_profile(self, uid: str, update: ProfileUpdate | Mapping[str, Any]) -> UserProfile:
        validated = validate_form(ProfileUpdate, update)
        document = await self._profile_document(uid)
        fields = validated.to_fields()
        if fields:
            await self._store.update_document(USERS_COLLECTION, document.id, fields)
            logger.info("profile_updated", extra={"uid": uid, "fields": ",".join(sorted(fields))})
        return self._normalizer.normalize_user_profile(Document(id=document.id, data={**document.data, **fields}))

    async def _profile_document(self, uid: str) -> Document:
        documents = await self._store.list_documents(USERS_COLLECTION, {"uid": uid}) if uid else []
        if not documents:
            raise ProfileNotFoundError(f"user profile not found: {uid}")
        return documents[0]
