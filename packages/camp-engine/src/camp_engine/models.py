from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class Document:
    id: str
    data: dict[str, Any]


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lng: float


@dataclass(frozen=True)
class Camp:
    id: str
    organization_name: str
    health_camp_name: str
    location: str
    date: datetime
    time_from: datetime
    time_to: datetime
    description: str = ""
    ambulances_available: str = ""
    hospital_nearby: str = ""
    latitude: float | None = None
    longitude: float | None = None
    registration_url: str = ""
    admin_id: str | None = None
    average_rating: float | None = None

    @property
    def coordinates(self) -> GeoPoint | None:
        if self.latitude is None or self.longitude is None:
            return None
        if not (-90 <= self.latitude <= 90) or not (-180 <= self.longitude <= 180):
            return None
        return GeoPoint(lat=self.latitude, lng=self.longitude)


@dataclass(frozen=True)
class Feedback:
    id: str
    email: str
    feedback: str
    # None means no rating was recorded; 0 is kept distinct from it.
    rating: int | None
    timestamp: datetime | None = None
    camp_id: str | None = None
    health_camp_name: str | None = None
    camp_name: str | None = None

    @property
    def camp_references(self) -> tuple[str, ...]:
        return _references(self.health_camp_name, self.camp_name)


@dataclass(frozen=True)
class Complaint:
    id: str
    email: str
    complaint: str
    timestamp: datetime | None = None
    camp_id: str | None = None
    health_camp_name: str | None = None
    camp_name: str | None = None

    @property
    def camp_references(self) -> tuple[str, ...]:
        return _references(self.health_camp_name, self.camp_name)


@dataclass(frozen=True)
class Registration:
    id: str
    camp_id: str
    name: str
    email: str
    phone: str
    address: str = ""
    age: int | None = None
    verified: bool = False
    created_at: datetime | None = None


@dataclass(frozen=True)
class UserProfile:
    uid: str
    locality: str | None = None
    full_name: str = ""
    email: str = ""
    phone_number: str = ""
    gender: str = ""
    dob: str = ""
    profile_image: str | None = None


class ZeroRatingPolicy(str, Enum):
    INCLUDE = "include"
    EXCLUDE = "exclude"


def _references(*names: str | None) -> tuple[str, ...]:
    seen: list[str] = []
    for name in names:
        if name and name not in seen:
            seen.append(name)
    return tuple(seen)
