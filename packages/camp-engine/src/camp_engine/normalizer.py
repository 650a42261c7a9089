"""Turns raw store documents into canonical entities.

Date-like fields arrive in several shapes depending on which client wrote
them: native datetimes, store timestamp objects, serialized
``{"seconds", "nanoseconds"}`` maps, epoch milliseconds or ISO-8601 strings.
Camp records whose dates cannot be read are rejected rather than defaulted,
so a corrupt record never shows up as an upcoming camp.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date, datetime, timezone, tzinfo
import logging
from typing import Any

from devkit.timezone import local_midnight, local_zone, localize, now_local

from camp_engine.exceptions import DataIntegrityError
from camp_engine.models import Camp, Complaint, Document, Feedback, Registration, UserProfile

logger = logging.getLogger(__name__)

INVALID_DATA_NOTICE = "invalid data encountered"

_CAMP_DATE_FIELDS = ("date", "timeFrom", "timeTo")


@dataclass(frozen=True)
class RejectedRecord:
    record_id: str
    field: str
    reason: str


@dataclass(frozen=True)
class NormalizationResult:
    accepted: list[Camp]
    rejected: list[RejectedRecord]

    @property
    def notice(self) -> str | None:
        return INVALID_DATA_NOTICE if self.rejected else None


class MissingDateError(ValueError):
    """Raised by ``coerce_datetime`` when there is no value at all."""


def coerce_datetime(value: Any, zone: tzinfo | None = None) -> datetime:
    """Read one date-like value; raise ``ValueError`` when it is unusable."""
    target = zone or local_zone()
    if value is None:
        raise MissingDateError("no value")
    if isinstance(value, datetime):
        return localize(value, target)
    if isinstance(value, date):
        return local_midnight(value, target)
    for method_name in ("to_datetime", "ToDatetime"):
        converter = getattr(value, method_name, None)
        if callable(converter):
            converted = converter()
            if not isinstance(converted, datetime):
                raise ValueError(f"{method_name}() did not return a datetime")
            return localize(converted, target)
    if isinstance(value, Mapping):
        return _from_epoch_mapping(value, target)
    if isinstance(value, bool):
        raise ValueError("boolean is not a date")
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc).astimezone(target)
    if isinstance(value, str):
        return _parse_string(value, target)
    raise ValueError(f"unsupported date type {type(value).__name__}")


def _from_epoch_mapping(value: Mapping[str, Any], zone: tzinfo) -> datetime:
    seconds = value.get("seconds", value.get("_seconds"))
    nanos = value.get("nanoseconds", value.get("_nanoseconds", 0))
    if seconds is None:
        raise ValueError("timestamp map without seconds")
    try:
        epoch = float(seconds) + float(nanos or 0) / 1_000_000_000
    except (TypeError, ValueError) as exc:
        raise ValueError("timestamp map with non-numeric parts") from exc
    return datetime.fromtimestamp(epoch, tz=timezone.utc).astimezone(zone)


def _parse_string(value: str, zone: tzinfo) -> datetime:
    text = value.strip()
    if not text:
        raise MissingDateError("no value")
    if len(text) == 10:
        return local_midnight(date.fromisoformat(text), zone)
    normalized = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
    return localize(datetime.fromisoformat(normalized), zone)


def _to_str(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return str(value).strip()


def _to_optional_str(value: Any) -> str | None:
    text = _to_str(value)
    return text or None


def _to_float_or_none(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _to_int_or_none(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not number.is_integer():
        return None
    return int(number)


def _optional_datetime(value: Any, zone: tzinfo) -> datetime | None:
    try:
        return coerce_datetime(value, zone)
    except (ValueError, OverflowError, OSError):
        return None


class CampNormalizer:
    def __init__(self, zone: tzinfo | None = None, substitute_missing_with_now: bool = False) -> None:
        self._zone = zone
        self._substitute_missing_with_now = substitute_missing_with_now

    @property
    def zone(self) -> tzinfo:
        return self._zone or local_zone()

    def normalize_camp(self, document: Document) -> Camp:
        data = document.data
        dates = {field: self._camp_datetime(document.id, field, data.get(field)) for field in _CAMP_DATE_FIELDS}
        return Camp(
            id=str(document.id),
            organization_name=_to_str(data.get("organizationName")),
            health_camp_name=_to_str(data.get("healthCampName")),
            location=_to_str(data.get("location")),
            date=dates["date"],
            time_from=dates["timeFrom"],
            time_to=dates["timeTo"],
            description=_to_str(data.get("description")),
            ambulances_available=_to_str(data.get("ambulancesAvailable")),
            hospital_nearby=_to_str(data.get("hospitalNearby")),
            latitude=_to_float_or_none(data.get("latitude")),
            longitude=_to_float_or_none(data.get("longitude")),
            registration_url=_to_str(data.get("registrationUrl")),
            admin_id=_to_optional_str(data.get("adminId")),
        )

    def normalize_camps(self, documents: Iterable[Document]) -> NormalizationResult:
        accepted: list[Camp] = []
        rejected: list[RejectedRecord] = []
        for document in documents:
            try:
                accepted.append(self.normalize_camp(document))
            except DataIntegrityError as exc:
                logger.debug(
                    "camp_record_rejected",
                    extra={"record_id": exc.record_id, "field": exc.field, "reason": exc.reason},
                )
                rejected.append(RejectedRecord(record_id=exc.record_id, field=exc.field, reason=exc.reason))
        if rejected:
            logger.warning(
                "camp_records_rejected",
                extra={"rejected_count": len(rejected), "accepted_count": len(accepted)},
            )
        return NormalizationResult(accepted=accepted, rejected=rejected)

    def normalize_feedback(self, document: Document) -> Feedback:
        data = document.data
        return Feedback(
            id=str(document.id),
            email=_to_str(data.get("email")),
            feedback=_to_str(data.get("feedback")),
            rating=_to_int_or_none(data.get("rating")),
            timestamp=_optional_datetime(data.get("timestamp"), self.zone),
            camp_id=_to_optional_str(data.get("campId")),
            health_camp_name=_to_optional_str(data.get("healthCampName")),
            camp_name=_to_optional_str(data.get("campName")),
        )

    def normalize_complaint(self, document: Document) -> Complaint:
        data = document.data
        return Complaint(
            id=str(document.id),
            email=_to_str(data.get("email")),
            complaint=_to_str(data.get("complaint")),
            timestamp=_optional_datetime(data.get("timestamp", data.get("createdAt")), self.zone),
            camp_id=_to_optional_str(data.get("campId")),
            health_camp_name=_to_optional_str(data.get("healthCampName")),
            camp_name=_to_optional_str(data.get("campName")),
        )

    def normalize_registration(self, document: Document) -> Registration:
        data = document.data
        return Registration(
            id=str(document.id),
            camp_id=_to_str(data.get("campId")),
            name=_to_str(data.get("name")),
            email=_to_str(data.get("email")),
            phone=_to_str(data.get("phone")),
            address=_to_str(data.get("address")),
            age=_to_int_or_none(data.get("age")),
            verified=data.get("verified") is True,
            created_at=_optional_datetime(data.get("createdAt"), self.zone),
        )

    def normalize_user_profile(self, document: Document) -> UserProfile:
        data = document.data
        return UserProfile(
            uid=_to_str(data.get("uid"), default=str(document.id)),
            locality=_to_optional_str(data.get("locality")),
            full_name=_to_str(data.get("fullName")),
            email=_to_str(data.get("email")),
            phone_number=_to_str(data.get("phoneNumber")),
            gender=_to_str(data.get("gender")),
            dob=_to_str(data.get("dob")),
            profile_image=_to_optional_str(data.get("profileImage")),
        )

    def _camp_datetime(self, record_id: str, field: str, value: Any) -> datetime:
        try:
            return coerce_datetime(value, self.zone)
        except MissingDateError:
            if self._substitute_missing_with_now:
                return now_local(self.zone)
            raise DataIntegrityError(str(record_id), field, "missing") from None
        except (ValueError, OverflowError, OSError) as exc:
            raise DataIntegrityError(str(record_id), field, "unparseable") from exc
