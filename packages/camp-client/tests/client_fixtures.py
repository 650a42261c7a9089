from __future__ import annotations

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from camp_engine.models import Document

ZONE = ZoneInfo("Asia/Kolkata")
NOW = datetime(2026, 5, 10, 15, 30, tzinfo=ZONE)


def camp_document(
    doc_id: str,
    name: str,
    location: str = "Chennai",
    days: int = 1,
    admin_id: str = "admin-1",
    **overrides: object,
) -> Document:
    day = datetime(2026, 5, 10, 9, 0, tzinfo=ZONE) + timedelta(days=days)
    data: dict[str, object] = {
        "organizationName": "Health Org",
        "healthCampName": name,
        "location": location,
        "date": day.isoformat(),
        "timeFrom": day.isoformat(),
        "timeTo": (day + timedelta(hours=6)).isoformat(),
        "description": "General check-up",
        "ambulancesAvailable": "2",
        "hospitalNearby": "City Hospital",
        "latitude": 13.08,
        "longitude": 80.27,
        "registrationUrl": "https://example.org",
        "adminId": admin_id,
    }
    data.update(overrides)
    return Document(id=doc_id, data=data)


def feedback_document(doc_id: str, rating: object, **refs: object) -> Document:
    data: dict[str, object] = {"email": "p@example.com", "feedback": "good", "rating": rating}
    data.update(refs)
    return Document(id=doc_id, data=data)
