from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, tzinfo

from camp_engine.filtering import active_camps
from camp_engine.models import Camp


def match_local_camps(
    camps: Sequence[Camp],
    user_locality: str | None,
    now: datetime | None = None,
    zone: tzinfo | None = None,
) -> list[Camp]:
    """Active camps located exactly in ``user_locality``, ignoring case.

    Always pass the full normalized camp set, never a search-filtered list.
    """
    if not user_locality:
        return []
    wanted = user_locality.casefold()
    return [camp for camp in active_camps(camps, now=now, zone=zone) if camp.location.casefold() == wanted]


def has_local_notification(
    camps: Sequence[Camp],
    user_locality: str | None,
    now: datetime | None = None,
    zone: tzinfo | None = None,
) -> bool:
    return bool(match_local_camps(camps, user_locality, now=now, zone=zone))
