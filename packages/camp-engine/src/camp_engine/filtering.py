from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo
from enum import Enum

from devkit.timezone import local_zone, start_of_day

from camp_engine.models import Camp


class SortMode(str, Enum):
    DATE = "date"
    RATING = "rating"


@dataclass(frozen=True)
class CampFilterCriteria:
    """Search, range, facet and ordering choices for one camp listing."""

    search_query: str = ""
    date_from: date | None = None
    date_to: date | None = None
    locations: frozenset[str] = field(default_factory=frozenset)
    sort_by: SortMode = SortMode.DATE

    def __post_init__(self) -> None:
        if (self.date_from is None) != (self.date_to is None):
            raise ValueError("date_from and date_to must be provided together")
        if isinstance(self.locations, str):
            raise TypeError("locations must be a collection of names, not a single string")
        if not isinstance(self.locations, frozenset):
            object.__setattr__(self, "locations", frozenset(self.locations))
        if not isinstance(self.sort_by, SortMode):
            object.__setattr__(self, "sort_by", SortMode(self.sort_by))

    @property
    def has_date_range(self) -> bool:
        return self.date_from is not None and self.date_to is not None


def is_camp_active(camp: Camp, now: datetime | None = None, zone: tzinfo | None = None) -> bool:
    return camp.date >= start_of_day(now, zone or local_zone())


def active_camps(camps: Iterable[Camp], now: datetime | None = None, zone: tzinfo | None = None) -> list[Camp]:
    today = start_of_day(now, zone or local_zone())
    return [camp for camp in camps if camp.date >= today]


def matches_search(camp: Camp, query: str) -> bool:
    needle = query.strip().lower()
    if not needle:
        return True
    return (
        needle in camp.health_camp_name.lower()
        or needle in camp.organization_name.lower()
        or needle in camp.location.lower()
    )


def filter_camps(
    camps: Sequence[Camp],
    criteria: CampFilterCriteria | None = None,
    now: datetime | None = None,
    zone: tzinfo | None = None,
) -> list[Camp]:
    criteria = criteria or CampFilterCriteria()
    target_zone = zone or local_zone()
    filtered = active_camps(camps, now=now, zone=target_zone)

    if criteria.search_query.strip():
        filtered = [camp for camp in filtered if matches_search(camp, criteria.search_query)]

    if criteria.has_date_range:
        filtered = [
            camp
            for camp in filtered
            if criteria.date_from <= camp.date.astimezone(target_zone).date() <= criteria.date_to
        ]

    if criteria.locations:
        filtered = [camp for camp in filtered if camp.location in criteria.locations]

    if criteria.sort_by is SortMode.RATING:
        return sorted(filtered, key=lambda camp: camp.average_rating or 0.0, reverse=True)
    return sorted(filtered, key=lambda camp: camp.date)


def available_locations(camps: Iterable[Camp]) -> list[str]:
    return sorted({camp.location for camp in camps if camp.location})
