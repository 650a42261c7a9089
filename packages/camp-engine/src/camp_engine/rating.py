from __future__ import annotations

from collections.abc import Iterable, Sequence

from camp_engine.models import ZeroRatingPolicy

MIN_RATING = 0
MAX_RATING = 5


def average_rating(ratings: Sequence[float]) -> float:
    if not ratings:
        return 0.0
    return sum(ratings) / len(ratings)


def collect_ratings(
    values: Iterable[int | None],
    zero_policy: ZeroRatingPolicy = ZeroRatingPolicy.INCLUDE,
) -> list[int]:
    """Keep the ratings that take part in an average.

    Unset ratings never count. An explicit ``0`` counts unless ``zero_policy``
    excludes it: older writers stored 0 for "not rated", newer ones reject it
    before writing, so stored zeros are ambiguous and the caller decides.
    Values outside 0..5 are ignored.
    """
    collected: list[int] = []
    for value in values:
        if value is None:
            continue
        if not (MIN_RATING <= value <= MAX_RATING):
            continue
        if value == 0 and zero_policy is ZeroRatingPolicy.EXCLUDE:
            continue
        collected.append(value)
    return collected
