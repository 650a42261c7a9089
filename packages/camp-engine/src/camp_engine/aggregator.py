from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import replace

from camp_engine.models import Camp, Feedback, ZeroRatingPolicy
from camp_engine.rating import average_rating, collect_ratings


def matching_feedback(camp: Camp, feedback: Iterable[Feedback]) -> list[Feedback]:
    """Feedback referencing ``camp`` by name under either legacy field.

    A record whose two name fields both hold the camp name still counts once.
    """
    name = camp.health_camp_name
    if not name:
        return []
    return [item for item in feedback if name in item.camp_references]


def attach_average_rating(
    camp: Camp,
    feedback: Sequence[Feedback],
    zero_policy: ZeroRatingPolicy = ZeroRatingPolicy.INCLUDE,
) -> Camp:
    ratings = collect_ratings((item.rating for item in matching_feedback(camp, feedback)), zero_policy)
    return replace(camp, average_rating=average_rating(ratings))


def aggregate_camps(
    camps: Sequence[Camp],
    feedback: Sequence[Feedback],
    zero_policy: ZeroRatingPolicy = ZeroRatingPolicy.INCLUDE,
) -> list[Camp]:
    by_name: dict[str, list[Feedback]] = {}
    for item in feedback:
        # camp_references is deduplicated, so a record naming the camp in both
        # fields joins once; the legacy per-field queries counted it twice.
        for reference in item.camp_references:
            by_name.setdefault(reference, []).append(item)
    return [
        attach_average_rating(camp, by_name.get(camp.health_camp_name, []), zero_policy)
        for camp in camps
    ]
