"""One-off resolution of legacy name references to camp ids.

Feedback and complaints were written with the camp's display name under
``healthCampName`` or ``campName`` before ``campId`` existed. Resolving the
name once and storing the id lets later reads join on the id instead.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import TypeVar

from camp_engine.models import Camp, Complaint, Feedback

R = TypeVar("R", Feedback, Complaint)


@dataclass(frozen=True)
class ReferenceResolution:
    resolved: list[Feedback | Complaint]
    orphaned: list[Feedback | Complaint]
    ambiguous: list[Feedback | Complaint]

    @property
    def updates(self) -> dict[str, str]:
        """Record id to camp id, for records whose id was filled in."""
        return {record.id: record.camp_id for record in self.resolved if record.camp_id}


def resolve_camp_references(camps: Sequence[Camp], records: Sequence[R]) -> ReferenceResolution:
    known_ids = {camp.id for camp in camps}
    ids_by_name: dict[str, set[str]] = {}
    for camp in camps:
        if camp.health_camp_name:
            ids_by_name.setdefault(camp.health_camp_name, set()).add(camp.id)

    resolved: list[R] = []
    orphaned: list[R] = []
    ambiguous: list[R] = []
    for record in records:
        if record.camp_id and record.camp_id in known_ids:
            continue
        candidates: set[str] = set()
        for reference in record.camp_references:
            candidates |= ids_by_name.get(reference, set())
        if not candidates:
            orphaned.append(record)
        elif len(candidates) > 1:
            ambiguous.append(record)
        else:
            resolved.append(replace(record, camp_id=next(iter(candidates))))
    return ReferenceResolution(resolved=resolved, orphaned=orphaned, ambiguous=ambiguous)
