from __future__ import annotations

from collections.abc import Iterable, Sequence
import csv
from dataclasses import dataclass, replace
from datetime import datetime
import io

from camp_engine.exceptions import RegistrationStateError
from camp_engine.models import Camp, Complaint, Feedback, Registration

REPORT_CSV_HEADER = ("Camp Name", "Total Registrations", "Verified Registrations")


@dataclass(frozen=True)
class CampRegistrationReport:
    camp_name: str
    total_registrations: int
    verified_registrations: int


def feedback_for_camps(camp_names: Iterable[str], feedback: Iterable[Feedback]) -> list[Feedback]:
    names = set(camp_names)
    return [item for item in feedback if names.intersection(item.camp_references)]


def complaints_for_camps(camp_names: Iterable[str], complaints: Iterable[Complaint]) -> list[Complaint]:
    names = set(camp_names)
    return [item for item in complaints if names.intersection(item.camp_references)]


def build_registration_reports(
    camps: Sequence[Camp],
    registrations: Sequence[Registration],
) -> list[CampRegistrationReport]:
    reports: list[CampRegistrationReport] = []
    for camp in camps:
        camp_registrations = [item for item in registrations if item.camp_id == camp.id]
        reports.append(
            CampRegistrationReport(
                camp_name=camp.health_camp_name,
                total_registrations=len(camp_registrations),
                verified_registrations=sum(1 for item in camp_registrations if item.verified),
            )
        )
    return reports


def render_registration_report_csv(reports: Iterable[CampRegistrationReport]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(REPORT_CSV_HEADER)
    for report in reports:
        writer.writerow((report.camp_name, report.total_registrations, report.verified_registrations))
    return buffer.getvalue()


def registrations_for_camp(
    camps: Sequence[Camp],
    registrations: Sequence[Registration],
    camp_name: str | None,
) -> list[Registration]:
    if camp_name is None:
        return list(registrations)
    camp_ids = {camp.id for camp in camps if camp.health_camp_name == camp_name}
    return [item for item in registrations if item.camp_id in camp_ids]


@dataclass(frozen=True)
class RegisteredCamp:
    registration_id: str
    camp_id: str
    health_camp_name: str
    date: datetime
    verified: bool


def registrations_for_email(
    camps: Sequence[Camp],
    registrations: Iterable[Registration],
    email: str,
) -> list[RegisteredCamp]:
    """A participant's registrations joined to their camps, in registration order.

    Registrations whose camp no longer exists are left out.
    """
    if not email:
        return []
    camps_by_id = {camp.id: camp for camp in camps}
    registered: list[RegisteredCamp] = []
    for item in registrations:
        camp = camps_by_id.get(item.camp_id)
        if item.email != email or camp is None:
            continue
        registered.append(
            RegisteredCamp(
                registration_id=item.id,
                camp_id=camp.id,
                health_camp_name=camp.health_camp_name,
                date=camp.date,
                verified=item.verified,
            )
        )
    return registered


def verify_registration(registration: Registration) -> Registration:
    if registration.verified:
        raise RegistrationStateError(f"registration {registration.id} is already verified")
    return replace(registration, verified=True)
