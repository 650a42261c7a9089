from __future__ import annotations

import asyncio
from datetime import date
import json
import sys
from typing import Any

from devkit.config import CampSettings, load_settings
from devkit.observability import configure_logging, configure_otel
from devkit.timezone import local_zone

from camp_engine.filtering import CampFilterCriteria, SortMode
from camp_engine.models import Camp, ZeroRatingPolicy
from camp_engine.normalizer import CampNormalizer

from camp_client.discovery import CampDiscoveryService, CampListing, ListingState
from camp_client.http_store import HttpDocumentStore


def _required(value: str | None, name: str) -> str:
    if not value:
        raise RuntimeError(f"missing required environment variable: {name}")
    return value


def _parse_date(value: str | None, name: str) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an ISO date (YYYY-MM-DD)") from exc


def _build_criteria(settings: CampSettings) -> CampFilterCriteria:
    try:
        return CampFilterCriteria(
            search_query=settings.CAMP_SEARCH_QUERY,
            date_from=_parse_date(settings.CAMP_DATE_FROM, "CAMP_DATE_FROM"),
            date_to=_parse_date(settings.CAMP_DATE_TO, "CAMP_DATE_TO"),
            locations=settings.selected_locations(),
            sort_by=SortMode(settings.CAMP_SORT_BY.lower()),
        )
    except ValueError as exc:
        raise RuntimeError(f"invalid camp filter settings: {exc}") from exc


def _camp_row(camp: Camp) -> dict[str, Any]:
    return {
        "id": camp.id,
        "healthCampName": camp.health_camp_name,
        "organizationName": camp.organization_name,
        "location": camp.location,
        "date": camp.date.isoformat(),
        "timeFrom": camp.time_from.isoformat(),
        "timeTo": camp.time_to.isoformat(),
        "averageRating": round(camp.average_rating or 0.0, 1),
        "registrationUrl": camp.registration_url,
    }


def _print_listing(listing: CampListing) -> None:
    if listing.state is ListingState.ERROR:
        print(json.dumps({"error": listing.message, "retryable": listing.retryable}))
        return
    for camp in listing.camps:
        print(json.dumps(_camp_row(camp), ensure_ascii=False))
    summary: dict[str, Any] = {
        "visible": len(listing.camps),
        "hasNotification": listing.has_notification,
        "localCamps": [camp.health_camp_name for camp in listing.local_camps],
    }
    if listing.notice:
        summary["notice"] = listing.notice
    print(json.dumps(summary, ensure_ascii=False))


def main() -> int:
    settings = load_settings("camp-discovery")
    configure_logging(settings.CAMP_LOG_LEVEL)
    configure_otel(service_name=settings.SERVICE_NAME)

    store = HttpDocumentStore(
        base_url=_required(settings.CAMP_STORE_BASE_URL, "CAMP_STORE_BASE_URL"),
        api_token=settings.CAMP_STORE_API_TOKEN,
        timeout_seconds=settings.CAMP_STORE_TIMEOUT_SECONDS,
    )
    service = CampDiscoveryService(
        store=store,
        normalizer=CampNormalizer(zone=local_zone()),
        zero_policy=ZeroRatingPolicy(settings.CAMP_ZERO_RATING_POLICY.lower()),
    )
    listing = asyncio.run(service.refresh(_build_criteria(settings), user_uid=settings.CAMP_USER_UID))
    _print_listing(listing)
    return 1 if listing.state is ListingState.ERROR else 0


if __name__ == "__main__":
    sys.exit(main())
