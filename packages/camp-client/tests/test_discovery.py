from __future__ import annotations

import asyncio

import pytest

from camp_engine.exceptions import RemoteFetchError
from camp_engine.filtering import CampFilterCriteria, SortMode
from camp_engine.models import Document
from camp_engine.normalizer import INVALID_DATA_NOTICE, CampNormalizer

from camp_client.discovery import FETCH_FAILED_MESSAGE, CampDiscoveryService, ListingState
from camp_client.metrics import InMemoryDiscoveryMetricsCollector
from camp_client.store import CAMPS_COLLECTION, FEEDBACK_COLLECTION, USERS_COLLECTION, InMemoryDocumentStore

from client_fixtures import NOW, ZONE, camp_document, feedback_document


def _store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore(
        {
            CAMPS_COLLECTION: [
                camp_document("c1", "Central Park Camp", location="Chennai", days=2),
                camp_document("c2", "Lakeside Camp", location="chennai", days=1),
                camp_document("c3", "Old Camp", location="Chennai", days=-1),
                camp_document("c4", "Hill Camp", location="Madurai", days=3),
                camp_document("bad", "Broken Camp", date="not-a-date"),
            ],
            FEEDBACK_COLLECTION: [
                feedback_document("f1", 4, healthCampName="Central Park Camp"),
                feedback_document("f2", 5, campName="Central Park Camp"),
                feedback_document("f3", 2, healthCampName="Lakeside Camp", campName="Lakeside Camp"),
                feedback_document("f4", 5, campName="Demolished Camp"),
            ],
            USERS_COLLECTION: [Document(id="u-doc", data={"uid": "u1", "locality": "Chennai"})],
        }
    )


def _service(store, metrics=None) -> CampDiscoveryService:
    return CampDiscoveryService(
        store,
        normalizer=CampNormalizer(zone=ZONE),
        metrics=metrics,
        clock=lambda: NOW,
    )


class FailingStore(InMemoryDocumentStore):
    async def list_documents(self, collection, filters=None):
        raise RemoteFetchError("network down")


class SlowFirstStore(InMemoryDocumentStore):
    def __init__(self, seed) -> None:
        super().__init__(seed)
        self.release_first = asyncio.Event()
        self._calls = 0

    async def list_documents(self, collection, filters=None):
        if collection == CAMPS_COLLECTION:
            self._calls += 1
            if self._calls == 1:
                await self.release_first.wait()
        return await super().list_documents(collection, filters)


@pytest.mark.asyncio
async def test_refresh_builds_sorted_listing_with_ratings_and_notice() -> None:
    metrics = InMemoryDiscoveryMetricsCollector()
    service = _service(_store(), metrics)

    listing = await service.refresh(user_uid="u1")

    assert listing.state is ListingState.READY
    assert [camp.id for camp in listing.camps] == ["c2", "c1", "c4"]
    ratings = {camp.id: camp.average_rating for camp in listing.camps}
    assert ratings == {"c1": 4.5, "c2": 2.0, "c4": 0.0}
    assert listing.notice == INVALID_DATA_NOTICE
    assert listing.locations == ["Chennai", "Madurai", "chennai"]
    assert metrics.rejected_records == 1
    assert {item.stage for item in metrics.stage_durations} >= {"fetch", "normalize", "aggregate", "filter"}


@pytest.mark.asyncio
async def test_notification_uses_full_active_set() -> None:
    service = _service(_store())

    listing = await service.refresh(CampFilterCriteria(search_query="hill"), user_uid="u1")

    assert [camp.id for camp in listing.camps] == ["c4"]
    assert listing.user_locality == "Chennai"
    assert sorted(camp.id for camp in listing.local_camps) == ["c1", "c2"]
    assert listing.has_notification is True


@pytest.mark.asyncio
async def test_unknown_user_has_no_notification() -> None:
    listing = await _service(_store()).refresh(user_uid="nobody")
    assert listing.local_camps == []
    assert listing.has_notification is False


@pytest.mark.asyncio
async def test_apply_criteria_refilters_without_refetch() -> None:
    service = _service(_store())
    await service.refresh(user_uid="u1")

    listing = service.apply_criteria(CampFilterCriteria(sort_by=SortMode.RATING))

    assert [camp.id for camp in listing.camps] == ["c1", "c2", "c4"]
    assert service.current is listing


@pytest.mark.asyncio
async def test_all_filtered_out_is_ready_and_empty() -> None:
    listing = await _service(_store()).refresh(CampFilterCriteria(search_query="dental"))
    assert listing.state is ListingState.READY
    assert listing.is_empty is True


@pytest.mark.asyncio
async def test_fetch_failure_surfaces_retryable_error() -> None:
    metrics = InMemoryDiscoveryMetricsCollector()
    listing = await _service(FailingStore(), metrics).refresh(user_uid="u1")

    assert listing.state is ListingState.ERROR
    assert listing.retryable is True
    assert listing.message == FETCH_FAILED_MESSAGE
    assert listing.is_empty is False
    assert metrics.fetch_error_count == 1


@pytest.mark.asyncio
async def test_stale_refresh_is_discarded() -> None:
    store = SlowFirstStore(
        {CAMPS_COLLECTION: [camp_document("c1", "Central Park Camp")]},
    )
    metrics = InMemoryDiscoveryMetricsCollector()
    service = _service(store, metrics)

    stale_task = asyncio.create_task(service.refresh(CampFilterCriteria(search_query="zzz")))
    await asyncio.sleep(0)
    latest = await service.refresh()
    store.release_first.set()
    stale_result = await stale_task

    assert [camp.id for camp in latest.camps] == ["c1"]
    assert stale_result is latest
    assert service.current is latest
    assert metrics.discarded_refreshes == 1
