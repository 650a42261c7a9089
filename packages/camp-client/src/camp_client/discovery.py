from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
import logging
from time import perf_counter
from typing import TypeVar

from opentelemetry import trace

from devkit.timezone import now_local

from camp_engine.aggregator import aggregate_camps
from camp_engine.exceptions import RemoteFetchError
from camp_engine.filtering import CampFilterCriteria, available_locations, filter_camps
from camp_engine.models import Camp, Feedback, ZeroRatingPolicy
from camp_engine.normalizer import CampNormalizer
from camp_engine.notifications import match_local_camps

from camp_client.metrics import InMemoryDiscoveryMetricsCollector
from camp_client.store import CAMPS_COLLECTION, FEEDBACK_COLLECTION, USERS_COLLECTION, DocumentStore

R = TypeVar("R")
logger = logging.getLogger(__name__)

FETCH_FAILED_MESSAGE = "Failed to load health camps. Please try again."


class ListingState(str, Enum):
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class CampListing:
    state: ListingState
    generation: int = 0
    camps: list[Camp] = field(default_factory=list)
    local_camps: list[Camp] = field(default_factory=list)
    locations: list[str] = field(default_factory=list)
    user_locality: str | None = None
    notice: str | None = None
    message: str | None = None
    retryable: bool = False

    @property
    def has_notification(self) -> bool:
        return bool(self.local_camps)

    @property
    def is_empty(self) -> bool:
        return self.state is ListingState.READY and not self.camps


class CampDiscoveryService:
    """Fetch, aggregate and filter camps for one user's listing.

    Each ``refresh`` gets a generation number; a refresh that finishes after
    a newer one started is dropped so the visible listing is always the
    latest one requested.
    """

    def __init__(
        self,
        store: DocumentStore,
        normalizer: CampNormalizer | None = None,
        zero_policy: ZeroRatingPolicy = ZeroRatingPolicy.INCLUDE,
        metrics: InMemoryDiscoveryMetricsCollector | None = None,
        clock: Callable[[], datetime] = now_local,
    ) -> None:
        self._store = store
        self._normalizer = normalizer or CampNormalizer()
        self._zero_policy = zero_policy
        self._metrics = metrics
        self._clock = clock
        self._tracer = trace.get_tracer("camp-discovery")
        self._generation = 0
        self._current = CampListing(state=ListingState.LOADING)
        self._aggregated: list[Camp] = []
        self._notice: str | None = None
        self._locality: str | None = None

    @property
    def current(self) -> CampListing:
        return self._current

    async def fetch_user_locality(self, user_uid: str | None) -> str | None:
        if not user_uid:
            return None
        documents = await self._store.list_documents(USERS_COLLECTION, {"uid": user_uid})
        if not documents:
            return None
        return self._normalizer.normalize_user_profile(documents[0]).locality

    async def refresh(self, criteria: CampFilterCriteria | None = None, user_uid: str | None = None) -> CampListing:
        self._generation += 1
        generation = self._generation
        if self._metrics:
            self._metrics.increment_refresh()
        logger.info("camp_refresh_started", extra={"generation": generation})

        with self._tracer.start_as_current_span("camp_discovery.refresh") as span:
            span.set_attribute("camp.refresh.generation", generation)
            started = perf_counter()
            try:
                camp_documents, feedback_documents, locality = await asyncio.gather(
                    self._store.list_documents(CAMPS_COLLECTION),
                    self._store.list_documents(FEEDBACK_COLLECTION),
                    self.fetch_user_locality(user_uid),
                )
            except RemoteFetchError as exc:
                if self._metrics:
                    self._metrics.increment_fetch_error()
                span.set_attribute("camp.refresh.failed", True)
                logger.warning("camp_refresh_failed", extra={"generation": generation, "error": str(exc)})
                return self._publish(
                    CampListing(
                        state=ListingState.ERROR,
                        generation=generation,
                        message=FETCH_FAILED_MESSAGE,
                        retryable=True,
                    )
                )
            self._observe("fetch", started)

            if generation != self._generation:
                return self._discard(generation)

            normalized = self._time("normalize", lambda: self._normalizer.normalize_camps(camp_documents))
            feedback: list[Feedback] = [self._normalizer.normalize_feedback(item) for item in feedback_documents]
            if self._metrics:
                self._metrics.add_rejected_records(len(normalized.rejected))
            self._aggregated = self._time(
                "aggregate",
                lambda: aggregate_camps(normalized.accepted, feedback, self._zero_policy),
            )
            self._notice = normalized.notice
            self._locality = locality
            listing = self._build_listing(generation, criteria)
            span.set_attribute("camp.refresh.visible_count", len(listing.camps))
        logger.info(
            "camp_refresh_completed",
            extra={
                "generation": generation,
                "visible_count": len(listing.camps),
                "local_count": len(listing.local_camps),
                "rejected_count": len(normalized.rejected),
            },
        )
        return self._publish(listing)

    def apply_criteria(self, criteria: CampFilterCriteria) -> CampListing:
        """Re-filter the last fetched camps without going back to the store."""
        if self._current.state is not ListingState.READY:
            return self._current
        self._generation += 1
        return self._publish(self._build_listing(self._generation, criteria))

    def _build_listing(self, generation: int, criteria: CampFilterCriteria | None) -> CampListing:
        now = self._clock()
        zone = self._normalizer.zone
        visible = self._time("filter", lambda: filter_camps(self._aggregated, criteria, now=now, zone=zone))
        local = match_local_camps(self._aggregated, self._locality, now=now, zone=zone)
        return CampListing(
            state=ListingState.READY,
            generation=generation,
            camps=visible,
            local_camps=local,
            locations=available_locations(self._aggregated),
            user_locality=self._locality,
            notice=self._notice,
        )

    def _publish(self, listing: CampListing) -> CampListing:
        if listing.generation != self._generation:
            return self._discard(listing.generation)
        self._current = listing
        return listing

    def _discard(self, generation: int) -> CampListing:
        if self._metrics:
            self._metrics.increment_discarded()
        logger.info("camp_refresh_discarded", extra={"generation": generation, "latest": self._generation})
        return self._current

    def _time(self, stage: str, action: Callable[[], R]) -> R:
        started = perf_counter()
        result = action()
        self._observe(stage, started)
        return result

    def _observe(self, stage: str, started: float) -> None:
        if self._metrics:
            self._metrics.observe_stage_duration(stage, (perf_counter() - started) * 1000.0)
