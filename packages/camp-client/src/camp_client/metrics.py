from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StageDuration:
    stage: str
    duration_ms: float


class InMemoryDiscoveryMetricsCollector:
    def __init__(self) -> None:
        self.stage_durations: list[StageDuration] = []
        self.refresh_total = 0
        self.fetch_error_count = 0
        self.rejected_records = 0
        self.discarded_refreshes = 0

    def observe_stage_duration(self, stage: str, duration_ms: float) -> None:
        self.stage_durations.append(StageDuration(stage=stage, duration_ms=duration_ms))

    def increment_refresh(self) -> None:
        self.refresh_total += 1

    def increment_fetch_error(self) -> None:
        self.fetch_error_count += 1

    def add_rejected_records(self, count: int) -> None:
        if count <= 0:
            return
        self.rejected_records += count

    def increment_discarded(self) -> None:
        self.discarded_refreshes += 1
