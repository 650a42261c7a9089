from __future__ import annotations

from abc import ABC, abstractmethod
import time
from uuid import uuid4

DEFAULT_TTL_SECONDS = 24 * 60 * 60


def new_idempotency_key() -> str:
    return uuid4().hex


class IdempotencyStore(ABC):
    @abstractmethod
    async def claim(self, key: str, ttl_seconds: int = DEFAULT_TTL_SECONDS) -> bool:
        """Return True for the first caller holding ``key`` within the ttl."""
        raise NotImplementedError

    @abstractmethod
    async def complete(self, key: str, document_id: str) -> None:
        raise NotImplementedError

    @abstractmethod
    async def release(self, key: str) -> None:
        raise NotImplementedError

    @abstractmethod
    async def result_for(self, key: str) -> str | None:
        raise NotImplementedError


class InMemoryIdempotencyStore(IdempotencyStore):
    def __init__(self) -> None:
        self._expires_at: dict[str, float] = {}
        self._results: dict[str, str] = {}

    async def claim(self, key: str, ttl_seconds: int = DEFAULT_TTL_SECONDS) -> bool:
        now = time.time()
        self._evict_expired(now)
        if key in self._expires_at:
            return False
        self._expires_at[key] = now + ttl_seconds
        self._results.pop(key, None)
        return True

    async def complete(self, key: str, document_id: str) -> None:
        self._results[key] = document_id

    async def release(self, key: str) -> None:
        self._expires_at.pop(key, None)
        self._results.pop(key, None)

    async def result_for(self, key: str) -> str | None:
        if self._expires_at.get(key, 0.0) <= time.time():
            return None
        return self._results.get(key)

    def _evict_expired(self, now: float) -> None:
        for stale in [key for key, expires in self._expires_at.items() if expires <= now]:
            del self._expires_at[stale]
            self._results.pop(stale, None)
