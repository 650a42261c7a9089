from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
import copy
from typing import Any
from uuid import uuid4

from camp_engine.exceptions import RemoteWriteError
from camp_engine.models import Document

CAMPS_COLLECTION = "healthCamps"
FEEDBACK_COLLECTION = "feedbacks"
COMPLAINTS_COLLECTION = "complaints"
REGISTRATIONS_COLLECTION = "registrations"
USERS_COLLECTION = "users"


class DocumentStore(ABC):
    @abstractmethod
    async def list_documents(self, collection: str, filters: Mapping[str, Any] | None = None) -> list[Document]:
        raise NotImplementedError

    @abstractmethod
    async def get_document(self, collection: str, document_id: str) -> Document | None:
        raise NotImplementedError

    @abstractmethod
    async def add_document(self, collection: str, data: Mapping[str, Any]) -> str:
        raise NotImplementedError

    @abstractmethod
    async def update_document(self, collection: str, document_id: str, fields: Mapping[str, Any]) -> None:
        raise NotImplementedError

    @abstractmethod
    async def delete_document(self, collection: str, document_id: str) -> None:
        raise NotImplementedError


class InMemoryDocumentStore(DocumentStore):
    def __init__(self, seed: Mapping[str, Iterable[Document]] | None = None) -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}
        for collection, documents in (seed or {}).items():
            bucket = self._collections.setdefault(collection, {})
            for document in documents:
                bucket[document.id] = copy.deepcopy(document.data)

    async def list_documents(self, collection: str, filters: Mapping[str, Any] | None = None) -> list[Document]:
        bucket = self._collections.get(collection, {})
        return [
            Document(id=doc_id, data=copy.deepcopy(data))
            for doc_id, data in bucket.items()
            if all(data.get(key) == value for key, value in (filters or {}).items())
        ]

    async def get_document(self, collection: str, document_id: str) -> Document | None:
        data = self._collections.get(collection, {}).get(document_id)
        if data is None:
            return None
        return Document(id=document_id, data=copy.deepcopy(data))

    async def add_document(self, collection: str, data: Mapping[str, Any]) -> str:
        document_id = uuid4().hex
        self._collections.setdefault(collection, {})[document_id] = copy.deepcopy(dict(data))
        return document_id

    async def update_document(self, collection: str, document_id: str, fields: Mapping[str, Any]) -> None:
        data = self._collections.get(collection, {}).get(document_id)
        if data is None:
            raise RemoteWriteError(f"document not found: {collection}/{document_id}")
        data.update(copy.deepcopy(dict(fields)))

    async def delete_document(self, collection: str, document_id: str) -> None:
        bucket = self._collections.get(collection, {})
        if document_id not in bucket:
            raise RemoteWriteError(f"document not found: {collection}/{document_id}")
        del bucket[document_id]
