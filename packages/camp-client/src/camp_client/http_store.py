from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

import httpx

from camp_engine.exceptions import RemoteFetchError, RemoteStoreError, RemoteWriteError
from camp_engine.models import Document

from camp_client.store import DocumentStore


class HttpDocumentStore(DocumentStore):
    """REST client for a hosted document database.

    ``GET /v1/collections/{collection}/documents`` takes equality filters as
    query parameters and answers ``{"data": [{"id": ..., "fields": {...}}]}``.
    Single documents live under ``/documents/{id}``.
    """

    def __init__(
        self,
        base_url: str,
        api_token: str | None = None,
        timeout_seconds: float = 5.0,
        client_factory: Callable[[], httpx.AsyncClient] | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_token = api_token
        self._timeout_seconds = timeout_seconds
        self._client_factory = client_factory

    async def list_documents(self, collection: str, filters: Mapping[str, Any] | None = None) -> list[Document]:
        params = {key: _query_value(value) for key, value in (filters or {}).items()}
        response = await self._request("GET", self._collection_url(collection), RemoteFetchError, params=params)
        items = _payload_data(response, RemoteFetchError)
        if not isinstance(items, list):
            raise RemoteFetchError("document store payload missing list field 'data'")
        return [_to_document(item, RemoteFetchError) for item in items]

    async def get_document(self, collection: str, document_id: str) -> Document | None:
        response = await self._request(
            "GET",
            self._document_url(collection, document_id),
            RemoteFetchError,
            allow_not_found=True,
        )
        if response is None:
            return None
        return _to_document(_payload_data(response, RemoteFetchError), RemoteFetchError)

    async def add_document(self, collection: str, data: Mapping[str, Any]) -> str:
        response = await self._request("POST", self._collection_url(collection), RemoteWriteError, json=dict(data))
        created = _payload_data(response, RemoteWriteError)
        if not isinstance(created, dict) or not created.get("id"):
            raise RemoteWriteError("document store did not return the new document id")
        return str(created["id"])

    async def update_document(self, collection: str, document_id: str, fields: Mapping[str, Any]) -> None:
        await self._request("PATCH", self._document_url(collection, document_id), RemoteWriteError, json=dict(fields))

    async def delete_document(self, collection: str, document_id: str) -> None:
        await self._request("DELETE", self._document_url(collection, document_id), RemoteWriteError)

    def _collection_url(self, collection: str) -> str:
        return f"{self._base_url}/v1/collections/{collection}/documents"

    def _document_url(self, collection: str, document_id: str) -> str:
        return f"{self._collection_url(collection)}/{document_id}"

    def _headers(self) -> dict[str, str]:
        if not self._api_token:
            return {}
        return {"Authorization": f"Bearer {self._api_token}"}

    async def _request(
        self,
        method: str,
        url: str,
        error_type: type[RemoteStoreError],
        allow_not_found: bool = False,
        **kwargs: Any,
    ) -> httpx.Response | None:
        try:
            factory = self._client_factory or (lambda: httpx.AsyncClient(timeout=self._timeout_seconds))
            async with factory() as client:
                response = await client.request(method, url, headers=self._headers(), **kwargs)
                if allow_not_found and response.status_code == 404:
                    return None
                response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise error_type(f"document store timeout: {method} {url}") from exc
        except httpx.HTTPStatusError as exc:
            raise error_type(
                f"document store returned error: status={exc.response.status_code}, {method} {url}"
            ) from exc
        except httpx.HTTPError as exc:
            raise error_type(f"document store request failed: {method} {url}") from exc
        return response


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _payload_data(response: httpx.Response | None, error_type: type[RemoteStoreError]) -> Any:
    if response is None:
        raise error_type("document store returned no response")
    try:
        payload = response.json()
    except ValueError as exc:
        raise error_type("document store payload is not json") from exc
    if not isinstance(payload, dict) or "data" not in payload:
        raise error_type("document store payload missing field 'data'")
    return payload["data"]


def _to_document(item: Any, error_type: type[RemoteStoreError]) -> Document:
    if not isinstance(item, dict) or "id" not in item:
        raise error_type("document store item is not an object with an id")
    fields = item.get("fields") or {}
    if not isinstance(fields, dict):
        raise error_type("document store item fields are not an object")
    return Document(id=str(item["id"]), data=fields)
