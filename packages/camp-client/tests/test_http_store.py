from __future__ import annotations

import json

import httpx
import pytest

from camp_engine.exceptions import RemoteFetchError, RemoteWriteError

from camp_client.http_store import HttpDocumentStore


def build_store(handler, api_token: str | None = "secret-token") -> HttpDocumentStore:
    transport = httpx.MockTransport(handler)
    return HttpDocumentStore(
        base_url="https://store.example.com/",
        api_token=api_token,
        timeout_seconds=5.0,
        client_factory=lambda: httpx.AsyncClient(transport=transport, timeout=5.0),
    )


@pytest.mark.asyncio
async def test_list_documents_sends_filters_and_parses_payload() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            status_code=200,
            json={"data": [{"id": "c1", "fields": {"healthCampName": "Eye Camp"}}]},
        )

    documents = await build_store(handler).list_documents("registrations", {"campId": "c1", "verified": True})

    assert documents[0].id == "c1"
    assert documents[0].data == {"healthCampName": "Eye Camp"}
    assert seen[0].url.path == "/v1/collections/registrations/documents"
    assert seen[0].url.params["campId"] == "c1"
    assert seen[0].url.params["verified"] == "true"
    assert seen[0].headers["Authorization"] == "Bearer secret-token"


@pytest.mark.asyncio
async def test_list_documents_maps_http_error() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code=503, json={"message": "down"})

    with pytest.raises(RemoteFetchError):
        await build_store(handler).list_documents("healthCamps")


@pytest.mark.asyncio
async def test_list_documents_maps_timeout() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(RemoteFetchError):
        await build_store(handler).list_documents("healthCamps")


@pytest.mark.asyncio
async def test_list_documents_rejects_malformed_payload() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code=200, json={"items": []})

    with pytest.raises(RemoteFetchError):
        await build_store(handler).list_documents("healthCamps")


@pytest.mark.asyncio
async def test_get_document_returns_none_on_404() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code=404, json={"message": "not found"})

    assert await build_store(handler, api_token=None).get_document("healthCamps", "missing") is None


@pytest.mark.asyncio
async def test_add_and_update_document() -> None:
    requests: list[tuple[str, str, dict]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append((request.method, request.url.path, json.loads(request.content or b"{}")))
        if request.method == "POST":
            return httpx.Response(status_code=201, json={"data": {"id": "new-1"}})
        return httpx.Response(status_code=200, json={"data": {}})

    store = build_store(handler)
    new_id = await store.add_document("feedbacks", {"rating": 5})
    await store.update_document("registrations", "r1", {"verified": True})

    assert new_id == "new-1"
    assert requests == [
        ("POST", "/v1/collections/feedbacks/documents", {"rating": 5}),
        ("PATCH", "/v1/collections/registrations/documents/r1", {"verified": True}),
    ]


@pytest.mark.asyncio
async def test_write_errors_map_to_remote_write_error() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code=403, json={"message": "forbidden"})

    with pytest.raises(RemoteWriteError):
        await build_store(handler).add_document("feedbacks", {"rating": 5})
    with pytest.raises(RemoteWriteError):
        await build_store(handler).delete_document("healthCamps", "c1")
