from __future__ import annotations

import json

import pytest

from devkit.config import CampSettings

from camp_engine.exceptions import RemoteFetchError
from camp_engine.filtering import SortMode

import camp_client.__main__ as cli
from camp_client.store import InMemoryDocumentStore


class FailingStore(InMemoryDocumentStore):
    async def list_documents(self, collection, filters=None):
        raise RemoteFetchError("network down")


def test_required_rejects_missing_value() -> None:
    with pytest.raises(RuntimeError, match="CAMP_STORE_BASE_URL"):
        cli._required(None, "CAMP_STORE_BASE_URL")
    assert cli._required("https://store", "CAMP_STORE_BASE_URL") == "https://store"


def test_build_criteria_from_settings() -> None:
    settings = CampSettings(
        CAMP_SEARCH_QUERY="eye",
        CAMP_SORT_BY="RATING",
        CAMP_LOCATIONS="Chennai,Madurai",
        CAMP_DATE_FROM="2026-05-01",
        CAMP_DATE_TO="2026-05-31",
    )
    criteria = cli._build_criteria(settings)

    assert criteria.search_query == "eye"
    assert criteria.sort_by is SortMode.RATING
    assert criteria.locations == frozenset({"Chennai", "Madurai"})
    assert criteria.has_date_range is True


@pytest.mark.parametrize(
    "overrides",
    [
        {"CAMP_SORT_BY": "distance"},
        {"CAMP_DATE_FROM": "2026-05-01"},
        {"CAMP_DATE_FROM": "01/05/2026", "CAMP_DATE_TO": "2026-05-31"},
    ],
)
def test_build_criteria_rejects_invalid_settings(overrides) -> None:
    with pytest.raises(RuntimeError):
        cli._build_criteria(CampSettings(**overrides))


def test_build_criteria_keeps_inverted_range() -> None:
    criteria = cli._build_criteria(CampSettings(CAMP_DATE_FROM="2026-06-01", CAMP_DATE_TO="2026-05-01"))
    assert criteria.date_from > criteria.date_to


def _run(monkeypatch, store) -> int:
    monkeypatch.setenv("CAMP_STORE_BASE_URL", "https://store.example.com")
    monkeypatch.setenv("CAMP_TIMEZONE", "Asia/Kolkata")
    monkeypatch.setattr(cli, "HttpDocumentStore", lambda **_: store)
    return cli.main()


def test_main_prints_summary_for_empty_store(monkeypatch, capsys) -> None:
    assert _run(monkeypatch, InMemoryDocumentStore()) == 0

    lines = capsys.readouterr().out.strip().splitlines()
    assert json.loads(lines[-1]) == {"visible": 0, "hasNotification": False, "localCamps": []}


def test_main_reports_fetch_failure(monkeypatch, capsys) -> None:
    assert _run(monkeypatch, FailingStore()) == 1

    payload = json.loads(capsys.readouterr().out.strip())
    assert payload["retryable"] is True
    assert payload["error"]
