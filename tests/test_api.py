"""HTTP API tests against a loader with canned payloads."""

import pytest
from fastapi.testclient import TestClient

from clubstats.analysis import loader as loader_module
from clubstats.analysis.loader import StatsLoader
from clubstats.api.main import app
from clubstats.config import Settings
from clubstats.data.bsm_api import FetchError, club_stats_url, league_stats_url

SETTINGS = Settings(PROXIES=())


def _player(first, league_id, acronym, season, **values):
    return {
        "person": {"first_name": first, "last_name": "Test"},
        "league": {"id": league_id, "name": acronym, "acronym": acronym, "season": season},
        "values": values,
    }


ROSTER = [
    _player("Anna", 1, "BBL", 2024, at_bats=100, hits=30, base_on_balls=10, runs=15,
            on_base_plus_slugging="0.900"),
    _player("Ben", 1, "BBL", 2024, at_bats=100, hits=20, base_on_balls=5, runs=8,
            on_base_plus_slugging="0.600"),
    _player("Carl", 2, "VL", 2023, at_bats=60, hits=15, base_on_balls=4, runs=6,
            on_base_plus_slugging="0.700"),
]


def _make_loader(roster_ok=True):
    responses = {
        league_stats_url(1, "batting", SETTINGS): {"data": ROSTER[:2]},
        league_stats_url(2, "batting", SETTINGS): {"data": ROSTER[2:]},
    }
    if roster_ok:
        responses[club_stats_url("batting", SETTINGS)] = {"data": ROSTER}

    async def fetch(url):
        if url not in responses:
            raise FetchError(url)
        return responses[url]

    return StatsLoader(fetch_json=fetch, settings=SETTINGS)


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(loader_module, "_default_loader", _make_loader())
    return TestClient(app)


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_columns(client):
    resp = client.get("/api/datasets/pitching/columns")
    assert resp.status_code == 200
    columns = resp.json()["columns"]
    assert columns[:5] == ["Name", "League", "Acronym", "Season", "Age"]
    assert columns[-4:] == ["WHIP", "FIP", "ERA+", "WAR"]


def test_unknown_dataset_is_rejected(client):
    assert client.get("/api/datasets/fielding/columns").status_code == 422


def test_rows_in_roster_order(client):
    body = client.get("/api/datasets/batting").json()
    assert body["total"] == 3
    assert [r["Name"] for r in body["rows"]] == ["Anna Test", "Ben Test", "Carl Test"]
    assert body["rows"][2]["OPS+"] == 100


def test_rows_filtered_and_sorted(client):
    resp = client.get("/api/datasets/batting", params={
        "league": "BBL", "season": "2024", "sort_by": "OPS+", "descending": "true",
    })
    body = resp.json()
    assert [r["Name"] for r in body["rows"]] == ["Anna Test", "Ben Test"]
    assert body["rows"][0]["OPS+"] > body["rows"][1]["OPS+"]


def test_unknown_sort_column(client):
    resp = client.get("/api/datasets/batting", params={"sort_by": "xFIP"})
    assert resp.status_code == 400


def test_filters(client):
    body = client.get("/api/datasets/batting/filters").json()
    assert body == {"leagues": ["BBL", "VL"], "seasons": [2024, 2023]}


def test_dataset_failure_is_bad_gateway(monkeypatch):
    monkeypatch.setattr(loader_module, "_default_loader", _make_loader(roster_ok=False))
    resp = TestClient(app).get("/api/datasets/batting")
    assert resp.status_code == 502
    assert resp.json()["detail"] == "Failed to load dataset"


def test_clear_cache(client):
    client.get("/api/datasets/batting")
    assert len(loader_module.get_loader().baselines("batting")) == 2
    assert client.post("/api/cache/clear").json() == {"status": "cleared"}
    assert len(loader_module.get_loader().baselines("batting")) == 0
