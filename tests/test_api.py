"""API tests."""

import pytest
from fastapi.testclient import TestClient

from showtrack_server.api.deps import get_tmdb_client
from showtrack_server.main import app, show_service
from showtrack_server.models.show import ShowMetadata, ShowSearchResult

ALICE = {"Authorization": "Bearer alice-token"}
BOB = {"Authorization": "Bearer bob-token"}


@pytest.fixture(scope="module")
def client():
    """Create a test client with the app lifespan running."""
    with TestClient(app) as client:
        yield client


@pytest.fixture(autouse=True)
def clean_state(client, clock, monkeypatch):
    """Start each test with no shows and a fixed clock."""
    monkeypatch.setattr(show_service, "clock", clock)
    for headers in (ALICE, BOB):
        for show in client.get("/api/shows", headers=headers).json():
            client.delete(f"/api/shows/{show['show_id']}", headers=headers)
    yield
    app.dependency_overrides.clear()


def add_show(client, title="Lost", seasons=3, headers=ALICE) -> dict:
    response = client.post(
        "/api/shows", json={"title": title, "season_count": seasons}, headers=headers
    )
    assert response.status_code == 201
    return response.json()


def test_root(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Show Tracker Server"
    assert "version" in data


def test_health(client):
    """Test health endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["catalog"] is False


@pytest.mark.parametrize(
    "headers",
    [{}, {"Authorization": "Bearer nope"}, {"Authorization": "alice-token"}],
)
def test_requests_without_identity_rejected(client, headers):
    """Missing, unknown or malformed tokens are unauthenticated."""
    assert client.get("/api/shows", headers=headers).status_code == 401
    response = client.post("/api/shows", json={"title": "Lost", "season_count": 1}, headers=headers)
    assert response.status_code == 401
    assert client.get("/api/shows/stream", headers=headers).status_code == 401


def test_create_show(client):
    """Test adding a show manually."""
    data = add_show(client, seasons=2)

    assert data["title"] == "Lost"
    assert data["user_id"] == "alice"
    assert data["seasons"] == [
        {"id": 1, "status": "not-watched", "started_date": None, "watched_date": None},
        {"id": 2, "status": "not-watched", "started_date": None, "watched_date": None},
    ]
    assert data["progress_summary"] == {"watched": 0, "watching": 0, "total": 2}


def test_create_show_validates_season_count(client):
    response = client.post("/api/shows", json={"title": "Lost", "season_count": 0}, headers=ALICE)
    assert response.status_code == 422


def test_list_shows_newest_first_per_user(client, clock_at, monkeypatch):
    monkeypatch.setattr(show_service, "clock", clock_at(2024, 1))
    add_show(client, title="First")
    monkeypatch.setattr(show_service, "clock", clock_at(2024, 2))
    add_show(client, title="Second")
    add_show(client, title="Bob's", headers=BOB)

    alice_titles = [s["title"] for s in client.get("/api/shows", headers=ALICE).json()]
    bob_titles = [s["title"] for s in client.get("/api/shows", headers=BOB).json()]

    assert alice_titles == ["Second", "First"]
    assert bob_titles == ["Bob's"]


def test_get_show_other_user_not_found(client):
    show = add_show(client)

    assert client.get(f"/api/shows/{show['show_id']}", headers=ALICE).status_code == 200
    assert client.get(f"/api/shows/{show['show_id']}", headers=BOB).status_code == 404


def test_mark_season_watched_cascades(client):
    """Example: marking season 3 of 3 watched in 2024-03 finishes all seasons."""
    show = add_show(client, seasons=3)

    response = client.put(
        f"/api/shows/{show['show_id']}/seasons/3/status",
        json={"status": "watched"},
        headers=ALICE,
    )

    assert response.status_code == 200
    data = response.json()
    for season in data["seasons"]:
        assert season["status"] == "watched"
        assert season["started_date"] == "2024-03"
        assert season["watched_date"] == "2024-03"
    assert data["progress_summary"]["watched"] == 3

    stored = client.get(f"/api/shows/{show['show_id']}", headers=ALICE).json()
    assert stored["seasons"] == data["seasons"]


def test_mark_season_not_watched_clears_dates(client):
    show = add_show(client, seasons=2)
    url = f"/api/shows/{show['show_id']}/seasons"
    client.put(f"{url}/2/status", json={"status": "watching"}, headers=ALICE)

    response = client.put(f"{url}/2/status", json={"status": "not-watched"}, headers=ALICE)

    seasons = response.json()["seasons"]
    assert seasons[0]["status"] == "watched"
    assert seasons[1] == {"id": 2, "status": "not-watched", "started_date": None, "watched_date": None}


def test_status_unknown_season(client):
    show = add_show(client, seasons=2)

    response = client.put(
        f"/api/shows/{show['show_id']}/seasons/9/status",
        json={"status": "watched"},
        headers=ALICE,
    )

    assert response.status_code == 404


def test_status_invalid_value(client):
    show = add_show(client, seasons=1)

    response = client.put(
        f"/api/shows/{show['show_id']}/seasons/1/status",
        json={"status": "finished"},
        headers=ALICE,
    )

    assert response.status_code == 422


def test_set_manual_date(client):
    show = add_show(client, seasons=2)
    url = f"/api/shows/{show['show_id']}/seasons/2"

    response = client.put(f"{url}/date", json={"kind": "watched", "value": "2021-07"}, headers=ALICE)

    assert response.status_code == 200
    seasons = response.json()["seasons"]
    assert seasons[0]["status"] == "not-watched"
    assert seasons[1] == {"id": 2, "status": "not-watched", "started_date": None, "watched_date": "2021-07"}


def test_set_manual_date_invalid_format(client):
    show = add_show(client, seasons=1)

    response = client.put(
        f"/api/shows/{show['show_id']}/seasons/1/date",
        json={"kind": "started", "value": "July 2021"},
        headers=ALICE,
    )

    assert response.status_code == 422
    assert "YYYY-MM" in response.json()["detail"]


def test_set_manual_date_rejects_trailing_newline(client):
    show = add_show(client, seasons=1)

    response = client.put(
        f"/api/shows/{show['show_id']}/seasons/1/date",
        json={"kind": "watched", "value": "2021-07\n"},
        headers=ALICE,
    )

    assert response.status_code == 422
    stored = client.get(f"/api/shows/{show['show_id']}", headers=ALICE).json()
    assert stored["seasons"][0]["watched_date"] is None


def test_update_show_details(client):
    show = add_show(client)

    response = client.patch(
        f"/api/shows/{show['show_id']}",
        json={"title": "LOST", "user_notes": "Season 4 is the best", "is_favorite": True},
        headers=ALICE,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "LOST"
    assert data["user_notes"] == "Season 4 is the best"
    assert data["is_favorite"] is True
    assert data["seasons"] == show["seasons"]


def test_delete_show(client):
    show = add_show(client)

    assert client.delete(f"/api/shows/{show['show_id']}", headers=BOB).status_code == 404
    assert client.delete(f"/api/shows/{show['show_id']}", headers=ALICE).status_code == 200
    assert client.get(f"/api/shows/{show['show_id']}", headers=ALICE).status_code == 404


def test_create_from_catalog_without_catalog(client):
    """Without a catalog client the search hint sets the season count."""
    response = client.post(
        "/api/shows/from-catalog",
        json={"external_id": "1396", "title": "Breaking Bad", "total_seasons": 5},
        headers=ALICE,
    )

    assert response.status_code == 201
    data = response.json()
    assert data["external_id"] == "1396"
    assert len(data["seasons"]) == 5
    assert data["metadata"] is None


def test_catalog_disabled(client):
    assert client.get("/api/catalog/search", params={"q": "lost"}).status_code == 503


class StubCatalog:
    async def search_shows(self, query):
        return [ShowSearchResult(id="4607", title="Lost", total_seasons=6)]

    async def get_show_details(self, external_id):
        if external_id != "4607":
            return None
        return ShowMetadata(id="4607", title="Lost", total_seasons=6, network="ABC")


def test_catalog_search_and_details(client):
    app.dependency_overrides[get_tmdb_client] = StubCatalog

    search = client.get("/api/catalog/search", params={"q": "lost"})
    details = client.get("/api/catalog/shows/4607")
    missing = client.get("/api/catalog/shows/1")

    assert search.status_code == 200
    assert search.json()[0]["title"] == "Lost"
    assert details.json()["network"] == "ABC"
    assert missing.status_code == 404


def test_close_streams(client):
    assert client.delete("/api/shows/stream", headers=ALICE).json() == {"status": "ok"}
    assert client.delete("/api/shows/stream").status_code == 401
