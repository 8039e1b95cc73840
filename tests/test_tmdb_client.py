"""Tests for the TMDB catalog client."""

import asyncio

import httpx
import pytest

from showtrack_server.services.tmdb_client import TMDBClient, poster_url

DETAILS = {
    "id": 1396,
    "name": "Breaking Bad",
    "original_name": "Breaking Bad",
    "overview": "A chemistry instructor turns to crime.",
    "poster_path": "/ggFHVNu6YYI5L9pCfOacjizRGt.jpg",
    "backdrop_path": "/tsRy63Mu5cu8etL1X7ZLyf7UP1M.jpg",
    "first_air_date": "2008-01-20",
    "last_air_date": "2013-09-29",
    "status": "Ended",
    "genres": [{"id": 18, "name": "Drama"}, {"id": 80, "name": "Crime"}],
    "networks": [{"id": 174, "name": "AMC"}],
    "vote_average": 9.5,
    "vote_count": 8503,
    "number_of_seasons": 5,
    "number_of_episodes": 62,
    "episode_run_time": [47],
    "original_language": "en",
    "origin_country": ["US"],
}


def make_client(handler) -> TMDBClient:
    return TMDBClient("test-key", transport=httpx.MockTransport(handler))


def run(client: TMDBClient, coro):
    async def _run():
        try:
            return await coro
        finally:
            await client.close()

    return asyncio.run(_run())


def test_search_shows_maps_results():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        return httpx.Response(
            200,
            json={
                "results": [
                    {
                        "id": 1399,
                        "name": "Game of Thrones",
                        "overview": "Noble families fight.",
                        "poster_path": "/7WUHnWGx5OO145IRxPDUkQSh4C7.jpg",
                        "first_air_date": "2011-04-17",
                        "vote_average": 8.4,
                    }
                ]
            },
        )

    client = make_client(handler)
    results = run(client, client.search_shows("thrones"))

    assert seen["path"] == "/3/search/tv"
    assert seen["params"]["query"] == "thrones"
    assert seen["params"]["api_key"] == "test-key"
    assert len(results) == 1
    assert results[0].id == "1399"
    assert results[0].title == "Game of Thrones"
    assert results[0].poster_url == "https://image.tmdb.org/t/p/w342/7WUHnWGx5OO145IRxPDUkQSh4C7.jpg"
    assert results[0].total_seasons is None


def test_search_blank_query_skips_request():
    def handler(request):
        raise AssertionError("no request expected")

    client = make_client(handler)

    assert run(client, client.search_shows("   ")) == []


def test_search_error_returns_empty():
    client = make_client(lambda request: httpx.Response(401, json={"status_message": "bad key"}))

    assert run(client, client.search_shows("lost")) == []


def test_get_show_details():
    def handler(request):
        assert request.url.path == "/3/tv/1396"
        return httpx.Response(200, json=DETAILS)

    client = make_client(handler)
    metadata = run(client, client.get_show_details("1396"))

    assert metadata.id == "1396"
    assert metadata.title == "Breaking Bad"
    assert metadata.genres == ["Drama", "Crime"]
    assert metadata.network == "AMC"
    assert metadata.total_seasons == 5
    assert metadata.runtime == 47
    assert metadata.country == "US"


def test_get_show_details_not_found():
    client = make_client(lambda request: httpx.Response(404))

    assert run(client, client.get_show_details("999999")) is None


def test_poster_url():
    assert poster_url("/a.jpg", "w92") == "https://image.tmdb.org/t/p/w92/a.jpg"
    assert poster_url(None) is None
    with pytest.raises(ValueError):
        poster_url("/a.jpg", "w1000")
