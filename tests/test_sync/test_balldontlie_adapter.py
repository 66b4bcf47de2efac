"""Tests for the balldontlie HTTP client using httpx.MockTransport."""
from datetime import date

import httpx
import pytest

from app.services.core.circuit_breaker import create_breaker
from app.services.sync.adapters.balldontlie_adapter import BallDontLieClient


def make_client(handler, fail_max: int = 5) -> BallDontLieClient:
    return BallDontLieClient(
        api_key="test-key",
        base_url="https://api.test/v1",
        transport=httpx.MockTransport(handler),
        breaker=create_breaker("nba_api_test", fail_max=fail_max, reset_timeout=60),
    )


class TestBallDontLieClient:
    """Requests, pagination and failure handling."""

    def test_fetch_teams_sends_key(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers["Authorization"]
            seen["path"] = request.url.path
            return httpx.Response(200, json={"data": [{"id": 1, "full_name": "Atlanta Hawks"}]})

        with make_client(handler) as client:
            teams = client.fetch_teams()

        assert teams == [{"id": 1, "full_name": "Atlanta Hawks"}]
        assert seen == {"auth": "test-key", "path": "/v1/teams"}

    def test_fetch_games_follows_cursor(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            params = dict(request.url.params)
            calls.append(params)
            if "cursor" not in params:
                return httpx.Response(200, json={"data": [{"id": 1}], "meta": {"next_cursor": 77}})
            return httpx.Response(200, json={"data": [{"id": 2}], "meta": {"next_cursor": None}})

        with make_client(handler) as client:
            games = client.fetch_games(date(2025, 1, 8), date(2025, 1, 15))

        assert [g["id"] for g in games] == [1, 2]
        assert calls[0]["start_date"] == "2025-01-08"
        assert calls[0]["end_date"] == "2025-01-15"
        assert calls[1]["cursor"] == "77"

    def test_fetch_game_stats_filters_by_game(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.params["game_ids[]"] == "1001"
            return httpx.Response(200, json={"data": [{"id": 5, "pts": 10}], "meta": {}})

        with make_client(handler) as client:
            assert client.fetch_game_stats(1001) == [{"id": 5, "pts": 10}]

    @pytest.mark.parametrize("response", [
        httpx.Response(401, json={"error": "unauthorized"}),
        httpx.Response(500),
        httpx.Response(200, content=b"not json"),
    ])
    def test_failures_return_none(self, response):
        with make_client(lambda request: response) as client:
            assert client.fetch_teams() is None

    def test_transport_error_returns_none(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with make_client(handler) as client:
            assert client.fetch_teams() is None

    def test_failed_page_fails_whole_listing(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if "cursor" in request.url.params:
                return httpx.Response(503)
            return httpx.Response(200, json={"data": [{"id": 1}], "meta": {"next_cursor": 2}})

        with make_client(handler) as client:
            assert client.fetch_games(date(2025, 1, 8), date(2025, 1, 15)) is None

    def test_open_circuit_skips_requests(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(500)

        with make_client(handler, fail_max=2) as client:
            for _ in range(4):
                assert client.fetch_teams() is None

        assert len(calls) == 2
        assert client.breaker.current_state == "open"
