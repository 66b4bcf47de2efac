"""balldontlie API adapter.

Thin HTTP client for the three endpoints the NBA sync needs:

- GET /teams                       -> every franchise
- GET /games?start_date&end_date   -> games in a date window (cursor paged)
- GET /stats?game_ids[]=<id>       -> player box scores for one game (cursor paged)

Every request goes through the ``nba_api`` circuit breaker. Failures are
logged and counted, and surface to the caller as ``None`` so one bad step
never aborts a whole sync run. There are no automatic retries.
"""
import logging
from datetime import date
from typing import Any, Dict, List, Optional

import httpx
from pybreaker import CircuitBreaker

from app.core import metrics
from app.core.config import settings
from app.services.core.circuit_breaker import call_with_breaker, nba_api_breaker

logger = logging.getLogger(__name__)

PAGE_SIZE = 100
MAX_PAGES = 50


class BallDontLieClient:
    """
    Synchronous balldontlie client.

    Args:
        api_key: API key sent as the Authorization header (defaults to settings)
        base_url: API root (defaults to settings)
        timeout: Request timeout in seconds (defaults to settings)
        transport: Optional httpx transport, used by tests
        breaker: Circuit breaker guarding every request
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
        breaker: Optional[CircuitBreaker] = None,
    ):
        self.api_key = api_key or settings.NBA_API_KEY
        self.breaker = breaker or nba_api_breaker
        self._client = httpx.Client(
            base_url=base_url or settings.NBA_API_BASE_URL,
            headers={"Authorization": self.api_key or ""},
            timeout=timeout or settings.NBA_API_TIMEOUT,
            transport=transport,
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def close(self) -> None:
        self._client.close()

    def _request(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        response = self._client.get(path, params=params)
        response.raise_for_status()
        return response.json()

    def _get(self, endpoint: str, path: str, params: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        """One guarded request. None on HTTP, transport or decode failure and when the circuit is open."""
        try:
            payload = call_with_breaker(self.breaker, self._request, path, params)
        except httpx.HTTPStatusError as e:
            logger.warning(f"balldontlie {endpoint} returned {e.response.status_code}")
            metrics.record_nba_api_request_failure(endpoint, f"http_{e.response.status_code}")
            return None
        except httpx.RequestError as e:
            logger.warning(f"balldontlie {endpoint} request failed: {e}")
            metrics.record_nba_api_request_failure(endpoint, type(e).__name__)
            return None
        except ValueError as e:
            logger.warning(f"balldontlie {endpoint} returned invalid JSON: {e}")
            metrics.record_nba_api_request_failure(endpoint, "decode_error")
            return None

        if payload is None:
            metrics.record_nba_api_request_failure(endpoint, "circuit_open")
            return None

        metrics.record_nba_api_request_success(endpoint)
        return payload

    def _get_all(self, endpoint: str, path: str, params: Dict[str, Any]) -> Optional[List[Dict[str, Any]]]:
        """Follow ``meta.next_cursor`` until exhausted. None if any page fails."""
        records: List[Dict[str, Any]] = []
        cursor = None
        for _ in range(MAX_PAGES):
            page_params = dict(params, per_page=PAGE_SIZE)
            if cursor is not None:
                page_params["cursor"] = cursor

            payload = self._get(endpoint, path, page_params)
            if payload is None:
                return None

            records.extend(payload.get("data") or [])
            cursor = (payload.get("meta") or {}).get("next_cursor")
            if not cursor:
                break
        else:
            logger.warning(f"balldontlie {endpoint} stopped after {MAX_PAGES} pages")

        return records

    def fetch_teams(self) -> Optional[List[Dict[str, Any]]]:
        payload = self._get("teams", "/teams")
        if payload is None:
            return None
        teams = payload.get("data") or []
        logger.info(f"Fetched {len(teams)} teams from balldontlie")
        return teams

    def fetch_games(self, start_date: date, end_date: date) -> Optional[List[Dict[str, Any]]]:
        """Games between two dates, inclusive."""
        games = self._get_all(
            "games",
            "/games",
            {"start_date": start_date.isoformat(), "end_date": end_date.isoformat()},
        )
        if games is not None:
            logger.info(f"Fetched {len(games)} games from balldontlie ({start_date} to {end_date})")
        return games

    def fetch_game_stats(self, game_id: int) -> Optional[List[Dict[str, Any]]]:
        """Player box-score lines for one game."""
        return self._get_all("stats", "/stats", {"game_ids[]": game_id})
