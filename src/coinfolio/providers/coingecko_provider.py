"""CoinGecko REST API provider."""

import json
import logging
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FuturesTimeoutError
from typing import Any, Optional

import requests
from requests.adapters import HTTPAdapter

from coinfolio.core.exceptions import DataSourceUnavailable
from coinfolio.providers.market_data_provider import MarketDataRequest

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.coingecko.com/api/v3"
DEFAULT_TIMEOUT_SECONDS = 5.0
MAX_CONCURRENT_REQUESTS = 10


def _build_session() -> requests.Session:
    session = requests.Session()
    session.mount("https://", HTTPAdapter(pool_connections=10, pool_maxsize=20))
    session.mount("http://", HTTPAdapter(pool_connections=10, pool_maxsize=20))
    session.headers.update({"Accept": "application/json"})
    return session


class CoinGeckoProvider:
    """
    Fetches JSON from the CoinGecko v3 API.

    One HTTP GET per call. `timeout_seconds` bounds the whole call, body
    included: the GET runs on a worker thread and the caller stops waiting
    when the deadline passes, even if the server is still trickling bytes.
    No retries: the cache in front of this provider decides when to call again.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds
        self._session = session or _build_session()
        self._headers = {"x-cg-demo-api-key": api_key} if api_key else {}
        self._executor = ThreadPoolExecutor(
            max_workers=MAX_CONCURRENT_REQUESTS,
            thread_name_prefix="coingecko",
        )

    def _get(self, url: str, request: MarketDataRequest) -> requests.Response:
        # Without stream=True the body is fully read before get() returns
        return self._session.get(
            url,
            params=request.query,
            headers=self._headers,
            timeout=self._timeout,
        )

    def fetch(self, request: MarketDataRequest) -> Any:
        """GET the request and return decoded JSON; raise DataSourceUnavailable on any failure."""
        url = f"{self._base_url}{request.path}"
        logger.debug("Fetching %s", request.key)
        future = self._executor.submit(self._get, url, request)
        try:
            response = future.result(timeout=self._timeout)
        except (FuturesTimeoutError, requests.Timeout) as error:
            future.cancel()
            logger.warning("Price source timed out after %ss: %s", self._timeout, request.key)
            raise DataSourceUnavailable(f"Price source timed out: {request.path}") from error
        except requests.RequestException as error:
            logger.warning("Price source request failed: %s (%s)", request.key, error)
            raise DataSourceUnavailable(f"Price source request failed: {request.path}") from error

        if not response.ok:
            logger.warning("Price source returned %s for %s", response.status_code, request.key)
            raise DataSourceUnavailable(
                f"Price source returned status {response.status_code}",
                status=response.status_code,
            )

        try:
            return json.loads(response.text)
        except json.JSONDecodeError as error:
            logger.warning("Price source returned non-JSON content for %s", request.key)
            raise DataSourceUnavailable(
                "Price source returned non-JSON content",
                status=response.status_code,
            ) from error

