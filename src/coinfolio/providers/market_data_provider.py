"""Market data provider protocol and request shapes."""

from dataclasses import dataclass, field
from typing import Any, Protocol
from urllib.parse import urlencode


@dataclass(frozen=True)
class MarketDataRequest:
    """
    One query against the price source: an endpoint path plus query parameters.

    `key` is the canonical request signature used by the cache; parameters are
    sorted so equal requests always share a key.
    """

    path: str
    params: tuple[tuple[str, str], ...] = field(default_factory=tuple)

    @property
    def key(self) -> str:
        if not self.params:
            return self.path
        return f"{self.path}?{urlencode(sorted(self.params))}"

    @property
    def query(self) -> dict[str, str]:
        return dict(self.params)


def top_markets_request(count: int, currency: str) -> MarketDataRequest:
    """Ranked list of `count` assets by market cap, priced in `currency`."""
    return MarketDataRequest(
        path="/coins/markets",
        params=(
            ("vs_currency", currency.lower()),
            ("order", "market_cap_desc"),
            ("per_page", str(count)),
            ("page", "1"),
            ("sparkline", "false"),
            ("price_change_percentage", "24h,7d,30d"),
        ),
    )


def asset_details_request(asset_id: str) -> MarketDataRequest:
    """Full detail record for one asset id."""
    return MarketDataRequest(
        path=f"/coins/{asset_id}",
        params=(
            ("localization", "false"),
            ("tickers", "false"),
            ("market_data", "true"),
            ("community_data", "false"),
            ("developer_data", "false"),
        ),
    )


class MarketDataProvider(Protocol):
    """
    Protocol for market data providers.

    Implementations perform exactly one external call per `fetch` and return the
    decoded JSON payload. Any failure (network, timeout, non-2xx status,
    malformed body) must raise DataSourceUnavailable.
    """

    def fetch(self, request: MarketDataRequest) -> Any:
        """Execute the request and return the decoded payload."""
        ...
