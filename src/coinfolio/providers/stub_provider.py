"""Stub market data provider for offline/testing use."""

from typing import Any

from coinfolio.core.exceptions import DataSourceUnavailable
from coinfolio.core.timezone import now_utc
from coinfolio.providers.market_data_provider import MarketDataRequest


# Deterministic fake market rows:
# id, symbol, name, price, market cap, 24h %, 7d %, 30d %
_STUB_ASSETS: list[tuple[str, str, str, float, float, float, float, float]] = [
    ("bitcoin", "btc", "Bitcoin", 64250.0, 1265000000000.0, 1.85, 4.2, 9.7),
    ("ethereum", "eth", "Ethereum", 3120.5, 375000000000.0, -0.65, 2.1, 5.4),
    ("tether", "usdt", "Tether", 1.0, 112000000000.0, 0.01, 0.0, -0.02),
    ("solana", "sol", "Solana", 148.25, 68000000000.0, 3.4, 8.9, 21.3),
    ("binancecoin", "bnb", "BNB", 575.8, 84000000000.0, 0.42, -1.3, 2.8),
    ("ripple", "xrp", "XRP", 0.5231, 29000000000.0, -2.15, -4.0, 1.1),
    ("cardano", "ada", "Cardano", 0.4512, 16000000000.0, 1.02, -0.5, -6.3),
    ("dogecoin", "doge", "Dogecoin", 0.1245, 18000000000.0, 5.75, 12.4, 30.2),
]

_DESCRIPTIONS = {
    "bitcoin": "Bitcoin is the first decentralized cryptocurrency. It was created in 2009.",
    "ethereum": "Ethereum is a programmable blockchain. Ether is its native asset.",
}


def _market_row(row: tuple, rank: int, currency: str) -> dict[str, Any]:
    asset_id, symbol, name, price, market_cap, ch24, ch7, ch30 = row
    return {
        "id": asset_id,
        "symbol": symbol,
        "name": name,
        "current_price": price,
        "market_cap": market_cap,
        "market_cap_rank": rank,
        "total_volume": market_cap / 20,
        "high_24h": round(price * 1.02, 6),
        "low_24h": round(price * 0.97, 6),
        "price_change_percentage_24h": ch24,
        "price_change_percentage_7d_in_currency": ch7,
        "price_change_percentage_30d_in_currency": ch30,
        "last_updated": now_utc().isoformat(),
        "vs_currency": currency,
    }


class StubMarketDataProvider:
    """
    Stub provider with deterministic fake data for offline operation.

    Answers the ranked listing and detail request shapes with CoinGecko-shaped
    payloads. Unknown asset ids fail like a 404 from the real API.
    """

    def fetch(self, request: MarketDataRequest) -> Any:
        """Return a stub payload for the request."""
        query = request.query
        if request.path == "/coins/markets":
            currency = query.get("vs_currency", "usd")
            count = int(query.get("per_page", "100"))
            ranked = sorted(_STUB_ASSETS, key=lambda r: -r[4])
            return [_market_row(row, rank, currency) for rank, row in enumerate(ranked[:count], 1)]

        if request.path.startswith("/coins/"):
            asset_id = request.path.rsplit("/", 1)[-1]
            return self._details(asset_id)

        raise DataSourceUnavailable(f"Unsupported request: {request.path}", status=404)

    def _details(self, asset_id: str) -> dict[str, Any]:
        ranked = sorted(_STUB_ASSETS, key=lambda r: -r[4])
        for rank, row in enumerate(ranked, 1):
            if row[0] != asset_id:
                continue
            market = _market_row(row, rank, "usd")
            return {
                "id": market["id"],
                "symbol": market["symbol"],
                "name": market["name"],
                "description": {"en": _DESCRIPTIONS.get(asset_id, "")},
                "market_cap_rank": rank,
                "market_data": {
                    "current_price": {"usd": market["current_price"]},
                    "market_cap": {"usd": market["market_cap"]},
                    "total_volume": {"usd": market["total_volume"]},
                    "high_24h": {"usd": market["high_24h"]},
                    "low_24h": {"usd": market["low_24h"]},
                    "price_change_percentage_24h": market["price_change_percentage_24h"],
                    "price_change_percentage_7d": market["price_change_percentage_7d_in_currency"],
                    "price_change_percentage_30d": market["price_change_percentage_30d_in_currency"],
                    "market_cap_rank": rank,
                },
            }
        raise DataSourceUnavailable(f"Asset details not found: {asset_id}", status=404)
