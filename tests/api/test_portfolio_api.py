"""API tests for portfolio endpoints."""

import pytest


def _buy(client, owner: str, asset: str, quantity, unit_price, **extra):
    return client.post(
        f"/portfolio/{owner}/purchases",
        json={"asset": asset, "quantity": quantity, "unit_price": unit_price, **extra},
    )


class TestRecordPurchase:
    """POST /portfolio/{owner_id}/purchases"""

    def test_purchase_creates_position(self, client):
        """
        GIVEN an owner with no holdings
        WHEN they buy 0.5 btc at 60000
        THEN 201 with the new position
        """
        response = _buy(client, "alice", "btc", "0.5", "60000")

        assert response.status_code == 201
        data = response.json()
        assert data["asset_id"] == "bitcoin"
        assert data["symbol"] == "BTC"
        assert data["quantity"] == 0.5
        assert data["average_cost"] == 60000.0

    def test_repeat_purchase_averages_cost(self, client):
        _buy(client, "alice", "sol", 1, 100)
        data = _buy(client, "alice", "SOL", 3, 140).json()

        assert data["quantity"] == 4.0
        assert data["average_cost"] == 130.0

    def test_occurred_at_is_kept(self, client):
        data = _buy(client, "alice", "eth", 1, 2000, occurred_at="2024-05-01T10:00:00Z").json()

        assert data["last_purchase_at"].startswith("2024-05-01T10:00:00")

    @pytest.mark.parametrize("quantity, unit_price", [(0, 100), (-1, 100), (1, 0)])
    def test_invalid_purchase_returns_400(self, client, quantity, unit_price):
        response = _buy(client, "alice", "btc", quantity, unit_price)

        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_PURCHASE"

    def test_unknown_asset_returns_404(self, client):
        response = _buy(client, "alice", "not-a-real-coin-xyz", 1, 1)

        assert response.status_code == 404
        assert response.json()["error"] == "UNKNOWN_ASSET"

    def test_source_down_returns_503(self, client, market_provider):
        market_provider.fail_all = True

        response = _buy(client, "alice", "btc", 1, 1)

        assert response.status_code == 503

    def test_missing_fields_rejected(self, client):
        response = client.post("/portfolio/alice/purchases", json={"asset": "btc"})

        assert response.status_code == 422


class TestGetPortfolio:
    """GET /portfolio/{owner_id}"""

    def test_empty_portfolio_returns_404(self, client):
        response = client.get("/portfolio/nobody")

        assert response.status_code == 404
        assert response.json()["error"] == "EMPTY_PORTFOLIO"

    def test_valuation(self, client):
        """
        GIVEN 2 sol bought at 100
        WHEN the portfolio is valued at a live price of 150
        THEN invested 200, current 300, P/L 100 (50%)
        """
        _buy(client, "alice", "sol", 2, 100)

        response = client.get("/portfolio/alice")

        assert response.status_code == 200
        data = response.json()
        assert data["owner_id"] == "alice"
        assert data["complete"] is True
        item = data["positions"][0]
        assert item["current_price"] == 150.0
        assert item["current_value"] == 300.0
        assert item["profit_loss"] == 100.0
        assert item["profit_loss_percent"] == 50.0
        assert data["total_invested"] == 200.0
        assert data["total_current_value"] == 300.0
        assert data["total_profit_loss"] == 100.0
        assert data["total_profit_loss_percent"] == 50.0
        assert data["last_updated"] is not None

    def test_partial_valuation(self, client, market_provider, fake_clock):
        """
        GIVEN holdings in btc and eth
        WHEN, after the cache expires, only btc can be priced
        THEN both are listed, eth with null prices, and complete is false
        """
        _buy(client, "alice", "btc", 1, 50000)
        _buy(client, "alice", "eth", 2, 1000)
        fake_clock.advance(120)
        market_provider.fail_listing = True
        market_provider.failing_ids = {"ethereum"}

        data = client.get("/portfolio/alice").json()

        by_id = {p["asset_id"]: p for p in data["positions"]}
        assert by_id["bitcoin"]["current_price"] == 60000.0
        assert by_id["ethereum"]["current_price"] is None
        assert by_id["ethereum"]["profit_loss"] is None
        assert data["total_invested"] == 50000.0
        assert data["total_cost_basis"] == 52000.0
        assert data["complete"] is False

    def test_owners_are_separate(self, client):
        _buy(client, "alice", "btc", 1, 50000)

        assert client.get("/portfolio/bob").status_code == 404
