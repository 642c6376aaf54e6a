"""API endpoint tests for the store credit risk engine."""
from fastapi.testclient import TestClient

from credit_risk.main import app

NOW = 1_760_000_000_000
DAY = 24 * 60 * 60 * 1000


def _credit(credit_id, customer_id, amount, remaining, created_days_ago, due_in_days):
    return {
        "id": credit_id,
        "customer_id": customer_id,
        "customer_name": "Amina" if customer_id == "cust-1" else "Sara",
        "amount": amount,
        "paid_amount": amount - remaining,
        "remaining_amount": remaining,
        "due_date": NOW + due_in_days * DAY,
        "created_at": NOW - created_days_ago * DAY,
    }


def _snapshot(**extra):
    body = {
        "credits": [
            _credit("cr-a", "cust-1", 1000, 1000, created_days_ago=70, due_in_days=-40),
            _credit("cr-b", "cust-1", 1000, 0, created_days_ago=20, due_in_days=10),
            _credit("cr-c", "cust-2", 500, 500, created_days_ago=5, due_in_days=60),
        ],
        "payments": [
            {
                "id": "pay-1",
                "credit_id": "cr-b",
                "customer_id": "cust-1",
                "amount": 1000,
                "created_at": NOW - 2 * DAY,
            },
        ],
        "credit_increases": [
            {
                "id": "inc-1",
                "credit_id": "cr-b",
                "customer_id": "cust-1",
                "amount": 250,
                "note": "extra stock",
                "created_at": NOW - 5 * DAY,
            },
        ],
        "as_of": NOW,
    }
    body.update(extra)
    return body


class TestHealthEndpoint:
    """Test the health check endpoint."""

    def setup_method(self):
        self.client = TestClient(app)

    def test_health_check(self):
        """Health endpoint should return ok status."""
        response = self.client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["service"] == "credit-risk-engine"


class TestMetricsEndpoint:
    """Test the Prometheus metrics endpoint."""

    def setup_method(self):
        self.client = TestClient(app)

    def test_metrics_endpoint(self):
        """Metrics endpoint should expose scoring counters."""
        self.client.post("/v1/predictions", json=_snapshot())

        response = self.client.get("/metrics")
        assert response.status_code == 200
        assert "credit_risk_prediction_total" in response.text


class TestPredictionEndpoints:
    """Test the /v1/predictions endpoints."""

    def setup_method(self):
        self.client = TestClient(app)

    def test_outstanding_predictions(self):
        """Only credits with a balance are predicted, riskiest first."""
        response = self.client.post("/v1/predictions", json=_snapshot())
        assert response.status_code == 200

        data = response.json()
        assert [p["credit_id"] for p in data] == ["cr-a", "cr-c"]
        assert data[0]["risk_level"] == "critical"
        assert data[0]["days_until_due"] == -40
        assert data[0]["predicted_payment_date"] is None

    def test_single_prediction(self):
        response = self.client.post("/v1/predictions/cr-c", json=_snapshot())
        assert response.status_code == 200

        data = response.json()
        assert data["credit_id"] == "cr-c"
        assert data["customer_name"] == "Sara"
        assert data["credit_amount"] == 500
        assert 0 <= data["probability"] <= 100
        assert 0 <= data["confidence"] <= 100

    def test_unknown_credit_returns_404(self):
        response = self.client.post("/v1/predictions/cr-missing", json=_snapshot())
        assert response.status_code == 404
        assert response.json()["detail"] == "Credit not found: cr-missing"
        assert "X-Request-ID" in response.headers

    def test_empty_snapshot(self):
        response = self.client.post("/v1/predictions", json={})
        assert response.status_code == 200
        assert response.json() == []

    def test_invalid_credit_is_rejected(self):
        """Missing fields should be rejected."""
        response = self.client.post(
            "/v1/predictions",
            json={"credits": [{"id": "cr-x", "customer_id": "cust-1"}]},
        )
        assert response.status_code == 422

    def test_negative_amount_is_rejected(self):
        body = _snapshot()
        body["credits"][0]["amount"] = -10
        response = self.client.post("/v1/predictions", json=body)
        assert response.status_code == 422


class TestRiskProfileEndpoints:
    """Test the customer risk profile endpoints."""

    def setup_method(self):
        self.client = TestClient(app)

    def test_risk_profile(self):
        response = self.client.post(
            "/v1/customers/cust-2/risk-profile",
            json=_snapshot(customer_name="Sara"),
        )
        assert response.status_code == 200

        data = response.json()
        assert data["customer_id"] == "cust-2"
        assert data["customer_name"] == "Sara"
        assert data["total_credits"] == 500
        assert data["total_paid"] == 0
        # Nothing paid back yet (+40)
        assert data["risk_score"] == 40
        assert data["risk_level"] == "medium"
        assert data["recommendation_codes"] == [
            "keep_regular_contact",
            "offer_early_payment_incentives",
        ]
        assert data["recommendations"][0] == "Maintenir une communication régulière"

    def test_risk_profile_in_english(self):
        response = self.client.post(
            "/v1/customers/cust-2/risk-profile?language=en",
            json=_snapshot(customer_name="Sara"),
        )
        assert response.status_code == 200
        assert response.json()["recommendations"][0] == "Keep regular contact"

    def test_unsupported_language(self):
        response = self.client.post(
            "/v1/customers/cust-2/risk-profile?language=de",
            json=_snapshot(customer_name="Sara"),
        )
        assert response.status_code == 422

    def test_missing_customer_name(self):
        response = self.client.post("/v1/customers/cust-2/risk-profile", json=_snapshot())
        assert response.status_code == 422

    def test_risk_profiles_sorted_by_score(self):
        body = _snapshot(customers=[
            {"id": "cust-3", "name": "Nadia"},
            {"id": "cust-2", "name": "Sara"},
        ])
        response = self.client.post("/v1/risk-profiles", json=body)
        assert response.status_code == 200

        data = response.json()
        assert [p["customer_id"] for p in data] == ["cust-2", "cust-3"]
        assert [p["risk_score"] for p in data] == [40, 0]


class TestCreditRecommendationEndpoint:

    def setup_method(self):
        self.client = TestClient(app)

    def test_new_customer(self):
        response = self.client.post("/v1/customers/cust-9/credit-recommendation", json=_snapshot())
        assert response.status_code == 200

        data = response.json()
        assert data["recommended"] == 500
        assert data["max"] == 1000
        assert data["reason_code"] == "new_customer"

    def test_existing_customer(self):
        response = self.client.post(
            "/v1/customers/cust-1/credit-recommendation?language=en",
            json=_snapshot(),
        )
        assert response.status_code == 200

        data = response.json()
        # 1000 paid out of 2000 issued, average credit 1000
        assert data["reason_code"] == "average_history"
        assert data["recommended"] == 1000
        assert data["max"] == 1200
        assert data["reason"] == "Average history - Keep the same level"


class TestPortfolioEndpoints:

    def setup_method(self):
        self.client = TestClient(app)

    def test_summary(self):
        response = self.client.post("/v1/portfolio/summary", json=_snapshot(active_customers=2))
        assert response.status_code == 200
        assert response.json() == {
            "total_credits": 2500,
            "total_paid": 1000,
            "overdue_credits": 1,
            "total_overdue": 1000,
            "active_customers": 2,
        }

    def test_summary_ignores_stored_status(self):
        """Status is derived from balance and due date, not taken from the record."""
        body = _snapshot()
        body["credits"][0]["status"] = "active"  # 40 days overdue with full balance
        body["credits"][1]["status"] = "overdue"  # fully paid

        response = self.client.post("/v1/portfolio/summary", json=body)
        assert response.status_code == 200

        data = response.json()
        assert data["overdue_credits"] == 1
        assert data["total_overdue"] == 1000

    def test_timeline(self):
        response = self.client.post("/v1/credits/cr-b/timeline", json=_snapshot())
        assert response.status_code == 200

        data = response.json()
        assert [e["id"] for e in data] == ["pay-1", "inc-1"]
        assert data[1]["kind"] == "credit_increase"
        assert data[1]["note"] == "extra stock"

    def test_timeline_bounds(self):
        response = self.client.post(
            f"/v1/credits/cr-b/timeline?start={NOW - 5 * DAY}&end={NOW - 3 * DAY}",
            json=_snapshot(),
        )
        assert response.status_code == 200
        assert [e["id"] for e in response.json()] == ["inc-1"]


class TestRequestTracing:

    def setup_method(self):
        self.client = TestClient(app)

    def test_request_id_is_echoed(self):
        response = self.client.post(
            "/v1/predictions",
            json=_snapshot(),
            headers={"X-Request-ID": "req-123"},
        )
        assert response.headers["X-Request-ID"] == "req-123"

    def test_request_id_is_generated(self):
        response = self.client.post("/v1/predictions", json=_snapshot())
        assert response.headers["X-Request-ID"]
