"""
API tests for the insights module.
Tests listing, lookup, environments, stats and health endpoints end to end
against an in-memory warehouse.
"""

import pytest
from fastapi.testclient import TestClient


class TestListInsights:
    """Test GET /api/insights"""

    def test_defaults(self, client: TestClient, sample_insights):
        response = client.get("/api/insights")
        assert response.status_code == 200

        body = response.json()
        assert body["pagination"] == {"limit": 100, "offset": 0, "total": 10}
        assert len(body["data"]) == 10

    def test_newest_first(self, client: TestClient, sample_insights):
        response = client.get("/api/insights")

        ids = [item["id"] for item in response.json()["data"]]
        assert ids == [f"insight-{index:03d}" for index in range(10, 0, -1)]

    def test_record_shape(self, client: TestClient, sample_insights):
        record = client.get("/api/insights", params={"limit": "1"}).json()["data"][0]

        assert set(record) == {
            "id",
            "timestamp",
            "environment",
            "emptyPrompt",
            "renderedPrompt",
            "modelName",
            "inputTokens",
            "outputTokens",
            "customerId",
            "clientId",
            "listingId",
            "homeId",
            "inputPayload",
            "outputPayload",
        }
        assert record["id"] == "insight-010"
        assert record["timestamp"].startswith("2024-06-01T22:00:00")
        assert record["customerId"] is None

    @pytest.mark.parametrize(
        "limit, offset, expected",
        [
            (3, 0, ["insight-010", "insight-009", "insight-008"]),
            (3, 3, ["insight-007", "insight-006", "insight-005"]),
            (5, 8, ["insight-002", "insight-001"]),
            (5, 10, []),
            (2, 50, []),
        ],
    )
    def test_pagination_window(self, client: TestClient, sample_insights, limit, offset, expected):
        response = client.get("/api/insights", params={"limit": str(limit), "offset": str(offset)})
        assert response.status_code == 200

        body = response.json()
        assert [item["id"] for item in body["data"]] == expected
        assert body["pagination"] == {"limit": limit, "offset": offset, "total": 10}

    @pytest.mark.parametrize(
        "params, expected_ids",
        [
            ({"environment": "staging"}, ["insight-009", "insight-008", "insight-007"]),
            ({"listingId": "listing-0"}, ["insight-009", "insight-006", "insight-003"]),
            ({"customerId": "customer-0"}, ["insight-008", "insight-006", "insight-004", "insight-002"]),
            ({"environment": "production", "listingId": "listing-1"}, ["insight-004", "insight-001"]),
            (
                {"environment": "staging", "listingId": "listing-2", "customerId": "customer-0"},
                ["insight-008"],
            ),
            ({"environment": "nowhere"}, []),
        ],
    )
    def test_filters(self, client: TestClient, sample_insights, params, expected_ids):
        response = client.get("/api/insights", params=params)
        assert response.status_code == 200

        body = response.json()
        assert [item["id"] for item in body["data"]] == expected_ids
        assert body["pagination"]["total"] == len(expected_ids)

    def test_total_ignores_window(self, client: TestClient, sample_insights):
        """total counts every matching row, not just the page"""
        response = client.get("/api/insights", params={"environment": "production", "limit": "2", "offset": "1"})

        body = response.json()
        assert [item["id"] for item in body["data"]] == ["insight-005", "insight-004"]
        assert body["pagination"]["total"] == 6

    def test_empty_filters_are_ignored(self, client: TestClient, sample_insights):
        response = client.get("/api/insights", params={"environment": "", "listingId": "", "customerId": ""})

        assert response.json()["pagination"]["total"] == 10

    @pytest.mark.parametrize(
        "params",
        [
            {"limit": "abc"},
            {"limit": "0"},
            {"limit": "-1"},
            {"limit": "1.5"},
            {"limit": ""},
            {"limit": "1001"},
            {"offset": "abc"},
            {"offset": "-10"},
            {"offset": str(2**63)},
            {"offset": "1" + "0" * 30},
        ],
    )
    def test_malformed_pagination_rejected(self, client: TestClient, params):
        response = client.get("/api/insights", params=params)

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Invalid query parameter"
        assert next(iter(params)) in body["details"]

    def test_validation_happens_before_warehouse(self, failing_client: TestClient, failing_engine):
        response = failing_client.get("/api/insights", params={"limit": "ten"})

        assert response.status_code == 400
        assert failing_engine.calls == 0

    def test_oversized_offset_rejected_before_warehouse(self, failing_client: TestClient, failing_engine):
        response = failing_client.get("/api/insights", params={"offset": str(2**63)})

        assert response.status_code == 400
        assert "offset" in response.json()["details"]
        assert failing_engine.calls == 0

    @pytest.mark.parametrize(
        "value",
        [
            "prod' OR '1'='1",
            "production' --",
            "x'); DROP TABLE seller_listing_insights; --",
            'production" OR "1"="1',
        ],
    )
    def test_injection_attempts_match_nothing(self, client: TestClient, sample_insights, value):
        for name in ("environment", "listingId", "customerId"):
            response = client.get("/api/insights", params={name: value})
            assert response.status_code == 200

            body = response.json()
            assert body["data"] == []
            assert body["pagination"]["total"] == 0

        # Table is untouched
        assert client.get("/api/insights").json()["pagination"]["total"] == 10

    def test_filter_value_with_quote_matches_literally(
        self, client: TestClient, dw_db_session, insight_factory, sample_insights
    ):
        dw_db_session.add(insight_factory(42, environment="o'reilly"))
        dw_db_session.commit()

        response = client.get("/api/insights", params={"environment": "o'reilly"})

        assert [item["id"] for item in response.json()["data"]] == ["insight-042"]

    def test_empty_table(self, client: TestClient):
        response = client.get("/api/insights")

        assert response.status_code == 200
        assert response.json() == {"data": [], "pagination": {"limit": 100, "offset": 0, "total": 0}}


class TestGetInsight:
    """Test GET /api/insights/{id}"""

    def test_existing_record_unwrapped(self, client: TestClient, sample_insights):
        response = client.get("/api/insights/insight-003")
        assert response.status_code == 200

        record = response.json()
        assert record["id"] == "insight-003"
        assert record["listingId"] == "listing-0"
        assert record["inputTokens"] == 300
        assert record["modelName"] == "gpt-4o"

    def test_missing_record(self, client: TestClient, sample_insights):
        response = client.get("/api/insights/insight-999")

        assert response.status_code == 404
        assert response.json() == {"error": "Insight not found"}

    def test_injection_in_id_matches_nothing(self, client: TestClient, sample_insights):
        response = client.get("/api/insights/x' OR '1'='1")

        assert response.status_code == 404


class TestEnvironments:
    """Test GET /api/environments"""

    def test_sorted_distinct(self, client: TestClient, sample_insights):
        response = client.get("/api/environments")

        assert response.status_code == 200
        assert response.json() == ["development", "production", "staging"]

    def test_empty_table(self, client: TestClient):
        assert client.get("/api/environments").json() == []


class TestStats:
    """Test GET /api/stats"""

    def test_aggregates(self, client: TestClient, sample_insights):
        response = client.get("/api/stats")
        assert response.status_code == 200

        assert response.json() == {
            "totalRecords": 10,
            "uniqueListings": 3,
            "uniqueCustomers": 2,
            "totalInputTokens": 5500,
            "totalOutputTokens": 550,
            "avgInputTokens": 550.0,
            "avgOutputTokens": 55.0,
        }

    def test_number_types(self, client: TestClient, sample_insights):
        stats = client.get("/api/stats").json()

        assert isinstance(stats["totalInputTokens"], int)
        assert isinstance(stats["avgInputTokens"], float)
        assert isinstance(stats["avgOutputTokens"], float)

    def test_filters_are_not_applied(self, client: TestClient, sample_insights):
        stats = client.get("/api/stats", params={"environment": "staging"}).json()

        assert stats["totalRecords"] == 10

    def test_empty_table(self, client: TestClient):
        assert client.get("/api/stats").json() == {
            "totalRecords": 0,
            "uniqueListings": 0,
            "uniqueCustomers": 0,
            "totalInputTokens": 0,
            "totalOutputTokens": 0,
            "avgInputTokens": 0.0,
            "avgOutputTokens": 0.0,
        }


class TestHealth:
    """Test GET /api/health"""

    def test_healthy(self, client: TestClient):
        response = client.get("/api/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["service"] == "insights"

    def test_unhealthy(self, failing_client: TestClient):
        response = failing_client.get("/api/health")

        assert response.status_code == 503
        assert response.json()["error"] == "Warehouse unavailable"
