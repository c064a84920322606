"""Tests for the Customer REST API"""
import pytest

from app.models.customer_event import CustomerAction


async def create(client, name="Alice", email="alice@example.com"):
    return await client.post("/api/v1/customers", json={"name": name, "email": email})


class TestCustomerLifecycle:
    """End-to-end scenario over HTTP"""

    async def test_create_conflict_update_delete(self, client, transport):
        response = await create(client)
        assert response.status_code == 201
        body = response.json()
        assert body["id"] == 1
        assert body["name"] == "Alice"
        assert "createdAt" in body and "updatedAt" in body

        response = await create(client, "Bob", "alice@example.com")
        assert response.status_code == 409
        assert response.json()["error"] == "DUPLICATE_EMAIL"

        response = await client.put("/api/v1/customers/1", json={"name": "Alice B", "email": "alice@example.com"})
        assert response.status_code == 200
        assert response.json()["name"] == "Alice B"

        response = await client.delete("/api/v1/customers/1")
        assert response.status_code == 204

        response = await client.get("/api/v1/customers/1")
        assert response.status_code == 404
        error = response.json()
        assert error["error"] == "CUSTOMER_NOT_FOUND"
        assert error["path"] == "/api/v1/customers/1"
        assert error["timestamp"]

        assert [e.action for e in transport.events] == [
            CustomerAction.CREATE,
            CustomerAction.UPDATE,
            CustomerAction.DELETE,
        ]

    async def test_create_succeeds_when_broker_recovers(self, client, transport, sleeps):
        transport.failures = 2

        response = await create(client)

        assert response.status_code == 201
        assert len(transport.calls) == 3
        assert sleeps == [5.0, 10.0]

    async def test_create_succeeds_when_broker_down(self, client, transport):
        transport.failures = 100

        response = await create(client)

        assert response.status_code == 201
        assert len(transport.calls) == 3


class TestCustomerValidation:
    """Test request validation errors"""

    @pytest.mark.parametrize("payload, field", [
        ({"name": "", "email": "a@example.com"}, "name"),
        ({"name": "   ", "email": "a@example.com"}, "name"),
        ({"name": "A", "email": "not-an-email"}, "email"),
        ({"name": "A"}, "email"),
        ({"name": "x" * 256, "email": "a@example.com"}, "name"),
    ])
    async def test_invalid_body(self, client, transport, payload, field):
        response = await client.post("/api/v1/customers", json=payload)

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "VALIDATION_ERROR"
        assert field in body["details"]
        assert transport.calls == []

    async def test_non_numeric_id(self, client):
        response = await client.get("/api/v1/customers/abc")
        assert response.status_code == 400

    async def test_update_missing_customer(self, client):
        response = await client.put("/api/v1/customers/9", json={"name": "X", "email": "x@example.com"})
        assert response.status_code == 404

    async def test_delete_missing_customer(self, client, transport):
        response = await client.delete("/api/v1/customers/9")
        assert response.status_code == 404
        assert transport.calls == []


class TestListAndSearch:
    """Test listing and search endpoints"""

    async def test_list_pagination(self, client):
        for i in range(3):
            await create(client, f"Customer {i}", f"c{i}@example.com")

        response = await client.get("/api/v1/customers", params={"page": 1, "size": 2})

        assert response.status_code == 200
        body = response.json()
        assert body["page"] == 1
        assert body["size"] == 2
        assert body["totalElements"] == 3
        assert body["totalPages"] == 2
        assert [c["name"] for c in body["content"]] == ["Customer 2"]

    async def test_list_size_capped(self, client):
        response = await client.get("/api/v1/customers", params={"size": 1000})
        assert response.status_code == 200
        assert response.json()["size"] == 100

    async def test_list_size_below_one_rejected(self, client):
        response = await client.get("/api/v1/customers", params={"size": 0})
        assert response.status_code == 400

    async def test_list_unknown_sort_field(self, client):
        response = await client.get("/api/v1/customers", params={"sortBy": "secret"})
        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_ARGUMENT"

    async def test_list_sorted_descending(self, client):
        await create(client, "Alice", "alice@example.com")
        await create(client, "Bob", "bob@example.com")

        response = await client.get("/api/v1/customers", params={"sortBy": "name", "sortDir": "desc"})
        assert [c["name"] for c in response.json()["content"]] == ["Bob", "Alice"]

    async def test_search(self, client):
        await create(client, "Alice", "alice@example.com")
        await create(client, "Bob", "bob@example.com")

        response = await client.get("/api/v1/customers/search", params={"name": "LIC"})

        assert response.status_code == 200
        assert [c["name"] for c in response.json()] == ["Alice"]

    async def test_search_blank_name(self, client):
        response = await client.get("/api/v1/customers/search", params={"name": "  "})
        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_ARGUMENT"


class TestOperationalEndpoints:
    """Test root, health and correlation id handling"""

    async def test_root(self, client):
        response = await client.get("/")
        assert response.status_code == 200
        assert response.json()["service"] == "customer-service"

    async def test_health(self, client):
        response = await client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    async def test_correlation_id_echoed(self, client, transport):
        response = await client.post(
            "/api/v1/customers",
            json={"name": "Alice", "email": "alice@example.com"},
            headers={"X-Correlation-ID": "corr-42"},
        )

        assert response.headers["X-Correlation-ID"] == "corr-42"
        assert transport.calls[0][2]["correlationId"] == "corr-42"

    async def test_correlation_id_generated(self, client):
        response = await client.get("/api/health")
        assert response.headers["X-Correlation-ID"]
