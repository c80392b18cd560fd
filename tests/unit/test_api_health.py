from fastapi.testclient import TestClient


def test_health_endpoint_returns_service_metadata(test_client: TestClient) -> None:
    response = test_client.get("/health")

    assert response.status_code == 200
    payload = response.json()
    assert payload["service"]
    # Status can be "ok" or "degraded" depending on datastore availability
    assert payload["status"] in ["ok", "degraded"]
    assert "database" in payload["datastores"]
    assert response.headers["X-Request-ID"]


def test_request_id_header_is_echoed(test_client: TestClient) -> None:
    response = test_client.get("/health", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"
