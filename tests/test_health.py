"""
Tests for the service health endpoint
"""


def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200

    data = response.json()
    assert data["service"] == "appcatalog"
    assert data["status"] == "healthy"
    assert data["database"] == "connected"
    assert "version" in data


def test_cors_headers(client):
    response = client.get("/api/apps", headers={"Origin": "https://dashboard.example.com"})
    assert response.status_code == 200
    assert "access-control-allow-origin" in response.headers


def test_unknown_route_uses_error_shape(client):
    response = client.get("/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}
