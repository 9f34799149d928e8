"""
Test health endpoint for the ChromaLab service.
"""


def test_health_check(test_client):
    """Test health check reports service identity."""
    response = test_client.get("/v1/healthz")

    assert response.status_code == 200
    data = response.json()

    # Check required fields
    assert data["ok"] is True
    assert data["version"] == "1.0.0"
    assert data["service"] == "chromalab"


def test_root_describes_api(test_client):
    response = test_client.get("/")

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "ChromaLab Color Engine API"
    assert data["docs"] == "/docs"
