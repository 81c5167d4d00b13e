"""
Tests for api_server.py and lambda_handler.py — app wiring.
"""

from mangum import Mangum


class TestHealth:
    """Health check endpoint."""

    def test_health(self, client, no_api_key):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["text_model"]
        assert data["analysis_model"]


class TestErrorEnvelope:
    """Framework errors use the {"error": ...} envelope."""

    def test_unknown_path_is_404(self, client):
        response = client.post("/api/unknown", json={})
        assert response.status_code == 404
        assert response.json() == {"error": "Not Found"}


class TestCors:
    """Preflight from an allowed origin."""

    def test_preflight_from_local_dev_origin(self, client):
        response = client.options(
            "/api/gemini",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "POST",
            },
        )
        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "http://localhost:3000"


class TestLambdaHandler:
    """Mangum wiring."""

    def test_handler_wraps_app(self):
        import lambda_handler
        from api_server import app

        assert isinstance(lambda_handler.handler, Mangum)
        assert lambda_handler.handler.app is app
