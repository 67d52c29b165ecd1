#!/usr/bin/env python3
"""
Application-level tests: liveness, envelopes for unknown routes, headers
and the request body ceiling
"""
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app.config import Settings
from app.schemas.common import ApiResponse


class TestApp:
    """Test the app-wide endpoints and middleware"""

    def test_health(self, client, fake_backend):
        """Liveness never touches the database"""
        fake_backend.unreachable = True

        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "OK"
        assert body["environment"] == "test"
        assert body["version"] == "1.0.0"

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["endpoints"]["careers"] == "/api/careers"

    def test_unknown_route(self, client):
        response = client.get("/api/nothing-here")

        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Route not found"
        assert body["error"] == "The requested route /api/nothing-here does not exist."

    def test_security_headers(self, client):
        response = client.get("/health")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "SAMEORIGIN"
        assert "default-src 'self'" in response.headers["Content-Security-Policy"]

    def test_body_too_large(self, build_client, fake_backend):
        """Bodies over MAX_BODY_SIZE are refused before parsing"""
        client = build_client(MAX_BODY_SIZE=1024 * 1024)

        response = client.post(
            "/api/contact",
            content=b"x" * (1024 * 1024 + 1),
            headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 413
        assert response.json()["message"] == "Request body exceeds 1MB"
        assert response.json()["error"] == f"Content-Length {1024 * 1024 + 1} over limit {1024 * 1024}"
        assert fake_backend.rows("Contact_Us") == []

    def test_startup_survives_unreachable_backend(self, build_client, fake_backend):
        """The API starts even when Supabase is down"""
        fake_backend.unreachable = True

        client = build_client()

        assert client.get("/health").status_code == 200

    def test_docs_hidden_in_production(self, build_client):
        assert build_client().get("/docs").status_code == 200
        assert build_client(ENVIRONMENT="production").get("/docs").status_code == 404


class TestSettings:
    """Test derived configuration values"""

    def test_development_allows_any_origin(self):
        settings = Settings(SUPABASE_URL="http://x", SUPABASE_ANON_KEY="k", ENVIRONMENT="development")
        assert settings.cors_origins == ["*"]

    def test_configured_origins(self):
        settings = Settings(
            SUPABASE_URL="http://x",
            SUPABASE_ANON_KEY="k",
            ENVIRONMENT="production",
            CORS_ORIGINS="https://africurepharma.com, https://www.africurepharma.com"
        )
        assert settings.cors_origins == ["https://africurepharma.com", "https://www.africurepharma.com"]

    def test_service_key_preferred(self):
        settings = Settings(SUPABASE_URL="http://x", SUPABASE_ANON_KEY="anon", SUPABASE_SERVICE_KEY="service")
        assert settings.supabase_key == "service"


class TestEnvelope:
    """Test the response envelope"""

    def test_ok_drops_empty_keys(self):
        content = ApiResponse.ok("Done")
        assert content["success"] is True
        assert content["message"] == "Done"
        assert "data" not in content
        assert "errors" not in content
        assert "timestamp" in content
