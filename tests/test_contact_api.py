#!/usr/bin/env python3
"""
API tests for the contact form endpoints
"""
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

CONTACT_URL = "/api/contact"


def contact_body(**overrides):
    body = {
        "fullName": "John Doe",
        "email": "John.Doe@Example.COM",
        "contact": "+919876543210",
        "message": "I would like to know more about your API products."
    }
    body.update(overrides)
    return body


class TestSubmitContact:
    """Test POST /api/contact"""

    def test_successful_submission(self, client, fake_backend):
        """A valid submission is stored and acknowledged with a reference"""
        response = client.post(CONTACT_URL, json=contact_body())

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Thank you for contacting Africure Pharma! We will get back to you soon."
        assert body["data"]["id"] == 1
        assert body["data"]["reference"] == "AF-1"
        assert body["data"]["submittedAt"]
        assert body["timestamp"]
        assert "errors" not in body

        stored = fake_backend.rows("Contact_Us")[0]
        assert stored["Full_Name"] == "John Doe"
        assert stored["Email_id"] == "john.doe@example.com"
        assert stored["Contact"] == "+919876543210"
        assert stored["status"] == "new"

    def test_form_encoded_submission(self, client, fake_backend):
        """Plain HTML form posts are accepted too"""
        response = client.post(CONTACT_URL, data=contact_body())

        assert response.status_code == 201
        assert len(fake_backend.rows("Contact_Us")) == 1

    def test_validation_errors(self, client, fake_backend):
        """Every invalid field is reported and nothing is stored"""
        response = client.post(CONTACT_URL, json=contact_body(fullName="J", email="nope", message="short"))

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Validation failed"
        assert [e["field"] for e in body["errors"]] == ["fullName", "email", "message"]
        assert body["errors"][1] == {
            "field": "email",
            "message": "Please provide a valid email address",
            "value": "nope"
        }
        assert fake_backend.rows("Contact_Us") == []

    def test_non_object_body(self, client):
        """A JSON array is not a submission"""
        response = client.post(CONTACT_URL, json=["not", "an", "object"])

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "body"

    def test_non_string_values_rejected(self, client, fake_backend):
        """Lists, objects and booleans are reported per field and nothing is stored"""
        response = client.post(CONTACT_URL, json=contact_body(
            fullName=True,
            email=["john@example.com"],
            message={"text": "Hello, I have a question about your products."}
        ))

        assert response.status_code == 400
        errors = response.json()["errors"]
        assert [(e["field"], e["message"]) for e in errors] == [
            ("fullName", "fullName must be a string"),
            ("email", "email must be a string"),
            ("message", "message must be a string"),
        ]
        assert errors[1]["value"] == ["john@example.com"]
        assert fake_backend.rows("Contact_Us") == []

    def test_numeric_contact_rejected(self, client, fake_backend):
        """A JSON number is not a contact string"""
        response = client.post(CONTACT_URL, json=contact_body(contact=919876543210))

        assert response.status_code == 400
        assert response.json()["errors"][0]["message"] == "contact must be a string"
        assert fake_backend.rows("Contact_Us") == []

    def test_script_content_stripped(self, client, fake_backend):
        """Script blocks never reach the database"""
        message = "<script>alert('xss')</script>Please send me your catalogue."
        response = client.post(CONTACT_URL, json=contact_body(message=message))

        assert response.status_code == 201
        assert fake_backend.rows("Contact_Us")[0]["Enter_Message"] == "Please send me your catalogue."

    def test_markup_escaped(self, client, fake_backend):
        """Remaining markup is stored HTML-escaped"""
        response = client.post(CONTACT_URL, json=contact_body(message="Prices for <b>paracetamol</b> please"))

        assert response.status_code == 201
        stored = fake_backend.rows("Contact_Us")[0]["Enter_Message"]
        assert stored == "Prices for &lt;b&gt;paracetamol&lt;/b&gt; please"

    def test_identical_submissions_get_distinct_ids(self, client):
        """Submissions are not deduplicated"""
        first = client.post(CONTACT_URL, json=contact_body())
        second = client.post(CONTACT_URL, json=contact_body())

        assert first.json()["data"]["id"] != second.json()["data"]["id"]

    def test_rate_limit(self, client, clock):
        """Three submissions per 15 minutes, then 429 with Retry-After"""
        for _ in range(3):
            assert client.post(CONTACT_URL, json=contact_body()).status_code == 201

        response = client.post(CONTACT_URL, json=contact_body())
        assert response.status_code == 429
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Too many contact form submissions from this IP, please try again later."
        assert body["data"]["retryAfter"] == 900
        assert response.headers["Retry-After"] == "900"

        clock.advance(900)
        assert client.post(CONTACT_URL, json=contact_body()).status_code == 201

    def test_invalid_requests_count_towards_limit(self, client):
        """The limiter runs before validation"""
        for _ in range(3):
            client.post(CONTACT_URL, json={})
        assert client.post(CONTACT_URL, json=contact_body()).status_code == 429

    def test_rate_limit_disabled(self, build_client):
        """ENABLE_RATE_LIMITING=false admits everything"""
        client = build_client(ENABLE_RATE_LIMITING=False)
        for _ in range(5):
            assert client.post(CONTACT_URL, json=contact_body()).status_code == 201

    def test_forwarded_for_ignored_by_default(self, client):
        """Clients cannot dodge the limit by forging X-Forwarded-For"""
        for i in range(3):
            client.post(CONTACT_URL, json=contact_body(), headers={"X-Forwarded-For": f"10.0.0.{i}"})
        response = client.post(CONTACT_URL, json=contact_body(), headers={"X-Forwarded-For": "10.0.0.9"})
        assert response.status_code == 429

    def test_forwarded_for_trusted_behind_proxy(self, build_client):
        """With TRUST_PROXY_HEADERS each forwarded address has its own budget"""
        client = build_client(TRUST_PROXY_HEADERS=True)
        for i in range(4):
            response = client.post(CONTACT_URL, json=contact_body(), headers={"X-Forwarded-For": f"10.0.0.{i}, 172.16.0.1"})
            assert response.status_code == 201

    def test_backend_failure(self, client, fake_backend):
        """Database failures give 503 with the underlying detail outside production"""
        fake_backend.fail_inserts = True

        response = client.post(CONTACT_URL, json=contact_body())

        assert response.status_code == 503
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "The database is temporarily unavailable. Please try again later."
        assert "null value" in body["error"]

    def test_backend_failure_in_production(self, build_client, fake_backend):
        """Production responses never carry the underlying error"""
        client = build_client(ENVIRONMENT="production")
        fake_backend.fail_inserts = True

        response = client.post(CONTACT_URL, json=contact_body())

        assert response.status_code == 503
        assert "error" not in response.json()

    def test_rls_fallback(self, client, fake_backend):
        """Submissions still land when the anon key may not insert directly"""
        fake_backend.deny_direct_insert.add("Contact_Us")

        response = client.post(CONTACT_URL, json=contact_body())

        assert response.status_code == 201
        assert fake_backend.rpc_calls == ["insert_contact_submission"]


class TestContactHealth:
    """Test GET /api/contact/health and /api/contact/test"""

    def test_healthy(self, client):
        response = client.get("/api/contact/health")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == "healthy"
        assert data["services"] == {"database": "up", "api": "up"}
        assert data["environment"] == "test"

    def test_degraded(self, client, fake_backend):
        """An unreachable database gives 503 but the API stays up"""
        fake_backend.unreachable = True

        response = client.get("/api/contact/health")

        assert response.status_code == 503
        assert response.json()["success"] is False
        data = response.json()["data"]
        assert data["status"] == "degraded"
        assert data["services"]["database"] == "down"

    def test_connection_test(self, client):
        response = client.get("/api/contact/test")

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Database connection successful"
        assert body["data"]["connected"] is True
        assert body["data"]["database"] == "Supabase"

    def test_connection_test_retries(self, client, fake_backend):
        """The connection test tries CONNECTION_RETRIES times before failing"""
        fake_backend.unreachable = True
        before = len(fake_backend.requests)

        response = client.get("/api/contact/test")

        assert response.status_code == 200
        assert response.json()["data"]["connected"] is False
        assert len(fake_backend.requests) - before == 3
