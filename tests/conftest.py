"""
Shared fixtures: an in-memory Supabase stand-in served through
httpx.MockTransport, so the real SupabaseClient code path runs in tests
"""
import json
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List

import httpx
import pytest

# Add parent directory to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

os.environ.setdefault("SUPABASE_URL", "http://supabase.test")
os.environ.setdefault("SUPABASE_ANON_KEY", "anon-test-key")
os.environ.setdefault("ENVIRONMENT", "test")

from fastapi.testclient import TestClient

from app.config import Settings
from app.main import create_app
from app.services.supabase_client import SupabaseClient
from app.utils.security import get_password_hash

SUPABASE_URL = "http://supabase.test"
ADMIN_EMAIL = "admin@africurepharma.com"
ADMIN_PASSWORD = "S3cure-admin-pass"

PROCEDURES = {
    "insert_contact_submission": ("Contact_Us", "contact_data"),
    "insert_career_application": ("Career_Applications", "application_data"),
}

TABLE_DEFAULTS = {
    "Contact_Us": {"status": "new"},
    "Career_Applications": {"application_status": "pending", "admin_notes": None},
}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _json(status_code: int, body: Any, headers: Dict[str, str] = None) -> httpx.Response:
    return httpx.Response(status_code, json=body, headers=headers)


class FakeSupabase:
    """Just enough PostgREST and Storage behaviour for the API"""

    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {name: [] for name in TABLE_DEFAULTS}
        self.objects: Dict[str, Dict[str, Any]] = {}
        self.requests: List[httpx.Request] = []
        self.rpc_calls: List[str] = []
        self.next_id = {name: 1 for name in TABLE_DEFAULTS}

        # Failure switches
        self.deny_direct_insert = set()
        self.fail_inserts = False
        self.fail_rpc = False
        self.fail_storage = False
        self.unreachable = False

    # Helpers for tests

    def rows(self, table: str) -> List[Dict[str, Any]]:
        return self.tables[table]

    def seed(self, table: str, **values) -> Dict[str, Any]:
        return self._store(table, values)

    def _store(self, table: str, values: Dict[str, Any]) -> Dict[str, Any]:
        row = {"id": self.next_id[table], **TABLE_DEFAULTS[table]}
        row.update(values)
        row.setdefault("created_at", _now())
        row.setdefault("updated_at", row["created_at"])
        if table == "Career_Applications":
            row["application_date"] = row.get("application_date") or row["created_at"]
        self.next_id[table] += 1
        self.tables[table].append(row)
        return row

    # Transport

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.unreachable:
            raise httpx.ConnectError("connection refused", request=request)

        path = request.url.path
        if path.startswith("/storage/v1/object/"):
            return self._storage(request, path[len("/storage/v1/object/"):])
        if path.startswith("/rest/v1/rpc/"):
            return self._rpc(request, path[len("/rest/v1/rpc/"):])
        if path.startswith("/rest/v1/"):
            return self._table(request, path[len("/rest/v1/"):])
        return _json(404, {"message": "not found"})

    def _rpc(self, request: httpx.Request, function: str) -> httpx.Response:
        self.rpc_calls.append(function)
        if self.fail_rpc:
            return _json(400, {"code": "P0001", "message": "procedure failed"})
        table, argument = PROCEDURES[function]
        body = json.loads(request.content)
        return _json(200, [self._store(table, body[argument])])

    def _filtered(self, table: str, request: httpx.Request) -> List[Dict[str, Any]]:
        rows = list(self.tables[table])
        for key, expression in request.url.params.multi_items():
            if key in ("select", "order", "limit", "offset"):
                continue
            operator, _, value = expression.partition(".")
            if operator == "eq":
                rows = [r for r in rows if str(r.get(key)) == value]
            elif operator == "gte":
                rows = [r for r in rows if r.get(key) and str(r[key]) >= value]
            elif operator == "lt":
                rows = [r for r in rows if r.get(key) and str(r[key]) < value]
            elif operator == "not" and value == "is.null":
                rows = [r for r in rows if r.get(key) is not None]
        return rows

    def _table(self, request: httpx.Request, table: str) -> httpx.Response:
        if table not in self.tables:
            return _json(404, {"code": "42P01", "message": f'relation "{table}" does not exist'})
        single = request.headers.get("accept") == "application/vnd.pgrst.object+json"

        if request.method == "POST":
            if table in self.deny_direct_insert:
                return _json(401, {
                    "code": "42501",
                    "message": f'new row violates row-level security policy for table "{table}"'
                })
            if self.fail_inserts:
                return _json(400, {"code": "23502", "message": "null value violates not-null constraint"})
            return _json(201, self._store(table, json.loads(request.content)))

        rows = self._filtered(table, request)

        if request.method == "HEAD":
            return httpx.Response(200, headers={"content-range": f"*/{len(rows)}"})

        if request.method == "PATCH":
            values = json.loads(request.content)
            for row in rows:
                row.update(values)
            return self._maybe_single(rows, single)

        # GET
        order = request.url.params.get("order")
        if order:
            column, _, direction = order.partition(".")
            rows.sort(key=lambda r: str(r.get(column)), reverse=direction == "desc")
        if "range" in request.headers:
            first, _, last = request.headers["range"].partition("-")
            rows = rows[int(first):int(last) + 1]
        select = request.url.params.get("select", "*")
        if select != "*":
            columns = select.split(",")
            rows = [{c: r.get(c) for c in columns} for r in rows]
        return self._maybe_single(rows, single)

    @staticmethod
    def _maybe_single(rows: List[Dict[str, Any]], single: bool) -> httpx.Response:
        if not single:
            return _json(200, rows)
        if len(rows) != 1:
            return _json(406, {
                "code": "PGRST116",
                "message": "JSON object requested, multiple (or no) rows returned"
            })
        return _json(200, rows[0])

    def _storage(self, request: httpx.Request, rest: str) -> httpx.Response:
        if self.fail_storage:
            return _json(500, {"statusCode": "500", "error": "Internal", "message": "storage unavailable"})

        if request.method == "POST":
            bucket, _, key = rest.partition("/")
            if key in self.objects:
                return _json(400, {"statusCode": "409", "error": "Duplicate", "message": "The resource already exists"})
            self.objects[key] = {
                "bucket": bucket,
                "content": request.content,
                "content_type": request.headers.get("content-type")
            }
            return _json(200, {"Key": f"{bucket}/{key}"})

        if request.method == "DELETE":
            prefixes = json.loads(request.content)["prefixes"]
            removed = [p for p in prefixes if self.objects.pop(p, None) is not None]
            return _json(200, [{"name": p} for p in removed])

        if request.method == "GET" and rest.startswith("public/"):
            _, _, key = rest[len("public/"):].partition("/")
            stored = self.objects.get(key)
            if stored is None:
                return _json(404, {"message": "Object not found"})
            return httpx.Response(200, content=stored["content"], headers={"content-type": stored["content_type"]})

        return _json(405, {"message": "method not allowed"})


class FakeClock:
    """Manually advanced monotonic clock"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(scope="session")
def admin_password_hash() -> str:
    return get_password_hash(ADMIN_PASSWORD)


@pytest.fixture
def make_settings(admin_password_hash):
    """Build Settings for a test, with keyword overrides"""
    def factory(**overrides) -> Settings:
        values = {
            "SUPABASE_URL": SUPABASE_URL,
            "SUPABASE_ANON_KEY": "anon-test-key",
            "SUPABASE_SERVICE_KEY": "",
            "ENVIRONMENT": "test",
            "SECRET_KEY": "test-secret-key",
            "ADMIN_EMAIL": ADMIN_EMAIL,
            "ADMIN_PASSWORD_HASH": admin_password_hash,
            "CONNECTION_RETRY_DELAY_SECONDS": 0,
            "ENABLE_RATE_LIMITING": True,
        }
        values.update(overrides)
        return Settings(**values)
    return factory


@pytest.fixture
def fake_backend() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def supabase_client(fake_backend):
    return SupabaseClient(SUPABASE_URL, "anon-test-key", transport=httpx.MockTransport(fake_backend.handler))


@pytest.fixture
def build_client(make_settings, fake_backend, clock):
    """Start the app against the fake backend; yields a factory taking setting overrides"""
    clients = []

    def factory(**overrides) -> TestClient:
        application = create_app(
            make_settings(**overrides),
            transport=httpx.MockTransport(fake_backend.handler),
            clock=clock
        )
        client = TestClient(application)
        client.__enter__()
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(build_client) -> TestClient:
    return build_client()


@pytest.fixture
def admin_headers(client) -> Dict[str, str]:
    response = client.post("/api/admin/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}
