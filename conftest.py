"""Test environment: in-memory storage, no background monitor, shared backends."""
import json
import os

os.environ.setdefault("DB_BACKEND", "memory")
os.environ.setdefault("MONITOR_ENABLED", "false")
os.environ.setdefault("LOG_LEVEL", "CRITICAL")

import httpx  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy import create_engine, text  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from items_api.repositories import HostedItemRepository, SqlItemRepository  # noqa: E402


# ── SQL backend on in-memory SQLite ──────────────────────────────────────
@pytest.fixture
def sql_repo():
    engine = create_engine(
        "sqlite://", poolclass=StaticPool, connect_args={"check_same_thread": False},
    )
    with engine.begin() as conn:
        conn.execute(text("""
            CREATE TABLE items (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                location TEXT, contacts TEXT, image TEXT, call_logs TEXT, sms TEXT,
                name TEXT, description TEXT
            )
        """))
    repo = SqlItemRepository(engine, "items")
    yield repo
    repo.dispose()


# ── Hosted backend on a fake PostgREST endpoint ──────────────────────────
class FakePostgrest:
    """Minimal PostgREST table endpoint backed by a list of dicts.

    Like a bigint ``id`` column, non-numeric ``id=eq.`` filters are rejected
    with PostgREST's 400 / SQLSTATE 22P02 body.
    """

    def __init__(self):
        self.rows = []
        self.next_id = 1
        self.requests = []

    def _matching(self, params):
        flt = params.get("id")
        if flt is None:
            return list(self.rows)
        wanted = flt.split("eq.", 1)[1]
        return [r for r in self.rows if str(r["id"]) == wanted]

    @staticmethod
    def _select(rows, params):
        cols = params.get("select", "*")
        if cols == "*":
            return rows
        keep = cols.split(",")
        return [{k: r.get(k) for k in keep} for r in rows]

    @staticmethod
    def _invalid_id(params):
        flt = params.get("id")
        if flt is None:
            return None
        wanted = flt.split("eq.", 1)[1]
        if wanted.lstrip("-").isdigit():
            return None
        return httpx.Response(400, json={
            "code": "22P02", "details": None, "hint": None,
            "message": f'invalid input syntax for type bigint: "{wanted}"',
        })

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        params = dict(request.url.params)
        rejected = self._invalid_id(params)
        if rejected is not None:
            return rejected
        if request.method == "GET":
            rows = self._matching(params)
            if "limit" in params:
                rows = rows[: int(params["limit"])]
            return httpx.Response(200, json=self._select(rows, params))
        if request.method == "POST":
            created = []
            for payload in json.loads(request.content):
                row = {"id": self.next_id, "name": None, "description": None, **payload}
                self.next_id += 1
                self.rows.append(row)
                created.append(row)
            return httpx.Response(201, json=self._select(created, params))
        if request.method == "PATCH":
            rows = self._matching(params)
            for row in rows:
                row.update(json.loads(request.content))
            return httpx.Response(200, json=self._select(rows, params))
        if request.method == "DELETE":
            rows = self._matching(params)
            self.rows = [r for r in self.rows if r not in rows]
            return httpx.Response(200, json=self._select(rows, params))
        return httpx.Response(405)


@pytest.fixture
def postgrest():
    return FakePostgrest()


@pytest.fixture
def hosted_repo(postgrest):
    client = httpx.Client(
        base_url="https://project.example.co/rest/v1",
        transport=httpx.MockTransport(postgrest),
    )
    repo = HostedItemRepository(client, "android")
    yield repo
    repo.dispose()
