"""
Item Repositories — Unit Tests
==============================
SQL backend runs against in-memory SQLite; the hosted backend against an
httpx.MockTransport that speaks the PostgREST subset the repository uses.
Run:  pytest test_repositories.py -v
"""
import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import httpx
import pytest
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import DataError, OperationalError

from items_api.core.database import build_hosted_client, build_sql_url
from items_api.repositories import (
    DataAccessError, HostedItemRepository, InMemoryItemRepository,
    InvalidIdentifierError, SqlItemRepository, build_repository,
)

FIELDS = {"location": "L", "contacts": "C", "image": "I", "call_logs": "CL", "sms": "S"}


def _settings(**overrides):
    base = dict(
        DB_BACKEND="memory", ITEMS_TABLE="items",
        DB_DRIVER="postgresql+psycopg2", DB_HOST="db", DB_PORT=5432,
        DB_USER="app", DB_PASSWORD="s3cret", DB_NAME="inventory",
        DB_POOL_SIZE=10, DB_MAX_OVERFLOW=5, DB_POOL_RECYCLE=300,
        DATABASE_URL="https://project.example.co", DATABASE_API_KEY="anon-key",
        DATABASE_SCHEMA="public", DATABASE_TIMEOUT=5.0,
    )
    base.update(overrides)
    return SimpleNamespace(**base)


class _PgError(Exception):
    """Stands in for a psycopg2 error carrying a SQLSTATE."""

    def __init__(self, pgcode, message):
        super().__init__(message)
        self.pgcode = pgcode


def _failing_engine(pgcode, message):
    engine = MagicMock()
    err = DataError("SELECT * FROM items WHERE id = %(id)s", {"id": "abc"}, _PgError(pgcode, message))
    engine.connect.side_effect = err
    engine.begin.side_effect = err
    return engine


# ═══════════════════════════════════════════════════════════════════════════
# SQL BACKEND
# ═══════════════════════════════════════════════════════════════════════════
class TestSqlRepository:
    def test_create_returns_row_with_id(self, sql_repo):
        item = sql_repo.create_item(FIELDS)
        assert item["id"] is not None
        for key, value in FIELDS.items():
            assert item[key] == value
        assert item["name"] is None

    def test_create_ignores_unknown_fields(self, sql_repo):
        item = sql_repo.create_item({**FIELDS, "name": "nope", "bogus": 1})
        assert item["name"] is None
        assert "bogus" not in item

    def test_list(self, sql_repo):
        assert sql_repo.list_items() == []
        sql_repo.create_item(FIELDS)
        sql_repo.create_item(FIELDS)
        assert len(sql_repo.list_items()) == 2

    def test_get(self, sql_repo):
        item = sql_repo.create_item(FIELDS)
        assert sql_repo.get_item(str(item["id"])) == item
        assert sql_repo.get_item("424242") is None

    def test_update_only_touches_name_and_description(self, sql_repo):
        item = sql_repo.create_item(FIELDS)
        result = sql_repo.update_item(str(item["id"]), "N", "D")
        assert result == {"id": item["id"], "name": "N", "description": "D"}
        stored = sql_repo.get_item(str(item["id"]))
        for key, value in FIELDS.items():
            assert stored[key] == value

    def test_update_missing(self, sql_repo):
        assert sql_repo.update_item("424242", "N", "D") is None

    def test_delete(self, sql_repo):
        item = sql_repo.create_item(FIELDS)
        assert sql_repo.delete_item(str(item["id"])) is True
        assert sql_repo.get_item(str(item["id"])) is None
        assert sql_repo.delete_item(str(item["id"])) is False

    def test_ping(self, sql_repo):
        assert sql_repo.ping() >= 0

    def test_query_error_is_data_access_error(self, sql_repo):
        with sql_repo._engine.begin() as conn:
            conn.execute(text("DROP TABLE items"))
        with pytest.raises(DataAccessError) as exc_info:
            sql_repo.list_items()
        assert exc_info.value.operation == "list"
        assert "items" in exc_info.value.message

    def test_connect_error_is_data_access_error(self):
        engine = MagicMock()
        engine.connect.side_effect = OperationalError("SELECT 1", {}, Exception("could not connect"))
        with pytest.raises(DataAccessError) as exc_info:
            SqlItemRepository(engine).ping()
        assert exc_info.value.operation == "ping"
        assert "could not connect" in exc_info.value.message

    def test_describe_masks_password(self):
        engine = MagicMock()
        engine.url = make_url("postgresql://app:s3cret@db:5432/inventory")
        described = SqlItemRepository(engine).describe()
        assert "s3cret" not in described
        assert "db:5432/inventory" in described

    @pytest.mark.parametrize("table", ["", "items; DROP TABLE x", "1items", "it-ems"])
    def test_rejects_unsafe_table_names(self, table):
        with pytest.raises(ValueError):
            SqlItemRepository(MagicMock(), table)

    def test_build_sql_url(self):
        url = build_sql_url(_settings())
        assert url.host == "db"
        assert url.database == "inventory"
        assert url.username == "app"
        assert url.password == "s3cret"

    def test_list_and_object_values_round_trip(self, sql_repo):
        contacts = [{"name": "A", "phone": "1"}, {"name": "B", "phone": "2"}]
        item = sql_repo.create_item({**FIELDS, "contacts": contacts, "call_logs": {"n": 1}})
        assert item["contacts"] == contacts
        assert item["call_logs"] == {"n": 1}
        assert sql_repo.get_item(str(item["id"]))["contacts"] == contacts
        assert sql_repo.list_items()[0]["call_logs"] == {"n": 1}

    def test_list_values_are_stored_as_json_text(self, sql_repo):
        item = sql_repo.create_item({**FIELDS, "sms": ["hi", "there"]})
        with sql_repo._engine.connect() as conn:
            stored = conn.execute(text("SELECT sms FROM items WHERE id = :id"),
                                  {"id": item["id"]}).scalar_one()
        assert json.loads(stored) == ["hi", "there"]

    def test_plain_strings_that_look_like_json_survive(self, sql_repo):
        item = sql_repo.create_item({**FIELDS, "location": "[north"})
        assert sql_repo.get_item(str(item["id"]))["location"] == "[north"

    def test_update_accepts_object_values(self, sql_repo):
        item = sql_repo.create_item(FIELDS)
        result = sql_repo.update_item(str(item["id"]), {"first": "A"}, ["d"])
        assert result == {"id": item["id"], "name": {"first": "A"}, "description": ["d"]}

    def test_invalid_id_syntax_is_not_found(self):
        repo = SqlItemRepository(_failing_engine("22P02", 'invalid input syntax for type bigint: "abc"'))
        assert repo.get_item("abc") is None
        assert repo.update_item("abc", "N", "D") is None
        assert repo.delete_item("abc") is False

    def test_invalid_id_syntax_is_flagged(self):
        repo = SqlItemRepository(_failing_engine("22P02", "invalid input syntax"))
        with pytest.raises(InvalidIdentifierError) as exc_info:
            repo.list_items()
        assert exc_info.value.operation == "list"

    def test_other_data_errors_still_fail(self):
        repo = SqlItemRepository(_failing_engine("22003", "value out of range for type bigint"))
        with pytest.raises(DataAccessError) as exc_info:
            repo.get_item("99999999999999999999")
        assert not isinstance(exc_info.value, InvalidIdentifierError)
        assert exc_info.value.operation == "get"


# ═══════════════════════════════════════════════════════════════════════════
# HOSTED BACKEND
# ═══════════════════════════════════════════════════════════════════════════
class TestHostedRepository:
    def test_create_returns_row_with_id(self, hosted_repo, postgrest):
        item = hosted_repo.create_item(FIELDS)
        assert item["id"] == 1
        for key, value in FIELDS.items():
            assert item[key] == value
        req = postgrest.requests[-1]
        assert req.url.path == "/rest/v1/android"
        assert req.headers["Prefer"] == "return=representation"
        assert json.loads(req.content) == [FIELDS]

    def test_list_and_get(self, hosted_repo):
        assert hosted_repo.list_items() == []
        item = hosted_repo.create_item(FIELDS)
        assert hosted_repo.list_items() == [item]
        assert hosted_repo.get_item(str(item["id"])) == item
        assert hosted_repo.get_item("999") is None

    def test_update(self, hosted_repo):
        item = hosted_repo.create_item(FIELDS)
        result = hosted_repo.update_item(str(item["id"]), "N", "D")
        assert result == {"id": item["id"], "name": "N", "description": "D"}
        assert hosted_repo.get_item(str(item["id"]))["location"] == "L"
        assert hosted_repo.update_item("999", "N", "D") is None

    def test_delete(self, hosted_repo):
        item = hosted_repo.create_item(FIELDS)
        assert hosted_repo.delete_item(str(item["id"])) is True
        assert hosted_repo.delete_item(str(item["id"])) is False

    def test_ping(self, hosted_repo, postgrest):
        assert hosted_repo.ping() >= 0
        assert postgrest.requests[-1].url.params["limit"] == "1"

    def test_error_body_message_is_surfaced(self):
        def handler(request):
            return httpx.Response(404, json={"code": "42P01",
                                             "message": 'relation "public.android" does not exist'})

        client = httpx.Client(base_url="https://x/rest/v1", transport=httpx.MockTransport(handler))
        with pytest.raises(DataAccessError) as exc_info:
            HostedItemRepository(client, "android").list_items()
        assert exc_info.value.message == 'relation "public.android" does not exist'

    def test_transport_error_is_data_access_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = httpx.Client(base_url="https://x/rest/v1", transport=httpx.MockTransport(handler))
        with pytest.raises(DataAccessError) as exc_info:
            HostedItemRepository(client).ping()
        assert exc_info.value.operation == "ping"
        assert "connection refused" in exc_info.value.message

    def test_build_hosted_client_headers(self):
        client = build_hosted_client(_settings())
        try:
            assert str(client.base_url) == "https://project.example.co/rest/v1/"
            assert client.headers["apikey"] == "anon-key"
            assert client.headers["Authorization"] == "Bearer anon-key"
            assert client.headers["Accept-Profile"] == "public"
        finally:
            client.close()

    def test_build_hosted_client_requires_url(self):
        with pytest.raises(ValueError):
            build_hosted_client(_settings(DATABASE_URL=""))

    def test_invalid_id_syntax_is_not_found(self, hosted_repo, postgrest):
        hosted_repo.create_item(FIELDS)
        assert hosted_repo.get_item("abc") is None
        assert hosted_repo.update_item("abc", "N", "D") is None
        assert hosted_repo.delete_item("abc") is False
        assert len(postgrest.rows) == 1

    def test_other_client_errors_still_fail(self):
        def handler(request):
            return httpx.Response(400, json={"code": "PGRST100", "message": "failed to parse filter"})

        client = httpx.Client(base_url="https://x/rest/v1", transport=httpx.MockTransport(handler))
        with pytest.raises(DataAccessError) as exc_info:
            HostedItemRepository(client).get_item("1")
        assert not isinstance(exc_info.value, InvalidIdentifierError)
        assert exc_info.value.message == "failed to parse filter"


# ═══════════════════════════════════════════════════════════════════════════
# BACKEND SELECTION
# ═══════════════════════════════════════════════════════════════════════════
class TestBuildRepository:
    def test_memory(self):
        assert isinstance(build_repository(_settings(DB_BACKEND="memory")), InMemoryItemRepository)

    def test_hosted(self):
        repo = build_repository(_settings(DB_BACKEND="hosted", ITEMS_TABLE="android"))
        try:
            assert isinstance(repo, HostedItemRepository)
            assert repo.table == "android"
        finally:
            repo.dispose()

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            build_repository(_settings(DB_BACKEND="mongo"))


class TestInMemoryRepository:
    def test_ids_are_sequential_and_lookup_by_string(self):
        repo = InMemoryItemRepository()
        first = repo.create_item(FIELDS)
        second = repo.create_item(FIELDS)
        assert (first["id"], second["id"]) == (1, 2)
        assert repo.get_item("2")["id"] == 2

    def test_returned_rows_are_copies(self):
        repo = InMemoryItemRepository()
        item = repo.create_item(FIELDS)
        item["location"] = "mutated"
        assert repo.get_item("1")["location"] == "L"
