"""
Error handling: decode failures, storage failures and configuration errors
"""

import asyncpg
import pytest

from config.settings import DatabaseConfig, LOG_BODY_MAX_SIZE
from database import connection
from utils.error_handling import REDACTED, redact
from .infrastructure import is_error_envelope


class TestDecodeFailures:
    """Bad request bodies are rejected before any database work"""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method,path", [("POST", "/"), ("PUT", "/person/some-id")])
    async def test_malformed_json_is_bad_request(self, client, fake_pool, method, path):
        response = await client.request(
            method, path,
            content=b'{"name": "Alice", ',
            headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert is_error_envelope(response.json(), 400)
        assert fake_pool.statements == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [
        {"name": 42, "nickname": "Al"},
        {"name": "Alice", "nickname": ["Al"]},
        ["Alice", "Al"],
    ])
    async def test_wrongly_typed_body_is_bad_request(self, client, fake_pool, payload):
        response = await client.post("/", json=payload)

        assert response.status_code == 400
        assert is_error_envelope(response.json(), 400)
        assert fake_pool.statements == []

    @pytest.mark.asyncio
    async def test_missing_body_is_bad_request(self, client, fake_pool):
        response = await client.post("/")

        assert response.status_code == 400
        assert is_error_envelope(response.json(), 400)
        assert fake_pool.statements == []


class TestStorageFailures:
    """Database errors become per-request error envelopes"""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method,path,payload", [
        ("GET", "/", None),
        ("GET", "/person/abc", None),
        ("DELETE", "/person/abc", None),
        ("POST", "/", {"name": "A", "nickname": "a"}),
        ("PUT", "/person/abc", {"name": "A", "nickname": "a"}),
    ])
    async def test_database_error_is_internal_error(self, client, fake_pool, method, path, payload):
        fake_pool.fail_with = ConnectionRefusedError("connection refused")

        response = await client.request(method, path, json=payload)

        assert response.status_code == 500
        body = response.json()
        assert is_error_envelope(body, 500)
        assert "connection refused" in body["message"]

    @pytest.mark.asyncio
    async def test_invalid_data_on_write_is_bad_request(self, client, fake_pool):
        fake_pool.fail_with = asyncpg.DataError("value too long for type character varying(10)")

        response = await client.post("/", json={"name": "A" * 50, "nickname": "a"})

        assert response.status_code == 400
        assert is_error_envelope(response.json(), 400)

    @pytest.mark.asyncio
    async def test_service_keeps_serving_after_failure(self, client, fake_pool):
        fake_pool.fail_with = ConnectionRefusedError("down")
        failed = await client.get("/")
        fake_pool.fail_with = None
        recovered = await client.get("/")

        assert failed.status_code == 500
        assert recovered.status_code == 200

    @pytest.mark.asyncio
    async def test_uninitialized_pool_is_internal_error(self, client, monkeypatch):
        monkeypatch.setattr(connection, "db_pool", None)

        response = await client.get("/person/abc")

        assert response.status_code == 500
        assert "not initialized" in response.json()["message"]


class TestHealthCheck:

    @pytest.mark.asyncio
    async def test_healthy_when_database_answers(self, client, fake_pool):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["database"] == "connected"

    @pytest.mark.asyncio
    async def test_unavailable_when_database_fails(self, client, fake_pool):
        fake_pool.fail_with = ConnectionRefusedError("down")

        response = await client.get("/health")

        assert response.status_code == 503
        assert is_error_envelope(response.json(), 503)


class TestRouting:

    @pytest.mark.asyncio
    async def test_unknown_route_uses_error_envelope(self, client, fake_pool):
        response = await client.get("/people/abc")

        assert response.status_code == 404
        assert is_error_envelope(response.json(), 404)


class TestDatabaseConfig:
    """Configuration parsing and validation"""

    VALID = {
        "DB_HOST": "db.internal",
        "DB_PORT": "5433",
        "DB_USERNAME": "people",
        "DB_PASSWORD": "hunter2",
        "DB_NAME": "people",
    }

    def test_parses_valid_environment(self):
        config = DatabaseConfig.from_environment(self.VALID)

        assert config.host == "db.internal"
        assert config.port == 5433
        assert config.ssl_mode == "disable"
        assert config.pool_max_size == 10
        assert "hunter2" not in config.describe()

    @pytest.mark.parametrize("missing", ["DB_HOST", "DB_PORT", "DB_USERNAME", "DB_PASSWORD", "DB_NAME"])
    def test_missing_variable_aborts(self, missing):
        environ = {k: v for k, v in self.VALID.items() if k != missing}

        with pytest.raises(ValueError, match=missing):
            DatabaseConfig.from_environment(environ)

    @pytest.mark.parametrize("port", ["five", "0", "70000"])
    def test_bad_port_aborts(self, port):
        with pytest.raises(ValueError, match="DB_PORT"):
            DatabaseConfig.from_environment({**self.VALID, "DB_PORT": port})

    def test_pool_bounds_are_checked(self):
        environ = {**self.VALID, "DB_POOL_MIN_SIZE": "5", "DB_POOL_MAX_SIZE": "2"}

        with pytest.raises(ValueError):
            DatabaseConfig.from_environment(environ)


class TestErrorLogRedaction:

    def test_sensitive_keys_are_masked(self):
        redacted = redact({"DB_PASSWORD": "hunter2", "name": "Alice", "nested": {"api_key": "k"}})

        assert redacted == {"DB_PASSWORD": REDACTED, "name": "Alice", "nested": {"api_key": REDACTED}}

    def test_long_strings_are_truncated(self):
        redacted = redact("x" * (LOG_BODY_MAX_SIZE + 10))

        assert redacted.endswith("...[TRUNCATED]")
        assert len(redacted) == LOG_BODY_MAX_SIZE + len("...[TRUNCATED]")
