"""Tests for the error taxonomy, envelope helpers and health check."""

import logging

import pytest
from pymongo.errors import AutoReconnect

from newsdigest.api.errors import (
    NotFoundError,
    UnavailableError,
    ValidationError,
    format_errors,
    store_errors,
)
from newsdigest.main import app


class TestEnvelopes:
    def test_status_codes(self):
        assert ValidationError("x").status_code == 400
        assert NotFoundError().status_code == 404
        assert UnavailableError("x").status_code == 500

    def test_not_found_default_message(self):
        assert NotFoundError().to_envelope() == {"success": False, "error": "Summary not found"}

    def test_extra_fields_included(self):
        envelope = UnavailableError("Failed", data=[]).to_envelope()
        assert envelope == {"success": False, "error": "Failed", "data": []}


class TestStoreErrors:
    def test_maps_store_exception(self, caplog):
        with caplog.at_level(logging.ERROR):
            with pytest.raises(UnavailableError) as exc:
                with store_errors("Failed to fetch summaries", data=[]):
                    raise AutoReconnect("connection reset by 10.0.0.5")

        assert exc.value.message == "Failed to fetch summaries"
        assert exc.value.extra == {"data": []}
        assert "10.0.0.5" not in exc.value.message
        assert "connection reset" in caplog.text

    def test_api_errors_pass_through(self):
        with pytest.raises(NotFoundError):
            with store_errors("Failed"):
                raise NotFoundError()

    def test_no_error(self):
        with store_errors("Failed"):
            value = 1
        assert value == 1


class TestFormatErrors:
    def test_strips_location_prefix(self):
        errors = [{"loc": ("body", "generatedAt"), "msg": "Input should be a valid datetime"}]
        assert format_errors(errors) == "generatedAt: Input should be a valid datetime"

    def test_multiple(self):
        errors = [
            {"loc": ("query", "page"), "msg": "too small"},
            {"loc": ("query", "limit"), "msg": "too big"},
        ]
        assert format_errors(errors) == "page: too small; limit: too big"

    def test_empty(self):
        assert format_errors([]) == "Invalid request"


class TestHealthCheck:
    @pytest.mark.asyncio
    async def test_healthy(self, client, fake_cache):
        app.state.connection_cache = fake_cache
        try:
            response = await client.get("/health")
        finally:
            del app.state.connection_cache

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "database": "connected"}

    @pytest.mark.asyncio
    async def test_unhealthy(self, client, fake_cache):
        fake_cache.error = AutoReconnect("down")
        app.state.connection_cache = fake_cache
        try:
            response = await client.get("/health")
        finally:
            del app.state.connection_cache

        assert response.status_code == 503
        assert response.json() == {"status": "unhealthy", "database": "disconnected"}
