"""
P4P MIS Backend — Configuration & Middleware Helper Tests
===========================================================

What:  Tests for Settings parsing/validation and the access-log level helper.
"""

import logging

import pytest
from pydantic import ValidationError

from p4pmis.config import Settings
from p4pmis.middleware.logging import level_for_status


class TestSettings:

    def test_default_port(self, monkeypatch):
        monkeypatch.delenv("PORT", raising=False)
        monkeypatch.delenv("BACKEND_PORT", raising=False)
        assert Settings().backend_port == 5000

    def test_port_from_env(self, monkeypatch):
        monkeypatch.setenv("PORT", "8080")
        assert Settings().backend_port == 8080

    def test_cors_origins_list(self):
        settings = Settings(cors_origins="http://a.test, http://b.test,")
        assert settings.cors_origins_list == ["http://a.test", "http://b.test"]

    def test_allowed_collections_from_env(self, monkeypatch):
        monkeypatch.setenv("ALLOWED_COLLECTIONS", "A2F, A2M")
        assert Settings().allowed_collections_set == frozenset({"A2F", "A2M"})

    def test_log_level_normalized(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            Settings(log_level="chatty")

    def test_production_validation(self):
        Settings(mongodb_uri="mongodb+srv://user:pw@cluster.example/mis").validate_required_for_production()

        with pytest.raises(ValueError, match="MONGODB_URI"):
            Settings(mongodb_uri="").validate_required_for_production()

        with pytest.raises(ValueError, match="mongodb://"):
            Settings(mongodb_uri="postgres://localhost/mis").validate_required_for_production()


class TestAccessLogLevel:

    @pytest.mark.parametrize(
        "status, level",
        [(200, logging.INFO), (304, logging.INFO), (401, logging.WARNING), (500, logging.ERROR)],
    )
    def test_level_for_status(self, status, level):
        assert level_for_status(status) == level
