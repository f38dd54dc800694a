import json
import logging
import os
from unittest.mock import patch

from device_api.core.config import Settings
from device_api.core.logging import JsonFormatter


def test_defaults():
    with patch.dict(os.environ, {}, clear=True):
        settings = Settings(_env_file=None)

    assert settings.api_prefix == "/api/v1"
    assert settings.storage_backend == "sql"
    assert settings.database_url.startswith("sqlite+aiosqlite")
    assert settings.logging.level == "INFO"


def test_nested_environment_variables():
    env = {
        "DATABASE__URL": "postgresql+asyncpg://user:pw@db/devices",
        "STORAGE__BACKEND": "memory",
        "LOGGING__LEVEL": "DEBUG",
        "LOGGING__FORMAT": "json",
        "SERVER__PORT": "9000",
    }
    with patch.dict(os.environ, env, clear=True):
        settings = Settings(_env_file=None)

    assert settings.database_url == "postgresql+asyncpg://user:pw@db/devices"
    assert settings.storage_backend == "memory"
    assert settings.logging.format == "json"
    assert settings.port == 9000


def test_json_log_format():
    record = logging.LogRecord("device_api.test", logging.INFO, __file__, 1, "device %s", (7,), None)
    record.device_id = 7

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "device 7"
    assert payload["level"] == "INFO"
    assert payload["device_id"] == 7
