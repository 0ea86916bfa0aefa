import copy
import os
import pytest
import sys
import yaml

from unittest.mock import AsyncMock, MagicMock, mock_open, patch

project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from relay.core.cache.provider import Provider
from relay.core.utils.config import Config

class StubProvider(Provider):
    """Provider serving a fixed set of entities and counting calls"""

    def __init__(self):
        self.calls = {"channel": 0, "user": 0, "guild": 0}
        self.channels = {"1234": {"id": "1234", "name": "Testing Channel", "guild_id": "9101112"}}
        self.users = {"5678": {"id": "5678", "username": "Testing User"}}
        self.guilds = {"9101112": {"id": "9101112", "name": "Testing Server", "owner_id": "5678"}}

    async def fetch_channel(self, channel_id):
        return self._lookup("channel", self.channels, channel_id)

    async def fetch_user(self, user_id):
        return self._lookup("user", self.users, user_id)

    async def fetch_guild(self, guild_id):
        return self._lookup("guild", self.guilds, guild_id)

    def _lookup(self, kind, entities, entity_id):
        self.calls[kind] += 1
        if entity_id not in entities:
            raise LookupError(f"unknown {kind} {entity_id}")
        return copy.deepcopy(entities[entity_id])

@pytest.fixture
def basic_config_data():
    """Base configuration data"""
    return {
        "adapter": {
            "bot_token": "bot_token",
            "nickname": "relay",
            "connection_check_interval": 1
        },
        "attachments": {
            "lifetime_hours": 24,
            "prune_threshold": 1000,
            "request_timeout": 5,
            "cleanup_interval_minutes": 60
        },
        "logging": {
            "logging_level": "INFO",
            "log_format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            "log_file_path": "test.log",
            "max_log_size": 1024,
            "backup_count": 3
        },
        "outputs": [
            {"name": "stdout", "type": "writer", "collate": "channel"}
        ]
    }

@pytest.fixture
def mock_config_factory():
    """Factory fixture to create Config mocks with specified data"""
    def _create_config(config_data):
        with patch("builtins.open", mock_open(read_data=yaml.dump(config_data))):
            with patch("os.path.exists", return_value=True):
                return Config()
    return _create_config

@pytest.fixture
def relay_config(basic_config_data, mock_config_factory):
    """Mocked Config instance"""
    return mock_config_factory(basic_config_data)

@pytest.fixture
def provider():
    """Call-counting provider"""
    return StubProvider()

@pytest.fixture
def session_factory():
    """Factory creating a mocked aiohttp ClientSession for a single response"""
    def _create_session(status=200,
                        body=b"attachment body",
                        content_type="image/png",
                        request_error=None,
                        read_error=None):
        response = MagicMock()
        response.status = status
        response.content_type = content_type
        response.read = AsyncMock(return_value=body, side_effect=read_error)

        request_context = MagicMock()
        request_context.__aenter__ = AsyncMock(return_value=response, side_effect=request_error)
        request_context.__aexit__ = AsyncMock(return_value=False)

        session = MagicMock()
        session.closed = False
        session.get = MagicMock(return_value=request_context)
        session.close = AsyncMock()
        return session
    return _create_session
