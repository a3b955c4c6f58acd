from unittest.mock import AsyncMock, MagicMock

import pytest

from cwautomate_mcp.config import REQUIRED_CREDENTIAL_ENV, TWO_FACTOR_CODE_ENV

CREDENTIAL_ENV = {
    "CW_AUTOMATE_SERVER_URL": "https://automate.example.com",
    "CW_AUTOMATE_CLIENT_ID": "test-client-id",
    "CW_AUTOMATE_USERNAME": "test-username",
    "CW_AUTOMATE_PASSWORD": "test-password",
}


@pytest.fixture
def no_credentials(monkeypatch):
    for key in (*REQUIRED_CREDENTIAL_ENV, TWO_FACTOR_CODE_ENV):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def credentials_env(monkeypatch, no_credentials):
    for key, value in CREDENTIAL_ENV.items():
        monkeypatch.setenv(key, value)
    return CREDENTIAL_ENV


@pytest.fixture
def automate_client():
    """A stand-in for AutomateClient with awaitable resource methods."""
    client = MagicMock()
    client.computers.list = AsyncMock()
    client.computers.get = AsyncMock()
    client.computers.search = AsyncMock()
    client.computers.reboot = AsyncMock()
    client.computers.run_script = AsyncMock()
    client.clients.list = AsyncMock()
    client.clients.get = AsyncMock()
    client.clients.create = AsyncMock()
    client.clients.update = AsyncMock()
    client.alerts.list = AsyncMock()
    client.alerts.get = AsyncMock()
    client.alerts.acknowledge = AsyncMock()
    client.scripts.list = AsyncMock()
    client.scripts.get = AsyncMock()
    client.scripts.execute = AsyncMock()
    client.locations.list = AsyncMock()
    client.close = AsyncMock()
    return client


@pytest.fixture
def get_client(automate_client):
    return AsyncMock(return_value=automate_client)
