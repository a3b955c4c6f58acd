"""Lazily built, credential-keyed cache for the Automate REST client."""

import logging
from collections.abc import Callable
from typing import Any

from cwautomate_mcp.config import (
    REQUIRED_CREDENTIAL_ENV,
    Credentials,
    get_credentials,
    get_settings,
)

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Automate credentials are missing or incomplete."""


def _build_client(creds: Credentials):
    # Imported here so the HTTP stack is only loaded once a tool actually runs.
    from cwautomate_mcp.automate import AutomateClient

    settings = get_settings()
    return AutomateClient(
        creds.server_url,
        creds.client_id,
        creds.username,
        creds.password,
        creds.two_factor_code,
        timeout=settings.request_timeout,
        max_retries=settings.max_retries,
        backoff_base=settings.retry_backoff_base,
    )


class ClientCache:
    """Holds at most one client, rebuilt whenever the credentials change."""

    def __init__(
        self,
        credentials_loader: Callable[[], Credentials | None] = get_credentials,
        factory: Callable[[Credentials], Any] = _build_client,
    ) -> None:
        self._load_credentials = credentials_loader
        self._factory = factory
        self._client: Any = None
        self._credentials: Credentials | None = None

    async def get_client(self):
        creds = self._load_credentials()
        if creds is None:
            raise ConfigurationError(
                "No API credentials provided. Please configure "
                + ", ".join(REQUIRED_CREDENTIAL_ENV[:-1])
                + f", and {REQUIRED_CREDENTIAL_ENV[-1]} environment variables."
            )

        if self._client is not None and self._credentials != creds:
            logger.info("Automate credentials changed, rebuilding client")
            stale = self._client
            self.clear_client()
            await stale.close()

        if self._client is None:
            logger.info("Creating Automate client for %s", creds.server_url)
            self._client = self._factory(creds)
            self._credentials = creds

        return self._client

    def clear_client(self) -> None:
        self._client = None
        self._credentials = None

    async def aclose(self) -> None:
        client = self._client
        self.clear_client()
        if client is not None:
            await client.close()
