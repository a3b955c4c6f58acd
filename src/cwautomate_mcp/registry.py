"""Domain registry: lazily loads and caches one handler per domain."""

import logging
from collections.abc import Callable
from typing import Literal, TypeGuard

from cwautomate_mcp.client import ClientCache
from cwautomate_mcp.domains.base import DomainHandler

logger = logging.getLogger(__name__)

DomainName = Literal["computers", "clients", "alerts", "scripts"]

DOMAIN_NAMES: tuple[DomainName, ...] = ("computers", "clients", "alerts", "scripts")


class UnknownDomainError(Exception):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown domain: {name}")


def is_domain_name(value: str) -> TypeGuard[DomainName]:
    return value in DOMAIN_NAMES


def get_available_domains() -> list[DomainName]:
    return list(DOMAIN_NAMES)


# Each loader imports its module on first use only.
def _load_computers(clients: ClientCache) -> DomainHandler:
    from cwautomate_mcp.domains.computers import ComputersHandler
    return ComputersHandler(clients.get_client)


def _load_clients(clients: ClientCache) -> DomainHandler:
    from cwautomate_mcp.domains.clients import ClientsHandler
    return ClientsHandler(clients.get_client)


def _load_alerts(clients: ClientCache) -> DomainHandler:
    from cwautomate_mcp.domains.alerts import AlertsHandler
    return AlertsHandler(clients.get_client)


def _load_scripts(clients: ClientCache) -> DomainHandler:
    from cwautomate_mcp.domains.scripts import ScriptsHandler
    return ScriptsHandler(clients.get_client)


LOADERS: dict[DomainName, Callable[[ClientCache], DomainHandler]] = {
    "computers": _load_computers,
    "clients": _load_clients,
    "alerts": _load_alerts,
    "scripts": _load_scripts,
}


class DomainRegistry:
    def __init__(
        self,
        client_cache: ClientCache,
        loaders: dict[DomainName, Callable[[ClientCache], DomainHandler]] | None = None,
    ) -> None:
        self._client_cache = client_cache
        self._loaders = LOADERS if loaders is None else loaders
        self._handlers: dict[DomainName, DomainHandler] = {}

    def get_domain_handler(self, name: str) -> DomainHandler:
        handler = self._handlers.get(name)
        if handler is not None:
            return handler

        if not is_domain_name(name) or name not in self._loaders:
            raise UnknownDomainError(name)

        logger.info("Loading %s domain handler", name)
        handler = self._loaders[name](self._client_cache)
        self._handlers[name] = handler
        return handler

    def get_available_domains(self) -> list[DomainName]:
        return get_available_domains()

    def clear_domain_cache(self) -> None:
        self._handlers.clear()
