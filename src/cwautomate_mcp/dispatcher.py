"""Tool dispatcher: owns the client cache and domain registry, routes tool calls."""

import logging

from mcp.types import CallToolResult, Tool

from cwautomate_mcp.client import ClientCache
from cwautomate_mcp.domains.base import TOOL_PREFIX, text_result
from cwautomate_mcp.registry import DomainName, DomainRegistry, is_domain_name

logger = logging.getLogger(__name__)


def domain_for_tool(name: str) -> DomainName | None:
    """Return the domain owning ``cwautomate_<domain>_<action>``, if any."""
    if not name.startswith(TOOL_PREFIX):
        return None
    domain, sep, action = name[len(TOOL_PREFIX):].partition("_")
    if not sep or not action or not is_domain_name(domain):
        return None
    return domain


class ToolDispatcher:
    def __init__(
        self,
        client_cache: ClientCache | None = None,
        registry: DomainRegistry | None = None,
    ) -> None:
        self.client_cache = client_cache or ClientCache()
        self.registry = registry or DomainRegistry(self.client_cache)

    def list_tools(self) -> list[Tool]:
        tools: list[Tool] = []
        for domain in self.registry.get_available_domains():
            tools.extend(self.registry.get_domain_handler(domain).get_tools())
        return tools

    async def call_tool(self, name: str, arguments: dict | None) -> CallToolResult:
        domain = domain_for_tool(name)
        if domain is None:
            logger.warning("Unknown tool requested: %s", name)
            return text_result(f"Unknown tool: {name}", is_error=True)

        handler = self.registry.get_domain_handler(domain)
        return await handler.handle_call(name, arguments or {})

    def reset(self) -> None:
        self.registry.clear_domain_cache()
        self.client_cache.clear_client()

    async def aclose(self) -> None:
        await self.client_cache.aclose()
