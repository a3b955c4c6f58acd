"""Tests for cwautomate_mcp.dispatcher module."""

import json

import pytest

from cwautomate_mcp.automate import Page
from cwautomate_mcp.client import ClientCache, ConfigurationError
from cwautomate_mcp.dispatcher import ToolDispatcher, domain_for_tool


@pytest.fixture
def dispatcher(automate_client):
    cache = ClientCache(factory=lambda creds: automate_client)
    return ToolDispatcher(client_cache=cache)


def test_domain_for_tool():
    assert domain_for_tool("cwautomate_computers_list") == "computers"
    assert domain_for_tool("cwautomate_computers_run_script") == "computers"
    assert domain_for_tool("cwautomate_alerts_acknowledge") == "alerts"
    assert domain_for_tool("cwautomate_tickets_list") is None
    assert domain_for_tool("cwautomate_computers") is None
    assert domain_for_tool("cwautomate_computers_") is None
    assert domain_for_tool("computers_list") is None


def test_list_tools_catalog(dispatcher):
    tools = dispatcher.list_tools()
    names = [t.name for t in tools]
    assert len(names) == 15
    assert len(set(names)) == 15
    assert names[0] == "cwautomate_computers_list"
    assert names[-1] == "cwautomate_scripts_execute"
    for tool in tools:
        assert tool.inputSchema["type"] == "object"
        assert tool.description


async def test_routes_to_owning_domain(dispatcher, automate_client, credentials_env):
    automate_client.alerts.list.return_value = Page(total=0, items=[])

    result = await dispatcher.call_tool(
        "cwautomate_alerts_list",
        {"computer_id": 5, "client_id": 10, "status": "active", "severity": "critical", "limit": 25},
    )

    automate_client.alerts.list.assert_awaited_once_with(
        computer_id=5, client_id=10, status="active", severity="critical", page_size=25, skip=0
    )
    assert result.isError is False


async def test_only_owning_domain_loaded(dispatcher, automate_client, credentials_env):
    automate_client.computers.reboot.return_value = {"success": True}
    await dispatcher.call_tool("cwautomate_computers_reboot", {"computer_id": 1, "force": True})
    assert list(dispatcher.registry._handlers) == ["computers"]


async def test_none_arguments(dispatcher, automate_client, credentials_env):
    automate_client.clients.list.return_value = Page(total=0, items=[])
    await dispatcher.call_tool("cwautomate_clients_list", None)
    automate_client.clients.list.assert_awaited_once_with(page_size=50, skip=0)


async def test_unknown_tool_prefix(dispatcher):
    result = await dispatcher.call_tool("delete_everything", {})
    assert result.isError is True
    assert result.content[0].text == "Unknown tool: delete_everything"


async def test_unknown_action_in_known_domain(dispatcher, credentials_env):
    result = await dispatcher.call_tool("cwautomate_scripts_nope", {})
    assert result.isError is True
    assert result.content[0].text == "Unknown script tool: cwautomate_scripts_nope"


async def test_configuration_error_raised(dispatcher, no_credentials):
    with pytest.raises(ConfigurationError):
        await dispatcher.call_tool("cwautomate_computers_get", {"computer_id": 1})


async def test_end_to_end_client_with_locations(dispatcher, automate_client, credentials_env):
    automate_client.clients.get.return_value = {"Id": 1, "Name": "Acme"}
    automate_client.locations.list.return_value = Page(total=1, items=[{"Id": 7, "ClientId": 1}])

    result = await dispatcher.call_tool(
        "cwautomate_clients_get", {"client_id": 1, "include_locations": True}
    )

    automate_client.locations.list.assert_awaited_once_with(client_id=1)
    assert json.loads(result.content[0].text)["locations"] == [{"Id": 7, "ClientId": 1}]


async def test_reset_clears_both_caches(dispatcher, credentials_env):
    handler = dispatcher.registry.get_domain_handler("computers")
    await dispatcher.client_cache.get_client()
    dispatcher.reset()
    assert dispatcher.client_cache._client is None
    assert dispatcher.registry.get_domain_handler("computers") is not handler


async def test_aclose(dispatcher, automate_client, credentials_env):
    await dispatcher.client_cache.get_client()
    await dispatcher.aclose()
    automate_client.close.assert_awaited_once()
