"""Tests for cwautomate_mcp.domains.computers module."""

import json

import pytest

from cwautomate_mcp.automate import Page
from cwautomate_mcp.domains.computers import ComputersHandler


@pytest.fixture
def handler(get_client):
    return ComputersHandler(get_client)


def test_tools():
    handler = ComputersHandler(None)
    names = [t.name for t in handler.get_tools()]
    assert names == [
        "cwautomate_computers_list",
        "cwautomate_computers_get",
        "cwautomate_computers_search",
        "cwautomate_computers_reboot",
        "cwautomate_computers_run_script",
    ]
    assert handler.get_tools() is not handler.get_tools()


def test_required_fields():
    tools = {t.name: t for t in ComputersHandler(None).get_tools()}
    assert tools["cwautomate_computers_get"].inputSchema["required"] == ["computer_id"]
    assert tools["cwautomate_computers_run_script"].inputSchema["required"] == [
        "computer_id",
        "script_id",
    ]
    status = tools["cwautomate_computers_list"].inputSchema["properties"]["status"]
    assert status["enum"] == ["online", "offline", "all"]


async def test_list_defaults(handler, automate_client):
    automate_client.computers.list.return_value = Page(total=1, items=[{"Id": 1}])

    result = await handler.handle_call("cwautomate_computers_list", {})

    automate_client.computers.list.assert_awaited_once_with(
        client_id=None, location_id=None, status=None, page_size=50, skip=0
    )
    assert result.isError is False
    assert json.loads(result.content[0].text) == {"total": 1, "computers": [{"Id": 1}]}


async def test_list_with_filters(handler, automate_client):
    automate_client.computers.list.return_value = Page(total=0, items=[])

    await handler.handle_call(
        "cwautomate_computers_list",
        {"client_id": 5, "location_id": "7", "status": "online", "limit": 10, "skip": 20},
    )

    automate_client.computers.list.assert_awaited_once_with(
        client_id=5, location_id=7, status="online", page_size=10, skip=20
    )


async def test_list_pretty_printed(handler, automate_client):
    automate_client.computers.list.return_value = Page(total=0, items=[])
    result = await handler.handle_call("cwautomate_computers_list", {})
    assert result.content[0].text == json.dumps({"total": 0, "computers": []}, indent=2)


async def test_get(handler, automate_client):
    automate_client.computers.get.return_value = {"Id": 12, "ComputerName": "WS-12"}

    result = await handler.handle_call("cwautomate_computers_get", {"computer_id": 12})

    automate_client.computers.get.assert_awaited_once_with(12)
    assert json.loads(result.content[0].text)["ComputerName"] == "WS-12"


async def test_search(handler, automate_client):
    automate_client.computers.search.return_value = Page(total=1, items=[{"Id": 3}])

    result = await handler.handle_call(
        "cwautomate_computers_search", {"query": "WS-", "client_id": 2}
    )

    automate_client.computers.search.assert_awaited_once_with(
        query="WS-", client_id=2, page_size=50
    )
    assert json.loads(result.content[0].text)["total"] == 1


async def test_reboot(handler, automate_client):
    automate_client.computers.reboot.return_value = {"success": True}

    result = await handler.handle_call(
        "cwautomate_computers_reboot", {"computer_id": 1, "force": True}
    )

    automate_client.computers.reboot.assert_awaited_once_with(1, force=True)
    payload = json.loads(result.content[0].text)
    assert payload["success"] is True
    assert "Reboot command sent" in payload["message"]
    assert payload["message"] == "Reboot command sent to computer 1"
    assert payload["result"] == {"success": True}


async def test_run_script(handler, automate_client):
    automate_client.computers.run_script.return_value = {"jobId": 99}

    result = await handler.handle_call(
        "cwautomate_computers_run_script",
        {"computer_id": 4, "script_id": 8, "parameters": {"mode": "quick"}},
    )

    automate_client.computers.run_script.assert_awaited_once_with(
        4, 8, parameters={"mode": "quick"}
    )
    payload = json.loads(result.content[0].text)
    assert payload["message"] == "Script 8 queued for execution on computer 4"
    assert payload["result"] == {"jobId": 99}


async def test_unknown_tool(handler):
    result = await handler.handle_call("cwautomate_computers_explode", {})
    assert result.isError is True
    assert result.content[0].text == "Unknown computer tool: cwautomate_computers_explode"


async def test_does_not_claim_other_domains(handler, automate_client):
    result = await handler.handle_call("cwautomate_alerts_list", {})
    assert result.isError is True
    automate_client.alerts.list.assert_not_awaited()


async def test_client_errors_propagate(handler, automate_client):
    automate_client.computers.get.side_effect = RuntimeError("remote down")
    with pytest.raises(RuntimeError, match="remote down"):
        await handler.handle_call("cwautomate_computers_get", {"computer_id": 1})


async def test_reboot_requires_computer_id(handler, automate_client):
    result = await handler.handle_call("cwautomate_computers_reboot", {"force": True})

    assert result.isError is True
    assert result.content[0].text == "Missing required argument: computer_id"
    automate_client.computers.reboot.assert_not_awaited()


async def test_run_script_rejects_fractional_script_id(handler, automate_client):
    result = await handler.handle_call(
        "cwautomate_computers_run_script", {"computer_id": 4, "script_id": 8.5}
    )

    assert result.isError is True
    assert result.content[0].text == "Invalid script_id: 8.5"
    automate_client.computers.run_script.assert_not_awaited()
