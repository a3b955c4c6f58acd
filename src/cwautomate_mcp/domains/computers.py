"""Computer tools: list, inspect, search, reboot and run scripts on agents."""

from mcp.types import CallToolResult, Tool

from cwautomate_mcp.domains.base import (
    DomainHandler,
    action_result,
    get_bool,
    get_choice,
    get_int,
    get_paging,
    get_str,
    get_str_map,
    json_result,
    require_int,
)

STATUSES = ("online", "offline", "all")

TOOLS = [
    Tool(
        name="cwautomate_computers_list",
        description="List computers in ConnectWise Automate. Can filter by client, location, or status.",
        inputSchema={
            "type": "object",
            "properties": {
                "client_id": {"type": "number", "description": "Filter computers by client ID"},
                "location_id": {"type": "number", "description": "Filter computers by location ID"},
                "status": {
                    "type": "string",
                    "enum": list(STATUSES),
                    "description": "Filter by online status (default: all)",
                },
                "limit": {"type": "number", "description": "Maximum number of results (default: 50)"},
                "skip": {"type": "number", "description": "Number of results to skip for pagination"},
            },
        },
    ),
    Tool(
        name="cwautomate_computers_get",
        description="Get details for a specific computer by its ID",
        inputSchema={
            "type": "object",
            "properties": {
                "computer_id": {"type": "number", "description": "The computer ID"},
            },
            "required": ["computer_id"],
        },
    ),
    Tool(
        name="cwautomate_computers_search",
        description="Search for computers by name, MAC address, or other criteria",
        inputSchema={
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": "Search query (computer name, MAC address, etc.)"},
                "client_id": {"type": "number", "description": "Limit search to a specific client"},
                "limit": {"type": "number", "description": "Maximum number of results (default: 50)"},
            },
            "required": ["query"],
        },
    ),
    Tool(
        name="cwautomate_computers_reboot",
        description="Send a reboot command to a computer",
        inputSchema={
            "type": "object",
            "properties": {
                "computer_id": {"type": "number", "description": "The computer ID to reboot"},
                "force": {"type": "boolean", "description": "Force reboot even if users are logged in"},
            },
            "required": ["computer_id"],
        },
    ),
    Tool(
        name="cwautomate_computers_run_script",
        description="Run a script on a specific computer",
        inputSchema={
            "type": "object",
            "properties": {
                "computer_id": {"type": "number", "description": "The computer ID to run the script on"},
                "script_id": {"type": "number", "description": "The script ID to execute"},
                "parameters": {
                    "type": "object",
                    "description": "Script parameters as key-value pairs",
                    "additionalProperties": {"type": "string"},
                },
            },
            "required": ["computer_id", "script_id"],
        },
    ),
]


class ComputersHandler(DomainHandler):
    domain = "computers"
    noun = "computer"
    tools = TOOLS
    handlers = {
        "cwautomate_computers_list": "_list",
        "cwautomate_computers_get": "_get",
        "cwautomate_computers_search": "_search",
        "cwautomate_computers_reboot": "_reboot",
        "cwautomate_computers_run_script": "_run_script",
    }

    async def _list(self, client, args: dict) -> CallToolResult:
        limit, skip = get_paging(args)
        page = await client.computers.list(
            client_id=get_int(args, "client_id"),
            location_id=get_int(args, "location_id"),
            status=get_choice(args, "status", STATUSES),
            page_size=limit,
            skip=skip,
        )
        return json_result({"total": page.total, "computers": page.items})

    async def _get(self, client, args: dict) -> CallToolResult:
        computer = await client.computers.get(require_int(args, "computer_id"))
        return json_result(computer)

    async def _search(self, client, args: dict) -> CallToolResult:
        limit, _ = get_paging(args)
        page = await client.computers.search(
            query=get_str(args, "query") or "",
            client_id=get_int(args, "client_id"),
            page_size=limit,
        )
        return json_result({"total": page.total, "computers": page.items})

    async def _reboot(self, client, args: dict) -> CallToolResult:
        computer_id = require_int(args, "computer_id")
        result = await client.computers.reboot(computer_id, force=get_bool(args, "force"))
        return action_result(f"Reboot command sent to computer {computer_id}", result)

    async def _run_script(self, client, args: dict) -> CallToolResult:
        computer_id = require_int(args, "computer_id")
        script_id = require_int(args, "script_id")
        result = await client.computers.run_script(
            computer_id, script_id, parameters=get_str_map(args, "parameters")
        )
        return action_result(
            f"Script {script_id} queued for execution on computer {computer_id}", result
        )
