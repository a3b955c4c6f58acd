"""Script tools: browse the script library and queue executions."""

from mcp.types import CallToolResult, Tool

from cwautomate_mcp.domains.base import (
    DomainHandler,
    action_result,
    get_bool,
    get_choice,
    get_int,
    get_int_list,
    get_paging,
    get_str,
    get_str_map,
    json_result,
    require_int,
)

PRIORITIES = ("low", "normal", "high")

TOOLS = [
    Tool(
        name="cwautomate_scripts_list",
        description="List available scripts in ConnectWise Automate with optional filtering.",
        inputSchema={
            "type": "object",
            "properties": {
                "folder_id": {"type": "number", "description": "Filter scripts by folder ID"},
                "search": {"type": "string", "description": "Search scripts by name"},
                "limit": {"type": "number", "description": "Maximum number of results (default: 50)"},
                "skip": {"type": "number", "description": "Number of results to skip for pagination"},
            },
        },
    ),
    Tool(
        name="cwautomate_scripts_get",
        description="Get details for a specific script by ID",
        inputSchema={
            "type": "object",
            "properties": {
                "script_id": {"type": "number", "description": "The script ID"},
                "include_content": {
                    "type": "boolean",
                    "description": "Include the script content/code in the response",
                },
            },
            "required": ["script_id"],
        },
    ),
    Tool(
        name="cwautomate_scripts_execute",
        description=(
            "Execute a script on one or more computers. "
            "Use the computers domain to find specific computer IDs first."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "script_id": {"type": "number", "description": "The script ID to execute"},
                "computer_ids": {
                    "type": "array",
                    "items": {"type": "number"},
                    "description": (
                        "Array of computer IDs to run the script on. "
                        "If not specified, script runs based on its configured targets."
                    ),
                },
                "parameters": {
                    "type": "object",
                    "description": "Script parameters as key-value pairs",
                    "additionalProperties": {"type": "string"},
                },
                "priority": {
                    "type": "string",
                    "enum": list(PRIORITIES),
                    "description": "Execution priority (default: normal)",
                },
            },
            "required": ["script_id"],
        },
    ),
]


class ScriptsHandler(DomainHandler):
    domain = "scripts"
    noun = "script"
    tools = TOOLS
    handlers = {
        "cwautomate_scripts_list": "_list",
        "cwautomate_scripts_get": "_get",
        "cwautomate_scripts_execute": "_execute",
    }

    async def _list(self, client, args: dict) -> CallToolResult:
        limit, skip = get_paging(args)
        page = await client.scripts.list(
            folder_id=get_int(args, "folder_id"),
            search=get_str(args, "search"),
            page_size=limit,
            skip=skip,
        )
        return json_result({"total": page.total, "scripts": page.items})

    async def _get(self, client, args: dict) -> CallToolResult:
        script = await client.scripts.get(
            require_int(args, "script_id"),
            include_content=get_bool(args, "include_content"),
        )
        return json_result(script)

    async def _execute(self, client, args: dict) -> CallToolResult:
        script_id = require_int(args, "script_id")
        computer_ids = get_int_list(args, "computer_ids")
        result = await client.scripts.execute(
            script_id,
            computer_ids=computer_ids,
            parameters=get_str_map(args, "parameters"),
            priority=get_choice(args, "priority", PRIORITIES),
        )

        if computer_ids is not None:
            message = f"Script {script_id} queued for execution on {len(computer_ids)} computer(s)"
        else:
            message = f"Script {script_id} queued for execution"
        return action_result(message, result)
