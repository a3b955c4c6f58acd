"""Alert tools."""

from mcp.types import CallToolResult, Tool

from cwautomate_mcp.domains.base import (
    DomainHandler,
    action_result,
    get_choice,
    get_int,
    get_paging,
    get_str,
    json_result,
    require_int,
)

STATUSES = ("active", "acknowledged", "all")
SEVERITIES = ("critical", "warning", "informational", "all")

TOOLS = [
    Tool(
        name="cwautomate_alerts_list",
        description="List alerts in ConnectWise Automate with optional filtering.",
        inputSchema={
            "type": "object",
            "properties": {
                "computer_id": {"type": "number", "description": "Filter alerts by computer ID"},
                "client_id": {"type": "number", "description": "Filter alerts by client ID"},
                "status": {
                    "type": "string",
                    "enum": list(STATUSES),
                    "description": "Filter by alert status (default: active)",
                },
                "severity": {
                    "type": "string",
                    "enum": list(SEVERITIES),
                    "description": "Filter by alert severity",
                },
                "limit": {"type": "number", "description": "Maximum number of results (default: 50)"},
                "skip": {"type": "number", "description": "Number of results to skip for pagination"},
            },
        },
    ),
    Tool(
        name="cwautomate_alerts_get",
        description="Get details for a specific alert by ID",
        inputSchema={
            "type": "object",
            "properties": {
                "alert_id": {"type": "number", "description": "The alert ID"},
            },
            "required": ["alert_id"],
        },
    ),
    Tool(
        name="cwautomate_alerts_acknowledge",
        description="Acknowledge an alert to mark it as reviewed",
        inputSchema={
            "type": "object",
            "properties": {
                "alert_id": {"type": "number", "description": "The alert ID to acknowledge"},
                "comment": {"type": "string", "description": "Optional comment to add when acknowledging"},
            },
            "required": ["alert_id"],
        },
    ),
]


class AlertsHandler(DomainHandler):
    domain = "alerts"
    noun = "alert"
    tools = TOOLS
    handlers = {
        "cwautomate_alerts_list": "_list",
        "cwautomate_alerts_get": "_get",
        "cwautomate_alerts_acknowledge": "_acknowledge",
    }

    async def _list(self, client, args: dict) -> CallToolResult:
        limit, skip = get_paging(args)
        page = await client.alerts.list(
            computer_id=get_int(args, "computer_id"),
            client_id=get_int(args, "client_id"),
            status=get_choice(args, "status", STATUSES),
            severity=get_choice(args, "severity", SEVERITIES),
            page_size=limit,
            skip=skip,
        )
        return json_result({"total": page.total, "alerts": page.items})

    async def _get(self, client, args: dict) -> CallToolResult:
        return json_result(await client.alerts.get(require_int(args, "alert_id")))

    async def _acknowledge(self, client, args: dict) -> CallToolResult:
        alert_id = require_int(args, "alert_id")
        result = await client.alerts.acknowledge(alert_id, comment=get_str(args, "comment"))
        return action_result(f"Alert {alert_id} acknowledged", result)
