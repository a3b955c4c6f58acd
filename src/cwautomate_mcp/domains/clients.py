"""Client (customer organisation) tools."""

from mcp.types import CallToolResult, Tool

from cwautomate_mcp.domains.base import (
    DomainHandler,
    get_bool,
    get_paging,
    get_str,
    json_result,
    require_int,
)

CONTACT_FIELDS = ("city", "state", "zip", "country", "phone", "email")

_CONTACT_LABELS = {
    "city": ("City", "New city"),
    "state": ("State/Province", "New state/province"),
    "zip": ("ZIP/Postal code", "New ZIP/postal code"),
    "country": ("Country", "New country"),
    "phone": ("Phone number", "New phone number"),
    "email": ("Email address", "New email address"),
}


def _contact_properties(update: bool = False) -> dict:
    return {
        name: {"type": "string", "description": _CONTACT_LABELS[name][update]}
        for name in CONTACT_FIELDS
    }


TOOLS = [
    Tool(
        name="cwautomate_clients_list",
        description="List all clients in ConnectWise Automate with optional filtering.",
        inputSchema={
            "type": "object",
            "properties": {
                "limit": {"type": "number", "description": "Maximum number of results (default: 50)"},
                "skip": {"type": "number", "description": "Number of results to skip for pagination"},
            },
        },
    ),
    Tool(
        name="cwautomate_clients_get",
        description="Get details for a specific client by ID",
        inputSchema={
            "type": "object",
            "properties": {
                "client_id": {"type": "number", "description": "The client ID"},
                "include_locations": {
                    "type": "boolean",
                    "description": "Include location details in the response",
                },
            },
            "required": ["client_id"],
        },
    ),
    Tool(
        name="cwautomate_clients_create",
        description="Create a new client in ConnectWise Automate",
        inputSchema={
            "type": "object",
            "properties": {
                "name": {"type": "string", "description": "Client name"},
                **_contact_properties(),
            },
            "required": ["name"],
        },
    ),
    Tool(
        name="cwautomate_clients_update",
        description="Update an existing client in ConnectWise Automate",
        inputSchema={
            "type": "object",
            "properties": {
                "client_id": {"type": "number", "description": "The client ID to update"},
                "name": {"type": "string", "description": "New client name"},
                **_contact_properties(update=True),
            },
            "required": ["client_id"],
        },
    ),
]


def _contact_args(args: dict) -> dict:
    return {name: get_str(args, name) for name in CONTACT_FIELDS}


class ClientsHandler(DomainHandler):
    domain = "clients"
    noun = "client"
    tools = TOOLS
    handlers = {
        "cwautomate_clients_list": "_list",
        "cwautomate_clients_get": "_get",
        "cwautomate_clients_create": "_create",
        "cwautomate_clients_update": "_update",
    }

    async def _list(self, client, args: dict) -> CallToolResult:
        limit, skip = get_paging(args)
        page = await client.clients.list(page_size=limit, skip=skip)
        return json_result({"total": page.total, "clients": page.items})

    async def _get(self, client, args: dict) -> CallToolResult:
        client_id = require_int(args, "client_id")
        record = await client.clients.get(client_id)

        if not get_bool(args, "include_locations"):
            return json_result(record)

        # Locations are a second call keyed by the same client id.
        locations = await client.locations.list(client_id=client_id)
        return json_result({**record, "locations": locations.items})

    async def _create(self, client, args: dict) -> CallToolResult:
        created = await client.clients.create(name=get_str(args, "name"), **_contact_args(args))
        return json_result(created)

    async def _update(self, client, args: dict) -> CallToolResult:
        updated = await client.clients.update(
            require_int(args, "client_id"),
            name=get_str(args, "name"),
            **_contact_args(args),
        )
        return json_result(updated)
