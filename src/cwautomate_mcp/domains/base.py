"""Shared plumbing for domain handlers: result envelopes and argument coercion.

Tool arguments arrive as untyped JSON. The optional accessors tolerate
missing or mistyped values and return None. Required ids and id lists raise
InvalidArgumentError, which handle_call reports as an isError result.
"""

import json
import logging
from collections.abc import Awaitable, Callable, Mapping, Sequence
from types import MappingProxyType
from typing import Any

from mcp.types import CallToolResult, TextContent, Tool

logger = logging.getLogger(__name__)

TOOL_PREFIX = "cwautomate_"
DEFAULT_LIMIT = 50


class InvalidArgumentError(ValueError):
    """A required tool argument is missing or cannot be coerced."""


def text_result(text: str, is_error: bool = False) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=text)], isError=is_error)


def json_result(payload: Any) -> CallToolResult:
    return text_result(json.dumps(payload, indent=2, default=str))


def action_result(message: str, result: Any) -> CallToolResult:
    return json_result({"success": True, "message": message, "result": result})


def to_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def get_int(args: dict, key: str) -> int | None:
    return to_int(args.get(key))


def require_int(args: dict, key: str) -> int:
    value = get_int(args, key)
    if value is None:
        if args.get(key) is None:
            raise InvalidArgumentError(f"Missing required argument: {key}")
        raise InvalidArgumentError(f"Invalid {key}: {args[key]!r}")
    return value


def get_bool(args: dict, key: str) -> bool | None:
    value = args.get(key)
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    return None


def get_str(args: dict, key: str) -> str | None:
    value = args.get(key)
    return value if isinstance(value, str) else None


def get_choice(args: dict, key: str, choices: tuple[str, ...]) -> str | None:
    value = get_str(args, key)
    return value if value in choices else None


def get_int_list(args: dict, key: str) -> list[int] | None:
    value = args.get(key)
    if not isinstance(value, list):
        return None
    ids = [to_int(item) for item in value]
    invalid = [item for item, i in zip(value, ids) if i is None]
    if invalid:
        raise InvalidArgumentError(f"Invalid {key}: " + ", ".join(repr(item) for item in invalid))
    return ids


def get_str_map(args: dict, key: str) -> dict[str, str] | None:
    value = args.get(key)
    if not isinstance(value, dict):
        return None
    return {str(k): str(v) for k, v in value.items()}


def get_paging(args: dict) -> tuple[int, int]:
    """Return (limit, skip); a missing or zero limit means DEFAULT_LIMIT."""
    limit = get_int(args, "limit") or DEFAULT_LIMIT
    skip = get_int(args, "skip") or 0
    return limit, skip


class DomainHandler:
    """Base for the per-domain tool handlers.

    Subclasses set ``domain``, ``noun`` and ``tools`` and map each tool name
    to a coroutine method in ``handlers``. Each method receives the client
    and the raw argument dict.
    """

    domain: str = ""
    noun: str = ""
    tools: Sequence[Tool] = ()
    handlers: Mapping[str, str] = MappingProxyType({})

    def __init__(self, get_client: Callable[[], Awaitable[Any]]) -> None:
        self._get_client = get_client

    def get_tools(self) -> list[Tool]:
        return list(self.tools)

    async def handle_call(self, tool_name: str, args: dict | None) -> CallToolResult:
        client = await self._get_client()
        args = args or {}

        method_name = self.handlers.get(tool_name)
        if method_name is None:
            logger.warning("Unknown %s tool requested: %s", self.domain, tool_name)
            return text_result(f"Unknown {self.noun} tool: {tool_name}", is_error=True)

        try:
            return await getattr(self, method_name)(client, args)
        except InvalidArgumentError as e:
            logger.warning("Rejected %s call: %s", tool_name, e)
            return text_result(str(e), is_error=True)
