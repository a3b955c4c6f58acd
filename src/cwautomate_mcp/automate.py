"""ConnectWise Automate REST client.

Thin async wrapper over the ``/cwa/api/v1`` endpoints. Only what the tool
handlers need is covered: computers, clients, locations, alerts and scripts.
Reads are retried on transient failures; writes and commands never are.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import httpx

from cwautomate_mcp.retry import MaxRetriesExceeded, retry_with_backoff

logger = logging.getLogger(__name__)

API_PREFIX = "/cwa/api/v1"
DEFAULT_PAGE_SIZE = 50


class AutomateAPIError(Exception):
    """The Automate server answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"Automate API error {status_code}: {message}")


@dataclass
class Page:
    total: int
    items: list[dict] = field(default_factory=list)


def _quote(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def _condition(*clauses: str | None) -> str | None:
    """Join non-empty clauses into an Automate ``condition`` expression."""
    parts = [c for c in clauses if c]
    return " and ".join(parts) if parts else None


def _eq(column: str, value: int | str | None) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return f"{column} = {_quote(value)}"
    return f"{column} = {value}"


def _filter_value(value: str | None) -> str | None:
    """Map an enum filter to Automate casing; ``all`` means no filter."""
    if value is None or value == "all":
        return None
    return value.capitalize()


def _drop_none(data: dict) -> dict:
    return {k: v for k, v in data.items() if v is not None}


def _key_values(parameters: dict[str, str] | None) -> list[dict] | None:
    if parameters is None:
        return None
    return [{"Key": k, "Value": v} for k, v in parameters.items()]


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(data, dict):
        return str(data.get("Message") or data.get("message") or data)
    return str(data)


class AutomateClient:
    def __init__(
        self,
        server_url: str,
        client_id: str,
        username: str,
        password: str,
        two_factor_code: str | None = None,
        *,
        timeout: float = 30.0,
        max_retries: int = 2,
        backoff_base: float = 1.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = server_url.rstrip("/") + API_PREFIX
        self._username = username
        self._password = password
        self._two_factor_code = two_factor_code
        self._max_retries = max_retries
        self._backoff_base = backoff_base
        self._token: str | None = None
        self._http = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"ClientId": client_id, "Accept": "application/json"},
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

        self.computers = ComputersAPI(self)
        self.clients = ClientsAPI(self)
        self.locations = LocationsAPI(self)
        self.alerts = AlertsAPI(self)
        self.scripts = ScriptsAPI(self)

    async def _authenticate(self) -> str:
        body = {"UserName": self._username, "Password": self._password}
        if self._two_factor_code:
            body["TwoFactorPasscode"] = self._two_factor_code

        resp = await self._http.post("/apitoken", json=body)
        if resp.is_error:
            raise AutomateAPIError(
                resp.status_code, f"Authentication failed: {_error_message(resp)}"
            )
        token = resp.json().get("AccessToken")
        if not token:
            raise AutomateAPIError(
                resp.status_code, "Authentication response did not include an access token"
            )
        logger.info("Obtained Automate API token for %s", self._username)
        self._token = token
        return token

    async def _send(
        self,
        method: str,
        path: str,
        params: dict | None = None,
        json: dict | None = None,
    ) -> httpx.Response:
        if self._token is None:
            await self._authenticate()

        resp = await self._http.request(
            method,
            path,
            params=params,
            json=json,
            headers={"Authorization": f"Bearer {self._token}"},
        )
        if resp.status_code == 401:
            logger.info("Automate token rejected, re-authenticating")
            await self._authenticate()
            resp = await self._http.request(
                method,
                path,
                params=params,
                json=json,
                headers={"Authorization": f"Bearer {self._token}"},
            )
        resp.raise_for_status()
        return resp

    async def request(
        self,
        method: str,
        path: str,
        params: dict | None = None,
        json: dict | None = None,
    ) -> dict | list | None:
        """Send a request and return the decoded JSON body (None when empty)."""
        try:
            if method == "GET":
                resp = await retry_with_backoff(
                    self._send,
                    method,
                    path,
                    params=params,
                    max_retries=self._max_retries,
                    backoff_base=self._backoff_base,
                )
            else:
                resp = await self._send(method, path, params=params, json=json)
        except httpx.HTTPStatusError as exc:
            raise AutomateAPIError(
                exc.response.status_code, _error_message(exc.response)
            ) from exc
        except MaxRetriesExceeded as exc:
            if isinstance(exc.last_error, httpx.HTTPStatusError):
                response = exc.last_error.response
                raise AutomateAPIError(
                    response.status_code, _error_message(response)
                ) from exc
            raise

        if not resp.content:
            return None
        return resp.json()

    async def list_page(
        self,
        path: str,
        condition: str | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        skip: int = 0,
        params: dict | None = None,
    ) -> Page:
        """Fetch ``page_size`` records of a collection starting at ``skip``.

        Automate pages are 1-based and aligned to ``page_size``. A ``skip``
        that falls inside a page reads that page and the next one, then cuts
        the window out of both.
        """
        page_size = max(1, page_size)
        page_index, offset = divmod(max(0, skip), page_size)
        query = {"pageSize": page_size}
        if condition:
            query["condition"] = condition
        if params:
            query.update(params)

        items = await self._fetch_page(path, query, page_index + 1)
        # A short first page is the end of the collection.
        if offset and len(items) == page_size:
            items += await self._fetch_page(path, query, page_index + 2)
        items = items[offset:offset + page_size]
        return Page(total=len(items), items=items)

    async def _fetch_page(self, path: str, query: dict, page: int) -> list:
        data = await self.request("GET", path, params={**query, "page": page})
        return list(data) if isinstance(data, list) else []

    async def close(self) -> None:
        await self._http.aclose()


class _Resource:
    def __init__(self, client: AutomateClient) -> None:
        self._client = client


class ComputersAPI(_Resource):
    async def list(
        self,
        client_id: int | None = None,
        location_id: int | None = None,
        status: str | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        skip: int = 0,
    ) -> Page:
        condition = _condition(
            _eq("Client.Id", client_id),
            _eq("Location.Id", location_id),
            _eq("Status", _filter_value(status)),
        )
        return await self._client.list_page(
            "/Computers", condition=condition, page_size=page_size, skip=skip
        )

    async def get(self, computer_id: int) -> dict:
        return await self._client.request("GET", f"/Computers/{computer_id}")

    async def search(
        self,
        query: str,
        client_id: int | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> Page:
        pattern = _quote(f"%{query}%")
        condition = _condition(
            f"(ComputerName like {pattern} or MACAddress like {pattern})",
            _eq("Client.Id", client_id),
        )
        return await self._client.list_page(
            "/Computers", condition=condition, page_size=page_size
        )

    async def reboot(self, computer_id: int, force: bool | None = None) -> dict:
        body = {"Command": {"Name": "Reboot"}, "Parameters": {"Force": bool(force)}}
        result = await self._client.request(
            "POST", f"/Computers/{computer_id}/CommandExecute", json=body
        )
        return result if result is not None else {"success": True}

    async def run_script(
        self,
        computer_id: int,
        script_id: int,
        parameters: dict[str, str] | None = None,
    ) -> dict:
        body = _drop_none(
            {"ScriptId": script_id, "Parameters": _key_values(parameters)}
        )
        result = await self._client.request(
            "POST", f"/Computers/{computer_id}/Scripts", json=body
        )
        return result if result is not None else {}


CLIENT_FIELDS = {
    "name": "Name",
    "city": "City",
    "state": "State",
    "zip": "Zip",
    "country": "Country",
    "phone": "Phone",
    "email": "Email",
}


def _client_body(fields: dict) -> dict:
    return _drop_none({CLIENT_FIELDS[k]: v for k, v in fields.items() if k in CLIENT_FIELDS})


class ClientsAPI(_Resource):
    async def list(self, page_size: int = DEFAULT_PAGE_SIZE, skip: int = 0) -> Page:
        return await self._client.list_page("/Clients", page_size=page_size, skip=skip)

    async def get(self, client_id: int) -> dict:
        return await self._client.request("GET", f"/Clients/{client_id}")

    async def create(self, name: str, **fields: str | None) -> dict:
        body = _client_body({"name": name, **fields})
        return await self._client.request("POST", "/Clients", json=body)

    async def update(self, client_id: int, **fields: str | None) -> dict:
        body = _client_body(fields)
        return await self._client.request("PATCH", f"/Clients/{client_id}", json=body)


class LocationsAPI(_Resource):
    async def list(
        self,
        client_id: int | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        skip: int = 0,
    ) -> Page:
        return await self._client.list_page(
            "/Locations",
            condition=_eq("Client.Id", client_id),
            page_size=page_size,
            skip=skip,
        )


class AlertsAPI(_Resource):
    async def list(
        self,
        computer_id: int | None = None,
        client_id: int | None = None,
        status: str | None = None,
        severity: str | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        skip: int = 0,
    ) -> Page:
        condition = _condition(
            _eq("ComputerId", computer_id),
            _eq("ClientId", client_id),
            _eq("Status", _filter_value(status)),
            _eq("Severity", _filter_value(severity)),
        )
        return await self._client.list_page(
            "/Alerts", condition=condition, page_size=page_size, skip=skip
        )

    async def get(self, alert_id: int) -> dict:
        return await self._client.request("GET", f"/Alerts/{alert_id}")

    async def acknowledge(self, alert_id: int, comment: str | None = None) -> dict:
        result = await self._client.request(
            "POST",
            f"/Alerts/{alert_id}/Acknowledge",
            json=_drop_none({"Comment": comment}),
        )
        return result if result is not None else {"success": True}


class ScriptsAPI(_Resource):
    async def list(
        self,
        folder_id: int | None = None,
        search: str | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        skip: int = 0,
    ) -> Page:
        condition = _condition(
            _eq("FolderId", folder_id),
            f"ScriptName like {_quote(f'%{search}%')}" if search else None,
        )
        return await self._client.list_page(
            "/Scripts", condition=condition, page_size=page_size, skip=skip
        )

    async def get(self, script_id: int, include_content: bool | None = None) -> dict:
        params = {"includeContent": "true"} if include_content else None
        return await self._client.request("GET", f"/Scripts/{script_id}", params=params)

    async def execute(
        self,
        script_id: int,
        computer_ids: list[int] | None = None,
        parameters: dict[str, str] | None = None,
        priority: str | None = None,
    ) -> dict:
        body = _drop_none(
            {
                "ComputerIds": computer_ids,
                "Parameters": _key_values(parameters),
                "Priority": _filter_value(priority),
            }
        )
        result = await self._client.request(
            "POST", f"/Scripts/{script_id}/Execute", json=body
        )
        return result if result is not None else {}
