from __future__ import annotations

import base64
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple
from urllib.parse import quote

import httpx

from .config import SodiumConfig
from .errors import (
    SodiumClientError,
    SodiumConfigError,
    SodiumHTTPError,
    SodiumParseError,
)
from .observability import timed_call
from .pagination import page_items

API_KEY_HEADER = "x-api-key"
JSON_MEDIA_TYPE = "application/json"
PDF_MEDIA_TYPE = "application/pdf"

QueryValue = Any


def _query_str(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_query(params: Optional[Mapping[str, QueryValue]]) -> List[Tuple[str, str]]:
    """
    Flatten a query mapping into ordered (key, value) pairs.
    - None values are dropped
    - list/tuple values repeat the key once per element, in order
    - booleans render as true/false
    """
    pairs: List[Tuple[str, str]] = []
    if not params:
        return pairs
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            pairs.extend((key, _query_str(v)) for v in value if v is not None)
        else:
            pairs.append((key, _query_str(value)))
    return pairs


class SodiumClient:
    """
    Shared HTTP client for the SodiumHQ REST API.
    - Handles the API key header, base URL, tenant path scoping and timeouts
    - Unwraps paginated list envelopes; returns raw dict/list payloads otherwise
    - No retries and no business logic; tools own presentation
    """

    def __init__(
        self,
        config: SodiumConfig,
        *,
        logger: Optional[logging.Logger] = None,
        http: Optional[httpx.AsyncClient] = None,
    ):
        base_url = (config.base_url or "").rstrip("/")
        if not base_url:
            raise SodiumConfigError("base_url must be provided.")

        self.config = config
        self.base_url = base_url
        self.tenant = config.tenant
        self.log = logger or logging.getLogger("sodium_mcp.client")

        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                API_KEY_HEADER: config.api_key,
                "Accept": JSON_MEDIA_TYPE,
            },
            timeout=config.timeout_seconds,
        )

    @classmethod
    def from_env(cls, *, use_dotenv: bool = True, **kwargs) -> "SodiumClient":
        return cls(SodiumConfig.from_env(use_dotenv=use_dotenv), **kwargs)

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()

    async def __aenter__(self) -> "SodiumClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    # --- Transport --------------------------------------------------------- #

    def tenant_path(self, *segments: str) -> str:
        """Build /tenants/{tenant}/... with every segment percent-quoted."""
        parts = [quote(str(s), safe="") for s in (self.tenant, *segments)]
        return "/tenants/" + "/".join(parts)

    async def _send(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, QueryValue]],
        headers: Dict[str, str],
        json: Any = None,
        tool: Optional[str] = None,
    ) -> httpx.Response:
        try:
            with timed_call(
                "sodium_call",
                tool=tool,
                tenant=self.tenant,
                method=method,
                endpoint=path,
            ) as call:
                resp = await self.http.request(
                    method,
                    path,
                    params=build_query(params),
                    headers=headers,
                    json=json,
                )
                call["status"] = resp.status_code
        except (httpx.TimeoutException, httpx.NetworkError) as exc:
            raise SodiumClientError(
                f"Network/timeout error calling {method} {path}: {exc}"
            ) from exc
        except httpx.HTTPError as exc:
            raise SodiumClientError(
                f"HTTPX error calling {method} {path}: {exc}"
            ) from exc
        return resp

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, QueryValue]] = None,
        json: Any = None,
        tool: Optional[str] = None,
    ) -> Any:
        """
        Core JSON request method.
        - POST/PUT declare a JSON content type and send ``json`` when given
        - GET/DELETE never send a body
        - Raises SodiumHTTPError on non-2xx responses
        - Raises SodiumClientError on network/timeout errors (no retries)
        - Returns None for 204/empty bodies, the parsed JSON otherwise
        """
        method = method.upper()
        headers = {"Accept": JSON_MEDIA_TYPE}
        body = None
        if method in ("POST", "PUT"):
            headers["Content-Type"] = JSON_MEDIA_TYPE
            body = json

        resp = await self._send(
            method, path, params=params, headers=headers, json=body, tool=tool
        )
        if resp.status_code < 200 or resp.status_code >= 300:
            raise self._to_http_error(resp, method=method)
        # Unlike the vendor contract, an empty 2xx body also returns None here
        return self._safe_json(resp)

    async def request_binary(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, QueryValue]] = None,
        accept: str = PDF_MEDIA_TYPE,
        tool: Optional[str] = None,
    ) -> str:
        """Fetch a binary payload and return it base64-encoded."""
        method = method.upper()
        resp = await self._send(
            method, path, params=params, headers={"Accept": accept}, tool=tool
        )
        if resp.status_code < 200 or resp.status_code >= 300:
            raise self._to_http_error(resp, method=method)
        return base64.b64encode(resp.content).decode("ascii")

    def _safe_json(self, resp: httpx.Response) -> Any:
        # 204 No Content is an empty success, not a parse attempt. A zero-length
        # body on any other 2xx status is treated the same way.
        if resp.status_code == 204 or not resp.content:
            return None

        try:
            return resp.json()
        except ValueError as exc:
            snippet = (resp.text or "")[:500]
            raise SodiumParseError(
                f"Expected JSON from {resp.request.method} "
                f"{resp.request.url}, got non-JSON body snippet: "
                f"{snippet!r}"
            ) from exc

    def _to_http_error(self, resp: httpx.Response, *, method: str) -> SodiumHTTPError:
        message = f"HTTP {resp.status_code}: {resp.reason_phrase}"
        try:
            parsed = resp.json()
        except ValueError:
            parsed = None

        if isinstance(parsed, dict):
            body_message = parsed.get("message")
            if isinstance(body_message, str) and body_message:
                message = body_message

        return SodiumHTTPError(
            status_code=resp.status_code,
            message=message,
            method=method,
            url=str(resp.request.url),
        )

    # --- Resource templates ------------------------------------------------ #

    async def _list(
        self,
        *segments: str,
        params: Optional[Mapping[str, QueryValue]] = None,
        tool: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        payload = await self.request(
            "GET", self.tenant_path(*segments), params=params, tool=tool
        )
        return page_items(payload)

    async def _get(self, *segments: str, tool: Optional[str] = None) -> Any:
        return await self.request("GET", self.tenant_path(*segments), tool=tool)

    async def _create(
        self, *segments: str, body: Any = None, tool: Optional[str] = None
    ) -> Any:
        return await self.request(
            "POST", self.tenant_path(*segments), json=body, tool=tool
        )

    async def _update(
        self, *segments: str, body: Any, tool: Optional[str] = None
    ) -> Any:
        return await self.request(
            "PUT", self.tenant_path(*segments), json=body, tool=tool
        )

    async def _delete(self, *segments: str, tool: Optional[str] = None) -> Any:
        return await self.request("DELETE", self.tenant_path(*segments), tool=tool)

    # --- Clients ----------------------------------------------------------- #

    async def list_clients(
        self,
        *,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
        search: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        params = {"offset": offset, "limit": limit, "search": search}
        return await self._list("clients", params=params, tool="clients")

    async def get_client(self, code: str) -> Dict[str, Any]:
        return await self._get("clients", code, tool="clients")

    async def create_client(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._create("clients", body=data, tool="clients")

    async def update_client(self, code: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._update("clients", code, body=data, tool="clients")

    async def delete_client(self, code: str) -> None:
        return await self._delete("clients", code, tool="clients")

    # --- Client contacts --------------------------------------------------- #

    async def list_client_contacts(self, client_code: str) -> List[Dict[str, Any]]:
        return await self._list(
            "clients", client_code, "clientcontact", tool="client_contacts"
        )

    async def get_client_contact(
        self, client_code: str, contact_code: str
    ) -> Dict[str, Any]:
        return await self._get(
            "clients", client_code, "clientcontact", contact_code,
            tool="client_contacts",
        )

    async def create_client_contact(
        self, client_code: str, data: Dict[str, Any]
    ) -> Dict[str, Any]:
        return await self._create(
            "clients", client_code, "clientcontact", body=data, tool="client_contacts"
        )

    async def update_client_contact(
        self, client_code: str, contact_code: str, data: Dict[str, Any]
    ) -> Dict[str, Any]:
        return await self._update(
            "clients", client_code, "clientcontact", contact_code,
            body=data, tool="client_contacts",
        )

    async def delete_client_contact(self, client_code: str, contact_code: str) -> None:
        return await self._delete(
            "clients", client_code, "clientcontact", contact_code,
            tool="client_contacts",
        )

    # --- Client notes ------------------------------------------------------ #

    async def list_client_notes(self, client_code: str) -> List[Dict[str, Any]]:
        return await self._list(
            "clients", client_code, "clientnote", tool="client_notes"
        )

    async def get_client_note(self, client_code: str, note_code: str) -> Dict[str, Any]:
        return await self._get(
            "clients", client_code, "clientnote", note_code, tool="client_notes"
        )

    async def create_client_note(
        self, client_code: str, data: Dict[str, Any]
    ) -> Dict[str, Any]:
        return await self._create(
            "clients", client_code, "clientnote", body=data, tool="client_notes"
        )

    async def update_client_note(
        self, client_code: str, note_code: str, data: Dict[str, Any]
    ) -> Dict[str, Any]:
        return await self._update(
            "clients", client_code, "clientnote", note_code,
            body=data, tool="client_notes",
        )

    async def delete_client_note(self, client_code: str, note_code: str) -> None:
        return await self._delete(
            "clients", client_code, "clientnote", note_code, tool="client_notes"
        )

    # --- Tasks ------------------------------------------------------------- #

    async def list_tasks(
        self,
        *,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
        client_code: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        params = {"offset": offset, "limit": limit, "clientCode": client_code}
        return await self._list("tasks", params=params, tool="tasks")

    async def get_task(self, code: str) -> Dict[str, Any]:
        return await self._get("tasks", code, tool="tasks")

    async def create_task(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._create("tasks", body=data, tool="tasks")

    async def update_task(self, code: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._update("tasks", code, body=data, tool="tasks")

    async def delete_task(self, code: str) -> None:
        return await self._delete("tasks", code, tool="tasks")

    # --- Client services --------------------------------------------------- #

    _CLIENT_SERVICES = ("services", "clientbillableservice")

    async def list_client_services(self, client_code: str) -> List[Dict[str, Any]]:
        return await self._list(
            "clients", client_code, *self._CLIENT_SERVICES, tool="client_services"
        )

    async def get_client_service(
        self, client_code: str, service_code: str
    ) -> Dict[str, Any]:
        return await self._get(
            "clients", client_code, *self._CLIENT_SERVICES, service_code,
            tool="client_services",
        )

    async def create_client_service(
        self, client_code: str, data: Dict[str, Any]
    ) -> Dict[str, Any]:
        return await self._create(
            "clients", client_code, *self._CLIENT_SERVICES,
            body=data, tool="client_services",
        )

    async def update_client_service(
        self, client_code: str, service_code: str, data: Dict[str, Any]
    ) -> Dict[str, Any]:
        return await self._update(
            "clients", client_code, *self._CLIENT_SERVICES, service_code,
            body=data, tool="client_services",
        )

    # --- Engagements ------------------------------------------------------- #

    async def list_engagements(
        self,
        *,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
        search: Optional[str] = None,
        status: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_desc: Optional[bool] = None,
    ) -> List[Dict[str, Any]]:
        params = {
            "offset": offset,
            "limit": limit,
            "search": search,
            "status": status,
            "sortBy": sort_by,
            "sortDesc": sort_desc,
        }
        return await self._list("engagements", params=params, tool="engagements")

    async def get_engagement(self, code: str) -> Dict[str, Any]:
        return await self._get("engagements", code, tool="engagements")

    async def create_engagement(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._create("engagements", body=data, tool="engagements")

    async def update_engagement(
        self, code: str, data: Dict[str, Any]
    ) -> Dict[str, Any]:
        return await self._update("engagements", code, body=data, tool="engagements")

    async def delete_engagement(self, code: str) -> None:
        return await self._delete("engagements", code, tool="engagements")

    async def send_engagement_email(self, code: str) -> None:
        return await self._create("engagements", code, "email", tool="engagements")

    async def get_engagement_emails(self, code: str) -> List[Dict[str, Any]]:
        return await self._get("engagements", code, "email", tool="engagements")

    async def upload_engagement_proposal_pdf(self, code: str, pdf_content: str) -> None:
        return await self._create(
            "engagements", code, "pdf", "proposal",
            body={"pdfContent": pdf_content}, tool="engagement_documents",
        )

    async def download_engagement_proposal_pdf(self, code: str) -> str:
        return await self.request_binary(
            "GET",
            self.tenant_path("engagements", code, "pdf", "proposal"),
            tool="engagement_documents",
        )

    async def upload_engagement_loe_pdf(self, code: str, pdf_content: str) -> None:
        return await self._create(
            "engagements", code, "pdf", "letter-of-engagement",
            body={"pdfContent": pdf_content}, tool="engagement_documents",
        )

    async def download_engagement_loe_pdf(self, code: str) -> str:
        return await self.request_binary(
            "GET",
            self.tenant_path("engagements", code, "pdf", "letter-of-engagement"),
            tool="engagement_documents",
        )

    async def get_engagement_settings(self) -> Dict[str, Any]:
        return await self._get(
            "practice", "engagement-settings", tool="engagement_settings"
        )

    # --- Services catalog -------------------------------------------------- #

    async def list_services(
        self,
        *,
        search: Optional[str] = None,
        category: Optional[str] = None,
        client_type: Optional[str] = None,
        is_archived: Optional[bool] = None,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
        sort_by: Optional[str] = None,
        sort_desc: Optional[bool] = None,
    ) -> List[Dict[str, Any]]:
        params = {
            "search": search,
            "category": category,
            "clientType": client_type,
            "isArchived": is_archived,
            "offset": offset,
            "limit": limit,
            "sortBy": sort_by,
            "sortDesc": sort_desc,
        }
        return await self._list("services", params=params, tool="services")

    async def get_service(self, code: str) -> Dict[str, Any]:
        return await self._get("services", code, tool="services")

    # --- Document templates ------------------------------------------------ #

    async def list_document_templates(
        self,
        *,
        search: Optional[str] = None,
        template_type: Optional[str] = None,
        is_active: Optional[bool] = None,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
        sort_by: Optional[str] = None,
        sort_desc: Optional[bool] = None,
    ) -> List[Dict[str, Any]]:
        params = {
            "search": search,
            "type": template_type,
            "isActive": is_active,
            "offset": offset,
            "limit": limit,
            "sortBy": sort_by,
            "sortDesc": sort_desc,
        }
        return await self._list(
            "document-templates", params=params, tool="document_templates"
        )

    async def get_document_template(self, code: str) -> Dict[str, Any]:
        return await self._get("document-templates", code, tool="document_templates")

    # --- Service packages -------------------------------------------------- #

    async def list_service_packages(
        self,
        *,
        search: Optional[str] = None,
        service: Optional[Sequence[str]] = None,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
        sort_by: Optional[str] = None,
        sort_desc: Optional[bool] = None,
    ) -> List[Dict[str, Any]]:
        params = {
            "search": search,
            "service": list(service) if service is not None else None,
            "offset": offset,
            "limit": limit,
            "sortBy": sort_by,
            "sortDesc": sort_desc,
        }
        return await self._list(
            "service-packages", params=params, tool="service_packages"
        )

    async def get_service_package(self, code: str) -> Dict[str, Any]:
        return await self._get("service-packages", code, tool="service_packages")


__all__ = [
    "API_KEY_HEADER",
    "SodiumClient",
    "SodiumClientError",
    "SodiumHTTPError",
    "SodiumParseError",
    "build_query",
]
