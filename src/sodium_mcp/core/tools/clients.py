from __future__ import annotations

from typing import Annotated, Any, Dict, List, Optional

from pydantic import Field

from sodium_mcp.core.client import SodiumClient
from sodium_mcp.core.models import ClientCreate, ClientUpdate
from sodium_mcp.core.tools._base import (
    LimitParam,
    OffsetParam,
    join_lines,
    ref_label,
    render_list,
    reports_errors,
)


def _format_client(client: Dict[str, Any], *, detailed: bool = False) -> str:
    lines: List[str] = [
        f"Name: {client.get('name')}",
        f"Code: {client.get('code')}",
    ]
    if client.get("type"):
        lines.append(f"Type: {client['type']}")
    if client.get("status"):
        lines.append(f"Status: {client['status']}")
    if ref_label(client.get("manager")):
        lines.append(f"Manager: {ref_label(client['manager'])}")
    if ref_label(client.get("partner")):
        lines.append(f"Partner: {ref_label(client['partner'])}")
    if client.get("createdDate"):
        lines.append(f"Created: {client['createdDate']}")
    if detailed and client.get("updatedDate"):
        lines.append(f"Updated: {client['updatedDate']}")
    return join_lines(lines)


def _client_summary(heading: str, client: Optional[Dict[str, Any]]) -> str:
    client = client or {}
    lines = [
        heading,
        "",
        f"Code: {client.get('code')}",
        f"Name: {client.get('name')}",
    ]
    if client.get("type"):
        lines.append(f"Type: {client['type']}")
    if client.get("status"):
        lines.append(f"Status: {client['status']}")
    return join_lines(lines)


@reports_errors("listing clients")
async def list_clients(
    client: SodiumClient,
    *,
    offset: OffsetParam = None,
    limit: LimitParam = None,
    search: Annotated[
        Optional[str], Field(description="Search term to filter clients by name")
    ] = None,
) -> str:
    """
    List all clients in the SodiumHQ tenant. Returns client names, codes, type,
    status, and assigned manager/partner.
    """
    clients = await client.list_clients(offset=offset, limit=limit, search=search)
    return render_list(
        clients, _format_client, found="client(s)", empty="No clients found."
    )


@reports_errors("getting client")
async def get_client(
    client: SodiumClient,
    code: Annotated[str, Field(description="The client code to retrieve")],
) -> str:
    """Get detailed information about a specific client by their code."""
    record = await client.get_client(code)
    return f"Client Details:\n\n{_format_client(record or {}, detailed=True)}"


@reports_errors("creating client")
async def create_client(
    client: SodiumClient,
    name: Annotated[str, Field(description="The client's name")],
    *,
    type: Annotated[
        Optional[str],
        Field(
            description=(
                "The client type (e.g. PrivateLimitedCompany, Partnership, "
                "Individual)"
            )
        ),
    ] = None,
) -> str:
    """
    Create a new client in SodiumHQ. Returns the created client's code and
    details.
    """
    body = ClientCreate(name=name, type=type).to_body()
    record = await client.create_client(body)
    return _client_summary("Client created successfully!", record)


@reports_errors("updating client")
async def update_client(
    client: SodiumClient,
    code: Annotated[str, Field(description="The client code to update")],
    *,
    name: Annotated[Optional[str], Field(description="New client name")] = None,
    type: Annotated[Optional[str], Field(description="New client type")] = None,
    status: Annotated[Optional[str], Field(description="New client status")] = None,
) -> str:
    """
    Update an existing client in SodiumHQ. The request replaces the client
    record; fields left out are interpreted by SodiumHQ.
    """
    body = ClientUpdate(name=name, type=type, status=status).to_body()
    record = await client.update_client(code, body)
    return _client_summary("Client updated successfully!", record)


@reports_errors("deleting client")
async def delete_client(
    client: SodiumClient,
    code: Annotated[str, Field(description="The client code to delete")],
) -> str:
    """Delete a client from SodiumHQ. This action cannot be undone."""
    await client.delete_client(code)
    return f"Client {code} deleted successfully."
