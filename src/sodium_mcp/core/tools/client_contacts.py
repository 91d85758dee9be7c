from __future__ import annotations

from typing import Annotated, Any, Dict, Optional

from pydantic import Field

from sodium_mcp.core.client import SodiumClient
from sodium_mcp.core.models import ContactFields
from sodium_mcp.core.tools._base import (
    full_name,
    join_lines,
    render_list,
    reports_errors,
)

ClientCodeParam = Annotated[str, Field(description="The client code")]


def _contact_name(contact: Dict[str, Any]) -> str:
    return full_name(contact.get("firstName"), contact.get("lastName")) or "Unnamed"


def _format_contact(contact: Dict[str, Any]) -> str:
    lines = [f"Name: {_contact_name(contact)}", f"Code: {contact.get('code')}"]
    if contact.get("email"):
        lines.append(f"Email: {contact['email']}")
    if contact.get("phone"):
        lines.append(f"Phone: {contact['phone']}")
    if contact.get("type"):
        lines.append(f"Type: {contact['type']}")
    if contact.get("isPrimary"):
        lines.append("Primary: Yes")
    return join_lines(lines)


def _contact_summary(heading: str, contact: Optional[Dict[str, Any]]) -> str:
    contact = contact or {}
    lines = [
        heading,
        "",
        f"Code: {contact.get('code')}",
        f"Name: {_contact_name(contact)}",
    ]
    if contact.get("email"):
        lines.append(f"Email: {contact['email']}")
    if contact.get("phone"):
        lines.append(f"Phone: {contact['phone']}")
    if contact.get("isPrimary"):
        lines.append("Primary: Yes")
    return join_lines(lines)


@reports_errors("listing contacts")
async def list_client_contacts(
    client: SodiumClient,
    client_code: Annotated[
        str, Field(description="The client code to list contacts for")
    ],
) -> str:
    """
    List all contacts for a specific client. Returns contact names, email
    addresses, phone numbers, and types.
    """
    contacts = await client.list_client_contacts(client_code)
    return render_list(
        contacts,
        _format_contact,
        found=f"contact(s) for client {client_code}",
        empty=f"No contacts found for client {client_code}.",
    )


@reports_errors("getting contact")
async def get_client_contact(
    client: SodiumClient,
    client_code: ClientCodeParam,
    contact_code: Annotated[str, Field(description="The contact code to retrieve")],
) -> str:
    """Get detailed information about a specific contact for a client."""
    contact = await client.get_client_contact(client_code, contact_code)
    return f"Contact Details:\n\n{_format_contact(contact or {})}"


@reports_errors("creating contact")
async def create_client_contact(
    client: SodiumClient,
    client_code: Annotated[
        str, Field(description="The client code to add the contact to")
    ],
    *,
    first_name: Annotated[
        Optional[str], Field(description="Contact's first name")
    ] = None,
    last_name: Annotated[
        Optional[str], Field(description="Contact's last name")
    ] = None,
    email: Annotated[
        Optional[str], Field(description="Contact's email address")
    ] = None,
    phone: Annotated[Optional[str], Field(description="Contact's phone number")] = None,
    type: Annotated[Optional[str], Field(description="Contact type")] = None,
    is_primary: Annotated[
        Optional[bool], Field(description="Whether this is the primary contact")
    ] = None,
) -> str:
    """
    Create a new contact for a client in SodiumHQ. Returns the created
    contact's code and details.
    """
    body = ContactFields(
        first_name=first_name,
        last_name=last_name,
        email=email,
        phone=phone,
        type=type,
        is_primary=is_primary,
    ).to_body()
    contact = await client.create_client_contact(client_code, body)
    return _contact_summary("Contact created successfully!", contact)


@reports_errors("updating contact")
async def update_client_contact(
    client: SodiumClient,
    client_code: ClientCodeParam,
    contact_code: Annotated[str, Field(description="The contact code to update")],
    *,
    first_name: Annotated[Optional[str], Field(description="New first name")] = None,
    last_name: Annotated[Optional[str], Field(description="New last name")] = None,
    email: Annotated[Optional[str], Field(description="New email address")] = None,
    phone: Annotated[Optional[str], Field(description="New phone number")] = None,
    type: Annotated[Optional[str], Field(description="New contact type")] = None,
    is_primary: Annotated[
        Optional[bool], Field(description="Whether this is the primary contact")
    ] = None,
) -> str:
    """Update an existing contact for a client in SodiumHQ."""
    body = ContactFields(
        first_name=first_name,
        last_name=last_name,
        email=email,
        phone=phone,
        type=type,
        is_primary=is_primary,
    ).to_body()
    contact = await client.update_client_contact(client_code, contact_code, body)
    return _contact_summary("Contact updated successfully!", contact)


@reports_errors("deleting contact")
async def delete_client_contact(
    client: SodiumClient,
    client_code: ClientCodeParam,
    contact_code: Annotated[str, Field(description="The contact code to delete")],
) -> str:
    """Delete a contact from a client in SodiumHQ. This action cannot be undone."""
    await client.delete_client_contact(client_code, contact_code)
    return f"Contact {contact_code} deleted from client {client_code} successfully."
