import json

import pytest
import respx
from httpx import Response
from sodium_mcp.core.client import SodiumClient
from sodium_mcp.core.config import SodiumConfig
from sodium_mcp.core.tools.client_contacts import (
    create_client_contact,
    delete_client_contact,
    get_client_contact,
    list_client_contacts,
    update_client_contact,
)
from sodium_mcp.core.tools.client_notes import (
    create_client_note,
    delete_client_note,
    get_client_note,
    list_client_notes,
    update_client_note,
)

BASE = "https://api.sodium.test"
CLIENT_URL = f"{BASE}/tenants/acme/clients/C001"


@pytest.fixture
def client():
    return SodiumClient(SodiumConfig(api_key="mock-key", tenant="acme", base_url=BASE))


# --- Contacts --------------------------------------------------------------- #


@pytest.mark.asyncio
@respx.mock
async def test_list_client_contacts(client):
    respx.get(f"{CLIENT_URL}/clientcontact").mock(
        return_value=Response(
            200,
            json={
                "data": [
                    {
                        "code": "K1",
                        "firstName": "Ada",
                        "lastName": "Lovelace",
                        "email": "ada@example.com",
                        "type": "Director",
                        "isPrimary": True,
                    },
                    {"code": "K2"},
                ]
            },
        )
    )

    async with client:
        result = await list_client_contacts(client, "C001")

    assert result.text == (
        "Found 2 contact(s) for client C001:\n\n"
        "Name: Ada Lovelace\n"
        "Code: K1\n"
        "Email: ada@example.com\n"
        "Type: Director\n"
        "Primary: Yes"
        "\n\n---\n\n"
        "Name: Unnamed\n"
        "Code: K2"
    )


@pytest.mark.asyncio
@respx.mock
async def test_list_client_contacts_empty(client):
    respx.get(f"{CLIENT_URL}/clientcontact").mock(
        return_value=Response(200, json={"data": []})
    )

    async with client:
        result = await list_client_contacts(client, "C001")

    assert result.text == "No contacts found for client C001."


@pytest.mark.asyncio
@respx.mock
async def test_get_client_contact(client):
    respx.get(f"{CLIENT_URL}/clientcontact/K1").mock(
        return_value=Response(200, json={"code": "K1", "firstName": "Ada"})
    )

    async with client:
        result = await get_client_contact(client, "C001", "K1")

    assert result.text == "Contact Details:\n\nName: Ada\nCode: K1"


@pytest.mark.asyncio
@respx.mock
async def test_create_client_contact_sends_camel_case(client):
    route = respx.post(f"{CLIENT_URL}/clientcontact").mock(
        return_value=Response(
            201,
            json={
                "code": "K3",
                "firstName": "Grace",
                "lastName": "Hopper",
                "phone": "0123",
                "isPrimary": True,
            },
        )
    )

    async with client:
        result = await create_client_contact(
            client, "C001", first_name="Grace", last_name="Hopper", is_primary=True
        )

    assert json.loads(route.calls[0].request.content) == {
        "firstName": "Grace",
        "lastName": "Hopper",
        "isPrimary": True,
    }
    assert result.text == (
        "Contact created successfully!\n\n"
        "Code: K3\n"
        "Name: Grace Hopper\n"
        "Phone: 0123\n"
        "Primary: Yes"
    )


@pytest.mark.asyncio
@respx.mock
async def test_update_client_contact_error(client):
    respx.put(f"{CLIENT_URL}/clientcontact/K1").mock(
        return_value=Response(400, json={"message": "Email is invalid"})
    )

    async with client:
        result = await update_client_contact(client, "C001", "K1", email="nope")

    assert result.is_error
    assert result.text == "Error updating contact: Email is invalid"


@pytest.mark.asyncio
@respx.mock
async def test_delete_client_contact(client):
    respx.delete(f"{CLIENT_URL}/clientcontact/K1").mock(return_value=Response(204))

    async with client:
        result = await delete_client_contact(client, "C001", "K1")

    assert result.text == "Contact K1 deleted from client C001 successfully."


# --- Notes ------------------------------------------------------------------ #


@pytest.mark.asyncio
@respx.mock
async def test_list_client_notes(client):
    respx.get(f"{CLIENT_URL}/clientnote").mock(
        return_value=Response(
            200,
            json={
                "data": [
                    {
                        "code": "N1",
                        "content": "Year end moved",
                        "isPinned": True,
                        "createdAt": "2024-03-01",
                        "createdBy": "Jo",
                    }
                ]
            },
        )
    )

    async with client:
        result = await list_client_notes(client, "C001")

    assert result.text == (
        "Found 1 note(s) for client C001:\n\n"
        "Code: N1\n"
        "Content: Year end moved\n"
        "Pinned: Yes\n"
        "Created: 2024-03-01\n"
        "Created by: Jo"
    )


@pytest.mark.asyncio
@respx.mock
async def test_list_client_notes_empty(client):
    respx.get(f"{CLIENT_URL}/clientnote").mock(return_value=Response(204))

    async with client:
        result = await list_client_notes(client, "C001")

    assert result.text == "No notes found for client C001."


@pytest.mark.asyncio
@respx.mock
async def test_get_client_note(client):
    respx.get(f"{CLIENT_URL}/clientnote/N1").mock(
        return_value=Response(200, json={"code": "N1", "content": "Hello"})
    )

    async with client:
        result = await get_client_note(client, "C001", "N1")

    assert result.text == "Note Details:\n\nCode: N1\nContent: Hello"


@pytest.mark.asyncio
@respx.mock
async def test_create_and_update_client_note(client):
    create_route = respx.post(f"{CLIENT_URL}/clientnote").mock(
        return_value=Response(201, json={"code": "N2", "content": "Call back"})
    )
    update_route = respx.put(f"{CLIENT_URL}/clientnote/N2").mock(
        return_value=Response(
            200, json={"code": "N2", "content": "Call back", "isPinned": True}
        )
    )

    async with client:
        created = await create_client_note(client, "C001", "Call back")
        updated = await update_client_note(client, "C001", "N2", is_pinned=True)

    assert json.loads(create_route.calls[0].request.content) == {"content": "Call back"}
    assert json.loads(update_route.calls[0].request.content) == {"isPinned": True}
    assert created.text == "Note created successfully!\n\nCode: N2\nContent: Call back"
    assert updated.text.endswith("Pinned: Yes")
    assert updated.text.startswith("Note updated successfully!")


@pytest.mark.asyncio
@respx.mock
async def test_delete_client_note_error(client):
    respx.delete(f"{CLIENT_URL}/clientnote/N9").mock(
        return_value=Response(404, json={"message": "Note not found"})
    )

    async with client:
        result = await delete_client_note(client, "C001", "N9")

    assert result.text == "Error deleting note: Note not found"
