from __future__ import annotations

from typing import Annotated, Any, Dict, Optional

from pydantic import Field

from sodium_mcp.core.client import SodiumClient
from sodium_mcp.core.models import NoteCreate, NoteUpdate
from sodium_mcp.core.tools._base import join_lines, render_list, reports_errors

ClientCodeParam = Annotated[str, Field(description="The client code")]
PinnedParam = Annotated[Optional[bool], Field(description="Whether to pin the note")]


def _format_note(note: Dict[str, Any]) -> str:
    lines = [f"Code: {note.get('code')}", f"Content: {note.get('content')}"]
    if note.get("isPinned"):
        lines.append("Pinned: Yes")
    if note.get("createdAt"):
        lines.append(f"Created: {note['createdAt']}")
    if note.get("createdBy"):
        lines.append(f"Created by: {note['createdBy']}")
    return join_lines(lines)


def _note_summary(heading: str, note: Optional[Dict[str, Any]]) -> str:
    note = note or {}
    lines = [
        heading,
        "",
        f"Code: {note.get('code')}",
        f"Content: {note.get('content')}",
    ]
    if note.get("isPinned"):
        lines.append("Pinned: Yes")
    return join_lines(lines)


@reports_errors("listing notes")
async def list_client_notes(
    client: SodiumClient,
    client_code: Annotated[str, Field(description="The client code to list notes for")],
) -> str:
    """
    List all notes for a specific client. Returns note content, creation dates,
    and pinned status.
    """
    notes = await client.list_client_notes(client_code)
    return render_list(
        notes,
        _format_note,
        found=f"note(s) for client {client_code}",
        empty=f"No notes found for client {client_code}.",
    )


@reports_errors("getting note")
async def get_client_note(
    client: SodiumClient,
    client_code: ClientCodeParam,
    note_code: Annotated[str, Field(description="The note code to retrieve")],
) -> str:
    """Get detailed information about a specific note for a client."""
    note = await client.get_client_note(client_code, note_code)
    return f"Note Details:\n\n{_format_note(note or {})}"


@reports_errors("creating note")
async def create_client_note(
    client: SodiumClient,
    client_code: Annotated[
        str, Field(description="The client code to add the note to")
    ],
    content: Annotated[str, Field(description="The note content")],
    *,
    is_pinned: PinnedParam = None,
) -> str:
    """
    Create a new note for a client in SodiumHQ. Returns the created note's code
    and details.
    """
    body = NoteCreate(content=content, is_pinned=is_pinned).to_body()
    note = await client.create_client_note(client_code, body)
    return _note_summary("Note created successfully!", note)


@reports_errors("updating note")
async def update_client_note(
    client: SodiumClient,
    client_code: ClientCodeParam,
    note_code: Annotated[str, Field(description="The note code to update")],
    *,
    content: Annotated[Optional[str], Field(description="New note content")] = None,
    is_pinned: PinnedParam = None,
) -> str:
    """Update an existing note for a client in SodiumHQ."""
    body = NoteUpdate(content=content, is_pinned=is_pinned).to_body()
    note = await client.update_client_note(client_code, note_code, body)
    return _note_summary("Note updated successfully!", note)


@reports_errors("deleting note")
async def delete_client_note(
    client: SodiumClient,
    client_code: ClientCodeParam,
    note_code: Annotated[str, Field(description="The note code to delete")],
) -> str:
    """Delete a note from a client in SodiumHQ. This action cannot be undone."""
    await client.delete_client_note(client_code, note_code)
    return f"Note {note_code} deleted from client {client_code} successfully."
