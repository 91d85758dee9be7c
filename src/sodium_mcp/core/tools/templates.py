from __future__ import annotations

from typing import Annotated, Any, Dict, Optional

from pydantic import Field

from sodium_mcp.core.client import SodiumClient
from sodium_mcp.core.models import TemplateSortField, TemplateType
from sodium_mcp.core.tools._base import (
    SortDescParam,
    join_lines,
    ref_with_code,
    render_list,
    reports_errors,
    yes_no,
)


_TEMPLATE_FIELDS = (("name", "Name"), ("type", "Type"), ("description", "Description"))


def _format_template(template: Dict[str, Any]) -> str:
    lines = [f"Code: {template.get('code')}"]
    for key, label in _TEMPLATE_FIELDS:
        if template.get(key):
            lines.append(f"{label}: {template[key]}")
    lines.append(f"Active: {yes_no(template.get('isActive'))}")
    theme = ref_with_code(template.get("defaultDesignTheme"))
    if theme:
        lines.append(f"Theme: {theme}")
    return join_lines(lines)


@reports_errors("listing document templates")
async def list_document_templates(
    client: SodiumClient,
    *,
    type: Annotated[
        Optional[TemplateType], Field(description="Filter by template type")
    ] = None,
    search: Annotated[
        Optional[str],
        Field(
            description="Search across template code and name (minimum 3 characters)"
        ),
    ] = None,
    is_active: Annotated[
        Optional[bool],
        Field(description="Filter by active status (omit to return all)"),
    ] = None,
    sort_by: Annotated[
        Optional[TemplateSortField], Field(description="Field to sort by")
    ] = None,
    sort_desc: SortDescParam = None,
    offset: Annotated[Optional[int], Field(description="Pagination offset")] = None,
    limit: Annotated[
        Optional[int], Field(description="Max results to return (max 50)")
    ] = None,
) -> str:
    """
    List document templates available in the tenant. Filter by type to find
    proposal templates (type=Proposal) or letter of engagement templates
    (type=EngagementLetter). Returns the codes needed for
    proposal_template_code and lofe_template_code when creating engagements.
    """
    templates = await client.list_document_templates(
        search=search,
        template_type=type,
        is_active=is_active,
        offset=offset,
        limit=limit,
        sort_by=sort_by,
        sort_desc=sort_desc,
    )
    return render_list(
        templates,
        _format_template,
        found="template(s)",
        empty="No document templates found.",
    )
