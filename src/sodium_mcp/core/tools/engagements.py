"""
Engagement tools: proposals and letters of engagement, their email delivery
history and the tenant-wide engagement settings.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Optional

from pydantic import Field

from sodium_mcp.core.client import SodiumClient
from sodium_mcp.core.models import (
    EngagementCreate,
    EngagementSortField,
    EngagementStatus,
    EngagementType,
    EngagementUpdate,
)
from sodium_mcp.core.tools._base import (
    RECORD_SEPARATOR,
    LimitParam,
    OffsetParam,
    SortDescParam,
    full_name,
    join_lines,
    money,
    ref_with_code,
    render_list,
    reports_errors,
    yes_no,
)

EngagementCodeParam = Annotated[str, Field(description="The engagement code")]
ServiceCodesParam = Annotated[
    Optional[List[str]],
    Field(
        description="List of ClientBillableService codes to include in this engagement"
    ),
]


def _client_line(engagement: Dict[str, Any]) -> Optional[str]:
    ref = engagement.get("client")
    if not ref:
        return None
    return f"Client: {ref.get('name')} ({ref.get('code')})"


def _recipient_lines(engagement: Dict[str, Any]) -> List[str]:
    lines = []
    name = full_name(
        engagement.get("recipientFirstName"), engagement.get("recipientLastName")
    )
    if name:
        lines.append(f"Recipient: {name}")
    if engagement.get("recipientEmail"):
        lines.append(f"Email: {engagement['recipientEmail']}")
    return lines


def _format_engagement(engagement: Dict[str, Any]) -> str:
    lines = [f"Code: {engagement.get('code')}"]
    client_line = _client_line(engagement)
    if client_line:
        lines.append(client_line)
    if engagement.get("status"):
        lines.append(f"Status: {engagement['status']}")
    if engagement.get("typeName"):
        lines.append(f"Type: {engagement['typeName']}")
    if engagement.get("date"):
        lines.append(f"Date: {engagement['date']}")
    lines.extend(_recipient_lines(engagement))

    if engagement.get("annualValue") is not None:
        lines.append(f"Annual Value: {money(engagement['annualValue'])}")
    if engagement.get("numberOfServices") is not None:
        lines.append(f"Services: {engagement['numberOfServices']}")

    if engagement.get("proposalTemplate"):
        lines.append(f"Proposal Template: {engagement['proposalTemplate'].get('name')}")
    if engagement.get("lofETemplate"):
        lines.append(f"Engagement Letter: {engagement['lofETemplate'].get('name')}")

    if engagement.get("lastViewed"):
        lines.append(f"Last Viewed: {engagement['lastViewed']}")
    accepted = (engagement.get("acceptance") or {}).get("acceptedDate")
    if accepted:
        lines.append(f"Accepted: {accepted}")
    if engagement.get("link"):
        lines.append(f"Link: {engagement['link']}")
    return join_lines(lines)


def _format_email(email: Dict[str, Any], index: int) -> str:
    lines = [f"Email #{index}"]
    if email.get("sentDate"):
        lines.append(f"Sent: {email['sentDate']}")
    if email.get("subject"):
        lines.append(f"Subject: {email['subject']}")
    if email.get("toRecipients"):
        lines.append(f"To: {', '.join(email['toRecipients'])}")
    if email.get("status"):
        lines.append(f"Status: {email['status']}")
    if email.get("messageId"):
        lines.append(f"Message ID: {email['messageId']}")
    return join_lines(lines)


# (payload key, label) for the {code, name} references in engagement settings
_SETTINGS_BLOCKS = (
    ("introContentBlock", "Intro Content Block"),
    ("emailContentBlock", "Email Content Block"),
    ("signaturePageContentBlock", "Signature Page Block"),
    ("thankYouContentBlock", "Thank You Content Block"),
    ("thankYouEmailContentBlock", "Thank You Email Block"),
    ("acceptanceTask", "Acceptance Task"),
)

_SETTINGS_FLAGS = (
    ("showPracticeName", "Show Practice Name"),
    ("attachPDFs", "Attach PDFs to Email"),
    ("requestDdMandate", "Request DD Mandate"),
    ("notifyClientManagerOnAcceptance", "Notify Client Manager on Acceptance"),
    ("notifyPartnerOnAcceptance", "Notify Partner on Acceptance"),
)


def _format_settings(settings: Dict[str, Any]) -> str:
    lines: List[str] = []
    theme = ref_with_code(settings.get("designTheme"))
    if theme:
        lines.append(f"Design Theme: {theme}")
    for key, label in _SETTINGS_FLAGS:
        lines.append(f"{label}: {yes_no(settings.get(key))}")
    for key, label in _SETTINGS_BLOCKS:
        ref = ref_with_code(settings.get(key))
        if ref:
            lines.append(f"{label}: {ref}")
    return join_lines(lines)


@reports_errors("listing engagements")
async def list_engagements(
    client: SodiumClient,
    *,
    offset: OffsetParam = None,
    limit: LimitParam = None,
    search: Annotated[
        Optional[str], Field(description="Search term to filter engagements")
    ] = None,
    status: Annotated[
        Optional[EngagementStatus], Field(description="Filter by engagement status")
    ] = None,
    sort_by: Annotated[
        Optional[EngagementSortField], Field(description="Field to sort by")
    ] = None,
    sort_desc: SortDescParam = None,
) -> str:
    """
    List all engagements (proposals/letters of engagement) in the SodiumHQ
    tenant. Returns details including client, status, recipient, annual value,
    and acceptance status.
    """
    engagements = await client.list_engagements(
        offset=offset,
        limit=limit,
        search=search,
        status=status,
        sort_by=sort_by,
        sort_desc=sort_desc,
    )
    return render_list(
        engagements,
        _format_engagement,
        found="engagement(s)",
        empty="No engagements found.",
    )


@reports_errors("getting engagement")
async def get_engagement(
    client: SodiumClient,
    code: Annotated[str, Field(description="The engagement code to retrieve")],
) -> str:
    """Get detailed information about a specific engagement by its code."""
    engagement = await client.get_engagement(code)
    return f"Engagement Details:\n\n{_format_engagement(engagement or {})}"


@reports_errors("creating engagement")
async def create_engagement(
    client: SodiumClient,
    client_code: Annotated[
        str, Field(description="The client code to create the engagement for")
    ],
    date: Annotated[str, Field(description="Engagement date in YYYY-MM-DD format")],
    type: Annotated[EngagementType, Field(description="Engagement type")],
    *,
    recipient_first_name: Annotated[
        Optional[str], Field(description="Recipient's first name")
    ] = None,
    recipient_last_name: Annotated[
        Optional[str], Field(description="Recipient's last name")
    ] = None,
    recipient_email: Annotated[
        Optional[str], Field(description="Recipient's email address")
    ] = None,
    proposal_template_code: Annotated[
        Optional[str], Field(description="Template code for the proposal document")
    ] = None,
    lofe_template_code: Annotated[
        Optional[str],
        Field(description="Template code for the letter of engagement document"),
    ] = None,
    client_billable_service_codes: ServiceCodesParam = None,
) -> str:
    """
    Create a new engagement (proposal/letter of engagement) for a client in
    SodiumHQ. IMPORTANT: the client must have at least one contact assigned
    before document generation will work. Sodium fails to render the proposal
    PDF with 'No contacts found' if none exist, so use list-client-contacts to
    verify (and create-client-contact if needed) before calling this tool.
    Returns the created engagement's code and details.
    """
    body = EngagementCreate(
        client_code=client_code,
        date=date,
        type=type,
        recipient_first_name=recipient_first_name,
        recipient_last_name=recipient_last_name,
        recipient_email=recipient_email,
        proposal_template_code=proposal_template_code,
        lofe_template_code=lofe_template_code,
        client_billable_service_codes=client_billable_service_codes,
    ).to_body()
    engagement = await client.create_engagement(body) or {}

    lines = ["Engagement created successfully!", "", f"Code: {engagement.get('code')}"]
    client_line = _client_line(engagement)
    if client_line:
        lines.append(client_line)
    if engagement.get("status"):
        lines.append(f"Status: {engagement['status']}")
    if engagement.get("type"):
        lines.append(f"Type: {engagement.get('typeName') or engagement['type']}")
    if engagement.get("date"):
        lines.append(f"Date: {engagement['date']}")
    lines.extend(_recipient_lines(engagement))
    if engagement.get("numberOfServices") is not None:
        lines.append(f"Services: {engagement['numberOfServices']}")
    if engagement.get("annualValue") is not None:
        lines.append(f"Annual Value: {money(engagement['annualValue'])}")
    if engagement.get("link"):
        lines.append(f"Link: {engagement['link']}")
    return join_lines(lines)


@reports_errors("updating engagement")
async def update_engagement(
    client: SodiumClient,
    code: Annotated[str, Field(description="The engagement code to update")],
    *,
    client_code: Annotated[Optional[str], Field(description="Client code")] = None,
    date: Annotated[
        Optional[str], Field(description="Engagement date in YYYY-MM-DD format")
    ] = None,
    status: Annotated[
        Optional[EngagementStatus], Field(description="New engagement status")
    ] = None,
    type: Annotated[
        Optional[EngagementType], Field(description="Engagement type")
    ] = None,
    manually_accepted: Annotated[
        Optional[bool], Field(description="Mark the engagement as manually accepted")
    ] = None,
    recipient_first_name: Annotated[
        Optional[str], Field(description="Recipient's first name")
    ] = None,
    recipient_last_name: Annotated[
        Optional[str], Field(description="Recipient's last name")
    ] = None,
    recipient_email: Annotated[
        Optional[str], Field(description="Recipient's email address")
    ] = None,
    proposal_template_code: Annotated[
        Optional[str], Field(description="Template code for the proposal document")
    ] = None,
    lofe_template_code: Annotated[
        Optional[str],
        Field(description="Template code for the letter of engagement document"),
    ] = None,
    client_billable_service_codes: ServiceCodesParam = None,
) -> str:
    """
    Update an existing engagement in SodiumHQ. The request replaces the
    engagement; fields left out are interpreted by SodiumHQ.
    """
    body = EngagementUpdate(
        client_code=client_code,
        date=date,
        status=status,
        type=type,
        manually_accepted=manually_accepted,
        recipient_first_name=recipient_first_name,
        recipient_last_name=recipient_last_name,
        recipient_email=recipient_email,
        proposal_template_code=proposal_template_code,
        lofe_template_code=lofe_template_code,
        client_billable_service_codes=client_billable_service_codes,
    ).to_body()
    engagement = await client.update_engagement(code, body) or {}

    lines = ["Engagement updated successfully!", "", f"Code: {engagement.get('code')}"]
    client_line = _client_line(engagement)
    if client_line:
        lines.append(client_line)
    if engagement.get("status"):
        lines.append(f"Status: {engagement['status']}")
    return join_lines(lines)


@reports_errors("deleting engagement")
async def delete_engagement(
    client: SodiumClient,
    code: Annotated[str, Field(description="The engagement code to delete")],
) -> str:
    """Delete an engagement from SodiumHQ. This action cannot be undone."""
    await client.delete_engagement(code)
    return f"Engagement {code} deleted successfully."


@reports_errors("sending engagement email")
async def send_engagement_email(
    client: SodiumClient,
    code: Annotated[
        str, Field(description="The engagement code to send the email for")
    ],
) -> str:
    """
    Send an email for an engagement using the tenant's configured email
    template. This delivers the proposal/letter of engagement link to the
    recipient and moves the engagement status to Sent.
    """
    await client.send_engagement_email(code)
    return f"Email sent successfully for engagement {code}."


@reports_errors("retrieving engagement email history")
async def get_engagement_emails(
    client: SodiumClient,
    code: Annotated[
        str, Field(description="The engagement code to retrieve email history for")
    ],
) -> str:
    """
    Get the history of emails sent for a specific engagement, including sent
    dates, recipients, subjects, and delivery status.
    """
    emails = await client.get_engagement_emails(code)
    if not emails:
        return f"No emails found for engagement {code}."
    body = RECORD_SEPARATOR.join(
        _format_email(email, i) for i, email in enumerate(emails, start=1)
    )
    return f"Email history for engagement {code} ({len(emails)} email(s)):\n\n{body}"


@reports_errors("getting engagement settings")
async def get_engagement_settings(client: SodiumClient) -> str:
    """
    Get the tenant's engagement settings including the default design theme,
    content blocks (intro, email, signature, thank you), acceptance task, and
    notification preferences.
    """
    settings = await client.get_engagement_settings()
    return f"Engagement Settings:\n\n{_format_settings(settings or {})}"
