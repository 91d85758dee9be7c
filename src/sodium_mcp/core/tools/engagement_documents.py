from __future__ import annotations

from typing import Annotated

from pydantic import Field

from sodium_mcp.core.client import SodiumClient
from sodium_mcp.core.tools._base import reports_errors

PdfContentParam = Annotated[str, Field(description="Base64-encoded PDF content")]


@reports_errors("uploading proposal PDF")
async def upload_proposal_pdf(
    client: SodiumClient,
    code: Annotated[
        str, Field(description="The engagement code to upload the proposal PDF for")
    ],
    pdf_content: PdfContentParam,
) -> str:
    """
    Upload a custom proposal PDF for an engagement. The PDF must be provided as
    a base64-encoded string. This replaces any previously uploaded proposal PDF.
    """
    await client.upload_engagement_proposal_pdf(code, pdf_content)
    return f"Proposal PDF uploaded successfully for engagement {code}."


@reports_errors("downloading proposal PDF")
async def get_proposal_pdf(
    client: SodiumClient,
    code: Annotated[
        str, Field(description="The engagement code to download the proposal PDF for")
    ],
) -> str:
    """
    Download the proposal PDF for an engagement. Returns the PDF as a
    base64-encoded string.
    """
    pdf = await client.download_engagement_proposal_pdf(code)
    return f"Proposal PDF for engagement {code} (base64-encoded):\n\n{pdf}"


@reports_errors("uploading letter of engagement PDF")
async def upload_loe_pdf(
    client: SodiumClient,
    code: Annotated[
        str, Field(description="The engagement code to upload the LoE PDF for")
    ],
    pdf_content: PdfContentParam,
) -> str:
    """
    Upload a custom letter of engagement (LoE) PDF for an engagement. The PDF
    must be provided as a base64-encoded string. This replaces any previously
    uploaded LoE PDF.
    """
    await client.upload_engagement_loe_pdf(code, pdf_content)
    return f"Letter of engagement PDF uploaded successfully for engagement {code}."


@reports_errors("downloading letter of engagement PDF")
async def get_loe_pdf(
    client: SodiumClient,
    code: Annotated[
        str, Field(description="The engagement code to download the LoE PDF for")
    ],
) -> str:
    """
    Download the letter of engagement (LoE) PDF for an engagement. Returns the
    PDF as a base64-encoded string. Use the hasLofEPdf field from
    get-engagement to check if one exists before calling this.
    """
    pdf = await client.download_engagement_loe_pdf(code)
    return f"Letter of engagement PDF for engagement {code} (base64-encoded):\n\n{pdf}"
