from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# --- Enumerations shared by tool schemas ---

ClientType = Literal[
    "PrivateLimitedCompany",
    "PublicLimitedCompany",
    "LimitedLiabilityPartnership",
    "Partnership",
    "Individual",
    "Trust",
]

ServiceCategory = Literal[
    "Other",
    "CoreAccounting",
    "Tax",
    "Payroll",
    "CompanySecretarial",
    "Advisory",
    "SoftwareAndTraining",
]

TemplateType = Literal["Proposal", "EngagementLetter", "ProfessionalClearanceLetter"]

EngagementStatus = Literal["Unsent", "Sent", "Viewed", "Accepted", "Rejected"]
EngagementType = Literal["ProposalAndEngagementLetter", "EngagementLetter"]
EngagementSortField = Literal[
    "Client", "Code", "Date", "Status", "NumberOfServices", "AnnualValue"
]

BillingFrequency = Literal["OneOff", "Annual", "Quarterly", "Monthly"]
ServiceStatus = Literal["Active", "Inactive", "Paused", "Proposed"]
ServiceSortField = Literal["Name", "Category", "AccountingCode"]
TemplateSortField = Literal["Name", "UpdatedDate"]
PackageSortField = Literal["Name"]


class RequestBody(BaseModel):
    """
    Base for outgoing payloads.
    Python field names are snake_case; the wire format is camelCase.
    Unset optionals are dropped so the remote decides how to treat them.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid"
    )

    def to_body(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


# --- Clients ---


class ClientCreate(RequestBody):
    name: str
    type: Optional[str] = None


class ClientUpdate(RequestBody):
    name: Optional[str] = None
    type: Optional[str] = None
    status: Optional[str] = None


# --- Contacts / notes ---


class ContactFields(RequestBody):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    type: Optional[str] = None
    is_primary: Optional[bool] = None


class NoteCreate(RequestBody):
    content: str
    is_pinned: Optional[bool] = None


class NoteUpdate(RequestBody):
    content: Optional[str] = None
    is_pinned: Optional[bool] = None


# --- Tasks ---


class TaskCreate(RequestBody):
    name: str
    description: Optional[str] = None
    due_date: Optional[str] = None
    client_code: Optional[str] = None
    assigned_to: Optional[str] = None
    category: Optional[str] = None


class TaskUpdate(RequestBody):
    name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    due_date: Optional[str] = None
    assigned_to: Optional[str] = None
    category: Optional[str] = None


# --- Engagements ---


class EngagementCreate(RequestBody):
    client_code: str
    date: str
    type: EngagementType
    recipient_first_name: Optional[str] = None
    recipient_last_name: Optional[str] = None
    recipient_email: Optional[str] = None
    proposal_template_code: Optional[str] = None
    # "LofE" is the vendor's spelling; the generated alias would not match it
    lofe_template_code: Optional[str] = Field(default=None, alias="lofETemplateCode")
    client_billable_service_codes: Optional[List[str]] = None


class EngagementUpdate(RequestBody):
    client_code: Optional[str] = None
    date: Optional[str] = None
    status: Optional[EngagementStatus] = None
    type: Optional[EngagementType] = None
    manually_accepted: Optional[bool] = None
    recipient_first_name: Optional[str] = None
    recipient_last_name: Optional[str] = None
    recipient_email: Optional[str] = None
    proposal_template_code: Optional[str] = None
    lofe_template_code: Optional[str] = Field(default=None, alias="lofETemplateCode")
    client_billable_service_codes: Optional[List[str]] = None


# --- Client services ---


class ClientServiceFields(RequestBody):
    billable_service_code: str
    billing_frequency: BillingFrequency
    start_date: str
    status: ServiceStatus
    price: Optional[float] = None
    override_pricing: Optional[bool] = None
    price_adjustment_percentage: Optional[float] = None
    end_date: Optional[str] = None
    managed_by_user_code: Optional[str] = None
    pricing_answers: Optional[Dict[str, str]] = None


__all__ = [
    "BillingFrequency",
    "ClientCreate",
    "ClientServiceFields",
    "ClientType",
    "ClientUpdate",
    "ContactFields",
    "EngagementCreate",
    "EngagementSortField",
    "EngagementStatus",
    "EngagementType",
    "EngagementUpdate",
    "NoteCreate",
    "NoteUpdate",
    "PackageSortField",
    "RequestBody",
    "ServiceCategory",
    "ServiceSortField",
    "ServiceStatus",
    "TaskCreate",
    "TaskUpdate",
    "TemplateSortField",
    "TemplateType",
]
