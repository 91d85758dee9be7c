"""
Billable services: the tenant catalog (read-only) and the services assigned
to individual clients.

Client service codes listed here are what engagements reference through
``client_billable_service_codes``.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Optional

from pydantic import Field

from sodium_mcp.core.client import SodiumClient
from sodium_mcp.core.models import (
    BillingFrequency,
    ClientServiceFields,
    ClientType,
    ServiceCategory,
    ServiceSortField,
    ServiceStatus,
)
from sodium_mcp.core.tools._base import (
    SortDescParam,
    join_lines,
    money,
    pricing_answer_lines,
    render_list,
    reports_errors,
    yes_no,
)


def _price(value: Any) -> str:
    return money(value) if value is not None else "£?"


def _percent(value: Any) -> str:
    value = value or 0
    sign = "+" if value >= 0 else ""
    return f"{sign}{value * 100:.0f}%"


def _catalog_header(service: Dict[str, Any]) -> List[str]:
    lines = [f"Code: {service.get('code')}"]
    if service.get("name"):
        lines.append(f"Name: {service['name']}")
    if service.get("category"):
        lines.append(f"Category: {service['category']}")
    if service.get("clientTypes"):
        lines.append(f"Client Types: {', '.join(service['clientTypes'])}")
    if service.get("description"):
        lines.append(f"Description: {service['description']}")
    return lines


def _format_service_summary(service: Dict[str, Any]) -> str:
    lines = _catalog_header(service)
    if service.get("isArchived"):
        lines.append("Archived: Yes")
    pricing = service.get("pricing") or []
    if pricing:
        summary = ", ".join(
            f"{_price(p.get('price'))} ({p.get('frequency')})" for p in pricing
        )
        lines.append(f"Pricing: {summary}")
    factors = service.get("pricingFactors") or []
    if factors:
        lines.append(f"Pricing Factors: {len(factors)} question(s)")
    return join_lines(lines)


def _format_service_detail(service: Dict[str, Any]) -> str:
    lines = _catalog_header(service)
    if service.get("accountingCode"):
        lines.append(f"Accounting Code: {service['accountingCode']}")
    lines.append(f"Archived: {yes_no(service.get('isArchived'))}")

    pricing = service.get("pricing") or []
    if pricing:
        lines.append("\nPricing:")
        for option in pricing:
            lines.append(f"  {option.get('frequency')}: {_price(option.get('price'))}")
            for override in option.get("revenueRangeOverrides") or []:
                price = override.get("overridePrice")
                label = money(price) if price is not None else "no override"
                lines.append(
                    f"    Revenue range {override.get('revenueRangeCode')}: {label}"
                )
                if override.get("overrideDescription"):
                    lines.append(f"      Note: {override['overrideDescription']}")

    factors = service.get("pricingFactors") or []
    if factors:
        lines.append("\nPricing Factor Questions:")
        for factor in factors:
            lines.append(f"  Q: {factor.get('description')}")
            for opt in factor.get("options") or []:
                lines.append(f"    - {opt.get('name')}: {_percent(opt.get('value'))}")

    if service.get("createdDate"):
        lines.append(f"\nCreated: {service['createdDate']}")
    if service.get("updatedDate"):
        lines.append(f"Updated: {service['updatedDate']}")
    return join_lines(lines)


def _service_title(service: Dict[str, Any]) -> str:
    catalog = service.get("billableService") or {}
    name = catalog.get("name") or service.get("code") or "?"
    return f"{name} (code: {service.get('code')})"


def _format_client_service(service: Dict[str, Any], *, indent: str = "  ") -> str:
    lines = [_service_title(service)]
    if service.get("billingFrequency"):
        lines.append(f"{indent}Billing: {service['billingFrequency']}")
    if service.get("calculatedPrice") is not None:
        lines.append(f"{indent}Price: {money(service['calculatedPrice'])}")
    if service.get("priceAdjustmentPercentage"):
        lines.append(f"{indent}Adjustment: {service['priceAdjustmentPercentage']}%")
    if service.get("startDate"):
        lines.append(f"{indent}Start: {service['startDate']}")
    if service.get("endDate"):
        lines.append(f"{indent}End: {service['endDate']}")
    if service.get("status"):
        lines.append(f"{indent}Status: {service['status']}")
    answers = pricing_answer_lines(service.get("pricingAnswers"), indent * 2)
    if answers:
        lines.append(f"{indent}Pricing answers:")
        lines.extend(answers)
    return join_lines(lines)


def _format_assigned_service(service: Dict[str, Any]) -> str:
    lines = [_service_title(service)]
    if service.get("billingFrequency"):
        lines.append(f"Billing: {service['billingFrequency']}")
    if service.get("calculatedPrice") is not None:
        lines.append(f"Price: {money(service['calculatedPrice'])}")
    if service.get("startDate"):
        lines.append(f"Start: {service['startDate']}")
    if service.get("endDate"):
        lines.append(f"End: {service['endDate']}")
    if service.get("status"):
        lines.append(f"Status: {service['status']}")
    return join_lines(lines)


# --- Catalog ---------------------------------------------------------------- #


@reports_errors("listing services")
async def list_services(
    client: SodiumClient,
    *,
    search: Annotated[
        Optional[str],
        Field(description="Search across service code and name (minimum 3 characters)"),
    ] = None,
    category: Annotated[
        Optional[ServiceCategory], Field(description="Filter by service category")
    ] = None,
    client_type: Annotated[
        Optional[ClientType], Field(description="Filter by applicable client type")
    ] = None,
    is_archived: Annotated[
        Optional[bool],
        Field(description="Filter by archived status (default: active only)"),
    ] = None,
    sort_by: Annotated[
        Optional[ServiceSortField], Field(description="Field to sort by")
    ] = None,
    sort_desc: SortDescParam = None,
    offset: Annotated[Optional[int], Field(description="Pagination offset")] = None,
    limit: Annotated[
        Optional[int], Field(description="Max results to return (max 50)")
    ] = None,
) -> str:
    """
    List the tenant's billable services catalog. Returns service codes, names,
    categories, applicable client types, and pricing. Use service codes as
    billable_service_code when assigning services to clients.
    """
    services = await client.list_services(
        search=search,
        category=category,
        client_type=client_type,
        is_archived=is_archived,
        offset=offset,
        limit=limit,
        sort_by=sort_by,
        sort_desc=sort_desc,
    )
    return render_list(
        services,
        _format_service_summary,
        found="service(s)",
        empty="No services found.",
    )


@reports_errors("getting service")
async def get_service(
    client: SodiumClient,
    code: Annotated[str, Field(description="The service code to retrieve")],
) -> str:
    """
    Get full details of a billable service including all pricing options (by
    billing frequency), revenue range overrides, and pricing factor questions
    with their adjustment percentages.
    """
    service = await client.get_service(code)
    return f"Service Details:\n\n{_format_service_detail(service or {})}"


# --- Client services -------------------------------------------------------- #

BillingFrequencyParam = Annotated[
    BillingFrequency, Field(description="How often the service is billed")
]
StartDateParam = Annotated[
    str, Field(description="Service start date in YYYY-MM-DD format")
]
OverridePricingParam = Annotated[
    Optional[bool],
    Field(description="Set true to use a custom price instead of the catalog price"),
]
PriceParam = Annotated[
    Optional[float],
    Field(description="Custom price, required if override_pricing is true"),
]
EndDateParam = Annotated[
    Optional[str],
    Field(description="Service end date in YYYY-MM-DD format (omit for ongoing)"),
]
ManagedByParam = Annotated[
    Optional[str], Field(description="Code of the user responsible for this service")
]
PricingAnswersParam = Annotated[
    Optional[Dict[str, str]],
    Field(
        description=(
            "Answers to the service's pricing factor questions as key-value pairs "
            '(e.g. {"Payroll frequency": "Monthly"}). Use get-service to see '
            "available questions and options."
        )
    ),
]


@reports_errors("listing client services")
async def list_client_services(
    client: SodiumClient,
    client_code: Annotated[
        str, Field(description="The client code to list services for")
    ],
) -> str:
    """
    List the billable services currently assigned to a specific client. Returns
    the service codes (used as client_billable_service_codes when creating
    engagements), billing frequencies, calculated prices, statuses, and pricing
    factor answers for each service.
    """
    services = await client.list_client_services(client_code)
    if not services:
        return f"No services found for client {client_code}."

    codes = ", ".join(s["code"] for s in services if s.get("code"))
    return join_lines(
        [
            f"Client services for {client_code} ({len(services)} service(s)):",
            "",
            "\n\n".join(_format_client_service(s) for s in services),
            "",
            f"Service codes for engagement creation: {codes}",
        ]
    )


@reports_errors("creating client service")
async def create_client_service(
    client: SodiumClient,
    client_code: Annotated[
        str, Field(description="The client to assign the service to")
    ],
    billable_service_code: Annotated[
        str,
        Field(
            description=(
                "The billable service code from the tenant catalog; use "
                "list-services to find this"
            )
        ),
    ],
    billing_frequency: BillingFrequencyParam,
    start_date: StartDateParam,
    status: Annotated[
        ServiceStatus,
        Field(
            description=(
                "Service status; use Proposed if creating ahead of engagement "
                "acceptance"
            )
        ),
    ],
    *,
    override_pricing: OverridePricingParam = None,
    price: PriceParam = None,
    price_adjustment_percentage: Annotated[
        Optional[float],
        Field(
            description=(
                "Percentage adjustment to the base price (only when not "
                "overriding; e.g. 10 for +10%)"
            )
        ),
    ] = None,
    end_date: EndDateParam = None,
    managed_by_user_code: ManagedByParam = None,
    pricing_answers: PricingAnswersParam = None,
) -> str:
    """
    Assign a billable service to a client. Use list-services to find the
    billable_service_code. The service code returned can then be used as a
    client billable service code when creating an engagement.
    """
    body = ClientServiceFields(
        billable_service_code=billable_service_code,
        billing_frequency=billing_frequency,
        start_date=start_date,
        status=status,
        override_pricing=override_pricing,
        price=price,
        price_adjustment_percentage=price_adjustment_percentage,
        end_date=end_date,
        managed_by_user_code=managed_by_user_code,
        pricing_answers=pricing_answers,
    ).to_body()
    service = await client.create_client_service(client_code, body)
    return join_lines(
        [
            f"Service assigned to client {client_code} successfully!",
            "",
            _format_assigned_service(service or {}),
        ]
    )


@reports_errors("updating client service")
async def update_client_service(
    client: SodiumClient,
    client_code: Annotated[str, Field(description="The client code")],
    service_code: Annotated[
        str,
        Field(
            description=(
                "The client service code to update; use list-client-services to "
                "find this"
            )
        ),
    ],
    billable_service_code: Annotated[
        str, Field(description="The billable service code from the tenant catalog")
    ],
    billing_frequency: BillingFrequencyParam,
    start_date: StartDateParam,
    status: Annotated[
        ServiceStatus,
        Field(description="Service status; set to Active after engagement acceptance"),
    ],
    *,
    override_pricing: OverridePricingParam = None,
    price: PriceParam = None,
    price_adjustment_percentage: Annotated[
        Optional[float],
        Field(
            description=(
                "Percentage adjustment to the base price (only when not "
                "overriding; e.g. -10 for 10% discount)"
            )
        ),
    ] = None,
    end_date: EndDateParam = None,
    managed_by_user_code: ManagedByParam = None,
    pricing_answers: PricingAnswersParam = None,
) -> str:
    """
    Update a billable service assigned to a client. This is a full replacement,
    so all required fields must be provided. Commonly used to activate a
    service after engagement acceptance (set status to Active) or to end a
    service (set end_date).
    """
    body = ClientServiceFields(
        billable_service_code=billable_service_code,
        billing_frequency=billing_frequency,
        start_date=start_date,
        status=status,
        override_pricing=override_pricing,
        price=price,
        price_adjustment_percentage=price_adjustment_percentage,
        end_date=end_date,
        managed_by_user_code=managed_by_user_code,
        pricing_answers=pricing_answers,
    ).to_body()
    service = await client.update_client_service(client_code, service_code, body)
    return join_lines(
        [
            "Client service updated successfully!",
            "",
            _format_assigned_service(service or {}),
        ]
    )
