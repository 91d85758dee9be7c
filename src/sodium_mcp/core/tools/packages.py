from __future__ import annotations

from typing import Annotated, Any, Dict, List, Optional

from pydantic import Field

from sodium_mcp.core.client import SodiumClient
from sodium_mcp.core.models import PackageSortField
from sodium_mcp.core.tools._base import (
    SortDescParam,
    join_lines,
    money,
    pricing_answer_lines,
    render_list,
    reports_errors,
    yes_no,
)


def _item_name(item: Dict[str, Any]) -> str:
    return item.get("billableServiceName") or item.get("billableServiceCode") or "?"


def _overridden_price(item: Dict[str, Any]) -> Optional[str]:
    if item.get("overridePricing") and item.get("price") is not None:
        return money(item["price"])
    return None


def _package_header(package: Dict[str, Any]) -> List[str]:
    lines = [f"Code: {package.get('code')}"]
    if package.get("name"):
        lines.append(f"Name: {package['name']}")
    if package.get("description"):
        lines.append(f"Description: {package['description']}")
    return lines


def _format_package_summary(package: Dict[str, Any]) -> str:
    lines = _package_header(package)
    if package.get("isArchived"):
        lines.append("Archived: Yes")
    if package.get("totalAnnualValue") is not None:
        lines.append(f"Annual Value: {money(package['totalAnnualValue'])}")
    if package.get("numberOfServices") is not None:
        lines.append(f"Services: {package['numberOfServices']}")
    items = package.get("items") or []
    if items:
        lines.append("Included Services:")
        for item in items:
            price = _overridden_price(item) or "standard pricing"
            lines.append(
                f"  - {_item_name(item)} ({item.get('billingFrequency')}, {price})"
            )
    return join_lines(lines)


def _format_package_detail(package: Dict[str, Any]) -> str:
    lines = _package_header(package)
    lines.append(f"Archived: {yes_no(package.get('isArchived'))}")
    if package.get("totalAnnualValue") is not None:
        lines.append(f"Total Annual Value: {money(package['totalAnnualValue'])}")
    if package.get("numberOfServices") is not None:
        lines.append(f"Number of Services: {package['numberOfServices']}")

    items = package.get("items") or []
    if items:
        lines.append("\nIncluded Services:")
        for item in items:
            lines.append(
                f"  - {_item_name(item)} (code: {item.get('billableServiceCode')})"
            )
            if item.get("billingFrequency"):
                lines.append(f"    Billing: {item['billingFrequency']}")
            price = _overridden_price(item)
            if price:
                lines.append(f"    Price: {price} (override)")
            else:
                lines.append("    Price: Standard pricing")
            answers = pricing_answer_lines(item.get("pricingAnswers"), "      ")
            if answers:
                lines.append("    Pre-answered pricing factors:")
                lines.extend(answers)

    if package.get("createdDate"):
        lines.append(f"\nCreated: {package['createdDate']}")
    if package.get("updatedDate"):
        lines.append(f"Updated: {package['updatedDate']}")
    return join_lines(lines)


@reports_errors("listing service packages")
async def list_service_packages(
    client: SodiumClient,
    *,
    search: Annotated[
        Optional[str], Field(description="Filter packages by name")
    ] = None,
    service: Annotated[
        Optional[List[str]],
        Field(description="Filter to packages containing specific service code(s)"),
    ] = None,
    sort_by: Annotated[
        Optional[PackageSortField], Field(description="Field to sort by")
    ] = None,
    sort_desc: SortDescParam = None,
    offset: Annotated[Optional[int], Field(description="Pagination offset")] = None,
    limit: Annotated[
        Optional[int], Field(description="Max results to return (max 50)")
    ] = None,
) -> str:
    """
    List pre-configured service packages that bundle multiple billable services
    together. Each package includes service codes, billing frequencies, and
    optionally pre-answered pricing factors. Useful for quickly proposing a
    standard set of services to a client.
    """
    packages = await client.list_service_packages(
        search=search,
        service=service,
        offset=offset,
        limit=limit,
        sort_by=sort_by,
        sort_desc=sort_desc,
    )
    return render_list(
        packages,
        _format_package_summary,
        found="package(s)",
        empty="No service packages found.",
    )


@reports_errors("getting service package")
async def get_service_package(
    client: SodiumClient,
    code: Annotated[str, Field(description="The service package code to retrieve")],
) -> str:
    """
    Get full details of a service package including all included services,
    their billing frequencies, any pricing overrides, and pre-answered pricing
    factors.
    """
    package = await client.get_service_package(code)
    return f"Service Package Details:\n\n{_format_package_detail(package or {})}"
