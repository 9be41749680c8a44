# backend/views.py

"""Pure functions deriving what the dashboard shows from a deal snapshot."""

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, List, Optional

from .schemas import STATUSES, Deal, DealStats, to_number
from .state import ALL_STATUSES, AppState

SORT_KEYS = ("created_at", "business_name", "asking_price", "sde", "status")
NUMERIC_SORT_KEYS = ("asking_price", "sde")
SORT_ORDERS = ("asc", "desc")

NOT_AVAILABLE = "N/A"

STATUS_COLORS = {
    "Closed": "green",
    "Passed": "red",
    "Due Diligence": "blue",
    "Negotiating": "violet",
    "LOI Submitted": "orange",
}


def filter_deals(deals: Iterable[Deal], status_filter: str = ALL_STATUSES) -> List[Deal]:
    deals = list(deals)
    if status_filter == ALL_STATUSES:
        return deals
    return [deal for deal in deals if deal.status == status_filter]


def _sort_value(deal: Deal, sort_key: str):
    value = getattr(deal, sort_key, None)
    if sort_key in NUMERIC_SORT_KEYS:
        return (1, to_number(value))
    if value is None:
        return (0, "")
    return (1, value)


def sort_deals(deals: Iterable[Deal], sort_key: str = "created_at", sort_order: str = "desc") -> List[Deal]:
    """Sort deals by one field.

    Deals with equal keys keep their incoming (snapshot) order in both
    directions.
    """
    if sort_key not in SORT_KEYS:
        raise ValueError(f"Unknown sort key: {sort_key}")
    if sort_order not in SORT_ORDERS:
        raise ValueError(f"Unknown sort order: {sort_order}")
    return sorted(deals, key=lambda d: _sort_value(d, sort_key), reverse=sort_order == "desc")


def build_view(deals: Iterable[Deal], state: AppState) -> List[Deal]:
    return sort_deals(filter_deals(deals, state.status_filter), state.sort_key, state.sort_order)


def calculate_stats(deals: Iterable[Deal]) -> DealStats:
    deals = list(deals)
    total = len(deals)
    avg_price = sum(d.asking_price for d in deals) / total if total else 0.0
    status_counts = {status: 0 for status in STATUSES}
    for deal in deals:
        status_counts[deal.status.value] += 1
    return DealStats(total=total, avg_price=avg_price, status_counts=status_counts)


def calculate_multiple(asking_price: Optional[float], sde: Optional[float]) -> str:
    """Asking price over SDE as e.g. '3.00x', or 'N/A' when SDE is zero or missing."""
    if sde is None or sde == 0 or (isinstance(sde, float) and math.isnan(sde)):
        return NOT_AVAILABLE
    return f"{(asking_price or 0) / sde:.2f}x"


def format_currency(amount: Any) -> str:
    """Whole-dollar US currency, e.g. 1250000 -> '$1,250,000'."""
    value = to_number(amount)
    dollars = int(Decimal(str(abs(value))).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    sign = "-" if value < 0 else ""
    return f"{sign}${dollars:,}"


def status_badge(status: str) -> str:
    return STATUS_COLORS.get(status, "gray")


def to_rows(deals: Iterable[Deal]) -> List[Dict[str, Any]]:
    """Display rows for the table view."""
    return [
        {
            "Business": deal.business_name,
            "Asking Price": format_currency(deal.asking_price),
            "SDE": format_currency(deal.sde),
            "Multiple": calculate_multiple(deal.asking_price, deal.sde),
            "Industry": deal.industry,
            "Location": deal.location,
            "Status": deal.status.value,
        }
        for deal in deals
    ]
