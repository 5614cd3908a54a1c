"""Filtering, sorting and summaries for the supply dashboard."""

from __future__ import annotations

import locale
from typing import Iterable, Sequence

from .expiry import EXPIRED, NO_EXPIRY, SAFE, SOON
from .models import DashboardView, SupplyItem, Summary

ALL_CATEGORIES = "all"

SORT_NONE = "none"
SORT_CATEGORY = "category"
SORT_EXPIRY = "expiry"
SORT_MODES = (SORT_NONE, SORT_CATEGORY, SORT_EXPIRY)


def _expiry_key(item: SupplyItem) -> tuple[int, int]:
    # Items without a date sort after every dated item
    if item.days_left is None:
        return (1, 0)
    return (0, item.days_left)


def filter_items(
    items: Iterable[SupplyItem], category: str | None = ALL_CATEGORIES
) -> list[SupplyItem]:
    """Keep items whose category equals ``category`` exactly."""
    if not category or category == ALL_CATEGORIES:
        return list(items)
    return [i for i in items if i.category == category]


def sort_items(items: Iterable[SupplyItem], mode: str | None = SORT_NONE) -> list[SupplyItem]:
    """Sort by category or expiry. Unknown modes keep the original order."""
    match mode:
        case "category":
            return sorted(items, key=lambda i: locale.strxfrm(i.category))
        case "expiry":
            return sorted(items, key=_expiry_key)
        case _:
            return list(items)


def summarize(items: Sequence[SupplyItem]) -> Summary:
    counts = {SAFE: 0, SOON: 0, EXPIRED: 0, NO_EXPIRY: 0}
    for item in items:
        counts[item.status] += 1
    return Summary(
        total=len(items),
        safe=counts[SAFE],
        soon=counts[SOON],
        expired=counts[EXPIRED],
        noexpiry=counts[NO_EXPIRY],
    )


def urgent_items(items: Iterable[SupplyItem]) -> list[SupplyItem]:
    """Return expired items, soonest first."""
    urgent = [i for i in items if i.status == EXPIRED]
    return sorted(urgent, key=_expiry_key)


def list_categories(items: Iterable[SupplyItem]) -> list[str]:
    """Distinct non-empty categories in first-seen order."""
    return list(dict.fromkeys(i.category for i in items if i.category))


def build_view(
    items: Sequence[SupplyItem],
    category: str | None = ALL_CATEGORIES,
    sort: str | None = SORT_NONE,
) -> DashboardView:
    """Build the dashboard view for the current filter and sort selection.

    The summary and urgent subset always cover the full item set, not the
    filtered listing.
    """
    listed = sort_items(filter_items(items, category), sort)
    return DashboardView(
        items=tuple(listed),
        summary=summarize(items),
        urgent=tuple(urgent_items(items)),
        category=category or ALL_CATEGORIES,
        sort=sort or SORT_NONE,
        categories=tuple(list_categories(items)),
    )
