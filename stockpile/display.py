"""Terminal rendering of the supply dashboard."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .config import DisplayConfig
from .expiry import EXPIRED, NO_EXPIRY, SAFE, SOON

if TYPE_CHECKING:
    from .models import DashboardView, SupplyItem

STATUS_LABELS: dict[str, str] = {
    SAFE: "安全",
    SOON: "即將到期",
    EXPIRED: "已過期/≤30天",
    NO_EXPIRY: "無保存期限",
}

SORT_LABELS: dict[str, str] = {
    "none": "不排序",
    "category": "依類別",
    "expiry": "依到期日",
}

NO_URGENT_MESSAGE = "目前沒有緊急或到期項目"


def icon_for(category: str, display: DisplayConfig | None = None) -> str:
    """Look up the category icon, falling back to the default icon."""
    if display is None:
        display = DisplayConfig()
    return display.icons.get(category, display.default_icon)


def days_label(days_left: int | None) -> str:
    if days_left is None:
        return "無保存期限"
    if days_left >= 0:
        return f"剩 {days_left} 天"
    return f"已過期 {abs(days_left)} 天"


def status_label(status: str) -> str:
    return STATUS_LABELS.get(status, status)


def item_to_dict(item: SupplyItem, display: DisplayConfig | None = None) -> dict:
    """Serialize an item with its derived display fields."""
    return {
        "name": item.name,
        "category": item.category,
        "quantity": item.quantity,
        "expiry_date": item.expiry_date,
        "note": item.note,
        "days_left": item.days_left,
        "status": item.status,
        "icon": icon_for(item.category, display),
        "days_label": days_label(item.days_left),
        "status_label": status_label(item.status),
    }


def view_to_dict(view: DashboardView, display: DisplayConfig | None = None) -> dict:
    s = view.summary
    return {
        "category": view.category,
        "sort": view.sort,
        "categories": list(view.categories),
        "summary": {
            "total": s.total,
            "safe": s.safe,
            "soon": s.soon,
            "expired": s.expired,
            "noexpiry": s.noexpiry,
        },
        "urgent": [item_to_dict(i, display) for i in view.urgent],
        "items": [item_to_dict(i, display) for i in view.items],
    }


def render_summary(view: DashboardView) -> str:
    s = view.summary
    return (
        f"📊 總數 {s.total}  ✅ 安全 {s.safe}  "
        f"⚠️  即將到期 {s.soon}  ⛔ 已過期/≤30天 {s.expired}"
    )


def render_urgent(view: DashboardView) -> str:
    lines: list[str] = ["🚨 要注意的物品"]
    if not view.urgent:
        lines.append(f"  {NO_URGENT_MESSAGE}")
        return "\n".join(lines)
    for item in view.urgent:
        qty = f" · {item.quantity}" if item.quantity else ""
        lines.append(
            f"  {item.name:<12} {item.category}{qty}  {days_label(item.days_left)}"
        )
    return "\n".join(lines)


def render_item(
    item: SupplyItem, index: int, display: DisplayConfig | None = None
) -> str:
    qty = f" x{item.quantity}" if item.quantity else ""
    lines = [
        f"{icon_for(item.category, display)} #{index} {item.name}{qty}",
        f"    {item.category} | {item.expiry_date or '—'} | "
        f"{days_label(item.days_left)} | [{status_label(item.status)}]",
    ]
    if item.note:
        lines.append(f"    備註：{item.note}")
    return "\n".join(lines)


def render_dashboard(view: DashboardView, display: DisplayConfig | None = None) -> str:
    """Format the whole dashboard for terminal display."""
    category = "全部" if view.category == "all" else view.category
    lines: list[str] = [
        render_summary(view),
        "",
        render_urgent(view),
        "",
        f"{'─' * 50}",
        f"📋 物品清單 (類別: {category} / 排序: {SORT_LABELS.get(view.sort, view.sort)})",
        "",
    ]
    if not view.items:
        lines.append("  沒有符合條件的物品")
    for idx, item in enumerate(view.items, 1):
        lines.append(render_item(item, idx, display))
    return "\n".join(lines)
