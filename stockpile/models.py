"""Data models for supply items and dashboard views."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from .expiry import ExpiryInfo

Record = dict[str, str]


@dataclass(frozen=True)
class SupplyItem:
    """A sheet row with its typed fields and expiry classification."""

    name: str
    category: str
    quantity: str
    expiry_date: str      # Raw value from the sheet ("-" = no expiry)
    note: str
    expiry: ExpiryInfo
    record: Record = field(default_factory=dict, compare=False)

    @property
    def days_left(self) -> int | None:
        return self.expiry.days_left

    @property
    def status(self) -> str:
        return self.expiry.status


@dataclass(frozen=True)
class InventorySnapshot:
    """The classified items from one fetch. Replaced wholesale on refresh."""

    items: tuple[SupplyItem, ...] = ()
    fetched_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    source: str = ""
    malformed_dates: int = 0
    configured: bool = True

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class Summary:
    total: int = 0
    safe: int = 0
    soon: int = 0
    expired: int = 0
    noexpiry: int = 0


@dataclass(frozen=True)
class DashboardView:
    """Filtered and sorted items plus full-set summary and urgent subset."""

    items: tuple[SupplyItem, ...]
    summary: Summary
    urgent: tuple[SupplyItem, ...]
    category: str = "all"
    sort: str = "none"
    categories: tuple[str, ...] = ()
