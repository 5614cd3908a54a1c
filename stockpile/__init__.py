"""Emergency supply dashboard backed by a published spreadsheet."""

from .config import (
    ColumnsConfig,
    DisplayConfig,
    ExpiryConfig,
    ScheduleConfig,
    SourceConfig,
    StockpileConfig,
    load_config,
)
from .dashboard import InventoryDashboard, RefreshResult
from .expiry import ExpiryInfo, compute_expiry_info
from .fetcher import FetchError, SheetFetcher, build_snapshot, load_snapshot
from .models import DashboardView, InventorySnapshot, SupplyItem, Summary
from .sheet import parse_table, to_items
from .view import build_view, summarize, urgent_items

__all__ = [
    "parse_table",
    "to_items",
    "compute_expiry_info",
    "ExpiryInfo",
    "build_view",
    "summarize",
    "urgent_items",
    "SupplyItem",
    "InventorySnapshot",
    "Summary",
    "DashboardView",
    "SheetFetcher",
    "FetchError",
    "build_snapshot",
    "load_snapshot",
    "InventoryDashboard",
    "RefreshResult",
    "StockpileConfig",
    "SourceConfig",
    "ColumnsConfig",
    "ExpiryConfig",
    "DisplayConfig",
    "ScheduleConfig",
    "load_config",
]
