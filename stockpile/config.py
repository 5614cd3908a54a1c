"""TOML configuration loader for the supply dashboard."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]

URL_PLACEHOLDER = "<YOUR_PUB_ID>"


@dataclass
class SourceConfig:
    url: str = ""
    timeout: float = 30.0
    retries: int = 3
    delimiter: str = ","

    @property
    def is_configured(self) -> bool:
        """False when the URL is empty or still the template placeholder."""
        url = self.url.strip()
        return bool(url) and URL_PLACEHOLDER not in url


@dataclass
class ColumnsConfig:
    name: str = "名稱"
    category: str = "類別"
    quantity: str = "數量"
    expiry: str = "到期日(YYYY-MM-DD)"
    note: str = "備註"


@dataclass
class ExpiryConfig:
    expired_within_days: int = 30
    soon_within_days: int = 89
    timezone: str = "UTC"

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


@dataclass
class DisplayConfig:
    default_icon: str = "📦"
    icons: dict[str, str] = field(default_factory=lambda: {
        "食物": "🍱",
        "飲水": "🥛",
        "藥品": "💊",
        "防護": "🩹",
        "衛生": "🧻",
        "照明": "🔦",
        "工具": "🧰",
        "其他": "📦",
    })


@dataclass
class ScheduleConfig:
    refresh_cron: str = "0 * * * *"


@dataclass
class StockpileConfig:
    source: SourceConfig = field(default_factory=SourceConfig)
    columns: ColumnsConfig = field(default_factory=ColumnsConfig)
    expiry: ExpiryConfig = field(default_factory=ExpiryConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    schedule: ScheduleConfig = field(default_factory=ScheduleConfig)


def load_config(path: str | Path | None = None) -> StockpileConfig:
    """Load configuration from a TOML file.

    Falls back to defaults if no path is given or the file doesn't exist.
    The sheet URL can be supplied via the STOCKPILE_SHEET_URL environment
    variable when the file leaves it empty.

    Raises:
        ValueError: If the configured timezone is unknown.
    """
    raw: dict = {}

    if path is not None:
        p = Path(path)
        if p.exists():
            if tomllib is None:
                raise ImportError(
                    "tomli is required on Python < 3.11: pip install tomli"
                )
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    src = raw.get("source", {})
    col = raw.get("columns", {})
    exp = raw.get("expiry", {})
    dsp = raw.get("display", {})
    sch = raw.get("schedule", {})

    # Resolve sheet URL: config file → environment variable
    url = src.get("url", "") or os.environ.get("STOCKPILE_SHEET_URL", "")

    # Merge custom icons with defaults
    default_icons = DisplayConfig().icons
    custom_icons = dsp.get("icons", {})
    icons = {**default_icons, **custom_icons}

    expiry = ExpiryConfig(
        expired_within_days=exp.get("expired_within_days", 30),
        soon_within_days=exp.get("soon_within_days", 89),
        timezone=exp.get("timezone", "UTC"),
    )
    try:
        ZoneInfo(expiry.timezone)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"未知的時區: {expiry.timezone!r}") from e

    return StockpileConfig(
        source=SourceConfig(
            url=url,
            timeout=float(src.get("timeout", 30.0)),
            retries=src.get("retries", 3),
            delimiter=src.get("delimiter", ","),
        ),
        columns=ColumnsConfig(
            name=col.get("name", "名稱"),
            category=col.get("category", "類別"),
            quantity=col.get("quantity", "數量"),
            expiry=col.get("expiry", "到期日(YYYY-MM-DD)"),
            note=col.get("note", "備註"),
        ),
        expiry=expiry,
        display=DisplayConfig(
            default_icon=dsp.get("default_icon", "📦"),
            icons=icons,
        ),
        schedule=ScheduleConfig(
            refresh_cron=sch.get("refresh_cron", "0 * * * *"),
        ),
    )
