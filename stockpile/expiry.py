"""Expiry date classification."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, tzinfo, timezone

logger = logging.getLogger(__name__)

SAFE = "safe"
SOON = "soon"
EXPIRED = "expired"
NO_EXPIRY = "noexpiry"

STATUSES = (SAFE, SOON, EXPIRED, NO_EXPIRY)

# Marker used in the sheet for items that never expire
NO_EXPIRY_MARK = "-"


@dataclass(frozen=True)
class ExpiryInfo:
    days_left: int | None
    status: str
    malformed: bool = False  # value present but not a YYYY-MM-DD date


def today_in(tz: tzinfo | None = None) -> date:
    """Return the current calendar date in ``tz`` (UTC by default)."""
    return datetime.now(tz or timezone.utc).date()


def parse_expiry_date(value: str) -> date | None:
    """Parse a ``YYYY-MM-DD`` value.

    Returns None when the value does not have exactly three integer
    components or does not name a real calendar day.
    """
    parts = value.strip().split("-")
    if len(parts) != 3:
        return None
    try:
        year, month, day = (int(p) for p in parts)
        return date(year, month, day)
    except ValueError:
        return None


def classify_days(
    days_left: int,
    expired_within: int = 30,
    soon_within: int = 89,
) -> str:
    """Map a days-left count to a status; already past counts as expired."""
    if days_left <= expired_within:
        return EXPIRED
    if days_left <= soon_within:
        return SOON
    return SAFE


def compute_expiry_info(
    value: str | None,
    today: date | None = None,
    expired_within: int = 30,
    soon_within: int = 89,
) -> ExpiryInfo:
    """Compute days remaining and status for an expiry field.

    Empty values and ``-`` mean the item has no expiry. Malformed dates are
    classified the same way but flagged so callers can count them.

    Args:
        value: Raw expiry field from the sheet.
        today: Reference date. Defaults to the current UTC date.
        expired_within: Items with at most this many days left are expired.
        soon_within: Items with at most this many days left are expiring soon.
    """
    if value is None or value.strip() in ("", NO_EXPIRY_MARK):
        return ExpiryInfo(days_left=None, status=NO_EXPIRY)

    expiry = parse_expiry_date(value)
    if expiry is None:
        logger.debug("到期日格式錯誤，視為無保存期限: %r", value)
        return ExpiryInfo(days_left=None, status=NO_EXPIRY, malformed=True)

    if today is None:
        today = today_in()
    days_left = (expiry - today).days
    return ExpiryInfo(
        days_left=days_left,
        status=classify_days(days_left, expired_within, soon_within),
    )
