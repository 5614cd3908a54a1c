"""Shared fixtures for stockpile tests."""

from datetime import date

import pytest

from stockpile.expiry import compute_expiry_info
from stockpile.models import SupplyItem

TODAY = date(2025, 3, 10)


def make_item(
    name: str,
    category: str = "其他",
    expiry_date: str = "-",
    quantity: str = "1",
    note: str = "",
) -> SupplyItem:
    return SupplyItem(
        name=name,
        category=category,
        quantity=quantity,
        expiry_date=expiry_date,
        note=note,
        expiry=compute_expiry_info(expiry_date, today=TODAY),
    )


@pytest.fixture
def sample_items():
    """A mix of every status, in sheet order."""
    return [
        make_item("礦泉水", "飲水", "2025-12-31"),     # safe (296 days)
        make_item("急救包", "藥品", "-"),              # noexpiry
        make_item("泡麵", "食物", "2025-05-01"),       # soon (52 days)
        make_item("乾糧", "食物", "2025-02-18"),       # expired (-20 days)
        make_item("電池", "照明", "2025-03-25"),       # expired (15 days)
        make_item("口罩", "防護", "壞掉的日期"),        # noexpiry (malformed)
    ]
