"""Delimited text parsing for published spreadsheet exports."""

from __future__ import annotations

import re
from datetime import date
from typing import TYPE_CHECKING, Iterable

from .expiry import compute_expiry_info
from .models import Record, SupplyItem

if TYPE_CHECKING:
    from .config import ColumnsConfig, ExpiryConfig

_LINE_BREAK = re.compile(r"\r?\n")


def parse_table(text: str, delimiter: str = ",") -> list[Record]:
    """Parse delimited text into one record per data line.

    The first line is the header. Short rows are padded with empty strings
    and extra columns are ignored, so every record has the header's keys.

    Quoted fields are not supported: a delimiter inside a value shifts the
    remaining columns of that row.
    """
    lines = _LINE_BREAK.split(text.strip())
    if len(lines) < 2:
        return []

    headers = [h.strip() for h in lines[0].split(delimiter)]
    records: list[Record] = []
    for line in lines[1:]:
        cols = [c.strip() for c in line.split(delimiter)]
        if len(cols) < len(headers):
            cols.extend([""] * (len(headers) - len(cols)))
        records.append({h: cols[i] for i, h in enumerate(headers)})
    return records


def to_items(
    records: Iterable[Record],
    columns: ColumnsConfig,
    today: date | None = None,
    expiry: ExpiryConfig | None = None,
) -> list[SupplyItem]:
    """Resolve typed fields through the column mapping and classify expiry."""
    expired_within = expiry.expired_within_days if expiry else 30
    soon_within = expiry.soon_within_days if expiry else 89

    items: list[SupplyItem] = []
    for record in records:
        expiry_date = record.get(columns.expiry, "")
        items.append(
            SupplyItem(
                name=record.get(columns.name, ""),
                category=record.get(columns.category, ""),
                quantity=record.get(columns.quantity, ""),
                expiry_date=expiry_date,
                note=record.get(columns.note, ""),
                expiry=compute_expiry_info(
                    expiry_date,
                    today=today,
                    expired_within=expired_within,
                    soon_within=soon_within,
                ),
                record=record,
            )
        )
    return items
