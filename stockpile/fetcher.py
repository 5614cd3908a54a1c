"""Fetch the published sheet and turn it into an inventory snapshot."""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING

import requests
from tenacity import (
    RetryError,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from .expiry import today_in
from .models import InventorySnapshot
from .sheet import parse_table, to_items

if TYPE_CHECKING:
    from .config import StockpileConfig

logger = logging.getLogger(__name__)

USER_AGENT = "stockpile/0.1 (+supply dashboard)"

NOT_CONFIGURED_MESSAGE = (
    "尚未設定試算表 CSV 連結。請在設定檔的 [source] url 或 "
    "STOCKPILE_SHEET_URL 環境變數中填入 Google Sheet「發佈到網路」產生的 CSV 連結。"
)


class FetchError(RuntimeError):
    """Raised when the sheet cannot be downloaded."""


class SheetFetcher:
    """Download the sheet export with a timeout and retries.

    The blocking HTTP call runs in a worker thread so the event loop can
    cancel a superseded fetch.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 30.0,
        retries: int = 3,
        session: requests.Session | None = None,
    ) -> None:
        self._url = url
        self._timeout = timeout
        self._retries = max(1, retries)
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": USER_AGENT})

    @property
    def url(self) -> str:
        return self._url

    def _get(self) -> str:
        r = self._session.get(self._url, timeout=self._timeout)
        r.raise_for_status()
        # Sheets exports are UTF-8 but may omit the charset
        if "charset" not in r.headers.get("Content-Type", ""):
            r.encoding = "utf-8"
        return r.text

    def fetch_text_sync(self) -> str:
        """Download the export, retrying transient failures.

        Raises:
            FetchError: If every attempt fails.
        """
        retrying = Retrying(
            wait=wait_exponential_jitter(initial=1, max=30),
            stop=stop_after_attempt(self._retries),
            retry=retry_if_exception_type(requests.RequestException),
            reraise=False,
        )
        try:
            return retrying(self._get)
        except RetryError as e:
            cause = e.last_attempt.exception()
            raise FetchError(f"試算表下載失敗: {cause}") from cause

    async def fetch_text(self) -> str:
        logger.info("下載試算表: %s", self._url)
        text = await asyncio.to_thread(self.fetch_text_sync)
        logger.info("下載完成 (%d 字元)", len(text))
        return text


def build_snapshot(
    text: str,
    config: StockpileConfig,
    source: str = "",
    today: date | None = None,
) -> InventorySnapshot:
    """Parse and classify raw sheet text into a snapshot."""
    if today is None:
        today = today_in(config.expiry.tzinfo)
    records = parse_table(text, delimiter=config.source.delimiter)
    items = to_items(records, config.columns, today=today, expiry=config.expiry)
    malformed = sum(1 for i in items if i.expiry.malformed)
    if malformed:
        logger.warning("%d 筆到期日格式錯誤，已視為無保存期限", malformed)
    logger.info("載入 %d 筆物品", len(items))
    return InventorySnapshot(
        items=tuple(items),
        source=source,
        malformed_dates=malformed,
    )


async def load_snapshot(
    config: StockpileConfig,
    fetcher: SheetFetcher | None = None,
    today: date | None = None,
) -> InventorySnapshot:
    """Fetch, parse and classify the configured sheet.

    An unconfigured URL is not an error: a warning is logged and an empty,
    unconfigured snapshot is returned.

    Raises:
        FetchError: If the download fails.
    """
    if fetcher is None:
        if not config.source.is_configured:
            logger.warning(NOT_CONFIGURED_MESSAGE)
            return InventorySnapshot(configured=False)
        fetcher = SheetFetcher(
            config.source.url,
            timeout=config.source.timeout,
            retries=config.source.retries,
        )
    text = await fetcher.fetch_text()
    return build_snapshot(text, config, source=fetcher.url, today=today)


def load_snapshot_from_file(
    path: str | Path,
    config: StockpileConfig,
    today: date | None = None,
) -> InventorySnapshot:
    """Build a snapshot from a local export file."""
    p = Path(path)
    text = p.read_text(encoding="utf-8-sig")
    return build_snapshot(text, config, source=str(p), today=today)
