"""Dashboard state: the current snapshot plus filter and sort selection."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .fetcher import FetchError, SheetFetcher, load_snapshot
from .models import DashboardView, InventorySnapshot
from .view import ALL_CATEGORIES, SORT_NONE, build_view

if TYPE_CHECKING:
    from .config import StockpileConfig

logger = logging.getLogger(__name__)


@dataclass
class RefreshResult:
    ok: bool
    snapshot: InventorySnapshot
    error: str = ""
    cancelled: bool = False


class InventoryDashboard:
    """Owns the current inventory snapshot and the user's view selection.

    ``refresh`` keeps at most one fetch in flight: starting a new refresh
    cancels the previous one, and only the newest refresh may install its
    snapshot. A failed refresh leaves the previous snapshot in place.
    """

    def __init__(
        self,
        config: StockpileConfig,
        fetcher: SheetFetcher | None = None,
        snapshot: InventorySnapshot | None = None,
    ) -> None:
        self._config = config
        self._fetcher = fetcher
        self._snapshot = snapshot or InventorySnapshot()
        self._category = ALL_CATEGORIES
        self._sort = SORT_NONE
        self._task: asyncio.Task | None = None
        self._generation = 0

    @property
    def snapshot(self) -> InventorySnapshot:
        return self._snapshot

    @property
    def category(self) -> str:
        return self._category

    @property
    def sort(self) -> str:
        return self._sort

    @property
    def refreshing(self) -> bool:
        return self._task is not None and not self._task.done()

    def select(
        self, category: str | None = None, sort: str | None = None
    ) -> DashboardView:
        """Change the filter and/or sort selection and return the new view."""
        if category is not None:
            self._category = category
        if sort is not None:
            self._sort = sort
        return self.view()

    def view(self) -> DashboardView:
        return build_view(self._snapshot.items, self._category, self._sort)

    async def refresh(self) -> RefreshResult:
        """Re-fetch the sheet and replace the snapshot on success."""
        if self.refreshing:
            logger.info("取消進行中的更新，重新下載")
            self._task.cancel()

        self._generation += 1
        generation = self._generation
        task = asyncio.create_task(load_snapshot(self._config, self._fetcher))
        self._task = task

        try:
            snapshot = await task
        except asyncio.CancelledError:
            if generation != self._generation:
                return RefreshResult(
                    ok=False, snapshot=self._snapshot, cancelled=True
                )
            # Our caller was cancelled; stop the fetch too
            task.cancel()
            raise
        except FetchError as e:
            logger.error("更新失敗，保留先前的資料: %s", e)
            return RefreshResult(ok=False, snapshot=self._snapshot, error=str(e))
        finally:
            if self._task is task:
                self._task = None

        if generation != self._generation:
            return RefreshResult(ok=False, snapshot=self._snapshot, cancelled=True)

        self._snapshot = snapshot
        return RefreshResult(ok=True, snapshot=snapshot)
