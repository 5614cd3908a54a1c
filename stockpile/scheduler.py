"""Scheduled refresh of the supply dashboard."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .display import days_label

if TYPE_CHECKING:
    from .dashboard import InventoryDashboard, RefreshResult

logger = logging.getLogger(__name__)


class RefreshScheduler:
    """Periodically refreshes a dashboard and logs urgent items.

    Uses APScheduler for cron-based scheduling.
    """

    def __init__(self, dashboard: InventoryDashboard, cron: str = "0 * * * *") -> None:
        """Initialize scheduler for a dashboard.

        Args:
            dashboard: InventoryDashboard to refresh.
            cron: Five-field cron expression for the refresh job.

        Raises:
            ImportError: If apscheduler is not installed.
        """
        try:
            from apscheduler.schedulers.asyncio import AsyncIOScheduler
            from apscheduler.triggers.cron import CronTrigger
        except ImportError:
            raise ImportError(
                "需要 apscheduler: pip install 'stockpile[scheduler]'"
            )

        self._dashboard = dashboard
        self._cron = cron
        self._scheduler = AsyncIOScheduler()
        self._CronTrigger = CronTrigger
        self._running = False

    def setup_jobs(self) -> None:
        """Register the refresh job."""
        trigger = self._parse_cron(self._cron)
        self._scheduler.add_job(
            self._job_refresh,
            trigger=trigger,
            id="refresh_inventory",
            name="物資清單更新",
            replace_existing=True,
        )
        logger.info("更新工作已登錄: %s", self._cron)

    def start(self) -> None:
        """Start the scheduler."""
        self.setup_jobs()
        self._scheduler.start()
        self._running = True
        logger.info("排程器啟動")

    def stop(self) -> None:
        """Stop the scheduler."""
        if self._running:
            self._scheduler.shutdown(wait=False)
            self._running = False
            logger.info("排程器停止")

    @property
    def running(self) -> bool:
        return self._running

    def get_jobs(self) -> list[dict]:
        """Return info about scheduled jobs."""
        jobs = []
        for job in self._scheduler.get_jobs():
            next_run = getattr(job, "next_run_time", None)
            jobs.append({
                "id": job.id,
                "name": job.name,
                "next_run": str(next_run) if next_run else None,
            })
        return jobs

    def _parse_cron(self, expr: str):
        """Parse a cron expression into a CronTrigger."""
        parts = expr.split()
        if len(parts) == 5:
            return self._CronTrigger(
                minute=parts[0],
                hour=parts[1],
                day=parts[2],
                month=parts[3],
                day_of_week=parts[4],
            )
        raise ValueError(f"無效的 cron 表示式: {expr}")

    async def _job_refresh(self) -> RefreshResult | None:
        """Refresh the dashboard and log the summary."""
        try:
            logger.info("更新物資清單中...")
            result = await self._dashboard.refresh()
            log_refresh_result(result, self._dashboard)
            return result
        except Exception:
            logger.exception("物資清單更新工作發生錯誤")
            return None


def log_refresh_result(result: RefreshResult, dashboard: InventoryDashboard) -> None:
    if result.cancelled:
        logger.info("更新已被較新的請求取代")
        return
    if not result.ok:
        logger.error("更新失敗: %s", result.error)
        return
    if not result.snapshot.configured:
        return

    view = dashboard.view()
    s = view.summary
    logger.info(
        "總數 %d / 安全 %d / 即將到期 %d / 已過期 %d / 無保存期限 %d",
        s.total, s.safe, s.soon, s.expired, s.noexpiry,
    )
    for item in view.urgent:
        logger.warning(
            "要注意: %s (%s) %s", item.name, item.category, days_label(item.days_left)
        )
