"""Tests for RefreshScheduler."""

import logging

import pytest

from conftest import make_item

from stockpile.config import load_config
from stockpile.dashboard import InventoryDashboard, RefreshResult
from stockpile.models import InventorySnapshot
from stockpile.scheduler import log_refresh_result


def _scheduler_cls():
    try:
        from stockpile.scheduler import RefreshScheduler

        RefreshScheduler(InventoryDashboard(load_config()))
    except ImportError:
        pytest.skip("apscheduler not installed")
    return RefreshScheduler


def test_scheduler_init():
    RefreshScheduler = _scheduler_cls()
    scheduler = RefreshScheduler(InventoryDashboard(load_config()))
    assert scheduler.running is False


def test_scheduler_setup_jobs():
    """The refresh job is registered with the configured cron."""
    RefreshScheduler = _scheduler_cls()
    scheduler = RefreshScheduler(InventoryDashboard(load_config()), cron="*/5 * * * *")
    scheduler.setup_jobs()

    job_ids = {j["id"] for j in scheduler.get_jobs()}
    assert "refresh_inventory" in job_ids


def test_scheduler_invalid_cron():
    RefreshScheduler = _scheduler_cls()
    scheduler = RefreshScheduler(InventoryDashboard(load_config()), cron="every hour")
    with pytest.raises(ValueError, match="無效的 cron"):
        scheduler.setup_jobs()


class TestLogRefreshResult:
    def _dashboard(self, *items):
        snapshot = InventorySnapshot(items=tuple(items))
        return InventoryDashboard(load_config(), snapshot=snapshot)

    def test_logs_summary_and_urgent(self, caplog):
        dashboard = self._dashboard(
            make_item("乾糧", "食物", "2025-02-18"),
            make_item("急救包", "藥品"),
        )
        result = RefreshResult(ok=True, snapshot=dashboard.snapshot)

        with caplog.at_level(logging.INFO, logger="stockpile.scheduler"):
            log_refresh_result(result, dashboard)

        assert "總數 2" in caplog.text
        assert "乾糧" in caplog.text
        assert "已過期 20 天" in caplog.text

    def test_logs_failure(self, caplog):
        dashboard = self._dashboard()
        result = RefreshResult(ok=False, snapshot=dashboard.snapshot, error="offline")

        with caplog.at_level(logging.INFO, logger="stockpile.scheduler"):
            log_refresh_result(result, dashboard)

        assert "更新失敗: offline" in caplog.text

    def test_cancelled_is_not_an_error(self, caplog):
        dashboard = self._dashboard()
        result = RefreshResult(ok=False, snapshot=dashboard.snapshot, cancelled=True)

        with caplog.at_level(logging.INFO, logger="stockpile.scheduler"):
            log_refresh_result(result, dashboard)

        assert not [r for r in caplog.records if r.levelno >= logging.ERROR]


@pytest.mark.asyncio
async def test_job_refresh_logs_unexpected_errors(caplog):
    """An unexpected error is logged and does not escape the job."""
    RefreshScheduler = _scheduler_cls()
    dashboard = InventoryDashboard(load_config())

    async def broken_refresh():
        raise RuntimeError("parser exploded")

    dashboard.refresh = broken_refresh
    scheduler = RefreshScheduler(dashboard)

    with caplog.at_level(logging.ERROR, logger="stockpile.scheduler"):
        assert await scheduler._job_refresh() is None

    assert "更新工作發生錯誤" in caplog.text
    assert "parser exploded" in caplog.text
