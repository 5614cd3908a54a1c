"""CLI entry point for the supply dashboard."""

from __future__ import annotations

import argparse
import asyncio
import json
import locale
import logging
import os
import sys

from dotenv import load_dotenv

from .config import load_config
from .dashboard import InventoryDashboard
from .display import (
    NO_URGENT_MESSAGE,
    days_label,
    icon_for,
    render_dashboard,
    view_to_dict,
)
from .expiry import today_in
from .fetcher import NOT_CONFIGURED_MESSAGE, load_snapshot_from_file
from .view import SORT_MODES

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    load_dotenv()

    parser = argparse.ArgumentParser(
        prog="stockpile",
        description="防災物資儀表板 — 讀取 Google Sheet 公開 CSV，計算到期狀態",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="設定檔路徑 (TOML)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="顯示除錯訊息"
    )

    sub = parser.add_subparsers(dest="command")

    # show
    show_parser = sub.add_parser("show", help="顯示儀表板")
    show_parser.add_argument(
        "--category", type=str, default="all", help="只顯示指定類別 (預設: all)"
    )
    show_parser.add_argument(
        "--sort", type=str, choices=SORT_MODES, default="none", help="排序方式"
    )
    show_parser.add_argument(
        "--file", type=str, default=None, help="讀取本機 CSV 檔而非下載"
    )
    show_parser.add_argument("--json", action="store_true", help="以 JSON 格式輸出")
    show_parser.add_argument(
        "--pdf", type=str, default=None, metavar="FILE", help="輸出 PDF 檢查表"
    )

    # urgent
    urgent_parser = sub.add_parser("urgent", help="只顯示要注意的物品")
    urgent_parser.add_argument(
        "--file", type=str, default=None, help="讀取本機 CSV 檔而非下載"
    )
    urgent_parser.add_argument("--json", action="store_true", help="以 JSON 格式輸出")

    # categories
    cat_parser = sub.add_parser("categories", help="列出所有類別")
    cat_parser.add_argument(
        "--file", type=str, default=None, help="讀取本機 CSV 檔而非下載"
    )

    # watch
    sub.add_parser("watch", help="依排程定期更新並記錄要注意的物品")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    # watch reports through the log
    _setup_logging(args.verbose, "INFO" if args.command == "watch" else "WARNING")
    _setup_collation()

    try:
        config = load_config(args.config)
    except ValueError as e:
        print(f"設定錯誤: {e}", file=sys.stderr)
        sys.exit(1)

    match args.command:
        case "show":
            asyncio.run(_cmd_show(config, args))
        case "urgent":
            asyncio.run(_cmd_urgent(config, args))
        case "categories":
            asyncio.run(_cmd_categories(config, args))
        case "watch":
            _cmd_watch(config)


def _setup_logging(verbose: bool, default: str = "WARNING") -> None:
    level = "DEBUG" if verbose else os.getenv("LOG_LEVEL", default).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _setup_collation() -> None:
    # Category sort compares with the user's collation rules
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        logger.warning("無法套用系統語系排序規則，改用字元碼排序: %s", e)


async def _load_dashboard(config, args) -> InventoryDashboard:
    """Load the dashboard from a local file or the configured sheet.

    Exits with status 1 when the download fails.
    """
    if args.file:
        try:
            snapshot = load_snapshot_from_file(args.file, config)
        except OSError as e:
            print(f"無法讀取檔案: {e}", file=sys.stderr)
            sys.exit(1)
        return InventoryDashboard(config, snapshot=snapshot)

    dashboard = InventoryDashboard(config)
    result = await dashboard.refresh()
    if not result.ok:
        print(
            f"更新失敗，請檢查 CSV 連結是否正確或是否已公開發佈。\n{result.error}",
            file=sys.stderr,
        )
        sys.exit(1)
    if not result.snapshot.configured:
        print(NOT_CONFIGURED_MESSAGE, file=sys.stderr)
    return dashboard


async def _cmd_show(config, args) -> None:
    dashboard = await _load_dashboard(config, args)
    view = dashboard.select(category=args.category, sort=args.sort)

    if args.json:
        print(json.dumps(view_to_dict(view, config.display), ensure_ascii=False, indent=2))
    else:
        print(render_dashboard(view, config.display))
        malformed = dashboard.snapshot.malformed_dates
        if malformed:
            print(f"\n⚠️  {malformed} 筆到期日格式無法辨識，已視為無保存期限")

    if args.pdf:
        from .pdf import generate_pdf

        print("📄 產生 PDF 中...")
        try:
            path = generate_pdf(view, args.pdf, today=today_in(config.expiry.tzinfo))
            print(f"   PDF 已儲存: {path}")
        except (ImportError, FileNotFoundError) as e:
            print(f"PDF 產生錯誤: {e}", file=sys.stderr)


async def _cmd_urgent(config, args) -> None:
    dashboard = await _load_dashboard(config, args)
    view = dashboard.view()

    if args.json:
        data = view_to_dict(view, config.display)["urgent"]
        print(json.dumps(data, ensure_ascii=False, indent=2))
        return

    if not view.urgent:
        print(NO_URGENT_MESSAGE)
        return
    print(f"🚨 要注意的物品 ({len(view.urgent)} 項):")
    for item in view.urgent:
        qty = f" · {item.quantity}" if item.quantity else ""
        print(f"  {item.name:<12} {item.category}{qty}  {days_label(item.days_left)}")


async def _cmd_categories(config, args) -> None:
    dashboard = await _load_dashboard(config, args)
    view = dashboard.view()
    if not view.categories:
        print("沒有任何類別。")
        return
    counts: dict[str, int] = {}
    for item in dashboard.snapshot.items:
        counts[item.category] = counts.get(item.category, 0) + 1
    for category in view.categories:
        print(f"  {icon_for(category, config.display)} {category} ({counts[category]})")


def _cmd_watch(config) -> None:
    from .scheduler import RefreshScheduler, log_refresh_result

    if not config.source.is_configured:
        print(NOT_CONFIGURED_MESSAGE, file=sys.stderr)
        sys.exit(1)

    async def run() -> None:
        dashboard = InventoryDashboard(config)
        try:
            scheduler = RefreshScheduler(dashboard, cron=config.schedule.refresh_cron)
        except ImportError as e:
            print(str(e), file=sys.stderr)
            sys.exit(1)

        log_refresh_result(await dashboard.refresh(), dashboard)
        try:
            scheduler.start()
        except ValueError as e:
            print(str(e), file=sys.stderr)
            sys.exit(1)
        print(f"⏰ 依排程 {config.schedule.refresh_cron} 更新中 (Ctrl+C 結束)")
        try:
            await asyncio.Event().wait()
        finally:
            scheduler.stop()

    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        pass
