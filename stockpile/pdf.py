"""Printable supply checklist using ReportLab."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING

from .display import NO_URGENT_MESSAGE, days_label, status_label
from .expiry import today_in

if TYPE_CHECKING:
    from .models import DashboardView

# CJK font search paths by platform
_FONT_SEARCH_PATHS = [
    # Noto Sans CJK (Debian/Ubuntu)
    "/usr/share/fonts/opentype/noto/NotoSansCJK-Regular.ttc",
    "/usr/share/fonts/opentype/noto/NotoSansCJKtc-Regular.otf",
    # Noto Sans CJK (Fedora/RHEL)
    "/usr/share/fonts/noto-cjk/NotoSansCJK-Regular.ttc",
    "/usr/share/fonts/google-noto-cjk/NotoSansCJK-Regular.ttc",
    # Noto Sans TC (standalone)
    "/usr/share/fonts/truetype/noto/NotoSansTC-Regular.ttf",
    "/usr/share/fonts/noto/NotoSansTC-Regular.ttf",
    # AR PL UMing / WenQuanYi (Debian/Ubuntu)
    "/usr/share/fonts/truetype/arphic/uming.ttc",
    "/usr/share/fonts/truetype/wqy/wqy-microhei.ttc",
    # macOS
    "/System/Library/Fonts/PingFang.ttc",
    "/System/Library/Fonts/STHeiti Light.ttc",
    "/Library/Fonts/Arial Unicode.ttf",
]

_STATUS_COLORS = {
    "safe": "#2E7D32",
    "soon": "#F9A825",
    "expired": "#C62828",
    "noexpiry": "#2E7D32",
}


def _find_cjk_font() -> str:
    """Find a font that can render Traditional Chinese."""
    for path in _FONT_SEARCH_PATHS:
        if Path(path).exists():
            return path
    raise FileNotFoundError(
        "找不到中文字型，請安裝以下任一字型:\n"
        "  Ubuntu/Debian: sudo apt install fonts-noto-cjk\n"
        "  Fedora/RHEL:   sudo dnf install google-noto-sans-cjk-ttc-fonts\n"
        "  macOS:         內建 PingFang 字型"
    )


def _register_cjk_font() -> str:
    """Register a CJK font with ReportLab and return the font name."""
    from reportlab.pdfbase import pdfmetrics
    from reportlab.pdfbase.ttfonts import TTFont

    font_path = _find_cjk_font()
    font_name = "ChineseFont"
    pdfmetrics.registerFont(TTFont(font_name, font_path))
    return font_name


def generate_pdf(
    view: DashboardView,
    output_path: str | Path,
    today: date | None = None,
) -> Path:
    """Generate a checklist PDF from a dashboard view.

    Args:
        view: The dashboard view to render.
        output_path: Where to save the PDF file.
        today: Date printed in the title. Defaults to today in UTC.

    Returns:
        Path to the generated PDF file.

    Raises:
        ImportError: If reportlab is not installed.
        FileNotFoundError: If no CJK font is found.
    """
    try:
        from reportlab.lib import colors
        from reportlab.lib.pagesizes import A4
        from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
        from reportlab.lib.units import mm
        from reportlab.platypus import (
            Paragraph,
            SimpleDocTemplate,
            Spacer,
            Table,
            TableStyle,
        )
    except ImportError:
        raise ImportError(
            "需要 reportlab: pip install 'stockpile[pdf]'"
        )

    font_name = _register_cjk_font()
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    today = today or today_in()

    doc = SimpleDocTemplate(
        str(output_path),
        pagesize=A4,
        leftMargin=15 * mm,
        rightMargin=15 * mm,
        topMargin=15 * mm,
        bottomMargin=15 * mm,
    )

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        "Title_TC",
        parent=styles["Title"],
        fontName=font_name,
        fontSize=18,
        leading=24,
    )
    heading_style = ParagraphStyle(
        "Heading_TC",
        parent=styles["Heading2"],
        fontName=font_name,
        fontSize=14,
        leading=20,
        spaceAfter=4 * mm,
    )
    body_style = ParagraphStyle(
        "Body_TC",
        parent=styles["Normal"],
        fontName=font_name,
        fontSize=9,
        leading=13,
    )

    def table_style(header_color: str, stripe_color: str) -> TableStyle:
        return TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor(header_color)),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
            ("FONTNAME", (0, 0), (-1, -1), font_name),
            ("FONTSIZE", (0, 0), (-1, -1), 8),
            ("ALIGN", (0, 0), (-1, -1), "LEFT"),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
            ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor(stripe_color)]),
            ("TOPPADDING", (0, 0), (-1, -1), 3),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
            ("LEFTPADDING", (0, 0), (-1, -1), 4),
            ("RIGHTPADDING", (0, 0), (-1, -1), 4),
        ])

    elements: list = []

    # Title and summary
    s = view.summary
    elements.append(Paragraph(f"{today.isoformat()} 防災物資檢查表", title_style))
    elements.append(
        Paragraph(
            f"總數 {s.total} / 安全 {s.safe} / 即將到期 {s.soon} / "
            f"已過期/≤30天 {s.expired} / 無保存期限 {s.noexpiry}",
            body_style,
        )
    )
    elements.append(Spacer(1, 6 * mm))

    # Urgent items
    elements.append(Paragraph("要注意的物品", heading_style))
    if view.urgent:
        table_data = [["名稱", "類別", "數量", "剩餘天數"]]
        for item in view.urgent:
            table_data.append([
                item.name, item.category, item.quantity, days_label(item.days_left),
            ])
        t = Table(table_data, colWidths=[60 * mm, 35 * mm, 25 * mm, 40 * mm])
        t.setStyle(table_style("#C62828", "#FFEBEE"))
        elements.append(t)
    else:
        elements.append(Paragraph(NO_URGENT_MESSAGE, body_style))
    elements.append(Spacer(1, 6 * mm))

    # Full checklist
    elements.append(Paragraph("物品清單", heading_style))
    if view.items:
        table_data = [["☐", "#", "名稱", "類別", "數量", "到期日", "狀態", "備註"]]
        status_rows: list[tuple[int, str]] = []
        for idx, item in enumerate(view.items, 1):
            table_data.append([
                "☐",
                str(idx),
                item.name,
                item.category,
                item.quantity,
                item.expiry_date or "—",
                status_label(item.status),
                item.note,
            ])
            status_rows.append((idx, item.status))
        col_widths = [
            7 * mm, 8 * mm, 38 * mm, 25 * mm, 14 * mm, 24 * mm, 24 * mm, 40 * mm,
        ]
        t = Table(table_data, colWidths=col_widths, repeatRows=1)
        style = table_style("#4A90D9", "#F5F5F5")
        for row, status in status_rows:
            style.add(
                "TEXTCOLOR", (6, row), (6, row),
                colors.HexColor(_STATUS_COLORS.get(status, "#000000")),
            )
        t.setStyle(style)
        elements.append(t)
    else:
        elements.append(Paragraph("沒有符合條件的物品", body_style))

    doc.build(elements)
    return output_path
