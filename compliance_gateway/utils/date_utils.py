"""Date manipulation utilities"""

from datetime import date
from typing import Optional


def financial_year_start(day: date) -> int:
    """Calendar year in which the Australian financial year (July-June) containing `day` starts"""
    return day.year if day.month >= 7 else day.year - 1


def bas_quarter_label(from_date: date, to_date: Optional[date] = None) -> str:
    """
    Human-readable BAS period label, e.g. "Q3 FY2024–25" for January-March 2025.

    Quarters are counted from July (Q1 = Jul-Sep). A range that spans more than
    one quarter is labelled with both ends: "Q1–Q2 FY2024–25".
    """
    fy = financial_year_start(from_date)
    fy_label = f"FY{fy}–{(fy + 1) % 100:02d}"
    start_q = ((from_date.month - 7) % 12) // 3 + 1

    if to_date is None or to_date < from_date:
        return f"Q{start_q} {fy_label}"

    end_fy = financial_year_start(to_date)
    end_q = ((to_date.month - 7) % 12) // 3 + 1
    if end_fy == fy and end_q == start_q:
        return f"Q{start_q} {fy_label}"
    if end_fy == fy:
        return f"Q{start_q}–Q{end_q} {fy_label}"
    return f"Q{start_q} {fy_label} – Q{end_q} FY{end_fy}–{(end_fy + 1) % 100:02d}"
