"""Date helpers for billing periods"""

from datetime import date

MONTH_NAMES_ID = [
    "Januari", "Februari", "Maret", "April", "Mei", "Juni",
    "Juli", "Agustus", "September", "Oktober", "November", "Desember",
]


def month_name(month: int) -> str:
    """Indonesian month name for 1-12"""
    return MONTH_NAMES_ID[month - 1]


def period_label(month: int, year: int) -> str:
    return f"{month_name(month)} {year}"


def format_date_id(day: date) -> str:
    """Short Indonesian date, e.g. 5/3/2025"""
    return f"{day.day}/{day.month}/{day.year}"
