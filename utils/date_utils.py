"""Helpers for the "YYYY-MM-DD" date strings used on every lift record."""

import re
from datetime import date, datetime, timedelta

import pandas as pd

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_iso_date(date_str: str) -> date:
    return date.fromisoformat(date_str)


def today_str(today: date | str | None = None) -> str:
    if today is None:
        return date.today().isoformat()
    if isinstance(today, datetime):
        return today.date().isoformat()
    if isinstance(today, date):
        return today.isoformat()
    return str(today)


def normalize_date(raw) -> str | None:
    """
    Coerce a spreadsheet date cell to "YYYY-MM-DD".
    Returns None when the cell is empty or cannot be read as a date.
    """
    if raw is None:
        return None
    s = str(raw).strip()
    if not s:
        return None
    if ISO_DATE_RE.match(s):
        try:
            date.fromisoformat(s)
            return s
        except ValueError:
            return None
    if not any(ch.isdigit() for ch in s):
        return None  # "today", "now" and the like would depend on the clock
    dt = pd.to_datetime(s, errors="coerce", format="mixed")
    if pd.isna(dt):
        return None
    return dt.strftime("%Y-%m-%d")


def add_days(date_str: str, n: int) -> str:
    return (parse_iso_date(date_str) + timedelta(days=n)).isoformat()


def subtract_days(date_str: str, n: int) -> str:
    return add_days(date_str, -n)


def diff_in_days(a: str, b: str) -> int:
    """Calendar day difference a - b."""
    return (parse_iso_date(a) - parse_iso_date(b)).days


def week_key(date_str: str) -> str:
    """Monday of the week containing date_str."""
    d = parse_iso_date(date_str)
    return (d - timedelta(days=d.weekday())).isoformat()
