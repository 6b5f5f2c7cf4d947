# backend/upkeep/domain/scheduling.py
"""
Checklist / ticket tarih hesapları. Saf fonksiyonlar; DB'ye dokunmaz.
"""
import calendar
from datetime import datetime, timedelta
from typing import Optional

from .constants import (
    CHECKLIST_LATE,
    CHECKLIST_PLANNED,
    TICKET_CLOSED_STATUSES,
    TICKET_COMPLETED,
    TICKET_COMPLETED_LATE,
)


def add_months(value: datetime, months: int) -> datetime:
    """Takvim ayı ekler; hedef ayda gün yoksa ayın son gününe sabitler (31 Oca + 1 ay -> 28/29 Şub)."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def next_planned_date(
    interval_type: str,
    last_performed: datetime,
    custom_days: Optional[int] = None,
) -> datetime:
    if interval_type == "daily":
        return last_performed + timedelta(days=1)
    if interval_type == "weekly":
        return last_performed + timedelta(days=7)
    if interval_type == "monthly":
        return add_months(last_performed, 1)
    if interval_type == "semi":
        return add_months(last_performed, 6)
    if interval_type == "annually":
        return add_months(last_performed, 12)
    if interval_type == "custom":
        if custom_days:
            return last_performed + timedelta(days=int(custom_days))
        return last_performed
    raise ValueError(f"unknown interval type: {interval_type!r}")


def checklist_status(next_planned: Optional[datetime], now: datetime) -> str:
    if next_planned is not None and next_planned < now:
        return CHECKLIST_LATE
    return CHECKLIST_PLANNED


def ticket_is_overdue(status: str, scheduled: datetime, now: datetime) -> bool:
    return status not in TICKET_CLOSED_STATUSES and scheduled < now


def completion_status(scheduled: datetime, now: datetime) -> str:
    return TICKET_COMPLETED_LATE if scheduled < now else TICKET_COMPLETED
