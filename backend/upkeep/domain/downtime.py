# backend/upkeep/domain/downtime.py
from datetime import datetime, timedelta

from .constants import WORKDAY_START, WORKDAY_END, WORKDAYS

MAX_HOURS_PER_DAY = 8.5


def business_downtime_hours(created: datetime, completed: datetime) -> float:
    """
    created..completed aralığının mesai saatlerine (Pzt-Cum 07:30-16:00)
    denk gelen kısmını saat olarak döner. 2 haneye yuvarlanır.
    """
    if completed is None or created is None or completed <= created:
        return 0.0

    total = 0.0
    day = created.date()
    while day <= completed.date():
        if day.weekday() in WORKDAYS:
            start = max(created, datetime.combine(day, WORKDAY_START))
            end = min(completed, datetime.combine(day, WORKDAY_END))
            if start < end:
                total += min(MAX_HOURS_PER_DAY, (end - start).total_seconds() / 3600)
        day += timedelta(days=1)
    return round(total, 2)
