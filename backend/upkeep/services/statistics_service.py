# backend/upkeep/services/statistics_service.py
from collections import Counter, defaultdict
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ..domain.downtime import business_downtime_hours
from ..models import Machine, MaintenanceTicket

MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def _key(value: datetime) -> str:
    return value.strftime("%Y-%m")


def _label(key: str) -> str:
    year, month = key.split("-")
    return f"{MONTHS[int(month) - 1]}/{year}"


def ticket_statistics(
    db: Session,
    machine_id: Optional[int] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
) -> dict:
    """Grafik verisi: kök neden, aylık müdahale sayısı/tipi, aylık duruş saati."""
    q = db.query(MaintenanceTicket)
    if machine_id is not None:
        if not db.get(Machine, machine_id):
            raise HTTPException(status_code=404, detail="Machine not found")
        q = q.filter(MaintenanceTicket.MachineID == machine_id)
    if date_from is not None:
        q = q.filter(MaintenanceTicket.ScheduledDate >= date_from)
    if date_to is not None:
        q = q.filter(MaintenanceTicket.ScheduledDate <= date_to)
    tickets = q.all()

    causes = Counter(t.category.Name for t in tickets if t.category is not None)

    counts = Counter(_key(t.ScheduledDate) for t in tickets)

    # Müdahale tipi kapanışta belli olur
    types = defaultdict(lambda: {"internal": 0, "external": 0})
    for t in tickets:
        if t.CompletedDate is None:
            continue
        types[_key(t.ScheduledDate)]["external" if t.InterventionExternal else "internal"] += 1

    downtime = defaultdict(float)
    for t in tickets:
        if t.CreatedAt and t.CompletedDate:
            downtime[_key(t.CreatedAt)] += business_downtime_hours(t.CreatedAt, t.CompletedDate)

    return {
        "ticketCount": len(tickets),
        "rootCause": [
            {"cause": name, "count": n} for name, n in sorted(causes.items(), key=lambda kv: (-kv[1], kv[0]))
        ],
        "interventionCount": [
            {"month": _label(k), "count": counts[k]} for k in sorted(counts)
        ],
        "interventionType": [
            {"month": _label(k), **types[k]} for k in sorted(types)
        ],
        "equipmentDowntime": [
            {"month": _label(k), "hours": round(downtime[k], 2)} for k in sorted(downtime)
        ],
    }
