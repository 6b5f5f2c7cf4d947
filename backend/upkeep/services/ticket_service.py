# backend/upkeep/services/ticket_service.py
import logging
from datetime import datetime
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import Session

from ..domain.constants import (
    MACHINE_ACTIVE,
    MACHINE_HAS_PROBLEMS,
    MACHINE_UNDER_MAINTENANCE,
    TICKET_CLOSED_STATUSES,
    TICKET_LATE,
)
from ..domain.scheduling import completion_status
from ..models import AppUser, Machine, MachineCategory, MaintenanceTicket
from ..schemas.ticket import TicketCreate, TicketUpdate
from . import email_service, machine_service

logger = logging.getLogger(__name__)


def _commit(db: Session, what: str) -> None:
    try:
        db.commit()
    except (IntegrityError, DBAPIError) as e:
        db.rollback()
        logger.exception("%s: db hatası", what)
        raise HTTPException(status_code=400, detail=f"db_error: {getattr(e, 'orig', e)}")


def _check_refs(db: Session, machine_id: Optional[int], user_id: Optional[int], category_id: Optional[int]):
    if machine_id is not None and not db.get(Machine, machine_id):
        raise HTTPException(status_code=404, detail="Machine not found")
    if user_id is not None and not db.get(AppUser, user_id):
        raise HTTPException(status_code=404, detail="User not found")
    if category_id is not None and not db.get(MachineCategory, category_id):
        raise HTTPException(status_code=404, detail="Category not found")


def ticket_mail_data(ticket: MaintenanceTicket) -> dict:
    return {
        "title": ticket.Title,
        "description": ticket.Description,
        "scheduled_date": ticket.ScheduledDate.strftime("%Y-%m-%d %H:%M") if ticket.ScheduledDate else "-",
        "machine_name": ticket.machine.Name if ticket.machine else "-",
        "category": ticket.category.Name if ticket.category else None,
        "critical": bool(ticket.Critical),
    }


def _notify_assignee(ticket: MaintenanceTicket) -> dict:
    if not ticket.user:
        return {"sent": False, "error": "No assignee"}
    return email_service.notify("ticket", ticket.user.Email, ticket_mail_data(ticket))


def get_ticket(db: Session, ticket_id: int) -> MaintenanceTicket:
    t = db.get(MaintenanceTicket, ticket_id)
    if not t:
        raise HTTPException(status_code=404, detail="Ticket not found")
    return t


def list_tickets(
    db: Session,
    *,
    machine_id: Optional[int] = None,
    user_id: Optional[int] = None,
    status_s: Optional[str] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
) -> List[MaintenanceTicket]:
    q = db.query(MaintenanceTicket)
    if machine_id is not None:
        q = q.filter(MaintenanceTicket.MachineID == machine_id)
    if user_id is not None:
        q = q.filter(MaintenanceTicket.UserID == user_id)
    if status_s:
        q = q.filter(MaintenanceTicket.Status_s == status_s)
    if date_from is not None:
        q = q.filter(MaintenanceTicket.ScheduledDate >= date_from)
    if date_to is not None:
        q = q.filter(MaintenanceTicket.ScheduledDate <= date_to)
    return q.order_by(MaintenanceTicket.ScheduledDate.desc(), MaintenanceTicket.TicketID.desc()).all()


def create_ticket(db: Session, payload: TicketCreate) -> MaintenanceTicket:
    _check_refs(db, payload.MachineID, payload.UserID, payload.CategoryID)
    now = datetime.now()

    ticket = MaintenanceTicket(**payload.model_dump(), CreatedAt=now, UpdatedAt=now)
    db.add(ticket)

    machine = db.get(Machine, payload.MachineID)
    machine.Status_s = MACHINE_UNDER_MAINTENANCE if payload.Critical else MACHINE_HAS_PROBLEMS

    _commit(db, "create_ticket")
    db.refresh(ticket)
    logger.info("ticket açıldı: #%s %s (MachineID=%s)", ticket.TicketID, ticket.Title, ticket.MachineID)

    if ticket.UserID is not None:
        _notify_assignee(ticket)
    return ticket


def update_ticket(db: Session, ticket_id: int, payload: TicketUpdate) -> MaintenanceTicket:
    ticket = get_ticket(db, ticket_id)
    data = payload.model_dump(exclude_unset=True)
    _check_refs(db, data.get("MachineID"), data.get("UserID"), data.get("CategoryID"))

    previous_user = ticket.UserID
    previous_machine = ticket.MachineID
    for key, value in data.items():
        setattr(ticket, key, value)
    ticket.UpdatedAt = datetime.now()

    if data.keys() & {"Critical", "MachineID", "Status_s"}:
        # autoflush kapalı; açık ticket sorgusu güncel satırı görmeli
        db.flush()
        for mid in {previous_machine, ticket.MachineID}:
            machine = db.get(Machine, mid) if mid is not None else None
            if machine is not None:
                machine_service.recompute_status(db, machine)

    _commit(db, "update_ticket")
    db.refresh(ticket)

    if ticket.UserID is not None and ticket.UserID != previous_user:
        _notify_assignee(ticket)
    return ticket


def assign_ticket(db: Session, ticket_id: int, user_id: int) -> MaintenanceTicket:
    ticket = get_ticket(db, ticket_id)
    _check_refs(db, None, user_id, None)
    changed = ticket.UserID != user_id
    ticket.UserID = user_id
    ticket.UpdatedAt = datetime.now()
    _commit(db, "assign_ticket")
    db.refresh(ticket)
    if changed:
        _notify_assignee(ticket)
    return ticket


def complete_ticket(
    db: Session,
    ticket_id: int,
    current: AppUser,
    completion_notes: Optional[str] = None,
    external: bool = False,
) -> MaintenanceTicket:
    ticket = get_ticket(db, ticket_id)
    allowed = current.IsAdmin or current.TicketPermissions or ticket.UserID == current.UserID
    if not allowed:
        raise HTTPException(status_code=403, detail="Only the assignee or a ticket manager can complete this ticket")
    if ticket.Status_s in TICKET_CLOSED_STATUSES:
        raise HTTPException(status_code=409, detail="Ticket is already completed")

    now = datetime.now()
    ticket.Status_s = completion_status(ticket.ScheduledDate, now)
    ticket.CompletedDate = now
    ticket.CompletionNotes = completion_notes
    ticket.InterventionExternal = bool(external)
    ticket.UpdatedAt = now
    if ticket.machine is not None:
        ticket.machine.Status_s = MACHINE_ACTIVE

    _commit(db, "complete_ticket")
    db.refresh(ticket)
    logger.info("ticket kapandı: #%s (%s)", ticket.TicketID, ticket.Status_s)
    return ticket


def mark_overdue(db: Session) -> dict:
    now = datetime.now()
    rows = (
        db.query(MaintenanceTicket)
        .filter(MaintenanceTicket.Status_s.notin_(TICKET_CLOSED_STATUSES + (TICKET_LATE,)))
        .filter(MaintenanceTicket.ScheduledDate < now)
        .all()
    )
    for t in rows:
        t.Status_s = TICKET_LATE
        t.UpdatedAt = now
    _commit(db, "mark_overdue")
    return {"updated": len(rows)}


def delete_ticket(db: Session, ticket_id: int) -> None:
    ticket = get_ticket(db, ticket_id)
    db.delete(ticket)
    _commit(db, "delete_ticket")
