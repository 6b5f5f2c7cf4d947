# backend/upkeep/routers/tickets.py
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from ..core.api import list_meta, ok
from ..core.db import get_db
from ..core.security import CurrentUser, get_current_user, require_admin, require_ticket_permissions
from ..schemas.ticket import ReportIn, TicketAssign, TicketComplete, TicketCreate, TicketRead, TicketUpdate
from ..services import report_service, ticket_service

router = APIRouter(prefix="/tickets", tags=["tickets"], dependencies=[Depends(get_current_user)])
Guard = Depends(require_ticket_permissions)


@router.get("")
def list_tickets(
    machine_id: Optional[int] = Query(None),
    user_id: Optional[int] = Query(None),
    status: Optional[str] = Query(None),
    date_from: Optional[datetime] = Query(None, description="ScheduledDate >= date_from"),
    date_to: Optional[datetime] = Query(None, description="ScheduledDate <= date_to"),
    db: Session = Depends(get_db),
):
    rows = ticket_service.list_tickets(
        db, machine_id=machine_id, user_id=user_id, status_s=status, date_from=date_from, date_to=date_to
    )
    items = [TicketRead.model_validate(t) for t in rows]
    return ok(items, meta=list_meta(items))


@router.post("", status_code=201, dependencies=[Guard])
def create_ticket(body: TicketCreate, db: Session = Depends(get_db)):
    return ok(TicketRead.model_validate(ticket_service.create_ticket(db, body)), status_code=201)


@router.post("/mark-overdue", dependencies=[Depends(require_admin)])
def mark_overdue(db: Session = Depends(get_db)):
    return ok(ticket_service.mark_overdue(db))


@router.get("/{ticket_id}")
def get_ticket(ticket_id: int, db: Session = Depends(get_db)):
    return ok(TicketRead.model_validate(ticket_service.get_ticket(db, ticket_id)))


@router.put("/{ticket_id}", dependencies=[Guard])
def update_ticket(ticket_id: int, body: TicketUpdate, db: Session = Depends(get_db)):
    return ok(TicketRead.model_validate(ticket_service.update_ticket(db, ticket_id, body)))


@router.delete("/{ticket_id}", dependencies=[Guard])
def delete_ticket(ticket_id: int, db: Session = Depends(get_db)):
    ticket_service.delete_ticket(db, ticket_id)
    return ok({"deleted": ticket_id})


@router.post("/{ticket_id}/assign", dependencies=[Guard])
def assign_ticket(ticket_id: int, body: TicketAssign, db: Session = Depends(get_db)):
    return ok(TicketRead.model_validate(ticket_service.assign_ticket(db, ticket_id, body.UserID)))


@router.post("/{ticket_id}/complete")
def complete_ticket(ticket_id: int, body: TicketComplete, current: CurrentUser, db: Session = Depends(get_db)):
    ticket = ticket_service.complete_ticket(
        db, ticket_id, current, completion_notes=body.CompletionNotes, external=body.External
    )
    return ok(TicketRead.model_validate(ticket))


@router.post("/{ticket_id}/report")
def ticket_report(ticket_id: int, body: ReportIn, db: Session = Depends(get_db)):
    pdf, filename, info = report_service.generate_report(
        db,
        ticket_id,
        problem=body.problem,
        solution=body.solution,
        notes=body.notes,
        save_to_documents=body.save_to_documents,
        email=body.email,
    )
    if body.save_to_documents:
        return ok(info)

    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}
    if "email" in info:
        headers["X-Email-Sent"] = "true" if info["email"].get("sent") else "false"
    return Response(content=pdf, media_type="application/pdf", headers=headers)
