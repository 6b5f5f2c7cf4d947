# backend/upkeep/routers/checklists.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..core.api import list_meta, ok
from ..core.db import get_db
from ..core.security import CurrentUser, get_current_user, require_ticket_permissions
from ..schemas.checklist import (
    ChecklistCompleteIn,
    ChecklistCreate,
    ChecklistItemRead,
    ChecklistRead,
    ChecklistUpdate,
    CompletionRead,
    ItemToggle,
    NotifyIn,
)
from ..services import checklist_service

router = APIRouter(tags=["checklists"], dependencies=[Depends(get_current_user)])
Guard = Depends(require_ticket_permissions)


@router.get("/checklists")
def list_checklists(status: Optional[str] = Query(None), db: Session = Depends(get_db)):
    items = [ChecklistRead.model_validate(c) for c in checklist_service.list_checklists(db, status)]
    return ok(items, meta=list_meta(items))


@router.post("/checklists", status_code=201, dependencies=[Guard])
def create_checklist(body: ChecklistCreate, db: Session = Depends(get_db)):
    return ok(ChecklistRead.model_validate(checklist_service.create_checklist(db, body)), status_code=201)


@router.post("/checklists/refresh-status")
def refresh_statuses(db: Session = Depends(get_db)):
    return ok(checklist_service.refresh_statuses(db))


@router.post("/checklists/notify", dependencies=[Guard])
def notify_upcoming(body: NotifyIn, db: Session = Depends(get_db)):
    return ok(checklist_service.notify_upcoming(db, body.days))


@router.patch("/checklists/items/{item_id}")
def toggle_item(item_id: int, body: ItemToggle, db: Session = Depends(get_db)):
    return ok(ChecklistItemRead.model_validate(checklist_service.toggle_item(db, item_id, body.Completed)))


@router.delete("/checklists/completions/{completion_id}", dependencies=[Guard])
def delete_completion(completion_id: int, db: Session = Depends(get_db)):
    checklist_service.delete_completion(db, completion_id)
    return ok({"deleted": completion_id})


@router.get("/checklists/{checklist_id}")
def get_checklist(checklist_id: int, db: Session = Depends(get_db)):
    return ok(ChecklistRead.model_validate(checklist_service.get_checklist(db, checklist_id)))


@router.put("/checklists/{checklist_id}", dependencies=[Guard])
def update_checklist(checklist_id: int, body: ChecklistUpdate, db: Session = Depends(get_db)):
    return ok(ChecklistRead.model_validate(checklist_service.update_checklist(db, checklist_id, body)))


@router.delete("/checklists/{checklist_id}", dependencies=[Guard])
def delete_checklist(checklist_id: int, db: Session = Depends(get_db)):
    checklist_service.delete_checklist(db, checklist_id)
    return ok({"deleted": checklist_id})


@router.post("/checklists/{checklist_id}/complete")
def complete_checklist(
    checklist_id: int,
    body: ChecklistCompleteIn,
    current: CurrentUser,
    db: Session = Depends(get_db),
):
    completion = checklist_service.complete_checklist(
        db, checklist_id, current, machine_id=body.MachineID, notes=body.Notes
    )
    return ok(CompletionRead.model_validate(completion))


# ---- Makine bazlı görünümler ----
@router.get("/machines/{machine_id}/checklists")
def list_for_machine(machine_id: int, db: Session = Depends(get_db)):
    items = [ChecklistRead.model_validate(c) for c in checklist_service.list_for_machine(db, machine_id)]
    return ok(items, meta=list_meta(items))


@router.get("/machines/{machine_id}/checklist-history")
def checklist_history(machine_id: int, db: Session = Depends(get_db)):
    items = [CompletionRead.model_validate(c) for c in checklist_service.history(db, machine_id)]
    return ok(items, meta=list_meta(items))
