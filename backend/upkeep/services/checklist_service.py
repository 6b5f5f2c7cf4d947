# backend/upkeep/services/checklist_service.py
import logging
from datetime import datetime, timedelta
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy import or_
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import Session

from ..domain.constants import CHECKLIST_LATE, COMPLETION_COMPLETE, COMPLETION_PARTIAL
from ..domain.scheduling import checklist_status, next_planned_date
from ..models import (
    AppUser,
    Checklist,
    ChecklistCompletion,
    ChecklistItem,
    ChecklistItemCompletion,
    Machine,
    MachineGroup,
)
from ..schemas.checklist import ChecklistCreate, ChecklistUpdate
from . import email_service

logger = logging.getLogger(__name__)


def _commit(db: Session, what: str) -> None:
    try:
        db.commit()
    except (IntegrityError, DBAPIError) as e:
        db.rollback()
        logger.exception("%s: db hatası", what)
        raise HTTPException(status_code=400, detail=f"db_error: {getattr(e, 'orig', e)}")


def _latest_completion(db: Session, checklist_id: int) -> Optional[ChecklistCompletion]:
    return (
        db.query(ChecklistCompletion)
        .filter(ChecklistCompletion.ChecklistID == checklist_id)
        .order_by(ChecklistCompletion.CompletionDate.desc())
        .first()
    )


def _schedule(checklist: Checklist, last: Optional[datetime], now: datetime) -> None:
    checklist.LastPerformedDate = last
    checklist.NextPlannedDate = (
        next_planned_date(checklist.IntervalType, last, checklist.CustomIntervalDays) if last else None
    )
    checklist.Status_s = checklist_status(checklist.NextPlannedDate, now)


def get_checklist(db: Session, checklist_id: int) -> Checklist:
    c = db.get(Checklist, checklist_id)
    if not c:
        raise HTTPException(status_code=404, detail="Checklist not found")
    return c


def list_for_machine(db: Session, machine_id: int) -> List[Checklist]:
    machine = db.get(Machine, machine_id)
    if not machine:
        raise HTTPException(status_code=404, detail="Machine not found")
    cond = Checklist.MachineID == machine_id
    if machine.MachineGroupID is not None:
        cond = or_(cond, Checklist.MachineGroupID == machine.MachineGroupID)
    rows = db.query(Checklist).filter(cond).order_by(Checklist.Title).all()

    seen, unique = set(), []
    for r in rows:
        if r.ChecklistID not in seen:
            seen.add(r.ChecklistID)
            unique.append(r)
    return unique


def list_checklists(db: Session, status_s: Optional[str] = None) -> List[Checklist]:
    q = db.query(Checklist)
    if status_s:
        q = q.filter(Checklist.Status_s == status_s)
    return q.order_by(Checklist.NextPlannedDate.is_(None), Checklist.NextPlannedDate).all()


def create_checklist(db: Session, payload: ChecklistCreate) -> Checklist:
    if payload.MachineID is not None and not db.get(Machine, payload.MachineID):
        raise HTTPException(status_code=404, detail="Machine not found")
    if payload.MachineGroupID is not None and not db.get(MachineGroup, payload.MachineGroupID):
        raise HTTPException(status_code=404, detail="Machine group not found")

    now = datetime.now()
    checklist = Checklist(
        MachineID=payload.MachineID,
        MachineGroupID=payload.MachineGroupID,
        Title=payload.Title.strip(),
        IntervalType=payload.IntervalType,
        CustomIntervalDays=payload.CustomIntervalDays if payload.IntervalType == "custom" else None,
        CreatedAt=now,
        UpdatedAt=now,
    )
    checklist.items = [ChecklistItem(Description=i.Description, Completed=i.Completed) for i in payload.items]
    _schedule(checklist, payload.LastCompletedDate, now)

    db.add(checklist)
    _commit(db, "create_checklist")
    db.refresh(checklist)
    logger.info("checklist oluşturuldu: %s (%s)", checklist.Title, checklist.IntervalType)
    return checklist


def update_checklist(db: Session, checklist_id: int, payload: ChecklistUpdate) -> Checklist:
    checklist = get_checklist(db, checklist_id)
    data = payload.model_dump(exclude_unset=True)
    now = datetime.now()

    if data.get("Title"):
        checklist.Title = data["Title"].strip()
    if data.get("IntervalType"):
        checklist.IntervalType = data["IntervalType"]
    if "CustomIntervalDays" in data:
        checklist.CustomIntervalDays = data["CustomIntervalDays"]
    if checklist.IntervalType != "custom":
        checklist.CustomIntervalDays = None
    elif not checklist.CustomIntervalDays:
        raise HTTPException(status_code=422, detail="CustomIntervalDays is required for custom intervals")

    if payload.items is not None:
        # Madde listesi baştan yazılır
        checklist.items = [ChecklistItem(Description=i.Description, Completed=i.Completed) for i in payload.items]

    last = data.get("LastCompletedDate")
    if last is None:
        latest = _latest_completion(db, checklist_id)
        last = latest.CompletionDate if latest else checklist.LastPerformedDate
    _schedule(checklist, last, now)
    checklist.UpdatedAt = now

    _commit(db, "update_checklist")
    db.refresh(checklist)
    return checklist


def delete_checklist(db: Session, checklist_id: int) -> None:
    checklist = get_checklist(db, checklist_id)
    db.delete(checklist)
    _commit(db, "delete_checklist")


def toggle_item(db: Session, item_id: int, completed: bool) -> ChecklistItem:
    item = db.get(ChecklistItem, item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Checklist item not found")
    item.Completed = completed
    _commit(db, "toggle_item")
    db.refresh(item)
    return item


def complete_checklist(
    db: Session,
    checklist_id: int,
    user: AppUser,
    machine_id: Optional[int] = None,
    notes: Optional[str] = None,
) -> ChecklistCompletion:
    checklist = get_checklist(db, checklist_id)
    machine_id = machine_id if machine_id is not None else checklist.MachineID
    if machine_id is not None and not db.get(Machine, machine_id):
        raise HTTPException(status_code=404, detail="Machine not found")

    now = datetime.now()
    all_done = bool(checklist.items) and all(i.Completed for i in checklist.items)
    completion = ChecklistCompletion(
        ChecklistID=checklist.ChecklistID,
        MachineID=machine_id,
        UserID=user.UserID,
        CompletionDate=now,
        Notes=notes,
        Status_s=COMPLETION_COMPLETE if all_done else COMPLETION_PARTIAL,
    )
    completion.items = [
        ChecklistItemCompletion(ItemID=i.ItemID, Completed=bool(i.Completed)) for i in checklist.items
    ]
    db.add(completion)

    # Bir sonraki tur için maddeler sıfırlanır
    for item in checklist.items:
        item.Completed = False
    _schedule(checklist, now, now)
    checklist.UpdatedAt = now

    _commit(db, "complete_checklist")
    db.refresh(completion)
    logger.info(
        "checklist tamamlandı: %s -> sonraki %s", checklist.ChecklistID, checklist.NextPlannedDate
    )
    return completion


def refresh_statuses(db: Session) -> dict:
    now = datetime.now()
    late = 0
    rows = db.query(Checklist).all()
    for c in rows:
        c.Status_s = checklist_status(c.NextPlannedDate, now)
        if c.Status_s == CHECKLIST_LATE:
            late += 1
    _commit(db, "refresh_statuses")
    return {"checked": len(rows), "late": late}


def history(db: Session, machine_id: int) -> List[ChecklistCompletion]:
    if not db.get(Machine, machine_id):
        raise HTTPException(status_code=404, detail="Machine not found")
    return (
        db.query(ChecklistCompletion)
        .filter(ChecklistCompletion.MachineID == machine_id)
        .order_by(ChecklistCompletion.CompletionDate.desc())
        .all()
    )


def delete_completion(db: Session, completion_id: int) -> None:
    completion = db.get(ChecklistCompletion, completion_id)
    if not completion:
        raise HTTPException(status_code=404, detail="Completion not found")
    db.delete(completion)
    _commit(db, "delete_completion")


def _recipients(db: Session, checklist: Checklist) -> List[Machine]:
    if checklist.MachineID is not None:
        m = db.get(Machine, checklist.MachineID)
        return [m] if m else []
    # Grubu silinmiş checklist kimseye gitmez
    if checklist.MachineGroupID is None:
        return []
    return db.query(Machine).filter(Machine.MachineGroupID == checklist.MachineGroupID).all()


def notify_upcoming(db: Session, days: int) -> dict:
    """NextPlannedDate'i 'days' gün içinde olan checklist'ler için sorumluya e-posta."""
    horizon = datetime.now() + timedelta(days=days)
    due = (
        db.query(Checklist)
        .filter(Checklist.NextPlannedDate.isnot(None))
        .filter(Checklist.NextPlannedDate <= horizon)
        .filter(or_(Checklist.MachineID.isnot(None), Checklist.MachineGroupID.isnot(None)))
        .all()
    )

    sent, failed = 0, 0
    for checklist in due:
        items = [{"description": i.Description, "completed": i.Completed} for i in checklist.items]
        for machine in _recipients(db, checklist):
            if not machine.user:
                continue
            result = email_service.notify(
                "checklist",
                machine.user.Email,
                {
                    "checklist_name": checklist.Title,
                    "machine_name": machine.Name,
                    "last_completion_date": (
                        checklist.LastPerformedDate.strftime("%Y-%m-%d") if checklist.LastPerformedDate else None
                    ),
                    "next_planned": checklist.NextPlannedDate.strftime("%Y-%m-%d"),
                    "items": items,
                },
            )
            if result.get("sent"):
                sent += 1
            else:
                failed += 1
    return {"due": len(due), "sent": sent, "failed": failed}
