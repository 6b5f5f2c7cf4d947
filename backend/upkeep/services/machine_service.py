# backend/upkeep/services/machine_service.py
import logging
from datetime import datetime
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy import or_
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import Session

from ..domain.constants import (
    MACHINE_ACTIVE,
    MACHINE_HAS_PROBLEMS,
    MACHINE_UNDER_MAINTENANCE,
    TICKET_CLOSED_STATUSES,
)
from ..models import AppUser, Machine, MachineCategory, MachineGroup, MaintenanceTicket, Supplier
from ..schemas.machine import (
    CategoryCreate,
    MachineCreate,
    MachineGroupCreate,
    MachineGroupUpdate,
    MachineUpdate,
)
from . import email_service

logger = logging.getLogger(__name__)

# Grup seviyesinde tutulup makinelere kopyalanan alanlar
GROUP_FIELDS = ("SupplierID", "Description", "HasAccessories")


def _commit(db: Session, what: str) -> None:
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        msg = str(getattr(e, "orig", e))
        logger.warning("%s: bütünlük ihlali: %s", what, msg)
        if "UNIQUE" in msg.upper() or "DUPLICATE" in msg.upper():
            raise HTTPException(status_code=409, detail="SAP number or serial number already exists")
        raise HTTPException(status_code=400, detail=f"db_error: {msg}")
    except DBAPIError as e:
        db.rollback()
        logger.exception("%s: db hatası", what)
        raise HTTPException(status_code=400, detail=f"db_error: {getattr(e, 'orig', e)}")


def _check_refs(db: Session, user_id: Optional[int], supplier_id: Optional[int], group_id: Optional[int]):
    if user_id is not None and not db.get(AppUser, user_id):
        raise HTTPException(status_code=404, detail="User not found")
    if supplier_id is not None and not db.get(Supplier, supplier_id):
        raise HTTPException(status_code=404, detail="Supplier not found")
    if group_id is not None and not db.get(MachineGroup, group_id):
        raise HTTPException(status_code=404, detail="Machine group not found")


def _ensure_unique(db: Session, sap: Optional[str], serial: Optional[str], exclude_id: Optional[int] = None):
    conds = []
    if sap:
        conds.append(Machine.SAPNumber == sap)
    if serial:
        conds.append(Machine.SerialNumber == serial)
    if not conds:
        return
    q = db.query(Machine).filter(or_(*conds))
    if exclude_id is not None:
        q = q.filter(Machine.MachineID != exclude_id)
    if q.first():
        raise HTTPException(status_code=409, detail="SAP number or serial number already exists")


def _apply_group_defaults(group: MachineGroup) -> None:
    for m in group.machines:
        m.SupplierID = group.SupplierID
        m.Description = group.Description
        m.HasGenericAccessories = bool(group.HasAccessories)


def _notify_assignment(machine: Machine) -> dict:
    if not machine.user:
        return {"sent": False, "error": "No assignee"}
    return email_service.notify(
        "machine",
        machine.user.Email,
        {
            "machine_name": machine.Name,
            "location": machine.Location,
            "sap_number": machine.SAPNumber,
            "assignment_date": datetime.now().strftime("%Y-%m-%d"),
        },
    )


# ---- Makineler ----
def get_machine(db: Session, machine_id: int) -> Machine:
    m = db.get(Machine, machine_id)
    if not m:
        raise HTTPException(status_code=404, detail="Machine not found")
    return m


def list_machines(
    db: Session,
    *,
    status_s: Optional[str] = None,
    group_id: Optional[int] = None,
    user_id: Optional[int] = None,
    search: Optional[str] = None,
) -> List[Machine]:
    q = db.query(Machine)
    if status_s:
        q = q.filter(Machine.Status_s == status_s)
    if group_id is not None:
        q = q.filter(Machine.MachineGroupID == group_id)
    if user_id is not None:
        q = q.filter(Machine.UserID == user_id)
    if search:
        like = f"%{search.strip()}%"
        q = q.filter(or_(
            Machine.Name.ilike(like),
            Machine.SAPNumber.ilike(like),
            Machine.SerialNumber.ilike(like),
        ))
    return q.order_by(Machine.Name).all()


def create_machine(db: Session, payload: MachineCreate) -> Machine:
    data = payload.model_dump()
    _check_refs(db, data["UserID"], data["SupplierID"], data["MachineGroupID"])
    _ensure_unique(db, data["SAPNumber"], data["SerialNumber"])

    machine = Machine(**data)
    db.add(machine)
    db.flush()
    if machine.MachineGroupID is not None:
        group = db.get(MachineGroup, machine.MachineGroupID)
        db.refresh(group, ["machines"])
        _apply_group_defaults(group)

    _commit(db, "create_machine")
    db.refresh(machine)
    logger.info("makine oluşturuldu: %s (SAP=%s)", machine.Name, machine.SAPNumber)

    if machine.UserID is not None:
        _notify_assignment(machine)
    return machine


def update_machine(db: Session, machine_id: int, payload: MachineUpdate) -> Machine:
    machine = get_machine(db, machine_id)
    data = payload.model_dump(exclude_unset=True)
    _check_refs(db, data.get("UserID"), data.get("SupplierID"), data.get("MachineGroupID"))
    _ensure_unique(db, data.get("SAPNumber"), data.get("SerialNumber"), exclude_id=machine_id)

    previous_user = machine.UserID
    for key, value in data.items():
        setattr(machine, key, value)

    _commit(db, "update_machine")
    db.refresh(machine)

    if machine.UserID is not None and machine.UserID != previous_user:
        _notify_assignment(machine)
    return machine


def delete_machine(db: Session, machine_id: int) -> None:
    machine = get_machine(db, machine_id)
    db.delete(machine)
    _commit(db, "delete_machine")
    logger.info("makine silindi: %s", machine_id)


def recompute_status(db: Session, machine: Machine) -> str:
    """Açık ticket'lara göre: kritik varsa bakımda, açık varsa sorunlu, yoksa aktif."""
    open_tickets = (
        db.query(MaintenanceTicket)
        .filter(MaintenanceTicket.MachineID == machine.MachineID)
        .filter(MaintenanceTicket.Status_s.notin_(TICKET_CLOSED_STATUSES))
        .all()
    )
    if any(t.Critical for t in open_tickets):
        machine.Status_s = MACHINE_UNDER_MAINTENANCE
    elif open_tickets:
        machine.Status_s = MACHINE_HAS_PROBLEMS
    else:
        machine.Status_s = MACHINE_ACTIVE
    return machine.Status_s


def refresh_statuses(db: Session) -> dict:
    changed = 0
    for m in db.query(Machine).all():
        before = m.Status_s
        if recompute_status(db, m) != before:
            changed += 1
    _commit(db, "refresh_statuses")
    return {"updated": changed}


# ---- Makine grupları ----
def get_group(db: Session, group_id: int) -> MachineGroup:
    g = db.get(MachineGroup, group_id)
    if not g:
        raise HTTPException(status_code=404, detail="Machine group not found")
    return g


def list_groups(db: Session) -> List[MachineGroup]:
    return db.query(MachineGroup).order_by(MachineGroup.Name).all()


def create_group(db: Session, payload: MachineGroupCreate) -> MachineGroup:
    _check_refs(db, None, payload.SupplierID, None)
    saps = [m.SAPNumber for m in payload.machines]
    serials = [m.SerialNumber for m in payload.machines]
    if len(set(saps)) != len(saps) or len(set(serials)) != len(serials):
        raise HTTPException(status_code=409, detail="SAP number or serial number already exists")
    for m in payload.machines:
        _check_refs(db, m.UserID, None, None)
        _ensure_unique(db, m.SAPNumber, m.SerialNumber)

    group = MachineGroup(
        Name=payload.Name,
        Description=payload.Description,
        SupplierID=payload.SupplierID,
        HasAccessories=payload.HasAccessories,
    )
    db.add(group)
    db.flush()

    machines = []
    for i, item in enumerate(payload.machines, start=1):
        machine = Machine(
            Name=f"{payload.Name} {i}",
            Description=payload.Description,
            Location=item.Location,
            SAPNumber=item.SAPNumber,
            SerialNumber=item.SerialNumber,
            UserID=item.UserID,
            Status_s=MACHINE_ACTIVE,
            SupplierID=payload.SupplierID,
            HasGenericAccessories=payload.HasAccessories,
            HasSpecialAccessories=False,
            MachineGroupID=group.MachineGroupID,
            MachineClass=item.MachineClass,
        )
        db.add(machine)
        machines.append(machine)

    _commit(db, "create_group")
    db.refresh(group)
    logger.info("grup oluşturuldu: %s (%d makine)", group.Name, len(machines))

    for machine in machines:
        if machine.UserID is not None:
            _notify_assignment(machine)
    return group


def update_group(db: Session, group_id: int, payload: MachineGroupUpdate) -> MachineGroup:
    group = get_group(db, group_id)
    data = payload.model_dump(exclude_unset=True)
    _check_refs(db, None, data.get("SupplierID"), None)
    for key, value in data.items():
        setattr(group, key, value)
    if any(k in data for k in GROUP_FIELDS):
        _apply_group_defaults(group)
    _commit(db, "update_group")
    db.refresh(group)
    return group


def delete_group(db: Session, group_id: int) -> None:
    group = get_group(db, group_id)
    db.delete(group)
    _commit(db, "delete_group")


# ---- Kategoriler (kök neden) ----
def list_categories(db: Session, machine_id: int) -> List[MachineCategory]:
    get_machine(db, machine_id)
    return (
        db.query(MachineCategory)
        .filter(MachineCategory.MachineID == machine_id)
        .order_by(MachineCategory.Name)
        .all()
    )


def create_category(db: Session, machine_id: int, payload: CategoryCreate) -> MachineCategory:
    get_machine(db, machine_id)
    cat = MachineCategory(MachineID=machine_id, Name=payload.Name.strip())
    db.add(cat)
    _commit(db, "create_category")
    db.refresh(cat)
    return cat


def delete_category(db: Session, category_id: int) -> None:
    cat = db.get(MachineCategory, category_id)
    if not cat:
        raise HTTPException(status_code=404, detail="Category not found")
    db.delete(cat)
    _commit(db, "delete_category")
