# backend/upkeep/routers/machines.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..core.api import list_meta, ok
from ..core.db import get_db
from ..core.security import get_current_user, require_ticket_permissions
from ..schemas.machine import (
    CategoryCreate,
    CategoryRead,
    MachineCreate,
    MachineDetail,
    MachineGroupCreate,
    MachineGroupDetail,
    MachineGroupRead,
    MachineGroupUpdate,
    MachineRead,
    MachineUpdate,
)
from ..services import machine_service

router = APIRouter(tags=["machines"], dependencies=[Depends(get_current_user)])
Guard = Depends(require_ticket_permissions)


# ---- Makineler ----
@router.get("/machines")
def list_machines(
    status: Optional[str] = Query(None),
    group_id: Optional[int] = Query(None),
    user_id: Optional[int] = Query(None),
    q: Optional[str] = Query(None, description="Ad / SAP / seri no içinde arama"),
    db: Session = Depends(get_db),
):
    rows = machine_service.list_machines(db, status_s=status, group_id=group_id, user_id=user_id, search=q)
    items = [MachineRead.model_validate(m) for m in rows]
    return ok(items, meta=list_meta(items))


@router.post("/machines", status_code=201, dependencies=[Guard])
def create_machine(body: MachineCreate, db: Session = Depends(get_db)):
    return ok(MachineRead.model_validate(machine_service.create_machine(db, body)), status_code=201)


@router.post("/machines/refresh-status", dependencies=[Guard])
def refresh_machine_statuses(db: Session = Depends(get_db)):
    return ok(machine_service.refresh_statuses(db))


@router.get("/machines/{machine_id}")
def get_machine(machine_id: int, db: Session = Depends(get_db)):
    return ok(MachineDetail.model_validate(machine_service.get_machine(db, machine_id)))


@router.put("/machines/{machine_id}", dependencies=[Guard])
def update_machine(machine_id: int, body: MachineUpdate, db: Session = Depends(get_db)):
    return ok(MachineRead.model_validate(machine_service.update_machine(db, machine_id, body)))


@router.delete("/machines/{machine_id}", dependencies=[Guard])
def delete_machine(machine_id: int, db: Session = Depends(get_db)):
    machine_service.delete_machine(db, machine_id)
    return ok({"deleted": machine_id})


# ---- Kategoriler ----
@router.get("/machines/{machine_id}/categories")
def list_categories(machine_id: int, db: Session = Depends(get_db)):
    items = [CategoryRead.model_validate(c) for c in machine_service.list_categories(db, machine_id)]
    return ok(items, meta=list_meta(items))


@router.post("/machines/{machine_id}/categories", status_code=201, dependencies=[Guard])
def create_category(machine_id: int, body: CategoryCreate, db: Session = Depends(get_db)):
    cat = machine_service.create_category(db, machine_id, body)
    return ok(CategoryRead.model_validate(cat), status_code=201)


@router.delete("/categories/{category_id}", dependencies=[Guard])
def delete_category(category_id: int, db: Session = Depends(get_db)):
    machine_service.delete_category(db, category_id)
    return ok({"deleted": category_id})


# ---- Makine grupları ----
@router.get("/machine-groups")
def list_groups(db: Session = Depends(get_db)):
    items = [MachineGroupRead.model_validate(g) for g in machine_service.list_groups(db)]
    return ok(items, meta=list_meta(items))


@router.post("/machine-groups", status_code=201, dependencies=[Guard])
def create_group(body: MachineGroupCreate, db: Session = Depends(get_db)):
    group = machine_service.create_group(db, body)
    return ok(MachineGroupDetail.model_validate(group), status_code=201)


@router.get("/machine-groups/{group_id}")
def get_group(group_id: int, db: Session = Depends(get_db)):
    return ok(MachineGroupDetail.model_validate(machine_service.get_group(db, group_id)))


@router.put("/machine-groups/{group_id}", dependencies=[Guard])
def update_group(group_id: int, body: MachineGroupUpdate, db: Session = Depends(get_db)):
    return ok(MachineGroupDetail.model_validate(machine_service.update_group(db, group_id, body)))


@router.delete("/machine-groups/{group_id}", dependencies=[Guard])
def delete_group(group_id: int, db: Session = Depends(get_db)):
    machine_service.delete_group(db, group_id)
    return ok({"deleted": group_id})
