# backend/upkeep/routers/spare_parts.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..core.api import list_meta, ok
from ..core.db import get_db
from ..core.security import get_current_user, require_ticket_permissions
from ..schemas.spare_part import SparePartCreate, SparePartRead, SparePartUpdate
from ..services import spare_part_service

router = APIRouter(prefix="/spare-parts", tags=["spare-parts"], dependencies=[Depends(get_current_user)])
Guard = Depends(require_ticket_permissions)


@router.get("")
def list_parts(machine_id: Optional[int] = Query(None), db: Session = Depends(get_db)):
    items = [SparePartRead.model_validate(p) for p in spare_part_service.list_parts(db, machine_id)]
    return ok(items, meta=list_meta(items))


@router.get("/below-reorder")
def parts_below_reorder(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
):
    rows, total = spare_part_service.below_reorder(db, skip=skip, limit=limit)
    items = [
        {**SparePartRead.model_validate(p).model_dump(), "Gap": max(p.ReorderLevel - p.Quantity, 0)}
        for p in rows
    ]
    return ok(items, meta=list_meta(items, {"total": total, "skip": skip, "limit": limit}))


@router.post("", status_code=201, dependencies=[Guard])
def create_part(body: SparePartCreate, db: Session = Depends(get_db)):
    return ok(SparePartRead.model_validate(spare_part_service.create_part(db, body)), status_code=201)


@router.get("/{part_id}")
def get_part(part_id: int, db: Session = Depends(get_db)):
    return ok(SparePartRead.model_validate(spare_part_service.get_part(db, part_id)))


@router.put("/{part_id}", dependencies=[Guard])
def update_part(part_id: int, body: SparePartUpdate, db: Session = Depends(get_db)):
    return ok(SparePartRead.model_validate(spare_part_service.update_part(db, part_id, body)))


@router.delete("/{part_id}", dependencies=[Guard])
def delete_part(part_id: int, db: Session = Depends(get_db)):
    spare_part_service.delete_part(db, part_id)
    return ok({"deleted": part_id})
