import logging
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy import desc, func
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import Session

from ..models import Machine, SparePart
from ..schemas.spare_part import SparePartCreate, SparePartUpdate

logger = logging.getLogger(__name__)


def _commit(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        msg = str(getattr(e, "orig", e))
        logger.warning("yedek parça: bütünlük ihlali: %s", msg)
        if "UNIQUE" in msg.upper() or "DUPLICATE" in msg.upper():
            raise HTTPException(status_code=409, detail="Part number already exists")
        raise HTTPException(status_code=400, detail=f"db_error: {msg}")
    except DBAPIError as e:
        db.rollback()
        logger.exception("yedek parça: db hatası")
        raise HTTPException(status_code=400, detail=f"db_error: {getattr(e, 'orig', e)}")


def _check(db: Session, machine_id: Optional[int], part_number: Optional[str], exclude_id: Optional[int] = None):
    if machine_id is not None and not db.get(Machine, machine_id):
        raise HTTPException(status_code=404, detail="Machine not found")
    if part_number:
        q = db.query(SparePart).filter(SparePart.PartNumber == part_number)
        if exclude_id is not None:
            q = q.filter(SparePart.SparePartID != exclude_id)
        if q.first():
            raise HTTPException(status_code=409, detail="Part number already exists")


def get_part(db: Session, part_id: int) -> SparePart:
    p = db.get(SparePart, part_id)
    if not p:
        raise HTTPException(status_code=404, detail="Spare part not found")
    return p


def list_parts(db: Session, machine_id: Optional[int] = None) -> List[SparePart]:
    q = db.query(SparePart)
    if machine_id is not None:
        q = q.filter(SparePart.MachineID == machine_id)
    return q.order_by(SparePart.Name).all()


def below_reorder(db: Session, skip: int = 0, limit: int = 50):
    """Quantity <= ReorderLevel olan parçalar; açığı büyük olan önce."""
    gap_expr = func.coalesce(SparePart.ReorderLevel, 0) - func.coalesce(SparePart.Quantity, 0)
    base_q = db.query(SparePart).filter(SparePart.Quantity <= SparePart.ReorderLevel)
    total = base_q.count()
    rows = base_q.order_by(desc(gap_expr), SparePart.Name).offset(skip).limit(limit).all()
    return rows, total


def create_part(db: Session, payload: SparePartCreate) -> SparePart:
    _check(db, payload.MachineID, payload.PartNumber)
    part = SparePart(**payload.model_dump())
    db.add(part)
    _commit(db)
    db.refresh(part)
    return part


def update_part(db: Session, part_id: int, payload: SparePartUpdate) -> SparePart:
    part = get_part(db, part_id)
    data = payload.model_dump(exclude_unset=True)
    _check(db, data.get("MachineID"), data.get("PartNumber"), exclude_id=part_id)
    for key, value in data.items():
        setattr(part, key, value)
    _commit(db)
    db.refresh(part)
    return part


def delete_part(db: Session, part_id: int) -> None:
    part = get_part(db, part_id)
    db.delete(part)
    _commit(db)
