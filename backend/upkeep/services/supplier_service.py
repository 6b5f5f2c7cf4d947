import logging
from typing import List

from fastapi import HTTPException
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import Session

from ..models import Supplier
from ..schemas.machine import SupplierCreate, SupplierUpdate

logger = logging.getLogger(__name__)


def _save(db: Session, obj):
    try:
        db.commit()
        db.refresh(obj)
        return obj
    except (IntegrityError, DBAPIError) as e:
        db.rollback()
        logger.exception("tedarikçi: db hatası")
        raise HTTPException(status_code=400, detail=f"db_error: {getattr(e, 'orig', e)}")


def list_suppliers(db: Session) -> List[Supplier]:
    return db.query(Supplier).order_by(Supplier.Name).all()


def get_supplier(db: Session, supplier_id: int) -> Supplier:
    s = db.get(Supplier, supplier_id)
    if not s:
        raise HTTPException(status_code=404, detail="Supplier not found")
    return s


def create_supplier(db: Session, payload: SupplierCreate) -> Supplier:
    s = Supplier(**payload.model_dump())
    db.add(s)
    return _save(db, s)


def update_supplier(db: Session, supplier_id: int, payload: SupplierUpdate) -> Supplier:
    s = get_supplier(db, supplier_id)
    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(s, key, value)
    return _save(db, s)


def delete_supplier(db: Session, supplier_id: int) -> None:
    s = get_supplier(db, supplier_id)
    db.delete(s)
    try:
        db.commit()
    except (IntegrityError, DBAPIError) as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=f"db_error: {getattr(e, 'orig', e)}")
