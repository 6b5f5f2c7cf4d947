from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.api import list_meta, ok
from ..core.db import get_db
from ..core.security import get_current_user, require_ticket_permissions
from ..schemas.machine import SupplierCreate, SupplierRead, SupplierUpdate
from ..services import supplier_service

router = APIRouter(prefix="/suppliers", tags=["suppliers"], dependencies=[Depends(get_current_user)])
Guard = Depends(require_ticket_permissions)


@router.get("")
def list_suppliers(db: Session = Depends(get_db)):
    items = [SupplierRead.model_validate(s) for s in supplier_service.list_suppliers(db)]
    return ok(items, meta=list_meta(items))


@router.post("", status_code=201, dependencies=[Guard])
def create_supplier(body: SupplierCreate, db: Session = Depends(get_db)):
    return ok(SupplierRead.model_validate(supplier_service.create_supplier(db, body)), status_code=201)


@router.get("/{supplier_id}")
def get_supplier(supplier_id: int, db: Session = Depends(get_db)):
    return ok(SupplierRead.model_validate(supplier_service.get_supplier(db, supplier_id)))


@router.put("/{supplier_id}", dependencies=[Guard])
def update_supplier(supplier_id: int, body: SupplierUpdate, db: Session = Depends(get_db)):
    return ok(SupplierRead.model_validate(supplier_service.update_supplier(db, supplier_id, body)))


@router.delete("/{supplier_id}", dependencies=[Guard])
def delete_supplier(supplier_id: int, db: Session = Depends(get_db)):
    supplier_service.delete_supplier(db, supplier_id)
    return ok({"deleted": supplier_id})
