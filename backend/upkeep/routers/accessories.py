from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.api import list_meta, ok
from ..core.db import get_db
from ..core.security import get_current_user, require_ticket_permissions
from ..schemas.machine import (
    GenericAccessoryIn,
    GenericAccessoryRead,
    SpecialAccessoryIn,
    SpecialAccessoryRead,
)
from ..services import accessory_service

router = APIRouter(tags=["accessories"], dependencies=[Depends(get_current_user)])
Guard = Depends(require_ticket_permissions)


# ---- Genel aksesuarlar ----
@router.get("/machines/{machine_id}/accessories/generic")
def list_generic(machine_id: int, db: Session = Depends(get_db)):
    rows = accessory_service.list_for_machine(db, "generic", machine_id)
    items = [GenericAccessoryRead.model_validate(a) for a in rows]
    return ok(items, meta=list_meta(items))


@router.post("/machines/{machine_id}/accessories/generic", status_code=201, dependencies=[Guard])
def create_generic(machine_id: int, body: GenericAccessoryIn, db: Session = Depends(get_db)):
    obj = accessory_service.create(db, "generic", machine_id, body)
    return ok(GenericAccessoryRead.model_validate(obj), status_code=201)


@router.put("/accessories/generic/{accessory_id}", dependencies=[Guard])
def update_generic(accessory_id: int, body: GenericAccessoryIn, db: Session = Depends(get_db)):
    obj = accessory_service.update(db, "generic", accessory_id, body)
    return ok(GenericAccessoryRead.model_validate(obj))


@router.delete("/accessories/generic/{accessory_id}", dependencies=[Guard])
def delete_generic(accessory_id: int, db: Session = Depends(get_db)):
    accessory_service.delete(db, "generic", accessory_id)
    return ok({"deleted": accessory_id})


# ---- Özel (ölçülü) aksesuarlar ----
@router.get("/machines/{machine_id}/accessories/special")
def list_special(machine_id: int, db: Session = Depends(get_db)):
    rows = accessory_service.list_for_machine(db, "special", machine_id)
    items = [SpecialAccessoryRead.model_validate(a) for a in rows]
    return ok(items, meta=list_meta(items))


@router.post("/machines/{machine_id}/accessories/special", status_code=201, dependencies=[Guard])
def create_special(machine_id: int, body: SpecialAccessoryIn, db: Session = Depends(get_db)):
    obj = accessory_service.create(db, "special", machine_id, body)
    return ok(SpecialAccessoryRead.model_validate(obj), status_code=201)


@router.put("/accessories/special/{accessory_id}", dependencies=[Guard])
def update_special(accessory_id: int, body: SpecialAccessoryIn, db: Session = Depends(get_db)):
    obj = accessory_service.update(db, "special", accessory_id, body)
    return ok(SpecialAccessoryRead.model_validate(obj))


@router.delete("/accessories/special/{accessory_id}", dependencies=[Guard])
def delete_special(accessory_id: int, db: Session = Depends(get_db)):
    accessory_service.delete(db, "special", accessory_id)
    return ok({"deleted": accessory_id})
