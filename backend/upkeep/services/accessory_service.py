import logging
from typing import List, Type, Union

from fastapi import HTTPException
from sqlalchemy import or_
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import Session

from ..models import GenericAccessory, Machine, SpecialAccessory
from ..schemas.machine import GenericAccessoryIn, SpecialAccessoryIn

logger = logging.getLogger(__name__)

Accessory = Union[GenericAccessory, SpecialAccessory]
KINDS = {"generic": GenericAccessory, "special": SpecialAccessory}


def _model(kind: str) -> Type:
    model = KINDS.get(kind)
    if model is None:
        raise HTTPException(status_code=404, detail=f"Unknown accessory kind: {kind}")
    return model


def _commit(db: Session) -> None:
    try:
        db.commit()
    except (IntegrityError, DBAPIError) as e:
        db.rollback()
        logger.exception("aksesuar: db hatası")
        raise HTTPException(status_code=400, detail=f"db_error: {getattr(e, 'orig', e)}")


def _machine(db: Session, machine_id: int) -> Machine:
    m = db.get(Machine, machine_id)
    if not m:
        raise HTTPException(status_code=404, detail="Machine not found")
    return m


def list_for_machine(db: Session, kind: str, machine_id: int) -> List[Accessory]:
    """Makineye ve makinenin grubuna bağlı aksesuarlar (tekrarsız)."""
    model = _model(kind)
    machine = _machine(db, machine_id)
    cond = model.MachineID == machine_id
    if machine.MachineGroupID is not None:
        cond = or_(cond, model.MachineGroupID == machine.MachineGroupID)
    rows = db.query(model).filter(cond).order_by(model.AccessoryID).all()

    seen, unique = set(), []
    for r in rows:
        if r.AccessoryID not in seen:
            seen.add(r.AccessoryID)
            unique.append(r)
    return unique


def create(db: Session, kind: str, machine_id: int, payload: Union[GenericAccessoryIn, SpecialAccessoryIn]):
    model = _model(kind)
    machine = _machine(db, machine_id)
    obj = model(**payload.model_dump(), MachineID=machine_id, MachineGroupID=machine.MachineGroupID)
    db.add(obj)
    if kind == "generic":
        machine.HasGenericAccessories = True
    else:
        machine.HasSpecialAccessories = True
    _commit(db)
    db.refresh(obj)
    return obj


def get(db: Session, kind: str, accessory_id: int) -> Accessory:
    obj = db.get(_model(kind), accessory_id)
    if not obj:
        raise HTTPException(status_code=404, detail="Accessory not found")
    return obj


def update(db: Session, kind: str, accessory_id: int, payload) -> Accessory:
    obj = get(db, kind, accessory_id)
    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(obj, key, value)
    _commit(db)
    db.refresh(obj)
    return obj


def delete(db: Session, kind: str, accessory_id: int) -> None:
    obj = get(db, kind, accessory_id)
    db.delete(obj)
    _commit(db)
