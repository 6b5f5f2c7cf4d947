from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.api import list_meta, ok
from ..core.db import get_db
from ..core.security import get_current_user, require_admin
from ..schemas.user import UserCreate, UserRead, UserUpdate
from ..services import user_service

router = APIRouter(prefix="/users", tags=["users"], dependencies=[Depends(get_current_user)])


@router.get("")
def list_users(db: Session = Depends(get_db)):
    items = [UserRead.model_validate(u) for u in user_service.list_users(db)]
    return ok(items, meta=list_meta(items))


@router.post("", status_code=201, dependencies=[Depends(require_admin)])
def create_user(body: UserCreate, db: Session = Depends(get_db)):
    return ok(UserRead.model_validate(user_service.create_user(db, body)), status_code=201)


@router.get("/{user_id}")
def get_user(user_id: int, db: Session = Depends(get_db)):
    return ok(UserRead.model_validate(user_service.get_user(db, user_id)))


@router.put("/{user_id}", dependencies=[Depends(require_admin)])
def update_user(user_id: int, body: UserUpdate, db: Session = Depends(get_db)):
    return ok(UserRead.model_validate(user_service.update_user(db, user_id, body)))


@router.delete("/{user_id}", dependencies=[Depends(require_admin)])
def delete_user(user_id: int, db: Session = Depends(get_db)):
    user_service.delete_user(db, user_id)
    return ok({"deleted": user_id})
