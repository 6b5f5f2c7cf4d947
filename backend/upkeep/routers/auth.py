from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from ..core.api import ok
from ..core.db import get_db
from ..core.security import CurrentUser, create_access_token
from ..schemas.user import PasswordResetConfirm, PasswordResetRequest, Token, UserRead
from ..services import user_service

router = APIRouter(prefix="/auth", tags=["auth"])


# OAuth2 akışı düz {"access_token": ...} bekler; zarf kullanılmaz
@router.post("/login", response_model=Token)
def login(form: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    user = user_service.authenticate(db, form.username, form.password)
    return {"access_token": create_access_token(user), "token_type": "bearer"}


@router.get("/me")
def me(current: CurrentUser):
    return ok(UserRead.model_validate(current))


@router.post("/password-reset/request")
def password_reset_request(body: PasswordResetRequest, db: Session = Depends(get_db)):
    return ok(user_service.request_password_reset(db, body.email))


@router.post("/password-reset/confirm")
def password_reset_confirm(body: PasswordResetConfirm, db: Session = Depends(get_db)):
    return ok(user_service.confirm_password_reset(db, body.email, body.code, body.new_password))
