# backend/upkeep/services/user_service.py
import logging
import secrets
from datetime import datetime, timedelta
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy import or_
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import Session

from ..core.security import hash_password, verify_password
from ..domain.constants import RESET_CODE_MAX_ATTEMPTS, RESET_CODE_TTL_MINUTES
from ..models import AppUser, PasswordResetCode
from ..schemas.user import UserCreate, UserUpdate
from . import email_service

logger = logging.getLogger(__name__)


def _commit(db: Session, what: str) -> None:
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning("%s: unique ihlali: %s", what, getattr(e, "orig", e))
        raise HTTPException(status_code=409, detail="Username or email already exists")
    except DBAPIError as e:
        db.rollback()
        logger.exception("%s: db hatası", what)
        raise HTTPException(status_code=400, detail=f"db_error: {getattr(e, 'orig', e)}")


def get_user(db: Session, user_id: int) -> AppUser:
    user = db.get(AppUser, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def list_users(db: Session) -> List[AppUser]:
    return db.query(AppUser).order_by(AppUser.LastName, AppUser.FirstName).all()


def authenticate(db: Session, username: str, password: str) -> AppUser:
    user = db.query(AppUser).filter(AppUser.Username == username.strip()).first()
    if not user or not verify_password(password, user.HashedPassword):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def _ensure_unique(db: Session, username: Optional[str], email: Optional[str], exclude_id: Optional[int] = None):
    conds = []
    if username:
        conds.append(AppUser.Username == username)
    if email:
        conds.append(AppUser.Email == email)
    if not conds:
        return
    q = db.query(AppUser).filter(or_(*conds))
    if exclude_id is not None:
        q = q.filter(AppUser.UserID != exclude_id)
    if q.first():
        raise HTTPException(status_code=409, detail="Username or email already exists")


def create_user(db: Session, payload: UserCreate) -> AppUser:
    username = payload.Username.strip()
    email = payload.Email.strip().lower()
    _ensure_unique(db, username, email)

    user = AppUser(
        Username=username,
        HashedPassword=hash_password(payload.Password),
        FirstName=payload.FirstName.strip(),
        LastName=payload.LastName.strip(),
        Email=email,
        IsAdmin=payload.IsAdmin,
        TicketPermissions=payload.TicketPermissions,
    )
    db.add(user)
    _commit(db, "create_user")
    db.refresh(user)
    logger.info("kullanıcı oluşturuldu: %s", user.Username)
    return user


def update_user(db: Session, user_id: int, payload: UserUpdate) -> AppUser:
    user = get_user(db, user_id)
    data = payload.model_dump(exclude_unset=True)

    password = data.pop("Password", None)
    if "Username" in data and data["Username"]:
        data["Username"] = data["Username"].strip()
    if "Email" in data and data["Email"]:
        data["Email"] = data["Email"].strip().lower()
    _ensure_unique(db, data.get("Username"), data.get("Email"), exclude_id=user_id)

    for key, value in data.items():
        if value is not None:
            setattr(user, key, value)
    # Boş parola -> mevcut hash kalır
    if password:
        user.HashedPassword = hash_password(password)

    _commit(db, "update_user")
    db.refresh(user)
    return user


def delete_user(db: Session, user_id: int) -> None:
    user = get_user(db, user_id)
    db.delete(user)
    _commit(db, "delete_user")


# ---- Şifre sıfırlama (OTP) ----
def _new_code() -> str:
    return f"{secrets.randbelow(1_000_000):06d}"


def request_password_reset(db: Session, email: str) -> dict:
    """Kayıtlı olmayan adres için de aynı cevap döner."""
    user = db.query(AppUser).filter(AppUser.Email == email.strip().lower()).first()
    if not user:
        logger.info("şifre sıfırlama: bilinmeyen adres")
        return {"requested": True}

    now = datetime.now()
    reset = PasswordResetCode(
        UserID=user.UserID,
        Code=_new_code(),
        CreatedAt=now,
        ExpiresAt=now + timedelta(minutes=RESET_CODE_TTL_MINUTES),
        Used=False,
        Attempts=0,
    )
    db.add(reset)
    _commit(db, "request_password_reset")

    email_service.notify(
        "password", user.Email, {"code": reset.Code, "ttl_minutes": RESET_CODE_TTL_MINUTES}
    )
    return {"requested": True}


def confirm_password_reset(db: Session, email: str, code: str, new_password: str) -> dict:
    invalid = HTTPException(status_code=400, detail="Invalid or expired code")
    user = db.query(AppUser).filter(AppUser.Email == email.strip().lower()).first()
    if not user:
        raise invalid

    latest = (
        db.query(PasswordResetCode)
        .filter(PasswordResetCode.UserID == user.UserID, PasswordResetCode.Used == False)  # noqa: E712
        .order_by(PasswordResetCode.CodeID.desc())
        .first()
    )
    if not latest or latest.ExpiresAt < datetime.now():
        raise invalid
    if latest.Code != code.strip():
        # Hatalı denemeler sayılır; sınırda kod geçersiz olur
        latest.Attempts = (latest.Attempts or 0) + 1
        if latest.Attempts >= RESET_CODE_MAX_ATTEMPTS:
            latest.Used = True
            logger.warning("şifre sıfırlama kodu kilitlendi: %s", user.Username)
        _commit(db, "confirm_password_reset")
        raise invalid

    latest.Used = True
    user.HashedPassword = hash_password(new_password)
    _commit(db, "confirm_password_reset")
    logger.info("şifre sıfırlandı: %s", user.Username)
    return {"reset": True}
