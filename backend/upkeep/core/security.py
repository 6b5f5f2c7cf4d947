# backend/upkeep/core/security.py
from datetime import datetime, timedelta, timezone
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, status, Request
from fastapi.security import OAuth2PasswordBearer
from fastapi.security.utils import get_authorization_scheme_param
from jose import jwt, JWTError
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from .config import JWT_SECRET, JWT_ALG, ACCESS_TOKEN_EXPIRE_MINUTES
from .db import get_db
from ..models.user import AppUser

# OpenAPI için şema kalsın (login formuna dair dokümantasyon)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")

# Parola hash kalıbı
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


# ---- Parola yardımcıları ----
def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def hash_password(plain: str) -> str:
    return pwd_context.hash(plain)


# ---- JWT üretimi ----
def create_access_token(user: AppUser, expires_minutes: Optional[int] = None) -> str:
    """Token: kullanıcı id, kullanıcı adı ve iki yetki bayrağı taşır."""
    expire = datetime.now(tz=timezone.utc) + timedelta(
        minutes=expires_minutes or ACCESS_TOKEN_EXPIRE_MINUTES
    )
    payload = {
        "sub": user.Username,
        "uid": user.UserID,
        "admin": bool(user.IsAdmin),
        "ticketPermissions": bool(user.TicketPermissions),
        "exp": expire,
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALG)


def decode_access_token(token: str) -> dict:
    return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALG])


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Authentication required",
        headers={"WWW-Authenticate": "Bearer"},
    )


# ---- Authorization başlığını toleranslı çöz ----
def _extract_bearer_token(request: Request) -> str:
    """
    'Authorization' başlığını esnek parse eder:
      - Fazladan boşluklar: "Bearer   <JWT>"
      - Üst üste 'Bearer': "Bearer Bearer <JWT>"
      - Tırnaklı değer:    Authorization: "Bearer <JWT>"
    """
    auth = request.headers.get("Authorization")
    if not auth:
        raise _credentials_exception()

    auth = str(auth).strip().strip('"').strip("'")
    scheme, param = get_authorization_scheme_param(auth)
    if not scheme or scheme.lower() != "bearer":
        raise _credentials_exception()

    token = (param or "").strip()
    if token.lower().startswith("bearer "):
        token = token.split(None, 1)[1].strip()
    token = token.replace(" ", "")
    if not token:
        raise _credentials_exception()
    return token


# ---- Token'dan kullanıcıyı çöz ----
def get_current_user(
    db: Session = Depends(get_db),
    token: str = Depends(_extract_bearer_token),
) -> AppUser:
    try:
        data = decode_access_token(token)
    except JWTError:
        raise _credentials_exception()

    uid = data.get("uid")
    username = data.get("sub")
    if uid is None or not username:
        raise _credentials_exception()

    user = db.get(AppUser, uid)
    if not user or user.Username != username:
        raise _credentials_exception()
    return user


CurrentUser = Annotated[AppUser, Depends(get_current_user)]


# ---- Yetki bayrağı kontrolleri ----
def require_admin(current: CurrentUser) -> AppUser:
    if not current.IsAdmin:
        raise HTTPException(status_code=403, detail="Admin rights required")
    return current


def require_ticket_permissions(current: CurrentUser) -> AppUser:
    # Admin her iki kapıdan da geçer
    if not (current.TicketPermissions or current.IsAdmin):
        raise HTTPException(status_code=403, detail="Ticket permissions required")
    return current
