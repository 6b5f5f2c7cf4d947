# backend/upkeep/main.py
import json
import logging
import os

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.api import UTF8JSONResponse, fail, ok
from .core.db import configure_engine, get_db, init_db
from .core.logging import setup_logging
from .routers.accessories import router as accessories_router
from .routers.auth import router as auth_router
from .routers.checklists import router as checklists_router
from .routers.documents import router as documents_router
from .routers.machines import router as machines_router
from .routers.settings import router as settings_router
from .routers.spare_parts import router as spare_parts_router
from .routers.statistics import router as statistics_router
from .routers.suppliers import router as suppliers_router
from .routers.tickets import router as tickets_router
from .routers.users import router as users_router

SERVICE_NAME = "Upkeep"

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title=SERVICE_NAME, default_response_class=UTF8JSONResponse)


# JSON Content-Type charset düzeltmesi
@app.middleware("http")
async def _force_json_charset(request, call_next):
    resp = await call_next(request)
    ct = resp.headers.get("content-type", "")
    if ct.lower().startswith("application/json") and "charset=" not in ct.lower():
        resp.headers["content-type"] = "application/json; charset=utf-8"
    return resp


# -----------------------------
# Global hata zarfı
# -----------------------------
@app.exception_handler(StarletteHTTPException)
async def http_exception_to_envelope(request: Request, exc: StarletteHTTPException):
    return fail(
        str(exc.detail) if exc.detail else exc.__class__.__name__,
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_to_envelope(request: Request, exc: RequestValidationError):
    return fail("Validation error", status_code=422, meta={"errors": exc.errors()})


# -----------------------------
# CORS yapılandırması (.env)
# -----------------------------
def _parse_origins(env_val: str | None):
    if not env_val or env_val.strip() == "*":
        return ["*"]
    try:
        parsed = json.loads(env_val)
        if isinstance(parsed, list):
            return [str(x) for x in parsed]
    except ValueError:
        pass
    return [s.strip() for s in env_val.split(",") if s.strip()]


ALLOWED_ORIGINS = _parse_origins(os.getenv("CORS_ALLOW_ORIGINS", "*"))
logger.info("CORS allow_origins = %s", ALLOWED_ORIGINS)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---- startup: engine + tablolar ----
@app.on_event("startup")
def _startup():
    configure_engine()
    init_db()


# ---- Sağlık uçları ----
@app.get("/health")
def health():
    return ok({"service": SERVICE_NAME})


@app.get("/db-ping")
def db_ping(db: Session = Depends(get_db)):
    val = db.execute(text("SELECT 1")).scalar()
    return ok({"db": "ok", "select1": val})


# =========================
# Router kayıtları
# =========================
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(suppliers_router)
app.include_router(machines_router)         # /machines, /machine-groups, /categories
app.include_router(accessories_router)
app.include_router(documents_router)
app.include_router(checklists_router)
app.include_router(tickets_router)
app.include_router(spare_parts_router)
app.include_router(statistics_router)
app.include_router(settings_router)         # /config, /notifications/test
