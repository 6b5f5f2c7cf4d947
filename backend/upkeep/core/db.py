# backend/upkeep/core/db.py
import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker, declarative_base

from .config import load_config, sqlite_url_for

logger = logging.getLogger(__name__)

Base = declarative_base()
SessionLocal = sessionmaker(autocommit=False, autoflush=False)
engine: Engine | None = None


def _sqlite_fk_on(dbapi_conn, _record):
    # SQLite'ta FK (cascade / set null) varsayılan kapalı
    cur = dbapi_conn.cursor()
    cur.execute("PRAGMA foreign_keys=ON")
    cur.close()


def build_engine(dsn: str) -> Engine:
    url = make_url(dsn)
    engine_kwargs = dict(pool_pre_ping=True)

    # Dialect'e göre güvenli ayarlar
    backend = url.get_backend_name()
    if backend.startswith("sqlite"):
        # SQLite'ta thread check'i kapat, pool boyutu argümanları verme
        engine_kwargs["connect_args"] = {"check_same_thread": False}
    elif backend.startswith("mssql"):
        engine_kwargs.update(pool_size=5, max_overflow=10, fast_executemany=True)

    eng = create_engine(dsn, **engine_kwargs)
    if backend.startswith("sqlite"):
        event.listen(eng, "connect", _sqlite_fk_on)
    return eng


def configure_engine(database_path: str | None = None) -> Engine:
    """Engine'i (yeniden) kurar ve SessionLocal'ı ona bağlar."""
    global engine
    dsn = sqlite_url_for(database_path or load_config().databasePath or "sqlite:///./upkeep.db")
    if engine is not None:
        engine.dispose()
    engine = build_engine(dsn)
    SessionLocal.configure(bind=engine)
    logger.info("database bound: %s", make_url(dsn).render_as_string(hide_password=True))
    return engine


def get_engine() -> Engine:
    return engine if engine is not None else configure_engine()


def init_db() -> None:
    # Modeller import edilince metadata dolu olur
    from .. import models  # noqa: F401
    Base.metadata.create_all(bind=get_engine())


def get_db():
    get_engine()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
