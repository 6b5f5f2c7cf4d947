import logging

from ..core import db as core_db
from ..core.config import AppConfig, load_config, save_config, sqlite_url_for

logger = logging.getLogger(__name__)


def public_config(config: AppConfig) -> dict:
    """SMTP parolası dışarı verilmez."""
    data = config.model_dump()
    data.pop("smtpPassword", None)
    data["smtpPasswordSet"] = bool(config.smtpPassword)
    return data


def update_config(changes: dict) -> AppConfig:
    current = load_config()
    merged = current.model_dump()
    merged.update({k: v for k, v in changes.items() if k in merged and v is not None})
    # Boş parola -> mevcut parola kalır
    if not changes.get("smtpPassword"):
        merged["smtpPassword"] = current.smtpPassword
    new = save_config(AppConfig(**merged))

    if sqlite_url_for(new.databasePath or "") != sqlite_url_for(current.databasePath or ""):
        logger.info("veritabanı yolu değişti, engine yeniden kuruluyor")
        core_db.configure_engine(new.databasePath)
        core_db.init_db()
    return new
