# backend/upkeep/core/config.py
import os
import json
import logging
from typing import Optional

from dotenv import dotenv_values, load_dotenv, find_dotenv
from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

# Proje kökü ve .env yolu
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
DEFAULT_DOTENV = os.path.join(BASE_DIR, ".env")


def _norm_key(k: str) -> str:
    return k.replace("\ufeff", "").strip() if isinstance(k, str) else k


# .env yolunu bul ve ortamı yükle (CI'daki env'i ezmeden)
dotenv_path = DEFAULT_DOTENV if os.path.exists(DEFAULT_DOTENV) else find_dotenv(filename=".env", usecwd=True)
if dotenv_path:
    cfg = dotenv_values(dotenv_path, encoding="utf-8-sig")
    for k, v in cfg.items():
        nk = _norm_key(k)
        if v is not None and (nk not in os.environ or not os.environ[nk].strip()):
            os.environ[nk] = v
    load_dotenv(dotenv_path, override=False)


def _env_bool(name: str, default: bool = False) -> bool:
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return val.strip().lower() in ("1", "true", "yes", "on")


def sqlite_url_for(path: str) -> str:
    """Dosya yolunu SQLAlchemy sqlite URL'ine çevirir; zaten URL ise dokunmaz."""
    if "://" in path:
        return path
    return f"sqlite:///{os.path.abspath(path)}"


class AppConfig(BaseModel):
    """Kalıcı uygulama ayarları (config.json)."""

    model_config = ConfigDict(populate_by_name=True)

    databasePath: Optional[str] = None
    uploadFolderPath: Optional[str] = None
    smtpServer: Optional[str] = None
    smtpPort: int = 25
    smtpSecure: bool = False
    smtpTLS: bool = False
    smtpUsername: Optional[str] = None
    smtpPassword: Optional[str] = None
    emailFrom: Optional[str] = None


def config_path() -> str:
    return os.path.abspath(os.getenv("UPKEEP_CONFIG_PATH", "upkeep_config.json"))


def env_defaults() -> AppConfig:
    return AppConfig(
        databasePath=os.getenv("DATABASE_URL") or "sqlite:///./upkeep.db",
        uploadFolderPath=os.getenv("UPLOAD_FOLDER") or os.path.abspath("documents"),
        smtpServer=os.getenv("SMTP_SERVER") or None,
        smtpPort=int(os.getenv("SMTP_PORT") or 25),
        smtpSecure=_env_bool("SMTP_SECURE"),
        smtpTLS=_env_bool("SMTP_TLS"),
        smtpUsername=os.getenv("SMTP_USERNAME") or None,
        smtpPassword=os.getenv("SMTP_PASSWORD") or None,
        emailFrom=os.getenv("EMAIL_FROM") or None,
    )


def load_config() -> AppConfig:
    """Env varsayılanları + diskteki config.json (dosyadaki değerler kazanır)."""
    base = env_defaults().model_dump()
    path = config_path()
    if os.path.exists(path):
        try:
            with open(path, "r", encoding="utf-8") as fh:
                stored = json.load(fh)
        except (OSError, ValueError):
            logger.exception("config okunamadı: %s", path)
            stored = {}
        base.update({k: v for k, v in stored.items() if k in base and v is not None})
    return AppConfig(**base)


def save_config(config: AppConfig) -> AppConfig:
    path = config_path()
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(config.model_dump(), fh, ensure_ascii=False, indent=2)
    logger.info("config kaydedildi: %s", path)
    return config


def upload_folder() -> str:
    folder = load_config().uploadFolderPath or os.path.abspath("documents")
    os.makedirs(folder, exist_ok=True)
    return folder


JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret-change-me")
JWT_ALG = os.getenv("JWT_ALG", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
