from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import logging
import os
import sys

from dotenv import load_dotenv

# Cargar variables desde .env si existe
load_dotenv()


DEFAULT_API_BASE_URL = "http://localhost:5078/api"
DEFAULT_IMAGE_UPLOAD_URL = "https://api.cloudinary.com/v1_1/rndc/image/upload"
DEFAULT_IMAGE_UPLOAD_PRESET = "rndc_pagos"


def get_data_dir() -> Path:
    """Devuelve la carpeta de datos persistente.
    - En desarrollo: ./data
    - En ejecutable (PyInstaller): %APPDATA%/RNDC-Admin
    - Se puede forzar con la variable RNDC_DATA_DIR
    """
    override = os.getenv("RNDC_DATA_DIR")
    if override:
        d = Path(override).expanduser()
        d.mkdir(parents=True, exist_ok=True)
        return d

    is_frozen = getattr(sys, "frozen", False) and hasattr(sys, "_MEIPASS")
    if is_frozen:
        base = os.getenv("APPDATA") or os.getenv("LOCALAPPDATA") or str(Path.home())
        d = Path(base) / "RNDC-Admin" / "data"
    else:
        d = Path.cwd() / "data"
    d.mkdir(parents=True, exist_ok=True)
    return d


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


@dataclass(frozen=True)
class Settings:
    api_base_url: str
    api_timeout: float
    image_upload_url: str
    image_upload_preset: str
    log_level: str
    theme: str


def load_settings() -> Settings:
    """Construye la configuración a partir del entorno."""
    base_url = os.getenv("RNDC_API_BASE_URL", DEFAULT_API_BASE_URL).rstrip("/")
    return Settings(
        api_base_url=base_url,
        api_timeout=_float_env("RNDC_API_TIMEOUT", 30.0),
        image_upload_url=os.getenv("RNDC_IMAGE_UPLOAD_URL", DEFAULT_IMAGE_UPLOAD_URL),
        image_upload_preset=os.getenv("RNDC_IMAGE_UPLOAD_PRESET", DEFAULT_IMAGE_UPLOAD_PRESET),
        log_level=os.getenv("RNDC_LOG_LEVEL", "INFO").upper(),
        theme=os.getenv("APP_THEME", "light").lower(),
    )


def configure_logging(settings: Settings | None = None) -> None:
    """Configura logging a archivo (data/rndc_admin.log) y a stderr."""
    settings = settings or load_settings()
    level = getattr(logging, settings.log_level, logging.INFO)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    file_error: OSError | None = None
    try:
        handlers.append(logging.FileHandler(get_data_dir() / "rndc_admin.log", encoding="utf-8"))
    except OSError as exc:
        file_error = exc
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )
    # urllib3 es muy verboso en DEBUG
    logging.getLogger("urllib3").setLevel(max(level, logging.INFO))
    if file_error is not None:
        logging.getLogger(__name__).warning("No se pudo abrir el archivo de log: %s", file_error)
