from __future__ import annotations

from pathlib import Path
import os
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker

from .config import get_data_dir
from .models import Base


def get_default_db_path() -> Path:
    return get_data_dir() / "rndc.db"


def make_engine(db_path: Path | str | None = None):
    """Crear el engine de SQLAlchemy para el almacenamiento local.

    Prioridad:
    1) ``db_path`` explícito (ruta SQLite, URL completa o ``:memory:``).
    2) Variable de entorno ``RNDC_STORAGE_URL``.
    3) SQLite local en ``./data/rndc.db``.
    """
    if db_path is not None:
        s = str(db_path)
        if s in {":memory:", "sqlite:///:memory:", "sqlite+pysqlite:///:memory:"}:
            # StaticPool: todas las conexiones comparten la misma base en memoria
            return create_engine(
                "sqlite+pysqlite:///:memory:",
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        if "://" in s:
            return create_engine(s, pool_pre_ping=True)
        return create_engine(f"sqlite:///{s}", connect_args={"check_same_thread": False})

    env_url = os.getenv("RNDC_STORAGE_URL")
    if env_url:
        return create_engine(env_url, pool_pre_ping=True)

    url = f"sqlite:///{get_default_db_path()}"
    return create_engine(url, connect_args={"check_same_thread": False})


def make_session_factory(engine=None):
    engine = engine or make_engine()
    Base.metadata.create_all(bind=engine)
    # expire_on_commit=False permite leer atributos fuera del contexto de la sesión
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)
