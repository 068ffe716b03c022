from __future__ import annotations

from datetime import datetime
from sqlalchemy.orm import sessionmaker

from .models import LocalSetting

AUTH_USER_KEY = "auth_user"
AUTH_TOKEN_KEY = "auth_token"
CURRENT_VIEW_KEY = "currentView"
INVESTORS_TAB_KEY = "investors_active_tab"


class LocalStorage:
    """Almacenamiento clave/valor local (equivalente a localStorage del navegador)."""

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def get(self, key: str, default: str | None = None) -> str | None:
        with self._session_factory() as session:
            row = session.get(LocalSetting, key)
            return row.value if row is not None else default

    def set(self, key: str, value: str) -> None:
        with self._session_factory() as session:
            row = session.get(LocalSetting, key)
            if row is None:
                session.add(LocalSetting(key=key, value=value))
            else:
                row.value = value
                row.updated_at = datetime.utcnow()
            session.commit()

    def remove(self, key: str) -> None:
        with self._session_factory() as session:
            row = session.get(LocalSetting, key)
            if row is not None:
                session.delete(row)
                session.commit()
