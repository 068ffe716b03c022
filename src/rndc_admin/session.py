"""Sesión autenticada del usuario actual.

La sesión es un objeto explícito que el shell entrega a cada vista;
no hay estado global. Se persiste en el almacenamiento local para
sobrevivir a reinicios de la aplicación.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
import json
import logging

from .storage import AUTH_TOKEN_KEY, AUTH_USER_KEY, CURRENT_VIEW_KEY, LocalStorage

logger = logging.getLogger(__name__)

ALLOWED_ROLES = ("Admin", "Encargado")


@dataclass(frozen=True)
class AuthSession:
    dni: str
    nombres: str
    rol: str
    nombre_region: str
    token: str

    @property
    def is_admin(self) -> bool:
        return self.rol == "Admin"

    @property
    def is_encargado(self) -> bool:
        return self.rol == "Encargado"

    def user_json(self) -> str:
        data = asdict(self)
        data.pop("token")
        return json.dumps(data, ensure_ascii=False)

    @classmethod
    def from_storage(cls, user_json: str, token: str) -> "AuthSession":
        data = json.loads(user_json)
        return cls(
            dni=str(data["dni"]),
            nombres=str(data.get("nombres", "")),
            rol=str(data["rol"]),
            nombre_region=str(data.get("nombre_region", "")),
            token=token,
        )


class SessionStore:
    """Guarda y recupera la sesión en el almacenamiento local."""

    def __init__(self, storage: LocalStorage) -> None:
        self._storage = storage
        self._current: AuthSession | None = None

    @property
    def current(self) -> AuthSession | None:
        return self._current

    def token(self) -> str | None:
        return self._current.token if self._current else None

    def login(self, session: AuthSession) -> None:
        self._storage.set(AUTH_USER_KEY, session.user_json())
        self._storage.set(AUTH_TOKEN_KEY, session.token)
        self._current = session
        logger.info("Sesión iniciada para %s (%s)", session.dni, session.rol)

    def restore(self) -> AuthSession | None:
        """Recupera una sesión persistida; descarta datos corruptos o roles no permitidos."""
        user_json = self._storage.get(AUTH_USER_KEY)
        token = self._storage.get(AUTH_TOKEN_KEY)
        if not user_json or not token:
            return None
        try:
            session = AuthSession.from_storage(user_json, token)
        except (ValueError, KeyError, TypeError):
            logger.warning("Sesión almacenada inválida; se descarta")
            self.clear()
            return None
        if session.rol not in ALLOWED_ROLES:
            self.clear()
            return None
        self._current = session
        return session

    def clear(self) -> None:
        # La última vista se conserva entre sesiones
        self._storage.remove(AUTH_USER_KEY)
        self._storage.remove(AUTH_TOKEN_KEY)
        self._current = None

    def logout(self) -> None:
        if self._current is not None:
            logger.info("Sesión cerrada para %s", self._current.dni)
        self.clear()

    def current_view(self) -> str | None:
        return self._storage.get(CURRENT_VIEW_KEY)

    def set_current_view(self, key: str) -> None:
        self._storage.set(CURRENT_VIEW_KEY, key)
