"""Cliente HTTP de la API REST de RNDC.

Todas las operaciones devuelven un ``Result``: nunca se propagan excepciones
de transporte hacia la UI. Cada operación define su propio mensaje en
español; el detalle devuelto por el servidor solo se registra en el log.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, TypeVar
import logging

import requests

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")


class ErrorKind(str, Enum):
    NETWORK = "network"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    SERVER = "server"
    INVALID_RESPONSE = "invalid_response"
    UPLOAD = "upload"
    VALIDATION = "validation"


@dataclass(frozen=True)
class ApiError:
    kind: ErrorKind
    message: str
    status: int | None = None
    detail: str = ""

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class Result(Generic[T]):
    """Éxito con ``value`` o fallo con ``error``; nunca ambos."""
    value: T | None = None
    error: ApiError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T | None = None) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ApiError) -> "Result[T]":
        return cls(error=error)

    def map(self, fn: Callable[[T], U]) -> "Result[U]":
        if not self.ok:
            return Result(error=self.error)
        try:
            return Result(value=fn(self.value))  # type: ignore[arg-type]
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            logger.warning("Respuesta con forma inesperada: %s", exc)
            return Result(error=ApiError(ErrorKind.INVALID_RESPONSE, "Respuesta inválida del servidor"))


def kind_for_status(status: int) -> ErrorKind:
    if status == 401:
        return ErrorKind.UNAUTHORIZED
    if status == 403:
        return ErrorKind.FORBIDDEN
    if status == 404:
        return ErrorKind.NOT_FOUND
    if status in (400, 409, 422):
        return ErrorKind.VALIDATION
    return ErrorKind.SERVER


class ApiClient:
    """Envoltorio de ``requests.Session`` con token bearer y timeout.

    ``token_provider`` se consulta en cada petición, así el cliente siempre
    usa el token de la sesión vigente.
    """

    def __init__(
        self,
        base_url: str,
        token_provider: Callable[[], str | None] | None = None,
        http: requests.Session | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._token_provider = token_provider or (lambda: None)
        self._http = http or requests.Session()
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings, token_provider=None) -> "ApiClient":
        return cls(settings.api_base_url, token_provider=token_provider, timeout=settings.api_timeout)

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        token = self._token_provider()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def request(
        self,
        method: str,
        path: str,
        *,
        message: str,
        params: dict[str, Any] | None = None,
        json: Any = None,
        text: bool = False,
        status_messages: dict[int, str] | None = None,
    ) -> Result[Any]:
        """Ejecuta la petición y devuelve el cuerpo decodificado.

        ``text=True`` devuelve el cuerpo como texto (exportaciones CSV).
        ``status_messages`` permite mensajes específicos por código HTTP.
        """
        url = f"{self.base_url}/{path.lstrip('/')}"
        if params:
            params = {k: v for k, v in params.items() if v is not None and v != ""}
        try:
            response = self._http.request(
                method, url, params=params or None, json=json,
                headers=self._headers(), timeout=self.timeout,
            )
        except requests.Timeout:
            logger.warning("%s %s: tiempo de espera agotado", method, path)
            return Result.failure(ApiError(ErrorKind.NETWORK, "Tiempo de espera agotado"))
        except requests.RequestException as exc:
            logger.warning("%s %s: error de conexión: %s", method, path, exc)
            return Result.failure(ApiError(ErrorKind.NETWORK, "Error de conexión"))

        status = response.status_code
        logger.debug("%s %s -> %s", method, path, status)
        if not 200 <= status < 300:
            detail = (response.text or "")[:500]
            logger.warning("%s %s falló con %s: %s", method, path, status, detail)
            text_msg = (status_messages or {}).get(status, message)
            return Result.failure(ApiError(kind_for_status(status), text_msg, status=status, detail=detail))

        if text:
            return Result.success(response.text)
        if status == 204 or not response.content:
            return Result.success(None)
        try:
            return Result.success(response.json())
        except ValueError:
            logger.warning("%s %s: cuerpo no es JSON válido", method, path)
            return Result.failure(
                ApiError(ErrorKind.INVALID_RESPONSE, "Respuesta inválida del servidor", status=status)
            )

    def get(self, path: str, *, message: str, **kwargs) -> Result[Any]:
        return self.request("GET", path, message=message, **kwargs)

    def post(self, path: str, *, message: str, **kwargs) -> Result[Any]:
        return self.request("POST", path, message=message, **kwargs)

    def put(self, path: str, *, message: str, **kwargs) -> Result[Any]:
        return self.request("PUT", path, message=message, **kwargs)

    def delete(self, path: str, *, message: str, **kwargs) -> Result[Any]:
        return self.request("DELETE", path, message=message, **kwargs)
