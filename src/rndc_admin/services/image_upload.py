from __future__ import annotations

from pathlib import Path
import logging
import mimetypes

import requests

from .api_client import ApiError, ErrorKind, Result

logger = logging.getLogger(__name__)


class ImageUploader:
    """Sube comprobantes de pago al hosting de imágenes (preset sin firma)."""

    def __init__(self, upload_url: str, upload_preset: str, http: requests.Session | None = None,
                 timeout: float = 60.0) -> None:
        self.upload_url = upload_url
        self.upload_preset = upload_preset
        self._http = http or requests.Session()
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings) -> "ImageUploader":
        return cls(settings.image_upload_url, settings.image_upload_preset, timeout=max(settings.api_timeout, 60.0))

    def upload(self, file_path: str | Path) -> Result[str]:
        """Devuelve la URL segura de la imagen subida."""
        path = Path(file_path)
        mime = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        try:
            with path.open("rb") as fh:
                response = self._http.post(
                    self.upload_url,
                    files={"file": (path.name, fh, mime)},
                    data={"upload_preset": self.upload_preset},
                    timeout=self.timeout,
                )
        # RequestException hereda de OSError: va primero
        except requests.RequestException as exc:
            logger.warning("Error de conexión al subir imagen: %s", exc)
            return Result.failure(ApiError(ErrorKind.NETWORK, "Error de conexión al subir la imagen"))
        except OSError as exc:
            logger.warning("No se pudo leer %s: %s", path, exc)
            return Result.failure(ApiError(ErrorKind.UPLOAD, "No se pudo leer la imagen"))

        if not 200 <= response.status_code < 300:
            logger.warning("Subida de imagen falló con %s", response.status_code)
            return Result.failure(
                ApiError(ErrorKind.UPLOAD, "Error al subir la imagen", status=response.status_code)
            )
        try:
            url = response.json()["secure_url"]
        except (ValueError, KeyError, TypeError):
            return Result.failure(ApiError(ErrorKind.INVALID_RESPONSE, "Respuesta inválida del servicio de imágenes"))
        logger.info("Comprobante subido: %s", url)
        return Result.success(url)
