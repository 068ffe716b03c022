from __future__ import annotations

from typing import Any, Callable
import logging

from PySide6.QtCore import QObject, QRunnable, QThreadPool, Signal

from ..services.api_client import ApiError, ErrorKind, Result

logger = logging.getLogger(__name__)


class _Relay(QObject):
    # Vive en el hilo principal: la conexión encolada entrega el resultado allí
    done = Signal(object, object)


class _Job(QRunnable):
    def __init__(self, fn: Callable[[], Any], callback: Callable[[Any], None], relay: _Relay) -> None:
        super().__init__()
        self._fn = fn
        self._callback = callback
        self._relay = relay

    def run(self) -> None:
        try:
            result = self._fn()
        except Exception:
            logger.exception("Fallo no controlado en tarea en segundo plano")
            result = Result.failure(ApiError(ErrorKind.SERVER, "Error inesperado"))
        self._relay.done.emit(self._callback, result)


class TaskRunner(QObject):
    """Ejecuta llamadas a la API fuera del hilo de UI.

    Los callbacks siempre se invocan en el hilo principal.
    """

    def __init__(self, pool: QThreadPool | None = None, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._pool = pool or QThreadPool.globalInstance()
        self._relay = _Relay(self)
        self._relay.done.connect(self._dispatch)

    def _dispatch(self, callback: Callable[[Any], None], result: Any) -> None:
        callback(result)

    def submit(self, fn: Callable[[], Any], callback: Callable[[Any], None]) -> None:
        self._pool.start(_Job(fn, callback, self._relay))

    def gather(self, fns: dict[str, Callable[[], Any]], callback: Callable[[dict[str, Any]], None]) -> None:
        """Lanza todas las llamadas en paralelo; ``callback`` recibe los resultados por clave."""
        if not fns:
            callback({})
            return
        results: dict[str, Any] = {}

        def collect(key: str) -> Callable[[Any], None]:
            def _done(result: Any) -> None:
                results[key] = result
                if len(results) == len(fns):
                    callback(results)
            return _done

        for key, fn in fns.items():
            self.submit(fn, collect(key))

    def wait(self, msecs: int = 5000) -> bool:
        return self._pool.waitForDone(msecs)
