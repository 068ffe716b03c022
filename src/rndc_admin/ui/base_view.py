"""Base común de las vistas de módulo.

Ciclo: ``reload`` lanza en paralelo las lecturas de ``fetchers()`` y
entrega los resultados a ``on_loaded``. Cada carga lleva un número de
generación; las respuestas de cargas superadas o de vistas ya destruidas
se descartan. Los fallos parciales se listan en el banner de error y la
vista pinta lo que sí llegó.
"""
from __future__ import annotations

from typing import Any, Callable
import logging

from PySide6.QtWidgets import QLabel, QVBoxLayout, QWidget
from shiboken6 import isValid

from ..services.api_client import Result
from ..session import AuthSession
from .widgets import ErrorBanner, SuccessBanner, confirm_action

logger = logging.getLogger(__name__)


class ResourceView(QWidget):
    title = ""

    def __init__(self, api, runner, session: AuthSession, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.api = api
        self.runner = runner
        self.session = session
        self._generation = 0
        self.loading = False
        self.busy = False

        self.root_layout = QVBoxLayout(self)
        self.root_layout.setContentsMargins(20, 20, 20, 20)
        self.root_layout.setSpacing(15)

        self.error_banner = ErrorBanner(self)
        self.success_banner = SuccessBanner(self)
        self.lbl_loading = QLabel("Cargando…")
        self.lbl_loading.setStyleSheet("color: #7f8c8d;")
        self.lbl_loading.hide()
        self.root_layout.addWidget(self.error_banner)
        self.root_layout.addWidget(self.success_banner)
        self.root_layout.addWidget(self.lbl_loading)

    # --- carga ---

    def fetchers(self) -> dict[str, Callable[[], Result]]:
        return {}

    def on_loaded(self, results: dict[str, Result]) -> None:
        pass

    def showEvent(self, event) -> None:  # type: ignore[override]
        super().showEvent(event)
        self.reload()

    def reload(self) -> None:
        self._generation += 1
        generation = self._generation
        self._set_loading(True)
        self.runner.gather(self.fetchers(), lambda results: self._deliver(generation, results))

    def _is_current(self, generation: int) -> bool:
        if not isValid(self):
            return False
        return generation == self._generation

    def _deliver(self, generation: int, results: dict[str, Result]) -> None:
        if not self._is_current(generation):
            logger.debug("%s: respuesta obsoleta descartada", type(self).__name__)
            return
        self._set_loading(False)
        errors = [res.error.message for res in results.values() if not res.ok]
        self.error_banner.show_errors(errors)
        self.on_loaded(results)

    def _set_loading(self, on: bool) -> None:
        self.loading = on
        self.lbl_loading.setVisible(on)

    # --- mutaciones ---

    def run_mutation(self, fn: Callable[[], Result], success_message: str = "",
                     on_success: Callable[[Any], None] | None = None) -> None:
        """Ejecuta una escritura; al terminar bien muestra el aviso y recarga."""
        self.busy = True
        self.success_banner.clear_message()

        def done(result: Result) -> None:
            if not isValid(self):
                return
            self.busy = False
            if not result.ok:
                self.error_banner.show_message(result.error.message)
                return
            self.error_banner.clear_message()
            if success_message:
                self.success_banner.show_message(success_message)
            if on_success is not None:
                on_success(result.value)
            self.reload()

        self.runner.submit(fn, done)

    def confirm_and_delete(self, text: str, fn: Callable[[], Result], success_message: str = "") -> bool:
        if not confirm_action(self, "Confirmar eliminación", text):
            return False
        self.run_mutation(fn, success_message)
        return True

    @staticmethod
    def value_or(results: dict[str, Result], key: str, default: Any) -> Any:
        res = results.get(key)
        if res is None or not res.ok or res.value is None:
            return default
        return res.value
