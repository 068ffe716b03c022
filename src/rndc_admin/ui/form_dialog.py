from __future__ import annotations

from typing import Callable
import logging

from PySide6.QtWidgets import QDialog, QDialogButtonBox, QMessageBox, QVBoxLayout, QWidget
from shiboken6 import isValid

from ..services.api_client import Result

logger = logging.getLogger(__name__)


class ApiFormDialog(QDialog):
    """Diálogo modal cuyo guardado es una llamada a la API.

    ``accept`` valida y llama a ``submit``; el diálogo solo se cierra si la
    API responde bien. Mientras se envía, los botones quedan deshabilitados.
    """

    def __init__(self, runner, title: str, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.runner = runner
        self.submitting = False
        self.setWindowTitle(title)
        self.setModal(True)

        self.layout_main = QVBoxLayout(self)
        self.buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Save | QDialogButtonBox.StandardButton.Cancel
        )
        self.buttons.accepted.connect(self.accept)
        self.buttons.rejected.connect(self.reject)

    def finish_layout(self) -> None:
        self.layout_main.addWidget(self.buttons)

    def validate(self) -> str | None:
        """Mensaje de error de validación, o None si el formulario es válido."""
        return None

    def build_call(self) -> Callable[[], Result]:
        raise NotImplementedError

    def accept(self) -> None:  # type: ignore[override]
        if self.submitting:
            return
        error = self.validate()
        if error:
            QMessageBox.warning(self, "Datos incompletos", error)
            return
        self._set_submitting(True)
        self.runner.submit(self.build_call(), self._on_submitted)

    def _on_submitted(self, result: Result) -> None:
        if not isValid(self):
            return
        self._set_submitting(False)
        if not result.ok:
            QMessageBox.warning(self, "Error", result.error.message)
            return
        super().accept()

    def _set_submitting(self, on: bool) -> None:
        self.submitting = on
        self.buttons.setEnabled(not on)
