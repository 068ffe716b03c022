from __future__ import annotations

from typing import Callable
import logging

from PySide6.QtCore import QEvent, Qt, QTimer, Signal
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QVBoxLayout,
    QWidget,
)
from shiboken6 import isValid

from ..schemas import User
from ..services.api_client import Result

logger = logging.getLogger(__name__)


class UserSearchSelect(QWidget):
    """Buscador de usuarios con autocompletado contra el servidor.

    Cada pausa de 300 ms en la escritura dispara como máximo una búsqueda.
    Las respuestas llevan un token creciente: solo se pinta la última.
    """

    userSelected = Signal(object)  # User | None

    MIN_CHARS = 2
    DEBOUNCE_MS = 300
    MAX_RESULTS = 10

    def __init__(self, search_fn: Callable[[str], Result[list[User]]], runner,
                 placeholder: str = "Buscar usuario por nombre...", parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._search_fn = search_fn
        self._runner = runner
        self._token = 0
        self._selected: User | None = None

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(4)

        row = QHBoxLayout()
        self.edit = QLineEdit(self)
        self.edit.setPlaceholderText(placeholder)
        self.btn_clear = QPushButton("✕", self)
        self.btn_clear.setFixedWidth(28)
        self.btn_clear.setToolTip("Limpiar")
        self.btn_clear.hide()
        row.addWidget(self.edit, 1)
        row.addWidget(self.btn_clear)
        layout.addLayout(row)

        self.results = QListWidget(self)
        self.results.setMaximumHeight(180)
        self.results.hide()
        layout.addWidget(self.results)

        self.lbl_status = QLabel("", self)
        self.lbl_status.setStyleSheet("color: #7f8c8d; font-size: 11px;")
        self.lbl_status.hide()
        layout.addWidget(self.lbl_status)

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(self.DEBOUNCE_MS)
        self._timer.timeout.connect(self._run_search)

        self.edit.textEdited.connect(self._on_text_edited)
        self.edit.installEventFilter(self)
        self.results.itemClicked.connect(self._on_item_clicked)
        self.btn_clear.clicked.connect(self.clear)

    # --- API pública ---

    @property
    def selected_user(self) -> User | None:
        return self._selected

    @property
    def selected_dni(self) -> str | None:
        return self._selected.dni if self._selected else None

    def set_selected(self, user: User | None) -> None:
        self._selected = user
        self._timer.stop()
        self._token += 1
        self.edit.setText(f"{user.nombres} ({user.dni})" if user else "")
        self.btn_clear.setVisible(user is not None)
        self._hide_results()
        self.userSelected.emit(user)

    def clear(self) -> None:
        self.set_selected(None)
        self.edit.setFocus()

    # --- búsqueda ---

    def _on_text_edited(self, text: str) -> None:
        self._timer.stop()
        self._token += 1
        if self._selected is not None:
            self._selected = None
            self.userSelected.emit(None)
        self.btn_clear.setVisible(bool(text))
        if len(text.strip()) < self.MIN_CHARS:
            self._hide_results()
            return
        self._timer.start()

    def _run_search(self) -> None:
        query = self.edit.text().strip()
        if len(query) < self.MIN_CHARS:
            return
        self._token += 1
        token = self._token
        self._set_status("Buscando…")
        self._runner.submit(lambda: self._search_fn(query), lambda res: self._on_results(token, res))

    def _on_results(self, token: int, result: Result[list[User]]) -> None:
        if not isValid(self) or token != self._token:
            logger.debug("Resultado de búsqueda obsoleto descartado")
            return
        self.results.clear()
        if not result.ok:
            self._set_status(result.error.message)
            self.results.hide()
            return
        users = (result.value or [])[: self.MAX_RESULTS]
        if not users:
            self._set_status("Sin resultados")
            self.results.hide()
            return
        self._set_status("")
        for user in users:
            extra = f" · {user.nombre_region}" if user.nombre_region else ""
            item = QListWidgetItem(f"{user.nombres} ({user.dni}){extra}")
            item.setData(Qt.ItemDataRole.UserRole, user)
            self.results.addItem(item)
        self.results.show()

    def _on_item_clicked(self, item: QListWidgetItem) -> None:
        self.set_selected(item.data(Qt.ItemDataRole.UserRole))

    def _hide_results(self) -> None:
        self.results.clear()
        self.results.hide()
        self._set_status("")

    def _set_status(self, text: str) -> None:
        self.lbl_status.setText(text)
        self.lbl_status.setVisible(bool(text))

    # Cerrar la lista al perder el foco (click fuera)
    def eventFilter(self, obj, event) -> bool:  # type: ignore[override]
        if obj is self.edit and event.type() == QEvent.Type.FocusOut:
            QTimer.singleShot(150, self._close_if_unfocused)
        return super().eventFilter(obj, event)

    def _close_if_unfocused(self) -> None:
        if not isValid(self):
            return
        if not self.edit.hasFocus() and not self.results.hasFocus():
            self.results.hide()
