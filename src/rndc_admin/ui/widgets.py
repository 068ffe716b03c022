from __future__ import annotations

from typing import Iterable

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QColor, QFont
from PySide6.QtWidgets import (
    QComboBox,
    QFrame,
    QGraphicsDropShadowEffect,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QMessageBox,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from ..utils.listing import Page

BUTTON_STYLE = """
    QPushButton {
        background-color: #f8f9fa;
        border: 1px solid #e0e0e0;
        border-radius: 6px;
        padding: 6px 12px;
        color: #2c3e50;
    }
    QPushButton:hover {
        background-color: #eef2f7;
    }
    QPushButton:disabled {
        background-color: #f0f0f0;
        color: #bdc3c7;
    }
"""


def style_buttons(*buttons: QPushButton) -> None:
    for btn in buttons:
        btn.setCursor(Qt.CursorShape.PointingHandCursor)
        btn.setStyleSheet(BUTTON_STYLE)


def configure_table(table: QTableWidget, headers: list[str], stretch: int = 1) -> None:
    table.setColumnCount(len(headers))
    table.setHorizontalHeaderLabels(headers)
    table.horizontalHeader().setSectionResizeMode(stretch, QHeaderView.ResizeMode.Stretch)
    table.setSelectionBehavior(QTableWidget.SelectionBehavior.SelectRows)
    table.setSelectionMode(QTableWidget.SelectionMode.SingleSelection)
    table.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
    table.verticalHeader().setVisible(False)


def text_item(text: object, key: object = None, align_center: bool = False) -> QTableWidgetItem:
    """Celda de solo lectura; ``key`` se guarda en UserRole para recuperar la fila."""
    item = QTableWidgetItem("" if text is None else str(text))
    if key is not None:
        item.setData(Qt.ItemDataRole.UserRole, key)
    if align_center:
        item.setTextAlignment(Qt.AlignmentFlag.AlignCenter)
    return item


def badge_item(text: str, fg: str, bg: str | None = None) -> QTableWidgetItem:
    item = QTableWidgetItem(text)
    item.setTextAlignment(Qt.AlignmentFlag.AlignCenter)
    item.setForeground(QColor(fg))
    if bg:
        item.setBackground(QColor(bg))
    font = item.font()
    font.setBold(True)
    item.setFont(font)
    return item


def selected_key(table: QTableWidget):
    row = table.currentRow()
    if row < 0:
        return None
    item = table.item(row, 0)
    return item.data(Qt.ItemDataRole.UserRole) if item else None


def fill_combo(combo: QComboBox, options: Iterable[tuple[str, object]], placeholder: str | None = None) -> None:
    """Rellena el combo conservando la selección actual si sigue disponible."""
    current = combo.currentData()
    was_blocked = combo.blockSignals(True)
    try:
        combo.clear()
        if placeholder is not None:
            combo.addItem(placeholder, None)
        for label, value in options:
            combo.addItem(label, value)
        idx = combo.findData(current) if current is not None else -1
        combo.setCurrentIndex(idx if idx >= 0 else 0)
    finally:
        combo.blockSignals(was_blocked)


def select_combo_data(combo: QComboBox, value: object) -> None:
    idx = combo.findData(value)
    if idx >= 0:
        combo.setCurrentIndex(idx)


def confirm_action(parent: QWidget | None, title: str, text: str) -> bool:
    reply = QMessageBox.question(
        parent,
        title,
        text,
        QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
        QMessageBox.StandardButton.No,
    )
    return reply == QMessageBox.StandardButton.Yes


class _Banner(QLabel):
    _STYLE = ""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setWordWrap(True)
        self.setStyleSheet(self._STYLE)
        self.hide()

    def show_message(self, text: str) -> None:
        if not text:
            self.clear_message()
            return
        self.setText(text)
        self.show()

    def clear_message(self) -> None:
        self.setText("")
        self.hide()


class ErrorBanner(_Banner):
    _STYLE = (
        "background-color: #fee2e2; color: #991b1b; border: 1px solid #fecaca;"
        "border-radius: 6px; padding: 8px 12px;"
    )

    def show_errors(self, messages: list[str]) -> None:
        self.show_message("\n".join(messages))


class SuccessBanner(_Banner):
    _STYLE = (
        "background-color: #dcfce7; color: #166534; border: 1px solid #bbf7d0;"
        "border-radius: 6px; padding: 8px 12px;"
    )


class PaginationBar(QWidget):
    pageChanged = Signal(int)
    pageSizeChanged = Signal(int)

    def __init__(self, page_sizes: tuple[int, ...] = (), parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._page = 1
        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.lbl_range = QLabel("")
        self.lbl_range.setStyleSheet("color: #7f8c8d;")
        layout.addWidget(self.lbl_range)
        layout.addStretch(1)

        self.cmb_size: QComboBox | None = None
        if page_sizes:
            layout.addWidget(QLabel("Por página:"))
            self.cmb_size = QComboBox()
            for size in page_sizes:
                self.cmb_size.addItem(str(size), size)
            self.cmb_size.currentIndexChanged.connect(
                lambda _i: self.pageSizeChanged.emit(int(self.cmb_size.currentData()))
            )
            layout.addWidget(self.cmb_size)

        self.btn_prev = QPushButton("◀ Anterior")
        self.btn_next = QPushButton("Siguiente ▶")
        self.lbl_page = QLabel("")
        style_buttons(self.btn_prev, self.btn_next)
        self.btn_prev.clicked.connect(lambda: self.pageChanged.emit(self._page - 1))
        self.btn_next.clicked.connect(lambda: self.pageChanged.emit(self._page + 1))
        layout.addWidget(self.btn_prev)
        layout.addWidget(self.lbl_page)
        layout.addWidget(self.btn_next)

    def set_page(self, page: Page) -> None:
        self._page = page.page
        self.lbl_range.setText(page.label)
        self.lbl_page.setText(f"Página {page.page} de {max(page.total_pages, 1)}")
        self.btn_prev.setEnabled(page.has_previous)
        self.btn_next.setEnabled(page.has_next)

    def set_page_size(self, size: int) -> None:
        if self.cmb_size is None:
            return
        idx = self.cmb_size.findData(size)
        if idx >= 0:
            was_blocked = self.cmb_size.blockSignals(True)
            self.cmb_size.setCurrentIndex(idx)
            self.cmb_size.blockSignals(was_blocked)


class KpiCard(QFrame):
    def __init__(self, title: str, value: str, icon: str, color: str, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setFrameShape(QFrame.Shape.NoFrame)
        self.setFixedHeight(100)

        shadow = QGraphicsDropShadowEffect(self)
        shadow.setBlurRadius(15)
        shadow.setXOffset(0)
        shadow.setYOffset(2)
        shadow.setColor(QColor(0, 0, 0, 30))
        self.setGraphicsEffect(shadow)
        self.setStyleSheet("QFrame { background-color: white; border-radius: 12px; }")

        layout = QHBoxLayout(self)
        layout.setContentsMargins(20, 15, 20, 15)
        layout.setSpacing(15)

        icon_lbl = QLabel(icon)
        icon_lbl.setFixedSize(50, 50)
        icon_lbl.setAlignment(Qt.AlignmentFlag.AlignCenter)
        icon_lbl.setFont(QFont("Segoe UI", 18))
        icon_lbl.setStyleSheet(f"background-color: {color}20; border-radius: 25px;")

        text_box = QWidget()
        text_layout = QVBoxLayout(text_box)
        text_layout.setContentsMargins(0, 0, 0, 0)
        text_layout.setSpacing(2)

        self.title_lbl = QLabel(title)
        self.title_lbl.setFont(QFont("Segoe UI", 10))
        self.title_lbl.setStyleSheet("color: #7f8c8d;")
        self.value_lbl = QLabel(value)
        self.value_lbl.setFont(QFont("Segoe UI", 18, QFont.Weight.Bold))
        self.value_lbl.setStyleSheet("color: #2c3e50;")
        self.hint_lbl = QLabel("")
        self.hint_lbl.setStyleSheet("color: #7f8c8d; font-size: 11px;")
        self.hint_lbl.hide()

        text_layout.addWidget(self.title_lbl)
        text_layout.addWidget(self.value_lbl)
        text_layout.addWidget(self.hint_lbl)

        layout.addWidget(icon_lbl)
        layout.addWidget(text_box)
        layout.addStretch()

    def update_value(self, new_value: str, hint: str = "") -> None:
        self.value_lbl.setText(new_value)
        self.hint_lbl.setText(hint)
        self.hint_lbl.setVisible(bool(hint))


def section_title(text: str) -> QLabel:
    lbl = QLabel(text)
    lbl.setFont(QFont("Segoe UI", 12, QFont.Weight.Bold))
    lbl.setStyleSheet("color: #2c3e50;")
    return lbl
