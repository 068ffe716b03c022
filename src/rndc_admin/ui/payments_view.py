from __future__ import annotations

from PySide6.QtCore import QUrl
from PySide6.QtGui import QDesktopServices
from PySide6.QtWidgets import (
    QComboBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QTableWidget,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)

from ..schemas import Conference, MissingPayment, Payment, Region
from ..utils.dates import format_datetime
from ..utils.listing import ListState, matches_text
from .base_view import ResourceView
from .payment_dialog import PaymentDialog
from .widgets import PaginationBar, configure_table, fill_combo, selected_key, style_buttons, text_item


def payment_matches(p: Payment, filters: dict) -> bool:
    conference = filters.get("conference")
    if conference and p.id_conferencia != conference:
        return False
    return matches_text(filters.get("q", ""), p.dni_usuario, p.nombre_usuario)


class PaymentsView(ResourceView):
    title = "Pagos"

    def __init__(self, api, runner, session, uploader, parent=None) -> None:
        super().__init__(api, runner, session, parent)
        self.uploader = uploader
        self.state: ListState[Payment] = ListState(page_size=10)
        self.missing_state: ListState[MissingPayment] = ListState(page_size=10)
        self.conferences: list[Conference] = []
        self.regions: list[Region] = []
        self._by_id: dict[str, Payment] = {}

        self.tabs = QTabWidget()
        self.root_layout.addWidget(self.tabs, 1)
        self._init_payments_tab()
        self._init_missing_tab()
        self._render()
        self._render_missing()

    def _init_payments_tab(self) -> None:
        tab = QWidget()
        layout = QVBoxLayout(tab)
        top_bar = QHBoxLayout()
        top_bar.addWidget(QLabel("Buscar:"))
        self.edt_search = QLineEdit()
        self.edt_search.setPlaceholderText("Buscar por DNI o nombre...")
        self.edt_search.textChanged.connect(lambda t: self._set_filter("q", t))
        top_bar.addWidget(self.edt_search, 1)
        self.cmb_conference = QComboBox()
        fill_combo(self.cmb_conference, [], placeholder="Todas las conferencias")
        self.cmb_conference.currentIndexChanged.connect(
            lambda _i: self._set_filter("conference", self.cmb_conference.currentData())
        )
        top_bar.addWidget(self.cmb_conference)

        self.btn_add = QPushButton("➕ Registrar Pago")
        self.btn_open = QPushButton("🔗 Ver comprobante")
        self.btn_delete = QPushButton("🗑️ Eliminar")
        self.btn_add.clicked.connect(self._add)
        self.btn_open.clicked.connect(self._open_receipt)
        self.btn_delete.clicked.connect(self._delete_selected)
        style_buttons(self.btn_add, self.btn_open, self.btn_delete)
        for btn in (self.btn_add, self.btn_open, self.btn_delete):
            top_bar.addWidget(btn)
        layout.addLayout(top_bar)

        self.table = QTableWidget()
        configure_table(self.table, ["DNI", "Nombre", "Conferencia", "Monto", "Fecha", "Comprobante"])
        self.table.itemSelectionChanged.connect(self._on_selection_changed)
        layout.addWidget(self.table)
        self.pagination = PaginationBar()
        self.pagination.pageChanged.connect(self._on_page)
        layout.addWidget(self.pagination)
        self.tabs.addTab(tab, "Pagos")

    def _init_missing_tab(self) -> None:
        tab = QWidget()
        layout = QVBoxLayout(tab)
        self.lbl_missing = QLabel("Participantes de la próxima conferencia sin pago registrado")
        self.lbl_missing.setStyleSheet("color: #7f8c8d;")
        layout.addWidget(self.lbl_missing)
        self.table_missing = QTableWidget()
        configure_table(self.table_missing, ["DNI", "Nombre", "Conferencia", "Servicio"])
        layout.addWidget(self.table_missing)
        self.pagination_missing = PaginationBar()
        self.pagination_missing.pageChanged.connect(self._on_missing_page)
        layout.addWidget(self.pagination_missing)
        self.tabs.addTab(tab, "Pagos faltantes")

    def fetchers(self):
        return {
            "payments": self.api.payments.list,
            "missing": self.api.payments.missing_next_conference,
            "conferences": self.api.conferences.list,
            "regions": self.api.regions.list,
        }

    def on_loaded(self, results) -> None:
        payments = self.value_or(results, "payments", [])
        self.conferences = self.value_or(results, "conferences", self.conferences)
        self.regions = self.value_or(results, "regions", self.regions)
        fill_combo(self.cmb_conference, [(c.nombres, c.id) for c in self.conferences],
                   placeholder="Todas las conferencias")
        self._by_id = {p.id: p for p in payments}
        self.state = self.state.with_items(payments)
        self.missing_state = self.missing_state.with_items(self.value_or(results, "missing", []))
        self.tabs.setTabText(1, f"Pagos faltantes ({len(self.missing_state.items)})")
        self._render()
        self._render_missing()

    def _set_filter(self, name: str, value) -> None:
        self.state = self.state.with_filter(name, value)
        self._render()

    def _on_page(self, page: int) -> None:
        self.state = self.state.with_page(page)
        self._render()

    def _on_missing_page(self, page: int) -> None:
        self.missing_state = self.missing_state.with_page(page)
        self._render_missing()

    def _render(self) -> None:
        page = self.state.visible(payment_matches)
        self.table.setRowCount(len(page.items))
        for i, p in enumerate(page.items):
            self.table.setItem(i, 0, text_item(p.dni_usuario, key=p.id))
            self.table.setItem(i, 1, text_item(p.nombre_usuario))
            self.table.setItem(i, 2, text_item(p.nombre_conferencia))
            self.table.setItem(i, 3, text_item(f"S/ {p.monto:.2f}" if p.monto is not None else "—"))
            self.table.setItem(i, 4, text_item(format_datetime(p.fecha)))
            self.table.setItem(i, 5, text_item(p.enlace))
        self.pagination.set_page(page)
        self._on_selection_changed()

    def _render_missing(self) -> None:
        page = self.missing_state.visible(lambda _m, _f: True)
        self.table_missing.setRowCount(len(page.items))
        for i, m in enumerate(page.items):
            self.table_missing.setItem(i, 0, text_item(m.dni_usuario))
            self.table_missing.setItem(i, 1, text_item(m.nombre_usuario))
            self.table_missing.setItem(i, 2, text_item(m.nombre_conferencia))
            self.table_missing.setItem(i, 3, text_item(m.servicio))
        self.pagination_missing.set_page(page)

    def _on_selection_changed(self) -> None:
        payment = self._selected()
        self.btn_delete.setEnabled(payment is not None)
        self.btn_open.setEnabled(payment is not None and bool(payment.enlace))

    def _selected(self) -> Payment | None:
        return self._by_id.get(selected_key(self.table))

    def _add(self) -> None:
        dlg = PaymentDialog(self.api, self.runner, self.uploader, self.session, self.conferences, self.regions,
                            parent=self)
        if dlg.exec():
            self.success_banner.show_message("Pago registrado correctamente")
            self.reload()

    def _open_receipt(self) -> None:
        payment = self._selected()
        if payment and payment.enlace:
            QDesktopServices.openUrl(QUrl(payment.enlace))

    def _delete_selected(self) -> None:
        payment = self._selected()
        if payment is None:
            return
        self.confirm_and_delete(
            f"¿Eliminar el pago de {payment.nombre_usuario or payment.dni_usuario}?",
            lambda: self.api.payments.delete(payment.id),
            "Pago eliminado correctamente",
        )
