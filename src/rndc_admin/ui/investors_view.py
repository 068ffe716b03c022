from __future__ import annotations

from PySide6.QtCore import QDate
from PySide6.QtWidgets import (
    QComboBox,
    QDateEdit,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QTableWidget,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)

from ..schemas import Inversor, PagoInversor, Region, Tipo, currency_name, format_money, tipo_label
from ..storage import INVESTORS_TAB_KEY, LocalStorage
from ..utils.dates import format_datetime, is_within
from ..utils.listing import INVESTOR_PAGE_SIZES, ListState, matches_text
from .base_view import ResourceView
from .gastos_view import GastosView
from .inversor_dialog import CURRENCY_OPTIONS, InversorDialog
from .investor_reports_view import InvestorReportsView
from .pago_inversor_dialog import PagoInversorDialog
from .tipo_dialog import TipoDialog
from .widgets import PaginationBar, configure_table, fill_combo, selected_key, style_buttons, text_item

TAB_KEYS = ("inversores", "pagos", "gastos", "tipos", "reportes")
# Fecha mínima del QDateEdit = sin filtro
NO_DATE = QDate(2000, 1, 1)


def inversor_matches(i: Inversor, filters: dict) -> bool:
    region = filters.get("region")
    if region and i.id_region != region:
        return False
    return matches_text(filters.get("q", ""), i.nombre)


def pago_inversor_matches(p: PagoInversor, filters: dict) -> bool:
    currency = filters.get("currency")
    if currency is not None and p.currency != currency:
        return False
    es_micro = filters.get("es_micro")
    if es_micro is not None and p.es_microinversionista != es_micro:
        return False
    start, end = filters.get("desde"), filters.get("hasta")
    if (start or end) and not is_within(p.fecha_creacion, start, end):
        return False
    return matches_text(filters.get("q", ""), p.nombre_inversor)


def _date_filter_edit() -> QDateEdit:
    edit = QDateEdit()
    edit.setCalendarPopup(True)
    edit.setDisplayFormat("dd/MM/yyyy")
    edit.setMinimumDate(NO_DATE)
    edit.setSpecialValueText("—")
    edit.setDate(NO_DATE)
    return edit


def _date_value(edit: QDateEdit):
    return None if edit.date() == NO_DATE else edit.date().toPython()


class InvestorsView(ResourceView):
    """Inversores, sus pagos, gastos, tipos y reportes en pestañas.

    La última pestaña abierta se guarda en el almacenamiento local.
    """

    title = "Inversores"

    def __init__(self, api, runner, session, storage: LocalStorage, parent=None) -> None:
        super().__init__(api, runner, session, parent)
        self.storage = storage
        self.inversor_state: ListState[Inversor] = ListState(page_size=INVESTOR_PAGE_SIZES[1])
        self.pago_state: ListState[PagoInversor] = ListState(page_size=INVESTOR_PAGE_SIZES[1])
        self.tipo_state: ListState[Tipo] = ListState(page_size=10)
        self.regions: list[Region] = []
        self.inversores: dict[str, Inversor] = {}
        self.pagos: dict[str, PagoInversor] = {}
        self.tipos: dict[str, Tipo] = {}

        self.tabs = QTabWidget()
        self.tabs.addTab(self._build_inversores_tab(), "Inversores")
        self.tabs.addTab(self._build_pagos_tab(), "Pagos")
        self.gastos_view = GastosView(api, runner, session)
        self.tabs.addTab(self.gastos_view, "Gastos")
        self.tabs.addTab(self._build_tipos_tab(), "Tipos")
        self.reports_view = InvestorReportsView(api, runner, session)
        self.tabs.addTab(self.reports_view, "Reportes")
        self.root_layout.addWidget(self.tabs, 1)

        saved = self.storage.get(INVESTORS_TAB_KEY)
        if saved in TAB_KEYS:
            self.tabs.setCurrentIndex(TAB_KEYS.index(saved))
        self.tabs.currentChanged.connect(self._on_tab_changed)

        self._render_inversores()
        self._render_pagos()
        self._render_tipos()

    # --- construcción ---

    def _build_inversores_tab(self) -> QWidget:
        tab = QWidget()
        layout = QVBoxLayout(tab)
        bar = QHBoxLayout()
        bar.addWidget(QLabel("Buscar:"))
        self.edt_inversor_search = QLineEdit()
        self.edt_inversor_search.setPlaceholderText("Buscar por nombre...")
        self.edt_inversor_search.textChanged.connect(lambda t: self._set_inversor_filter("q", t))
        bar.addWidget(self.edt_inversor_search, 1)
        self.cmb_region = QComboBox()
        fill_combo(self.cmb_region, [], placeholder="Todas las regiones")
        self.cmb_region.currentIndexChanged.connect(
            lambda _i: self._set_inversor_filter("region", self.cmb_region.currentData())
        )
        bar.addWidget(self.cmb_region)
        self.btn_inversor_add = QPushButton("➕ Nuevo Inversor")
        self.btn_inversor_edit = QPushButton("✏️ Editar")
        self.btn_inversor_delete = QPushButton("🗑️ Eliminar")
        self.btn_inversor_add.clicked.connect(self._add_inversor)
        self.btn_inversor_edit.clicked.connect(self._edit_inversor)
        self.btn_inversor_delete.clicked.connect(self._delete_inversor)
        style_buttons(self.btn_inversor_add, self.btn_inversor_edit, self.btn_inversor_delete)
        for btn in (self.btn_inversor_add, self.btn_inversor_edit, self.btn_inversor_delete):
            bar.addWidget(btn)
        layout.addLayout(bar)

        self.table_inversores = QTableWidget()
        configure_table(self.table_inversores, ["Nombre", "Región", "Cuota mensual", "Moneda"], stretch=0)
        self.table_inversores.itemSelectionChanged.connect(self._on_inversor_selection)
        self.table_inversores.cellDoubleClicked.connect(lambda _r, _c: self._edit_inversor())
        layout.addWidget(self.table_inversores)
        self.pagination_inversores = PaginationBar(INVESTOR_PAGE_SIZES)
        self.pagination_inversores.set_page_size(self.inversor_state.page_size)
        self.pagination_inversores.pageChanged.connect(self._on_inversor_page)
        self.pagination_inversores.pageSizeChanged.connect(self._on_inversor_page_size)
        layout.addWidget(self.pagination_inversores)
        return tab

    def _build_pagos_tab(self) -> QWidget:
        tab = QWidget()
        layout = QVBoxLayout(tab)
        bar = QHBoxLayout()
        self.edt_pago_search = QLineEdit()
        self.edt_pago_search.setPlaceholderText("Buscar por inversor...")
        self.edt_pago_search.textChanged.connect(lambda t: self._set_pago_filter("q", t))
        bar.addWidget(self.edt_pago_search, 1)
        self.cmb_pago_currency = QComboBox()
        fill_combo(self.cmb_pago_currency, CURRENCY_OPTIONS, placeholder="Todas las monedas")
        self.cmb_pago_currency.currentIndexChanged.connect(
            lambda _i: self._set_pago_filter("currency", self.cmb_pago_currency.currentData())
        )
        bar.addWidget(self.cmb_pago_currency)
        self.cmb_pago_tipo = QComboBox()
        fill_combo(self.cmb_pago_tipo, [(tipo_label(True), True), (tipo_label(False), False)],
                   placeholder="Todos los tipos")
        self.cmb_pago_tipo.currentIndexChanged.connect(
            lambda _i: self._set_pago_filter("es_micro", self.cmb_pago_tipo.currentData())
        )
        bar.addWidget(self.cmb_pago_tipo)
        bar.addWidget(QLabel("Desde:"))
        self.date_desde = _date_filter_edit()
        self.date_desde.dateChanged.connect(lambda _d: self._set_pago_filter("desde", _date_value(self.date_desde)))
        bar.addWidget(self.date_desde)
        bar.addWidget(QLabel("Hasta:"))
        self.date_hasta = _date_filter_edit()
        self.date_hasta.dateChanged.connect(lambda _d: self._set_pago_filter("hasta", _date_value(self.date_hasta)))
        bar.addWidget(self.date_hasta)
        layout.addLayout(bar)

        actions = QHBoxLayout()
        actions.addStretch(1)
        self.btn_pago_add = QPushButton("➕ Registrar Pago")
        self.btn_pago_delete = QPushButton("🗑️ Eliminar")
        self.btn_pago_add.clicked.connect(self._add_pago)
        self.btn_pago_delete.clicked.connect(self._delete_pago)
        style_buttons(self.btn_pago_add, self.btn_pago_delete)
        actions.addWidget(self.btn_pago_add)
        actions.addWidget(self.btn_pago_delete)
        layout.addLayout(actions)

        self.table_pagos = QTableWidget()
        configure_table(self.table_pagos, ["Fecha", "Inversor", "Tipo", "Monto", "Moneda"])
        self.table_pagos.itemSelectionChanged.connect(self._on_pago_selection)
        layout.addWidget(self.table_pagos)
        self.pagination_pagos = PaginationBar(INVESTOR_PAGE_SIZES)
        self.pagination_pagos.set_page_size(self.pago_state.page_size)
        self.pagination_pagos.pageChanged.connect(self._on_pago_page)
        self.pagination_pagos.pageSizeChanged.connect(self._on_pago_page_size)
        layout.addWidget(self.pagination_pagos)
        return tab

    def _build_tipos_tab(self) -> QWidget:
        tab = QWidget()
        layout = QVBoxLayout(tab)
        bar = QHBoxLayout()
        bar.addStretch(1)
        self.btn_tipo_add = QPushButton("➕ Nuevo Tipo")
        self.btn_tipo_delete = QPushButton("🗑️ Eliminar")
        self.btn_tipo_add.clicked.connect(self._add_tipo)
        self.btn_tipo_delete.clicked.connect(self._delete_tipo)
        style_buttons(self.btn_tipo_add, self.btn_tipo_delete)
        bar.addWidget(self.btn_tipo_add)
        bar.addWidget(self.btn_tipo_delete)
        layout.addLayout(bar)
        self.table_tipos = QTableWidget()
        configure_table(self.table_tipos, ["Nombre", "Clase", "Descripción"], stretch=2)
        self.table_tipos.itemSelectionChanged.connect(self._on_tipo_selection)
        layout.addWidget(self.table_tipos)
        self.pagination_tipos = PaginationBar()
        self.pagination_tipos.pageChanged.connect(self._on_tipo_page)
        layout.addWidget(self.pagination_tipos)
        return tab

    def _on_tab_changed(self, index: int) -> None:
        if 0 <= index < len(TAB_KEYS):
            self.storage.set(INVESTORS_TAB_KEY, TAB_KEYS[index])

    # --- carga ---

    def fetchers(self):
        return {
            "inversores": self.api.investors.list,
            "pagos": self.api.investors.list_payments,
            "tipos": self.api.investors.list_types,
            "regions": self.api.regions.list,
        }

    def on_loaded(self, results) -> None:
        self.regions = self.value_or(results, "regions", self.regions)
        fill_combo(self.cmb_region, [(r.nombres, r.id) for r in self.regions], placeholder="Todas las regiones")
        inversores = self.value_or(results, "inversores", [])
        pagos = self.value_or(results, "pagos", [])
        tipos = self.value_or(results, "tipos", [])
        self.inversores = {i.id: i for i in inversores}
        self.pagos = {p.id: p for p in pagos}
        self.tipos = {t.id: t for t in tipos}
        # El reporte por inversor busca sobre la misma lista
        self.reports_view.inversores = list(inversores)
        self.inversor_state = self.inversor_state.with_items(inversores)
        self.pago_state = self.pago_state.with_items(
            sorted(pagos, key=lambda p: p.fecha_creacion, reverse=True)
        )
        self.tipo_state = self.tipo_state.with_items(tipos)
        self._render_inversores()
        self._render_pagos()
        self._render_tipos()

    # --- inversores ---

    def _set_inversor_filter(self, name: str, value) -> None:
        self.inversor_state = self.inversor_state.with_filter(name, value)
        self._render_inversores()

    def _on_inversor_page(self, page: int) -> None:
        self.inversor_state = self.inversor_state.with_page(page)
        self._render_inversores()

    def _on_inversor_page_size(self, size: int) -> None:
        self.inversor_state = self.inversor_state.with_page_size(size)
        self._render_inversores()

    def _render_inversores(self) -> None:
        page = self.inversor_state.visible(inversor_matches)
        self.table_inversores.setRowCount(len(page.items))
        for i, inv in enumerate(page.items):
            self.table_inversores.setItem(i, 0, text_item(inv.nombre, key=inv.id))
            self.table_inversores.setItem(i, 1, text_item(inv.nombre_region))
            self.table_inversores.setItem(i, 2, text_item(format_money(inv.monto_mensual_cuota, inv.currency_cuota)))
            self.table_inversores.setItem(i, 3, text_item(currency_name(inv.currency_cuota)))
        self.pagination_inversores.set_page(page)
        self._on_inversor_selection()

    def _selected_inversor(self) -> Inversor | None:
        return self.inversores.get(selected_key(self.table_inversores))

    def _on_inversor_selection(self) -> None:
        has = self._selected_inversor() is not None
        self.btn_inversor_edit.setEnabled(has)
        self.btn_inversor_delete.setEnabled(has)

    def _add_inversor(self) -> None:
        dlg = InversorDialog(self.api, self.runner, self.regions, parent=self)
        if dlg.exec():
            self.success_banner.show_message("Inversor creado correctamente")
            self.reload()

    def _edit_inversor(self) -> None:
        inversor = self._selected_inversor()
        if inversor is None:
            return
        dlg = InversorDialog(self.api, self.runner, self.regions, inversor, parent=self)
        if dlg.exec():
            self.success_banner.show_message("Inversor actualizado correctamente")
            self.reload()

    def _delete_inversor(self) -> None:
        inversor = self._selected_inversor()
        if inversor is None:
            return
        self.confirm_and_delete(
            f"¿Eliminar al inversor \"{inversor.nombre}\"?",
            lambda: self.api.investors.delete(inversor.id),
            "Inversor eliminado correctamente",
        )

    # --- pagos ---

    def _set_pago_filter(self, name: str, value) -> None:
        self.pago_state = self.pago_state.with_filter(name, value)
        self._render_pagos()

    def _on_pago_page(self, page: int) -> None:
        self.pago_state = self.pago_state.with_page(page)
        self._render_pagos()

    def _on_pago_page_size(self, size: int) -> None:
        self.pago_state = self.pago_state.with_page_size(size)
        self._render_pagos()

    def _render_pagos(self) -> None:
        page = self.pago_state.visible(pago_inversor_matches)
        self.table_pagos.setRowCount(len(page.items))
        for i, p in enumerate(page.items):
            nombre = p.nombre_inversor or getattr(self.inversores.get(p.id_inversor), "nombre", "")
            tipo = tipo_label(p.es_microinversionista) if p.es_microinversionista is not None else "—"
            self.table_pagos.setItem(i, 0, text_item(format_datetime(p.fecha_creacion), key=p.id))
            self.table_pagos.setItem(i, 1, text_item(nombre))
            self.table_pagos.setItem(i, 2, text_item(tipo))
            self.table_pagos.setItem(i, 3, text_item(format_money(p.monto, p.currency)))
            self.table_pagos.setItem(i, 4, text_item(currency_name(p.currency)))
        self.pagination_pagos.set_page(page)
        self._on_pago_selection()

    def _on_pago_selection(self) -> None:
        self.btn_pago_delete.setEnabled(selected_key(self.table_pagos) in self.pagos)

    def _add_pago(self) -> None:
        dlg = PagoInversorDialog(self.api, self.runner, list(self.inversores.values()), list(self.tipos.values()),
                                 parent=self)
        if dlg.exec():
            self.success_banner.show_message("Pago registrado correctamente")
            self.reload()

    def _delete_pago(self) -> None:
        pago = self.pagos.get(selected_key(self.table_pagos))
        if pago is None:
            return
        self.confirm_and_delete(
            f"¿Eliminar el pago de {format_money(pago.monto, pago.currency)} de {pago.nombre_inversor}?",
            lambda: self.api.investors.delete_payment(pago.id),
            "Pago eliminado correctamente",
        )

    # --- tipos ---

    def _on_tipo_page(self, page: int) -> None:
        self.tipo_state = self.tipo_state.with_page(page)
        self._render_tipos()

    def _render_tipos(self) -> None:
        page = self.tipo_state.visible(lambda _t, _f: True)
        self.table_tipos.setRowCount(len(page.items))
        for i, t in enumerate(page.items):
            self.table_tipos.setItem(i, 0, text_item(t.nombre, key=t.id))
            self.table_tipos.setItem(i, 1, text_item(t.label))
            self.table_tipos.setItem(i, 2, text_item(t.descripcion))
        self.pagination_tipos.set_page(page)
        self._on_tipo_selection()

    def _on_tipo_selection(self) -> None:
        self.btn_tipo_delete.setEnabled(selected_key(self.table_tipos) in self.tipos)

    def _add_tipo(self) -> None:
        dlg = TipoDialog(self.api, self.runner, parent=self)
        if dlg.exec():
            self.success_banner.show_message("Tipo creado correctamente")
            self.reload()

    def _delete_tipo(self) -> None:
        tipo = self.tipos.get(selected_key(self.table_tipos))
        if tipo is None:
            return
        self.confirm_and_delete(
            f"¿Eliminar el tipo \"{tipo.nombre}\"?",
            lambda: self.api.investors.delete_type(tipo.id),
            "Tipo eliminado correctamente",
        )
