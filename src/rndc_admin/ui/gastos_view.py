from __future__ import annotations

from datetime import date

from PySide6.QtWidgets import QComboBox, QHBoxLayout, QLabel, QPushButton, QTableWidget

from ..schemas import CURRENCY_DOLARES, CURRENCY_EUROS, CURRENCY_SOLES, GASTO_CATEGORIAS, Gasto, GastoTotals, format_money
from ..services.report_shaping import MESES
from ..utils.dates import format_datetime
from ..utils.listing import ListState
from .base_view import ResourceView
from .gasto_dialog import GastoDialog
from .widgets import KpiCard, PaginationBar, configure_table, fill_combo, selected_key, style_buttons, text_item


def year_options(today: date | None = None, back: int = 4) -> list[tuple[str, int]]:
    today = today or date.today()
    return [(str(y), y) for y in range(today.year, today.year - back - 1, -1)]


class GastosView(ResourceView):
    """Gastos con filtros de mes, año y categoría resueltos por la API."""

    title = "Gastos"

    def __init__(self, api, runner, session, parent=None) -> None:
        super().__init__(api, runner, session, parent)
        self.state: ListState[Gasto] = ListState(page_size=10)
        self._by_id: dict[str, Gasto] = {}

        top_bar = QHBoxLayout()
        self.cmb_mes = QComboBox()
        fill_combo(self.cmb_mes, [(name, i) for i, name in enumerate(MESES, start=1)], placeholder="Todos los meses")
        self.cmb_anio = QComboBox()
        fill_combo(self.cmb_anio, year_options(), placeholder="Todos los años")
        self.cmb_categoria = QComboBox()
        fill_combo(self.cmb_categoria, [(c, c) for c in GASTO_CATEGORIAS], placeholder="Todas las categorías")
        for label, combo in (("Mes:", self.cmb_mes), ("Año:", self.cmb_anio), ("Categoría:", self.cmb_categoria)):
            top_bar.addWidget(QLabel(label))
            top_bar.addWidget(combo)
            combo.currentIndexChanged.connect(lambda _i: self.reload())
        top_bar.addStretch(1)

        self.btn_add = QPushButton("➕ Registrar Gasto")
        self.btn_delete = QPushButton("🗑️ Eliminar")
        self.btn_add.clicked.connect(self._add)
        self.btn_delete.clicked.connect(self._delete_selected)
        style_buttons(self.btn_add, self.btn_delete)
        top_bar.addWidget(self.btn_add)
        top_bar.addWidget(self.btn_delete)
        self.root_layout.addLayout(top_bar)

        totals = QHBoxLayout()
        self.card_soles = KpiCard("Total Soles", "—", "💵", "#16a34a")
        self.card_dolares = KpiCard("Total Dólares", "—", "💲", "#2563eb")
        self.card_euros = KpiCard("Total Euros", "—", "💶", "#9333ea")
        for card in (self.card_soles, self.card_dolares, self.card_euros):
            totals.addWidget(card)
        self.root_layout.addLayout(totals)

        self.table = QTableWidget()
        configure_table(self.table, ["Fecha", "Descripción", "Categoría", "Monto"])
        self.table.itemSelectionChanged.connect(self._on_selection_changed)
        self.root_layout.addWidget(self.table, 1)
        self.pagination = PaginationBar()
        self.pagination.pageChanged.connect(self._on_page)
        self.root_layout.addWidget(self.pagination)
        self._render()

    @property
    def query(self) -> tuple[int | None, int | None, str | None]:
        return self.cmb_mes.currentData(), self.cmb_anio.currentData(), self.cmb_categoria.currentData()

    def fetchers(self):
        mes, anio, categoria = self.query
        return {
            "gastos": lambda: self.api.expenses.list(mes, anio, categoria),
            "totals": lambda: self.api.expenses.totals(categoria),
        }

    def on_loaded(self, results) -> None:
        gastos = self.value_or(results, "gastos", [])
        self._by_id = {g.id: g for g in gastos}
        self.state = self.state.with_items(gastos).with_page(1)
        totals: GastoTotals | None = self.value_or(results, "totals", None)
        if totals is None:
            for card in (self.card_soles, self.card_dolares, self.card_euros):
                card.update_value("—")
        else:
            self.card_soles.update_value(format_money(totals.total_soles, CURRENCY_SOLES))
            self.card_dolares.update_value(format_money(totals.total_dolares, CURRENCY_DOLARES))
            self.card_euros.update_value(format_money(totals.total_euros, CURRENCY_EUROS))
        self._render()

    def _on_page(self, page: int) -> None:
        self.state = self.state.with_page(page)
        self._render()

    def _render(self) -> None:
        page = self.state.visible(lambda _g, _f: True)
        self.table.setRowCount(len(page.items))
        for i, g in enumerate(page.items):
            self.table.setItem(i, 0, text_item(format_datetime(g.fecha), key=g.id))
            self.table.setItem(i, 1, text_item(g.descripcion))
            self.table.setItem(i, 2, text_item(g.categoria))
            self.table.setItem(i, 3, text_item(format_money(g.monto, g.currency)))
        self.pagination.set_page(page)
        self._on_selection_changed()

    def _on_selection_changed(self) -> None:
        self.btn_delete.setEnabled(selected_key(self.table) in self._by_id)

    def _add(self) -> None:
        dlg = GastoDialog(self.api, self.runner, parent=self)
        if dlg.exec():
            self.success_banner.show_message("Gasto registrado correctamente")
            self.reload()

    def _delete_selected(self) -> None:
        gasto = self._by_id.get(selected_key(self.table))
        if gasto is None:
            return
        self.confirm_and_delete(
            f"¿Eliminar el gasto \"{gasto.descripcion or gasto.categoria}\" de {format_money(gasto.monto, gasto.currency)}?",
            lambda: self.api.expenses.delete(gasto.id),
            "Gasto eliminado correctamente",
        )
