"""Reportes de inversores: por inversor, general mensual y gastos vs ingresos.

Cada sub-pestaña pide su reporte al pulsar "Generar". Las respuestas llevan
un número de petición por sub-pestaña y solo se pinta la última.
"""
from __future__ import annotations

from datetime import date
from typing import Callable

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QComboBox,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QTableWidget,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)
from shiboken6 import isValid

from ..schemas import (
    CURRENCY_DOLARES,
    CURRENCY_EUROS,
    CURRENCY_SOLES,
    Inversor,
    ReporteGastosIngresos,
    ReporteGeneral,
    ReporteInversor,
    format_money,
)
from ..services import report_shaping as shaping
from ..services.api_client import Result
from ..utils.listing import matches_text
from .base_view import ResourceView
from .charts import make_chart_view, set_bars, set_colored_bars, set_pie
from .gastos_view import year_options
from .widgets import KpiCard, configure_table, fill_combo, section_title, style_buttons, text_item

MAX_SEARCH_RESULTS = 10
TIPO_FILTROS = ("Ambos", "Microinversionista", "Inversionista")
CURRENCIES = ("Soles", "Dólares", "Euros")


def search_inversores(inversores: list[Inversor], query: str, limit: int = MAX_SEARCH_RESULTS) -> list[Inversor]:
    if not query.strip():
        return []
    return [i for i in inversores if matches_text(query, i.nombre, i.nombre_region)][:limit]


def _period_combos(layout: QHBoxLayout, with_all: bool) -> tuple[QComboBox, QComboBox]:
    today = date.today()
    cmb_mes = QComboBox()
    fill_combo(cmb_mes, [(name, i) for i, name in enumerate(shaping.MESES, start=1)],
               placeholder="Todos los meses" if with_all else None)
    cmb_anio = QComboBox()
    fill_combo(cmb_anio, year_options(today), placeholder="Todos los años" if with_all else None)
    if not with_all:
        cmb_mes.setCurrentIndex(today.month - 1)
    layout.addWidget(QLabel("Mes:"))
    layout.addWidget(cmb_mes)
    layout.addWidget(QLabel("Año:"))
    layout.addWidget(cmb_anio)
    return cmb_mes, cmb_anio


class InvestorReportsView(ResourceView):
    title = "Reportes de inversores"

    def __init__(self, api, runner, session, parent=None) -> None:
        super().__init__(api, runner, session, parent)
        self.inversores: list[Inversor] = []
        self.selected_inversor: Inversor | None = None
        self._tokens: dict[str, int] = {"inversor": 0, "general": 0, "gastos": 0}

        self.tabs = QTabWidget()
        self.tabs.addTab(self._build_inversor_tab(), "Por inversor")
        self.tabs.addTab(self._build_general_tab(), "General mensual")
        self.tabs.addTab(self._build_gastos_tab(), "Gastos vs ingresos")
        self.root_layout.addWidget(self.tabs, 1)

    # --- construcción ---

    def _build_inversor_tab(self) -> QWidget:
        tab = QWidget()
        layout = QVBoxLayout(tab)
        bar = QHBoxLayout()
        self.edt_inversor = QLineEdit()
        self.edt_inversor.setPlaceholderText("Buscar inversor por nombre o región...")
        self.edt_inversor.textEdited.connect(self._on_inversor_search)
        bar.addWidget(self.edt_inversor, 1)
        self.cmb_inv_mes, self.cmb_inv_anio = _period_combos(bar, with_all=True)
        self.btn_inversor = QPushButton("📊 Generar")
        self.btn_inversor.clicked.connect(self.load_inversor_report)
        style_buttons(self.btn_inversor)
        bar.addWidget(self.btn_inversor)
        layout.addLayout(bar)

        self.list_inversores = QListWidget()
        self.list_inversores.setMaximumHeight(160)
        self.list_inversores.hide()
        self.list_inversores.itemClicked.connect(self._on_inversor_picked)
        layout.addWidget(self.list_inversores)

        self.inversor_box = QWidget()
        box = QVBoxLayout(self.inversor_box)
        header = QHBoxLayout()
        self.lbl_inversor = section_title("")
        self.lbl_estado = QLabel("")
        header.addWidget(self.lbl_inversor)
        header.addWidget(self.lbl_estado)
        header.addStretch(1)
        box.addLayout(header)
        cards = QGridLayout()
        self.card_inv_soles = KpiCard("Total Soles", "—", "💵", "#16a34a")
        self.card_inv_dolares = KpiCard("Total Dólares", "—", "💲", "#2563eb")
        self.card_inv_euros = KpiCard("Total Euros", "—", "💶", "#9333ea")
        for col, card in enumerate((self.card_inv_soles, self.card_inv_dolares, self.card_inv_euros)):
            cards.addWidget(card, 0, col)
        box.addLayout(cards)
        charts = QGridLayout()
        self.chart_distribution = make_chart_view("Distribución de pagos")
        self.chart_currency = make_chart_view("Montos por moneda")
        self.chart_compliance = make_chart_view("Cumplimiento de cuota (%)")
        charts.addWidget(self.chart_distribution, 0, 0)
        charts.addWidget(self.chart_currency, 0, 1)
        charts.addWidget(self.chart_compliance, 1, 0, 1, 2)
        box.addLayout(charts)
        self.inversor_box.hide()
        layout.addWidget(self.inversor_box, 1)
        return tab

    def _build_general_tab(self) -> QWidget:
        tab = QWidget()
        layout = QVBoxLayout(tab)
        bar = QHBoxLayout()
        self.cmb_gen_mes, self.cmb_gen_anio = _period_combos(bar, with_all=False)
        bar.addWidget(QLabel("Tipo:"))
        self.cmb_gen_tipo = QComboBox()
        fill_combo(self.cmb_gen_tipo, [(t, t) for t in TIPO_FILTROS])
        bar.addWidget(self.cmb_gen_tipo)
        bar.addStretch(1)
        self.btn_general = QPushButton("📊 Generar")
        self.btn_general.clicked.connect(self.load_general_report)
        style_buttons(self.btn_general)
        bar.addWidget(self.btn_general)
        layout.addLayout(bar)

        self.general_box = QWidget()
        box = QVBoxLayout(self.general_box)
        cards = QGridLayout()
        self.card_gen = {
            "Soles": KpiCard("Soles", "—", "💵", "#16a34a"),
            "Dólares": KpiCard("Dólares", "—", "💲", "#2563eb"),
            "Euros": KpiCard("Euros", "—", "💶", "#9333ea"),
        }
        for col, card in enumerate(self.card_gen.values()):
            cards.addWidget(card, 0, col)
        box.addLayout(cards)
        charts = QGridLayout()
        self.chart_evolution = make_chart_view("Evolución mensual")
        self.chart_change = make_chart_view("Cambio porcentual (%)")
        charts.addWidget(self.chart_evolution, 0, 0)
        charts.addWidget(self.chart_change, 0, 1)
        box.addLayout(charts)
        self.general_box.hide()
        layout.addWidget(self.general_box, 1)
        return tab

    def _build_gastos_tab(self) -> QWidget:
        tab = QWidget()
        layout = QVBoxLayout(tab)
        bar = QHBoxLayout()
        bar.addWidget(QLabel("Periodo:"))
        self.cmb_gi_modo = QComboBox()
        fill_combo(self.cmb_gi_modo, [("Mensual", "mensual"), ("Global", "global")])
        bar.addWidget(self.cmb_gi_modo)
        self.cmb_gi_mes, self.cmb_gi_anio = _period_combos(bar, with_all=False)
        self.cmb_gi_modo.currentIndexChanged.connect(self._on_gi_mode_changed)
        bar.addStretch(1)
        self.btn_gastos = QPushButton("📊 Generar")
        self.btn_gastos.clicked.connect(self.load_gastos_report)
        style_buttons(self.btn_gastos)
        bar.addWidget(self.btn_gastos)
        layout.addLayout(bar)

        self.gastos_box = QWidget()
        box = QVBoxLayout(self.gastos_box)
        self.lbl_alerta = QLabel("")
        self.lbl_alerta.setStyleSheet(
            "background-color: #fef3c7; color: #92400e; border: 1px solid #fcd34d; "
            "border-radius: 6px; padding: 8px 12px;"
        )
        self.lbl_alerta.hide()
        box.addWidget(self.lbl_alerta)
        self.lbl_estado_fin = QLabel("")
        box.addWidget(self.lbl_estado_fin)
        cards = QGridLayout()
        self.card_ingresos = KpiCard("Ingresos", "—", "📈", "#16a34a")
        self.card_gastos = KpiCard("Gastos", "—", "📉", "#ef4444")
        self.card_balance = KpiCard("Balance total", "—", "⚖️", "#2563eb")
        for col, card in enumerate((self.card_ingresos, self.card_gastos, self.card_balance)):
            cards.addWidget(card, 0, col)
        box.addLayout(cards)
        charts = QGridLayout()
        self.chart_income = make_chart_view("Ingresos vs gastos")
        self.chart_categories = make_chart_view("Gastos por categoría (S/)")
        charts.addWidget(self.chart_income, 0, 0)
        charts.addWidget(self.chart_categories, 0, 1)
        box.addLayout(charts)
        box.addWidget(section_title("Detalle de ingresos"))
        self.table_detalle = QTableWidget()
        configure_table(self.table_detalle, ["Tipo de inversor", "Soles", "Dólares", "N° pagos"], stretch=0)
        box.addWidget(self.table_detalle)
        self.gastos_box.hide()
        layout.addWidget(self.gastos_box, 1)
        return tab

    # --- datos ---

    def fetchers(self):
        return {"inversores": self.api.investors.list}

    def on_loaded(self, results) -> None:
        self.inversores = self.value_or(results, "inversores", self.inversores)

    def _request(self, name: str, fn: Callable[[], Result], render: Callable) -> None:
        self._tokens[name] += 1
        token = self._tokens[name]
        self._set_loading(True)

        def done(result: Result) -> None:
            if not isValid(self) or token != self._tokens[name]:
                return
            self._set_loading(False)
            if not result.ok:
                self.error_banner.show_message(result.error.message)
                return
            self.error_banner.clear_message()
            render(result.value)

        self.runner.submit(fn, done)

    # --- por inversor ---

    def _on_inversor_search(self, text: str) -> None:
        self.selected_inversor = None
        self.list_inversores.clear()
        found = search_inversores(self.inversores, text)
        for inv in found:
            item = QListWidgetItem(f"{inv.nombre} · {inv.nombre_region}")
            item.setData(Qt.ItemDataRole.UserRole, inv.id)
            self.list_inversores.addItem(item)
        self.list_inversores.setVisible(bool(found))

    def _on_inversor_picked(self, item: QListWidgetItem) -> None:
        inversor_id = item.data(Qt.ItemDataRole.UserRole)
        self.selected_inversor = next((i for i in self.inversores if i.id == inversor_id), None)
        if self.selected_inversor:
            self.edt_inversor.setText(self.selected_inversor.nombre)
        self.list_inversores.hide()

    def load_inversor_report(self) -> None:
        inversor = self.selected_inversor
        if inversor is None:
            self.error_banner.show_message("Seleccione un inversor.")
            return
        mes, anio = self.cmb_inv_mes.currentData(), self.cmb_inv_anio.currentData()
        self._request("inversor", lambda: self.api.investors.report_for(inversor.id, mes, anio),
                      self._render_inversor)

    def _render_inversor(self, report: ReporteInversor) -> None:
        self.inversor_box.show()
        self.lbl_inversor.setText(f"{report.nombre_inversor} · {report.nombre_region}")
        fg, bg = shaping.estado_colors(report.estado)
        self.lbl_estado.setText(report.estado)
        self.lbl_estado.setStyleSheet(
            f"color: {fg}; background-color: {bg}; border-radius: 10px; padding: 4px 10px; font-weight: bold;"
        )
        self.card_inv_soles.update_value(
            format_money(report.total_soles, CURRENCY_SOLES),
            f"Esperado {format_money(report.monto_esperado_soles, CURRENCY_SOLES)} · "
            f"Diferencia {format_money(report.diferencia_soles, CURRENCY_SOLES)}",
        )
        self.card_inv_dolares.update_value(
            format_money(report.total_dolares, CURRENCY_DOLARES),
            f"Esperado {format_money(report.monto_esperado_dolares, CURRENCY_DOLARES)} · "
            f"Diferencia {format_money(report.diferencia_dolares, CURRENCY_DOLARES)}",
        )
        self.card_inv_euros.update_value(format_money(report.total_euros, CURRENCY_EUROS))

        set_pie(self.chart_distribution.chart(), [(s.name, s.value) for s in shaping.payment_distribution(report)])
        amounts = shaping.amounts_by_currency(report)
        set_bars(self.chart_currency.chart(), [s.name for s in amounts], {"Monto": [s.value for s in amounts]})
        set_colored_bars(self.chart_compliance.chart(),
                         [(b.name, b.cumplimiento, b.color) for b in shaping.compliance_bars(report)])

    # --- general mensual ---

    def load_general_report(self) -> None:
        mes, anio = self.cmb_gen_mes.currentData(), self.cmb_gen_anio.currentData()
        tipo = self.cmb_gen_tipo.currentData()
        self._request("general", lambda: self.api.investors.general_report(mes, anio, tipo), self._render_general)

    def _render_general(self, report: ReporteGeneral) -> None:
        self.general_box.show()
        current = {"Soles": (report.total_soles, CURRENCY_SOLES, report.porcentaje_cambio_soles),
                   "Dólares": (report.total_dolares, CURRENCY_DOLARES, report.porcentaje_cambio_dolares),
                   "Euros": (report.total_euros, CURRENCY_EUROS, report.porcentaje_cambio_euros)}
        for name, (total, currency, change) in current.items():
            hint = "Sin datos del mes anterior" if change is None else f"{shaping.change_arrow(change)} {change:.2f}%"
            self.card_gen[name].update_value(format_money(total, currency), hint)

        evolution = shaping.monthly_evolution(report)
        set_bars(self.chart_evolution.chart(), list(CURRENCIES),
                 {row.name: [row.values[c] for c in CURRENCIES] for row in evolution},
                 colors=("#94a3b8", "#3b82f6"))
        set_colored_bars(self.chart_change.chart(), [
            (s.name, s.value, shaping.COLOR_OK if s.value >= 0 else shaping.COLOR_BAD)
            for s in shaping.percentage_change(report)
        ])

    # --- gastos vs ingresos ---

    def _on_gi_mode_changed(self, _index: int) -> None:
        monthly = self.cmb_gi_modo.currentData() == "mensual"
        self.cmb_gi_mes.setEnabled(monthly)
        self.cmb_gi_anio.setEnabled(monthly)

    def load_gastos_report(self) -> None:
        if self.cmb_gi_modo.currentData() == "global":
            mes = anio = None
        else:
            mes, anio = self.cmb_gi_mes.currentData(), self.cmb_gi_anio.currentData()
        self._request("gastos", lambda: self.api.investors.expenses_income_report(mes, anio), self._render_gastos)

    def _render_gastos(self, report: ReporteGastosIngresos) -> None:
        self.gastos_box.show()
        self.lbl_alerta.setText(f"⚠️ {report.alerta_consumo_soles}")
        self.lbl_alerta.setVisible(bool(report.alerta_consumo_soles))
        self.lbl_estado_fin.setText(f"Estado financiero: <b>{report.estado_financiero or '—'}</b>")
        self.card_ingresos.update_value(
            format_money(report.total_ingresos_soles, CURRENCY_SOLES),
            format_money(report.total_ingresos_dolares, CURRENCY_DOLARES),
        )
        self.card_gastos.update_value(
            format_money(report.total_gastos_soles, CURRENCY_SOLES),
            format_money(report.total_gastos_dolares, CURRENCY_DOLARES),
        )
        self.card_balance.update_value(format_money(report.balance_total_soles, CURRENCY_SOLES))

        rows = shaping.income_vs_expenses(report)
        set_bars(self.chart_income.chart(), [r.name for r in rows], {
            "Soles": [r.values["Soles"] for r in rows],
            "Dólares": [r.values["Dólares"] for r in rows],
        }, colors=("#16a34a", "#2563eb"))
        set_pie(self.chart_categories.chart(), [(s.name, s.value) for s in shaping.expenses_by_category(report)])

        self.table_detalle.setRowCount(len(report.detalle_ingresos))
        for i, d in enumerate(report.detalle_ingresos):
            self.table_detalle.setItem(i, 0, text_item(d.tipo_inversor))
            self.table_detalle.setItem(i, 1, text_item(format_money(d.monto_soles, CURRENCY_SOLES)))
            self.table_detalle.setItem(i, 2, text_item(format_money(d.monto_dolares, CURRENCY_DOLARES)))
            self.table_detalle.setItem(i, 3, text_item(d.numero_pagos, align_center=True))
