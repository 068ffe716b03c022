from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QComboBox,
    QFileDialog,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QScrollArea,
    QTableWidget,
    QVBoxLayout,
    QWidget,
)
from shiboken6 import isValid

from ..exporting import export_widget_pdf, report_filename
from ..schemas import Conference, ConferenceFinancialReport, Region, ReportPayment
from ..services import report_shaping as shaping
from ..utils.dates import format_date_for_display
from .base_view import ResourceView
from .charts import make_chart_view, set_bars, set_lines, set_pie
from .widgets import KpiCard, configure_table, fill_combo, section_title, style_buttons, text_item


SUMMARY_COLORS = ("#22c55e", "#f97316")


def _money(value: float) -> str:
    return f"S/ {value:,.2f}"


class ConferenceReportsView(ResourceView):
    """Reporte financiero por conferencia (solo Admin)."""

    title = "Reportes"

    def __init__(self, api, runner, session, parent=None) -> None:
        super().__init__(api, runner, session, parent)
        self.conferences: list[Conference] = []
        self.regions: list[Region] = []
        self.report: ConferenceFinancialReport | None = None
        self._report_token = 0

        if not session.is_admin:
            denied = QLabel("Acceso restringido\nSolo los administradores pueden ver los reportes financieros.")
            denied.setAlignment(Qt.AlignmentFlag.AlignCenter)
            self.root_layout.addWidget(denied, 1)
            return

        top_bar = QHBoxLayout()
        top_bar.addWidget(QLabel("Conferencia:"))
        self.cmb_conference = QComboBox()
        fill_combo(self.cmb_conference, [], placeholder="Seleccione una conferencia")
        top_bar.addWidget(self.cmb_conference, 1)
        top_bar.addWidget(QLabel("Región:"))
        self.cmb_region = QComboBox()
        fill_combo(self.cmb_region, [], placeholder="Todas las regiones")
        top_bar.addWidget(self.cmb_region)
        self.btn_pdf = QPushButton("📄 Exportar PDF")
        self.btn_pdf.setEnabled(False)
        self.btn_pdf.clicked.connect(self._export_pdf)
        style_buttons(self.btn_pdf)
        top_bar.addWidget(self.btn_pdf)
        self.root_layout.addLayout(top_bar)
        self.cmb_conference.currentIndexChanged.connect(lambda _i: self.load_report())
        self.cmb_region.currentIndexChanged.connect(lambda _i: self.load_report())

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        self.content = QWidget()
        self.content.setStyleSheet("background-color: #ffffff;")
        self.content_layout = QVBoxLayout(self.content)
        scroll.setWidget(self.content)
        self.root_layout.addWidget(scroll, 1)
        self._build_content()

    def _build_content(self) -> None:
        lay = self.content_layout
        self.lbl_empty = QLabel("Seleccione una conferencia para ver su reporte.")
        self.lbl_empty.setStyleSheet("color: #7f8c8d;")
        lay.addWidget(self.lbl_empty)

        self.report_box = QWidget()
        box = QVBoxLayout(self.report_box)
        self.lbl_title = section_title("")
        self.lbl_info = QLabel("")
        self.lbl_info.setWordWrap(True)
        box.addWidget(self.lbl_title)
        box.addWidget(self.lbl_info)

        cards = QGridLayout()
        self.card_participants = KpiCard("Participantes", "—", "👥", "#2563eb")
        self.card_paid = KpiCard("Monto pagado", "—", "💰", "#16a34a")
        self.card_balance = KpiCard("Pendiente", "—", "⏳", "#f97316")
        self.card_unlinked = KpiCard("Pagos sin participación", "—", "⚠️", "#ef4444")
        for col, card in enumerate((self.card_participants, self.card_paid, self.card_balance, self.card_unlinked)):
            cards.addWidget(card, 0, col)
        box.addLayout(cards)

        charts = QGridLayout()
        self.chart_summary = make_chart_view("Pagado vs pendiente")
        self.chart_regions = make_chart_view("Montos por región")
        self.chart_ranking = make_chart_view("Ranking de regiones por monto pagado")
        charts.addWidget(self.chart_summary, 0, 0)
        charts.addWidget(self.chart_regions, 0, 1)
        charts.addWidget(self.chart_ranking, 1, 0, 1, 2)
        box.addLayout(charts)

        box.addWidget(section_title("Detalle por región"))
        self.regions_box = QVBoxLayout()
        box.addLayout(self.regions_box)

        box.addWidget(section_title("Pagos sin participación"))
        self.table_unlinked = QTableWidget()
        configure_table(self.table_unlinked, ["DNI", "Monto", "Comprobante"], stretch=2)
        box.addWidget(self.table_unlinked)
        box.addWidget(section_title("Pagos fuera del filtro"))
        self.table_outside = QTableWidget()
        configure_table(self.table_outside, ["DNI", "Monto", "Comprobante"], stretch=2)
        box.addWidget(self.table_outside)

        self.report_box.hide()
        lay.addWidget(self.report_box)
        lay.addStretch(1)

    # --- datos de referencia ---

    def fetchers(self):
        if not self.session.is_admin:
            return {}
        return {"conferences": self.api.conferences.list, "regions": self.api.regions.list}

    def on_loaded(self, results) -> None:
        if not self.session.is_admin:
            return
        conferences = self.value_or(results, "conferences", self.conferences)
        self.conferences = sorted(conferences, key=lambda c: c.nombres.lower())
        self.regions = self.value_or(results, "regions", self.regions)
        fill_combo(self.cmb_conference, [(c.nombres, c.id) for c in self.conferences],
                   placeholder="Seleccione una conferencia")
        fill_combo(self.cmb_region, [(r.nombres, r.id) for r in self.regions], placeholder="Todas las regiones")

    # --- reporte ---

    def load_report(self) -> None:
        conference_id = self.cmb_conference.currentData()
        region_id = self.cmb_region.currentData()
        self._report_token += 1
        token = self._report_token
        if conference_id is None:
            self._show_report(None)
            return
        self._set_loading(True)
        self.runner.submit(
            lambda: self.api.reports.conference(conference_id, region_id),
            lambda res: self._on_report(token, res),
        )

    def _on_report(self, token: int, result) -> None:
        if not isValid(self) or token != self._report_token:
            return
        self._set_loading(False)
        if not result.ok:
            self.error_banner.show_message(result.error.message)
            self._show_report(None)
            return
        self.error_banner.clear_message()
        self._show_report(result.value)

    def _show_report(self, report: ConferenceFinancialReport | None) -> None:
        self.report = report
        self.btn_pdf.setEnabled(report is not None)
        self.report_box.setVisible(report is not None)
        self.lbl_empty.setVisible(report is None)
        if report is None:
            return

        conf = report.conferencia
        self.lbl_title.setText(conf.nombres)
        self.lbl_info.setText(
            f"Región: {conf.region_conferencia} · "
            f"{format_date_for_display(conf.fecha_inicio)} al {format_date_for_display(conf.fecha_fin)} · "
            f"Inscripciones hasta {format_date_for_display(conf.fecha_fin_ins)}\n"
            f"Capacidad: {conf.capacidad} · Registrados: {conf.participantes_registrados} · "
            f"Disponibles: {conf.capacidad_disponible}\n"
            f"Total esperado capacidad: {_money(conf.total_esperado_capacidad)} · "
            f"Capacidad restante: {_money(conf.diferencia_capacidad)}"
        )

        resumen = report.resumen
        self.card_participants.update_value(str(resumen.total_participantes))
        self.card_paid.update_value(_money(resumen.monto_pagado), f"Esperado: {_money(resumen.monto_esperado)}")
        self.card_balance.title_lbl.setText(shaping.balance_label(resumen.diferencia))
        self.card_balance.update_value(_money(abs(resumen.diferencia)))
        self.card_unlinked.update_value(
            str(len(report.pagos_sin_participacion)), _money(shaping.unlinked_payments_total(report))
        )

        set_pie(self.chart_summary.chart(), [(s.name, s.value) for s in shaping.amount_summary(report)],
                colors=SUMMARY_COLORS)
        bars = shaping.region_bars(report)
        set_bars(self.chart_regions.chart(), [b.region for b in bars], {
            "Monto esperado": [b.esperado for b in bars],
            "Monto pagado": [b.pagado for b in bars],
            "Diferencia": [b.diferencia for b in bars],
        }, colors=("#60a5fa", "#22c55e", "#f97316"))
        ranking = shaping.region_ranking(report)
        set_lines(self.chart_ranking.chart(), [r.name for r in ranking], {
            "Monto esperado": [r.esperado for r in ranking],
            "Monto pagado": [r.pagado for r in ranking],
        }, colors=("#60a5fa", "#22c55e"))

        self._render_regions(report)
        self._fill_payments(self.table_unlinked, report.pagos_sin_participacion)
        self._fill_payments(self.table_outside, report.pagos_fuera_del_filtro)

    def _render_regions(self, report: ConferenceFinancialReport) -> None:
        while self.regions_box.count():
            child = self.regions_box.takeAt(0)
            if child.widget():
                child.widget().deleteLater()
        for region in report.regiones:
            header = QLabel(
                f"<b>{region.region_nombre}</b> · {region.total_participantes} participantes · "
                f"{_money(region.monto_pagado)} pagado · Esperado: {_money(region.monto_esperado)} · "
                f"{shaping.balance_label(region.diferencia)}: {_money(abs(region.diferencia))}"
            )
            self.regions_box.addWidget(header)
            table = QTableWidget()
            configure_table(table, ["DNI", "Nombre", "Servicio", "Registro", "Almuerzo", "Cena",
                                    "Esperado", "Pagado", "Saldo"])
            table.setRowCount(len(region.participantes))
            for i, p in enumerate(region.participantes):
                table.setItem(i, 0, text_item(p.dni_usuario))
                table.setItem(i, 1, text_item(p.nombre_usuario))
                table.setItem(i, 2, text_item(p.servicio))
                table.setItem(i, 3, text_item(format_date_for_display(p.fecha_registro)))
                table.setItem(i, 4, text_item("Sí" if p.incluye_almuerzo else "No", align_center=True))
                table.setItem(i, 5, text_item("Sí" if p.incluye_cena else "No", align_center=True))
                table.setItem(i, 6, text_item(_money(p.monto_esperado)))
                table.setItem(i, 7, text_item(_money(p.total_pagado)))
                table.setItem(i, 8, text_item(f"{shaping.balance_label(p.diferencia)} {_money(abs(p.diferencia))}"))
            table.setMinimumHeight(min(60 + 30 * len(region.participantes), 320))
            self.regions_box.addWidget(table)

    @staticmethod
    def _fill_payments(table: QTableWidget, payments: tuple[ReportPayment, ...]) -> None:
        table.setRowCount(len(payments))
        for i, p in enumerate(payments):
            table.setItem(i, 0, text_item(p.dni_usuario))
            table.setItem(i, 1, text_item(_money(p.monto)))
            table.setItem(i, 2, text_item(p.enlace))

    def _export_pdf(self) -> None:
        if self.report is None:
            return
        region_name = self.cmb_region.currentText() if self.cmb_region.currentData() else None
        default = report_filename(self.report.conferencia.nombres, region_name)
        path, _ = QFileDialog.getSaveFileName(self, "Exportar reporte", default, "PDF (*.pdf)")
        if not path:
            return
        export_widget_pdf(self.content, path)
        self.success_banner.show_message(f"Reporte exportado a {path}")
