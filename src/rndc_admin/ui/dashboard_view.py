from __future__ import annotations

from dataclasses import dataclass
from html import escape

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QFont
from PySide6.QtWidgets import QFrame, QGridLayout, QHBoxLayout, QLabel, QPushButton, QVBoxLayout

from ..schemas import Conference, Participation, Payment, UsersTotalReport
from ..utils.dates import format_datetime
from .base_view import ResourceView
from .charts import make_chart_view, set_bars
from .widgets import KpiCard, section_title, style_buttons


@dataclass(frozen=True)
class ActivityItem:
    when: str
    title: str
    description: str
    icon: str


def recent_activity(conferences: list[Conference], participations: list[Participation],
                    payments: list[Payment], limit: int = 6) -> list[ActivityItem]:
    """Últimos movimientos a partir de las listas ya cargadas, más recientes primero."""
    items: list[ActivityItem] = []
    for c in conferences:
        if c.fecha_inicio:
            items.append(ActivityItem(c.fecha_inicio, "Conferencia programada",
                                      f"{c.nombres} · {c.nombre_region}", "📅"))
    for p in participations:
        if p.fecha:
            items.append(ActivityItem(p.fecha, "Nueva participación",
                                      f"{p.nombre_usuario} se inscribió en {p.nombre_conferencia}", "✅"))
    for p in payments:
        if p.fecha:
            monto = f" de S/ {p.monto:.2f}" if p.monto is not None else ""
            items.append(ActivityItem(p.fecha, "Pago registrado",
                                      f"{p.nombre_usuario or p.dni_usuario} registró un pago{monto}", "💳"))
    items.sort(key=lambda a: a.when, reverse=True)
    return items[:limit]


class _SectionError(QLabel):
    def __init__(self) -> None:
        super().__init__("")
        self.setStyleSheet("color: #b91c1c; font-size: 11px;")
        self.hide()

    def set_error(self, result) -> None:
        failed = result is not None and not result.ok
        self.setText(result.error.message if failed else "")
        self.setVisible(failed)


class DashboardView(ResourceView):
    """Resumen general: cada sección se pinta con lo que llegó y muestra su propio error."""

    title = "Dashboard"
    navigateRequested = Signal(str)

    def __init__(self, api, runner, session, parent=None) -> None:
        super().__init__(api, runner, session, parent)
        # Los errores se muestran por sección
        self.error_banner.hide()

        welcome = QLabel(f"Bienvenido, {session.nombres or session.dni}")
        welcome.setFont(QFont("Segoe UI", 18, QFont.Weight.Bold))
        welcome.setStyleSheet("color: #2c3e50;")
        subtitle = QLabel("Resumen de la actividad del sistema de conferencias")
        subtitle.setStyleSheet("color: #7f8c8d;")
        self.root_layout.addWidget(welcome)
        self.root_layout.addWidget(subtitle)

        grid = QGridLayout()
        grid.setSpacing(15)
        self.card_conferences = KpiCard("Total Conferencias", "—", "📅", "#2563eb")
        self.card_users = KpiCard("Usuarios Registrados", "—", "👥", "#16a34a")
        self.card_participations = KpiCard("Participaciones", "—", "✅", "#9333ea")
        self.card_payments = KpiCard("Pagos Procesados", "—", "💳", "#ea580c")
        self.section_errors = {key: _SectionError() for key in
                               ("conferences", "users_total", "participants", "payments", "activity")}
        for col, (card, key) in enumerate([
            (self.card_conferences, "conferences"),
            (self.card_users, "users_total"),
            (self.card_participations, "participants"),
            (self.card_payments, "payments"),
        ]):
            grid.addWidget(card, 0, col)
            grid.addWidget(self.section_errors[key], 1, col)
        self.root_layout.addLayout(grid)

        body = QHBoxLayout()
        body.setSpacing(15)

        activity_frame = QFrame()
        activity_frame.setStyleSheet("QFrame { background-color: white; border-radius: 12px; }")
        self.activity_layout = QVBoxLayout(activity_frame)
        self.activity_layout.addWidget(section_title("Actividad Reciente"))
        self.activity_layout.addWidget(self.section_errors["activity"])
        self.activity_list = QVBoxLayout()
        self.activity_layout.addLayout(self.activity_list)
        self.activity_layout.addStretch(1)
        body.addWidget(activity_frame, 2)

        side = QVBoxLayout()
        side.addWidget(section_title("Usuarios por región"))
        self.chart_view = make_chart_view(min_height=220)
        self.chart = self.chart_view.chart()
        side.addWidget(self.chart_view, 1)

        side.addWidget(section_title("Acciones Rápidas"))
        self.quick_buttons: dict[str, QPushButton] = {}
        actions = [("usuarios", "👥 Gestionar Usuarios"), ("participaciones", "✅ Registrar Participación"),
                   ("pagos", "💳 Registrar Pago")]
        if session.is_admin:
            actions.insert(0, ("conferencias", "📅 Nueva Conferencia"))
            actions.append(("reportes", "📊 Ver Reportes"))
        for key, text in actions:
            btn = QPushButton(text)
            style_buttons(btn)
            btn.clicked.connect(lambda _checked=False, k=key: self.navigateRequested.emit(k))
            side.addWidget(btn)
            self.quick_buttons[key] = btn
        body.addLayout(side, 1)
        self.root_layout.addLayout(body, 1)

    def fetchers(self):
        return {
            "conferences": self.api.conferences.list,
            "users_total": self.api.reports.users_total,
            "participants": self.api.reports.participants,
            "payments": self.api.payments.list,
            "participations": self.api.participations.list,
        }

    def on_loaded(self, results) -> None:
        self.error_banner.hide()
        for key in ("conferences", "users_total", "participants", "payments"):
            self.section_errors[key].set_error(results.get(key))

        conferences = self.value_or(results, "conferences", None)
        self.card_conferences.update_value(str(len(conferences)) if conferences is not None else "—",
                                           "Conferencias programadas")
        users_total: UsersTotalReport | None = self.value_or(results, "users_total", None)
        self.card_users.update_value(str(users_total.total_general) if users_total else "—",
                                     "Usuarios en el sistema")
        participants = self.value_or(results, "participants", None)
        if participants is not None:
            self.card_participations.update_value(
                str(participants.total_participaciones),
                f"{participants.total_participantes_unicos} participantes únicos",
            )
        else:
            self.card_participations.update_value("—")
        payments = self.value_or(results, "payments", None)
        self.card_payments.update_value(str(len(payments)) if payments is not None else "—",
                                        "Transacciones registradas")

        participations_res = results.get("participations")
        self.section_errors["activity"].set_error(participations_res)
        self._render_activity(recent_activity(
            conferences or [], self.value_or(results, "participations", []), payments or [],
        ))
        self._render_chart(users_total)

    def _render_activity(self, items: list[ActivityItem]) -> None:
        while self.activity_list.count():
            child = self.activity_list.takeAt(0)
            if child.widget():
                child.widget().deleteLater()
        if not items:
            empty = QLabel("Sin actividad reciente")
            empty.setStyleSheet("color: #7f8c8d;")
            self.activity_list.addWidget(empty)
            return
        for item in items:
            lbl = QLabel(f"{item.icon}  <b>{escape(item.title)}</b><br>"
                         f"<span style='color:#555'>{escape(item.description)}</span><br>"
                         f"<span style='color:#999; font-size:11px'>{format_datetime(item.when)}</span>")
            lbl.setTextFormat(Qt.TextFormat.RichText)
            lbl.setWordWrap(True)
            self.activity_list.addWidget(lbl)

    def _render_chart(self, report: UsersTotalReport | None) -> None:
        rows = report.por_region if report else ()
        set_bars(self.chart, [r.nombre_region for r in rows], {"Usuarios": [r.cantidad_usuarios for r in rows]},
                 colors=("#16a34a",))
