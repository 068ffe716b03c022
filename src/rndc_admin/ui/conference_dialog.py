from __future__ import annotations

from PySide6.QtCore import QDate
from PySide6.QtWidgets import QComboBox, QDateEdit, QDoubleSpinBox, QFormLayout, QLineEdit, QSpinBox

from ..schemas import Conference, ConferenceRequest, Region
from ..utils.dates import format_date_for_input
from .form_dialog import ApiFormDialog
from .widgets import fill_combo, select_combo_data

DEFAULT_CAPACITY = 50


def _date_edit() -> QDateEdit:
    edit = QDateEdit()
    edit.setCalendarPopup(True)
    edit.setDisplayFormat("dd/MM/yyyy")
    edit.setDate(QDate.currentDate())
    return edit


def _set_iso(edit: QDateEdit, value: str) -> None:
    d = QDate.fromString(format_date_for_input(value), "yyyy-MM-dd")
    if d.isValid():
        edit.setDate(d)


class ConferenceDialog(ApiFormDialog):
    def __init__(self, api, runner, regions: list[Region], conference: Conference | None = None,
                 parent=None) -> None:
        super().__init__(runner, "Editar Conferencia" if conference else "Nueva Conferencia", parent)
        self.api = api
        self.conference = conference
        self.resize(460, 320)

        form = QFormLayout()
        self.edt_nombres = QLineEdit()
        self.edt_nombres.setPlaceholderText("Ej. Encuentro Nacional 2025")
        self.cmb_region = QComboBox()
        fill_combo(self.cmb_region, [(r.nombres, r.id) for r in regions], placeholder="Seleccione una región")
        self.edt_inicio = _date_edit()
        self.edt_fin = _date_edit()
        self.edt_fin_ins = _date_edit()
        self.spin_capacidad = QSpinBox()
        self.spin_capacidad.setRange(1, 100000)
        self.spin_capacidad.setValue(DEFAULT_CAPACITY)
        self.spin_monto = QDoubleSpinBox()
        self.spin_monto.setRange(0, 1000000)
        self.spin_monto.setDecimals(2)
        self.spin_monto.setPrefix("S/ ")
        # 0 = sin monto de inscripción
        self.spin_monto.setSpecialValueText("Sin monto")

        form.addRow("Nombre (*):", self.edt_nombres)
        form.addRow("Región (*):", self.cmb_region)
        form.addRow("Fecha de inicio:", self.edt_inicio)
        form.addRow("Fecha de fin:", self.edt_fin)
        form.addRow("Fin de inscripciones:", self.edt_fin_ins)
        form.addRow("Capacidad:", self.spin_capacidad)
        form.addRow("Monto de inscripción:", self.spin_monto)
        self.layout_main.addLayout(form)
        self.finish_layout()

        if conference:
            self._load(conference)

    def _load(self, c: Conference) -> None:
        self.edt_nombres.setText(c.nombres)
        select_combo_data(self.cmb_region, c.id_region)
        _set_iso(self.edt_inicio, c.fecha_inicio)
        _set_iso(self.edt_fin, c.fecha_fin)
        _set_iso(self.edt_fin_ins, c.fecha_fin_ins)
        self.spin_capacidad.setValue(c.capacidad or DEFAULT_CAPACITY)
        if c.monto_ins:
            self.spin_monto.setValue(c.monto_ins)

    def validate(self) -> str | None:
        if not self.edt_nombres.text().strip():
            return "El nombre es obligatorio."
        if self.cmb_region.currentData() is None:
            return "Seleccione una región."
        if self.edt_fin.date() < self.edt_inicio.date():
            return "La fecha de fin no puede ser anterior a la fecha de inicio."
        if self.edt_fin_ins.date() > self.edt_fin.date():
            return "El fin de inscripciones no puede ser posterior al fin de la conferencia."
        return None

    def to_request(self) -> ConferenceRequest:
        monto = self.spin_monto.value()
        return ConferenceRequest(
            nombres=self.edt_nombres.text().strip(),
            id_region=self.cmb_region.currentData(),
            fecha_inicio=self.edt_inicio.date().toString("yyyy-MM-dd"),
            fecha_fin=self.edt_fin.date().toString("yyyy-MM-dd"),
            fecha_fin_ins=self.edt_fin_ins.date().toString("yyyy-MM-dd"),
            capacidad=self.spin_capacidad.value(),
            monto_ins=monto if monto > 0 else None,
        )

    def build_call(self):
        request = self.to_request()
        if self.conference:
            conference_id = self.conference.id
            return lambda: self.api.conferences.update(conference_id, request)
        return lambda: self.api.conferences.create(request)
