from __future__ import annotations

from PySide6.QtWidgets import QComboBox, QDoubleSpinBox, QFormLayout, QLineEdit

from ..schemas import CURRENCY_DOLARES, CURRENCY_EUROS, CURRENCY_SOLES, Inversor, InversorRequest, Region, currency_name
from .form_dialog import ApiFormDialog
from .widgets import fill_combo, select_combo_data

CURRENCY_OPTIONS = [(currency_name(c), c) for c in (CURRENCY_SOLES, CURRENCY_DOLARES, CURRENCY_EUROS)]


class InversorDialog(ApiFormDialog):
    """Alta y edición de inversores. La edición se envía con PUT."""

    def __init__(self, api, runner, regions: list[Region], inversor: Inversor | None = None, parent=None) -> None:
        super().__init__(runner, "Editar Inversor" if inversor else "Nuevo Inversor", parent)
        self.api = api
        self.inversor = inversor
        self.resize(420, 220)

        form = QFormLayout()
        self.edt_nombre = QLineEdit()
        self.cmb_region = QComboBox()
        fill_combo(self.cmb_region, [(r.nombres, r.id) for r in regions], placeholder="Seleccione una región")
        self.spin_cuota = QDoubleSpinBox()
        self.spin_cuota.setRange(0, 10000000)
        self.spin_cuota.setDecimals(2)
        self.cmb_currency = QComboBox()
        fill_combo(self.cmb_currency, CURRENCY_OPTIONS)

        form.addRow("Nombre (*):", self.edt_nombre)
        form.addRow("Región (*):", self.cmb_region)
        form.addRow("Cuota mensual:", self.spin_cuota)
        form.addRow("Moneda:", self.cmb_currency)
        self.layout_main.addLayout(form)
        self.finish_layout()

        if inversor:
            self.edt_nombre.setText(inversor.nombre)
            select_combo_data(self.cmb_region, inversor.id_region)
            self.spin_cuota.setValue(inversor.monto_mensual_cuota)
            if inversor.currency_cuota is not None:
                select_combo_data(self.cmb_currency, inversor.currency_cuota)

    def validate(self) -> str | None:
        if not self.edt_nombre.text().strip():
            return "El nombre es obligatorio."
        if self.cmb_region.currentData() is None:
            return "Seleccione una región."
        return None

    def to_request(self) -> InversorRequest:
        return InversorRequest(
            nombre=self.edt_nombre.text().strip(),
            id_region=self.cmb_region.currentData(),
            monto_mensual_cuota=round(self.spin_cuota.value(), 2),
            currency_cuota=self.cmb_currency.currentData(),
        )

    def build_call(self):
        request = self.to_request()
        if self.inversor:
            inversor_id = self.inversor.id
            return lambda: self.api.investors.update(inversor_id, request)
        return lambda: self.api.investors.create(request)
