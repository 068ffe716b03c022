from __future__ import annotations

from PySide6.QtWidgets import QComboBox, QDoubleSpinBox, QFormLayout

from ..schemas import Inversor, PagoInversorRequest, Tipo
from .form_dialog import ApiFormDialog
from .inversor_dialog import CURRENCY_OPTIONS
from .widgets import fill_combo


class PagoInversorDialog(ApiFormDialog):
    def __init__(self, api, runner, inversores: list[Inversor], tipos: list[Tipo], parent=None) -> None:
        super().__init__(runner, "Registrar Pago de Inversor", parent)
        self.api = api
        self.resize(420, 200)

        form = QFormLayout()
        self.cmb_inversor = QComboBox()
        fill_combo(self.cmb_inversor, [(i.nombre, i.id) for i in sorted(inversores, key=lambda i: i.nombre.lower())],
                   placeholder="Seleccione un inversor")
        self.cmb_tipo = QComboBox()
        fill_combo(self.cmb_tipo, [(f"{t.nombre} ({t.label})", t.id) for t in tipos],
                   placeholder="Seleccione un tipo")
        self.spin_monto = QDoubleSpinBox()
        self.spin_monto.setRange(0, 10000000)
        self.spin_monto.setDecimals(2)
        self.cmb_currency = QComboBox()
        fill_combo(self.cmb_currency, CURRENCY_OPTIONS)

        form.addRow("Inversor (*):", self.cmb_inversor)
        form.addRow("Tipo (*):", self.cmb_tipo)
        form.addRow("Monto (*):", self.spin_monto)
        form.addRow("Moneda:", self.cmb_currency)
        self.layout_main.addLayout(form)
        self.finish_layout()

    def validate(self) -> str | None:
        if self.cmb_inversor.currentData() is None:
            return "Seleccione un inversor."
        if self.cmb_tipo.currentData() is None:
            return "Seleccione un tipo."
        if self.spin_monto.value() <= 0:
            return "El monto debe ser mayor a cero."
        return None

    def build_call(self):
        request = PagoInversorRequest(
            id_inversor=self.cmb_inversor.currentData(),
            monto=round(self.spin_monto.value(), 2),
            currency=self.cmb_currency.currentData(),
            id_tipo=self.cmb_tipo.currentData(),
        )
        return lambda: self.api.investors.create_payment(request)
