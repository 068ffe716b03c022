from __future__ import annotations

from PySide6.QtWidgets import QComboBox, QDoubleSpinBox, QFormLayout, QPlainTextEdit

from ..schemas import GASTO_CATEGORIAS, GastoRequest
from .form_dialog import ApiFormDialog
from .inversor_dialog import CURRENCY_OPTIONS
from .widgets import fill_combo


class GastoDialog(ApiFormDialog):
    def __init__(self, api, runner, parent=None) -> None:
        super().__init__(runner, "Registrar Gasto", parent)
        self.api = api
        self.resize(420, 260)

        form = QFormLayout()
        self.spin_monto = QDoubleSpinBox()
        self.spin_monto.setRange(0, 10000000)
        self.spin_monto.setDecimals(2)
        self.cmb_currency = QComboBox()
        fill_combo(self.cmb_currency, CURRENCY_OPTIONS)
        self.cmb_categoria = QComboBox()
        fill_combo(self.cmb_categoria, [(c, c) for c in GASTO_CATEGORIAS], placeholder="Seleccione una categoría")
        self.edt_descripcion = QPlainTextEdit()
        self.edt_descripcion.setFixedHeight(70)

        form.addRow("Monto (*):", self.spin_monto)
        form.addRow("Moneda:", self.cmb_currency)
        form.addRow("Categoría (*):", self.cmb_categoria)
        form.addRow("Descripción:", self.edt_descripcion)
        self.layout_main.addLayout(form)
        self.finish_layout()

    def validate(self) -> str | None:
        if self.spin_monto.value() <= 0:
            return "El monto debe ser mayor a cero."
        if self.cmb_categoria.currentData() is None:
            return "Seleccione una categoría."
        return None

    def build_call(self):
        request = GastoRequest(
            monto=round(self.spin_monto.value(), 2),
            currency=self.cmb_currency.currentData(),
            categoria=self.cmb_categoria.currentData(),
            descripcion=self.edt_descripcion.toPlainText().strip(),
        )
        return lambda: self.api.expenses.create(request)
