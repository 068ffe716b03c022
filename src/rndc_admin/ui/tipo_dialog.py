from __future__ import annotations

from PySide6.QtWidgets import QComboBox, QFormLayout, QLineEdit

from ..schemas import tipo_label
from .form_dialog import ApiFormDialog
from .widgets import fill_combo


class TipoDialog(ApiFormDialog):
    def __init__(self, api, runner, parent=None) -> None:
        super().__init__(runner, "Nuevo Tipo", parent)
        self.api = api
        self.resize(380, 170)

        form = QFormLayout()
        self.edt_nombre = QLineEdit()
        self.cmb_clase = QComboBox()
        fill_combo(self.cmb_clase, [(tipo_label(True), True), (tipo_label(False), False)])
        self.edt_descripcion = QLineEdit()
        form.addRow("Nombre (*):", self.edt_nombre)
        form.addRow("Clase:", self.cmb_clase)
        form.addRow("Descripción:", self.edt_descripcion)
        self.layout_main.addLayout(form)
        self.finish_layout()

    def validate(self) -> str | None:
        if not self.edt_nombre.text().strip():
            return "El nombre es obligatorio."
        return None

    def build_call(self):
        nombre = self.edt_nombre.text().strip()
        es_micro = bool(self.cmb_clase.currentData())
        descripcion = self.edt_descripcion.text().strip()
        return lambda: self.api.investors.create_type(nombre, es_micro, descripcion)
