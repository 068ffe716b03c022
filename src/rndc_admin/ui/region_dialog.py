from __future__ import annotations

from PySide6.QtWidgets import QFormLayout, QLineEdit

from ..schemas import Region
from .form_dialog import ApiFormDialog


class RegionDialog(ApiFormDialog):
    def __init__(self, api, runner, region: Region | None = None, parent=None) -> None:
        super().__init__(runner, "Editar Región" if region else "Nueva Región", parent)
        self.api = api
        self.region = region
        self.resize(380, 140)

        form = QFormLayout()
        self.edt_nombre = QLineEdit()
        self.edt_nombre.setPlaceholderText("Ej. Lima Norte")
        form.addRow("Nombre (*):", self.edt_nombre)
        self.layout_main.addLayout(form)
        self.finish_layout()

        if region:
            self.edt_nombre.setText(region.nombres)

    def validate(self) -> str | None:
        if not self.edt_nombre.text().strip():
            self.edt_nombre.setFocus()
            return "El nombre es obligatorio."
        return None

    def build_call(self):
        nombre = self.edt_nombre.text().strip()
        if self.region:
            region_id = self.region.id
            return lambda: self.api.regions.update(region_id, nombre)
        return lambda: self.api.regions.create(nombre)
