from __future__ import annotations

from PySide6.QtWidgets import QCheckBox, QComboBox, QFormLayout, QHBoxLayout

from ..schemas import Conference, ParticipationRequest, Region
from ..session import AuthSession
from .form_dialog import ApiFormDialog
from .user_search_select import UserSearchSelect
from .widgets import fill_combo

SERVICIOS = ("Completo", "Parcial")


def region_scope(session: AuthSession, regions: list[Region]) -> str | None:
    """Región a la que se limitan las búsquedas de un Encargado (por nombre)."""
    if not session.is_encargado:
        return None
    for region in regions:
        if region.nombres == session.nombre_region:
            return region.id
    return None


class ParticipationDialog(ApiFormDialog):
    """Alta de participación. Las participaciones no se editan: se eliminan y se registran de nuevo."""

    def __init__(self, api, runner, session: AuthSession, conferences: list[Conference],
                 regions: list[Region], parent=None) -> None:
        super().__init__(runner, "Nueva Participación", parent)
        self.api = api
        self.resize(480, 300)

        scope = region_scope(session, regions)
        form = QFormLayout()
        self.user_select = UserSearchSelect(lambda q: api.users.search(q, scope), runner, parent=self)
        self.cmb_conferencia = QComboBox()
        fill_combo(self.cmb_conferencia, [(c.nombres, c.id) for c in conferences],
                   placeholder="Seleccione una conferencia")
        self.cmb_servicio = QComboBox()
        self.cmb_servicio.setEditable(True)
        self.cmb_servicio.addItems(SERVICIOS)
        self.chk_almuerzo = QCheckBox("Almuerzo")
        self.chk_cena = QCheckBox("Cena")
        meals = QHBoxLayout()
        meals.addWidget(self.chk_almuerzo)
        meals.addWidget(self.chk_cena)
        meals.addStretch(1)

        form.addRow("Usuario (*):", self.user_select)
        form.addRow("Conferencia (*):", self.cmb_conferencia)
        form.addRow("Servicio (*):", self.cmb_servicio)
        form.addRow("Comidas:", meals)
        self.layout_main.addLayout(form)
        self.finish_layout()

    def validate(self) -> str | None:
        if not self.user_select.selected_dni:
            return "Seleccione un usuario."
        if self.cmb_conferencia.currentData() is None:
            return "Seleccione una conferencia."
        if not self.cmb_servicio.currentText().strip():
            return "Indique el servicio."
        return None

    def to_request(self) -> ParticipationRequest:
        return ParticipationRequest(
            dni_usuario=self.user_select.selected_dni,
            id_conferencia=self.cmb_conferencia.currentData(),
            servicio=self.cmb_servicio.currentText().strip(),
            almuerzo=self.chk_almuerzo.isChecked(),
            cena=self.chk_cena.isChecked(),
        )

    def build_call(self):
        request = self.to_request()
        return lambda: self.api.participations.create(request)
