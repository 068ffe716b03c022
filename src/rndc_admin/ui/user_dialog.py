from __future__ import annotations

from PySide6.QtCore import QDate
from PySide6.QtWidgets import QComboBox, QDateEdit, QFormLayout, QLineEdit

from ..schemas import ROLES, ROLES_WITH_PASSWORD, Region, User, UserRequest
from ..session import AuthSession
from ..utils.dates import format_date_for_api, format_date_for_input
from .form_dialog import ApiFormDialog
from .widgets import fill_combo, select_combo_data


class UserDialog(ApiFormDialog):
    """Alta/edición de usuario.

    El rol Oyente no tiene contraseña: al elegirlo el campo se limpia y
    se deshabilita. Un Encargado solo gestiona oyentes de su propia región.
    """

    def __init__(self, api, runner, session: AuthSession, regions: list[Region],
                 user: User | None = None, parent=None) -> None:
        super().__init__(runner, "Editar Usuario" if user else "Nuevo Usuario", parent)
        self.api = api
        self.session = session
        self.user = user
        self.resize(460, 360)

        form = QFormLayout()
        self.edt_dni = QLineEdit()
        self.edt_dni.setPlaceholderText("Ej. 12345678")
        self.edt_nombres = QLineEdit()
        self.cmb_sexo = QComboBox()
        self.cmb_sexo.addItem("Masculino", True)
        self.cmb_sexo.addItem("Femenino", False)
        self.edt_nacimiento = QDateEdit()
        self.edt_nacimiento.setCalendarPopup(True)
        self.edt_nacimiento.setDisplayFormat("dd/MM/yyyy")
        self.edt_nacimiento.setDate(QDate(2000, 1, 1))
        self.edt_telefono = QLineEdit()
        self.cmb_rol = QComboBox()
        roles = ROLES if session.is_admin else ("Oyente",)
        for rol in roles:
            self.cmb_rol.addItem(rol, rol)
        self.edt_password = QLineEdit()
        self.edt_password.setEchoMode(QLineEdit.EchoMode.Password)
        self.cmb_region = QComboBox()
        if session.is_admin:
            fill_combo(self.cmb_region, [(r.nombres, r.id) for r in regions], placeholder="Seleccione una región")
        else:
            own = [r for r in regions if r.nombres == session.nombre_region]
            fill_combo(self.cmb_region, [(r.nombres, r.id) for r in own])
            self.cmb_region.setEnabled(False)

        form.addRow("DNI (*):", self.edt_dni)
        form.addRow("Nombres (*):", self.edt_nombres)
        form.addRow("Sexo:", self.cmb_sexo)
        form.addRow("Fecha de nacimiento:", self.edt_nacimiento)
        form.addRow("Teléfono:", self.edt_telefono)
        form.addRow("Rol:", self.cmb_rol)
        form.addRow("Contraseña:", self.edt_password)
        form.addRow("Región (*):", self.cmb_region)
        self.layout_main.addLayout(form)
        self.finish_layout()

        self.cmb_rol.currentIndexChanged.connect(lambda _i: self._on_role_changed())
        if user:
            self._load(user)
        self._on_role_changed()

    def _load(self, u: User) -> None:
        self.edt_dni.setText(u.dni)
        self.edt_nombres.setText(u.nombres)
        select_combo_data(self.cmb_sexo, u.sexo)
        d = QDate.fromString(format_date_for_input(u.fecha_nacimiento), "yyyy-MM-dd")
        if d.isValid():
            self.edt_nacimiento.setDate(d)
        self.edt_telefono.setText(u.telefono)
        select_combo_data(self.cmb_rol, u.rol)
        select_combo_data(self.cmb_region, u.id_region)

    @property
    def role(self) -> str:
        return self.cmb_rol.currentData() or "Oyente"

    def _on_role_changed(self) -> None:
        needs_password = self.role in ROLES_WITH_PASSWORD
        if not needs_password:
            self.edt_password.clear()
        self.edt_password.setEnabled(needs_password)
        self.edt_password.setPlaceholderText(
            "" if not needs_password else ("Dejar vacío para conservar" if self.user else "Contraseña de acceso")
        )

    def validate(self) -> str | None:
        if not self.edt_dni.text().strip():
            return "El DNI es obligatorio."
        if not self.edt_nombres.text().strip():
            return "Los nombres son obligatorios."
        if self.cmb_region.currentData() is None:
            return "Seleccione una región."
        if self.role in ROLES_WITH_PASSWORD and not self.user and not self.edt_password.text():
            return f"El rol {self.role} requiere contraseña."
        return None

    def to_request(self) -> UserRequest:
        qd = self.edt_nacimiento.date()
        return UserRequest(
            dni=self.edt_dni.text().strip(),
            nombres=self.edt_nombres.text().strip(),
            sexo=bool(self.cmb_sexo.currentData()),
            fecha_nacimiento=format_date_for_api(qd.toString("yyyy-MM-dd")),
            telefono=self.edt_telefono.text().strip(),
            rol=self.role,
            id_region=self.cmb_region.currentData(),
            password=self.edt_password.text() or None,
        )

    def build_call(self):
        request = self.to_request()
        if self.user:
            current_dni = self.user.dni
            return lambda: self.api.users.update(current_dni, request)
        return lambda: self.api.users.create(request)
