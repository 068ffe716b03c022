from __future__ import annotations

from PySide6.QtWidgets import QComboBox, QHBoxLayout, QLabel, QLineEdit, QPushButton, QTableWidget

from ..schemas import ROLES, Region, User
from ..utils.dates import format_date_for_display
from ..utils.listing import ListState, matches_text
from .base_view import ResourceView
from .user_dialog import UserDialog
from .widgets import (
    PaginationBar,
    badge_item,
    configure_table,
    fill_combo,
    selected_key,
    style_buttons,
    text_item,
)

ROLE_COLORS = {
    "Admin": ("#1d4ed8", "#dbeafe"),
    "Encargado": ("#166534", "#dcfce7"),
    "Oyente": ("#374151", "#f3f4f6"),
}


def user_matches(u: User, filters: dict) -> bool:
    rol = filters.get("rol")
    if rol and u.rol != rol:
        return False
    region = filters.get("region")
    if region and u.id_region != region:
        return False
    return matches_text(filters.get("q", ""), u.nombres, u.dni)


class UsersView(ResourceView):
    title = "Usuarios"

    def __init__(self, api, runner, session, parent=None) -> None:
        super().__init__(api, runner, session, parent)
        self.state: ListState[User] = ListState(page_size=12)
        self.regions: list[Region] = []
        self._by_dni: dict[str, User] = {}

        top_bar = QHBoxLayout()
        top_bar.addWidget(QLabel("Buscar:"))
        self.edt_search = QLineEdit()
        self.edt_search.setPlaceholderText("Buscar por nombre o DNI...")
        self.edt_search.textChanged.connect(lambda t: self._set_filter("q", t))
        top_bar.addWidget(self.edt_search, 1)

        self.cmb_rol = QComboBox()
        fill_combo(self.cmb_rol, [(r, r) for r in ROLES], placeholder="Todos los roles")
        self.cmb_rol.currentIndexChanged.connect(lambda _i: self._set_filter("rol", self.cmb_rol.currentData()))
        top_bar.addWidget(self.cmb_rol)
        self.cmb_region = QComboBox()
        fill_combo(self.cmb_region, [], placeholder="Todas las regiones")
        self.cmb_region.currentIndexChanged.connect(
            lambda _i: self._set_filter("region", self.cmb_region.currentData())
        )
        top_bar.addWidget(self.cmb_region)

        self.btn_add = QPushButton("➕ Nuevo Usuario")
        self.btn_edit = QPushButton("✏️ Editar")
        self.btn_delete = QPushButton("🗑️ Eliminar")
        self.btn_add.clicked.connect(self._add)
        self.btn_edit.clicked.connect(self._edit_selected)
        self.btn_delete.clicked.connect(self._delete_selected)
        style_buttons(self.btn_add, self.btn_edit, self.btn_delete)
        for btn in (self.btn_add, self.btn_edit, self.btn_delete):
            top_bar.addWidget(btn)
        self.root_layout.addLayout(top_bar)

        self.table = QTableWidget()
        configure_table(self.table, ["DNI", "Nombres", "Sexo", "Nacimiento", "Teléfono", "Rol", "Región"])
        self.table.itemSelectionChanged.connect(self._on_selection_changed)
        self.table.cellDoubleClicked.connect(lambda _r, _c: self._edit_selected())
        self.root_layout.addWidget(self.table)

        self.pagination = PaginationBar()
        self.pagination.pageChanged.connect(self._on_page)
        self.root_layout.addWidget(self.pagination)
        self._render()

    def fetchers(self):
        return {"users": self.api.users.list, "regions": self.api.regions.list}

    def on_loaded(self, results) -> None:
        users = self.value_or(results, "users", [])
        self.regions = self.value_or(results, "regions", self.regions)
        fill_combo(self.cmb_region, [(r.nombres, r.id) for r in self.regions], placeholder="Todas las regiones")
        self._by_dni = {u.dni: u for u in users}
        self.state = self.state.with_items(users)
        self._render()

    def _set_filter(self, name: str, value) -> None:
        self.state = self.state.with_filter(name, value)
        self._render()

    def _on_page(self, page: int) -> None:
        self.state = self.state.with_page(page)
        self._render()

    def _render(self) -> None:
        page = self.state.visible(user_matches)
        self.table.setRowCount(len(page.items))
        for i, u in enumerate(page.items):
            self.table.setItem(i, 0, text_item(u.dni, key=u.dni))
            self.table.setItem(i, 1, text_item(u.nombres))
            self.table.setItem(i, 2, text_item(u.sexo_label))
            self.table.setItem(i, 3, text_item(format_date_for_display(u.fecha_nacimiento)))
            self.table.setItem(i, 4, text_item(u.telefono))
            fg, bg = ROLE_COLORS.get(u.rol, ROLE_COLORS["Oyente"])
            self.table.setItem(i, 5, badge_item(u.rol, fg, bg))
            self.table.setItem(i, 6, text_item(u.nombre_region))
        self.pagination.set_page(page)
        self._on_selection_changed()

    def _selected(self) -> User | None:
        return self._by_dni.get(selected_key(self.table))

    def _can_manage(self, user: User | None) -> bool:
        if user is None:
            return False
        if self.session.is_admin:
            return True
        return user.rol == "Oyente" and user.nombre_region == self.session.nombre_region

    def _on_selection_changed(self) -> None:
        allowed = self._can_manage(self._selected())
        self.btn_edit.setEnabled(allowed)
        self.btn_delete.setEnabled(allowed)

    def _add(self) -> None:
        dlg = UserDialog(self.api, self.runner, self.session, self.regions, parent=self)
        if dlg.exec():
            self.success_banner.show_message("Usuario creado correctamente")
            self.reload()

    def _edit_selected(self) -> None:
        user = self._selected()
        if not self._can_manage(user):
            return
        dlg = UserDialog(self.api, self.runner, self.session, self.regions, user=user, parent=self)
        if dlg.exec():
            self.success_banner.show_message("Usuario actualizado correctamente")
            self.reload()

    def _delete_selected(self) -> None:
        user = self._selected()
        if not self._can_manage(user):
            return
        self.confirm_and_delete(
            f"¿Está seguro de que desea eliminar al usuario {user.nombres} ({user.dni})?",
            lambda: self.api.users.delete(user.dni),
            "Usuario eliminado correctamente",
        )
