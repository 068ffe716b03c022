from __future__ import annotations

from PySide6.QtWidgets import QComboBox, QHBoxLayout, QLabel, QLineEdit, QPushButton, QTableWidget

from ..schemas import Conference, Region
from ..utils.dates import format_date_for_display
from ..utils.listing import ListState, matches_text
from .base_view import ResourceView
from .conference_dialog import ConferenceDialog
from .widgets import (
    PaginationBar,
    badge_item,
    configure_table,
    fill_combo,
    selected_key,
    style_buttons,
    text_item,
)

STATUS_COLORS = {
    "Disponible": ("#166534", "#dcfce7"),
    "Completa": ("#991b1b", "#fee2e2"),
    "No Vigente": ("#374151", "#f3f4f6"),
}


def conference_matches(c: Conference, filters: dict) -> bool:
    region = filters.get("region")
    if region and c.id_region != region:
        return False
    return matches_text(filters.get("q", ""), c.nombres, c.nombre_region)


class ConferencesView(ResourceView):
    title = "Conferencias"

    def __init__(self, api, runner, session, parent=None) -> None:
        super().__init__(api, runner, session, parent)
        self.state: ListState[Conference] = ListState(page_size=10)
        self.regions: list[Region] = []
        self._by_id: dict[str, Conference] = {}

        top_bar = QHBoxLayout()
        top_bar.addWidget(QLabel("Buscar:"))
        self.edt_search = QLineEdit()
        self.edt_search.setPlaceholderText("Buscar por nombre o región...")
        self.edt_search.textChanged.connect(lambda t: self._set_filter("q", t))
        top_bar.addWidget(self.edt_search, 1)
        self.cmb_region = QComboBox()
        fill_combo(self.cmb_region, [], placeholder="Todas las regiones")
        self.cmb_region.currentIndexChanged.connect(
            lambda _i: self._set_filter("region", self.cmb_region.currentData())
        )
        top_bar.addWidget(self.cmb_region)

        self.btn_add = QPushButton("➕ Nueva Conferencia")
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
        configure_table(self.table, [
            "Nombre", "Región", "Inicio", "Fin", "Fin Inscripción", "Inscritos", "Monto", "Estado",
        ], stretch=0)
        self.table.itemSelectionChanged.connect(self._on_selection_changed)
        self.table.cellDoubleClicked.connect(lambda _r, _c: self._edit_selected())
        self.root_layout.addWidget(self.table)

        self.pagination = PaginationBar()
        self.pagination.pageChanged.connect(self._on_page)
        self.root_layout.addWidget(self.pagination)
        self._render()

    def fetchers(self):
        return {"conferences": self.api.conferences.list, "regions": self.api.regions.list}

    def on_loaded(self, results) -> None:
        conferences = self.value_or(results, "conferences", [])
        self.regions = self.value_or(results, "regions", self.regions)
        fill_combo(self.cmb_region, [(r.nombres, r.id) for r in self.regions], placeholder="Todas las regiones")
        self._by_id = {c.id: c for c in conferences}
        self.state = self.state.with_items(conferences)
        self._render()

    def _set_filter(self, name: str, value) -> None:
        self.state = self.state.with_filter(name, value)
        self._render()

    def _on_page(self, page: int) -> None:
        self.state = self.state.with_page(page)
        self._render()

    def _render(self) -> None:
        page = self.state.visible(conference_matches)
        self.table.setRowCount(len(page.items))
        for i, c in enumerate(page.items):
            self.table.setItem(i, 0, text_item(c.nombres, key=c.id))
            self.table.setItem(i, 1, text_item(c.nombre_region))
            self.table.setItem(i, 2, text_item(format_date_for_display(c.fecha_inicio)))
            self.table.setItem(i, 3, text_item(format_date_for_display(c.fecha_fin)))
            self.table.setItem(i, 4, text_item(format_date_for_display(c.fecha_fin_ins)))
            self.table.setItem(i, 5, text_item(f"{c.participantes_inscritos}/{c.capacidad}", align_center=True))
            monto = f"S/ {c.monto_ins:.2f}" if c.monto_ins is not None else "—"
            self.table.setItem(i, 6, text_item(monto))
            fg, bg = STATUS_COLORS[c.status]
            self.table.setItem(i, 7, badge_item(c.status, fg, bg))
        self.pagination.set_page(page)
        self._on_selection_changed()

    def _on_selection_changed(self) -> None:
        has_selection = len(self.table.selectedItems()) > 0
        self.btn_edit.setEnabled(has_selection)
        self.btn_delete.setEnabled(has_selection)

    def _selected(self) -> Conference | None:
        return self._by_id.get(selected_key(self.table))

    def _add(self) -> None:
        dlg = ConferenceDialog(self.api, self.runner, self.regions, parent=self)
        if dlg.exec():
            self.success_banner.show_message("Conferencia creada correctamente")
            self.reload()

    def _edit_selected(self) -> None:
        conference = self._selected()
        if conference is None:
            return
        dlg = ConferenceDialog(self.api, self.runner, self.regions, conference=conference, parent=self)
        if dlg.exec():
            self.success_banner.show_message("Conferencia actualizada correctamente")
            self.reload()

    def _delete_selected(self) -> None:
        conference = self._selected()
        if conference is None:
            return
        self.confirm_and_delete(
            f"¿Está seguro de que desea eliminar la conferencia «{conference.nombres}»?",
            lambda: self.api.conferences.delete(conference.id),
            "Conferencia eliminada correctamente",
        )
