from __future__ import annotations

from PySide6.QtWidgets import QComboBox, QFileDialog, QHBoxLayout, QLabel, QLineEdit, QPushButton, QTableWidget
from shiboken6 import isValid

from ..schemas import Conference, Participation, Region
from ..services.csv_export import export_payload_to_csv, write_csv
from ..utils.dates import format_date_for_display
from ..utils.listing import ListState, matches_text
from .base_view import ResourceView
from .participation_dialog import ParticipationDialog
from .widgets import PaginationBar, configure_table, fill_combo, selected_key, style_buttons, text_item


def participation_matches(p: Participation, filters: dict) -> bool:
    conference = filters.get("conference")
    if conference and p.id_conferencia != conference:
        return False
    return matches_text(filters.get("q", ""), p.nombre_usuario, p.dni_usuario, p.nombre_conferencia)


def _yes_no(value: bool | None) -> str:
    if value is None:
        return "—"
    return "Sí" if value else "No"


class ParticipationsView(ResourceView):
    title = "Participaciones"

    def __init__(self, api, runner, session, parent=None) -> None:
        super().__init__(api, runner, session, parent)
        self.state: ListState[Participation] = ListState(page_size=10)
        self.conferences: list[Conference] = []
        self.regions: list[Region] = []
        self._by_id: dict[str, Participation] = {}

        top_bar = QHBoxLayout()
        top_bar.addWidget(QLabel("Buscar:"))
        self.edt_search = QLineEdit()
        self.edt_search.setPlaceholderText("Buscar por usuario, DNI o conferencia...")
        self.edt_search.textChanged.connect(lambda t: self._set_filter("q", t))
        top_bar.addWidget(self.edt_search, 1)
        self.cmb_conference = QComboBox()
        fill_combo(self.cmb_conference, [], placeholder="Todas las conferencias")
        self.cmb_conference.currentIndexChanged.connect(
            lambda _i: self._set_filter("conference", self.cmb_conference.currentData())
        )
        top_bar.addWidget(self.cmb_conference)

        self.btn_add = QPushButton("➕ Nueva Participación")
        self.btn_delete = QPushButton("🗑️ Eliminar")
        self.btn_export = QPushButton("⬇️ Exportar CSV")
        self.btn_add.clicked.connect(self._add)
        self.btn_delete.clicked.connect(self._delete_selected)
        self.btn_export.clicked.connect(self._export_csv)
        style_buttons(self.btn_add, self.btn_delete, self.btn_export)
        for btn in (self.btn_add, self.btn_delete, self.btn_export):
            top_bar.addWidget(btn)
        self.root_layout.addLayout(top_bar)

        self.table = QTableWidget()
        configure_table(self.table, ["DNI", "Nombre", "Conferencia", "Servicio", "Fecha", "Almuerzo", "Cena"])
        self.table.itemSelectionChanged.connect(self._on_selection_changed)
        self.root_layout.addWidget(self.table)

        self.pagination = PaginationBar()
        self.pagination.pageChanged.connect(self._on_page)
        self.root_layout.addWidget(self.pagination)
        self._render()

    def fetchers(self):
        return {
            "participations": self.api.participations.list,
            "conferences": self.api.conferences.list,
            "regions": self.api.regions.list,
        }

    def on_loaded(self, results) -> None:
        participations = self.value_or(results, "participations", [])
        self.conferences = self.value_or(results, "conferences", self.conferences)
        self.regions = self.value_or(results, "regions", self.regions)
        fill_combo(self.cmb_conference, [(c.nombres, c.id) for c in self.conferences],
                   placeholder="Todas las conferencias")
        self._by_id = {p.id: p for p in participations}
        self.state = self.state.with_items(participations)
        self._render()

    def _set_filter(self, name: str, value) -> None:
        self.state = self.state.with_filter(name, value)
        self._render()

    def _on_page(self, page: int) -> None:
        self.state = self.state.with_page(page)
        self._render()

    def _render(self) -> None:
        page = self.state.visible(participation_matches)
        self.table.setRowCount(len(page.items))
        for i, p in enumerate(page.items):
            self.table.setItem(i, 0, text_item(p.dni_usuario, key=p.id))
            self.table.setItem(i, 1, text_item(p.nombre_usuario))
            self.table.setItem(i, 2, text_item(p.nombre_conferencia))
            self.table.setItem(i, 3, text_item(p.servicio))
            self.table.setItem(i, 4, text_item(format_date_for_display(p.fecha)))
            self.table.setItem(i, 5, text_item(_yes_no(p.almuerzo), align_center=True))
            self.table.setItem(i, 6, text_item(_yes_no(p.cena), align_center=True))
        self.pagination.set_page(page)
        self._on_selection_changed()

    def _on_selection_changed(self) -> None:
        has_selection = len(self.table.selectedItems()) > 0
        self.btn_delete.setEnabled(has_selection)

    def _selected(self) -> Participation | None:
        return self._by_id.get(selected_key(self.table))

    def _add(self) -> None:
        dlg = ParticipationDialog(self.api, self.runner, self.session, self.conferences, self.regions, parent=self)
        if dlg.exec():
            self.success_banner.show_message("Participación registrada correctamente")
            self.reload()

    def _delete_selected(self) -> None:
        participation = self._selected()
        if participation is None:
            return
        self.confirm_and_delete(
            f"¿Eliminar la participación de {participation.nombre_usuario} en {participation.nombre_conferencia}?",
            lambda: self.api.participations.delete(participation.id),
            "Participación eliminada correctamente",
        )

    def _export_csv(self) -> None:
        path, _ = QFileDialog.getSaveFileName(self, "Exportar participaciones", "participaciones.csv",
                                              "CSV (*.csv)")
        if not path:
            return
        self.btn_export.setEnabled(False)

        def done(result) -> None:
            if not isValid(self):
                return
            self.btn_export.setEnabled(True)
            if not result.ok:
                self.error_banner.show_message(result.error.message)
                return
            write_csv(path, export_payload_to_csv(result.value or ""))
            self.success_banner.show_message(f"Participaciones exportadas a {path}")

        self.runner.submit(self.api.participations.export_csv, done)
