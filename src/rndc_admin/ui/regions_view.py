from __future__ import annotations

from PySide6.QtWidgets import QHBoxLayout, QLabel, QLineEdit, QPushButton, QTableWidget

from ..schemas import Region
from ..utils.listing import ListState, matches_text
from .base_view import ResourceView
from .region_dialog import RegionDialog
from .widgets import PaginationBar, configure_table, selected_key, style_buttons, text_item


class RegionsView(ResourceView):
    title = "Regiones"

    def __init__(self, api, runner, session, parent=None) -> None:
        super().__init__(api, runner, session, parent)
        self.state: ListState[Region] = ListState(page_size=10)
        self._by_id: dict[str, Region] = {}

        top_bar = QHBoxLayout()
        top_bar.addWidget(QLabel("Buscar:"))
        self.edt_search = QLineEdit()
        self.edt_search.setPlaceholderText("Buscar región por nombre...")
        self.edt_search.textChanged.connect(self._on_search)
        top_bar.addWidget(self.edt_search, 1)

        self.btn_add = QPushButton("➕ Nueva Región")
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
        configure_table(self.table, ["ID", "Nombre"])
        self.table.itemSelectionChanged.connect(self._on_selection_changed)
        self.table.cellDoubleClicked.connect(lambda _r, _c: self._edit_selected())
        self.root_layout.addWidget(self.table)

        self.pagination = PaginationBar()
        self.pagination.pageChanged.connect(self._on_page)
        self.root_layout.addWidget(self.pagination)
        self._render()

    def fetchers(self):
        return {"regions": self.api.regions.list}

    def on_loaded(self, results) -> None:
        regions = self.value_or(results, "regions", [])
        self._by_id = {r.id: r for r in regions}
        self.state = self.state.with_items(regions)
        self._render()

    def _on_search(self, text: str) -> None:
        self.state = self.state.with_filter("q", text)
        self._render()

    def _on_page(self, page: int) -> None:
        self.state = self.state.with_page(page)
        self._render()

    def _render(self) -> None:
        page = self.state.visible(lambda r, f: matches_text(f.get("q", ""), r.nombres))
        self.table.setRowCount(len(page.items))
        for i, region in enumerate(page.items):
            self.table.setItem(i, 0, text_item(region.id, key=region.id))
            self.table.setItem(i, 1, text_item(region.nombres))
        self.pagination.set_page(page)
        self._on_selection_changed()

    def _on_selection_changed(self) -> None:
        has_selection = len(self.table.selectedItems()) > 0
        self.btn_edit.setEnabled(has_selection)
        self.btn_delete.setEnabled(has_selection)

    def _selected(self) -> Region | None:
        return self._by_id.get(selected_key(self.table))

    def _add(self) -> None:
        dlg = RegionDialog(self.api, self.runner, parent=self)
        if dlg.exec():
            self.success_banner.show_message("Región creada correctamente")
            self.reload()

    def _edit_selected(self) -> None:
        region = self._selected()
        if region is None:
            return
        dlg = RegionDialog(self.api, self.runner, region=region, parent=self)
        if dlg.exec():
            self.success_banner.show_message("Región actualizada correctamente")
            self.reload()

    def _delete_selected(self) -> None:
        region = self._selected()
        if region is None:
            return
        self.confirm_and_delete(
            f"¿Está seguro de que desea eliminar la región «{region.nombres}»?\nEsta acción no se puede deshacer.",
            lambda: self.api.regions.delete(region.id),
            "Región eliminada correctamente",
        )
