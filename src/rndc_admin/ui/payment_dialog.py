from __future__ import annotations

from pathlib import Path

from PySide6.QtWidgets import QComboBox, QDoubleSpinBox, QFileDialog, QFormLayout, QHBoxLayout, QLabel, QPushButton

from ..schemas import Conference, PaymentRequest, Region
from ..services.api_client import Result
from ..session import AuthSession
from .form_dialog import ApiFormDialog
from .participation_dialog import region_scope
from .user_search_select import UserSearchSelect
from .widgets import fill_combo, style_buttons

IMAGE_FILTER = "Imágenes (*.png *.jpg *.jpeg *.webp)"


class PaymentDialog(ApiFormDialog):
    """Registro de pago: primero se sube el comprobante y luego se crea el pago con su URL."""

    def __init__(self, api, runner, uploader, session: AuthSession, conferences: list[Conference],
                 regions: list[Region], parent=None) -> None:
        super().__init__(runner, "Registrar Pago", parent)
        self.api = api
        self.uploader = uploader
        self.receipt_path: Path | None = None
        self.resize(480, 300)

        scope = region_scope(session, regions)
        form = QFormLayout()
        self.user_select = UserSearchSelect(lambda q: api.users.search(q, scope), runner, parent=self)
        self.cmb_conferencia = QComboBox()
        fill_combo(self.cmb_conferencia, [(c.nombres, c.id) for c in conferences],
                   placeholder="Seleccione una conferencia")
        self.spin_monto = QDoubleSpinBox()
        self.spin_monto.setRange(0, 1000000)
        self.spin_monto.setDecimals(2)
        self.spin_monto.setPrefix("S/ ")
        self.spin_monto.setSpecialValueText("Sin monto")

        receipt_row = QHBoxLayout()
        self.lbl_receipt = QLabel("Ningún archivo seleccionado")
        self.lbl_receipt.setStyleSheet("color: #7f8c8d;")
        self.btn_receipt = QPushButton("📎 Seleccionar imagen")
        style_buttons(self.btn_receipt)
        self.btn_receipt.clicked.connect(self._choose_receipt)
        receipt_row.addWidget(self.lbl_receipt, 1)
        receipt_row.addWidget(self.btn_receipt)

        form.addRow("Usuario (*):", self.user_select)
        form.addRow("Conferencia (*):", self.cmb_conferencia)
        form.addRow("Monto:", self.spin_monto)
        form.addRow("Comprobante (*):", receipt_row)
        self.layout_main.addLayout(form)
        self.finish_layout()

    def _choose_receipt(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Seleccionar comprobante", "", IMAGE_FILTER)
        if path:
            self.set_receipt(path)

    def set_receipt(self, path: str | Path) -> None:
        self.receipt_path = Path(path)
        self.lbl_receipt.setText(self.receipt_path.name)

    def validate(self) -> str | None:
        if not self.user_select.selected_dni:
            return "Seleccione un usuario."
        if self.cmb_conferencia.currentData() is None:
            return "Seleccione una conferencia."
        if self.receipt_path is None:
            return "Adjunte la imagen del comprobante."
        return None

    def build_call(self):
        dni = self.user_select.selected_dni
        conference_id = self.cmb_conferencia.currentData()
        monto = self.spin_monto.value() or None
        path = self.receipt_path

        def upload_and_create() -> Result:
            uploaded = self.uploader.upload(path)
            if not uploaded.ok:
                return uploaded
            request = PaymentRequest(dni_usuario=dni, id_conferencia=conference_id, enlace=uploaded.value, monto=monto)
            return self.api.payments.create(request)

        return upload_and_create
