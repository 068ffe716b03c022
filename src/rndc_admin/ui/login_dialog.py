from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtGui import QColor
from PySide6.QtWidgets import (
    QCheckBox,
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QFrame,
    QGraphicsDropShadowEffect,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMessageBox,
    QVBoxLayout,
    QWidget,
)
from shiboken6 import isValid

from ..session import AuthSession, SessionStore


class LoginDialog(QDialog):
    """Puerta de acceso: solo Admin y Encargado pueden entrar."""

    def __init__(self, api, runner, session_store: SessionStore, parent=None) -> None:
        super().__init__(parent)
        self.api = api
        self.runner = runner
        self.session_store = session_store
        self.session: AuthSession | None = None
        self.submitting = False
        self.setWindowTitle("Iniciar sesión")
        self.setModal(True)
        self.resize(420, 260)

        outer = QVBoxLayout(self)
        outer.setContentsMargins(24, 24, 24, 24)

        frame = QFrame(self)
        frame.setObjectName("LoginFrame")
        frame.setFrameShape(QFrame.Shape.StyledPanel)
        frame_lyt = QVBoxLayout(frame)
        frame_lyt.setContentsMargins(20, 20, 20, 20)
        frame_lyt.setSpacing(12)

        shadow = QGraphicsDropShadowEffect(self)
        shadow.setBlurRadius(24)
        shadow.setOffset(0, 6)
        shadow.setColor(QColor(0, 0, 0, 60))
        frame.setGraphicsEffect(shadow)

        title = QLabel("RNDC · Reunidos en Cristo")
        title.setObjectName("LoginTitle")
        title.setAlignment(Qt.AlignmentFlag.AlignHCenter)
        subtitle = QLabel("Ingresa tu DNI y contraseña para continuar")
        subtitle.setObjectName("LoginSubtitle")
        subtitle.setAlignment(Qt.AlignmentFlag.AlignHCenter)

        form_widget = QWidget(self)
        form = QFormLayout(form_widget)
        form.setContentsMargins(0, 0, 0, 0)
        self.user_edit = QLineEdit(self)
        self.user_edit.setPlaceholderText("DNI")
        self.pass_edit = QLineEdit(self)
        self.pass_edit.setEchoMode(QLineEdit.EchoMode.Password)
        self.pass_edit.setPlaceholderText("Contraseña")
        form.addRow("DNI", self.user_edit)
        form.addRow("Contraseña", self.pass_edit)

        self.show_pwd_chk = QCheckBox("Mostrar contraseña", self)
        self.buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Ok | QDialogButtonBox.StandardButton.Cancel, parent=self
        )
        self.buttons.accepted.connect(self._on_accept)
        self.buttons.rejected.connect(self.reject)

        frame_lyt.addWidget(title)
        frame_lyt.addWidget(subtitle)
        frame_lyt.addWidget(form_widget)
        opts_row = QHBoxLayout()
        opts_row.addStretch(1)
        opts_row.addWidget(self.show_pwd_chk)
        frame_lyt.addLayout(opts_row)
        frame_lyt.addWidget(self.buttons)
        outer.addWidget(frame)

        self.user_edit.returnPressed.connect(self._on_accept)
        self.pass_edit.returnPressed.connect(self._on_accept)
        self.show_pwd_chk.toggled.connect(self._set_show_password)
        self.user_edit.textChanged.connect(lambda _: self._set_error(self.user_edit, False))
        self.pass_edit.textChanged.connect(lambda _: self._set_error(self.pass_edit, False))

    def showEvent(self, event) -> None:  # type: ignore[override]
        super().showEvent(event)
        screen = self.screen().availableGeometry() if self.screen() else None
        if screen:
            geo = self.frameGeometry()
            geo.moveCenter(screen.center())
            self.move(geo.topLeft())

    def _on_accept(self) -> None:
        if self.submitting:
            return
        dni, pwd = self.get_credentials()
        invalid = [w for w, v in ((self.user_edit, dni), (self.pass_edit, pwd)) if not v]
        if invalid:
            for w in invalid:
                self._set_error(w, True)
            invalid[0].setFocus()
            return
        self._set_submitting(True)
        self.runner.submit(lambda: self.api.auth.login(dni, pwd), self._on_login)

    def _on_login(self, result) -> None:
        if not isValid(self):
            return
        self._set_submitting(False)
        if not result.ok:
            QMessageBox.warning(self, "Login", result.error.message)
            return
        self.session = result.value
        self.session_store.login(self.session)
        self.accept()

    def get_credentials(self) -> tuple[str, str]:
        return self.user_edit.text().strip(), self.pass_edit.text().strip()

    def _set_submitting(self, on: bool) -> None:
        self.submitting = on
        self.buttons.setEnabled(not on)

    def _set_show_password(self, on: bool) -> None:
        self.pass_edit.setEchoMode(QLineEdit.EchoMode.Normal if on else QLineEdit.EchoMode.Password)

    def _set_error(self, widget: QLineEdit, on: bool) -> None:
        widget.setStyleSheet("border: 1px solid #ef4444; border-radius: 6px;" if on else "")
