from __future__ import annotations

from PySide6.QtCore import Signal
from PySide6.QtWidgets import QLabel, QPushButton, QSizePolicy, QSpacerItem, QVBoxLayout, QWidget

from ..session import AuthSession

# (clave, texto, solo Admin)
MODULES = (
    ("dashboard", "🏠 Dashboard", False),
    ("conferencias", "📅 Conferencias", True),
    ("usuarios", "👥 Usuarios", False),
    ("participaciones", "✅ Participaciones", False),
    ("pagos", "💳 Pagos", False),
    ("regiones", "🗺️ Regiones", True),
    ("reportes", "📊 Reportes", True),
    ("inversores", "💼 Inversores", False),
)
ADMIN_ONLY = frozenset(key for key, _text, admin in MODULES if admin)
DEFAULT_MODULE = "dashboard"


class SidebarNav(QWidget):
    moduleSelected = Signal(str)
    logoutRequested = Signal()

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self.setObjectName("SidebarNav")

        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 8, 8, 8)
        layout.setSpacing(6)

        brand = QLabel("RNDC\nReunidos en Cristo")
        brand.setObjectName("SidebarBrand")
        layout.addWidget(brand)
        self.user_label = QLabel("")
        self.user_label.setObjectName("SidebarUserLabel")
        self.user_label.setWordWrap(True)
        layout.addWidget(self.user_label)

        self._buttons: dict[str, QPushButton] = {}
        for key, text, _admin in MODULES:
            btn = QPushButton(text, self)
            btn.setObjectName(f"nav_{key}")
            btn.setCheckable(True)
            btn.clicked.connect(lambda _checked=False, k=key: self._on_click(k))
            btn.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Fixed)
            layout.addWidget(btn)
            self._buttons[key] = btn

        layout.addItem(QSpacerItem(0, 0, QSizePolicy.Policy.Minimum, QSizePolicy.Policy.Expanding))

        self._btn_logout = QPushButton("🚪 Cerrar sesión", self)
        self._btn_logout.setObjectName("nav_logout")
        self._btn_logout.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Fixed)
        self._btn_logout.clicked.connect(self.logoutRequested.emit)
        layout.addWidget(self._btn_logout)

        self.select_module(DEFAULT_MODULE)

    def configure_for(self, session: AuthSession) -> None:
        """Oculta las entradas de Admin a los demás roles y muestra el usuario."""
        self.user_label.setText(f"{session.nombres or session.dni}\n{session.rol} · {session.nombre_region}")
        for key in ADMIN_ONLY:
            self.set_module_visible(key, session.is_admin)

    def _on_click(self, key: str) -> None:
        self.select_module(key)
        self.moduleSelected.emit(key)

    def select_module(self, key: str) -> None:
        for k, btn in self._buttons.items():
            btn.setChecked(k == key)

    def is_module_visible(self, key: str) -> bool:
        btn = self._buttons.get(key)
        return btn is not None and not btn.isHidden()

    def set_module_visible(self, module: str, visible: bool) -> None:
        """Muestra u oculta un botón; si estaba seleccionado vuelve al dashboard."""
        btn = self._buttons.get(module)
        if not btn:
            return
        btn.setVisible(bool(visible))
        if not visible and btn.isChecked():
            self.select_module(DEFAULT_MODULE)
