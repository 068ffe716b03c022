from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import cast
import logging
import sys

from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import (
    QApplication,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QStackedWidget,
    QStatusBar,
    QWidget,
)

from .config import Settings, load_settings
from .db import make_engine, make_session_factory
from .services.api_client import ApiClient
from .services.image_upload import ImageUploader
from .services.resources import RndcApi
from .session import AuthSession, SessionStore
from .storage import LocalStorage
from .ui.conference_reports_view import ConferenceReportsView
from .ui.conferences_view import ConferencesView
from .ui.dashboard_view import DashboardView
from .ui.investors_view import InvestorsView
from .ui.login_dialog import LoginDialog
from .ui.participations_view import ParticipationsView
from .ui.payments_view import PaymentsView
from .ui.regions_view import RegionsView
from .ui.sidebar import ADMIN_ONLY, DEFAULT_MODULE, SidebarNav
from .ui.tasks import TaskRunner
from .ui.users_view import UsersView

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Dependencias compartidas por el shell y las vistas."""
    settings: Settings
    storage: LocalStorage
    session_store: SessionStore
    api: RndcApi
    runner: TaskRunner
    uploader: ImageUploader

    @classmethod
    def create(cls, settings: Settings | None = None, storage: LocalStorage | None = None) -> "AppContext":
        settings = settings or load_settings()
        storage = storage or LocalStorage(make_session_factory(make_engine()))
        session_store = SessionStore(storage)
        client = ApiClient.from_settings(settings, token_provider=session_store.token)
        return cls(
            settings=settings,
            storage=storage,
            session_store=session_store,
            api=RndcApi(client),
            runner=TaskRunner(),
            uploader=ImageUploader.from_settings(settings),
        )

    def login_dialog(self) -> LoginDialog:
        return LoginDialog(self.api, self.runner, self.session_store)


class MainWindow(QMainWindow):
    def __init__(self, ctx: AppContext, session: AuthSession) -> None:
        super().__init__()
        self.ctx = ctx
        self.session = session
        self.setWindowTitle(f"RNDC Admin — {session.nombres or session.dni}")
        self.resize(1280, 800)

        self._create_actions()

        container = QWidget(self)
        layout = QHBoxLayout(container)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        self._sidebar = SidebarNav(self)
        self._sidebar.configure_for(session)
        layout.addWidget(self._sidebar, 0)
        self._stack = QStackedWidget(self)
        layout.addWidget(self._stack, 1)

        api, runner = ctx.api, ctx.runner
        self._dashboard_view = DashboardView(api, runner, session)
        self.views: dict[str, QWidget] = {
            "dashboard": self._dashboard_view,
            "conferencias": ConferencesView(api, runner, session),
            "usuarios": UsersView(api, runner, session),
            "participaciones": ParticipationsView(api, runner, session),
            "pagos": PaymentsView(api, runner, session, ctx.uploader),
            "regiones": RegionsView(api, runner, session),
            "reportes": ConferenceReportsView(api, runner, session),
            "inversores": InvestorsView(api, runner, session, ctx.storage),
        }
        for view in self.views.values():
            self._stack.addWidget(view)
        self.setCentralWidget(container)

        self._create_menus()
        self.setStatusBar(QStatusBar(self))
        self.statusBar().showMessage("Listo")
        self._user_label = QLabel(f"Usuario: {session.nombres or session.dni} ({session.rol})", self)
        self.statusBar().addPermanentWidget(self._user_label, 0)

        self._sidebar.moduleSelected.connect(self.on_navigate)
        self._sidebar.logoutRequested.connect(self.on_logout)
        self._dashboard_view.navigateRequested.connect(self.on_navigate)

        self.on_navigate(ctx.session_store.current_view() or DEFAULT_MODULE)

    @property
    def current_module(self) -> str:
        current = self._stack.currentWidget()
        return next((key for key, view in self.views.items() if view is current), DEFAULT_MODULE)

    def _create_actions(self) -> None:
        self.act_logout = QAction("&Cerrar sesión", self)
        self.act_logout.setShortcut(QKeySequence("Ctrl+L"))
        self.act_logout.triggered.connect(self.on_logout)

        self.act_exit = QAction("&Salir", self)
        self.act_exit.setShortcut(QKeySequence("Ctrl+Q"))
        self.act_exit.triggered.connect(self.close)

        self.act_about = QAction("&Acerca de", self)
        self.act_about.triggered.connect(self.on_about)

    def _create_menus(self) -> None:
        menubar = self.menuBar()
        m_file = menubar.addMenu("&Archivo")
        m_file.addAction(self.act_logout)
        m_file.addAction(self.act_exit)
        m_help = menubar.addMenu("Ay&uda")
        m_help.addAction(self.act_about)

    def on_about(self) -> None:
        QMessageBox.about(
            self,
            "Acerca de",
            f"RNDC Admin\nReunidos en Cristo\nAPI: {self.ctx.settings.api_base_url}",
        )

    def on_navigate(self, module_key: str) -> None:
        if module_key not in self.views:
            module_key = DEFAULT_MODULE
        if module_key in ADMIN_ONLY and not self.session.is_admin:
            logger.info("Módulo %s restringido para %s", module_key, self.session.rol)
            module_key = DEFAULT_MODULE
        self._stack.setCurrentWidget(self.views[module_key])
        self._sidebar.select_module(module_key)
        self.ctx.session_store.set_current_view(module_key)

    def on_logout(self) -> None:
        """Cierra la sesión y vuelve al login; si se cancela, sale de la aplicación."""
        app = QApplication.instance()
        reply = QMessageBox.question(
            self,
            "Cerrar sesión",
            "¿Seguro que deseas cerrar sesión?",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
            QMessageBox.StandardButton.No,
        )
        if reply != QMessageBox.StandardButton.Yes:
            return

        self.ctx.session_store.logout()
        login = self.ctx.login_dialog()
        self.close()
        if not login.exec() or login.session is None:
            if app is not None:
                app.quit()
            return
        new_window = MainWindow(self.ctx, login.session)
        # Mantener una referencia viva para que no la recolecte el GC
        if app is not None:
            setattr(app, "_main_window", new_window)
        new_window.show()


def create_qt_app() -> QApplication:
    """Crea (o reutiliza) la QApplication y aplica la hoja de estilos."""
    app = cast(QApplication, QApplication.instance() or QApplication(sys.argv))
    app.setApplicationName("RNDC Admin")
    theme = load_settings().theme
    style_file = "styles-dark.qss" if theme == "dark" else "styles.qss"
    styles_path = _resource_path("styles", style_file)
    if not styles_path.exists():
        styles_path = Path(__file__).with_name(style_file)
    if styles_path.exists():
        app.setStyleSheet(styles_path.read_text(encoding="utf-8"))
    return app


def _resource_path(*parts: str) -> Path:
    # En PyInstaller los datos se extraen en sys._MEIPASS
    if getattr(sys, "frozen", False) and hasattr(sys, "_MEIPASS"):
        return Path(getattr(sys, "_MEIPASS")) / Path(*parts)
    return Path.cwd() / Path(*parts)
