from unittest.mock import MagicMock

import pytest
from PySide6.QtWidgets import QMessageBox

from src.rndc_admin.app import AppContext, MainWindow
from src.rndc_admin.services.api_client import ApiError, ErrorKind, Result
from src.rndc_admin.storage import CURRENT_VIEW_KEY
from src.rndc_admin.ui.login_dialog import LoginDialog
from src.rndc_admin.ui.sidebar import ADMIN_ONLY, SidebarNav


@pytest.fixture
def ctx(storage, session_store, fake_api, runner):
    settings = MagicMock(api_base_url="http://api.test/api")
    return AppContext(settings=settings, storage=storage, session_store=session_store, api=fake_api,
                      runner=runner, uploader=MagicMock())


def test_sidebar_hides_admin_modules_for_encargado(qtbot, encargado_session):
    nav = SidebarNav()
    qtbot.addWidget(nav)
    nav.configure_for(encargado_session)
    for key in ADMIN_ONLY:
        assert not nav.is_module_visible(key)
    assert nav.is_module_visible("pagos")
    assert "Encargado" in nav.user_label.text()


def test_sidebar_click_emits_module(qtbot, admin_session):
    nav = SidebarNav()
    qtbot.addWidget(nav)
    nav.configure_for(admin_session)
    with qtbot.waitSignal(nav.moduleSelected) as blocker:
        nav._buttons["regiones"].click()
    assert blocker.args == ["regiones"]


def test_main_window_restores_last_view(qtbot, ctx, admin_session):
    ctx.session_store.login(admin_session)
    ctx.session_store.set_current_view("pagos")
    win = MainWindow(ctx, admin_session)
    qtbot.addWidget(win)
    assert win.current_module == "pagos"


def test_main_window_blocks_admin_modules_for_encargado(qtbot, ctx, storage, encargado_session):
    win = MainWindow(ctx, encargado_session)
    qtbot.addWidget(win)
    win.on_navigate("regiones")
    assert win.current_module == "dashboard"
    win.on_navigate("participaciones")
    assert win.current_module == "participaciones"
    assert storage.get(CURRENT_VIEW_KEY) == "participaciones"
    win.on_navigate("no-existe")
    assert win.current_module == "dashboard"


def test_logout_cancelled_keeps_session(qtbot, ctx, admin_session, monkeypatch):
    ctx.session_store.login(admin_session)
    monkeypatch.setattr(QMessageBox, "question", lambda *a, **k: QMessageBox.StandardButton.No)
    win = MainWindow(ctx, admin_session)
    qtbot.addWidget(win)
    win.on_logout()
    assert ctx.session_store.current == admin_session


def test_login_requires_both_fields(qtbot, fake_api, runner, session_store):
    dlg = LoginDialog(fake_api, runner, session_store)
    qtbot.addWidget(dlg)
    dlg.user_edit.setText("12345678")
    dlg._on_accept()
    fake_api.auth.login.assert_not_called()
    assert "ef4444" in dlg.pass_edit.styleSheet()


def test_login_error_shows_message(qtbot, fake_api, runner, session_store, monkeypatch):
    shown = []
    monkeypatch.setattr(QMessageBox, "warning", lambda *a, **k: shown.append(a[2]))
    fake_api.auth.login.return_value = Result.failure(ApiError(ErrorKind.UNAUTHORIZED, "Credenciales inválidas"))
    dlg = LoginDialog(fake_api, runner, session_store)
    qtbot.addWidget(dlg)
    dlg.user_edit.setText("12345678")
    dlg.pass_edit.setText("x")
    dlg._on_accept()
    assert shown == ["Credenciales inválidas"]
    assert session_store.current is None
    assert dlg.buttons.isEnabled()


def test_login_success_persists_session(qtbot, fake_api, runner, session_store, admin_session):
    fake_api.auth.login.return_value = Result.success(admin_session)
    dlg = LoginDialog(fake_api, runner, session_store)
    qtbot.addWidget(dlg)
    dlg.user_edit.setText(" 11111111 ")
    dlg.pass_edit.setText("clave")
    dlg._on_accept()
    fake_api.auth.login.assert_called_once_with("11111111", "clave")
    assert dlg.result() == 1
    assert session_store.restore() == admin_session
