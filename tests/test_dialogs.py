from PySide6.QtCore import QDate
from PySide6.QtWidgets import QMessageBox

from src.rndc_admin.schemas import (
    CURRENCY_DOLARES,
    Conference,
    ConferenceRequest,
    Inversor,
    InversorRequest,
    PaymentRequest,
    Region,
    User,
)
from src.rndc_admin.services.api_client import ApiError, ErrorKind, Result
from src.rndc_admin.ui.conference_dialog import ConferenceDialog
from src.rndc_admin.ui.conferences_view import ConferencesView
from src.rndc_admin.ui.gasto_dialog import GastoDialog
from src.rndc_admin.ui.inversor_dialog import InversorDialog
from src.rndc_admin.ui.payment_dialog import PaymentDialog
from src.rndc_admin.ui.user_dialog import UserDialog

REGIONS = [Region(id="r1", nombres="Lima"), Region(id="r2", nombres="Cusco")]


def _fill_conference(dlg):
    dlg.edt_nombres.setText("Encuentro 2025")
    dlg.cmb_region.setCurrentIndex(dlg.cmb_region.findData("r1"))
    dlg.edt_inicio.setDate(QDate(2025, 1, 1))
    dlg.edt_fin.setDate(QDate(2025, 1, 3))
    dlg.edt_fin_ins.setDate(QDate(2025, 1, 1))
    dlg.spin_capacidad.setValue(100)


def test_create_conference_sends_payload_and_reloads(qtbot, fake_api, runner, admin_session, monkeypatch):
    fake_api.regions.list.return_value = Result.success(REGIONS)
    view = ConferencesView(fake_api, runner, admin_session)
    qtbot.addWidget(view)
    view.reload()
    assert fake_api.conferences.list.call_count == 1

    def fake_exec(dlg):
        _fill_conference(dlg)
        dlg.accept()
        return dlg.result()

    monkeypatch.setattr(ConferenceDialog, "exec", fake_exec)
    view._add()

    fake_api.conferences.create.assert_called_once_with(ConferenceRequest(
        nombres="Encuentro 2025", id_region="r1", fecha_inicio="2025-01-01", fecha_fin="2025-01-03",
        fecha_fin_ins="2025-01-01", capacidad=100, monto_ins=None,
    ))
    assert fake_api.conferences.list.call_count == 2
    assert view.success_banner.text() == "Conferencia creada correctamente"


def test_conference_dialog_validation_blocks_submit(qtbot, fake_api, runner, monkeypatch):
    warnings = []
    monkeypatch.setattr(QMessageBox, "warning", lambda *a, **k: warnings.append(a[2]))
    dlg = ConferenceDialog(fake_api, runner, REGIONS)
    qtbot.addWidget(dlg)
    dlg.accept()
    assert warnings == ["El nombre es obligatorio."]
    _fill_conference(dlg)
    dlg.edt_fin.setDate(QDate(2024, 12, 31))
    dlg.accept()
    assert "anterior" in warnings[-1]
    fake_api.conferences.create.assert_not_called()


def test_conference_dialog_keeps_open_on_api_error(qtbot, fake_api, runner, monkeypatch):
    warnings = []
    monkeypatch.setattr(QMessageBox, "warning", lambda *a, **k: warnings.append(a[2]))
    fake_api.conferences.update.return_value = Result.failure(ApiError(ErrorKind.SERVER, "Error al actualizar"))
    conf = Conference(id="c1", nombres="Retiro", id_region="r2", nombre_region="Cusco",
                      fecha_inicio="2025-03-01T00:00:00", fecha_fin="2025-03-03", fecha_fin_ins="2025-02-20",
                      capacidad=80)
    dlg = ConferenceDialog(fake_api, runner, REGIONS, conference=conf)
    qtbot.addWidget(dlg)
    assert dlg.cmb_region.currentData() == "r2"
    assert dlg.edt_inicio.date() == QDate(2025, 3, 1)
    dlg.accept()
    assert fake_api.conferences.update.call_args.args[0] == "c1"
    assert warnings == ["Error al actualizar"]
    assert dlg.result() == 0
    assert dlg.buttons.isEnabled()


def test_oyente_role_clears_and_disables_password(qtbot, fake_api, runner, admin_session):
    dlg = UserDialog(fake_api, runner, admin_session, REGIONS)
    qtbot.addWidget(dlg)
    dlg.cmb_rol.setCurrentIndex(dlg.cmb_rol.findData("Admin"))
    dlg.edt_password.setText("secreto")
    assert dlg.edt_password.isEnabled()
    dlg.cmb_rol.setCurrentIndex(dlg.cmb_rol.findData("Oyente"))
    assert dlg.edt_password.text() == ""
    assert not dlg.edt_password.isEnabled()
    assert dlg.to_request().password is None


def test_encargado_only_creates_oyentes_in_own_region(qtbot, fake_api, runner, encargado_session):
    dlg = UserDialog(fake_api, runner, encargado_session, REGIONS)
    qtbot.addWidget(dlg)
    assert [dlg.cmb_rol.itemData(i) for i in range(dlg.cmb_rol.count())] == ["Oyente"]
    assert dlg.cmb_region.currentData() == "r2"
    assert not dlg.cmb_region.isEnabled()


def test_payment_dialog_uploads_then_creates(qtbot, fake_api, runner, admin_session, tmp_path):
    uploader = type("Uploader", (), {})()
    uploaded = []

    def upload(path):
        uploaded.append(path)
        return Result.success("https://img.test/r.png")

    uploader.upload = upload
    conf = Conference(id="c1", nombres="Retiro", id_region="r1", nombre_region="Lima",
                      fecha_inicio="", fecha_fin="", fecha_fin_ins="", capacidad=10)
    dlg = PaymentDialog(fake_api, runner, uploader, admin_session, [conf], REGIONS)
    qtbot.addWidget(dlg)
    dlg.user_select.set_selected(User(dni="123", nombres="Luis", sexo=True, fecha_nacimiento="", telefono="",
                                      rol="Oyente", id_region="r1", nombre_region="Lima"))
    dlg.cmb_conferencia.setCurrentIndex(dlg.cmb_conferencia.findData("c1"))
    dlg.spin_monto.setValue(30)
    dlg.set_receipt(tmp_path / "r.png")
    dlg.accept()

    assert uploaded == [tmp_path / "r.png"]
    fake_api.payments.create.assert_called_once_with(
        PaymentRequest(dni_usuario="123", id_conferencia="c1", enlace="https://img.test/r.png", monto=30.0)
    )
    assert dlg.result() == 1


def test_payment_not_created_when_upload_fails(qtbot, fake_api, runner, admin_session, tmp_path, monkeypatch):
    monkeypatch.setattr(QMessageBox, "warning", lambda *a, **k: None)
    uploader = type("Uploader", (), {})()
    uploader.upload = lambda path: Result.failure(ApiError(ErrorKind.UPLOAD, "Error al subir la imagen"))
    conf = Conference(id="c1", nombres="Retiro", id_region="r1", nombre_region="Lima",
                      fecha_inicio="", fecha_fin="", fecha_fin_ins="", capacidad=10)
    dlg = PaymentDialog(fake_api, runner, uploader, admin_session, [conf], REGIONS)
    qtbot.addWidget(dlg)
    dlg.user_select.set_selected(User(dni="123", nombres="Luis", sexo=True, fecha_nacimiento="", telefono="",
                                      rol="Oyente", id_region="r1", nombre_region="Lima"))
    dlg.cmb_conferencia.setCurrentIndex(1)
    dlg.set_receipt(tmp_path / "r.png")
    dlg.accept()
    fake_api.payments.create.assert_not_called()
    assert dlg.result() == 0


def test_inversor_edit_uses_update(qtbot, fake_api, runner):
    inv = Inversor(id="i1", nombre="Carla", id_region="r1", nombre_region="Lima", monto_mensual_cuota=120.0,
                   currency_cuota=CURRENCY_DOLARES)
    dlg = InversorDialog(fake_api, runner, REGIONS, inversor=inv)
    qtbot.addWidget(dlg)
    dlg.spin_cuota.setValue(150)
    dlg.accept()
    fake_api.investors.update.assert_called_once_with(
        "i1", InversorRequest("Carla", "r1", 150.0, CURRENCY_DOLARES)
    )
    fake_api.investors.create.assert_not_called()


def test_gasto_requires_positive_amount(qtbot, fake_api, runner, monkeypatch):
    warnings = []
    monkeypatch.setattr(QMessageBox, "warning", lambda *a, **k: warnings.append(a[2]))
    dlg = GastoDialog(fake_api, runner)
    qtbot.addWidget(dlg)
    dlg.cmb_categoria.setCurrentIndex(1)
    dlg.accept()
    assert warnings == ["El monto debe ser mayor a cero."]
    dlg.spin_monto.setValue(80.5)
    dlg.edt_descripcion.setPlainText("  Sonido  ")
    dlg.accept()
    request = fake_api.expenses.create.call_args.args[0]
    assert request.monto == 80.5
    assert request.descripcion == "Sonido"
