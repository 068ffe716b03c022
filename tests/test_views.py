from datetime import date

from PySide6.QtWidgets import QMessageBox, QPushButton

from src.rndc_admin.schemas import (
    Conference,
    ConferenceFinancialReport,
    PagoInversor,
    Participation,
    Region,
    User,
)
from src.rndc_admin.services.api_client import ApiError, ErrorKind, Result
from src.rndc_admin.services.resources import ParticipationsResource
from src.rndc_admin.storage import INVESTORS_TAB_KEY
from src.rndc_admin.ui.conference_reports_view import ConferenceReportsView
from src.rndc_admin.ui.dashboard_view import DashboardView
from src.rndc_admin.ui.gastos_view import GastosView
from src.rndc_admin.ui.investors_view import InvestorsView, pago_inversor_matches
from src.rndc_admin.ui.participation_dialog import ParticipationDialog
from src.rndc_admin.ui.participations_view import ParticipationsView
from src.rndc_admin.ui.regions_view import RegionsView
from src.rndc_admin.ui.user_search_select import UserSearchSelect

from conftest import DeferredRunner


def _answer(monkeypatch, button):
    asked = []

    def question(*args, **kwargs):
        asked.append(args[2])
        return button

    monkeypatch.setattr(QMessageBox, "question", question)
    return asked


def _regions_view(qtbot, fake_api, runner, session):
    fake_api.regions.list.return_value = Result.success([Region("r1", "Lima"), Region("r2", "Cusco")])
    view = RegionsView(fake_api, runner, session)
    qtbot.addWidget(view)
    view.reload()
    view.table.selectRow(0)
    return view


def test_delete_region_cancelled_does_nothing(qtbot, fake_api, runner, admin_session, monkeypatch):
    view = _regions_view(qtbot, fake_api, runner, admin_session)
    asked = _answer(monkeypatch, QMessageBox.StandardButton.No)
    view.btn_delete.click()
    assert len(asked) == 1
    fake_api.regions.delete.assert_not_called()
    assert fake_api.regions.list.call_count == 1


def test_delete_region_confirmed_deletes_once_and_reloads(qtbot, fake_api, runner, admin_session, monkeypatch):
    view = _regions_view(qtbot, fake_api, runner, admin_session)
    _answer(monkeypatch, QMessageBox.StandardButton.Yes)
    view.btn_delete.click()
    fake_api.regions.delete.assert_called_once_with("r1")
    assert fake_api.regions.list.call_count == 2
    assert view.success_banner.text() == "Región eliminada correctamente"


def test_failed_delete_shows_error_and_skips_reload(qtbot, fake_api, runner, admin_session, monkeypatch):
    view = _regions_view(qtbot, fake_api, runner, admin_session)
    fake_api.regions.delete.return_value = Result.failure(ApiError(ErrorKind.VALIDATION, "Error al eliminar la región"))
    _answer(monkeypatch, QMessageBox.StandardButton.Yes)
    view.btn_delete.click()
    assert view.error_banner.text() == "Error al eliminar la región"
    assert fake_api.regions.list.call_count == 1


def test_stale_reload_delivered_late_does_not_overwrite(qtbot, fake_api, admin_session):
    runner = DeferredRunner()
    view = RegionsView(fake_api, runner, admin_session)
    qtbot.addWidget(view)
    view.reload()
    first = runner.pending.pop(0)
    view.reload()
    runner.flush()
    first[1]({"regions": Result.success([Region("x", "Tarde")])})
    assert view.table.rowCount() == 0


def test_region_search_resets_to_first_page(qtbot, fake_api, runner, admin_session):
    fake_api.regions.list.return_value = Result.success([Region(str(i), f"Región {i:02d}") for i in range(25)])
    view = RegionsView(fake_api, runner, admin_session)
    qtbot.addWidget(view)
    view.reload()
    view.pagination.btn_next.click()
    assert view.state.page == 2
    view.edt_search.setText("Región 2")
    assert view.state.page == 1
    assert view.table.rowCount() == 6


def _user(dni, nombre="Ana"):
    return User(dni=dni, nombres=nombre, sexo=False, fecha_nacimiento="", telefono="", rol="Oyente",
                id_region="r1", nombre_region="Lima")


def test_search_select_debounces(qtbot, runner):
    queries = []

    def search(q):
        queries.append(q)
        return Result.success([_user(str(i)) for i in range(15)])

    sel = UserSearchSelect(search, runner)
    qtbot.addWidget(sel)
    sel.show()
    qtbot.keyClicks(sel.edit, "a")
    qtbot.wait(UserSearchSelect.DEBOUNCE_MS + 150)
    assert queries == []

    qtbot.keyClicks(sel.edit, "na")
    qtbot.wait(UserSearchSelect.DEBOUNCE_MS + 150)
    assert queries == ["ana"]
    assert sel.results.count() == UserSearchSelect.MAX_RESULTS

    sel.edit.clear()
    qtbot.keyClicks(sel.edit, "l")
    assert sel.results.count() == 0
    assert sel.results.isHidden()


def test_search_select_drops_stale_results(qtbot):
    runner = DeferredRunner()
    sel = UserSearchSelect(lambda q: Result.success([_user("1", q)]), runner)
    qtbot.addWidget(sel)
    sel.show()
    qtbot.keyClicks(sel.edit, "ana")
    qtbot.wait(UserSearchSelect.DEBOUNCE_MS + 150)
    qtbot.keyClicks(sel.edit, "b")
    qtbot.wait(UserSearchSelect.DEBOUNCE_MS + 150)
    assert len(runner.pending) == 2
    runner.run(1)
    runner.run(0)
    assert sel.results.count() == 1
    assert sel.results.item(0).text().startswith("anab")


def test_search_select_pick_emits_user(qtbot, runner):
    sel = UserSearchSelect(lambda q: Result.success([_user("9", "Beto")]), runner)
    qtbot.addWidget(sel)
    sel.show()
    qtbot.keyClicks(sel.edit, "be")
    qtbot.wait(UserSearchSelect.DEBOUNCE_MS + 150)
    with qtbot.waitSignal(sel.userSelected) as blocker:
        sel._on_item_clicked(sel.results.item(0))
    assert blocker.args[0].dni == "9"
    assert sel.selected_dni == "9"
    assert sel.edit.text() == "Beto (9)"


def test_dashboard_renders_partial_results(qtbot, fake_api, runner, admin_session):
    fake_api.conferences.list.return_value = Result.success([
        Conference(id="c1", nombres="Retiro", id_region="r1", nombre_region="Lima", fecha_inicio="2025-01-01",
                   fecha_fin="", fecha_fin_ins="", capacidad=10),
    ])
    fake_api.reports.users_total.return_value = Result.failure(
        ApiError(ErrorKind.SERVER, "Error al cargar el total de usuarios")
    )
    view = DashboardView(fake_api, runner, admin_session)
    qtbot.addWidget(view)
    view.reload()
    assert view.card_conferences.value_lbl.text() == "1"
    assert view.card_users.value_lbl.text() == "—"
    assert view.section_errors["users_total"].text() == "Error al cargar el total de usuarios"
    assert view.section_errors["conferences"].isHidden()


def test_dashboard_quick_actions_follow_role(qtbot, fake_api, runner, encargado_session):
    view = DashboardView(fake_api, runner, encargado_session)
    qtbot.addWidget(view)
    assert "conferencias" not in view.quick_buttons
    with qtbot.waitSignal(view.navigateRequested) as blocker:
        view.quick_buttons["pagos"].click()
    assert blocker.args == ["pagos"]


def test_gastos_filters_are_sent_to_server(qtbot, fake_api, runner, admin_session):
    view = GastosView(fake_api, runner, admin_session)
    qtbot.addWidget(view)
    view.cmb_mes.setCurrentIndex(view.cmb_mes.findData(5))
    fake_api.expenses.list.assert_called_with(5, None, None)
    view.cmb_categoria.setCurrentIndex(1)
    categoria = view.cmb_categoria.currentData()
    fake_api.expenses.list.assert_called_with(5, None, categoria)
    fake_api.expenses.totals.assert_called_with(categoria)


def test_investors_tab_is_restored_and_saved(qtbot, fake_api, runner, admin_session, storage):
    storage.set(INVESTORS_TAB_KEY, "tipos")
    view = InvestorsView(fake_api, runner, admin_session, storage)
    qtbot.addWidget(view)
    assert view.tabs.currentIndex() == 3
    view.tabs.setCurrentIndex(1)
    assert storage.get(INVESTORS_TAB_KEY) == "pagos"


def test_pago_inversor_filter():
    pago = PagoInversor(id="p1", id_inversor="i1", nombre_inversor="Carlos Ruiz", monto=100.0, currency=1,
                        id_tipo="t1", es_microinversionista=True, fecha_creacion="2024-05-10T15:00:00")
    assert pago_inversor_matches(pago, {})
    assert pago_inversor_matches(pago, {"q": "ruiz", "currency": 1, "es_micro": True})
    assert not pago_inversor_matches(pago, {"currency": 2})
    assert not pago_inversor_matches(pago, {"es_micro": False})
    assert pago_inversor_matches(pago, {"desde": date(2024, 5, 10), "hasta": date(2024, 5, 10)})
    assert not pago_inversor_matches(pago, {"desde": date(2024, 5, 11)})


def test_conference_reports_restricted_for_encargado(qtbot, fake_api, runner, encargado_session):
    view = ConferenceReportsView(fake_api, runner, encargado_session)
    qtbot.addWidget(view)
    view.reload()
    fake_api.conferences.list.assert_not_called()
    fake_api.reports.conference.assert_not_called()


def test_conference_report_loads_for_selection(qtbot, fake_api, runner, admin_session):
    fake_api.conferences.list.return_value = Result.success([
        Conference(id="c2", nombres="Zeta", id_region="r1", nombre_region="Lima", fecha_inicio="", fecha_fin="",
                   fecha_fin_ins="", capacidad=10),
        Conference(id="c1", nombres="Alfa", id_region="r1", nombre_region="Lima", fecha_inicio="", fecha_fin="",
                   fecha_fin_ins="", capacidad=10),
    ])
    fake_api.reports.conference.return_value = Result.success(ConferenceFinancialReport.from_api({
        "conferencia": {"nombres": "Alfa", "capacidad": 10},
        "resumenParticipantes": {"totalParticipantes": 4, "montoEsperado": 200, "montoPagado": 150},
    }))
    view = ConferenceReportsView(fake_api, runner, admin_session)
    qtbot.addWidget(view)
    view.reload()
    assert view.cmb_conference.itemText(1) == "Alfa"
    view.cmb_conference.setCurrentIndex(1)
    fake_api.reports.conference.assert_called_with("c1", None)
    assert view.report is not None
    assert view.card_participants.value_lbl.text() == "4"
    assert view.btn_pdf.isEnabled()


def test_activity_feed_escapes_names(qtbot, fake_api, runner, admin_session):
    fake_api.conferences.list.return_value = Result.success([
        Conference(id="c1", nombres="Retiro <Norte> & Sur", id_region="r1", nombre_region="Lima",
                   fecha_inicio="2025-01-01", fecha_fin="", fecha_fin_ins="", capacidad=10),
    ])
    view = DashboardView(fake_api, runner, admin_session)
    qtbot.addWidget(view)
    view.reload()
    texts = [view.activity_list.itemAt(i).widget().text() for i in range(view.activity_list.count())]
    assert len(texts) == 1
    assert "Retiro &lt;Norte&gt; &amp; Sur" in texts[0]
    assert "<Norte>" not in texts[0]


def test_participations_offer_no_edit(qtbot, fake_api, runner, admin_session, monkeypatch):
    fake_api.participations.list.return_value = Result.success([
        Participation(id="p1", dni_usuario="123", nombre_usuario="Luis", id_conferencia="c1",
                      nombre_conferencia="Retiro", servicio="Completo", fecha="2025-01-01"),
    ])
    opened = []
    monkeypatch.setattr(ParticipationDialog, "exec", lambda dlg: opened.append(dlg) or 0)
    view = ParticipationsView(fake_api, runner, admin_session)
    qtbot.addWidget(view)
    view.reload()
    view.table.selectRow(0)

    assert not hasattr(view, "btn_edit")
    assert [b.text() for b in view.findChildren(QPushButton) if "Editar" in b.text()] == []
    view.table.cellDoubleClicked.emit(0, 1)
    assert opened == []
    assert not hasattr(ParticipationsResource, "update")
    assert view.btn_delete.isEnabled()
