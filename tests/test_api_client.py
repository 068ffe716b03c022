import json
from unittest.mock import MagicMock

import pytest
import requests

from src.rndc_admin.schemas import Conference, InversorRequest
from src.rndc_admin.services.api_client import ApiClient, ErrorKind, Result
from src.rndc_admin.services.resources import RndcApi


class FakeResponse:
    def __init__(self, status=200, body=None, text=None):
        self.status_code = status
        if text is None:
            text = "" if body is None else json.dumps(body)
        self.text = text
        self.content = text.encode("utf-8")

    def json(self):
        return json.loads(self.text)


@pytest.fixture
def http():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(http):
    return ApiClient("http://api.test/api/", token_provider=lambda: "abc", http=http, timeout=5)


def test_request_sends_bearer_and_drops_empty_params(client, http):
    http.request.return_value = FakeResponse(body=[])
    client.get("/Gastos", params={"mes": 3, "anio": None, "categoria": ""}, message="x")
    args, kwargs = http.request.call_args
    assert args == ("GET", "http://api.test/api/Gastos")
    assert kwargs["headers"]["Authorization"] == "Bearer abc"
    assert kwargs["headers"]["Content-Type"] == "application/json"
    assert kwargs["params"] == {"mes": 3}
    assert kwargs["timeout"] == 5


def test_no_token_means_no_authorization_header(http):
    http.request.return_value = FakeResponse(body={})
    ApiClient("http://api.test", http=http).get("/x", message="x")
    assert "Authorization" not in http.request.call_args.kwargs["headers"]


@pytest.mark.parametrize("status,kind", [
    (401, ErrorKind.UNAUTHORIZED),
    (403, ErrorKind.FORBIDDEN),
    (404, ErrorKind.NOT_FOUND),
    (409, ErrorKind.VALIDATION),
    (500, ErrorKind.SERVER),
])
def test_http_errors_become_results(client, http, status, kind):
    http.request.return_value = FakeResponse(status=status, text="boom")
    res = client.delete("/Regiones/1", message="Error al eliminar la región")
    assert not res.ok
    assert res.error.kind == kind
    assert res.error.message == "Error al eliminar la región"
    assert res.error.status == status


def test_transport_errors(client, http):
    http.request.side_effect = requests.Timeout()
    assert client.get("/x", message="m").error.kind == ErrorKind.NETWORK
    http.request.side_effect = requests.ConnectionError()
    res = client.get("/x", message="m")
    assert res.error.kind == ErrorKind.NETWORK
    assert res.error.message == "Error de conexión"


def test_empty_body_and_invalid_json(client, http):
    http.request.return_value = FakeResponse(status=204)
    assert client.post("/x", message="m") == Result.success(None)
    http.request.return_value = FakeResponse(text="<html>")
    assert client.get("/x", message="m").error.kind == ErrorKind.INVALID_RESPONSE


def test_shape_errors_map_to_invalid_response(client, http):
    http.request.return_value = FakeResponse(body={"not": "a list"})
    api = RndcApi(client)
    res = api.conferences.list()
    assert res.error.kind == ErrorKind.INVALID_RESPONSE


def test_conferences_list_parses(client, http):
    http.request.return_value = FakeResponse(body=[{"id": "c1", "nombres": "Conf", "capacidad": 10}])
    res = RndcApi(client).conferences.list()
    assert res.ok
    assert res.value == [Conference.from_api({"id": "c1", "nombres": "Conf", "capacidad": 10})]


def test_login_messages_and_role_gate(client, http):
    api = RndcApi(client)
    http.request.return_value = FakeResponse(status=401)
    assert api.auth.login("1", "x").error.message == "Credenciales inválidas"
    http.request.return_value = FakeResponse(status=500)
    assert api.auth.login("1", "x").error.message == "Error de servidor"
    http.request.return_value = FakeResponse(body={"dni": "1", "rol": "Oyente", "token": "t"})
    res = api.auth.login("1", "x")
    assert res.error.kind == ErrorKind.FORBIDDEN
    assert res.error.message == "Sin permisos de acceso"
    http.request.return_value = FakeResponse(body={"dni": "1", "nombres": "Ana", "rol": "Admin",
                                                   "nombreRegion": "Lima", "token": "t"})
    session = api.auth.login("1", "x").value
    assert session.is_admin
    assert session.token == "t"


def test_investor_update_uses_put(client, http):
    http.request.return_value = FakeResponse(status=204)
    RndcApi(client).investors.update("i1", InversorRequest("Ana", "r1", 100.0, 1))
    args, kwargs = http.request.call_args
    assert args == ("PUT", "http://api.test/api/Inversores/i1")
    assert kwargs["json"] == {"nombre": "Ana", "idRegion": "r1", "montoMensualCuota": 100.0, "currencyCuota": 1}


def test_expenses_income_report_global_or_monthly(client, http):
    http.request.return_value = FakeResponse(body={})
    api = RndcApi(client)
    api.investors.expenses_income_report()
    assert http.request.call_args.args[1].endswith("/ReportesInversores/gastos-ingresos/global")
    api.investors.expenses_income_report(5, 2024)
    assert http.request.call_args.args[1].endswith("/ReportesInversores/gastos-ingresos")
    assert http.request.call_args.kwargs["params"] == {"mes": 5, "anio": 2024}


def test_user_search_and_update_paths(client, http):
    http.request.return_value = FakeResponse(body=[])
    api = RndcApi(client)
    api.users.search("ana", "r9")
    assert http.request.call_args.args[1].endswith("/Usuarios/buscar")
    assert http.request.call_args.kwargs["params"] == {"nombre": "ana", "idRegion": "r9"}


def test_export_returns_raw_text(client, http):
    http.request.return_value = FakeResponse(text="DNI,Nombre\r\n")
    assert RndcApi(client).participations.export_csv().value == "DNI,Nombre\r\n"
