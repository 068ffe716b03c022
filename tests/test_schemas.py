from src.rndc_admin.schemas import (
    CURRENCY_DOLARES,
    CURRENCY_EUROS,
    CURRENCY_SOLES,
    Conference,
    ConferenceRequest,
    Gasto,
    PagoInversor,
    PaymentRequest,
    ReporteGastosIngresos,
    User,
    UserRequest,
    categoria_name,
    format_money,
    normalize_currency,
)


def test_currency_accepts_codes_and_names():
    assert normalize_currency(0) == CURRENCY_DOLARES
    assert normalize_currency("1") == CURRENCY_SOLES
    assert normalize_currency("Euros") == CURRENCY_EUROS
    assert normalize_currency("yen") is None
    assert normalize_currency(True) is None
    assert format_money(10, "Soles") == "S/ 10.00"
    assert format_money(1234.5, 0) == "$ 1,234.50"


def test_conference_status():
    base = dict(id="c", nombres="C", id_region="r", nombre_region="R", fecha_inicio="", fecha_fin="",
                fecha_fin_ins="", capacidad=10)
    assert Conference(**base, participantes_inscritos=3).status == "Disponible"
    assert Conference(**base, participantes_inscritos=10).status == "Completa"
    assert Conference(**base, participantes_inscritos=0, esta_vigente=False).status == "No Vigente"


def test_user_from_api_reads_nested_region():
    u = User.from_api({"dni": "123", "nombres": "Ana", "sexo": False, "fechaNacimiento": "2000-01-01T00:00:00",
                       "telefono": "999", "rol": "Oyente", "region": {"id": "r1", "nombres": "Lima"}})
    assert u.id_region == "r1"
    assert u.nombre_region == "Lima"
    assert u.sexo_label == "Femenino"


def test_user_payload_drops_password_for_oyente():
    req = UserRequest(dni="1", nombres="A", sexo=True, fecha_nacimiento="2000-01-01T00:00:00",
                      telefono="9", rol="Oyente", id_region="r", password="secret")
    assert req.to_payload()["password"] is None
    update = req.to_update_payload()
    assert "dni" not in update
    assert update["nuevoDni"] == "1"


def test_optional_amounts_are_omitted():
    conf = ConferenceRequest("Conf", "r1", "2025-01-10", "2025-01-12", "2024-12-31", 100)
    assert "montoIns" not in conf.to_payload()
    pay = PaymentRequest("1", "c1", "https://img/x.png")
    assert "monto" not in pay.to_payload()
    assert PaymentRequest("1", "c1", "u", monto=50.0).to_payload()["monto"] == 50.0


def test_investor_payment_type_from_nested_tipo():
    p = PagoInversor.from_api({"id": "p", "idInversor": "i", "monto": "20.5", "currency": "Soles",
                               "tipo": {"id": "t", "esMicroinversionista": True}, "fechaCreacion": "2024-05-01"})
    assert p.monto == 20.5
    assert p.currency == CURRENCY_SOLES
    assert p.id_tipo == "t"
    assert p.es_microinversionista is True


def test_categoria_index_or_text():
    assert categoria_name(0) == "Marketing"
    assert categoria_name("Legal") == "Legal"
    assert Gasto.from_api({"id": "g", "monto": 5, "categoria": 7}).categoria == "Otros"


def test_expenses_report_alert_as_bool():
    report = ReporteGastosIngresos.from_api({"alertaConsumoSoles": True, "estadoFinanciero": "Estable"})
    assert report.alerta_consumo_soles
    assert ReporteGastosIngresos.from_api({"alertaConsumoSoles": False}).alerta_consumo_soles == ""
