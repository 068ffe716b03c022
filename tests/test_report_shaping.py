from src.rndc_admin.schemas import (
    ConferenceFinancialReport,
    ReporteGastosIngresos,
    ReporteGeneral,
    ReporteInversor,
)
from src.rndc_admin.services import report_shaping as shaping


def _conference_report(pagado=300.0, esperado=500.0):
    return ConferenceFinancialReport.from_api({
        "conferencia": {"nombres": "Conf"},
        "resumenParticipantes": {"totalParticipantes": 5, "montoEsperado": esperado,
                                 "montoPagado": pagado, "diferencia": esperado - pagado},
        "regiones": [
            {"regionNombre": "Lima", "montoPagado": 100.0, "montoEsperado": 200.0, "diferencia": 100.0},
            {"regionNombre": "Cusco", "montoPagado": 200.004, "montoEsperado": 300.0, "diferencia": 99.996},
        ],
        "pagosSinParticipacion": [{"monto": 10.5}, {"monto": 4.5}],
    })


def test_amount_summary_pending_and_excess():
    assert [(s.name, s.value) for s in shaping.amount_summary(_conference_report())] == [
        ("Pagado", 300.0), ("Pendiente", 200.0)]
    excess = shaping.amount_summary(_conference_report(pagado=600.0))
    assert excess[1].name == "Excedente"
    assert excess[1].value == 100.0


def test_region_ranking_sorted_and_numbered():
    ranking = shaping.region_ranking(_conference_report())
    assert [r.name for r in ranking] == ["1. Cusco", "2. Lima"]
    assert ranking[0].pagado == 200.0


def test_region_bars_and_unlinked_total():
    report = _conference_report()
    bars = shaping.region_bars(report)
    assert bars[1].diferencia == 100.0
    assert shaping.unlinked_payments_total(report) == 15.0


def test_compliance_thresholds():
    assert shaping.compliance_color(100) == shaping.COLOR_OK
    assert shaping.compliance_color(99.9) == shaping.COLOR_WARN
    assert shaping.compliance_color(80) == shaping.COLOR_WARN
    assert shaping.compliance_color(79.9) == shaping.COLOR_BAD


def test_compliance_bars_skip_zero_currency():
    report = ReporteInversor.from_api({"porcentajeCumplimientoSoles": 85.0, "porcentajeCumplimientoDolares": 0})
    bars = shaping.compliance_bars(report)
    assert [(b.name, b.color) for b in bars] == [("Soles", shaping.COLOR_WARN)]


def test_payment_distribution_counts():
    report = ReporteInversor.from_api({"numeroPagosMicroinversionista": 2, "numeroPagosInversionista": 3})
    assert [s.value for s in shaping.payment_distribution(report)] == [2.0, 3.0]


def test_monthly_evolution_and_change():
    report = ReporteGeneral.from_api({"totalSoles": 120, "totalSolesMesAnterior": 100,
                                      "porcentajeCambioSoles": 20.0})
    rows = shaping.monthly_evolution(report)
    assert [r.name for r in rows] == ["Mes Anterior", "Mes Actual"]
    assert rows[1].values["Soles"] == 120
    assert shaping.percentage_change(report)[0].value == 20.0
    assert shaping.change_arrow(20.0) == "▲"
    assert shaping.change_arrow(-1) == "▼"
    assert shaping.change_arrow(None) == ""


def test_income_vs_expenses_and_categories():
    report = ReporteGastosIngresos.from_api({
        "totalIngresosSoles": 1000, "totalGastosSoles": 400, "balanceSoles": 600,
        "gastosPorCategoria": [{"categoria": "Marketing", "montoTotalSoles": 99.999}],
    })
    rows = shaping.income_vs_expenses(report)
    assert [r.name for r in rows] == ["Ingresos", "Gastos", "Balance"]
    assert rows[2].values["Soles"] == 600
    assert shaping.expenses_by_category(report)[0].value == 100.0


def test_month_name():
    assert shaping.month_name(1) == "Enero"
    assert shaping.month_name(13) == "13"
