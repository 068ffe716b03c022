"""Transformaciones puras de reportes del backend a filas para gráficos.

Aquí no se calculan totales financieros: solo se reordena, redondea y
etiqueta lo que ya viene agregado desde la API.
"""
from __future__ import annotations

from dataclasses import dataclass

from ..schemas import (
    ConferenceFinancialReport,
    ReporteGastosIngresos,
    ReporteGeneral,
    ReporteInversor,
)

COLOR_OK = "#10b981"
COLOR_WARN = "#f59e0b"
COLOR_BAD = "#ef4444"

ESTADO_COLORS = {
    "Excelente": ("#15803d", "#dcfce7"),
    "Bueno": ("#1d4ed8", "#dbeafe"),
    "Aceptable": ("#a16207", "#fef9c3"),
    "Deficiente": ("#b91c1c", "#fee2e2"),
    "Abandono": ("#374151", "#f3f4f6"),
}

MESES = (
    "Enero", "Febrero", "Marzo", "Abril", "Mayo", "Junio",
    "Julio", "Agosto", "Septiembre", "Octubre", "Noviembre", "Diciembre",
)


@dataclass(frozen=True)
class Slice:
    name: str
    value: float


@dataclass(frozen=True)
class RegionBar:
    region: str
    participantes: int
    pagado: float
    esperado: float
    diferencia: float


@dataclass(frozen=True)
class RankingPoint:
    name: str
    pagado: float
    esperado: float


@dataclass(frozen=True)
class ComplianceBar:
    name: str
    cumplimiento: float
    color: str


@dataclass(frozen=True)
class GroupedRow:
    """Una categoría del eje X con un valor por serie."""
    name: str
    values: dict[str, float]


def _r2(value: float) -> float:
    return round(value, 2)


def balance_label(diferencia: float) -> str:
    return "Pendiente" if diferencia >= 0 else "Excedente"


def amount_summary(report: ConferenceFinancialReport) -> list[Slice]:
    """Pagado frente a pendiente (o excedente si se pagó de más)."""
    diferencia = report.resumen.diferencia
    return [
        Slice("Pagado", _r2(report.resumen.monto_pagado)),
        Slice(balance_label(diferencia), _r2(abs(diferencia))),
    ]


def region_bars(report: ConferenceFinancialReport) -> list[RegionBar]:
    return [
        RegionBar(
            region=r.region_nombre,
            participantes=r.total_participantes,
            pagado=_r2(r.monto_pagado),
            esperado=_r2(r.monto_esperado),
            diferencia=_r2(r.diferencia),
        )
        for r in report.regiones
    ]


def region_ranking(report: ConferenceFinancialReport) -> list[RankingPoint]:
    """Regiones ordenadas por monto pagado (desc) y numeradas desde 1."""
    ordered = sorted(report.regiones, key=lambda r: r.monto_pagado, reverse=True)
    return [
        RankingPoint(f"{i}. {r.region_nombre}", _r2(r.monto_pagado), _r2(r.monto_esperado))
        for i, r in enumerate(ordered, start=1)
    ]


def unlinked_payments_total(report: ConferenceFinancialReport) -> float:
    return _r2(sum(p.monto for p in report.pagos_sin_participacion))


def compliance_color(percentage: float) -> str:
    if percentage >= 100:
        return COLOR_OK
    if percentage >= 80:
        return COLOR_WARN
    return COLOR_BAD


def payment_distribution(report: ReporteInversor) -> list[Slice]:
    return [
        Slice("Microinversionista", float(report.numero_pagos_micro)),
        Slice("Inversionista", float(report.numero_pagos_inversionista)),
    ]


def amounts_by_currency(report: ReporteInversor) -> list[Slice]:
    return [
        Slice("Soles", _r2(report.total_soles)),
        Slice("Dólares", _r2(report.total_dolares)),
        Slice("Euros", _r2(report.total_euros)),
    ]


def compliance_bars(report: ReporteInversor) -> list[ComplianceBar]:
    """Cumplimiento por moneda; se omiten monedas sin cuota (0 %)."""
    rows = [
        ("Soles", report.porcentaje_cumplimiento_soles),
        ("Dólares", report.porcentaje_cumplimiento_dolares),
    ]
    return [ComplianceBar(name, _r2(pct), compliance_color(pct)) for name, pct in rows if pct > 0]


def estado_colors(estado: str) -> tuple[str, str]:
    """(color de texto, color de fondo) para el estado del inversor."""
    return ESTADO_COLORS.get(estado, ("#374151", "#f3f4f6"))


def percentage_change(report: ReporteGeneral) -> list[Slice]:
    return [
        Slice("Soles", _r2(report.porcentaje_cambio_soles or 0.0)),
        Slice("Dólares", _r2(report.porcentaje_cambio_dolares or 0.0)),
        Slice("Euros", _r2(report.porcentaje_cambio_euros or 0.0)),
    ]


def monthly_evolution(report: ReporteGeneral) -> list[GroupedRow]:
    return [
        GroupedRow("Mes Anterior", {
            "Soles": report.total_soles_mes_anterior,
            "Dólares": report.total_dolares_mes_anterior,
            "Euros": report.total_euros_mes_anterior,
        }),
        GroupedRow("Mes Actual", {
            "Soles": report.total_soles,
            "Dólares": report.total_dolares,
            "Euros": report.total_euros,
        }),
    ]


def change_arrow(value: float | None) -> str:
    if value is None:
        return ""
    return "▲" if value >= 0 else "▼"


def income_vs_expenses(report: ReporteGastosIngresos) -> list[GroupedRow]:
    return [
        GroupedRow("Ingresos", {"Soles": report.total_ingresos_soles, "Dólares": report.total_ingresos_dolares}),
        GroupedRow("Gastos", {"Soles": report.total_gastos_soles, "Dólares": report.total_gastos_dolares}),
        GroupedRow("Balance", {"Soles": report.balance_soles, "Dólares": report.balance_dolares}),
    ]


def expenses_by_category(report: ReporteGastosIngresos) -> list[Slice]:
    return [Slice(c.categoria, _r2(c.monto_total_soles)) for c in report.gastos_por_categoria]


def month_name(month: int) -> str:
    return MESES[month - 1] if 1 <= month <= 12 else str(month)
