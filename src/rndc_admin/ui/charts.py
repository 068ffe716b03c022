from __future__ import annotations

from typing import Sequence

from PySide6.QtCharts import (
    QBarCategoryAxis,
    QBarSeries,
    QBarSet,
    QChart,
    QChartView,
    QLineSeries,
    QPieSeries,
    QValueAxis,
)
from PySide6.QtCore import Qt
from PySide6.QtGui import QColor, QPainter

PALETTE = ("#3b82f6", "#22c55e", "#f97316", "#a855f7", "#ef4444", "#14b8a6", "#eab308", "#64748b")


def make_chart_view(title: str = "", min_height: int = 260) -> QChartView:
    chart = QChart()
    chart.setTitle(title)
    chart.setAnimationOptions(QChart.AnimationOption.NoAnimation)
    view = QChartView(chart)
    view.setRenderHint(QPainter.RenderHint.Antialiasing)
    view.setMinimumHeight(min_height)
    return view


def clear_chart(chart: QChart) -> None:
    chart.removeAllSeries()
    for axis in chart.axes():
        chart.removeAxis(axis)


def _value_axis(values: Sequence[float]) -> QValueAxis:
    axis = QValueAxis()
    low = min([0.0, *values])
    high = max([0.0, *values])
    axis.setRange(low, high if high > low else low + 1)
    axis.setLabelFormat("%.0f")
    return axis


def set_bars(chart: QChart, categories: Sequence[str], series: dict[str, Sequence[float]],
             colors: Sequence[str] = PALETTE) -> None:
    """Barras agrupadas: una serie por clave, un valor por categoría."""
    clear_chart(chart)
    if not categories:
        return
    bars = QBarSeries()
    all_values: list[float] = []
    for i, (name, values) in enumerate(series.items()):
        bar_set = QBarSet(name)
        bar_set.setColor(QColor(colors[i % len(colors)]))
        for v in values:
            bar_set.append(float(v))
            all_values.append(float(v))
        bars.append(bar_set)
    chart.addSeries(bars)
    axis_x = QBarCategoryAxis()
    axis_x.append(list(categories))
    chart.addAxis(axis_x, Qt.AlignmentFlag.AlignBottom)
    bars.attachAxis(axis_x)
    axis_y = _value_axis(all_values)
    chart.addAxis(axis_y, Qt.AlignmentFlag.AlignLeft)
    bars.attachAxis(axis_y)
    chart.legend().setVisible(len(series) > 1)


def set_colored_bars(chart: QChart, rows: Sequence[tuple[str, float, str]]) -> None:
    """Una barra por fila con su propio color (p. ej. cumplimiento por umbral)."""
    clear_chart(chart)
    if not rows:
        return
    bars = QBarSeries()
    categories = [name for name, _v, _c in rows]
    for i, (name, value, color) in enumerate(rows):
        bar_set = QBarSet(name)
        bar_set.setColor(QColor(color))
        for j in range(len(rows)):
            bar_set.append(float(value) if j == i else 0.0)
        bars.append(bar_set)
    bars.setBarWidth(0.9)
    chart.addSeries(bars)
    axis_x = QBarCategoryAxis()
    axis_x.append(categories)
    chart.addAxis(axis_x, Qt.AlignmentFlag.AlignBottom)
    bars.attachAxis(axis_x)
    axis_y = _value_axis([v for _n, v, _c in rows])
    chart.addAxis(axis_y, Qt.AlignmentFlag.AlignLeft)
    bars.attachAxis(axis_y)
    chart.legend().hide()


def set_pie(chart: QChart, slices: Sequence[tuple[str, float]], colors: Sequence[str] = PALETTE) -> None:
    clear_chart(chart)
    values = [(name, float(v)) for name, v in slices if v]
    if not values:
        return
    pie = QPieSeries()
    for i, (name, value) in enumerate(values):
        s = pie.append(f"{name}: {value:,.2f}", value)
        s.setColor(QColor(colors[i % len(colors)]))
        s.setLabelVisible(True)
    chart.addSeries(pie)
    chart.legend().setVisible(True)


def set_lines(chart: QChart, categories: Sequence[str], series: dict[str, Sequence[float]],
              colors: Sequence[str] = PALETTE) -> None:
    """Líneas sobre un eje de categorías (posición i -> categoría i)."""
    clear_chart(chart)
    if not categories:
        return
    axis_x = QBarCategoryAxis()
    axis_x.append(list(categories))
    all_values = [float(v) for values in series.values() for v in values]
    axis_y = _value_axis(all_values)
    chart.addAxis(axis_x, Qt.AlignmentFlag.AlignBottom)
    chart.addAxis(axis_y, Qt.AlignmentFlag.AlignLeft)
    for i, (name, values) in enumerate(series.items()):
        line = QLineSeries()
        line.setName(name)
        line.setColor(QColor(colors[i % len(colors)]))
        for x, v in enumerate(values):
            line.append(float(x), float(v))
        chart.addSeries(line)
        line.attachAxis(axis_x)
        line.attachAxis(axis_y)
    chart.legend().setVisible(True)
