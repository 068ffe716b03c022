"""Conversión de fechas entre la API (ISO), los campos de formulario y la UI.

Se trabaja sobre las partes de la cadena, nunca sobre instantes con zona
horaria, así que el día del calendario no se desplaza.
"""
from __future__ import annotations

from datetime import date, datetime
import re

_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")
_DISPLAY_DATE = re.compile(r"^(\d{2})/(\d{2})/(\d{4})$")


def format_date_for_input(value: str | None) -> str:
    """``2024-03-05T00:00:00`` o ``05/03/2024`` -> ``2024-03-05``."""
    if not value:
        return ""
    if _DISPLAY_DATE.match(value.strip()):
        return parse_display_date(value)
    return value.split("T", 1)[0].split(" ", 1)[0]


def format_date_for_display(value: str | None) -> str:
    """``2024-03-05[T...]`` -> ``05/03/2024``; entradas no ISO se devuelven tal cual."""
    if not value:
        return ""
    m = _ISO_DATE.match(value)
    if not m:
        return value
    year, month, day = m.groups()
    return f"{day}/{month}/{year}"


def parse_display_date(value: str) -> str:
    """``05/03/2024`` -> ``2024-03-05`` (inversa de ``format_date_for_display``)."""
    m = _DISPLAY_DATE.match(value.strip())
    if not m:
        return ""
    day, month, year = m.groups()
    return f"{year}-{month}-{day}"


def format_date_for_api(value: str | date | None) -> str:
    """Fecha de formulario -> ``YYYY-MM-DDT00:00:00`` para el backend."""
    if value is None or value == "":
        return ""
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        value = value.isoformat()
    return f"{format_date_for_input(value)}T00:00:00"


def format_datetime(value: str | None) -> str:
    """``2024-03-05T14:07:00`` -> ``05/03/2024 14:07``."""
    if not value:
        return ""
    display = format_date_for_display(value)
    if "T" in value:
        time_part = value.split("T", 1)[1][:5]
        if re.match(r"^\d{2}:\d{2}$", time_part):
            return f"{display} {time_part}"
    return display


def to_date(value: str | None) -> date | None:
    """Fecha de calendario contenida en una cadena ISO."""
    if not value:
        return None
    m = _ISO_DATE.match(value)
    if not m:
        return None
    try:
        return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError:
        return None


def is_within(value: str | None, start: date | None, end: date | None) -> bool:
    """Rango inclusivo por día: ``end`` cubre el día completo."""
    d = to_date(value)
    if d is None:
        return start is None and end is None
    if start is not None and d < start:
        return False
    if end is not None and d > end:
        return False
    return True
