from __future__ import annotations

from pathlib import Path
from typing import Iterable, Mapping
import csv
import io
import json
import logging

from ..schemas import Participation
from ..utils.dates import format_date_for_display

logger = logging.getLogger(__name__)

PARTICIPATION_HEADER = ("DNI", "Nombre", "Conferencia", "Servicio", "Fecha", "Almuerzo", "Cena")


def _yes_no(value: bool | None) -> str:
    if value is None:
        return ""
    return "Sí" if value else "No"


def participation_row(p: Participation) -> list[str]:
    return [
        p.dni_usuario,
        p.nombre_usuario,
        p.nombre_conferencia,
        p.servicio,
        format_date_for_display(p.fecha),
        _yes_no(p.almuerzo),
        _yes_no(p.cena),
    ]


def participations_to_csv(participations: Iterable[Participation]) -> str:
    """CSV con cabecera fija; el módulo ``csv`` se encarga de comillas y escapes."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\r\n")
    writer.writerow(PARTICIPATION_HEADER)
    for p in participations:
        writer.writerow(participation_row(p))
    return buf.getvalue()


def export_payload_to_csv(body: str) -> str:
    """Normaliza la respuesta del endpoint de exportación.

    Si el servidor responde un arreglo JSON se convierte a CSV; en otro
    caso el texto ya es CSV y se usa tal cual.
    """
    stripped = body.lstrip()
    if not stripped.startswith("["):
        return body
    try:
        data = json.loads(stripped)
    except ValueError:
        return body
    if not isinstance(data, list):
        return body
    return participations_to_csv(
        Participation.from_api(item) for item in data if isinstance(item, Mapping)
    )


def write_csv(path: str | Path, content: str) -> Path:
    # BOM para que Excel detecte UTF-8
    target = Path(path)
    target.write_text(content, encoding="utf-8-sig", newline="")
    logger.info("CSV exportado a %s", target)
    return target
