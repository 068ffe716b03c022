import csv
import io
import json

import pytest

from src.rndc_admin.schemas import Participation
from src.rndc_admin.services.csv_export import (
    PARTICIPATION_HEADER,
    export_payload_to_csv,
    participation_row,
    participations_to_csv,
    write_csv,
)


def _participation(**overrides):
    data = dict(id="p1", dni_usuario="12345678", nombre_usuario="Ana", id_conferencia="c1",
                nombre_conferencia="Conf 2024", servicio="Completo", fecha="2024-03-05T10:00:00",
                almuerzo=True, cena=False)
    data.update(overrides)
    return Participation(**data)


def test_header_and_row():
    text = participations_to_csv([_participation()])
    lines = text.split("\r\n")
    assert lines[0] == "DNI,Nombre,Conferencia,Servicio,Fecha,Almuerzo,Cena"
    assert lines[1] == "12345678,Ana,Conf 2024,Completo,05/03/2024,Sí,No"


def test_fields_with_commas_and_quotes_are_quoted():
    text = participations_to_csv([_participation(nombre_usuario='Pérez, "Ana"', almuerzo=None)])
    row = text.split("\r\n")[1]
    assert '"Pérez, ""Ana"""' in row
    assert row.endswith(",,No")


def test_csv_payload_is_used_as_is():
    body = "DNI,Nombre\r\n1,Ana\r\n"
    assert export_payload_to_csv(body) == body


def test_json_payload_is_converted():
    body = json.dumps([{"dniUsuario": "1", "nombreUsuario": "Ana", "nombreConferencia": "C",
                        "servicio": "Parcial", "fecha": "2024-01-02", "almuerzo": False, "cena": True}])
    text = export_payload_to_csv(body)
    assert text.startswith("DNI,Nombre,Conferencia")
    assert "1,Ana,C,Parcial,02/01/2024,No,Sí" in text


def test_write_csv_uses_bom(tmp_path):
    target = write_csv(tmp_path / "out.csv", "a,b\r\n")
    assert target.read_bytes().startswith(b"\xef\xbb\xbf")


@pytest.mark.parametrize("nombre,conferencia,servicio", [
    ("Ana", "Conf 2024", "Completo"),
    ('Pérez, "Ana"', "Retiro, Norte", 'Parcial "mañana"'),
    ("Línea\nnueva", "C", "Completo"),
])
def test_csv_reparses_to_original_fields(nombre, conferencia, servicio):
    records = [
        _participation(nombre_usuario=nombre, nombre_conferencia=conferencia, servicio=servicio),
        _participation(id="p2", dni_usuario="87654321", almuerzo=None, cena=True),
    ]
    rows = list(csv.reader(io.StringIO(participations_to_csv(records), newline="")))
    assert rows[0] == list(PARTICIPATION_HEADER)
    assert rows[1:] == [participation_row(p) for p in records]
    assert rows[1][1:4] == [nombre, conferencia, servicio]
