from datetime import date

import pytest

from src.rndc_admin.utils.dates import (
    format_date_for_api,
    format_date_for_display,
    format_date_for_input,
    format_datetime,
    is_within,
    parse_display_date,
)


def test_input_strips_time_part():
    assert format_date_for_input("2024-03-05T00:00:00") == "2024-03-05"
    assert format_date_for_input("2024-03-05") == "2024-03-05"
    assert format_date_for_input(None) == ""


def test_display_keeps_calendar_day():
    # Medianoche UTC no debe convertirse al día anterior
    assert format_date_for_display("2024-01-01T00:00:00Z") == "01/01/2024"
    assert format_date_for_display("2024-12-31T23:59:59-05:00") == "31/12/2024"
    assert format_date_for_display("no es fecha") == "no es fecha"


@pytest.mark.parametrize("iso", ["2024-02-29", "1999-12-31", "2025-07-01", "2024-01-01"])
def test_round_trips_keep_the_calendar_day(iso):
    display = format_date_for_display(iso)
    assert format_date_for_input(display) == iso
    assert format_date_for_display(format_date_for_input(display)) == display
    assert format_date_for_input(format_date_for_api(iso)) == iso
    assert parse_display_date(display) == iso


def test_input_accepts_display_format():
    assert format_date_for_input("05/03/2024") == "2024-03-05"
    assert format_date_for_input(" 31/12/1999 ") == "1999-12-31"


def test_api_format_accepts_date_objects():
    assert format_date_for_api(date(2024, 3, 5)) == "2024-03-05T00:00:00"
    assert format_date_for_api("") == ""


def test_format_datetime_includes_time():
    assert format_datetime("2024-03-05T14:07:33") == "05/03/2024 14:07"
    assert format_datetime("2024-03-05") == "05/03/2024"


def test_is_within_end_covers_whole_day():
    assert is_within("2024-03-10T23:59:00", date(2024, 3, 1), date(2024, 3, 10))
    assert not is_within("2024-03-11T00:00:00", date(2024, 3, 1), date(2024, 3, 10))
    assert is_within("2024-03-01T00:00:00", date(2024, 3, 1), None)
    assert not is_within(None, date(2024, 3, 1), None)
    assert is_within(None, None, None)
