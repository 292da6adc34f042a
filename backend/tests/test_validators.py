from datetime import date

import pytest

from timerod.errors import ValidationError
from timerod.utils.validators import optional_str, parse_date, parse_int, require_str


def test_parse_date_accepts_plain_dates_and_timestamps():
    assert parse_date("2025-03-03", "fechaInicio") == date(2025, 3, 3)
    assert parse_date("2025-03-03T23:30:00", "fechaInicio") == date(2025, 3, 3)
    assert parse_date("2025-03-03T23:30:00Z", "fechaInicio") == date(2025, 3, 3)
    assert parse_date("", "fechaInicio") is None


@pytest.mark.parametrize("raw", ["2025-03-03xyz", "2025-03-03 junk", "03/03/2025", "2025-03-03Tnoon"])
def test_parse_date_rejects_trailing_garbage(raw):
    with pytest.raises(ValidationError):
        parse_date(raw, "fechaInicio")


def test_parse_int_rejects_fractions_and_booleans():
    assert parse_int(2.0, "employeeId") == 2
    assert parse_int("7", "employeeId") == 7

    for raw in (1.9, True, "1.5", "abc"):
        with pytest.raises(ValidationError, match="employeeId must be an integer"):
            parse_int(raw, "employeeId")


def test_require_str_checks_type_and_length():
    assert require_str({"name": "  Plant  "}, "name") == "Plant"

    with pytest.raises(ValidationError, match="name must be a string"):
        require_str({"name": 123}, "name")
    with pytest.raises(ValidationError, match="Missing required fields"):
        require_str({"name": "   "}, "name")
    with pytest.raises(ValidationError, match="cannot exceed 5 characters"):
        require_str({"name": "abcdef"}, "name", max_length=5)


def test_optional_str_rejects_structures():
    assert optional_str(None) is None
    assert optional_str("  ") is None
    assert optional_str(15, "notes") == "15"

    with pytest.raises(ValidationError, match="notes must be a string"):
        optional_str({"text": "x"}, "notes")
