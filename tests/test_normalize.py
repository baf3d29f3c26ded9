import math

import pytest

from ksense_assessment.normalize import BloodPressure, parse_age, parse_blood_pressure, parse_temperature


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("120/80", BloodPressure(120, 80)),
        (" 120 / 80 ", BloodPressure(120, 80)),
        ("120\\80", BloodPressure(120, 80)),
        ("80/80", BloodPressure(80, 80)),
        ("150/", None),
        ("/90", None),
        ("70/110", None),
        ("0/0", None),
        ("120/0", None),
        ("120/80/60", None),
        ("120/80 mmHg", None),
        ("120.5/80", None),
        ("INVALID", None),
        ("N/A", None),
        ("", None),
        (None, None),
        (12080, None),
    ],
)
def test_parse_blood_pressure(raw, expected):
    assert parse_blood_pressure(raw) == expected


def test_parse_blood_pressure_named_fields():
    bp = parse_blood_pressure("135/85")
    assert bp.systolic == 135
    assert bp.diastolic == 85


def test_parse_blood_pressure_absurd_digit_count_is_unparseable():
    assert parse_blood_pressure("9" * 5000 + "/80") is None


@pytest.mark.parametrize(
    "raw, expected",
    [
        (98.6, 98.6),
        (100, 100.0),
        ("98.6", 98.6),
        ("98.6°F", 98.6),
        ("101.2 F", 101.2),
        ("99.6f", 99.6),
        ("90", 90.0),
        (115, 115.0),
        (89.9, None),
        (115.1, None),
        ("37C", None),
        ("TEMP_ERROR", None),
        ("N/A", None),
        ("   ", None),
        ("", None),
        (None, None),
        (True, None),
    ],
)
def test_parse_temperature(raw, expected):
    assert parse_temperature(raw) == expected


def test_parse_temperature_rejects_nan_and_overflow():
    assert parse_temperature(math.nan) is None
    assert parse_temperature(10 ** 400) is None


@pytest.mark.parametrize(
    "raw, expected",
    [
        (45, 45),
        ("45", 45),
        ("45 years", 45),
        (45.9, 45),
        (0, 0),
        ("0", 0),
        (150, 150),
        (150.5, None),
        (151, None),
        (-1, None),
        ("fifty-three", None),
        ("unknown", None),
        ("", None),
        (None, None),
        (False, None),
    ],
)
def test_parse_age(raw, expected):
    assert parse_age(raw) == expected


def test_parse_age_returns_int():
    assert isinstance(parse_age(72.4), int)
