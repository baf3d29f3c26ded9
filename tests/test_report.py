from ksense_assessment.report import (
    HEADER,
    boundary_cases,
    format_breakdown,
    render_report,
    score_distribution,
    threshold_comparison,
)
from ksense_assessment.scoring import ScoringRules, score_patients

PATIENTS = [
    {"patient_id": "DEMO001", "blood_pressure": "120/80", "temperature": 99.5, "age": 65},
    {"patient_id": "DEMO002", "blood_pressure": "130/70", "temperature": 98.6, "age": 30},
    {"patient_id": "DEMO003", "blood_pressure": "150/95", "temperature": 101.5, "age": 70},
    {"patient_id": "DEMO004", "blood_pressure": "INVALID", "temperature": 99.6, "age": 50},
]


def _scores():
    return score_patients(PATIENTS)


def test_score_distribution_sorted_by_total():
    # totals: 3+0+1, 3+0+1, 4+2+2, 0+1+1
    assert score_distribution(_scores()) == {2: 1, 4: 2, 8: 1}


def test_boundary_cases():
    cases = boundary_cases(_scores())
    ids = {name: [s.patient_id for s in group] for name, group in cases.items()}
    assert ids["diastolic == 80"] == ["DEMO001"]
    assert ids["systolic == 120"] == ["DEMO001"]
    assert ids["systolic == 130"] == ["DEMO002"]
    assert ids["age == 65"] == ["DEMO001"]
    assert ids["temperature 99.5-99.6"] == ["DEMO001", "DEMO004"]


def test_threshold_comparison_ignores_data_issues():
    comparison = threshold_comparison(_scores())
    assert comparison == {
        "threshold": 4,
        "at_least": 3,
        "greater_than": 1,
        "exactly": ["DEMO001", "DEMO002"],
    }


def test_threshold_comparison_with_custom_rules():
    comparison = threshold_comparison(_scores(), ScoringRules(high_risk_threshold=3))
    assert comparison["greater_than"] == 3
    assert comparison["exactly"] == []


def test_format_breakdown_orders_by_total_descending():
    rows = format_breakdown(_scores())
    assert rows[0] == HEADER
    assert rows[2].startswith("DEMO003")
    assert rows[-1].startswith("DEMO004")
    assert rows[2].endswith("YES")


def test_render_report_contains_every_section():
    text = render_report(_scores())
    assert "=== SCORE DISTRIBUTION ===" in text
    assert "Score 8: 1 patients" in text
    assert "=== BOUNDARY CASES ===" in text
    assert "Total > 4 (no data issues): 1" in text
    assert "Exactly 4: DEMO001, DEMO002" in text
