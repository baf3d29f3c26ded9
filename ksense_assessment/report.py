"""
Diagnostic views over scored patients.

Used by the ``analyze`` command to check scoring assumptions against the
live data without spending a submission.
"""

from collections import Counter
from typing import Dict, Iterable, List

from ksense_assessment.scoring import DEFAULT_RULES, RiskScore, ScoringRules

HEADER = (
    "ID       | BP       | Temp   | Age | BP_S | Temp_S | Age_S | Total | Data? | Fever? | High?"
)


def score_distribution(scores: Iterable[RiskScore]) -> Dict[int, int]:
    counts = Counter(score.total for score in scores)
    return {total: counts[total] for total in sorted(counts)}


def boundary_cases(scores: Iterable[RiskScore]) -> Dict[str, List[RiskScore]]:
    """Patients whose values sit exactly on a band edge."""
    cases = {
        "diastolic == 80": [],
        "systolic == 120": [],
        "systolic == 130": [],
        "age == 65": [],
        "temperature 99.5-99.6": [],
    }
    for score in scores:
        bp = score.blood_pressure
        if bp is not None:
            if bp.diastolic == 80:
                cases["diastolic == 80"].append(score)
            if bp.systolic == 120:
                cases["systolic == 120"].append(score)
            if bp.systolic == 130:
                cases["systolic == 130"].append(score)
        if score.age == 65:
            cases["age == 65"].append(score)
        if score.temperature is not None and 99.5 <= score.temperature <= 99.6:
            cases["temperature 99.5-99.6"].append(score)
    return cases


def threshold_comparison(scores: Iterable[RiskScore], rules: ScoringRules = DEFAULT_RULES) -> dict:
    """How many clean patients qualify under ``>=`` versus ``>`` the high-risk threshold."""
    threshold = rules.high_risk_threshold
    clean = [score for score in scores if not score.has_data_issue]
    return {
        "threshold": threshold,
        "at_least": sum(1 for score in clean if score.total >= threshold),
        "greater_than": sum(1 for score in clean if score.total > threshold),
        "exactly": [score.patient_id for score in clean if score.total == threshold],
    }


def _cell(value, width):
    return ("" if value is None else str(value)).ljust(width)


def _flag(value):
    return "YES" if value else "   "


def format_breakdown(scores: Iterable[RiskScore]) -> List[str]:
    rows = [HEADER, "-" * len(HEADER)]
    for score in sorted(scores, key=lambda s: s.total, reverse=True):
        rows.append(" | ".join([
            _cell(score.patient_id, 8),
            _cell(score.raw_blood_pressure, 8),
            _cell(score.raw_temperature, 6),
            _cell(score.raw_age, 3),
            _cell(score.bp_score, 4),
            _cell(score.temp_score, 6),
            _cell(score.age_score, 5),
            _cell(score.total, 5),
            _cell(_flag(score.has_data_issue), 5),
            _cell(_flag(score.has_fever), 6),
            _flag(score.high_risk),
        ]))
    return rows


def render_report(scores: List[RiskScore], rules: ScoringRules = DEFAULT_RULES) -> str:
    lines = ["=== PATIENTS BY TOTAL SCORE (DESCENDING) ==="]
    lines.extend(format_breakdown(scores))

    lines.append("")
    lines.append("=== SCORE DISTRIBUTION ===")
    for total, count in score_distribution(scores).items():
        lines.append(f"Score {total}: {count} patients")

    lines.append("")
    lines.append("=== BOUNDARY CASES ===")
    for name, cases in boundary_cases(scores).items():
        lines.append(f"{name}: {len(cases)}")
        for score in cases:
            lines.append(
                f"  {score.patient_id}: BP={score.raw_blood_pressure} Temp={score.raw_temperature} "
                f"Age={score.raw_age} -> Total {score.total}"
            )

    comparison = threshold_comparison(scores, rules)
    lines.append("")
    lines.append("=== HIGH-RISK THRESHOLD ===")
    lines.append(f"Total >= {comparison['threshold']} (no data issues): {comparison['at_least']}")
    lines.append(f"Total > {comparison['threshold']} (no data issues): {comparison['greater_than']}")
    lines.append(f"Exactly {comparison['threshold']}: {', '.join(str(i) for i in comparison['exactly'])}")
    return "\n".join(lines)
