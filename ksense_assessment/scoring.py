"""
Risk scoring and categorization.

Total risk = blood pressure score (0-4) + temperature score (0-2) + age score (0-2).
A field that fails to normalize scores 0 and flags the patient with a data
quality issue; such patients are never reported as high risk.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ksense_assessment.logger import get_logger
from ksense_assessment.normalize import BloodPressure, parse_age, parse_blood_pressure, parse_temperature

logger = get_logger(__name__)


@dataclass(frozen=True)
class ScoringRules:
    """Band edges for each sub-score. Defaults match the service's grading."""

    # systolic: <= normal_max -> 1, <= elevated_max -> 2, <= stage1_max -> 3, above -> 4
    systolic_normal_max: int = 120
    systolic_elevated_max: int = 129
    systolic_stage1_max: int = 139
    # diastolic: < normal_below -> 1, <= stage1_max -> 3, above -> 4
    diastolic_normal_below: int = 80
    diastolic_stage1_max: int = 89

    temp_normal_max: float = 99.5
    temp_low_fever_max: float = 100.9
    fever_min: float = 99.6

    elderly_age_above: int = 65

    high_risk_threshold: int = 4


DEFAULT_RULES = ScoringRules()


def score_bp(bp: Optional[BloodPressure], rules: ScoringRules = DEFAULT_RULES) -> int:
    if bp is None:
        return 0

    if bp.systolic <= rules.systolic_normal_max:
        systolic_stage = 1
    elif bp.systolic <= rules.systolic_elevated_max:
        systolic_stage = 2
    elif bp.systolic <= rules.systolic_stage1_max:
        systolic_stage = 3
    else:
        systolic_stage = 4

    # diastolic has no "elevated" band
    if bp.diastolic < rules.diastolic_normal_below:
        diastolic_stage = 1
    elif bp.diastolic <= rules.diastolic_stage1_max:
        diastolic_stage = 3
    else:
        diastolic_stage = 4

    return max(systolic_stage, diastolic_stage)


def score_temp(temp: Optional[float], rules: ScoringRules = DEFAULT_RULES) -> int:
    if temp is None:
        return 0
    if temp <= rules.temp_normal_max:
        return 0
    if temp <= rules.temp_low_fever_max:
        return 1
    return 2


def score_age(age: Optional[int], rules: ScoringRules = DEFAULT_RULES) -> int:
    if age is None:
        return 0
    if age > rules.elderly_age_above:
        return 2
    return 1


def has_fever(temp: Optional[float], rules: ScoringRules = DEFAULT_RULES) -> bool:
    return temp is not None and temp >= rules.fever_min


@dataclass(frozen=True)
class RiskScore:
    patient_id: Any
    raw_blood_pressure: Any
    raw_temperature: Any
    raw_age: Any
    blood_pressure: Optional[BloodPressure]
    temperature: Optional[float]
    age: Optional[int]
    bp_score: int
    temp_score: int
    age_score: int
    total: int
    has_fever: bool
    has_data_issue: bool
    high_risk: bool

    def tags(self) -> str:
        return "".join([
            " [FEVER]" if self.has_fever else "",
            " [DATA_ISSUE]" if self.has_data_issue else "",
            " [HIGH_RISK]" if self.high_risk else "",
        ])


def calculate_risk_score(patient: Mapping[str, Any], rules: ScoringRules = DEFAULT_RULES) -> RiskScore:
    raw_bp = patient.get("blood_pressure")
    raw_temp = patient.get("temperature")
    raw_age = patient.get("age")

    bp = parse_blood_pressure(raw_bp)
    temp = parse_temperature(raw_temp)
    age = parse_age(raw_age)

    bp_score = score_bp(bp, rules)
    temp_score = score_temp(temp, rules)
    age_score = score_age(age, rules)
    total = bp_score + temp_score + age_score
    has_data_issue = bp is None or temp is None or age is None

    return RiskScore(
        patient_id=patient.get("patient_id"),
        raw_blood_pressure=raw_bp,
        raw_temperature=raw_temp,
        raw_age=raw_age,
        blood_pressure=bp,
        temperature=temp,
        age=age,
        bp_score=bp_score,
        temp_score=temp_score,
        age_score=age_score,
        total=total,
        has_fever=has_fever(temp, rules),
        has_data_issue=has_data_issue,
        high_risk=total > rules.high_risk_threshold and not has_data_issue,
    )


def score_patients(patients: Iterable[Any], rules: ScoringRules = DEFAULT_RULES) -> List[RiskScore]:
    scores = []
    for patient in patients:
        if not isinstance(patient, Mapping):
            logger.warning("[score] Skipping malformed record: %r", patient)
            continue
        score = calculate_risk_score(patient, rules)
        logger.debug(
            "Patient %s: BP=%d Temp=%d Age=%d Total=%d%s",
            score.patient_id,
            score.bp_score,
            score.temp_score,
            score.age_score,
            score.total,
            score.tags(),
        )
        scores.append(score)
    return scores


def _append_once(ids, patient_id):
    if patient_id not in ids:
        ids.append(patient_id)


@dataclass
class AssessmentResult:
    high_risk_patients: List[Any] = field(default_factory=list)
    fever_patients: List[Any] = field(default_factory=list)
    data_quality_issues: List[Any] = field(default_factory=list)

    @classmethod
    def from_scores(cls, scores: Iterable[RiskScore]) -> "AssessmentResult":
        result = cls()
        for score in scores:
            if score.high_risk:
                _append_once(result.high_risk_patients, score.patient_id)
            if score.has_fever:
                _append_once(result.fever_patients, score.patient_id)
            if score.has_data_issue:
                _append_once(result.data_quality_issues, score.patient_id)
        return result

    def to_payload(self) -> Dict[str, List[Any]]:
        return {
            "high_risk_patients": list(self.high_risk_patients),
            "fever_patients": list(self.fever_patients),
            "data_quality_issues": list(self.data_quality_issues),
        }


def analyze(patients: Iterable[Any], rules: ScoringRules = DEFAULT_RULES) -> AssessmentResult:
    return AssessmentResult.from_scores(score_patients(patients, rules))
