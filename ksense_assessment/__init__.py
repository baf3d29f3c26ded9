"""Fetch patient records, score clinical risk, and submit the assessment."""

from ksense_assessment.client import ApiClient, RequestError, fetch_all_patients, submit_assessment
from ksense_assessment.scoring import AssessmentResult, RiskScore, ScoringRules, analyze, calculate_risk_score

__all__ = [
    "ApiClient",
    "AssessmentResult",
    "RequestError",
    "RiskScore",
    "ScoringRules",
    "analyze",
    "calculate_risk_score",
    "fetch_all_patients",
    "submit_assessment",
]
