"""
Command-line interface for the healthcare risk assessment.
"""

import json
import sys

import click

from ksense_assessment.client import ApiClient, RequestError, fetch_all_patients, submit_assessment
from ksense_assessment.report import render_report
from ksense_assessment.scoring import AssessmentResult, ScoringRules, score_patients
from ksense_assessment.settings import settings


def _build_client() -> ApiClient:
    if not settings.API_KEY:
        click.echo("Error: API_KEY environment variable is required", err=True)
        click.echo("Set it in the environment or in a .env file.", err=True)
        sys.exit(1)
    return ApiClient()


def _rules(threshold) -> ScoringRules:
    if threshold is None:
        threshold = settings.HIGH_RISK_THRESHOLD
    return ScoringRules(high_risk_threshold=threshold)


threshold_option = click.option(
    "-t",
    "--threshold",
    type=int,
    default=None,
    help="high-risk requires a total strictly above this (default: HIGH_RISK_THRESHOLD)",
)


@click.group()
def main():
    """Fetch patients, score their risk, and submit the assessment."""
    pass


@main.command(name="assess")
@click.option("--dry-run", is_flag=True, help="score everything but do not submit")
@threshold_option
def assess(dry_run: bool, threshold):
    """Fetch all patients, categorize them and submit the three lists."""
    client = _build_client()
    rules = _rules(threshold)

    try:
        click.echo("Fetching patients...")
        patients = fetch_all_patients(client)
        click.echo(f"Got {len(patients)} patients")

        result = AssessmentResult.from_scores(score_patients(patients, rules))
        click.echo(f"High risk (score > {rules.high_risk_threshold}): {len(result.high_risk_patients)}")
        click.echo(f"  IDs: [{', '.join(map(str, result.high_risk_patients))}]")
        click.echo(f"Fever (temp >= {rules.fever_min}): {len(result.fever_patients)}")
        click.echo(f"  IDs: [{', '.join(map(str, result.fever_patients))}]")
        click.echo(f"Data quality issues: {len(result.data_quality_issues)}")
        click.echo(f"  IDs: [{', '.join(map(str, result.data_quality_issues))}]")

        if dry_run:
            click.echo("DRY RUN - skipping submission")
            return

        click.echo("Submitting")
        response = submit_assessment(client, result)
    except RequestError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    click.echo("Server response:")
    click.echo(json.dumps(response, indent=2))


@main.command(name="analyze")
@threshold_option
def analyze_command(threshold):
    """Fetch all patients and print a scoring breakdown. Never submits."""
    client = _build_client()
    rules = _rules(threshold)

    try:
        patients = fetch_all_patients(client)
    except RequestError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    click.echo(f"Total patients: {len(patients)}")
    click.echo(render_report(score_patients(patients, rules), rules))


if __name__ == "__main__":
    main()
