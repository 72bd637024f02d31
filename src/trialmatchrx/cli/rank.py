"""CLI commands for ranking trials against a patient profile.

This is the FILE HARNESS. It connects:
  trial/patient files -> rank_trials() / score_evidence() -> stdout + run artifacts

The scoring calls are the reusable core (scoring/). Everything else here is
file handling, output formatting and config.
"""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import click
import structlog
import yaml
from pydantic import ValidationError

from trialmatchrx.config import load_config
from trialmatchrx.ingest.loader import load_patient, load_trials
from trialmatchrx.logging_setup import configure_logging
from trialmatchrx.models.schema import EvidenceInput, RankingRun
from trialmatchrx.scoring import FixedClock, SystemClock, rank_trials, score_evidence
from trialmatchrx.tracing.run_manager import RunManager

logger = structlog.get_logger()


def _clock_for(as_of: str | None) -> FixedClock:
    """Pin recency to --as-of, or to the moment the command started."""
    if not as_of:
        return FixedClock(SystemClock().now())
    try:
        return FixedClock(date.fromisoformat(as_of))
    except ValueError as exc:
        raise click.BadParameter(f"expected YYYY-MM-DD, got {as_of!r}", param_hint="--as-of") from exc


def _load_or_fail(loader, path: str):
    try:
        return loader(path)
    except (ValueError, ValidationError, yaml.YAMLError) as exc:
        raise click.ClickException(f"Invalid input file {path}: {exc}") from exc


def _load_config_or_fail(path: str | None) -> dict:
    try:
        return load_config(path)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc


@click.command("rank")
@click.option("--trials", "trials_path", type=click.Path(exists=True), required=True)
@click.option("--patient", "patient_path", type=click.Path(exists=True), required=True)
@click.option("--config", "config_path", type=click.Path(exists=True), default=None)
@click.option("--as-of", default=None, help="Score recency as of this date (YYYY-MM-DD)")
@click.option("--top", "top_n", type=int, default=None, help="Show only the best N trials")
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON")
@click.option("--save/--no-save", default=None, help="Write run artifacts to the runs dir")
@click.option("--runs-dir", type=click.Path(file_okay=False), default=None)
def rank_cmd(
    trials_path: str,
    patient_path: str,
    config_path: str | None,
    as_of: str | None,
    top_n: int | None,
    as_json: bool,
    save: bool | None,
    runs_dir: str | None,
):
    """Rank trials for one patient by overall match score."""
    config = _load_config_or_fail(config_path)
    configure_logging(config["logging"]["level"])

    clock = _clock_for(as_of)
    trials = _load_or_fail(load_trials, trials_path)
    patient = _load_or_fail(load_patient, patient_path)

    ranked = rank_trials(trials, patient, clock=clock)

    min_score = config["ranking"].get("min_score") or 0
    top_n = top_n if top_n is not None else config["ranking"].get("top_n")
    shown = [m for m in ranked if m.result.match_score >= min_score]
    if top_n is not None:
        shown = shown[: max(top_n, 0)]

    as_of_iso = clock.today().isoformat()
    logger.info(
        "rank_complete",
        ranked=len(ranked),
        shown=len(shown),
        min_score=min_score,
        as_of=as_of_iso,
        top_nct_id=ranked[0].result.nct_id if ranked else None,
        top_score=ranked[0].result.match_score if ranked else None,
    )
    if save is None:
        save = bool(config["output"].get("save"))
    if save:
        runs_root = Path(runs_dir or config["output"]["runs_dir"])
        run_mgr = RunManager(runs_dir=runs_root)
        run = RankingRun(
            run_id=run_mgr.generate_run_id(Path(patient_path).stem),
            as_of=as_of_iso,
            patient=patient,
            matches=shown,
        )
        run_dir = run_mgr.save_run(run, config=config)
        click.echo(f"Results saved to: {run_dir}", err=True)

    if as_json:
        payload = [m.model_dump(mode="json", by_alias=True) for m in shown]
        click.echo(json.dumps(payload, indent=2))
        return

    click.echo(f"\n{'=' * 60}")
    click.echo(f"Ranked {len(ranked)} trials (as of {as_of_iso}), showing {len(shown)}")
    click.echo(f"{'=' * 60}")
    for m in shown:
        r = m.result
        click.echo(
            f"{m.rank:>3}. {r.nct_id or '(no NCT ID)'}  {r.match_score:>3}/100  {r.tier.value:<8} "
            f"evidence={r.clinical_evidence} eligibility={r.eligibility_fit} "
            f"convenience={r.convenience_score}"
        )
        for reason in r.reasoning:
            click.echo(f"       - {reason}")


@click.command("evidence")
@click.option("--trials", "trials_path", type=click.Path(exists=True), required=True)
@click.option("--config", "config_path", type=click.Path(exists=True), default=None)
@click.option("--as-of", default=None, help="Score recency as of this date (YYYY-MM-DD)")
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON")
def evidence_cmd(trials_path: str, config_path: str | None, as_of: str | None, as_json: bool):
    """Show the evidence score and its breakdown for each trial."""
    configure_logging(_load_config_or_fail(config_path)["logging"]["level"])
    clock = _clock_for(as_of)
    trials = _load_or_fail(load_trials, trials_path)

    rows = []
    for trial in trials:
        out = score_evidence(EvidenceInput.from_trial(trial), clock=clock)
        rows.append((trial.nct_id, out))

    if as_json:
        payload = [
            {"nctId": nct_id, **out.model_dump(mode="json", by_alias=True)} for nct_id, out in rows
        ]
        click.echo(json.dumps(payload, indent=2))
        return

    for nct_id, out in rows:
        b = out.breakdown
        click.echo(f"{nct_id or '(no NCT ID)'}: evidence {out.score}/100 (raw {b.cap})")
        click.echo(
            f"  phase={b.phase} randomized={b.randomized} endpoint={b.endpoint} "
            f"met={b.met_primary} posted={b.results_posted} biomarkers={b.biomarkers} "
            f"enrollment={b.enrollment} recency={b.recency}"
        )
        for reason in out.reasons:
            click.echo(f"  - {reason}")
