"""Run manager for saving ranking results as an audit trail.

Each run saves to runs/<run_id>/ with:
  config.json, results.json, summary.json, audit_table.md
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from trialmatchrx.models.schema import MatchTier

if TYPE_CHECKING:
    from trialmatchrx.models.schema import RankingRun

logger = structlog.get_logger()

RUNS_DIR = Path("runs")


class RunManager:
    """Manages ranking run artifacts."""

    def __init__(self, runs_dir: Path = RUNS_DIR):
        self._runs_dir = Path(runs_dir)

    def generate_run_id(self, label: str) -> str:
        """Generate a unique run ID."""
        ts = datetime.now(tz=UTC).strftime("%Y%m%d-%H%M%S")
        return f"rank-{label}-{ts}"

    def save_run(self, run: RankingRun, config: dict | None = None) -> Path:
        """Save run artifacts to runs/<run_id>/.

        Args:
            run: Ranked matches plus the as-of date and patient profile.
            config: Effective CLI config (saved as config.json).
        """
        run_dir = self._runs_dir / run.run_id
        run_dir.mkdir(parents=True, exist_ok=True)

        if config:
            with open(run_dir / "config.json", "w") as f:
                json.dump(config, f, indent=2, default=str)

        results_data = [m.model_dump(mode="json", by_alias=True) for m in run.matches]
        with open(run_dir / "results.json", "w") as f:
            json.dump(results_data, f, indent=2)

        with open(run_dir / "summary.json", "w") as f:
            json.dump(self._summarize(run), f, indent=2)

        self._save_audit_table(run_dir, run)

        logger.info("run_saved", run_id=run.run_id, run_dir=str(run_dir), matches=len(run.matches))
        return run_dir

    @staticmethod
    def _summarize(run: RankingRun) -> dict:
        scores = [m.result.match_score for m in run.matches]
        tiers = {tier.value: 0 for tier in MatchTier}
        for m in run.matches:
            tiers[m.result.tier.value] += 1
        return {
            "run_id": run.run_id,
            "as_of": run.as_of,
            "total_trials": len(scores),
            "mean_match_score": sum(scores) / len(scores) if scores else None,
            "max_match_score": max(scores, default=None),
            "min_match_score": min(scores, default=None),
            "tiers": tiers,
        }

    def _save_audit_table(self, run_dir: Path, run: RankingRun) -> None:
        """Write audit_table.md: human-readable ranking with sub-scores."""
        lines = [
            f"# Ranking Audit — {run.run_id}",
            "",
            f"Recency scored as of {run.as_of}.",
            "",
            "| Rank | Trial | Match | Tier | Evidence | Eligibility | Convenience | Top reason (80) |",
            "|------|-------|-------|------|----------|-------------|-------------|-----------------|",
        ]
        for m in run.matches:
            r = m.result
            reason = (r.reasoning[0] if r.reasoning else "—")[:80].replace("|", "/")
            lines.append(
                f"| {m.rank} | {r.nct_id or '—'} | {r.match_score} | {r.tier.value} "
                f"| {r.clinical_evidence} | {r.eligibility_fit} | {r.convenience_score} | {reason} |"
            )

        with open(run_dir / "audit_table.md", "w") as f:
            f.write("\n".join(lines) + "\n")
