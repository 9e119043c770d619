"""
Stack Advisor — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Load the candidate catalog (fails fast on integrity errors).
  4. Execute action (catalog check, recommendation, re-evaluation).
  5. Report result to stdout.

Install and run::

    pip install -e .
    stack-advisor --help
    stack-advisor validate-config
    stack-advisor check-catalog
    stack-advisor recommend --request request.json
    stack-advisor recommend --request request.json --json --output-dir reports/
    stack-advisor reevaluate --before old.json --after new.json --project acme
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import typer

app = typer.Typer(
    name="stack-advisor",
    help="Technology stack recommendation engine — advisory CLI.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from stack_advisor.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from stack_advisor.utils.logging import configure_logging
    configure_logging(config.logging)


def _build_pipeline_or_exit(config):
    """Load the catalog and build a pipeline, exiting on integrity errors."""
    from stack_advisor.errors import ConfigurationIntegrityError
    from stack_advisor.pipeline.recommend import RecommendationPipeline

    try:
        return RecommendationPipeline.from_config(config)
    except ConfigurationIntegrityError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)


def _read_request_or_exit(request_file: str) -> dict[str, Any]:
    """Read a JSON request object from disk."""
    path = Path(request_file)
    if not path.exists():
        typer.echo(f"[ERROR] Request file not found: {path}", err=True)
        raise typer.Exit(code=1)
    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except (json.JSONDecodeError, OSError) as exc:
        typer.echo(f"[ERROR] JSON parse error in {path}: {exc}", err=True)
        raise typer.Exit(code=1)

    if not isinstance(raw, dict):
        typer.echo(f"[ERROR] {path} must contain a JSON object.", err=True)
        raise typer.Exit(code=1)
    return raw


def _report_request_error(exc: Exception) -> None:
    """Print validation / no-viable details and exit 1."""
    from stack_advisor.errors import NoViableCandidateError, RequirementValidationError

    if isinstance(exc, RequirementValidationError):
        typer.echo(f"[ERROR] {len(exc.errors)} invalid field(s):", err=True)
        for err in exc.errors:
            typer.echo(f"  {err.field}: {err.reason}", err=True)
    elif isinstance(exc, NoViableCandidateError):
        typer.echo(f"[ERROR] {exc}", err=True)
        for elim in exc.eliminations:
            typer.echo(f"  eliminated {elim.stack_id} ({elim.rule})", err=True)
    else:
        typer.echo(f"[ERROR] {exc}", err=True)
    raise typer.Exit(code=1)


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Catalog path:     {config.catalog.path}")
    typer.echo(f"  Weights version:  {config.scoring.version}")
    for criterion, weight in sorted(config.scoring.weights.items()):
        typer.echo(f"    {criterion:<18}{weight:.2f}")
    typer.echo(f"  Alternates (K):   {config.ranking.alternates}")
    typer.echo(
        f"  Risk gaps:        high<{config.risk.high_risk_gap} "
        f"low>={config.risk.low_risk_gap}"
    )
    typer.echo(f"  Lock timeout:     {config.coordinator.lock_timeout_seconds}s")
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Debug mode:       {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("check-catalog")
def check_catalog(
    catalog_path: Optional[str] = typer.Option(
        None,
        "--catalog",
        help="Override catalog path from config.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Load the candidate catalog, run integrity checks and list candidates.

    Exits with code 1 if any catalog entry is incomplete or inconsistent.
    """
    from stack_advisor.catalog.registry import load_registry
    from stack_advisor.config import resolve_path
    from stack_advisor.errors import ConfigurationIntegrityError
    from stack_advisor.recommendations.reporter import format_candidate_table

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    target = resolve_path(catalog_path or config.catalog.path)
    typer.echo(f"Checking catalog: {target}")

    try:
        registry = load_registry(target)
    except ConfigurationIntegrityError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"  Version: {registry.version or '-'}")
    typer.echo(f"  Candidates: {len(registry)}")
    typer.echo("")
    typer.echo(format_candidate_table(registry.all()))
    typer.echo("[OK] Catalog valid.")


@app.command("recommend")
def recommend(
    request_file: str = typer.Option(
        ...,
        "--request",
        "-r",
        help="Path to a JSON requirement request.",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the recommendation as JSON instead of a table.",
    ),
    output_dir: Optional[str] = typer.Option(
        None,
        "--output-dir",
        help="Also write the JSON report into this directory.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Recommend a technology stack for one requirement request.

    \b
    Request JSON fields:
      platforms           list of web|ios|android|desktop-mac|desktop-win|desktop-linux
      scale               mvp|growth|mature
      performance         basic|medium|high|extreme
      team_skills         {skill: 0..10}, omitted skills count as 0
      timeline            fast|standard|long          (default standard)
      budget              tight|medium|ample          (default medium)
      maintenance_horizon short|medium|long           (default medium)
    """
    from stack_advisor.errors import NoViableCandidateError, RequirementValidationError
    from stack_advisor.recommendations.reporter import (
        format_recommendation,
        write_recommendation_json,
    )

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    raw = _read_request_or_exit(request_file)
    pipeline = _build_pipeline_or_exit(config)

    try:
        rec = pipeline.recommend(raw)
    except (RequirementValidationError, NoViableCandidateError) as exc:
        _report_request_error(exc)
        return

    if as_json:
        typer.echo(json.dumps(rec.to_dict(), indent=2))
    else:
        typer.echo(format_recommendation(rec))

    if output_dir:
        path = write_recommendation_json(rec, Path(output_dir))
        typer.echo(f"  Report written: {path}", err=as_json)


@app.command("reevaluate")
def reevaluate(
    before_file: str = typer.Option(
        ...,
        "--before",
        help="JSON request the current recommendation was made for.",
    ),
    after_file: str = typer.Option(
        ...,
        "--after",
        help="JSON request with the changed requirements.",
    ),
    project_key: str = typer.Option(
        "default",
        "--project",
        help="Project key used for the session.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Re-evaluate after a requirement change and report any handoff.

    Runs the baseline request, then the changed one, through the same
    coordinator session.  Prints a handoff notice when the primary stack
    changes; the notice is advisory only.
    """
    from stack_advisor.coordination.coordinator import AgentCoordinator
    from stack_advisor.errors import NoViableCandidateError, RequirementValidationError
    from stack_advisor.recommendations.reporter import format_handoff_notice

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    before = _read_request_or_exit(before_file)
    after = _read_request_or_exit(after_file)
    coordinator = AgentCoordinator(_build_pipeline_or_exit(config))

    try:
        baseline = coordinator.recommend(project_key, before)
        typer.echo(f"Baseline primary: {baseline.primary_stack_id} ({baseline.primary_owner})")
        notice = coordinator.notify_change(project_key, after)
    except (RequirementValidationError, NoViableCandidateError) as exc:
        _report_request_error(exc)
        return

    session = coordinator.session(project_key)
    if notice is None:
        current = session.recommendation if session else baseline
        typer.echo(f"No handoff: primary remains {current.primary_stack_id}.")
        return

    typer.echo(format_handoff_notice(notice))


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    app()
