"""Integrity audit CLI commands.

Runs the same operations as the /admin/clean and /admin/training
endpoints directly against the configured record store. The API's audit
guard lives in the server process, so repair commands here are not
serialized against audits started through the API and ask for
confirmation unless ``--yes`` is given.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import typer

from evote_api.core.errors import EvoteError
from evote_api.lib.gateway import BaseGateway

audit_app = typer.Typer()

T = TypeVar("T")

REPAIR_WARNING = (
    "Repairs started here are not serialized against audits running in the API; "
    "make sure no admin audit is in progress."
)

_YES_OPTION = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt")


def _confirm_repair(yes: bool) -> None:  # noqa: FBT001
    """Ask before modifying the store unless ``--yes`` was given."""
    if not yes:
        typer.confirm(f"{REPAIR_WARNING} Continue?", abort=True)


def _run(operation: Callable[[BaseGateway], Awaitable[T]]) -> T:
    """Open the gateway, run one operation, and close the gateway."""

    async def _impl() -> T:
        from evote_api.core.config import get_settings
        from evote_api.lib.gateway import create_gateway

        gateway = create_gateway(get_settings())
        try:
            return await operation(gateway)
        finally:
            await gateway.aclose()

    try:
        return asyncio.run(_impl())
    except EvoteError as exc:
        typer.echo(f"Error: {exc.message}", err=True)
        raise typer.Exit(code=1) from exc


@audit_app.command("null-values")
def audit_null_values(yes: bool = _YES_OPTION) -> None:  # noqa: FBT001
    """Delete records with missing required fields.

    Not serialized against audits running in the API.
    """
    from evote_api.services.integrity_service import purge_null_values

    _confirm_repair(yes)
    deleted = _run(purge_null_values)
    typer.echo(f"Deleted {deleted} record(s) with null values")


@audit_app.command("duplicates")
def audit_duplicates(
    keep: str | None = typer.Option(None, "--keep", help="Vote to keep per group: newest or oldest"),
    yes: bool = _YES_OPTION,  # noqa: FBT001
) -> None:
    """Keep one vote per (voter, category) and delete the rest.

    Not serialized against audits running in the API.
    """
    from evote_api.core.config import get_settings
    from evote_api.services.integrity_service import resolve_duplicate_votes

    policy = keep or get_settings().duplicate_keep_policy
    if policy not in ("newest", "oldest"):
        typer.echo("Error: --keep must be 'newest' or 'oldest'", err=True)
        raise typer.Exit(code=1)
    _confirm_repair(yes)
    deleted = _run(lambda gateway: resolve_duplicate_votes(gateway, policy))
    typer.echo(f"Deleted {deleted} duplicate vote(s) (kept {policy})")


@audit_app.command("validate-dnis")
def audit_validate_dnis() -> None:
    """List malformed DNIs in voters and votes."""
    from evote_api.services.integrity_service import validate_identifiers

    findings = _run(validate_identifiers)
    if not findings:
        typer.echo("All DNIs are valid")
        return
    typer.echo(f"Found {len(findings)} invalid DNI(s):")
    for finding in findings:
        typer.echo(f"  {finding.label}")


@audit_app.command("normalize")
def audit_normalize(yes: bool = _YES_OPTION) -> None:  # noqa: FBT001
    """Normalize name casing and trim whitespace.

    Not serialized against audits running in the API.
    """
    from evote_api.services.integrity_service import normalize_records

    _confirm_repair(yes)
    updated = _run(normalize_records)
    typer.echo(f"Normalized {updated} record(s)")


@audit_app.command("trends")
def audit_trends() -> None:
    """Print daily vote counts and the day-over-day movement."""
    from evote_api.core.config import get_settings
    from evote_api.services.analytics_service import run_trend_analysis

    tz = get_settings().election_tzinfo
    report = _run(lambda gateway: run_trend_analysis(gateway, tz))
    if not report.has_data:
        typer.echo("No votes to analyze")
        return
    for day in report.series:
        typer.echo(f"  {day.day.isoformat()}  {day.count}")
    typer.echo(f"Up {report.upward}%  Down {report.downward}%  Flat {report.stable}%")


@audit_app.command("anomalies")
def audit_anomalies() -> None:
    """Print triggered anomaly signals."""
    from evote_api.core.config import get_settings
    from evote_api.services.analytics_service import run_anomaly_detection

    tz = get_settings().election_tzinfo
    report = _run(lambda gateway: run_anomaly_detection(gateway, tz))
    if not report.has_data:
        typer.echo(f"No anomalies detected in {report.total_votes} vote(s)")
        return
    for anomaly in report.anomalies:
        typer.echo(f"  [{anomaly.severity}] {anomaly.type}: {anomaly.count} ({anomaly.description})")


@audit_app.command("participation")
def audit_participation() -> None:
    """Print participation per department."""
    from evote_api.services.analytics_service import run_participation_analysis

    report = _run(run_participation_analysis)
    if not report.has_data:
        typer.echo("No voters to analyze")
        return
    for region in report.by_region.values():
        typer.echo(f"  {region.department}: {region.rate}% ({region.voted}/{region.total})")
    typer.echo(f"Total: {report.total_voted} of {report.total_voters} voter(s)")
