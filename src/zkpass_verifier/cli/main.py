"""CLI entry point for zkpass-verifier.

Invoked as::

    zkpass-verifier [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m zkpass_verifier.cli.main

Commands
--------
version    Show version information
kinds      List verification kinds with their purpose and scope
evaluate   Evaluate a saved result payload offline
simulate   Run a full session against the scripted capability
"""
from __future__ import annotations

import asyncio
import datetime
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from zkpass_verifier.config import VerifierConfig, load_config
from zkpass_verifier.disclosure.kinds import KIND_METADATA, VerificationKind
from zkpass_verifier.session.outcome import StatusUpdate, VerificationOutcome
from zkpass_verifier.session.state import SessionState, Severity

console = Console()

_KIND_CHOICE = click.Choice([kind.value for kind in VerificationKind])

_SEVERITY_STYLES: dict[Severity, str] = {
    Severity.INFO: "cyan",
    Severity.SUCCESS: "green",
    Severity.WARNING: "yellow",
    Severity.ERROR: "red",
}


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------


def _load_config_or_exit(config_file: Optional[str]) -> VerifierConfig:
    try:
        return load_config(Path(config_file) if config_file else None)
    except (OSError, ValidationError) as exc:
        console.print(f"[red]Error:[/red] could not load config: {exc}")
        sys.exit(1)


def _load_payload_or_exit(payload_file: str) -> dict[str, Any]:
    try:
        payload = json.loads(Path(payload_file).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        console.print(f"[red]Error:[/red] could not read payload: {exc}")
        sys.exit(1)
    if not isinstance(payload, dict):
        console.print("[red]Error:[/red] payload must be a JSON object")
        sys.exit(1)
    return payload


def _flag(value: bool) -> str:
    return "[green]yes[/green]" if value else "[red]no[/red]"


# ------------------------------------------------------------------
# Root group
# ------------------------------------------------------------------


@click.group()
@click.version_option(package_name="zkpass-verifier")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    default="WARNING",
    show_default=True,
    help="Logging level for library output.",
)
def cli(log_level: str) -> None:
    """Selective-disclosure identity verification"""
    logging.basicConfig(level=getattr(logging, log_level))


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from zkpass_verifier import __version__

    console.print(f"[bold]zkpass-verifier[/bold] v{__version__}")


@cli.command(name="kinds")
def kinds_command() -> None:
    """List verification kinds with their purpose and scope."""
    table = Table(title="Verification kinds", show_header=True)
    table.add_column("Kind", style="cyan")
    table.add_column("Scope")
    table.add_column("Purpose")
    for kind, meta in KIND_METADATA.items():
        table.add_row(kind.value, meta.scope, meta.purpose)
    console.print(table)


# ------------------------------------------------------------------
# evaluate
# ------------------------------------------------------------------


@cli.command(name="evaluate")
@click.argument("kind", type=_KIND_CHOICE)
@click.option(
    "--payload",
    "payload_file",
    type=click.Path(exists=True, dir_okay=False),
    required=True,
    help="JSON file holding the capability's result payload.",
)
@click.option("--expected-name", "-n", default=None, help="First name the holder claimed.")
@click.option(
    "--today",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Reference date for date-of-birth values (YYYY-MM-DD).",
)
@click.option("--config", "config_file", type=click.Path(), default=None, help="JSON config file.")
def evaluate_command(
    kind: str,
    payload_file: str,
    expected_name: Optional[str],
    today: Optional[datetime.datetime],
    config_file: Optional[str],
) -> None:
    """Extract and judge a saved result PAYLOAD for KIND (age, name or both)."""
    from zkpass_verifier.results import NormalizedOutcome, evaluate, outcome_message

    config = _load_config_or_exit(config_file)
    payload = _load_payload_or_exit(payload_file)
    verification_kind = VerificationKind(kind)

    normalized = NormalizedOutcome.from_payload(payload, today.date() if today else None)
    verdict = evaluate(normalized, expected_name, verification_kind, config.minimum_age)

    table = Table(title=f"Evaluation: {verification_kind.value}", show_header=True)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Age (years)", str(normalized.age_years) if normalized.age_years is not None else "-")
    table.add_row("Disclosed name", normalized.disclosed_name or "-")
    table.add_row("Age verified", _flag(verdict.age_verified))
    table.add_row("Name verified", _flag(verdict.name_verified))
    table.add_row("Verdict", verdict.label.value)
    console.print(table)
    console.print(
        outcome_message(verification_kind, normalized, verdict, expected_name, config.minimum_age)
    )

    if not verdict.success:
        sys.exit(1)


# ------------------------------------------------------------------
# simulate
# ------------------------------------------------------------------


async def _run_simulation(
    kind: VerificationKind,
    name: Optional[str],
    payload: dict[str, Any],
    accepted: tuple[str, ...],
    verified: bool,
    reject: bool,
    qr_out: Optional[Path],
    config: VerifierConfig,
    audit_log: Optional[Path],
) -> tuple[SessionState, Optional[VerificationOutcome], Optional[str]]:
    from zkpass_verifier.audit import SessionAuditLogger
    from zkpass_verifier.qr import QRCodeRenderer
    from zkpass_verifier.session.session import VerificationSession
    from zkpass_verifier.simulation import (
        DEFAULT_ACCEPTED_KEYS,
        ScriptedProofCapability,
        rejection_script,
        standard_script,
    )

    capability = ScriptedProofCapability(
        accepted_keys=accepted or DEFAULT_ACCEPTED_KEYS,
        script=rejection_script() if reject else standard_script(verified, payload),
        autoplay=True,
    )
    session = VerificationSession(
        capability.factory(),
        config=config,
        renderer=QRCodeRenderer() if qr_out else None,
        render_target=qr_out,
        audit=SessionAuditLogger(audit_log) if audit_log else None,
    )

    def _print_status(update: StatusUpdate) -> None:
        style = _SEVERITY_STYLES[update.severity]
        console.print(f"  [{style}]{update.state.value:<20}[/{style}] {update.message}")

    session.add_status_listener(_print_status)

    state = await session.start(kind)
    if state is SessionState.AWAITING_INPUT:
        state = await session.submit_name(name or "")
    if state is SessionState.AWAITING_INPUT:
        return state, None, None

    url = session.request_url
    outcome = await session.wait_for_outcome()
    return session.state, outcome, url


@cli.command(name="simulate")
@click.argument("kind", type=_KIND_CHOICE)
@click.option("--name", "-n", default=None, help="First name the requester expects.")
@click.option(
    "--payload",
    "payload_file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="JSON result payload; defaults to one built from --age and --name.",
)
@click.option("--age", type=int, default=30, show_default=True, help="Age placed in the default payload.")
@click.option(
    "--accept",
    "-a",
    multiple=True,
    help="Attribute key the scripted capability accepts (repeatable).",
)
@click.option("--unverified", is_flag=True, default=False, help="Report the proof as invalid.")
@click.option("--reject", is_flag=True, default=False, help="Holder declines the request.")
@click.option("--qr-out", type=click.Path(dir_okay=False), default=None, help="Write the request QR code PNG here.")
@click.option("--audit-log", type=click.Path(dir_okay=False), default=None, help="Append a JSONL audit trail here.")
@click.option("--config", "config_file", type=click.Path(), default=None, help="JSON config file.")
def simulate_command(
    kind: str,
    name: Optional[str],
    payload_file: Optional[str],
    age: int,
    accept: tuple[str, ...],
    unverified: bool,
    reject: bool,
    qr_out: Optional[str],
    audit_log: Optional[str],
    config_file: Optional[str],
) -> None:
    """Run a full KIND verification session against the scripted capability."""
    config = _load_config_or_exit(config_file)
    verification_kind = VerificationKind(kind)
    if verification_kind.requires_name and not name:
        console.print(f"[red]Error:[/red] --name is required for kind {kind!r}")
        sys.exit(1)

    if payload_file:
        payload = _load_payload_or_exit(payload_file)
    else:
        payload = {"age": age}
        if name:
            payload["firstname"] = name

    state, outcome, url = asyncio.run(
        _run_simulation(
            verification_kind,
            name,
            payload,
            accept,
            not unverified,
            reject,
            Path(qr_out) if qr_out else None,
            config,
            Path(audit_log) if audit_log else None,
        )
    )

    if url:
        console.print(f"\n  Request URL: {url}")
    console.print(f"  Final state: [bold]{state.value}[/bold]")
    if outcome is not None and config.issuer_url:
        redirect = outcome.issuer_redirect_url(config.issuer_url)
        if redirect:
            console.print(f"  Issuer:      {redirect}")

    if state is not SessionState.SUCCEEDED:
        sys.exit(1)


if __name__ == "__main__":
    cli()
