"""camel-leaked CLI — Typer application with scan, scan-file, validate-rules and init."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from camel_leaked import __version__

app = typer.Typer(
    name="camel-leaked",
    help="Catch hardcoded secrets in code changes before they merge.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)
logger = logging.getLogger("camel_leaked")


def _setup_logging(verbose: bool, debug: bool) -> None:
    level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False, show_time=debug)],
        force=True,
    )


def _fail(label: str, exc: Exception) -> typer.Exit:
    console.print(f"[bold red]{label}:[/bold red] {exc}")
    return typer.Exit(code=2)


def _prepare(
    config: Optional[str],
    rules: Optional[str],
    min_entropy: Optional[float],
    min_length: Optional[int],
    fmt: Optional[str],
):
    """Load settings and rules; exit 2 on any configuration error."""
    from camel_leaked.config.loader import ConfigError, load_config
    from camel_leaked.config.schema import OUTPUT_FORMATS
    from camel_leaked.rules.registry import RuleConfigError, build_rule_set

    try:
        cfg = load_config(Path.cwd(), config)
    except ConfigError as exc:
        raise _fail("Config error", exc) from exc

    if fmt:
        if fmt not in OUTPUT_FORMATS:
            console.print(f"[bold red]Invalid format:[/bold red] {fmt}")
            raise typer.Exit(code=2)
        cfg.output.format = fmt  # type: ignore[assignment]
    if rules:
        cfg.scan.rules_file = rules
    if min_entropy is not None:
        cfg.scan.min_entropy = min_entropy
    if min_length is not None:
        cfg.scan.min_length = min_length

    try:
        rule_set = build_rule_set(cfg.scan.rules_file)
    except RuleConfigError as exc:
        raise _fail("Error loading rules", exc) from exc

    logger.info("Rules loaded: %d", rule_set.rule_count())
    logger.info(
        "Entropy thresholds: min_entropy=%s min_length=%s",
        cfg.scan.min_entropy,
        cfg.scan.min_length,
    )
    return cfg, rule_set


def _finish(result, cfg, output: Optional[str], no_notify: bool) -> None:
    """Report, notify, and exit with 0 (clean) or 1 (findings)."""
    from camel_leaked.output import json_report, terminal

    if cfg.output.format == "json":
        print(json_report.render(result))
    else:
        terminal.render(result, show_summary=cfg.output.show_summary)

    if output:
        Path(output).write_text(json_report.render(result), encoding="utf-8")
        logger.info("Report written to %s", output)

    if result.findings and cfg.notify.enabled and not no_notify:
        from camel_leaked.notify.notifier import NotificationError, Notifier

        try:
            if Notifier(cfg.notify).send_notification(result.findings):
                console.print("[dim]📧 Notification email sent to commit author[/dim]")
        except NotificationError as exc:
            console.print(f"[yellow]Warning:[/yellow] {exc}")

    raise typer.Exit(code=1 if result.blocked else 0)


# ── scan ──────────────────────────────────────────────────────────────────────


@app.command()
def scan(
    diff_file: Optional[str] = typer.Option(None, "--diff-file", "-d", help="Diff file to scan (default: stdin)"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .camel-leaked.toml"),
    rules: Optional[str] = typer.Option(None, "--rules", "-r", help="Rules file (JSON or YAML)"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | json"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Also write a JSON report to file"),
    min_entropy: Optional[float] = typer.Option(None, "--min-entropy", help="Entropy threshold (bits/char)"),
    min_length: Optional[int] = typer.Option(None, "--min-length", help="Shortest token checked for entropy"),
    no_notify: bool = typer.Option(False, "--no-notify", help="Disable author notification"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Debug output"),
) -> None:
    """Scan a unified diff (file or stdin) for secrets."""
    from camel_leaked.scanner.engine import ScanError, scan as run_scan

    _setup_logging(verbose, debug)

    if diff_file:
        try:
            diff_text = Path(diff_file).read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            raise _fail("Error", exc) from exc
    else:
        diff_text = sys.stdin.read()

    if not diff_text:
        console.print("No diff content provided")
        raise typer.Exit(code=0)

    cfg, rule_set = _prepare(config, rules, min_entropy, min_length, format)

    try:
        result = run_scan(diff_text, cfg, rule_set)
    except ScanError as exc:
        raise _fail("Scanner error", exc) from exc

    _finish(result, cfg, output, no_notify)


# ── scan-file ─────────────────────────────────────────────────────────────────


@app.command("scan-file")
def scan_file(
    path: str = typer.Argument(..., help="File to scan; every line is treated as added"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .camel-leaked.toml"),
    rules: Optional[str] = typer.Option(None, "--rules", "-r", help="Rules file (JSON or YAML)"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | json"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Also write a JSON report to file"),
    min_entropy: Optional[float] = typer.Option(None, "--min-entropy", help="Entropy threshold (bits/char)"),
    min_length: Optional[int] = typer.Option(None, "--min-length", help="Shortest token checked for entropy"),
    no_notify: bool = typer.Option(False, "--no-notify", help="Disable author notification"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Debug output"),
) -> None:
    """Scan a plain file for secrets."""
    from camel_leaked.scanner.engine import ScanError, scan_path

    _setup_logging(verbose, debug)
    cfg, rule_set = _prepare(config, rules, min_entropy, min_length, format)

    try:
        result = scan_path(path, cfg, rule_set)
    except OSError as exc:
        raise _fail("Error", exc) from exc
    except ScanError as exc:
        raise _fail("Scanner error", exc) from exc

    _finish(result, cfg, output, no_notify)


# ── validate-rules ────────────────────────────────────────────────────────────


@app.command("validate-rules")
def validate_rules(
    path: str = typer.Argument(..., help="Rules file (JSON or YAML)"),
) -> None:
    """Check a rules file without scanning anything."""
    from camel_leaked.rules.registry import ConfigFormatError, RuleConfigError, RuleSet

    try:
        if not Path(path).is_file():
            raise ConfigFormatError(f"Rules configuration file not found: {path}")
        count = RuleSet.validate_source(Path(path))
    except RuleConfigError as exc:
        raise _fail("Invalid rules", exc) from exc

    console.print(f"[green]✓[/green] {path}: {count} enabled rule(s)")


# ── check-email ───────────────────────────────────────────────────────────────


@app.command("check-email")
def check_email(
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .camel-leaked.toml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Send a test message to the configured sender address."""
    from camel_leaked.config.loader import ConfigError, load_config
    from camel_leaked.notify.notifier import Notifier

    _setup_logging(verbose, False)
    try:
        cfg = load_config(Path.cwd(), config)
    except ConfigError as exc:
        raise _fail("Config error", exc) from exc

    if not Notifier(cfg.notify).check_email_config():
        console.print("[bold red]✗[/bold red] Email configuration check failed")
        raise typer.Exit(code=1)
    console.print(f"[green]✓[/green] Test email sent to {cfg.notify.from_email}")


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init() -> None:
    """Generate a starter .camel-leaked.toml in the current directory."""
    from camel_leaked.config.defaults import CONFIG_FILENAME, DEFAULT_TOML

    config_path = Path.cwd() / CONFIG_FILENAME

    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"camel-leaked {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """camel-leaked — Catch hardcoded secrets in code changes before they merge."""
