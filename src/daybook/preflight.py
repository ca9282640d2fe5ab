"""
Preflight checks run before a build to catch common misconfigurations early.
"""

import json
import logging
import tempfile

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from daybook.models import BuildConfig

logger = logging.getLogger(__name__)


def run_preflight_checks(cfg: BuildConfig, console: Console) -> bool:
    """Return True if the build may proceed; print issues and return False otherwise."""
    issues: list[tuple[str, str, str]] = []  # (label, detail, hint)

    # 1. Events file exists and parses as JSON
    events_path = cfg.events_path
    if not events_path.is_file():
        logger.error("Events file not found: %s", events_path)
        issues.append(
            (
                "Events file",
                f"not found: {events_path}",
                "Pass --events or set events_path in the config file",
            )
        )
    else:
        try:
            with events_path.open(encoding="utf-8") as fh:
                json.load(fh)
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Events file not readable (%s): %s", events_path, e)
            issues.append(("Events file", f"{events_path}: {e}", "Check file permissions"))
        except json.JSONDecodeError as e:
            logger.error("Events file is not valid JSON (%s): %s", events_path, e)
            issues.append(
                (
                    "Events file",
                    f"invalid JSON at line {e.lineno}, column {e.colno}: {e.msg}",
                    f"Fix the syntax in {events_path}",
                )
            )

    # 2. Output directory creatable + writable (skipped for dry runs)
    output_dir = cfg.output_dir
    if not cfg.dry_run:
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
            with tempfile.TemporaryFile(dir=output_dir):
                pass
        except OSError as e:
            logger.error("Output directory not writable (%s): %s", output_dir, e)
            issues.append(
                (
                    "Output directory",
                    f"{output_dir}: {e}",
                    f"Check permissions on {output_dir}",
                )
            )

    if issues:
        _print_issues(issues, console)
        return False

    return True


def _print_issues(issues: list[tuple[str, str, str]], console: Console) -> None:
    body = Text()
    for i, (label, detail, hint) in enumerate(issues):
        if i:
            body.append("\n")
        body.append(f"  ✗  {label}: ", style="bold red")
        body.append(detail, style="bold red")
        body.append(f"\n       → {hint}", style="yellow")

    console.print(Panel(body, title="[bold red]Preflight checks failed[/bold red]"))
