"""
Command-line interface for daybook.
"""

import logging
from configparser import ConfigParser
from configparser import SectionProxy
from dataclasses import dataclass
from dataclasses import field
from datetime import date
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from daybook.daterange import CalendarExpander
from daybook.daterange import StepUnit
from daybook.daterange import expand as expand_range
from daybook.daterange import parse_specifier
from daybook.daterange import resolve
from daybook.events import EVENT_KINDS
from daybook.models import DEFAULT_CONFIG
from daybook.models import DEFAULT_EVENTS_PATH
from daybook.models import DEFAULT_OUTPUT_DIR
from daybook.models import BuildConfig
from daybook.models import DaybookError
from daybook.models import SpecifierError

# ---------------------------------------------------------------------------
# Typer app
# ---------------------------------------------------------------------------

app = typer.Typer(
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="Render a personal calendar of recurring events into a static website.",
)

console = Console()


# ---------------------------------------------------------------------------
# Global state shared across subcommands
# ---------------------------------------------------------------------------


@dataclass
class _State:
    config_path: Path = field(default_factory=lambda: DEFAULT_CONFIG)
    verbose: bool = False


state = _State()


@app.callback()
def _global(
    config: Annotated[
        Path,
        typer.Option("--config", "-c", help=f"Config file path (default: {DEFAULT_CONFIG})"),
    ] = DEFAULT_CONFIG,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose debug output"),
    ] = False,
) -> None:
    state.config_path = config
    state.verbose = verbose
    _setup_logging(verbose)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False, console=console)],
    )


def _load_config_file(config_path: Path) -> SectionProxy:
    """Return the [daybook] section; empty when the file or section is missing."""
    parser = ConfigParser(interpolation=None)
    if config_path.exists():
        parser.read(config_path)
    if "daybook" not in parser:
        parser.add_section("daybook")
    return parser["daybook"]


def _parse_today(value: str | None) -> date:
    """The single reference date for a run: --today if given, else the system date."""
    if value is None:
        return date.today()
    try:
        return date.fromisoformat(value)
    except ValueError:
        console.print(f"[bold red]Error:[/] Invalid date: {value!r}")
        raise typer.Exit(1) from None


def _build_config(
    events: Path | None,
    output: Path | None,
    keep_going: bool,
    dry_run: bool = False,
    yes: bool = False,
) -> BuildConfig:
    config_file = _load_config_file(state.config_path)
    events_path = events or Path(config_file.get("events_path", DEFAULT_EVENTS_PATH))
    output_dir = output or Path(config_file.get("output_dir", DEFAULT_OUTPUT_DIR))
    if not keep_going:
        try:
            keep_going = config_file.getboolean("keep_going", fallback=False)
        except ValueError:
            console.print(
                f"[bold red]Error:[/] Invalid keep_going value in {state.config_path}: "
                f"{config_file['keep_going']!r} (expected true/false, yes/no, on/off, 1/0)"
            )
            raise typer.Exit(1) from None

    return BuildConfig(
        events_path=events_path.expanduser(),
        output_dir=output_dir.expanduser(),
        keep_going=keep_going,
        dry_run=dry_run,
        verbose=state.verbose,
        yes=yes,
    )


def _load(path: Path) -> dict:
    from daybook.store import load_calendar

    try:
        return load_calendar(path)
    except FileNotFoundError:
        console.print(f"[bold red]Error:[/] Events file not found: {path}")
        raise typer.Exit(1) from None
    except DaybookError as e:
        console.print(f"[bold red]Error:[/] {e}")
        raise typer.Exit(1) from None


def _run_build(cfg: BuildConfig, today: date) -> None:
    """Core build runner: display panel, confirm, run, show results."""
    from daybook.preflight import run_preflight_checks
    from daybook.render import render_site
    from daybook.store import save_calendar
    from daybook.store import write_exports

    if not run_preflight_checks(cfg, console):
        raise typer.Exit(1)

    # -- Info panel ----------------------------------------------------------
    info = Text()
    info.append("  Events:    ", style="bold")
    info.append(f"{cfg.events_path}\n")
    info.append("  Output:    ", style="bold")
    info.append(f"{cfg.output_dir}\n")
    info.append("  Today:     ", style="bold")
    info.append(today.isoformat())
    info.append("\n  On error:  ", style="bold")
    if cfg.keep_going:
        info.append("skip entry and continue", style="yellow")
    else:
        info.append("stop", style="green")
    if cfg.dry_run:
        info.append("\n  Mode:      ")
        info.append("DRY RUN", style="bold magenta")

    console.print(Panel(info, title="[bold]Daybook Build[/bold]"))

    # -- Confirmation --------------------------------------------------------
    if not cfg.yes and not cfg.dry_run:
        typer.confirm("Proceed?", abort=True)

    # -- Run -----------------------------------------------------------------
    calendar = _load(cfg.events_path)
    pages = 0
    try:
        result = CalendarExpander(today, fail_fast=not cfg.keep_going).run(calendar)
        if not cfg.dry_run:
            save_calendar(calendar, cfg.events_path)
            write_exports(calendar, cfg.events_path.parent)
            pages = render_site(result.entries, cfg.output_dir, today)
    except SpecifierError as e:
        console.print(f"[bold red]Build failed ({e.kind}):[/] {e}")
        raise typer.Exit(1) from None
    except DaybookError as e:
        console.print(f"[bold red]Build failed:[/] {e}")
        raise typer.Exit(1) from None
    except KeyboardInterrupt:
        console.print("[yellow]Interrupted by user[/]")
        raise typer.Exit(130) from None
    except Exception as e:
        console.print_exception()
        console.print(f"[bold red]Unexpected error:[/] {e}")
        raise typer.Exit(1) from e

    stats = result.stats

    # -- Results table -------------------------------------------------------
    results = Table.grid(padding=(0, 2))
    results.add_column(style="bold")
    results.add_column(justify="right")
    results.add_row("Entries", str(stats.entries))
    results.add_row("Dates", str(stats.dates))
    results.add_row("Pages", str(pages) if not cfg.dry_run else "—")
    error_val = Text(str(stats.errors))
    if stats.errors == 0:
        error_val.append(" ✓", style="green")
    else:
        error_val.stylize("bold red")
    results.add_row("Errors", error_val)

    console.print(Panel(results, title="[bold]Results[/bold]", expand=False))

    if stats.errors:
        raise typer.Exit(1)


# ---------------------------------------------------------------------------
# Shared options
# ---------------------------------------------------------------------------

_EVENTS_OPT = Annotated[
    Path | None,
    typer.Option("--events", "-e", help=f"Calendar JSON file (default: {DEFAULT_EVENTS_PATH})"),
]
_OUTPUT_OPT = Annotated[
    Path | None,
    typer.Option("--output", "-o", help=f"Site output directory (default: {DEFAULT_OUTPUT_DIR})"),
]
_TODAY_OPT = Annotated[
    str | None,
    typer.Option("--today", help="Reference date YYYY-MM-DD for auto offsets (default: today)"),
]
_KEEP_GOING = Annotated[
    bool,
    typer.Option("--keep-going", "-k", help="Skip entries with bad specifiers instead of stopping"),
]
_DRY_RUN = Annotated[bool, typer.Option("--dry-run", "-n", help="Expand without writing files")]
_YES = Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation prompt")]


# ---------------------------------------------------------------------------
# Subcommand: build
# ---------------------------------------------------------------------------


@app.command()
def build(
    events: _EVENTS_OPT = None,
    output: _OUTPUT_OPT = None,
    today: _TODAY_OPT = None,
    keep_going: _KEEP_GOING = False,
    dry_run: _DRY_RUN = False,
    yes: _YES = False,
) -> None:
    """Write the calendar back, its filtered exports, and one HTML page per day."""
    _run_build(
        _build_config(events, output, keep_going, dry_run=dry_run, yes=yes),
        _parse_today(today),
    )


# ---------------------------------------------------------------------------
# Subcommand: check
# ---------------------------------------------------------------------------


@app.command()
def check(
    events: _EVENTS_OPT = None,
    today: _TODAY_OPT = None,
) -> None:
    """Resolve every specifier without writing anything.

    Reports malformed specifiers, impossible anchor dates, and ranges that
    overflow the calendar.  Exits with code 1 if any issues are found.
    """
    from daybook.verify import run_check

    cfg = _build_config(events, None, keep_going=True)
    ok = run_check(_load(cfg.events_path), _parse_today(today), console)
    if not ok:
        raise typer.Exit(1)


# ---------------------------------------------------------------------------
# Subcommand: expand
# ---------------------------------------------------------------------------


@app.command()
def expand(
    specifier: Annotated[str, typer.Argument(help="Date-range specifier, e.g. 2000+-01-01")],
    today: _TODAY_OPT = None,
    limit: Annotated[
        int | None,
        typer.Option("--limit", "-l", min=0, help="Print at most this many dates"),
    ] = None,
) -> None:
    """Show how a single specifier resolves and the dates it produces."""
    ref = _parse_today(today)
    try:
        resolved = resolve(parse_specifier(specifier), ref)
    except SpecifierError as e:
        console.print(f"[bold red]Error ({e.kind}):[/] {e.message}")
        raise typer.Exit(1) from None

    info = Text()
    info.append("  Anchor:  ", style="bold")
    info.append(f"{resolved.anchor.isoformat()}\n")
    info.append("  End:     ", style="bold")
    info.append(f"{resolved.end.isoformat()}\n")
    info.append("  Step:    ", style="bold")
    if resolved.step is StepUnit.NONE:
        info.append("no repetition", style="dim")
    else:
        info.append(f"1 {resolved.step.value}", style="cyan")
    info.append("\n  Offsets: ", style="bold")
    info.append(f"years={resolved.years} months={resolved.months} days={resolved.days}")
    info.append(f"\n  Today:   {ref.isoformat()}", style="dim")
    console.print(Panel(info, title=f"[bold]{specifier}[/bold]", expand=False))

    count = 0
    for d in expand_range(resolved):
        if limit is not None and count >= limit:
            console.print("[dim]…[/dim]")
            break
        console.print(d.isoformat())
        count += 1


# ---------------------------------------------------------------------------
# Subcommand: status
# ---------------------------------------------------------------------------


@app.command()
def status() -> None:
    """Show configuration and a summary of the calendar file."""
    from daybook.store import filter_calendar
    from daybook.store import load_calendar

    cfg = _build_config(None, None, keep_going=False)
    config_exists = state.config_path.exists()
    events_exists = cfg.events_path.exists()

    cfg_info = Text()
    cfg_info.append("  Config:  ", style="bold")
    cfg_info.append(str(state.config_path) + " ")
    cfg_info.append(
        "✓" if config_exists else "(not found)", style="green" if config_exists else "yellow"
    )
    cfg_info.append("\n  Events:  ", style="bold")
    cfg_info.append(str(cfg.events_path) + " ")
    cfg_info.append(
        "✓" if events_exists else "(not found)", style="green" if events_exists else "red"
    )
    cfg_info.append("\n  Output:  ", style="bold")
    cfg_info.append(str(cfg.output_dir))

    console.print(Panel(cfg_info, title="[bold]Daybook — Status[/bold]"))

    if not events_exists:
        console.print(f"[yellow]No events file yet — create[/] [cyan]{cfg.events_path}[/]")
        return

    try:
        calendar = load_calendar(cfg.events_path)
    except DaybookError as e:
        console.print(f"[bold red]Error:[/] {e}")
        raise typer.Exit(1) from None

    table = Table(show_header=True, header_style="bold cyan", box=None, padding=(0, 2))
    table.add_column("Kind")
    table.add_column("Entries", justify="right")
    table.add_column("Events", justify="right")
    for kind in EVENT_KINDS:
        filtered = filter_calendar(calendar, kind)
        table.add_row(kind, str(len(filtered)), str(sum(len(v) for v in filtered.values())))
    table.add_row(
        Text("total", style="bold"),
        str(len(calendar)),
        str(sum(len(v) for v in calendar.values())),
    )

    console.print(Panel(table, title="[bold]Calendar[/bold]", expand=False))


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    app()
