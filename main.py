"""Command line for the Shared Lantern journey.

Usage:
    python main.py status                     # Where the lantern stands today
    python main.py status --animate           # Sweep the lantern along the path
    python main.py log-day --light 2 --ceasefire --restoration
    python main.py council --week 3 --lantern 4 4 --morale 3 4
    python main.py chronicle --week 3         # Ask the scribe for a story
    python main.py chronicle --list           # Stories written so far
    python main.py rhythm --days 14
"""

from __future__ import annotations

import asyncio
import logging
import sys
from datetime import date

import click

from journey.clock import parse_date
from lantern.chronicle import ChronicleError
from lantern.config import load_config
from lantern.core import JourneyOverview, SharedLantern
from lantern.daily import DailyRecord
from lantern.weekly import WeeklyRecord, resolve_ratio


def _setup_logging(verbose: bool = False, log_file: str | None = None) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    fmt = "%(asctime)s — %(name)s — %(levelname)s — %(message)s"

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(level=level, format=fmt, handlers=handlers)

    # Quiet down noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("anthropic").setLevel(logging.WARNING)


def _progress_bar(progress: float, width: int = 30) -> str:
    filled = int(round(progress * width))
    return "[" + "#" * filled + "." * (width - filled) + f"] {progress:6.1%}"


def _echo_overview(overview: JourneyOverview) -> None:
    click.echo(f"\n  {overview.day_label}  (week {overview.state.week_index or '-'})")
    click.echo(f"  {_progress_bar(overview.state.progress)}")
    lit = ", ".join(cp.name for cp in overview.checkpoints if cp.reached) or "none yet"
    click.echo(f"  Checkpoints lit: {lit}")
    if overview.goal:
        click.echo("  The Grey Havens are in sight.")
    click.echo(f"  Shared Lantern:  {overview.lantern_average:.1f} / 5")
    click.echo(f"  Realms Harmony:  {overview.morale_average:.1f} / 5\n")


@click.group()
@click.option("--verbose", is_flag=True, help="Enable debug logging")
@click.option("--config-dir", type=click.Path(), default=None, help="Config directory")
@click.pass_context
def main(ctx: click.Context, verbose: bool, config_dir: str | None) -> None:
    """Shared Lantern: a 90-day walk to the Grey Havens."""
    cfg = load_config(config_dir)
    log_file = (cfg.get("storage", {}) or {}).get("log_file")
    _setup_logging(verbose=verbose, log_file=log_file)
    # The CLI owns the wall clock; everything below it takes dates as input.
    ctx.obj = SharedLantern(clock=date.today, config=cfg)


@main.command()
@click.option("--animate", is_flag=True, help="Sweep the lantern from the start of the path")
@click.pass_obj
def status(lantern: SharedLantern, animate: bool) -> None:
    """Show today's place on the path."""
    if animate:
        def _frame(frame: JourneyOverview) -> None:
            click.echo(f"\r  {_progress_bar(frame.progress)}", nl=False)

        asyncio.run(lantern.animate_progress(_frame))
        click.echo()
    _echo_overview(lantern.overview())


@main.command("log-day")
@click.option("--date", "day", default=None, help="Day to record (YYYY-MM-DD, default today)")
@click.option("--light", default=0, type=int, help="Tokens of light: thank-you moments")
@click.option("--shadows", default=0, type=int, help="Shadows encountered")
@click.option("--ceasefire/--no-ceasefire", default=False, help="Ceasefire respected")
@click.option("--permission", default=0, type=int, help="Permission given before sensitive topics")
@click.option("--borders", default=0, type=int, help="Borders crossed")
@click.option("--restoration/--no-restoration", default=False, help="Acts of restoration")
@click.pass_obj
def log_day(
    lantern: SharedLantern,
    day: str | None,
    light: int,
    shadows: int,
    ceasefire: bool,
    permission: int,
    borders: int,
    restoration: bool,
) -> None:
    """Record one day of the shared log."""
    when = parse_date(day) if day else date.today()
    if when is None:
        raise click.BadParameter(f"not a date: {day}", param_hint="--date")

    record = lantern.log_day(
        DailyRecord(
            date=when,
            tokens_of_light=light,
            shadows=shadows,
            ceasefire=ceasefire,
            permission_given=permission,
            borders_crossed=borders,
            acts_of_restoration=restoration,
        )
    )
    click.echo(f"\n  {record.date}: {record.score} points. Your lantern has recorded today's steps.\n")


@main.command()
@click.option("--week", required=True, type=int, help="Week of the journey")
@click.option("--resolved", default=0, type=int, help="Conflicts resolved calmly")
@click.option("--unresolved", default=0, type=int, help="Conflicts left unresolved")
@click.option("--lantern", "lantern_ratings", nargs=2, type=int, default=(3, 3), help="Safety, Elf then Hobbit (1-5)")
@click.option("--morale", "morale_ratings", nargs=2, type=int, default=(3, 3), help="Morale, Elf then Hobbit (1-5)")
@click.option("--worked-well/--not-worked-well", default=True, help="Council focused on the right matters")
@click.option("--compliance", default=1.0, type=float, help="Ceasefire compliance (0-1)")
@click.option("--notes", default="", help="One line that captures the week")
@click.pass_obj
def council(
    lantern: SharedLantern,
    week: int,
    resolved: int,
    unresolved: int,
    lantern_ratings: tuple[int, int],
    morale_ratings: tuple[int, int],
    worked_well: bool,
    compliance: float,
    notes: str,
) -> None:
    """Hold the weekly council and read the scribe's note."""
    existing = lantern.weekly_record(week)
    result = lantern.hold_council(
        WeeklyRecord(
            week=week,
            resolved_conflicts=resolved,
            unresolved_conflicts=unresolved,
            lantern_elf=lantern_ratings[0],
            lantern_hobbit=lantern_ratings[1],
            morale_elf=morale_ratings[0],
            morale_hobbit=morale_ratings[1],
            worked_well=worked_well,
            ceasefire_compliance=compliance,
            story_notes=notes,
            story_event=existing.story_event if existing else "",
        )
    )
    ratio = resolve_ratio(result.record)
    click.echo(f"\n  Week {result.record.week} · distance {result.record.distance}")
    click.echo(f"  Resolve ratio: {'n/a' if ratio is None else f'{ratio:.0%}'}")
    click.echo(f"  Lantern {result.record.lantern_average:.1f} · Morale {result.record.morale_average:.1f}")
    click.echo(f"\n  {result.note}\n")


@main.command()
@click.option("--week", type=int, default=None, help="Week to chronicle")
@click.option("--list", "list_only", is_flag=True, help="List recent chronicles instead of writing one")
@click.option("--limit", default=12, type=int, help="How many chronicles to list")
@click.pass_obj
def chronicle(lantern: SharedLantern, week: int | None, list_only: bool, limit: int) -> None:
    """Turn a saved council into a short story scene."""
    if list_only:
        count, rows = asyncio.run(lantern.recent_chronicles(limit))
        click.echo(f"\n  {count} chronicles written")
        for row in rows:
            first_line = row["story"].splitlines()[0] if row["story"] else ""
            click.echo(f"  Week {row['week']:2d}  {row['created_at'][:10]}  {first_line[:60]}")
        click.echo()
        return
    if week is None:
        raise click.UsageError("--week is required unless --list is given")

    try:
        story = asyncio.run(lantern.write_chronicle(week))
    except ChronicleError as exc:
        hint = f" ({exc.hint})" if exc.hint else ""
        click.echo(f"Chronicle failed: {exc}{hint}", err=True)
        sys.exit(1)
    click.echo(f"\n{story}\n")


@main.command()
@click.option("--days", default=30, type=int, help="Days of history to show")
@click.pass_obj
def rhythm(lantern: SharedLantern, days: int) -> None:
    """Daily points over recent days and distance per week."""
    click.echo("\n  Daily journey rhythm")
    for day, points in lantern.rhythm(days):
        click.echo(f"  {day}  {points:+3d}  {'*' * max(0, points)}")
    click.echo("\n  Weekly distance")
    for week, distance in enumerate(lantern.weekly_distances(), start=1):
        click.echo(f"  Week {week:2d}  {distance:4d}")
    click.echo()


if __name__ == "__main__":
    main()
