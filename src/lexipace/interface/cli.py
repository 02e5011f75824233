"""lexipace CLI — record answers and ask what to practice next."""

import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Annotated

import typer

from lexipace.application.config import SchedulerConfig, resolve_config
from lexipace.application.factory import get_coordinator, get_store
from lexipace.application.scheduler.review_scheduler import now_ms
from lexipace.application.session.advice import REASON_MESSAGES
from lexipace.application.session.coordinator import SessionCoordinator
from lexipace.application.session.streak import current_streak
from lexipace.consts import VERSION
from lexipace.domain.errors import LexipaceError
from lexipace.domain.learning.models import RecommendationType, ReviewCandidate
from lexipace.infrastructure.persistence.json_store import JsonLearnerStore

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="lexipace: adaptive vocabulary review scheduler.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage lexipace configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

LOG_LEVELS = {0: logging.WARNING, 1: logging.INFO}


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
    data_dir: Annotated[
        Path | None, typer.Option(help="Directory holding the learner's records.")
    ] = None,
    catalog: Annotated[
        Path | None, typer.Option(help="Word list (JSON or YAML) to draw new items from.")
    ] = None,
):
    """Global settings for lexipace."""
    ctx.ensure_object(dict)
    ctx.obj["overrides"] = {"data_dir": data_dir, "catalog_path": catalog}
    logging.getLogger("lexipace").setLevel(LOG_LEVELS.get(verbose, logging.DEBUG))


def _config(ctx: typer.Context) -> SchedulerConfig:
    overrides = (ctx.obj or {}).get("overrides", {})
    try:
        return resolve_config(overrides)
    except ValueError as e:
        typer.secho(f"Invalid configuration: {e}", fg="red")
        raise typer.Exit(1) from e


def _open(ctx: typer.Context) -> tuple[SchedulerConfig, JsonLearnerStore, SessionCoordinator]:
    config = _config(ctx)
    return config, get_store(config), get_coordinator(config)


def _fail(e: LexipaceError) -> typer.Exit:
    typer.secho(f"Error: {e}", fg="red")
    return typer.Exit(1)


def _pct(rate: float) -> str:
    return f"{rate * 100:.0f}%"


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def answer(
    ctx: typer.Context,
    item: Annotated[str, typer.Argument(help="Id of the item that was answered.")],
    correct: Annotated[
        bool, typer.Option("--correct/--wrong", help="Whether the answer was right.")
    ] = True,
    latency: Annotated[int, typer.Option(help="Response time in milliseconds.")] = 0,
):
    """Record one answer and update the learner profile."""
    _, store, coordinator = _open(ctx)
    now = now_ms()
    try:
        records = store.load_records()
        profile = store.load_profile()
        record = coordinator.record_answer(item, correct, latency, records, now=now)
        profile = coordinator.refresh_profile(profile, records, now=now)
        store.save(profile, records)
    except LexipaceError as e:
        raise _fail(e) from e

    typer.echo(
        f"{record.item_id}: {record.correct_attempts}/{record.total_attempts} correct "
        f"({_pct(record.correct_rate)}), reviews: {record.review_count}, "
        f"streak: {profile.consecutive_days} day(s)"
    )


@app.command()
def due(
    ctx: typer.Context,
    limit: Annotated[int | None, typer.Option(help="Show at most this many items.")] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """List items due for review, highest priority first."""
    _, store, coordinator = _open(ctx)
    try:
        records = store.load_records()
    except LexipaceError as e:
        raise _fail(e) from e

    candidates = coordinator.scheduler.due_reviews(records, now_ms())
    if limit is not None:
        candidates = candidates[:limit]

    if json_output:
        typer.echo(
            json.dumps(
                [
                    {
                        "item_id": cand.item_id,
                        "priority": round(cand.priority, 4),
                        "hours_since_review": round(cand.hours_since_review, 2),
                        "correct_rate": cand.record.correct_rate,
                    }
                    for cand in candidates
                ],
                indent=2,
            )
        )
        return

    if not candidates:
        typer.secho("Nothing is due for review.", fg="green")
        return
    for cand in candidates:
        typer.echo(
            f"{cand.item_id}  priority={cand.priority:.2f}  "
            f"idle={cand.hours_since_review:.1f}h  correct={_pct(cand.record.correct_rate)}"
        )


@app.command("next")
def next_cmd(
    ctx: typer.Context,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Recommend what to practice next."""
    _, store, coordinator = _open(ctx)
    try:
        records = store.load_records()
        rec = coordinator.next_recommendation(records, now_ms())
    except LexipaceError as e:
        raise _fail(e) from e

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "type": rec.type.value,
                    "items": rec.item_ids,
                    "reason": rec.reason_tag,
                    "estimated_minutes": rec.estimated_minutes,
                },
                indent=2,
            )
        )
        return

    if rec.type is RecommendationType.CAUGHT_UP:
        typer.secho(REASON_MESSAGES[rec.reason_tag], fg="green")
        return

    typer.echo(REASON_MESSAGES[rec.reason_tag])
    typer.echo(f"Type: {rec.type.value}  (~{rec.estimated_minutes} min)")
    for item in rec.items:
        if isinstance(item, ReviewCandidate):
            typer.echo(f"  {item.item_id}  priority={item.priority:.2f}")
        else:
            typer.echo(f"  {item.item_id}  rank={item.rank}")


@app.command()
def stats(
    ctx: typer.Context,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show aggregate learning statistics."""
    _, store, coordinator = _open(ctx)
    try:
        records = store.load_records()
        profile = store.load_profile()
    except LexipaceError as e:
        raise _fail(e) from e

    summary = coordinator.statistics(records)
    streak = current_streak(profile.last_active_ms, profile.consecutive_days, now_ms())

    if json_output:
        typer.echo(json.dumps({**asdict(summary), "streak_days": streak}, indent=2))
        return

    typer.echo(f"Items seen: {summary.total_items}  Learned: {summary.items_learned}")
    typer.echo(
        f"Correct: {summary.total_correct}/{summary.total_attempts} "
        f"({_pct(summary.average_correct_rate)})"
    )
    typer.echo(f"Average response: {summary.average_response_time_ms:.0f} ms")
    typer.echo(f"Study time: {summary.total_study_time_ms / 60000:.1f} min")
    typer.echo(f"Streak: {streak} day(s)")


@app.command()
def weak(
    ctx: typer.Context,
    limit: Annotated[int | None, typer.Option(help="Show at most this many items.")] = None,
):
    """List the items answered worst, weakest first."""
    _, store, coordinator = _open(ctx)
    try:
        records = store.load_records()
    except LexipaceError as e:
        raise _fail(e) from e

    items = coordinator.scheduler.analyze_weaknesses(records, limit)
    if not items:
        typer.secho("No weak items yet.", fg="green")
        return
    for w in items:
        typer.echo(
            f"{w.item_id}  correct={_pct(w.correct_rate)}  attempts={w.total_attempts}  "
            f"score={w.score:.2f}"
        )


@app.command()
def strong(
    ctx: typer.Context,
    limit: Annotated[int | None, typer.Option(help="Show at most this many items.")] = None,
):
    """List the best-known items."""
    _, store, coordinator = _open(ctx)
    try:
        records = store.load_records()
    except LexipaceError as e:
        raise _fail(e) from e

    items = coordinator.scheduler.analyze_strengths(records, limit)
    if not items:
        typer.secho("No strong items yet.", fg="yellow")
        return
    for s in items:
        typer.echo(
            f"{s.item_id}  correct={_pct(s.correct_rate)}  attempts={s.total_attempts}  "
            f"reviews={s.review_count}"
        )


@app.command()
def advice(ctx: typer.Context):
    """Show study advice based on recent performance."""
    _, store, coordinator = _open(ctx)
    now = now_ms()
    try:
        records = store.load_records()
        profile = store.load_profile()
    except LexipaceError as e:
        raise _fail(e) from e

    streak = current_streak(profile.last_active_ms, profile.consecutive_days, now)
    items = coordinator.advice(coordinator.statistics(records), streak, now)
    if not items:
        typer.echo("No advice right now. Keep going!")
        return
    for item in items:
        suffix = f" [{item.priority.value}]" if item.priority else ""
        typer.echo(f"{item.icon} {item.message}{suffix}")


@app.command("export")
def export_cmd(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="File to write the snapshot to.")],
):
    """Export records and profile to a JSON snapshot."""
    _, store, _ = _open(ctx)
    try:
        snapshot = store.export_snapshot()
    except LexipaceError as e:
        raise _fail(e) from e
    path.write_text(json.dumps(snapshot, ensure_ascii=False, indent=2), encoding="utf-8")
    typer.secho(f"Exported {len(snapshot['records'])} records to {path}", fg="green")


@app.command("import")
def import_cmd(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="Snapshot written by 'lexipace export'.")],
):
    """Replace stored data with a JSON snapshot."""
    _, store, _ = _open(ctx)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        _, records = store.import_snapshot(data)
    except (OSError, json.JSONDecodeError) as e:
        typer.secho(f"Cannot read snapshot {path}: {e}", fg="red")
        raise typer.Exit(1) from e
    except LexipaceError as e:
        raise _fail(e) from e
    typer.secho(f"Imported {len(records)} records.", fg="green")


@app.command()
def reset(
    ctx: typer.Context,
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Bypass confirmation.")
    ] = False,
):
    """Delete all stored records and the learner profile."""
    _, store, _ = _open(ctx)
    if not force and not typer.confirm(f"Delete all learner data in {store.data_dir}?"):
        raise typer.Exit()
    store.clear()
    typer.secho("Learner data cleared.", fg="green")


@app.command()
def version():
    """Print the installed version."""
    typer.echo(VERSION)


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Display final resolved configuration."""
    config = _config(ctx)
    typer.echo(config.model_dump_json(indent=2))
