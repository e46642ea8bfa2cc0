"""setlog CLI - log exercise sets into a markdown vault."""

import json
import locale
import logging
import sys

import click

from .config import MODAL_SIZES, MODAL_SPACINGS, SETTINGS_FILE, load_settings
from .core.errors import DocumentNotFound, SetlogError
from .core.tasks import UNTAGGED_KEY, find_entry, group_entries
from .session import is_collapsed, toggle_collapsed
from .workflows import get_last_result, get_store, load_entries, log_set, select_entry

SETTABLE_KEYS = ("tasks_file_path", "remembered_exercise", "modal_size", "modal_spacing")


@click.group()
@click.version_option()
@click.option("--vault", type=click.Path(file_okay=False), default=None,
              help="Vault directory (defaults to $SETLOG_VAULT or the current directory)")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx, vault: str | None, debug: bool):
    """setlog - log exercise sets from a markdown task list."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error:
        # Unsupported locale in the environment; tags sort by code point
        pass
    ctx.obj = {"store": get_store(vault), "settings_path": SETTINGS_FILE}


def _settings(ctx):
    return load_settings(ctx.obj["settings_path"])


def _fail(message) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--flat", is_flag=True, help="Do not group by tag")
@click.pass_context
def tasks(ctx, as_json: bool, flat: bool):
    """List pending exercises from the tasks document."""
    settings = _settings(ctx)
    try:
        entries = load_entries(ctx.obj["store"], settings)
    except DocumentNotFound as e:
        _fail(f"Tasks file not found: {e.path}")
    except SetlogError as e:
        _fail(e)

    if as_json:
        click.echo(
            json.dumps(
                [
                    {
                        "line": e.line_index,
                        "exercise": e.exercise_name,
                        "tag": e.tag,
                        "text": e.raw_text,
                        "scheduled": e.scheduled_date.isoformat() if e.scheduled_date else None,
                    }
                    for e in entries
                ],
                indent=2,
                ensure_ascii=False,
            )
        )
        return

    if not entries:
        click.echo("No pending tasks in the tasks file.")
        return

    if flat:
        for entry in entries:
            click.echo(f"• {entry.display_name}")
        return

    for group in group_entries(entries):
        collapsed = is_collapsed(settings, group.key)
        marker = "▸" if collapsed else "▾"
        click.echo(f"{marker} {group.display_name} ({len(group.indices)})")
        if collapsed:
            continue
        for index in group.indices:
            click.echo(f"    • {entries[index].display_name}")


@main.command()
@click.argument("exercise")
@click.pass_context
def last(ctx, exercise: str):
    """Show the last logged set for EXERCISE."""
    try:
        row = get_last_result(ctx.obj["store"], exercise)
    except DocumentNotFound:
        _fail(f"Exercise file not found: {exercise}")
    except SetlogError as e:
        _fail(e)

    if row is None:
        click.echo(f"No results logged for {exercise} yet.")
        return
    click.echo(f"{row.date}: {row.weight} x {row.reps}")


@main.command()
@click.argument("exercise", required=False)
@click.option("--weight", "-w", default=None, help="Weight lifted")
@click.option("--reps", "-r", default=None, help="Number of repetitions")
@click.option("--last-set", is_flag=True, help="Final set: mark the task as done")
@click.pass_context
def log(ctx, exercise: str | None, weight: str | None, reps: str | None, last_set: bool):
    """Log a set for EXERCISE (defaults to the remembered or first pending one)."""
    store = ctx.obj["store"]
    settings = _settings(ctx)
    try:
        entries = load_entries(store, settings)
    except DocumentNotFound as e:
        _fail(f"Tasks file not found: {e.path}")
    except SetlogError as e:
        _fail(e)

    entry = find_entry(entries, exercise) if exercise else select_entry(entries, settings)
    if entry is None:
        _fail(f"No pending task for {exercise}" if exercise else "No pending tasks in the tasks file.")

    if weight is None or reps is None:
        try:
            previous = get_last_result(store, entry.display_name)
        except SetlogError:
            previous = None
        click.echo(f"Exercise: {entry.display_name}")
        if weight is None:
            weight = click.prompt("Weight (kg)", default=previous.weight if previous else None)
        if reps is None:
            reps = click.prompt("Reps", default=previous.reps if previous else None)

    try:
        outcome = log_set(store, settings, entry, weight, reps, mark_done_requested=last_set)
    except DocumentNotFound:
        _fail(f"Exercise file not found for writing: {entry.display_name}")
    except (SetlogError, ValueError) as e:
        _fail(e)

    outcome.settings.save(ctx.obj["settings_path"])
    click.echo(f"Result added to {outcome.exercise}: {outcome.row.to_markdown()}")
    if outcome.task_marked:
        click.echo("Task marked as done in tasks file.")
    elif outcome.completion_error is not None:
        click.echo(f"Warning: could not mark task as done: {outcome.completion_error}", err=True)
        sys.exit(1)


@main.command()
@click.argument("tag")
@click.pass_context
def collapse(ctx, tag: str):
    """Toggle whether TAG's group is collapsed in the task list."""
    key = UNTAGGED_KEY if tag.lower() in ("untagged", UNTAGGED_KEY) else tag.lstrip("#")
    settings = toggle_collapsed(_settings(ctx), key)
    settings.save(ctx.obj["settings_path"])
    state = "collapsed" if is_collapsed(settings, key) else "expanded"
    click.echo(f"{tag}: {state}")


@main.command("config")
@click.argument("key", required=False, type=click.Choice(SETTABLE_KEYS))
@click.argument("value", required=False)
@click.pass_context
def config_cmd(ctx, key: str | None, value: str | None):
    """Show settings, or set KEY to VALUE."""
    settings = _settings(ctx)
    if key is None:
        click.echo(json.dumps(settings.to_dict(), indent=2, ensure_ascii=False))
        return
    if value is None:
        click.echo(getattr(settings, key))
        return

    if key == "modal_size" and value not in MODAL_SIZES:
        _fail(f"modal_size must be one of: {', '.join(MODAL_SIZES)}")
    if key == "modal_spacing" and value not in MODAL_SPACINGS:
        _fail(f"modal_spacing must be one of: {', '.join(MODAL_SPACINGS)}")

    setattr(settings, key, value)
    settings.save(ctx.obj["settings_path"])
    click.echo(f"{key} = {value}")
