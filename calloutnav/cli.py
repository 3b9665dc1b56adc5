import logging
import sys
import time
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Optional

import click
import yaml  # type: ignore
from attrs import evolve
from dotenv import load_dotenv

from calloutnav import config
from calloutnav.json_utils import json_dumps
from calloutnav.parser import arrange, extract_annotations
from calloutnav.render import annotations_to_data, render_text
from calloutnav.session import AnnotationIndex
from calloutnav.template import append_callout, build_callout, insert_callout
from calloutnav.xlsx import write_workbook

try:
    __version__ = version("calloutnav")
except PackageNotFoundError:
    __version__ = "0.0.1-dev"

logger = logging.getLogger(__name__)


@click.group()
@click.option("--debug/--no-debug", default=False)
@click.option("--trace/--no-trace", default=False)
@click.option(
    "--log-file",
    type=click.Path(file_okay=True, dir_okay=False),
    envvar="CALLOUTNAV_LOG_FILE",
)
@click.option(
    "--settings",
    "settings_file",
    type=click.Path(file_okay=True, dir_okay=False),
    default=None,
    help="Settings file (defaults to $CALLOUTNAV_SETTINGS or "
    "~/.calloutnav/settings.yaml).",
)
@click.version_option(__version__, prog_name="calloutnav")
@click.pass_context
def cli(
    ctx: click.Context,
    debug: bool,
    trace: bool,
    log_file: Optional[str] = None,
    settings_file: Optional[str] = None,
) -> None:
    """Configure logging and load environment variables.

    Args:
        ctx: Click context object.
        debug: Toggle debug logging.
        trace: Toggle trace logging.
        log_file: Optional path to the log file.
        settings_file: Optional path to the settings file.
    """
    if trace:
        level = 1
    elif debug:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        filename=log_file,
        level=level,
        format="[%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    if trace:
        logging.debug("Trace mode is on")
    if debug:
        logging.debug("Debug mode is on")
    load_dotenv()

    ctx.ensure_object(dict)
    ctx.obj["settings_path"] = Path(settings_file) if settings_file else None


def _load(ctx: click.Context) -> config.Settings:
    """Load settings for the current invocation."""

    try:
        return config.load_settings(ctx.obj["settings_path"])
    except (ValueError, yaml.YAMLError) as exc:
        raise click.ClickException(f"Cannot read settings: {exc}") from exc


def _save(ctx: click.Context, settings: config.Settings) -> None:
    path = config.save_settings(settings, ctx.obj["settings_path"])
    logger.debug(f"Settings written to {path}")


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--by-timestamp/--by-line",
    default=None,
    help="Chronological or document order (default: saved setting).",
)
@click.option(
    "--flatten/--nested",
    default=None,
    help="Flatten the chronological list (default: saved setting).",
)
@click.option(
    "--ascending/--descending",
    default=None,
    help="Sort direction (default: saved setting).",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json", "yaml", "xlsx"]),
    default="text",
    help="Output format.",
)
@click.option(
    "--output",
    "output_path",
    type=click.Path(file_okay=True, dir_okay=True),
    default=None,
    help="Write output to FILE or DIRECTORY instead of the console.",
)
@click.option("--color/--no-color", default=False, help="Colour badges.")
@click.pass_context
def parse(
    ctx: click.Context,
    file: str,
    by_timestamp: Optional[bool] = None,
    flatten: Optional[bool] = None,
    ascending: Optional[bool] = None,
    output_format: str = "text",
    output_path: Optional[str] = None,
    color: bool = False,
) -> None:
    """List the tracked callouts of FILE.

    Args:
        ctx: Click context object.
        file: Markdown document to scan.
        by_timestamp: Override for chronological ordering.
        flatten: Override for flattening the chronological list.
        ascending: Override for the sort direction.
        output_format: Format of the listing.
        output_path: Optional file or directory for the listing. If a
            directory is provided, the file name is derived from ``file``.
        color: Colour author badges in text output.
    """

    settings = _load(ctx)
    options = settings.order_options(by_timestamp, flatten, ascending)

    source = Path(file)
    annotations = extract_annotations(
        source.read_text(encoding="utf-8"), settings.users
    )
    forest = arrange(annotations, options)

    # Determine the output file path if one was provided.
    final_path: Optional[Path] = None
    if output_path:
        final_path = Path(output_path)
        extensions = {
            "text": ".txt",
            "json": ".json",
            "yaml": ".yaml",
            "xlsx": ".xlsx",
        }
        if final_path.is_dir():
            final_path = final_path / f"{source.stem}{extensions[output_format]}"

    if output_format == "xlsx":
        if final_path is None:
            raise click.UsageError("Output file is required for xlsx format.")
        write_workbook(forest, final_path, settings.users)
        return

    if output_format == "json":
        content = json_dumps(
            annotations_to_data(forest, settings.users), indent=True
        )
    elif output_format == "yaml":
        content = yaml.safe_dump(
            annotations_to_data(forest, settings.users),
            allow_unicode=True,
            sort_keys=False,
        )
    else:
        content = render_text(
            forest, settings.users, color=color and final_path is None
        )

    if final_path:
        final_path.write_text(content, encoding="utf-8")
    else:
        click.echo(content)


@cli.command()
@click.option("--author", default=None, help="Author tag (default: saved).")
@click.option(
    "--text",
    "selection",
    default=None,
    help="Text to quote. Read from standard input when omitted and piped.",
)
@click.option(
    "--into",
    "target",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Insert the callout into this file instead of printing it.",
)
@click.option(
    "--line",
    type=int,
    default=None,
    help="One-based line to insert before (default: end of file).",
)
@click.pass_context
def insert(
    ctx: click.Context,
    author: Optional[str] = None,
    selection: Optional[str] = None,
    target: Optional[str] = None,
    line: Optional[int] = None,
) -> None:
    """Build a time-stamped callout, optionally inserting it into a file."""

    settings = _load(ctx)
    author = author or settings.author_name

    # Quote piped input when no text was given on the command line.
    if selection is None and not sys.stdin.isatty():
        selection = sys.stdin.read().rstrip("\n") or None

    block = build_callout(author, selection)

    if target is None:
        click.echo(block, nl=not block.endswith("\n"))
        return

    path = Path(target)
    text = path.read_text(encoding="utf-8")
    if line is None:
        updated = append_callout(text, block)
    elif line < 1:
        raise click.UsageError("--line must be 1 or greater.")
    else:
        updated = insert_callout(text, line - 1, block)

    path.write_text(updated, encoding="utf-8")
    click.echo(f"Inserted callout by {author} into {target}")


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--interval",
    type=float,
    default=1.0,
    show_default=True,
    help="Seconds between checks for changes.",
)
@click.option(
    "--count",
    type=int,
    default=0,
    show_default=True,
    help="Stop after this many renders (0 runs until interrupted).",
)
@click.pass_context
def watch(
    ctx: click.Context, file: str, interval: float = 1.0, count: int = 0
) -> None:
    """Re-render the callouts of FILE whenever it changes."""

    path = Path(file)
    index = AnnotationIndex(_load(ctx))
    last_mtime: Optional[float] = None
    renders = 0

    try:
        while count == 0 or renders < count:
            mtime = path.stat().st_mtime
            if mtime != last_mtime:
                last_mtime = mtime

                # Reserve the token before reading so a slower, older read
                # cannot overwrite the listing of a newer one.
                token = index.begin()
                forest = index.commit(token, path.read_text(encoding="utf-8"))
                if forest is not None:
                    click.echo(render_text(forest, index.settings.users))
                    renders += 1
                    if count and renders >= count:
                        break
            time.sleep(interval)
    except KeyboardInterrupt:
        logger.debug("Watch interrupted")


@cli.group()
def tags() -> None:
    """Manage the tracked callout tags."""


@tags.command("list")
@click.pass_context
def tags_list(ctx: click.Context) -> None:
    """List tracked tags with their colours."""

    settings = _load(ctx)
    if not settings.users:
        click.echo("No tracked tags.")
    for user in settings.users:
        click.echo(f"{user.tag}\t{user.color}")


@tags.command("add")
@click.argument("tag")
@click.option("--color", default=config.DEFAULT_COLOR, show_default=True)
@click.pass_context
def tags_add(ctx: click.Context, tag: str, color: str) -> None:
    """Track TAG."""

    try:
        settings = config.add_user(_load(ctx), tag, color)
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc
    _save(ctx, settings)
    click.echo(f"Tracking {tag}")


@tags.command("remove")
@click.argument("tag")
@click.pass_context
def tags_remove(ctx: click.Context, tag: str) -> None:
    """Stop tracking TAG."""

    try:
        settings = config.remove_user(_load(ctx), tag)
    except KeyError as exc:
        raise click.ClickException(f"Unknown tag {tag!r}") from exc
    _save(ctx, settings)
    click.echo(f"Removed {tag}")


@tags.command("color")
@click.argument("tag")
@click.argument("color")
@click.pass_context
def tags_color(ctx: click.Context, tag: str, color: str) -> None:
    """Change the badge colour of TAG."""

    try:
        settings = config.set_user_color(_load(ctx), tag, color)
    except KeyError as exc:
        raise click.ClickException(f"Unknown tag {tag!r}") from exc
    _save(ctx, settings)
    click.echo(f"{tag}\t{color}")


@cli.group("settings")
def settings_group() -> None:
    """Show or change saved settings."""


@settings_group.command("show")
@click.pass_context
def settings_show(ctx: click.Context) -> None:
    """Print the effective settings as YAML."""

    click.echo(
        yaml.safe_dump(
            _load(ctx).to_dict(), allow_unicode=True, sort_keys=False
        ),
        nl=False,
    )


@settings_group.command("set")
@click.argument("key", type=click.Choice(list(config.SCALAR_KEYS)))
@click.argument("value")
@click.pass_context
def settings_set(ctx: click.Context, key: str, value: str) -> None:
    """Change one setting."""

    try:
        settings = config.set_value(_load(ctx), key, value)
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc
    _save(ctx, settings)
    click.echo(f"{key} = {getattr(settings, key)}")


@settings_group.command("toggle-order")
@click.pass_context
def toggle_order(ctx: click.Context) -> None:
    """Switch between document and chronological order."""

    settings = _load(ctx)
    settings = evolve(settings, sort_by_timestamp=not settings.sort_by_timestamp)
    _save(ctx, settings)
    mode = "chronological" if settings.sort_by_timestamp else "line"
    click.echo(f"Order: {mode}")


@settings_group.command("toggle-direction")
@click.pass_context
def toggle_direction(ctx: click.Context) -> None:
    """Switch between ascending and descending order."""

    settings = _load(ctx)
    settings = evolve(settings, sort_ascending=not settings.sort_ascending)
    _save(ctx, settings)
    direction = "ascending" if settings.sort_ascending else "descending"
    click.echo(f"Direction: {direction}")
