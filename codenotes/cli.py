import logging
import os
from contextlib import contextmanager
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Any, Iterator, Optional

import click
import yaml  # type: ignore
from dotenv import load_dotenv

from codenotes.config import ENV_CONFIG_FILE, ENV_NOTES_DIR, load_settings
from codenotes.errors import CodeNotesError, NoteExistsError
from codenotes.json_utils import json_dumps, plain_data
from codenotes.parser.utils import truncate
from codenotes.service import NotesService
from codenotes.xlsx import write_workbook

try:
    __version__ = version("codenotes")
except PackageNotFoundError:
    __version__ = "0.0.1-dev"

# Length of annotation previews in section listings.
ANNOTATION_PREVIEW = 50


@contextmanager
def _reported_errors() -> Iterator[None]:
    """Turn library errors into click errors with a non-zero exit code."""

    try:
        yield
    except CodeNotesError as exc:
        raise click.ClickException(str(exc)) from exc


def _service(ctx: click.Context) -> NotesService:
    """Return the service of the selected note store with a fresh index."""

    with _reported_errors():
        settings = load_settings(
            ctx.obj.get("notes_dir"), ctx.obj.get("config_file")
        )
    return NotesService.open(settings)


def _emit(data: Any, output_format: str) -> None:
    """Print ``data`` as JSON or YAML."""

    if output_format == "yaml":
        click.echo(yaml.safe_dump(data, allow_unicode=True, sort_keys=False))
    else:
        click.echo(json_dumps(data, pretty=True))


@click.group()
@click.option("--debug/--no-debug", default=False)
@click.option("--trace/--no-trace", default=False)
@click.option(
    "--log-file",
    type=click.Path(file_okay=True, dir_okay=False),
    envvar="CODENOTES_LOG_FILE",
)
@click.option(
    "--notes-dir",
    type=click.Path(file_okay=False, dir_okay=True),
    default=None,
    help="Directory holding the note documents.",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(file_okay=True, dir_okay=False),
    default=None,
    help="YAML configuration file.",
)
@click.version_option(__version__, prog_name="codenotes")
@click.pass_context
def cli(
    ctx: click.Context,
    debug: bool,
    trace: bool,
    log_file: Optional[str] = None,
    notes_dir: Optional[str] = None,
    config_file: Optional[str] = None,
) -> None:
    """Configure logging, load environment variables and pick the store.

    Args:
        ctx: Click context object.
        debug: Toggle debug logging.
        trace: Toggle trace logging.
        log_file: Optional path to the log file.
        notes_dir: Optional note store directory.
        config_file: Optional configuration file.
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
    ctx.obj["notes_dir"] = notes_dir
    ctx.obj["config_file"] = config_file


@cli.command()
@click.argument("name")
@click.pass_context
def create(ctx: click.Context, name: str) -> None:
    """Create a note and make it the current one.

    When the note already exists it is selected instead.
    """

    service = _service(ctx)
    with _reported_errors():
        try:
            path = service.create_note(name)
        except NoteExistsError:
            note_id = service.select_note(name)
            click.echo(f"Note already exists, selected {note_id}", err=True)
            return

    click.echo(f"Created note: {path.name}")


@cli.command()
@click.argument("name")
@click.pass_context
def select(ctx: click.Context, name: str) -> None:
    """Make an existing note the current one."""

    service = _service(ctx)
    with _reported_errors():
        note_id = service.select_note(name)
    click.echo(f"Current note: {note_id}")


@cli.command()
@click.pass_context
def current(ctx: click.Context) -> None:
    """Show the current note."""

    service = _service(ctx)
    note_id = service.current_note
    click.echo(note_id if note_id else "No note selected")


@cli.command("list")
@click.pass_context
def list_notes(ctx: click.Context) -> None:
    """List the note documents of the store."""

    service = _service(ctx)
    summaries = service.list_notes()
    if not summaries:
        click.echo("No notes found. Create one first!")
        return

    current_note = service.current_note
    for summary in summaries:
        marker = "*" if summary.note_id == current_note else " "
        click.echo(
            f"{marker} {summary.title} ({summary.references_label}) "
            f"modified {summary.modified}"
        )


@cli.command()
@click.argument("name")
@click.pass_context
def sections(ctx: click.Context, name: str) -> None:
    """List the annotation sections of a note."""

    service = _service(ctx)
    with _reported_errors():
        found = service.note_sections(name)

    for section in found:
        preview = truncate(section.annotation_text or "", ANNOTATION_PREVIEW)
        click.echo(
            f"{section.section_line}: {section.label} "
            f"{section.anchor_full_path}"
            + (f" - {preview}" if preview else "")
        )


@cli.command()
@click.argument("source", type=click.Path(dir_okay=False))
@click.argument("line", type=click.IntRange(min=1))
@click.option("--note", default=None, help="Note to append to.")
@click.option(
    "--annotation", "-m", default=None, help="Commentary for the line."
)
@click.option(
    "--snippet",
    default=None,
    help="Code excerpt; defaults to the annotated line.",
)
@click.option("--language", default=None, help="Code fence language.")
@click.pass_context
def add(
    ctx: click.Context,
    source: str,
    line: int,
    note: Optional[str] = None,
    annotation: Optional[str] = None,
    snippet: Optional[str] = None,
    language: Optional[str] = None,
) -> None:
    """Annotate LINE of SOURCE in the current note."""

    service = _service(ctx)
    with _reported_errors():
        entry = service.add_annotation(
            source,
            line,
            annotation=annotation,
            snippet=snippet,
            note=note,
            language=language,
        )
    click.echo(
        f"Reference {entry.anchor_file_name}:{entry.anchor_line} added to "
        f"{entry.note_id} at line {entry.section_line}"
    )


@cli.command()
@click.argument("name")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
def delete(ctx: click.Context, name: str, yes: bool = False) -> None:
    """Delete a note."""

    service = _service(ctx)
    if not yes:
        click.confirm(f'Delete note "{name}"?', abort=True)

    with _reported_errors():
        path = service.delete_note(name)
    click.echo(f"Note deleted: {path.name}")


@cli.command()
@click.argument("source")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json", "yaml"]),
    default="text",
    help="Output format.",
)
@click.pass_context
def lookup(ctx: click.Context, source: str, output_format: str) -> None:
    """Show the annotations anchored to SOURCE."""

    service = _service(ctx)
    path = str(Path(source).expanduser().resolve())
    markers = service.markers(path)

    if output_format != "text":
        _emit([plain_data(m) for m in markers], output_format)
        return

    if not markers:
        click.echo(f"No annotations for {path}")
        return
    for marker in markers:
        click.echo(
            f"line {marker.line}: {marker.note_id}:{marker.section_line}"
            + (f" - {marker.annotation_text}" if marker.annotation_text else "")
        )


@cli.command()
@click.argument("note")
@click.argument("section_line", type=int)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json", "yaml"]),
    default="text",
    help="Output format.",
)
@click.pass_context
def goto(
    ctx: click.Context, note: str, section_line: int, output_format: str
) -> None:
    """Resolve the source location of the section at SECTION_LINE of NOTE."""

    service = _service(ctx)
    with _reported_errors():
        navigation = service.navigate(note, section_line)

    if output_format != "text":
        _emit(plain_data(navigation), output_format)
        return

    click.echo(f"{navigation.source.path}:{navigation.source.line}")
    click.echo(f"{navigation.note.path}:{navigation.note.line}")


@cli.command()
@click.argument("query")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json", "yaml"]),
    default="text",
    help="Output format.",
)
@click.pass_context
def search(ctx: click.Context, query: str, output_format: str) -> None:
    """Search note titles, annotations and code snippets."""

    service = _service(ctx)
    results = service.search(query)

    if output_format != "text":
        _emit([plain_data(r) for r in results], output_format)
        return

    if not results:
        click.echo(f"No results for {query!r}")
        return
    for result in results:
        click.echo(f"{result.title} ({result.path})")
        for match in result.matches:
            where = f" {match.label}" if match.label else ""
            click.echo(f"  [{match.kind.value}]{where}: {match.preview}")


@cli.command()
@click.pass_context
def refresh(ctx: click.Context) -> None:
    """Rebuild the index from the note store."""

    service = _service(ctx)
    click.echo(
        f"Indexed {len(service.index.documents())} notes with "
        f"{len(service.index)} references"
    )


@cli.command()
@click.option(
    "--output",
    "output_path",
    type=click.Path(file_okay=True, dir_okay=True),
    default=None,
    help="Write output to FILE or DIRECTORY instead of the console.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "yaml", "xlsx"]),
    default="json",
    help="Output format.",
)
@click.pass_context
def export(
    ctx: click.Context,
    output_path: Optional[str] = None,
    output_format: str = "json",
) -> None:
    """Export the notes and their references.

    Args:
        ctx: Click context object.
        output_path: Optional file or directory path for the exported data.
            If a directory is provided, the file is named ``codenotes``
            with the extension of the chosen format.
        output_format: Format of the exported data.
    """

    service = _service(ctx)
    data = service.export()

    final_path: Optional[Path] = None
    if output_path:
        final_path = Path(output_path)

        # Mapping from format names to file extensions.
        extensions = {"json": ".json", "yaml": ".yaml", "xlsx": ".xlsx"}

        if final_path.is_dir():
            final_path = final_path / f"codenotes{extensions[output_format]}"

    if output_format == "xlsx":
        if final_path is None:
            raise click.UsageError("Output file is required for xlsx format.")
        write_workbook(data, final_path)
        return

    if output_format == "json":
        content = json_dumps(data, pretty=True)
    else:
        content = yaml.safe_dump(data, allow_unicode=True, sort_keys=False)

    if final_path:
        final_path.write_text(content, encoding="utf-8")
    else:
        click.echo(content)


@cli.command()
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", type=int, default=8000, show_default=True)
@click.pass_context
def serve(ctx: click.Context, host: str, port: int) -> None:
    """Serve the HTTP API for editor integrations."""

    import uvicorn  # type: ignore[import-not-found]

    # The web application reads its store from the environment.
    if ctx.obj.get("notes_dir"):
        os.environ[ENV_NOTES_DIR] = ctx.obj["notes_dir"]
    if ctx.obj.get("config_file"):
        os.environ[ENV_CONFIG_FILE] = ctx.obj["config_file"]

    uvicorn.run("codenotes.web:app", host=host, port=port)
