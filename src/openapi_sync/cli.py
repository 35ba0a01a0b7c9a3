"""CLI entry point for openapi-sync."""

import logging
from pathlib import Path

import click

from openapi_sync import config
from openapi_sync.editors.info import INFO_FIELDS
from openapi_sync.editors.paths import PATH_FIELDS
from openapi_sync.editors.schemas import PROPERTY_FIELDS
from openapi_sync.editors.server import SERVER_FIELDS
from openapi_sync.parser.document import validate
from openapi_sync.preview import JsonPreview
from openapi_sync.storage import FileStore
from openapi_sync.sync.engine import SyncEngine


def _open(ctx: click.Context, preview: JsonPreview | None = None) -> SyncEngine:
    store = FileStore(ctx.obj["store_dir"])
    return SyncEngine.open(store, preview=preview, storage_key=ctx.obj["key"])


def _report(engine: SyncEngine, changed: bool, message: str) -> None:
    """Echo the outcome of an edit, failing the command if it was rejected."""
    if changed:
        click.echo(message)
    elif engine.last_edit_error:
        raise click.ClickException(engine.last_edit_error)
    else:
        click.echo("No changes.")


@click.group()
@click.option("--store-dir", type=click.Path(file_okay=False, path_type=Path), default=None, help="Directory holding the stored document.")
@click.option("--key", default=None, help="Storage slot name.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, store_dir: Path | None, key: str | None, verbose: bool):
    """OpenAPI Sync: edit an OpenAPI document as YAML or section by section."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else config.LOG_LEVEL,
        format="%(asctime)s | %(levelname)s | %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["store_dir"] = store_dir or config.STORE_DIR
    ctx.obj["key"] = key or config.STORAGE_KEY


@main.command()
@click.pass_context
def show(ctx: click.Context):
    """Print the current document text."""
    click.echo(_open(ctx).current_text, nl=False)


@main.command()
@click.pass_context
def preview(ctx: click.Context):
    """Print the current document as JSON, or the parse error."""
    view = JsonPreview()
    _open(ctx, preview=view).publish()
    if view.result.error is not None:
        raise click.ClickException(view.result.error)
    click.echo(view.result.content)


@main.command("validate")
@click.argument("doc_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def validate_cmd(doc_path: Path):
    """Check that a YAML file can be loaded as a document."""
    error = validate(doc_path.read_text(encoding="utf-8"))
    if error is not None:
        raise click.ClickException(error)
    click.echo(f"{doc_path} is valid.")


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def load(ctx: click.Context, doc_path: Path):
    """Replace the stored text with the contents of a file."""
    engine = _open(ctx)
    engine.on_text_changed(doc_path.read_text(encoding="utf-8"))
    if engine.last_error is not None:
        raise click.ClickException(f"Not loaded: {engine.last_error}")
    doc = engine.current_document
    click.echo(f"Loaded {doc_path}: {len(doc.schemas)} schemas, {len(doc.paths)} paths.")


@main.command("format")
@click.pass_context
def format_cmd(ctx: click.Context):
    """Rewrite the stored text in canonical form."""
    engine = _open(ctx)
    engine.reformat()
    click.echo("Reformatted document.")


@main.command()
@click.option("-o", "--output", required=True, type=click.Path(dir_okay=False, path_type=Path), help="File to write the YAML to.")
@click.pass_context
def export(ctx: click.Context, output: Path):
    """Write the current document text to a file."""
    engine = _open(ctx)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(engine.current_text, encoding="utf-8")
    click.echo(f"Document saved to {output}")


@main.command("set-info")
@click.argument("field", type=click.Choice(INFO_FIELDS))
@click.argument("value")
@click.pass_context
def set_info(ctx: click.Context, field: str, value: str):
    """Set the API title, description or version."""
    engine = _open(ctx)
    _report(engine, engine.apply_edit("info", field, value), f"Set info.{field}.")


@main.command("set-server")
@click.argument("field", type=click.Choice(SERVER_FIELDS))
@click.argument("value")
@click.pass_context
def set_server(ctx: click.Context, field: str, value: str):
    """Set the server URL or description."""
    engine = _open(ctx)
    _report(engine, engine.apply_edit("server", field, value), f"Set server.{field}.")


@main.command("add-schema")
@click.pass_context
def add_schema(ctx: click.Context):
    engine = _open(ctx)
    changed = engine.add_schema()
    name = engine.current_document.schemas[-1].name if changed else ""
    _report(engine, changed, f"Added schema {name}.")


@main.command("rename-schema")
@click.argument("index", type=int)
@click.argument("name")
@click.pass_context
def rename_schema(ctx: click.Context, index: int, name: str):
    engine = _open(ctx)
    _report(engine, engine.apply_edit("schemas", (index, "name"), name), f"Renamed schema {index} to {name}.")


@main.command("remove-schema")
@click.argument("index", type=int)
@click.pass_context
def remove_schema(ctx: click.Context, index: int):
    engine = _open(ctx)
    _report(engine, engine.remove_schema(index), f"Removed schema {index}.")


@main.command("add-property")
@click.argument("schema_index", type=int)
@click.pass_context
def add_property(ctx: click.Context, schema_index: int):
    engine = _open(ctx)
    _report(engine, engine.add_property(schema_index), f"Added property to schema {schema_index}.")


@main.command("set-property")
@click.argument("schema_index", type=int)
@click.argument("property_index", type=int)
@click.argument("field", type=click.Choice(PROPERTY_FIELDS))
@click.argument("value")
@click.pass_context
def set_property(ctx: click.Context, schema_index: int, property_index: int, field: str, value: str):
    """Set a property's name, type or format (empty format removes it)."""
    engine = _open(ctx)
    changed = engine.apply_edit("schemas", (schema_index, "properties", property_index, field), value)
    _report(engine, changed, f"Set property {schema_index}.{property_index}.{field}.")


@main.command("remove-property")
@click.argument("schema_index", type=int)
@click.argument("property_index", type=int)
@click.pass_context
def remove_property(ctx: click.Context, schema_index: int, property_index: int):
    engine = _open(ctx)
    _report(
        engine,
        engine.remove_property(schema_index, property_index),
        f"Removed property {schema_index}.{property_index}.",
    )


@main.command("add-path")
@click.pass_context
def add_path(ctx: click.Context):
    engine = _open(ctx)
    _report(engine, engine.add_path(), "Added path /new-path.")


@main.command("set-path")
@click.argument("index", type=int)
@click.argument("field", type=click.Choice(PATH_FIELDS))
@click.argument("value")
@click.pass_context
def set_path(ctx: click.Context, index: int, field: str, value: str):
    """Set a path's route, method, summary, operationId or request body schema."""
    engine = _open(ctx)
    _report(engine, engine.apply_edit("paths", (index, field), value), f"Set path {index}.{field}.")


@main.command("remove-path")
@click.argument("index", type=int)
@click.pass_context
def remove_path(ctx: click.Context, index: int):
    engine = _open(ctx)
    _report(engine, engine.remove_path(index), f"Removed path {index}.")
