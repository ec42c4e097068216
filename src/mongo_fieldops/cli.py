from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from bson import ObjectId
from rich.console import Console
from rich.logging import RichHandler

from mongo_fieldops import __version__
from mongo_fieldops.config import DEFAULT_CONFIG_PATH, RuntimeConfig, load_runtime_config, write_default_config
from mongo_fieldops.db import get_motor_client, get_store, init_odm
from mongo_fieldops.document_io import load_documents, write_report
from mongo_fieldops.editors import DocumentFieldEditor
from mongo_fieldops.exceptions import FieldOpsError
from mongo_fieldops.models import FieldOperationRun
from mongo_fieldops.references import Reference, resolve
from mongo_fieldops.reporting import print_error, print_json, print_operation_summary, summarize
from mongo_fieldops.store import CollectionHandle


app = typer.Typer(no_args_is_help=True, help="Rename, delete and import fields across MongoDB documents")
console = Console()


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _settings(uri: Optional[str], db: Optional[str], concurrency: Optional[int]) -> RuntimeConfig:
    if uri and db:
        config = RuntimeConfig(mongodb_uri=uri, default_db=db)
    else:
        config = load_runtime_config()
        config = RuntimeConfig(
            mongodb_uri=uri or config.mongodb_uri,
            default_db=db or config.default_db,
            concurrency=config.concurrency,
            log_level=config.log_level,
        )
    if concurrency is not None:
        config.concurrency = concurrency
    _configure_logging(config.log_level)
    return config


def _parse_doc_id(value: str, raw: bool = False) -> Any:
    if not raw and ObjectId.is_valid(value):
        return ObjectId(value)
    return value


def _reference(collection: str, doc_id: Optional[str], raw_id: bool = False) -> Reference:
    handle = CollectionHandle(name=collection)
    if doc_id is None:
        return handle
    return handle.document(_parse_doc_id(doc_id, raw_id))


async def _record_run(config: RuntimeConfig, summary: Dict[str, Any], doc_id: Optional[str]) -> None:
    odm_client = await init_odm(config.mongodb_uri, config.default_db)
    run = FieldOperationRun(
        database=config.default_db,
        collection=summary["collection"],
        operation=summary["operation"],
        arguments=summary.get("arguments", {}),
        document_id=doc_id,
        documents=summary["documents"],
        mutated=summary["mutated"],
    )
    try:
        await run.insert()
    finally:
        odm_client.close()


def _report(summary: Dict[str, Any], output: str, save: Optional[Path]) -> None:
    if save:
        write_report(save, summary)
    if output == "json":
        print_json(summary)
    else:
        print_operation_summary(summary)


def _execute(coro) -> None:
    try:
        asyncio.run(coro)
    except FieldOpsError as e:
        print_error(str(e))
        raise typer.Exit(code=1)


@app.command()
def version() -> None:
    console.print(f"mongo-fieldops v{__version__}")


@app.command()
def init(path: Optional[Path] = typer.Option(None, "--path", help="Path for config file")) -> None:
    config_path = path or DEFAULT_CONFIG_PATH
    if config_path.exists():
        console.print(f"Config already exists at {config_path}")
        raise typer.Exit(code=0)

    write_default_config(config_path)
    console.print(f"Created config at {config_path}")


@app.command()
def rename(
    collection: str = typer.Option(..., "--collection", help="Collection name"),
    old: str = typer.Option(..., "--from", help="Field to rename"),
    new: str = typer.Option(..., "--to", help="New field name"),
    doc_id: Optional[str] = typer.Option(
        None, "--id", help="Only rename in this document. 24-hex ids are parsed as ObjectId unless --raw-id"
    ),
    raw_id: bool = typer.Option(False, "--raw-id", help="Use --id as a plain string _id"),
    uri: Optional[str] = typer.Option(None, "--uri", help="MongoDB URI"),
    db: Optional[str] = typer.Option(None, "--db", help="Database name"),
    concurrency: Optional[int] = typer.Option(None, "--concurrency", min=0, help="Max in-flight writes, 0 for unbounded"),
    output: str = typer.Option("json", "--output", help="Output format: json or panel"),
    save: Optional[Path] = typer.Option(None, "--save", help="Save the summary to a YAML file"),
    store: bool = typer.Option(False, "--store", help="Record the run via Beanie ODM"),
) -> None:
    """Move the value of a field to a new name."""

    async def _run() -> None:
        config = _settings(uri, db, concurrency)
        client = get_motor_client(config.mongodb_uri)
        try:
            editor = resolve(
                get_store(client, config.default_db),
                _reference(collection, doc_id, raw_id),
                concurrency=config.concurrency,
            )
            if isinstance(editor, DocumentFieldEditor):
                outcomes: List[Any] = [await editor.rename_field({old: new})]
            else:
                outcomes = await editor.rename_field_across_documents({old: new})
        finally:
            client.close()

        summary = summarize("rename_field", collection, outcomes, field=old, to=new)
        if store:
            await _record_run(config, summary, doc_id)
        _report(summary, output, save)

    _execute(_run())


@app.command("delete-field")
def delete_field(
    collection: str = typer.Option(..., "--collection", help="Collection name"),
    field: str = typer.Option(..., "--field", help="Field to delete"),
    doc_id: Optional[str] = typer.Option(
        None, "--id", help="Only delete in this document. 24-hex ids are parsed as ObjectId unless --raw-id"
    ),
    raw_id: bool = typer.Option(False, "--raw-id", help="Use --id as a plain string _id"),
    uri: Optional[str] = typer.Option(None, "--uri", help="MongoDB URI"),
    db: Optional[str] = typer.Option(None, "--db", help="Database name"),
    concurrency: Optional[int] = typer.Option(None, "--concurrency", min=0, help="Max in-flight writes, 0 for unbounded"),
    output: str = typer.Option("json", "--output", help="Output format: json or panel"),
    save: Optional[Path] = typer.Option(None, "--save", help="Save the summary to a YAML file"),
    store: bool = typer.Option(False, "--store", help="Record the run via Beanie ODM"),
) -> None:
    """Remove a field from one document or every document of a collection."""

    async def _run() -> None:
        config = _settings(uri, db, concurrency)
        client = get_motor_client(config.mongodb_uri)
        try:
            editor = resolve(
                get_store(client, config.default_db),
                _reference(collection, doc_id, raw_id),
                concurrency=config.concurrency,
            )
            if isinstance(editor, DocumentFieldEditor):
                outcomes: List[Any] = [await editor.delete_field(field)]
            else:
                outcomes = await editor.delete_field_across_documents(field)
        finally:
            client.close()

        summary = summarize("delete_field", collection, outcomes, field=field)
        if store:
            await _record_run(config, summary, doc_id)
        _report(summary, output, save)

    _execute(_run())


@app.command("import")
def import_(
    collection: str = typer.Option(..., "--collection", help="Collection name"),
    file: Path = typer.Option(..., "--file", exists=True, dir_okay=False, help="JSON or YAML file with documents"),
    uri: Optional[str] = typer.Option(None, "--uri", help="MongoDB URI"),
    db: Optional[str] = typer.Option(None, "--db", help="Database name"),
    concurrency: Optional[int] = typer.Option(None, "--concurrency", min=0, help="Max in-flight writes, 0 for unbounded"),
    output: str = typer.Option("json", "--output", help="Output format: json or panel"),
    save: Optional[Path] = typer.Option(None, "--save", help="Save the summary to a YAML file"),
    store: bool = typer.Option(False, "--store", help="Record the run via Beanie ODM"),
) -> None:
    """Write documents into a collection, replacing any with the same id."""

    async def _run() -> None:
        config = _settings(uri, db, concurrency)
        docs = load_documents(file)
        client = get_motor_client(config.mongodb_uri)
        try:
            editor = resolve(
                get_store(client, config.default_db),
                CollectionHandle(name=collection),
                concurrency=config.concurrency,
            )
            outcomes = await editor.import_documents(*docs)
        finally:
            client.close()

        summary = summarize("import_documents", collection, outcomes, file=str(file))
        if store:
            await _record_run(config, summary, None)
        _report(summary, output, save)

    _execute(_run())


def main() -> None:
    app()


if __name__ == "__main__":
    main()
