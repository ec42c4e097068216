"""Rich-based reporting utilities for the mfield CLI."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from rich.console import Console
from rich.json import JSON
from rich.panel import Panel

from mongo_fieldops.store import WriteAck

console = Console()


def print_json(payload: Dict[str, Any]) -> None:
    """Print a JSON payload with syntax highlighting."""
    console.print(JSON(json.dumps(payload, indent=2, default=str)))


def print_error(message: str) -> None:
    console.print(f"[red]Error:[/red] {message}")


def _acks(outcome: Any) -> List[WriteAck]:
    if outcome is None:
        return []
    if isinstance(outcome, WriteAck):
        return [outcome]
    return [ack for ack in outcome if isinstance(ack, WriteAck)]


def _mutated(outcome: Any) -> bool:
    return any(ack.modified_count > 0 or ack.upserted for ack in _acks(outcome))


def summarize(operation: str, collection: str, outcomes: List[Any], **arguments: Any) -> Dict[str, Any]:
    """Collapse per-document outcomes into a summary payload.

    ``None`` outcomes are counted as skipped.
    """
    skipped = sum(1 for outcome in outcomes if outcome is None)
    mutated = sum(1 for outcome in outcomes if _mutated(outcome))
    return {
        "operation": operation,
        "collection": collection,
        "arguments": arguments,
        "documents": len(outcomes),
        "mutated": mutated,
        "skipped": skipped,
        "document_ids": [str(_acks(outcome)[0].document_id) for outcome in outcomes if _acks(outcome)],
    }


def print_operation_summary(summary: Dict[str, Any]) -> None:
    """Print a one-panel summary of a field operation."""
    lines = [
        f"[bold]{summary.get('operation')}[/bold] on [cyan]{summary.get('collection')}[/cyan]",
        f"Documents: {summary.get('documents', 0)}",
        f"[green]Mutated: {summary.get('mutated', 0)}[/green]",
    ]
    if summary.get("skipped"):
        lines.append(f"[dim]Unchanged: {summary['skipped']}[/dim]")
    console.print(Panel("\n".join(lines), title="Field Operation", border_style="blue"))
