from __future__ import annotations

import argparse
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .config import HistoryConfig
from .document import atomic_write_json, read_json
from .session import HistorySession
from .store import HistoryError
from .value_path import PathError

HELP_TEXT = """Commands:
  set <path> <json>   set a value (dotted path, JSON or bare string value)
  del <path>          delete a value
  begin [description] open a transaction
  commit              commit the open transaction
  undo | redo         step through history
  show                print the document
  history             list history entries
  save                write the document to --output
  quit                leave"""


@dataclass
class EditorState:
    document: Dict[str, Any]
    session: HistorySession
    output: Optional[Path] = None


def _parse_value(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def _format_history(state: EditorState) -> str:
    rows = state.session.store.summary()
    if not rows:
        return "(empty history)"
    lines = []
    for row in rows:
        marker = "*" if row["done"] else " "
        label = row["description"] or "(no description)"
        lines.append(f"{marker} {row['index']:03d} {label} [{row['actions']} action(s)]")
    if state.session.in_transaction:
        lines.append("  ... transaction open")
    return "\n".join(lines)


def run_command(state: EditorState, line: str) -> str:
    """Execute one REPL command against ``state`` and return the text to show."""
    parts = line.strip().split(maxsplit=2)
    if not parts:
        return ""
    cmd = parts[0].lower()
    session = state.session

    if cmd == "set":
        if len(parts) < 3:
            raise ValueError("usage: set <path> <json>")
        value = _parse_value(parts[2])
        session.update_value(state.document, parts[1], value, f"set {parts[1]}")
        return f"{parts[1]} = {json.dumps(value, ensure_ascii=False)}"
    if cmd == "del":
        if len(parts) < 2:
            raise ValueError("usage: del <path>")
        session.update_value(state.document, parts[1], None, f"del {parts[1]}", remove=True)
        return f"{parts[1]} deleted"
    if cmd == "begin":
        description = line.strip()[len(parts[0]):].strip() or None
        if not session.start_transaction(description):
            return "A transaction is already open."
        return "Transaction started."
    if cmd == "commit":
        if not session.in_transaction:
            return "No open transaction."
        session.commit_transaction()
        return "Transaction committed."
    if cmd == "undo":
        session.undo()
        return "Undone."
    if cmd == "redo":
        session.redo()
        return "Redone."
    if cmd == "show":
        return json.dumps(state.document, indent=2, ensure_ascii=False)
    if cmd == "history":
        return _format_history(state)
    if cmd == "save":
        if state.output is None:
            raise ValueError("No --output path configured.")
        atomic_write_json(state.output, state.document)
        return f"Saved to {state.output}"
    if cmd == "help":
        return HELP_TEXT
    raise ValueError(f"Unknown command '{cmd}'. Type 'help'.")


def main() -> None:
    config = HistoryConfig.from_env()

    parser = argparse.ArgumentParser(description="Edit a JSON document with undo/redo.")
    parser.add_argument("--document", help="JSON document to load (starts empty if omitted)")
    parser.add_argument("--output", help="Where 'save' writes the document (defaults to --document)")
    parser.add_argument(
        "--max-entries",
        type=int,
        default=config.max_entries,
        help="Keep at most this many history entries (defaults to EDIT_HISTORY_MAX_ENTRIES or unbounded)",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else config.log_level)
    # entry descriptions are the editor's change log
    logging.getLogger("edit_history.entry").setLevel(logging.INFO)

    document = read_json(args.document) if args.document else {}
    output = args.output or args.document
    config.max_entries = args.max_entries
    state = EditorState(
        document=document,
        session=HistorySession(config=config),
        output=Path(output) if output else None,
    )

    print("Document editor. Type 'help' for commands, 'quit' to leave.")
    while True:
        try:
            line = input("> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nExiting.")
            break
        if not line:
            continue
        if line.lower() in {"quit", "exit"}:
            print("Goodbye.")
            break
        try:
            print(run_command(state, line))
        except (HistoryError, PathError, ValueError) as exc:
            print(f"[Error] {exc}")


if __name__ == "__main__":
    main()
