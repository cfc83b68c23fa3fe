from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)


class DocumentError(ValueError):
    """Raised when a document file cannot be used as an editable record."""


def read_json(path: str | Path) -> Dict[str, Any]:
    """Load the document at ``path``; a missing or blank file is an empty document."""
    p = Path(path)
    if not p.exists():
        logger.debug("No document at %s, starting empty", p)
        return {}
    text = p.read_text(encoding="utf-8").strip()
    if not text:
        return {}
    try:
        obj = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DocumentError(f"{p}: invalid JSON at line {exc.lineno} column {exc.colno}") from exc
    if not isinstance(obj, dict):
        raise DocumentError(f"{p}: document must be a JSON object, got {type(obj).__name__}")
    return obj


def atomic_write_json(path: str | Path, obj: Dict[str, Any]) -> None:
    """Save the document through a sibling ``.tmp`` file so a failed dump leaves the old file intact."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    tmp = p.with_suffix(p.suffix + ".tmp")
    try:
        tmp.write_text(json.dumps(obj, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")
        tmp.replace(p)
    except (OSError, TypeError, ValueError):
        tmp.unlink(missing_ok=True)
        raise
    logger.debug("Saved document to %s", p)


__all__ = ["DocumentError", "read_json", "atomic_write_json"]
