from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict

import pytest


# ---------- Ensure project root is importable ----------
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from edit_history import HistorySession  # noqa: E402


@pytest.fixture
def session() -> HistorySession:
    return HistorySession()


@pytest.fixture
def document() -> Dict[str, Any]:
    """A small blueprint-like document with nested records and an entity map."""
    return {
        "name": "Starter base",
        "meta": {"author": "A", "tags": {"primary": "smelting"}},
        "entities": {
            1: {"name": "inserter", "position": {"x": 0, "y": 0}},
            2: {"name": "belt", "position": {"x": 1, "y": 0}},
        },
    }
