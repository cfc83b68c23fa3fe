# tests/conftest.py
# ============================================================
# 中文：
#   pytest 公共 fixtures：
#   - 确保可 import server 与 edit_history
#   - ws: 每个测试一个干净的 EditWorkspace（重置模块级 workspace）
#
# English:
#   Shared pytest fixtures:
#   - make server and edit_history importable
#   - ws: a clean EditWorkspace per test (resets the module-level workspace)
# ============================================================

from __future__ import annotations

import sys
from pathlib import Path

import pytest


# ---------- Ensure tool folder and project root are importable / 确保可 import ----------
ROOT = Path(__file__).resolve().parent.parent
for p in (ROOT, ROOT.parent):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

import server  # noqa: E402


@pytest.fixture
def ws() -> server.EditWorkspace:
    """
    中文：重置模块级 workspace，返回它本身（工具函数默认使用它）
    English: Reset the module-level workspace and return it (tools use it by default)
    """
    server.workspace.reset({"player": {"location": "A00", "inventory": {}}, "entities": {}})
    return server.workspace
