# server.py
# ============================================================
# 中文：
#   Edit MCP Tool Server（文档编辑 + 撤销/重做）
#   - 在内存中持有一份 JSON 文档（可从文件加载）
#   - 所有修改通过 HistorySession 记录，可 undo / redo
#   - 支持事务：多次修改合并为一次撤销
#   - 可选保存：原子覆盖写文档快照（历史本身不落盘）
#
# English:
#   Edit MCP Tool Server (document editing + undo/redo)
#   - Holds one JSON document in memory (optionally loaded from file)
#   - Every change is recorded through a HistorySession (undo / redo)
#   - Transactions group several changes into one undo step
#   - Optional save: atomic overwrite of the document snapshot (history stays in memory)
# ============================================================

from __future__ import annotations

import secrets
from typing import Any, Dict, List, Optional, Union

from mcp.server.fastmcp import FastMCP
from pydantic import BaseModel, Field

# ---------- Internal modules / 内部模块 ----------
from edit_history import (
    ActionMetadata,
    ActionType,
    HistoryError,
    HistorySession,
    HistoryStore,
    PathError,
)
from edit_history.document import DocumentError, atomic_write_json, read_json
from edit_history.value_path import get_value


# ============================================================
# Workspace / 工作区
# ============================================================

class EditWorkspace:
    """
    中文：一份文档 + 它的编辑历史；revision 在每次 apply（含 undo/redo）后 +1
    English: One document plus its history; revision bumps after every apply (incl. undo/redo)
    """

    def __init__(self) -> None:
        self.document: Dict[str, Any] = {}
        self.session = HistorySession()
        self.revision = 0
        self.source: Optional[str] = None

    def reset(
        self,
        document: Optional[Dict[str, Any]] = None,
        *,
        max_entries: Optional[int] = None,
        source: Optional[str] = None,
    ) -> None:
        self.document = document if document is not None else {}
        self.session = HistorySession(HistoryStore(max_entries=max_entries))
        self.revision = 0
        self.source = source

    def touch(self) -> None:
        self.revision += 1


workspace = EditWorkspace()


# ============================================================
# MCP Tool Schemas / 工具输入输出
# ============================================================

class MetadataInput(BaseModel):
    """
    中文：调用方提供的动作元数据（引擎不解释，只用于预览/日志）
    English: Caller-supplied action metadata (opaque; previews/logging only)
    """
    type: ActionType = Field(description="init | add | del | mov | upd")
    entity_id: int = Field(description="Entity the change belongs to")
    related_entity_id: Optional[int] = Field(default=None, description="Optional second entity")

    def to_metadata(self) -> ActionMetadata:
        return ActionMetadata(
            type=self.type,
            entity_id=self.entity_id,
            related_entity_id=self.related_entity_id,
        )


class LoadDocumentInput(BaseModel):
    document: Optional[Dict[str, Any]] = Field(default=None, description="Inline document (wins over path)")
    path: Optional[str] = Field(default=None, description="Path to a JSON document")
    max_entries: Optional[int] = Field(default=None, ge=1, description="History size limit (None = unbounded)")


class UpdateValueInput(BaseModel):
    path: Union[str, List[str]] = Field(description="Dotted path ('a.b') or list of segments")
    value: Any = Field(default=None, description="New value (ignored when remove=true)")
    description: Optional[str] = Field(default=None, description="Logged history description")
    metadata: Optional[MetadataInput] = None
    remove: bool = Field(default=False, description="Delete the value instead of setting it")


class UpdateMapInput(BaseModel):
    map_path: Union[str, List[str]] = Field(
        default_factory=list,
        description="Path to the mapping inside the document (empty = document root)",
    )
    key: str = Field(description="Key inside the mapping")
    value: Any = None
    description: Optional[str] = None
    metadata: Optional[MetadataInput] = None
    remove: bool = False


class TransactionInput(BaseModel):
    description: Optional[str] = Field(default=None, description="Logged description of the group")


class SaveDocumentInput(BaseModel):
    path: Optional[str] = Field(default=None, description="Target path (defaults to the loaded path)")


class HistoryStatus(BaseModel):
    can_undo: bool
    can_redo: bool
    cursor: int
    in_transaction: bool
    undo_preview: Optional[Dict[str, Any]] = None
    redo_preview: Optional[Dict[str, Any]] = None
    entries: List[Dict[str, Any]] = Field(default_factory=list)


class EditOutput(BaseModel):
    """
    中文：统一输出；失败时 ok=false，blocked 给出 reason_code/message
    English: Common output; on failure ok=false and blocked carries reason_code/message
    """
    ok: bool
    request_id: str
    revision: int
    document: Dict[str, Any] = Field(default_factory=dict)
    status: HistoryStatus
    blocked: Optional[Dict[str, Any]] = None
    started: Optional[bool] = None
    saved_to: Optional[str] = None


# ============================================================
# Helpers / 辅助函数
# ============================================================

def _preview(metadata: Optional[ActionMetadata]) -> Optional[Dict[str, Any]]:
    return metadata.to_json() if metadata is not None else None


def build_status(ws: EditWorkspace) -> HistoryStatus:
    session = ws.session
    return HistoryStatus(
        can_undo=session.can_undo(),
        can_redo=session.can_redo(),
        cursor=session.store.cursor,
        in_transaction=session.in_transaction,
        undo_preview=_preview(session.get_undo_preview()) if session.can_undo() else None,
        redo_preview=_preview(session.get_redo_preview()) if session.can_redo() else None,
        entries=session.store.summary(),
    )


def _output(ws: EditWorkspace, *, ok: bool = True, blocked: Optional[Dict[str, Any]] = None, **extra: Any) -> EditOutput:
    return EditOutput(
        ok=ok,
        request_id=secrets.token_hex(8),
        revision=ws.revision,
        document=ws.document,
        status=build_status(ws),
        blocked=blocked,
        **extra,
    )


def _blocked(reason_code: str, exc: Exception) -> Dict[str, Any]:
    return {"reason_code": reason_code, "message": str(exc)}


def _resolve_map(ws: EditWorkspace, map_path: Union[str, List[str]]) -> Dict[str, Any]:
    """
    中文：找到文档中要修改的 mapping；空路径表示文档根
    English: Locate the mapping to edit; an empty path means the document root
    """
    if not map_path:
        return ws.document
    slot = get_value(ws.document, map_path)
    if not slot.exists:
        raise PathError(f"No mapping at {map_path!r}")
    if not isinstance(slot.value, dict):
        raise PathError(f"Value at {map_path!r} is not a mapping")
    return slot.value


# ============================================================
# Core implementations / 核心实现
# ============================================================

def load_document_impl(inp: LoadDocumentInput, ws: EditWorkspace = workspace) -> EditOutput:
    if inp.document is not None:
        document = inp.document
    elif inp.path:
        try:
            document = read_json(inp.path)
        except DocumentError as exc:
            return _output(ws, ok=False, blocked=_blocked("bad_document", exc))
    else:
        document = {}
    ws.reset(document, max_entries=inp.max_entries, source=inp.path)
    return _output(ws)


def update_value_impl(inp: UpdateValueInput, ws: EditWorkspace = workspace) -> EditOutput:
    metadata = inp.metadata.to_metadata() if inp.metadata else None
    try:
        ws.session.update_value(
            ws.document,
            inp.path,
            inp.value,
            inp.description,
            metadata,
            remove=inp.remove,
        ).emit(ws.touch)
    except (PathError, ValueError) as exc:
        return _output(ws, ok=False, blocked=_blocked("bad_path", exc))
    # 中文：emit 只在后续 apply 时触发，首次 apply 已完成，这里补记一次
    # English: the emit only fires on later applies; count the initial apply here
    ws.touch()
    return _output(ws)


def update_map_impl(inp: UpdateMapInput, ws: EditWorkspace = workspace) -> EditOutput:
    metadata = inp.metadata.to_metadata() if inp.metadata else None
    try:
        target = _resolve_map(ws, inp.map_path)
    except (PathError, ValueError) as exc:
        return _output(ws, ok=False, blocked=_blocked("bad_path", exc))
    ws.session.update_map(
        target,
        inp.key,
        inp.value,
        inp.description,
        metadata,
        remove=inp.remove,
    ).emit(ws.touch)
    ws.touch()
    return _output(ws)


def start_transaction_impl(inp: TransactionInput, ws: EditWorkspace = workspace) -> EditOutput:
    started = ws.session.start_transaction(inp.description)
    return _output(ws, started=started)


def commit_transaction_impl(ws: EditWorkspace = workspace) -> EditOutput:
    ws.session.commit_transaction()
    return _output(ws)


def undo_impl(ws: EditWorkspace = workspace) -> EditOutput:
    try:
        ws.session.undo()
    except HistoryError as exc:
        return _output(ws, ok=False, blocked=_blocked("nothing_to_undo", exc))
    return _output(ws)


def redo_impl(ws: EditWorkspace = workspace) -> EditOutput:
    try:
        ws.session.redo()
    except HistoryError as exc:
        return _output(ws, ok=False, blocked=_blocked("nothing_to_redo", exc))
    return _output(ws)


def save_document_impl(inp: SaveDocumentInput, ws: EditWorkspace = workspace) -> EditOutput:
    target = inp.path or ws.source
    if not target:
        return _output(ws, ok=False, blocked={"reason_code": "no_path", "message": "No path to save to."})
    atomic_write_json(target, ws.document)
    return _output(ws, saved_to=str(target))


# ============================================================
# MCP Wiring / MCP 工具注册
# ============================================================

mcp = FastMCP("dm-edit-history")


@mcp.tool()
def load_document(input: LoadDocumentInput) -> EditOutput:
    """Replace the working document and start a fresh history."""
    return load_document_impl(input)


@mcp.tool()
def get_document() -> EditOutput:
    return _output(workspace)


@mcp.tool()
def update_value(input: UpdateValueInput) -> EditOutput:
    """Set or delete a value at a path inside the document."""
    return update_value_impl(input)


@mcp.tool()
def update_map(input: UpdateMapInput) -> EditOutput:
    """Set or delete one key of a mapping inside the document."""
    return update_map_impl(input)


@mcp.tool()
def start_transaction(input: TransactionInput) -> EditOutput:
    return start_transaction_impl(input)


@mcp.tool()
def commit_transaction() -> EditOutput:
    return commit_transaction_impl()


@mcp.tool()
def undo() -> EditOutput:
    return undo_impl()


@mcp.tool()
def redo() -> EditOutput:
    return redo_impl()


@mcp.tool()
def history_status() -> HistoryStatus:
    return build_status(workspace)


@mcp.tool()
def save_document(input: SaveDocumentInput) -> EditOutput:
    return save_document_impl(input)


if __name__ == "__main__":
    # 中文：stdio 模式运行（Claude Desktop / MCP Inspector）
    # English: run via stdio (Claude Desktop / MCP Inspector)
    mcp.run()
