import json
from pathlib import Path

import streamlit as st

from edit_history import HistoryError, HistorySession, PathError
from edit_history.document import read_json


def load_document(path: Path) -> dict:
    if not path.exists():
        st.warning(f"Document file not found: {path}")
        return {}
    try:
        return read_json(path)
    except Exception as exc:
        st.error(f"Failed to read document: {exc}")
        return {}


def history_rows(session: HistorySession) -> list[dict]:
    rows = []
    for row in session.store.summary():
        data = row["data"] or {}
        rows.append({
            "#": row["index"],
            "state": "done" if row["done"] else "undone",
            "description": row["description"] or "",
            "actions": row["actions"],
            "type": data.get("type", ""),
            "entity": data.get("entity_id", ""),
        })
    return rows


def _init_session(document: dict, source: str) -> None:
    st.session_state.document = document
    st.session_state.history = HistorySession()
    st.session_state.source = source


def main() -> None:
    st.set_page_config(page_title="Document History Viewer", layout="wide")

    st.title("Document History")
    source = st.text_input("Document file", "document.json")
    if "history" not in st.session_state or st.button("Reload"):
        _init_session(load_document(Path(source)), source)

    document = st.session_state.document
    session: HistorySession = st.session_state.history

    cols = st.columns(3)
    with cols[0]:
        if st.button("Undo", disabled=not session.can_undo()):
            session.undo()
            st.rerun()
    with cols[1]:
        if st.button("Redo", disabled=not session.can_redo()):
            session.redo()
            st.rerun()
    with cols[2]:
        if session.can_undo():
            preview = session.get_undo_preview()
            st.caption(f"Next undo: {preview.to_json() if preview else 'no metadata'}")

    st.subheader("Edit")
    path = st.text_input("Path (dotted)", "")
    raw = st.text_input("Value (JSON)", "")
    if st.button("Apply") and path:
        try:
            value = json.loads(raw) if raw else None
            session.update_value(document, path, value, f"set {path}")
            st.rerun()
        except (HistoryError, PathError, ValueError) as exc:
            st.error(str(exc))

    left, right = st.columns(2)
    with left:
        st.subheader("Document")
        st.json(document)
    with right:
        st.subheader("History")
        rows = history_rows(session)
        if rows:
            st.dataframe(rows, use_container_width=True)
        else:
            st.info("No edits yet.")


if __name__ == "__main__":
    main()
