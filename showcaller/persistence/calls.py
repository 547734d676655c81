from __future__ import annotations
import json
from typing import Optional, Dict, List

from showcaller.core.db.base import get_conn, atomic

_COLS = "id,show_id,title,description,minutes_before,group_ids,send_notification"

def create(show_id: int, title: str, minutes_before: int, group_ids: list[int],
           description: str | None = None, send_notification: int = 0) -> Dict:
    with atomic():
        con = get_conn()
        cur = con.execute(
            "INSERT INTO calls(show_id,title,description,minutes_before,group_ids,send_notification) "
            "VALUES(?,?,?,?,?,?)",
            (int(show_id), title or "", description, int(minutes_before),
             json.dumps(list(group_ids)), int(bool(send_notification))),
        )
        row = con.execute(f"SELECT {_COLS} FROM calls WHERE id=?", (cur.lastrowid,)).fetchone()
    return _row_to_call(row)

def get(call_id: int) -> Optional[Dict]:
    con = get_conn()
    row = con.execute(f"SELECT {_COLS} FROM calls WHERE id=?", (int(call_id),)).fetchone()
    return _row_to_call(row) if row else None

def for_show(show_id: int) -> List[Dict]:
    con = get_conn()
    rows = con.execute(f"SELECT {_COLS} FROM calls WHERE show_id=? ORDER BY minutes_before DESC",
                       (int(show_id),)).fetchall()
    return [_row_to_call(r) for r in rows]

def list_all() -> List[Dict]:
    con = get_conn()
    rows = con.execute(f"SELECT {_COLS} FROM calls ORDER BY id").fetchall()
    return [_row_to_call(r) for r in rows]

def update(call_id: int, **fields) -> Optional[Dict]:
    cur = get(call_id)
    if cur is None:
        return None
    title = fields.get("title", cur["title"])
    description = fields.get("description", cur["description"])
    minutes_before = int(fields.get("minutes_before", cur["minutes_before"]))
    group_ids = fields.get("group_ids")
    raw_groups = json.dumps(list(group_ids)) if group_ids is not None else cur["group_ids"]
    send = int(bool(fields.get("send_notification", cur["send_notification"])))
    with atomic():
        con = get_conn()
        con.execute(
            "UPDATE calls SET title=?, description=?, minutes_before=?, group_ids=?, send_notification=? WHERE id=?",
            (title, description, minutes_before, raw_groups, send, int(call_id)),
        )
    return get(call_id)

def delete(call_id: int) -> bool:
    with atomic():
        con = get_conn()
        cur = con.execute("DELETE FROM calls WHERE id=?", (int(call_id),))
    return cur.rowcount > 0

def _row_to_call(row) -> Dict:
    # group_ids reste sous forme JSON: la normalisation se fait à l'ingestion (domain.models)
    return {
        "id": int(row[0]), "show_id": int(row[1]), "title": row[2] or "",
        "description": row[3], "minutes_before": int(row[4]),
        "group_ids": row[5], "send_notification": int(row[6]),
    }
