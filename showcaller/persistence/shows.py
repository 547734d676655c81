from __future__ import annotations
from typing import Optional, Dict, List
from datetime import datetime

from showcaller.core.db.base import get_conn, atomic

_COLS = "id,name,description,start_time,user_id"

def create(name: str, start_time: datetime, description: str | None = None, user_id: str = "") -> Dict:
    with atomic():
        con = get_conn()
        cur = con.execute(
            "INSERT INTO shows(name,description,start_time,user_id) VALUES(?,?,?,?)",
            (name, description, int(start_time.timestamp()), str(user_id)),
        )
        row = con.execute(f"SELECT {_COLS} FROM shows WHERE id=?", (cur.lastrowid,)).fetchone()
    return _row_to_show(row)

def get(show_id: int) -> Optional[Dict]:
    con = get_conn()
    row = con.execute(f"SELECT {_COLS} FROM shows WHERE id=?", (int(show_id),)).fetchone()
    return _row_to_show(row) if row else None

def list_all(user_id: str | None = None) -> List[Dict]:
    con = get_conn()
    if user_id is None:
        rows = con.execute(f"SELECT {_COLS} FROM shows ORDER BY start_time ASC").fetchall()
    else:
        rows = con.execute(f"SELECT {_COLS} FROM shows WHERE user_id=? ORDER BY start_time ASC",
                           (str(user_id),)).fetchall()
    return [_row_to_show(r) for r in rows]

def update(show_id: int, **fields) -> Optional[Dict]:
    cur = get(show_id)
    if cur is None:
        return None
    name = fields.get("name", cur["name"])
    description = fields.get("description", cur["description"])
    start = fields.get("start_time")
    start_ts = int(start.timestamp()) if start is not None else cur["start_time"]
    with atomic():
        con = get_conn()
        con.execute("UPDATE shows SET name=?, description=?, start_time=? WHERE id=?",
                    (name, description, start_ts, int(show_id)))
    return get(show_id)

def delete(show_id: int) -> bool:
    # Supprime aussi ses calls et ses groupes custom
    with atomic():
        con = get_conn()
        con.execute("DELETE FROM calls WHERE show_id=?", (int(show_id),))
        con.execute("DELETE FROM groups WHERE show_id=? AND is_custom=1", (int(show_id),))
        cur = con.execute("DELETE FROM shows WHERE id=?", (int(show_id),))
    return cur.rowcount > 0

def _row_to_show(row) -> Dict:
    return {
        "id": int(row[0]), "name": row[1], "description": row[2],
        "start_time": int(row[3]), "user_id": row[4] or "",
    }
