from __future__ import annotations
from showcaller.core.db.base import get_conn, atomic

def was_notified(call_id: int) -> bool:
    con = get_conn()
    row = con.execute("SELECT 1 FROM call_notifications WHERE call_id=? LIMIT 1", (int(call_id),)).fetchone()
    return bool(row)

def record(call_id: int) -> None:
    with atomic():
        con = get_conn()
        con.execute("INSERT OR IGNORE INTO call_notifications(call_id) VALUES(?)", (int(call_id),))

def all_ids() -> set[int]:
    con = get_conn()
    rows = con.execute("SELECT call_id FROM call_notifications").fetchall()
    return {int(r[0]) for r in rows}
