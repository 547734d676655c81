from __future__ import annotations
import json
from typing import Optional, Dict, List

from showcaller.core.db.base import get_conn, atomic

_COLS = "id,name,is_custom,show_id"

def defaults() -> List[Dict]:
    con = get_conn()
    rows = con.execute(f"SELECT {_COLS} FROM groups WHERE is_custom=0 ORDER BY id").fetchall()
    return [_row_to_group(r) for r in rows]

def for_show(show_id: int) -> List[Dict]:
    con = get_conn()
    rows = con.execute(
        f"SELECT {_COLS} FROM groups WHERE is_custom=0 OR show_id=? ORDER BY id",
        (int(show_id),),
    ).fetchall()
    return [_row_to_group(r) for r in rows]

def list_all() -> List[Dict]:
    con = get_conn()
    rows = con.execute(f"SELECT {_COLS} FROM groups ORDER BY id").fetchall()
    return [_row_to_group(r) for r in rows]

def get(group_id: int) -> Optional[Dict]:
    con = get_conn()
    row = con.execute(f"SELECT {_COLS} FROM groups WHERE id=?", (int(group_id),)).fetchone()
    return _row_to_group(row) if row else None

def create(name: str, show_id: int | None = None, is_custom: int = 1) -> Dict:
    with atomic():
        con = get_conn()
        cur = con.execute("INSERT INTO groups(name,is_custom,show_id) VALUES(?,?,?)",
                          (name, int(is_custom), show_id))
        row = con.execute(f"SELECT {_COLS} FROM groups WHERE id=?", (cur.lastrowid,)).fetchone()
    return _row_to_group(row)

def rename(group_id: int, name: str) -> Optional[Dict]:
    with atomic():
        con = get_conn()
        con.execute("UPDATE groups SET name=? WHERE id=?", (name, int(group_id)))
    return get(group_id)

def delete(group_id: int) -> bool:
    """
    Seuls les groupes custom se suppriment. Les calls qui visaient ce groupe
    sont re-pointés vers le groupe par défaut "All".
    """
    grp = get(group_id)
    if grp is None or not grp["is_custom"]:
        return False
    with atomic():
        con = get_conn()
        all_row = con.execute("SELECT id FROM groups WHERE name='All' AND is_custom=0 LIMIT 1").fetchone()
        if all_row is not None:
            all_id = int(all_row[0])
            rows = con.execute("SELECT id, group_ids FROM calls").fetchall()
            for call_id, raw in rows:
                ids = json.loads(raw or "[]")
                if group_id not in ids:
                    continue
                ids = [g for g in ids if g != group_id]
                if all_id not in ids:
                    ids.append(all_id)
                con.execute("UPDATE calls SET group_ids=? WHERE id=?", (json.dumps(ids), call_id))
        con.execute("DELETE FROM groups WHERE id=?", (int(group_id),))
    return True

def _row_to_group(row) -> Dict:
    return {
        "id": int(row[0]), "name": row[1], "is_custom": int(row[2]),
        "show_id": int(row[3]) if row[3] is not None else None,
    }
