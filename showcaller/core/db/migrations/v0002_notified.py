DDL = """
CREATE TABLE IF NOT EXISTS call_notifications (
  call_id  INTEGER PRIMARY KEY,                      -- idempotence stricte: une alerte par call
  ts       INTEGER NOT NULL DEFAULT (strftime('%s','now'))
);
"""

def apply(con):
    con.executescript(DDL)
