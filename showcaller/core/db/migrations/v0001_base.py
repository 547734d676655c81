DDL = """
CREATE TABLE IF NOT EXISTS shows (
  id          INTEGER PRIMARY KEY AUTOINCREMENT,
  name        TEXT NOT NULL,
  description TEXT,
  start_time  INTEGER NOT NULL,                      -- epoch seconds (UTC)
  user_id     TEXT NOT NULL DEFAULT ''
);
CREATE INDEX IF NOT EXISTS idx_shows_start ON shows(start_time);

CREATE TABLE IF NOT EXISTS groups (
  id        INTEGER PRIMARY KEY AUTOINCREMENT,
  name      TEXT NOT NULL,
  is_custom INTEGER NOT NULL DEFAULT 0 CHECK (is_custom IN (0,1)),
  show_id   INTEGER                                  -- NULL = groupe global
);
CREATE INDEX IF NOT EXISTS idx_groups_show ON groups(show_id);

CREATE TABLE IF NOT EXISTS calls (
  id                INTEGER PRIMARY KEY AUTOINCREMENT,
  show_id           INTEGER NOT NULL,
  title             TEXT NOT NULL DEFAULT '',
  description       TEXT,
  minutes_before    INTEGER NOT NULL,
  group_ids         TEXT NOT NULL DEFAULT '[]',      -- tableau JSON d'ids de groupes
  send_notification INTEGER NOT NULL DEFAULT 0 CHECK (send_notification IN (0,1))
);
CREATE INDEX IF NOT EXISTS idx_calls_show ON calls(show_id);
"""

DEFAULT_GROUPS = ("All", "Cast", "Crew", "Staff", "Guests")

def apply(con):
    con.executescript(DDL)
    (n,) = con.execute("SELECT COUNT(*) FROM groups WHERE is_custom=0").fetchone()
    if int(n) == 0:
        con.executemany(
            "INSERT INTO groups(name, is_custom, show_id) VALUES(?,0,NULL)",
            [(name,) for name in DEFAULT_GROUPS],
        )
