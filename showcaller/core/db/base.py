# showcaller/core/db/base.py
from __future__ import annotations
import os, sqlite3, threading
from contextlib import contextmanager

# dotenv déjà chargé dans config.py
from showcaller.core.config import settings

DB_PATH = os.path.join(os.path.abspath(settings.data_dir), "showcaller.db")

_tls = threading.local()

def _connect():
    os.makedirs(os.path.dirname(DB_PATH), exist_ok=True)
    con = sqlite3.connect(DB_PATH, check_same_thread=False, isolation_level=None, timeout=5.0)
    con.row_factory = sqlite3.Row
    con.execute("PRAGMA journal_mode=WAL;")
    con.execute("PRAGMA foreign_keys=ON;")
    con.execute("PRAGMA synchronous=NORMAL;")
    con.execute("PRAGMA temp_store=MEMORY;")
    con.execute("PRAGMA busy_timeout=5000;")
    return con

def get_conn():
    con = getattr(_tls, "con", None)
    if con is None:
        con = _connect()
        _tls.con = con
    return con

def use_database(path: str) -> None:
    """Bascule vers un autre fichier SQLite (tests, outils). Ferme la connexion du thread courant."""
    global DB_PATH
    close_conn()
    DB_PATH = os.path.abspath(path)

def close_conn() -> None:
    con = getattr(_tls, "con", None)
    if con is not None:
        con.close()
        _tls.con = None

@contextmanager
def atomic(con=None, immediate=True):
    con = con or get_conn()
    try:
        con.execute("BEGIN IMMEDIATE;" if immediate else "BEGIN;")
        yield con
        con.execute("COMMIT;")
    except Exception:
        con.execute("ROLLBACK;")
        raise

def current_db_path() -> str:
    return DB_PATH
