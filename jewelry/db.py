from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Any, Iterable

import streamlit as st

from jewelry.schema import SCHEMA_SQL


def connect(db_path: Path | str) -> sqlite3.Connection:
    conn = sqlite3.connect(str(db_path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    return conn


@st.cache_resource
def get_conn(db_path: Path) -> sqlite3.Connection:
    return connect(db_path)


def _column_exists(conn: sqlite3.Connection, table: str, column: str) -> bool:
    rows = conn.execute(f"PRAGMA table_info({table});").fetchall()
    cols = [r["name"] for r in rows]
    return column in cols


def ensure_schema(conn: sqlite3.Connection) -> None:
    # Create base schema (for new installs)
    conn.executescript(SCHEMA_SQL)

    # ---- migrations for existing installs ----
    # Early databases stored sales without the payment split.
    if not _column_exists(conn, "sales", "given_amount"):
        conn.execute("ALTER TABLE sales ADD COLUMN given_amount REAL;")
    if not _column_exists(conn, "sales", "balance_amount"):
        conn.execute("ALTER TABLE sales ADD COLUMN balance_amount REAL;")
        conn.execute(
            "UPDATE sales SET balance_amount = amount - COALESCE(given_amount, 0) WHERE balance_amount IS NULL;"
        )

    conn.commit()


def q(conn: sqlite3.Connection, sql: str, params: Iterable[Any] = ()) -> list[sqlite3.Row]:
    cur = conn.execute(sql, tuple(params))
    rows = cur.fetchall()
    cur.close()
    return rows


def x(conn: sqlite3.Connection, sql: str, params: Iterable[Any] = ()) -> int:
    cur = conn.execute(sql, tuple(params))
    conn.commit()
    count = cur.rowcount
    cur.close()
    return int(count)
