from __future__ import annotations

import inspect
import logging
import sqlite3
import uuid
import weakref
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, Optional

import streamlit as st

from jewelry.db import ensure_schema, get_conn, q, x
from jewelry.errors import GatewayError, RecordNotFoundError
from jewelry.schema import COLLECTIONS, DATE_DEFAULTS, SYSTEM_COLUMNS
from jewelry.utils import iso_now, iso_today, to_number

logger = logging.getLogger(__name__)

INSERT = "INSERT"
UPDATE = "UPDATE"
DELETE = "DELETE"


@dataclass(frozen=True)
class ChangeEvent:
    collection: str
    kind: str  # INSERT / UPDATE / DELETE
    record_id: str


Listener = Callable[[ChangeEvent], None]


class _StrongRef:
    """Same call shape as a weakref, for listeners that are not bound methods."""

    __slots__ = ("listener",)

    def __init__(self, listener: Listener):
        self.listener = listener

    def __call__(self) -> Listener:
        return self.listener


def _columns(collection: str) -> tuple[str, ...]:
    try:
        return COLLECTIONS[collection]
    except KeyError:
        raise ValueError(f"Unknown collection: {collection!r}")


def _check_fields(collection: str, fields: Iterable[str], *, readable: bool = False) -> None:
    allowed = set(_columns(collection))
    if readable:
        allowed.update(SYSTEM_COLUMNS)
    unknown = sorted(set(fields) - allowed)
    if unknown:
        raise ValueError(f"Unknown field(s) for {collection}: {', '.join(unknown)}")


def _with_balance(record: dict) -> dict:
    # Mirrors a computed-column default: only fills balance when the caller did not.
    if record.get("balance_amount") is None:
        record["balance_amount"] = round(to_number(record.get("amount")) - to_number(record.get("given_amount")), 2)
    return record


class RecordGateway:
    """
    Table-like access to the five shop collections.

    Every read returns a complete list of plain dicts (a snapshot). Writes assign
    id / created_at / updated_at and notify subscribers of the collection after
    the write is committed.
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        self._listeners: dict[str, list[Callable[[], Optional[Listener]]]] = {}

    # -------------------------
    # Reads
    # -------------------------

    def query(
        self,
        collection: str,
        *,
        eq: Optional[Mapping[str, Any]] = None,
        gte: Optional[Mapping[str, Any]] = None,
        lte: Optional[Mapping[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> list[dict]:
        eq, gte, lte = dict(eq or {}), dict(gte or {}), dict(lte or {})
        _check_fields(collection, [*eq, *gte, *lte], readable=True)
        if order_by is not None:
            _check_fields(collection, [order_by], readable=True)

        where: list[str] = []
        params: list[Any] = []
        for op, filters in (("=", eq), (">=", gte), ("<=", lte)):
            for col, val in filters.items():
                where.append(f"{col} {op} ?")
                params.append(val)

        sql = f"SELECT * FROM {collection}"
        if where:
            sql += " WHERE " + " AND ".join(where)
        if order_by is not None:
            sql += f" ORDER BY {order_by} {'DESC' if descending else 'ASC'}, rowid {'DESC' if descending else 'ASC'}"

        try:
            rows = q(self.conn, sql, params)
        except sqlite3.Error as e:
            logger.exception("Query on %s failed", collection)
            raise GatewayError(f"Failed to fetch {collection}.", collection=collection) from e
        return [dict(r) for r in rows]

    def get(self, collection: str, record_id: str) -> Optional[dict]:
        rows = self.query(collection, eq={"id": record_id})
        return rows[0] if rows else None

    # -------------------------
    # Writes
    # -------------------------

    def _prepare_insert(self, collection: str, record: Mapping[str, Any]) -> dict:
        _check_fields(collection, record)
        row = {k: v for k, v in record.items()}
        date_col = DATE_DEFAULTS.get(collection)
        if date_col and not row.get(date_col):
            row[date_col] = iso_today()
        if collection == "sales":
            _with_balance(row)
        now = iso_now()
        row["id"] = uuid.uuid4().hex
        row["created_at"] = now
        row["updated_at"] = now
        return row

    @staticmethod
    def _insert_sql(collection: str, row: Mapping[str, Any]) -> tuple[str, list[Any]]:
        cols = list(row)
        placeholders = ", ".join("?" for _ in cols)
        return f"INSERT INTO {collection} ({', '.join(cols)}) VALUES ({placeholders})", [row[c] for c in cols]

    def insert(self, collection: str, record: Mapping[str, Any]) -> dict:
        row = self._prepare_insert(collection, record)
        sql, params = self._insert_sql(collection, row)
        try:
            x(self.conn, sql, params)
        except sqlite3.Error as e:
            self.conn.rollback()
            logger.exception("Insert into %s failed", collection)
            raise GatewayError(f"Failed to save {collection} record.", collection=collection) from e

        stored = self.get(collection, row["id"])
        logger.info("Inserted %s %s", collection, row["id"])
        self._notify(ChangeEvent(collection, INSERT, row["id"]))
        return stored or row

    def insert_many(self, collection: str, records: Iterable[Mapping[str, Any]]) -> list[dict]:
        """All-or-nothing batch insert; one notification per stored row."""
        rows = [self._prepare_insert(collection, r) for r in records]
        if not rows:
            return []
        try:
            with self.conn:
                for row in rows:
                    sql, params = self._insert_sql(collection, row)
                    self.conn.execute(sql, params)
        except sqlite3.Error as e:
            logger.exception("Batch insert into %s failed (%d rows)", collection, len(rows))
            raise GatewayError(f"Failed to import {collection} records.", collection=collection) from e

        logger.info("Inserted %d %s records", len(rows), collection)
        for row in rows:
            self._notify(ChangeEvent(collection, INSERT, row["id"]))
        return rows

    def update(self, collection: str, record_id: str, changes: Mapping[str, Any]) -> dict:
        _check_fields(collection, changes)
        current = self.get(collection, record_id)
        if current is None:
            raise RecordNotFoundError(collection, record_id)

        patch = dict(changes)
        if collection == "sales" and "balance_amount" not in patch and ({"amount", "given_amount"} & set(patch)):
            merged = {**current, **patch, "balance_amount": None}
            patch["balance_amount"] = _with_balance(merged)["balance_amount"]
        patch["updated_at"] = iso_now()

        assignments = ", ".join(f"{col} = ?" for col in patch)
        try:
            x(self.conn, f"UPDATE {collection} SET {assignments} WHERE id = ?", [*patch.values(), record_id])
        except sqlite3.Error as e:
            self.conn.rollback()
            logger.exception("Update of %s %s failed", collection, record_id)
            raise GatewayError(f"Failed to update {collection} record.", collection=collection) from e

        logger.info("Updated %s %s (%s)", collection, record_id, ", ".join(sorted(changes)))
        self._notify(ChangeEvent(collection, UPDATE, record_id))
        return self.get(collection, record_id) or {**current, **patch}

    def delete(self, collection: str, record_id: str) -> None:
        _columns(collection)
        try:
            n = x(self.conn, f"DELETE FROM {collection} WHERE id = ?", (record_id,))
        except sqlite3.Error as e:
            self.conn.rollback()
            logger.exception("Delete of %s %s failed", collection, record_id)
            raise GatewayError(f"Failed to delete {collection} record.", collection=collection) from e

        if n == 0:
            logger.debug("Delete of %s %s matched no rows", collection, record_id)
            return
        logger.info("Deleted %s %s", collection, record_id)
        self._notify(ChangeEvent(collection, DELETE, record_id))

    def clear(self, collection: str) -> None:
        _columns(collection)
        try:
            x(self.conn, f"DELETE FROM {collection}")
        except sqlite3.Error as e:
            self.conn.rollback()
            logger.exception("Clearing %s failed", collection)
            raise GatewayError(f"Failed to clear {collection}.", collection=collection) from e
        logger.info("Cleared %s", collection)
        self._notify(ChangeEvent(collection, DELETE, "*"))

    # -------------------------
    # Change feed
    # -------------------------

    def subscribe(self, collection: str, listener: Listener) -> Callable[[], None]:
        """
        Register a listener; returns a callable that removes it again.

        Bound methods are held weakly: once their owner (e.g. a view kept in a
        closed browser session) is garbage collected the entry is pruned on the
        next notification. Plain functions are held strongly.
        """
        _columns(collection)
        if inspect.ismethod(listener):
            ref: Callable[[], Optional[Listener]] = weakref.WeakMethod(listener)
        else:
            ref = _StrongRef(listener)
        self._listeners.setdefault(collection, []).append(ref)

        def unsubscribe() -> None:
            refs = self._listeners.get(collection, [])
            if ref in refs:
                refs.remove(ref)

        return unsubscribe

    def listener_count(self, collection: str) -> int:
        """Live subscribers of a collection (dead weak entries are not counted)."""
        return sum(1 for ref in self._listeners.get(collection, []) if ref() is not None)

    def _notify(self, event: ChangeEvent) -> None:
        refs = self._listeners.get(event.collection, [])
        for ref in list(refs):
            listener = ref()
            if listener is None:
                logger.debug("Dropping dead %s listener", event.collection)
                refs.remove(ref)
                continue
            try:
                listener(event)
            except Exception:
                # A broken subscriber must not undo or block a committed write.
                logger.exception("Change listener failed for %s %s", event.collection, event.kind)


@st.cache_resource
def get_gateway(db_path: Path) -> RecordGateway:
    conn = get_conn(db_path)
    ensure_schema(conn)
    return RecordGateway(conn)
