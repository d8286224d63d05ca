from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import ConcurrencyError, StoreError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

# Errors that mean "another writer got there first"; the caller may retry the whole operation.
_CONFLICT_ERRNOS = {
    errorcode.ER_LOCK_DEADLOCK,
    errorcode.ER_LOCK_WAIT_TIMEOUT,
    errorcode.ER_DUP_ENTRY,
}


def translate_error(exc: mysql.connector.Error) -> Exception:
    if exc.errno in _CONFLICT_ERRNOS:
        return ConcurrencyError("The record was modified concurrently, please retry")
    return StoreError(f"Document store unavailable: {exc.msg or exc}")


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """One connection, one transaction: commit on success, rollback on any error.

    mysql-connector errors are translated into StoreError / ConcurrencyError.
    """
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as exc:
        logger.error("Could not connect to document store: %s", exc)
        raise StoreError(f"Document store unavailable: {exc.msg or exc}") from exc

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as exc:
        conn.rollback()
        logger.warning("Store operation failed (errno=%s): %s", exc.errno, exc)
        raise translate_error(exc) from exc
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])
