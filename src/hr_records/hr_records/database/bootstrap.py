from __future__ import annotations

import logging
from dataclasses import dataclass

import mysql.connector
from werkzeug.security import generate_password_hash

from ..common.datetime_utils import iso, now_local
from ..common.validators import normalize_phone
from ..core.constants import ADMINS
from .document_store import DocumentStore

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS documents (
    collection VARCHAR(64) NOT NULL,
    doc_id VARCHAR(64) NOT NULL,
    body JSON NOT NULL,
    PRIMARY KEY (collection, doc_id)
) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_unicode_ci
"""


@dataclass(frozen=True)
class DBTarget:
    host: str
    port: int
    user: str
    password: str
    database: str


def _as_target(db_config: dict) -> DBTarget:
    return DBTarget(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        database=str(db_config.get("database", "hr_records")),
    )


def ensure_database_exists(db_config: dict) -> None:
    target = _as_target(db_config)
    conn = mysql.connector.connect(
        host=target.host,
        port=target.port,
        user=target.user,
        password=target.password,
        use_pure=True,
    )
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict) -> None:
    """Create the documents table (idempotent)."""
    target = _as_target(db_config)
    ensure_database_exists(db_config)

    conn = mysql.connector.connect(
        host=target.host,
        port=target.port,
        user=target.user,
        password=target.password,
        database=target.database,
        use_pure=True,
    )
    try:
        cur = conn.cursor()
        cur.execute(SCHEMA_SQL)
        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    target = _as_target(db_config)
    conn = mysql.connector.connect(
        host=target.host,
        port=target.port,
        user=target.user,
        password=target.password,
        database=target.database,
        use_pure=True,
    )
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()


def ensure_admin(store: DocumentStore, *, name: str, mobile: str, password: str, email: str = "") -> str:
    """Create (or re-activate) an administrator account. Returns its document id."""
    mobile = normalize_phone(mobile)
    existing = store.find(ADMINS, "mobile", mobile)
    password_hash = generate_password_hash(password)
    if existing:
        admin_id = existing[0]["id"]
        store.update(ADMINS, admin_id, {"name": name, "passwordHash": password_hash, "active": True})
        logger.info("Administrator %s refreshed", admin_id)
        return admin_id

    admin_id = store.add(
        ADMINS,
        {
            "name": name,
            "email": email,
            "mobile": mobile,
            "passwordHash": password_hash,
            "active": True,
            "createdAt": iso(now_local()),
        },
    )
    logger.info("Administrator %s created", admin_id)
    return admin_id
