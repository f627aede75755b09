from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

import mysql.connector

from ..core.enums import Role
from .connection import DBConfig

logger = logging.getLogger(__name__)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema/seed files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _connect(target: DBConfig, *, with_database: bool = True):
    kwargs = dict(
        host=target.host,
        port=target.port,
        user=target.user,
        password=target.password,
        use_pure=True,
    )
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _run_sql_file(db_config: dict, path: Path) -> None:
    target = DBConfig.from_dict(db_config)
    sql = _strip_create_db_and_use(path.read_text(encoding="utf-8"))

    conn = _connect(target)
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    _run_sql_file(db_config, Path(schema_path))
    logger.info("Applied schema %s", schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    _run_sql_file(db_config, Path(seed_path))
    logger.info("Applied seed %s", seed_path)


def ensure_demo_hierarchy(db_config: dict) -> None:
    """Create one admin and a Manager -> BDM -> BDE branch if missing."""

    target = DBConfig.from_dict(db_config)
    conn = _connect(target)
    try:
        cur = conn.cursor(dictionary=True)

        def upsert(code: str, full_name: str, role: Role, manager_id, bdm_id) -> int:
            cur.execute("SELECT employee_id FROM employees WHERE employee_code=%s", (code,))
            existing = cur.fetchone()
            if existing:
                cur.execute(
                    "UPDATE employees SET full_name=%s, role=%s, manager_id=%s, bdm_id=%s WHERE employee_code=%s",
                    (full_name, role.value, manager_id, bdm_id, code),
                )
                return int(existing["employee_id"])

            cur.execute(
                """
                INSERT INTO employees (employee_code, full_name, mobile, job_location, role, manager_id, bdm_id)
                VALUES (%s, %s, %s, %s, %s, %s, %s)
                """,
                (code, full_name, "9000000000", "Head Office", role.value, manager_id, bdm_id),
            )
            return int(cur.lastrowid)

        upsert("AD00001", "Admin Demo", Role.ADMIN, None, None)
        manager_id = upsert("M00001", "Manager Demo", Role.MANAGER, None, None)
        bdm_id = upsert("BDM00001", "BDM Demo", Role.BDM, manager_id, None)
        upsert("BDE00001", "BDE Demo", Role.BDE, manager_id, bdm_id)

        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    target = DBConfig.from_dict(db_config)
    conn = _connect(target)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
