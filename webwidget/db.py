from __future__ import annotations

# webwidget/db.py
from contextlib import contextmanager
from typing import Callable, Iterator

import pymysql
from pymysql.connections import Connection

from .config import DbConfig

Connector = Callable[..., Connection]


@contextmanager
def get_conn(db: DbConfig, connect: Connector | None = None) -> Iterator[Connection]:
    """
    Open a MySQL connection for the injected DbConfig, scoped to the with-block.
    Always closed on exit, never autocommits.
    """
    conn = (connect or pymysql.connect)(**db.connect_kwargs())
    try:
        yield conn
    finally:
        conn.close()


def split_sql_script(text: str) -> list[str]:
    """Split a mysql-client style script into statements, honouring DELIMITER lines."""
    statements: list[str] = []
    delimiter = ";"
    buf: list[str] = []
    for line in text.splitlines():
        stripped = line.strip()
        if not buf and (not stripped or stripped.startswith("--")):
            continue
        if stripped.upper().startswith("DELIMITER "):
            delimiter = stripped.split(None, 1)[1]
            continue
        buf.append(line)
        if stripped.endswith(delimiter):
            stmt = "\n".join(buf).rstrip()
            stmt = stmt[: -len(delimiter)].strip()
            if stmt:
                statements.append(stmt)
            buf = []
    tail = "\n".join(buf).strip()
    if tail:
        statements.append(tail)
    return statements


def run_script(conn: Connection, text: str) -> int:
    count = 0
    with conn.cursor() as cur:
        for stmt in split_sql_script(text):
            cur.execute(stmt)
            count += 1
    conn.commit()
    return count
