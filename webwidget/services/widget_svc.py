"""
Widget data layer: one stored-procedure call per operation, each on its own connection.

Absence is a normal result (None / 0 rows). Driver failures surface as DataAccessError,
bad arguments as ValueError; neither is retried or swallowed here.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

import pymysql
from pymysql.connections import Connection

from ..config import DbConfig
from ..db import Connector, get_conn
from ..domain.widget import Widget
from ..errors import DataAccessError
from ..repository import widget_repo

logger = logging.getLogger(__name__)


class WidgetDataLayer:
    """CRUD over the Widget stored procedures."""

    def __init__(self, db: DbConfig, connect: Connector | None = None):
        self.db = db
        self._connect = connect

    @contextmanager
    def _session(self, procedure: str) -> Iterator[Connection]:
        try:
            with get_conn(self.db, self._connect) as conn:
                yield conn
        except pymysql.MySQLError as e:
            raise DataAccessError(procedure, e) from e

    def list_widgets(self) -> list[Widget]:
        with self._session(widget_repo.SP_GET_WIDGETS) as conn:
            widgets = widget_repo.get_widgets(conn)
        logger.debug("listed %d widgets from %s", len(widgets), self.db.describe())
        return widgets

    def get_widget_by_id(self, widget_id: int) -> Widget | None:
        with self._session(widget_repo.SP_GET_A_WIDGET) as conn:
            return widget_repo.get_widget(conn, widget_id)

    def insert_widget(self, widget: Widget | None) -> Widget | None:
        """
        Insert and return a fresh Widget carrying the server-assigned id.

        Returns None when nothing was inserted. The procedure ends with the OUT
        assignment, so MySQL may report 0 affected rows for a successful call;
        the OUT id is authoritative. LAST_INSERT_ID() is 0 when no row was
        inserted on the connection, and AUTO_INCREMENT never issues 0.
        """
        if widget is None:
            raise ValueError("Widget can not be null.")
        with self._session(widget_repo.SP_INSERT_WIDGET) as conn:
            count, new_id = widget_repo.insert_widget(conn, widget)
            conn.commit()
        if not new_id:
            if count > 0:
                logger.warning("%s reported %d rows but no id", widget_repo.SP_INSERT_WIDGET, count)
            return None
        return widget.with_id(new_id)

    def update_widget(self, widget_id: int, widget: Widget | None) -> int:
        if widget is None:
            raise ValueError("Widget can not be null.")
        with self._session(widget_repo.SP_UPDATE_WIDGET) as conn:
            count = widget_repo.update_widget(conn, widget_id, widget)
            conn.commit()
        return count

    def delete_widget(self, widget_id: int) -> int:
        with self._session(widget_repo.SP_DELETE_WIDGET) as conn:
            count = widget_repo.delete_widget(conn, widget_id)
            conn.commit()
        return count
