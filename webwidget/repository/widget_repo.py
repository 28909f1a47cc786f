from __future__ import annotations

from typing import Sequence

from pymysql.connections import Connection

from ..domain.widget import Widget

SP_GET_WIDGETS = "spGetWidgets"
SP_GET_A_WIDGET = "spGetAWidget"
SP_INSERT_WIDGET = "spInsertWidget"
SP_UPDATE_WIDGET = "spUpdateWidget"
SP_DELETE_WIDGET = "spDeleteWidget"

# First widget column in each procedure's result set.
# spGetAWidget returns two leading columns before (id, name, description, cost, location).
GET_WIDGETS_OFFSET = 0
GET_A_WIDGET_OFFSET = 2


def row_to_widget(row: Sequence, offset: int = 0) -> Widget:
    wid, name, description, cost, location = row[offset:offset + 5]
    return Widget(
        id=int(wid),
        name=name,
        description=description,
        cost=float(cost) if cost is not None else 0.0,
        location=location,
    )


def get_widgets(conn: Connection) -> list[Widget]:
    with conn.cursor() as cur:
        cur.callproc(SP_GET_WIDGETS)
        rows = cur.fetchall()
    return [row_to_widget(r, GET_WIDGETS_OFFSET) for r in rows]


def get_widget(conn: Connection, widget_id: int) -> Widget | None:
    with conn.cursor() as cur:
        cur.callproc(SP_GET_A_WIDGET, (int(widget_id),))
        row = cur.fetchone()
    return row_to_widget(row, GET_A_WIDGET_OFFSET) if row else None


def insert_widget(conn: Connection, widget: Widget) -> tuple[int, int | None]:
    """Call spInsertWidget. Returns (affected_rows, id from the OUT parameter `aid`)."""
    args = (widget.id or 0, widget.name, widget.description, widget.cost, widget.location, None)
    with conn.cursor() as cur:
        cur.callproc(SP_INSERT_WIDGET, args)
        count = cur.rowcount
        # pymysql binds callproc args to session variables @_<proc>_<n>
        cur.execute(f"SELECT @_{SP_INSERT_WIDGET}_{len(args) - 1}")
        row = cur.fetchone()
    new_id = row[0] if row else None
    return max(int(count or 0), 0), (int(new_id) if new_id is not None else None)


def update_widget(conn: Connection, widget_id: int, widget: Widget) -> int:
    with conn.cursor() as cur:
        cur.callproc(
            SP_UPDATE_WIDGET,
            (int(widget_id), widget.name, widget.description, widget.cost, widget.location),
        )
        return max(int(cur.rowcount or 0), 0)


def delete_widget(conn: Connection, widget_id: int) -> int:
    with conn.cursor() as cur:
        cur.callproc(SP_DELETE_WIDGET, (int(widget_id),))
        return max(int(cur.rowcount or 0), 0)
