#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
WebWidget management commands (MySQL stored procedures + FastAPI)

Commands:
  init-db             Create the Widget table and stored procedures from schema.sql
  serve               Run the HTTP API with uvicorn
  list                Print every widget
  get ID              Print one widget (exit status 1 if it does not exist)

Notes:
- The database is chosen by WEBWIDGET_DB_URL, else config.yaml `databases.<env>`.
- init-db is idempotent: procedures are dropped and recreated, the table is kept.
"""

import argparse
import os
import sys

from webwidget.config import load_db_config
from webwidget.db import get_conn, run_script
from webwidget.logs import uvicorn_log_config
from webwidget.services.widget_svc import WidgetDataLayer

_BASE = os.path.dirname(os.path.abspath(__file__))


def _print_widget(w):
    print("\t".join(str(v if v is not None else "") for v in (w.id, w.name, w.description, w.cost, w.location)))


def cmd_init_db(args):
    with open(args.schema, "r", encoding="utf-8") as f:
        script = f.read()
    db = load_db_config(args.config)
    with get_conn(db) as conn:
        n = run_script(conn, script)
    print(f"Schema applied to {db.describe()} ({n} statements).")


def cmd_serve(args):
    import uvicorn

    uvicorn.run(
        "webwidget.api:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_config=uvicorn_log_config(args.log_level),
    )


def cmd_list(args):
    dl = WidgetDataLayer(load_db_config(args.config))
    for w in dl.list_widgets():
        _print_widget(w)


def cmd_get(args):
    dl = WidgetDataLayer(load_db_config(args.config))
    w = dl.get_widget_by_id(args.id)
    if w is None:
        print(f"Widget {args.id} not found.", file=sys.stderr)
        return 1
    _print_widget(w)
    return 0


# ---------------- Entry ----------------

def main(argv=None):
    parser = argparse.ArgumentParser(description="WebWidget (MySQL + FastAPI)")
    parser.add_argument("--config", default=None, help="path to config.yaml")
    sub = parser.add_subparsers()

    p_init = sub.add_parser("init-db", help="create table and stored procedures")
    p_init.add_argument("--schema", default=os.path.join(_BASE, "schema.sql"))
    p_init.set_defaults(func=cmd_init_db)

    p_serve = sub.add_parser("serve", help="run the HTTP API")
    p_serve.add_argument("--host", default="127.0.0.1")
    p_serve.add_argument("--port", type=int, default=8000)
    p_serve.add_argument("--reload", action="store_true")
    p_serve.add_argument("--log-level", default="INFO")
    p_serve.set_defaults(func=cmd_serve)

    p_list = sub.add_parser("list", help="print all widgets")
    p_list.set_defaults(func=cmd_list)

    p_get = sub.add_parser("get", help="print one widget")
    p_get.add_argument("id", type=int)
    p_get.set_defaults(func=cmd_get)

    args = parser.parse_args(argv)
    if hasattr(args, "func"):
        return args.func(args) or 0
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
