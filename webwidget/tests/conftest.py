import sys
import pytest
import pymysql
from pathlib import Path

# Ensure project root on sys.path
_THIS_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _THIS_DIR.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from webwidget.config import DbConfig  # noqa: E402
from webwidget.services.widget_svc import WidgetDataLayer  # noqa: E402


class FakeWidgetDb:
    """
    In-memory stand-in for the MySQL server behind pymysql.connect().
    Emulates the five Widget procedures, callproc session variables and rowcount.
    """

    def __init__(self):
        self.rows = {}
        self.next_id = 1
        self.calls = []
        self.statements = []
        self.connect_kwargs = []
        self.opened = 0
        self.closed = 0
        self.commits = 0
        self.fail_on = None
        self.refuse_connections = False
        self.reject_inserts = False
        # aid -> extra (name, description, cost, location) rows returned after the real one
        self.extra_rows = {}
        # MySQL reports the last statement of the procedure, which is `SET aid = ...`
        self.insert_rowcount = 0

    def seed(self, name, description=None, cost=0.0, location=None) -> int:
        wid = self.next_id
        self.next_id += 1
        self.rows[wid] = (name, description, cost, location)
        return wid

    def connect(self, **kwargs):
        self.connect_kwargs.append(kwargs)
        if self.refuse_connections:
            raise pymysql.err.OperationalError(2003, "Can't connect to MySQL server on 'db.test'")
        self.opened += 1
        return FakeConnection(self)


class FakeConnection:
    def __init__(self, db: FakeWidgetDb):
        self.db = db
        self.vars = {}

    def cursor(self):
        return FakeCursor(self)

    def commit(self):
        self.db.commits += 1

    def close(self):
        self.db.closed += 1


class FakeCursor:
    def __init__(self, conn: FakeConnection):
        self.conn = conn
        self.db = conn.db
        self._rows = []
        self.rowcount = -1

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False

    def close(self):
        self._rows = []

    def callproc(self, procname, args=()):
        self.db.calls.append((procname, tuple(args)))
        if self.db.fail_on == procname:
            raise pymysql.err.OperationalError(2013, "Lost connection to MySQL server during query")
        for i, a in enumerate(args):
            self.conn.vars[f"@_{procname}_{i}"] = a
        getattr(self, "_" + procname)(*args)
        return args

    def execute(self, query, args=None):
        if query.startswith("SELECT @"):
            names = [n.strip() for n in query[len("SELECT "):].split(",")]
            self._rows = [tuple(self.conn.vars.get(n) for n in names)]
        else:
            self.db.statements.append(query)
            self._rows = []
        self.rowcount = len(self._rows)
        return self.rowcount

    def fetchall(self):
        rows, self._rows = self._rows, []
        return rows

    def fetchone(self):
        return self._rows.pop(0) if self._rows else None

    def _spGetWidgets(self):
        self._rows = [(wid, *vals) for wid, vals in sorted(self.db.rows.items())]
        self.rowcount = len(self._rows)

    def _spGetAWidget(self, aid):
        vals = self.db.rows.get(aid)
        self._rows = [("2026-10-19 12:00:00", aid, aid, *vals)] if vals else []
        self._rows += [("2026-10-19 12:00:00", aid, aid, *extra) for extra in self.db.extra_rows.get(aid, [])]
        self.rowcount = len(self._rows)

    def _spInsertWidget(self, wid, name, description, cost, location, aid):
        if self.db.reject_inserts:
            # LAST_INSERT_ID() on a connection that inserted nothing
            self.conn.vars["@_spInsertWidget_5"] = 0
            self.rowcount = 0
            return
        new_id = self.db.seed(name, description, cost, location)
        self.conn.vars["@_spInsertWidget_5"] = new_id
        self.rowcount = self.db.insert_rowcount

    def _spUpdateWidget(self, wid, name, description, cost, location):
        if wid in self.db.rows:
            self.db.rows[wid] = (name, description, cost, location)
            self.rowcount = 1
        else:
            self.rowcount = 0

    def _spDeleteWidget(self, aid):
        self.rowcount = 1 if self.db.rows.pop(aid, None) is not None else 0


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    for k in ("WEBWIDGET_DB_URL", "WEBWIDGET_ENV", "WEBWIDGET_CONFIG"):
        monkeypatch.delenv(k, raising=False)


@pytest.fixture()
def fake_db():
    return FakeWidgetDb()


@pytest.fixture()
def db_config():
    return DbConfig(host="db.test", user="tester", password="secret", database="WebWidget", connect_timeout=3)


@pytest.fixture()
def data_layer(fake_db, db_config):
    return WidgetDataLayer(db_config, connect=fake_db.connect)


@pytest.fixture()
def client(data_layer):
    from fastapi.testclient import TestClient
    from webwidget.api import app
    from webwidget.routes.widgets import get_data_layer

    app.dependency_overrides[get_data_layer] = lambda: data_layer
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
