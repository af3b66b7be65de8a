import os
from datetime import date

import pytest

from models.status import StatusPolicy

REFERENCE_DAY = date(2024, 6, 1)


def sql_text(query) -> str:
    """Render a str or psycopg2.sql.Composed statement as plain text."""
    if isinstance(query, str):
        return query
    return query.as_string(None)


class FakeCursor:
    """Stands in for a psycopg2 cursor; replays queued results in order."""

    def __init__(self, conn):
        self.conn = conn
        self.rowcount = -1
        self._rows = []

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, query, params=None):
        self.conn.executed.append((sql_text(query), params))
        if self.conn.errors:
            error = self.conn.errors.pop(0)
            if error is not None:
                raise error
        result = self.conn.results.pop(0) if self.conn.results else []
        if isinstance(result, int):
            self.rowcount = result
            self._rows = []
        else:
            self.rowcount = len(result)
            self._rows = list(result)

    def fetchall(self):
        return self._rows

    def fetchone(self):
        return self._rows[0] if self._rows else None


class FakeConnection:
    """
    Records statements and transaction calls.

    results: one entry per execute(); a list of dict rows, or an int rowcount.
    errors: one entry per execute(); None or an exception to raise.
    commit_error: raised by commit() instead of committing.
    """

    def __init__(self, results=None, errors=None, commit_error=None):
        self.results = list(results or [])
        self.errors = list(errors or [])
        self.commit_error = commit_error
        self.executed = []
        self.commits = 0
        self.rollbacks = 0

    def cursor(self, cursor_factory=None):
        return FakeCursor(self)

    def commit(self):
        if self.commit_error is not None:
            raise self.commit_error
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1


def activist_row(id, name, first_event=None, last_event=None, total_events=0, **overrides):
    row = {
        "id": id,
        "name": name,
        "email": f"{name.lower()}@example.org",
        "chapter": "SF Bay Area",
        "phone": "555-0100",
        "location": None,
        "facebook": "",
        "activist_level": "activist",
        "exclude_from_leaderboard": 0,
        "core_staff": 0,
        "global_team_member": 0,
        "liberation_pledge": 0,
        "first_event": first_event,
        "last_event": last_event,
        "total_events": total_events,
    }
    row.update(overrides)
    return row


@pytest.fixture
def policy():
    return StatusPolicy(today=lambda: REFERENCE_DAY)


@pytest.fixture
def make_conn():
    return FakeConnection


# ── PostgreSQL fixtures ───────────────────────────────────

SCHEMA_SQL = """
CREATE TABLE activists (
    id                        SERIAL PRIMARY KEY,
    name                      VARCHAR(200) NOT NULL,
    email                     VARCHAR(200) NOT NULL DEFAULT '',
    chapter                   VARCHAR(100) NOT NULL DEFAULT '',
    phone                     VARCHAR(100) NOT NULL DEFAULT '',
    location                  TEXT,
    facebook                  VARCHAR(200) NOT NULL DEFAULT '',
    activist_level            VARCHAR(40) NOT NULL DEFAULT 'activist',
    exclude_from_leaderboard  SMALLINT NOT NULL DEFAULT 0,
    core_staff                SMALLINT NOT NULL DEFAULT 0,
    global_team_member        SMALLINT NOT NULL DEFAULT 0,
    liberation_pledge         SMALLINT NOT NULL DEFAULT 0
);

CREATE TABLE events (
    id    SERIAL PRIMARY KEY,
    name  VARCHAR(200) NOT NULL DEFAULT '',
    date  DATE NOT NULL
);

CREATE TABLE event_attendance (
    activist_id  INT NOT NULL REFERENCES activists(id),
    event_id     INT NOT NULL REFERENCES events(id)
);
"""


@pytest.fixture
def pg_conn():
    """A connection whose search_path points at a throwaway schema."""
    dsn = os.getenv("TEST_DATABASE_URL")
    if not dsn:
        pytest.skip("TEST_DATABASE_URL is not set")
    psycopg2 = pytest.importorskip("psycopg2")

    conn = psycopg2.connect(dsn)
    schema = f"activist_test_{os.getpid()}"
    with conn.cursor() as cur:
        cur.execute(f"DROP SCHEMA IF EXISTS {schema} CASCADE")
        cur.execute(f"CREATE SCHEMA {schema}")
        cur.execute(f"SET search_path TO {schema}")
        cur.execute(SCHEMA_SQL)
    conn.commit()
    try:
        yield conn
    finally:
        conn.rollback()
        with conn.cursor() as cur:
            cur.execute(f"DROP SCHEMA IF EXISTS {schema} CASCADE")
        conn.commit()
        conn.close()
