# database.py

import os

import psycopg2
import psycopg2.extras
from flask import g

import config

DEFAULT_DB_TIMEZONE = 'UTC'


def _create_connection(application_name='contest_tracker'):
    options = f"-c timezone={os.getenv('DB_TIMEZONE') or DEFAULT_DB_TIMEZONE}"
    database_url = (os.getenv('DATABASE_URL') or '').strip()
    if database_url:
        return psycopg2.connect(database_url, options=options, application_name=application_name)
    return psycopg2.connect(
        dbname=os.getenv('DB_NAME'),
        user=os.getenv('DB_USER'),
        password=os.getenv('DB_PASSWORD'),
        host=os.getenv('DB_HOST'),
        port=os.getenv('DB_PORT', '5432'),
        options=options,
        application_name=application_name,
    )


def create_standalone_connection(application_name='contest_tracker'):
    """Open a connection outside of a Flask app context (scripts, cron jobs)."""
    return _create_connection(application_name=application_name)


def get_db():
    """Return the request-scoped connection, opening it on first use."""
    if 'db' not in g:
        g.db = create_standalone_connection(application_name='contest_tracker_web')
    return g.db


def close_db(exception=None):
    """Close the request-scoped connection at app-context teardown."""
    db = g.pop('db', None)
    if db is not None:
        db.close()


def get_cursor(conn):
    return conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor)


CREATE_CONTESTS_TABLE = """
CREATE TABLE IF NOT EXISTS contests (
    id SERIAL PRIMARY KEY,
    name TEXT NOT NULL,
    platform TEXT NOT NULL,
    url TEXT NOT NULL,
    start_time TIMESTAMPTZ NOT NULL,
    end_time TIMESTAMPTZ NOT NULL,
    duration_seconds INTEGER NOT NULL,
    solution_url TEXT,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    CONSTRAINT contests_name_platform_key UNIQUE (name, platform)
)
"""

CREATE_CONTESTS_START_TIME_INDEX = """
CREATE INDEX IF NOT EXISTS idx_contests_start_time ON contests (start_time DESC)
"""

CREATE_SYNC_CYCLE_REPORTS_TABLE = """
CREATE TABLE IF NOT EXISTS sync_cycle_reports (
    id SERIAL PRIMARY KEY,
    cycle_name TEXT NOT NULL,
    status TEXT NOT NULL,
    report_data JSONB NOT NULL DEFAULT '{}'::jsonb,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
)
"""


def setup_database(conn):
    cursor = get_cursor(conn)
    try:
        cursor.execute(CREATE_CONTESTS_TABLE)
        cursor.execute(CREATE_CONTESTS_START_TIME_INDEX)
        cursor.execute(CREATE_SYNC_CYCLE_REPORTS_TABLE)
        conn.commit()
    except psycopg2.Error:
        conn.rollback()
        raise
    finally:
        cursor.close()


def setup_database_standalone():
    conn = create_standalone_connection(application_name='contest_tracker_init_db')
    try:
        setup_database(conn)
    finally:
        conn.close()


def try_acquire_cycle_lock(conn, lock_key=None):
    """
    Take the session-level advisory lock that guards a sync cycle.

    Returns False immediately when another session already holds it.
    """
    key = config.SYNC_CYCLE_LOCK_KEY if lock_key is None else lock_key
    cursor = conn.cursor()
    try:
        cursor.execute("SELECT pg_try_advisory_lock(%s)", (key,))
        row = cursor.fetchone()
        conn.commit()
    finally:
        cursor.close()
    return bool(row and row[0])


def release_cycle_lock(conn, lock_key=None):
    key = config.SYNC_CYCLE_LOCK_KEY if lock_key is None else lock_key
    cursor = conn.cursor()
    try:
        cursor.execute("SELECT pg_advisory_unlock(%s)", (key,))
        row = cursor.fetchone()
        conn.commit()
    finally:
        cursor.close()
    return bool(row and row[0])
