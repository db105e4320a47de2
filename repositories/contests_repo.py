"""Repository for contest persistence."""

from database import get_cursor
from services.contest_record import ContestRecord

CONTEST_COLUMNS = "id, name, platform, url, start_time, end_time, duration_seconds, solution_url"


def find_all(conn):
    cursor = get_cursor(conn)
    try:
        cursor.execute(
            f"""
            SELECT {CONTEST_COLUMNS}
            FROM contests
            ORDER BY start_time DESC, id DESC
            """
        )
        return [ContestRecord.from_row(row) for row in cursor.fetchall()]
    finally:
        cursor.close()


def find_by_id(conn, contest_id):
    cursor = get_cursor(conn)
    try:
        cursor.execute(
            f"SELECT {CONTEST_COLUMNS} FROM contests WHERE id = %s",
            (contest_id,),
        )
        row = cursor.fetchone()
        return None if row is None else ContestRecord.from_row(row)
    finally:
        cursor.close()


def upsert_contest(cursor, contest):
    """
    Insert or refresh one contest keyed by (name, platform).

    Only fetched fields are written; ``solution_url`` is never part of the
    update so a decided solution survives every sync.

    Returns True if a new row was inserted, False if an existing row was updated.
    """
    cursor.execute(
        """
        INSERT INTO contests (name, platform, url, start_time, end_time, duration_seconds)
        VALUES (%s, %s, %s, %s, %s, %s)
        ON CONFLICT (name, platform) DO UPDATE SET
            url = EXCLUDED.url,
            start_time = EXCLUDED.start_time,
            end_time = EXCLUDED.end_time,
            duration_seconds = EXCLUDED.duration_seconds,
            updated_at = NOW()
        RETURNING (xmax = 0) AS inserted
        """,
        (
            contest.name,
            contest.platform,
            contest.url,
            contest.start_time,
            contest.end_time,
            contest.duration_seconds,
        ),
    )
    row = cursor.fetchone()
    return bool(row and row["inserted"])


def set_solution_url(conn, contest_id, solution_url):
    """Manual override: set the solution unconditionally. Returns the updated record or None."""
    cursor = get_cursor(conn)
    try:
        cursor.execute(
            f"""
            UPDATE contests
            SET solution_url = %s, updated_at = NOW()
            WHERE id = %s
            RETURNING {CONTEST_COLUMNS}
            """,
            (solution_url, contest_id),
        )
        row = cursor.fetchone()
        conn.commit()
        return None if row is None else ContestRecord.from_row(row)
    except Exception:
        conn.rollback()
        raise
    finally:
        cursor.close()


def set_solution_url_if_missing(conn, contest_id, solution_url):
    """
    Store an automatically matched solution.

    Rows that gained a solution in the meantime (e.g. a manual submission) are
    left alone. Returns True if the row was updated.
    """
    cursor = get_cursor(conn)
    try:
        cursor.execute(
            """
            UPDATE contests
            SET solution_url = %s, updated_at = NOW()
            WHERE id = %s AND solution_url IS NULL
            RETURNING id
            """,
            (solution_url, contest_id),
        )
        updated = cursor.fetchone() is not None
        conn.commit()
        return updated
    except Exception:
        conn.rollback()
        raise
    finally:
        cursor.close()


def count_contests(conn):
    cursor = get_cursor(conn)
    try:
        cursor.execute(
            """
            SELECT platform, COUNT(*) AS total, COUNT(solution_url) AS with_solution
            FROM contests
            GROUP BY platform
            ORDER BY platform
            """
        )
        return {
            row["platform"]: {"total": row["total"], "with_solution": row["with_solution"]}
            for row in cursor.fetchall()
        }
    finally:
        cursor.close()
