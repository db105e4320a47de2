"""Repository for sync cycle report persistence."""

from psycopg2.extras import Json

from database import get_cursor


def insert_report(conn, *, cycle_name, status, report_data):
    cursor = get_cursor(conn)
    try:
        cursor.execute(
            """
            INSERT INTO sync_cycle_reports (cycle_name, status, report_data)
            VALUES (%s, %s, %s)
            RETURNING id
            """,
            (cycle_name, status, Json(report_data)),
        )
        row = cursor.fetchone()
        conn.commit()
        return row["id"] if row else None
    finally:
        cursor.close()


def get_latest_report(conn):
    cursor = get_cursor(conn)
    try:
        cursor.execute(
            """
            SELECT id, cycle_name, status, report_data, created_at
            FROM sync_cycle_reports
            ORDER BY created_at DESC, id DESC
            LIMIT 1
            """
        )
        row = cursor.fetchone()
        if row is None:
            return None
        return {
            "id": row["id"],
            "cycle_name": row["cycle_name"],
            "status": row["status"],
            "report_data": row["report_data"],
            "created_at": row["created_at"],
        }
    finally:
        cursor.close()
