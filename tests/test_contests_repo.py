import re
from datetime import datetime, timezone

import repositories.contests_repo as repo
from services.contest_record import ContestRecord


class FakeCursor:
    def __init__(self, fetchone_result=None):
        self.fetchone_result = fetchone_result
        self.executed = []
        self.closed = False

    def execute(self, query, params=None):
        self.executed.append((" ".join(query.split()), params))

    def fetchone(self):
        return self.fetchone_result

    def close(self):
        self.closed = True


class FakeConn:
    def __init__(self):
        self.commits = 0
        self.rollbacks = 0

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1


def _contest():
    start = datetime(2024, 3, 1, 14, 35, tzinfo=timezone.utc)
    return ContestRecord(
        name="Codeforces Round 930 (Div. 3)",
        platform="Codeforces",
        url="https://codeforces.com/contest/1937",
        start_time=start,
        end_time=start,
        duration_seconds=8100,
        solution_url="https://youtu.be/should-not-be-written",
    )


def _updated_columns(query):
    set_clause = re.search(r"DO UPDATE SET (.*) RETURNING", query).group(1)
    return [assignment.split("=")[0].strip() for assignment in set_clause.split(",")]


def test_upsert_refreshes_only_fetched_fields():
    cursor = FakeCursor(fetchone_result={"inserted": False})

    inserted = repo.upsert_contest(cursor, _contest())

    assert inserted is False
    query, params = cursor.executed[0]
    assert "ON CONFLICT (name, platform)" in query
    assert _updated_columns(query) == ["url", "start_time", "end_time", "duration_seconds", "updated_at"]
    assert "solution_url" not in query
    assert "https://youtu.be/should-not-be-written" not in params


def test_upsert_reports_new_rows():
    cursor = FakeCursor(fetchone_result={"inserted": True})

    assert repo.upsert_contest(cursor, _contest()) is True


def test_matched_solution_only_fills_empty_rows(monkeypatch):
    cursor = FakeCursor(fetchone_result=None)
    conn = FakeConn()
    monkeypatch.setattr(repo, "get_cursor", lambda _conn: cursor)

    updated = repo.set_solution_url_if_missing(conn, 7, "https://youtu.be/auto")

    assert updated is False
    query, params = cursor.executed[0]
    assert "WHERE id = %s AND solution_url IS NULL" in query
    assert params == ("https://youtu.be/auto", 7)
    assert conn.commits == 1
    assert cursor.closed is True


def test_manual_solution_overwrites_unconditionally(monkeypatch):
    row = {
        "id": 7,
        "name": "Starters 150",
        "platform": "CodeChef",
        "url": "https://www.codechef.com/START150",
        "start_time": datetime(2024, 8, 28, 14, 30, tzinfo=timezone.utc),
        "end_time": datetime(2024, 8, 28, 16, 30, tzinfo=timezone.utc),
        "duration_seconds": 7200,
        "solution_url": "https://youtu.be/manual",
    }
    cursor = FakeCursor(fetchone_result=row)
    monkeypatch.setattr(repo, "get_cursor", lambda _conn: cursor)

    contest = repo.set_solution_url(FakeConn(), 7, "https://youtu.be/manual")

    query, params = cursor.executed[0]
    assert "WHERE id = %s RETURNING" in query
    assert "IS NULL" not in query
    assert params == ("https://youtu.be/manual", 7)
    assert contest.solution_url == "https://youtu.be/manual"
