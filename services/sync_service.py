"""Contest aggregation: fetch every platform, then upsert every record."""

import asyncio
import logging

import psycopg2

import config
from crawlers.codechef_crawler import CodeChefCrawler
from crawlers.codeforces_crawler import CodeforcesCrawler
from crawlers.leetcode_crawler import LeetCodeCrawler
from database import get_cursor
from repositories import contests_repo

LOGGER = logging.getLogger(__name__)

ALL_CRAWLERS = [
    CodeforcesCrawler,
    CodeChefCrawler,
    LeetCodeCrawler,
]


def build_crawlers():
    return [crawler_class() for crawler_class in ALL_CRAWLERS]


async def _fetch_with_timeout(crawler, timeout_seconds):
    try:
        return await asyncio.wait_for(crawler.fetch(), timeout=timeout_seconds)
    except asyncio.TimeoutError:
        LOGGER.error("[%s] fetch exceeded %ss, treating as empty", crawler.display_name, timeout_seconds)
        return []


async def fetch_all_contests(crawlers=None, timeout_seconds=None):
    """
    Run every crawler concurrently and wait for all of them.

    Returns ``(contests, fetched_per_platform)``. Contests are concatenated in
    crawler order.
    """
    crawlers = build_crawlers() if crawlers is None else crawlers
    timeout_seconds = config.CONTEST_FETCH_TIMEOUT_SECONDS if timeout_seconds is None else timeout_seconds

    results = await asyncio.gather(
        *(_fetch_with_timeout(crawler, timeout_seconds) for crawler in crawlers),
        return_exceptions=True,
    )

    contests = []
    fetched_per_platform = {}
    for crawler, result in zip(crawlers, results):
        if isinstance(result, BaseException):
            LOGGER.error("[%s] crawler raised past its fetch guard: %r", crawler.display_name, result)
            result = []
        fetched_per_platform[crawler.platform] = fetched_per_platform.get(crawler.platform, 0) + len(result)
        contests.extend(result)

    LOGGER.info(
        "Fetched: %s",
        ", ".join(f"{count} {platform}" for platform, count in fetched_per_platform.items()),
    )
    return contests, fetched_per_platform


def upsert_contests(conn, contests):
    """
    Upsert every contest, each inside its own savepoint.

    A failing row is rolled back alone and reported in ``errors``; the rest
    are still written and committed together at the end.
    """
    summary = {"upserted": 0, "inserted": 0, "updated": 0, "errors": []}
    cursor = get_cursor(conn)
    try:
        for contest in contests:
            cursor.execute("SAVEPOINT contest_upsert")
            try:
                inserted = contests_repo.upsert_contest(cursor, contest)
            except psycopg2.Error as e:
                cursor.execute("ROLLBACK TO SAVEPOINT contest_upsert")
                LOGGER.error("Failed to upsert %s contest %r: %s", contest.platform, contest.name, e)
                summary["errors"].append({
                    "name": contest.name,
                    "platform": contest.platform,
                    "error": str(e).strip(),
                })
                continue
            cursor.execute("RELEASE SAVEPOINT contest_upsert")

            summary["upserted"] += 1
            if inserted:
                summary["inserted"] += 1
            else:
                summary["updated"] += 1
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        cursor.close()

    LOGGER.info(
        "Contests synced: %d upserted (%d new, %d refreshed), %d failed",
        summary["upserted"], summary["inserted"], summary["updated"], len(summary["errors"]),
    )
    return summary


async def run_sync(conn, crawlers=None):
    contests, fetched_per_platform = await fetch_all_contests(crawlers)
    result = upsert_contests(conn, contests)
    return {"fetched_per_platform": fetched_per_platform, **result}
