# run_sync_cycle.py
import argparse
import asyncio
import logging
import sys
import time
import traceback

from dotenv import load_dotenv

load_dotenv()

import config
from database import create_standalone_connection, release_cycle_lock, try_acquire_cycle_lock
from repositories import contests_repo, sync_reports_repo
from services.solution_corpus import build_corpus
from services.solution_matcher import match_all
from services.sync_service import run_sync

LOGGER = logging.getLogger("run_sync_cycle")

CYCLE_FULL = "sync cycle"
CYCLE_SOLUTIONS_ONLY = "solutions cycle"

STATUS_SUCCESS = "success"
STATUS_FAILED = "failed"
STATUS_SKIPPED = "skipped"


async def refresh_solutions(conn, playlist_ids=None):
    """Rebuild the corpus and match every contest that still has no solution."""
    corpus = await build_corpus(config.SOLUTION_PLAYLIST_IDS if playlist_ids is None else playlist_ids)
    contests = contests_repo.find_all(conn)

    def persist(contest, url):
        stored = contests_repo.set_solution_url_if_missing(conn, contest.id, url)
        if not stored:
            LOGGER.info("Contest %s already had a solution when saving; left unchanged", contest.id)
        return stored

    matching = match_all(contests, corpus, persist)
    return {"corpus": corpus.summary(), "matching": matching}


async def run_sync_cycle(conn, solutions_only=False):
    """One cycle: fetch and upsert contests, then build the corpus and match."""
    report = {}
    if not solutions_only:
        report["sync"] = await run_sync(conn)
    report.update(await refresh_solutions(conn))
    return report


def save_report(cycle_name, report, connect=create_standalone_connection):
    report_conn = None
    try:
        report_conn = connect(application_name="contest_tracker_report")
        sync_reports_repo.insert_report(
            report_conn,
            cycle_name=cycle_name,
            status=report["status"],
            report_data=report,
        )
        LOGGER.info("[%s] report saved", cycle_name)
    except Exception as e:
        LOGGER.error("[%s] failed to save report: %s", cycle_name, e)
    finally:
        if report_conn:
            report_conn.close()


async def run_guarded_cycle(solutions_only=False, connect=create_standalone_connection):
    """
    Run a cycle only if no other cycle holds the run lock.

    Every outcome, including a skipped or failed cycle, ends up in a report row.
    """
    cycle_name = CYCLE_SOLUTIONS_ONLY if solutions_only else CYCLE_FULL
    report = {"status": STATUS_SUCCESS}
    start_time = time.time()

    conn = None
    locked = False
    try:
        conn = connect(application_name="contest_tracker_sync")
        locked = try_acquire_cycle_lock(conn)
        if not locked:
            LOGGER.warning("[%s] another cycle is still running; skipping this run", cycle_name)
            report["status"] = STATUS_SKIPPED
            report["skip_reason"] = "cycle_already_running"
        else:
            report.update(await run_sync_cycle(conn, solutions_only=solutions_only))
    except Exception as e:
        LOGGER.error("[%s] cycle failed: %s", cycle_name, e)
        report["status"] = STATUS_FAILED
        report["error_message"] = traceback.format_exc()
    finally:
        if conn:
            if locked:
                try:
                    conn.rollback()
                    release_cycle_lock(conn)
                except Exception as unlock_e:
                    LOGGER.error("[%s] failed to release run lock: %s", cycle_name, unlock_e)
            conn.close()

    report["cycle_name"] = cycle_name
    report["duration"] = time.time() - start_time
    save_report(cycle_name, report, connect=connect)
    return report


def build_arg_parser():
    parser = argparse.ArgumentParser(description="Sync contests and link solution videos.")
    parser.add_argument(
        "--solutions-only",
        action="store_true",
        help="skip contest fetching; only rebuild the solution corpus and match",
    )
    return parser


def main(argv=None):
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    args = build_arg_parser().parse_args(argv)

    LOGGER.info("Starting %s", CYCLE_SOLUTIONS_ONLY if args.solutions_only else CYCLE_FULL)
    report = asyncio.run(run_guarded_cycle(solutions_only=args.solutions_only))
    LOGGER.info("Finished with status=%s in %.2fs", report["status"], report["duration"])
    return 1 if report["status"] == STATUS_FAILED else 0


if __name__ == '__main__':
    sys.exit(main())
