import asyncio
from datetime import datetime, timezone

import pytest

from services.contest_record import ContestRecord
from services.solution_corpus import SolutionCorpus, build_corpus
from services.solution_matcher import (
    STRATEGY_DIRECT,
    STRATEGY_FUZZY,
    STRATEGY_LEETCODE_NUMBER,
    STRATEGY_STRUCTURED,
    find_solution,
    match_all,
    pick_solution,
)
from services.youtube_playlist import PlaylistVideo

START = datetime(2024, 3, 1, 14, 35, tzinfo=timezone.utc)


def _contest(name, platform, solution_url=None, contest_id=1):
    return ContestRecord(
        id=contest_id,
        name=name,
        platform=platform,
        url=f"https://example.com/{contest_id}",
        start_time=START,
        end_time=START,
        duration_seconds=0,
        solution_url=solution_url,
    )


def _corpus(platform, *titles):
    corpus = SolutionCorpus()
    for index, title in enumerate(titles):
        corpus.add_video(platform, PlaylistVideo(title=title, video_id=f"v{index}"))
    return corpus


def _url(index):
    return f"https://www.youtube.com/watch?v=v{index}"


def test_direct_key_wins_first():
    corpus = _corpus("LeetCode", "Weekly Contest 439")

    match = find_solution(_contest("Weekly Contest 439", "LeetCode"), corpus)

    assert match.strategy == STRATEGY_DIRECT
    assert match.url == _url(0)


def test_structured_match_requires_round_and_division():
    corpus = _corpus("Codeforces", "Codeforces Round #930 (Div. 3) Editorial")

    match = find_solution(_contest("Codeforces Round 930 (Div. 3)", "Codeforces"), corpus)

    assert match.strategy == STRATEGY_STRUCTURED
    assert match.url == _url(0)


def test_structured_match_prefers_matching_division_over_earlier_video():
    corpus = _corpus(
        "Codeforces",
        "Codeforces Round #930 (Div. 1) Editorial",
        "Codeforces Round #930 (Div. 3) Editorial",
    )

    assert pick_solution(_contest("Codeforces Round 930 (Div. 3)", "Codeforces"), corpus) == _url(1)


def test_round_number_is_matched_as_a_whole_number():
    corpus = _corpus("Codeforces", "Codeforces Round #930 (Div. 3)")

    assert pick_solution(_contest("Codeforces Round 93 (Div. 3)", "Codeforces"), corpus) is None


def test_educational_round_matches_educational_video_not_plain_round():
    corpus = _corpus(
        "Codeforces",
        "Codeforces Round #170 (Div. 2) Solutions",
        "Educational Round 170 | All problems",
    )

    match = find_solution(
        _contest("Educational Codeforces Round 170 (Rated for Div. 2)", "Codeforces"), corpus
    )

    assert match.strategy == STRATEGY_STRUCTURED
    assert match.url == _url(1)


@pytest.mark.parametrize(
    "contest_name, video_title",
    [
        ("Starters 150 (Rated till 5 stars)", "Codechef Starters 150 Solutions | Video Editorial"),
        ("January Cook-Off 2021 Division 2", "CodeChef January Cookoff 2021 Solutions"),
        ("February Long Challenge 2023", "February Long Challenge 2023 Div 2 | Solutions"),
    ],
)
def test_codechef_structured_matches(contest_name, video_title):
    corpus = _corpus("CodeChef", video_title)

    match = find_solution(_contest(contest_name, "CodeChef"), corpus)

    assert match.strategy == STRATEGY_STRUCTURED
    assert match.url == _url(0)


def test_biweekly_contest_does_not_take_weekly_video():
    corpus = _corpus("LeetCode", "Weekly Contest 150", "Biweekly Contest 150")

    assert pick_solution(_contest("Biweekly Contest 150", "LeetCode"), corpus) == _url(1)
    assert pick_solution(_contest("Weekly Contest 150", "LeetCode"), corpus) == _url(0)


def test_fuzzy_match_when_no_pattern_applies():
    corpus = _corpus("CodeChef", "Snackdown 2021 Final | solutions")

    match = find_solution(_contest("CodeChef Snackdown 2021 Final", "CodeChef"), corpus)

    assert match.strategy == STRATEGY_FUZZY
    assert match.url == _url(0)


def test_leetcode_numeric_fallback():
    corpus = _corpus("LeetCode", "LC weekly 439 all four problems")

    match = find_solution(_contest("Weekly Contest 439", "LeetCode"), corpus)

    assert match.strategy == STRATEGY_LEETCODE_NUMBER
    assert match.url == _url(0)


def test_numeric_fallback_is_leetcode_only():
    corpus = _corpus("CodeChef", "weekly 439 recap")

    assert pick_solution(_contest("Weekly Contest 439", "CodeChef"), corpus) is None


def test_other_platform_keys_are_never_used():
    corpus = _corpus("Codeforces", "Starters 150")

    assert pick_solution(_contest("Starters 150", "CodeChef"), corpus) is None


def test_first_qualifying_candidate_wins_not_best():
    corpus = _corpus(
        "CodeChef",
        "Starters 150 problem A only",
        "Starters 150 full editorial",
    )

    assert pick_solution(_contest("Starters 150 (Div 2)", "CodeChef"), corpus) == _url(0)


def test_match_all_skips_decided_contests_and_persists_in_order():
    corpus = _corpus("LeetCode", "Weekly Contest 1", "Weekly Contest 2")
    contests = [
        _contest("Weekly Contest 1", "LeetCode", contest_id=1),
        _contest("Weekly Contest 2", "LeetCode", solution_url="https://manual", contest_id=2),
        _contest("Weekly Contest 3", "LeetCode", contest_id=3),
    ]
    persisted = []

    summary = match_all(contests, corpus, lambda contest, url: persisted.append((contest.id, url)))

    assert persisted == [(1, _url(0))]
    assert contests[0].solution_url == _url(0)
    assert contests[1].solution_url == "https://manual"
    assert contests[2].solution_url is None
    assert summary["matched"] == 1
    assert summary["skipped"] == 1
    assert summary["unmatched"] == 1
    assert summary["by_strategy"][STRATEGY_DIRECT] == 1


def test_match_all_isolates_persist_failures():
    corpus = _corpus("LeetCode", "Weekly Contest 1", "Weekly Contest 2")
    contests = [
        _contest("Weekly Contest 1", "LeetCode", contest_id=1),
        _contest("Weekly Contest 2", "LeetCode", contest_id=2),
    ]
    persisted = []

    def persist(contest, url):
        if contest.id == 1:
            raise RuntimeError("write failed")
        persisted.append(contest.id)

    summary = match_all(contests, corpus, persist)

    assert persisted == [2]
    assert contests[0].solution_url is None
    assert summary["matched"] == 1
    assert summary["errors"] == [
        {"id": 1, "name": "Weekly Contest 1", "platform": "LeetCode", "error": "write failed"}
    ]


def test_matched_contest_is_not_revisited_on_next_cycle():
    contest = _contest("Weekly Contest 1", "LeetCode")
    match_all([contest], _corpus("LeetCode", "Weekly Contest 1"), lambda c, u: None)

    persisted = []
    match_all([contest], _corpus("LeetCode", "Weekly Contest 1 again"), lambda c, u: persisted.append(u))

    assert contest.solution_url == _url(0)
    assert persisted == []


def test_missing_playlist_means_no_auto_match():
    async def fake_fetch(session, playlist_id, api_key):
        return [PlaylistVideo(title="Weekly Contest 439", video_id="lc")]

    corpus = asyncio.run(
        build_corpus({"LeetCode": "PL_LC", "Codeforces": None}, api_key="key", fetch_videos=fake_fetch)
    )
    contests = [_contest("Codeforces Round 930 (Div. 3)", "Codeforces")]

    summary = match_all(contests, corpus, lambda c, u: None)

    assert corpus.count_for_platform("Codeforces") == 0
    assert summary["matched"] == 0
    assert contests[0].solution_url is None


def test_match_all_counts_already_decided_rows_as_skipped():
    corpus = _corpus("LeetCode", "Weekly Contest 1")
    contest = _contest("Weekly Contest 1", "LeetCode")

    summary = match_all([contest], corpus, lambda c, u: False)

    assert contest.solution_url is None
    assert summary["matched"] == 0
    assert summary["skipped"] == 1
    assert summary["by_strategy"][STRATEGY_DIRECT] == 0
