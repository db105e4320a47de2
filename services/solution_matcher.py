"""Link contests to solution videos from a ``SolutionCorpus``.

Strategies run in a fixed order and the first qualifying candidate wins:

1. ``direct``: exact ``"<platform>-<contest name>"`` key.
2. ``structured``: parsed round/division/number/month fragments.
3. ``fuzzy``: normalized contest name and key body contain one another.
4. ``leetcode-number``: both mention "weekly" and share the first integer.

Candidates are scanned in corpus insertion order; there is no scoring.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Optional

from services.contest_patterns import derive_match_requirements
from services.contest_record import PLATFORM_LEETCODE, ContestRecord
from services.solution_corpus import NORMALIZED_KEY_TAG, SolutionCorpus, platform_prefix
from utils.text import contains_phrase, first_integer, normalize_key_text

LOGGER = logging.getLogger(__name__)

STRATEGY_DIRECT = "direct"
STRATEGY_STRUCTURED = "structured"
STRATEGY_FUZZY = "fuzzy"
STRATEGY_LEETCODE_NUMBER = "leetcode-number"

STRATEGIES = (STRATEGY_DIRECT, STRATEGY_STRUCTURED, STRATEGY_FUZZY, STRATEGY_LEETCODE_NUMBER)


@dataclass(frozen=True)
class SolutionMatch:
    url: str
    strategy: str
    key: Optional[str] = None


def _normalized_candidates(contest: ContestRecord, corpus: SolutionCorpus):
    # The "normalized-" tag is a storage detail; compare against the title text itself.
    for body, url in corpus.platform_items(contest.platform):
        if body.startswith(NORMALIZED_KEY_TAG):
            text = body[len(NORMALIZED_KEY_TAG):]
        else:
            text = normalize_key_text(body)
        yield body, text, url


def _satisfies(normalized_body, requirement):
    return all(
        any(contains_phrase(normalized_body, spelling) for spelling in fragment)
        for fragment in requirement
    )


def _match_direct(contest, corpus):
    key = f"{platform_prefix(contest.platform)}{contest.name}"
    url = corpus.get(key)
    if url:
        return SolutionMatch(url=url, strategy=STRATEGY_DIRECT, key=key)
    return None


def _match_structured(contest, corpus):
    for requirement in derive_match_requirements(contest.platform, contest.name):
        for body, normalized_body, url in _normalized_candidates(contest, corpus):
            if _satisfies(normalized_body, requirement):
                return SolutionMatch(url=url, strategy=STRATEGY_STRUCTURED, key=body)
    return None


def _match_fuzzy(contest, corpus):
    normalized_name = normalize_key_text(contest.name)
    if not normalized_name:
        return None
    for body, normalized_body, url in _normalized_candidates(contest, corpus):
        if contains_phrase(normalized_body, normalized_name) or contains_phrase(normalized_name, normalized_body):
            return SolutionMatch(url=url, strategy=STRATEGY_FUZZY, key=body)
    return None


def _match_leetcode_number(contest, corpus):
    if contest.platform != PLATFORM_LEETCODE or "weekly" not in contest.name.lower():
        return None
    contest_number = first_integer(contest.name)
    if contest_number is None:
        return None
    for body, normalized_body, url in _normalized_candidates(contest, corpus):
        if "weekly" in normalized_body and first_integer(normalized_body) == contest_number:
            return SolutionMatch(url=url, strategy=STRATEGY_LEETCODE_NUMBER, key=body)
    return None


_STRATEGY_FUNCS = (
    _match_direct,
    _match_structured,
    _match_fuzzy,
    _match_leetcode_number,
)


def find_solution(contest: ContestRecord, corpus: SolutionCorpus) -> Optional[SolutionMatch]:
    for strategy in _STRATEGY_FUNCS:
        match = strategy(contest, corpus)
        if match is not None:
            return match
    return None


def pick_solution(contest: ContestRecord, corpus: SolutionCorpus) -> Optional[str]:
    """Decide the solution URL for one contest without touching any store."""
    match = find_solution(contest, corpus)
    return match.url if match else None


def match_all(
    contests: Iterable[ContestRecord],
    corpus: SolutionCorpus,
    persist: Callable[[ContestRecord, str], Optional[bool]],
) -> Dict[str, Any]:
    """
    Match every contest still lacking a solution, one at a time.

    ``persist(contest, url)`` is called right after each decision and before
    the next contest is looked at. A persist failure is recorded for that
    contest only; it stays unmatched and is retried next cycle. A persist
    returning ``False`` means the store already held a solution: the contest
    is counted as skipped and left untouched. Contests already carrying a
    solution are never revisited.
    """
    summary = {
        "matched": 0,
        "skipped": 0,
        "unmatched": 0,
        "errors": [],
        "by_strategy": {strategy: 0 for strategy in STRATEGIES},
    }

    for contest in contests:
        if contest.has_solution:
            summary["skipped"] += 1
            continue

        match = find_solution(contest, corpus)
        if match is None:
            summary["unmatched"] += 1
            continue

        try:
            stored = persist(contest, match.url)
        except Exception as e:
            LOGGER.error("Failed to save solution for %s contest %r: %s", contest.platform, contest.name, e)
            summary["errors"].append({
                "id": contest.id,
                "name": contest.name,
                "platform": contest.platform,
                "error": str(e),
            })
            continue

        if stored is False:
            summary["skipped"] += 1
            continue

        contest.solution_url = match.url
        summary["matched"] += 1
        summary["by_strategy"][match.strategy] += 1
        LOGGER.debug("Matched %s contest %r via %s (%s)", contest.platform, contest.name, match.strategy, match.key)

    LOGGER.info("Updated solution links for %d contests", summary["matched"])
    return summary
