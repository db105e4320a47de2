"""Platform contest-name patterns shared by corpus building and matching.

Each entry knows how to turn a matched video title into extra lookup keys, and
how to turn a matched contest name into the fragments a lookup key must
contain. Keeping both in one row means a key can never be built in a shape the
matcher does not look for.

A fragment is a tuple of accepted spellings, already normalized with
``utils.text.normalize_key_text``. A requirement list is satisfied when every
fragment has at least one spelling present in the candidate key.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, List, Tuple

from services.contest_record import PLATFORM_CODECHEF, PLATFORM_CODEFORCES, PLATFORM_LEETCODE
from utils.text import normalize_key_text

Fragment = Tuple[str, ...]

_DIV_RE = re.compile(r"Div\.?\s*(\d+)", re.IGNORECASE)


@dataclass(frozen=True)
class ContestPattern:
    platform: str
    name: str
    regex: re.Pattern
    build_keys: Callable[[re.Match, str], List[str]]
    build_fragments: Callable[[re.Match, str], List[Fragment]]

    def search(self, text):
        return self.regex.search(text or "")


def _weekly_keys(match, _text):
    number = match.group(1)
    return [f"Weekly Contest {number}", f"Leetcode Weekly Contest {number}"]


def _biweekly_keys(match, _text):
    number = match.group(1)
    return [f"Biweekly Contest {number}", f"Leetcode Biweekly Contest {number}"]


def _round_keys(match, text):
    number = match.group(1)
    keys = [f"Codeforces Round #{number}", f"Codeforces Round {number}"]
    div_match = _DIV_RE.search(text)
    if div_match:
        div = div_match.group(1)
        keys.extend([
            f"Codeforces Round #{number} (Div. {div})",
            f"Codeforces Round #{number} (Div {div})",
            f"Codeforces Round #{number} Div. {div}",
            f"Codeforces Round #{number} Div {div}",
        ])
    return keys


def _round_fragments(match, text):
    number = match.group(1)
    fragments = [(f"round {number}", f"round{number}")]
    div_match = _DIV_RE.search(text)
    if div_match:
        div = div_match.group(1)
        fragments.append((f"div {div}", f"div{div}"))
    return fragments


def _educational_keys(match, _text):
    number = match.group(1)
    return [f"Educational Codeforces Round {number}", f"Educational Round {number}"]


def _educational_fragments(match, _text):
    number = match.group(1)
    return [(f"educational round {number}", f"educational codeforces round {number}")]


def _starters_keys(match, _text):
    number = match.group(1)
    return [f"Starters {number}", f"Codechef Starters {number}"]


def _long_challenge_keys(match, _text):
    month = match.group(1)
    return [f"{month} Long Challenge", f"Codechef {month} Long Challenge"]


def _cookoff_keys(match, _text):
    month = match.group(1)
    return [f"{month} Cook-off", f"{month} Cookoff", f"Codechef {month} Cook-off"]


def _single_fragment(template):
    def build(match, _text):
        return [(template.format(*match.groups()),)]
    return build


def _month_fragments(*type_spellings):
    def build(match, _text):
        return [(normalize_key_text(match.group(1)),), tuple(type_spellings)]
    return build


# Within a platform, table order is the order the matcher tries requirements in.
CONTEST_PATTERNS = (
    ContestPattern(
        platform=PLATFORM_LEETCODE,
        name="biweekly",
        regex=re.compile(r"\bBiweekly\s+Contest\s+(\d+)", re.IGNORECASE),
        build_keys=_biweekly_keys,
        build_fragments=_single_fragment("biweekly contest {0}"),
    ),
    ContestPattern(
        platform=PLATFORM_LEETCODE,
        name="weekly",
        regex=re.compile(r"\bWeekly\s+Contest\s+(\d+)", re.IGNORECASE),
        build_keys=_weekly_keys,
        build_fragments=_single_fragment("weekly contest {0}"),
    ),
    ContestPattern(
        platform=PLATFORM_CODEFORCES,
        name="educational",
        regex=re.compile(r"Educational\s+(?:Codeforces\s+)?Round\s+#?(\d+)", re.IGNORECASE),
        build_keys=_educational_keys,
        build_fragments=_educational_fragments,
    ),
    ContestPattern(
        platform=PLATFORM_CODEFORCES,
        name="round",
        regex=re.compile(r"Round\s+#?(\d+)", re.IGNORECASE),
        build_keys=_round_keys,
        build_fragments=_round_fragments,
    ),
    ContestPattern(
        platform=PLATFORM_CODECHEF,
        name="starters",
        regex=re.compile(r"Starters\s+(\d+)", re.IGNORECASE),
        build_keys=_starters_keys,
        build_fragments=_single_fragment("starters {0}"),
    ),
    ContestPattern(
        platform=PLATFORM_CODECHEF,
        name="long_challenge",
        regex=re.compile(r"(\w+)\s+Long\s+Challenge", re.IGNORECASE),
        build_keys=_long_challenge_keys,
        build_fragments=_month_fragments("long challenge"),
    ),
    ContestPattern(
        platform=PLATFORM_CODECHEF,
        name="cookoff",
        regex=re.compile(r"(\w+)\s+Cook[- ]off", re.IGNORECASE),
        build_keys=_cookoff_keys,
        build_fragments=_month_fragments("cookoff", "cook off"),
    ),
)


def patterns_for(platform):
    return [pattern for pattern in CONTEST_PATTERNS if pattern.platform == platform]


def derive_structured_keys(platform, title):
    """Extra key bodies (without platform prefix) for a video title."""
    keys: List[str] = []
    for pattern in patterns_for(platform):
        match = pattern.search(title)
        if match:
            keys.extend(pattern.build_keys(match, title))
    return keys


def derive_match_requirements(platform, contest_name):
    """One requirement list per pattern that matches ``contest_name``, in table order."""
    requirements: List[List[Fragment]] = []
    for pattern in patterns_for(platform):
        match = pattern.search(contest_name)
        if match:
            requirements.append(pattern.build_fragments(match, contest_name))
    return requirements
