"""Text normalization utilities for solution lookup keys."""

import re

_WS_RE = re.compile(r"\s+")
_NON_KEY_CHARS_RE = re.compile(r"[^a-z0-9\s]")
_INT_RE = re.compile(r"\d+")


def normalize_key_text(value):
    """Lower-case, drop everything but ``[a-z0-9]`` and spaces, collapse whitespace."""
    if value is None:
        return ""
    text = _NON_KEY_CHARS_RE.sub("", str(value).lower())
    return _WS_RE.sub(" ", text).strip()


def contains_phrase(haystack, needle):
    """True when ``needle`` occurs in ``haystack`` on word boundaries.

    Both arguments are expected to be normalized already. Empty strings never match.
    """
    if not haystack or not needle:
        return False
    return f" {needle} " in f" {haystack} "


def integer_literals(value):
    """Distinct integer literals in order of first appearance."""
    seen = []
    for number in _INT_RE.findall(value or ""):
        if number not in seen:
            seen.append(number)
    return seen


def first_integer(value):
    match = _INT_RE.search(value or "")
    return match.group(0) if match else None
