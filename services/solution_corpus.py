"""Solution video corpus: many synthetic lookup keys per playlist video.

Keys look like ``"<platform>-<body>"`` and map to a YouTube watch URL. The
corpus is rebuilt every cycle and never persisted.
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Dict, Iterator, List, Optional, Tuple

import config
from services.contest_patterns import derive_structured_keys
from services.youtube_playlist import PlaylistVideo, fetch_playlist_videos
from utils.http import create_session
from utils.text import integer_literals, normalize_key_text

LOGGER = logging.getLogger(__name__)

NORMALIZED_KEY_TAG = "normalized-"
NUMBER_KEY_TAG = "number-"

_TITLE_SUFFIX_RE = re.compile(r"\|.*$")


def clean_title(title):
    """Strip ``**`` emphasis and any ``| ...`` suffix."""
    return _TITLE_SUFFIX_RE.sub("", title.replace("**", "")).strip()


def derive_key_bodies(platform, title) -> List[str]:
    """All key bodies (without the platform prefix) for one video title, in insertion order."""
    bodies = [title, clean_title(title)]
    bodies.extend(derive_structured_keys(platform, title))

    normalized = normalize_key_text(title)
    if normalized:
        bodies.append(f"{NORMALIZED_KEY_TAG}{normalized}")

    bodies.extend(f"{NUMBER_KEY_TAG}{number}" for number in integer_literals(title))
    return [body for body in bodies if body]


def platform_prefix(platform):
    return f"{platform}-"


class SolutionCorpus:
    """
    Ordered string-keyed mapping of lookup key to video URL.

    Write policy is last-write-wins: putting an existing key replaces its URL
    but the key keeps the position of its first insertion. Iteration follows
    insertion order, which is playlist fetch order.
    """

    def __init__(self):
        self._entries: Dict[str, str] = {}
        self.sources: Dict[str, Dict[str, object]] = {}

    def put(self, key: str, url: str) -> None:
        self._entries[key] = url

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._entries.get(key, default)

    def __contains__(self, key) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def items(self):
        return self._entries.items()

    def add_video(self, platform: str, video: PlaylistVideo) -> int:
        prefix = platform_prefix(platform)
        bodies = derive_key_bodies(platform, video.title)
        for body in bodies:
            self.put(f"{prefix}{body}", video.url)
        return len(bodies)

    def platform_items(self, platform: str) -> Iterator[Tuple[str, str]]:
        """Yield ``(key_body, url)`` for one platform's keys, prefix stripped, in insertion order."""
        prefix = platform_prefix(platform)
        for key, url in self._entries.items():
            if key.startswith(prefix):
                yield key[len(prefix):], url

    def count_for_platform(self, platform: str) -> int:
        return sum(1 for _ in self.platform_items(platform))

    def summary(self) -> Dict[str, object]:
        return {
            "total_keys": len(self),
            "sources": self.sources,
        }


async def _fetch_with_timeout(fetch_videos, session, playlist_id, api_key):
    return await asyncio.wait_for(
        fetch_videos(session, playlist_id, api_key),
        timeout=config.CONTEST_FETCH_TIMEOUT_SECONDS,
    )


async def build_corpus(playlist_ids_by_platform, api_key=None, fetch_videos=fetch_playlist_videos) -> SolutionCorpus:
    """
    Fetch the first page of every configured playlist and derive the corpus.

    Platforms without a playlist id contribute nothing. A failed playlist fetch
    is logged and that platform contributes nothing. Insertion order follows
    ``playlist_ids_by_platform`` order, then playlist order.
    """
    corpus = SolutionCorpus()
    api_key = config.YOUTUBE_API_KEY if api_key is None else api_key

    configured = []
    for platform, playlist_id in playlist_ids_by_platform.items():
        if not playlist_id:
            LOGGER.info("No playlist ID configured for %s", platform)
            corpus.sources[platform] = {"status": "not_configured", "videos": 0, "keys": 0}
            continue
        configured.append((platform, playlist_id))

    if not configured:
        return corpus

    if not api_key:
        LOGGER.warning("YOUTUBE_API_KEY is not set; solution corpus will be empty")
        for platform, _ in configured:
            corpus.sources[platform] = {"status": "missing_api_key", "videos": 0, "keys": 0}
        return corpus

    async with create_session() as session:
        results = await asyncio.gather(
            *(_fetch_with_timeout(fetch_videos, session, playlist_id, api_key) for _, playlist_id in configured),
            return_exceptions=True,
        )

    for (platform, playlist_id), result in zip(configured, results):
        if isinstance(result, BaseException):
            LOGGER.error("Failed to fetch %s solution playlist %s: %r", platform, playlist_id, result)
            corpus.sources[platform] = {"status": "failed", "videos": 0, "keys": 0, "error": repr(result)}
            continue

        key_count = 0
        for video in result:
            key_count += corpus.add_video(platform, video)
        corpus.sources[platform] = {"status": "ok", "videos": len(result), "keys": key_count}
        LOGGER.info("Loaded %d %s solution videos (%d derived keys)", len(result), platform, key_count)

    return corpus
