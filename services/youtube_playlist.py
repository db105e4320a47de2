from dataclasses import dataclass
from typing import Any, Dict, List

import aiohttp
from tenacity import retry, stop_after_attempt, wait_exponential

import config

YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v={video_id}"


@dataclass(frozen=True)
class PlaylistVideo:
    title: str
    video_id: str

    @property
    def url(self) -> str:
        return YOUTUBE_WATCH_URL.format(video_id=self.video_id)


def parse_playlist_items(payload: Dict[str, Any]) -> List[PlaylistVideo]:
    """Map a ``playlistItems.list`` response to videos, preserving playlist order.

    Items without a title or video id (deleted/private videos) are skipped.
    """
    if not isinstance(payload, dict):
        raise ValueError("playlistItems payload is not an object")
    items = payload.get("items")
    if not isinstance(items, list):
        raise ValueError("playlistItems payload has no items list")

    videos: List[PlaylistVideo] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        snippet = item.get("snippet") or {}
        title = snippet.get("title")
        video_id = (snippet.get("resourceId") or {}).get("videoId")
        if not isinstance(title, str) or not title.strip() or not video_id:
            continue
        videos.append(PlaylistVideo(title=title, video_id=str(video_id)))
    return videos


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    reraise=True,
)
async def _get_playlist_page(session: aiohttp.ClientSession, params: Dict[str, Any]) -> Dict[str, Any]:
    async with session.get(config.YOUTUBE_PLAYLIST_ITEMS_URL, params=params) as resp:
        resp.raise_for_status()
        return await resp.json()


async def fetch_playlist_videos(
    session: aiohttp.ClientSession,
    playlist_id: str,
    api_key: str,
) -> List[PlaylistVideo]:
    """Fetch the first page of a playlist. Later pages are intentionally not requested."""
    params = {
        "part": "snippet",
        "playlistId": playlist_id,
        "maxResults": config.YOUTUBE_PLAYLIST_PAGE_SIZE,
        "key": api_key,
    }
    payload = await _get_playlist_page(session, params)
    return parse_playlist_items(payload)
