import asyncio

import pytest

import services.youtube_playlist as youtube_playlist
from services.youtube_playlist import parse_playlist_items


def _item(title, video_id):
    return {"snippet": {"title": title, "resourceId": {"kind": "youtube#video", "videoId": video_id}}}


def test_parse_playlist_items_keeps_playlist_order():
    payload = {"items": [_item("Weekly Contest 439", "a1"), _item("Weekly Contest 438", "b2")]}

    videos = parse_playlist_items(payload)

    assert [video.title for video in videos] == ["Weekly Contest 439", "Weekly Contest 438"]
    assert videos[0].url == "https://www.youtube.com/watch?v=a1"


def test_parse_playlist_items_skips_deleted_videos():
    payload = {
        "items": [
            _item("Deleted video", None),
            {"snippet": {"resourceId": {"videoId": "x"}}},
            _item("Starters 150", "s150"),
        ]
    }

    assert [video.video_id for video in parse_playlist_items(payload)] == ["s150"]


@pytest.mark.parametrize("payload", [None, [], {"error": {"code": 403}}])
def test_parse_playlist_items_rejects_error_payloads(payload):
    with pytest.raises(ValueError):
        parse_playlist_items(payload)


def test_fetch_playlist_videos_reads_first_page_only(monkeypatch):
    requests = []

    async def fake_get_page(session, params):
        requests.append(dict(params))
        return {"items": [_item("Starters 150", "s150")], "nextPageToken": "PAGE2"}

    monkeypatch.setattr(youtube_playlist, "_get_playlist_page", fake_get_page)

    videos = asyncio.run(youtube_playlist.fetch_playlist_videos(object(), "PL_CC", "key"))

    assert [video.video_id for video in videos] == ["s150"]
    assert requests == [
        {"part": "snippet", "playlistId": "PL_CC", "maxResults": 50, "key": "key"}
    ]


def test_parse_playlist_items_skips_non_object_items():
    payload = {"items": ["garbage", None, _item("Starters 150", "s150")]}

    assert [video.video_id for video in parse_playlist_items(payload)] == ["s150"]
