import config
from services.contest_record import PLATFORM_LEETCODE, ContestRecord
from utils.time import from_epoch_seconds
from .base_crawler import ContestCrawler, MalformedPayloadError

ALL_CONTESTS_QUERY = """
{
  allContests {
    title
    titleSlug
    startTime
    duration
  }
}
"""


class LeetCodeCrawler(ContestCrawler):
    DISPLAY_NAME = "LeetCode"
    CONTEST_URL = "https://leetcode.com/contest/{title_slug}"

    def __init__(self):
        super().__init__(PLATFORM_LEETCODE)

    async def _request_payload(self, session):
        headers = {
            "Content-Type": "application/json",
            "Referer": "https://leetcode.com/contest/",
        }
        return await self._post_json(session, config.LEETCODE_GRAPHQL_URL, {"query": ALL_CONTESTS_QUERY}, headers=headers)

    def parse_payload(self, payload):
        if not isinstance(payload, dict):
            raise MalformedPayloadError("graphql response is not an object")
        if payload.get("errors"):
            raise MalformedPayloadError(str(payload["errors"]))
        all_contests = (payload.get("data") or {}).get("allContests")
        if not isinstance(all_contests, list):
            raise MalformedPayloadError("graphql response has no data.allContests list")

        contests = []
        for item in all_contests:
            start_seconds = item["startTime"]
            # Upstream duration is in seconds, so end = start + duration.
            duration = int(item["duration"])
            contests.append(
                ContestRecord(
                    name=item["title"],
                    platform=self.platform,
                    url=self.CONTEST_URL.format(title_slug=item["titleSlug"]),
                    start_time=from_epoch_seconds(start_seconds),
                    end_time=from_epoch_seconds(start_seconds + duration),
                    duration_seconds=duration,
                )
            )
        return contests
