import config
from services.contest_record import PLATFORM_CODEFORCES, ContestRecord
from utils.time import from_epoch_seconds
from .base_crawler import ContestCrawler, MalformedPayloadError


class CodeforcesCrawler(ContestCrawler):
    DISPLAY_NAME = "Codeforces"
    CONTEST_URL = "https://codeforces.com/contest/{contest_id}"

    def __init__(self):
        super().__init__(PLATFORM_CODEFORCES)

    async def _request_payload(self, session):
        return await self._get_json(session, config.CODEFORCES_API_URL)

    def parse_payload(self, payload):
        if not isinstance(payload, dict):
            raise MalformedPayloadError("contest.list response is not an object")
        if payload.get("status") == "FAILED":
            raise MalformedPayloadError(f"contest.list failed: {payload.get('comment')}")
        result = payload.get("result")
        if not isinstance(result, list):
            raise MalformedPayloadError("contest.list response has no result list")

        # One list, one batch: a single bad item invalidates the whole response.
        contests = []
        for item in result:
            start_seconds = item["startTimeSeconds"]
            duration = int(item["durationSeconds"])
            contests.append(
                ContestRecord(
                    name=item["name"],
                    platform=self.platform,
                    url=self.CONTEST_URL.format(contest_id=item["id"]),
                    start_time=from_epoch_seconds(start_seconds),
                    end_time=from_epoch_seconds(start_seconds + duration),
                    duration_seconds=duration,
                )
            )
        return contests
