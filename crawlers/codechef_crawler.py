import logging

import config
from services.contest_record import PLATFORM_CODECHEF, ContestRecord
from utils.time import parse_upstream_datetime
from .base_crawler import ContestCrawler, MalformedPayloadError

LOGGER = logging.getLogger(__name__)

REQUIRED_FIELDS = ("contest_name", "contest_code", "contest_start_date", "contest_end_date")


class CodeChefCrawler(ContestCrawler):
    DISPLAY_NAME = "CodeChef"
    CONTEST_URL = "https://www.codechef.com/{contest_code}"
    BUCKETS = ("future_contests", "present_contests", "past_contests")

    def __init__(self):
        super().__init__(PLATFORM_CODECHEF)

    async def _request_payload(self, session):
        return await self._get_json(session, config.CODECHEF_API_URL)

    def _parse_date(self, item, field):
        # The *_iso variant carries an explicit offset; prefer it when present.
        parsed = parse_upstream_datetime(item.get(f"{field}_iso"), config.CODECHEF_LOCAL_TIMEZONE)
        if parsed is None:
            parsed = parse_upstream_datetime(item.get(field), config.CODECHEF_LOCAL_TIMEZONE)
        return parsed

    def _parse_item(self, item):
        if not isinstance(item, dict):
            return None
        if any(not item.get(field) for field in REQUIRED_FIELDS):
            return None

        start_time = self._parse_date(item, "contest_start_date")
        end_time = self._parse_date(item, "contest_end_date")
        if start_time is None or end_time is None:
            return None

        return ContestRecord(
            name=item["contest_name"],
            platform=self.platform,
            url=self.CONTEST_URL.format(contest_code=item["contest_code"]),
            start_time=start_time,
            end_time=end_time,
            duration_seconds=int((end_time - start_time).total_seconds()),
        )

    def parse_payload(self, payload):
        if not isinstance(payload, dict) or not any(payload.get(bucket) is not None for bucket in self.BUCKETS):
            raise MalformedPayloadError("contest listing has none of the future/present/past buckets")

        contests = []
        dropped = 0
        for bucket in self.BUCKETS:
            items = payload.get(bucket) or []
            if not isinstance(items, list):
                LOGGER.warning("[%s] ignoring non-list bucket %s", self.display_name, bucket)
                continue
            for item in items:
                contest = self._parse_item(item)
                if contest is None:
                    dropped += 1
                    continue
                contests.append(contest)

        if dropped:
            LOGGER.warning("[%s] dropped %d incomplete contest entries", self.display_name, dropped)
        return contests
