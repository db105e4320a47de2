"""Canonical contest record shared by crawlers, sync and matching."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

PLATFORM_CODEFORCES = "Codeforces"
PLATFORM_CODECHEF = "CodeChef"
PLATFORM_LEETCODE = "LeetCode"

# Order matters: solution playlists are read and inserted in this order.
PLATFORMS = (PLATFORM_LEETCODE, PLATFORM_CODEFORCES, PLATFORM_CODECHEF)


def _to_epoch_ms(value: datetime) -> int:
    return int(round(value.timestamp() * 1000))


@dataclass
class ContestRecord:
    name: str
    platform: str
    url: str
    start_time: datetime
    end_time: datetime
    duration_seconds: int
    solution_url: Optional[str] = None
    id: Optional[int] = None

    @property
    def key(self):
        return (self.name, self.platform)

    @property
    def start_time_ms(self) -> int:
        return _to_epoch_ms(self.start_time)

    @property
    def end_time_ms(self) -> int:
        return _to_epoch_ms(self.end_time)

    @property
    def has_solution(self) -> bool:
        return bool(self.solution_url)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "ContestRecord":
        return cls(
            id=row["id"],
            name=row["name"],
            platform=row["platform"],
            url=row["url"],
            start_time=row["start_time"],
            end_time=row["end_time"],
            duration_seconds=row["duration_seconds"],
            solution_url=row["solution_url"],
        )

    def to_api_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "platform": self.platform,
            "url": self.url,
            "startTime": self.start_time.isoformat() if self.start_time else None,
            "endTime": self.end_time.isoformat() if self.end_time else None,
            "duration": self.duration_seconds,
            "solutionUrl": self.solution_url,
        }
