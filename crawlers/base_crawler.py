#crawlers/base_crawler.py
import asyncio
import logging
from abc import ABC, abstractmethod

import aiohttp
from tenacity import retry, stop_after_attempt, wait_exponential

from utils.http import create_session

LOGGER = logging.getLogger(__name__)


class MalformedPayloadError(ValueError):
    """Upstream answered, but not in the shape the crawler understands."""


class ContestCrawler(ABC):
    """
    Base class for every contest platform crawler.

    Subclasses implement the HTTP call (``_request_payload``) and a pure
    ``parse_payload`` mapping the raw payload into ``ContestRecord`` objects.
    ``fetch`` ties them together and never raises: an unreachable or
    misbehaving upstream degrades to an empty list so the rest of the sync
    cycle carries on.
    """

    DISPLAY_NAME = None

    def __init__(self, platform):
        self.platform = platform

    @property
    def display_name(self):
        return self.DISPLAY_NAME or self.platform

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def _get_json(self, session, url):
        async with session.get(url) as response:
            response.raise_for_status()
            return await response.json(content_type=None)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def _post_json(self, session, url, payload, headers=None):
        async with session.post(url, json=payload, headers=headers) as response:
            response.raise_for_status()
            return await response.json(content_type=None)

    @abstractmethod
    async def _request_payload(self, session):
        raise NotImplementedError

    @abstractmethod
    def parse_payload(self, payload):
        """Map the raw upstream payload to a list of ``ContestRecord``."""
        raise NotImplementedError

    async def fetch(self):
        try:
            async with create_session() as session:
                payload = await self._request_payload(session)
            contests = self.parse_payload(payload)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            LOGGER.error("[%s] upstream unavailable: %r", self.display_name, e)
            return []
        except (MalformedPayloadError, KeyError, TypeError, ValueError) as e:
            LOGGER.error("[%s] malformed payload, dropping batch: %r", self.display_name, e)
            return []
        except Exception:
            LOGGER.exception("[%s] unexpected error while fetching contests", self.display_name)
            return []

        LOGGER.info("[%s] fetched %d contests", self.display_name, len(contests))
        return contests
