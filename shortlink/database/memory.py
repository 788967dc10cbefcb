"""In-process implementation of the shortlink store."""

import asyncio
import logging
from typing import Optional, List, Dict, Any
from datetime import datetime, timezone

from .base import ShortLinkDBBase
from .models import ShortLink, ClickEvent
from ..errors import DuplicateCodeError, NotFoundError


class InMemoryShortLinkDB(ShortLinkDBBase):
    """Dictionary-backed store for development and tests.

    A single asyncio lock serializes every mutation, which gives ``put`` its
    check-and-insert atomicity within one event loop. Data lives only as long
    as the process.
    """

    def __init__(
        self,
        db_config: str = "memory://",
        retention_days: int = 365,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(db_config, retention_days)
        self.logger = logger or logging.getLogger(__name__)

        self._links: Dict[str, ShortLink] = {}
        self._retired: Dict[str, datetime] = {}
        self._clicks: List[ClickEvent] = []
        self._lock = asyncio.Lock()

    def _is_blocked(self, code: str) -> bool:
        if code in self._links:
            return True
        retired_at = self._retired.get(code)
        return retired_at is not None and retired_at > self.retention_cutoff()

    async def put(
        self,
        code: str,
        original_url: str,
        created_at: Optional[datetime] = None,
    ) -> ShortLink:
        if created_at is None:
            created_at = datetime.now(timezone.utc)

        async with self._lock:
            if self._is_blocked(code):
                self.logger.debug(f"Rejected duplicate code: {code}")
                raise DuplicateCodeError(f"Short code '{code}' already exists")

            link = ShortLink(code=code, original_url=original_url, created_at=created_at)
            self._links[code] = link
            self._retired.pop(code, None)

        self.logger.debug(f"Stored short link: {code} -> {original_url}")
        return link

    async def get(self, code: str) -> ShortLink:
        link = self._links.get(code)
        if link is None:
            raise NotFoundError(f"Short code '{code}' not found")
        return link

    async def code_in_use(self, code: str) -> bool:
        return self._is_blocked(code)

    async def delete(self, code: str) -> ShortLink:
        async with self._lock:
            link = self._links.pop(code, None)
            if link is None:
                raise NotFoundError(f"Short code '{code}' not found")
            self._retired[code] = datetime.now(timezone.utc)
        return link

    async def append_click(self, event: ClickEvent, expected_url: Optional[str] = None) -> str:
        async with self._lock:
            link = self._links.get(event.code)
            if link is None:
                raise NotFoundError(f"Short code '{event.code}' not found")
            if expected_url is None or link.original_url == expected_url:
                self._clicks.append(event)
            return link.original_url

    def _matching_clicks(self, code: str, since: Optional[datetime]) -> List[ClickEvent]:
        return [
            c for c in self._clicks
            if c.code == code and (since is None or c.timestamp >= since)
        ]

    async def list_clicks(
        self,
        code: str,
        since: Optional[datetime] = None,
        limit: int = 100,
    ) -> List[ClickEvent]:
        # Appended in time order; reverse for newest first.
        return list(reversed(self._matching_clicks(code, since)))[:limit]

    async def count_clicks(self, code: str, since: Optional[datetime] = None) -> int:
        return len(self._matching_clicks(code, since))

    async def list_recent(self, limit: int = 100) -> List[ShortLink]:
        links = sorted(self._links.values(), key=lambda link: link.created_at, reverse=True)
        return links[:limit]

    async def get_statistics(self) -> Dict[str, Any]:
        return {
            "total_urls": len(self._links),
            "total_clicks": len(self._clicks),
            "database": "memory",
        }

    async def close(self) -> None:
        self.logger.debug("In-memory store closed")

    async def health_check(self) -> bool:
        return True
