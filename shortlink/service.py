"""Business logic service for shortlink."""

import logging
from typing import Optional, Dict, Any, List
from datetime import datetime, timezone

from .shortcode import ShortCodeGenerator
from .clicks import ClickRecorder
from .resolver import RedirectionResolver, Resolution
from .database.base import ShortLinkDBBase
from .database.cache import RedisCache
from .database.models import ShortLink
from .common.labels import DIRECT, UNKNOWN
from .common.validators import is_valid_url, is_valid_short_code, is_reserved
from .errors import (
    InvalidUrlError,
    InvalidRequestError,
    NotFoundError,
    DuplicateCodeError,
    CapacityExhaustedError,
)


class URLShortenerService:
    """Service layer for URL shortening business logic."""

    def __init__(
        self,
        db: ShortLinkDBBase,
        cache: Optional[RedisCache] = None,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        logger: Optional[logging.Logger] = None,
        enable_custom_codes: bool = True,
        max_collision_retries: int = 5,
        max_batch_urls: int = 5,
        stats_click_limit: int = 100,
    ):
        """Initialize URL shortener service.

        Args:
            db: Store instance
            cache: Optional lookup cache
            short_code_generator: Optional short code generator
            logger: Optional logger
            enable_custom_codes: Whether to allow custom short codes
            max_collision_retries: Draws attempted before giving up on allocation
            max_batch_urls: Maximum URLs accepted by one batch request
            stats_click_limit: Maximum click events listed by get_click_stats
        """
        self.db = db
        self.cache = cache
        self.generator = short_code_generator or ShortCodeGenerator()
        self.logger = logger or logging.getLogger(__name__)
        self.enable_custom_codes = enable_custom_codes
        self.max_collision_retries = max_collision_retries
        self.max_batch_urls = max_batch_urls
        self.stats_click_limit = stats_click_limit

        self.recorder = ClickRecorder(db, logger=self.logger)
        self.resolver = RedirectionResolver(db, self.recorder, cache=cache, logger=self.logger)

    @staticmethod
    def _validate_url(original_url: str) -> None:
        is_valid, error = is_valid_url(original_url)
        if not is_valid:
            raise InvalidUrlError(f"Invalid URL: {error}", details={"url": original_url})

    async def create_short_url(
        self,
        original_url: str,
        custom_code: Optional[str] = None,
    ) -> ShortLink:
        """Create a new short URL.

        Args:
            original_url: The original long URL
            custom_code: Optional custom short code

        Returns:
            The stored ShortLink

        Raises:
            InvalidUrlError: If the URL is malformed
            InvalidRequestError: If the custom code is invalid or not allowed
            DuplicateCodeError: If the custom code is taken
            CapacityExhaustedError: If no free code could be allocated
        """
        self._validate_url(original_url)

        if custom_code:
            if not self.enable_custom_codes:
                raise InvalidRequestError("Custom short codes are not enabled")

            is_valid, error = is_valid_short_code(custom_code)
            if not is_valid:
                raise InvalidRequestError(f"Invalid short code: {error}")

            link = await self.db.put(custom_code, original_url, datetime.now(timezone.utc))
        else:
            link = await self._issue_short_link(original_url)

        if self.cache:
            await self.cache.put_url(link.code, original_url)

        self.logger.info(f"Created short URL: {link.code} -> {original_url}")
        return link

    async def create_short_urls(self, original_urls: List[str]) -> List[ShortLink]:
        """Shorten several URLs in one request.

        Blank entries are dropped. All URLs are validated before any is
        stored, so an invalid URL rejects the whole batch.
        """
        urls = [u.strip() for u in original_urls if u and u.strip()]

        if not urls:
            raise InvalidRequestError("At least one URL is required")
        if len(urls) > self.max_batch_urls:
            raise InvalidRequestError(
                f"At most {self.max_batch_urls} URLs can be shortened at once",
                details={"received": len(urls)},
            )

        for url in urls:
            self._validate_url(url)

        return [await self.create_short_url(url) for url in urls]

    async def resolve(
        self,
        short_code: str,
        source_label: str = DIRECT,
        location_label: str = UNKNOWN,
        record_click: bool = True,
    ) -> Resolution:
        """Resolve a short code for a redirect, recording the click."""
        return await self.resolver.resolve(
            short_code,
            source_label=source_label,
            location_label=location_label,
            record_click=record_click,
        )

    async def get_original_url(
        self,
        short_code: str,
        source_label: str = DIRECT,
        location_label: str = UNKNOWN,
        increment_count: bool = True,
    ) -> str:
        """Get the original URL for a short code.

        Args:
            short_code: The short code to lookup
            source_label: Click source label
            location_label: Click location label
            increment_count: Whether to record a click

        Returns:
            Original URL

        Raises:
            NotFoundError: If the code is unknown
        """
        resolution = await self.resolve(
            short_code,
            source_label=source_label,
            location_label=location_label,
            record_click=increment_count,
        )
        if not resolution.found:
            raise NotFoundError(f"Short code '{short_code}' not found")
        return resolution.original_url

    async def get_click_stats(self, short_code: str, limit: Optional[int] = None) -> Dict[str, Any]:
        """Get click statistics for a short URL.

        Only clicks since the live link was created are counted, so a code
        reissued after retirement starts from zero.

        Raises:
            NotFoundError: If the code is unknown
        """
        link = await self.db.get(short_code)
        limit = limit or self.stats_click_limit

        total_clicks = await self.db.count_clicks(short_code, since=link.created_at)
        clicks = await self.db.list_clicks(short_code, since=link.created_at, limit=limit)

        return {
            "code": link.code,
            "original_url": link.original_url,
            "created_at": link.created_at,
            "total_clicks": total_clicks,
            "clicks": clicks,
        }

    async def get_url_info(self, short_code: str) -> Dict[str, Any]:
        """Get complete information about a short URL.

        Raises:
            NotFoundError: If the code is unknown
        """
        link = await self.db.get(short_code)
        click_count = await self.db.count_clicks(short_code, since=link.created_at)

        self.logger.debug(f"Retrieved URL info for {short_code}")
        return {
            "code": link.code,
            "original_url": link.original_url,
            "created_at": link.created_at,
            "click_count": click_count,
        }

    async def delete_short_url(self, short_code: str) -> ShortLink:
        """Delete a short URL and retire its code.

        Raises:
            NotFoundError: If the code is unknown
        """
        link = await self.db.delete(short_code)

        if self.cache:
            await self.cache.invalidate(short_code)

        self.logger.info(f"Deleted short URL: {short_code}")
        return link

    async def list_recent_urls(self, limit: int = 100) -> List[ShortLink]:
        """List recently created URLs."""
        return await self.db.list_recent(limit)

    async def get_statistics(self) -> Dict[str, Any]:
        """Get service statistics."""
        db_stats = await self.db.get_statistics()

        return {
            **db_stats,
            "cache_enabled": self.cache is not None and self.cache.enabled,
            "custom_codes_enabled": self.enable_custom_codes,
        }

    async def health_check(self) -> Dict[str, bool]:
        """Perform health check."""
        db_healthy = await self.db.health_check()
        cache_healthy = await self.cache.ping() if self.cache else True

        return {
            "database": db_healthy,
            "cache": cache_healthy,
            "overall": db_healthy and cache_healthy,
        }

    async def _issue_short_link(self, original_url: str) -> ShortLink:
        """Allocate a fresh code and store the link under it.

        Each attempt draws a code, skips it if reserved or already in use,
        then tries the atomic insert. Losing an insert race to a concurrent
        request counts as a collision and costs one attempt.

        Raises:
            CapacityExhaustedError: If every attempt collided
        """
        for attempt in range(1, self.max_collision_retries + 1):
            code = self.generator.generate()

            if is_reserved(code) or await self.db.code_in_use(code):
                self.logger.debug(f"Collision on attempt {attempt}: {code}")
                continue

            try:
                link = await self.db.put(code, original_url, datetime.now(timezone.utc))
            except DuplicateCodeError:
                self.logger.debug(f"Lost insert race on attempt {attempt}: {code}")
                continue

            if attempt > 1:
                self.logger.debug(f"Generated code after {attempt} attempts: {code}")
            return link

        self.logger.error(
            f"Unable to allocate short code after {self.max_collision_retries} attempts"
        )
        raise CapacityExhaustedError(
            details={
                "attempts": self.max_collision_retries,
                "code_length": self.generator.default_length,
                "code_space": self.generator.capacity(),
            }
        )

    async def close(self) -> None:
        """Close service connections."""
        await self.db.close()
        if self.cache:
            await self.cache.close()
