"""Redirection resolution as an explicit state machine."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .clicks import ClickRecorder
from .database.base import ShortLinkDBBase
from .database.cache import RedisCache
from .database.models import ClickEvent
from .common.labels import DIRECT, UNKNOWN
from .errors import NotFoundError


class ResolveState(Enum):
    RECEIVE_CODE = "receive_code"
    LOOKUP = "lookup"
    FOUND = "found"
    NOT_FOUND = "not_found"
    RECORD_CLICK = "record_click"
    RETURN_URL = "return_url"
    RETURN_ERROR = "return_error"


TERMINAL_STATES = frozenset({ResolveState.RETURN_URL, ResolveState.RETURN_ERROR})


@dataclass(frozen=True)
class Resolution:
    """Outcome of one resolution; ``state`` is always terminal."""

    code: str
    state: ResolveState
    original_url: Optional[str] = None
    click: Optional[ClickEvent] = None

    @property
    def found(self) -> bool:
        return self.state is ResolveState.RETURN_URL


class RedirectionResolver:
    """Resolve a short code to its target and account for the click.

    RECEIVE_CODE -> LOOKUP -> FOUND -> RECORD_CLICK -> RETURN_URL
                          \\-> NOT_FOUND -> RETURN_ERROR
    RECORD_CLICK -> LOOKUP   (store refused the click)

    LOOKUP may answer from the cache, but the store has the last word: the
    click is written only if the live link still has the URL about to be
    served. When it refuses, the cache entry is dropped and LOOKUP runs
    again against the store alone, ending in NOT_FOUND if the code is gone.
    Lookups that record no click skip the cache.
    """

    def __init__(
        self,
        db: ShortLinkDBBase,
        recorder: ClickRecorder,
        cache: Optional[RedisCache] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.db = db
        self.recorder = recorder
        self.cache = cache
        self.logger = logger or logging.getLogger(__name__)

    async def resolve(
        self,
        code: str,
        source_label: str = DIRECT,
        location_label: str = UNKNOWN,
        record_click: bool = True,
    ) -> Resolution:
        """Run the state machine for one code.

        Args:
            code: The short code requested
            source_label: Click source label
            location_label: Click location label
            record_click: Set False for lookups that are not real visits

        Returns:
            Resolution in RETURN_URL or RETURN_ERROR
        """
        state = ResolveState.RECEIVE_CODE
        original_url: Optional[str] = None
        click: Optional[ClickEvent] = None
        use_cache = record_click

        while state not in TERMINAL_STATES:
            self.logger.debug(f"Resolve {code}: {state.value}")

            if state is ResolveState.RECEIVE_CODE:
                state = ResolveState.LOOKUP

            elif state is ResolveState.LOOKUP:
                original_url = await self._lookup(code, use_cache)
                state = ResolveState.FOUND if original_url else ResolveState.NOT_FOUND

            elif state is ResolveState.FOUND:
                state = ResolveState.RECORD_CLICK if record_click else ResolveState.RETURN_URL

            elif state is ResolveState.RECORD_CLICK:
                click = await self.recorder.record(
                    code, source_label, location_label, expected_url=original_url
                )
                if click:
                    state = ResolveState.RETURN_URL
                else:
                    if self.cache:
                        await self.cache.invalidate(code)
                    use_cache = False
                    state = ResolveState.LOOKUP

            elif state is ResolveState.NOT_FOUND:
                self.logger.warning(f"Short code not found: {code}")
                state = ResolveState.RETURN_ERROR

        return Resolution(code=code, state=state, original_url=original_url, click=click)

    async def _lookup(self, code: str, use_cache: bool = True) -> Optional[str]:
        """Cache first, then the store; a store hit fills the cache."""
        if self.cache and use_cache:
            cached_url = await self.cache.get_url(code)
            if cached_url:
                self.logger.debug(f"Cache hit for {code}")
                return cached_url

        try:
            link = await self.db.get(code)
        except NotFoundError:
            return None

        if self.cache:
            await self.cache.put_url(code, link.original_url)

        return link.original_url
