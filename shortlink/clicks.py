"""Click accounting for served redirects."""

import logging
from typing import Optional
from datetime import datetime, timezone

from .database.base import ShortLinkDBBase
from .database.models import ClickEvent
from .common.labels import DIRECT, UNKNOWN
from .errors import NotFoundError


class ClickRecorder:
    """Append one ClickEvent per served redirect.

    The store decides whether the click counts: it is written only if the
    code is still live and, when ``expected_url`` is given, still points
    there. Anything else is logged and reported as None so the caller can
    look the code up again.
    """

    def __init__(self, db: ShortLinkDBBase, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or logging.getLogger(__name__)

    async def record(
        self,
        code: str,
        source_label: str = DIRECT,
        location_label: str = UNKNOWN,
        expected_url: Optional[str] = None,
    ) -> Optional[ClickEvent]:
        """Record a click.

        Args:
            code: The short code that was resolved
            source_label: Where the visitor came from
            location_label: Where the visitor is
            expected_url: The URL about to be served, if known

        Returns:
            The written event, or None if the code is unknown or now
            points at a different URL
        """
        event = ClickEvent(
            code=code,
            timestamp=datetime.now(timezone.utc),
            source_label=source_label,
            location_label=location_label,
        )

        try:
            live_url = await self.db.append_click(event, expected_url=expected_url)
        except NotFoundError:
            self.logger.warning(f"Dropped click for unknown short code: {code}")
            return None

        if expected_url is not None and live_url != expected_url:
            self.logger.warning(f"Dropped click for {code}: target changed to {live_url}")
            return None

        self.logger.debug(f"Recorded click: {code} source={source_label} location={location_label}")
        return event
