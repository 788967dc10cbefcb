"""Abstract base class for shortlink store implementations."""

from abc import ABC, abstractmethod
from typing import Optional, List, Dict, Any
from datetime import datetime, timedelta, timezone

from .models import ShortLink, ClickEvent


class ShortLinkDBBase(ABC):
    """Abstract base class for short link and click storage.

    Implementations must make ``put`` an atomic check-and-insert: two
    concurrent calls with the same code can never both succeed.
    """

    def __init__(self, db_config: str, retention_days: int = 365):
        """Initialize store.

        Args:
            db_config: Database connection string
            retention_days: Days a deleted code stays unavailable for reissue
        """
        self.db_config = db_config
        self.retention_days = retention_days

    def retention_cutoff(self, now: Optional[datetime] = None) -> datetime:
        """Codes retired after this instant are still blocked."""
        now = now or datetime.now(timezone.utc)
        return now - timedelta(days=self.retention_days)

    @abstractmethod
    async def put(
        self,
        code: str,
        original_url: str,
        created_at: Optional[datetime] = None,
    ) -> ShortLink:
        """Insert a new short link.

        Args:
            code: The short code to use
            original_url: The original long URL
            created_at: Optional creation timestamp (defaults to now UTC)

        Returns:
            The stored ShortLink

        Raises:
            DuplicateCodeError: If the code is live or retired within the window
        """
        pass

    @abstractmethod
    async def get(self, code: str) -> ShortLink:
        """Get the short link for a code.

        Raises:
            NotFoundError: If no live link has this code
        """
        pass

    @abstractmethod
    async def code_in_use(self, code: str) -> bool:
        """Check whether a code is live or retired within the retention window."""
        pass

    @abstractmethod
    async def delete(self, code: str) -> ShortLink:
        """Delete a short link and retire its code.

        Click events for the code are kept.

        Returns:
            The deleted ShortLink

        Raises:
            NotFoundError: If no live link has this code
        """
        pass

    @abstractmethod
    async def append_click(self, event: ClickEvent, expected_url: Optional[str] = None) -> str:
        """Append a click event if the live link still points at ``expected_url``.

        Args:
            event: The click to append
            expected_url: URL that was served; None appends unconditionally

        Returns:
            The live link's original URL. When it differs from
            ``expected_url`` nothing was appended.

        Raises:
            NotFoundError: If no live link has ``event.code``
        """
        pass

    @abstractmethod
    async def list_clicks(
        self,
        code: str,
        since: Optional[datetime] = None,
        limit: int = 100,
    ) -> List[ClickEvent]:
        """List click events for a code, newest first.

        Args:
            code: The short code
            since: Only events at or after this timestamp
            limit: Maximum number of events to return
        """
        pass

    @abstractmethod
    async def count_clicks(self, code: str, since: Optional[datetime] = None) -> int:
        """Count click events for a code at or after ``since``."""
        pass

    @abstractmethod
    async def list_recent(self, limit: int = 100) -> List[ShortLink]:
        """List recently created short links, newest first."""
        pass

    @abstractmethod
    async def get_statistics(self) -> Dict[str, Any]:
        """Get store statistics.

        Returns:
            Dictionary with total_urls, total_clicks, database
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close connections."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the store is healthy."""
        pass
