"""Storage layer for shortlink."""

import logging
from typing import Optional
from urllib.parse import urlparse

from .base import ShortLinkDBBase
from .memory import InMemoryShortLinkDB
from .postgres import PostgresShortLinkDB
from .cache import RedisCache
from .models import ShortLink, ClickEvent


def create_database(
    db_url: str,
    retention_days: int = 365,
    pool_max_size: int = 10,
    create_tables: bool = False,
    logger: Optional[logging.Logger] = None,
) -> ShortLinkDBBase:
    """Create the store backend named by the URL scheme.

    ``memory://`` gives an in-process store; ``postgresql://`` (or
    ``postgres://``) gives the asyncpg-backed store.
    """
    scheme = urlparse(db_url).scheme.lower()

    if scheme == "memory":
        return InMemoryShortLinkDB(db_url, retention_days=retention_days, logger=logger)
    if scheme in ("postgresql", "postgres"):
        return PostgresShortLinkDB(
            db_url,
            retention_days=retention_days,
            pool_max_size=pool_max_size,
            create_tables=create_tables,
            logger=logger,
        )
    raise ValueError(f"Unsupported database URL scheme: '{scheme}'")


__all__ = [
    "ShortLinkDBBase",
    "InMemoryShortLinkDB",
    "PostgresShortLinkDB",
    "RedisCache",
    "ShortLink",
    "ClickEvent",
    "create_database",
]
