"""Assemble a service from configuration."""

import logging

from .database import create_database
from .database.cache import RedisCache
from .shortcode import ShortCodeGenerator
from .service import URLShortenerService


async def build_service(config, logger: logging.Logger) -> URLShortenerService:
    """Create store, optional cache and service from a ``Config``.

    The cache is connected here; the store opens its pool lazily on first use.
    """
    logger.info(f"Opening store at {config.database_url}")
    db = create_database(
        config.database_url,
        retention_days=config.code_retention_days,
        pool_max_size=config.db_pool_max_size,
        create_tables=config.create_tables,
        logger=logger,
    )

    cache = None
    if config.redis_url:
        logger.info(f"Connecting to Redis at {config.redis_url}")
        cache = RedisCache(
            redis_url=config.redis_url,
            ttl_seconds=config.cache_ttl_seconds,
            logger=logger,
        )
        await cache.connect()
    else:
        logger.info("Redis caching disabled")

    generator = ShortCodeGenerator(
        default_length=config.short_code_length,
        strategy=config.short_code_strategy,
    )

    return URLShortenerService(
        db=db,
        cache=cache,
        short_code_generator=generator,
        logger=logger,
        enable_custom_codes=config.enable_custom_codes,
        max_collision_retries=config.max_collision_retries,
        max_batch_urls=config.max_batch_urls,
        stats_click_limit=config.stats_click_limit,
    )
