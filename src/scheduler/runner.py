from __future__ import annotations

from typing import Dict, List, Optional, Type

import httpx
from loguru import logger

from src.config import Settings, get_settings
from src.crawlers.base import BaseCrawler
from src.crawlers.sites import EeaCrawler, SzuCrawler
from src.retry import with_retry
from src.scheduler.rotation import BatchRotation, Provider

CRAWLERS: Dict[str, Type[BaseCrawler]] = {
    crawler_cls.source_code: crawler_cls for crawler_cls in (EeaCrawler, SzuCrawler)
}


def _configured_urls(settings: Settings) -> Dict[str, List[str]]:
    return {
        "eea": settings.eea_list_urls,
        "szu": settings.szu_list_urls,
    }


def build_crawlers(
    client: httpx.AsyncClient, source: Optional[str] = None
) -> List[BaseCrawler]:
    """One crawler per configured list URL; pages of the same site share a parser."""
    settings = get_settings()
    crawlers: List[BaseCrawler] = []
    for code, urls in _configured_urls(settings).items():
        if source and code != source:
            continue
        crawlers.extend(CRAWLERS[code](client, url) for url in urls)

    if source and not crawlers:
        logger.error(f"Unknown source: {source}. Available: {list(CRAWLERS.keys())}")
    return crawlers


def build_providers(crawlers: List[BaseCrawler]) -> List[Provider]:
    settings = get_settings()
    return [
        with_retry(
            crawler.fetch_items,
            times=settings.retry_times,
            base_delay=settings.retry_base_delay,
        )
        for crawler in crawlers
    ]


def create_rotation(crawlers: List[BaseCrawler]) -> BatchRotation:
    settings = get_settings()
    rotation = BatchRotation(build_providers(crawlers), settings.idle_interval)
    logger.info(f"Rotation configured with {len(crawlers)} sources")
    return rotation
