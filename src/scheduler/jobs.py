from __future__ import annotations

import asyncio
from datetime import date
from typing import AsyncIterable, List, Optional

import httpx
from loguru import logger

from src.config import get_settings
from src.crawlers.base import Item
from src.notifications.dispatcher import NotificationDispatcher
from src.retry import with_retry
from src.scheduler.filters import SeenSet, should_dispatch
from src.scheduler.runner import build_crawlers, build_providers


async def watch_announcements(
    items: AsyncIterable[Item],
    dispatcher: NotificationDispatcher,
    seen: SeenSet,
    cutoff: date,
) -> None:
    """Notify subscribers about every new, fresh item from ``items``.

    Runs until ``items`` is exhausted, which never happens for a rotation.
    """
    settings = get_settings()
    notify = with_retry(
        dispatcher.notify,
        times=settings.retry_times,
        base_delay=settings.retry_base_delay,
    )

    async for item in items:
        if not should_dispatch(item, cutoff, seen):
            continue

        # 通知失敗也記錄下來，避免同一則公告無限重試
        await notify(item.title, item.url)
        seen.add(item.url)
        logger.info(f"{item.title} <{item.url}>")

        await asyncio.sleep(settings.item_interval)


async def crawl_once(source: Optional[str] = None) -> List[Item]:
    """Fetch every configured source once, without notifying anyone."""
    settings = get_settings()
    items: List[Item] = []

    async with httpx.AsyncClient(timeout=settings.http_timeout) as client:
        crawlers = build_crawlers(client, source)
        for crawler, provider in zip(crawlers, build_providers(crawlers)):
            result = await provider()
            if not result.ok:
                logger.error(f"Error crawling {crawler.source_name}: {result.error}")
                continue
            items.extend(result.value)

    logger.info(f"Crawl completed with {len(items)} announcements")
    return items
