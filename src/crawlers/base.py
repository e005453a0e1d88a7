from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

import httpx
from bs4 import BeautifulSoup
from loguru import logger

from src.crawlers.utils import fetch_page


class CrawlerError(Exception):
    """Raised when a listing page cannot be turned into items."""


@dataclass(frozen=True)
class Item:
    title: str
    url: str
    date: str


class BaseCrawler(ABC):
    source_name: str
    source_code: str

    def __init__(self, client: httpx.AsyncClient, list_url: str):
        self.client = client
        self.list_url = list_url

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.list_url}>"

    @abstractmethod
    def parse_items(self, soup: BeautifulSoup) -> List[Item]:
        """從列表頁擷取公告"""
        ...

    async def fetch_items(self) -> List[Item]:
        """抓取列表頁並回傳公告（順序與頁面一致）"""
        logger.info(f"Fetching announcements from {self.source_name} ({self.list_url})")

        soup = await fetch_page(self.client, self.list_url)
        items = self.parse_items(soup)
        logger.info(f"Fetched {len(items)} announcements from {self.source_name}")
        return items

    def is_valid_item(self, item: Optional[Item]) -> bool:
        return bool(item and item.title and item.url)
