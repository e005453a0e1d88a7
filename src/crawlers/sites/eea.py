from typing import List
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from loguru import logger

from src.crawlers.base import BaseCrawler, CrawlerError, Item
from src.crawlers.utils import clean_text

ROW_SELECTOR = ".main .content ul.list li"


class EeaCrawler(BaseCrawler):
    """廣東省教育考試院通告列表頁"""

    source_name = "廣東省教育考試院"
    source_code = "eea"

    def parse_items(self, soup: BeautifulSoup) -> List[Item]:
        rows = soup.select(ROW_SELECTOR)
        if not rows:
            raise CrawlerError(f"No announcement rows found on {self.list_url}")

        items = []
        for row in rows:
            link = row.find("a")
            if link is None or not link.get("href"):
                continue

            date_tag = row.select_one("span.time")
            item = Item(
                title=clean_text(link.get_text()),
                url=urljoin(self.list_url, link["href"]),
                date=clean_text(date_tag.get_text()) if date_tag else "",
            )
            if self.is_valid_item(item):
                items.append(item)
            else:
                logger.debug(f"Skipping incomplete row on {self.list_url}: {item}")

        return items
