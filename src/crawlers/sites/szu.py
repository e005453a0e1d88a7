from typing import List
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from loguru import logger

from src.crawlers.base import BaseCrawler, CrawlerError, Item
from src.crawlers.utils import clean_text, extract_date

ROW_SELECTOR = "#content .articles ul li"
BULLET = "•"


class SzuCrawler(BaseCrawler):
    """深圳大學計算機與軟件學院自考通告列表頁"""

    source_name = "深圳大學"
    source_code = "szu"

    def parse_items(self, soup: BeautifulSoup) -> List[Item]:
        rows = soup.select(ROW_SELECTOR)
        if not rows:
            raise CrawlerError(f"No announcement rows found on {self.list_url}")

        items = []
        for row in rows:
            link = row.find("a")
            if link is None or not link.get("href"):
                continue

            # 連結為站內路徑，需與列表頁網域組合
            date_tag = row.select_one("span.datetime")
            date = extract_date(date_tag.get_text()) if date_tag else None
            if date is None:
                logger.warning(f"Row without a date on {self.list_url}: {link.get_text()!r}")
                continue

            item = Item(
                title=clean_text(link.get_text().replace(BULLET, "")),
                url=urljoin(self.list_url, link["href"]),
                date=date,
            )
            if self.is_valid_item(item):
                items.append(item)

        return items
