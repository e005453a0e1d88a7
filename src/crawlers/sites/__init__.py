from src.crawlers.sites.eea import EeaCrawler
from src.crawlers.sites.szu import SzuCrawler

__all__ = [
    "EeaCrawler",
    "SzuCrawler",
]
