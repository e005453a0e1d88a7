from __future__ import annotations

from collections import OrderedDict
from datetime import date, datetime
from typing import Iterator, Optional

from loguru import logger

from src.crawlers.base import Item
from src.crawlers.utils import parse_date


def start_of_today(now: Optional[datetime] = None) -> date:
    """Cutoff for the process: items dated before today are never sent."""
    return (now or datetime.now()).date()


class SeenSet:
    """URLs already handled by this process, in insertion order.

    With ``max_size`` 0 the set only grows. A positive ``max_size`` evicts the
    oldest URLs first, which can let a very old URL through again if a source
    still lists it; the date cutoff normally catches those.
    """

    def __init__(self, max_size: int = 0):
        self.max_size = max_size
        self._urls: "OrderedDict[str, None]" = OrderedDict()

    def __contains__(self, url: object) -> bool:
        return url in self._urls

    def __len__(self) -> int:
        return len(self._urls)

    def __iter__(self) -> Iterator[str]:
        return iter(self._urls)

    def add(self, url: str) -> None:
        if url in self._urls:
            return
        self._urls[url] = None
        if self.max_size and len(self._urls) > self.max_size:
            evicted, _ = self._urls.popitem(last=False)
            logger.debug(f"Seen set full, evicted {evicted}")


def is_stale(item: Item, cutoff: date) -> bool:
    item_date = parse_date(item.date)
    if item_date is None:
        logger.debug(f"Unparseable date {item.date!r} for {item.url}, keeping it")
        return False
    return item_date < cutoff


def should_dispatch(item: Item, cutoff: date, seen: SeenSet) -> bool:
    """True when the item is from today or later and not handled yet."""
    if is_stale(item, cutoff):
        return False
    return item.url not in seen
