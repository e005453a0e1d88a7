from __future__ import annotations

import asyncio
from typing import AsyncIterator, Awaitable, Callable, List, Sequence

from loguru import logger

from src.crawlers.base import Item
from src.retry import RetryResult

Provider = Callable[[], Awaitable[RetryResult[List[Item]]]]


class BatchRotation:
    """Merges several sources into one endless stream of items.

    Sources are visited strictly in order. A fetched batch is drained before
    the next source is fetched, so each source's page order is kept. Once the
    last source's batch has been drained the stream sleeps for
    ``idle_interval`` seconds and starts over from the first source.

    A failed fetch counts as an empty batch; the source is polled again on the
    next rotation.
    """

    def __init__(self, providers: Sequence[Provider], idle_interval: float):
        if not providers:
            raise ValueError("BatchRotation needs at least one provider")
        self.providers = list(providers)
        self.idle_interval = idle_interval
        self.buffer: List[Item] = []
        self.index = 0

    def __aiter__(self) -> AsyncIterator[Item]:
        return self.stream()

    async def stream(self) -> AsyncIterator[Item]:
        while True:
            if not self.buffer:
                result = await self.providers[self.index]()
                self.buffer = list(result.unwrap_or([]))
                # 每次嘗試抓取都前進，不論成功與否
                self.index = (self.index + 1) % len(self.providers)

            if self.buffer:
                yield self.buffer.pop(0)

            if not self.buffer and self.index == 0:
                logger.info(
                    f"Rotation over {len(self.providers)} sources finished, "
                    f"sleeping {self.idle_interval}s"
                )
                await asyncio.sleep(self.idle_interval)
