from unittest.mock import AsyncMock, patch

import pytest

from src.crawlers.base import Item
from src.retry import RetryResult
from src.scheduler.rotation import BatchRotation

IDLE = 3600


def item(url: str) -> Item:
    return Item(title=f"title {url}", url=url, date="2024-05-01")


def ok(*urls):
    return RetryResult(ok=True, value=[item(url) for url in urls], attempts=1)


def failed():
    return RetryResult(ok=False, error=RuntimeError("down"), attempts=3)


async def take(rotation: BatchRotation, count: int):
    stream = rotation.stream()
    urls = []
    async for entry in stream:
        urls.append(entry.url)
        if len(urls) == count:
            break
    await stream.aclose()
    return urls


class TestBatchRotation:
    def test_requires_providers(self):
        with pytest.raises(ValueError):
            BatchRotation([], IDLE)

    @pytest.mark.asyncio
    async def test_buffered_batch_is_drained_before_next_source(self):
        source_a = AsyncMock(return_value=ok("a1", "a2"))
        source_b = AsyncMock(return_value=ok("b1"))
        rotation = BatchRotation([source_a, source_b], IDLE)

        with patch("src.scheduler.rotation.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            urls = await take(rotation, 3)

        assert urls == ["a1", "a2", "b1"]
        assert source_a.await_count == 1
        assert source_b.await_count == 1
        mock_sleep.assert_not_called()

    @pytest.mark.asyncio
    async def test_sleeps_once_per_rotation_then_repolls(self):
        source_a = AsyncMock(return_value=ok("a1", "a2"))
        source_b = AsyncMock(return_value=ok("b1"))
        rotation = BatchRotation([source_a, source_b], IDLE)

        with patch("src.scheduler.rotation.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            urls = await take(rotation, 6)

        assert urls == ["a1", "a2", "b1", "a1", "a2", "b1"]
        mock_sleep.assert_awaited_once_with(IDLE)
        assert source_a.await_count == 2
        assert source_b.await_count == 2

    @pytest.mark.asyncio
    async def test_strict_rotation_order(self):
        sources = [AsyncMock(return_value=ok(f"s{i}")) for i in range(3)]
        rotation = BatchRotation(sources, IDLE)

        with patch("src.scheduler.rotation.asyncio.sleep", new_callable=AsyncMock):
            urls = await take(rotation, 6)

        assert urls == ["s0", "s1", "s2", "s0", "s1", "s2"]

    @pytest.mark.asyncio
    async def test_empty_rotation_suspends_then_resumes(self):
        source_a = AsyncMock(side_effect=[ok(), ok("a1")])
        source_b = AsyncMock(side_effect=[ok(), ok("b1")])
        rotation = BatchRotation([source_a, source_b], IDLE)

        with patch("src.scheduler.rotation.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            urls = await take(rotation, 2)

        assert urls == ["a1", "b1"]
        mock_sleep.assert_awaited_once_with(IDLE)

    @pytest.mark.asyncio
    async def test_failing_source_is_polled_every_rotation(self):
        broken = AsyncMock(return_value=failed())
        healthy = AsyncMock(return_value=ok("h1"))
        rotation = BatchRotation([broken, healthy], IDLE)

        with patch("src.scheduler.rotation.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            urls = await take(rotation, 3)

        assert urls == ["h1", "h1", "h1"]
        assert broken.await_count == 3
        assert mock_sleep.await_count == 2

    @pytest.mark.asyncio
    async def test_index_advances_on_failed_fetch(self):
        broken = AsyncMock(return_value=failed())
        healthy = AsyncMock(return_value=ok("h1", "h2"))
        third = AsyncMock(return_value=ok("t1"))
        rotation = BatchRotation([broken, healthy, third], IDLE)

        with patch("src.scheduler.rotation.asyncio.sleep", new_callable=AsyncMock):
            urls = await take(rotation, 1)

        assert urls == ["h1"]
        assert rotation.index == 2
        assert [entry.url for entry in rotation.buffer] == ["h2"]
        third.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_async_iteration_protocol(self):
        rotation = BatchRotation([AsyncMock(return_value=ok("x1", "x2"))], IDLE)

        urls = []
        with patch("src.scheduler.rotation.asyncio.sleep", new_callable=AsyncMock):
            async for entry in rotation:
                urls.append(entry.url)
                if len(urls) == 2:
                    break

        assert urls == ["x1", "x2"]
