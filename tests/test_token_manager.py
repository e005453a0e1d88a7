import asyncio
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from src.notifications.token import AccessTokenManager
from src.notifications.wechat import WeChatAPIError


def make_manager(handler) -> AccessTokenManager:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return AccessTokenManager(client)


@pytest.mark.asyncio
async def test_wait_ready_returns_first_token():
    def handler(request):
        assert request.url.path == "/cgi-bin/token"
        assert request.url.params["grant_type"] == "client_credential"
        return httpx.Response(200, json={"access_token": "T1", "expires_in": 7200})

    manager = make_manager(handler)
    try:
        token = await manager.wait_ready()
    finally:
        await manager.stop()

    assert token == "T1"
    assert manager.current_token == "T1"


@pytest.mark.asyncio
async def test_wait_ready_raises_provider_error():
    manager = make_manager(
        lambda request: httpx.Response(200, json={"errcode": 40013, "errmsg": "invalid appid"})
    )
    with pytest.raises(WeChatAPIError) as exc_info:
        await manager.wait_ready()
    await manager.stop()

    assert exc_info.value.errcode == 40013
    assert manager.current_token == ""


@pytest.mark.asyncio
async def test_wait_ready_raises_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused")

    manager = make_manager(handler)
    with pytest.raises(httpx.ConnectError):
        await manager.wait_ready()
    await manager.stop()


@pytest.mark.asyncio
async def test_refresh_failure_keeps_previous_token():
    manager = make_manager(lambda request: httpx.Response(500))
    manager.fetch_token = AsyncMock(
        side_effect=[("T1", 7200), RuntimeError("timeout"), ("T2", 7200)]
    )
    seen_tokens = []

    async def fake_sleep(delay):
        seen_tokens.append(manager.current_token)
        if len(seen_tokens) == 3:
            raise asyncio.CancelledError

    with patch("src.notifications.token.asyncio.sleep", side_effect=fake_sleep) as mock_sleep:
        with pytest.raises(asyncio.CancelledError):
            await manager._refresh_loop()

    # refreshed 300s before expiry, 60s backoff after the failed refresh
    assert [c.args[0] for c in mock_sleep.call_args_list] == [6900, 60, 6900]
    assert seen_tokens == ["T1", "T1", "T2"]
    assert manager.current_token == "T2"
