from __future__ import annotations

import asyncio
from typing import Optional

import httpx
from loguru import logger

from src.config import get_settings
from src.notifications.wechat import WeChatAPIError

TOKEN_PATH = "/cgi-bin/token"
MIN_REFRESH_DELAY = 60  # seconds
FAILURE_BACKOFF_MAX = 300  # seconds


class AccessTokenManager:
    """Keeps a WeChat access token fresh in the background.

    The token is the only shared mutable state between the refresher task and
    the dispatcher; it is replaced wholesale and read through ``current_token``.
    """

    def __init__(self, client: httpx.AsyncClient):
        settings = get_settings()
        self.client = client
        self.api_base = settings.wechat_api_base.rstrip("/")
        self.app_id = settings.wechat_app_id
        self.app_secret = settings.wechat_app_secret
        self.refresh_margin = settings.token_refresh_margin

        self._token: str = ""
        self._ready = asyncio.Event()
        self._error: Optional[BaseException] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def current_token(self) -> str:
        return self._token

    async def fetch_token(self) -> tuple[str, int]:
        """Request a new token; returns ``(access_token, expires_in)``."""
        response = await self.client.get(
            f"{self.api_base}{TOKEN_PATH}",
            params={
                "grant_type": "client_credential",
                "appid": self.app_id,
                "secret": self.app_secret,
            },
        )
        response.raise_for_status()
        body = response.json()

        errcode = body.get("errcode", 0)
        if errcode or "access_token" not in body:
            raise WeChatAPIError(errcode, body.get("errmsg", "no access_token in response"))

        return body["access_token"], int(body.get("expires_in", 7200))

    def _set_token(self, token: str) -> None:
        self._token = token
        self._ready.set()
        logger.info("WeChat access token updated")

    async def _refresh_loop(self) -> None:
        failures = 0
        while True:
            try:
                token, expires_in = await self.fetch_token()
            except Exception as e:
                if not self._ready.is_set():
                    # 尚未取得任何 token，交由 wait_ready() 決定是否中止
                    self._error = e
                    self._ready.set()
                    return
                failures += 1
                delay = min(MIN_REFRESH_DELAY * 2 ** (failures - 1), FAILURE_BACKOFF_MAX)
                logger.error(f"Access token refresh failed ({e}); retrying in {delay}s")
                await asyncio.sleep(delay)
                continue

            failures = 0
            self._set_token(token)
            await asyncio.sleep(max(expires_in - self.refresh_margin, MIN_REFRESH_DELAY))

    def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._refresh_loop(), name="token-refresh")

    async def wait_ready(self) -> str:
        """Block until the first token arrives.

        Raises the provider error if one happened before any token was obtained.
        """
        self.start()
        await self._ready.wait()
        if self._error is not None:
            raise self._error
        return self._token

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
