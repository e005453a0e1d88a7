from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

import httpx
from loguru import logger

from src.config import get_settings

USER_GET_PATH = "/cgi-bin/user/get"
TEMPLATE_SEND_PATH = "/cgi-bin/message/template/send"


class WeChatAPIError(Exception):
    """Application-level error reported by the WeChat API."""

    def __init__(self, errcode: int, errmsg: str):
        super().__init__(f"WeChat API error {errcode}: {errmsg}")
        self.errcode = errcode
        self.errmsg = errmsg


@dataclass
class SendResult:
    errcode: int = 0
    errmsg: str = "ok"

    @property
    def ok(self) -> bool:
        return self.errcode == 0


class WeChatSender:
    """Send template messages through a WeChat official account."""

    def __init__(self, client: httpx.AsyncClient):
        settings = get_settings()
        self.client = client
        self.api_base = settings.wechat_api_base.rstrip("/")

    @classmethod
    def is_configured(cls) -> bool:
        """Check if WeChat credentials and template are set."""
        settings = get_settings()
        return bool(
            settings.wechat_app_id
            and settings.wechat_app_secret
            and settings.wechat_template_id
        )

    async def get_subscribers(self, token: str) -> List[str]:
        """Return the openids of the account's followers (first page only).

        Raises:
            WeChatAPIError: if the API reports a non-zero errcode.
            httpx.HTTPError: on transport errors or non-2xx status.
        """
        response = await self.client.get(
            f"{self.api_base}{USER_GET_PATH}", params={"access_token": token}
        )
        response.raise_for_status()
        body = response.json()

        errcode = body.get("errcode", 0)
        if errcode:
            raise WeChatAPIError(errcode, body.get("errmsg", ""))

        # 無關注者時 API 不回傳 data 欄位
        return list(body.get("data", {}).get("openid", []))

    async def send_template(
        self, token: str, openid: str, payload: Dict[str, Any]
    ) -> SendResult:
        """Send one template message to ``openid``.

        A non-zero errcode is returned, not raised; the caller decides.
        """
        message = {**payload, "touser": openid}
        response = await self.client.post(
            f"{self.api_base}{TEMPLATE_SEND_PATH}",
            params={"access_token": token},
            json=message,
        )
        if response.status_code != 200:
            raise httpx.HTTPStatusError(
                f"Unsupported status code: {response.status_code}",
                request=response.request,
                response=response,
            )

        body = response.json()
        result = SendResult(
            errcode=body.get("errcode", 0), errmsg=body.get("errmsg", "ok")
        )
        if result.ok:
            logger.debug(f"Template message sent to {openid}")
        return result
