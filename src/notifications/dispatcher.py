from __future__ import annotations

import asyncio
from typing import Callable

from loguru import logger

from src.config import get_settings
from src.notifications.formatter import format_from_settings
from src.notifications.wechat import WeChatSender
from src.retry import with_retry


class NotificationError(Exception):
    """A notify call could not reach every subscriber."""


class NotificationDispatcher:
    """Sends one announcement to every subscriber of the official account.

    Subscribers are notified one at a time with a pause in between; the
    template API rate-limits bursts per account.
    """

    def __init__(self, sender: WeChatSender, get_token: Callable[[], str]):
        self.sender = sender
        self.get_token = get_token
        self.settings = get_settings()
        self._get_subscribers = with_retry(
            self.sender.get_subscribers,
            times=self.settings.retry_times,
            base_delay=self.settings.retry_base_delay,
        )

    async def notify(self, title: str, url: str) -> int:
        """Notify all subscribers about one announcement.

        Returns:
            Number of template messages sent.

        Raises:
            NotificationError: if the subscriber list cannot be fetched or a
                send reports a non-zero errcode. Remaining subscribers are
                skipped.
        """
        if not self.settings.notification_enabled:
            logger.info(f"Notifications are disabled, skipping {url}")
            return 0

        result = await self._get_subscribers(self.get_token())
        if not result.ok:
            raise NotificationError(f"Could not fetch subscribers: {result.error}")

        subscribers = result.value
        if not subscribers:
            logger.warning("No subscribers to notify, follow the official account first")
            return 0

        payload = format_from_settings(title, url)
        sent = 0
        for i, openid in enumerate(subscribers):
            # token 可能在兩次發送之間被刷新，每次都重新讀取
            response = await self.sender.send_template(self.get_token(), openid, payload)
            if not response.ok:
                raise NotificationError(
                    f"Template send to {openid} failed: {response.errcode} {response.errmsg}"
                )
            sent += 1

            if i < len(subscribers) - 1:
                await asyncio.sleep(self.settings.recipient_interval)

        logger.info(f"Notified {sent} subscribers about {url}")
        return sent
