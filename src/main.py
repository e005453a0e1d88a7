import asyncio

import httpx
from loguru import logger

from src.config import get_settings
from src.logging_config import setup_logging
from src.notifications.dispatcher import NotificationDispatcher
from src.notifications.token import AccessTokenManager
from src.notifications.wechat import WeChatSender
from src.scheduler.filters import SeenSet, start_of_today
from src.scheduler.jobs import watch_announcements
from src.scheduler.runner import build_crawlers, create_rotation

settings = get_settings()


async def main() -> None:
    logger.info("Starting up...")
    if not WeChatSender.is_configured():
        logger.warning("WeChat app id, secret or template id is not set")

    async with httpx.AsyncClient(timeout=settings.http_timeout) as client:
        token_manager = AccessTokenManager(client)
        try:
            # 取得 access token 之後才開始抓取，避免發送時 token 不可用
            try:
                await token_manager.wait_ready()
            except Exception as e:
                logger.critical(f"Could not obtain a WeChat access token: {e}")
                raise SystemExit(1) from e

            cutoff = start_of_today()
            logger.info(f"Watching announcements dated {cutoff} or later")

            dispatcher = NotificationDispatcher(
                WeChatSender(client), lambda: token_manager.current_token
            )
            rotation = create_rotation(build_crawlers(client))
            await watch_announcements(
                rotation, dispatcher, SeenSet(settings.seen_max_size), cutoff
            )
        finally:
            await token_manager.stop()
            logger.info("Shutting down...")


def run() -> None:
    setup_logging(settings.environment, settings.log_level)
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Interrupted")


if __name__ == "__main__":
    run()
