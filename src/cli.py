import argparse
import asyncio

from loguru import logger

from src.config import get_settings
from src.logging_config import setup_logging
from src.scheduler.jobs import crawl_once
from src.scheduler.runner import CRAWLERS

settings = get_settings()


def run_crawler(source: str = None):
    """抓取一次所有來源並列出公告"""
    items = asyncio.run(crawl_once(source))
    for item in items:
        print(f"{item.date}  {item.title} <{item.url}>")


def main():
    parser = argparse.ArgumentParser(description="Announcement watcher CLI")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # run command
    subparsers.add_parser("run", help="Watch sources and notify subscribers")

    # crawl command
    crawl_parser = subparsers.add_parser("crawl", help="Fetch sources once")
    crawl_parser.add_argument(
        "--source", "-s", choices=sorted(CRAWLERS), help="Source code (e.g., eea)"
    )

    args = parser.parse_args()
    setup_logging(settings.environment, settings.log_level)

    if args.command == "crawl":
        run_crawler(args.source)
    else:
        from src.main import main as watch

        try:
            asyncio.run(watch())
        except KeyboardInterrupt:
            logger.info("Interrupted")


if __name__ == "__main__":
    main()
