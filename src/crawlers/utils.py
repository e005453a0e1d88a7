import random
import re
from datetime import date, datetime
from typing import Optional

import httpx
from bs4 import BeautifulSoup

USER_AGENTS = [
    (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.0 Safari/605.1.15"
    ),
]

_DATE_PATTERN = re.compile(r"(\d{4})[-/.年](\d{1,2})[-/.月](\d{1,2})")


def get_random_headers() -> dict:
    return {
        "User-Agent": random.choice(USER_AGENTS),
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "zh-CN,zh;q=0.9,en-US;q=0.8,en;q=0.7",
    }


async def fetch_page(client: httpx.AsyncClient, url: str) -> BeautifulSoup:
    """GET a listing page and parse it.

    Raises on transport errors and non-2xx statuses; retrying is up to the
    caller.
    """
    response = await client.get(url, headers=get_random_headers())
    response.raise_for_status()
    return BeautifulSoup(response.text, "lxml")


def clean_text(text: str) -> str:
    """清理文字，移除多餘空白和雜訊字元"""
    if not text:
        return ""

    text = re.sub(r"[\r\n\t]+", " ", text)
    text = re.sub(r"\s+", " ", text)
    return text.strip()


def extract_date(text: str) -> Optional[str]:
    """Return the first date in ``text`` normalized to YYYY-MM-DD."""
    if not text:
        return None

    match = _DATE_PATTERN.search(text)
    if not match:
        return None

    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return None


def parse_date(text: str) -> Optional[date]:
    """Parse an item date string; None when it is not a calendar date."""
    normalized = extract_date(text)
    if normalized is None:
        return None
    return datetime.strptime(normalized, "%Y-%m-%d").date()
