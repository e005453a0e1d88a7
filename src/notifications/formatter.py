from __future__ import annotations

from typing import Any, Dict, Optional

from src.config import get_settings

# Template keyword colors
COLOR_TITLE = "#23cdb6"


def format_announcement(
    title: str, url: str, template_id: str, color: Optional[str] = None
) -> Dict[str, Any]:
    """Build the template-message body for one announcement.

    ``touser`` is filled in per recipient by the sender.
    """
    return {
        "template_id": template_id,
        "url": url,
        "data": {
            "title": {"value": title, "color": color or COLOR_TITLE},
        },
    }


def format_from_settings(title: str, url: str) -> Dict[str, Any]:
    settings = get_settings()
    return format_announcement(
        title, url, settings.wechat_template_id, settings.title_color
    )
