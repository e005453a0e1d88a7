from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Environment
    environment: str = "development"  # "development" or "production"
    log_level: str = "INFO"

    # WeChat official account
    wechat_app_id: str = ""
    wechat_app_secret: str = ""
    wechat_template_id: str = ""
    wechat_api_base: str = "https://api.weixin.qq.com"
    token_refresh_margin: int = 300

    # Notifications
    notification_enabled: bool = True
    title_color: str = "#23cdb6"

    # Sources
    # 廣東省教育考試院：普通高考、自學考試
    eea_list_urls: List[str] = [
        "https://eea.gd.gov.cn/ptgk/index.html",
        "https://eea.gd.gov.cn/zxks/index.html",
    ]
    # 深圳大學：考務通告、教務通告
    szu_list_urls: List[str] = [
        "https://csse.szu.edu.cn/zk/menu/29/list",
        "https://csse.szu.edu.cn/zk/menu/28/list",
    ]

    # Crawler
    http_timeout: int = 30
    retry_times: int = 3
    retry_base_delay: float = 0.5

    # Pacing (seconds)
    idle_interval: int = 60 * 60
    item_interval: int = 5
    recipient_interval: int = 1

    # 0 means the seen set is never evicted
    seen_max_size: int = 0

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    return Settings()
