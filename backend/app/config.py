from __future__ import annotations

import os
from dataclasses import dataclass

from app.services.cache_store import CacheStoreConfig


@dataclass
class Settings:
    app_name: str = "Post Pulse"
    environment: str = os.getenv("ENV", "development")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    upstash_redis_rest_url: str = os.getenv("UPSTASH_REDIS_REST_URL", "")
    upstash_redis_rest_token: str = os.getenv("UPSTASH_REDIS_REST_TOKEN", "")
    enable_search_cache: bool = os.getenv("ENABLE_SEARCH_CACHE", "true").lower() == "true"
    cache_ttl_seconds: int = int(os.getenv("CACHE_TTL_SECONDS", "600"))
    cache_namespace: str = os.getenv("CACHE_NAMESPACE", "xAnalytics")
    cache_key_version: str = os.getenv("CACHE_KEY_VERSION", "v1")
    x_api_base_url: str = os.getenv("X_API_BASE_URL", "https://api.x.com")
    x_page_size: int = int(os.getenv("X_PAGE_SIZE", "10"))

    def cache_store_config(self) -> CacheStoreConfig:
        return CacheStoreConfig(
            base_url=self.upstash_redis_rest_url.rstrip("/"),
            token=self.upstash_redis_rest_token,
        )


settings = Settings()
