from __future__ import annotations

import base64
from typing import Iterable

DEFAULT_NAMESPACE = "xAnalytics"
DEFAULT_VERSION = "v1"


def normalize_keywords(keywords: Iterable[str]) -> str:
    normalized = (keyword.strip().lower() for keyword in keywords)
    return ",".join(sorted(keyword for keyword in normalized if keyword))


def build_cache_key(
    keywords: Iterable[str],
    window_hours: int,
    lang: str,
    namespace: str = DEFAULT_NAMESPACE,
    version: str = DEFAULT_VERSION,
) -> str:
    # No credential input: callers with equal visible parameters share one entry.
    encoded = base64.b64encode(normalize_keywords(keywords).encode("utf-8")).decode("ascii")
    return f"{namespace}:{version}:{window_hours}:{lang}:{encoded}"
