from __future__ import annotations

import math

from app.schemas.search import SearchRequest
from app.services.errors import InvalidWindow, MissingCredential, MissingKeywords, NoValidKeywords

ALLOWED_WINDOW_HOURS = (1, 3, 6, 12, 24)
MAX_KEYWORDS = 60
DEFAULT_MAX_RESULTS = 10
MIN_MAX_RESULTS = 1
MAX_MAX_RESULTS = 50
BEARER_PREFIX = "bearer "


def _to_number(raw: str | None) -> float:
    if raw is None:
        return math.nan
    text = str(raw).strip()
    if not text:
        return 0.0
    try:
        return float(text)
    except ValueError:
        return math.nan


def parse_keywords(raw: str | None) -> list[str]:
    if raw is None:
        return []
    keywords = [part.strip() for part in str(raw).split(",")]
    return [keyword for keyword in keywords if keyword][:MAX_KEYWORDS]


def parse_window_hours(raw: str | None) -> int:
    value = _to_number(raw)
    for hours in ALLOWED_WINDOW_HOURS:
        if value == hours:
            return hours
    raise InvalidWindow()


def parse_max_results(raw: str | None) -> int:
    value = _to_number(raw)
    if not math.isfinite(value):
        return DEFAULT_MAX_RESULTS
    return int(min(max(value, MIN_MAX_RESULTS), MAX_MAX_RESULTS))


def normalize_lang(raw: str | None) -> str:
    return "en" if str(raw or "").lower() == "en" else "tr"


def parse_credential(authorization: str | None) -> str:
    header = authorization or ""
    if not header.lower().startswith(BEARER_PREFIX):
        raise MissingCredential()
    return header


def validate_search_params(
    keywords: str | None,
    hours: str | None,
    lang: str | None = "tr",
    max_results: str | None = "10",
    authorization: str | None = None,
) -> SearchRequest:
    """Turn raw query parameters and the Authorization header into a SearchRequest.

    Checks run in a fixed order (keywords present, window, page size,
    credential, usable keywords) so the first failure decides the status code.
    """
    if not keywords:
        raise MissingKeywords()

    window_hours = parse_window_hours(hours)
    limit = parse_max_results(max_results)
    credential = parse_credential(authorization)

    keyword_list = parse_keywords(keywords)
    if not keyword_list:
        raise NoValidKeywords()

    return SearchRequest(
        keywords=keyword_list,
        window_hours=window_hours,
        lang=normalize_lang(lang),
        max_results=limit,
        credential=credential,
    )
