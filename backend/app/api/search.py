from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Header, Query, Request, Response, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.services.cache_store import RestCacheStore
from app.services.errors import SearchError
from app.services.request_validator import validate_search_params
from app.services.search_service import SearchService
from app.services.x_client import XSearchClient

logger = logging.getLogger(__name__)

router = APIRouter()

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}
ROUTED_METHODS = ["GET", "OPTIONS", "HEAD", "POST", "PUT", "PATCH", "DELETE"]


def get_search_service() -> SearchService:
    return SearchService(
        client=XSearchClient(base_url=settings.x_api_base_url, page_size=settings.x_page_size),
        cache_store=RestCacheStore(settings.cache_store_config()),
        caching_enabled=settings.enable_search_cache,
        cache_ttl_seconds=settings.cache_ttl_seconds,
        cache_namespace=settings.cache_namespace,
        cache_key_version=settings.cache_key_version,
    )


def _json(status_code: int, content: dict[str, Any]) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=content, headers=CORS_HEADERS)


async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException) -> Response:
    """Give methods the router never matched on /search the same 405 body and CORS headers."""
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED and request.url.path.rstrip("/").endswith("/search"):
        return _json(status.HTTP_405_METHOD_NOT_ALLOWED, {"error": "Method not allowed"})
    return await http_exception_handler(request, exc)


@router.api_route("/search", methods=ROUTED_METHODS)
async def search(
    request: Request,
    keywords: str | None = Query(default=None),
    hours: str | None = Query(default=None),
    lang: str | None = Query(default="tr"),
    max_results: str | None = Query(default="10", alias="max"),
    authorization: str | None = Header(default=None),
    service: SearchService = Depends(get_search_service),
) -> Response:
    if request.method == "OPTIONS":
        return Response(status_code=status.HTTP_204_NO_CONTENT, headers=CORS_HEADERS)
    if request.method != "GET":
        return _json(status.HTTP_405_METHOD_NOT_ALLOWED, {"error": "Method not allowed"})

    try:
        search_request = validate_search_params(keywords, hours, lang, max_results, authorization)
        result = await service.search(search_request)
    except SearchError as exc:
        return _json(exc.status_code, exc.to_body())
    except Exception as exc:
        logger.exception("Search request failed")
        return _json(status.HTTP_500_INTERNAL_SERVER_ERROR, {"error": "Server error", "details": str(exc)})

    exclude = {"cache"} if result.cache is None else None
    return _json(status.HTTP_200_OK, result.model_dump(mode="json", exclude=exclude))
