"""Prefetch Routes - 검색 컨텍스트 미리 받기"""

import asyncio
from typing import Optional

from fastapi import APIRouter, Depends, Response

from src.api.routes.resolve_routes import get_cache_service, get_search_client
from src.core.config import settings
from src.core.exceptions import PropertyResolverException, SearchApiException, ValidationException
from src.core.logging import logger
from src.core.security import SecurityValidator
from src.engine import CacheAdapter, get_deferred_writer
from src.schemas.property_schema import PrefetchData, PrefetchRequest, PrefetchResponse
from src.services.impl.cache_service import CacheService
from src.services.impl.context_prefetch_service import ContextPrefetchService
from src.services.impl.search_api_client import SearchApiClient, SearchParams
from src.utils.query_params import normalize_currency, normalize_travel_hl

router = APIRouter(prefix="/api/v1", tags=["property"])

_prefetch_service: Optional[ContextPrefetchService] = None


def get_prefetch_service(
    cache_service: CacheService = Depends(get_cache_service),
    search_client: SearchApiClient = Depends(get_search_client),
) -> ContextPrefetchService:
    """ContextPrefetchService 싱글톤"""
    global _prefetch_service
    if _prefetch_service is None:
        _prefetch_service = ContextPrefetchService(
            cache=CacheAdapter(cache_service),
            search_client=search_client,
            deferred=get_deferred_writer(),
        )
    return _prefetch_service


def _error(response: Response, http_status: int, message: str, error_code: str) -> PrefetchResponse:
    response.status_code = http_status
    return PrefetchResponse(status="error", data=None, message=message, error_code=error_code)


@router.post("/property/prefetch-ctx", response_model=PrefetchResponse)
async def prefetch_context(
    request: PrefetchRequest,
    response: Response,
    service: ContextPrefetchService = Depends(get_prefetch_service),
):
    """검색 컨텍스트 prefetch API

    같은 (지역, 언어, 호텔명, 날짜, 인원, 통화)로 이미 저장된 컨텍스트가 있으면
    SearchApi를 호출하지 않고 cache="hit"을 반환합니다.
    """
    try:
        SecurityValidator.validate_query(request.hotel_name)
    except ValidationException as e:
        logger.warning(f"[API] Input validation failed: {e}")
        return _error(response, 400, f"입력 검증 실패: {e.message}", e.error_code)

    travel_hl = normalize_travel_hl(request.hl)
    params = SearchParams(
        q=request.hotel_name,
        check_in=request.check_in,
        check_out=request.check_out,
        adults=request.adults,
        currency=normalize_currency(request.currency) or settings.default_currency,
        gl=(request.gl or settings.default_region).strip().lower(),
        hl=travel_hl.sent,
    )

    try:
        outcome = await asyncio.wait_for(
            service.prefetch(params, hl_key=travel_hl.key, refresh=request.refresh),
            timeout=settings.api_resolve_timeout_s,
        )
    except asyncio.TimeoutError:
        logger.error("[API] Prefetch timeout")
        return _error(response, 504, "컨텍스트 조회 시간이 초과되었습니다.", "TIMEOUT")
    except SearchApiException as e:
        logger.warning(f"[API] Prefetch upstream failed: {e}")
        return _error(response, 502, "SearchApi 호출에 실패했습니다.", "SEARCH_FAILED")
    except PropertyResolverException as e:
        logger.error(f"[API] Prefetch failed: {e}")
        return _error(response, 500, "서버 설정 또는 캐시 오류가 발생했습니다.", e.error_code)

    return PrefetchResponse(
        status="success",
        data=PrefetchData(ctx_id=outcome.ctx_id, count=outcome.count, cache=outcome.cache),
        message="검색 컨텍스트를 준비했습니다.",
        error_code=None,
    )
