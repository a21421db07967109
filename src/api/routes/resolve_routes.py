"""Resolve Routes (Engine Layer)

HTTP Layer가 Engine Layer(PropertyResolver)로 요청을 위임하는 단순한 Translator 역할만 수행합니다.
"""

import asyncio
from typing import Optional

from fastapi import APIRouter, Depends, Response

from src.core.config import settings
from src.core.exceptions import PropertyResolverException, ValidationException
from src.core.logging import logger
from src.core.security import SecurityValidator
from src.engine import (
    CacheAdapter,
    PropertyResolver,
    ResolutionResult,
    ResolutionStatus,
    ResolveQuery,
    get_deferred_writer,
)
from src.schemas.property_schema import (
    CandidateSummary,
    PropertyMatchData,
    ResolveRequest,
    ResolveResponse,
)
from src.services.impl.cache_service import CacheService
from src.services.impl.search_api_client import SearchApiClient
from src.utils.query_params import normalize_currency, normalize_travel_hl
from src.utils.url_utils import extract_booking_listing, get_host_no_www

router = APIRouter(prefix="/api/v1", tags=["property"])

# 싱글톤 서비스
_cache_service: Optional[CacheService] = None
_search_client: Optional[SearchApiClient] = None
_resolver: Optional[PropertyResolver] = None


def get_cache_service() -> CacheService:
    """CacheService 싱글톤"""
    global _cache_service
    if _cache_service is None:
        _cache_service = CacheService()
    return _cache_service


def get_search_client() -> SearchApiClient:
    """SearchApiClient 싱글톤"""
    global _search_client
    if _search_client is None:
        _search_client = SearchApiClient()
    return _search_client


def get_resolver(
    cache_service: CacheService = Depends(get_cache_service),
    search_client: SearchApiClient = Depends(get_search_client),
) -> PropertyResolver:
    """PropertyResolver 싱글톤

    Engine Layer의 진입점을 제공합니다.
    """
    global _resolver
    if _resolver is None:
        _resolver = PropertyResolver(
            cache=CacheAdapter(cache_service),
            search_client=search_client,
            deferred=get_deferred_writer(),
        )
    return _resolver


def build_resolve_query(request: ResolveRequest) -> ResolveQuery:
    """요청 파라미터 정규화 → ResolveQuery"""
    travel_hl = normalize_travel_hl(request.hl)
    booking_cc, booking_slug = extract_booking_listing(request.booking_url) or (None, None)
    return ResolveQuery(
        hotel_name=request.hotel_name,
        check_in=request.check_in,
        check_out=request.check_out,
        adults=request.adults,
        currency=normalize_currency(request.currency) or settings.default_currency,
        region=(request.gl or settings.default_region).strip().lower(),
        hl=travel_hl.sent,
        official_domain=get_host_no_www(request.official_url) or None,
        booking_slug=booking_slug,
        booking_cc=booking_cc,
        ctx_id=request.ctx,
        refresh=request.refresh,
    )


def _error(response: Response, http_status: int, message: str, error_code: str) -> ResolveResponse:
    response.status_code = http_status
    return ResolveResponse(status="error", data=None, message=message, error_code=error_code)


@router.post("/property/resolve", response_model=ResolveResponse)
async def resolve_property(
    request: ResolveRequest,
    response: Response,
    resolver: PropertyResolver = Depends(get_resolver),
):
    """property_token 해석 API

    HTTP → Engine → ctx/domain/slug/name 캐시 → 실시간 검색 순서로 실행

    Flow:
        1. HTTP Request 수신 (보안 검증)
        2. 파라미터 정규화 (언어/통화/도메인/슬러그)
        3. Engine에 위임
        4. 결과를 HTTP Response로 변환
    """
    try:
        SecurityValidator.validate_query(request.hotel_name)
        for url in (request.official_url, request.booking_url):
            if url:
                SecurityValidator.validate_url(url)
    except ValidationException as e:
        logger.warning(f"[API] Input validation failed: {e}")
        return _error(response, 400, f"입력 검증 실패: {e.message}", e.error_code)

    logger.info(f"[API] Resolve request: hotel_name#{SecurityValidator.hash_input(request.hotel_name)}")
    query = build_resolve_query(request)

    try:
        result = await asyncio.wait_for(
            resolver.resolve(query),
            timeout=settings.api_resolve_timeout_s,
        )
    except asyncio.TimeoutError:
        logger.error(f"[API] Timeout: query='{query.hotel_name}'")
        return _error(response, 504, "해석 시간이 초과되었습니다. 잠시 후 다시 시도해주세요.", "TIMEOUT")
    except PropertyResolverException as e:
        logger.error(f"[API] Resolve failed: {e}")
        return _error(response, 500, "서버 설정 또는 캐시 오류가 발생했습니다.", e.error_code)

    if result.status == ResolutionStatus.NO_PROPERTY:
        return _error(response, 404, "호텔에 해당하는 property_token을 찾지 못했습니다.", "NO_PROPERTY_FOUND")
    if result.status == ResolutionStatus.UPSTREAM_FAILED:
        return _error(response, 502, "SearchApi 호출에 실패했습니다.", "SEARCH_FAILED")

    return ResolveResponse(
        status="success",
        data=_to_match_data(result, debug=request.debug),
        message="property_token을 찾았습니다." if not result.match_uncertain else "매칭이 불확실합니다. 후보를 확인하세요.",
        error_code=None,
    )


def _to_match_data(result: ResolutionResult, debug: bool) -> PropertyMatchData:
    record = result.record
    candidates = None
    if result.match_uncertain and result.candidate_summary:
        candidates = [CandidateSummary(**c) for c in result.candidate_summary]

    return PropertyMatchData(
        property_token=record.property_token,
        property_name=record.property_name,
        city=record.city,
        country=record.country,
        link=record.link,
        confidence=record.confidence,
        matched_by=result.matched_by,
        match_uncertain=result.match_uncertain,
        cache=result.cache_detail.value,
        search_calls=result.search_calls,
        candidates=candidates,
        match_details=result.match_details if debug else None,
        trace=result.trace if debug else None,
    )
