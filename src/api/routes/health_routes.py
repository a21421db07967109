"""헬스 체크 엔드포인트"""
from fastapi import APIRouter, Depends
from datetime import datetime

from src.schemas.property_schema import HealthResponse
from src.services.impl.cache_service import CacheService
from src.api.routes.resolve_routes import get_cache_service
from src.core.exceptions import CacheConnectionException
from src.core.logging import logger
from src import __version__

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(cache_service: CacheService = Depends(get_cache_service)):
    """
    헬스 체크 엔드포인트

    - 서버 상태
    - Redis 연결 상태
    """
    try:
        redis_ok = cache_service.health_check()
    except CacheConnectionException as e:
        logger.warning(f"Cache connection failed: {e.error_code}")
        redis_ok = False

    return HealthResponse(
        status="ok" if redis_ok else "error",
        timestamp=datetime.now(),
        version=__version__
    )


@router.get("/")
async def root():
    """루트 엔드포인트"""
    return {
        "service": "property token resolver",
        "version": __version__,
        "docs": "/docs"
    }
