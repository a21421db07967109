"""Cache Adapter - typed records over the JSON cache service"""

from typing import Any, Optional

from pydantic import ValidationError

from src.core.exceptions import CacheException
from src.core.logging import logger
from src.schemas.property_schema import ContextRecord, TokenRecord
from src.services.impl.cache_service import CacheService


class CacheAdapter:
    """Cache 서비스 어댑터 (타입 안전 버전)

    CacheService(JSON KV)를 PropertyResolver가 기대하는 레코드 인터페이스로 변환합니다.
    캐시 장애는 로깅 후 미스로 취급합니다 (해석 자체를 막지 않음).
    """

    def __init__(self, cache_service: Optional[CacheService] = None):
        """
        Args:
            cache_service: CacheService 인스턴스 (없으면 내부 생성)
        """
        if cache_service is None:
            self.cache_service = CacheService()
        else:
            self.cache_service = cache_service

    async def _get_raw(self, key: str) -> Optional[Any]:
        try:
            return self.cache_service.get_json(key)
        except CacheException as e:
            logger.warning(f"Cache get failed: {e}")
            return None

    async def get_token_record(self, key: Optional[str]) -> Optional[TokenRecord]:
        """토큰 레코드 조회

        Returns:
            TokenRecord 또는 None (미존재/손상/토큰 없음)
        """
        if not key:
            return None

        raw = await self._get_raw(key)
        if not isinstance(raw, dict) or not raw.get("property_token"):
            return None

        try:
            return TokenRecord.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Cache data deserialization failed: key={key}, errors={e.error_count()}")
            return None

    async def get_context_record(self, key: Optional[str]) -> Optional[ContextRecord]:
        """검색 컨텍스트 조회

        Returns:
            ContextRecord 또는 None (미존재/손상)
        """
        if not key:
            return None

        raw = await self._get_raw(key)
        if not isinstance(raw, dict) or not isinstance(raw.get("properties"), list):
            return None

        try:
            return ContextRecord.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Context deserialization failed: key={key}, errors={e.error_count()}")
            return None

    async def put_json(self, key: str, value: Any, ttl_seconds: int) -> bool:
        """캐시 저장 (실패는 로깅만)"""
        try:
            return self.cache_service.set_json(key, value, ttl_seconds)
        except (CacheException, ValueError) as e:
            logger.warning(f"Cache set failed: {e}")
            return False

    async def put_token_record(self, key: str, record: TokenRecord, ttl_seconds: int) -> bool:
        return await self.put_json(key, record.model_dump(mode="json"), ttl_seconds)

    async def put_context_record(self, key: str, record: ContextRecord, ttl_seconds: int) -> bool:
        return await self.put_json(key, record.model_dump(mode="json"), ttl_seconds)
