"""Redis 캐시 서비스 - JSON KV 저장만 담당"""
import json
from typing import Any, Optional
from redis import Redis
from redis.exceptions import RedisError

from src.core.config import settings
from src.core.logging import logger
from src.core.exceptions import (
    CacheConnectionException,
    CacheSerializationException,
)


class CacheService:
    """Redis 캐시 관리 서비스

    키 스키마(tok:/ctx:)는 호출자가 결정합니다. 이 클래스는 키를 해석하지 않습니다.
    """

    def __init__(self, redis_url: Optional[str] = None):
        """Redis 클라이언트 초기화"""
        try:
            self.redis_client = Redis.from_url(
                redis_url or settings.redis_url,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5
            )
            # 연결 테스트
            self.redis_client.ping()
            logger.info("Redis connection established")
        except Exception as e:
            logger.error(f"Failed to connect to Redis: {e}")
            raise CacheConnectionException(
                message="Redis connection failed",
                error_code="CACHE_CONN_FAILED",
                details={"reason": str(e)}
            )

    def get_json(self, key: str) -> Optional[Any]:
        """
        JSON 값 조회

        Args:
            key: 캐시 키

        Returns:
            역직렬화된 값 또는 None (미존재)

        Raises:
            CacheSerializationException: 저장된 값이 JSON이 아님
            CacheConnectionException: Redis 읽기 실패
        """
        try:
            cached_data = self.redis_client.get(key)
        except RedisError as e:
            logger.error(f"Cache read error: {e}")
            raise CacheConnectionException(
                message="Cache read failed",
                error_code="CACHE_READ_FAILED",
                details={"key": key, "error": str(e)}
            )

        if not cached_data:
            logger.debug(f"Cache miss for key: {key}")
            return None

        try:
            value = json.loads(cached_data)
        except (json.JSONDecodeError, TypeError) as e:
            logger.error(f"Failed to deserialize cache: {e}")
            raise CacheSerializationException(
                message="Failed to deserialize cached data",
                error_code="CACHE_DESER_FAILED",
                details={"key": key, "error": str(e)}
            )

        logger.debug(f"Cache hit for key: {key}")
        return value

    def set_json(self, key: str, value: Any, ttl_seconds: int) -> bool:
        """
        JSON 값 저장 (SETEX)

        Args:
            key: 캐시 키
            value: 저장할 값
            ttl_seconds: TTL (초)

        Returns:
            성공 여부
        """
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")

        try:
            cached_value = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to serialize cache data: {e}")
            raise CacheSerializationException(
                message="Failed to serialize cache data",
                error_code="CACHE_SER_FAILED",
                details={"key": key, "error": str(e)}
            )

        try:
            self.redis_client.setex(key, ttl_seconds, cached_value)
        except RedisError as e:
            logger.error(f"Cache write error: {e}")
            raise CacheConnectionException(
                message="Failed to write cache",
                error_code="CACHE_WRITE_FAILED",
                details={"key": key, "error": str(e)}
            )

        logger.info(f"Cache set for key: {key}, TTL: {ttl_seconds}s")
        return True

    def delete(self, key: str) -> bool:
        """
        캐시 삭제

        Args:
            key: 캐시 키

        Returns:
            성공 여부
        """
        try:
            result = self.redis_client.delete(key)
            logger.info(f"Cache deleted for key: {key}")
            return result > 0
        except RedisError as e:
            logger.error(f"Cache delete error: {e}")
            return False

    def health_check(self) -> bool:
        """Redis 연결 상태 확인"""
        try:
            self.redis_client.ping()
            return True
        except RedisError:
            return False
