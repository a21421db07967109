"""검색 컨텍스트 prefetch 서비스

사용자가 OTA 검색 결과 페이지에 있을 때 google_hotels 후보 목록을 미리 받아
ctx:{id}에 짧게 저장합니다. 이후 resolve 요청이 같은 ctx id를 넘기면
SearchApi 호출 없이 후보 목록에서 바로 고릅니다.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from src.core.config import settings
from src.core.logging import logger
from src.engine.cache_adapter import CacheAdapter
from src.engine.cache_keys import context_key
from src.engine.deferred import DeferredWriter
from src.schemas.property_schema import Candidate, ContextRecord
from src.services.impl.search_api_client import SearchParams
from src.utils.hash_utils import compute_context_id


@dataclass(frozen=True)
class PrefetchOutcome:
    ctx_id: str
    count: int
    cache: str  # "hit" | "miss"


class ContextPrefetchService:
    """검색 컨텍스트 저장 서비스"""

    def __init__(self, cache: CacheAdapter, search_client, deferred: DeferredWriter, ctx_ttl_sec: Optional[int] = None):
        self.cache = cache
        self.search_client = search_client
        self.deferred = deferred
        self.ctx_ttl = ctx_ttl_sec or settings.ctx_ttl_sec

    async def prefetch(self, params: SearchParams, hl_key: str, refresh: bool = False) -> PrefetchOutcome:
        """
        컨텍스트 조회/생성

        Args:
            params: google_hotels 검색 파라미터
            hl_key: 컨텍스트 ID용 언어 키
            refresh: True면 기존 컨텍스트 무시

        Returns:
            PrefetchOutcome

        Raises:
            SearchApiException: 캐시 미스 후 SearchApi 실패
        """
        ctx_id = compute_context_id(
            params.gl or settings.default_region,
            hl_key,
            params.q,
            params.check_in,
            params.check_out,
            params.adults,
            params.currency,
        )
        key = context_key(ctx_id)

        if not refresh:
            cached = await self.cache.get_context_record(key)
            if cached is not None and cached.has_tokens:
                logger.info(f"[PREFETCH] ctx hit: {ctx_id} ({len(cached.properties)} properties)")
                return PrefetchOutcome(ctx_id=ctx_id, count=len(cached.properties), cache="hit")

        candidates = await self.search_client.search_properties(params)
        minimal = [
            Candidate(
                name=c.name,
                city=c.city,
                country=c.country,
                link=c.link,
                property_token=c.property_token,
            )
            for c in candidates
            if c.property_token
        ]

        record = ContextRecord(
            properties=minimal,
            created_at=datetime.now(timezone.utc).isoformat(),
            query={
                "q": params.q,
                "check_in": params.check_in,
                "check_out": params.check_out,
                "adults": params.adults,
                "currency": params.currency,
                "gl": params.gl,
                "hl": params.hl,
            },
        )
        self.deferred.spawn(
            self.cache.put_context_record(key, record, self.ctx_ttl),
            label=f"store ctx ({key})",
        )

        logger.info(f"[PREFETCH] ctx stored: {ctx_id} ({len(minimal)} properties)")
        return PrefetchOutcome(ctx_id=ctx_id, count=len(minimal), cache="miss")
