"""전역 테스트 설정

역할:
- 테스트 환경 구성
- 공통 Fake(캐시/검색) 주입

금지:
- 실제 Redis / SearchApi 호출
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Any, Optional

import pytest
import pytest_asyncio


# 프로젝트 루트를 경로에 추가
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


@pytest.fixture(scope="session", autouse=True)
def test_env() -> None:
    """테스트 환경 변수 설정 (세션 전역)"""
    os.environ["ENVIRONMENT"] = "test"
    os.environ["LOG_LEVEL"] = "INFO"


class FakeCacheService:
    """CacheService 대체 (메모리 KV)

    - JSON 직렬화를 거쳐 실제 저장과 같은 형태로 보관
    - 마지막 TTL을 키별로 기록
    """

    def __init__(self) -> None:
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int] = {}
        self.set_calls = 0
        self.fail_reads = False

    def get_json(self, key: str) -> Optional[Any]:
        if self.fail_reads:
            from src.core.exceptions import CacheConnectionException
            raise CacheConnectionException("Cache read failed", "CACHE_READ_FAILED")
        raw = self.store.get(key)
        return json.loads(raw) if raw else None

    def set_json(self, key: str, value: Any, ttl_seconds: int) -> bool:
        self.set_calls += 1
        self.store[key] = json.dumps(value, ensure_ascii=False)
        self.ttls[key] = ttl_seconds
        return True

    def delete(self, key: str) -> bool:
        self.ttls.pop(key, None)
        return self.store.pop(key, None) is not None

    def health_check(self) -> bool:
        return True

    # 테스트 편의
    def put(self, key: str, value: Any, ttl_seconds: int = 3600) -> None:
        self.store[key] = json.dumps(value, ensure_ascii=False)
        self.ttls[key] = ttl_seconds

    def peek(self, key: str) -> Optional[Any]:
        raw = self.store.get(key)
        return json.loads(raw) if raw else None


class FakeSearchClient:
    """SearchApiClient 대체

    - candidates: search_properties가 반환할 후보 (dict 또는 Candidate)
    - error: 설정 시 호출마다 raise
    """

    def __init__(self, candidates: Optional[list] = None, error: Optional[Exception] = None) -> None:
        self.candidates = candidates or []
        self.error = error
        self.calls = 0
        self.last_params = None

    async def search_properties(self, params):
        from src.schemas.property_schema import Candidate

        self.calls += 1
        self.last_params = params
        if self.error:
            raise self.error
        return [c if isinstance(c, Candidate) else Candidate.model_validate(c) for c in self.candidates]


@pytest.fixture
def fake_cache_service() -> FakeCacheService:
    return FakeCacheService()


@pytest_asyncio.fixture
async def deferred():
    """테스트마다 새 DeferredWriter (종료 시 남은 쓰기 정리)"""
    from src.engine.deferred import DeferredWriter

    writer = DeferredWriter()
    yield writer
    await writer.drain(timeout=1.0)


@pytest.fixture
def make_resolver(fake_cache_service, deferred):
    """PropertyResolver 팩토리 (검색 클라이언트만 바꿔 끼움)"""
    from src.engine import CacheAdapter, PropertyResolver

    def _make(search_client) -> PropertyResolver:
        return PropertyResolver(
            cache=CacheAdapter(fake_cache_service),
            search_client=search_client,
            deferred=deferred,
            token_ttl_sec=30 * 24 * 3600,
            token_ttl_no_domain_sec=7 * 24 * 3600,
        )

    return _make


# ============================================================================
# 샘플 데이터
# ============================================================================

@pytest.fixture
def alda_candidates() -> list[dict[str, Any]]:
    """레이캬비크 검색 결과 (정답: Alda Hotel)"""
    return [
        {
            "name": "Hotel A Reykjavík",
            "city": "Reykjavík",
            "country": "Iceland",
            "link": "https://www.hotela.is/",
            "property_token": "tok-hotel-a",
        },
        {
            "name": "Alda Hotel",
            "city": "Reykjavík",
            "country": "Iceland",
            "link": "https://www.aldahotel.is/",
            "property_token": "tok-alda",
        },
        {
            "name": "Hilton Reykjavik Nordica",
            "city": "Reykjavík",
            "country": "Iceland",
            "link": "https://www.hilton.com/en/hotels/kefnhhi/",
            "property_token": "tok-hilton",
        },
    ]


@pytest.fixture
def alda_record() -> dict[str, Any]:
    """도메인 키에 저장된 Alda Hotel 레코드"""
    return {
        "property_token": "tok-alda",
        "property_name": "Alda Hotel",
        "city": "Reykjavík",
        "country": "Iceland",
        "link": "https://www.aldahotel.is/",
        "link_host": "aldahotel.is",
        "score": 1.5,
        "name_score": 0.8,
        "confidence": 0.95,
        "domain_match": True,
        "core_overlap_any": True,
        "official_domain": "aldahotel.is",
    }
