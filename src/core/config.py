"""설정 관리 - 환경 변수 로드 및 검증"""
from pydantic_settings import BaseSettings
from pydantic import field_validator


class Settings(BaseSettings):
    """애플리케이션 설정"""

    # Redis (토큰/컨텍스트 KV 캐시)
    redis_url: str = "redis://localhost:6379/0"

    # SearchApi (google_hotels 엔진)
    searchapi_key: str = ""
    searchapi_endpoint: str = "https://www.searchapi.io/api/v1/search"
    searchapi_timeout_s: float = 8.0

    # 공유 HTTP 클라이언트 (curl_cffi)
    http_impersonate: str = "chrome110"
    http_max_clients: int = 20
    http_user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36"
    )

    # 캐시 TTL
    # - 도메인/슬러그 키: 가장 오래 유지 (30일)
    # - 이름 키: 도메인 교차검증이 없으면 짧게 (7일)
    # - 검색 컨텍스트: 세션 창 하나 (30분)
    token_ttl_sec: int = 30 * 24 * 60 * 60
    token_ttl_no_domain_sec: int = 7 * 24 * 60 * 60
    ctx_ttl_sec: int = 30 * 60

    # 요청 기본값
    default_region: str = "us"
    default_currency: str = "USD"

    # API
    api_title: str = "Property Token Resolver"
    api_version: str = "1.0.0"
    api_description: str = "호텔명/공식 도메인/OTA URL을 SearchApi property_token으로 해석합니다."

    # 클라이언트 타임아웃보다 짧게 서버에서 하드 캡
    api_resolve_timeout_s: float = 20.0

    # 종료 시 백그라운드 캐시 쓰기를 기다리는 최대 시간
    deferred_drain_timeout_s: float = 10.0

    # 로깅
    log_level: str = "INFO"

    @field_validator("redis_url")
    @classmethod
    def validate_redis_url(cls, v: str) -> str:
        if not v:
            raise ValueError("redis_url must not be empty")
        if not v.startswith(("redis://", "rediss://", "unix://")):
            raise ValueError("redis_url must be a redis:// URL")
        return v

    @field_validator("token_ttl_sec", "token_ttl_no_domain_sec", "ctx_ttl_sec")
    @classmethod
    def validate_ttls(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("cache TTLs must be positive")
        return v

    @field_validator("searchapi_timeout_s", "api_resolve_timeout_s", "deferred_drain_timeout_s")
    @classmethod
    def validate_timeouts(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeouts must be positive")
        return v

    @field_validator("http_max_clients")
    @classmethod
    def validate_http_max_clients(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("http_max_clients must be positive")
        return v

    @field_validator("default_region")
    @classmethod
    def validate_default_region(cls, v: str) -> str:
        v = (v or "").strip().lower()
        if not v:
            raise ValueError("default_region must not be empty")
        return v

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
