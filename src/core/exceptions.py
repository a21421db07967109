"""커스텀 예외 정의 (Structured Exception Hierarchy)"""
from typing import Any, Optional


# 기본 예외 클래스
class PropertyResolverException(Exception):
    """기본 예외 클래스 - 모든 커스텀 예외의 부모"""
    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[dict[str, Any]] = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


# 업스트림 검색(SearchApi) 관련 예외
class SearchApiException(PropertyResolverException):
    """SearchApi 호출 실패 (네트워크 오류, non-2xx, error 페이로드)

    '후보 없음'과는 다른 실패 범주입니다. 절대 빈 결과로 취급하지 않습니다.
    """
    def __init__(self, message: str, error_code: str = "SEARCH_FAILED", details: Optional[dict[str, Any]] = None):
        super().__init__(message, error_code or "SEARCH_FAILED", details)


class SearchApiTimeoutException(SearchApiException):
    """SearchApi 타임아웃"""
    def __init__(self, timeout_s: float, details: Optional[dict[str, Any]] = None):
        message = f"SearchApi call timed out after {timeout_s}s"
        super().__init__(message, "SEARCH_TIMEOUT", details or {"timeout_s": timeout_s})


# 설정 관련 예외
class ConfigurationException(PropertyResolverException):
    """필수 설정 누락"""
    def __init__(self, setting: str, details: Optional[dict[str, Any]] = None):
        message = f"Missing or invalid setting: {setting}"
        super().__init__(message, "CONFIG_ERROR", details or {"setting": setting})


# 캐시 관련 예외
class CacheException(PropertyResolverException):
    """캐시 관련 예외"""
    def __init__(self, message: str, error_code: str = "CACHE_ERROR", details: Optional[dict[str, Any]] = None):
        super().__init__(message, error_code or "CACHE_ERROR", details)


class CacheConnectionException(CacheException):
    """캐시 연결/읽기/쓰기 실패"""
    def __init__(self, message: str, error_code: str = "CACHE_CONNECTION_ERROR", details: Optional[dict[str, Any]] = None):
        super().__init__(message, error_code or "CACHE_CONNECTION_ERROR", details)


class CacheSerializationException(CacheException):
    """캐시 직렬화/역직렬화 오류"""
    def __init__(self, message: str, error_code: str = "CACHE_SERIALIZATION_ERROR", details: Optional[dict[str, Any]] = None):
        super().__init__(message, error_code or "CACHE_SERIALIZATION_ERROR", details)


# 유효성 검증 관련 예외
class ValidationException(PropertyResolverException):
    """유효성 검증 예외"""
    def __init__(self, field: str, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Validation failed for '{field}': {reason}"
        super().__init__(message, "INVALID_PARAMS",
                        details or {"field": field, "reason": reason})


class InvalidQueryException(ValidationException):
    """유효하지 않은 호텔명"""
    def __init__(self, reason: str, details: Optional[dict[str, Any]] = None):
        super().__init__("hotel_name", reason, details)


class InvalidURLException(ValidationException):
    """유효하지 않은 URL"""
    def __init__(self, url: str, reason: str, details: Optional[dict[str, Any]] = None):
        super().__init__("url", f"{reason} (url: {url})", details)
