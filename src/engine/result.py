"""Resolution Result - Standardized Result Format

Provides a standardized format for one property-token resolution attempt.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from src.schemas.property_schema import TokenRecord

UNCERTAIN_CONFIDENCE = 0.65


class ResolutionStatus(str, Enum):
    """해석 상태"""

    RESOLVED = "resolved"  # 토큰 확정 (캐시 또는 실시간 검색)
    NO_PROPERTY = "no_property"  # 후보 없음 / 토큰 있는 후보 없음
    UPSTREAM_FAILED = "upstream_failed"  # SearchApi 실패


class CacheDetail(str, Enum):
    """토큰이 어느 경로에서 왔는지"""

    CTX_HIT = "ctx-hit"
    HIT_DOMAIN = "hit-domain"
    HIT_BOOKING = "hit-booking"
    HIT_NAME = "hit-name"
    MISS = "miss"


@dataclass
class ResolutionResult:
    """해석 결과 표준 포맷

    Attributes:
        status: 해석 상태
        record: 선택된 토큰 레코드 (RESOLVED일 때만)
        cache_detail: 결과 출처
        search_calls: 이번 해석에서 발생한 SearchApi 호출 수
        trace: 단계별 추적 (거절 사유 포함)
        error_message: 오류 메시지
        error_details: 오류 상세 (업스트림 상태 등)
    """

    status: ResolutionStatus
    record: Optional[TokenRecord] = None
    cache_detail: CacheDetail = CacheDetail.MISS
    search_calls: int = 0
    trace: list[dict[str, Any]] = field(default_factory=list)
    error_message: Optional[str] = None
    error_details: Optional[dict[str, Any]] = None

    @property
    def is_success(self) -> bool:
        return self.status == ResolutionStatus.RESOLVED and self.record is not None

    @property
    def token(self) -> Optional[str]:
        return self.record.property_token if self.record else None

    @property
    def confidence(self) -> float:
        return self.record.confidence if self.record else 0.0

    @property
    def matched_by(self) -> str:
        if self.record and self.record.domain_match and self.record.core_overlap_any:
            return "officialDomain"
        return "name"

    @property
    def match_details(self) -> Optional[dict[str, Any]]:
        return self.record.match_details if self.record else None

    @property
    def candidate_summary(self) -> Optional[list[dict[str, Any]]]:
        return self.record.candidate_summary if self.record else None

    @property
    def match_uncertain(self) -> bool:
        return self.confidence < UNCERTAIN_CONFIDENCE

    @classmethod
    def resolved(
        cls,
        record: TokenRecord,
        cache_detail: CacheDetail,
        search_calls: int,
        trace: list[dict[str, Any]],
    ) -> "ResolutionResult":
        return cls(
            status=ResolutionStatus.RESOLVED,
            record=record,
            cache_detail=cache_detail,
            search_calls=search_calls,
            trace=trace,
        )

    @classmethod
    def no_property(cls, search_calls: int, trace: list[dict[str, Any]]) -> "ResolutionResult":
        return cls(
            status=ResolutionStatus.NO_PROPERTY,
            search_calls=search_calls,
            trace=trace,
            error_message="No property_token found for hotel",
        )

    @classmethod
    def upstream_failed(
        cls,
        search_calls: int,
        trace: list[dict[str, Any]],
        error: str,
        details: Optional[dict[str, Any]] = None,
    ) -> "ResolutionResult":
        return cls(
            status=ResolutionStatus.UPSTREAM_FAILED,
            search_calls=search_calls,
            trace=trace,
            error_message=error,
            error_details=details,
        )
