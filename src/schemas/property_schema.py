"""Pydantic 스키마 정의 (숙소 후보 / 캐시 레코드 / API 요청·응답)"""
from typing import Optional, Any
from pydantic import BaseModel, Field, field_validator, model_validator
from datetime import datetime

from src.utils.query_params import is_iso_date, nights_between


# ---------------------------------------------------------------------------
# 도메인 모델
# ---------------------------------------------------------------------------


class Candidate(BaseModel):
    """SearchApi properties[] 항목 (필요 필드만)"""
    name: str = Field("", description="숙소명")
    city: Optional[str] = Field(None, description="도시")
    country: Optional[str] = Field(None, description="국가")
    link: Optional[str] = Field(None, description="숙소 공식/대표 링크")
    property_token: Optional[str] = Field(None, description="SearchApi property_token")

    @model_validator(mode="before")
    @classmethod
    def _coerce_raw(cls, data: Any):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if data.get("name") is None:
            data["name"] = ""
        # 빈 문자열 토큰은 토큰 없음으로 취급
        if not data.get("property_token"):
            data["property_token"] = None
        return data


class TokenRecord(BaseModel):
    """토큰 캐시 레코드 (tok:{region}:{n|d|b}:...)

    - 신규 포맷: snake_case 필드
    - 레거시 포맷: linkHost/nameScore/domainMatch 등 camelCase 키도 허용 (자동 변환)
    """
    property_token: str = Field(..., min_length=1, description="SearchApi property_token")
    property_name: Optional[str] = Field(None, description="매칭된 숙소명")
    city: Optional[str] = Field(None, description="도시")
    country: Optional[str] = Field(None, description="국가")
    link: Optional[str] = Field(None, description="숙소 링크")
    link_host: str = Field("", description="링크 호스트 (www 제거)")
    score: float = Field(0.0, description="최종 점수 (기본 점수 + 도메인 가점)")
    name_score: float = Field(0.0, description="이름 기본 점수")
    confidence: float = Field(0.0, ge=0.0, le=0.95, description="신뢰도")
    domain_match: bool = Field(False, description="공식 도메인 일치 (정체성 토큰 교집합 필요)")
    core_overlap_any: bool = Field(False, description="정체성 토큰 교집합 여부")
    match_details: Optional[dict[str, Any]] = Field(None, description="점수 내역")
    official_domain: Optional[str] = Field(None, description="요청 당시 공식 도메인")
    candidate_summary: Optional[list[dict[str, Any]]] = Field(None, description="후보 요약 (토큰 제외)")
    from_ctx: bool = Field(False, description="검색 컨텍스트에서 선택됨")

    @model_validator(mode="before")
    @classmethod
    def _coerce_legacy(cls, data: Any):
        if not isinstance(data, dict):
            return data

        data = dict(data)
        legacy_keys = {
            "linkHost": "link_host",
            "nameScore": "name_score",
            "domainMatch": "domain_match",
            "coreOverlapAny": "core_overlap_any",
            "matchDetails": "match_details",
            "officialDomain": "official_domain",
            "candidateSummary": "candidate_summary",
            "fromCtx": "from_ctx",
        }
        for old, new in legacy_keys.items():
            if new not in data and old in data:
                data[new] = data.pop(old)

        if data.get("link_host") is None:
            data["link_host"] = ""

        # 신뢰도가 없는 레거시 레코드는 이름 점수로 대체
        if data.get("confidence") is None:
            data["confidence"] = min(0.95, float(data.get("name_score") or 0.0))
        return data


class ContextRecord(BaseModel):
    """검색 컨텍스트 레코드 (ctx:{id})"""
    properties: list[Candidate] = Field(default_factory=list, description="후보 목록 (최소 필드)")
    created_at: str = Field("", description="생성 시각 (ISO)")
    query: dict[str, Any] = Field(default_factory=dict, description="prefetch 요청 파라미터")

    @model_validator(mode="before")
    @classmethod
    def _coerce_legacy(cls, data: Any):
        if isinstance(data, dict) and "created_at" not in data and "createdAt" in data:
            data = dict(data)
            data["created_at"] = data.pop("createdAt")
        return data

    @property
    def has_tokens(self) -> bool:
        return any(p.property_token for p in self.properties)


# ---------------------------------------------------------------------------
# API 요청
# ---------------------------------------------------------------------------


class _StayRequest(BaseModel):
    """숙박 검색 공통 파라미터"""
    hotel_name: str = Field(..., min_length=1, max_length=300, description="호텔명")
    check_in: str = Field(..., description="체크인 (YYYY-MM-DD)")
    check_out: str = Field(..., description="체크아웃 (YYYY-MM-DD)")
    adults: int = Field(2, ge=1, le=10, description="성인 수 (1~10)")
    currency: Optional[str] = Field(None, max_length=8, description="통화 코드 또는 기호")
    gl: Optional[str] = Field(None, max_length=8, description="지역 코드")
    hl: Optional[str] = Field(None, max_length=16, description="언어 코드")
    refresh: bool = Field(False, description="캐시 무시")

    @field_validator("hotel_name")
    @classmethod
    def validate_hotel_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError('호텔명은 공백만으로 구성될 수 없습니다')
        return v.strip()

    @field_validator("check_in", "check_out")
    @classmethod
    def validate_dates(cls, v: str) -> str:
        if not is_iso_date(v):
            raise ValueError('날짜는 YYYY-MM-DD 형식이어야 합니다')
        return v

    @model_validator(mode="after")
    def validate_range(self):
        nights = nights_between(self.check_in, self.check_out)
        if not nights or nights <= 0:
            raise ValueError('체크아웃은 체크인 이후여야 합니다')
        return self


class ResolveRequest(_StayRequest):
    """property_token 해석 요청"""
    official_url: Optional[str] = Field(None, max_length=2048, description="공식 홈페이지 URL")
    booking_url: Optional[str] = Field(None, max_length=2048, description="OTA(Booking.com) 숙소 URL")
    ctx: Optional[str] = Field(None, max_length=64, description="prefetch-ctx로 받은 컨텍스트 ID")
    debug: bool = Field(False, description="점수 내역/추적 정보 포함")

    @field_validator("official_url", "booking_url")
    @classmethod
    def validate_url(cls, v: Optional[str]) -> Optional[str]:
        """URL 검증"""
        if v is None or not v.strip():
            return None
        if not v.startswith(('http://', 'https://')):
            raise ValueError('URL은 http:// 또는 https://로 시작해야 합니다')
        return v.strip()

    @field_validator("ctx")
    @classmethod
    def validate_ctx(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        v = v.strip()
        if not v.isalnum():
            raise ValueError('ctx는 영숫자만 허용됩니다')
        return v


class PrefetchRequest(_StayRequest):
    """검색 컨텍스트 prefetch 요청"""


# ---------------------------------------------------------------------------
# API 응답
# ---------------------------------------------------------------------------


class CandidateSummary(BaseModel):
    """불확실 매칭 시 노출하는 후보 요약 (토큰 미포함)"""
    name: Optional[str] = None
    city: Optional[str] = None
    score: float = 0.0
    confidence: float = 0.0
    domain_match: bool = False


class PropertyMatchData(BaseModel):
    """해석 결과"""
    property_token: str = Field(..., description="SearchApi property_token")
    property_name: Optional[str] = Field(None, description="매칭된 숙소명")
    city: Optional[str] = Field(None, description="도시")
    country: Optional[str] = Field(None, description="국가")
    link: Optional[str] = Field(None, description="숙소 링크")
    confidence: float = Field(..., ge=0.0, le=0.95, description="신뢰도")
    matched_by: str = Field(..., description="officialDomain | name")
    match_uncertain: bool = Field(..., description="신뢰도 0.65 미만")
    cache: str = Field(..., description="ctx-hit | hit-domain | hit-booking | hit-name | miss")
    search_calls: int = Field(0, ge=0, description="이번 요청의 SearchApi 호출 수")
    candidates: Optional[list[CandidateSummary]] = Field(None, description="후보 요약 (불확실 매칭 시)")
    match_details: Optional[dict[str, Any]] = Field(None, description="점수 내역 (debug)")
    trace: Optional[list[dict[str, Any]]] = Field(None, description="해석 단계 추적 (debug)")


class ResolveResponse(BaseModel):
    """property_token 해석 응답"""
    status: str = Field(..., description="success or error")
    data: Optional[PropertyMatchData] = Field(None, description="해석 결과")
    message: str = Field(..., description="응답 메시지")
    error_code: str | None = Field(None, description="에러 코드 (error 시)")


class PrefetchData(BaseModel):
    ctx_id: str = Field(..., description="컨텍스트 ID (resolve의 ctx 파라미터)")
    count: int = Field(..., ge=0, description="저장된 후보 수")
    cache: str = Field(..., description="hit | miss")


class PrefetchResponse(BaseModel):
    """검색 컨텍스트 prefetch 응답"""
    status: str = Field(..., description="success or error")
    data: Optional[PrefetchData] = Field(None, description="컨텍스트 정보")
    message: str = Field(..., description="응답 메시지")
    error_code: str | None = Field(None, description="에러 코드 (error 시)")


class HealthResponse(BaseModel):
    """헬스 체크 응답"""
    status: str
    timestamp: datetime
    version: str
