"""SearchApi (google_hotels) 클라이언트

- 빈 파라미터는 전송하지 않습니다.
- SearchApi가 hl 값을 거부(400)하면 hl 없이 한 번만 재시도합니다.
- 네트워크 오류/타임아웃/non-2xx/error 페이로드는 모두 SearchApiException으로 올립니다.
  (후보 0건과는 구분됩니다)
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from typing import Any, Optional, Dict

from src.core.config import settings
from src.core.exceptions import (
    ConfigurationException,
    SearchApiException,
    SearchApiTimeoutException,
)
from src.core.logging import logger, sanitize_for_log
from src.schemas.property_schema import Candidate
from src.services.impl.http_client import SharedHttpClient, get_shared_http_client

ENGINE_GOOGLE_HOTELS = "google_hotels"

# curl 자체 타임아웃 위에 두는 여유 (초)
_WAIT_SLACK_S = 2.0


@dataclass(frozen=True)
class SearchParams:
    """google_hotels 검색 파라미터"""
    q: str
    check_in: str
    check_out: str
    adults: int = 2
    currency: Optional[str] = None
    gl: Optional[str] = None
    hl: Optional[str] = None

    def to_query(self) -> Dict[str, str]:
        raw = {
            "engine": ENGINE_GOOGLE_HOTELS,
            "q": self.q,
            "check_in_date": self.check_in,
            "check_out_date": self.check_out,
            "adults": self.adults,
            "currency": self.currency,
            "hl": self.hl,
            "gl": self.gl,
        }
        return drop_empty_params(raw)


@dataclass
class SearchCallResult:
    """SearchApi 원시 호출 결과"""
    status: int
    data: Any
    hl_fallback: bool = False
    first_error: Any = None
    params: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300 and not has_error_payload(self.data)


def drop_empty_params(params: Dict[str, Any]) -> Dict[str, str]:
    """None / 빈 문자열 값 제거 후 문자열화"""
    return {k: str(v) for k, v in params.items() if v is not None and v != ""}


def has_error_payload(data: Any) -> bool:
    return isinstance(data, dict) and bool(data.get("error"))


def error_text(data: Any) -> str:
    """SearchApi 응답에서 오류 메시지 추출"""
    if not data:
        return ""
    if isinstance(data, str):
        return data
    if isinstance(data, dict):
        if isinstance(data.get("error"), str):
            return data["error"]
        if isinstance(data.get("message"), str):
            return data["message"]
    try:
        return json.dumps(data, ensure_ascii=False)
    except (TypeError, ValueError):
        return str(data)


def is_hl_param_error(data: Any) -> bool:
    msg = error_text(data).lower()
    return "hl" in msg and ("unsupported" in msg or "invalid" in msg or "parameter" in msg)


class SearchApiClient:
    """SearchApi google_hotels 호출기"""

    def __init__(
        self,
        http_client: Optional[SharedHttpClient] = None,
        api_key: Optional[str] = None,
        endpoint: Optional[str] = None,
        timeout_s: Optional[float] = None,
    ):
        self.http_client = http_client or get_shared_http_client()
        self.api_key = api_key if api_key is not None else settings.searchapi_key
        self.endpoint = endpoint or settings.searchapi_endpoint
        self.timeout_s = timeout_s or settings.searchapi_timeout_s

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }

    async def _do_call(self, params: Dict[str, str]) -> SearchCallResult:
        try:
            out = await asyncio.wait_for(
                self.http_client.get_json(
                    self.endpoint,
                    params=params,
                    headers=self._headers(),
                    timeout_s=self.timeout_s,
                ),
                timeout=self.timeout_s + _WAIT_SLACK_S,
            )
        except asyncio.TimeoutError:
            logger.warning(f"[SEARCHAPI] timeout after {self.timeout_s}s")
            raise SearchApiTimeoutException(self.timeout_s)

        if out is None:
            raise SearchApiException(
                "SearchApi request failed",
                details={"fetch_error": "timeout_or_network_error"},
            )

        status, data = out
        return SearchCallResult(status=status, data=data, params=params)

    async def call(self, params: Dict[str, Any]) -> SearchCallResult:
        """SearchApi 호출 (hl 거부 시 hl 없이 1회 재시도)

        Raises:
            ConfigurationException: API 키 미설정
            SearchApiException: 네트워크 오류
            SearchApiTimeoutException: 타임아웃
        """
        if not self.api_key:
            raise ConfigurationException("searchapi_key")

        query = drop_empty_params(params)
        logger.info(
            f"[SEARCHAPI] call: engine={query.get('engine')}, "
            f"q='{sanitize_for_log(query.get('q', ''))}', gl={query.get('gl')}, hl={query.get('hl')}"
        )

        result = await self._do_call(query)

        if result.status == 400 and query.get("hl") and is_hl_param_error(result.data):
            logger.info(f"[SEARCHAPI] hl rejected ({query['hl']}), retrying without hl")
            retry_params = {k: v for k, v in query.items() if k != "hl"}
            retry = await self._do_call(retry_params)
            retry.hl_fallback = True
            retry.first_error = result.data
            return retry

        return result

    async def search_properties(self, params: SearchParams) -> list[Candidate]:
        """google_hotels 검색 후 properties[]를 Candidate로 변환

        Raises:
            SearchApiException: 업스트림 실패 (빈 결과는 예외가 아님)
        """
        result = await self.call(params.to_query())

        if not result.ok:
            details = {
                "status": result.status,
                "error": error_text(result.data)[:500],
                "hl_fallback": result.hl_fallback,
            }
            logger.warning(f"[SEARCHAPI] google_hotels failed: status={result.status}")
            raise SearchApiException("SearchApi google_hotels failed", details=details)

        raw = result.data.get("properties") if isinstance(result.data, dict) else None
        if not isinstance(raw, list):
            raw = []

        candidates = [Candidate.model_validate(p) for p in raw if isinstance(p, dict)]
        logger.info(f"[SEARCHAPI] google_hotels ok: {len(candidates)} candidates")
        return candidates
