"""공유 HTTP 클라이언트 (curl_cffi)

- SearchApi 호출마다 AsyncSession을 만들면 TLS/커넥션 오버헤드가 커지므로
  프로세스 단위로 세션을 재사용합니다.
- 앱 종료 시 close()로 정리합니다.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Optional, Dict

from curl_cffi.requests import AsyncSession

from src.core.config import settings
from src.core.logging import logger


class SharedHttpClient:
    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._session: Optional[AsyncSession] = None

    async def _ensure_session(self) -> AsyncSession:
        async with self._lock:
            if self._session is not None:
                return self._session
            self._session = AsyncSession(
                impersonate=settings.http_impersonate,
                headers=self.default_headers(),
                allow_redirects=True,
                max_clients=settings.http_max_clients,
                trust_env=False,
            )
            return self._session

    def default_headers(self) -> Dict[str, str]:
        return {
            "User-Agent": settings.http_user_agent,
            "Accept": "application/json",
        }

    async def get_json(
        self,
        url: str,
        *,
        params: Optional[Dict[str, str]] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout_s: float,
    ) -> Optional[tuple[int, Any]]:
        """GET 후 (status, JSON 본문) 반환. 본문이 JSON이 아니면 원문 문자열.

        네트워크 오류/타임아웃이면 None.
        """
        sess = await self._ensure_session()
        try:
            resp = await sess.get(
                url,
                params=params,
                headers=headers,
                timeout=timeout_s,
            )
        except Exception as e:
            logger.info(f"[HTTP_CLIENT] GET failed: {type(e).__name__}: {repr(e)}")
            return None

        status = getattr(resp, "status_code", 0) or 0
        text = getattr(resp, "text", "") or ""
        try:
            data: Any = json.loads(text) if text else None
        except ValueError:
            data = text
        return status, data

    async def close(self) -> None:
        async with self._lock:
            if self._session is None:
                return
            try:
                await self._session.close()
            except Exception as e:
                logger.warning(f"[HTTP_CLIENT] close failed: {type(e).__name__}: {e}")
            self._session = None


_shared_http_client = SharedHttpClient()


def get_shared_http_client() -> SharedHttpClient:
    return _shared_http_client


async def shutdown_shared_http_client() -> None:
    await _shared_http_client.close()
