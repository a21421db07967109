"""
입력 보안 검증
호텔명/URL 요청 필드 검증 함수
"""

import hashlib
from src.core.exceptions import InvalidQueryException, InvalidURLException
from src.core.logging import logger, sanitize_for_log


class SecurityValidator:
    """입력 보안 검증"""

    MAX_QUERY_LENGTH = 300
    MAX_URL_LENGTH = 2048

    # 위험한 문자 (XSS / 제어 문자)
    # 호텔명에는 아포스트로피("Claridge's")와 대시("Hotel - Paris")가 흔하므로 허용
    DANGEROUS_CHARS = ['<', '>', '"', '\\', '\0', '\n', '\r', ';', '/*', '*/']

    @staticmethod
    def validate_query(query: str) -> bool:
        """호텔명 검증

        Args:
            query: 호텔명

        Returns:
            유효성 여부

        Raises:
            InvalidQueryException: 유효하지 않은 호텔명
        """
        if not query or not query.strip():
            raise InvalidQueryException("호텔명은 필수입니다")

        if len(query) > SecurityValidator.MAX_QUERY_LENGTH:
            raise InvalidQueryException(f"호텔명은 {SecurityValidator.MAX_QUERY_LENGTH}자 이하여야 합니다")

        for char in SecurityValidator.DANGEROUS_CHARS:
            if char in query:
                logger.warning(
                    f"호텔명에 위험한 문자 감지: {sanitize_for_log(char)}"
                )
                raise InvalidQueryException("호텔명에 허용되지 않는 문자가 포함되어 있습니다")

        return True

    @staticmethod
    def validate_url(url: str) -> bool:
        """URL 검증

        Args:
            url: URL 문자열

        Returns:
            유효성 여부

        Raises:
            InvalidURLException: 유효하지 않은 URL
        """
        if not url:
            raise InvalidURLException("", "URL은 필수입니다")

        if len(url) > SecurityValidator.MAX_URL_LENGTH:
            raise InvalidURLException(url[:64], f"URL은 {SecurityValidator.MAX_URL_LENGTH}자 이하여야 합니다")

        if not url.startswith(('http://', 'https://')):
            raise InvalidURLException(url[:64], "URL은 http:// 또는 https://로 시작해야 합니다")

        return True

    @staticmethod
    def hash_input(input_str: str) -> str:
        """입력값 해시 (로깅용)

        Args:
            input_str: 입력 문자열

        Returns:
            SHA256 해시값
        """
        return hashlib.sha256(input_str.encode()).hexdigest()[:16]

