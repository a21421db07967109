"""SearchApi 클라이언트 테스트 (HTTP Mock)"""
import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.core.exceptions import (
    ConfigurationException,
    SearchApiException,
    SearchApiTimeoutException,
)
from src.services.impl.search_api_client import (
    SearchApiClient,
    SearchParams,
    drop_empty_params,
    error_text,
    is_hl_param_error,
)


def _params(**overrides) -> SearchParams:
    values = {"q": "Alda Hotel", "check_in": "2026-11-01", "check_out": "2026-11-03", "gl": "is", "hl": "is"}
    values.update(overrides)
    return SearchParams(**values)


def _client(*responses, timeout_s: float = 1.0) -> tuple[SearchApiClient, MagicMock]:
    http = MagicMock()
    http.get_json = AsyncMock(side_effect=list(responses))
    client = SearchApiClient(http_client=http, api_key="test-key", endpoint="https://api.test/search", timeout_s=timeout_s)
    return client, http


class TestSearchParams:
    """파라미터 구성 테스트"""

    def test_to_query_drops_empty(self):
        query = _params(currency=None, hl="").to_query()

        assert query == {
            "engine": "google_hotels",
            "q": "Alda Hotel",
            "check_in_date": "2026-11-01",
            "check_out_date": "2026-11-03",
            "adults": "2",
            "gl": "is",
        }

    def test_drop_empty_params(self):
        assert drop_empty_params({"a": None, "b": "", "c": 0, "d": "x"}) == {"c": "0", "d": "x"}


class TestErrorHelpers:
    def test_error_text(self):
        assert error_text({"error": "Invalid API key"}) == "Invalid API key"
        assert error_text({"message": "quota"}) == "quota"
        assert error_text("plain") == "plain"
        assert error_text(None) == ""

    def test_is_hl_param_error(self):
        assert is_hl_param_error({"error": "Unsupported value for parameter hl"})
        assert not is_hl_param_error({"error": "Invalid API key"})


class TestSearchApiClient:
    """SearchApiClient 테스트"""

    @pytest.mark.asyncio
    async def test_search_properties(self):
        client, http = _client((200, {"properties": [
            {"name": "Alda Hotel", "city": "Reykjavík", "property_token": "tok-alda", "rating": 4.5},
            {"name": "No Token Inn"},
            "garbage",
        ]}))

        candidates = await client.search_properties(_params())

        assert [c.name for c in candidates] == ["Alda Hotel", "No Token Inn"]
        assert candidates[0].property_token == "tok-alda"
        assert candidates[1].property_token is None

        _, kwargs = http.get_json.call_args
        assert kwargs["params"]["engine"] == "google_hotels"
        assert kwargs["headers"]["Authorization"] == "Bearer test-key"
        assert kwargs["timeout_s"] == 1.0

    @pytest.mark.asyncio
    async def test_no_properties_is_empty_not_error(self):
        client, _ = _client((200, {"search_metadata": {"status": "Success"}}))

        assert await client.search_properties(_params()) == []

    @pytest.mark.asyncio
    async def test_hl_fallback(self):
        """hl 거부 시 hl 없이 1회 재시도"""
        client, http = _client(
            (400, {"error": "Unsupported value for parameter hl"}),
            (200, {"properties": [{"name": "Alda Hotel", "property_token": "tok-alda"}]}),
        )

        result = await client.call(_params().to_query())

        assert result.ok
        assert result.hl_fallback
        assert "hl" in result.first_error["error"]
        assert http.get_json.await_count == 2
        assert "hl" not in http.get_json.call_args.kwargs["params"]

    @pytest.mark.asyncio
    async def test_non_hl_400_not_retried(self):
        client, http = _client((400, {"error": "Invalid API key"}))

        with pytest.raises(SearchApiException) as exc_info:
            await client.search_properties(_params())

        assert http.get_json.await_count == 1
        assert exc_info.value.details["status"] == 400
        assert exc_info.value.error_code == "SEARCH_FAILED"

    @pytest.mark.asyncio
    async def test_error_payload_with_200(self):
        client, _ = _client((200, {"error": "Monthly quota exceeded"}))

        with pytest.raises(SearchApiException) as exc_info:
            await client.search_properties(_params())
        assert "quota" in exc_info.value.details["error"]

    @pytest.mark.asyncio
    async def test_network_error(self):
        client, _ = _client(None)

        with pytest.raises(SearchApiException) as exc_info:
            await client.search_properties(_params())
        assert exc_info.value.details["fetch_error"] == "timeout_or_network_error"

    @pytest.mark.asyncio
    async def test_missing_api_key(self):
        http = MagicMock()
        http.get_json = AsyncMock()
        client = SearchApiClient(http_client=http, api_key="")

        with pytest.raises(ConfigurationException):
            await client.search_properties(_params())
        http.get_json.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_timeout(self, monkeypatch):
        monkeypatch.setattr("src.services.impl.search_api_client._WAIT_SLACK_S", 0.0)

        async def slow(*args, **kwargs):
            await asyncio.sleep(5)

        http = MagicMock()
        http.get_json = slow
        client = SearchApiClient(http_client=http, api_key="test-key", timeout_s=0.01)

        with pytest.raises(SearchApiTimeoutException) as exc_info:
            await client.search_properties(_params())
        assert exc_info.value.error_code == "SEARCH_TIMEOUT"
