"""Property Resolver - Main Engine Entry Point

Resolves a lodging query to one SearchApi ``property_token``. Tiers are tried in
priority order and the first accepted record wins:

1. Search context (``ctx:{id}``) prefetched for this session
2. Domain key, re-validated (``hit-domain``)
3. Booking slug key, re-validated (``hit-booking``)
4. Name key, re-validated (``hit-name``)
5. Live google_hotels search + pick (``miss``)

``refresh=True`` skips tiers 1-4. Every cache write is fire-and-forget through
the DeferredWriter; the caller never observes write failures. Validator
rejections fall through silently and are kept in the resolution trace.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Protocol, Sequence

from src.core.config import settings
from src.core.exceptions import SearchApiException
from src.core.logging import logger
from src.schemas.property_schema import Candidate, TokenRecord
from src.services.impl.search_api_client import SearchParams
from src.utils.url_utils import get_host_no_www, slug_to_query

from .cache_adapter import CacheAdapter
from .cache_keys import TokenCacheKeys, context_key
from .deferred import DeferredWriter
from .picker import PickResult, build_candidate_summary, pick_best_property
from .result import UNCERTAIN_CONFIDENCE, CacheDetail, ResolutionResult
from .validator import Invalid, validate_cached_token

CTX_MIN_CONFIDENCE = 0.55
BACKFILL_MIN_CONFIDENCE = 0.75
CACHE_MIN_CONFIDENCE = 0.65
LONG_TTL_MIN_CONFIDENCE = 0.80


class PropertySearch(Protocol):
    async def search_properties(self, params: SearchParams) -> list[Candidate]:
        ...


@dataclass(frozen=True)
class ResolveQuery:
    """한 번의 해석 요청 (정규화 완료된 값)"""
    hotel_name: str
    check_in: str
    check_out: str
    adults: int = 2
    currency: Optional[str] = None
    region: str = "us"
    hl: Optional[str] = None
    official_domain: Optional[str] = None
    booking_slug: Optional[str] = None
    booking_cc: Optional[str] = None
    ctx_id: Optional[str] = None
    refresh: bool = False

    @property
    def alt_query(self) -> Optional[str]:
        return slug_to_query(self.booking_slug) or None

    def search_params(self) -> SearchParams:
        return SearchParams(
            q=self.hotel_name,
            check_in=self.check_in,
            check_out=self.check_out,
            adults=self.adults,
            currency=self.currency,
            gl=self.region,
            hl=self.hl,
        )


@dataclass
class _Attempt:
    keys: TokenCacheKeys
    search_calls: int = 0
    trace: list[dict[str, Any]] = field(default_factory=list)

    def note(self, step: str, outcome: str, **extra: Any) -> None:
        entry = {"step": step, "outcome": outcome}
        entry.update({k: v for k, v in extra.items() if v is not None})
        self.trace.append(entry)


class PropertyResolver:
    """캐시 우선 property_token 해석기

    ctx → domain → slug → name → live 순서로 시도하며,
    캐시된 레코드는 항상 현재 질의로 재검증합니다.
    """

    def __init__(
        self,
        cache: CacheAdapter,
        search_client: PropertySearch,
        deferred: DeferredWriter,
        token_ttl_sec: Optional[int] = None,
        token_ttl_no_domain_sec: Optional[int] = None,
    ):
        if cache is None:
            raise ValueError("cache must not be None")
        if search_client is None:
            raise ValueError("search_client must not be None")

        self.cache = cache
        self.search_client = search_client
        self.deferred = deferred
        self.token_ttl = token_ttl_sec or settings.token_ttl_sec
        self.token_ttl_no_domain = token_ttl_no_domain_sec or settings.token_ttl_no_domain_sec

    async def resolve(self, query: ResolveQuery) -> ResolutionResult:
        """property_token 해석

        Returns:
            ResolutionResult: RESOLVED / NO_PROPERTY / UPSTREAM_FAILED
        """
        if not query.hotel_name or not query.hotel_name.strip():
            raise ValueError("hotel_name must not be empty")

        keys = TokenCacheKeys.build(
            query.region, query.hotel_name, query.official_domain, query.booking_slug, query.booking_cc
        )
        attempt = _Attempt(keys=keys)
        logger.info(f"[RESOLVER] started: query='{query.hotel_name}', refresh={query.refresh}")

        record: Optional[TokenRecord] = None
        detail = CacheDetail.MISS
        tier_key: Optional[str] = None

        if not query.refresh:
            record = await self._try_context(query, attempt)
            if record is not None:
                detail = CacheDetail.CTX_HIT

            if record is None and keys.domain:
                record = await self._try_cached_tier(query, attempt, keys.domain, CacheDetail.HIT_DOMAIN)
                if record is not None:
                    detail, tier_key = CacheDetail.HIT_DOMAIN, keys.domain

            if record is None and keys.slug:
                record = await self._try_cached_tier(query, attempt, keys.slug, CacheDetail.HIT_BOOKING)
                if record is not None:
                    detail, tier_key = CacheDetail.HIT_BOOKING, keys.slug

            if record is None:
                record = await self._try_cached_tier(query, attempt, keys.name, CacheDetail.HIT_NAME)
                if record is not None:
                    detail, tier_key = CacheDetail.HIT_NAME, keys.name
                    if keys.domain:
                        self._write(keys.domain, record, self.token_ttl, "backfill domain from name")
        else:
            attempt.note("cache", "skipped", reason="refresh")

        if record is None:
            try:
                record = await self._try_live(query, attempt)
            except SearchApiException as e:
                logger.warning(f"[RESOLVER] upstream failed: query='{query.hotel_name}', error={e}")
                attempt.note("live", "failed", error_code=e.error_code)
                return ResolutionResult.upstream_failed(
                    attempt.search_calls, attempt.trace, e.message, {"error_code": e.error_code, **e.details}
                )

            if record is None:
                logger.info(f"[RESOLVER] no property: query='{query.hotel_name}'")
                return ResolutionResult.no_property(attempt.search_calls, attempt.trace)
        else:
            record = await self._verify_lookup(query, attempt, record, detail, tier_key)

        logger.info(
            f"[RESOLVER] resolved: query='{query.hotel_name}', via={detail.value}, "
            f"confidence={record.confidence:.3f}, search_calls={attempt.search_calls}"
        )
        return ResolutionResult.resolved(record, detail, attempt.search_calls, attempt.trace)

    # ------------------------------------------------------------------
    # tiers
    # ------------------------------------------------------------------

    async def _try_context(self, query: ResolveQuery, attempt: _Attempt) -> Optional[TokenRecord]:
        if not query.ctx_id:
            return None

        ctx = await self.cache.get_context_record(context_key(query.ctx_id))
        if ctx is None:
            attempt.note("ctx", "rejected", reason="ctx_missing_or_expired")
            return None
        if not ctx.has_tokens:
            attempt.note("ctx", "rejected", reason="ctx_empty")
            return None

        candidates = [p for p in ctx.properties if p.property_token]
        picked = pick_best_property(candidates, query.hotel_name, query.official_domain, query.alt_query)

        if picked.best is None:
            attempt.note("ctx", "rejected", reason="no_matching_property")
            return None
        if picked.hard_mismatch:
            attempt.note("ctx", "rejected", reason="hard_mismatch")
            return None
        if picked.confidence < CTX_MIN_CONFIDENCE:
            attempt.note("ctx", "rejected", reason=f"confidence_too_low:{picked.confidence:.3f}")
            return None

        record = self._record_from_pick(picked, query, from_ctx=True)
        attempt.note("ctx", "accepted", confidence=round(picked.confidence, 3), property_name=record.property_name)

        if picked.confidence >= BACKFILL_MIN_CONFIDENCE:
            self._write(attempt.keys.name, record, self.token_ttl_no_domain, "backfill name from ctx")
            if attempt.keys.domain:
                self._write(attempt.keys.domain, record, self.token_ttl, "backfill domain from ctx")
        return record

    async def _try_cached_tier(
        self,
        query: ResolveQuery,
        attempt: _Attempt,
        key: str,
        source: CacheDetail,
    ) -> Optional[TokenRecord]:
        cached = await self.cache.get_token_record(key)
        if cached is None:
            attempt.note(source.value, "miss")
            return None

        outcome = validate_cached_token(query.hotel_name, query.official_domain, cached, source.value)
        if isinstance(outcome, Invalid):
            logger.info(f"[RESOLVER] {source.value} rejected: key={key}, reason={outcome.reason}")
            attempt.note(source.value, "rejected", reason=outcome.reason)
            return None

        attempt.note(source.value, "accepted", confidence=round(outcome.confidence, 3))
        return cached.model_copy(update=outcome.updates)

    async def _try_live(self, query: ResolveQuery, attempt: _Attempt) -> Optional[TokenRecord]:
        candidates = await self._search(query, attempt)
        with_token = [c for c in candidates if c.property_token]
        picked = pick_best_property(with_token, query.hotel_name, query.official_domain, query.alt_query)

        if picked.best is None:
            attempt.note("live", "no_property", candidates=len(candidates))
            return None

        record = self._record_from_pick(picked, query)
        attempt.note("live", "picked", confidence=round(picked.confidence, 3), candidates=len(candidates))

        if picked.confidence >= CACHE_MIN_CONFIDENCE:
            name_ttl = self.token_ttl if picked.confidence >= LONG_TTL_MIN_CONFIDENCE else self.token_ttl_no_domain
            self._write(attempt.keys.name, record, name_ttl, "cache name")

            if picked.confidence >= BACKFILL_MIN_CONFIDENCE:
                if attempt.keys.domain:
                    self._write(attempt.keys.domain, record, self.token_ttl, "cache domain")
                if attempt.keys.slug:
                    self._write(attempt.keys.slug, record, self.token_ttl, "cache slug")
        return record

    async def _verify_lookup(
        self,
        query: ResolveQuery,
        attempt: _Attempt,
        record: TokenRecord,
        detail: CacheDetail,
        tier_key: Optional[str],
    ) -> TokenRecord:
        """불확실한 캐시 히트에 후보 요약이 없으면 한 번만 재검색해 채웁니다."""
        if record.confidence >= UNCERTAIN_CONFIDENCE or record.candidate_summary:
            return record

        try:
            candidates = await self._search(query, attempt)
        except SearchApiException as e:
            logger.warning(f"[RESOLVER] verify lookup failed: {e}")
            attempt.note("verify", "failed", error_code=e.error_code)
            return record

        picked = pick_best_property(
            [c for c in candidates if c.property_token],
            query.hotel_name,
            query.official_domain,
            query.alt_query,
        )
        record = record.model_copy(update={"candidate_summary": build_candidate_summary(picked.all_candidates)})
        attempt.note("verify", "summary_backfilled", candidates=len(candidates))

        if tier_key:
            ttl = self.token_ttl_no_domain if detail == CacheDetail.HIT_NAME else self.token_ttl
            self._write(tier_key, record, ttl, f"backfill summary {detail.value}")
        return record

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    async def _search(self, query: ResolveQuery, attempt: _Attempt) -> Sequence[Candidate]:
        attempt.search_calls += 1
        return await self.search_client.search_properties(query.search_params())

    def _record_from_pick(self, picked: PickResult, query: ResolveQuery, from_ctx: bool = False) -> TokenRecord:
        best = picked.best
        return TokenRecord(
            property_token=best.property_token,
            property_name=best.name or None,
            city=best.city,
            country=best.country,
            link=best.link,
            link_host=picked.best_link_host or get_host_no_www(best.link),
            score=picked.best_score,
            name_score=picked.best_name_score,
            confidence=picked.confidence,
            domain_match=picked.best_domain_match,
            core_overlap_any=picked.core_overlap_any,
            match_details=picked.match_details,
            official_domain=query.official_domain,
            candidate_summary=build_candidate_summary(picked.all_candidates),
            from_ctx=from_ctx,
        )

    def _write(self, key: str, record: TokenRecord, ttl_seconds: int, label: str) -> None:
        self.deferred.spawn(self.cache.put_token_record(key, record, ttl_seconds), label=f"{label} ({key})")
