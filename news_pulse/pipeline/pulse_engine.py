"""펄스 엔진 - 토픽별 수집 → 병합 → 정책 → 보강 → 점수 → 스냅샷 조립"""

import asyncio
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Sequence, Union

import httpx

from news_pulse.analysis.coverage_aggregator import aggregate_coverage
from news_pulse.analysis.trend_extractor import TrendExtractor
from news_pulse.dedup.merge_engine import MergeEngine
from news_pulse.ingestion.base_connector import Clock, utc_now
from news_pulse.ingestion.content_enricher import ContentEnricher
from news_pulse.ingestion.feed_search_connector import FeedSearchConnector
from news_pulse.ingestion.semantic_search_connector import SemanticSearchConnector
from news_pulse.models.article import DiscoveredItem, Provider, PulseArticle
from news_pulse.models.feedback import FeedbackSignal
from news_pulse.models.pulse_config import PulseConfig
from news_pulse.models.snapshot import CategoryResult, PulseSnapshot, QualityInfo
from news_pulse.models.source_policy import SourcePolicy
from news_pulse.parsers.interest_parser import normalize_interests
from news_pulse.parsers.query_builder import build_query
from news_pulse.ranking.policy_filter import SourcePolicyFilter
from news_pulse.registry.trust_classifier import classify_source
from news_pulse.scoring.confidence_scorer import ConfidenceScorer
from news_pulse.utils.errors import ProviderError
from news_pulse.utils.logger import get_logger, log_duration
from news_pulse.utils.text_utils import extract_keywords, format_iso, stable_id
from news_pulse.utils.url_utils import domain_from_url

logger = get_logger(__name__)

UNKNOWN_SOURCE = "Unknown source"
BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


@dataclass
class PulseRequest:
    """generate() 입력. 키가 없으면 해당 제공자 단계는 건너뛴다."""
    interests: Union[str, Sequence[str], None] = None
    semantic_search_api_key: Optional[str] = None
    enrichment_api_key: Optional[str] = None
    source_policy: Optional[SourcePolicy] = None
    feedback_signal: Optional[FeedbackSignal] = None


@dataclass
class PulseResult:
    snapshot: PulseSnapshot
    latency_ms: int

    @property
    def notes(self) -> List[str]:
        return self.snapshot.notes


@dataclass
class _TopicOutcome:
    category: CategoryResult
    notes: List[str] = field(default_factory=list)


@dataclass
class _RunContext:
    """한 번의 generate 실행 동안 모든 토픽이 읽기 전용으로 공유."""
    feed: FeedSearchConnector
    semantic: Optional[SemanticSearchConnector]
    enricher: Optional[ContentEnricher]
    policy_filter: SourcePolicyFilter
    scorer: ConfidenceScorer
    now: datetime


def _base36(value: int) -> str:
    if value <= 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def _clean_key(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    return value or None


def detect_snapshot_provider(providers: Sequence[Provider]) -> Provider:
    """
    스냅샷 대표 제공자.

    - 기사 없음 → FALLBACK
    - 모두 같은 제공자 → 그 제공자
    - 섞였으면 SEMANTIC+ENRICHED가 있으면 그것, 없으면 MIXED
    """
    distinct = set(providers)
    if not distinct:
        return Provider.FALLBACK
    if len(distinct) == 1:
        return next(iter(distinct))
    if Provider.SEMANTIC_ENRICHED in distinct:
        return Provider.SEMANTIC_ENRICHED
    return Provider.MIXED


class PulseEngine:
    """
    관심 토픽별 뉴스 펄스 스냅샷 생성기.

    토픽은 서로 병렬로 처리하고, 토픽 안의 단계는 순차 실행한다.
    토픽 실행은 자기 결과(카테고리 + 노트)만 만들며, 노트 합치기와
    트렌드/커버리지 집계는 모든 토픽이 끝난 뒤 한 번에 한다.

    제공자 실패(ProviderError)는 토픽 안에서 노트로 바뀌고,
    그 밖의 예외는 내부 오류로 호출자에게 그대로 전달된다.

    사용법:
        engine = PulseEngine(PulseConfig())
        result = engine.generate_sync(PulseRequest(interests=["AI"]))
    """

    def __init__(
        self,
        config: Optional[PulseConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        """
        Args:
            config: 파이프라인 설정 (None이면 기본값).
            transport: httpx 전송 계층 (테스트에서 MockTransport 주입).
            clock: 현재 시각 함수 (UTC).
        """
        self.config = config or PulseConfig()
        self._transport = transport
        self._clock = clock or utc_now
        self._merger = MergeEngine()
        self._trends = TrendExtractor(self.config.max_trends)

    async def generate(self, request: PulseRequest) -> PulseResult:
        """스냅샷 1회 생성."""
        started = time.perf_counter()
        config = self.config

        interests = normalize_interests(request.interests, config.default_interests)
        policy = request.source_policy if request.source_policy is not None else config.default_source_policy
        feedback = request.feedback_signal or FeedbackSignal.empty()
        semantic_key = _clean_key(request.semantic_search_api_key)
        enrichment_key = _clean_key(request.enrichment_api_key)

        logger.info(
            "펄스 생성 시작: %s (시맨틱 검색=%s, 본문 보강=%s)",
            interests, bool(semantic_key), bool(enrichment_key),
        )

        async with httpx.AsyncClient(
            transport=self._transport,
            timeout=httpx.Timeout(config.request_timeout),
            follow_redirects=True,
        ) as client:
            context = _RunContext(
                feed=FeedSearchConnector(client, config, self._clock),
                semantic=(
                    SemanticSearchConnector(client, semantic_key, config, self._clock)
                    if semantic_key else None
                ),
                enricher=(
                    ContentEnricher(client, enrichment_key, config, self._clock)
                    if enrichment_key else None
                ),
                policy_filter=SourcePolicyFilter(policy),
                scorer=ConfidenceScorer(feedback),
                now=self._clock(),
            )
            results = await asyncio.gather(
                *(self._run_topic(interest, context) for interest in interests),
                return_exceptions=True,
            )

        for interest, result in zip(interests, results):
            if isinstance(result, BaseException):
                logger.error("토픽 처리 중 내부 오류: %s - %r", interest, result)
                raise result

        outcomes: List[_TopicOutcome] = list(results)
        notes = [note for outcome in outcomes for note in outcome.notes]
        if not semantic_key:
            notes.append("Semantic search API key not set: using feed-only discovery.")
        if not enrichment_key:
            notes.append("Enrichment API key not set: citation enrichment disabled.")

        snapshot = self._assemble(
            interests, [outcome.category for outcome in outcomes], notes, policy, feedback
        )
        latency_ms = int((time.perf_counter() - started) * 1000)
        logger.info(
            "펄스 생성 완료: %s, 기사 %d건, 제공자 %s, %dms",
            snapshot.id, len(snapshot.articles), snapshot.provider.value, latency_ms,
        )
        return PulseResult(snapshot=snapshot, latency_ms=latency_ms)

    def generate_sync(self, request: PulseRequest) -> PulseResult:
        """동기 버전 (실행 중인 이벤트 루프가 있어도 사용 가능)."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop and loop.is_running():
            # 이미 이벤트 루프가 실행 중이면 (Jupyter 등)
            import concurrent.futures
            with concurrent.futures.ThreadPoolExecutor() as pool:
                return pool.submit(asyncio.run, self.generate(request)).result()
        return asyncio.run(self.generate(request))

    # ═══════════════════════════════════════════════════
    # 토픽 파이프라인
    # ═══════════════════════════════════════════════════

    async def _run_topic(self, interest: str, context: _RunContext) -> _TopicOutcome:
        config = self.config
        query = build_query(interest, config.region)
        notes: List[str] = []

        with log_duration(logger, "수집: %s", interest):
            discovered = await self._discover(interest, query, context, notes)
        merged = self._merger.merge(discovered)

        kept, rejected = context.policy_filter.apply(merged)
        if rejected:
            notes.append(f"Source policy filtered {rejected} item(s) for {interest}.")

        if context.enricher and kept:
            with log_duration(logger, "본문 보강: %s", interest):
                enriched = await context.enricher.enrich_many(kept[: config.enrich_per_category])
            kept = MergeEngine.replace_by_link(kept, enriched)

        articles = [
            context.scorer.apply(self._build_article(interest, item, ordinal), context.now)
            for ordinal, item in enumerate(kept)
        ]
        # 신뢰도 내림차순, 동점이면 최신순
        articles.sort(key=lambda a: a.published_at, reverse=True)
        articles.sort(key=lambda a: a.confidence_score, reverse=True)
        articles = articles[: config.max_items_per_category]

        if not articles:
            notes.append(f"No results for {interest}.")

        logger.info("토픽 완료: %s → 수집 %d, 병합 %d, 기사 %d", interest, len(discovered), len(merged), len(articles))
        return _TopicOutcome(
            category=CategoryResult(name=interest, query=query, articles=articles),
            notes=notes,
        )

    async def _discover(
        self, interest: str, query: str, context: _RunContext, notes: List[str]
    ) -> List[DiscoveredItem]:
        """시맨틱 검색 우선, 결과가 부족하면 피드 검색 추가."""
        items: List[DiscoveredItem] = []

        if context.semantic:
            try:
                items.extend(await context.semantic.fetch(query))
            except ProviderError as e:
                logger.warning("시맨틱 검색 실패: %s - %s", interest, e)
                notes.append(f"Failed {interest}: {e}")

        if len(items) < self.config.semantic_min_results:
            try:
                items.extend(await context.feed.fetch(query))
            except ProviderError as e:
                logger.warning("피드 검색 실패: %s - %s", interest, e)
                notes.append(f"Failed {interest}: {e}")

        return items

    def _build_article(self, interest: str, item: DiscoveredItem, ordinal: int) -> PulseArticle:
        source = item.source or UNKNOWN_SOURCE
        return PulseArticle(
            id=stable_id(interest, item.link, ordinal),
            title=item.title,
            summary=item.summary,
            url=item.link,
            source=source,
            source_url=item.source_url,
            published_at=item.published_at,
            trust_tier=classify_source(source),
            category=interest,
            provider=item.provider,
            domain=domain_from_url(item.link),
            citations=list(item.citations),
            keywords=extract_keywords(item.title, self.config.max_keywords),
        )

    # ═══════════════════════════════════════════════════
    # 스냅샷 조립
    # ═══════════════════════════════════════════════════

    def _assemble(
        self,
        interests: List[str],
        categories: List[CategoryResult],
        notes: List[str],
        policy: SourcePolicy,
        feedback: FeedbackSignal,
    ) -> PulseSnapshot:
        articles = [article for category in categories for article in category.articles]

        trends = self._trends.extract((a.title, a.category) for a in articles)
        coverage = aggregate_coverage(
            ((a.source, a.trust_tier) for a in articles), self.config.max_coverage
        )

        generated = self._clock()
        generated_at = format_iso(generated)
        date_key = generated_at[:10]

        return PulseSnapshot(
            id=f"pulse-{date_key}-{_base36(int(generated.timestamp() * 1000))}",
            date_key=date_key,
            generated_at=generated_at,
            interests=list(interests),
            categories=categories,
            trends=trends,
            source_coverage=coverage,
            notes=notes,
            provider=detect_snapshot_provider([a.provider for a in articles]),
            quality=QualityInfo(
                scoring_version=self.config.scoring_version,
                feedback_signals=feedback.total_signals,
                allow_domains=list(policy.allow_domains),
                deny_domains=list(policy.deny_domains),
            ),
        )
