"""파이프라인 설정 값 객체"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Tuple

from news_pulse.models.source_policy import SourcePolicy
from news_pulse.parsers.interest_parser import DEFAULT_PULSE_INTERESTS, normalize_interests

if TYPE_CHECKING:
    from news_pulse.utils.config_manager import ConfigManager

FEED_SEARCH_BASE_URL = "https://news.google.com/rss/search"
SEMANTIC_SEARCH_ENDPOINT = "https://api.exa.ai/search"
ENRICHMENT_ENDPOINT = "https://api.firecrawl.dev/v1/scrape"
SCORING_VERSION = "pulse-confidence-v1"


@dataclass(frozen=True)
class PulseConfig:
    """
    PulseEngine 생성자에 넘기는 불변 설정.

    코어는 환경변수/설정 파일을 직접 읽지 않는다.
    인자 없이 만들면 기본값, from_config()로 YAML 설정 반영.
    """

    region: str = "Thailand"
    feed_base_url: str = FEED_SEARCH_BASE_URL
    feed_language: str = "th"
    feed_country: str = "TH"
    semantic_endpoint: str = SEMANTIC_SEARCH_ENDPOINT
    enrichment_endpoint: str = ENRICHMENT_ENDPOINT
    user_agent: str = "Mozilla/5.0 NewsPulse/1.0"

    request_timeout: float = 10.0
    max_items_per_category: int = 8
    enrich_per_category: int = 2
    semantic_min_results: int = 5
    semantic_num_results: int = 12

    feed_summary_chars: int = 280
    semantic_summary_chars: int = 320
    evidence_chars: int = 260
    max_keywords: int = 8
    max_trends: int = 12
    max_coverage: int = 12

    default_interests: Tuple[str, ...] = DEFAULT_PULSE_INTERESTS
    default_source_policy: SourcePolicy = field(default_factory=SourcePolicy)
    scoring_version: str = SCORING_VERSION
    feedback_days: int = 45

    @property
    def feed_ceid(self) -> str:
        return f"{self.feed_country}:{self.feed_language}"

    @classmethod
    def from_config(cls, config: "ConfigManager") -> "PulseConfig":
        """ConfigManager(pulse / providers / scoring 섹션)에서 설정 생성. 없는 키는 기본값."""
        d = cls()
        interests = normalize_interests(config.get_list("pulse.default_interests"), d.default_interests)
        policy = config.get_section("pulse").get("default_source_policy")
        if not isinstance(policy, dict):
            policy = {}

        return cls(
            region=config.get_str("pulse.region", d.region),
            feed_base_url=config.get_str("providers.feed_search.base_url", d.feed_base_url),
            feed_language=config.get_str("providers.feed_search.language", d.feed_language),
            feed_country=config.get_str("providers.feed_search.country", d.feed_country),
            semantic_endpoint=config.get_str("providers.semantic_search.endpoint", d.semantic_endpoint),
            enrichment_endpoint=config.get_str("providers.enrichment.endpoint", d.enrichment_endpoint),
            user_agent=config.get_str("pulse.user_agent", d.user_agent),
            request_timeout=config.get_float("pulse.request_timeout_seconds", d.request_timeout),
            max_items_per_category=config.get_int("pulse.max_items_per_category", d.max_items_per_category),
            enrich_per_category=config.get_int("providers.enrichment.per_category", d.enrich_per_category),
            semantic_min_results=config.get_int("providers.semantic_search.min_results", d.semantic_min_results),
            semantic_num_results=config.get_int("providers.semantic_search.num_results", d.semantic_num_results),
            feed_summary_chars=config.get_int("pulse.summary_chars.feed", d.feed_summary_chars),
            semantic_summary_chars=config.get_int("pulse.summary_chars.semantic", d.semantic_summary_chars),
            evidence_chars=config.get_int("pulse.summary_chars.evidence", d.evidence_chars),
            max_keywords=config.get_int("pulse.max_keywords", d.max_keywords),
            max_trends=config.get_int("pulse.max_trends", d.max_trends),
            max_coverage=config.get_int("pulse.max_coverage", d.max_coverage),
            default_interests=tuple(interests),
            default_source_policy=SourcePolicy.create(
                policy.get("allow_domains"), policy.get("deny_domains")
            ),
            scoring_version=config.get_str("scoring.version", d.scoring_version),
            feedback_days=config.get_int("scoring.feedback_days", d.feedback_days),
        )
