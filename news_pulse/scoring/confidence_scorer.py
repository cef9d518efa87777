"""신뢰도 점수 - 신뢰 등급, 최신성, 교차 확인, 피드백 편향"""

import math
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Dict, List, Optional

from news_pulse.models.article import ConfidenceLabel, PulseArticle, TrustTier
from news_pulse.models.feedback import FeedbackSignal
from news_pulse.utils.logger import get_logger
from news_pulse.utils.text_utils import parse_datetime

logger = get_logger(__name__)

TRUST_WEIGHTS: Dict[TrustTier, float] = {
    TrustTier.A: 1.0,
    TrustTier.B: 0.8,
    TrustTier.C: 0.58,
    TrustTier.UNKNOWN: 0.45,
}

# 최종 점수 가중치 (합 1.0)
SCORE_WEIGHTS: Dict[str, float] = {
    "trust": 0.50,
    "freshness": 0.22,
    "corroboration": 0.18,
    "feedback": 0.10,
}

# 피드백 편향 구성 (합 1.0)
FEEDBACK_WEIGHTS: Dict[str, float] = {
    "domain": 0.55,
    "category": 0.30,
    "keyword": 0.15,
}

FRESHNESS_DECAY_HOURS = 72.0
NEUTRAL_FRESHNESS = 0.4      # 발행일 파싱 불가
CORROBORATION_SCALE = 6.0
HIGH_THRESHOLD = 80.0
MEDIUM_THRESHOLD = 60.0


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


@dataclass
class ConfidenceResult:
    """점수 산출 결과."""
    score: float
    label: ConfidenceLabel
    relevance_bias: float
    reasons: List[str] = field(default_factory=list)
    components: Dict[str, float] = field(default_factory=dict)


class ConfidenceScorer:
    """
    기사별 0~100 신뢰도 점수.

    score = 100 × (0.50·trust + 0.22·freshness + 0.18·corroboration + 0.10·feedback)

    입력은 기사에 저장되는 필드(trust_tier, published_at, citations, provider,
    domain, category, keywords)와 피드백 신호뿐이라 저장된 기사로 재계산 가능.

    사용법:
        scorer = ConfidenceScorer(feedback_signal)
        scored = scorer.apply(article, now=datetime.now(timezone.utc))
    """

    def __init__(self, feedback: Optional[FeedbackSignal] = None) -> None:
        self._feedback = feedback or FeedbackSignal.empty()

    def score(self, article: PulseArticle, now: Optional[datetime] = None) -> ConfidenceResult:
        """점수, 등급, 근거 산출."""
        now = now or datetime.now(timezone.utc)

        trust = self._trust_weight(article.trust_tier)
        freshness = self._freshness(article.published_at, now)
        corroboration = self._corroboration(article)
        bias = self._feedback_bias(article)
        feedback = (bias + 1.0) / 2.0

        raw = (
            trust * SCORE_WEIGHTS["trust"]
            + freshness * SCORE_WEIGHTS["freshness"]
            + corroboration * SCORE_WEIGHTS["corroboration"]
            + feedback * SCORE_WEIGHTS["feedback"]
        )
        score = round(_clamp(raw * 100, 0.0, 100.0), 1)

        reasons = [
            f"Trust tier {article.trust_tier.value}",
            f"Freshness {round(freshness * 100)}%",
            f"Corroboration {round(corroboration * 100)}%",
        ]
        if self._feedback.has_signal:
            reasons.append(f"Feedback {round(feedback * 100)}%")

        return ConfidenceResult(
            score=score,
            label=self.label_for(score),
            relevance_bias=round(bias, 3),
            reasons=reasons,
            components={
                "trust": trust,
                "freshness": freshness,
                "corroboration": corroboration,
                "feedback": feedback,
            },
        )

    def apply(self, article: PulseArticle, now: Optional[datetime] = None) -> PulseArticle:
        """점수 필드를 채운 새 기사."""
        result = self.score(article, now)
        return replace(
            article,
            confidence_score=result.score,
            confidence_label=result.label,
            confidence_reasons=result.reasons,
            relevance_bias=result.relevance_bias,
        )

    @staticmethod
    def label_for(score: float) -> ConfidenceLabel:
        if score >= HIGH_THRESHOLD:
            return ConfidenceLabel.HIGH
        if score >= MEDIUM_THRESHOLD:
            return ConfidenceLabel.MEDIUM
        return ConfidenceLabel.LOW

    @staticmethod
    def _trust_weight(tier: TrustTier) -> float:
        return TRUST_WEIGHTS.get(tier, TRUST_WEIGHTS[TrustTier.UNKNOWN])

    @staticmethod
    def _freshness(published_at: str, now: datetime) -> float:
        """exp(-경과시간/72h), 파싱 불가 시 0.4."""
        published = parse_datetime(published_at)
        if published is None:
            return NEUTRAL_FRESHNESS
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        age_hours = max(0.0, (now - published).total_seconds() / 3600.0)
        return _clamp(math.exp(-age_hours / FRESHNESS_DECAY_HOURS), 0.0, 1.0)

    @staticmethod
    def _corroboration(article: PulseArticle) -> float:
        """(인용 수 + 서로 다른 제공자 수) / 6."""
        providers = {citation.provider for citation in article.citations} or {article.provider}
        return _clamp((len(article.citations) + len(providers)) / CORROBORATION_SCALE, 0.0, 1.0)

    def _feedback_bias(self, article: PulseArticle) -> float:
        """도메인 55% + 카테고리 30% + 키워드 평균 15%, [-1, 1]. 신호 없으면 0."""
        if not self._feedback.has_signal:
            return 0.0

        domain_bias = self._feedback.for_domain(article.domain)
        category_bias = self._feedback.for_category(article.category)
        keyword_values = [
            value for value in (self._feedback.for_keyword(k) for k in article.keywords)
            if value is not None
        ]
        keyword_bias = sum(keyword_values) / len(keyword_values) if keyword_values else 0.0

        bias = (
            domain_bias * FEEDBACK_WEIGHTS["domain"]
            + category_bias * FEEDBACK_WEIGHTS["category"]
            + keyword_bias * FEEDBACK_WEIGHTS["keyword"]
        )
        return _clamp(bias, -1.0, 1.0)
