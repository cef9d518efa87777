"""펄스 기사 데이터 모델"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class TrustTier(Enum):
    """발행처 신뢰도 등급"""
    A = "A"                  # 글로벌 통신사/경제지
    B = "B"                  # 지역/전국 언론
    C = "C"                  # 블로그/포럼/오피니언
    UNKNOWN = "UNKNOWN"


class Provider(Enum):
    """기사를 발견하거나 보강한 경로"""
    RSS = "RSS"                                  # 피드 검색
    SEMANTIC = "SEMANTIC"                        # 시맨틱 검색
    SEMANTIC_ENRICHED = "SEMANTIC+ENRICHED"      # 시맨틱 검색 + 본문 보강
    MIXED = "MIXED"                              # 복수 경로 혼합
    FALLBACK = "FALLBACK"                        # 기사 없음


class ConfidenceLabel(Enum):
    """신뢰도 점수 구간"""
    HIGH = "HIGH"        # 80 이상
    MEDIUM = "MEDIUM"    # 60 이상
    LOW = "LOW"


@dataclass
class Citation:
    """출처 인용. 제공자/보강 단계를 거칠 때마다 목록에 추가된다."""
    label: str
    url: str
    retrieved_at: str
    provider: Provider
    publisher: Optional[str] = None
    published_at: Optional[str] = None
    evidence: Optional[str] = None   # 본문 발췌

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "label": self.label,
            "url": self.url,
            "retrievedAt": self.retrieved_at,
            "provider": self.provider.value,
        }
        if self.publisher:
            data["publisher"] = self.publisher
        if self.published_at:
            data["publishedAt"] = self.published_at
        if self.evidence:
            data["evidence"] = self.evidence
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Citation":
        return cls(
            label=data.get("label", ""),
            url=data.get("url", ""),
            retrieved_at=data.get("retrievedAt", ""),
            provider=Provider(data.get("provider", Provider.RSS.value)),
            publisher=data.get("publisher"),
            published_at=data.get("publishedAt"),
            evidence=data.get("evidence"),
        )


@dataclass
class DiscoveredItem:
    """제공자 커넥터 출력: 병합/필터/점수 이전의 원본 항목."""

    title: str
    summary: str
    link: str                      # 정규화된 URL
    published_at: str              # ISO-8601
    source: str
    provider: Provider
    source_url: Optional[str] = None
    citations: List[Citation] = field(default_factory=list)


@dataclass
class PulseArticle:
    """카테고리별 최종 기사 (점수 포함)."""

    id: str
    title: str
    summary: str
    url: str
    source: str
    published_at: str
    trust_tier: TrustTier
    category: str
    provider: Provider
    domain: str
    source_url: Optional[str] = None
    citations: List[Citation] = field(default_factory=list)
    keywords: List[str] = field(default_factory=list)

    # 신뢰도 점수
    confidence_score: float = 0.0
    confidence_label: ConfidenceLabel = ConfidenceLabel.LOW
    confidence_reasons: List[str] = field(default_factory=list)
    relevance_bias: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "summary": self.summary,
            "url": self.url,
            "source": self.source,
            "publishedAt": self.published_at,
            "trustTier": self.trust_tier.value,
            "category": self.category,
            "provider": self.provider.value,
            "citations": [c.to_dict() for c in self.citations],
            "keywords": list(self.keywords),
            "domain": self.domain,
            "confidenceScore": self.confidence_score,
            "confidenceLabel": self.confidence_label.value,
            "confidenceReasons": list(self.confidence_reasons),
            "relevanceBias": self.relevance_bias,
        }
        if self.source_url:
            data["sourceUrl"] = self.source_url
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PulseArticle":
        return cls(
            id=data.get("id", ""),
            title=data.get("title", ""),
            summary=data.get("summary", ""),
            url=data.get("url", ""),
            source=data.get("source", ""),
            published_at=data.get("publishedAt", ""),
            trust_tier=TrustTier(data.get("trustTier", TrustTier.UNKNOWN.value)),
            category=data.get("category", ""),
            provider=Provider(data.get("provider", Provider.RSS.value)),
            domain=data.get("domain", ""),
            source_url=data.get("sourceUrl"),
            citations=[Citation.from_dict(c) for c in data.get("citations", [])],
            keywords=list(data.get("keywords", [])),
            confidence_score=float(data.get("confidenceScore", 0.0)),
            confidence_label=ConfidenceLabel(data.get("confidenceLabel", ConfidenceLabel.LOW.value)),
            confidence_reasons=list(data.get("confidenceReasons", [])),
            relevance_bias=float(data.get("relevanceBias", 0.0)),
        )
