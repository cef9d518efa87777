"""펄스 스냅샷 데이터 모델"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from news_pulse.models.article import Provider, PulseArticle, TrustTier


@dataclass
class CategoryResult:
    """관심 토픽 하나의 결과 (기사는 신뢰도 내림차순)."""
    name: str
    query: str
    articles: List[PulseArticle] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "query": self.query,
            "articles": [a.to_dict() for a in self.articles],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CategoryResult":
        return cls(
            name=data.get("name", ""),
            query=data.get("query", ""),
            articles=[PulseArticle.from_dict(a) for a in data.get("articles", [])],
        )


@dataclass
class TrendSignal:
    """여러 제목에서 반복된 키워드."""
    label: str
    count: int
    categories: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"label": self.label, "count": self.count, "categories": list(self.categories)}


@dataclass
class SourceCoverage:
    """(출처, 신뢰 등급)별 기사 수."""
    source: str
    tier: TrustTier
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"source": self.source, "tier": self.tier.value, "count": self.count}


@dataclass
class QualityInfo:
    """점수 산출 버전과 사용된 정책/피드백 정보."""
    scoring_version: str
    feedback_signals: int
    allow_domains: List[str] = field(default_factory=list)
    deny_domains: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scoringVersion": self.scoring_version,
            "feedbackSignals": self.feedback_signals,
            "allowDomains": list(self.allow_domains),
            "denyDomains": list(self.deny_domains),
        }


@dataclass
class PulseSnapshot:
    """
    파이프라인 1회 실행 결과.

    실행마다 새로 만들어지며 생성 후 변경하지 않는다.
    저장소에는 (owner, date_key) 단위로 덮어쓴다.
    """

    id: str
    date_key: str                # UTC 날짜 (YYYY-MM-DD)
    generated_at: str
    interests: List[str]
    categories: List[CategoryResult]
    trends: List[TrendSignal]
    source_coverage: List[SourceCoverage]
    notes: List[str]
    provider: Provider
    quality: Optional[QualityInfo] = None

    @property
    def articles(self) -> List[PulseArticle]:
        """모든 카테고리의 기사 평탄화."""
        return [article for category in self.categories for article in category.articles]

    def get_category(self, name: str) -> Optional[CategoryResult]:
        for category in self.categories:
            if category.name == name:
                return category
        return None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "dateKey": self.date_key,
            "generatedAt": self.generated_at,
            "interests": list(self.interests),
            "categories": [c.to_dict() for c in self.categories],
            "trends": [t.to_dict() for t in self.trends],
            "sourceCoverage": [s.to_dict() for s in self.source_coverage],
            "notes": list(self.notes),
            "provider": self.provider.value,
        }
        if self.quality is not None:
            data["quality"] = self.quality.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PulseSnapshot":
        """저장된 스냅샷 복원."""
        quality_data = data.get("quality")
        quality = None
        if isinstance(quality_data, dict):
            quality = QualityInfo(
                scoring_version=quality_data.get("scoringVersion", ""),
                feedback_signals=int(quality_data.get("feedbackSignals", 0)),
                allow_domains=list(quality_data.get("allowDomains", [])),
                deny_domains=list(quality_data.get("denyDomains", [])),
            )

        return cls(
            id=data.get("id", ""),
            date_key=data.get("dateKey", ""),
            generated_at=data.get("generatedAt", ""),
            interests=list(data.get("interests", [])),
            categories=[CategoryResult.from_dict(c) for c in data.get("categories", [])],
            trends=[
                TrendSignal(
                    label=t.get("label", ""),
                    count=int(t.get("count", 0)),
                    categories=list(t.get("categories", [])),
                )
                for t in data.get("trends", [])
            ],
            source_coverage=[
                SourceCoverage(
                    source=s.get("source", ""),
                    tier=TrustTier(s.get("tier", TrustTier.UNKNOWN.value)),
                    count=int(s.get("count", 0)),
                )
                for s in data.get("sourceCoverage", [])
            ],
            notes=list(data.get("notes", [])),
            provider=Provider(data.get("provider", Provider.FALLBACK.value)),
            quality=quality,
        )
