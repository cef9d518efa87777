"""과거 관련성 투표 → 피드백 편향 테이블"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional

from news_pulse.utils.text_utils import parse_datetime
from news_pulse.utils.url_utils import normalize_domain


def _freeze(table: Optional[Mapping[str, float]]) -> Mapping[str, float]:
    """키 소문자화 + 값 [-1, 1] 제한 + 읽기 전용 뷰."""
    frozen: Dict[str, float] = {}
    for key, value in (table or {}).items():
        name = str(key).strip().lower()
        if name:
            frozen[name] = max(-1.0, min(1.0, float(value)))
    return MappingProxyType(frozen)


@dataclass(frozen=True)
class FeedbackSignal:
    """
    점수 산출기가 읽기 전용으로 쓰는 편향 테이블.

    domain / category / keyword 별 값은 [-1, 1].
    total_signals == 0 이면 편향은 점수에 반영되지 않는다.
    """

    domain_bias: Mapping[str, float] = field(default_factory=dict)
    category_bias: Mapping[str, float] = field(default_factory=dict)
    keyword_bias: Mapping[str, float] = field(default_factory=dict)
    total_signals: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "domain_bias", _freeze(self.domain_bias))
        object.__setattr__(self, "category_bias", _freeze(self.category_bias))
        object.__setattr__(self, "keyword_bias", _freeze(self.keyword_bias))
        object.__setattr__(self, "total_signals", max(0, int(self.total_signals)))

    @classmethod
    def empty(cls) -> "FeedbackSignal":
        return cls()

    @property
    def has_signal(self) -> bool:
        return self.total_signals > 0

    def for_domain(self, domain: str) -> float:
        return self.domain_bias.get(normalize_domain(domain), 0.0)

    def for_category(self, category: str) -> float:
        return self.category_bias.get((category or "").strip().lower(), 0.0)

    def for_keyword(self, keyword: str) -> Optional[float]:
        """키워드 편향. 테이블에 없으면 None."""
        return self.keyword_bias.get((keyword or "").strip().lower())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "domainBias": dict(self.domain_bias),
            "categoryBias": dict(self.category_bias),
            "keywordBias": dict(self.keyword_bias),
            "totalSignals": self.total_signals,
        }


@dataclass
class FeedbackVote:
    """기사 하나에 대한 관련성 투표 (owner, article_id 단위로 1건)."""

    article_id: str
    relevant: bool
    owner_key: str = "default"
    domain: str = ""
    category: str = ""
    keywords: List[str] = field(default_factory=list)
    source: Optional[str] = None
    article_url: Optional[str] = None
    snapshot_date: Optional[str] = None
    confidence_score: Optional[float] = None
    created_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ownerKey": self.owner_key,
            "articleId": self.article_id,
            "relevant": self.relevant,
            "domain": self.domain,
            "category": self.category,
            "keywords": list(self.keywords),
            "source": self.source,
            "articleUrl": self.article_url,
            "snapshotDate": self.snapshot_date,
            "confidenceScore": self.confidence_score,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FeedbackVote":
        score = data.get("confidenceScore")
        return cls(
            article_id=str(data.get("articleId", "")),
            relevant=bool(data.get("relevant")),
            owner_key=str(data.get("ownerKey", "default")),
            domain=str(data.get("domain") or ""),
            category=str(data.get("category") or ""),
            keywords=[str(k) for k in data.get("keywords") or []],
            source=data.get("source"),
            article_url=data.get("articleUrl"),
            snapshot_date=data.get("snapshotDate"),
            confidence_score=float(score) if score is not None else None,
            created_at=data.get("createdAt"),
        )

    def created_datetime(self) -> Optional[datetime]:
        return parse_datetime(self.created_at)


def _bias(up: int, down: int) -> float:
    """(찬성 - 반대) / (전체 + 2): 표본이 적을수록 0 쪽으로 수축."""
    return round((up - down) / (up + down + 2), 4)


def build_feedback_signal(votes: Iterable[FeedbackVote]) -> FeedbackSignal:
    """투표 목록을 도메인/카테고리/키워드 편향 테이블로 집계."""
    tallies: Dict[str, Dict[str, List[int]]] = {
        "domain": defaultdict(lambda: [0, 0]),
        "category": defaultdict(lambda: [0, 0]),
        "keyword": defaultdict(lambda: [0, 0]),
    }
    total = 0

    for vote in votes:
        total += 1
        slot = 0 if vote.relevant else 1

        domain = normalize_domain(vote.domain)
        if domain:
            tallies["domain"][domain][slot] += 1

        category = vote.category.strip().lower()
        if category:
            tallies["category"][category][slot] += 1

        for keyword in {k.strip().lower() for k in vote.keywords if k and k.strip()}:
            tallies["keyword"][keyword][slot] += 1

    return FeedbackSignal(
        domain_bias={k: _bias(*v) for k, v in tallies["domain"].items()},
        category_bias={k: _bias(*v) for k, v in tallies["category"].items()},
        keyword_bias={k: _bias(*v) for k, v in tallies["keyword"].items()},
        total_signals=total,
    )
