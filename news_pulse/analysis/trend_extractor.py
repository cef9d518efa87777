"""트렌드 추출 - 별칭 키워드 표 + 일반 용어 마이닝"""

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Set, Tuple

from news_pulse.models.snapshot import TrendSignal
from news_pulse.utils.logger import get_logger

logger = get_logger(__name__)

TERM_PATTERN = re.compile(r"[A-Za-z][A-Za-z0-9-]{2,}")

STOP_WORDS = frozenset({
    "the", "and", "for", "with", "from", "into", "that", "this",
    "thailand", "thai", "news", "today", "update",
    "รัฐบาล", "ข่าว", "ล่าสุด",
})

# (대표 라벨, 소문자 별칭들)
TREND_KEYWORDS: List[Tuple[str, Tuple[str, ...]]] = [
    ("GLM-5", ("glm-5", "glm5")),
    ("Open Source AI", ("open source ai", "open-source ai", "opensource ai", "โอเพนซอร์ส")),
    ("กกต", ("กกต", "election commission")),
    ("เลือกตั้ง", ("เลือกตั้ง", "election")),
    ("Investment", ("investment", "ลงทุน", "หุ้น", "set index")),
    ("Semiconductor", ("semiconductor", "chip", "gpu")),
    ("ASEAN", ("asean",)),
    ("Bitcoin", ("bitcoin", "btc", "คริปโต", "crypto")),
]

MIN_TREND_COUNT = 2
MAX_TREND_CATEGORIES = 3


@dataclass
class _Bucket:
    count: int = 0
    categories: List[str] = field(default_factory=list)

    def add(self, category: str) -> None:
        self.count += 1
        if category not in self.categories:
            self.categories.append(category)


class TrendExtractor:
    """
    기사 제목에서 반복 등장하는 주제를 뽑는다.

    - 별칭 표: 소문자 제목에 별칭이 포함되면 대표 라벨로 집계
    - 일반 용어: 3자 이상 영숫자 토큰, 불용어 제외, 대문자 토큰은 그대로, 나머지는 첫 글자만 대문자
    - 한 제목은 같은 라벨에 최대 1회 기여 (별칭과 일반 용어가 같은 라벨이어도 1회)
    - 2회 미만 라벨 제거, count 내림차순 → 라벨 오름차순, 상위 N개
    """

    def __init__(self, limit: int = 12) -> None:
        self.limit = limit

    def extract(self, rows: Iterable[Tuple[str, str]]) -> List[TrendSignal]:
        """
        (제목, 카테고리) 목록에서 트렌드 추출.

        Args:
            rows: 모든 토픽의 기사를 펼친 (title, category) 쌍

        Returns:
            TrendSignal 리스트
        """
        buckets: Dict[str, _Bucket] = {}

        for title, category in rows:
            for label in self._labels_for(title):
                buckets.setdefault(label, _Bucket()).add(category)

        trends = [
            TrendSignal(
                label=label,
                count=bucket.count,
                categories=bucket.categories[:MAX_TREND_CATEGORIES],
            )
            for label, bucket in buckets.items()
            if bucket.count >= MIN_TREND_COUNT
        ]
        trends.sort(key=lambda t: (-t.count, t.label.casefold(), t.label))

        logger.debug("트렌드 후보 %d개 → %d개", len(buckets), min(len(trends), self.limit))
        return trends[: self.limit]

    def _labels_for(self, title: str) -> Set[str]:
        labels = set(self.alias_labels(title))
        labels.update(self.term_labels(title))
        return labels

    @staticmethod
    def alias_labels(title: str) -> List[str]:
        """별칭 표 매칭 라벨."""
        lower = title.lower()
        return [
            label for label, aliases in TREND_KEYWORDS
            if any(alias in lower for alias in aliases)
        ]

    @staticmethod
    def term_labels(title: str) -> List[str]:
        """일반 용어 라벨."""
        labels = []
        for term in TERM_PATTERN.findall(title):
            if term.lower() in STOP_WORDS:
                continue
            labels.append(term if term.upper() == term else term[0].upper() + term[1:])
        return labels
