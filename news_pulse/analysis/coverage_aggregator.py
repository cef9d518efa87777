"""출처 커버리지 집계"""

from collections import Counter
from typing import Iterable, List, Tuple

from news_pulse.models.article import TrustTier
from news_pulse.models.snapshot import SourceCoverage

UNKNOWN_SOURCE = "Unknown source"


def aggregate_coverage(
    rows: Iterable[Tuple[str, TrustTier]],
    limit: int = 12,
) -> List[SourceCoverage]:
    """
    (출처, 신뢰 등급) 쌍별 기사 수.

    count 내림차순 → 출처 오름차순 정렬 후 상위 limit개.
    빈 출처는 "Unknown source"로 집계.
    """
    counts: Counter = Counter(
        (source or UNKNOWN_SOURCE, tier) for source, tier in rows
    )
    coverage = [
        SourceCoverage(source=source, tier=tier, count=count)
        for (source, tier), count in counts.items()
    ]
    coverage.sort(key=lambda c: (-c.count, c.source.casefold(), c.source, c.tier.value))
    return coverage[:limit]
