"""발행처 이름 → 신뢰 등급"""

import re
from typing import List, Pattern, Tuple

from news_pulse.models.article import TrustTier

# 표 순서대로 검사, 첫 매칭 등급 사용
TRUST_PATTERNS: List[Tuple[Pattern[str], TrustTier]] = [
    (
        re.compile(
            r"reuters|associated press|ap news|bbc|financial times|bloomberg|nikkei|the economist",
            re.IGNORECASE,
        ),
        TrustTier.A,
    ),
    (
        re.compile(
            r"thai pbs|bangkok post|the nation thailand|nationthailand|prachatai|thairath|matichon|the standard",
            re.IGNORECASE,
        ),
        TrustTier.B,
    ),
    (re.compile(r"blog|forum|opinion", re.IGNORECASE), TrustTier.C),
]


def classify_source(source: str) -> TrustTier:
    """발행처 문자열의 신뢰 등급. 매칭 없으면 UNKNOWN."""
    for pattern, tier in TRUST_PATTERNS:
        if pattern.search(source or ""):
            return tier
    return TrustTier.UNKNOWN
