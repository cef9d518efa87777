"""출처 허용/차단 정책 필터"""

from typing import List, Optional, Tuple

from news_pulse.models.article import DiscoveredItem
from news_pulse.models.source_policy import SourcePolicy
from news_pulse.utils.logger import get_logger
from news_pulse.utils.url_utils import domain_from_url, domain_matches

logger = get_logger(__name__)


class SourcePolicyFilter:
    """
    병합 항목의 도메인에 정책 적용.

    1. 차단 목록이 있고 도메인이 차단 규칙(또는 그 서브도메인)이면 제외
    2. 허용 목록이 있고 어떤 허용 규칙에도 맞지 않으면 제외
    3. 그 외 통과

    사용법:
        policy_filter = SourcePolicyFilter(SourcePolicy.create(deny_domains=["spam.com"]))
        kept, rejected = policy_filter.apply(items)
    """

    def __init__(self, policy: Optional[SourcePolicy] = None) -> None:
        self._policy = policy or SourcePolicy()

    @property
    def policy(self) -> SourcePolicy:
        return self._policy

    def is_allowed(self, domain: str) -> bool:
        """도메인 단위 허용 여부."""
        deny = self._policy.deny_domains
        allow = self._policy.allow_domains
        if deny and any(domain_matches(domain, rule) for rule in deny):
            return False
        if allow and not any(domain_matches(domain, rule) for rule in allow):
            return False
        return True

    def apply(self, items: List[DiscoveredItem]) -> Tuple[List[DiscoveredItem], int]:
        """
        정책 적용.

        Returns:
            (통과 항목, 제외 건수)
        """
        if self._policy.is_empty:
            return list(items), 0

        kept: List[DiscoveredItem] = []
        rejected = 0
        for item in items:
            domain = domain_from_url(item.link)
            if self.is_allowed(domain):
                kept.append(item)
            else:
                rejected += 1
                logger.debug("정책 필터 제외: %s (%s)", domain, item.title[:30])
        return kept, rejected
