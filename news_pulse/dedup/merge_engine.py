"""제공자 간 병합 및 URL 기반 중복 제거"""

from dataclasses import replace
from typing import Dict, Iterable, List

from news_pulse.models.article import DiscoveredItem, Provider
from news_pulse.utils.logger import get_logger
from news_pulse.utils.url_utils import canonicalize_url

logger = get_logger(__name__)


class MergeEngine:
    """
    한 토픽의 제공자 결과를 정규화 URL 기준으로 합친다.

    - 처음 등장한 항목이 기준
    - 같은 URL 재등장 시: 인용 목록 이어붙임, 더 긴 요약 유지
    - 제공자가 다르면 MIXED
    제목 또는 링크가 없는 항목은 버린다.
    """

    def merge(self, items: Iterable[DiscoveredItem]) -> List[DiscoveredItem]:
        """병합된 항목 목록 (첫 등장 순서)."""
        unique: Dict[str, DiscoveredItem] = {}
        total = 0

        for item in items:
            total += 1
            if not item.title or not item.link:
                continue

            key = canonicalize_url(item.link)
            current = unique.get(key)
            if current is None:
                unique[key] = replace(item, link=key, citations=list(item.citations))
                continue

            unique[key] = replace(
                current,
                summary=current.summary if len(current.summary) >= len(item.summary) else item.summary,
                provider=current.provider if current.provider == item.provider else Provider.MIXED,
                citations=[*current.citations, *item.citations],
            )

        logger.debug("병합 완료: %d → %d건", total, len(unique))
        return list(unique.values())

    @staticmethod
    def replace_by_link(
        items: List[DiscoveredItem], updated: Iterable[DiscoveredItem]
    ) -> List[DiscoveredItem]:
        """같은 URL의 항목을 updated 쪽으로 교체 (순서 유지)."""
        by_link = {canonicalize_url(item.link): item for item in updated}
        return [by_link.get(canonicalize_url(item.link), item) for item in items]
