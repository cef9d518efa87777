"""Google News RSS 검색 커넥터"""

import re
import time
from typing import Dict, List, Optional
from urllib.parse import quote, urlencode

from news_pulse.ingestion.base_connector import BaseConnector
from news_pulse.models.article import Citation, DiscoveredItem, Provider
from news_pulse.utils.logger import get_logger
from news_pulse.utils.text_utils import decode_entities, excerpt, format_iso, to_iso_time
from news_pulse.utils.url_utils import canonicalize_url

logger = get_logger(__name__)

ITEM_PATTERN = re.compile(r"<item\b[\s\S]*?</item>", re.IGNORECASE)
SOURCE_PATTERN = re.compile(r'<source(?:\s+url="([^"]*)")?[^>]*>([\s\S]*?)</source>', re.IGNORECASE)
UNKNOWN_SOURCE = "Unknown source"


class FeedSearchConnector(BaseConnector):
    """
    공개 뉴스 검색 피드 커넥터 (Google News RSS).

    특징:
    - API 키 불필요
    - 언어/지역: hl, gl, ceid 파라미터
    - 마크업이 깨져 있어도 item 블록 단위 패턴 추출로 최대한 복구

    사용법:
        connector = FeedSearchConnector(client, config)
        items = await connector.fetch("(economy OR GDP) Thailand")
    """

    provider_name = "Feed search"

    async def fetch(self, query: str) -> List[DiscoveredItem]:
        """
        피드 검색.

        Raises:
            TransportError: 비 2xx 응답 또는 타임아웃.
        """
        url = self._build_url(query)
        logger.debug("피드 검색: query='%s'", query)

        start = time.time()
        response = await self._request("GET", url, headers={"User-Agent": self.config.user_agent})
        items = self._parse_feed(response.text)
        elapsed_ms = int((time.time() - start) * 1000)

        logger.info("피드 검색 완료: %d건 (%dms)", len(items), elapsed_ms)
        return items

    def _build_url(self, query: str) -> str:
        """RSS 검색 URL 생성."""
        params = {
            "q": query,
            "hl": self.config.feed_language,
            "gl": self.config.feed_country,
            "ceid": self.config.feed_ceid,
        }
        return f"{self.config.feed_base_url}?{urlencode(params, quote_via=quote)}"

    def _parse_feed(self, xml_text: str) -> List[DiscoveredItem]:
        """item 블록별 태그 추출."""
        now = self.now()
        retrieved_at = format_iso(now)
        items: List[DiscoveredItem] = []

        for block in ITEM_PATTERN.findall(xml_text or ""):
            link = canonicalize_url(self._extract_tag(block, "link"))
            published_at = to_iso_time(self._extract_tag(block, "pubDate"), now)
            source = self._extract_source(block)

            items.append(DiscoveredItem(
                title=self._extract_tag(block, "title"),
                summary=excerpt(self._extract_tag(block, "description"), self.config.feed_summary_chars),
                link=link,
                published_at=published_at,
                source=source["name"],
                source_url=source["url"],
                provider=Provider.RSS,
                citations=[
                    Citation(
                        label="RSS source",
                        url=source["url"] or link,
                        publisher=source["name"],
                        published_at=published_at,
                        retrieved_at=retrieved_at,
                        provider=Provider.RSS,
                    )
                ],
            ))

        return items

    @staticmethod
    def _extract_tag(block: str, tag: str) -> str:
        """블록 안 첫 번째 <tag>...</tag> 내용 (엔티티 디코딩)."""
        pattern = re.compile(rf"<{tag}(?:\s[^>]*)?>([\s\S]*?)</{tag}>", re.IGNORECASE)
        match = pattern.search(block)
        if not match or not match.group(1):
            return ""
        return decode_entities(match.group(1))

    @staticmethod
    def _extract_source(block: str) -> Dict[str, Optional[str]]:
        """<source url="...">발행처</source>."""
        match = SOURCE_PATTERN.search(block)
        if not match:
            return {"name": UNKNOWN_SOURCE, "url": None}
        name = decode_entities(match.group(2) or "") or UNKNOWN_SOURCE
        url = decode_entities(match.group(1)) if match.group(1) else None
        return {"name": name, "url": url}
