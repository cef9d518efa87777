"""시맨틱(뉴럴) 검색 API 커넥터"""

import time
from typing import Any, Dict, List, Optional

import httpx

from news_pulse.ingestion.base_connector import BaseConnector, Clock
from news_pulse.models.article import Citation, DiscoveredItem, Provider
from news_pulse.models.pulse_config import PulseConfig
from news_pulse.utils.errors import ParseError
from news_pulse.utils.logger import get_logger
from news_pulse.utils.text_utils import excerpt, format_iso, to_iso_time
from news_pulse.utils.url_utils import canonicalize_url, domain_from_url, origin_of

logger = get_logger(__name__)


class SemanticSearchConnector(BaseConnector):
    """
    시맨틱 검색 API 커넥터 (Exa 호환 /search).

    응답 results 배열의 url/title/text(summary)/publishedDate 사용.
    제목 또는 URL이 없는 행은 건너뛴다.
    """

    provider_name = "Semantic search"

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        config: Optional[PulseConfig] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        super().__init__(client, config, clock)
        self._api_key = api_key

    async def fetch(self, query: str) -> List[DiscoveredItem]:
        """
        시맨틱 검색.

        Raises:
            TransportError: 비 2xx 응답 또는 타임아웃.
            ParseError: JSON 형식 오류.
        """
        logger.debug("시맨틱 검색: query='%s'", query)
        start = time.time()

        response = await self._request(
            "POST",
            self.config.semantic_endpoint,
            headers={"content-type": "application/json", "x-api-key": self._api_key},
            json={
                "query": query,
                "type": "auto",
                "numResults": self.config.semantic_num_results,
                "text": True,
                "useAutoprompt": False,
            },
        )
        rows = self._extract_rows(self._json(response))
        items = self._parse_rows(rows)

        elapsed_ms = int((time.time() - start) * 1000)
        logger.info("시맨틱 검색 완료: %d/%d건 (%dms)", len(items), len(rows), elapsed_ms)
        return items

    def _extract_rows(self, payload: Any) -> List[Dict[str, Any]]:
        """results 또는 data.results 배열."""
        if not isinstance(payload, dict):
            raise ParseError(self.provider_name, "Semantic search payload is not an object")

        rows = payload.get("results")
        if rows is None and isinstance(payload.get("data"), dict):
            rows = payload["data"].get("results")
        if rows is None:
            return []
        if not isinstance(rows, list):
            raise ParseError(self.provider_name, "Semantic search results is not a list")
        return [row for row in rows if isinstance(row, dict)]

    def _parse_rows(self, rows: List[Dict[str, Any]]) -> List[DiscoveredItem]:
        now = self.now()
        retrieved_at = format_iso(now)
        items: List[DiscoveredItem] = []

        for row in rows:
            link = canonicalize_url(str(row.get("url") or ""))
            title = str(row.get("title") or "").strip()
            if not title or not link:
                continue

            summary = excerpt(
                str(row.get("summary") or row.get("text") or ""),
                self.config.semantic_summary_chars,
            )
            published_at = to_iso_time(
                str(row.get("publishedDate") or row.get("published_date") or row.get("crawlDate") or ""),
                now,
            )
            source = str(row.get("source") or "").strip() or domain_from_url(link)

            items.append(DiscoveredItem(
                title=title,
                summary=summary,
                link=link,
                published_at=published_at,
                source=source,
                source_url=origin_of(link),
                provider=Provider.SEMANTIC,
                citations=[
                    Citation(
                        label="Semantic discovery",
                        url=link,
                        publisher=source,
                        published_at=published_at,
                        retrieved_at=retrieved_at,
                        provider=Provider.SEMANTIC,
                    )
                ],
            ))

        return items
