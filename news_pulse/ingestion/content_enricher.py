"""상위 기사 본문 보강 (스크레이프 API)

스크레이프 API로 원문을 추출해 제목/요약을 교체하고
근거 발췌가 포함된 인용을 추가합니다. 실패는 항목 단위로 무시합니다.
"""

import asyncio
from dataclasses import replace
from typing import Any, Dict, List, Optional

import httpx

from news_pulse.ingestion.base_connector import Clock, ProviderClient
from news_pulse.models.article import Citation, DiscoveredItem, Provider
from news_pulse.models.pulse_config import PulseConfig
from news_pulse.utils.errors import ParseError, ProviderError
from news_pulse.utils.logger import get_logger
from news_pulse.utils.text_utils import excerpt, format_iso

logger = get_logger(__name__)

GOOGLE_NEWS_REDIRECT_MARKERS = ("news.google.com/rss/articles/", "news.google.com/articles/")


class ContentEnricher(ProviderClient):
    """
    기사 본문 보강기.

    주요 기능:
    - Google News 리다이렉트 URL → 원문 URL 변환
    - 스크레이프 API의 markdown/metadata 사용, markdown이 없으면 trafilatura로 HTML 본문 추출
    - 보강 실패(비 2xx, 형식 오류, 타임아웃)는 원래 항목 그대로 반환

    사용법:
        enricher = ContentEnricher(client, api_key, config)
        top = await enricher.enrich_many(items[:2])
    """

    provider_name = "Enrichment"

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        config: Optional[PulseConfig] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        super().__init__(client, config, clock)
        self._api_key = api_key

    async def enrich_many(self, items: List[DiscoveredItem]) -> List[DiscoveredItem]:
        """항목별 병렬 보강 (입력 순서 유지)."""
        if not items:
            return []
        return list(await asyncio.gather(*(self.enrich(item) for item in items)))

    async def enrich(self, item: DiscoveredItem) -> DiscoveredItem:
        """단일 항목 보강. 실패 시 원래 항목."""
        try:
            data = await self._scrape(item.link)
        except ProviderError as e:
            logger.debug("본문 보강 실패 (원본 유지): %s - %s", item.link[:80], e)
            return item
        return self._apply(item, data)

    async def _scrape(self, link: str) -> Dict[str, Any]:
        """스크레이프 API 호출 → data 객체."""
        target = await self._resolve_redirect_url(link)
        response = await self._request(
            "POST",
            self.config.enrichment_endpoint,
            headers={
                "content-type": "application/json",
                "Authorization": f"Bearer {self._api_key}",
            },
            json={"url": target, "formats": ["markdown", "html"], "onlyMainContent": True},
        )
        payload = self._json(response)
        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, dict):
            raise ParseError(self.provider_name, "Enrichment payload has no data object")
        return data

    def _apply(self, item: DiscoveredItem, data: Dict[str, Any]) -> DiscoveredItem:
        """추출 결과로 새 항목 생성."""
        metadata = data.get("metadata") if isinstance(data.get("metadata"), dict) else {}
        markdown = str(data.get("markdown") or "")
        if not markdown.strip() and data.get("html"):
            markdown = self._extract_main_text(str(data["html"]))

        evidence = excerpt(markdown, self.config.evidence_chars)
        description = excerpt(str(metadata.get("description") or ""), self.config.evidence_chars)
        title = str(metadata.get("title") or "").strip() or item.title
        summary = description or evidence or item.summary

        provider = Provider.SEMANTIC_ENRICHED if item.provider == Provider.SEMANTIC else Provider.MIXED
        citation = Citation(
            label="Content extraction",
            url=item.link,
            publisher=item.source,
            published_at=item.published_at,
            retrieved_at=format_iso(self.now()),
            provider=provider,
            evidence=evidence or None,
        )

        logger.debug("본문 보강 완료: %s (%s)", item.link[:80], provider.value)
        return replace(
            item,
            title=title,
            summary=summary,
            provider=provider,
            citations=[*item.citations, citation],
        )

    async def _resolve_redirect_url(self, url: str) -> str:
        """Google News 리다이렉트 URL을 실제 URL로 변환. 실패 시 원래 URL."""
        if not any(marker in url for marker in GOOGLE_NEWS_REDIRECT_MARKERS):
            return url
        timeout = self.config.request_timeout
        try:
            decoded = await asyncio.wait_for(
                asyncio.to_thread(self._decode_google_news_url, url, timeout),
                timeout=timeout,
            )
        except (ImportError, AttributeError) as e:
            logger.warning("Google News 디코더 사용 불가 (googlenewsdecoder 확인 필요): %s", e)
            return url
        except asyncio.TimeoutError:
            logger.debug("Google News URL 디코딩 시간 초과: %s", url[:50])
            return url
        except Exception as e:
            # 디코더 내부 HTTP/파싱 오류
            logger.debug("Google News URL 디코딩 실패: %s - %s", url[:50], e)
            return url
        return decoded or url

    @staticmethod
    def _decode_google_news_url(url: str, timeout: float) -> Optional[str]:
        from googlenewsdecoder import gnewsdecoder

        result = gnewsdecoder(url, timeout=timeout)
        if result.get("success") and result.get("decoded_url"):
            return result["decoded_url"]
        logger.debug("Google News URL 디코딩 결과 없음: %s - %s", url[:50], result.get("message"))
        return None

    @staticmethod
    def _extract_main_text(html: str) -> str:
        """trafilatura 본문 추출."""
        import trafilatura

        text = trafilatura.extract(
            html,
            include_comments=False,
            include_tables=False,
            include_links=False,
            favor_precision=True,
        )
        return text or ""
