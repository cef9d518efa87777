"""제공자 커넥터 베이스 클래스"""

import asyncio
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional

import httpx

from news_pulse.models.article import DiscoveredItem
from news_pulse.models.pulse_config import PulseConfig
from news_pulse.utils.errors import ParseError, TransportError
from news_pulse.utils.logger import get_logger

logger = get_logger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ProviderClient:
    """
    외부 제공자 HTTP 호출 공통부.

    모든 요청은 config.request_timeout 안에 끝나야 하며,
    초과/비 2xx/연결 실패는 TransportError로 변환된다.
    """

    provider_name = "provider"

    def __init__(
        self,
        client: httpx.AsyncClient,
        config: Optional[PulseConfig] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self._client = client
        self.config = config or PulseConfig()
        self._clock = clock or utc_now

    def now(self) -> datetime:
        return self._clock()

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """타임아웃이 걸린 HTTP 요청. 실패는 모두 TransportError."""
        timeout = self.config.request_timeout
        kwargs.setdefault("timeout", httpx.Timeout(timeout))
        try:
            response = await asyncio.wait_for(
                self._client.request(method, url, **kwargs), timeout=timeout
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise TransportError(
                self.provider_name,
                f"{self.provider_name} request timed out after {timeout:g}s",
                timed_out=True,
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(
                self.provider_name, f"{self.provider_name} request failed: {e}"
            ) from e

        if not response.is_success:
            raise TransportError(
                self.provider_name,
                f"{self.provider_name} request failed ({response.status_code})",
                status_code=response.status_code,
            )
        return response

    def _json(self, response: httpx.Response) -> Any:
        """JSON 응답 파싱. 형식 오류는 ParseError."""
        try:
            return response.json()
        except ValueError as e:
            raise ParseError(
                self.provider_name, f"{self.provider_name} returned malformed JSON: {e}"
            ) from e


class BaseConnector(ProviderClient, ABC):
    """검색 제공자 커넥터의 추상 베이스."""

    @abstractmethod
    async def fetch(self, query: str) -> List[DiscoveredItem]:
        """쿼리로 항목 검색."""
        ...
