"""공유 테스트 fixture"""

import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, Optional

import httpx
import pytest
import yaml

from news_pulse.models.pulse_config import PulseConfig
from news_pulse.utils.config_manager import ConfigManager


# 테스트 기준 시각 (결정론적 테스트용)
REFERENCE_TIME = datetime(2026, 2, 5, 7, 0, 0, tzinfo=timezone.utc)

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def reference_time() -> datetime:
    """고정된 기준 시각."""
    return REFERENCE_TIME


@pytest.fixture
def clock() -> Callable[[], datetime]:
    """기준 시각을 돌려주는 시계."""
    return lambda: REFERENCE_TIME


@pytest.fixture
def pulse_config() -> PulseConfig:
    return PulseConfig()


@pytest.fixture
def config_dir() -> str:
    """실제 config 디렉토리 경로."""
    return str(Path(__file__).parent.parent / "config")


@pytest.fixture
def config_manager(config_dir: str) -> ConfigManager:
    """실제 설정 파일 기반 ConfigManager."""
    return ConfigManager(config_dir=config_dir)


@pytest.fixture
def tmp_config_dir():
    """임시 config 디렉토리 (단위 테스트용)."""
    with tempfile.TemporaryDirectory() as tmpdir:
        config_data = {
            "pulse": {
                "region": "Global",
                "request_timeout_seconds": 3,
                "max_items_per_category": 5,
                "default_interests": ["Energy, Tourism", "  Energy "],
                "default_source_policy": {
                    "allow_domains": [],
                    "deny_domains": ["https://www.Spam.com/path"],
                },
            },
            "providers": {
                "feed_search": {"language": "en", "country": "US"},
                "semantic_search": {"min_results": 3},
            },
            "scoring": {"version": "pulse-confidence-test"},
        }
        config_path = os.path.join(tmpdir, "config.yaml")
        with open(config_path, "w", encoding="utf-8") as f:
            yaml.dump(config_data, f, allow_unicode=True)

        yield tmpdir


@pytest.fixture
def transport_factory() -> Callable[..., httpx.MockTransport]:
    """
    호스트별 핸들러로 MockTransport 생성.

    feed / semantic / enrichment 중 지정하지 않은 제공자는 500 응답.
    """

    def _factory(
        feed: Optional[Handler] = None,
        semantic: Optional[Handler] = None,
        enrichment: Optional[Handler] = None,
    ) -> httpx.MockTransport:
        routes: Dict[str, Optional[Handler]] = {
            "news.google.com": feed,
            "api.exa.ai": semantic,
            "api.firecrawl.dev": enrichment,
        }

        def handler(request: httpx.Request) -> httpx.Response:
            route = routes.get(request.url.host)
            if route is None:
                return httpx.Response(500, text="no route")
            return route(request)

        return httpx.MockTransport(handler)

    return _factory

