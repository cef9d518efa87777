"""ConfigManager / PulseConfig 테스트"""

import os
import tempfile

from news_pulse.models.pulse_config import PulseConfig
from news_pulse.utils.config_manager import ConfigManager


class TestConfigManagerLoad:
    """설정 파일 로드 테스트."""

    def test_load_real_config(self, config_manager: ConfigManager) -> None:
        """실제 config.yaml 로드 확인."""
        assert config_manager.get("pulse.region") == "Thailand"

    def test_logging_config_not_merged(self, config_manager: ConfigManager) -> None:
        """logging_config.yaml은 설정 병합 대상이 아님."""
        assert config_manager.get("handlers") is None
        assert config_manager.get_file_config("logging_config") == {}

    def test_load_missing_directory(self) -> None:
        """존재하지 않는 디렉토리 처리."""
        config = ConfigManager(config_dir="/nonexistent/path")
        assert config.get("anything") is None

    def test_load_empty_directory(self) -> None:
        """빈 디렉토리 처리."""
        with tempfile.TemporaryDirectory() as tmpdir:
            config = ConfigManager(config_dir=tmpdir)
            assert config.get("anything") is None

    def test_broken_yaml_skipped(self) -> None:
        """파싱 불가 파일은 건너뜀."""
        with tempfile.TemporaryDirectory() as tmpdir:
            with open(os.path.join(tmpdir, "broken.yaml"), "w", encoding="utf-8") as f:
                f.write("pulse: [unclosed\n")
            with open(os.path.join(tmpdir, "ok.yaml"), "w", encoding="utf-8") as f:
                f.write("pulse:\n  region: Global\n")
            config = ConfigManager(config_dir=tmpdir)
            assert config.get("pulse.region") == "Global"


class TestConfigManagerGet:
    """dot-notation 접근 테스트."""

    def test_get_nested_value(self, config_manager: ConfigManager) -> None:
        assert config_manager.get("providers.feed_search.language") == "th"

    def test_get_deeply_nested(self, config_manager: ConfigManager) -> None:
        assert config_manager.get("pulse.summary_chars.semantic") == 320

    def test_get_missing_key_returns_default(self, config_manager: ConfigManager) -> None:
        assert config_manager.get("nonexistent.key", "fallback") == "fallback"

    def test_get_section(self, config_manager: ConfigManager) -> None:
        scoring = config_manager.get_section("scoring")
        assert scoring["version"] == "pulse-confidence-v1"
        assert scoring["feedback_days"] == 45

    def test_get_missing_section(self, config_manager: ConfigManager) -> None:
        assert config_manager.get_section("nonexistent") == {}


class TestConfigManagerEnvOverride:
    """환경변수 오버라이드 테스트."""

    def test_env_override(self, config_manager: ConfigManager) -> None:
        os.environ["NEWS_PULSE_PULSE_REGION"] = "Global"
        try:
            assert config_manager.get("pulse.region") == "Global"
        finally:
            del os.environ["NEWS_PULSE_PULSE_REGION"]

    def test_api_key_from_env(self, config_manager: ConfigManager) -> None:
        """YAML의 null 키를 환경변수가 채움."""
        assert config_manager.get("providers.semantic_search.api_key") is None
        os.environ["NEWS_PULSE_PROVIDERS_SEMANTIC_SEARCH_API_KEY"] = "exa-test"
        try:
            assert config_manager.get("providers.semantic_search.api_key") == "exa-test"
        finally:
            del os.environ["NEWS_PULSE_PROVIDERS_SEMANTIC_SEARCH_API_KEY"]


class TestPulseConfig:
    """ConfigManager → PulseConfig 변환 테스트."""

    def test_defaults_without_yaml(self) -> None:
        config = PulseConfig()
        assert config.region == "Thailand"
        assert config.request_timeout == 10.0
        assert config.max_items_per_category == 8
        assert config.enrich_per_category == 2
        assert config.semantic_min_results == 5
        assert config.feed_ceid == "TH:th"
        assert config.default_interests == ("Technology", "AI", "Economic", "Political", "Business")
        assert config.default_source_policy.is_empty

    def test_from_real_config_matches_defaults(self, config_manager: ConfigManager) -> None:
        assert PulseConfig.from_config(config_manager) == PulseConfig()

    def test_from_custom_config(self, tmp_config_dir: str) -> None:
        config = PulseConfig.from_config(ConfigManager(config_dir=tmp_config_dir))
        assert config.region == "Global"
        assert config.request_timeout == 3.0
        assert config.max_items_per_category == 5
        assert config.semantic_min_results == 3
        assert config.feed_ceid == "US:en"
        assert config.default_interests == ("Energy", "Tourism")
        assert config.default_source_policy.deny_domains == ("spam.com",)
        assert config.scoring_version == "pulse-confidence-test"

    def test_env_override_reaches_pulse_config(self, config_manager: ConfigManager) -> None:
        os.environ["NEWS_PULSE_PULSE_MAX_ITEMS_PER_CATEGORY"] = "4"
        try:
            config = PulseConfig.from_config(config_manager)
        finally:
            del os.environ["NEWS_PULSE_PULSE_MAX_ITEMS_PER_CATEGORY"]
        assert config.max_items_per_category == 4


class TestConfigManagerTypedAccess:
    """타입별 접근자 테스트 (환경변수 문자열 변환)."""

    def test_int_from_env_string(self, config_manager: ConfigManager) -> None:
        os.environ["NEWS_PULSE_PULSE_MAX_TRENDS"] = "7"
        try:
            assert config_manager.get_int("pulse.max_trends", 12) == 7
        finally:
            del os.environ["NEWS_PULSE_PULSE_MAX_TRENDS"]

    def test_invalid_number_falls_back(self, config_manager: ConfigManager) -> None:
        os.environ["NEWS_PULSE_PULSE_REQUEST_TIMEOUT_SECONDS"] = "soon"
        try:
            assert config_manager.get_float("pulse.request_timeout_seconds", 10.0) == 10.0
        finally:
            del os.environ["NEWS_PULSE_PULSE_REQUEST_TIMEOUT_SECONDS"]

    def test_list_from_comma_string(self, config_manager: ConfigManager) -> None:
        os.environ["NEWS_PULSE_PULSE_DEFAULT_INTERESTS"] = "Energy, , Tourism"
        try:
            assert config_manager.get_list("pulse.default_interests") == ["Energy", "Tourism"]
        finally:
            del os.environ["NEWS_PULSE_PULSE_DEFAULT_INTERESTS"]

    def test_list_from_yaml(self, config_manager: ConfigManager) -> None:
        assert config_manager.get_list("pulse.default_interests")[0] == "Technology"

    def test_blank_secret_is_none(self, config_manager: ConfigManager) -> None:
        os.environ["NEWS_PULSE_PROVIDERS_ENRICHMENT_API_KEY"] = "   "
        try:
            assert config_manager.get_secret("providers.enrichment.api_key") is None
        finally:
            del os.environ["NEWS_PULSE_PROVIDERS_ENRICHMENT_API_KEY"]
