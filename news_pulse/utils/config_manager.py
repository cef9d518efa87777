"""YAML 설정 관리자

config/*.yaml(로깅 설정 제외)을 하나로 합쳐 dot-notation으로 조회한다.
환경변수 NEWS_PULSE_<KEY_PATH>가 있으면 YAML 값보다 우선하며,
환경변수 값은 문자열이므로 타입별 접근자(get_int 등)로 변환해서 읽는다.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from news_pulse.utils.logger import get_logger

logger = get_logger(__name__)

ENV_PREFIX = "NEWS_PULSE_"
DEFAULT_CONFIG_DIR = Path(__file__).parent.parent / "config"


def env_key_for(key_path: str) -> str:
    """키 경로 → 환경변수 이름 (pulse.region → NEWS_PULSE_PULSE_REGION)."""
    return ENV_PREFIX + key_path.upper().replace(".", "_")


class ConfigManager:
    """
    펄스 설정 로더.

    파이프라인 코어는 이 클래스를 직접 쓰지 않는다.
    진입점에서 PulseConfig.from_config()로 값 객체를 만들어 넘긴다.

    사용법:
        config = ConfigManager()
        timeout = config.get_float("pulse.request_timeout_seconds", 10.0)
        api_key = config.get_secret("providers.semantic_search.api_key")
    """

    def __init__(self, config_dir: Optional[str] = None) -> None:
        self._config_dir = Path(config_dir) if config_dir else DEFAULT_CONFIG_DIR
        self._files: Dict[str, Dict[str, Any]] = {}
        self._merged: Dict[str, Any] = {}

        if not self._config_dir.is_dir():
            logger.warning("설정 디렉토리가 존재하지 않습니다: %s", self._config_dir)
            return

        for yaml_file in sorted(self._config_dir.glob("*.yaml")):
            if yaml_file.name.startswith("logging"):
                continue  # setup_logging() 담당
            try:
                data = self.load(yaml_file)
            except (OSError, yaml.YAMLError) as e:
                logger.error("설정 파일 로드 실패: %s - %s", yaml_file.name, e)
                continue
            self._files[yaml_file.stem] = data
            self._merged.update(data)
            logger.debug("설정 파일 로드: %s (섹션 %s)", yaml_file.name, ", ".join(data) or "-")

    @property
    def config_dir(self) -> Path:
        return self._config_dir

    @staticmethod
    def load(filepath: Any) -> Dict[str, Any]:
        """YAML 파일 하나 로드. 최상위가 매핑이 아니면 빈 딕셔너리."""
        with open(filepath, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return data if isinstance(data, dict) else {}

    # ─── 조회 ───

    def get(self, key_path: str, default: Any = None) -> Any:
        """dot-notation 조회 (환경변수 우선)."""
        env_value = os.environ.get(env_key_for(key_path))
        if env_value is not None:
            return env_value

        current: Any = self._merged
        for key in key_path.split("."):
            if not isinstance(current, dict) or key not in current:
                return default
            current = current[key]
        return default if current is None else current

    def get_str(self, key_path: str, default: str = "") -> str:
        return str(self.get(key_path, default))

    def get_int(self, key_path: str, default: int) -> int:
        return int(self._coerce(key_path, default, int))

    def get_float(self, key_path: str, default: float) -> float:
        return float(self._coerce(key_path, default, float))

    def get_list(self, key_path: str, default: Optional[List[str]] = None) -> List[str]:
        """리스트 값. 문자열(환경변수 등)은 쉼표로 나눈다."""
        value = self.get(key_path)
        if value is None:
            return list(default or [])
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        if isinstance(value, (list, tuple)):
            return [str(item) for item in value]
        logger.warning("리스트가 아닌 설정값 무시: %s=%r", key_path, value)
        return list(default or [])

    def get_secret(self, key_path: str) -> Optional[str]:
        """API 키 등. 공백뿐이면 None."""
        value = self.get(key_path)
        if value is None:
            return None
        return str(value).strip() or None

    def get_section(self, section: str) -> Dict[str, Any]:
        """최상위 섹션 딕셔너리. 없으면 빈 딕셔너리."""
        value = self._merged.get(section, {})
        return value if isinstance(value, dict) else {}

    def get_file_config(self, filename: str) -> Dict[str, Any]:
        """파일(확장자 제외) 단위 설정 전체."""
        return self._files.get(filename, {})

    def _coerce(self, key_path: str, default: Any, cast: Any) -> Any:
        value = self.get(key_path, default)
        try:
            return cast(value)
        except (TypeError, ValueError):
            logger.warning("설정값 형식 오류, 기본값 사용: %s=%r", key_path, value)
            return default
