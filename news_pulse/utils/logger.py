"""로깅 설정 및 유틸리티"""

import logging
import logging.config
import os
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

import yaml

DEFAULT_LOGGING_CONFIG = Path(__file__).parent.parent / "config" / "logging_config.yaml"
DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
PACKAGE_LOGGER = "news_pulse"
LEVEL_ENV = "NEWS_PULSE_LOG_LEVEL"


def setup_logging(
    config_path: Optional[str] = None,
    level: Optional[str] = None,
    log_dir: Optional[str] = None,
) -> None:
    """
    YAML(dictConfig) 기반 로깅 초기화.

    Args:
        config_path: logging_config.yaml 경로. None이면 패키지 기본 파일.
        level: news_pulse 로거 레벨 강제 ("DEBUG" 등). None이면 NEWS_PULSE_LOG_LEVEL 또는 YAML 값.
        log_dir: 파일 핸들러의 로그 디렉토리 교체 (파일명은 유지).
    """
    path = Path(config_path) if config_path else DEFAULT_LOGGING_CONFIG
    level = (level or os.environ.get(LEVEL_ENV) or "").upper() or None

    if not path.exists():
        logging.basicConfig(level=level or logging.INFO, format=DEFAULT_FORMAT)
        return

    with open(path, "r", encoding="utf-8") as f:
        log_config: Dict[str, Any] = yaml.safe_load(f) or {}

    for handler in log_config.get("handlers", {}).values():
        filename = handler.get("filename")
        if not filename:
            continue
        if log_dir:
            filename = handler["filename"] = os.path.join(log_dir, os.path.basename(filename))
        directory = os.path.dirname(filename)
        if directory:
            os.makedirs(directory, exist_ok=True)

    if level:
        log_config.setdefault("loggers", {}).setdefault(PACKAGE_LOGGER, {})["level"] = level

    logging.config.dictConfig(log_config)


def get_logger(name: str) -> logging.Logger:
    """모듈별 로거 (예: "news_pulse.scoring.confidence_scorer")."""
    return logging.getLogger(name)


@contextmanager
def log_duration(logger: logging.Logger, message: str, *args: Any) -> Iterator[None]:
    """블록 소요 시간을 DEBUG로 기록. message는 %-포맷, 소요(ms)가 뒤에 붙는다."""
    started = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        logger.debug(message + " (%dms)", *args, elapsed_ms)
