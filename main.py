"""NewsPulse - 태국 뉴스 펄스 데모 진입점

사용법:
    python main.py                  # 설정의 기본 관심 토픽
    python main.py AI "Business"    # 관심 토픽 지정
"""

import io
import sys

from dotenv import load_dotenv

from news_pulse.models.pulse_config import PulseConfig
from news_pulse.pipeline.pulse_engine import PulseEngine
from news_pulse.pipeline.pulse_runner import PulseRunner
from news_pulse.storage.json_file_store import JsonFileStore
from news_pulse.utils.config_manager import ConfigManager
from news_pulse.utils.logger import get_logger, setup_logging

# Windows 인코딩 문제 해결
if sys.platform == "win32":
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding="utf-8", errors="replace")


def main() -> None:
    load_dotenv()
    setup_logging()
    logger = get_logger(__name__)
    logger.info("NewsPulse 시작")

    config = ConfigManager()
    pulse_config = PulseConfig.from_config(config)

    store = JsonFileStore(config.get_str("storage.root", "./data"))
    runner = PulseRunner(PulseEngine(pulse_config), store)

    interests = sys.argv[1:] or list(pulse_config.default_interests)
    outcome = runner.run(
        owner_key=config.get_str("storage.owner_key", "default"),
        interests=interests,
        semantic_search_api_key=config.get_secret("providers.semantic_search.api_key"),
        enrichment_api_key=config.get_secret("providers.enrichment.api_key"),
    )
    snapshot = outcome.snapshot

    print("=" * 60)
    print(f" {pulse_config.region} Pulse {snapshot.date_key} ({snapshot.provider.value})")
    print("=" * 60)

    for category in snapshot.categories:
        print(f"\n[{category.name}] {category.query} - {len(category.articles)}건")
        for article in category.articles:
            print(
                f"  {article.confidence_score:5.1f} {article.confidence_label.value:<6} "
                f"[{article.trust_tier.value}] {article.title[:70]}"
            )
            print(f"         {article.source} | {article.published_at} | {article.url[:80]}")

    if snapshot.trends:
        print(f"\n{'=' * 60}\n트렌드")
        for trend in snapshot.trends:
            print(f"  {trend.label}: {trend.count} ({', '.join(trend.categories)})")

    if snapshot.source_coverage:
        print(f"\n{'=' * 60}\n출처 커버리지")
        for row in snapshot.source_coverage:
            print(f"  {row.source} [{row.tier.value}]: {row.count}")

    if outcome.notes:
        print(f"\n{'=' * 60}\n노트")
        for note in outcome.notes:
            print(f"  - {note}")

    print(f"\n소요: {outcome.latency_ms}ms, 피드백 신호: {outcome.feedback_signals}, 저장: {outcome.persisted}")


if __name__ == "__main__":
    main()
