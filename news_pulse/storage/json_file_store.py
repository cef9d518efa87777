"""JSON 파일 기반 저장소

디렉터리 구조:
    <root>/<owner>/snapshots/<date_key>.json
    <root>/<owner>/source_policy.json
    <root>/<owner>/feedback.json        {article_id: vote}
"""

import json
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
from urllib.parse import quote

from news_pulse.ingestion.base_connector import Clock, utc_now
from news_pulse.models.feedback import FeedbackSignal, FeedbackVote, build_feedback_signal
from news_pulse.models.snapshot import PulseSnapshot
from news_pulse.models.source_policy import SourcePolicy
from news_pulse.storage.snapshot_store import SnapshotStore, clamp_history_days
from news_pulse.utils.errors import StoreError
from news_pulse.utils.logger import get_logger
from news_pulse.utils.text_utils import format_iso

logger = get_logger(__name__)

DEFAULT_OWNER = "default"


class JsonFileStore(SnapshotStore):
    """
    로컬 디렉터리에 JSON 문서로 저장.

    사용법:
        store = JsonFileStore("./data")
        store.upsert(snapshot, "default")
        history = store.load_history("default", days=7)
    """

    def __init__(self, root: Union[str, Path], clock: Optional[Clock] = None) -> None:
        self._root = Path(root)
        self._clock = clock or utc_now

    # ===== 스냅샷 =====

    def upsert(self, snapshot: PulseSnapshot, owner_key: str) -> None:
        path = self._owner_dir(owner_key) / "snapshots" / f"{snapshot.date_key}.json"
        self._write(path, snapshot.to_dict())
        logger.info("스냅샷 저장: %s → %s", snapshot.id, path)

    def load_history(self, owner_key: str, days: int = 7) -> List[PulseSnapshot]:
        limit = clamp_history_days(days)
        directory = self._owner_dir(owner_key) / "snapshots"
        if not directory.is_dir():
            return []

        snapshots = []
        for path in directory.glob("*.json"):
            data = self._read(path)
            if isinstance(data, dict):
                snapshots.append(PulseSnapshot.from_dict(data))
        snapshots.sort(key=lambda s: s.generated_at, reverse=True)
        return snapshots[:limit]

    # ===== 출처 정책 =====

    def load_source_policy(self, owner_key: str) -> Optional[SourcePolicy]:
        path = self._owner_dir(owner_key) / "source_policy.json"
        if not path.exists():
            return None
        data = self._read(path)
        return SourcePolicy.from_dict(data if isinstance(data, dict) else None)

    def save_source_policy(self, owner_key: str, policy: SourcePolicy) -> SourcePolicy:
        normalized = SourcePolicy.create(policy.allow_domains, policy.deny_domains)
        self._write(self._owner_dir(owner_key) / "source_policy.json", normalized.to_dict())
        return normalized

    # ===== 피드백 =====

    def record_feedback(self, vote: FeedbackVote) -> None:
        if not vote.article_id.strip():
            raise StoreError("Feedback vote requires an article id")

        path = self._owner_dir(vote.owner_key) / "feedback.json"
        votes = self._read(path) if path.exists() else {}
        if not isinstance(votes, dict):
            votes = {}

        data = vote.to_dict()
        if not data.get("createdAt"):
            data["createdAt"] = format_iso(self._clock())
        votes[vote.article_id] = data
        self._write(path, votes)

    def load_feedback_signal(self, owner_key: str, days: int = 45) -> FeedbackSignal:
        path = self._owner_dir(owner_key) / "feedback.json"
        if not path.exists():
            return FeedbackSignal.empty()

        data = self._read(path)
        if not isinstance(data, dict):
            return FeedbackSignal.empty()

        cutoff = self._clock() - timedelta(days=max(1, int(days)))
        votes = []
        for row in data.values():
            if not isinstance(row, dict):
                continue
            vote = FeedbackVote.from_dict(row)
            created = vote.created_datetime()
            if created is not None and created < cutoff:
                continue
            votes.append(vote)

        signal = build_feedback_signal(votes)
        logger.debug("피드백 신호 로드: %s, %d건", owner_key, signal.total_signals)
        return signal

    # ===== 파일 I/O =====

    def _owner_dir(self, owner_key: str) -> Path:
        owner = (owner_key or "").strip() or DEFAULT_OWNER
        name = quote(owner, safe="")
        if name in (".", ".."):
            name = name.replace(".", "%2E")
        return self._root / name

    @staticmethod
    def _read(path: Path) -> Any:
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            raise StoreError(f"Failed to read {path.name}: {e}") from e

    @staticmethod
    def _write(path: Path, data: Dict[str, Any]) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp = path.with_suffix(".tmp")
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            tmp.replace(path)
        except OSError as e:
            raise StoreError(f"Failed to write {path.name}: {e}") from e
