"""JSON 파일 저장소 테스트"""

from datetime import datetime, timezone

import pytest

from news_pulse.models.article import Citation, ConfidenceLabel, Provider, PulseArticle, TrustTier
from news_pulse.models.feedback import FeedbackVote
from news_pulse.models.snapshot import CategoryResult, PulseSnapshot, QualityInfo, SourceCoverage, TrendSignal
from news_pulse.models.source_policy import SourcePolicy
from news_pulse.storage.json_file_store import JsonFileStore
from news_pulse.storage.snapshot_store import clamp_history_days
from news_pulse.utils.errors import StoreError

NOW = datetime(2026, 2, 5, 7, 0, 0, tzinfo=timezone.utc)


# ─── Fixture ────────────────────────────────────────────

def _make_article(**kwargs) -> PulseArticle:
    defaults = {
        "id": "ai-abc123def456",
        "title": "GLM-5 launches open source AI model",
        "summary": "Zhipu released GLM-5.",
        "url": "https://www.reuters.com/technology/glm-5",
        "source": "Reuters",
        "source_url": "https://www.reuters.com",
        "published_at": "2026-02-05T06:00:00.000Z",
        "trust_tier": TrustTier.A,
        "category": "AI",
        "provider": Provider.SEMANTIC,
        "domain": "reuters.com",
        "keywords": ["glm-5", "model"],
        "citations": [Citation(
            label="Semantic discovery",
            url="https://www.reuters.com/technology/glm-5",
            retrieved_at="2026-02-05T07:00:00.000Z",
            provider=Provider.SEMANTIC,
            publisher="Reuters",
        )],
        "confidence_score": 88.7,
        "confidence_label": ConfidenceLabel.HIGH,
        "confidence_reasons": ["Trust tier A", "Freshness 99%", "Corroboration 67%"],
    }
    defaults.update(kwargs)
    return PulseArticle(**defaults)


def _make_snapshot(date_key="2026-02-05", generated_at=None, snapshot_id=None) -> PulseSnapshot:
    generated_at = generated_at or f"{date_key}T07:00:00.000Z"
    return PulseSnapshot(
        id=snapshot_id or f"pulse-{date_key}-x",
        date_key=date_key,
        generated_at=generated_at,
        interests=["AI"],
        categories=[CategoryResult(name="AI", query="AI Thailand", articles=[_make_article()])],
        trends=[TrendSignal(label="GLM-5", count=2, categories=["AI"])],
        source_coverage=[SourceCoverage(source="Reuters", tier=TrustTier.A, count=1)],
        notes=["Enrichment API key not set: citation enrichment disabled."],
        provider=Provider.SEMANTIC,
        quality=QualityInfo(scoring_version="pulse-confidence-v1", feedback_signals=0),
    )


def _make_vote(article_id="ai-1", relevant=True, created_at="2026-02-04T07:00:00.000Z", domain="reuters.com") -> FeedbackVote:
    return FeedbackVote(
        article_id=article_id,
        relevant=relevant,
        domain=domain,
        category="AI",
        keywords=["glm-5"],
        created_at=created_at,
    )


@pytest.fixture
def store(tmp_path) -> JsonFileStore:
    return JsonFileStore(tmp_path, clock=lambda: NOW)


# ═══════════════════════════════════════════════════════════
# 스냅샷
# ═══════════════════════════════════════════════════════════

class TestSnapshots:

    def test_round_trip(self, store):
        snapshot = _make_snapshot()
        store.upsert(snapshot, "default")
        loaded = store.load_history("default")
        assert loaded == [snapshot]

    def test_same_date_overwrites(self, store):
        store.upsert(_make_snapshot(snapshot_id="first"), "default")
        store.upsert(_make_snapshot(snapshot_id="second", generated_at="2026-02-05T19:00:00.000Z"), "default")
        history = store.load_history("default")
        assert [s.id for s in history] == ["second"]

    def test_history_newest_first_and_limited(self, store):
        for day in range(1, 6):
            store.upsert(_make_snapshot(date_key=f"2026-02-0{day}"), "default")
        history = store.load_history("default", days=3)
        assert [s.date_key for s in history] == ["2026-02-05", "2026-02-04", "2026-02-03"]

    def test_owners_isolated(self, store):
        store.upsert(_make_snapshot(), "alice")
        assert store.load_history("bob") == []
        assert len(store.load_history("alice")) == 1

    def test_owner_key_with_path_chars(self, store, tmp_path):
        store.upsert(_make_snapshot(), "../escape")
        assert len(store.load_history("../escape")) == 1
        assert not (tmp_path.parent / "escape").exists()

    def test_corrupt_file_raises_store_error(self, store, tmp_path):
        store.upsert(_make_snapshot(), "default")
        path = next((tmp_path / "default" / "snapshots").glob("*.json"))
        path.write_text("{broken", encoding="utf-8")
        with pytest.raises(StoreError):
            store.load_history("default")

    def test_unwritable_root_raises_store_error(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        with pytest.raises(StoreError):
            JsonFileStore(blocker).upsert(_make_snapshot(), "default")


class TestClampHistoryDays:

    @pytest.mark.parametrize("days,expected", [(0, 1), (-3, 1), (7, 7), (30, 30), (100, 30), (None, 7), ("x", 7)])
    def test_clamp(self, days, expected):
        assert clamp_history_days(days) == expected


# ═══════════════════════════════════════════════════════════
# 정책 / 피드백
# ═══════════════════════════════════════════════════════════

class TestSourcePolicyStorage:

    def test_missing_policy(self, store):
        assert store.load_source_policy("default") is None

    def test_save_and_load(self, store):
        saved = store.save_source_policy(
            "default", SourcePolicy(allow_domains=("https://www.Reuters.com/",), deny_domains=("spam.com",))
        )
        assert saved.allow_domains == ("reuters.com",)
        assert store.load_source_policy("default") == saved


class TestFeedbackStorage:

    def test_empty(self, store):
        assert store.load_feedback_signal("default").total_signals == 0

    def test_record_and_load(self, store):
        store.record_feedback(_make_vote("a", True))
        store.record_feedback(_make_vote("b", False, domain="spam.com"))
        signal = store.load_feedback_signal("default")
        assert signal.total_signals == 2
        assert signal.for_domain("reuters.com") > 0
        assert signal.for_domain("spam.com") < 0

    def test_later_vote_replaces_earlier(self, store):
        store.record_feedback(_make_vote("a", True))
        store.record_feedback(_make_vote("a", False))
        signal = store.load_feedback_signal("default")
        assert signal.total_signals == 1
        assert signal.for_domain("reuters.com") < 0

    def test_old_votes_excluded(self, store):
        store.record_feedback(_make_vote("old", True, created_at="2025-11-01T00:00:00.000Z"))
        store.record_feedback(_make_vote("new", True))
        assert store.load_feedback_signal("default", days=45).total_signals == 1

    def test_created_at_filled(self, store, tmp_path):
        store.record_feedback(_make_vote("a", True, created_at=None))
        assert store.load_feedback_signal("default", days=1).total_signals == 1
        assert "2026-02-05T07:00:00.000Z" in (tmp_path / "default" / "feedback.json").read_text(encoding="utf-8")

    def test_blank_article_id_rejected(self, store):
        with pytest.raises(StoreError):
            store.record_feedback(_make_vote(" "))
