"""텍스트/날짜/ID 유틸리티 테스트"""

from datetime import datetime, timedelta, timezone

from news_pulse.utils.text_utils import (
    decode_entities,
    excerpt,
    extract_keywords,
    format_iso,
    parse_datetime,
    stable_id,
    strip_html,
    to_iso_time,
)


class TestTextCleanup:

    def test_decode_entities_cdata(self):
        assert decode_entities("<![CDATA[Tom &amp; Jerry]]>") == "Tom & Jerry"

    def test_strip_html(self):
        assert strip_html("<p>Hello&nbsp;<b>world</b></p>\n\n") == "Hello world"

    def test_strip_html_escaped_markup(self):
        assert strip_html("&lt;a href=&quot;x&quot;&gt;Link&lt;/a&gt; text") == "Link text"

    def test_excerpt_short(self):
        assert excerpt("short text", 20) == "short text"

    def test_excerpt_truncated(self):
        result = excerpt("word " * 100, 50)
        assert len(result) <= 50
        assert result.endswith("...")


class TestKeywords:

    def test_extract_keywords(self):
        title = "GLM-5 launches open source AI model, GLM-5 wins"
        assert extract_keywords(title) == ["glm-5", "launches", "open", "source", "model", "wins"]

    def test_extract_keywords_limit(self):
        title = "alpha beta gamma delta epsilon zeta theta iota kappa"
        assert len(extract_keywords(title, limit=3)) == 3

    def test_non_latin_ignored(self):
        assert extract_keywords("กกต ประกาศ ผลเลือกตั้ง") == []


class TestDates:

    def test_format_iso(self):
        value = datetime(2026, 2, 5, 7, 0, 0, tzinfo=timezone.utc)
        assert format_iso(value) == "2026-02-05T07:00:00.000Z"

    def test_format_iso_converts_to_utc(self):
        value = datetime(2026, 2, 5, 14, 0, 0, tzinfo=timezone(timedelta(hours=7)))
        assert format_iso(value) == "2026-02-05T07:00:00.000Z"

    def test_parse_rfc822(self):
        parsed = parse_datetime("Thu, 05 Feb 2026 06:00:00 GMT")
        assert parsed == datetime(2026, 2, 5, 6, 0, 0, tzinfo=timezone.utc)

    def test_parse_naive_is_utc(self):
        assert parse_datetime("2026-02-05 06:00:00").tzinfo is not None

    def test_parse_invalid(self):
        assert parse_datetime("not a date") is None
        assert parse_datetime("") is None
        assert parse_datetime(None) is None

    def test_to_iso_time_fallback(self, reference_time):
        assert to_iso_time("garbage", reference_time) == "2026-02-05T07:00:00.000Z"


class TestStableId:

    def test_deterministic(self):
        first = stable_id("AI", "https://example.com/a", 0)
        second = stable_id("AI", "https://example.com/a", 0)
        assert first == second

    def test_format(self):
        value = stable_id("Climate Change", "https://example.com/a", 3)
        prefix, digest = value.rsplit("-", 1)
        assert prefix == "climate-change"
        assert len(digest) == 12

    def test_inputs_change_id(self):
        base = stable_id("AI", "https://example.com/a", 0)
        assert stable_id("AI", "https://example.com/a", 1) != base
        assert stable_id("AI", "https://example.com/b", 0) != base
        assert stable_id("Business", "https://example.com/a", 0) != base
