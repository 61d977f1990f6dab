"""Line breaking tests with a fixed-advance measurer (no font files)."""

import pytest

from echo_card.layout import CONTENT_WIDTH
from echo_card.line_breaker import MAX_OVERFLOW, PUNCTUATION, wrap_text

from conftest import make_face

SAMPLES = [
    "下雨天躲在被窝里看书，手边有一杯热茶。",
    "雨声潺潺，像住在溪边，宁愿天天下雨，以为你是因为下雨不来。",
    "盯着屏幕改了一晚上的Bug，终于跑通了。明天还要继续改，改完再睡觉，睡醒接着改。",
    "结婚吧，你会后悔的；不结婚吧，你也会后悔的。",
    "The only way to get rid of a temptation is to yield to it：王尔德如是说。",
]


class TestWrapText:
    def test_empty_text_gives_no_lines(self, measurer):
        assert wrap_text("", make_face(10), 100, measurer) == []

    def test_short_text_is_one_line(self, measurer):
        assert wrap_text("它动了。", make_face(10), 100, measurer) == ["它动了。"]

    def test_comma_stays_with_preceding_word(self, measurer):
        # "念头" fills the line exactly; the comma hangs instead of wrapping
        lines = wrap_text("念头，回响。", make_face(10), 20, measurer)
        assert lines == ["念头，", "回响。"]

    def test_hanging_punctuation_within_tolerance(self, measurer):
        lines = wrap_text("一二三，四五六。", make_face(10), 30, measurer)
        assert lines == ["一二三，", "四五六。"]

    def test_character_pulled_up_with_following_punctuation(self, measurer):
        # "四" overflows, but "四，" together still fits the tolerance
        lines = wrap_text("一二三四，五", make_face(10), 30, measurer)
        assert lines == ["一二三四，", "五"]

    def test_character_and_punctuation_move_down_together(self, measurer):
        # "二，" would overflow too far, so both start the next line
        lines = wrap_text("一二，", make_face(20), 30, measurer)
        assert lines == ["一", "二，"]

    def test_overwide_character_is_kept(self, measurer):
        assert wrap_text("念", make_face(10), 5, measurer) == ["念"]
        assert wrap_text("念头", make_face(10), 5, measurer) == ["念", "头"]

    def test_non_bmp_characters_are_not_split(self, measurer):
        text = "𠀀𠀁𠀂𠀃"
        lines = wrap_text(text, make_face(10), 20, measurer)
        assert lines == ["𠀀𠀁", "𠀂𠀃"]

    @pytest.mark.parametrize("text", SAMPLES)
    def test_no_characters_lost(self, measurer, text):
        lines = wrap_text(text, make_face(25.8), CONTENT_WIDTH, measurer)
        assert "".join(lines) == text

    @pytest.mark.parametrize("text", SAMPLES)
    def test_no_line_starts_with_punctuation(self, measurer, text):
        for width in (60, 100, 150, CONTENT_WIDTH):
            lines = wrap_text(text, make_face(25.8), width, measurer)
            for line in lines[1:]:
                assert line[0] not in PUNCTUATION, (width, lines)

    @pytest.mark.parametrize("text", SAMPLES)
    def test_lines_respect_width_plus_tolerance(self, measurer, text):
        face = make_face(25.8)
        for line in wrap_text(text, face, CONTENT_WIDTH, measurer):
            if len(line) > 1:
                assert measurer.measure(line, face) <= CONTENT_WIDTH + MAX_OVERFLOW

    def test_deterministic(self, measurer):
        face = make_face(25.8)
        first = wrap_text(SAMPLES[1], face, CONTENT_WIDTH, measurer)
        second = wrap_text(SAMPLES[1], face, CONTENT_WIDTH, measurer)
        assert first == second


class TestConstants:
    def test_overflow_tolerance(self):
        assert MAX_OVERFLOW == pytest.approx(15.48)

    def test_punctuation_set(self):
        assert {"，", "。", "…", "—", "·", "”"} <= PUNCTUATION
        assert "“" in PUNCTUATION
        assert "（" not in PUNCTUATION
