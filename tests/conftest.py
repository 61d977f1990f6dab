"""Shared fixtures: a deterministic measurer and font set that need no font files."""

import pytest

from echo_card.fonts import ROLES, FontFace, FontSet, TextMeasurer
from echo_card.line_breaker import PUNCTUATION
from echo_card.models import CardData


class FixedAdvanceMeasurer(TextMeasurer):
    """CJK glyphs advance by the font size; punctuation and ASCII by half."""

    def __init__(self):
        self.calls = 0

    def measure(self, text, face):
        self.calls += 1
        width = 0.0
        for ch in text:
            if ch in PUNCTUATION or ord(ch) < 128:
                width += face.size / 2
            else:
                width += face.size
        return width


def make_face(size, role="main", bold=False):
    return FontFace(role=role, family="test", size=size, bold=bold)


@pytest.fixture
def measurer():
    return FixedAdvanceMeasurer()


@pytest.fixture
def fonts():
    """Card roles at their real sizes, backed by Pillow's built-in font."""
    faces = {
        role: FontFace(role=role, family=family, size=size, bold=bold)
        for role, (family, size, bold) in ROLES.items()
    }
    return FontSet(**faces)


@pytest.fixture
def card_data():
    return CardData(
        user_signal="下雨天躲在被窝里看书，手边有一杯热茶。",
        user_name="某人",
        user_time="2026",
        user_location="世界的角落",
        quote="雨声潺潺，像住在溪边，宁愿天天下雨，以为你是因为下雨不来。",
        author_name="张爱玲",
        era="1940年代",
        location="上海常德公寓",
    )
