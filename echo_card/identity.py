"""Who signs the card when the user stays anonymous."""

import random
from datetime import date
from typing import Optional

# (name, location) pairs used when the user gives no name
DEFAULT_IDENTITIES: tuple[tuple[str, str], ...] = (
    ("碳基生物", "银河系第三旋臂"),
    ("第 42 号观测员", "蓝色行星表面"),
    ("未命名角色", "故事的第 1 页"),
    ("某位路人甲", "历史的背景板里"),
    ("某人", "世界的角落"),
    ("发信人", "北纬30度"),
    ("代号 K", "未知频段"),
)


def resolve_identity(
    name: Optional[str] = None,
    location: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> tuple[str, str]:
    """Fill in a missing name and location.

    A given name keeps its own location if one is given, otherwise gets a
    random default location. With no name, a whole default pair is used.
    """
    rng = rng or random.Random()
    name = (name or "").strip()
    location = (location or "").strip()

    if name and location:
        return name, location
    if name:
        return name, rng.choice([loc for _, loc in DEFAULT_IDENTITIES])
    return rng.choice(DEFAULT_IDENTITIES)


def current_user_time(today: Optional[date] = None) -> str:
    """The time field shown under the signal: the current year."""
    return str((today or date.today()).year)
