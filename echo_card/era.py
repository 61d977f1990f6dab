"""Era labels: compact display form and distance from today."""

import re

_BC_YEAR = re.compile(r"^公元前(\d+)年$")
_YEAR = re.compile(r"^(\d{3,4})年$")
_DECADE = re.compile(r"^(\d{3,4})年代$")

# Eras with no place on the calendar
TIMELESS_ERAS = ("神话时代", "童话时代", "永恒")

# Distance assumed when the era cannot be placed at all
UNKNOWN_YEAR_SPAN = 100


def format_era(era: str) -> str:
    """Shorten an era label for the card's metadata line.

    ``公元前490年`` -> ``公元前490``, ``1633年`` -> ``1633``,
    ``1940年代`` -> ``1940s``. Anything else is returned unchanged.
    """
    match = _BC_YEAR.match(era)
    if match:
        return f"公元前{match.group(1)}"
    match = _YEAR.match(era)
    if match:
        return match.group(1)
    match = _DECADE.match(era)
    if match:
        return f"{match.group(1)}s"
    return era


def year_span(era: str, current_year: int) -> int:
    """Approximate number of years between ``era`` and ``current_year``.

    Decades count from their midpoint. Timeless eras are 0 years away and
    anything unrecognised is assumed to be a century ago.
    """
    if "公元前" in era:
        match = re.search(r"公元前(\d+)年", era)
        if match:
            return current_year + int(match.group(1))

    match = re.search(r"(\d{3,4})年(?!代)", era)
    if match:
        return current_year - int(match.group(1))

    if any(name in era for name in TIMELESS_ERAS):
        return 0

    match = re.search(r"(\d{3,4})年代", era)
    if match:
        return current_year - (int(match.group(1)) + 5)

    return UNKNOWN_YEAR_SPAN
