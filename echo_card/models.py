"""Data records passed through the card pipeline."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class QuoteMatch:
    """A historical quotation matched to a user's signal."""

    quote: str
    author_name: str
    era: str
    location: str
    year_span: int = 0
    source: Optional[str] = None


@dataclass(frozen=True)
class CardData:
    """Display text for one card. All fields are already trimmed."""

    user_signal: str
    user_name: str
    user_time: str
    user_location: str
    quote: str
    author_name: str
    era: str
    location: str

    @classmethod
    def from_match(
        cls,
        match: QuoteMatch,
        *,
        user_signal: str,
        user_name: str,
        user_time: str,
        user_location: str = "",
    ) -> "CardData":
        return cls(
            user_signal=user_signal,
            user_name=user_name,
            user_time=user_time,
            user_location=user_location,
            quote=match.quote,
            author_name=match.author_name,
            era=match.era,
            location=match.location,
        )


@dataclass(frozen=True)
class WrappedSection:
    """Body text of one card section, broken into lines."""

    lines: tuple[str, ...]

    @property
    def line_count(self) -> int:
        return len(self.lines)


@dataclass(frozen=True)
class LayoutResult:
    """Line sets for both sections and the logical card height."""

    section1: WrappedSection
    section2: WrappedSection
    total_height: float
