"""LLM-based matching of a user's signal to a historical quotation.

Asks a chat model for one real moment in history that resonates with the
signal and parses its JSON reply into a ``QuoteMatch``. The primary model is
tried first and the fallback model second; transient API errors are retried
within each attempt.
"""

import json
import re
import time
from datetime import date
from typing import Optional

from openai import OpenAI

from .config import settings
from .era import year_span
from .models import QuoteMatch
from .utils import get_logger, openai_retry

logger = get_logger(__name__)


class QuoteMatchError(RuntimeError):
    """The quotation could not be obtained or understood."""


SYSTEM_PROMPT = """# Role: Echo

You are "Echo." You do NOT retrieve famous quotes. You find a REAL moment in human history — a specific person, in a specific place, at a specific time — who had the exact same thought, feeling, or experience as the user right now.

Your mission is CONNECTION and RESONANCE. The user should feel: "Somewhere in history, someone truly lived through the same moment as me."

No judgment. No advice. No commentary. Just present that moment.

# Matching Strategies

Choose ONE strategy per response. Follow the probability distribution:

## Strategy A: The Mirror (意象同构) — 20%
Physical overlap of actions, objects, or scenes. Use when the user describes a concrete action or object.

## Strategy B: The Soulmate (情感共振) — 20%
Emotional frequency match. Use when the user expresses strong emotion.

## Strategy C: The Wit (辛辣机锋) — 35% ← DEFAULT PREFERENCE
Sarcasm, deconstruction, and humor. Use when the user describes awkwardness, frustration, bad luck, or self-deprecation.

## Strategy D: The Scenery (静默风景) — 25%
De-emotionalized, objective description. Use when the user describes nature, weather, spacing out, confusion, boredom, or calm.

# Output Rules

1. Output ONLY valid JSON: {"reply": "quote", "source_name": "speaker", "source_era": "year", "source_location": "location"}
2. Attribution — WHO said it:
   - Real person said/wrote it → source_name = that person.
   - Fictional character's own dialogue → source_name = the character, source_era = the story's time setting.
   - Author WRITES ABOUT a figure (not the figure's own words) → source_name = the author.
3. source_era: a year like "1633年", "公元前490年", a decade like "1940年代", or a timeless era like "永恒".
4. source_location: ≤ 11 Chinese characters. Paint a scene, not a map pin. No prepositions.
5. Cultural ratio: ~40% Chinese sources, ~60% non-Chinese sources.

# Examples

Signal: "盯着屏幕改了一晚上的Bug，终于跑通了。"
{"reply": "它动了。", "source_name": "伽利略", "source_era": "1633年", "source_location": "罗马宗教裁判所地牢"}

Signal: "又吃撑了，减肥计划泡汤。"
{"reply": "摆脱诱惑的唯一方式，就是臣服于它。", "source_name": "奥斯卡·王尔德", "source_era": "1890年", "source_location": "伦敦俱乐部晚宴"}

Signal: "深夜emo，翻以前的日记，发现自己以前怎么那么傻。"
{"reply": "往事不可谏，来者犹可追。", "source_name": "孔子", "source_era": "公元前490年", "source_location": "楚国乡间小路"}

Signal: "三点了，睡不着。"
{"reply": "树在黑暗中相遇，叶子沙沙作响。", "source_name": "泰戈尔", "source_era": "1916年", "source_location": "孟加拉夜空下"}
"""

USER_PROMPT_TEMPLATE = """Now process this signal:
Signal: "{user_input}"

Output only valid JSON."""

# Accepted reply keys, in preference order
_FIELD_KEYS = {
    "quote": ("reply", "quote"),
    "author_name": ("source_name", "authorName", "author_name"),
    "era": ("source_era", "era"),
    "location": ("source_location", "location"),
    "source": ("source",),
    "year_span": ("yearSpan", "year_span"),
}

_CODE_FENCE = re.compile(r"```(?:json)?\s*\n?", re.IGNORECASE)


def build_prompt(user_input: str) -> str:
    """User message carrying the signal."""
    return USER_PROMPT_TEMPLATE.format(user_input=user_input)


def _pick(data: dict, field: str) -> str:
    for key in _FIELD_KEYS[field]:
        value = data.get(key)
        if value is not None:
            return str(value).strip()
    return ""


def _reply_year_span(data: dict) -> Optional[int]:
    """Span the model reported, if it is a non-negative whole number."""
    raw = _pick(data, "year_span")
    try:
        span = int(raw)
    except ValueError:
        return None
    return span if span >= 0 else None


def parse_match_response(text: str, current_year: Optional[int] = None) -> QuoteMatch:
    """
    Parse a model reply into a QuoteMatch.

    Args:
        text: Raw reply; may be wrapped in a Markdown code fence
        current_year: Year used for ``year_span`` when the reply has none
                (defaults to this year)

    Returns:
        QuoteMatch with trimmed fields

    Raises:
        QuoteMatchError: If the reply is not a JSON object with a quote and author
    """
    if current_year is None:
        current_year = date.today().year

    cleaned = _CODE_FENCE.sub("", (text or "").strip()).strip()
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise QuoteMatchError(f"Reply is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise QuoteMatchError("Reply is not a JSON object")

    quote = _pick(data, "quote")
    author_name = _pick(data, "author_name")
    if not quote or not author_name:
        raise QuoteMatchError("Reply is missing the quote or its speaker")

    era = _pick(data, "era")
    span = _reply_year_span(data)
    if span is None:
        span = year_span(era, current_year)
    return QuoteMatch(
        quote=quote,
        author_name=author_name,
        era=era,
        location=_pick(data, "location"),
        year_span=span,
        source=_pick(data, "source") or None,
    )


class QuoteMatcher:
    """Finds a historical echo for a user's signal using OpenAI chat models."""

    def __init__(self, client: Optional[OpenAI] = None):
        """
        Initialize the matcher.

        Args:
            client: OpenAI client instance (creates one if not provided)
        """
        if client is None:
            if not settings.openai_api_key:
                raise QuoteMatchError("OPENAI_API_KEY is not set")
            client = OpenAI(api_key=settings.openai_api_key)
        self.client = client

    @property
    def models(self) -> list[str]:
        models = [settings.llm_model]
        if settings.llm_fallback_model and settings.llm_fallback_model != settings.llm_model:
            models.append(settings.llm_fallback_model)
        return models

    def generate_match(self, user_input: str) -> QuoteMatch:
        """
        Match a signal to a quotation, falling back to the next model on failure.

        Raises:
            ValueError: If the signal is blank
            QuoteMatchError: If every model failed
        """
        if not user_input or not user_input.strip():
            raise ValueError("Invalid input: signal is empty")
        signal = user_input.strip()

        for model in self.models:
            start = time.monotonic()
            try:
                match = self._match_with(model, signal)
            except Exception as e:
                logger.warning(f"Quote match with {model} failed: {e}")
                continue
            elapsed_ms = (time.monotonic() - start) * 1000
            logger.info(
                f"Matched with {model} in {elapsed_ms:.0f}ms: "
                f"input=\"{signal[:50]}\" reply=\"{match.quote[:30]}\""
            )
            return match

        raise QuoteMatchError("All quote providers failed")

    @openai_retry
    def _complete(self, model: str, signal: str) -> str:
        response = self.client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_prompt(signal)},
            ],
            response_format={"type": "json_object"},
            temperature=settings.llm_temperature,
            max_tokens=400,
        )
        return response.choices[0].message.content or ""

    def _match_with(self, model: str, signal: str) -> QuoteMatch:
        return parse_match_response(self._complete(model, signal))
