"""Quote matcher tests with a fake OpenAI client (no network)."""

import json
from types import SimpleNamespace

import httpx
import pytest
from openai import APIConnectionError

from echo_card.config import settings
from echo_card.matcher import QuoteMatcher, QuoteMatchError, build_prompt, parse_match_response
from echo_card.models import CardData

GALILEO = {
    "reply": "它动了。",
    "source_name": "伽利略",
    "source_era": "1633年",
    "source_location": "罗马宗教裁判所地牢",
}


class FakeCompletions:
    def __init__(self, replies):
        self.replies = list(replies)
        self.models = []

    def create(self, **kwargs):
        self.models.append(kwargs["model"])
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        message = SimpleNamespace(content=reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def fake_client(*replies):
    completions = FakeCompletions(replies)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


class TestParseMatchResponse:
    def test_echo_keys(self):
        match = parse_match_response(json.dumps(GALILEO, ensure_ascii=False), current_year=2026)
        assert match.quote == "它动了。"
        assert match.author_name == "伽利略"
        assert match.era == "1633年"
        assert match.location == "罗马宗教裁判所地牢"
        assert match.year_span == 393

    def test_quote_match_keys(self):
        text = json.dumps(
            {"quote": " 行到水穷处，坐看云起时。 ", "authorName": "王维", "era": "740年",
             "location": "终南山的溪边", "yearSpan": 1286},
            ensure_ascii=False,
        )
        match = parse_match_response(text, current_year=2026)
        assert match.quote == "行到水穷处，坐看云起时。"
        assert match.author_name == "王维"
        assert match.year_span == 1286

    def test_reply_year_span_is_used(self):
        data = dict(GALILEO, source_era="某个春天", yearSpan=50)
        assert parse_match_response(json.dumps(data), current_year=2026).year_span == 50

    @pytest.mark.parametrize("span", ["很久", -3, None])
    def test_unusable_reply_year_span_is_computed(self, span):
        data = dict(GALILEO, yearSpan=span)
        assert parse_match_response(json.dumps(data), current_year=2026).year_span == 393

    def test_strips_code_fence(self):
        text = "```json\n" + json.dumps(GALILEO, ensure_ascii=False) + "\n```"
        assert parse_match_response(text, current_year=2026).author_name == "伽利略"

    def test_timeless_era(self):
        data = dict(GALILEO, source_era="永恒")
        assert parse_match_response(json.dumps(data), current_year=2026).year_span == 0

    @pytest.mark.parametrize("text", ["", "not json", "[1, 2]", '{"reply": "只有一句"}'])
    def test_rejects_unusable_replies(self, text):
        with pytest.raises(QuoteMatchError):
            parse_match_response(text, current_year=2026)

    def test_card_data_from_match(self):
        match = parse_match_response(json.dumps(GALILEO), current_year=2026)
        data = CardData.from_match(
            match, user_signal="终于跑通了", user_name="某人", user_time="2026"
        )
        assert data.quote == match.quote
        assert data.era == "1633年"
        assert data.user_location == ""


class TestQuoteMatcher:
    def test_prompt_carries_signal(self):
        assert '"三点了，睡不着。"' in build_prompt("三点了，睡不着。")

    def test_generate_match(self):
        client, completions = fake_client(json.dumps(GALILEO))
        match = QuoteMatcher(client=client).generate_match("  终于跑通了  ")
        assert match.author_name == "伽利略"
        assert completions.models == [settings.llm_model]

    def test_falls_back_to_second_model(self):
        client, completions = fake_client(RuntimeError("boom"), json.dumps(GALILEO))
        match = QuoteMatcher(client=client).generate_match("终于跑通了")
        assert match.quote == "它动了。"
        assert completions.models == [settings.llm_model, settings.llm_fallback_model]

    def test_malformed_reply_falls_back(self):
        client, completions = fake_client("oops", json.dumps(GALILEO))
        assert QuoteMatcher(client=client).generate_match("x").author_name == "伽利略"
        assert len(completions.models) == 2

    def test_all_models_fail(self):
        client, _ = fake_client(RuntimeError("a"), RuntimeError("b"))
        with pytest.raises(QuoteMatchError):
            QuoteMatcher(client=client).generate_match("终于跑通了")

    @pytest.mark.parametrize("signal", ["", "   "])
    def test_blank_signal(self, signal):
        client, completions = fake_client()
        with pytest.raises(ValueError):
            QuoteMatcher(client=client).generate_match(signal)
        assert completions.models == []

    def test_requires_api_key_without_client(self, monkeypatch):
        monkeypatch.setattr(settings, "openai_api_key", None)
        with pytest.raises(QuoteMatchError):
            QuoteMatcher()

    def test_transient_error_is_retried_on_same_model(self, monkeypatch):
        monkeypatch.setattr(QuoteMatcher._complete.retry, "sleep", lambda seconds: None)
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        client, completions = fake_client(APIConnectionError(request=request), json.dumps(GALILEO))
        match = QuoteMatcher(client=client).generate_match("终于跑通了")
        assert match.author_name == "伽利略"
        assert completions.models == [settings.llm_model, settings.llm_model]
