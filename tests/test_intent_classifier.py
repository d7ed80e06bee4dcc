"""
Intent classification tests: regex rules, AI strategy, cache and fallbacks
"""

import pytest

from concierge_ai.llm.intent_classifier import (
    IntentClassifier,
    build_recent_context,
    classify_intent_with_regex,
    parse_classification_response,
)
from concierge_ai.llm.prompts import NO_PRIOR_CONVERSATION
from concierge_ai.schemas.context_schemas import IntentLabel

from .conftest import FakeCompletions, make_client


class TestRegexRules:

    @pytest.mark.parametrize("message,label,reason", [
        ("what's the address of that place?", IntentLabel.DETAILS, "reference + detail request"),
        ("それの営業時間は？", IntentLabel.DETAILS, "reference + detail request"),
        ("any ideas for tonight?", IntentLabel.INSPIRATION, "vague/exploratory"),
        ("おすすめは？", IntentLabel.INSPIRATION, "vague/exploratory"),
        ("find ramen near me", IntentLabel.SPECIFIC, "concrete search terms"),
        ("カフェを探して", IntentLabel.SPECIFIC, "concrete search terms"),
        ("hello there", IntentLabel.CLARIFY, "no clear pattern"),
    ])
    def test_labels(self, message, label, reason):
        result = classify_intent_with_regex(message)
        assert result.label == label
        assert result.reason == reason
        assert result.method == "regex"

    @pytest.mark.parametrize("message", ["", None, 123])
    def test_empty_or_non_text(self, message):
        result = classify_intent_with_regex(message)
        assert result.label == IntentLabel.CLARIFY
        assert result.reason == "empty message"

    def test_long_vague_message_is_not_inspiration(self):
        message = "can you suggest " + "something nice " * 5
        assert classify_intent_with_regex(message).label != IntentLabel.INSPIRATION


class TestResponseParsing:

    def test_valid_label(self):
        result = parse_classification_response("intent: Details\nreason: asks for hours")
        assert result.label == IntentLabel.DETAILS
        assert result.reason == "asks for hours"
        assert result.confidence == 0.9

    def test_unknown_label_becomes_clarify(self):
        result = parse_classification_response("intent: banana\nreason: ???")
        assert result.label == IntentLabel.CLARIFY
        assert result.confidence == 0.5

    def test_missing_reason(self):
        assert parse_classification_response("intent: specific").reason == "AI classification"


def test_recent_context_uses_last_two_messages():
    history = [
        {"role": "user", "content": "first"},
        {"role": "assistant", "content": "second"},
        {"role": "user", "content": "x" * 150},
    ]
    rendered = build_recent_context(history)
    assert rendered.splitlines() == ["Assistant: second", "User: " + "x" * 100]
    assert build_recent_context([]) == NO_PRIOR_CONVERSATION


class TestAIStrategy:

    async def test_ai_result_is_used(self, fake_clock):
        completions = FakeCompletions("intent: specific\nreason: wants ramen")
        classifier = IntentClassifier(client=make_client(completions), use_ai=True, clock=fake_clock)

        result = await classifier.classify("find ramen near me")

        assert result.label == IntentLabel.SPECIFIC
        assert result.method == "ai"
        assert result.reason == "wants ramen"
        call = completions.calls[0]
        assert call["max_tokens"] == 50
        assert call["temperature"] == 0
        assert 'Current user message: "find ramen near me"' in call["messages"][0]["content"]

    async def test_cached_result_within_ttl(self, fake_clock):
        completions = FakeCompletions("intent: inspiration\nreason: open ended")
        classifier = IntentClassifier(
            client=make_client(completions), use_ai=True, cache_ttl=300, clock=fake_clock
        )

        await classifier.classify("Any ideas?")
        fake_clock.advance(120)
        cached = await classifier.classify("  any ideas?  ")

        assert len(completions.calls) == 1
        assert cached.label == IntentLabel.INSPIRATION
        assert cached.reason == "open ended (cached)"

    async def test_cache_expires_after_ttl(self, fake_clock):
        completions = FakeCompletions()
        classifier = IntentClassifier(
            client=make_client(completions), use_ai=True, cache_ttl=300, clock=fake_clock
        )

        await classifier.classify("find sushi")
        fake_clock.advance(300)
        await classifier.classify("find sushi")

        assert len(completions.calls) == 2

    async def test_expired_entries_are_pruned(self, fake_clock):
        classifier = IntentClassifier(
            client=make_client(FakeCompletions()),
            use_ai=True,
            cache_ttl=10,
            max_cache_entries=2,
            clock=fake_clock,
        )

        await classifier.classify("one")
        fake_clock.advance(20)
        await classifier.classify("two")
        await classifier.classify("three")

        assert classifier.cache_key("one") not in classifier._cache
        assert len(classifier._cache) == 2

    async def test_client_error_falls_back_to_regex(self):
        completions = FakeCompletions(error=RuntimeError("boom"))
        classifier = IntentClassifier(client=make_client(completions), use_ai=True)

        result = await classifier.classify("find ramen near me")

        assert result.label == IntentLabel.SPECIFIC
        assert result.method == "regex_fallback"

    async def test_timeout_falls_back_to_regex(self):
        completions = FakeCompletions(delay=1.0)
        classifier = IntentClassifier(client=make_client(completions), use_ai=True, timeout=0.01)

        result = await classifier.classify("any ideas for tonight?")

        assert result.label == IntentLabel.INSPIRATION
        assert result.method == "regex_fallback"

    async def test_failures_are_not_cached(self):
        completions = FakeCompletions(error=RuntimeError("boom"))
        classifier = IntentClassifier(client=make_client(completions), use_ai=True)

        await classifier.classify("find ramen")
        await classifier.classify("find ramen")

        assert len(completions.calls) == 2

    async def test_empty_message_skips_model(self):
        completions = FakeCompletions()
        classifier = IntentClassifier(client=make_client(completions), use_ai=True)

        result = await classifier.classify("   ")

        assert result.label == IntentLabel.CLARIFY
        assert result.method == "fallback"
        assert completions.calls == []


class TestStrategySelection:

    async def test_disabled_ai_uses_regex(self):
        completions = FakeCompletions()
        classifier = IntentClassifier(client=make_client(completions), use_ai=False)

        result = await classifier.classify("find ramen near me")

        assert result.method == "regex"
        assert completions.calls == []

    async def test_per_call_override(self):
        completions = FakeCompletions()
        classifier = IntentClassifier(client=make_client(completions), use_ai=True)

        result = await classifier.classify("find ramen near me", use_ai=False)

        assert result.method == "regex"

    async def test_no_client_available(self):
        classifier = IntentClassifier(use_ai=True)

        assert classifier.client is None
        result = await classifier.classify("find ramen near me")
        assert result.method == "regex_fallback"

    async def test_clear_cache(self, fake_clock):
        completions = FakeCompletions()
        classifier = IntentClassifier(client=make_client(completions), use_ai=True, clock=fake_clock)

        await classifier.classify("find ramen")
        classifier.clear_cache()
        await classifier.classify("find ramen")

        assert len(completions.calls) == 2
