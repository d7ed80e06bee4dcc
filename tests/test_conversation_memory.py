"""
Conversation windowing tests
"""

from concierge_ai.interfaces.conversation_memory import build_conversation_context
from concierge_ai.schemas.context_schemas import ConversationMessage


def alternating(pairs):
    history = []
    for i in range(pairs):
        history.append({"role": "user", "content": f"u{i}"})
        history.append({"role": "assistant", "content": f"a{i}"})
    return history


class TestWindow:

    def test_empty_history(self):
        ctx = build_conversation_context([])
        assert ctx.summary is None
        assert ctx.recent_messages == []

        assert build_conversation_context(None).recent_messages == []

    def test_short_history_has_no_summary(self):
        ctx = build_conversation_context(alternating(2), max_turns=4)
        assert ctx.summary is None
        assert [m.content for m in ctx.recent_messages] == ["u0", "a0", "u1", "a1"]

    def test_ten_messages_keep_last_eight(self):
        ctx = build_conversation_context(alternating(5), max_turns=4)
        assert len(ctx.recent_messages) == 8
        assert ctx.recent_messages[0].content == "u1"
        assert ctx.recent_messages[-1].content == "a4"
        assert ctx.summary == "Turn 1: U: u0 | A: a0"

    def test_summary_keeps_last_three_pairs(self):
        ctx = build_conversation_context(alternating(10), max_turns=4)
        assert ctx.summary.splitlines() == [
            "Turn 1: U: u3 | A: a3",
            "Turn 2: U: u4 | A: a4",
            "Turn 3: U: u5 | A: a5",
        ]

    def test_consecutive_user_messages_form_separate_turns(self):
        history = [{"role": "user", "content": f"m{i}"} for i in range(10)]
        ctx = build_conversation_context(history, max_turns=4)
        assert ctx.summary == "Turn 1: U: m0\nTurn 2: U: m1"

    def test_leading_assistant_message(self):
        history = [{"role": "assistant", "content": "welcome"}] + alternating(4)
        ctx = build_conversation_context(history, max_turns=4)
        assert ctx.summary == "Turn 1: A: welcome"

    def test_zero_turns_still_keeps_one_message(self):
        ctx = build_conversation_context(alternating(2), max_turns=0)
        assert [m.content for m in ctx.recent_messages] == ["a1"]


class TestSanitizing:

    def test_unusable_messages_are_dropped(self):
        history = [
            {"role": "user", "content": "   "},
            {"role": "user", "content": None},
            {"role": "user", "content": 42},
            "not a message",
            {"role": "user", "content": "hello"},
        ]
        ctx = build_conversation_context(history)
        assert [m.content for m in ctx.recent_messages] == ["hello"]

    def test_non_user_role_becomes_assistant(self):
        ctx = build_conversation_context([{"role": "system", "content": "note"}])
        assert ctx.recent_messages[0].role == "assistant"

    def test_accepts_message_models(self):
        history = [ConversationMessage(role="user", content="hi")]
        assert build_conversation_context(history).recent_messages == history

    def test_summary_entries_are_truncated(self):
        history = [{"role": "user", "content": "x" * 350}] + alternating(4)
        ctx = build_conversation_context(history, max_turns=4, max_length=300)
        line = ctx.summary
        assert line.startswith("Turn 1: U: ")
        body = line[len("Turn 1: U: "):]
        assert len(body) == 300
        assert body.endswith("…")
