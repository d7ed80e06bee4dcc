"""
Conversation Memory - Windows long chat histories

Keeps the last few turns verbatim and compresses everything older into a
short "Turn n: U: ... | A: ..." summary so the prompt stays bounded.
"""

from typing import Any, Dict, Iterable, List, Optional

from loguru import logger

from ..config import settings
from ..schemas.context_schemas import ConversationContext, ConversationMessage
from ..utils.context_helpers import truncate_text

SUMMARY_PAIRS = 3


def _coerce_message(item: Any) -> Optional[ConversationMessage]:
    """Return a ConversationMessage for usable items, None for anything else"""
    if isinstance(item, ConversationMessage):
        message = item
    elif isinstance(item, dict):
        content = item.get("content")
        role = item.get("role")
        if not isinstance(content, str):
            return None
        # Anything that is not a user turn is treated as the assistant half
        message = ConversationMessage(
            role="user" if role == "user" else "assistant",
            content=content
        )
    else:
        return None

    if not message.content.strip():
        return None
    return message


def _summarize_messages(messages: List[ConversationMessage], max_length: int) -> str:
    """Pair messages into user/assistant turns and render the last three"""
    pairs: List[Dict[str, str]] = []
    current: Dict[str, str] = {}

    for msg in messages:
        if msg.role == "user":
            if current:
                pairs.append(current)
                current = {}
            current["user"] = truncate_text(msg.content, max_length)
            continue

        current["assistant"] = truncate_text(msg.content, max_length)
        pairs.append(current)
        current = {}

    if current:
        pairs.append(current)

    lines = []
    for index, pair in enumerate(pairs[-SUMMARY_PAIRS:]):
        parts = []
        if pair.get("user"):
            parts.append(f"U: {pair['user']}")
        if pair.get("assistant"):
            parts.append(f"A: {pair['assistant']}")
        lines.append(f"Turn {index + 1}: {' | '.join(parts)}")

    return "\n".join(lines)


def build_conversation_context(
    history: Optional[Iterable[Any]],
    max_turns: Optional[int] = None,
    max_length: Optional[int] = None
) -> ConversationContext:
    """
    Split a chat history into a verbatim recent window and a summary

    Args:
        history: Messages (ConversationMessage or {"role", "content"} dicts)
        max_turns: User+assistant exchanges kept verbatim (default 4 -> 8 messages)
        max_length: Per-message truncation length inside the summary

    Returns:
        ConversationContext: summary is None when nothing falls outside the window

    Example:
        >>> history = [{"role": "user", "content": f"m{i}"} for i in range(10)]
        >>> ctx = build_conversation_context(history, max_turns=4)
        >>> len(ctx.recent_messages), ctx.summary
        (8, 'Turn 1: U: m0\\nTurn 2: U: m1')
    """
    if max_turns is None:
        max_turns = settings.MAX_CONVERSATION_TURNS
    if max_length is None:
        max_length = settings.SUMMARY_TRUNCATE_LENGTH

    if not history:
        return ConversationContext()

    sanitized: List[ConversationMessage] = []
    dropped = 0
    for item in history:
        message = _coerce_message(item)
        if message is None:
            dropped += 1
            continue
        sanitized.append(message)

    if dropped:
        logger.debug(f"Conversation windower dropped {dropped} unusable message(s)")

    if not sanitized:
        return ConversationContext()

    max_recent = max(1, max_turns * 2)
    recent = sanitized[-max_recent:]
    earlier = sanitized[:len(sanitized) - len(recent)]

    summary = _summarize_messages(earlier, max_length) if earlier else None

    return ConversationContext(summary=summary, recent_messages=recent)
