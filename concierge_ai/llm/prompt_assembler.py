# llm/prompt_assembler.py
"""
Prompt Assembler
Builds the ordered message list handed to the model for one chat turn:

    [system]  persona prompt + CONTEXT_JSON
    [system]  WEATHER_CONTEXT            (when weather is known)
    [system]  CONVERSATION_SUMMARY       (when older turns were summarized)
    [user/assistant]  recent window, original order
    [user]    the new message
"""

from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional, Union

from loguru import logger

from ..algorithms.weather_advisor import format_weather_for_prompt, with_recommendation
from ..interfaces.conversation_memory import build_conversation_context
from ..interfaces.travel_type_registry import get_system_prompt_for_travel_type, is_valid_travel_type_code
from ..schemas.context_schemas import (
    ConversationMessage,
    CurrentLocation,
    DisplayedCard,
    HomeDuration,
    IntentSummary,
    PromptContextResult,
    PromptMessage,
    QuizResults,
    UserContext,
    WeatherData,
)
from .dynamic_context import generate_dynamic_context_info
from .intent_classifier import IntentClassifier, intent_classifier as default_classifier
from .prompts import SYSTEM_PROMPT_FALLBACK


def sanitize_conversation_history(history: Optional[Iterable[Any]]) -> List[ConversationMessage]:
    """Keep only user/assistant entries with string content"""
    if not history or isinstance(history, (str, bytes, dict)):
        return []

    sanitized = []
    for item in history:
        if isinstance(item, ConversationMessage):
            sanitized.append(item)
        elif (
            isinstance(item, dict)
            and item.get("role") in ("user", "assistant")
            and isinstance(item.get("content"), str)
        ):
            sanitized.append(ConversationMessage(role=item["role"], content=item["content"]))
    return sanitized


def resolve_base_system_prompt(travel_type_code: Optional[str]) -> str:
    """Persona prompt for a valid travel type, generic prompt otherwise"""
    if not travel_type_code or not is_valid_travel_type_code(travel_type_code):
        if travel_type_code:
            logger.warning(f"Unknown travel type {travel_type_code!r}, using generic system prompt")
        return SYSTEM_PROMPT_FALLBACK
    return get_system_prompt_for_travel_type(travel_type_code)


def _stamp_cards(cards: Optional[Iterable[DisplayedCard]], now: datetime) -> List[DisplayedCard]:
    return [
        card if card.displayed_at is not None else card.model_copy(update={"displayed_at": now})
        for card in cards or []
    ]


async def build_prompt_context(
    user_message: str,
    conversation_history: Optional[Iterable[Any]] = None,
    current_location: Optional[CurrentLocation] = None,
    displayed_cards: Optional[Iterable[DisplayedCard]] = None,
    quiz_results: Optional[QuizResults] = None,
    home_duration_preference: Optional[Union[HomeDuration, str]] = None,
    weather: Optional[WeatherData] = None,
    classifier: Optional[IntentClassifier] = None,
    now: Optional[datetime] = None
) -> PromptContextResult:
    """
    Assemble everything the model needs for one turn

    Args:
        user_message: Newest user utterance
        conversation_history: Raw history; malformed entries are dropped
        current_location: Device location with permission flag
        displayed_cards: Cards already shown in this session
        quiz_results: Stored travel type and preference answers
        home_duration_preference: under15 / 15-30 / 30-60 / 60+
        weather: Weather snapshot (recommendation derived when missing)
        classifier: Intent classifier (default: global instance)
        now: Reference instant for card stamps and today()

    Returns:
        PromptContextResult: ordered prompt messages plus the pieces used to build them
    """
    now = now or datetime.now(timezone.utc)
    classifier = classifier or default_classifier
    if not isinstance(user_message, str):
        logger.warning("Non-text user message replaced with empty string")
        user_message = ""

    history = sanitize_conversation_history(conversation_history)
    conversation = build_conversation_context(history)

    intent = await classifier.classify(user_message, history)
    logger.debug(f"Intent for turn: {intent.to_dict()}")

    weather = with_recommendation(weather)
    user_context = UserContext(
        current_location=current_location,
        weather=weather,
        home_duration_preference=home_duration_preference,
        intent=IntentSummary(label=intent.label, reason=intent.reason, method=intent.method),
        displayed_cards=_stamp_cards(displayed_cards, now),
        quiz_results=quiz_results,
    )

    travel_type = quiz_results.travel_type if quiz_results else None
    system_prompt = resolve_base_system_prompt(travel_type.travel_type_code if travel_type else None)
    dynamic_context = generate_dynamic_context_info(user_context, now=now)

    messages = [PromptMessage(role="system", content=f"{system_prompt}\n\n{dynamic_context}")]

    if weather is not None:
        messages.append(PromptMessage(
            role="system",
            content=f"WEATHER_CONTEXT:\n{format_weather_for_prompt(weather)}"
        ))

    if conversation.summary:
        messages.append(PromptMessage(
            role="system",
            content=f"CONVERSATION_SUMMARY:\n{conversation.summary}"
        ))

    messages.extend(
        PromptMessage(role=m.role, content=m.content) for m in conversation.recent_messages
    )
    messages.append(PromptMessage(role="user", content=user_message))

    return PromptContextResult(
        user_context=user_context,
        prompt_messages=messages,
        system_prompt=system_prompt,
        dynamic_context=dynamic_context,
        history_summary=conversation.summary,
        conversation_length=len(history),
    )
