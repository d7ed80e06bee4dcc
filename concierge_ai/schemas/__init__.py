# schemas/__init__.py
"""
Pydantic Schemas Package

Contains all Pydantic v2 models for:
- Conversation history and windowed context
- Per-turn user context (location, weather, quiz results, cards)
- Quiz answers for both scoring modes
"""

from .context_schemas import (
    # Enums
    IntentLabel, TravelAxis, ActivityType, HomeDuration, TravelLetter,
    # Conversation
    ConversationMessage, ConversationContext, PromptMessage,
    # Location & Weather
    CurrentLocation, WeatherCondition, WeatherRecommendation, WeatherData,
    # Cards
    DisplayedCard,
    # Quiz
    QuizTravelType, QuizAnswers, QuizResults, QuizAnswer, ScaleAnswer,
    # User Context
    IntentSummary, SessionHistory, UserContext, PromptContextResult,
)

__all__ = [
    # Enums
    "IntentLabel", "TravelAxis", "ActivityType", "HomeDuration", "TravelLetter",
    # Conversation
    "ConversationMessage", "ConversationContext", "PromptMessage",
    # Location & Weather
    "CurrentLocation", "WeatherCondition", "WeatherRecommendation", "WeatherData",
    # Cards
    "DisplayedCard",
    # Quiz
    "QuizTravelType", "QuizAnswers", "QuizResults", "QuizAnswer", "ScaleAnswer",
    # User Context
    "IntentSummary", "SessionHistory", "UserContext", "PromptContextResult",
]
