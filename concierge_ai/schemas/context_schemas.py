# schemas/context_schemas.py
"""
Pydantic v2 schemas for the prompt/context pipeline
Covers conversation state, per-turn user context, weather snapshots,
displayed cards and quiz answers
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


# ============================================
# Enums
# ============================================

class IntentLabel(str, Enum):
    INSPIRATION = "inspiration"
    SPECIFIC = "specific"
    DETAILS = "details"
    CLARIFY = "clarify"


class TravelAxis(str, Enum):
    PEOPLE = "People"      # G / S
    WORLD = "World"        # R / D
    DECISION = "Decision"  # L / H
    TIME = "Time"          # P / F


class ActivityType(str, Enum):
    INDOOR = "indoor"
    OUTDOOR = "outdoor"
    FLEXIBLE = "flexible"


class HomeDuration(str, Enum):
    UNDER_15 = "under15"
    FROM_15_TO_30 = "15-30"
    FROM_30_TO_60 = "30-60"
    OVER_60 = "60+"


TravelLetter = Literal["G", "S", "R", "D", "L", "H", "P", "F"]


class _CamelModel(BaseModel):
    """Accepts both the camelCase wire names and the python field names"""
    model_config = ConfigDict(populate_by_name=True)


# ============================================
# Conversation
# ============================================

class ConversationMessage(BaseModel):
    """Single chat turn; immutable once created"""
    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: str


class ConversationContext(BaseModel):
    """Windowed history: compact summary of older turns + recent messages verbatim"""
    summary: Optional[str] = None
    recent_messages: List[ConversationMessage] = Field(default_factory=list)


class PromptMessage(BaseModel):
    """Role-tagged message handed to the model invocation layer"""
    role: Literal["system", "user", "assistant"]
    content: str


# ============================================
# Location & Weather
# ============================================

class CurrentLocation(_CamelModel):
    lat: float
    lng: float
    permission: bool = False


class WeatherCondition(_CamelModel):
    main: str                      # Clear, Clouds, Rain, Snow, Fog ...
    description: str = ""
    icon: str = ""


class WeatherRecommendation(_CamelModel):
    activity_type: ActivityType = Field(..., alias="activityType")
    reason: str
    suggestions: List[str] = Field(default_factory=list)
    temperature_note: Optional[str] = Field(None, alias="temperatureNote")


class WeatherData(_CamelModel):
    """Weather snapshot supplied by the weather collaborator"""
    temperature: float
    feels_like: float = Field(..., alias="feelsLike")
    humidity: float = 0
    condition: WeatherCondition
    wind_speed: float = Field(0, alias="windSpeed")
    visibility: float = 10000
    precipitation: Optional[float] = None
    clouds: float = 0
    recommendation: Optional[WeatherRecommendation] = None


# ============================================
# Displayed Cards
# ============================================

class DisplayedCard(_CamelModel):
    """Place summary already shown to the user, keyed by place_id"""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    place_id: str
    name: str = ""
    formatted_address: Optional[str] = None
    rating: Optional[float] = None
    user_ratings_total: Optional[int] = None
    price_level: Optional[int] = None
    types: Optional[List[str]] = None
    distance_m: Optional[float] = None
    clicked: Optional[bool] = None
    displayed_at: Optional[datetime] = Field(None, alias="displayedAt")
    reviews: Optional[List[Dict[str, Any]]] = None


# ============================================
# Quiz Results
# ============================================

class QuizTravelType(_CamelModel):
    travel_type_code: str = Field(..., alias="travelTypeCode")
    travel_type_name: str = Field("", alias="travelTypeName")
    travel_type_emoji: str = Field("", alias="travelTypeEmoji")
    travel_type_description: str = Field("", alias="travelTypeDescription")
    location_lat: Optional[float] = Field(None, alias="locationLat")
    location_lng: Optional[float] = Field(None, alias="locationLng")
    location_permission: Optional[bool] = Field(None, alias="locationPermission")


class QuizAnswers(_CamelModel):
    """Optional preference answers collected alongside the personality quiz"""
    walking_tolerance: Optional[str] = Field(None, alias="walkingTolerance")      # '5', '10', '15'
    dietary_preferences: List[str] = Field(default_factory=list, alias="dietaryPreferences")
    language_comfort: List[str] = Field(default_factory=list, alias="languageComfort")
    photo_subjects: List[str] = Field(default_factory=list, alias="photoSubjects")
    origin: Optional[str] = None  # persona only, never a search location


class QuizResults(_CamelModel):
    travel_type: Optional[QuizTravelType] = Field(None, alias="travelType")
    answers: Optional[QuizAnswers] = None
    timestamp: Optional[int] = None


class QuizAnswer(_CamelModel):
    """One forced-choice answer (Mode A)"""
    axis: TravelAxis
    value: TravelLetter
    question_index: int = Field(..., alias="questionIndex")


class ScaleAnswer(_CamelModel):
    """One 7-point agree/disagree answer (Mode B)"""
    question_id: str = Field(..., alias="questionId")
    axis: TravelAxis
    bias_direction: TravelLetter = Field(..., alias="biasDirection")
    score: int = Field(..., ge=-3, le=3)


# ============================================
# Per-turn User Context
# ============================================

class IntentSummary(BaseModel):
    label: IntentLabel = IntentLabel.CLARIFY
    reason: Optional[str] = None
    method: Optional[str] = None


class SessionHistory(_CamelModel):
    searched_places: List[str] = Field(default_factory=list, alias="searchedPlaces")
    recommended_places: List[str] = Field(default_factory=list, alias="recommendedPlaces")
    user_feedback: List[str] = Field(default_factory=list, alias="userFeedback")


class UserContext(_CamelModel):
    """Snapshot of everything the dynamic context builder reads for one turn"""
    current_location: Optional[CurrentLocation] = Field(None, alias="currentLocation")
    weather: Optional[WeatherData] = None
    home_duration_preference: Optional[HomeDuration] = Field(None, alias="homeDurationPreference")
    session_history: Optional[SessionHistory] = Field(None, alias="sessionHistory")
    intent: Optional[IntentSummary] = None
    displayed_cards: List[DisplayedCard] = Field(default_factory=list, alias="displayedCards")
    quiz_results: Optional[QuizResults] = Field(None, alias="quizResults")


class PromptContextResult(BaseModel):
    """Everything the model-invocation layer needs for one turn"""
    user_context: UserContext
    prompt_messages: List[PromptMessage]
    system_prompt: str
    dynamic_context: str
    history_summary: Optional[str] = None
    conversation_length: int = 0
