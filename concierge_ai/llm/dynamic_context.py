# llm/dynamic_context.py
"""
Dynamic Context Builder
Generates the per-turn CONTEXT_JSON block injected after the system prompt.

Resolution rules:
1. Location: current device location (permission granted) > quiz location
   (permission granted) > unavailable
2. Walk radius: home-duration preference > quiz walking tolerance > none (~500m)
3. Hard filters from quiz answers: dietary, language, photo subjects to avoid
4. Inspiration queries only for the "inspiration" intent
5. today(): UTC offset approximated from longitude, JST fallback flagged as such
"""

import json
import math
from dataclasses import dataclass, field, asdict
from datetime import datetime, timedelta, timezone
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, NamedTuple, Optional

from loguru import logger

from ..algorithms.weather_advisor import with_recommendation
from ..config import settings
from ..interfaces.travel_type_registry import get_search_query_variants, is_valid_travel_type_code
from ..schemas.context_schemas import HomeDuration, IntentLabel, UserContext, WeatherData
from ..utils.context_helpers import round_rating


# ============================================
# Static Tables
# ============================================

class HomeDurationInfo(NamedTuple):
    label: str
    max_walking_minutes: int
    max_radius_meters: int
    activity_hint: str


HOME_DURATION_MAP: Mapping[HomeDuration, HomeDurationInfo] = MappingProxyType({
    HomeDuration.UNDER_15: HomeDurationInfo("under 15 min", 5, 400, "~15 minutes"),
    HomeDuration.FROM_15_TO_30: HomeDurationInfo("15-30 min", 10, 800, "15-30 minutes"),
    HomeDuration.FROM_30_TO_60: HomeDurationInfo("30-60 min", 15, 1200, "30-60 minutes"),
    HomeDuration.OVER_60: HomeDurationInfo("60+ min", 30, 3000, "60 minutes or more"),
})

# Quiz walking tolerance (minutes) -> radius (meters)
WALKING_TOLERANCE_RADIUS: Mapping[str, int] = MappingProxyType({"5": 400, "10": 800, "15": 1200})

DIETARY_LABELS = MappingProxyType({
    "vegetarian": "vegetarian",
    "halal": "halal",
    "allergies": "allergy-friendly",
})

LANGUAGE_LABELS = MappingProxyType({
    "english": "English",
    "japanese": "Japanese",
})

PHOTO_AVOID_LABELS = MappingProxyType({
    "raw fish": "raw fish/sushi",
    "crowds": "crowded places",
    "expensive": "expensive places",
    "long stairs": "places with long stairs",
    "alcohol": "alcohol-serving establishments",
})

STATIC_INSTRUCTIONS_COMPACT = (
    "Intent→Action: inspiration=2-3 diverse queries | specific=narrow search+top picks "
    "| details=get_place_details | clarify=ask 1Q→search",
    "Reply to latest turn using CONVERSATION_SUMMARY+CONTEXT_JSON; don't restart topic",
    'Reuse displayed_cards only when user refers to them ("that place", card click, details/compare). '
    "Otherwise fresh search",
    "CRITICAL: user_lat & user_lng MUST be passed to search_places from user_coordinates in CONTEXT_JSON",
    "Call search_places when user asks new options. Respect explicit distance/location first, then quiz "
    "tolerance. Default ~500m. Set allow_extended_radius=true only if user explicitly widens",
    'search_places.query MUST include: location phrase ("near current location") + time constraint if '
    'exists ("within 10min walk")',
    "Time→Distance: 5min≈400m | 10min≈800m | 15min≈1.2km | default≈500m",
    "If answer in displayed_cards or prior turns, respond directly without tools",
    "Replies: ≤3 sentences + ≤3 bullet suggestions (name+hook+distance)",
)

JST_OFFSET_MINUTES = 9 * 60
DEFAULT_RADIUS_KM = 0.5
INSPIRATION_POOL_SIZE = 4

COORDINATES_NOTE = (
    "CRITICAL: ALWAYS pass these coordinates as user_lat and user_lng when calling search_places for EVERY search"
)
COORDINATES_UNAVAILABLE_NOTE = "Location not available. Ask user for location or suggest popular areas."

WEATHER_UNAVAILABLE_INSTRUCTION = (
    "Weather information: Not available (user's location is not accessible).\n"
    "When asked about weather, politely explain that you cannot provide current weather information "
    "because location access is not available.\n"
    "However, you can still suggest indoor/outdoor activities based on general seasonal advice.\n"
    "For current weather, recommend checking weather apps or websites."
)


# ============================================
# Resolved Pieces
# ============================================

def _js_round(value: float) -> int:
    """Round half up (towards +infinity), matching browser-side math"""
    return math.floor(value + 0.5)


def format_number(value: float) -> str:
    """Integral floats without the trailing .0, others as shortest repr"""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return repr(value) if isinstance(value, float) else str(value)


@dataclass
class TodayInfo:
    iso_date: str
    iso_date_time: str
    display: str
    timezone: str
    offset_minutes: int
    source: str  # location | fallback

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isoDate": self.iso_date,
            "isoDateTime": self.iso_date_time,
            "display": self.display,
            "timezone": self.timezone,
            "offsetMinutes": self.offset_minutes,
            "source": self.source,
        }


def offset_from_longitude(lng: Any) -> Optional[int]:
    """15 degrees per hour, clamped to [-12, +14] hours; None for non-numbers"""
    if isinstance(lng, bool) or not isinstance(lng, (int, float)) or math.isnan(lng):
        return None
    offset_hours = min(max(_js_round(lng / 15), -12), 14)
    return offset_hours * 60


def today(lng: Optional[float] = None, now: Optional[datetime] = None) -> TodayInfo:
    """
    Approximate local date/time from longitude

    Args:
        lng: Longitude of the effective location, if any
        now: Reference instant (default: current UTC time)

    Returns:
        TodayInfo with source "location", or "fallback" (JST) without a longitude

    Example:
        >>> today(139.7, datetime(2024, 5, 1, 3, 0, tzinfo=timezone.utc)).display
        '2024-05-01 (UTC+09:00)'
    """
    computed = offset_from_longitude(lng)
    offset_minutes = computed if computed is not None else JST_OFFSET_MINUTES
    source = "location" if computed is not None else "fallback"

    instant = now or datetime.now(timezone.utc)
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    local = instant.astimezone(timezone.utc) + timedelta(minutes=offset_minutes)

    sign = "+" if offset_minutes >= 0 else "-"
    abs_minutes = abs(offset_minutes)
    offset_text = f"{sign}{abs_minutes // 60:02d}:{abs_minutes % 60:02d}"

    iso_date_time = local.strftime("%Y-%m-%dT%H:%M:%S") + offset_text
    iso_date = iso_date_time[:10]

    return TodayInfo(
        iso_date=iso_date,
        iso_date_time=iso_date_time,
        display=f"{iso_date} (UTC{offset_text})",
        timezone="approx by location" + (" (fallback JST)" if source == "fallback" else ""),
        offset_minutes=offset_minutes,
        source=source,
    )


@dataclass
class LocationContext:
    status: str  # available | unavailable
    lat: Optional[float] = None
    lng: Optional[float] = None
    source: Optional[str] = None  # current | quiz

    @property
    def available(self) -> bool:
        return self.status == "available" and self.lat is not None and self.lng is not None

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass
class TimeConstraint:
    max_walking_minutes: int
    max_radius_meters: int
    source: str  # home_duration | quiz
    activity_hint: Optional[str] = None

    @property
    def radius_km_hint(self) -> float:
        return _js_round(self.max_radius_meters / 1000 * 10) / 10

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "max_walking_minutes": self.max_walking_minutes,
            "max_radius_meters": self.max_radius_meters,
        }
        if self.activity_hint is not None:
            data["activity_hint"] = self.activity_hint
        data["source"] = self.source
        return data


def resolve_effective_location(user_context: UserContext) -> LocationContext:
    """Current device location wins over the quiz-time location"""
    current = user_context.current_location
    if current is not None and current.permission:
        return LocationContext("available", current.lat, current.lng, "current")

    travel_type = user_context.quiz_results.travel_type if user_context.quiz_results else None
    if (
        travel_type is not None
        and travel_type.location_lat is not None
        and travel_type.location_lng is not None
        and travel_type.location_permission
    ):
        return LocationContext("available", travel_type.location_lat, travel_type.location_lng, "quiz")

    return LocationContext("unavailable")


def resolve_time_constraint(user_context: UserContext) -> Optional[TimeConstraint]:
    """Home-duration preference wins over quiz walking tolerance"""
    if user_context.home_duration_preference is not None:
        info = HOME_DURATION_MAP[user_context.home_duration_preference]
        return TimeConstraint(
            max_walking_minutes=info.max_walking_minutes,
            max_radius_meters=info.max_radius_meters,
            source="home_duration",
            activity_hint=info.activity_hint,
        )

    answers = user_context.quiz_results.answers if user_context.quiz_results else None
    tolerance = answers.walking_tolerance if answers else None
    if tolerance in WALKING_TOLERANCE_RADIUS:
        return TimeConstraint(
            max_walking_minutes=int(tolerance),
            max_radius_meters=WALKING_TOLERANCE_RADIUS[tolerance],
            source="quiz",
        )

    if tolerance:
        logger.debug(f"Ignoring unknown walking tolerance {tolerance!r}")
    return None


def build_mandatory_constraints(
    dietary: List[str],
    languages: List[str],
    photo_subjects: List[str]
) -> List[str]:
    """Hard natural-language filters from the optional quiz answers"""
    constraints = []
    if dietary:
        labels = ", ".join(DIETARY_LABELS.get(p, p) for p in dietary)
        constraints.append(f"MUST ONLY show places that accommodate: {labels}")
    if languages:
        labels = " or ".join(LANGUAGE_LABELS.get(lang, lang) for lang in languages)
        constraints.append(f"MUST ONLY show places with {labels} language support")
    if photo_subjects:
        labels = ", ".join(PHOTO_AVOID_LABELS.get(p, p) for p in photo_subjects)
        constraints.append(f"MUST EXCLUDE places with: {labels}")
    return constraints


def default_inspiration_variants(location: LocationContext) -> List[str]:
    phrase = "near current location" if location.status == "available" else "in the area"
    return [
        f"highlights must-see view spots {phrase}",
        f"trendsetting cafes and dessert bars {phrase}",
        f"hands-on experiences and workshops {phrase}",
        f"night vibes rooftops bars live music {phrase}",
    ]


def resolve_inspiration_queries(
    user_context: UserContext,
    location: LocationContext
) -> Optional[List[str]]:
    if user_context.intent is None or user_context.intent.label != IntentLabel.INSPIRATION:
        return None

    travel_type = user_context.quiz_results.travel_type if user_context.quiz_results else None
    code = travel_type.travel_type_code if travel_type else None
    if code and is_valid_travel_type_code(code):
        return get_search_query_variants(code)
    return default_inspiration_variants(location)


def build_weather_instruction(weather: Optional[WeatherData], location: LocationContext) -> Optional[str]:
    if weather is not None:
        recommendation = weather.recommendation
        return (
            "Current weather at user's location:\n"
            f"- Weather: {weather.condition.description} ({weather.condition.main})\n"
            f"- Temperature: {format_number(weather.temperature)}°C "
            f"(feels like {format_number(weather.feels_like)}°C)\n"
            f"- Recommended activity type: {recommendation.activity_type.value}\n"
            f"- Recommendation reason: {recommendation.reason}\n"
            f"- Suggested activities: {', '.join(recommendation.suggestions)}\n"
            "\n"
            "IMPORTANT: Use this weather information when making recommendations. If the weather suggests "
            "indoor activities (rain, snow, poor visibility), prioritize indoor places. If outdoor is "
            "recommended, favor outdoor experiences."
        )
    if location.status == "unavailable":
        return WEATHER_UNAVAILABLE_INSTRUCTION
    return None


# ============================================
# Payload Builder
# ============================================

def drop_none(value: Any) -> Any:
    """Recursively remove None values from dicts (lists keep their length)"""
    if isinstance(value, dict):
        return {k: drop_none(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [drop_none(v) for v in value]
    return value


@dataclass
class ContextSection:
    """Every optional field of CONTEXT_JSON.context; None means omitted"""
    today: Optional[Dict[str, Any]] = None
    location: Optional[Dict[str, Any]] = None
    user_coordinates: Optional[Dict[str, Any]] = None
    quiz_travel_type: Optional[Dict[str, Any]] = None
    walking_tolerance: Optional[Dict[str, Any]] = None
    home_duration_filter: Optional[Dict[str, Any]] = None
    intent: Optional[Dict[str, Any]] = None
    origin: Optional[str] = None
    dietary_preferences: Optional[List[str]] = None
    language_comfort: Optional[List[str]] = None
    photo_subjects_to_avoid: Optional[List[str]] = None
    inspiration_queries: Optional[List[str]] = None
    weather: Optional[Dict[str, Any]] = None


@dataclass
class ContextPayload:
    context: ContextSection = field(default_factory=ContextSection)
    displayed_cards: Optional[List[Dict[str, Any]]] = None
    instructions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return drop_none({
            "context": asdict(self.context),
            "displayed_cards": self.displayed_cards,
            "instructions": list(self.instructions),
        })

    def to_prompt(self) -> str:
        return "CONTEXT_JSON:\n" + json.dumps(self.to_dict(), ensure_ascii=False, separators=(",", ":"))


def _reduce_cards(user_context: UserContext, limit: int) -> Optional[List[Dict[str, Any]]]:
    recent = user_context.displayed_cards[-limit:] if limit > 0 else []
    cards = [
        {
            "name": card.name,
            "average_rating": round_rating(card.rating),
            "review_count": card.user_ratings_total,
            "place_id": card.place_id,
        }
        for card in recent
    ]
    return cards or None


def build_context_payload(
    user_context: UserContext,
    now: Optional[datetime] = None,
    card_limit: Optional[int] = None
) -> ContextPayload:
    """
    Resolve location, constraints, filters and weather into a ContextPayload

    Args:
        user_context: Per-turn snapshot
        now: Reference instant for today() (default: now)
        card_limit: Most recent displayed cards to include (default 5)

    Returns:
        ContextPayload: serializable with to_dict() / to_prompt()
    """
    if card_limit is None:
        card_limit = settings.MAX_DISPLAYED_CARDS

    location = resolve_effective_location(user_context)
    time_constraint = resolve_time_constraint(user_context)
    home_duration = (
        HOME_DURATION_MAP[user_context.home_duration_preference]
        if user_context.home_duration_preference is not None else None
    )

    quiz = user_context.quiz_results
    travel_type = quiz.travel_type if quiz else None
    answers = quiz.answers if quiz else None
    dietary = list(answers.dietary_preferences) if answers else []
    languages = list(answers.language_comfort) if answers else []
    photo_subjects = list(answers.photo_subjects) if answers else []
    origin = answers.origin if answers else None

    today_info = today(location.lng if location.available else None, now)
    constraints = build_mandatory_constraints(dietary, languages, photo_subjects)
    inspiration_queries = resolve_inspiration_queries(user_context, location)
    weather = with_recommendation(user_context.weather)
    radius_km = time_constraint.radius_km_hint if time_constraint else DEFAULT_RADIUS_KM

    # ---- instructions (fixed order) ----
    instructions = [
        f"today(): {today_info.display} | {today_info.timezone} (source={today_info.source}). "
        "Use this as the current date/time.",
        f"Intent: {user_context.intent.label.value}." if user_context.intent else "Intent: clarify.",
        *STATIC_INSTRUCTIONS_COMPACT,
    ]

    weather_instruction = build_weather_instruction(weather, location)
    if weather_instruction:
        instructions.append(weather_instruction)

    if location.available:
        instructions.append(
            f"LOCATION AVAILABLE (source: {location.source}): lat={format_number(location.lat)}, "
            f"lng={format_number(location.lng)}. CRITICAL: ALWAYS pass these as user_lat and user_lng "
            "to search_places for EVERY search."
        )
    else:
        instructions.append("LOCATION UNAVAILABLE: Ask user for location or suggest popular areas in Tokyo.")

    if time_constraint:
        source_label = "Home duration" if time_constraint.source == "home_duration" else "quiz"
        instructions.append(
            f"Walk constraint: {source_label} ~{time_constraint.max_walking_minutes}min / "
            f"~{format_number(radius_km)}km. Default ~500m if not specified."
        )
    else:
        instructions.append("Default search radius: ~500m")

    if home_duration:
        instructions.append(
            f"Home duration: {home_duration.label} ({home_duration.activity_hint}, "
            f"walk ~{format_number(radius_km)}km)."
        )

    if constraints:
        instructions.append(f"Hard filters (ALWAYS enforce): {' | '.join(constraints)}")

    if origin:
        instructions.append(f"Origin: {origin} (persona only, NOT for search)")

    if inspiration_queries:
        pool = " | ".join(inspiration_queries[:INSPIRATION_POOL_SIZE])
        instructions.append(
            f"Inspiration mode: use 2-3 queries from pool: {pool}. Ensure diversity (food+activity+view)."
        )

    # ---- structured context ----
    section = ContextSection(today=today_info.to_dict(), location=location.to_dict())

    if location.available:
        section.user_coordinates = {
            "lat": location.lat,
            "lng": location.lng,
            "source": location.source,
            "note": COORDINATES_NOTE,
        }
    else:
        section.user_coordinates = {"status": "unavailable", "note": COORDINATES_UNAVAILABLE_NOTE}

    if travel_type is not None:
        section.quiz_travel_type = {
            "code": travel_type.travel_type_code,
            "name": travel_type.travel_type_name,
            "emoji": travel_type.travel_type_emoji,
        }

    if time_constraint:
        section.walking_tolerance = time_constraint.to_dict()

    if home_duration:
        section.home_duration_filter = {
            "key": user_context.home_duration_preference.value,
            "label": home_duration.label,
            "activity_minutes_hint": home_duration.activity_hint,
            "radius_hint_m": home_duration.max_radius_meters,
        }

    if user_context.intent:
        section.intent = {"label": user_context.intent.label.value}

    if origin:
        section.origin = (
            f"{origin} (PERSONA ONLY - do NOT use in search queries or suggest places in {origin})"
        )

    section.dietary_preferences = dietary or None
    section.language_comfort = languages or None
    section.photo_subjects_to_avoid = photo_subjects or None
    section.inspiration_queries = inspiration_queries or None

    if weather is not None:
        section.weather = {
            "temperature": weather.temperature,
            "feelsLike": weather.feels_like,
            "condition": weather.condition.model_dump(by_alias=True),
            "recommendation": weather.recommendation.model_dump(by_alias=True, mode="json"),
        }

    payload = ContextPayload(
        context=section,
        displayed_cards=_reduce_cards(user_context, card_limit),
        instructions=instructions,
    )
    logger.debug(
        f"Dynamic context built: location={location.status}, "
        f"constraint={time_constraint.source if time_constraint else None}, "
        f"filters={len(constraints)}, cards={len(payload.displayed_cards or [])}"
    )
    return payload


def generate_dynamic_context_info(
    user_context: UserContext,
    now: Optional[datetime] = None
) -> str:
    """
    Build the CONTEXT_JSON block for one turn

    Returns:
        str: "CONTEXT_JSON:\\n" followed by the compact JSON payload
    """
    return build_context_payload(user_context, now=now).to_prompt()
