"""
Weather Advisor
Turns a weather snapshot into an indoor/outdoor activity recommendation
and renders it for the model prompt.

Rules (first match wins):
1. Rain / Drizzle / Thunderstorm -> indoor
2. Snow -> flexible
3. Fog / Mist / Haze or visibility < 1000m -> indoor
4. Wind > 10 m/s -> flexible
5. Clear / Clouds -> outdoor (extra ideas at 15-28°C)
6. Anything else -> flexible
"""

from typing import Optional

from loguru import logger

from ..schemas.context_schemas import ActivityType, WeatherData, WeatherRecommendation

WET_CONDITIONS = ("Rain", "Drizzle", "Thunderstorm")
LOW_VISIBILITY_CONDITIONS = ("Fog", "Mist", "Haze")
FAIR_CONDITIONS = ("Clear", "Clouds")

MIN_VISIBILITY_M = 1000
MAX_WIND_SPEED_MS = 10

WEATHER_UNAVAILABLE = "Weather information is currently unavailable."


def get_temperature_note(temperature: float) -> str:
    """Short advice line for the current temperature"""
    if temperature < 5:
        return "It is cold, so warm clothing is recommended"
    elif temperature < 15:
        return "It is a little chilly, so a jacket will help"
    elif temperature <= 28:
        return "Comfortable temperature"
    elif temperature <= 35:
        return "It is hot, so look for shade and stay hydrated"
    else:
        return "It is extremely hot, so watch out for heatstroke; indoor activities are recommended"


def get_weather_recommendation(weather: WeatherData) -> WeatherRecommendation:
    """
    Decide the recommended activity type for a weather snapshot

    Args:
        weather: Snapshot from the weather collaborator

    Returns:
        WeatherRecommendation: activity type, reason, suggestions, temperature note
    """
    main = weather.condition.main
    note = get_temperature_note(weather.temperature)

    if main in WET_CONDITIONS:
        return WeatherRecommendation(
            activity_type=ActivityType.INDOOR,
            reason="It is raining, so indoor activities are more comfortable",
            suggestions=[
                "Museums and galleries",
                "Cafes and restaurants",
                "Shopping malls",
                "Cinemas and theaters",
                "Indoor sports facilities",
            ],
            temperature_note=note,
        )

    if main == "Snow":
        return WeatherRecommendation(
            activity_type=ActivityType.FLEXIBLE,
            reason="It is snowing, so snow activities or indoor activities are recommended",
            suggestions=[
                "Ski and snowboard areas",
                "Snow festivals",
                "Hot springs and spas",
                "Indoor sports facilities",
                "Cafes and restaurants",
            ],
            temperature_note=note,
        )

    if main in LOW_VISIBILITY_CONDITIONS or weather.visibility < MIN_VISIBILITY_M:
        return WeatherRecommendation(
            activity_type=ActivityType.INDOOR,
            reason="Visibility is low, so indoor activities are safer",
            suggestions=[
                "Museums and galleries",
                "Cafes and restaurants",
                "Shopping malls",
                "Indoor sports facilities",
            ],
            temperature_note=note,
        )

    if weather.wind_speed > MAX_WIND_SPEED_MS:
        return WeatherRecommendation(
            activity_type=ActivityType.FLEXIBLE,
            reason="It is windy, so sheltered places are recommended",
            suggestions=[
                "Indoor activities",
                "Activities in places sheltered from the wind",
                "Walks in built-up areas",
            ],
            temperature_note=note,
        )

    if main in FAIR_CONDITIONS:
        suggestions = [
            "Walks in the park",
            "Outdoor cafes",
            "Sightseeing spots",
            "Hiking and walking",
        ]
        if 15 <= weather.temperature <= 28:
            suggestions.extend(["Picnics", "Beach activities", "Outdoor events"])

        return WeatherRecommendation(
            activity_type=ActivityType.OUTDOOR,
            reason="The weather is good, so outdoor activities are comfortable",
            suggestions=suggestions,
            temperature_note=note,
        )

    logger.debug(f"No specific weather rule for condition {main!r}")
    return WeatherRecommendation(
        activity_type=ActivityType.FLEXIBLE,
        reason="Plans can stay flexible with the weather",
        suggestions=[
            "Decide while watching the weather",
            "Keep both indoor and outdoor options",
        ],
        temperature_note=note,
    )


def with_recommendation(weather: Optional[WeatherData]) -> Optional[WeatherData]:
    """Return the snapshot with a recommendation attached (derived when missing)"""
    if weather is None or weather.recommendation is not None:
        return weather
    return weather.model_copy(update={"recommendation": get_weather_recommendation(weather)})


def format_weather_for_prompt(weather: Optional[WeatherData]) -> str:
    """Render the WEATHER_CONTEXT block"""
    if weather is None:
        return WEATHER_UNAVAILABLE

    recommendation = get_weather_recommendation(weather)
    lines = [
        "Weather information:",
        f"- Weather: {weather.condition.description} ({weather.condition.main})",
        f"- Temperature: {weather.temperature:g}°C (feels like: {weather.feels_like:g}°C)",
        f"- Humidity: {weather.humidity:g}%",
        f"- Wind speed: {weather.wind_speed:g}m/s",
        f"- Recommended activity type: {recommendation.activity_type.value}",
        f"- Reason: {recommendation.reason}",
    ]
    if recommendation.temperature_note:
        lines.append(f"- Temperature note: {recommendation.temperature_note}")
    lines.append(f"- Suggested activities: {', '.join(recommendation.suggestions)}")

    return "\n".join(lines)
