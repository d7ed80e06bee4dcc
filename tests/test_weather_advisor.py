"""
Weather recommendation tests
"""

import pytest

from concierge_ai.algorithms.weather_advisor import (
    WEATHER_UNAVAILABLE,
    format_weather_for_prompt,
    get_temperature_note,
    get_weather_recommendation,
    with_recommendation,
)
from concierge_ai.schemas.context_schemas import ActivityType, WeatherRecommendation

from .conftest import make_weather


class TestRecommendation:

    @pytest.mark.parametrize("main,expected", [
        ("Rain", ActivityType.INDOOR),
        ("Drizzle", ActivityType.INDOOR),
        ("Thunderstorm", ActivityType.INDOOR),
        ("Snow", ActivityType.FLEXIBLE),
        ("Fog", ActivityType.INDOOR),
        ("Haze", ActivityType.INDOOR),
        ("Clear", ActivityType.OUTDOOR),
        ("Clouds", ActivityType.OUTDOOR),
        ("Tornado", ActivityType.FLEXIBLE),
    ])
    def test_condition_rules(self, main, expected):
        assert get_weather_recommendation(make_weather(main)).activity_type == expected

    def test_low_visibility_beats_clear_sky(self):
        rec = get_weather_recommendation(make_weather("Clear", visibility=500))
        assert rec.activity_type == ActivityType.INDOOR

    def test_strong_wind(self):
        rec = get_weather_recommendation(make_weather("Clear", wind_speed=12))
        assert rec.activity_type == ActivityType.FLEXIBLE

    def test_rain_wins_over_wind(self):
        rec = get_weather_recommendation(make_weather("Rain", wind_speed=15))
        assert rec.activity_type == ActivityType.INDOOR

    def test_mild_clear_day_adds_extra_ideas(self):
        rec = get_weather_recommendation(make_weather("Clear", temperature=22))
        assert "Picnics" in rec.suggestions
        assert rec.temperature_note == "Comfortable temperature"

    def test_hot_clear_day_has_no_extra_ideas(self):
        rec = get_weather_recommendation(make_weather("Clear", temperature=31))
        assert "Picnics" not in rec.suggestions


@pytest.mark.parametrize("temperature,fragment", [
    (4.9, "cold"),
    (5, "chilly"),
    (15, "Comfortable"),
    (28, "Comfortable"),
    (35, "hot"),
    (36, "extremely hot"),
])
def test_temperature_notes(temperature, fragment):
    assert fragment in get_temperature_note(temperature)


class TestPromptRendering:

    def test_unavailable(self):
        assert format_weather_for_prompt(None) == WEATHER_UNAVAILABLE

    def test_lines(self):
        text = format_weather_for_prompt(make_weather("Rain", temperature=12, feels_like=10.5,
                                                      description="light rain"))
        lines = text.splitlines()
        assert lines[0] == "Weather information:"
        assert "- Weather: light rain (Rain)" in lines
        assert "- Temperature: 12°C (feels like: 10.5°C)" in lines
        assert "- Recommended activity type: indoor" in lines


def test_with_recommendation_keeps_existing():
    existing = WeatherRecommendation(activity_type=ActivityType.OUTDOOR, reason="custom")
    weather = make_weather("Rain", recommendation=existing)

    assert with_recommendation(weather).recommendation.reason == "custom"
    assert with_recommendation(make_weather("Rain")).recommendation.activity_type == ActivityType.INDOOR
    assert with_recommendation(None) is None
