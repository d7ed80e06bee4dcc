"""
Algorithms Module
Quiz scoring and weather advice
"""

from .quiz_scorer import (
    calculate_travel_type_from_answers,
    calculate_travel_type_from_scale,
    calculate_axis_scores_from_scale,
    score_quiz_answers,
    score_scale_answers,
    TravelTypeScore,
    AxisScore,
)
from .weather_advisor import get_weather_recommendation, format_weather_for_prompt

__all__ = [
    "calculate_travel_type_from_answers",
    "calculate_travel_type_from_scale",
    "calculate_axis_scores_from_scale",
    "score_quiz_answers",
    "score_scale_answers",
    "TravelTypeScore",
    "AxisScore",
    "get_weather_recommendation",
    "format_weather_for_prompt",
]
