# api/chat.py
"""
Chat Context API Endpoints
Thin HTTP surface over the prompt/context pipeline.

- POST /api/ai/context           Build the prompt messages for one chat turn
- POST /api/ai/intent            Classify one message
- POST /api/ai/quiz/score        Forced-choice quiz -> travel type
- POST /api/ai/quiz/scale-score  7-point scale quiz -> travel type
- GET  /api/ai/travel-types      List the 16 travel types
- GET  /api/ai/travel-types/{code}
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from loguru import logger

from ..algorithms.quiz_scorer import TravelTypeScore, score_quiz_answers, score_scale_answers
from ..exceptions import UnknownTravelTypeError
from ..interfaces.travel_type_registry import get_travel_type_info, list_travel_types
from ..llm.intent_classifier import intent_classifier
from ..llm.prompt_assembler import build_prompt_context
from ..schemas.context_schemas import (
    CurrentLocation,
    DisplayedCard,
    HomeDuration,
    PromptMessage,
    QuizAnswer,
    QuizResults,
    WeatherData,
)


router = APIRouter(prefix="/api/ai", tags=["chat"])


# ============================================
# Request/Response Models
# ============================================

class HistoryMessage(BaseModel):
    """Chat message as sent by the client; role is checked by the assembler"""
    role: str
    content: Any = None


class ChatContextRequest(BaseModel):
    """Chat turn request body"""
    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(..., max_length=4000, description="User's message")
    conversation_history: List[HistoryMessage] = Field(default_factory=list, alias="conversationHistory")
    session_id: Optional[str] = Field(None, alias="sessionId")
    current_location: Optional[CurrentLocation] = Field(None, alias="currentLocation")
    displayed_cards: List[DisplayedCard] = Field(default_factory=list, alias="displayedCards")
    quiz_results: Optional[QuizResults] = Field(None, alias="quizResults")
    home_duration_preference: Optional[HomeDuration] = Field(None, alias="homeDurationPreference")
    weather: Optional[WeatherData] = None


class ChatContextResponse(BaseModel):
    session_id: Optional[str] = None
    intent: Dict[str, Any]
    prompt_messages: List[PromptMessage]
    system_prompt: str
    history_summary: Optional[str] = None
    conversation_length: int
    timestamp: str = Field(default_factory=lambda: datetime.now().isoformat())


class IntentRequest(BaseModel):
    message: str
    history: List[HistoryMessage] = Field(default_factory=list)


class QuizScoreRequest(BaseModel):
    answers: List[QuizAnswer]


class ScaleScoreRequest(BaseModel):
    """{question_id: score} with scores in [-3, 3]; unanswered ids may be null"""
    answers: Dict[str, Optional[int]]


class TravelTypeResponse(BaseModel):
    code: str
    name: str
    emoji: str
    description: str
    short_description: str
    search_query_variants: List[str]


class QuizScoreResponse(BaseModel):
    code: str
    travel_type: TravelTypeResponse
    axes: List[Dict[str, Any]]
    used_fallback: bool = False


# ============================================
# Helper Functions
# ============================================

def _travel_type_response(code: str) -> TravelTypeResponse:
    info = get_travel_type_info(code)
    return TravelTypeResponse(
        code=info.code,
        name=info.name,
        emoji=info.emoji,
        description=info.description,
        short_description=info.short_description,
        search_query_variants=list(info.search_query_variants),
    )


def _score_response(score: TravelTypeScore) -> QuizScoreResponse:
    return QuizScoreResponse(
        code=score.code,
        travel_type=_travel_type_response(score.code),
        axes=[
            {
                "axis": a.axis.value,
                "letter": a.letter,
                "scores": {a.first_letter: a.first_score, a.second_letter: a.second_score},
                "resolved_by": a.resolved_by,
            }
            for a in score.axes
        ],
        used_fallback=score.used_fallback,
    )


# ============================================
# Endpoints
# ============================================

@router.post("/context", response_model=ChatContextResponse)
async def build_chat_context(request: ChatContextRequest):
    """Build the ordered prompt for one chat turn"""
    result = await build_prompt_context(
        user_message=request.message,
        conversation_history=[m.model_dump() for m in request.conversation_history],
        current_location=request.current_location,
        displayed_cards=request.displayed_cards,
        quiz_results=request.quiz_results,
        home_duration_preference=request.home_duration_preference,
        weather=request.weather,
    )
    logger.info(
        f"Context built: session={request.session_id}, "
        f"intent={result.user_context.intent.label.value}, messages={len(result.prompt_messages)}"
    )
    return ChatContextResponse(
        session_id=request.session_id,
        intent=result.user_context.intent.model_dump(mode="json"),
        prompt_messages=result.prompt_messages,
        system_prompt=result.system_prompt,
        history_summary=result.history_summary,
        conversation_length=result.conversation_length,
    )


@router.post("/intent")
async def classify_message(request: IntentRequest):
    """Classify one message"""
    result = await intent_classifier.classify(
        request.message,
        [m.model_dump() for m in request.history]
    )
    return result.to_dict()


@router.post("/quiz/score", response_model=QuizScoreResponse)
async def score_quiz(request: QuizScoreRequest):
    """Score forced-choice quiz answers"""
    return _score_response(score_quiz_answers(request.answers))


@router.post("/quiz/scale-score", response_model=QuizScoreResponse)
async def score_scale_quiz(request: ScaleScoreRequest):
    """Score 7-point scale quiz answers"""
    return _score_response(score_scale_answers(request.answers))


@router.get("/travel-types", response_model=List[TravelTypeResponse])
async def get_travel_types():
    """List all 16 travel types"""
    return [_travel_type_response(info.code) for info in list_travel_types()]


@router.get("/travel-types/{code}", response_model=TravelTypeResponse)
async def get_travel_type(code: str):
    """Get one travel type by exact code"""
    try:
        return _travel_type_response(code)
    except UnknownTravelTypeError as e:
        raise HTTPException(status_code=404, detail=str(e))
