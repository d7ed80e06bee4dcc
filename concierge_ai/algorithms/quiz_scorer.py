"""
Travel Type Quiz Scoring
Reduces quiz answers to one of the 16 four-letter travel type codes

Two input modes share the same final step (axis letter -> code):
1. Forced-choice answers (Mode A)
   - Per-question weight x per-axis normalization into two letter buckets
   - Near-ties (relative gap <= 0.15) go through a tie-break:
     recent-half bias -> answer count -> first-asked answer -> raw score
2. 7-point scale answers (Mode B)
   - Second-letter statements (S/D/H/F) are negated
   - Axis average > 0 picks the first letter, otherwise the second

Axis order in the code: People, World, Decision, Time.
"""

import math
from typing import Any, Callable, Dict, Iterable, List, Mapping, NamedTuple, Optional, Type, TypeVar, Union

from loguru import logger
from pydantic import BaseModel, ValidationError

from ..interfaces.travel_type_registry import is_valid_travel_type_code
from ..schemas.context_schemas import QuizAnswer, ScaleAnswer, TravelAxis
from .quiz_questions import AXIS_LETTERS, AXIS_ORDER, SCALE_QUESTIONS, question_id_at

DEFAULT_TRAVEL_TYPE = "GRLP"

# Earlier questions describe the base trait; World is asked only twice
QUESTION_WEIGHTS: Dict[str, float] = {
    "q1": 1.2,   # People
    "q2": 1.5,   # World
    "q3": 1.1,   # Decision
    "q4": 1.1,   # Time
    "q5": 1.0,   # People
    "q6": 1.5,   # World
    "q7": 1.0,   # Decision
    "q8": 1.0,   # Time
    "q9": 0.9,   # People
    "q10": 0.9,  # Decision
    "q11": 0.9,  # Time
}

# Corrects for question-count imbalance between axes
AXIS_NORMALIZATION: Dict[TravelAxis, float] = {
    TravelAxis.PEOPLE: 1.0,    # 3 questions
    TravelAxis.WORLD: 1.5,     # 2 questions
    TravelAxis.DECISION: 1.0,  # 3 questions
    TravelAxis.TIME: 1.0,      # 3 questions
}

TIE_THRESHOLD = 0.15
RECENT_BIAS_MIN = 0.1

NEGATED_BIAS_LETTERS = frozenset(second for _, second in AXIS_LETTERS.values())


class AxisScore(NamedTuple):
    """
    Resolution of a single axis
    """
    axis: TravelAxis
    first_letter: str
    second_letter: str
    first_score: float      # raw bucket sum (Mode A) or signed average (Mode B)
    second_score: float
    letter: str
    resolved_by: str        # score, recent_bias, count, first_answer, raw_score, average

    def __repr__(self) -> str:
        return (
            f"AxisScore({self.axis.value}: {self.first_letter}={self.first_score:.2f}, "
            f"{self.second_letter}={self.second_score:.2f} -> {self.letter} via {self.resolved_by})"
        )


class TravelTypeScore(NamedTuple):
    """
    Final code with its per-axis breakdown
    """
    code: str
    axes: List[AxisScore]
    used_fallback: bool

    def __repr__(self) -> str:
        letters = " ".join(f"{a.axis.value}={a.letter}" for a in self.axes)
        return f"TravelTypeScore(code={self.code}, {letters}, fallback={self.used_fallback})"


AxisResolver = Callable[[TravelAxis, str, str], AxisScore]


# ============================================
# Shared: axis letters -> code
# ============================================

def resolve_travel_type(resolver: AxisResolver) -> TravelTypeScore:
    """
    Resolve every axis in fixed order and concatenate the letters

    An invalid concatenation is replaced by GRLP with a warning.

    Args:
        resolver: Called as resolver(axis, first_letter, second_letter)

    Returns:
        TravelTypeScore: code plus per-axis breakdown
    """
    axes = [resolver(axis, *AXIS_LETTERS[axis]) for axis in AXIS_ORDER]
    code = "".join(a.letter for a in axes)

    if not is_valid_travel_type_code(code):
        logger.warning(f"Invalid travel type code calculated: {code}")
        return TravelTypeScore(code=DEFAULT_TRAVEL_TYPE, axes=axes, used_fallback=True)

    return TravelTypeScore(code=code, axes=axes, used_fallback=False)


# ============================================
# Mode A: weighted forced-choice answers
# ============================================

AnswerModel = TypeVar("AnswerModel", bound=BaseModel)


def _validate_entries(model: Type[AnswerModel], entries: Iterable[Any]) -> List[AnswerModel]:
    """Validate each entry against model; malformed entries are logged and skipped"""
    valid: List[AnswerModel] = []
    for entry in entries or []:
        if isinstance(entry, model):
            valid.append(entry)
            continue
        try:
            valid.append(model.model_validate(entry))
        except ValidationError as e:
            logger.warning(f"Ignoring malformed {model.__name__} {entry!r}: {e.error_count()} error(s)")
    return valid


def _coerce_answers(answers: Iterable[Union[QuizAnswer, Mapping[str, Any]]]) -> List[QuizAnswer]:
    return _validate_entries(QuizAnswer, answers)


def _question_weight(question_index: int) -> float:
    question_id = question_id_at(question_index)
    return QUESTION_WEIGHTS.get(question_id, 1.0) if question_id else 1.0


def _bucket_scores(answers: List[QuizAnswer]) -> Dict[TravelAxis, Dict[str, float]]:
    """Sum weight x axis normalization into each axis's two letter buckets"""
    scores = {axis: {first: 0.0, second: 0.0} for axis, (first, second) in AXIS_LETTERS.items()}

    for answer in answers:
        question_id = question_id_at(answer.question_index)
        if not question_id:
            continue

        weight = QUESTION_WEIGHTS.get(question_id, 1.0) * AXIS_NORMALIZATION[answer.axis]
        bucket = scores[answer.axis]
        if answer.value in bucket:
            bucket[answer.value] += weight

    return scores


def _break_tie(
    axis: TravelAxis,
    first: str,
    second: str,
    raw_first: float,
    raw_second: float,
    answers: List[QuizAnswer]
) -> AxisScore:
    """
    Tie-break for near-equal axes

    1. Signed question weights over the later half of the axis's answers
    2. Answer count per letter
    3. The first-asked answer on the axis
    4. Raw bucket score (first letter wins ties)
    """
    axis_answers = sorted(
        (a for a in answers if a.axis == axis),
        key=lambda a: a.question_index,
        reverse=True
    )

    def result(letter: str, how: str) -> AxisScore:
        return AxisScore(axis, first, second, raw_first, raw_second, letter, how)

    recent = axis_answers[:math.ceil(len(axis_answers) / 2)]
    recent_bias = 0.0
    for answer in recent:
        weight = _question_weight(answer.question_index)
        if answer.value == first:
            recent_bias += weight
        elif answer.value == second:
            recent_bias -= weight

    if abs(recent_bias) > RECENT_BIAS_MIN:
        return result(first if recent_bias > 0 else second, "recent_bias")

    first_count = sum(1 for a in axis_answers if a.value == first)
    second_count = sum(1 for a in axis_answers if a.value == second)
    if first_count > second_count:
        return result(first, "count")
    if second_count > first_count:
        return result(second, "count")

    if axis_answers:
        first_asked = axis_answers[-1]
        if first_asked.value in (first, second):
            return result(first_asked.value, "first_answer")

    return result(first if raw_first >= raw_second else second, "raw_score")


def score_quiz_answers(answers: Iterable[Union[QuizAnswer, Mapping[str, Any]]]) -> TravelTypeScore:
    """
    Score forced-choice answers with the full per-axis breakdown

    Args:
        answers: QuizAnswer objects (or dicts with axis/value/questionIndex)

    Returns:
        TravelTypeScore: code and how each axis was decided

    Example:
        >>> score_quiz_answers([
        ...     {"axis": "People", "value": "G", "questionIndex": 0},
        ...     {"axis": "World", "value": "D", "questionIndex": 1},
        ...     {"axis": "Decision", "value": "L", "questionIndex": 2},
        ...     {"axis": "Time", "value": "F", "questionIndex": 3},
        ... ]).code
        'GDLF'
    """
    answer_list = _coerce_answers(answers)
    scores = _bucket_scores(answer_list)

    def resolve(axis: TravelAxis, first: str, second: str) -> AxisScore:
        raw_first = scores[axis][first]
        raw_second = scores[axis][second]
        total = raw_first + raw_second

        norm_first = raw_first / total if total > 0 else 0.5
        norm_second = raw_second / total if total > 0 else 0.5

        # Normalized gap taken relative to the raw axis total
        relative_diff = abs(norm_first - norm_second) / total if total > 0 else 0

        if relative_diff <= TIE_THRESHOLD:
            return _break_tie(axis, first, second, raw_first, raw_second, answer_list)

        letter = first if norm_first > norm_second else second
        return AxisScore(axis, first, second, raw_first, raw_second, letter, "score")

    breakdown = resolve_travel_type(resolve)
    logger.debug(f"Quiz answers scored: {breakdown}")
    return breakdown


def calculate_travel_type_from_answers(answers: Iterable[Union[QuizAnswer, Mapping[str, Any]]]) -> str:
    """Forced-choice answers -> travel type code"""
    return score_quiz_answers(answers).code


# ============================================
# Mode B: 7-point scale answers
# ============================================

ScaleInput = Union[Mapping[str, Optional[int]], Iterable[Union[ScaleAnswer, Mapping[str, Any]]]]


def _normalize_scale_answers(answers: ScaleInput) -> List[ScaleAnswer]:
    """Accept {question_id: score} maps or ScaleAnswer lists"""
    if answers is None:
        return []

    if isinstance(answers, Mapping):
        normalized = []
        for question in SCALE_QUESTIONS:
            score = answers.get(question.id)
            if score is None:
                continue
            if isinstance(score, bool) or not isinstance(score, int) or not -3 <= score <= 3:
                logger.warning(f"Ignoring out-of-range scale score {score!r} for {question.id}")
                continue
            normalized.append(ScaleAnswer(
                question_id=question.id,
                axis=question.axis,
                bias_direction=question.bias_direction,
                score=score
            ))
        return normalized

    return _validate_entries(ScaleAnswer, answers)


def calculate_axis_scores_from_scale(
    answers: ScaleInput,
    require_complete: bool = False
) -> Optional[Dict[TravelAxis, float]]:
    """
    Average the sign-normalized scale scores per axis

    Args:
        answers: {question_id: score} or ScaleAnswer list
        require_complete: Return None unless all 8 statements are answered

    Returns:
        Dict of axis -> average (0 for axes without answers), or None
    """
    normalized = _normalize_scale_answers(answers)

    if require_complete:
        answered = {a.question_id for a in normalized}
        if any(q.id not in answered for q in SCALE_QUESTIONS):
            return None

    per_axis: Dict[TravelAxis, List[int]] = {axis: [] for axis in AXIS_ORDER}
    for answer in normalized:
        adjusted = -answer.score if answer.bias_direction in NEGATED_BIAS_LETTERS else answer.score
        per_axis[answer.axis].append(adjusted)

    return {
        axis: (sum(values) / len(values) if values else 0.0)
        for axis, values in per_axis.items()
    }


def score_scale_answers(answers: ScaleInput) -> TravelTypeScore:
    """Scale answers -> code with per-axis averages"""
    averages = calculate_axis_scores_from_scale(answers)

    def resolve(axis: TravelAxis, first: str, second: str) -> AxisScore:
        average = averages[axis]
        letter = first if average > 0 else second
        return AxisScore(axis, first, second, average, -average, letter, "average")

    breakdown = resolve_travel_type(resolve)
    logger.debug(f"Scale answers scored: {breakdown}")
    return breakdown


def calculate_travel_type_from_scale(answers: ScaleInput) -> str:
    """7-point scale answers -> travel type code"""
    return score_scale_answers(answers).code
