"""
Travel Type Quiz Questions
Static question banks for both quiz modes:
- Forced-choice questions (q1-q11), one letter per option
- 7-point scale statements (sq1-sq8), one bias letter per statement
"""

from typing import Dict, List, Mapping, NamedTuple, Optional, Tuple

from loguru import logger

from ..schemas.context_schemas import QuizAnswer, TravelAxis


class QuizOption(NamedTuple):
    id: str
    text: str
    value: str


class QuizQuestion(NamedTuple):
    id: str
    question: str
    axis: TravelAxis
    options: Tuple[QuizOption, QuizOption]


class ScaleQuestion(NamedTuple):
    id: str
    statement: str
    axis: TravelAxis
    bias_direction: str  # letter an "agree" answer leans towards


# Letter pairs per axis; the first letter is the positive pole
AXIS_LETTERS: Dict[TravelAxis, Tuple[str, str]] = {
    TravelAxis.PEOPLE: ("G", "S"),
    TravelAxis.WORLD: ("R", "D"),
    TravelAxis.DECISION: ("L", "H"),
    TravelAxis.TIME: ("P", "F"),
}

AXIS_ORDER: Tuple[TravelAxis, ...] = (
    TravelAxis.PEOPLE,
    TravelAxis.WORLD,
    TravelAxis.DECISION,
    TravelAxis.TIME,
)


TRAVEL_TYPE_QUESTIONS: Tuple[QuizQuestion, ...] = (
    QuizQuestion("q1", "What recharges you most when traveling?", TravelAxis.PEOPLE, (
        QuizOption("a", "Hanging out with friends", "G"),
        QuizOption("b", "Time alone and quiet", "S"),
    )),
    QuizQuestion("q2", "What's the stronger factor when choosing a destination?", TravelAxis.WORLD, (
        QuizOption("a", 'Local flavors, scents, experiences = "Realness"', "R"),
        QuizOption("b", 'Stories, worldviews, meaning = "Narrative"', "D"),
    )),
    QuizQuestion("q3", "What do you prioritize when choosing food?", TravelAxis.DECISION, (
        QuizOption("a", "Reviews, value, distance", "L"),
        QuizOption("b", "Intuition, atmosphere, current mood", "H"),
    )),
    QuizQuestion("q4", "How do you create your itinerary?", TravelAxis.TIME, (
        QuizOption("a", "Create a detailed schedule with timings", "P"),
        QuizOption("b", "Decide the main points, then go with the flow", "F"),
    )),
    QuizQuestion("q5", "What scenes do you photograph more?", TravelAxis.PEOPLE, (
        QuizOption("a", "Group shots with everyone", "G"),
        QuizOption("b", "Landscapes and quiet snapshots", "S"),
    )),
    QuizQuestion("q6", "Which attracts you more?", TravelAxis.WORLD, (
        QuizOption("a", "Markets, food stalls, artisan workshops", "R"),
        QuizOption("b", "Galleries, narrative-driven exhibitions", "D"),
    )),
    QuizQuestion("q7", "First reaction when plans go off track?", TravelAxis.DECISION, (
        QuizOption("a", "Immediately recalculate route and find alternatives", "L"),
        QuizOption("b", "Rebuild the plan based on current mood", "H"),
    )),
    QuizQuestion("q8", "How do you start your morning?", TravelAxis.TIME, (
        QuizOption("a", "Set a departure time and go", "P"),
        QuizOption("b", "Start when you wake up naturally", "F"),
    )),
    QuizQuestion("q9", "How do you spend time during transit?", TravelAxis.PEOPLE, (
        QuizOption("a", "Conversation and vibes to liven up the journey", "G"),
        QuizOption("b", "Music, podcasts, solo time", "S"),
    )),
    QuizQuestion("q10", "What do you do when you encounter a line?", TravelAxis.DECISION, (
        QuizOption("a", "Check crowd data and wait times to decide", "L"),
        QuizOption("b", "Might as well join, or take a break nearby", "H"),
    )),
    QuizQuestion("q11", "What do you do when you find an interesting alley?", TravelAxis.TIME, (
        QuizOption("a", "Add it to the itinerary for later", "P"),
        QuizOption("b", "Turn into it right now", "F"),
    )),
)


SCALE_QUESTIONS: Tuple[ScaleQuestion, ...] = (
    ScaleQuestion("sq1", "I find the time spent with others during travel to be the most enjoyable",
                  TravelAxis.PEOPLE, "G"),
    ScaleQuestion("sq2", "It's necessary to intentionally spend time alone while traveling",
                  TravelAxis.PEOPLE, "S"),
    ScaleQuestion("sq3", "Authentic local experiences are the most important part of travel",
                  TravelAxis.WORLD, "R"),
    ScaleQuestion("sq4", "Travel becomes more enjoyable when you know the background and stories of places",
                  TravelAxis.WORLD, "D"),
    ScaleQuestion("sq5", "When choosing restaurants or experiences, I want to thoroughly check reviews and information",
                  TravelAxis.DECISION, "L"),
    ScaleQuestion("sq6", "I often end up choosing places based on intuition when I feel 'this is it'",
                  TravelAxis.DECISION, "H"),
    ScaleQuestion("sq7", "I want to plan a schedule to some extent before traveling",
                  TravelAxis.TIME, "P"),
    ScaleQuestion("sq8", "It's part of the charm of travel when things don't go according to plan",
                  TravelAxis.TIME, "F"),
)


def question_id_at(index: int) -> Optional[str]:
    """Question id for a 0-based position, None when out of range"""
    if 0 <= index < len(TRAVEL_TYPE_QUESTIONS):
        return TRAVEL_TYPE_QUESTIONS[index].id
    return None


def answers_from_choices(choices: Mapping[str, str]) -> List[QuizAnswer]:
    """
    Convert {question_id: option_id} selections into ordered QuizAnswers

    Unknown question or option ids are skipped.

    Example:
        >>> [a.value for a in answers_from_choices({"q1": "a", "q2": "b"})]
        ['G', 'D']
    """
    answers: List[QuizAnswer] = []
    for index, question in enumerate(TRAVEL_TYPE_QUESTIONS):
        option_id = choices.get(question.id)
        if option_id is None:
            continue
        option = next((o for o in question.options if o.id == option_id), None)
        if option is None:
            logger.warning(f"Unknown option {option_id!r} for question {question.id}")
            continue
        answers.append(QuizAnswer(axis=question.axis, value=option.value, question_index=index))
    return answers
