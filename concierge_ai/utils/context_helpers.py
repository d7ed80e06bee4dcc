"""
Context Helper Functions
Text truncation and displayed-card bookkeeping shared by the pipeline
"""

import math
import re
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from loguru import logger

from ..schemas.context_schemas import DisplayedCard

ELLIPSIS = "…"

# Fields copied from a place summary onto its card
CARD_FIELDS = (
    "place_id",
    "name",
    "formatted_address",
    "rating",
    "user_ratings_total",
    "price_level",
    "types",
    "distance_m",
    "reviews",
)

_WHITESPACE_RUN = re.compile(r"\s+")


def collapse_whitespace(text: str) -> str:
    """Collapse whitespace runs to single spaces and strip the ends"""
    return _WHITESPACE_RUN.sub(" ", text).strip()


def truncate_text(text: str, max_length: int = 300, suffix: str = ELLIPSIS) -> str:
    """
    Normalize whitespace and truncate to a maximum length

    Args:
        text: Text to truncate
        max_length: Maximum length including the suffix
        suffix: Marker appended when text was cut (default: "…")

    Returns:
        str: Text of at most max_length characters

    Example:
        >>> truncate_text("a" * 350)[-2:]
        'a…'
    """
    normalized = collapse_whitespace(text)
    if len(normalized) <= max_length:
        return normalized

    return normalized[:max_length - len(suffix)] + suffix


def round_rating(rating: Any) -> Optional[float]:
    """Round a numeric rating to one decimal, halves up (4.25 -> 4.3); non-numbers give None"""
    if isinstance(rating, bool) or not isinstance(rating, (int, float)) or not math.isfinite(rating):
        return None
    return float(Decimal(str(rating)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


PlaceLike = Union[DisplayedCard, Mapping[str, Any]]


def _place_to_dict(place: PlaceLike) -> Dict[str, Any]:
    if isinstance(place, DisplayedCard):
        return place.model_dump(exclude_none=True)
    return dict(place)


def merge_displayed_cards(
    existing: Iterable[DisplayedCard],
    places: Iterable[PlaceLike],
    now: Optional[datetime] = None
) -> List[DisplayedCard]:
    """
    Merge newly surfaced places into the session's displayed cards

    Cards are keyed by place_id. Unknown places are appended with
    clicked=False and displayed_at=now; known places have the incoming
    non-null fields overlaid on the stored card. Nothing is ever removed
    and the input list is left untouched.

    Args:
        existing: Cards already shown in this session
        places: Place summaries (cards or dicts) from the latest model output
        now: Timestamp for new cards (default: current UTC time)

    Returns:
        List[DisplayedCard]: New list in first-seen order
    """
    merged: List[DisplayedCard] = list(existing)
    index_by_id = {card.place_id: i for i, card in enumerate(merged)}
    stamp = now or datetime.now(timezone.utc)

    for place in places or []:
        data = _place_to_dict(place)
        place_id = data.get("place_id")
        if not place_id:
            logger.debug("Skipping place without place_id")
            continue

        incoming = {k: data[k] for k in CARD_FIELDS if data.get(k) is not None}
        existing_index = index_by_id.get(place_id)

        if existing_index is None:
            card = DisplayedCard(**incoming, clicked=False, displayed_at=stamp)
            index_by_id[place_id] = len(merged)
            merged.append(card)
            continue

        current = merged[existing_index]
        merged[existing_index] = current.model_copy(update=incoming)

    return merged
