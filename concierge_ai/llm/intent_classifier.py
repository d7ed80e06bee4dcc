# llm/intent_classifier.py
"""
Intent Classifier for the travel chat
Maps a user message to one behavior mode:
- inspiration: vague / exploratory ("any ideas?")
- specific: concrete search ("find ramen")
- details: follow-up about something already shown ("address of that place?")
- clarify: default when nothing matches

Two strategies:
1. AI classification (OpenAI, short timeout, 5 minute memo cache)
2. Regex rules, always available and deterministic
The AI strategy never raises outward; any failure falls through to regex.
"""

import asyncio
import re
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from loguru import logger

from ..config import settings
from ..exceptions import IntentClassificationError
from ..schemas.context_schemas import ConversationMessage, IntentLabel
from .prompts import INTENT_CLASSIFICATION_PROMPT, NO_PRIOR_CONVERSATION

# Try to import OpenAI for AI classification
try:
    from openai import AsyncOpenAI
    OPENAI_AVAILABLE = True
except ImportError:
    OPENAI_AVAILABLE = False


@dataclass
class IntentClassification:
    """Result of one classification call"""
    label: IntentLabel
    reason: str
    method: str  # ai, regex, fallback, regex_fallback
    confidence: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label.value,
            "reason": self.reason,
            "method": self.method,
            "confidence": self.confidence
        }


# ============================================
# Regex Strategy
# ============================================

# Matched against the trimmed message as typed (case-sensitive)
REFERENCE_PATTERN = re.compile(
    r"(?:それ|そこ|あれ|これ|その|この|あの|that|this|the|it|first|last|top|bottom|1つ目|2つ目|最初|最後|上|下)"
)
# The rest are matched against the lowercased message
DETAIL_PATTERN = re.compile(
    r"詳しく|詳細|review|口コミ|営業時間|住所|アクセス|予約|price|料金|電話|メニュー|menu|hours|address|phone"
)
INSPIRATION_PATTERN = re.compile(
    r"アイデア|なんか|ざっくり|気分|mood|idea|suggest|何か|something|anything|おすすめ"
)
SPECIFIC_PATTERN = re.compile(
    r"ラーメン|寿司|焼肉|カフェ|レストラン|バー|ランチ|ディナー|カレー|スイーツ|飲み|activity|experience"
    r"|探して|探す|find|search|look for|ramen|sushi|cafe|restaurant|bar|museum"
)

VAGUE_MIN_LENGTH = 3
VAGUE_MAX_LENGTH = 50


def classify_intent_with_regex(message: Any) -> IntentClassification:
    """
    Deterministic rule-based classification (first match wins)

    Args:
        message: Raw user message

    Returns:
        IntentClassification with method "regex"

    Example:
        >>> classify_intent_with_regex("find ramen near me").label
        <IntentLabel.SPECIFIC: 'specific'>
    """
    if not message or not isinstance(message, str):
        return IntentClassification(IntentLabel.CLARIFY, "empty message", "regex")

    text = message.strip()
    lower_text = text.lower()

    has_reference = REFERENCE_PATTERN.search(text) is not None
    has_detail_keywords = DETAIL_PATTERN.search(lower_text) is not None
    has_question_mark = "?" in text or "？" in text

    if has_reference and (has_detail_keywords or has_question_mark):
        return IntentClassification(IntentLabel.DETAILS, "reference + detail request", "regex")

    has_inspiration_keywords = INSPIRATION_PATTERN.search(lower_text) is not None
    is_short_and_vague = VAGUE_MIN_LENGTH <= len(text) <= VAGUE_MAX_LENGTH and not has_reference

    if has_inspiration_keywords and is_short_and_vague:
        return IntentClassification(IntentLabel.INSPIRATION, "vague/exploratory", "regex")

    if SPECIFIC_PATTERN.search(lower_text):
        return IntentClassification(IntentLabel.SPECIFIC, "concrete search terms", "regex")

    return IntentClassification(IntentLabel.CLARIFY, "no clear pattern", "regex")


# ============================================
# AI Strategy
# ============================================

INTENT_LINE = re.compile(r"intent:\s*(\w+)", re.IGNORECASE)
REASON_LINE = re.compile(r"reason:\s*(.+?)(?:\n|$)", re.IGNORECASE)

VALID_LABELS = {label.value for label in IntentLabel}


def _history_role(message: Any) -> Tuple[Optional[str], Optional[str]]:
    if isinstance(message, ConversationMessage):
        return message.role, message.content
    if isinstance(message, dict):
        content = message.get("content")
        return message.get("role"), content if isinstance(content, str) else None
    return None, None


def build_recent_context(history: Optional[Iterable[Any]], limit: int = 2, max_chars: int = 100) -> str:
    """Render the last few history messages for the classification prompt"""
    lines: List[str] = []
    for message in list(history or [])[-limit:]:
        role, content = _history_role(message)
        if content is None:
            continue
        speaker = "User" if role == "user" else "Assistant"
        lines.append(f"{speaker}: {content[:max_chars]}")
    return "\n".join(lines) if lines else NO_PRIOR_CONVERSATION


def parse_classification_response(content: str) -> IntentClassification:
    """
    Parse "intent: <label>\\nreason: <reason>" model output

    Unknown labels become clarify with lower confidence.
    """
    intent_match = INTENT_LINE.search(content or "")
    reason_match = REASON_LINE.search(content or "")

    label = intent_match.group(1).lower() if intent_match else None
    reason = reason_match.group(1).strip() if reason_match else ""

    valid = label in VALID_LABELS
    return IntentClassification(
        label=IntentLabel(label) if valid else IntentLabel.CLARIFY,
        reason=reason or "AI classification",
        method="ai",
        confidence=0.9 if valid else 0.5
    )


class IntentClassifier:
    """
    Layered intent classifier: AI first (optional), regex always.

    Features:
    - Memoizes AI results per normalized message (TTL, default 5 minutes)
    - Opportunistic pruning of expired entries once the cache grows past a limit
    - Bounded timeout on the model call
    - Never raises; AI trouble is logged and the regex result returned

    Usage:
        classifier = IntentClassifier()
        result = await classifier.classify("any ideas for tonight?")
    """

    def __init__(
        self,
        client: Any = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        cache_ttl: Optional[float] = None,
        max_cache_entries: Optional[int] = None,
        use_ai: Optional[bool] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        self.model = model or settings.OPENAI_MODEL
        self.timeout = timeout if timeout is not None else settings.INTENT_CLASSIFIER_TIMEOUT
        self.cache_ttl = cache_ttl if cache_ttl is not None else settings.INTENT_CACHE_TTL
        self.max_cache_entries = (
            max_cache_entries if max_cache_entries is not None else settings.INTENT_CACHE_MAX_ENTRIES
        )
        self.use_ai = settings.USE_AI_INTENT_CLASSIFICATION if use_ai is None else use_ai
        self._clock = clock
        self._cache: Dict[str, Tuple[IntentClassification, float]] = {}

        # OpenAI client (if available)
        self.client = client
        if self.client is None and OPENAI_AVAILABLE and settings.openai_enabled:
            try:
                self.client = AsyncOpenAI(api_key=settings.OPENAI_API_KEY, timeout=self.timeout)
                logger.info("IntentClassifier: OpenAI client initialized")
            except Exception as e:
                logger.warning(f"IntentClassifier: OpenAI init failed: {e}")

    @staticmethod
    def cache_key(message: str) -> str:
        return f"intent:{message.strip().lower()}"

    def _get_cached(self, key: str) -> Optional[IntentClassification]:
        entry = self._cache.get(key)
        if entry is None:
            return None
        result, stored_at = entry
        if self._clock() - stored_at >= self.cache_ttl:
            return None
        return IntentClassification(
            label=result.label,
            reason=f"{result.reason} (cached)",
            method=result.method,
            confidence=result.confidence
        )

    def _store(self, key: str, result: IntentClassification) -> None:
        now = self._clock()
        self._cache[key] = (result, now)

        if len(self._cache) > self.max_cache_entries:
            expired = [k for k, (_, ts) in self._cache.items() if now - ts > self.cache_ttl]
            for k in expired:
                del self._cache[k]
            logger.debug(f"Intent cache pruned {len(expired)} expired entries")

    async def _request_classification(self, message: str, history: Optional[Iterable[Any]]) -> str:
        prompt = INTENT_CLASSIFICATION_PROMPT.format(
            recent_context=build_recent_context(history),
            user_message=message
        )
        response = await asyncio.wait_for(
            self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=50,
                temperature=0
            ),
            timeout=self.timeout
        )
        if not response.choices:
            raise IntentClassificationError("Empty completion from classification model")
        return response.choices[0].message.content or ""

    async def classify_with_ai(
        self,
        message: Any,
        history: Optional[Iterable[Any]] = None
    ) -> Optional[IntentClassification]:
        """
        AI strategy; None means "not available", never an exception

        Args:
            message: Latest user message
            history: Sanitized conversation history

        Returns:
            IntentClassification, or None when the caller should use regex
        """
        if not message or not isinstance(message, str) or not message.strip():
            return IntentClassification(IntentLabel.CLARIFY, "empty message", "fallback")

        key = self.cache_key(message)
        cached = self._get_cached(key)
        if cached is not None:
            return cached

        if self.client is None:
            return None

        try:
            content = await self._request_classification(message, history)
        except asyncio.TimeoutError:
            logger.warning(f"IntentClassifier: AI classification timed out after {self.timeout}s")
            return None
        except Exception as e:
            logger.warning(f"IntentClassifier: AI classification failed: {e}")
            return None

        result = parse_classification_response(content)
        self._store(key, result)
        logger.debug(f"AI intent: {result.to_dict()}")
        return result

    async def classify(
        self,
        message: Any,
        history: Optional[Iterable[Any]] = None,
        use_ai: Optional[bool] = None
    ) -> IntentClassification:
        """
        Classify a message: AI first when enabled, regex otherwise

        Returns:
            IntentClassification; method is "regex_fallback" when AI was
            attempted but unavailable
        """
        if not (self.use_ai if use_ai is None else use_ai):
            return classify_intent_with_regex(message)

        result = await self.classify_with_ai(message, history)
        if result is not None:
            return result

        fallback = classify_intent_with_regex(message)
        fallback.method = "regex_fallback"
        return fallback

    def clear_cache(self) -> None:
        self._cache.clear()


# ============================================
# Global Instance
# ============================================

intent_classifier = IntentClassifier()


async def classify_intent(
    message: Any,
    history: Optional[Iterable[Any]] = None,
    use_ai: Optional[bool] = None
) -> IntentClassification:
    """Convenience function using the global classifier"""
    return await intent_classifier.classify(message, history, use_ai)
