"""
Langchain Prompt Templates
Defines prompts for AI intent classification and the generic system prompt
"""

from langchain_core.prompts import PromptTemplate

# ============================================
# Intent Classification Prompt
# ============================================

INTENT_CLASSIFICATION_PROMPT = PromptTemplate(
    input_variables=["recent_context", "user_message"],
    template="""Classify the user's intent for this travel chat message.

Recent conversation:
{recent_context}

Current user message: "{user_message}"

Intent types:
- "inspiration": Vague, exploratory queries (e.g., "何かいいところない？", "おすすめは？", "what should I do?")
- "specific": Concrete searches (e.g., "カフェを探して", "find ramen near me", "show me museums")
- "details": Asking for more info about something already mentioned (e.g., "それの営業時間は？", "what's the address?", "1つ目の場所について")
- "clarify": Unclear intent or off-topic

Respond with ONLY the intent label (inspiration/specific/details/clarify) and a brief reason (max 10 words), formatted as:
intent: <label>
reason: <reason>"""
)

NO_PRIOR_CONVERSATION = "No prior conversation"


# ============================================
# Generic System Prompt
# ============================================

# Used when no valid travel type is known for the user
SYSTEM_PROMPT_FALLBACK = (
    "You are an AI travel partner assisting people exploring their current location. "
    "Stay on the current thread using CONVERSATION_SUMMARY and CONTEXT_JSON, "
    "and only call tools when they improve the answer."
)
