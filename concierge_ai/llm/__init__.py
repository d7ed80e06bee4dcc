# llm/__init__.py
"""
LLM Components Package

Contains the prompt-side components:
- intent_classifier: Message -> inspiration / specific / details / clarify
- dynamic_context: Per-turn CONTEXT_JSON block
- prompt_assembler: Ordered message list for the model
- prompts: Prompt templates
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .intent_classifier import (
        intent_classifier, IntentClassifier, IntentClassification,
        classify_intent, classify_intent_with_regex
    )
    from .dynamic_context import build_context_payload, generate_dynamic_context_info, today
    from .prompt_assembler import build_prompt_context

__all__ = [
    "intent_classifier",
    "IntentClassifier",
    "IntentClassification",
    "classify_intent",
    "classify_intent_with_regex",
    "build_context_payload",
    "generate_dynamic_context_info",
    "today",
    "build_prompt_context",
]
