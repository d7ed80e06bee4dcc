# concierge_ai/__init__.py
"""
Concierge AI Context Pipeline

Turns raw chat/session state into the prompt handed to the travel LLM:
- Conversation windowing (recent turns + compact summary)
- Intent classification (AI first, regex fallback)
- Dynamic context (location, walk radius, hard filters, weather, cards)
- Prompt assembly (persona prompt + context + history + new message)
- Travel personality quiz scoring (16 four-letter types)
"""

__version__ = "1.0.0"

# Package structure:
# concierge_ai/
# ├── __init__.py           <- This file
# ├── main.py               <- FastAPI application entry
# ├── config.py             <- Configuration settings
# ├── logging_config.py     <- loguru sink setup
# ├── exceptions.py         <- Error taxonomy
# │
# ├── api/
# │   └── chat.py           <- /api/ai/context, /api/ai/intent, /api/ai/quiz/*
# │
# ├── interfaces/
# │   ├── conversation_memory.py  <- History windowing
# │   └── travel_type_registry.py <- 16 travel types
# │
# ├── llm/
# │   ├── intent_classifier.py    <- AI + regex intent
# │   ├── dynamic_context.py      <- CONTEXT_JSON builder
# │   ├── prompt_assembler.py     <- Final message list
# │   └── prompts.py              <- Prompt templates
# │
# ├── algorithms/
# │   ├── quiz_questions.py       <- Question banks
# │   ├── quiz_scorer.py          <- Answers -> travel type code
# │   └── weather_advisor.py      <- Weather -> activity advice
# │
# ├── schemas/
# │   └── context_schemas.py      <- Pydantic models
# │
# └── utils/
#     └── context_helpers.py      <- Truncation, card merge
