# interfaces/__init__.py
"""
Interfaces Package

Contains read-side stores used by the pipeline:
- conversation_memory: History windowing and summarization
- travel_type_registry: Static table of the 16 travel types
"""

from .conversation_memory import build_conversation_context
from .travel_type_registry import (
    travel_type_registry,
    TravelTypeRegistry,
    TravelTypeInfo,
    TRAVEL_TYPE_CODES,
    is_valid_travel_type_code,
    get_travel_type_info,
    get_system_prompt_for_travel_type,
    get_search_query_variants,
    get_types_for_travel_type,
    get_search_query_template,
    list_travel_types,
)

__all__ = [
    "build_conversation_context",
    "travel_type_registry",
    "TravelTypeRegistry",
    "TravelTypeInfo",
    "TRAVEL_TYPE_CODES",
    "is_valid_travel_type_code",
    "get_travel_type_info",
    "get_system_prompt_for_travel_type",
    "get_search_query_variants",
    "get_types_for_travel_type",
    "get_search_query_template",
    "list_travel_types",
]
