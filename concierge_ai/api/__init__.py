# api/__init__.py
"""
API Endpoints Package

Contains the FastAPI router for the context pipeline:
- chat: prompt context, intent, quiz scoring, travel types
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .chat import router as chat_router

__all__ = ["chat_router"]
