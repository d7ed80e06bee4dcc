"""
Concierge AI Context Service - FastAPI Application
Exposes the prompt/context pipeline over HTTP. The chat LLM itself is
called by the client with the prompt messages returned here.
"""

from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from . import __version__
from .api.chat import router as chat_router
from .config import settings
from .interfaces.travel_type_registry import list_travel_types
from .llm.intent_classifier import intent_classifier
from .logging_config import configure_logging


# ============================================
# Lifespan
# ============================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    logger.info("Starting Concierge AI Context Service...")
    logger.info(f"Travel types loaded: {len(list_travel_types())}")
    logger.info(
        f"Intent classification: "
        f"{'AI + regex' if intent_classifier.use_ai and intent_classifier.client else 'regex only'}"
    )

    yield

    intent_classifier.clear_cache()
    logger.info("Concierge AI Context Service shutdown complete")


# ============================================
# FastAPI Application
# ============================================

app = FastAPI(
    title="Concierge AI Context Service",
    description="Conversation windowing, intent classification, dynamic context and travel personality scoring.",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(chat_router)


# ============================================
# REST Endpoints
# ============================================

@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": "Concierge AI Context Service",
        "version": __version__,
        "status": "running",
        "docs": "/docs",
        "endpoints": [
            "/health",
            "/api/ai/context",
            "/api/ai/intent",
            "/api/ai/quiz/score",
            "/api/ai/quiz/scale-score",
            "/api/ai/travel-types",
        ]
    }


@app.get("/health")
async def health_check():
    """Health check"""
    return {
        "status": "healthy",
        "service": "concierge-ai",
        "version": __version__,
        "components": {
            "travel_types": len(list_travel_types()),
            "intent_ai": "ready" if intent_classifier.client is not None else "unavailable",
            "intent_model": settings.OPENAI_MODEL,
        },
        "timestamp": datetime.now().isoformat()
    }


# ============================================
# Main
# ============================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "concierge_ai.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.API_ENV == "development"
    )
