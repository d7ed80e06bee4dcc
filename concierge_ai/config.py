"""
Concierge AI Configuration
Loads settings from environment variables
"""

import os
from typing import List
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Settings:
    """Application settings loaded from environment"""
    
    # OpenAI Configuration
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    
    # Intent Classification
    USE_AI_INTENT_CLASSIFICATION: bool = os.getenv("USE_AI_INTENT_CLASSIFICATION", "true") != "false"
    INTENT_CLASSIFIER_TIMEOUT: float = float(os.getenv("INTENT_CLASSIFIER_TIMEOUT", "5.0"))
    INTENT_CACHE_TTL: int = int(os.getenv("INTENT_CACHE_TTL", "300"))
    INTENT_CACHE_MAX_ENTRIES: int = int(os.getenv("INTENT_CACHE_MAX_ENTRIES", "100"))
    
    # Context Management
    MAX_CONVERSATION_TURNS: int = int(os.getenv("MAX_CONVERSATION_TURNS", "4"))
    MAX_DISPLAYED_CARDS: int = int(os.getenv("MAX_DISPLAYED_CARDS", "5"))
    SUMMARY_TRUNCATE_LENGTH: int = int(os.getenv("SUMMARY_TRUNCATE_LENGTH", "300"))
    
    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    
    # API Configuration
    API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
    API_PORT: int = int(os.getenv("API_PORT", "8000"))
    API_ENV: str = os.getenv("API_ENV", "development")
    
    # CORS Configuration
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:3001")
    
    @property
    def cors_origins_list(self) -> List[str]:
        """Get CORS origins as a list"""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]
    
    @property
    def openai_enabled(self) -> bool:
        """True when a usable OpenAI key is configured"""
        key = self.OPENAI_API_KEY
        return bool(key) and not key.startswith("sk-your")


# Global settings instance
settings = Settings()
