"""
Core settings and environment variables for the Civic Triage Engine.
Uses pydantic-settings for type-safe environment variable loading.
"""

from pydantic_settings import BaseSettings
from typing import Dict, Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Create a .env file in the root directory to configure these.
    """

    # Application
    APP_NAME: str = "Civic Triage Engine"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS - Frontend URLs allowed to access this API
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Firebase/Firestore
    FIREBASE_PROJECT_ID: Optional[str] = None
    FIREBASE_CREDENTIALS_PATH: Optional[str] = None  # Path to service account JSON
    PROBLEMS_COLLECTION: str = "problems"
    USERS_COLLECTION: str = "users"

    # In-memory store for local development and tests (no Firebase credentials needed)
    USE_MOCK_DB: bool = True

    # Priority scoring weights
    CATEGORY_WEIGHTS: Dict[str, float] = {
        "electrical": 10,   # High risk
        "water": 8,         # Essential service
        "waste": 6,         # Health concern
        "street": 5,        # Safety issue
        "other": 3,         # General
    }
    UPVOTE_WEIGHT: float = 2.0
    AGE_WEIGHT_PER_DAY: float = 0.5
    AGE_CAP: float = 10.0
    COMMENT_WEIGHT: float = 0.5
    CRITICAL_THRESHOLD: float = 20.0
    HIGH_THRESHOLD: float = 15.0
    MEDIUM_THRESHOLD: float = 10.0
    RANK_LIMIT: int = 10

    # Resolution prediction
    PRIORITY_MULTIPLIERS: Dict[str, float] = {
        "critical": 0.5,    # 50% faster
        "high": 0.7,        # 30% faster
        "medium": 1.0,
        "low": 1.3,         # 30% slower
    }
    DEFAULT_RESOLUTION_DAYS: float = 7.0
    CONFIDENCE_BASE: float = 0.3
    CONFIDENCE_PER_SAMPLE: float = 0.07
    CONFIDENCE_CAP: float = 0.95

    # Duplicate detection
    TITLE_SIMILARITY_THRESHOLD: float = 0.7
    DESCRIPTION_SIMILARITY_THRESHOLD: float = 0.6
    MAX_DUPLICATE_MATCHES: int = 3

    # Department assignment
    WORKLOAD_BASE_SCORE: float = 100.0
    ACTIVE_CASE_PENALTY: float = 5.0
    COMPLETION_RATE_BONUS: float = 20.0
    MAX_ALTERNATIVES: int = 3

    # Reporter reward on resolution
    RESOLUTION_AWARD_POINTS: int = 10

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "allow"


# Global settings instance
settings = Settings()
