"""
Runtime configuration for the SarradaBet API.
Everything comes from environment variables (optionally via a .env file).
"""

import os
from typing import List, Optional

from dotenv import load_dotenv

# Load .env BEFORE reading any variable
load_dotenv()


def _csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings:
    # ----------------------------------------------------------------------
    # Runtime
    # ----------------------------------------------------------------------
    ENVIRONMENT = os.getenv("ENVIRONMENT", "development")  # development | production | test
    PORT = int(os.getenv("PORT", "8000"))
    CORS_ORIGINS = _csv(
        os.getenv("CORS_ORIGINS", "http://localhost:8501,http://localhost:5173")
    )

    # ----------------------------------------------------------------------
    # Database
    # ----------------------------------------------------------------------
    DATABASE_URL = os.getenv(
        "DATABASE_URL", "postgresql://postgres@127.0.0.1:5432/sarradabet"
    )

    # ----------------------------------------------------------------------
    # Admin authentication
    # ----------------------------------------------------------------------
    JWT_SECRET: Optional[str] = os.getenv("JWT_SECRET")
    JWT_EXPIRES_HOURS = int(os.getenv("JWT_EXPIRES_HOURS", "24"))

    # ----------------------------------------------------------------------
    # Events (both optional; unset = disabled)
    # ----------------------------------------------------------------------
    EVENT_GATEWAY_URL: Optional[str] = os.getenv("EVENT_GATEWAY_URL")
    EVENT_GATEWAY_API_KEY: Optional[str] = os.getenv("EVENT_GATEWAY_API_KEY")
    KAFKA_BROKERS: Optional[str] = os.getenv("KAFKA_BROKERS")
    KAFKA_CLIENT_ID = os.getenv("KAFKA_CLIENT_ID", "sarradabet-api")
    KAFKA_CONSUMER_GROUP = os.getenv("KAFKA_CONSUMER_GROUP", "sarradabet-match-consumers")

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"


settings = Settings()
