"""
Application configuration using environment variables.
"""
import os
from dataclasses import dataclass, field
from typing import List
from dotenv import load_dotenv

# Load .env file
load_dotenv()

@dataclass
class Settings:
    """Application settings."""
    APP_NAME: str = "Check Assessment Engine"
    
    # Verification provider
    PROVIDER_API_URL: str = os.getenv("PROVIDER_API_URL", "https://api.thirdfort.io/v2")
    PROVIDER_API_TOKEN: str = os.getenv("PROVIDER_API_TOKEN", "")
    PROVIDER_TIMEOUT: int = int(os.getenv("PROVIDER_TIMEOUT", "15"))
    PROVIDER_MAX_RETRIES: int = int(os.getenv("PROVIDER_MAX_RETRIES", "2"))
    PROVIDER_BACKOFF_SECONDS: float = float(os.getenv("PROVIDER_BACKOFF_SECONDS", "0.5"))
    
    # Circuit breaker
    CIRCUIT_FAILURE_THRESHOLD: int = int(os.getenv("CIRCUIT_FAILURE_THRESHOLD", "5"))
    CIRCUIT_COOLDOWN_SECONDS: int = int(os.getenv("CIRCUIT_COOLDOWN_SECONDS", "60"))
    
    # Check type definitions (JSON); empty = built-in definitions
    CHECK_TYPES_PATH: str = os.getenv("CHECK_TYPES_PATH", "")
    
    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    
    # CORS
    CORS_ORIGINS: List[str] = field(default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"])

settings = Settings()
