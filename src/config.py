"""Configuration module for the Study Tracker backend.

This module provides centralized configuration management, including directory
paths, storage backend selection, API server settings, authentication, study
timer rules and LLM configuration. All configuration values can be overridden
via environment variables.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Directory Configuration ---

# Root directory of the project
ROOT_DIR = Path(__file__).parent.parent.resolve()

# Data directory (can be overridden via DATA_DIR env var)
DATA_DIR = Path(os.getenv("DATA_DIR", str(ROOT_DIR / "data")))

# Local fallback storage directory, one JSON blob per storage key
LOCAL_STORAGE_DIR_NAME = "local_storage"
LOCAL_STORAGE_DIR = DATA_DIR / LOCAL_STORAGE_DIR_NAME

# --- Storage Backend Configuration ---

# "local" keeps every collection as a JSON blob under LOCAL_STORAGE_DIR,
# "database" uses the SQLAlchemy tables profiles/modules/sessions/reminders.
STORE_BACKEND: str = os.getenv("STORE_BACKEND", "local").strip().lower()

DATABASE_URL: str = os.getenv(
    "DATABASE_URL", f"sqlite:///{DATA_DIR}/study_tracker.db"
)

# --- API Server Configuration ---

API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "8000"))

# CORS allowed origins (comma-separated list)
_CORS_ALLOWED_ORIGINS_STR: str = os.getenv(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000,"
    "http://127.0.0.1:3000",
)
CORS_ALLOWED_ORIGINS: List[str] = [
    origin.strip()
    for origin in _CORS_ALLOWED_ORIGINS_STR.split(",")
    if origin.strip()
]

# --- Authentication Configuration ---

JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "your-secret-key-change-in-production")
JWT_ALGORITHM: str = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES: int = int(
    os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7))
)

# Bcrypt rounds for password hashing (higher = more secure but slower)
BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

# --- Study Timer Configuration ---

# Timer runs must accumulate strictly more than this many seconds to be recorded
MIN_SESSION_SECONDS: int = int(os.getenv("MIN_SESSION_SECONDS", "5"))

# Durations (minutes) a student can pick while the timer is idle
SESSION_DURATION_CHOICES: List[int] = [15, 25, 45, 60]
DEFAULT_SESSION_MINUTES: int = 25

# --- Module Configuration ---

UNKNOWN_MODULE_TITLE: str = "Unknown Module"
MAX_DOCX_SIZE: int = int(os.getenv("MAX_DOCX_SIZE", str(10 * 1024 * 1024)))

# --- LLM Configuration ---

TEMPERATURE: float = float(os.getenv("TEMPERATURE", "0.7"))

# Default provider used by the study tutor
DEFAULT_LLM_PROVIDER: str = os.getenv("DEFAULT_LLM_PROVIDER", "gemini")

# Provider registry for OpenAI-compatible endpoints
LLM_PROVIDERS: Dict[str, Dict[str, Optional[str]]] = {
    "gemini": {
        "display_name": "Google Gemini",
        "base_url": "https://generativelanguage.googleapis.com/v1beta/openai/",
        "default_model": "gemini-2.5-flash",
        "env_key": "GOOGLE_API_KEY",
    },
    "deepseek": {
        "display_name": "DeepSeek",
        "base_url": "https://api.deepseek.com",
        "default_model": "deepseek-chat",
        "env_key": "DEEPSEEK_API_KEY",
    },
    "openai": {
        "display_name": "OpenAI",
        "base_url": None,
        "default_model": "gpt-4o",
        "env_key": "OPENAI_API_KEY",
    },
}

# --- Logging Configuration ---

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


def get_default_llm() -> Any:
    """Get the default LLM instance.

    Returns:
        An LLM instance configured based on DEFAULT_LLM_PROVIDER.

    Raises:
        ValueError: If the provider is unknown or its API key is not set.

    Note:
        This function uses lazy import so the API can start without the
        LLM client being importable.
    """
    from langchain_openai import ChatOpenAI

    provider = DEFAULT_LLM_PROVIDER
    if provider not in LLM_PROVIDERS:
        raise ValueError(f"Unknown LLM provider: {provider}")

    provider_config = LLM_PROVIDERS[provider]
    api_key = os.getenv(provider_config["env_key"])

    if not api_key:
        raise ValueError(
            f"{provider_config['env_key']} must be set to use {provider_config['display_name']}"
        )

    kwargs = {
        "model": provider_config["default_model"],
        "api_key": api_key,
        "temperature": TEMPERATURE,
    }
    if provider_config["base_url"]:
        kwargs["base_url"] = provider_config["base_url"]
    return ChatOpenAI(**kwargs)
