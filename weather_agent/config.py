"""
Configuration for the Weather Agent
Central configuration management using Pydantic Settings
"""

from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # OpenAI Configuration
    openai_api_key: str = Field(default="", alias="OPENAI_API_KEY")
    openai_model: str = Field(default="gpt-4o-mini", alias="OPENAI_MODEL")
    openai_base_url: Optional[str] = Field(default=None, alias="OPENAI_BASE_URL")
    temperature: float = Field(default=0.2, alias="TEMPERATURE")
    max_tokens: int = Field(default=1024, alias="MAX_TOKENS")
    request_timeout: float = Field(default=30.0, alias="REQUEST_TIMEOUT")

    # Agent Configuration
    max_rounds: int = Field(default=8, ge=1, alias="MAX_ROUNDS")

    # Logging
    log_level: str = Field(default="WARNING", alias="LOG_LEVEL")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create settings instance"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


# Application metadata
APP_NAME = "Weather Agent"
APP_VERSION = "1.0.0"
APP_DESCRIPTION = "Conversational assistant for the weather app"

BEHAVIOR_INSTRUCTION = (
    "You are an intelligent agent controlling a Weather App. "
    "Your goal is to help the user by navigating the app and retrieving information. "
    "When a user asks for weather, use the tools to navigate them to the correct page. "
    "Be concise, helpful, and friendly. "
    "Do not just describe the weather if you can show it by navigating."
)

GREETING = (
    "Hello! I am your Weather Agent. I can help you check weather, "
    "compare cities, or navigate the app. What would you like to do?"
)
