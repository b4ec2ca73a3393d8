"""Configuration settings for story generation."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
env_file = ".env.test" if os.getenv("ENV") == "test" else ".env"
load_dotenv(env_file)


# Define data directories from environment variables
DATA_DIR = Path(os.getenv("DATA_DIR", "./data"))
DEFAULT_DATABASE_URL = f"sqlite:///{DATA_DIR / 'lingostory.db'}"

# Eligibility settings
MAX_INTERVAL_DAYS = 21.0  # words reviewed at longer intervals count as mastered

# Phase timeline (seconds)
PHASE_DURATIONS = {
    "collecting_words": 1.5,
    "writing_story": 2.0,
    "final_touches": 1.0,
}


def ensure_directories() -> None:
    """Ensure the directory holding the default SQLite database exists."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)


@dataclass
class DatabaseSettings:
    """Database configuration settings."""
    url: str = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)
    echo: bool = os.getenv("DATABASE_ECHO", "false").lower() == "true"


@dataclass
class LoggingSettings:
    """Logging configuration settings."""
    level: str = os.getenv("LOG_LEVEL", "INFO")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    dir: Optional[str] = os.getenv("LOG_DIR", None)
    rotation: str = os.getenv("LOG_ROTATION", "midnight")
    interval: int = int(os.getenv("LOG_INTERVAL", "1"))
    backup_count: int = int(os.getenv("LOG_BACKUP_COUNT", "7"))


@dataclass
class QuotaSettings:
    """Monthly story quota settings."""
    free_limit: int = int(os.getenv("FREE_STORY_LIMIT", "3"))
    premium_limit: int = int(os.getenv("PREMIUM_STORY_LIMIT", "30"))


@dataclass
class EligibilitySettings:
    """Word eligibility settings."""
    max_interval_days: float = float(os.getenv("MAX_INTERVAL_DAYS", str(MAX_INTERVAL_DAYS)))


@dataclass
class GenerationSettings:
    """Story generation settings."""
    provider: str = os.getenv("LLM_PROVIDER", "gemini").lower()
    model: str = os.getenv("LLM_MODEL", "gemini-2.0-flash")
    temperature: float = float(os.getenv("LLM_TEMPERATURE", "0.9"))
    timeout: float = float(os.getenv("GENERATION_TIMEOUT", "30"))
    settle_delay: float = float(os.getenv("SETTLE_DELAY", "0.3"))
    phase_scale: float = float(os.getenv("PHASE_SCALE", "1.0"))
    max_stored_stories: int = int(os.getenv("MAX_STORED_STORIES", "30"))
    phase_durations: dict[str, float] = field(default_factory=lambda: dict(PHASE_DURATIONS))


@dataclass
class GeminiSettings:
    """Gemini credential settings."""
    api_key: str = os.getenv("GOOGLE_API_KEY", "")


@dataclass
class MonitoringSettings:
    """Prometheus settings."""
    enabled: bool = os.getenv("METRICS_ENABLED", "false").lower() == "true"
    port: int = int(os.getenv("METRICS_PORT", "9090"))


def get_database_settings() -> DatabaseSettings:
    """Get database settings."""
    return DatabaseSettings()


def get_logging_settings() -> LoggingSettings:
    """Get logging settings."""
    return LoggingSettings()


def get_quota_settings() -> QuotaSettings:
    """Get quota settings."""
    return QuotaSettings()


def get_eligibility_settings() -> EligibilitySettings:
    """Get eligibility settings."""
    return EligibilitySettings()


def get_generation_settings() -> GenerationSettings:
    """Get generation settings."""
    return GenerationSettings()


def get_gemini_settings() -> GeminiSettings:
    """Get Gemini settings."""
    return GeminiSettings()


def get_monitoring_settings() -> MonitoringSettings:
    """Get monitoring settings."""
    return MonitoringSettings()


@dataclass
class Settings:
    """Main settings class that combines all configuration settings."""
    database: DatabaseSettings = field(default_factory=get_database_settings)
    logging: LoggingSettings = field(default_factory=get_logging_settings)
    quota: QuotaSettings = field(default_factory=get_quota_settings)
    eligibility: EligibilitySettings = field(default_factory=get_eligibility_settings)
    generation: GenerationSettings = field(default_factory=get_generation_settings)
    gemini: GeminiSettings = field(default_factory=get_gemini_settings)
    monitoring: MonitoringSettings = field(default_factory=get_monitoring_settings)

    def validate(self) -> None:
        """Validate settings and raise ValueError if invalid."""
        if self.quota.free_limit < 0 or self.quota.premium_limit < 0:
            raise ValueError("Story limits cannot be negative")

        if self.quota.free_limit > self.quota.premium_limit:
            raise ValueError("FREE_STORY_LIMIT cannot be greater than PREMIUM_STORY_LIMIT")

        if self.eligibility.max_interval_days <= 0:
            raise ValueError("MAX_INTERVAL_DAYS must be positive")

        if self.generation.timeout <= 0:
            raise ValueError("GENERATION_TIMEOUT must be positive")

        if self.generation.settle_delay < 0 or self.generation.phase_scale < 0:
            raise ValueError("SETTLE_DELAY and PHASE_SCALE cannot be negative")

        if self.generation.max_stored_stories < 1:
            raise ValueError("MAX_STORED_STORIES must be positive")

        if self.generation.provider not in ("gemini", "faker"):
            raise ValueError(f"Unknown LLM_PROVIDER: {self.generation.provider}")

    def phase_duration(self, phase_name: str) -> float:
        """Scaled display duration of a generation phase."""
        return self.generation.phase_durations[phase_name] * self.generation.phase_scale


# Create global settings instance
settings = Settings()
settings.validate()
