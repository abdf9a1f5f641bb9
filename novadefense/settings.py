# novadefense/settings.py
"""Host settings, overridable via environment variables or a .env file."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings for the command-line host (NOVA_ prefix)."""

    # Session
    DIFFICULTY: str = "NORMAL"
    SEED: int | None = None
    FPS: float = 60.0
    MAX_SECONDS: float = 600.0

    # Storage
    LEADERBOARD_PATH: Path = Path("runs/leaderboard.json")

    # Logging
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="NOVA_", env_file=".env", extra="ignore")


settings = Settings()
