from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Claude API (schedule proposals)
    anthropic_api_key: str = ""
    claude_model: str = "claude-sonnet-4-20250514"
    claude_max_tokens: int = 4000

    # Set to false to always use the built-in stagger planner
    ai_planner_enabled: bool = True

    # Live progress clock
    tick_interval_seconds: float = 1.0

    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    @property
    def claude_available(self) -> bool:
        """Whether schedule proposals should be requested from Claude."""
        return self.ai_planner_enabled and bool(self.anthropic_api_key)


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
