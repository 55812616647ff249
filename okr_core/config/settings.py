from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    node_spacing: float = 40.0
    level_spacing: float = 120.0
    show_tasks: bool = False
    show_quarters: bool = True
    max_tasks_per_kr: int = 5
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:3000"]

    class Config:
        env_prefix = "OKR_"
        env_file = ".env"


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
