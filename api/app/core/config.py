"""Application configuration."""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # API settings
    API_V1_PREFIX: str = "/api/v1"
    PROJECT_NAME: str = "Portfolio Analytics API"
    VERSION: str = "1.0.0"
    DEBUG: bool = False

    # CORS settings
    CORS_ORIGINS: list[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]

    # Paths (relative to project root)
    PROJECT_ROOT: Path = Path(__file__).parent.parent.parent.parent

    # Simulation job manager
    SIMULATION_WORKERS: int = 4
    SIMULATION_QUEUE_SIZE: int = 100
    SIMULATION_PURGE_INTERVAL: float = 300.0
    SIMULATION_RESULT_TTL: float = 1800.0
    SIMULATION_SEED: Optional[int] = None

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
