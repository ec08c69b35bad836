"""Configuration management for Family Tree.

Loads settings from environment variables and provides validated configuration.
"""

from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

# Load .env file if it exists
load_dotenv()

# Generations climbed from each candidate when looking for a shared ancestor.
# 1 blocks siblings, 2 also blocks first cousins.
CONSANGUINITY_RADIUS = 2


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    db_path: Path = Path("./familytree.db")

    # Graph engine
    consanguinity_radius: int = Field(default=CONSANGUINITY_RADIUS, ge=1)
    traversal_node_limit: int | None = Field(default=None, ge=1)
    traversal_timeout: float | None = 10.0

    # Logging
    log_level: str = "INFO"

    class Config:
        """Pydantic configuration."""

        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


# Global settings instance
settings = Settings()
