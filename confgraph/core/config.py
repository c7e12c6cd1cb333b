"""
Central configuration management for ConfGraph.

Loads settings from environment variables and provides typed access.
"""
from pathlib import Path
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class AnalyticsSettings(BaseSettings):
    """Clustering and graph analysis parameters.

    ``random_seed`` is unset in production so centroid seeding differs
    between runs; pin it to reproduce an exact partition.
    """
    cluster_count: int = Field(default=10, ge=1, alias="CONFGRAPH_CLUSTER_COUNT")
    max_iterations: int = Field(default=100, ge=1, alias="CONFGRAPH_MAX_ITERATIONS")
    keyword_limit: int | None = Field(default=None, ge=1, alias="CONFGRAPH_KEYWORD_LIMIT")
    random_seed: int | None = Field(default=None, alias="CONFGRAPH_RANDOM_SEED")

    # Top-N cut-offs for the unified graph and for per-cluster reports
    central_top_n: int = Field(default=10, ge=1, alias="CONFGRAPH_CENTRAL_TOP_N")
    hub_top_n: int = Field(default=10, ge=1, alias="CONFGRAPH_HUB_TOP_N")
    cluster_top_n: int = Field(default=5, ge=1, alias="CONFGRAPH_CLUSTER_TOP_N")


class StorageSettings(BaseSettings):
    """SQLite storage configuration."""
    db_path: Path = Field(default=Path("data/confgraph.db"), alias="CONFGRAPH_DB_PATH")

    def resolve(self, base_dir: Path) -> "StorageSettings":
        """Resolve a relative database path against base directory."""
        if self.db_path.is_absolute():
            return self
        return StorageSettings(CONFGRAPH_DB_PATH=base_dir / self.db_path)


class Settings(BaseSettings):
    """Main settings aggregator."""
    analytics: AnalyticsSettings = Field(default_factory=AnalyticsSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)

    # Project root
    project_root: Path = Field(default_factory=lambda: Path(__file__).parent.parent.parent)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def load_dotenv_if_exists():
    """Load the project .env file into the process environment if present."""
    from dotenv import load_dotenv
    env_path = Path(__file__).parent.parent.parent / ".env"
    if env_path.exists():
        load_dotenv(env_path)
