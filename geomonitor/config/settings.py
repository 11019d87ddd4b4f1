"""Configuration settings for the situation monitor."""

from pathlib import Path

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

# Load .env file
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Feed Fetching
    fetch_timeout_seconds: float = 10.0
    fetch_concurrency: int = 10
    max_items_per_feed: int = 15
    user_agent: str = "Mozilla/5.0 (compatible; SituationMonitor/1.0)"

    # Normalization
    max_age_days: int = 7
    future_tolerance_minutes: int = 60
    dedup_prefix_length: int = 50
    max_corpus_size: int = 1000
    min_relevance_score: float = 1.0

    # Signals & Scenarios
    signal_noise_floor: int = 20
    recent_window_minutes: int = 60
    scenario_window: int = 50

    # Caching
    news_cache_ttl_seconds: int = 300

    # Server
    host: str = "0.0.0.0"
    port: int = 3001

    # Paths
    project_root: Path = Path(__file__).parent.parent.parent
    package_dir: Path = project_root / "geomonitor"
    data_dir: Path = project_root / "data"
    output_dir: Path = project_root / "output" / "reports"
    config_dir: Path = package_dir / "config"

    # Config files
    feeds_file: Path = data_dir / "feeds.json"
    signal_templates_file: Path = config_dir / "signal_templates.yaml"
    scenarios_file: Path = config_dir / "scenarios.yaml"
    knowledge_graph_file: Path = config_dir / "knowledge_graph.yaml"

    class Config:
        env_file = ".env"
        env_prefix = "GEOMONITOR_"
        extra = "ignore"


# Global settings instance
settings = Settings()
