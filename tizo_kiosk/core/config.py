from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., APP_NAME, DEBUG,
    DATA_DIR, DB_FILENAME, RATE_SOURCE, RATES_REFRESH_INTERVAL_SECONDS).
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Basic app metadata
    app_name: str = "TIZO Kiosk API"
    debug: bool = False
    version: str = "0.1.0"

    # Data & persistence
    data_dir: Path = Path("data")
    db_filename: str = "kiosk.sqlite3"
    db_path: Optional[Path] = None  # derived if not provided
    db_timeout_seconds: float = 5.0
    seed_on_startup: bool = True

    # TIZO rate table source
    # Allowed: 'database' (upsell_offers table), 'static' (built-in tier table)
    rate_source: str = "database"
    source_retries: int = 2
    source_retry_backoff_seconds: float = 0.5
    rates_refresh_interval_seconds: int = 0  # 0 disables the background refresher

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    cors_allow_origins: List[str] = ["*"]

    def init_post_load(self) -> None:
        """Finalize derived fields and ensure directories exist."""
        if self.db_path is None:
            self.db_path = self.data_dir / self.db_filename
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        allowed = {"database", "static"}
        if self.rate_source not in allowed:
            raise ValueError(
                f"Unsupported rate_source '{self.rate_source}'. Allowed: {allowed}"
            )
        if self.source_retries < 0:
            raise ValueError("source_retries must be >= 0")
        if self.rates_refresh_interval_seconds < 0:
            raise ValueError("rates_refresh_interval_seconds must be >= 0")


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings
