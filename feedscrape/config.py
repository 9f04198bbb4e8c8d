"""Centralised settings for the feedscrape service.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Workspace / storage
    # ------------------------------------------------------------------
    workspace_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("FEEDSCRAPE_WORKSPACE", Path.home() / ".feedscrape_data")
        )
    )

    @property
    def db_path(self) -> Path:
        """Absolute path to the SQLite database file."""
        return self.workspace_dir / "feed.db"

    @property
    def schema_path(self) -> Path:
        """Absolute path to the schema SQL file bundled with the package."""
        return Path(__file__).resolve().parent / "db" / "schema.sql"

    # ------------------------------------------------------------------
    # Feed window
    # ------------------------------------------------------------------
    feed_base_url: str = field(
        default_factory=lambda: os.environ.get(
            "FEED_BASE_URL", "https://venmo.com/api/v5/public"
        )
    )
    window_interval: int = field(
        default_factory=lambda: int(os.environ.get("WINDOW_INTERVAL", "5"))
    )
    window_size: int = field(
        default_factory=lambda: int(os.environ.get("WINDOW_SIZE", "10"))
    )

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "10.0"))
    )
    poll_interval: float = field(
        default_factory=lambda: float(os.environ.get("POLL_INTERVAL", "0.05"))
    )
    # 0 means one worker per URL in the batch.
    fetch_max_workers: int = field(
        default_factory=lambda: int(os.environ.get("FETCH_MAX_WORKERS", "0"))
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO")
    )

    def ensure_workspace(self) -> None:
        """Create the workspace directory if it does not exist."""
        self.workspace_dir.mkdir(parents=True, exist_ok=True)


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once for the CLI and the API process."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )


# Module-level singleton — import this everywhere:
#   from feedscrape.config import settings
settings = Settings()
