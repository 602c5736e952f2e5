"""Configuration management for the feed scraper service."""

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from .logging_config import create_execution_logger

DEFAULT_ALLOWED_ORIGIN = "https://ws-golang-front.onrender.com"
DEFAULT_ALLOWED_METHODS = ["GET", "POST", "PATCH", "PUT", "DELETE"]
DEFAULT_USER_AGENT = "Feed-Scraper/1.0 (RSS to CSV Web Scraper)"

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass
class ServerConfig:
    """Configuration for the HTTP front door."""

    host: str = "0.0.0.0"
    port: int = 5000
    allowed_origin: str = DEFAULT_ALLOWED_ORIGIN
    allowed_methods: list[str] = field(
        default_factory=lambda: list(DEFAULT_ALLOWED_METHODS)
    )


@dataclass
class ScraperConfig:
    """Configuration for the scrape pipeline."""

    timeout: float | None = 30.0
    user_agent: str = DEFAULT_USER_AGENT
    clean_html: bool = False


@dataclass
class ArtifactConfig:
    """Configuration for output CSV artifacts."""

    directory: Path = field(
        default_factory=lambda: Path(tempfile.gettempdir()) / "feed_scraper"
    )
    download_name: str = "WebScrape.csv"
    keep: bool = False


def load_env_file(path: str | os.PathLike = ".env") -> bool:
    """Load a .env file into the process environment.

    Variables already present in the environment take precedence.

    Returns:
        True if the file was found and loaded, False otherwise
    """
    logger = create_execution_logger("config")
    env_path = Path(path)
    if not env_path.is_file():
        logger.warning("No .env file found, using system environment variables")
        return False

    load_dotenv(env_path, override=False)
    logger.info("Loaded environment file", env_file=str(env_path))
    return True


class Config:
    """Main configuration manager."""

    def __init__(self):
        """Initialize configuration from environment variables."""
        self.logger = create_execution_logger("config")

        self.host = os.getenv("HOST", "0.0.0.0")
        self.port = self._get_int("PORT", 5000)
        self.allowed_origin = os.getenv("CORS_ALLOW_ORIGIN", DEFAULT_ALLOWED_ORIGIN)
        self.allowed_methods = self._get_list(
            "CORS_ALLOW_METHODS", DEFAULT_ALLOWED_METHODS
        )

        self.output_dir = os.getenv("OUTPUT_DIR", "")
        self.output_filename = os.getenv("OUTPUT_FILENAME", "") or "WebScrape.csv"
        self.keep_artifacts = self._get_bool("KEEP_ARTIFACTS", False)

        self.scraper_timeout = self._get_float("SCRAPER_TIMEOUT", 30.0)
        self.user_agent = os.getenv("SCRAPER_USER_AGENT", "") or DEFAULT_USER_AGENT
        self.clean_html = self._get_bool("SCRAPER_CLEAN_HTML", False)

        self.log_level = os.getenv("LOG_LEVEL", "INFO")

    def _get_int(self, name: str, default: int) -> int:
        raw = os.getenv(name, "").strip()
        if not raw:
            return default
        try:
            return int(raw)
        except ValueError:
            self.logger.warning(
                f"Invalid integer for {name}: {raw!r}, using {default}"
            )
            return default

    def _get_float(self, name: str, default: float) -> float:
        raw = os.getenv(name, "").strip()
        if not raw:
            return default
        try:
            return float(raw)
        except ValueError:
            self.logger.warning(f"Invalid number for {name}: {raw!r}, using {default}")
            return default

    def _get_bool(self, name: str, default: bool) -> bool:
        raw = os.getenv(name)
        if raw is None:
            return default
        value = raw.strip().lower()
        if value in TRUE_VALUES:
            return True
        if value in FALSE_VALUES:
            return False
        self.logger.warning(f"Invalid boolean for {name}: {raw!r}, using {default}")
        return default

    @staticmethod
    def _get_list(name: str, default: list[str]) -> list[str]:
        raw = os.getenv(name, "")
        values = [part.strip().upper() for part in raw.split(",") if part.strip()]
        return values or list(default)

    def get_server_config(self) -> ServerConfig:
        """Get HTTP server configuration."""
        return ServerConfig(
            host=self.host,
            port=self.port,
            allowed_origin=self.allowed_origin,
            allowed_methods=list(self.allowed_methods),
        )

    def get_scraper_config(self) -> ScraperConfig:
        """Get scrape pipeline configuration."""
        # A zero or negative timeout disables it
        timeout = self.scraper_timeout if self.scraper_timeout > 0 else None
        return ScraperConfig(
            timeout=timeout,
            user_agent=self.user_agent,
            clean_html=self.clean_html,
        )

    def get_artifact_config(self) -> ArtifactConfig:
        """Get output artifact configuration."""
        config = ArtifactConfig(
            download_name=self.output_filename, keep=self.keep_artifacts
        )
        if self.output_dir:
            config.directory = Path(self.output_dir)
        return config
