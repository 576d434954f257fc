"""Configuration management using environment variables"""
import os
import logging
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

DEFAULT_UPSTREAM_BASE_URL = "http://localhost:8112/api/v1/employee"


class Settings:
    """Application settings - YAGNI: Only what we need right now"""

    def __init__(self):
        # Environment
        self.environment = os.getenv("ENVIRONMENT", "development")

        # Upstream mock employee service
        if self.environment == "production":
            self.upstream_base_url = self._get_required("UPSTREAM_BASE_URL")
        else:
            self.upstream_base_url = os.getenv("UPSTREAM_BASE_URL", DEFAULT_UPSTREAM_BASE_URL)
            if self.upstream_base_url == DEFAULT_UPSTREAM_BASE_URL:
                logging.getLogger(__name__).info(
                    f"Using default UPSTREAM_BASE_URL: {DEFAULT_UPSTREAM_BASE_URL}"
                )
        self.upstream_base_url = self.upstream_base_url.rstrip("/")

        # Outbound HTTP timeouts (seconds)
        self.upstream_connect_timeout = float(os.getenv("UPSTREAM_CONNECT_TIMEOUT", "5.0"))
        self.upstream_read_timeout = float(os.getenv("UPSTREAM_READ_TIMEOUT", "10.0"))

        # Retry policy for upstream rate limiting (429)
        self.retry_max_attempts = int(os.getenv("UPSTREAM_RETRY_MAX_ATTEMPTS", "3"))
        self.retry_base_delay_ms = int(os.getenv("UPSTREAM_RETRY_BASE_DELAY_MS", "1000"))
        self.retry_multiplier = float(os.getenv("UPSTREAM_RETRY_MULTIPLIER", "2.0"))

        if self.retry_max_attempts < 1:
            raise ValueError(
                f"UPSTREAM_RETRY_MAX_ATTEMPTS must be at least 1 (got {self.retry_max_attempts})"
            )
        if self.retry_base_delay_ms < 0:
            raise ValueError(
                f"UPSTREAM_RETRY_BASE_DELAY_MS cannot be negative (got {self.retry_base_delay_ms})"
            )

        # Server configuration
        self.host = os.getenv("HOST", "0.0.0.0")
        self.port = int(os.getenv("PORT", "8000"))

        # Logging
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    def _get_required(self, key: str) -> str:
        """Get required environment variable or raise error."""
        value = os.getenv(key, "").strip()
        if not value:
            raise ValueError(
                f"Missing required environment variable: {key}. "
                f"Required in production mode."
            )
        return value


# Global settings instance
settings = Settings()
