from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Central configuration loaded from environment / .env file."""

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "TINYSTATUS_",
        "extra": "ignore",
    }

    # Input files
    checks_path: str = "checks.csv"
    incidents_path: str = "incidents.txt"

    # Page
    page_title: str = "tinystatus"

    # Probes
    probe_timeout: float = 10.0  # seconds, applied to every scan
    concurrency_limit: int = 32  # scans in flight at once
    ping_executable: str = "ping"

    # Daemon mode
    refresh_interval: float = 15.0  # seconds between two renderings
    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Logging
    log_level: str = "INFO"
