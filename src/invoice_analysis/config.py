# src/invoice_analysis/config.py

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from src.invoice_analysis.errors import ConfigurationError

DEFAULT_API_VERSION = "2023-07-31"

REQUIRED_ENV_VARS = [
    "DOCINT_ENDPOINT",
    "DOCINT_KEY",
]


@dataclass(frozen=True)
class AnalyzerConfig:
    """
    Settings for talking to Azure Document Intelligence.

    Built once per request by the HTTP handlers and passed explicitly into
    the processor, so tests can hand in fake credentials.
    """

    endpoint: str
    api_key: str
    api_version: str = DEFAULT_API_VERSION
    max_wait_seconds: float = 60
    poll_interval: float = 1
    download_timeout: float = 30

    def __post_init__(self):
        if not self.endpoint or not self.api_key:
            raise ConfigurationError(
                "Missing DOCINT_ENDPOINT or DOCINT_KEY environment variables."
            )

    @property
    def base_url(self) -> str:
        return self.endpoint.rstrip("/")

    @classmethod
    def from_env(cls) -> "AnalyzerConfig":
        """
        Read settings from the process environment (and a local .env file,
        if there is one).
        """
        load_dotenv()

        return cls(
            endpoint=os.getenv("DOCINT_ENDPOINT", ""),
            api_key=os.getenv("DOCINT_KEY", ""),
            api_version=os.getenv("DOCINT_API_VERSION", DEFAULT_API_VERSION),
            max_wait_seconds=float(os.getenv("DOCINT_MAX_WAIT_SECONDS", "60")),
            poll_interval=float(os.getenv("DOCINT_POLL_INTERVAL", "1")),
            download_timeout=float(os.getenv("DOWNLOAD_TIMEOUT_SECONDS", "30")),
        )


def missing_env_vars() -> list:
    """Names of required settings that are not set."""
    load_dotenv()
    return [name for name in REQUIRED_ENV_VARS if not os.getenv(name)]
