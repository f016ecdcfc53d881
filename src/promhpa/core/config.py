# src/promhpa/core/config.py

import logging
import os
import re
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Load environment variables from a .env file located in the project root
dotenv_path = os.path.join(os.path.dirname(__file__), "..", "..", "..", ".env")
load_dotenv(dotenv_path=dotenv_path)

DEFAULT_PROMETHEUS_URL = "http://prometheus-0.kube-system.svc:9090"
DEFAULT_CPU_UTILIZATION_METRIC = "container_cpu_usage_seconds_total"
SECRETS_DIR = "/etc/promhpa/secrets"


def _env_flag(key: str, default: str = "True") -> bool:
    return os.getenv(key, default).lower() in ("true", "1", "t", "y", "yes")


class Config:
    """
    Handles the application's configuration by loading values from environment variables.
    """

    def __init__(self):
        # -- Prometheus credentials ---
        self.PROMETHEUS_BEARER_TOKEN = self._get_secret("PROMETHEUS_BEARER_TOKEN")
        self.PROMETHEUS_USERNAME = self._get_secret("PROMETHEUS_USERNAME")
        self.PROMETHEUS_PASSWORD = self._get_secret("PROMETHEUS_PASSWORD")

    @staticmethod
    def _get_secret(key: str, default: str = None) -> str:
        """
        Retrieves a secret from a file (mounted secret volume) or falls back to environment variable.
        An unreadable secret file raises its OSError; it never falls back silently.
        """
        secret_file = os.path.join(SECRETS_DIR, key)
        if os.path.exists(secret_file):
            with open(secret_file, "r") as f:
                logger.debug("Loaded secret '%s' from %s", key, secret_file)
                return f.read().strip()
        return os.getenv(key, default)

    # --- Logging variables ---
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    USER_AGENT = os.getenv("USER_AGENT", "promhpa-horizontal-pod-autoscaler")

    # -- Prometheus variables ---
    PROMETHEUS_URL = os.getenv("PROMETHEUS_URL", DEFAULT_PROMETHEUS_URL)
    PROMETHEUS_CPU_METRIC = os.getenv("PROMETHEUS_CPU_METRIC", DEFAULT_CPU_UTILIZATION_METRIC)
    PROMETHEUS_CPU_RATE_WINDOW = os.getenv("PROMETHEUS_CPU_RATE_WINDOW", "30m")
    PROMETHEUS_VERIFY_CERTS = _env_flag("PROMETHEUS_VERIFY_CERTS")

    # --- Kubernetes variables ---
    CPU_RESOURCE_NAME = os.getenv("CPU_RESOURCE_NAME", "cpu")

    # Resolved at access time; unset means requests are never timed out.
    @property
    def PROMETHEUS_TIMEOUT(self) -> Optional[float]:
        raw = os.getenv("PROMETHEUS_TIMEOUT")
        if raw is None or raw.strip() == "":
            return None
        return float(raw)

    def validate_instance(self):
        if not re.match(r"^\d+(ms|[smhdwy])$", self.PROMETHEUS_CPU_RATE_WINDOW):
            raise ValueError(
                "PROMETHEUS_CPU_RATE_WINDOW format is invalid. Use a Prometheus duration like '30m' or '1h'."
            )
        try:
            timeout = self.PROMETHEUS_TIMEOUT
        except ValueError as e:
            raise ValueError("PROMETHEUS_TIMEOUT must be a number of seconds.") from e
        if timeout is not None and timeout <= 0:
            raise ValueError("PROMETHEUS_TIMEOUT must be positive.")
        if not self.PROMETHEUS_URL:
            raise ValueError("PROMETHEUS_URL must not be empty.")


# Instantiate the config to be imported by other modules
config = Config()
config.validate_instance()
