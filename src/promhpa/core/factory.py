# src/promhpa/core/factory.py
"""
Factory function to wire the Prometheus metrics client from configuration.
"""

import logging
from typing import Optional

from ..collectors.pod_collector import PodCollector
from ..collectors.prometheus_collector import PrometheusCollector
from .config import Config, config
from .metrics_client import PrometheusMetricsClient

logger = logging.getLogger(__name__)


def get_metrics_client(settings: Optional[Config] = None) -> PrometheusMetricsClient:
    """
    Build a PrometheusMetricsClient whose address, CPU metric, CPU resource
    and rate window come from `settings` (the module config by default).
    The Kubernetes client is loaded lazily on first use.
    """
    settings = settings or config
    logger.info("Using Prometheus at %s", settings.PROMETHEUS_URL)
    return PrometheusMetricsClient(
        pod_collector=PodCollector(),
        prometheus=PrometheusCollector(base_url=settings.PROMETHEUS_URL),
        cpu_metric_name=settings.PROMETHEUS_CPU_METRIC,
        cpu_resource=settings.CPU_RESOURCE_NAME,
        cpu_rate_window=settings.PROMETHEUS_CPU_RATE_WINDOW,
    )
