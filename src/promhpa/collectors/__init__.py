from .pod_collector import PodCollector
from .prometheus_collector import PrometheusCollector

__all__ = [
    "PodCollector",
    "PrometheusCollector",
]
