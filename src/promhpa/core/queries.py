# src/promhpa/core/queries.py
"""
Builds the PromQL instant queries used for the autoscaling signals.
"""

from typing import Iterable

DEFAULT_CPU_RATE_WINDOW = "30m"


def build_pod_name_pattern(pod_names: Iterable[str]) -> str:
    """
    Return a regex matching any of `pod_names` as a prefix, e.g. '(a|b).*'.
    The trailing wildcard tolerates container instance suffixes.
    """
    names = list(pod_names)
    if not names:
        raise ValueError("cannot build a pod name pattern from an empty pod set")
    return "(" + "|".join(names) + ").*"


def build_cpu_utilization_query(
    metric_name: str, namespace: str, pod_names: Iterable[str], window: str = DEFAULT_CPU_RATE_WINDOW
) -> str:
    """Summed per-second rate of a CPU usage counter over the matched pods."""
    pattern = build_pod_name_pattern(pod_names)
    return f"sum(rate({{__name__='{metric_name}',namespace='{namespace}',pod_name=~'{pattern}'}}[{window}]))"


def build_custom_metric_query(metric_name: str, namespace: str, pod_names: Iterable[str]) -> str:
    """Unrated sum of a custom metric over the matched pods."""
    pattern = build_pod_name_pattern(pod_names)
    return (
        f"sum({{__name__='{metric_name}',kubernetes_namespace='{namespace}',"
        f"kubernetes_pod_name=~'{pattern}'}})"
    )
