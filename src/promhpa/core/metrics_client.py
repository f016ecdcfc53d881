# src/promhpa/core/metrics_client.py
"""
The metrics source of the Horizontal Pod Autoscaler.

Both entry points are strict linear pipelines: list pods, filter them by
phase, build a PromQL query, run it, and reduce the first sample to a
single value. Every failure is raised to the caller as a MetricsError
subclass; nothing is retried, cached or defaulted.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from ..collectors.pod_collector import PodCollector, Selector
from ..collectors.prometheus_collector import PrometheusCollector
from ..models.metrics import CustomMetricResult, UtilizationResult
from ..models.pods import PhasePolicy, eligible_pod_names
from .calculator import aggregate_cpu_requests, average_custom_metric, calculate_utilization
from .config import DEFAULT_CPU_UTILIZATION_METRIC
from .exceptions import NoEligiblePods, NoMatchingMetricSamples
from .queries import DEFAULT_CPU_RATE_WINDOW, build_cpu_utilization_query, build_custom_metric_query

logger = logging.getLogger(__name__)


class MetricsClient(ABC):
    """Interface for getting metrics for a group of pods."""

    @abstractmethod
    async def get_cpu_utilization(self, namespace: str, selector: Selector) -> UtilizationResult:
        """
        Return the average utilization over all pods as a percent of requested CPU
        (e.g. 70 means that an average pod uses 70% of the requested CPU),
        with the time of the observation.

        Only running pods count. A selector that matches no pod at all raises
        NoEligiblePods with `listed == 0`, since utilization is undefined
        without requests; compare get_custom_metric, which returns None.
        """

    @abstractmethod
    async def get_custom_metric(
        self, metric_name: str, namespace: str, selector: Selector
    ) -> Optional[CustomMetricResult]:
        """
        Return the average value of the given custom metric over the pods
        picked by the namespace and selector. Every pod that is not pending
        counts.

        Returns None if the selector matches no pod at all: there is no
        signal, and unlike get_cpu_utilization this is not an error. Pods
        that exist but are all pending still raise NoEligiblePods.
        """


class PrometheusMetricsClient(MetricsClient):
    """Prometheus-based implementation of MetricsClient."""

    def __init__(
        self,
        pod_collector: PodCollector,
        prometheus: PrometheusCollector,
        cpu_metric_name: str = DEFAULT_CPU_UTILIZATION_METRIC,
        cpu_resource: str = "cpu",
        cpu_rate_window: str = DEFAULT_CPU_RATE_WINDOW,
        cpu_policy: PhasePolicy = PhasePolicy.RUNNING,
        custom_policy: PhasePolicy = PhasePolicy.NOT_PENDING,
    ):
        self.pod_collector = pod_collector
        self.prometheus = prometheus
        self.cpu_metric_name = cpu_metric_name
        self.cpu_resource = cpu_resource
        self.cpu_rate_window = cpu_rate_window
        self.cpu_policy = cpu_policy
        self.custom_policy = custom_policy

    async def get_cpu_utilization(self, namespace: str, selector: Selector) -> UtilizationResult:
        pods = await self.pod_collector.list_pods(namespace, selector)
        requests = aggregate_cpu_requests(
            pods, resource=self.cpu_resource, policy=self.cpu_policy, namespace=namespace
        )

        query = build_cpu_utilization_query(
            self.cpu_metric_name, namespace, requests.pod_names, window=self.cpu_rate_window
        )
        samples = await self.prometheus.query_vector(query)
        try:
            return calculate_utilization(samples, requests)
        except NoMatchingMetricSamples as e:
            e.query = query
            raise

    async def get_custom_metric(
        self, metric_name: str, namespace: str, selector: Selector
    ) -> Optional[CustomMetricResult]:
        pods = await self.pod_collector.list_pods(namespace, selector)
        if not pods:
            logger.debug("%s %s - no pods match selector; no %s signal", namespace, selector, metric_name)
            return None

        pod_names = eligible_pod_names(pods, self.custom_policy)
        if not pod_names:
            raise NoEligiblePods("no running pods", namespace=namespace, listed=len(pods))

        query = build_custom_metric_query(metric_name, namespace, pod_names)
        samples = await self.prometheus.query_vector(query)
        try:
            return average_custom_metric(samples, len(pod_names), metric_name)
        except NoMatchingMetricSamples as e:
            e.query = query
            raise

    async def close(self):
        await self.pod_collector.close()
        await self.prometheus.close()
