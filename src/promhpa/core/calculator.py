# src/promhpa/core/calculator.py
"""
Turns pod resource requests and Prometheus samples into the scalar
signals consumed by the autoscaler.
"""

import logging
import math
from typing import List

from ..models.metrics import CustomMetricResult, RequestAggregate, UtilizationResult
from ..models.pods import PhasePolicy, PodInfo
from ..models.prometheus import Sample
from .exceptions import MissingResourceRequest, NoEligiblePods, NoMatchingMetricSamples

logger = logging.getLogger(__name__)

# Prometheus reports CPU in cores; Kubernetes requests are in millicores (1000m = 1 core).
MILLI_PER_UNIT = 1000


def aggregate_cpu_requests(
    pods: List[PodInfo],
    resource: str = "cpu",
    policy: PhasePolicy = PhasePolicy.RUNNING,
    namespace: str = "",
) -> RequestAggregate:
    """
    Sum the `resource` requests of every container of the pods admitted by `policy`.

    A container without a request does not stop the pass, but makes the
    aggregate unusable: utilization is only defined when every counted
    container has a request and the total is non-zero.
    """
    pod_names = {}
    request_sum = 0
    missing = False

    for pod in pods:
        if not policy.admits(pod.phase):
            continue

        pod_names[pod.name] = None
        for container in pod.containers:
            request = container.requests.get(resource)
            if request is None:
                missing = True
            else:
                request_sum += request

    if not pod_names:
        if pods:
            raise NoEligiblePods("no running pods", namespace=namespace, listed=len(pods))
        raise NoEligiblePods("no pods match selector", namespace=namespace, listed=0)
    if missing or request_sum == 0:
        raise MissingResourceRequest(f"some pods do not have request for {resource}", resource=resource)

    logger.debug("%s - sum of %s requested: %d", namespace, resource, request_sum)
    aggregate = RequestAggregate(total_milli=request_sum, pod_names=list(pod_names))
    # The average is an integer divisor; below 1m per pod it truncates to zero.
    if aggregate.average_milli == 0:
        raise MissingResourceRequest(
            f"average {resource} request of {aggregate.pod_count} pods rounds to zero", resource=resource
        )
    return aggregate


def _first_sample(samples: List[Sample], message: str) -> Sample:
    if not samples:
        raise NoMatchingMetricSamples(message)
    sample = samples[0]
    if not math.isfinite(sample.value):
        raise NoMatchingMetricSamples(f"{message}: got non-finite value {sample.value}")
    return sample


def calculate_utilization(samples: List[Sample], requests: RequestAggregate) -> UtilizationResult:
    """
    Average utilization as a percentage of the average request.

    The query already sums consumption over the pods, so the first sample is
    the group total in cores.
    """
    sample = _first_sample(samples, "CPU metrics missing for the matched pods")

    avg_consumption = int(sample.value * MILLI_PER_UNIT / requests.pod_count)
    avg_request = requests.average_milli
    utilization = (avg_consumption * 100) // avg_request

    logger.debug("avg-consumption: %d", avg_consumption)
    logger.debug("avg-request: %d", avg_request)
    logger.debug("utilization: %d", utilization)
    return UtilizationResult(percentage=utilization, timestamp=sample.timestamp)


def average_custom_metric(samples: List[Sample], pod_count: int, metric_name: str) -> CustomMetricResult:
    """Divide the summed metric by the number of counted pods."""
    sample = _first_sample(samples, f"metric {metric_name} missing for the matched pods")
    return CustomMetricResult(metric_name=metric_name, value=sample.value / pod_count, timestamp=sample.timestamp)
