# tests/core/test_calculator.py

from datetime import datetime, timezone

import pytest

from promhpa.core.calculator import aggregate_cpu_requests, average_custom_metric, calculate_utilization
from promhpa.core.exceptions import MissingResourceRequest, NoEligiblePods, NoMatchingMetricSamples
from promhpa.models.metrics import RequestAggregate
from promhpa.models.pods import ContainerInfo, PhasePolicy, PodInfo, PodPhase
from promhpa.models.prometheus import Sample

TS = datetime(2023, 3, 15, 13, 20, tzinfo=timezone.utc)


def pod(name, *cpu_requests, phase=PodPhase.RUNNING):
    containers = [
        ContainerInfo(name=f"c{i}", requests={} if cpu is None else {"cpu": cpu}) for i, cpu in enumerate(cpu_requests)
    ]
    return PodInfo(name=name, namespace="ns1", phase=phase, containers=containers)


def sample(value):
    return Sample(labels={}, value=value, timestamp=TS)


# --- aggregate_cpu_requests ---


def test_aggregate_sums_running_pods_only():
    pods = [
        pod("a", 100, 50),
        pod("b", 300),
        pod("pending", None, phase=PodPhase.PENDING),
        pod("done", None, phase=PodPhase.SUCCEEDED),
    ]

    aggregate = aggregate_cpu_requests(pods)

    assert aggregate.total_milli == 450
    assert aggregate.pod_names == ["a", "b"]
    assert aggregate.average_milli == 225


def test_aggregate_missing_request_fails_regardless_of_others():
    pods = [pod("a", 100), pod("b", 300, None)]

    with pytest.raises(MissingResourceRequest) as excinfo:
        aggregate_cpu_requests(pods)
    assert excinfo.value.resource == "cpu"


def test_aggregate_zero_sum_fails():
    with pytest.raises(MissingResourceRequest):
        aggregate_cpu_requests([pod("a", 0), pod("b", 0)])


def test_aggregate_average_truncated_to_zero_fails():
    with pytest.raises(MissingResourceRequest, match="rounds to zero"):
        aggregate_cpu_requests([pod("a", 1), pod("b", 0)])


def test_aggregate_no_running_pods():
    pods = [pod("a", 100, phase=PodPhase.PENDING), pod("b", 100, phase=PodPhase.FAILED)]

    with pytest.raises(NoEligiblePods, match="no running pods") as excinfo:
        aggregate_cpu_requests(pods, namespace="ns1")
    assert excinfo.value.listed == 2
    assert excinfo.value.namespace == "ns1"


def test_aggregate_empty_listing():
    with pytest.raises(NoEligiblePods, match="no pods match selector") as excinfo:
        aggregate_cpu_requests([])
    assert excinfo.value.listed == 0


def test_aggregate_other_resource_and_policy():
    pods = [
        PodInfo(
            name="a",
            namespace="ns1",
            phase=PodPhase.SUCCEEDED,
            containers=[ContainerInfo(name="c", requests={"nvidia.com/gpu": 1000})],
        )
    ]

    aggregate = aggregate_cpu_requests(pods, resource="nvidia.com/gpu", policy=PhasePolicy.NOT_PENDING)

    assert aggregate.total_milli == 1000


# --- calculate_utilization ---


def test_utilization_scenario():
    """Two pods requesting 100m and 300m, consuming 0.4 cores in total: 100%."""
    requests = aggregate_cpu_requests([pod("a", 100), pod("b", 300)])

    result = calculate_utilization([sample(0.4)], requests)

    assert result.percentage == 100
    assert result.timestamp == TS


@pytest.mark.parametrize(
    "consumed_cores,total_milli,pods,expected",
    [
        (0.1, 400, 2, 25),  # 50m of 200m
        (0.333, 1000, 1, 33),  # truncated, not rounded
        (1.5, 1000, 2, 150),  # above the request
        (0.0, 500, 1, 0),
    ],
)
def test_utilization_is_truncated_percentage(consumed_cores, total_milli, pods, expected):
    requests = RequestAggregate(total_milli=total_milli, pod_names=[f"p{i}" for i in range(pods)])

    result = calculate_utilization([sample(consumed_cores)], requests)

    assert result.percentage == expected


def test_utilization_reads_only_first_sample():
    requests = RequestAggregate(total_milli=1000, pod_names=["a"])

    result = calculate_utilization([sample(0.5), sample(9.0)], requests)

    assert result.percentage == 50


def test_utilization_without_samples():
    requests = RequestAggregate(total_milli=1000, pod_names=["a"])

    with pytest.raises(NoMatchingMetricSamples, match="CPU metrics missing"):
        calculate_utilization([], requests)


def test_utilization_nan_sample():
    requests = RequestAggregate(total_milli=1000, pod_names=["a"])

    with pytest.raises(NoMatchingMetricSamples, match="non-finite"):
        calculate_utilization([sample(float("nan"))], requests)


# --- average_custom_metric ---


def test_custom_metric_average():
    result = average_custom_metric([sample(30.0)], 3, "qps")

    assert result.value == 10.0
    assert result.metric_name == "qps"
    assert result.timestamp == TS


def test_custom_metric_float_division():
    assert average_custom_metric([sample(10.0)], 4, "qps").value == 2.5


def test_custom_metric_without_samples():
    with pytest.raises(NoMatchingMetricSamples, match="metric qps missing"):
        average_custom_metric([], 3, "qps")
