# tests/core/test_queries.py

import pytest

from promhpa.core.queries import build_cpu_utilization_query, build_custom_metric_query, build_pod_name_pattern


def test_pod_name_pattern():
    assert build_pod_name_pattern(["a", "b", "c"]) == "(a|b|c).*"


def test_single_pod_pattern_has_no_trailing_separator():
    assert build_pod_name_pattern(["web-7d9f8-x2x"]) == "(web-7d9f8-x2x).*"


def test_pod_name_pattern_accepts_any_iterable():
    assert build_pod_name_pattern(name for name in ("a", "b")) == "(a|b).*"


def test_empty_pod_name_pattern_is_rejected():
    with pytest.raises(ValueError):
        build_pod_name_pattern([])


def test_cpu_utilization_query():
    query = build_cpu_utilization_query("container_cpu_usage_seconds_total", "ns1", ["a", "b"])
    assert query == (
        "sum(rate({__name__='container_cpu_usage_seconds_total',namespace='ns1',pod_name=~'(a|b).*'}[30m]))"
    )


def test_cpu_utilization_query_custom_window():
    query = build_cpu_utilization_query("cpu_total", "prod", ["a"], window="5m")
    assert query == "sum(rate({__name__='cpu_total',namespace='prod',pod_name=~'(a).*'}[5m]))"


def test_custom_metric_query():
    query = build_custom_metric_query("http_requests", "ns1", ["a", "b"])
    assert query == "sum({__name__='http_requests',kubernetes_namespace='ns1',kubernetes_pod_name=~'(a|b).*'})"
