# tests/conftest.py

from datetime import datetime, timezone

import pytest
from kubernetes_asyncio.client import models as k8s


@pytest.fixture(autouse=True)
def mock_settings_env_vars(monkeypatch):
    """
    Pytest fixture to isolate configuration from the real environment.

    Runs automatically for every test (`autouse=True`) so that properties
    resolved at access time do not pick up values from the developer's shell.
    """
    monkeypatch.delenv("PROMETHEUS_TIMEOUT", raising=False)
    monkeypatch.delenv("PROMETHEUS_BEARER_TOKEN", raising=False)


@pytest.fixture
def observed_at():
    """Timestamp used for every mocked Prometheus sample."""
    return datetime(2023, 3, 15, 13, 20, tzinfo=timezone.utc)


@pytest.fixture
def make_v1_pod():
    """
    Factory building a V1Pod with one container per entry of `cpu_requests`.
    A None entry yields a container without any CPU request.
    """

    def _make(name, phase="Running", cpu_requests=("100m",), namespace="ns1"):
        containers = []
        for i, cpu in enumerate(cpu_requests):
            requests = {"cpu": cpu, "memory": "64Mi"} if cpu is not None else {"memory": "64Mi"}
            containers.append(
                k8s.V1Container(name=f"{name}-c{i}", resources=k8s.V1ResourceRequirements(requests=requests))
            )
        return k8s.V1Pod(
            metadata=k8s.V1ObjectMeta(name=name, namespace=namespace),
            spec=k8s.V1PodSpec(containers=containers),
            status=k8s.V1PodStatus(phase=phase),
        )

    return _make
