# src/promhpa/models/pods.py
"""
Pydantic models for the pods listed from the Kubernetes API, and the
phase policies that decide which of them count toward a signal.
"""

from enum import Enum
from typing import Dict, List

from pydantic import BaseModel, Field


class PodPhase(str, Enum):
    """Lifecycle phase of a pod as reported in its status."""

    PENDING = "Pending"
    RUNNING = "Running"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, value) -> "PodPhase":
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


class PhasePolicy(str, Enum):
    """
    Named pod phase filters.

    RUNNING admits only running pods and is used for CPU utilization.
    NOT_PENDING admits every pod that has left the Pending phase and is
    used for custom metrics.
    """

    RUNNING = "running"
    NOT_PENDING = "not-pending"

    def admits(self, phase: PodPhase) -> bool:
        if self is PhasePolicy.RUNNING:
            return phase == PodPhase.RUNNING
        return phase != PodPhase.PENDING


class ContainerInfo(BaseModel):
    """
    Resource requests of a single container, in milli-units.
    A resource without a request is absent from `requests`.
    """

    name: str
    requests: Dict[str, int] = Field(default_factory=dict, description="Requested quantities in milli-units.")


class PodInfo(BaseModel):
    """A pod matched by a label selector."""

    name: str = Field(..., description="The name of the Kubernetes pod.")
    namespace: str = Field(..., description="The namespace the pod belongs to.")
    phase: PodPhase = PodPhase.UNKNOWN
    containers: List[ContainerInfo] = Field(default_factory=list)


def eligible_pod_names(pods: List[PodInfo], policy: PhasePolicy) -> List[str]:
    """Return the names of the pods admitted by `policy`, in listing order and without duplicates."""
    names = {}
    for pod in pods:
        if policy.admits(pod.phase):
            names[pod.name] = None
    return list(names)
