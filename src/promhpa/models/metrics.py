# src/promhpa/models/metrics.py
"""
Pydantic models for the signals handed to the autoscaling control loop
and the intermediate request aggregate they are computed from.
"""

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field


class RequestAggregate(BaseModel):
    """Summed resource requests of the eligible pods."""

    total_milli: int = Field(..., description="Sum of the requests of every counted container, in milli-units.")
    pod_names: List[str] = Field(..., description="Names of the pods counted, in listing order.")

    @property
    def pod_count(self) -> int:
        return len(self.pod_names)

    @property
    def average_milli(self) -> int:
        return self.total_milli // self.pod_count


class UtilizationResult(BaseModel):
    """
    Average CPU utilization of a pod group as a percentage of its requested CPU
    (e.g. 70 means the average pod uses 70% of its request).
    """

    percentage: int
    timestamp: datetime = Field(..., description="Time of the underlying observation.")


class CustomMetricResult(BaseModel):
    """Average value of a custom metric across a pod group."""

    metric_name: str
    value: float
    timestamp: datetime = Field(..., description="Time of the underlying observation.")
