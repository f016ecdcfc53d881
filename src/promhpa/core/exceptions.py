from typing import Optional


class PromHPAError(Exception):
    """Base exception for promhpa."""

    pass


class MetricsError(PromHPAError):
    """Base exception for failures while computing an autoscaling signal."""

    pass


class PodListError(MetricsError):
    """Raised when the pods of a namespace/selector cannot be listed."""

    pass


class NoEligiblePods(MetricsError):
    """Raised when no listed pod passes the phase filter of an operation."""

    def __init__(self, message: str, namespace: str = "", listed: int = 0):
        super().__init__(message)
        self.namespace = namespace
        self.listed = listed


class MissingResourceRequest(MetricsError):
    """Raised when a counted container has no request for a resource, or the requests sum to zero."""

    def __init__(self, message: str, resource: str = "cpu"):
        super().__init__(message)
        self.resource = resource


class QueryError(MetricsError):
    """Raised when a Prometheus query fails at the transport or server level."""

    def __init__(self, message: str, query: str = "", error_type: Optional[str] = None):
        super().__init__(message)
        self.query = query
        self.error_type = error_type


class UnexpectedResultShape(MetricsError):
    """Raised when Prometheus returns a result type other than the one required."""

    def __init__(self, expected: str, actual: str):
        super().__init__(f"expected a '{expected}' query result, got '{actual}'")
        self.expected = expected
        self.actual = actual


class NoMatchingMetricSamples(MetricsError):
    """Raised when a query returns no samples for the matched pods."""

    def __init__(self, message: str, query: str = ""):
        super().__init__(message)
        self.query = query
