"""
promhpa: Prometheus-backed CPU utilization and custom metric signals
for the Kubernetes Horizontal Pod Autoscaler.
"""

__version__ = "0.1.0"
