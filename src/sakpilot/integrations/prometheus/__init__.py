"""Prometheus Query API integration for metrics storages."""

from sakpilot.integrations.prometheus.client import PrometheusClient, normalize_endpoint

__all__ = ["PrometheusClient", "normalize_endpoint"]
