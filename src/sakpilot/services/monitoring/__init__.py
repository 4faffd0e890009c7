"""Monitoring Suite service layer - storages and time-series queries."""

from sakpilot.services.monitoring.metrics_query import MetricsQueryContext, MetricsQueryPipeline
from sakpilot.services.monitoring.storage_manager import MonitoringManager

__all__ = ["MetricsQueryContext", "MetricsQueryPipeline", "MonitoringManager"]
