"""Monitoring Suite integration - HTTP client and display models."""

from sakpilot.integrations.monitoring.client import MonitoringClient, parse_storage_id

__all__ = ["MonitoringClient", "parse_storage_id"]
