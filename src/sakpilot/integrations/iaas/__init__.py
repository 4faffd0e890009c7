"""IaaS integration - HTTP client and resource models."""

from sakpilot.integrations.iaas.client import (
    IAAS_RESOURCES,
    IaaSClient,
    IaaSResource,
    parse_resource_id,
)

__all__ = ["IAAS_RESOURCES", "IaaSClient", "IaaSResource", "parse_resource_id"]
