"""Prometheus query result models."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from sakpilot.core.models import ViewModel


class PrometheusLabel(ViewModel):
    """A metric name."""

    name: str


class MetricSeries(ViewModel):
    """One series of a range query: labels and [timestamp, value] pairs."""

    metric: dict[str, str] = Field(default_factory=dict)
    values: list[list[Any]] = Field(default_factory=list)


class QueryRangeData(ViewModel):
    result_type: str = ""
    result: list[MetricSeries] = Field(default_factory=list)


class QueryRangeResult(ViewModel):
    """Result envelope of a range query."""

    status: str = ""
    data: QueryRangeData = Field(default_factory=QueryRangeData)

    @classmethod
    def from_api(cls, body: dict[str, Any]) -> QueryRangeResult:
        payload = body.get("data") or {}
        return cls(
            status=body.get("status") or "",
            data=QueryRangeData(
                result_type=payload.get("resultType") or "",
                result=[
                    MetricSeries(metric=r.get("metric") or {}, values=r.get("values") or [])
                    for r in payload.get("result") or []
                ],
            ),
        )
