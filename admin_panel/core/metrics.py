"""
Per-app Prometheus metrics.

Each app instance owns its registry so test apps do not collide on metric
names. In multi-process deployments, prefer the Prometheus client
multiprocess mode.
"""

from __future__ import annotations

from dataclasses import dataclass

from prometheus_client import CollectorRegistry, Counter, Gauge


@dataclass(frozen=True)
class AppMetrics:
    registry: CollectorRegistry
    readiness: Gauge
    liveness: Gauge
    errors: Counter
    forbidden: Counter


def create_metrics() -> AppMetrics:
    registry = CollectorRegistry()
    metrics = AppMetrics(
        registry=registry,
        readiness=Gauge("admin_panel_readiness", "Readiness state", registry=registry),
        liveness=Gauge("admin_panel_liveness", "Liveness state", registry=registry),
        errors=Counter(
            "admin_panel_errors",
            "Domain errors returned to clients, by kind",
            ["kind"],
            registry=registry,
        ),
        forbidden=Counter(
            "admin_panel_forbidden",
            "Actions denied by the permission gates, by action",
            ["action"],
            registry=registry,
        ),
    )
    # Initialize gauges to healthy. Handlers update if checks fail.
    metrics.readiness.set(1)
    metrics.liveness.set(1)
    return metrics
