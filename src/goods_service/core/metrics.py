"""Prometheus counters for cache efficiency and goods activity.

Counters are grouped in a Metrics object bound to one CollectorRegistry.
The application builds it once at startup and hands it to the cache and the
services; tests build their own against a private registry.
"""

from functools import lru_cache

from prometheus_client import REGISTRY, CollectorRegistry, Counter


class Metrics:
    """Process-wide metric handles."""

    def __init__(self, registry: CollectorRegistry | None = None):
        registry = registry if registry is not None else CollectorRegistry()
        self.registry = registry
        self.cache_hits = Counter(
            "cache_hits_total",
            "Total number of cache hits",
            ["entity"],
            registry=registry,
        )
        self.cache_misses = Counter(
            "cache_misses_total",
            "Total number of cache misses",
            ["entity"],
            registry=registry,
        )
        self.goods_reads = Counter(
            "goods_reads_total",
            "Total point reads of goods",
            registry=registry,
        )
        self.reprioritizations = Counter(
            "goods_reprioritizations_total",
            "Total goods reprioritizations applied",
            registry=registry,
        )


@lru_cache
def get_metrics() -> Metrics:
    """Metrics registered on the default registry exposed at /metrics."""
    return Metrics(REGISTRY)
