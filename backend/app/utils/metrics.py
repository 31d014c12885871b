"""Prometheus metrics for generation, rate limiting and geocoding."""

from prometheus_client import Counter, Histogram

# Generation metrics
generation_latency_ms = Histogram(
    "generation_latency_ms",
    "Generation backend latency in milliseconds",
    ["kind", "outcome"],
    buckets=[250, 500, 1000, 2000, 4000, 8000, 16000, 32000],
)

generations_total = Counter(
    "generations_total",
    "Total generation backend calls",
    ["kind", "outcome"],
)

# Rate limiting
rate_limit_rejections_total = Counter(
    "rate_limit_rejections_total",
    "Total requests rejected by the rate limiter",
    ["bucket"],
)

# Geocoding
geocode_lookups_total = Counter(
    "geocode_lookups_total",
    "Total geocoding provider lookups",
    ["provider", "outcome"],
)

geocode_cache_hits_total = Counter(
    "geocode_cache_hits_total",
    "Total geocoding cache hits",
)


class PrometheusMetrics:
    """Prometheus-based metrics implementation."""

    def record_generation(self, kind: str, outcome: str, latency_ms: float) -> None:
        """Record one generation call."""
        generations_total.labels(kind=kind, outcome=outcome).inc()
        generation_latency_ms.labels(kind=kind, outcome=outcome).observe(latency_ms)

    def inc_rate_limited(self, bucket: str) -> None:
        """Increment rejected request counter."""
        rate_limit_rejections_total.labels(bucket=bucket).inc()

    def inc_geocode_lookup(self, provider: str, outcome: str) -> None:
        """Increment provider lookup counter."""
        geocode_lookups_total.labels(provider=provider, outcome=outcome).inc()

    def inc_geocode_cache_hit(self) -> None:
        """Increment geocoding cache hit counter."""
        geocode_cache_hits_total.inc()


metrics = PrometheusMetrics()
