import logging

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

logger = logging.getLogger(__name__)


class Metrics:
    def __init__(self, enabled: bool = False, service_name: str = "api") -> None:
        self._configure(enabled, service_name)

    def _configure(self, enabled: bool, service_name: str = "api") -> None:
        self.enabled = enabled
        self.service_name = service_name
        self.registry = CollectorRegistry(auto_describe=True)
        if not enabled:
            self.http_requests = None
            self.http_5xx = None
            self.http_latency = None
            self.pricing_calculations = None
            return

        self.http_requests = Counter(
            "http_requests_total",
            "HTTP requests by method, route template and status class.",
            ["service", "method", "route", "status_class"],
            registry=self.registry,
        )
        self.http_5xx = Counter(
            "http_5xx_total",
            "HTTP responses with status >= 500.",
            ["service", "method", "route"],
            registry=self.registry,
        )
        self.http_latency = Histogram(
            "http_request_latency_seconds",
            "HTTP request latency in seconds.",
            ["service", "method", "route", "status_class"],
            buckets=(0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10),
            registry=self.registry,
        )
        self.pricing_calculations = Counter(
            "pricing_calculations_total",
            "Pricing engine invocations by operation and outcome.",
            ["operation", "outcome"],
            registry=self.registry,
        )

    @staticmethod
    def _status_class(status_code: int) -> str:
        return f"{status_code // 100}xx" if status_code else "unknown"

    def record_http_request(self, method: str, route: str, status_code: int) -> None:
        if not self.enabled or self.http_requests is None:
            return
        self.http_requests.labels(
            service=self.service_name,
            method=method,
            route=route,
            status_class=self._status_class(status_code),
        ).inc()

    def record_http_5xx(self, method: str, route: str) -> None:
        if not self.enabled or self.http_5xx is None:
            return
        self.http_5xx.labels(service=self.service_name, method=method, route=route).inc()

    def record_http_latency(self, method: str, route: str, status_code: int, duration_seconds: float) -> None:
        if not self.enabled or self.http_latency is None:
            return
        duration_seconds = max(0.0, float(duration_seconds))
        self.http_latency.labels(
            service=self.service_name,
            method=method,
            route=route,
            status_class=self._status_class(status_code),
        ).observe(duration_seconds)

    def record_pricing_calculation(self, operation: str, outcome: str) -> None:
        if not self.enabled or self.pricing_calculations is None:
            return
        self.pricing_calculations.labels(operation=operation, outcome=outcome or "unknown").inc()

    def render(self) -> tuple[bytes, str]:
        if not self.enabled:
            return b"metrics_disabled 1\n", "text/plain; version=0.0.4"
        try:
            return generate_latest(self.registry), CONTENT_TYPE_LATEST
        except Exception:  # noqa: BLE001
            logger.exception("metrics_render_failed")
            return b"metrics_render_failed 1\n", "text/plain; version=0.0.4"


metrics = Metrics(enabled=False)


def configure_metrics(enabled: bool, service_name: str = "api") -> Metrics:
    metrics._configure(enabled, service_name)
    return metrics
