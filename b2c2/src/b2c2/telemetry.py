"""
Prometheus metrics for outbound venue requests.

The transport updates these on every call; exposing them is left to the
embedding process (``prometheus_client.start_http_server`` or an existing
metrics endpoint).

* ``b2c2_http_requests_total{exchange,method,status}`` – completed
  requests by HTTP status, or ``error`` when no response was received.
* ``b2c2_http_request_seconds{exchange,method}`` – request latency.
"""

from prometheus_client import Counter, Histogram

http_requests_total = Counter(
    "b2c2_http_requests_total",
    "Outbound REST requests by HTTP status",
    labelnames=["exchange", "method", "status"],
)

http_request_seconds = Histogram(
    "b2c2_http_request_seconds",
    "Outbound REST request latency in seconds",
    labelnames=["exchange", "method"],
)


def observe_request(exchange: str, method: str, status: str, seconds: float) -> None:
    http_requests_total.labels(exchange=exchange, method=method, status=status).inc()
    http_request_seconds.labels(exchange=exchange, method=method).observe(seconds)
