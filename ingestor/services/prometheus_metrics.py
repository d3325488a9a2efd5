"""
Prometheus metrics for the ingestion service.

Usage:
    from ingestor.services.prometheus_metrics import metrics

    metrics.payloads_total.labels(outcome="stored").inc()
"""

import logging
import threading
from typing import Optional

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

logger = logging.getLogger(__name__)

_metrics_instance: Optional['IngestMetrics'] = None
_metrics_lock = threading.Lock()


class IngestMetrics:
    """
    Process-wide collectors.
    Collectors register with the default registry, so only one instance may exist.
    """

    def __init__(self):
        # =====================================================================
        # HTTP REQUEST METRICS
        # =====================================================================

        self.http_requests_total = Counter(
            'ingestor_http_requests_total',
            'Total HTTP requests',
            ['method', 'endpoint', 'status_code']
        )

        self.http_request_duration = Histogram(
            'ingestor_http_request_duration_seconds',
            'HTTP request duration',
            ['method', 'endpoint'],
            buckets=(0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)
        )

        # =====================================================================
        # INGESTION METRICS
        # =====================================================================

        self.payloads_total = Counter(
            'ingestor_payloads_total',
            'Payloads handled by /process',
            ['outcome']  # stored / invalid / storage_error
        )

        logger.debug("Prometheus collectors registered")

    def track_payload(self, outcome: str):
        try:
            self.payloads_total.labels(outcome=outcome).inc()
        except Exception as e:
            logger.warning(f"Failed to record payload metric: {e}")

    @staticmethod
    def render() -> bytes:
        return generate_latest()

    content_type = CONTENT_TYPE_LATEST


def get_metrics() -> IngestMetrics:
    """Get or create the singleton metrics instance (thread-safe)."""
    global _metrics_instance

    if _metrics_instance is None:
        with _metrics_lock:
            if _metrics_instance is None:
                _metrics_instance = IngestMetrics()

    return _metrics_instance


metrics = get_metrics()
