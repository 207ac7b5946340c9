import logging
from threading import Lock
from typing import Protocol

from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Counter, generate_latest
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from starlette.responses import Response

from pharmacy.models import EndpointMetric
from pharmacy.schemas.metrics import EndpointMetricOut

logger = logging.getLogger("metrics")

UNMATCHED_ENDPOINT = "unmatched"


class RequestCounter:
    """Process-wide count of handled requests, whatever their route or status."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._total = 0

    def increment(self) -> int:
        with self._lock:
            self._total += 1
            return self._total

    @property
    def value(self) -> int:
        with self._lock:
            return self._total


class EndpointMetricsRecorder(Protocol):
    def record(self, endpoint: str, method: str) -> None: ...

    def render(self) -> Response: ...


class PrometheusEndpointMetrics:
    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry or CollectorRegistry()
        self._requests = Counter(
            "pharmacy_endpoint_requests_total",
            "Requests handled per route template and method",
            ["endpoint", "method"],
            registry=self.registry,
        )

    def record(self, endpoint: str, method: str) -> None:
        self._requests.labels(endpoint=endpoint, method=method).inc()

    def value(self, endpoint: str, method: str) -> float:
        sample = self.registry.get_sample_value(
            "pharmacy_endpoint_requests_total",
            {"endpoint": endpoint, "method": method},
        )
        return sample or 0.0

    def render(self) -> Response:
        return Response(generate_latest(self.registry), media_type=CONTENT_TYPE_LATEST)


class DatabaseEndpointMetrics:
    """Appends one row per request to ``endpoint_metrics``.

    A failed write is logged and swallowed; the request it describes has
    already been answered.
    """

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory
        self._lock = Lock()

    def record(self, endpoint: str, method: str) -> None:
        with self._lock:
            db = self._session_factory()
            try:
                db.add(EndpointMetric(endpoint=endpoint, method=method, count=1))
                db.commit()
            except SQLAlchemyError:
                db.rollback()
                logger.exception(
                    "metric_write_failed",
                    extra={"event": {"endpoint": endpoint, "method": method}},
                )
            finally:
                db.close()

    def samples(self) -> list[EndpointMetricOut]:
        with self._lock:
            db = self._session_factory()
            try:
                rows = db.scalars(
                    select(EndpointMetric).order_by(EndpointMetric.id)
                ).all()
                return [EndpointMetricOut.model_validate(row) for row in rows]
            finally:
                db.close()

    def render(self) -> Response:
        return JSONResponse(
            content=[sample.model_dump(mode="json") for sample in self.samples()]
        )
