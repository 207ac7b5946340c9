from fastapi import Request
from opentelemetry.trace import Tracer

from pharmacy.core.metrics import EndpointMetricsRecorder, RequestCounter
from pharmacy.services.medicine_store import MedicineStore


def get_store(request: Request) -> MedicineStore:
    return request.app.state.store


def get_tracer(request: Request) -> Tracer:
    return request.app.state.tracer


def get_request_counter(request: Request) -> RequestCounter:
    return request.app.state.request_counter


def get_endpoint_metrics(request: Request) -> EndpointMetricsRecorder:
    return request.app.state.endpoint_metrics
