from fastapi import APIRouter, Depends

from pharmacy.api import deps
from pharmacy.core.metrics import EndpointMetricsRecorder, RequestCounter
from pharmacy.schemas.metrics import RequestCountOut

router = APIRouter(prefix="/metrics", tags=["metrics"])


@router.get(
    "",
    summary="Endpoint metrics",
    description="Per-endpoint request counts, as Prometheus text or stored samples",
)
def endpoint_metrics(
    recorder: EndpointMetricsRecorder = Depends(deps.get_endpoint_metrics),
):
    return recorder.render()


@router.get("/requests", response_model=RequestCountOut, summary="Total requests")
def request_count(counter: RequestCounter = Depends(deps.get_request_counter)):
    return RequestCountOut(total_requests=counter.value)
