from fastapi import APIRouter, Depends, Request, Response, status
from opentelemetry.trace import Tracer

from pharmacy.api import deps
from pharmacy.api.responses import BAD_REQUEST, INVALID_ID, NOT_FOUND
from pharmacy.core.tracing import operation_span
from pharmacy.schemas.medicine import Medicine, MedicineIn
from pharmacy.services.medicine_store import MedicineStore, parse_medicine_id

router = APIRouter(prefix="/medicines", tags=["medicines"])

# Bodies are parsed inside the handler so malformed payloads are seen by the
# span and answered with 400; the schema is still published for the docs.
MEDICINE_BODY = {
    "requestBody": {
        "required": True,
        "content": {"application/json": {"schema": MedicineIn.model_json_schema()}},
    }
}


@router.get(
    "",
    response_model=list[Medicine],
    summary="Get Medicine",
    description="Get All Medicine's Data",
    operation_id="get-medicines",
)
def list_medicines(
    request: Request,
    store: MedicineStore = Depends(deps.get_store),
    tracer: Tracer = Depends(deps.get_tracer),
):
    with operation_span(tracer, "get-medicines", request.headers) as span:
        medicines = store.list_all()
        span.set_attribute("medicine.count", len(medicines))
        return medicines


@router.get(
    "/{id}",
    response_model=Medicine,
    summary="Get Medicine By ID",
    description="Get Medicine Data By ID",
    operation_id="get-medicine-by-id",
    responses={**INVALID_ID, **NOT_FOUND},
)
def get_medicine(
    id: str,
    request: Request,
    store: MedicineStore = Depends(deps.get_store),
    tracer: Tracer = Depends(deps.get_tracer),
):
    with operation_span(tracer, "get-by-id", request.headers) as span:
        medicine = store.get(id)
        span.set_attribute("medicine.id", medicine.id)
        return medicine


@router.post(
    "",
    response_model=Medicine,
    status_code=status.HTTP_201_CREATED,
    summary="Create New Medicine",
    description="Create New Medicine Data",
    operation_id="create-medicine",
    responses=BAD_REQUEST,
    openapi_extra=MEDICINE_BODY,
)
async def create_medicine(
    request: Request,
    store: MedicineStore = Depends(deps.get_store),
    tracer: Tracer = Depends(deps.get_tracer),
):
    body = await request.body()
    with operation_span(tracer, "create-medicine", request.headers) as span:
        medicine = store.create(body)
        span.set_attribute("medicine.id", medicine.id)
        return medicine


@router.put(
    "/{id}",
    response_model=Medicine,
    summary="Update Medicine",
    description="Update Medicine By ID",
    operation_id="update-medicine",
    responses={**BAD_REQUEST, **NOT_FOUND},
    openapi_extra=MEDICINE_BODY,
)
async def update_medicine(
    id: str,
    request: Request,
    store: MedicineStore = Depends(deps.get_store),
    tracer: Tracer = Depends(deps.get_tracer),
):
    body = await request.body()
    with operation_span(tracer, "update-medicine", request.headers) as span:
        medicine = store.update(id, body)
        span.set_attribute("medicine.id", medicine.id)
        return medicine


@router.delete(
    "/{id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete Medicine",
    description="Delete Medicine By ID",
    operation_id="delete-medicine",
    responses={**INVALID_ID, **NOT_FOUND},
)
def delete_medicine(
    id: str,
    request: Request,
    store: MedicineStore = Depends(deps.get_store),
    tracer: Tracer = Depends(deps.get_tracer),
):
    with operation_span(tracer, "delete-medicine", request.headers) as span:
        medicine_id = parse_medicine_id(id)
        store.delete(medicine_id)
        span.set_attribute("medicine.id", medicine_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
