import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from opentelemetry.sdk.trace.export import SpanExporter
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from pharmacy.api.routes import medicines, metrics
from pharmacy.core.config import Settings, settings as default_settings
from pharmacy.core.errors import PharmacyError
from pharmacy.core.logging import client_ip_ctx, configure_logging, request_id_ctx
from pharmacy.core.metrics import (
    UNMATCHED_ENDPOINT,
    DatabaseEndpointMetrics,
    EndpointMetricsRecorder,
    PrometheusEndpointMetrics,
    RequestCounter,
)
from pharmacy.core.tracing import TRACER_NAME, configure_tracing
from pharmacy.db.session import create_db_engine, create_session_factory, init_db
from pharmacy.services.medicine_store import SEED_MEDICINES, MedicineStore


async def request_context(request: Request, call_next):
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id
    request_id_ctx.set(request_id)
    if request.client:
        client_ip_ctx.set(request.client.host)
    start = time.monotonic()
    response: Response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    duration_ms = int((time.monotonic() - start) * 1000)
    logging.getLogger("access").info(
        "request",
        extra={
            "event": {
                "method": request.method,
                "path": request.url.path,
                "endpoint": _route_template(request),
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            }
        },
    )
    return response


async def count_requests(request: Request, call_next):
    state = request.app.state
    state.request_counter.increment()
    try:
        return await call_next(request)
    finally:
        # The route is only known once the router has matched the request.
        await run_in_threadpool(
            state.endpoint_metrics.record, _route_template(request), request.method
        )


async def security_headers(request: Request, call_next):
    response: Response = await call_next(request)
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("X-Frame-Options", "DENY")
    response.headers.setdefault("Referrer-Policy", "no-referrer")
    return response


async def limit_body_size(request: Request, call_next):
    content_length = request.headers.get("content-length")
    limit = request.app.state.settings.max_body_bytes
    if content_length and content_length.isdigit() and int(content_length) > limit:
        return JSONResponse(status_code=413, content={"error": "Request body too large"})
    return await call_next(request)


# Outermost stage first.
REQUEST_PIPELINE = (request_context, count_requests, security_headers, limit_body_size)


def _route_template(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", None) or UNMATCHED_ENDPOINT


async def pharmacy_error_handler(request: Request, exc: PharmacyError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
        content={"error": str(exc.detail)},
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Validation error"
    if errors:
        location = ".".join(str(part) for part in errors[0].get("loc", ()))
        message = f"{location}: {errors[0].get('msg')}"
    return JSONResponse(status_code=400, content={"error": message})


async def generic_exception_handler(request: Request, exc: Exception):
    logging.getLogger("app").exception(
        "Unhandled exception",
        extra={
            "event": {
                "method": request.method,
                "path": request.url.path,
                "request_id": getattr(request.state, "request_id", None),
            }
        },
    )
    message = "Internal server error"
    if request.app.state.settings.env.lower() != "production":
        message = f"{exc.__class__.__name__}: {exc}"
    return JSONResponse(status_code=500, content={"error": message})


def build_endpoint_metrics(config: Settings) -> EndpointMetricsRecorder:
    if config.metrics_backend == "database":
        engine = create_db_engine(config.metrics_database_url)
        init_db(engine)
        return DatabaseEndpointMetrics(create_session_factory(engine))
    return PrometheusEndpointMetrics()


def create_app(
    config: Settings | None = None,
    *,
    store: MedicineStore | None = None,
    endpoint_metrics: EndpointMetricsRecorder | None = None,
    span_exporter: SpanExporter | None = None,
) -> FastAPI:
    """Assemble the service; any failure here aborts startup."""
    config = config or default_settings
    configure_logging(config.log_level, config.log_file)

    if store is None:
        store = MedicineStore(SEED_MEDICINES if config.seed_medicines else ())
    if endpoint_metrics is None:
        endpoint_metrics = build_endpoint_metrics(config)
    tracer_provider = configure_tracing(config, exporter=span_exporter)

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        yield
        tracer_provider.shutdown()

    app = FastAPI(
        title="Pharmacy API",
        version="1.0",
        description="This Server API is a simulator pharmacy.",
        terms_of_service="http://swagger.io/terms/",
        contact={
            "name": "API Support",
            "url": "http://www.swagger.io/support",
            "email": "support@swagger.io",
        },
        license_info={
            "name": "Apache 2.0",
            "url": "http://www.apache.org/licenses/LICENSE-2.0.html",
        },
        docs_url="/swagger",
        openapi_url="/swagger/openapi.json",
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.settings = config
    app.state.store = store
    app.state.request_counter = RequestCounter()
    app.state.endpoint_metrics = endpoint_metrics
    app.state.tracer_provider = tracer_provider
    app.state.tracer = tracer_provider.get_tracer(TRACER_NAME)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins,
        allow_methods=config.allowed_methods,
        allow_headers=config.allowed_headers,
        max_age=config.cors_max_age,
    )
    # add_middleware wraps, so the last stage added runs first.
    for stage in reversed(REQUEST_PIPELINE):
        app.add_middleware(BaseHTTPMiddleware, dispatch=stage)

    app.add_exception_handler(PharmacyError, pharmacy_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    @app.get("/health/live", include_in_schema=False)
    def live():
        return {"status": "ok"}

    @app.get("/health/ready", include_in_schema=False)
    def ready():
        return {"status": "ready"}

    @app.get("/swagger/index.html", include_in_schema=False)
    def swagger_index():
        return RedirectResponse(url="/swagger")

    app.include_router(medicines.router)
    app.include_router(metrics.router)
    return app

