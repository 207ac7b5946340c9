import json
import logging

import pytest
from opentelemetry.sdk.trace import TracerProvider
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from pharmacy.core.config import Settings
from pharmacy.core.logging import JsonFormatter, request_id_ctx
from pharmacy.main import create_app


def _read_lines(path: str) -> list[dict]:
    with open(path, encoding="utf-8") as handle:
        return [json.loads(line) for line in handle if line.strip()]


def test_access_and_mutation_logs_written_to_file(client, settings):
    client.post("/medicines", json={"name": "Logged"})
    client.get("/medicines/abc")

    lines = _read_lines(settings.log_file)
    access = [line for line in lines if line["logger"] == "access"]
    assert [line["event"]["status_code"] for line in access] == [201, 400]
    assert access[0]["event"]["endpoint"] == "/medicines"
    assert access[1]["event"]["endpoint"] == "/medicines/{id}"
    assert all(line["request_id"] for line in access)

    created = [line for line in lines if line["message"] == "medicine_created"]
    assert created[0]["event"] == {"medicine_id": 4}
    assert created[0]["trace_id"]


def test_json_formatter_includes_context_and_trace():
    record = logging.LogRecord("audit", logging.INFO, __file__, 1, "hello", None, None)
    record.event = {"k": "v"}
    token = request_id_ctx.set("req-1")
    tracer = TracerProvider().get_tracer("test")
    try:
        with tracer.start_as_current_span("span"):
            payload = json.loads(JsonFormatter().format(record))
    finally:
        request_id_ctx.reset(token)
    assert payload["message"] == "hello"
    assert payload["level"] == "INFO"
    assert payload["request_id"] == "req-1"
    assert payload["event"] == {"k": "v"}
    assert len(payload["trace_id"]) == 32
    assert len(payload["span_id"]) == 16


def test_unwritable_log_file_aborts_startup(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")
    with pytest.raises(OSError):
        create_app(Settings(env="test", log_file=str(blocker / "pharmacy.log")))


def test_unopenable_metrics_database_aborts_startup(tmp_path):
    url = f"sqlite+pysqlite:///{tmp_path / 'missing' / 'metrics.db'}"
    with pytest.raises(SQLAlchemyError):
        create_app(
            Settings(
                env="test", log_file=None, metrics_backend="database", metrics_database_url=url
            )
        )


def test_unknown_backends_rejected():
    with pytest.raises(ValidationError):
        Settings(metrics_backend="statsd")
    with pytest.raises(ValidationError):
        Settings(trace_exporter="zipkin")


def test_blank_log_file_disables_file_logging():
    assert Settings(log_file="  ").log_file is None
