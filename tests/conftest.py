import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

os.environ.setdefault("ENV", "test")
os.environ.setdefault("LOG_FILE", "")
os.environ.setdefault("METRICS_BACKEND", "prometheus")
os.environ.setdefault("TRACE_EXPORTER", "none")

from pharmacy.core.config import Settings
from pharmacy.main import create_app


@pytest.fixture
def settings(tmp_path):
    return Settings(env="test", log_file=str(tmp_path / "logs" / "pharmacy.log"))


@pytest.fixture
def span_exporter():
    return InMemorySpanExporter()


@pytest.fixture
def app(settings, span_exporter):
    return create_app(settings, span_exporter=span_exporter)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def database_settings(tmp_path):
    return Settings(
        env="test",
        log_file=None,
        metrics_backend="database",
        metrics_database_url="sqlite+pysqlite:///:memory:",
    )
