from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "pharmacy-api"
    env: str = "development"

    log_level: str = "INFO"
    log_file: str | None = "logs/pharmacy.log"

    metrics_backend: Literal["prometheus", "database"] = "prometheus"
    metrics_database_url: str = "sqlite+pysqlite:///./metrics.db"

    trace_exporter: Literal["console", "none"] = "none"

    seed_medicines: bool = True
    max_body_bytes: int = 1_000_000

    cors_origins: str = "http://localhost:3000"
    cors_allow_methods: str = "GET,POST,PUT,DELETE,OPTIONS"
    cors_allow_headers: str = "Content-Type,traceparent,tracestate"
    cors_max_age: int = 600

    model_config = SettingsConfigDict(env_file=".env", env_prefix="", extra="ignore")

    @field_validator("log_file")
    @classmethod
    def blank_log_file_disables(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value

    @property
    def allowed_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def allowed_methods(self) -> list[str]:
        return [
            m.strip().upper() for m in self.cors_allow_methods.split(",") if m.strip()
        ]

    @property
    def allowed_headers(self) -> list[str]:
        return [h.strip() for h in self.cors_allow_headers.split(",") if h.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
