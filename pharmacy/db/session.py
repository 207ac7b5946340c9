from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def create_db_engine(db_url: str) -> Engine:
    connect_args = {}
    options = {}
    if db_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}
        if ":memory:" in db_url or db_url.rstrip("/").endswith("sqlite:"):
            # A single shared connection keeps the in-memory database alive.
            options["poolclass"] = StaticPool
    return create_engine(
        db_url, pool_pre_ping=True, future=True, connect_args=connect_args, **options
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)


def init_db(engine: Engine) -> None:
    from pharmacy import models  # noqa: F401  registers tables on Base

    Base.metadata.create_all(engine)
