from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String

from pharmacy.db.session import Base


class EndpointMetric(Base):
    __tablename__ = "endpoint_metrics"

    id = Column(Integer, primary_key=True, autoincrement=True)
    endpoint = Column(String(255), nullable=False, index=True)
    method = Column(String(16), nullable=False)
    timestamp = Column(
        DateTime, default=lambda: datetime.now(timezone.utc), nullable=False
    )
    count = Column(Integer, default=1, nullable=False)
