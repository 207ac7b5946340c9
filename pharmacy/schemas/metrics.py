from datetime import datetime

from pydantic import BaseModel, ConfigDict


class EndpointMetricOut(BaseModel):
    id: int
    endpoint: str
    method: str
    timestamp: datetime
    count: int

    model_config = ConfigDict(from_attributes=True)


class RequestCountOut(BaseModel):
    total_requests: int
