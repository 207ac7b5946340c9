from pharmacy.models.endpoint_metric import EndpointMetric

__all__ = ["EndpointMetric"]
