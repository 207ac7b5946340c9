from pharmacy.schemas.common import ErrorResponse

INVALID_ID = {400: {"model": ErrorResponse, "description": "Unavailable ID"}}
BAD_REQUEST = {400: {"model": ErrorResponse, "description": "Invalid ID or payload"}}
NOT_FOUND = {404: {"model": ErrorResponse, "description": "Medicine is not exist"}}
