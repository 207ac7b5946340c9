from fastapi import status


class PharmacyError(Exception):
    """Base class for errors raised by handlers and translated to JSON bodies."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidArgument(PharmacyError):
    """Unparseable identifier or malformed request payload."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(PharmacyError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str, medicine_id: int | None = None) -> None:
        super().__init__(message)
        self.medicine_id = medicine_id
