"""Structured service failures carried up to the HTTP error handlers."""


class ApiError(Exception):
    """An error with an HTTP status and a client-facing message.

    is_operational separates expected failures (bad input, missing records)
    from programming errors wrapped on their way out.
    """

    def __init__(self, status_code: int, message: str, is_operational: bool = True) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.is_operational = is_operational


class ShipmentNotFound(ApiError):
    def __init__(self, message: str = "Shipment not found") -> None:
        super().__init__(404, message)


class DuplicateShipment(ApiError):
    def __init__(self, field: str = "shipmentId") -> None:
        super().__init__(400, f"{field} must be unique")
