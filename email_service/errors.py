from typing import Optional


class EmailServiceError(Exception):
    """Base class for failures scoped to a single request."""

    code = "EMAIL_SERVICE_ERROR"
    status_code = 500

    def __init__(self, message: str, order_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.order_id = order_id


class MalformedRequest(EmailServiceError):
    code = "MALFORMED_REQUEST"
    status_code = 400


class RenderingFailure(EmailServiceError):
    code = "RENDERING_FAILURE"
    status_code = 500


class DeliveryFailure(EmailServiceError):
    code = "DELIVERY_FAILURE"
    status_code = 502
