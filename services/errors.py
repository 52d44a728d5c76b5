"""Error taxonomy shared by the services and the JSON error handlers."""


class ServiceError(Exception):
    status_code = 500
    public_message = "Sorry, there was an error processing your request. Please try again later."

    def __init__(self, message=None):
        super().__init__(message or self.public_message)
        self.message = message or self.public_message

    def to_response(self):
        return {"success": False, "message": self.response_message}

    @property
    def response_message(self):
        return self.message


class ValidationError(ServiceError):
    status_code = 400
    public_message = "Invalid request."


class AuthError(ServiceError):
    status_code = 401
    public_message = "Authentication required"


class NotFoundError(ServiceError):
    status_code = 404
    public_message = "Not found"


class DeliveryError(ServiceError):
    """Notification transport failed. Detail stays in the logs."""

    @property
    def response_message(self):
        return self.public_message


class StoreError(ServiceError):
    """Persistence layer failure. Detail stays in the logs."""

    @property
    def response_message(self):
        return self.public_message


class TooManyAttemptsError(ServiceError):
    status_code = 429
    public_message = "Too many login attempts. Please try again in 5 minutes."
