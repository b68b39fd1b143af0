"""
Error taxonomy shared by services and routes.

Services raise these; the handlers registered in ``app.main`` turn them into
``{"error": "..."}`` payloads with the matching HTTP status.
"""


class AppError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(AppError):
    status_code = 401
    default_message = "Unauthorized"


class Forbidden(AppError):
    status_code = 403
    default_message = "Forbidden"


class InvalidArgument(AppError):
    status_code = 400
    default_message = "Invalid argument"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class ServerError(AppError):
    status_code = 500
    default_message = "Internal server error"
