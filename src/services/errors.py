# fil: src/services/errors.py
"""
Errors raised by the services. The API turns them into
{"ok": false, "error": ...} with the matching status code.
"""


class ServiceError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequest(ServiceError):
    status_code = 400


class NotFound(ServiceError):
    status_code = 404


class Conflict(ServiceError):
    status_code = 409
