# errors.py
"""Domain errors raised by the services and mapped to HTTP responses in main.py."""


class FinanceError(Exception):
    """Base class for errors that carry a client-facing detail message."""
    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFound(FinanceError):
    """The record does not exist or belongs to another user."""
    status_code = 404


class InvalidArgument(FinanceError):
    status_code = 400


class Conflict(FinanceError):
    """The operation would break referential integrity."""
    status_code = 409
