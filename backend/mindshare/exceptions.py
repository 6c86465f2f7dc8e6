"""Request-level exceptions for the rank checker."""


class MindshareError(Exception):
    """Base exception for rank check failures."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


class ValidationError(MindshareError):
    """The request is unusable as given (e.g. a blank username)."""

    def __init__(self, message: str):
        super().__init__(message, status_code=400)
