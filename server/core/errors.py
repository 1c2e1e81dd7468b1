# server/core/errors.py


class FeedError(Exception):
    """
    Base class for failures the caller can act on.
    Each subclass carries the HTTP status the API layer answers with.
    """
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(FeedError):
    status_code = 400


class AuthenticationError(FeedError):
    status_code = 401


class NotFoundError(FeedError):
    status_code = 404


class ConflictError(FeedError):
    status_code = 409
