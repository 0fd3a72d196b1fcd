class AppError(Exception):
    """Base app exception. ``message`` is safe to show to API callers."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(AppError):
    pass


class ValidationError(AppError):
    pass


class AuthenticationError(AppError):
    pass
