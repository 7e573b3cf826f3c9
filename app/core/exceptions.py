"""
Custom exceptions for the application
"""

class BaseAppException(Exception):
    """Base application exception"""
    def __init__(self, message: str, details: str = None):
        self.message = message
        self.details = details
        super().__init__(self.message)


class ValidationError(BaseAppException):
    """Raised when a submission fails validation.

    ``violations`` keeps every field-level problem in evaluation order; the
    first one is what gets shown to the visitor.
    """
    def __init__(self, violations: list, details: str = None):
        if not violations:
            raise ValueError("ValidationError requires at least one violation")
        self.violations = list(violations)
        super().__init__(self.violations[0].message, details)

    @property
    def field(self) -> str:
        return self.violations[0].field


class RateLimitExceeded(BaseAppException):
    """Raised when a client has used up its signup quota for the window"""
    def __init__(self, message: str, limit: int = None, window_seconds: int = None):
        super().__init__(message)
        self.limit = limit
        self.window_seconds = window_seconds


class DatabaseError(BaseAppException):
    """Raised when database operations fail"""
    pass
