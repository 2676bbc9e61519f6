"""Custom exception hierarchy."""

class AppError(Exception):
    """Base exception for application errors."""
    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.original_error = original_error


class DatabaseError(AppError):
    """Raised when a database operation fails."""
    pass


class ConfigurationError(AppError):
    """Raised when configuration is invalid or missing."""
    pass


class PipelineError(AppError):
    """Base exception for pipeline errors."""
    pass


class RelationshipDetectionError(PipelineError):
    """Relationship detection run could not complete."""
    pass


class RelationshipPersistenceError(DatabaseError):
    """Previously detected edges could not be cleared before a rewrite."""
    pass


class OrganizationNotFoundError(AppError):
    """Raised when an organization is missing or soft-deleted."""
    pass
