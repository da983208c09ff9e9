"""Custom exceptions for the pipeline CRM application."""


class PipelineCRMException(Exception):
    """Base exception for the pipeline CRM application."""

    pass


class ValidationError(PipelineCRMException):
    """Raised when validation fails."""

    pass


class NotFoundError(PipelineCRMException):
    """Raised when a resource is not found or not owned by the caller."""

    pass


class ConflictError(PipelineCRMException):
    """Raised when a write collides with existing data (e.g. duplicate email)."""

    pass


class DatabaseError(PipelineCRMException):
    """Raised when a database operation fails."""

    pass


class StorageError(PipelineCRMException):
    """Raised when the object store fails."""

    pass


class ConfigurationError(PipelineCRMException):
    """Raised when configuration is invalid."""

    pass


class AuthenticationError(PipelineCRMException):
    """Raised when authentication fails."""

    pass


class AuthorizationError(PipelineCRMException):
    """Raised when an authenticated identity lacks privileges."""

    pass
