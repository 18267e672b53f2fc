"""
Core Exceptions
================

Custom exceptions for the application following clean architecture principles.

These exceptions define domain-specific errors that can be caught and handled
appropriately at the application boundaries.
"""

from typing import Optional


class ApplicationException(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class DomainException(ApplicationException):
    """Base exception for domain logic violations."""


class RepositoryException(ApplicationException):
    """Base exception for repository/data access errors."""


class ValidationException(ApplicationException):
    """Exception for validation errors."""


class ResourceNotFoundException(ApplicationException):
    """Exception when a requested resource is not found."""

    def __init__(
        self,
        resource_type: str,
        resource_id: Optional[str] = None,
        details: Optional[dict] = None
    ):
        self.resource_type = resource_type
        self.resource_id = resource_id
        message = f"{resource_type}"
        if resource_id:
            message += f" with id '{resource_id}'"
        message += " not found"
        super().__init__(message, details)


class ConfigurationException(ApplicationException):
    """Exception for configuration errors."""


class InvalidCorpusException(DomainException):
    """Raised when the classifier is asked to train on unusable data."""

    def __init__(self, reason: str, corpus_size: int = 0):
        self.reason = reason
        self.corpus_size = corpus_size
        super().__init__(
            f"Invalid training corpus: {reason}",
            {"corpus_size": corpus_size}
        )
