"""
Custom exceptions for the Contacts Dashboard.

This module defines application-specific exceptions that provide
clear error messages and context for different types of failures.
"""

from typing import Optional, Any


class ContactsDashboardError(Exception):
    """Base exception for all Contacts Dashboard errors."""

    def __init__(self, message: str, context: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (Context: {context_str})"
        return self.message


class ConfigurationError(ContactsDashboardError):
    """Raised when there are issues with configuration loading or validation."""

    def __init__(self, message: str, config_file: Optional[str] = None, field: Optional[str] = None):
        context = {}
        if config_file:
            context['config_file'] = config_file
        if field:
            context['field'] = field
        super().__init__(message, context)


class FileProcessingError(ContactsDashboardError):
    """Raised when a contacts file cannot be read or written."""

    def __init__(self, message: str, file_path: Optional[str] = None, operation: Optional[str] = None):
        context = {}
        if file_path:
            context['file_path'] = file_path
        if operation:
            context['operation'] = operation
        super().__init__(message, context)


class ValidationError(ContactsDashboardError):
    """Raised when data or a state transition fails validation."""

    def __init__(self, message: str, field: Optional[str] = None, value: Optional[Any] = None):
        context = {}
        if field:
            context['field'] = field
        if value is not None:
            context['value'] = str(value)
        super().__init__(message, context)


class GeocodingError(ContactsDashboardError):
    """Raised when a geocoding lookup fails at the provider."""

    def __init__(self, message: str, query: Optional[str] = None, status_code: Optional[int] = None):
        context = {}
        if query:
            context['query'] = query
        if status_code is not None:
            context['status_code'] = status_code
        super().__init__(message, context)
