"""
Custom exceptions for the Nexus admin client.
"""

from typing import Optional, Dict, Any, List


class NexusAdminError(Exception):
    """
    Base exception for all Nexus admin client errors.

    Every error raised by the client derives from this class, so callers
    can catch one type and still inspect the structured context.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        """
        Initialize Nexus admin error.

        Args:
            message: Error message
            error_code: Optional error code for categorization
            context: Additional context information
            cause: Original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}
        self.cause = cause

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "context": self.context,
            "cause": str(self.cause) if self.cause else None
        }

    def __str__(self) -> str:
        """String representation of the error."""
        parts = [self.message]

        if self.error_code:
            parts.append(f"Code: {self.error_code}")

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            parts.append(f"Context: {context_str}")

        if self.cause:
            parts.append(f"Caused by: {self.cause}")

        return " | ".join(parts)


class TransportError(NexusAdminError):
    """
    Exception for transport-level failures.

    Raised when no HTTP response could be obtained at all: connection
    refused, DNS failure, TLS errors, timeouts. The underlying requests
    exception is kept as ``cause``.
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        method: Optional[str] = None,
        **kwargs
    ):
        """
        Initialize transport error.

        Args:
            message: Error message
            url: URL that was being requested
            method: HTTP method of the failed request
            **kwargs: Additional arguments for base class
        """
        context = kwargs.get('context', {})
        if url:
            context['url'] = url
        if method:
            context['method'] = method

        kwargs['context'] = context
        kwargs.setdefault('error_code', 'TRANSPORT')
        super().__init__(message, **kwargs)

        self.url = url
        self.method = method


class NexusAPIError(NexusAdminError):
    """
    Exception for unexpected HTTP status codes.

    The observed status code is always available as ``status_code`` so
    callers can inspect it even though the operation failed.
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        url: Optional[str] = None,
        method: Optional[str] = None,
        response_body: Optional[str] = None,
        **kwargs
    ):
        """
        Initialize API error.

        Args:
            message: Error message
            status_code: HTTP status code returned by the server
            url: URL that was requested
            method: HTTP method of the request
            response_body: Response body text, kept for diagnostics
            **kwargs: Additional arguments for base class
        """
        context = kwargs.get('context', {})
        context['status_code'] = status_code
        if url:
            context['url'] = url
        if method:
            context['method'] = method

        kwargs['context'] = context
        kwargs.setdefault('error_code', 'UNEXPECTED_STATUS')
        super().__init__(message, **kwargs)

        self.status_code = status_code
        self.url = url
        self.method = method
        self.response_body = response_body


class PayloadDecodeError(NexusAdminError):
    """
    Exception for response bodies that cannot be decoded.
    """

    def __init__(
        self,
        message: str,
        payload_format: Optional[str] = None,
        url: Optional[str] = None,
        **kwargs
    ):
        """
        Initialize payload decode error.

        Args:
            message: Error message
            payload_format: Format that failed to decode (json, xml)
            url: URL the payload was fetched from
            **kwargs: Additional arguments for base class
        """
        context = kwargs.get('context', {})
        if payload_format:
            context['payload_format'] = payload_format
        if url:
            context['url'] = url

        kwargs['context'] = context
        kwargs.setdefault('error_code', 'DECODE')
        super().__init__(message, **kwargs)

        self.payload_format = payload_format
        self.url = url


class ConfigurationError(NexusAdminError):
    """
    Exception for configuration errors.

    This exception is raised when there are issues with
    configuration loading, validation, or usage.
    """

    def __init__(
        self,
        message: str,
        config_section: Optional[str] = None,
        config_key: Optional[str] = None,
        **kwargs
    ):
        """
        Initialize configuration error.

        Args:
            message: Error message
            config_section: Configuration section with error
            config_key: Specific configuration key with error
            **kwargs: Additional arguments for base class
        """
        context = kwargs.get('context', {})
        if config_section:
            context['config_section'] = config_section
        if config_key:
            context['config_key'] = config_key

        kwargs['context'] = context
        super().__init__(message, **kwargs)

        self.config_section = config_section
        self.config_key = config_key


class ValidationError(NexusAdminError):
    """
    Exception for invalid caller input.
    """

    def __init__(
        self,
        message: str,
        invalid_fields: Optional[List[str]] = None,
        **kwargs
    ):
        context = kwargs.get('context', {})
        if invalid_fields:
            context['invalid_fields'] = invalid_fields

        kwargs['context'] = context
        super().__init__(message, **kwargs)

        self.invalid_fields = invalid_fields or []
