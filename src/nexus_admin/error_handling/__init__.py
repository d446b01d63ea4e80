"""
Error types raised by the Nexus admin client.
"""

from .exceptions import (
    NexusAdminError, TransportError, NexusAPIError, PayloadDecodeError,
    ConfigurationError, ValidationError
)

__all__ = [
    "NexusAdminError",
    "TransportError",
    "NexusAPIError",
    "PayloadDecodeError",
    "ConfigurationError",
    "ValidationError"
]
