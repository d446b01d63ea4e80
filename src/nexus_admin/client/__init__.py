"""
Repository manager administration clients.
"""

from .base import RepositoryManagerClient, NO_CHANGE
from .nexus_client import NexusClient

__all__ = [
    "RepositoryManagerClient",
    "NexusClient",
    "NO_CHANGE"
]
