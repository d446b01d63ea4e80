"""
Nexus Admin Client

A Python client for the administrative REST API of a Nexus repository
manager: hosted repository lifecycle and repository group membership.
"""

__version__ = "0.1.0"
__author__ = "Nexus Admin Client Team"
__description__ = "Administrative REST client for Nexus repository managers"

from .client import NexusClient, RepositoryManagerClient, NO_CHANGE  # noqa: E402
from .models import RepositoryID, GroupID  # noqa: E402

__all__ = [
    "NexusClient",
    "RepositoryManagerClient",
    "NO_CHANGE",
    "RepositoryID",
    "GroupID",
]
