"""
Data models for the Nexus admin client.
"""

from .identifiers import RepositoryID, GroupID
from .repository import CreateRepositoryRequest
from .repository_group import GroupMember, RepositoryGroup

__all__ = [
    "RepositoryID",
    "GroupID",
    "CreateRepositoryRequest",
    "GroupMember",
    "RepositoryGroup"
]
