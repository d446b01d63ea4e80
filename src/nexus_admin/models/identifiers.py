"""
Opaque identifiers for repositories and repository groups.

Both are plain strings at runtime; the distinct types keep a group id from
being passed where a repository id is expected.
"""

from typing import NewType

RepositoryID = NewType("RepositoryID", str)
GroupID = NewType("GroupID", str)
