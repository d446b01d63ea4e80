"""
Repository group data model.

A group is read whole from ``/service/local/repo_groups/{id}``, changed
locally and written back whole; there is no partial update.
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Dict, Any, List
import json

from .identifiers import RepositoryID, GroupID

# Keys of the group payload modelled as attributes; everything else is
# carried through ``RepositoryGroup.extra``.
_GROUP_KEYS = (
    "id", "provider", "name", "repositories", "format",
    "repoType", "exposed", "contentResourceURI"
)


@dataclass(frozen=True)
class GroupMember:
    """A repository entry inside a group's ``repositories`` list."""

    id: RepositoryID
    name: str
    resource_uri: str = ""

    @classmethod
    def for_group(cls, repository_id: RepositoryID, group_id: GroupID, base_url: str) -> 'GroupMember':
        """
        Build the member record the client writes when adding a repository.

        The name mirrors the id and the resource URI points at the
        repository's entry under the group.
        """
        return cls(
            id=repository_id,
            name=str(repository_id),
            resource_uri=f"{base_url}/service/local/repo_groups/{group_id}/{repository_id}"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "id": self.id,
            "resourceURI": self.resource_uri
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GroupMember':
        if not isinstance(data, dict) or "id" not in data:
            raise ValueError(f"Group member entry has no id: {data!r}")
        return cls(
            id=RepositoryID(data["id"]),
            name=data.get("name", ""),
            resource_uri=data.get("resourceURI", "")
        )


@dataclass
class RepositoryGroup:
    """
    A named collection of repositories exposed as one virtual endpoint.

    Member ids are unique within a group. ``with_repository`` and
    ``without_repository`` return new groups and never mutate this one.
    """

    id: GroupID
    provider: str = ""
    name: str = ""
    format: str = ""
    repo_type: str = ""
    exposed: bool = False
    content_resource_uri: str = ""
    repositories: List[GroupMember] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    def contains(self, repository_id: RepositoryID) -> bool:
        """Check whether a member with exactly this id is in the group."""
        return any(member.id == repository_id for member in self.repositories)

    def __contains__(self, repository_id: object) -> bool:
        return self.contains(repository_id)

    @property
    def repository_ids(self) -> List[RepositoryID]:
        return [member.id for member in self.repositories]

    def with_repository(self, member: GroupMember) -> 'RepositoryGroup':
        """
        Return a copy of the group with ``member`` appended.

        If a member with the same id is already present the copy is
        returned unchanged.
        """
        if self.contains(member.id):
            return replace(self, repositories=list(self.repositories))
        return replace(self, repositories=self.repositories + [member])

    def without_repository(self, repository_id: RepositoryID) -> 'RepositoryGroup':
        """Return a copy of the group with every member matching the id removed, order kept."""
        remaining = [member for member in self.repositories if member.id != repository_id]
        return replace(self, repositories=remaining)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the group to the ``data`` object of the REST payload.

        Returns:
            Dictionary with the server's key names, unknown keys included
        """
        data = dict(self.extra)
        data.update({
            "id": self.id,
            "provider": self.provider,
            "name": self.name,
            "repositories": [member.to_dict() for member in self.repositories],
            "format": self.format,
            "repoType": self.repo_type,
            "exposed": self.exposed,
            "contentResourceURI": self.content_resource_uri
        })
        return data

    def to_envelope(self) -> Dict[str, Any]:
        return {"data": self.to_dict()}

    def to_json(self) -> str:
        """Serialize the group as the ``{"data": {...}}`` envelope."""
        return json.dumps(self.to_envelope())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RepositoryGroup':
        """
        Create a group from the ``data`` object of the REST payload.

        Args:
            data: Dictionary using the server's key names

        Returns:
            RepositoryGroup instance

        Raises:
            ValueError: If the payload is not a group object
        """
        if not isinstance(data, dict):
            raise ValueError(f"Repository group payload must be an object, got {type(data).__name__}")

        members = data.get("repositories") or []
        if not isinstance(members, list):
            raise ValueError("Repository group 'repositories' must be a list")

        return cls(
            id=GroupID(data.get("id", "")),
            provider=data.get("provider", ""),
            name=data.get("name", ""),
            format=data.get("format", ""),
            repo_type=data.get("repoType", ""),
            exposed=data.get("exposed", False),
            content_resource_uri=data.get("contentResourceURI", ""),
            repositories=[GroupMember.from_dict(member) for member in members],
            extra={k: v for k, v in data.items() if k not in _GROUP_KEYS}
        )

    @classmethod
    def from_envelope(cls, envelope: Any) -> 'RepositoryGroup':
        if not isinstance(envelope, dict) or "data" not in envelope:
            raise ValueError("Repository group response has no 'data' envelope")
        return cls.from_dict(envelope["data"])

    @classmethod
    def from_json(cls, json_str: str, group_id: Optional[GroupID] = None) -> 'RepositoryGroup':
        """
        Create a group from a JSON response body.

        Args:
            json_str: Response body text
            group_id: Id to use when the payload omits one

        Returns:
            RepositoryGroup instance

        Raises:
            ValueError: If the body is not valid JSON or not a group envelope
        """
        group = cls.from_envelope(json.loads(json_str))
        if not group.id and group_id:
            group.id = group_id
        return group
