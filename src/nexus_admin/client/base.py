"""
Interface of a repository manager administration client.
"""

from abc import ABC, abstractmethod

from ..models import RepositoryID, GroupID

# Status returned by group mutations that had nothing to write
NO_CHANGE = 0


class RepositoryManagerClient(ABC):
    """
    Abstract base class for repository manager admin clients.

    Integer return values are the HTTP status codes of the underlying
    responses. Failures raise ``NexusAdminError`` subclasses.
    """

    @abstractmethod
    def repository_exists(self, repository_id: RepositoryID) -> bool:
        """
        Check whether a repository exists.

        Args:
            repository_id: Repository to look up

        Returns:
            True if the server knows the repository, False if it does not
        """
        pass

    @abstractmethod
    def create_snapshot_repository(self, repository_id: RepositoryID) -> int:
        """
        Create a hosted Maven2 SNAPSHOT repository named after its id.

        Args:
            repository_id: Id of the new repository

        Returns:
            HTTP status code (201)
        """
        pass

    @abstractmethod
    def delete_repository(self, repository_id: RepositoryID) -> int:
        """
        Delete a repository. Deleting an unknown repository is not an error.

        Args:
            repository_id: Repository to delete

        Returns:
            HTTP status code (204, or 404 when already absent)
        """
        pass

    @abstractmethod
    def add_repository_to_group(self, repository_id: RepositoryID, group_id: GroupID) -> int:
        """
        Add a repository to a group unless it is already a member.

        Returns:
            200 after a write, ``NO_CHANGE`` when already a member
        """
        pass

    @abstractmethod
    def remove_repository_from_group(self, repository_id: RepositoryID, group_id: GroupID) -> int:
        """
        Remove a repository from a group if it is a member.

        Returns:
            200 after a write, ``NO_CHANGE`` when not a member
        """
        pass
