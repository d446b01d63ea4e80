"""
Nexus REST API client for repository and repository group administration.
"""

import logging
from typing import Optional

import requests
from requests.auth import HTTPBasicAuth

from .. import __version__
from ..config import get_config
from ..config.config_manager import PAYLOAD_FORMATS
from ..error_handling import (
    TransportError, NexusAPIError, PayloadDecodeError, ConfigurationError, ValidationError
)
from ..models import (
    RepositoryID, GroupID, CreateRepositoryRequest, GroupMember, RepositoryGroup
)
from .base import RepositoryManagerClient, NO_CHANGE

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    "json": "application/json",
    "xml": "application/xml",
}


class NexusClient(RepositoryManagerClient):
    """
    Client for the Nexus ``/service/local`` administrative REST API.

    Every request carries HTTP Basic credentials and ``Accept:
    application/json``. Requests are issued once; there are no retries, and
    a transport failure or unexpected status is raised immediately.

    Group mutations are read-modify-write: the group is fetched, changed
    locally and PUT back whole. Nothing guards against another writer
    changing the group in between.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        session: Optional[requests.Session] = None,
        payload_format: Optional[str] = None,
        timeout: Optional[float] = None,
        verify_ssl: Optional[bool] = None
    ):
        """
        Initialize Nexus API client.

        Args:
            base_url: Server base URL, typically http://host:port/nexus
            username: Admin user allowed to create and change repositories
            password: Password of the admin user
            session: HTTP transport; a new requests.Session when omitted
            payload_format: Body format for repository creation, "json" or "xml"
            timeout: Per-request timeout in seconds
            verify_ssl: Whether to verify TLS certificates

        Raises:
            ConfigurationError: If the payload format is not supported
        """
        settings = (base_url, username, password, payload_format, timeout, verify_ssl)
        # Only settings left as None are read from the configuration
        config = get_config().nexus if any(value is None for value in settings) else None

        self.base_url = (base_url if base_url is not None else config.base_url).rstrip("/")
        self.username = username if username is not None else config.username
        self.password = password if password is not None else config.password
        self.payload_format = (payload_format if payload_format is not None else config.payload_format).lower()
        self.timeout = timeout if timeout is not None else config.timeout
        self.verify_ssl = verify_ssl if verify_ssl is not None else config.verify_ssl

        if self.payload_format not in PAYLOAD_FORMATS:
            raise ConfigurationError(
                f"Invalid payload format: {self.payload_format}. Valid formats: {PAYLOAD_FORMATS}",
                config_section="nexus",
                config_key="payload_format"
            )

        if not self.username or not self.password:
            logger.warning("Nexus credentials not configured - admin calls will be rejected")

        self.auth = HTTPBasicAuth(self.username, self.password or "") if self.username is not None else None
        self.headers = {
            "Accept": "application/json",
            "User-Agent": f"nexus-admin-client/{__version__}"
        }

        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()
        if self._owns_session:
            self._setup_session()

    def _setup_session(self) -> None:
        """
        Set up headers and authentication on a session this client created.

        An injected session is never modified; it may be shared with
        requests to other hosts, so credentials go on each request instead.
        """
        self.session.headers.update(self.headers)
        self.session.auth = self.auth

    def close(self) -> None:
        """Release pooled connections if the session was created by this client."""
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> 'NexusClient':
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def _service_url(self, *segments: str) -> str:
        return "/".join([self.base_url, "service", "local", *segments])

    def _require_id(self, value: str, field_name: str) -> None:
        if not isinstance(value, str) or not value:
            raise ValidationError(
                f"{field_name} must be a non-empty string, got {value!r}",
                invalid_fields=[field_name]
            )

    def _make_request(
        self,
        method: str,
        url: str,
        content_type: Optional[str] = None,
        data: Optional[bytes] = None,
        **log_context
    ) -> requests.Response:
        """
        Make a single request to the Nexus API.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            url: Absolute request URL
            content_type: Content-Type of ``data``, for write requests
            data: Encoded request body
            **log_context: ``repository_id`` / ``group_id`` attached to log records

        Returns:
            Response object, whatever its status code

        Raises:
            TransportError: If no response could be obtained
        """
        headers = dict(self.headers)
        if content_type:
            headers["Content-Type"] = content_type
        log_extra = {"method": method, "url": url, **log_context}

        logger.debug(f"{method} {url}", extra=log_extra)

        try:
            response = self.session.request(
                method=method,
                url=url,
                data=data,
                headers=headers,
                auth=self.auth,
                timeout=self.timeout,
                verify=self.verify_ssl
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"{method} {url} failed: {e}", extra=log_extra)
            raise TransportError(
                f"Request failed: {method} {url}",
                url=url,
                method=method,
                cause=e
            ) from e

        logger.debug(
            f"{method} {url} -> {response.status_code}",
            extra={**log_extra, "status_code": response.status_code}
        )
        return response

    def _unexpected_status(
        self,
        action: str,
        response: requests.Response,
        include_body: bool = False,
        **log_context
    ) -> NexusAPIError:
        """Build (and log) the error for a status code the operation does not accept."""
        request = response.request
        method = request.method if request is not None else None
        body = response.text

        message = f"{action}: unexpected response status: {response.status_code}"
        if include_body and body:
            message += f" ({body.strip()})"

        logger.error(
            message,
            extra={"method": method, "url": response.url, "status_code": response.status_code, **log_context}
        )

        return NexusAPIError(
            message,
            status_code=response.status_code,
            url=response.url,
            method=method,
            response_body=body
        )

    def repository_exists(self, repository_id: RepositoryID) -> bool:
        """
        Check whether a repository exists.

        Args:
            repository_id: Repository to look up

        Returns:
            True on HTTP 200, False on HTTP 404

        Raises:
            NexusAPIError: On any other status
            TransportError: If the server could not be reached
        """
        self._require_id(repository_id, "repository_id")

        response = self._make_request(
            "GET", self._service_url("repositories", repository_id), repository_id=repository_id
        )

        if response.status_code not in (200, 404):
            raise self._unexpected_status(
                f"Checking repository {repository_id}", response, repository_id=repository_id
            )

        return response.status_code == 200

    def create_snapshot_repository(self, repository_id: RepositoryID) -> int:
        """
        Create a hosted Maven2 SNAPSHOT repository.

        The repository name is the same as its id. The descriptor is sent
        as JSON or XML depending on ``payload_format``.

        Args:
            repository_id: Id of the new repository

        Returns:
            HTTP status code 201

        Raises:
            NexusAPIError: On any status other than 201; ``status_code`` holds the observed code
            TransportError: If the server could not be reached
        """
        self._require_id(repository_id, "repository_id")

        descriptor = CreateRepositoryRequest.snapshot(repository_id, self.base_url)
        payload = descriptor.serialize(self.payload_format).encode("utf-8")

        response = self._make_request(
            "POST",
            self._service_url("repositories"),
            content_type=CONTENT_TYPES[self.payload_format],
            data=payload,
            repository_id=repository_id
        )

        if response.status_code != 201:
            raise self._unexpected_status(
                f"Creating snapshot repository {repository_id}", response,
                include_body=True, repository_id=repository_id
            )

        logger.info(f"Created snapshot repository: {repository_id}", extra={"repository_id": repository_id})
        return response.status_code

    def delete_repository(self, repository_id: RepositoryID) -> int:
        """
        Delete a repository.

        Args:
            repository_id: Repository to delete

        Returns:
            HTTP status code, 204 when deleted or 404 when already absent

        Raises:
            NexusAPIError: On any other status
            TransportError: If the server could not be reached
        """
        self._require_id(repository_id, "repository_id")

        response = self._make_request(
            "DELETE", self._service_url("repositories", repository_id), repository_id=repository_id
        )
        log_extra = {"repository_id": repository_id, "status_code": response.status_code}

        if response.status_code == 404:
            logger.info(f"Repository {repository_id} does not exist - nothing to delete", extra=log_extra)
        elif response.status_code == 204:
            logger.info(f"Deleted repository: {repository_id}", extra=log_extra)
        else:
            raise self._unexpected_status(
                f"Deleting repository {repository_id}", response, repository_id=repository_id
            )

        return response.status_code

    def get_repository_group(self, group_id: GroupID) -> RepositoryGroup:
        """
        Get a repository group.

        Args:
            group_id: Group to fetch

        Returns:
            The group with its ordered member list

        Raises:
            NexusAPIError: On any status other than 200
            PayloadDecodeError: If the body is not a JSON group envelope
            TransportError: If the server could not be reached
        """
        self._require_id(group_id, "group_id")

        url = self._service_url("repo_groups", group_id)
        response = self._make_request("GET", url, group_id=group_id)

        if response.status_code != 200:
            raise self._unexpected_status(f"Fetching repository group {group_id}", response, group_id=group_id)

        try:
            group = RepositoryGroup.from_json(response.text, group_id=group_id)
        except ValueError as e:
            raise PayloadDecodeError(
                f"Malformed repository group response for {group_id}",
                payload_format="json",
                url=url,
                cause=e
            ) from e

        logger.debug(f"Repository group {group_id} has {len(group.repositories)} members", extra={"group_id": group_id})
        return group

    def add_repository_to_group(self, repository_id: RepositoryID, group_id: GroupID) -> int:
        """
        Add a repository to a repository group.

        Args:
            repository_id: Repository to add
            group_id: Group to add it to

        Returns:
            200 after the group was written, ``NO_CHANGE`` (0) if the
            repository already was a member and nothing was written

        Raises:
            NexusAPIError: If fetching or writing the group fails
            PayloadDecodeError: If the fetched group cannot be decoded
            TransportError: If the server could not be reached
        """
        self._require_id(repository_id, "repository_id")
        log_extra = {"repository_id": repository_id, "group_id": group_id}

        group = self.get_repository_group(group_id)

        if group.contains(repository_id):
            logger.info(f"Repository {repository_id} already in group {group_id} - nothing to add", extra=log_extra)
            return NO_CHANGE

        member = GroupMember.for_group(repository_id, group_id, self.base_url)
        status = self._write_group(
            group_id, group.with_repository(member), f"Adding {repository_id} to group {group_id}", repository_id
        )

        logger.info(f"Added repository {repository_id} to group {group_id}", extra=log_extra)
        return status

    def remove_repository_from_group(self, repository_id: RepositoryID, group_id: GroupID) -> int:
        """
        Remove a repository from a repository group.

        Args:
            repository_id: Repository to remove
            group_id: Group to remove it from

        Returns:
            200 after the group was written, ``NO_CHANGE`` (0) if the
            repository was not a member and nothing was written

        Raises:
            NexusAPIError: If fetching or writing the group fails
            PayloadDecodeError: If the fetched group cannot be decoded
            TransportError: If the server could not be reached
        """
        self._require_id(repository_id, "repository_id")
        log_extra = {"repository_id": repository_id, "group_id": group_id}

        group = self.get_repository_group(group_id)

        if not group.contains(repository_id):
            logger.info(f"Repository {repository_id} not in group {group_id} - nothing to remove", extra=log_extra)
            return NO_CHANGE

        status = self._write_group(
            group_id, group.without_repository(repository_id),
            f"Removing {repository_id} from group {group_id}", repository_id
        )

        logger.info(f"Removed repository {repository_id} from group {group_id}", extra=log_extra)
        return status

    def _write_group(self, group_id: GroupID, group: RepositoryGroup, action: str, repository_id: RepositoryID) -> int:
        """PUT the whole group back; only 200 is accepted."""
        response = self._make_request(
            "PUT",
            self._service_url("repo_groups", group_id),
            content_type=CONTENT_TYPES["json"],
            data=group.to_json().encode("utf-8"),
            repository_id=repository_id,
            group_id=group_id
        )

        if response.status_code != 200:
            raise self._unexpected_status(
                action, response, include_body=True, repository_id=repository_id, group_id=group_id
            )

        return response.status_code
