"""
Repository descriptor sent when creating a hosted repository.
"""

from dataclasses import dataclass
from typing import Dict, Any
import json
import xml.etree.ElementTree as ET

from .identifiers import RepositoryID

MAVEN2 = "maven2"
HOSTED = "hosted"
SNAPSHOT_POLICY = "SNAPSHOT"
REPOSITORY_PROVIDER_ROLE = "org.sonatype.nexus.proxy.repository.Repository"

# Element order of the XML form
_XML_FIELDS = (
    ("contentResourceURI", "content_resource_uri"),
    ("id", "id"),
    ("name", "name"),
    ("provider", "provider"),
    ("providerRole", "provider_role"),
    ("format", "format"),
    ("repoType", "repo_type"),
    ("repoPolicy", "repo_policy"),
    ("exposed", "exposed"),
)


@dataclass(frozen=True)
class CreateRepositoryRequest:
    """
    Payload of ``POST /service/local/repositories``.

    Older servers accept the XML form only, newer ones take JSON; both carry
    the same fields inside a ``data`` element.
    """

    id: RepositoryID
    name: str
    content_resource_uri: str
    provider: str = MAVEN2
    provider_role: str = REPOSITORY_PROVIDER_ROLE
    format: str = MAVEN2
    repo_type: str = HOSTED
    repo_policy: str = SNAPSHOT_POLICY
    exposed: bool = True

    @classmethod
    def snapshot(cls, repository_id: RepositoryID, base_url: str) -> 'CreateRepositoryRequest':
        """
        Build the request for a hosted Maven2 SNAPSHOT repository.

        Args:
            repository_id: Id of the new repository, also used as its name
            base_url: Server base URL, e.g. http://localhost:8081/nexus

        Returns:
            CreateRepositoryRequest with the fixed snapshot settings
        """
        return cls(
            id=repository_id,
            name=str(repository_id),
            content_resource_uri=f"{base_url}/content/repositories/{repository_id}"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "data": {
                "contentResourceURI": self.content_resource_uri,
                "id": self.id,
                "name": self.name,
                "provider": self.provider,
                "providerRole": self.provider_role,
                "format": self.format,
                "repoType": self.repo_type,
                "repoPolicy": self.repo_policy,
                "exposed": self.exposed
            }
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    def to_xml(self) -> str:
        """
        Serialize the request as ``<repository><data>...</data></repository>``.

        Returns:
            XML document text without declaration
        """
        root = ET.Element("repository")
        data = ET.SubElement(root, "data")

        for tag, attribute in _XML_FIELDS:
            value = getattr(self, attribute)
            if isinstance(value, bool):
                value = "true" if value else "false"
            ET.SubElement(data, tag).text = str(value)

        return ET.tostring(root, encoding="unicode")

    def serialize(self, payload_format: str) -> str:
        """
        Serialize in the given wire format.

        Args:
            payload_format: "json" or "xml"

        Raises:
            ValueError: For any other format
        """
        if payload_format == "json":
            return self.to_json()
        if payload_format == "xml":
            return self.to_xml()
        raise ValueError(f"Unsupported payload format: {payload_format}")
