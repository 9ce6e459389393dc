"""
Project snapshot models.

The snapshot is the controller's aggregate view of one analyzed repository.
Endpoint and controller counts are computed from the current endpoint list
on every read and are never stored.
"""

from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


class RepositoryReference(BaseModel):
    """A user-submitted repository URL plus optional credentials."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(..., description="Public Git repository URL")
    username: Optional[str] = Field(default=None)
    password: Optional[str] = Field(default=None)

    @field_validator("url")
    @classmethod
    def validate_url(cls, value: str) -> str:
        value = (value or "").strip()
        if not value:
            raise ValueError("Repository URL is required.")
        parsed = urlparse(value)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError("Invalid Repository URL format.")
        return value

    def to_request(self) -> Dict[str, Any]:
        """Request body shared by the submit and clone operations."""
        return {
            "repo_url": self.url,
            "username": self.username,
            "password": self.password,
        }


class Endpoint(BaseModel):
    """One REST endpoint as reported by the endpoints stage."""

    model_config = ConfigDict(extra="allow")

    controller: str
    method: str
    http_method: str
    path: str


class ProjectClassification(BaseModel):
    """Result of the analyze stage."""

    model_config = ConfigDict(extra="ignore")

    project_type: Optional[str] = None
    build_system: Optional[str] = None
    is_spring_boot: bool = False
    is_bootable: bool = False
    has_maven: bool = False
    has_gradle: bool = False
    message: Optional[str] = None


def count_controllers(endpoints: Optional[List[Endpoint]]) -> int:
    """Number of distinct controllers in an endpoint list."""
    if not endpoints:
        return 0
    return len({endpoint.controller for endpoint in endpoints})


class ProjectSnapshot(BaseModel):
    """Current aggregate of one repository's analysis results."""

    repo_name: Optional[str] = None
    classification: Optional[ProjectClassification] = None
    endpoints: Optional[List[Endpoint]] = None
    endpoints_message: Optional[str] = None

    @computed_field  # type: ignore[misc]
    @property
    def endpoints_count(self) -> int:
        return len(self.endpoints) if self.endpoints else 0

    @computed_field  # type: ignore[misc]
    @property
    def controllers_count(self) -> int:
        return count_controllers(self.endpoints)

    @property
    def features_count(self) -> Optional[int]:
        """Not reconciled from the feature-file fetch; always unknown."""
        return None

    @property
    def entities_count(self) -> Optional[int]:
        """Not reconciled from the entities fetch; always unknown."""
        return None

    @property
    def project_info(self) -> Optional[Dict[str, Any]]:
        """Classification merged with derived counts, as the overview shows it."""
        if self.classification is None:
            return None
        return {
            **self.classification.model_dump(),
            "endpoints_count": self.endpoints_count,
            "controllers_count": self.controllers_count,
            "features_count": self.features_count,
            "entities_count": self.entities_count,
        }

    def to_api_response(self) -> Dict[str, Any]:
        return {
            "repo_name": self.repo_name,
            "project_info": self.project_info,
            "endpoints": (
                [endpoint.model_dump() for endpoint in self.endpoints]
                if self.endpoints is not None
                else None
            ),
            "endpoints_message": self.endpoints_message,
            "endpoints_count": self.endpoints_count,
            "controllers_count": self.controllers_count,
        }
