"""
Request models for the dashboard API.

Defines the request DTOs accepted by the route handlers.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SubmitRepositoryRequest(BaseModel):
    """Request model for starting a new analysis workflow.

    The URL itself is validated by the session controller so that a bad
    URL is recorded as a workflow validation failure.
    """

    repo_url: str = Field(default="", description="Public Git repository URL")
    username: Optional[str] = Field(default=None, description="Optional Git username")
    password: Optional[str] = Field(default=None, description="Optional Git password or token")


class SelectDiagramRequest(BaseModel):
    """Request model for switching the diagram viewer."""

    diagram_type: str = Field(..., description="One of: class, er, use-case, interaction")


class PublishConfluenceRequest(BaseModel):
    """Request model for publishing documentation to Confluence.

    Fields are passed through to the Gateway unchanged; ``repo_name`` is
    always taken from the current session.
    """

    model_config = ConfigDict(extra="allow")
