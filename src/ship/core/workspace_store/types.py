"""Schema of `.ship/workspaces.json`."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class WorkspaceMetadata(BaseModel):
    """Association between a jj workspace and the stack/task it was created for."""

    model_config = ConfigDict(frozen=True)

    name: str
    path: str
    stack_name: str | None = None
    bookmark: str | None = None
    task_id: str | None = None
    created_at: datetime | None = None


class WorkspacesFile(BaseModel):
    model_config = ConfigDict(frozen=True)

    workspaces: list[WorkspaceMetadata] = Field(default_factory=list)
