"""
Recent projects endpoints.

Reads and updates the MRU list kept in the host's key-value store.
"""

import json
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field

from cardsmith.api.dependencies import get_store
from cardsmith.models.failure import KnownError
from cardsmith.models.recents import RecentProject
from cardsmith.parsers.project_file import parse_project
from cardsmith.services.recents import add_recent_project, load_recent_projects
from cardsmith.storage.key_value import KeyValueStore

router = APIRouter(prefix="/recents", tags=["recents"])


class AddRecentRequest(BaseModel):
    """Request model for recording an opened or saved project."""

    model_config = ConfigDict(populate_by_name=True)

    project: dict[str, Any] = Field(..., description="The project document")
    file_path: str = Field(
        ...,
        alias="filePath",
        min_length=1,
        description="Where the project was opened from or saved to",
    )


@router.get("", response_model=list[RecentProject])
async def list_recents(
    store: Annotated[KeyValueStore, Depends(get_store)],
) -> list[RecentProject]:
    """Recently opened or saved projects, most recent first."""
    return load_recent_projects(store)


@router.post("", response_model=list[RecentProject])
async def add_recent(
    request: AddRecentRequest,
    store: Annotated[KeyValueStore, Depends(get_store)],
) -> list[RecentProject]:
    """
    Record a project open or save.

    Returns the updated list. Storage failures do not fail the request.
    """
    try:
        project = parse_project(json.dumps(request.project))
    except KnownError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.detail or e.message,
        ) from e

    return add_recent_project(store, project, request.file_path)
