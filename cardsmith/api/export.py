"""
Game export endpoint.

Builds the game bundle zip for a list of card records.
"""

import logging
from typing import Any
from urllib.parse import quote

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ConfigDict, Field

from cardsmith.models.failure import KnownError, Outcome
from cardsmith.services.archive_builder import build_game_export, write_game_archive

logger = logging.getLogger(__name__)

router = APIRouter(tags=["export"])


class ExportRequest(BaseModel):
    """Request model for a game export."""

    model_config = ConfigDict(populate_by_name=True)

    cards: list[dict[str, Any] | None] = Field(
        ...,
        description="Card records in export order, in any saved shape",
    )
    project_name: str | None = Field(
        default=None,
        alias="projectName",
        description="Archive root folder; defaults to game-export",
    )


@router.post(
    "/export",
    response_class=Response,
    responses={
        200: {"content": {"application/zip": {}}, "description": "Game bundle archive"},
        422: {"description": "An embedded asset could not be decoded"},
        500: {"description": "The export failed for an unexpected reason"},
    },
)
async def export_game(request: ExportRequest) -> Response:
    """
    Export cards as a game bundle.

    Returns the zip archive. If any embedded asset cannot be decoded no
    archive is produced and an ASSET_DECODE_FAILURE Outcome is returned.
    Any other failure is logged and reported as an unknown failure with
    status 500.
    """
    try:
        export = build_game_export(request.cards, request.project_name)
        archive = write_game_archive(export)
    except KnownError as e:
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_outcome().model_dump(mode="json", exclude_none=True),
        )
    except Exception as e:
        logger.exception("Unexpected failure exporting %d cards", len(request.cards))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=Outcome.unknown_failure(e).model_dump(mode="json", exclude_none=True),
        )

    return Response(
        content=archive,
        media_type="application/zip",
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(export.archive_name)}"
        },
    )
