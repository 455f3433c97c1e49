"""
Project file endpoints.

Lets a host validate, normalize and re-serialize project documents without
touching disk. Request bodies are raw project file text, encoded as UTF-8.
"""

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse, Response

from cardsmith.models.failure import InvalidProjectFormatError, KnownError
from cardsmith.parsers.project_file import parse_project, stringify_project, try_parse_project

router = APIRouter(prefix="/projects", tags=["projects"])


async def _body_text(request: Request) -> str:
    body = await request.body()
    try:
        return body.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidProjectFormatError(f"Project text is not valid UTF-8: {e.reason}") from e


def _failure_response(error: KnownError) -> JSONResponse:
    return JSONResponse(
        status_code=error.status_code,
        content=error.to_outcome().model_dump(mode="json", exclude_none=True),
    )


@router.post(
    "/validate",
    responses={422: {"description": "Not a loadable project file"}},
)
async def validate_project(request: Request) -> JSONResponse:
    """
    Validate and normalize a project document.

    On success the Outcome carries the project with every default filled in.
    On failure it carries an INVALID_PROJECT_FORMAT failure and the status
    is 422.
    """
    try:
        text = await _body_text(request)
    except KnownError as e:
        return _failure_response(e)

    outcome = try_parse_project(text)
    return JSONResponse(
        status_code=status.HTTP_200_OK if outcome.ok else status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=outcome.model_dump(mode="json", by_alias=True, exclude_none=True),
    )


@router.post(
    "/stringify",
    responses={422: {"description": "Not a loadable project file"}},
)
async def stringify(request: Request) -> Response:
    """
    Return the document as it would be saved.

    The project is loaded, stamped with the current time and schema version,
    and serialized with stable formatting.
    """
    try:
        project = parse_project(await _body_text(request))
    except KnownError as e:
        return _failure_response(e)
    return Response(content=stringify_project(project), media_type="application/json")
