"""Comic episode API routes.

Endpoints:
- GET /api/comics: All episodes, hidden included (admin listing)
- GET /api/comics/hidden: Hidden episodes only
- POST /api/comics: Create an episode (multipart: `json` field + `image` file)
- PATCH /api/comics/{id}: Partial update (multipart with optional image, or JSON)
- DELETE /api/comics/{id}: Delete an episode

Malformed or missing input is rejected with 400 before any call to the
content store; content store failures come back as 500 with details.
"""

import logging

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, ValidationError as PydanticValidationError
from starlette.datastructures import UploadFile

from api.dependencies import get_comic_reader, get_comic_writer
from api.models import ComicBody, ComicResponse, PatchComicBody
from api.responses import error_response, respond
from domain.model.comic import ComicDraft, ComicPatch
from domain.model.image import ImageUpload, validate_image_file
from port.comic_reader import ComicReader
from port.comic_writer import ComicWriter
from services import comic_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/comics", tags=["comics"])

ADMIN_LIST_LIMIT = 100

MULTIPART = 'multipart/form-data'
JSON = 'application/json'


class _BadRequest(Exception):
    """Request body could not be parsed; message goes to the client."""


async def _read_image(upload: UploadFile) -> ImageUpload:
    data = await upload.read()
    return ImageUpload(
        filename=upload.filename or 'image',
        content_type=upload.content_type or '',
        data=data,
    )


def _parse_json_field(raw: str, model: type[BaseModel]) -> BaseModel:
    try:
        return model.model_validate_json(raw)
    except PydanticValidationError as e:
        raise _BadRequest("Invalid JSON in json field") from e


async def _read_multipart(request: Request, model: type[BaseModel], image_required: bool):
    """Return (body, image) from a multipart request with `json` and `image` fields."""
    form = await request.form()
    json_field = form.get('json')
    image_field = form.get('image')

    if not json_field or not isinstance(json_field, str):
        raise _BadRequest("Missing json field in form data")
    if image_required and not isinstance(image_field, UploadFile):
        raise _BadRequest("Missing image file in form data")

    image = None
    if isinstance(image_field, UploadFile):
        image = await _read_image(image_field)
        error = validate_image_file(image.size, image.content_type)
        if error:
            raise _BadRequest(error)

    return _parse_json_field(json_field, model), image


def _to_patch(body: PatchComicBody) -> ComicPatch:
    # fields left out of the request stay UNSET; an explicit null is kept
    return ComicPatch(**{name: getattr(body, name) for name in body.model_fields_set})


@router.get("")
async def list_comics_admin(reader: ComicReader = Depends(get_comic_reader)):
    """All episodes, newest first, including hidden ones."""
    return await respond(
        reader.get_all_comics_admin(ADMIN_LIST_LIMIT),
        "Failed to fetch comics",
        lambda comics: [ComicResponse.from_comic(c) for c in comics],
    )


@router.get("/hidden")
async def list_hidden_comics(reader: ComicReader = Depends(get_comic_reader)):
    return await respond(
        reader.get_hidden_comics(ADMIN_LIST_LIMIT),
        "Failed to fetch comics",
        lambda comics: [ComicResponse.from_comic(c) for c in comics],
    )


@router.post("")
async def create_comic(request: Request, writer: ComicWriter = Depends(get_comic_writer)):
    """Upload the image and create the episode document."""
    if MULTIPART not in request.headers.get('content-type', ''):
        return error_response("Expected multipart/form-data", 400)

    try:
        body, image = await _read_multipart(request, ComicBody, image_required=True)
    except _BadRequest as e:
        return error_response(str(e), 400)

    draft = ComicDraft(
        title=body.title or '',
        slug=body.slug or '',
        published_at=body.published_at,
        alt_text=body.alt_text,
        transcript=body.transcript,
    )
    return await respond(
        comic_service.create_comic(draft, image, writer),
        "Failed to create comic",
        lambda comic_id: {'_id': comic_id},
        status_code=201,
    )


@router.patch("/{comic_id}")
async def patch_comic(comic_id: str, request: Request, writer: ComicWriter = Depends(get_comic_writer)):
    """Update any subset of fields, optionally replacing the image."""
    content_type = request.headers.get('content-type', '')
    image = None

    try:
        if MULTIPART in content_type:
            body, image = await _read_multipart(request, PatchComicBody, image_required=False)
        elif JSON in content_type:
            try:
                body = PatchComicBody.model_validate_json(await request.body())
            except PydanticValidationError as e:
                raise _BadRequest("Invalid JSON body") from e
        else:
            raise _BadRequest("Expected multipart/form-data or application/json")
    except _BadRequest as e:
        return error_response(str(e), 400)

    return await respond(
        comic_service.patch_comic(comic_id, _to_patch(body), writer, image=image),
        "Failed to patch comic",
        lambda patched_id: {'_id': patched_id},
    )


@router.delete("/{comic_id}")
async def delete_comic(comic_id: str, writer: ComicWriter = Depends(get_comic_writer)):
    return await respond(
        comic_service.delete_comic(comic_id, writer),
        "Failed to delete comic",
        lambda deleted_id: {'_id': deleted_id, 'deleted': True},
    )
