"""
Bus Pass Backend - Bus Pass Route Handlers
============================================

What:  POST /bus-pass (submit an application) and GET /bus-pass/{id}.
Who:   Called by the pass form on submit.

Request Flow (POST):
    1. Client sends multipart/form-data (text fields plus optional file 'photo'),
       or a JSON object with the same camelCase keys
    2. bus_pass_form collects the text fields; FastAPI extracts the UploadFile
    3. BusPassService stores the photo, casts validTill/price, inserts the record
    4. Return 201 Created with {message, busPass}
"""

import logging
from typing import Optional
from uuid import UUID

import pydantic
from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from buspass.database import get_db_session
from buspass.exceptions import ValidationError
from buspass.schemas.bus_pass import BusPassCreateResponse, BusPassForm, BusPassResponse
from buspass.schemas.common import ErrorResponse, FaultResponse
from buspass.services.bus_pass_service import bus_pass_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Bus Passes"])


def _is_json(request: Request) -> bool:
    content_type = request.headers.get("content-type", "")
    return content_type.split(";")[0].strip().lower() == "application/json"


async def _json_form(request: Request) -> BusPassForm:
    """Read the submission from a JSON object body."""
    try:
        payload = await request.json()
    except ValueError:
        raise ValidationError(message="Request body is not valid JSON.", field="body")

    if not isinstance(payload, dict):
        raise ValidationError(message="Request body must be a JSON object.", field="body")

    try:
        return BusPassForm.model_validate(payload)
    except pydantic.ValidationError as e:
        fields = [".".join(str(part) for part in err["loc"]) for err in e.errors()]
        raise ValidationError(
            message="Submitted fields must be text or numbers.",
            field="body",
            context={"fields": fields},
        )


async def bus_pass_form(
    request: Request,
    name: Optional[str] = Form(default=None),
    email: Optional[str] = Form(default=None),
    valid_till: Optional[str] = Form(default=None, alias="validTill"),
    pass_type: Optional[str] = Form(default=None, alias="passType"),
    route: Optional[str] = Form(default=None),
    college_name: Optional[str] = Form(default=None, alias="collegeName"),
    source: Optional[str] = Form(default=None),
    destination: Optional[str] = Form(default=None),
    price: Optional[str] = Form(default=None),
) -> BusPassForm:
    """
    Collect the text fields of the submission.

    Form bodies (multipart or urlencoded) fill the Form parameters. A JSON
    body leaves them empty, so it is read separately with the same
    camelCase keys.
    """
    if _is_json(request):
        return await _json_form(request)

    return BusPassForm(
        name=name,
        email=email,
        valid_till=valid_till,
        pass_type=pass_type,
        route=route,
        college_name=college_name,
        source=source,
        destination=destination,
        price=price,
    )


@router.post(
    "/bus-pass",
    status_code=201,
    response_model=BusPassCreateResponse,
    responses={
        201: {"description": "Bus pass created", "model": BusPassCreateResponse},
        400: {"description": "Photo or body rejected", "model": ErrorResponse},
        500: {"description": "Persistence failure", "model": FaultResponse},
    },
    summary="Submit a bus pass application",
)
async def create_bus_pass(
    form: BusPassForm = Depends(bus_pass_form),
    photo: Optional[UploadFile] = File(default=None, description="Rider photo (optional)"),
    db: AsyncSession = Depends(get_db_session),
) -> BusPassCreateResponse:
    """
    Create a pass record from the submitted form.

    The price field is stored as submitted unless ENFORCE_SERVER_PRICE is set.
    A file part with an empty filename counts as no photo.
    """
    photo_filename: Optional[str] = None
    photo_content: Optional[bytes] = None

    try:
        if photo is not None and photo.filename:
            photo_filename = photo.filename
            photo_content = await photo.read()
            logger.info(
                "Received bus pass photo: filename=%s, size=%d bytes",
                photo_filename,
                len(photo_content),
            )

        return await bus_pass_service.create_bus_pass(
            db=db,
            form=form,
            photo_filename=photo_filename,
            photo_content=photo_content,
        )
    finally:
        if photo is not None:
            await photo.close()


@router.get(
    "/bus-pass/{pass_id}",
    response_model=BusPassResponse,
    responses={
        404: {"description": "Bus pass not found", "model": ErrorResponse},
        500: {"description": "Store failure", "model": FaultResponse},
    },
    summary="Get a bus pass by ID",
)
async def get_bus_pass(
    pass_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> BusPassResponse:
    return await bus_pass_service.get_bus_pass(db=db, pass_id=pass_id)
