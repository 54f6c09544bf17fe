import base64

from fastapi import APIRouter, File, Form, UploadFile
from fastapi.responses import Response

from src.config import settings
from src.core.exceptions import AppError, ConfigurationError, ModelDeclinedError
from src.schemas.style import EncodedImage, StyleTransferResponse
from src.services import style_transfer
from src.services.encoder import GENERIC_MIME_TYPES, to_data_uri

router = APIRouter(prefix="/style-transfer")

RESULT_MIME_TYPE = "image/png"
DOWNLOAD_FILENAME = "ai-styled-image.png"
NO_RESULT_DETAIL = "The AI model did not return an image. Please try again."


def _validate_upload(file: UploadFile, name: str) -> None:
    content_type = file.content_type or ""
    if not content_type.startswith("image/") and content_type not in GENERIC_MIME_TYPES:
        raise AppError(status_code=400, detail=f"Invalid {name}: expected an image")
    if file.size is not None and file.size > settings.max_upload_bytes:
        raise AppError(status_code=400, detail=f"Invalid {name}: file too large")


async def _run_style_transfer(subject: UploadFile, reference: UploadFile, instructions: str) -> str:
    _validate_upload(subject, "subject")
    _validate_upload(reference, "reference")

    client = style_transfer.get_style_client()
    try:
        result = await client.generate(subject, reference, instructions)
    except ConfigurationError as e:
        raise AppError(status_code=500, detail=str(e)) from e
    except ModelDeclinedError as e:
        raise AppError(status_code=422, detail=str(e)) from e

    if not result:
        raise AppError(status_code=502, detail=NO_RESULT_DETAIL)
    return result


@router.post("", response_model=StyleTransferResponse)
async def create_style_transfer(
    subject: UploadFile = File(...),
    reference: UploadFile = File(...),
    instructions: str = Form(""),
) -> StyleTransferResponse:
    data = await _run_style_transfer(subject, reference, instructions)
    image = EncodedImage(data=data, mime_type=RESULT_MIME_TYPE)
    return StyleTransferResponse(data=image.data, mime_type=image.mime_type, data_uri=to_data_uri(image))


@router.post("/download")
async def download_style_transfer(
    subject: UploadFile = File(...),
    reference: UploadFile = File(...),
    instructions: str = Form(""),
) -> Response:
    data = await _run_style_transfer(subject, reference, instructions)
    return Response(
        content=base64.b64decode(data),
        media_type=RESULT_MIME_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{DOWNLOAD_FILENAME}"'},
    )
