from fastapi import APIRouter, Depends, Request
from starlette.datastructures import UploadFile
import logging

from filedrop import config
from filedrop.dependencies import get_storage_service
from filedrop.exceptions import UploadValidationError
from filedrop.schemas.upload_schemas import FileUploadResponse, StoredFileInfo
from filedrop.services.storage_service import StorageService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/upload", tags=["Upload"])

@router.post("", response_model=FileUploadResponse)
async def upload_file(
    request: Request,
    storage: StorageService = Depends(get_storage_service),
):
    """
    Store a single file sent as multipart form data under the ``file`` field.

    A plain text value under ``file`` does not count as a file. More than one
    part under ``file`` is rejected. No size limit or media-type allow-list
    is applied; the declared media type is recorded as sent by the client.
    """
    async with request.form() as form:
        parts = form.getlist(config.UPLOAD_FIELD_NAME)
        files = [part for part in parts if isinstance(part, UploadFile)]

        if not files:
            logger.info("Upload rejected: no file part in request")
            raise UploadValidationError()
        if len(parts) > 1:
            logger.info(f"Upload rejected: {len(parts)} parts under '{config.UPLOAD_FIELD_NAME}'")
            raise UploadValidationError("Unexpected field")

        stored = await storage.save_upload(files[0], field_name=config.UPLOAD_FIELD_NAME)

    return FileUploadResponse(
        message="File uploaded successfully",
        file=StoredFileInfo(**stored.to_dict()),
    )
