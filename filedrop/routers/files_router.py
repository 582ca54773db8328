from fastapi import APIRouter, Depends

from filedrop.dependencies import get_storage_service
from filedrop.schemas.upload_schemas import FileListResponse
from filedrop.services.storage_service import StorageService

router = APIRouter(prefix="/files", tags=["Files"])

@router.get("", response_model=FileListResponse)
def list_files(storage: StorageService = Depends(get_storage_service)):
    """List every entry of the storage directory with its metadata"""
    return FileListResponse(files=storage.list_files())
