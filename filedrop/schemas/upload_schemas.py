from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime

class StoredFileInfo(BaseModel):
    filename: str
    path: str
    size: int
    mimetype: str

class FileUploadResponse(BaseModel):
    message: str
    file: StoredFileInfo

class FileListingEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    filename: str
    size: int
    mtime: datetime
    url: str
    is_image: bool = Field(alias="isImage")

class FileListResponse(BaseModel):
    files: List[FileListingEntry]

class ErrorResponse(BaseModel):
    message: str
    error: Optional[str] = None
