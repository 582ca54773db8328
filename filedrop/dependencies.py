from fastapi import Request

from filedrop.services.storage_service import StorageService


def get_storage_service(request: Request) -> StorageService:
    """Return the storage service attached to the running app"""
    return request.app.state.storage_service
