from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional, Union
import logging

from filedrop import config
from filedrop.exceptions import StorageReadError, UploadValidationError
from filedrop.routers import demo_router, files_router, upload_router
from filedrop.services.naming import NamingStrategy
from filedrop.services.storage_service import StorageService

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    storage = app.state.storage_service
    logger.info(f"Serving uploads from {storage.upload_dir} at {storage.static_prefix}")
    logger.info(f"Naming strategy: {storage.naming_strategy.value}")
    yield

async def upload_validation_error_handler(request: Request, exc: UploadValidationError):
    return JSONResponse(status_code=400, content={"message": exc.message})

async def storage_read_error_handler(request: Request, exc: StorageReadError):
    return JSONResponse(
        status_code=500,
        content={"message": exc.message, "error": exc.error},
    )

def create_app(
    upload_dir: Optional[Union[str, Path]] = None,
    naming_strategy: Union[NamingStrategy, str] = config.NAMING_STRATEGY,
) -> FastAPI:
    """
    Build the upload service.

    The storage directory is created (recursively) here, before the static
    mount that serves it is attached.
    """
    storage = StorageService(upload_dir=upload_dir, naming_strategy=naming_strategy)

    app = FastAPI(title="filedrop", lifespan=lifespan)
    app.state.storage_service = storage

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(UploadValidationError, upload_validation_error_handler)
    app.add_exception_handler(StorageReadError, storage_read_error_handler)

    app.include_router(demo_router.router)
    app.include_router(upload_router.router)
    app.include_router(files_router.router)

    app.mount(
        storage.static_prefix,
        StaticFiles(directory=storage.upload_dir),
        name="uploads",
    )

    return app
