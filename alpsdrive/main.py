from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings, settings
from .errors import DriveError
from .routers import drive
from .services.drive import DriveOps, DriveRoot
from .services.upload import UploadFinalizer, UploadStager

logger = logging.getLogger(__name__)


def _parse_cors_origins(value: str) -> list[str]:
    return [origin.strip() for origin in value.split(',') if origin.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    root: DriveRoot = app.state.drive_root
    staging: Path = app.state.upload_stager.staging_dir
    staging.mkdir(parents=True, exist_ok=True)
    logger.info('Serving drive at %s', root.path)
    yield


async def drive_error_handler(request: Request, exc: DriveError):
    logger.info('%s %s -> %s: %s', request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse({'detail': exc.message}, status_code=exc.status_code)


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception('Unhandled error on %s %s', request.method, request.url.path, exc_info=exc)
    return JSONResponse({'detail': 'Internal server error. Please try again.'}, status_code=500)


def create_app(config: Optional[Settings] = None) -> FastAPI:
    config = config or settings
    app = FastAPI(title=config.app_name, lifespan=lifespan)

    root = DriveRoot(config.drive_root, reserved=[config.staging_dirname])
    staging_dir = root.path / config.staging_dirname
    app.state.drive_root = root
    app.state.drive_ops = DriveOps(root)
    app.state.upload_stager = UploadStager(staging_dir, chunk_bytes=config.upload_chunk_bytes)
    app.state.upload_finalizer = UploadFinalizer(root, staging_dir)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_parse_cors_origins(config.cors_origins),
        allow_methods=['*'],
        allow_headers=['*'],
    )
    app.add_exception_handler(DriveError, drive_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    @app.get('/healthz')
    def healthz():
        return {'ok': True}

    app.include_router(drive.router)
    return app
