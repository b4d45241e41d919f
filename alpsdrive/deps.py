from __future__ import annotations

from fastapi import Request

from .services.drive import DriveOps, DriveRoot
from .services.upload import UploadFinalizer, UploadStager


def get_drive_root(request: Request) -> DriveRoot:
    return request.app.state.drive_root


def get_drive_ops(request: Request) -> DriveOps:
    return request.app.state.drive_ops


def get_upload_stager(request: Request) -> UploadStager:
    return request.app.state.upload_stager


def get_upload_finalizer(request: Request) -> UploadFinalizer:
    return request.app.state.upload_finalizer
