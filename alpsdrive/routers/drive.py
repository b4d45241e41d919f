from __future__ import annotations

from typing import Optional, Union

from fastapi import APIRouter, Depends, File, Query, UploadFile
from fastapi.responses import FileResponse, JSONResponse

from ..deps import get_drive_ops, get_drive_root, get_upload_finalizer, get_upload_stager
from ..errors import InvalidUploadError
from ..schemas import ApiResponse, EntryDescriptor
from ..services.drive import DriveOps, DriveRoot, FileStream, Listing
from ..services.upload import UploadFinalizer, UploadStager

router = APIRouter(prefix='/api/drive', tags=['drive'])


def _listing_response(entries: list[EntryDescriptor]) -> JSONResponse:
    return JSONResponse([entry.to_json() for entry in entries])


def _content_response(content: Union[Listing, FileStream]):
    if isinstance(content, FileStream):
        return FileResponse(content.path, media_type=content.media_type)
    return _listing_response(content.entries)


@router.get('')
async def list_root(drive: DriveRoot = Depends(get_drive_root), ops: DriveOps = Depends(get_drive_ops)):
    return _listing_response(await ops.list_entries(drive.path))


@router.get('/{name}')
async def read_entry(name: str, drive: DriveRoot = Depends(get_drive_root), ops: DriveOps = Depends(get_drive_ops)):
    return _content_response(await ops.resolve_content(drive.resolve(name=name)))


@router.get('/{folder}/{name}')
async def read_folder_entry(
    folder: str,
    name: str,
    drive: DriveRoot = Depends(get_drive_root),
    ops: DriveOps = Depends(get_drive_ops),
):
    return _content_response(await ops.resolve_content(drive.resolve(folder, name)))


@router.post('', status_code=201)
async def create_folder(
    name: str = Query(default=''),
    drive: DriveRoot = Depends(get_drive_root),
    ops: DriveOps = Depends(get_drive_ops),
):
    path = drive.resolve(name=name, validate=True)
    await ops.create_directory(path)
    return ApiResponse(ok=True, message='Folder created', data={'path': drive.relative(path)})


@router.post('/{folder}', status_code=201)
async def create_subfolder(
    folder: str,
    name: str = Query(default=''),
    drive: DriveRoot = Depends(get_drive_root),
    ops: DriveOps = Depends(get_drive_ops),
):
    path = drive.resolve(folder, name, validate=True)
    await ops.require_directory(drive.resolve(folder=folder))
    await ops.create_directory(path)
    return ApiResponse(ok=True, message='Folder created', data={'path': drive.relative(path)})


@router.delete('/{name}')
async def delete_entry(name: str, drive: DriveRoot = Depends(get_drive_root), ops: DriveOps = Depends(get_drive_ops)):
    await ops.delete_entry(drive.resolve(name=name))
    return ApiResponse(ok=True, message='Deleted')


@router.delete('/{folder}/{name}')
async def delete_folder_entry(
    folder: str,
    name: str,
    drive: DriveRoot = Depends(get_drive_root),
    ops: DriveOps = Depends(get_drive_ops),
):
    await ops.delete_entry(drive.resolve(folder, name))
    return ApiResponse(ok=True, message='Deleted')


async def _store_upload(
    file: Optional[UploadFile],
    destination,
    stager: UploadStager,
    finalizer: UploadFinalizer,
    drive: DriveRoot,
) -> ApiResponse:
    if file is None:
        raise InvalidUploadError('No file provided')
    try:
        staged = await stager.stage(file)
    finally:
        await file.close()
    target = await finalizer.finalize(staged, destination)
    return ApiResponse(ok=True, message='Uploaded', data={'path': drive.relative(target)})


@router.put('', status_code=201)
async def upload(
    file: Optional[UploadFile] = File(default=None),
    drive: DriveRoot = Depends(get_drive_root),
    stager: UploadStager = Depends(get_upload_stager),
    finalizer: UploadFinalizer = Depends(get_upload_finalizer),
):
    return await _store_upload(file, drive.path, stager, finalizer, drive)


@router.put('/{folder}', status_code=201)
async def upload_to_folder(
    folder: str,
    file: Optional[UploadFile] = File(default=None),
    drive: DriveRoot = Depends(get_drive_root),
    stager: UploadStager = Depends(get_upload_stager),
    finalizer: UploadFinalizer = Depends(get_upload_finalizer),
):
    return await _store_upload(file, drive.resolve(folder=folder), stager, finalizer, drive)
