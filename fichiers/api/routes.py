from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse
from sqlmodel import Session

from fichiers.config import DELETE_REMOVES_METADATA
from fichiers.core.errors import FichiersError, InvalidFilenameError, StorageIOError
from fichiers.core.metrics import metrics
from fichiers.db import get_session
from fichiers.services.conversions import FileFormat, convert_file
from fichiers.services.records import FileRecordStore
from fichiers.services.uploads import store_upload
from fichiers.storage import FileStorage

router = APIRouter(prefix="/files")
metrics_router = APIRouter()

logger = logging.getLogger("fichiers")


def get_storage(request: Request) -> FileStorage:
    return request.app.state.storage


@router.post("/upload")
def upload(
    file: UploadFile = File(...),
    storage: FileStorage = Depends(get_storage),
    session: Session = Depends(get_session),
):
    if not file.filename:
        raise InvalidFilenameError(file.filename)
    logger.info("event=upload_attempt filename=%s", file.filename)
    try:
        data = file.file.read()
        store_upload(storage, session, metrics, data, file.filename, file.content_type)
    except InvalidFilenameError:
        raise
    except (FichiersError, OSError) as exc:
        logger.error("event=upload_failed filename=%s error=%s", file.filename, exc)
        raise StorageIOError("Error while uploading the file.") from exc
    return PlainTextResponse(f"File {file.filename} uploaded successfully!")


@router.post("/convert")
def convert(
    file: UploadFile = File(...),
    format_query: Optional[FileFormat] = Query(None, alias="format"),
    format_form: Optional[FileFormat] = Form(None, alias="format"),
    storage: FileStorage = Depends(get_storage),
):
    fmt = format_query or format_form
    if fmt is None:
        return PlainTextResponse("Missing conversion format (PDF or CSV).", status_code=400)
    if not file.filename:
        raise InvalidFilenameError(file.filename)
    try:
        new_name = convert_file(storage, file.file.read(), file.filename, fmt)
    except InvalidFilenameError:
        raise
    except (FichiersError, OSError) as exc:
        logger.error("event=convert_failed filename=%s error=%s", file.filename, exc)
        raise StorageIOError("Error during conversion.") from exc
    metrics.record_conversion()
    return PlainTextResponse(f"File converted successfully! Download it at /files/download/{new_name}")


@router.get("/listAll")
def list_all(storage: FileStorage = Depends(get_storage)):
    try:
        names = storage.list_all()
    except StorageIOError as exc:
        logger.error("event=list_failed error=%s", exc.message)
        return JSONResponse([], status_code=500)
    return names


@router.get("/search")
def search(file: str = Query(...), storage: FileStorage = Depends(get_storage)):
    if not storage.exists(file):
        logger.warning("event=search_miss filename=%s", file)
        return PlainTextResponse(f"File {file} does not exist.", status_code=404)
    logger.info("event=search_hit filename=%s", file)
    return PlainTextResponse(f"File {file} was found!")


@router.get("/metadata")
def metadata(file: str = Query(...), storage: FileStorage = Depends(get_storage)):
    try:
        attributes = storage.attributes(file)
    except StorageIOError as exc:
        logger.error("event=metadata_failed filename=%s error=%s", file, exc.message)
        raise StorageIOError("Error while reading the file metadata.") from exc
    logger.info("event=metadata_read filename=%s", file)
    return attributes


@router.get("/download/{filename}")
def download(filename: str, storage: FileStorage = Depends(get_storage)):
    logger.info("event=download_attempt filename=%s", filename)
    try:
        path = storage.open_for_download(filename)
    except OSError as exc:
        logger.error("event=download_failed filename=%s error=%s", filename, exc)
        raise StorageIOError("Error while downloading the file.") from exc
    metrics.record_download()
    return FileResponse(path, filename=filename)


@router.delete("/{filename}")
def delete(
    filename: str,
    storage: FileStorage = Depends(get_storage),
    session: Session = Depends(get_session),
):
    try:
        storage.delete(filename)
    except StorageIOError as exc:
        logger.error("event=delete_failed filename=%s error=%s", filename, exc.message)
        raise StorageIOError("Error while deleting the file.") from exc
    metrics.record_deletions(1)
    logger.info("event=file_deleted filename=%s", filename)

    if DELETE_REMOVES_METADATA:
        records = FileRecordStore(session)
        record = records.find_by_filename(filename)
        if record is not None:
            records.delete(record)
            logger.info("event=metadata_deleted filename=%s", filename)

    return PlainTextResponse(f"File {filename} deleted successfully!")


@metrics_router.get("/metrics")
def metrics_snapshot():
    response = JSONResponse(metrics.snapshot())
    response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate"
    return response
