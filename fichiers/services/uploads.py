from __future__ import annotations

import logging
import time

from sqlmodel import Session

from fichiers.core.errors import DuplicateFilenameError, FichiersError, StorageIOError
from fichiers.core.metrics import MetricsStore
from fichiers.models import FileRecord
from fichiers.services.records import FileRecordStore
from fichiers.storage import FileStorage

logger = logging.getLogger("fichiers")


def store_upload(
    storage: FileStorage,
    session: Session,
    metrics: MetricsStore,
    data: bytes,
    filename: str,
    content_type: str | None,
) -> FileRecord | None:
    """Persist an upload on disk and record its metadata.

    Bytes on disk always reflect the latest upload of ``filename`` while the
    metadata row keeps the first one. Returns the new record, or ``None``
    when the filename was already recorded.
    """
    started = time.perf_counter()
    staged = None
    try:
        staged = storage.stage(data, filename)
        target = storage.path_for(filename)

        record = None
        try:
            record = FileRecordStore(session).save(
                FileRecord(
                    filename=filename,
                    size=len(data),
                    file_type=content_type,
                    file_path=str(target),
                )
            )
        except DuplicateFilenameError:
            logger.info("event=metadata_exists filename=%s", filename)

        try:
            storage.commit(staged, filename)
        except (FichiersError, OSError):
            # The row must not outlive bytes that never reached disk.
            if record is not None:
                FileRecordStore(session).delete(record)
                logger.warning("event=metadata_rolled_back filename=%s", filename)
            raise
        staged = None
    except FichiersError:
        metrics.record_upload_error()
        raise
    except OSError as exc:
        metrics.record_upload_error()
        raise StorageIOError(f"Could not store {filename}: {exc}") from exc
    finally:
        if staged is not None:
            storage.discard(staged)
        metrics.record_upload_duration(time.perf_counter() - started)

    metrics.record_upload(len(data))
    logger.info(
        "event=upload_success filename=%s size_bytes=%s content_type=%s recorded=%s",
        filename,
        len(data),
        content_type,
        record is not None,
    )
    return record
