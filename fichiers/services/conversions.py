from __future__ import annotations

import logging
from enum import Enum

from fichiers.storage import FileStorage

logger = logging.getLogger("fichiers")


class FileFormat(str, Enum):
    PDF = "PDF"
    CSV = "CSV"


def converted_name(filename: str, fmt: FileFormat) -> str:
    # Every ".txt" occurrence is swapped; other extensions are left as they are.
    return filename.replace(".txt", "." + fmt.value.lower())


def convert_file(storage: FileStorage, data: bytes, filename: str, fmt: FileFormat) -> str:
    """Store ``data`` verbatim under the converted name and return that name.

    No transcoding takes place and no metadata row is written.
    """
    new_name = converted_name(filename, fmt)
    storage.write(new_name, data)
    logger.info("event=convert_success filename=%s converted=%s format=%s", filename, new_name, fmt.value)
    return new_name
