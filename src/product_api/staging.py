"""
Staging of multipart attachments on local disk.

Each attachment is copied into the upload directory under a random name
before it is handed to the asset uploader.
"""

import logging
import os
import shutil
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from fastapi import UploadFile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StagedFile:
    """An attachment written to the staging directory."""
    field_name: str
    path: str
    filename: Optional[str]
    content_type: Optional[str]


def stage_upload(upload: UploadFile, field_name: str, upload_dir: str) -> StagedFile:
    """Copy an uploaded file into `upload_dir` and describe where it landed."""
    directory = Path(upload_dir)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / uuid.uuid4().hex

    upload.file.seek(0)
    with open(path, "wb") as staged:
        shutil.copyfileobj(upload.file, staged)

    logger.debug(f"Staged {field_name} ({upload.filename}) at {path}")
    return StagedFile(
        field_name=field_name,
        path=str(path),
        filename=upload.filename,
        content_type=upload.content_type,
    )


def discard_staged(staged_files: Iterable[StagedFile]) -> None:
    """Remove whatever staged files are still on disk."""
    for staged in staged_files:
        if not os.path.exists(staged.path):
            continue
        try:
            os.remove(staged.path)
            logger.info(f"Removed leftover staged file: {staged.path}")
        except OSError as e:
            logger.error(f"Error deleting staged file {staged.path}: {str(e)}")
