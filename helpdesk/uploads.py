"""
File upload storage for avatars and ticket attachments.

Files live under ``UPLOAD_FOLDER`` and are addressed by public URLs of
the form ``/uploads/<subdir>/<name>``:

    image/avatar   user avatars
    image/ticket   images attached to tickets
    file           documents attached to tickets

Usage patterns:
  - Avatar update: load user -> save new avatar -> update row -> delete old file.
  - Attachment: save file -> insert row -> delete file if the insert fails.
  - User / ticket deletion: delete rows -> delete files.
"""

import logging
import os
import uuid

from flask import current_app
from werkzeug.datastructures import FileStorage
from werkzeug.security import safe_join

from helpdesk.errors import bad_request

logger = logging.getLogger(__name__)

MAX_IMAGE_SIZE = 5 * 1024 * 1024
MAX_FILE_SIZE = 10 * 1024 * 1024

URL_PREFIX = "/uploads/"

IMAGE_AVATAR_DIR = "image/avatar"
IMAGE_TICKET_DIR = "image/ticket"
FILE_DIR = "file"

ALLOWED_IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".webp"})
ALLOWED_FILE_EXTENSIONS = frozenset(
    {".pdf", ".doc", ".docx", ".xls", ".xlsx", ".txt"}
)


def _upload_root() -> str:
    return current_app.config["UPLOAD_FOLDER"]


def _extension(filename: str | None) -> str:
    return os.path.splitext(filename or "")[1].lower()


def _file_size(file: FileStorage) -> int:
    """Measure the upload by seeking its stream (content_length is optional)."""
    stream = file.stream
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return size


def ensure_upload_dirs() -> list[str]:
    """Create every upload directory; returns the absolute paths."""
    created = []
    for subdir in (IMAGE_AVATAR_DIR, IMAGE_TICKET_DIR, FILE_DIR):
        path = os.path.join(_upload_root(), subdir)
        os.makedirs(path, exist_ok=True)
        created.append(path)
    return created


# -- Validation ------------------------------------------------------------


def is_image(filename: str | None) -> bool:
    return _extension(filename) in ALLOWED_IMAGE_EXTENSIONS


def validate_image_file(file: FileStorage) -> None:
    if _file_size(file) > MAX_IMAGE_SIZE:
        raise bad_request("Image size exceeds maximum limit of 5MB")
    if not is_image(file.filename):
        raise bad_request(
            "Invalid image type. Only jpg, jpeg, png, and webp are allowed"
        )


def validate_document_file(file: FileStorage) -> None:
    if _file_size(file) > MAX_FILE_SIZE:
        raise bad_request("File size exceeds maximum limit of 10MB")
    if _extension(file.filename) not in ALLOWED_FILE_EXTENSIONS:
        raise bad_request(
            "Invalid file type. Only pdf, doc, docx, xls, xlsx, and txt are allowed"
        )


# -- Saving ----------------------------------------------------------------


def save_avatar_image(file: FileStorage) -> str:
    validate_image_file(file)
    return _save_file(file, IMAGE_AVATAR_DIR)


def save_ticket_image(file: FileStorage) -> str:
    validate_image_file(file)
    return _save_file(file, IMAGE_TICKET_DIR)


def save_document_file(file: FileStorage) -> str:
    validate_document_file(file)
    return _save_file(file, FILE_DIR)


def _save_file(file: FileStorage, subdir: str) -> str:
    """
    Store the upload under a random name and return its public URL.

    The client's filename only contributes its lowercased extension.
    """
    directory = os.path.join(_upload_root(), subdir)
    os.makedirs(directory, exist_ok=True)

    filename = f"{uuid.uuid4().hex}{_extension(file.filename)}"
    file.save(os.path.join(directory, filename))

    url = f"{URL_PREFIX}{subdir}/{filename}"
    logger.debug("Saved upload %s", url)
    return url


# -- Resolution and deletion -----------------------------------------------


def resolve_path(url: str | None) -> str | None:
    """
    Map a public upload URL to a path on disk.

    Returns:
        The absolute path, or None for URLs outside the upload folder.
    """
    if not url or not url.startswith(URL_PREFIX):
        return None
    return safe_join(_upload_root(), url[len(URL_PREFIX):])


def delete_file(url: str | None) -> None:
    """
    Remove the file behind an upload URL.

    Blank URLs and files that are already gone are ignored.

    Raises:
        OSError: If the file exists but cannot be removed.
    """
    path = resolve_path(url)
    if path is None or not os.path.exists(path):
        return
    os.remove(path)
    logger.debug("Deleted upload %s", url)


def delete_files(urls: list[str]) -> list[OSError]:
    """Delete several uploads, collecting failures instead of stopping."""
    errors = []
    for url in urls:
        try:
            delete_file(url)
        except OSError as exc:
            errors.append(exc)
    return errors
