"""Local File Storage — persists data-URL uploads under the configured upload directory.

Invariants:
    - Stored files are addressed by a public path "/uploads/{folder}/{name}"
    - Values that are already URLs (http(s) or /uploads/...) pass through untouched
    - Malformed data URLs → ValidationError, nothing written
    - Public paths only ever resolve inside the upload directory; anything that
      escapes it is never read, moved or deleted
"""

import base64
import binascii
import logging
import re
import shutil
import uuid
from pathlib import Path

from agrilink.config import get_settings
from agrilink.core.errors import ValidationError

logger = logging.getLogger(__name__)

PUBLIC_PREFIX = "/uploads"

_DATA_URL = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>.+)$", re.DOTALL)
_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
    "application/pdf": "pdf",
}


def is_data_url(value: str) -> bool:
    return value.startswith("data:")


def _root() -> Path:
    return Path(get_settings().upload_dir)


def save_data_url(data_url: str, folder: str) -> str:
    """Decode and store a base64 data URL; return its public path."""
    if not is_data_url(data_url):
        return data_url
    match = _DATA_URL.match(data_url)
    if not match:
        raise ValidationError("Invalid file data", field="file")
    try:
        content = base64.b64decode(match.group("data"), validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("Invalid file data", field="file")

    ext = _EXTENSIONS.get(match.group("mime"), "bin")
    name = f"{uuid.uuid4().hex}.{ext}"
    target = _root() / folder / name
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(content)
    logger.info(f"Stored upload {folder}/{name} ({len(content)} bytes)")
    return f"{PUBLIC_PREFIX}/{folder}/{name}"


def resolve_public_path(public_path: str) -> Path | None:
    """Filesystem path behind "/uploads/...", or None when it escapes the upload dir."""
    if not public_path.startswith(f"{PUBLIC_PREFIX}/"):
        return None
    root = _root().resolve()
    candidate = (root / public_path[len(PUBLIC_PREFIX) + 1:]).resolve()
    if candidate == root or not candidate.is_relative_to(root):
        return None
    return candidate


def is_stored_upload(value: str, folder: str) -> bool:
    """True when value is a public path that save_data_url wrote under folder."""
    path = resolve_public_path(value)
    if path is None:
        return False
    return path.is_relative_to((_root() / folder).resolve()) and path.is_file()


def move_file(public_path: str, folder: str) -> str:
    """Move a stored upload into another folder; unknown paths are returned as-is."""
    source = resolve_public_path(public_path)
    if source is None:
        if public_path.startswith(f"{PUBLIC_PREFIX}/"):
            logger.warning(f"Refusing to move {public_path}: outside upload directory")
        return public_path
    if not source.is_file():
        logger.warning(f"Upload {public_path} missing, not moved")
        return public_path
    target_dir = (_root() / folder).resolve()
    if not target_dir.is_relative_to(_root().resolve()):
        raise ValidationError("Invalid upload folder", field="folder")
    target_dir.mkdir(parents=True, exist_ok=True)
    shutil.move(str(source), str(target_dir / source.name))
    return f"{PUBLIC_PREFIX}/{folder}/{source.name}"
