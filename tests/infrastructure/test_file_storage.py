"""Local File Storage — data-URL decoding, pass-through and moves."""

import base64
from pathlib import Path

import pytest

from agrilink.config import get_settings
from agrilink.core.errors import ValidationError
from agrilink.infrastructure.file_storage import (
    is_stored_upload, move_file, resolve_public_path, save_data_url,
)

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image"
PNG_DATA_URL = "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode()


def _on_disk(public_path: str) -> Path:
    return Path(get_settings().upload_dir) / public_path.removeprefix("/uploads/")


def test_data_url_is_written_under_folder():
    path = save_data_url(PNG_DATA_URL, "products/test")
    assert path.startswith("/uploads/products/test/")
    assert path.endswith(".png")
    assert _on_disk(path).read_bytes() == PNG_BYTES


def test_existing_urls_pass_through():
    assert save_data_url("https://cdn.example.com/a.jpg", "products") == "https://cdn.example.com/a.jpg"
    assert save_data_url("/uploads/products/x.png", "products") == "/uploads/products/x.png"


def test_malformed_data_url_rejected():
    with pytest.raises(ValidationError):
        save_data_url("data:image/png;base64,@@not-base64@@", "products")
    with pytest.raises(ValidationError):
        save_data_url("data:nonsense", "products")


def test_move_file_relocates_upload():
    path = save_data_url(PNG_DATA_URL, "verification/u1")
    moved = move_file(path, "rejected_documents/u1")
    assert moved.startswith("/uploads/rejected_documents/u1/")
    assert _on_disk(moved).exists()
    assert not _on_disk(path).exists()


def test_move_file_leaves_unknown_paths():
    assert move_file("https://cdn.example.com/id.png", "rejected") == "https://cdn.example.com/id.png"
    assert move_file("/uploads/missing/file.png", "rejected") == "/uploads/missing/file.png"


def test_move_file_refuses_paths_outside_upload_dir():
    outside = Path(get_settings().upload_dir).resolve().parent / "agrilink-outside.env"
    outside.write_text("DATABASE_PASSWORD=hunter2")
    try:
        escaped = f"/uploads/../{outside.name}"
        assert resolve_public_path(escaped) is None
        assert move_file(escaped, "rejected_documents/u1") == escaped
        assert outside.read_text() == "DATABASE_PASSWORD=hunter2"
    finally:
        outside.unlink()


def test_is_stored_upload_checks_folder():
    path = save_data_url(PNG_DATA_URL, "verification/u2")
    assert is_stored_upload(path, "verification/u2")
    assert not is_stored_upload(path, "verification/u3")
    assert not is_stored_upload("/uploads/verification/u2/../../x.png", "verification/u2")
    assert not is_stored_upload("/uploads/verification/u2/nothing.png", "verification/u2")
