"""Tests for utility functions."""

import pytest
from pathlib import Path

from media_uploader.utils import HASH_LENGTH, file_hash, list_directory


class TestFileHash:
    """Test the short content hash."""

    def test_known_value(self, tmp_path: Path) -> None:
        """Test the hash of an empty file against its precomputed value."""
        empty = tmp_path / "empty"
        empty.write_bytes(b"")

        # md5("") base64-encoded is 1B2M2Y8AsgTpgAmY7PhCfg==
        assert file_hash(empty) == "1B2M2Y8AsgTp"

    def test_length(self, media_dir: Path) -> None:
        """Test that hashes are always 12 characters long."""
        for name in ["a.png", "b.gif", "same_as_a.png"]:
            assert len(file_hash(media_dir / name)) == HASH_LENGTH == 12

    def test_deterministic(self, media_dir: Path) -> None:
        """Test that hashing the same file twice gives the same result."""
        path = media_dir / "a.png"
        assert file_hash(path) == file_hash(path)

    def test_identical_content_same_hash(self, media_dir: Path) -> None:
        """Test that files with identical bytes share a hash."""
        assert file_hash(media_dir / "a.png") == file_hash(media_dir / "same_as_a.png")

    def test_different_content_different_hash(self, media_dir: Path) -> None:
        """Test that files with different bytes get different hashes."""
        assert file_hash(media_dir / "a.png") != file_hash(media_dir / "b.gif")

    def test_url_safe_alphabet(self, tmp_path: Path) -> None:
        """Test that hashes never contain '+' or '/'."""
        for i in range(200):
            path = tmp_path / f"file{i}"
            path.write_bytes(f"content {i}".encode())
            short_hash = file_hash(path)
            assert "+" not in short_hash
            assert "/" not in short_hash

    def test_large_file(self, tmp_path: Path) -> None:
        """Test hashing a file larger than one read chunk."""
        big = tmp_path / "big.bin"
        big.write_bytes(b"x" * (300 * 1024))

        assert len(file_hash(big)) == 12

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test that an unreadable file raises an I/O error."""
        with pytest.raises(OSError):
            file_hash(tmp_path / "missing.png")


class TestListDirectory:
    """Test directory listing."""

    def test_sorted_children(self, tmp_path: Path) -> None:
        """Test that children are returned sorted by name."""
        for name in ["zebra.png", "alpha.png", "mike.png"]:
            (tmp_path / name).write_bytes(b"fake")

        children = list_directory(tmp_path)

        assert [Path(c).name for c in children] == ["alpha.png", "mike.png", "zebra.png"]

    def test_immediate_children_only(self, media_dir: Path) -> None:
        """Test that nested entries are not included."""
        children = [Path(c).name for c in list_directory(media_dir / "nested")]

        assert children == ["c.jpg", "deeper"]

    def test_empty_directory(self, tmp_path: Path) -> None:
        """Test listing an empty directory."""
        assert list_directory(tmp_path) == []
