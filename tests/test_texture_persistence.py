"""
Tests for texture file persistence.

Tests cover:
- Loading existing, missing and corrupt files
- Save naming with collision suffix
- Directory creation and error propagation
"""

import unittest
import tempfile
from datetime import datetime
from pathlib import Path

import pytest

from DM_Libs.errors import TextureDecodeError, TextureFileNotFoundError
from DM_Libs.PaintLib.pixel_buffer import PixelBuffer
from DM_Libs.TextureStoreLib.texture_persistence import (
    load_texture,
    resolve_save_path,
    save_texture,
)


class TestLoadTexture:
    """Tests for load_texture."""

    def test_missing_file(self, tmp_path):
        """Should raise TextureFileNotFoundError naming the path."""
        missing = tmp_path / "nope.png"

        with pytest.raises(TextureFileNotFoundError) as excinfo:
            load_texture(missing)

        assert str(missing) in str(excinfo.value)
        assert excinfo.value.path == missing

    def test_missing_file_is_file_not_found_error(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_texture(tmp_path / "nope.png")

    def test_directory_is_not_a_file(self, tmp_path):
        with pytest.raises(TextureFileNotFoundError):
            load_texture(tmp_path)

    def test_unsearchable_directory(self, tmp_path, monkeypatch):
        """A permission error while probing the path is reported as not found."""
        def deny(self):
            raise PermissionError(13, "Permission denied", str(self))

        monkeypatch.setattr(Path, "is_file", deny)

        with pytest.raises(TextureFileNotFoundError) as excinfo:
            load_texture(tmp_path / "locked" / "map.png")

        assert isinstance(excinfo.value.__cause__, PermissionError)

    def test_corrupt_file(self, tmp_path):
        """Should raise TextureDecodeError carrying the path."""
        bad = tmp_path / "bad.png"
        bad.write_bytes(b"this is not a png")

        with pytest.raises(TextureDecodeError) as excinfo:
            load_texture(bad)

        assert excinfo.value.path == bad
        assert str(bad) in str(excinfo.value)

    def test_load_saved_texture(self, tmp_path, random_buffer):
        path = save_texture(random_buffer, tmp_path)

        assert load_texture(path) == random_buffer

    def test_accepts_string_path(self, tmp_path, random_buffer):
        path = save_texture(random_buffer, tmp_path)

        assert load_texture(str(path)) == random_buffer


class TestSaveTexture:
    """Tests for save_texture naming and writing."""

    def test_first_save_uses_base_name(self, tmp_path, black_buffer):
        path = save_texture(black_buffer, tmp_path)

        assert path == tmp_path / "DeformMap.png"
        assert path.exists()

    def test_collision_appends_timestamp(self, tmp_path, black_buffer, fixed_clock):
        """A taken name gets _YYMMDDHHMMSS before the extension."""
        first = save_texture(black_buffer, tmp_path, now=fixed_clock)
        second = save_texture(black_buffer, tmp_path, now=fixed_clock)

        assert first.name == "DeformMap.png"
        assert second.name == "DeformMap_260304050607.png"

    def test_two_immediate_saves_are_distinct(self, tmp_path, black_buffer):
        """Saving twice in a row never returns the same path."""
        first = save_texture(black_buffer, tmp_path)
        second = save_texture(black_buffer, tmp_path)

        assert first != second
        assert first.exists() and second.exists()

    def test_same_second_collision_is_reported(self, tmp_path, black_buffer, random_buffer, fixed_clock):
        """A third save in the same second raises instead of overwriting."""
        save_texture(black_buffer, tmp_path, now=fixed_clock)
        second = save_texture(black_buffer, tmp_path, now=fixed_clock)
        before = second.read_bytes()

        with pytest.raises(FileExistsError):
            save_texture(random_buffer, tmp_path, now=fixed_clock)

        assert second.read_bytes() == before

    def test_custom_base_name(self, tmp_path, black_buffer):
        path = save_texture(black_buffer, tmp_path, base_name="Ripple")

        assert path.name == "Ripple.png"

    def test_creates_directories(self, tmp_path, black_buffer):
        target = tmp_path / "a" / "b"
        path = save_texture(black_buffer, target)

        assert path.parent == target

    def test_missing_directory_without_create(self, tmp_path, black_buffer):
        with pytest.raises(OSError):
            save_texture(black_buffer, tmp_path / "missing", create_directories=False)

    @pytest.mark.parametrize("base_name", ["", "  ", "sub/DeformMap", ".."])
    def test_rejects_bad_base_name(self, tmp_path, black_buffer, base_name):
        with pytest.raises(ValueError):
            save_texture(black_buffer, tmp_path, base_name=base_name)


class TestResolveSavePath(unittest.TestCase):
    """Test resolve_save_path on its own."""

    def test_free_name(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = resolve_save_path(Path(tmpdir))
            self.assertEqual(path, Path(tmpdir) / "DeformMap.png")

    def test_does_not_create_files(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            resolve_save_path(Path(tmpdir))
            self.assertEqual(list(Path(tmpdir).iterdir()), [])

    def test_clock_only_used_on_collision(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            calls = []

            def clock():
                calls.append(1)
                return datetime(2030, 12, 31, 23, 59, 58)

            self.assertEqual(resolve_save_path(Path(tmpdir), now=clock).name, "DeformMap.png")
            self.assertEqual(calls, [])

            (Path(tmpdir) / "DeformMap.png").touch()
            path = resolve_save_path(Path(tmpdir), now=clock)
            self.assertEqual(path.name, "DeformMap_301231235958.png")
            self.assertEqual(len(calls), 1)
