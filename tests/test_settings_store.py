"""
Unit tests for painter settings and settings_store.

Tests settings serialization, validation and JSON file persistence.
"""

import json
import tempfile
from pathlib import Path

import pytest

from DM_Libs.errors import InvalidDimensionError, InvalidParameterError
from DM_Libs.PaintLib.color_ops import ClampChannel
from DM_Libs.SessionLib.painter_settings import PaintMode, PainterSettings
from DM_Libs.SessionLib.settings_store import (
    get_data_dir,
    get_settings_path,
    load_settings,
    save_settings,
)


class TestPainterSettings:
    """Tests for PainterSettings."""

    def test_defaults(self):
        """Defaults match the painter's initial inspector values."""
        settings = PainterSettings()

        assert settings.paint_mode is PaintMode.SCALE_X
        assert settings.paint_power == 0.05
        assert settings.paint_sigma == 10.0
        assert settings.paint_clamp == (0.0, 1.0)
        assert settings.init_size == (512, 512)
        assert settings.init_color == (0.5, 0.5, 0.0, 1.0)
        assert settings.texture_base_name == "DeformMap"

    def test_mode_selects_tint_and_channel(self):
        settings = PainterSettings()

        assert settings.paint_color == settings.paint_color_l
        assert settings.clamp_channel is ClampChannel.R

        settings.paint_mode = PaintMode.SCALE_Y
        assert settings.paint_color == settings.paint_color_r
        assert settings.clamp_channel is ClampChannel.G

    def test_dict_round_trip(self):
        settings = PainterSettings(
            paint_mode=PaintMode.SCALE_Y,
            paint_power=1.5,
            paint_clamp=(-0.5, 0.5),
            init_size=(64, 32),
            save_directory="/tmp/maps",
        )

        assert PainterSettings.from_dict(settings.to_dict()) == settings

    def test_to_dict_is_json_friendly(self):
        data = PainterSettings().to_dict()

        assert data["paint_mode"] == "ScaleX"
        assert data["init_size"] == [512, 512]
        assert "extra" not in data
        json.dumps(data)

    def test_from_dict_ignores_unknown_keys(self):
        settings = PainterSettings.from_dict({"paint_sigma": 4, "sample_object_count": [3, 3]})

        assert settings.paint_sigma == 4.0
        assert settings.extra == {"sample_object_count": [3, 3]}

    @pytest.mark.parametrize(
        "data",
        [
            {"paint_mode": "ScaleZ"},
            {"paint_power": "strong"},
            {"paint_clamp": [0.0]},
            {"init_color": [1.0, 0.0]},
        ],
    )
    def test_from_dict_rejects_bad_values(self, data):
        with pytest.raises(InvalidParameterError):
            PainterSettings.from_dict(data)

    def test_validate(self):
        PainterSettings().validate()

        with pytest.raises(InvalidParameterError):
            PainterSettings(paint_sigma=-1.0).validate()
        with pytest.raises(InvalidParameterError):
            PainterSettings(paint_clamp=(1.0, 0.0)).validate()
        with pytest.raises(InvalidDimensionError):
            PainterSettings(init_size=(0, 10)).validate()

    @pytest.mark.parametrize(
        "data",
        [
            {"paint_sigma": "nan"},
            {"paint_power": "inf"},
            {"paint_power": "-inf"},
            {"paint_clamp": ["nan", 1.0]},
            {"paint_clamp": [0.0, "inf"]},
        ],
    )
    def test_validate_rejects_non_finite(self, data):
        settings = PainterSettings.from_dict(data)

        with pytest.raises(InvalidParameterError):
            settings.validate()

    @pytest.mark.parametrize("base_name", ["", "  ", "sub/DeformMap", "..", 7])
    def test_validate_rejects_bad_base_name(self, base_name):
        with pytest.raises(InvalidParameterError):
            PainterSettings(texture_base_name=base_name).validate()

    def test_validate_rejects_non_string_save_directory(self):
        with pytest.raises(InvalidParameterError):
            PainterSettings(save_directory=42).validate()

        PainterSettings(save_directory="maps").validate()


class TestSettingsStore:
    """Tests for settings file persistence."""

    def test_creates_data_directory(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            data_dir = get_data_dir(Path(tmpdir))

            assert data_dir.is_dir()
            assert data_dir.name == "DeformMaps"

    def test_missing_file_gives_defaults(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            assert load_settings(Path(tmpdir)) == PainterSettings()

    def test_save_and_load(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            base_dir = Path(tmpdir)
            settings = PainterSettings(paint_sigma=3.5, paint_mode=PaintMode.SCALE_Y)

            path = save_settings(base_dir, settings)

            assert path == get_settings_path(base_dir)
            assert json.loads(path.read_text(encoding="utf-8"))["schema_version"] == 1
            assert load_settings(base_dir) == settings

    def test_malformed_json(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            base_dir = Path(tmpdir)
            get_settings_path(base_dir).write_text("{not json", encoding="utf-8")

            with pytest.raises(ValueError):
                load_settings(base_dir)

    def test_non_object_json(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            base_dir = Path(tmpdir)
            get_settings_path(base_dir).write_text("[1, 2]", encoding="utf-8")

            with pytest.raises(ValueError):
                load_settings(base_dir)
