"""
Tests for reading temperature matrices and listing temperature files.
"""

import numpy as np
import pytest

from thermovisor.models.models import ThermovisorConfig
from thermovisor.rescaled_image import RescaledImage
from thermovisor.utils.io import (
    find_temperature_files,
    is_temperature_file,
    read_temperature_file,
)


@pytest.fixture
def images_folder(tmp_path):
    (tmp_path / "sample_T500.csv").write_text("20.0,21.0,22.0\n30.0,31.5,32.0\n")
    (tmp_path / "sample_BB_T500.csv").write_text("1,2\n3,4\n")
    (tmp_path / "other_T500.csv").write_text("1,2\n3,5\n")
    (tmp_path / "sample_T1200.csv").write_text("1,2\n3,6\n")
    (tmp_path / "notes.txt").write_text("not a temperature file")
    (tmp_path / "sample_T0.csv").write_text("1,2\n")
    return tmp_path


def test_is_temperature_file():
    assert is_temperature_file("heater_T750.csv").group(1) == "750"
    assert is_temperature_file("heater_T0750.csv") is None
    assert is_temperature_file("heater.csv") is None


def test_read_temperature_file(images_folder):
    image, creation_time = read_temperature_file(images_folder / "sample_T500.csv")
    assert isinstance(image, RescaledImage)
    assert image.shape == (2, 3)
    assert np.allclose(image.initial, [[20.0, 21.0, 22.0], [30.0, 31.5, 32.0]])
    assert image.max == 32.0
    assert creation_time > 0


def test_read_from_configured_folder(images_folder):
    config = ThermovisorConfig(images_folder=str(images_folder))
    image, _ = read_temperature_file("sample_T1200.csv", config=config)
    assert image.initial[1, 1] == 6.0


def test_missing_file(images_folder):
    assert read_temperature_file(images_folder / "missing_T10.csv") is None
    assert read_temperature_file("missing_T10.csv") is None


def test_find_temperature_files(images_folder):
    files = find_temperature_files(images_folder)
    assert set(files) == {"500", "500-1", "B500", "1200"}
    assert files["B500"] == (500.0, images_folder / "sample_BB_T500.csv")
    # files are visited in sorted order
    assert files["500"][1].name == "other_T500.csv"
    assert files["500-1"][1].name == "sample_T500.csv"
    assert files["1200"][0] == 1200.0


def test_find_temperature_files_from_config(images_folder):
    files = find_temperature_files(config=ThermovisorConfig(images_folder=images_folder))
    assert len(files) == 4


def test_find_temperature_files_without_folder():
    with pytest.raises(ValueError, match="images_folder"):
        find_temperature_files()
