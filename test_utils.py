#!/usr/bin/env python3
"""
Test Utilities
==============
Weight map loading, dimension validation and JSON helpers.
"""

import numpy as np
import pytest

from config import Config
from utils import (
    InvalidInputError, InputTooLargeError, ValidationError,
    load_weight_map, load_rectangle_sums, validate_dimensions,
    save_json, load_json, safe_divide,
)


def test_error_hierarchy():
    assert issubclass(InvalidInputError, ValidationError)
    assert issubclass(InputTooLargeError, ValidationError)


@pytest.mark.parametrize("width,height,error", [
    (0, 1, InvalidInputError),
    (1, -2, InvalidInputError),
    (True, 1, InvalidInputError),
    ("8", 1, InvalidInputError),
    (32768, 1, InputTooLargeError),
    (1, 100000, InputTooLargeError),
])
def test_validate_dimensions_rejects(width, height, error):
    with pytest.raises(error):
        validate_dimensions(width, height)


def test_validate_dimensions_accepts():
    validate_dimensions(1, 1)
    validate_dimensions(32767, np.int32(640))


def test_load_npy(tmp_path):
    weights = np.arange(6, dtype=np.float32).reshape(2, 3)
    path = tmp_path / "weights.npy"
    np.save(path, weights)

    loaded, sums = load_weight_map(path)

    assert loaded.dtype == np.float64
    np.testing.assert_array_equal(loaded, weights)
    assert sums is None


def test_load_npz_with_sums(tmp_path):
    weights = np.ones((3, 3))
    sums = np.cumsum(np.cumsum(weights, axis=0), axis=1)
    path = tmp_path / "scores.npz"
    np.savez(path, weights=weights, rectangle_sums=sums)

    loaded, loaded_sums = load_weight_map(path)

    np.testing.assert_array_equal(loaded, weights)
    np.testing.assert_array_equal(loaded_sums, sums)


def test_load_npz_without_weights(tmp_path):
    path = tmp_path / "scores.npz"
    np.savez(path, other=np.ones((2, 2)))
    with pytest.raises(InvalidInputError):
        load_weight_map(path)


def test_load_image(tmp_path):
    cv2 = pytest.importorskip('cv2')
    image = np.zeros((4, 5), dtype=np.uint16)
    image[1, 2] = 1000
    path = tmp_path / "weights.png"
    cv2.imwrite(str(path), image)

    loaded, sums = load_weight_map(path)

    assert loaded.shape == (4, 5)
    assert loaded[1, 2] == 1000.0
    assert sums is None


def test_load_rejects_bad_inputs(tmp_path):
    with pytest.raises(InvalidInputError):
        load_weight_map(tmp_path / "missing.npy")

    path = tmp_path / "weights.txt"
    path.write_text("1 2 3")
    with pytest.raises(InvalidInputError):
        load_weight_map(path)

    path = tmp_path / "flat.npy"
    np.save(path, np.ones(4))
    with pytest.raises(InvalidInputError):
        load_weight_map(path)


def test_load_follows_configured_formats(tmp_path, monkeypatch):
    path = tmp_path / "weights.npy"
    np.save(path, np.ones((2, 3)))
    assert load_weight_map(path)[0].shape == (2, 3)

    monkeypatch.setattr(Config, 'ARRAY_FORMATS', ['.npz'])
    with pytest.raises(InvalidInputError):
        load_weight_map(path)


def test_load_rectangle_sums(tmp_path):
    path = tmp_path / "sums.npy"
    np.save(path, np.ones((2, 2)))
    np.testing.assert_array_equal(load_rectangle_sums(path), np.ones((2, 2)))

    with pytest.raises(InvalidInputError):
        load_rectangle_sums(tmp_path / "missing.npy")


def test_json_round_trip(tmp_path):
    path = tmp_path / "out" / "result.json"
    save_json({'score': 1.5}, path)
    assert load_json(path) == {'score': 1.5}


def test_safe_divide():
    assert safe_divide(4, 2) == 2
    assert safe_divide(1, 0) == 0
