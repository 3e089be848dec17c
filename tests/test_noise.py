import random

import numpy as np
import pytest

from hopfieldnet.images import load_pixels, save_pixels
from hopfieldnet.noise import flip_random, main

PATTERN = np.array([1, -1] * 32)


def test_level_zero_changes_nothing():
    assert np.array_equal(flip_random(PATTERN, 0, random.Random(1)), PATTERN)


def test_flips_stay_bipolar_and_within_count():
    result = flip_random(PATTERN, 50, random.Random(7))
    assert set(result.tolist()) <= {-1, 1}
    differing = int(np.sum(result != PATTERN))
    assert differing <= 32
    assert differing % 2 == 0


def test_odd_number_of_draws_changes_something():
    result = flip_random(PATTERN, 50, random.Random(3))
    short = flip_random(PATTERN[:10], 10, random.Random(3))
    assert int(np.sum(short != PATTERN[:10])) == 1
    assert result.shape == PATTERN.shape


def test_same_seed_gives_same_noise():
    first = flip_random(PATTERN, 30, random.Random(42))
    second = flip_random(PATTERN, 30, random.Random(42))
    assert np.array_equal(first, second)


def test_input_is_not_modified():
    pattern = PATTERN.copy()
    flip_random(pattern, 70, random.Random(5))
    assert np.array_equal(pattern, PATTERN)


@pytest.mark.parametrize("level", [-1, 101])
def test_invalid_level_raises(level):
    with pytest.raises(ValueError):
        flip_random(PATTERN, level)


def test_main_writes_one_image_per_level(tmp_path):
    source = tmp_path / "learn.png"
    pixels = bytes([255, 0] * 32)
    save_pixels(source, pixels, 8, 8)
    out = tmp_path / "noisy"
    assert main([str(source), "-o", str(out), "--seed", "1", "-l", "0", "40"]) == 0
    assert load_pixels(out / "noisy_0.png").pixels == pixels
    noisy = load_pixels(out / "noisy_40.png")
    assert (noisy.width, noisy.height) == (8, 8)
    assert set(noisy.pixels) <= {0, 255}


def test_main_default_levels(tmp_path):
    source = tmp_path / "learn.png"
    save_pixels(source, bytes([255] * 16), 4, 4)
    main([str(source), "-o", str(tmp_path), "--seed", "2"])
    names = sorted(p.name for p in tmp_path.glob("noisy_*.png"))
    assert names == [f"noisy_{level}.png" for level in (10, 20, 30, 40, 50, 60, 70)]