"""Generating noisy copies of a pattern image."""

from __future__ import annotations

import argparse
import random
from pathlib import Path

import numpy as np

from .images import load_pixels, save_pixels, to_bipolar, to_pixels

DEFAULT_LEVELS = (10, 20, 30, 40, 50, 60, 70)


def flip_random(pattern, level: int, rng: random.Random | None = None) -> np.ndarray:
    """Return a copy of a bipolar pattern with random neurons inverted.

    ``level`` percent of the pattern's length gives the number of draws;
    positions are drawn with replacement, so one may be flipped twice.
    """
    if not 0 <= level <= 100:
        raise ValueError("noise level must be between 0 and 100")
    values = np.asarray(pattern, dtype=np.int64).ravel().copy()
    rng = rng or random.Random()
    count = int(values.size * (level / 100))
    for _ in range(count):
        index = rng.randrange(values.size)
        values[index] = -1 if values[index] == 1 else 1
    return values


def main(argv=None) -> int:
    """Write noisy versions of an image, one file per noise level."""
    parser = argparse.ArgumentParser(description="Write noisy copies of a black-and-white image.")
    parser.add_argument("source", type=Path, help="image to add noise to")
    parser.add_argument("-o", "--output", type=Path, default=Path("."), help="output directory")
    parser.add_argument("-l", "--levels", type=int, nargs="+", default=list(DEFAULT_LEVELS),
                        help="noise levels in percent")
    parser.add_argument("--seed", type=int, default=None, help="random seed")
    args = parser.parse_args(argv)

    raster = load_pixels(args.source)
    rng = random.Random(args.seed)
    args.output.mkdir(parents=True, exist_ok=True)
    for level in args.levels:
        try:
            noisy = flip_random(to_bipolar(raster.pixels), level, rng)
        except ValueError as error:
            parser.error(str(error))
        save_pixels(args.output / f"noisy_{level}.png", to_pixels(noisy), raster.width, raster.height)
    return 0