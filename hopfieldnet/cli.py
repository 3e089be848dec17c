"""Command line: train on pattern images and recall a test image."""

from __future__ import annotations

import argparse
from pathlib import Path

from .images import load_pixels, save_pixels, to_binary, to_bipolar, to_pixels
from .network import EPOCHS, recall, train


def main(argv=None) -> int:
    """Train on the learn images, then write one output image per recall epoch."""
    parser = argparse.ArgumentParser(description="Recall a pattern with a Hopfield network.")
    parser.add_argument("learn", type=Path, nargs="+", help="images to store")
    parser.add_argument("-t", "--test", type=Path, required=True, help="image to recall from")
    parser.add_argument("-o", "--output", type=Path, default=Path("."), help="output directory")
    parser.add_argument("-e", "--epochs", type=int, default=EPOCHS, help="maximum number of epochs")
    args = parser.parse_args(argv)

    learned = [load_pixels(path) for path in args.learn]
    probe = load_pixels(args.test)
    size = (probe.width, probe.height)
    if any((image.width, image.height) != size for image in learned):
        parser.error("all images must have the same size")

    weights = train([to_bipolar(image.pixels) for image in learned])
    print("learned")

    args.output.mkdir(parents=True, exist_ok=True)
    for epoch in recall(to_binary(probe.pixels), weights, args.epochs):
        print(f"epoch {epoch.index} finish")
        save_pixels(args.output / f"output_{epoch.index}.png", to_pixels(epoch.state), *size)
        if epoch.settled:
            print("learn finish")
    return 0