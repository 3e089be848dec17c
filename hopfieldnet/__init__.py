"""Hopfield associative memory for black-and-white images, with PNG, BMP, TGA, HDR and JPEG encoders."""

__version__ = "0.1.0"