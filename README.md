# hopfieldnet

A Hopfield associative memory that stores a set of black-and-white images
and recalls a stored image from a distorted or noisy one.

Training orthonormalises the patterns (Gram-Schmidt, dropping patterns that
depend linearly on earlier ones) and sums their outer products into a weight
matrix with a zero diagonal, so many similar patterns, such as the ten
digits, can be stored together. Recall updates all neurons at once for up
to a given number of epochs and stops early once the sum of the state stops
changing.

The package also contains image encoders of its own for PNG, BMP, TGA,
Radiance HDR and baseline JPEG.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Commands

### `hopfieldnet`

Trains on one or more images and recalls a test image, writing the state
after every epoch to `output_<epoch>.png`:

```
hopfieldnet learn_0.png learn_1.png learn_2.png -t probe.png -o out -e 10
```

- `learn` (one or more): images to store.
- `-t`, `--test` (required): image to recall from.
- `-o`, `--output`: output directory, created if missing (default: current
  directory).
- `-e`, `--epochs`: maximum number of epochs (default 10).

All images must have the same size. The command prints `learned` after
training, `epoch <n> finish` after each epoch and `learn finish` when the
network has settled.

### `hopfieldnet-noise`

Writes noisy copies of an image as `noisy_<level>.png`:

```
hopfieldnet-noise learn_1.png -o noisy -l 10 20 30 --seed 1
```

- `source`: image to add noise to.
- `-o`, `--output`: output directory (default: current directory).
- `-l`, `--levels`: noise levels in percent (default 10 20 30 40 50 60 70).
- `--seed`: random seed.

For each level, that percentage of the pixel count is drawn at random, with
replacement, and each drawn pixel is inverted; a pixel drawn twice is
inverted back.

Both commands accept `--help`.

## Pixel conventions

Images are read through Pillow and converted to 8-bit greyscale. A pixel of
value 255 counts as "on"; anything else is "off".

- `to_bipolar` maps on to +1 and off to -1 (used for stored patterns).
- `to_binary` maps on to 1 and off to 0 (used for the probe image).
- `to_pixels` maps +1 to 255, 0 to 127 and anything else to 0.

Output images are written as greyscale PNG with the package's own encoder.

## Library use

```python
from hopfieldnet.images import load_pixels, save_pixels, to_binary, to_bipolar, to_pixels
from hopfieldnet.network import recall, train

learned = [load_pixels(path) for path in learning_paths]
weights = train([to_bipolar(image.pixels) for image in learned])

probe = load_pixels(test_path)
for epoch in recall(to_binary(probe.pixels), weights, 10):
    save_pixels(f"output_{epoch.index}.png", to_pixels(epoch.state),
                probe.width, probe.height)
```

- `hopfieldnet.images.load_pixels(path)` returns a named tuple of
  `pixels`, `width` and `height`; `save_pixels(path, pixels, width, height)`
  writes a greyscale PNG.
- `hopfieldnet.network.orthonormalize(patterns)` returns the orthonormal
  basis; `train(patterns)` returns the weight matrix; `recall(state, weights,
  epochs)` yields, per epoch, a named tuple of `index`, `state` and
  `settled`. Mismatched sizes raise `ValueError`.
- `hopfieldnet.noise.flip_random(pattern, level, rng)` returns a noisy copy
  of a bipolar pattern; `level` must lie between 0 and 100.

## Image encoders

Pixel data is given as bytes, left to right and top to bottom, with 1 to 4
interleaved 8-bit components per pixel (grey, grey+alpha, RGB, RGBA). Every
encoder has a `flip` option to write the image upside down, an `encode_*`
function that returns the file's bytes and a `write_*` function that writes
them to a path. Invalid sizes or component counts raise `ValueError`.

- `hopfieldnet.png`: `encode_png` / `write_png`, with an optional row
  `stride`, `force_filter` (0 to 4; otherwise the cheapest filter is chosen
  per row) and `compression_level`; also `paeth`.
- `hopfieldnet.deflate`: `zlib_compress` (fixed Huffman codes, falling back
  to stored blocks when that is smaller), `crc32` and `adler32`.
- `hopfieldnet.rasters`: `encode_bmp` / `write_bmp` (grey expanded to RGB,
  RGBA as a 32-bit bitmap) and `encode_tga` / `write_tga` (run-length
  encoded unless `rle=False`).
- `hopfieldnet.hdr`: `encode_hdr` / `write_hdr` for float data, plus
  `linear_to_rgbe`.
- `hopfieldnet.jpeg`: `encode_jpeg` / `write_jpeg` for baseline JPEG,
  quality 1 to 100 (0 means 90), with 2x2 chroma subsampling at 90 and below;
  also `fdct8`. `hopfieldnet.jpeg_tables.build_quant_tables` builds the
  quantisation tables for a quality.

## What it does not do

The package has no image decoder of its own; reading relies on Pillow.
Trained weights are not saved to or loaded from disk: every run of
`hopfieldnet` trains afresh from the images it is given.