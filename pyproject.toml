[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hopfieldnet"
version = "0.1.0"
description = "Hopfield associative memory for recalling black-and-white images, with small PNG, BMP, TGA, HDR and JPEG encoders"
requires-python = ">=3.10"
dependencies = [
    "numpy",
    "pillow",
]
keywords = [
    "hopfield",
    "neural-network",
    "associative-memory",
    "pattern-recognition",
    "png",
    "jpeg",
    "image-encoder",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
    "Topic :: Multimedia :: Graphics :: Graphics Conversion",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
hopfieldnet = "hopfieldnet.cli:main"
hopfieldnet-noise = "hopfieldnet.noise:main"

[tool.hatch.build.targets.wheel]
packages = ["hopfieldnet"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
