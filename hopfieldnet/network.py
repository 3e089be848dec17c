"""Hopfield network trained with orthogonalised patterns (projection rule)."""

from __future__ import annotations

from collections.abc import Iterator
from typing import NamedTuple

import numpy as np

EPOCHS = 10
_TOLERANCE = 1e-9


class _Epoch(NamedTuple):
    """State after one synchronous update; ``settled`` marks convergence."""

    index: int
    state: np.ndarray
    settled: bool


def _vectors(patterns) -> list[np.ndarray]:
    vectors = [np.asarray(p, dtype=float).ravel() for p in patterns]
    if vectors and any(v.size != vectors[0].size for v in vectors):
        raise ValueError("all patterns must have the same length")
    return vectors


def orthonormalize(patterns) -> list[np.ndarray]:
    """Return an orthonormal basis of the patterns by Gram-Schmidt.

    Patterns that are linearly dependent on earlier ones are dropped.
    """
    basis: list[np.ndarray] = []
    for vector in _vectors(patterns):
        residual = vector.copy()
        for unit in basis:
            residual -= unit * (unit @ vector)
        norm = float(np.linalg.norm(residual))
        if norm > _TOLERANCE:
            basis.append(residual / norm)
    return basis


def train(patterns) -> np.ndarray:
    """Build a weight matrix that stores ``patterns``, with a zero diagonal."""
    vectors = _vectors(patterns)
    if not vectors:
        raise ValueError("at least one pattern is required")
    size = vectors[0].size
    weights = np.zeros((size, size))
    for unit in orthonormalize(vectors):
        weights += np.outer(unit, unit)
    np.fill_diagonal(weights, 0.0)
    return weights


def _iterate(state: np.ndarray, weights: np.ndarray, epochs: int) -> Iterator[_Epoch]:
    previous = int(state.sum())
    for index in range(epochs):
        state = np.sign(weights @ state).astype(np.int64)
        total = int(state.sum())
        settled = total == previous
        yield _Epoch(index, state.copy(), settled)
        if settled:
            return
        previous = total


def recall(state, weights, epochs: int = EPOCHS) -> Iterator[_Epoch]:
    """Update all neurons synchronously, yielding the state after each epoch.

    A neuron becomes +1, 0 or -1 by the sign of its input. Iteration stops
    once the sum of the state no longer changes, or after ``epochs`` epochs.
    """
    current = np.asarray(state, dtype=np.int64).ravel()
    matrix = np.asarray(weights, dtype=float)
    if matrix.shape != (current.size, current.size):
        raise ValueError("weights must be a square matrix matching the state")
    return _iterate(current, matrix, epochs)