from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class DensityCurve:
    x: tuple[float, ...]
    density: tuple[float, ...]

    def __len__(self) -> int:
        return len(self.x)

    @property
    def points(self) -> tuple[tuple[float, float], ...]:
        return tuple(zip(self.x, self.density))

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({"x": list(self.x), "density": list(self.density)})


def log_grid(lower: float, upper: float, size: int) -> np.ndarray:
    """Return ``size`` geometrically spaced points over ``[lower, upper]``.

    An inverted domain collapses to ``lower`` so the grid is never descending.
    """
    if size < 1:
        raise ValueError("grid size must be >= 1")
    if lower <= 0:
        raise ValueError("log grid requires a positive lower bound")
    return np.geomspace(lower, max(upper, lower), num=size)


def epanechnikov_kernel(offsets: np.ndarray, bandwidth: float) -> np.ndarray:
    """Epanechnikov weights for ``offsets = x - v`` at the given bandwidth."""
    if bandwidth <= 0:
        raise ValueError("bandwidth must be positive")
    u = np.asarray(offsets, dtype=float) / bandwidth
    return np.where(np.abs(u) <= 1.0, 0.75 * (1.0 - u * u) / bandwidth, 0.0)


def estimate_density(
    values: Sequence[float] | np.ndarray | pd.Series,
    grid: Sequence[float] | np.ndarray,
    bandwidth: float,
) -> DensityCurve:
    """Kernel density of ``values`` evaluated at each grid point, sorted by x."""
    samples = np.asarray(values, dtype=float)
    if samples.size == 0:
        raise ValueError("density estimate requires at least one value")
    points = np.asarray(grid, dtype=float)

    weights = epanechnikov_kernel(points[:, np.newaxis] - samples[np.newaxis, :], bandwidth)
    density = weights.mean(axis=1)

    order = np.argsort(points, kind="stable")
    return DensityCurve(
        x=tuple(float(value) for value in points[order]),
        density=tuple(float(value) for value in density[order]),
    )
