import math
from typing import MutableMapping, Sequence, Tuple, Union

import numpy as np

Point = Tuple[float, float, float]
LandmarkLike = Union[Sequence[float], MutableMapping[str, float]]

UP = np.array([0.0, 1.0, 0.0])


# ==========================================
# 1. LANDMARK MATH (Pure Functions)
# ==========================================
def extract_point(entry: Union[LandmarkLike, object]) -> Point:
    if hasattr(entry, "x") and hasattr(entry, "y") and hasattr(entry, "z"):
        return (float(entry.x), float(entry.y), float(entry.z))
    if isinstance(entry, dict):
        return (float(entry.get("x", 0.0)), float(entry.get("y", 0.0)), float(entry.get("z", 0.0)))
    if isinstance(entry, (list, tuple)) and len(entry) >= 3:
        return (float(entry[0]), float(entry[1]), float(entry[2]))
    raise ValueError("Unsupported landmark format; expected object with x,y,z or sequence of 3 values.")


def vec_dist(a: Point, b: Point) -> float:
    return math.sqrt((a[0] - b[0]) ** 2 + (a[1] - b[1]) ** 2 + (a[2] - b[2]) ** 2)


def midpoint(a: Point, b: Point) -> Point:
    return ((a[0] + b[0]) / 2, (a[1] + b[1]) / 2, (a[2] + b[2]) / 2)


# ==========================================
# 2. INTERPOLATION
# ==========================================
def lerp(current, target, alpha):
    """Move `current` a fixed fraction `alpha` of the way to `target`.

    Works on floats and numpy arrays alike. The fraction is applied per call,
    not per second, so convergence speed follows the tick rate.
    """
    return current + (target - current) * alpha


# ==========================================
# 3. ORIENTATION (row-wise over (n, 3) arrays)
# ==========================================
def _normalize_rows(v: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    lengths = np.linalg.norm(v, axis=1)
    valid = lengths > 1e-6
    out = np.zeros_like(v)
    out[valid] = v[valid] / lengths[valid, None]
    return out, valid


def basis_facing(forward: np.ndarray) -> np.ndarray:
    """
    Rotation matrices whose local +Z axis points along each `forward` row,
    keeping +Y as close to world up as possible. Degenerate rows get identity.
    """
    forward = np.atleast_2d(np.asarray(forward, dtype=np.float64))
    z, valid = _normalize_rows(forward)
    x, x_valid = _normalize_rows(np.cross(UP, z))
    # forward parallel to up
    x[~x_valid] = (1.0, 0.0, 0.0)
    y = np.cross(z, x)

    rot = np.stack((x, y, z), axis=2)
    rot[~valid] = np.eye(3)
    return rot


def rotation_facing_point(positions: np.ndarray, target) -> np.ndarray:
    return basis_facing(np.asarray(target, dtype=np.float64) - positions)


def rotation_facing_outward(positions: np.ndarray) -> np.ndarray:
    """
    Look at the point on the vertical axis at the same height, then turn
    half a revolution so the front faces away from the axis.
    """
    positions = np.atleast_2d(positions)
    towards_axis = np.zeros_like(positions, dtype=np.float64)
    towards_axis[:, 0] = -positions[:, 0]
    towards_axis[:, 2] = -positions[:, 2]
    return basis_facing(-towards_axis)


def compose_matrices(positions: np.ndarray, rotations: np.ndarray, scales: np.ndarray) -> np.ndarray:
    """(n, 4, 4) column-vector transforms, translation in the last column."""
    n = len(positions)
    m = np.zeros((n, 4, 4), dtype=np.float32)
    m[:, :3, :3] = rotations * np.asarray(scales, dtype=np.float64).reshape(n, 1, 1)
    m[:, :3, 3] = positions
    m[:, 3, 3] = 1.0
    return m
