import math
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

import numpy as np

TREE_HEIGHT = 14.0
TREE_RADIUS = 6.0
SCATTER_RADIUS = 12.0
GOLDEN_RATIO = 1.618
PHOTO_CAPACITY = 0

# photo scatter box, roughly in front of the camera
PHOTO_SCATTER_SPAN_XY = 15.0
PHOTO_SCATTER_SPAN_Z = 10.0
PHOTO_SCATTER_FORWARD = 5.0


class ElementKind(str, Enum):
    SPHERE = "SPHERE"
    CUBE = "CUBE"
    PHOTO = "PHOTO"


def hex_to_rgb(value: str) -> Tuple[float, float, float]:
    value = value.lstrip("#")
    return tuple(int(value[i : i + 2], 16) / 255.0 for i in (0, 2, 4))


COLORS = {
    "GOLD_METALLIC": "#D4AF37",
    "RED_CHRISTMAS": "#B01B2E",
    "GREEN_MATTE": "#2F5233",
}


@dataclass(frozen=True)
class Pose:
    position: Tuple[float, float, float]


# --------------------------------------------------------
# AMBIENT PARTICLES
# --------------------------------------------------------
def particle_tree_pose(i: int, count: int, height=TREE_HEIGHT, radius=TREE_RADIUS) -> Pose:
    """Spiral cone: narrows toward the top, winds 5 extra turns over its height."""
    if count <= 0:
        raise ValueError("particle count must be positive to place particle %d" % i)
    y_norm = i / count
    y = (y_norm - 0.5) * height
    r = (1.0 - y_norm) * radius
    angle = i * 0.15 + y_norm * math.pi * 10
    return Pose((math.cos(angle) * r, y, math.sin(angle) * r))


def particle_scatter_pose(rng: np.random.Generator, radius=SCATTER_RADIUS) -> Pose:
    """Uniform point inside a ball (cube-root radius, inverse-cosine latitude)."""
    theta = rng.random() * math.pi * 2
    phi = math.acos(rng.random() * 2 - 1)
    r = math.pow(rng.random(), 1.0 / 3.0) * radius
    return Pose(
        (
            r * math.sin(phi) * math.cos(theta),
            r * math.sin(phi) * math.sin(theta),
            r * math.cos(phi),
        )
    )


def particle_look(rng: np.random.Generator):
    """Pick kind, colour and base scale: 30% gold cubes, spheres 40% red / 60% green."""
    kind = ElementKind.CUBE if rng.random() > 0.7 else ElementKind.SPHERE
    if kind is ElementKind.CUBE:
        color = COLORS["GOLD_METALLIC"]
    else:
        color = COLORS["RED_CHRISTMAS"] if rng.random() > 0.6 else COLORS["GREEN_MATTE"]
    scale = rng.random() * 0.3 + 0.1
    return kind, hex_to_rgb(color), scale


# --------------------------------------------------------
# PHOTO CARDS
# --------------------------------------------------------
def photo_tree_pose(i: int, count: int, height=TREE_HEIGHT, radius=TREE_RADIUS) -> Pose:
    """Golden-angle spiral just outside the ornament shell."""
    count = max(count, i + 1)
    y_norm = (i + 1) / (count + 1)
    y = (y_norm - 0.5) * height * 0.8
    r = (1.0 - y_norm) * radius + 1.5
    angle = i * (math.pi * 2 / GOLDEN_RATIO)
    return Pose((math.cos(angle) * r, y, math.sin(angle) * r))


def photo_scatter_pose(rng: np.random.Generator) -> Pose:
    return Pose(
        (
            (rng.random() - 0.5) * PHOTO_SCATTER_SPAN_XY,
            (rng.random() - 0.5) * PHOTO_SCATTER_SPAN_XY,
            (rng.random() - 0.5) * PHOTO_SCATTER_SPAN_Z + PHOTO_SCATTER_FORWARD,
        )
    )
