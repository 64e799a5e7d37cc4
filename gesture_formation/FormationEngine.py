from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from gesture_formation import Formations
from gesture_formation.Formations import ElementKind, Pose
from gesture_formation.Geometry import (
    compose_matrices,
    lerp,
    rotation_facing_outward,
    rotation_facing_point,
)
from gesture_formation.ModeStateMachine import AppMode

KIND_ORDER = (ElementKind.SPHERE, ElementKind.CUBE, ElementKind.PHOTO)
FLOAT_AMPLITUDE = {
    ElementKind.SPHERE: 0.02,
    ElementKind.CUBE: 0.02,
    ElementKind.PHOTO: 0.005,
}


@dataclass(frozen=True)
class VisualElement:
    """Static description of one element. Targets never change after creation."""

    id: int
    kind: ElementKind
    tree_pose: Pose
    scatter_pose: Pose
    color: Tuple[float, float, float]
    base_scale: float = 1.0
    phase: float = 0.0
    url: Optional[str] = None


@dataclass
class InstanceBuffer:
    """Per-kind transforms ready for an instanced draw call."""

    kind: ElementKind
    ids: np.ndarray  # (n,)
    matrices: np.ndarray  # (n, 4, 4) float32
    colors: np.ndarray  # (n, 3) float32

    def __len__(self):
        return len(self.ids)

    def to_dict(self):
        """Serialize to JSON-friendly dict; matrices flattened column-major."""
        return {
            "kind": self.kind.value,
            "count": len(self),
            "ids": self.ids.tolist(),
            "matrices": np.transpose(self.matrices, (0, 2, 1)).reshape(-1).tolist(),
            "colors": self.colors.reshape(-1).tolist(),
        }


class ElementArena:
    """
    Owned, indexable storage for one kind of element. The records and the two
    target arrays are read-only; `current` and `scale` are the only state the
    per-frame pass mutates.
    """

    def __init__(self, kind: ElementKind):
        self.kind = kind
        self.records: List[VisualElement] = []
        self.tree = self._frozen(np.zeros((0, 3)))
        self.scatter = self._frozen(np.zeros((0, 3)))
        self.current = np.zeros((0, 3))
        self.scale = np.zeros(0)
        self.ids = np.zeros(0, dtype=np.int64)
        self.phases = np.zeros(0)
        self.base_scale = np.zeros(0)
        self.colors = np.zeros((0, 3), dtype=np.float32)

    @staticmethod
    def _frozen(arr: np.ndarray) -> np.ndarray:
        arr.flags.writeable = False
        return arr

    def __len__(self):
        return len(self.records)

    def __getitem__(self, idx) -> VisualElement:
        return self.records[idx]

    def extend(self, elements: Sequence[VisualElement]):
        if not elements:
            return
        tree = np.array([e.tree_pose.position for e in elements], dtype=np.float64)
        scatter = np.array([e.scatter_pose.position for e in elements], dtype=np.float64)
        self.records.extend(elements)
        self.tree = self._frozen(np.vstack((self.tree, tree)))
        self.scatter = self._frozen(np.vstack((self.scatter, scatter)))
        # new elements start on their tree pose
        self.current = np.vstack((self.current, tree))
        self.scale = np.concatenate((self.scale, np.ones(len(elements))))
        self.ids = np.concatenate((self.ids, [e.id for e in elements])).astype(np.int64)
        self.phases = np.concatenate((self.phases, [e.phase for e in elements]))
        self.base_scale = np.concatenate((self.base_scale, [e.base_scale for e in elements]))
        self.colors = np.vstack((self.colors, np.array([e.color for e in elements], dtype=np.float32)))

    def targets(self, scattered: bool) -> np.ndarray:
        return self.scatter if scattered else self.tree


class FormationEngine:
    def __init__(self, cfg=None, rng: Optional[np.random.Generator] = None):
        fcfg = (cfg or {}).get("formation", {})
        self.particle_count = int(fcfg.get("particle_count", 1500))
        if self.particle_count < 0:
            raise ValueError(f"particle_count must be >= 0, got {self.particle_count}")

        self.tree_height = fcfg.get("tree_height", Formations.TREE_HEIGHT)
        self.tree_radius = fcfg.get("tree_radius", Formations.TREE_RADIUS)
        self.scatter_radius = fcfg.get("scatter_radius", Formations.SCATTER_RADIUS)
        self.photo_capacity = fcfg.get("photo_capacity", Formations.PHOTO_CAPACITY)
        self.origin = np.array(fcfg.get("origin", (0.0, -5.0, 0.0)), dtype=np.float64)
        self.configure(cfg)

        if rng is None:
            rng = np.random.default_rng(fcfg.get("seed"))
        self.rng = rng

        self.arenas: Dict[ElementKind, ElementArena] = {k: ElementArena(k) for k in KIND_ORDER}
        self.hovered: Optional[int] = None
        self.time = 0.0
        self.mode = AppMode.TREE
        self._build_particles()
        self._buffers = {k: self._export(self.arenas[k], (0.0, 0.0, 25.0)) for k in KIND_ORDER}

    def configure(self, cfg):
        """Live-tunable values only; static poses are never recomputed."""
        fcfg = (cfg or {}).get("formation", {})
        self.lerp_factor = fcfg.get("lerp_factor", 0.05)
        self.scale_lerp_factor = fcfg.get("scale_lerp_factor", 0.1)
        self.hover_scale = fcfg.get("hover_scale", 1.5)

    # --------------------------------------------------------
    # POPULATION
    # --------------------------------------------------------
    def _build_particles(self):
        by_kind: Dict[ElementKind, List[VisualElement]] = {ElementKind.SPHERE: [], ElementKind.CUBE: []}
        for i in range(self.particle_count):
            kind, color, scale = Formations.particle_look(self.rng)
            by_kind[kind].append(
                VisualElement(
                    id=i,
                    kind=kind,
                    tree_pose=Formations.particle_tree_pose(
                        i, self.particle_count, self.tree_height, self.tree_radius
                    ),
                    scatter_pose=Formations.particle_scatter_pose(self.rng, self.scatter_radius),
                    color=color,
                    base_scale=scale,
                    phase=float(i),
                )
            )
        for kind, elements in by_kind.items():
            self.arenas[kind].extend(elements)
        print(
            f"[FORMATION] {self.particle_count} particles "
            f"({len(by_kind[ElementKind.SPHERE])} spheres, {len(by_kind[ElementKind.CUBE])} cubes)"
        )

    @property
    def photos(self) -> ElementArena:
        return self.arenas[ElementKind.PHOTO]

    def add_photos(self, urls: Iterable[str]) -> List[VisualElement]:
        """
        Append one card per url. Existing cards keep their poses; the tree
        spiral is normalized by the photo count after this batch, or by
        photo_capacity when that reserves more slots.
        """
        urls = list(urls)
        if not urls:
            return []
        start = len(self.photos)
        total = max(self.photo_capacity, start + len(urls))
        added = []
        for offset, url in enumerate(urls):
            idx = start + offset
            added.append(
                VisualElement(
                    id=self.particle_count + idx,
                    kind=ElementKind.PHOTO,
                    tree_pose=Formations.photo_tree_pose(idx, total, self.tree_height, self.tree_radius),
                    scatter_pose=Formations.photo_scatter_pose(self.rng),
                    color=Formations.hex_to_rgb("#FFFFFF"),
                    phase=float(idx),
                    url=url,
                )
            )
        self.photos.extend(added)
        print(f"[FORMATION] +{len(added)} photo(s), {len(self.photos)} total")
        return added

    def set_hovered(self, index: Optional[int]):
        self.hovered = index

    def __len__(self):
        return sum(len(a) for a in self.arenas.values())

    # --------------------------------------------------------
    # PER-FRAME
    # --------------------------------------------------------
    def update(self, mode: AppMode, time: float, camera_position=(0.0, 0.0, 25.0)):
        """Advance every element one tick toward the active formation, then export."""
        self.mode = mode
        self.time = time
        scattered = mode.is_scattered

        for kind in KIND_ORDER:
            arena = self.arenas[kind]
            if not len(arena):
                self._buffers[kind] = self._export(arena, camera_position)
                continue
            arena.current = lerp(arena.current, arena.targets(scattered), self.lerp_factor)

            target_scale = np.ones(len(arena))
            if kind is ElementKind.PHOTO and self.hovered is not None and 0 <= self.hovered < len(arena):
                target_scale[self.hovered] = self.hover_scale
            arena.scale = lerp(arena.scale, target_scale, self.scale_lerp_factor)

            self._buffers[kind] = self._export(arena, camera_position)

    def _export(self, arena: ElementArena, camera_position) -> InstanceBuffer:
        n = len(arena)
        if n == 0:
            return InstanceBuffer(
                kind=arena.kind,
                ids=np.zeros(0, dtype=np.int64),
                matrices=np.zeros((0, 4, 4), dtype=np.float32),
                colors=np.zeros((0, 3), dtype=np.float32),
            )

        positions = arena.current + self.origin
        # float offset rides on top of the interpolated pose, never fed back
        positions[:, 1] += np.sin(self.time + arena.phases) * FLOAT_AMPLITUDE[arena.kind]

        if self.mode.is_scattered:
            rotations = rotation_facing_point(positions, camera_position)
        else:
            rotations = rotation_facing_outward(arena.current)

        return InstanceBuffer(
            kind=arena.kind,
            ids=arena.ids.copy(),
            matrices=compose_matrices(positions, rotations, arena.base_scale * arena.scale),
            colors=arena.colors.copy(),
        )

    def buffers(self) -> Dict[ElementKind, InstanceBuffer]:
        return dict(self._buffers)

    def buffer(self, kind: ElementKind) -> InstanceBuffer:
        return self._buffers[kind]
