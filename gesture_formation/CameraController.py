import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from gesture_formation.Geometry import lerp
from gesture_formation.HandFrame import HandFrame
from gesture_formation.ModeStateMachine import AppMode


@dataclass(frozen=True)
class CameraPose:
    position: Tuple[float, float, float]
    look_at: Tuple[float, float, float] = (0.0, 0.0, 0.0)

    def to_dict(self):
        return {"position": list(self.position), "look_at": list(self.look_at)}


class CameraController:
    """
    Drives the host camera: a fixed target per mode, plus slow sway and
    palm-driven offset in SCATTER. The live camera eases toward the target by
    a fixed fraction each tick and always looks at the world origin.
    """

    def __init__(self, cfg=None):
        self.configure(cfg)
        self.position = np.array((0.0, 0.0, self.tree_distance))
        self.target = self.position.copy()

    def configure(self, cfg):
        c = (cfg or {}).get("camera", {})
        self.lerp_factor = c.get("lerp_factor", 0.05)
        self.tree_distance = c.get("tree_distance", 25.0)
        self.scatter_distance = c.get("scatter_distance", 20.0)
        self.zoom_distance = c.get("zoom_distance", 8.0)
        self.sway_amplitude = c.get("sway_amplitude", 10.0)
        self.sway_speed = c.get("sway_speed", 0.1)
        self.hand_range_x = c.get("hand_range_x", 20.0)
        self.hand_range_y = c.get("hand_range_y", 10.0)

    def target_for(self, mode: AppMode, hand: HandFrame, time: float) -> np.ndarray:
        if mode is AppMode.SCATTER:
            rot_x = rot_y = 0.0
            if hand is not None and hand.is_present:
                rot_x = (hand.palm_position[0] - 0.5) * self.hand_range_x
                rot_y = (hand.palm_position[1] - 0.5) * self.hand_range_y
            sway = math.sin(time * self.sway_speed) * self.sway_amplitude
            return np.array((sway + rot_x, rot_y, self.scatter_distance))
        if mode is AppMode.ZOOM:
            return np.array((0.0, 0.0, self.zoom_distance))
        return np.array((0.0, 0.0, self.tree_distance))

    def update(self, mode: AppMode, hand: HandFrame, time: float) -> CameraPose:
        self.target = self.target_for(mode, hand, time)
        self.position = lerp(self.position, self.target, self.lerp_factor)
        return self.pose

    @property
    def pose(self) -> CameraPose:
        return CameraPose(position=tuple(float(v) for v in self.position))
