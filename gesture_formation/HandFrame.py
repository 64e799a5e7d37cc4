from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from gesture_formation.Geometry import Point, extract_point, midpoint

WRIST = 0
MIDDLE_MCP = 9
NUM_LANDMARKS = 21


@dataclass(frozen=True)
class HandFrame:
    """
    One immutable sample from the landmark source. The render tick only ever
    swaps whole frames, so a landmark list is never paired with a palm
    position from another inference cycle.
    """

    landmarks: Tuple[Point, ...] = ()
    is_present: bool = False
    # mirrored x to match the flipped preview, normalized 0..1
    palm_position: Tuple[float, float] = (0.5, 0.5)
    timestamp: float = 0.0
    handedness: str = "Unknown"

    @classmethod
    def empty(cls, timestamp: float = 0.0) -> "HandFrame":
        return cls(timestamp=timestamp)

    @classmethod
    def from_landmarks(
        cls,
        landmarks: Optional[Sequence[object]],
        timestamp: float = 0.0,
        handedness: str = "Unknown",
    ) -> "HandFrame":
        """Build a frame from raw landmarks; anything short of a full hand is treated as absent."""
        if not landmarks or len(landmarks) < NUM_LANDMARKS:
            return cls.empty(timestamp)
        try:
            points = tuple(extract_point(lm) for lm in landmarks)
        except ValueError:
            return cls.empty(timestamp)

        palm = midpoint(points[WRIST], points[MIDDLE_MCP])
        return cls(
            landmarks=points,
            is_present=True,
            palm_position=(1.0 - palm[0], palm[1]),
            timestamp=timestamp,
            handedness=handedness,
        )

    def to_dict(self):
        """Serialize to JSON-friendly dict (landmarks omitted)."""
        return {
            "present": self.is_present,
            "palm": {"x": self.palm_position[0], "y": self.palm_position[1]},
            "handedness": self.handedness,
            "timestamp": self.timestamp,
        }
