# GestureClassifier.py
from enum import Enum
from typing import Sequence

from gesture_formation.Geometry import extract_point, vec_dist
from gesture_formation.HandFrame import NUM_LANDMARKS

WRIST = 0
THUMB_TIP = 4
INDEX_TIP = 8
FINGER_TIPS = (8, 12, 16, 20)  # index..pinky


class Gesture(str, Enum):
    NONE = "NONE"
    FIST = "FIST"
    OPEN = "OPEN"
    PINCH = "PINCH"


def classify(
    landmarks: Sequence[object],
    pinch_threshold: float = 0.05,
    fist_threshold: float = 0.25,
    open_threshold: float = 0.35,
    min_fingers: int = 3,
) -> Gesture:
    """
    Simple Decision Tree Classifier.
    Priority: PINCH, then FIST, then OPEN. Anything short of a full hand is NONE.
    """
    if not landmarks or len(landmarks) < NUM_LANDMARKS:
        return Gesture.NONE
    try:
        wrist = extract_point(landmarks[WRIST])
        thumb = extract_point(landmarks[THUMB_TIP])
        tips = [extract_point(landmarks[i]) for i in FINGER_TIPS]
    except ValueError:
        return Gesture.NONE

    # 1. Pinch Check (Index Tip -> Thumb Tip), before finger folding can mask it
    if vec_dist(thumb, tips[0]) < pinch_threshold:
        return Gesture.PINCH

    # 2. Fingertip reach from the wrist
    reach = [vec_dist(tip, wrist) for tip in tips]

    folded = sum(1 for d in reach if d < fist_threshold)
    if folded >= min_fingers:
        return Gesture.FIST

    extended = sum(1 for d in reach if d > open_threshold)
    if extended >= min_fingers:
        return Gesture.OPEN

    return Gesture.NONE


class GestureClassifier:
    def __init__(self, cfg=None):
        # default config
        self.cfg = {
            "classifier": {
                "pinch_threshold": 0.05,
                "fist_threshold": 0.25,
                "open_threshold": 0.35,
                "min_fingers": 3,
            },
        }
        self.update_config(cfg)

    def update_config(self, cfg):
        # simple merge
        for k, v in (cfg or {}).items():
            if isinstance(v, dict):
                self.cfg.setdefault(k, {}).update(v)
            else:
                self.cfg[k] = v

        c = self.cfg.get("classifier", {})
        self.pinch_threshold = c.get("pinch_threshold", 0.05)
        self.fist_threshold = c.get("fist_threshold", 0.25)
        self.open_threshold = c.get("open_threshold", 0.35)
        self.min_fingers = c.get("min_fingers", 3)

    def classify(self, landmarks) -> Gesture:
        return classify(
            landmarks,
            pinch_threshold=self.pinch_threshold,
            fist_threshold=self.fist_threshold,
            open_threshold=self.open_threshold,
            min_fingers=self.min_fingers,
        )

    def classify_frame(self, frame) -> Gesture:
        if frame is None or not frame.is_present:
            return Gesture.NONE
        return self.classify(frame.landmarks)
