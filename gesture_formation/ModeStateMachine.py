from enum import Enum
from typing import Callable, List

from gesture_formation.GestureClassifier import Gesture


class AppMode(str, Enum):
    TREE = "TREE"  # congregated cone
    SCATTER = "SCATTER"  # floating cloud
    ZOOM = "ZOOM"  # tight framing on the centre

    @property
    def is_scattered(self) -> bool:
        return self in (AppMode.SCATTER, AppMode.ZOOM)


TRANSITIONS = {
    Gesture.FIST: AppMode.TREE,
    Gesture.OPEN: AppMode.SCATTER,
    Gesture.PINCH: AppMode.ZOOM,
}

ModeListener = Callable[[AppMode, Gesture], None]


class ModeStateMachine:
    """
    Sole writer of the current display mode.

    Every observation is applied, including repeats of the current mode;
    NONE holds the mode. There is no debounce, one frame is enough to switch.
    """

    def __init__(self, initial: AppMode = AppMode.TREE):
        self._mode = initial
        self._last_gesture = Gesture.NONE
        self._listeners: List[ModeListener] = []
        self.transitions = 0

    @property
    def mode(self) -> AppMode:
        return self._mode

    @property
    def last_gesture(self) -> Gesture:
        return self._last_gesture

    def subscribe(self, listener: ModeListener):
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def observe(self, gesture: Gesture) -> AppMode:
        self._last_gesture = gesture
        target = TRANSITIONS.get(gesture)
        if target is not None:
            if target != self._mode:
                print(f"[MODE] {self._mode.value} -> {target.value} ({gesture.value})")
            self._mode = target
            self.transitions += 1

        for listener in list(self._listeners):
            listener(self._mode, gesture)
        return self._mode

    def force(self, mode: AppMode) -> AppMode:
        """Manual override (renderer command); does not touch last_gesture."""
        if mode != self._mode:
            print(f"[MODE] {self._mode.value} -> {mode.value} (manual)")
        self._mode = mode
        for listener in list(self._listeners):
            listener(self._mode, self._last_gesture)
        return self._mode
