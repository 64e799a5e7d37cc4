import threading
from typing import Optional, Tuple

from gesture_formation.HandFrame import HandFrame


class HandFrameSlot:
    """
    Latest-value mailbox between the capture thread and the render tick.

    Writers replace the whole (sequence, frame) tuple in one assignment, so a
    reader never sees half of an update. Readers never block and never
    consume; they get whatever was published last.
    """

    def __init__(self):
        # None until the landmark source delivers its first result
        self._entry: Tuple[int, Optional[HandFrame]] = (0, None)
        self._closed = False
        # serializes writers so the closed check and the swap happen together
        self._write_lock = threading.Lock()

    def publish(self, frame: Optional[HandFrame]) -> bool:
        """Replace the current frame. Returns False once the slot is closed."""
        if frame is not None and not frame.is_present:
            # normalize every "no hand" into the neutral frame
            frame = HandFrame.empty(frame.timestamp)
        with self._write_lock:
            if self._closed:
                return False
            seq, _ = self._entry
            self._entry = (seq + 1, frame)
        return True

    def latest(self) -> Tuple[int, HandFrame]:
        seq, frame = self._entry
        if frame is None:
            return seq, HandFrame.empty()
        return seq, frame

    def close(self):
        """Stop accepting frames; results still in flight are dropped."""
        with self._write_lock:
            self._closed = True
            seq, _ = self._entry
            self._entry = (seq + 1, HandFrame.empty())

    @property
    def closed(self) -> bool:
        return self._closed
