import mediapipe as mp

from gesture_formation.HandFrame import HandFrame


class HandTracker:
    def __init__(
        self,
        cfg,
    ):
        self.cfg = cfg
        tcfg = cfg.get("tracker", {})

        # one hand only; the first detection drives everything
        self.mp_hands = mp.solutions.hands.Hands(
            model_complexity=tcfg.get("model_complexity", 1),
            min_detection_confidence=tcfg.get("min_detection_confidence", 0.5),
            min_tracking_confidence=tcfg.get("min_tracking_confidence", 0.5),
            max_num_hands=1,
        )

    def process_frame(self, frame_rgb, timestamp):
        """
        Process an RGB frame (caller does the BGR->RGB conversion).
        Returns (HandFrame, raw mediapipe landmarks or None).
        timestamp: absolute time (seconds) for this frame.
        """
        result = self.mp_hands.process(frame_rgb)

        if not result.multi_hand_landmarks:
            return HandFrame.empty(timestamp), None

        lm = result.multi_hand_landmarks[0]
        handedness = "Unknown"
        if result.multi_handedness:
            handedness = result.multi_handedness[0].classification[0].label

        frame = HandFrame.from_landmarks(lm.landmark, timestamp=timestamp, handedness=handedness)
        return frame, lm

    def close(self):
        self.mp_hands.close()
