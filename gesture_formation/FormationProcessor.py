from gesture_formation.CameraController import CameraController
from gesture_formation.FormationEngine import FormationEngine
from gesture_formation.FormationServer import apply_command, build_snapshot
from gesture_formation.GestureClassifier import GestureClassifier
from gesture_formation.HandFrameSlot import HandFrameSlot
from gesture_formation.ModeStateMachine import ModeStateMachine


# ==========================================
# PROCESSING CORE (one render tick)
# ==========================================
class FormationProcessor:
    """
    Owns the core components and advances them once per render tick:
    sample the hand slot -> classify -> mode -> camera + formation.
    Never waits on the landmark source.
    """

    def __init__(self, cfg, slot=None, engine=None):
        self.cfg = cfg
        self.slot = slot or HandFrameSlot()
        self.classifier = GestureClassifier(cfg)
        self.modes = ModeStateMachine()
        self.engine = engine or FormationEngine(cfg)
        self.camera = CameraController(cfg)
        self.hand = self.slot.latest()[1]
        self.camera_pose = self.camera.pose
        self._last_seq = 0

        photos = cfg.get("photos") or []
        if photos:
            self.engine.add_photos(photos)

    def reconfigure(self, cfg):
        """Push live-tunable values into running components."""
        self.cfg = cfg
        self.classifier.update_config(cfg)
        self.engine.configure(cfg)
        self.camera.configure(cfg)

    def handle_commands(self, commands):
        for msg in commands:
            apply_command(msg, self.engine, self.modes)

    def tick(self, t):
        seq, hand = self.slot.latest()
        self.hand = hand
        # each published frame is observed once; repeats of an old frame are not new observations
        if seq != self._last_seq:
            self._last_seq = seq
            self.modes.observe(self.classifier.classify_frame(hand))

        mode = self.modes.mode
        self.camera_pose = self.camera.update(mode, hand, t)
        self.engine.update(mode, t, self.camera_pose.position)
        return mode

    def snapshot(self, fps=None):
        return build_snapshot(self.modes, self.hand, self.camera_pose, self.engine, fps=fps)
