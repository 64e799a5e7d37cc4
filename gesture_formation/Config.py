import copy
import json
import os
import time

DEFAULT_PHOTOS = [
    "https://picsum.photos/id/102/300/300",
    "https://picsum.photos/id/106/300/300",
    "https://picsum.photos/id/235/300/300",
    "https://picsum.photos/id/238/300/300",
]

DEFAULT_CONFIG = {
    "tracker": {
        "camera_index": 0,
        "frame_width": 640,
        "frame_height": 480,
        "model_complexity": 1,
        "min_detection_confidence": 0.5,
        "min_tracking_confidence": 0.5,
    },
    "classifier": {
        "pinch_threshold": 0.05,
        "fist_threshold": 0.25,
        "open_threshold": 0.35,
        "min_fingers": 3,
    },
    "formation": {
        "particle_count": 1500,
        "tree_height": 14.0,
        "tree_radius": 6.0,
        "scatter_radius": 12.0,
        "photo_capacity": 0,
        "lerp_factor": 0.05,
        "scale_lerp_factor": 0.1,
        "hover_scale": 1.5,
        "seed": None,
        "origin": [0.0, -5.0, 0.0],
    },
    "camera": {
        "lerp_factor": 0.05,
        "tree_distance": 25.0,
        "scatter_distance": 20.0,
        "zoom_distance": 8.0,
        "sway_amplitude": 10.0,
        "sway_speed": 0.1,
        "hand_range_x": 20.0,
        "hand_range_y": 10.0,
    },
    "network": {
        "enabled": True,
        "pub_endpoint": "tcp://127.0.0.1:5556",
        "cmd_endpoint": "tcp://127.0.0.1:5557",
    },
    "loop": {"target_fps": 60},
    "debug": {
        "show_preview": True,
        "draw_landmarks": True,
        "show_fps": True,
        "fps_window": 20,
        "preview_width": 960,
        "preview_height": 540,
    },
    "photos": DEFAULT_PHOTOS,
}


def merge_config(base, override):
    """Section dicts are merged key by key; everything else is replaced."""
    merged = copy.deepcopy(base)
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(merged.get(k), dict):
            merged[k].update(v)
        else:
            merged[k] = v
    return merged


def load_config(path="config.json"):
    if not os.path.exists(path):
        print(f"[PY] config '{path}' not found, using defaults.")
        return merge_config(DEFAULT_CONFIG, {})
    try:
        with open(path, "r", encoding="utf-8") as f:
            return merge_config(DEFAULT_CONFIG, json.load(f))
    except (OSError, ValueError) as e:
        print("[PY] Failed to load config:", e)
        return merge_config(DEFAULT_CONFIG, {})


class ConfigWatcher:
    """
    Watches a JSON config file and reloads it when the file changes.
    Usage:
        watcher = ConfigWatcher("config.json")
        cfg = watcher.get_config()        # initial load
        # later:
        cfg = watcher.check_reload()      # returns new cfg or same dict
    """

    def __init__(self, path="config.json", min_check_interval=0.5, overrides=None):
        self.path = path
        # launcher overrides sit on top of every load, reloads included
        self._overrides = overrides or {}
        self._cfg = self._merge({})
        self._mtime = 0.0
        self._last_checked = 0.0
        self._min_check_interval = min_check_interval  # seconds between checks
        self._load()  # load now

    def _load(self):
        try:
            if not os.path.exists(self.path):
                self._mtime = 0.0
                return
            m = os.path.getmtime(self.path)
            with open(self.path, "r", encoding="utf-8") as f:
                self._cfg = self._merge(json.load(f))
            self._mtime = m
        except (OSError, ValueError) as e:
            # keep the last good config
            print("[ConfigWatcher] failed to load config:", e)

    def _merge(self, file_cfg):
        return merge_config(merge_config(DEFAULT_CONFIG, file_cfg), self._overrides)

    def get_config(self):
        return self._cfg

    def check_reload(self):
        """
        Call frequently (cheap). Will only stat the file every _min_check_interval seconds.
        Returns current config (reloaded if changed).
        """
        now = time.time()
        if now - self._last_checked < self._min_check_interval:
            return self._cfg
        self._last_checked = now

        try:
            if not os.path.exists(self.path):
                # file missing -> keep existing config
                return self._cfg
            m = os.path.getmtime(self.path)
            if m != self._mtime:
                print("[ConfigWatcher] Detected config change, reloading...")
                self._load()
        except OSError as e:
            print("[ConfigWatcher] check_reload error:", e)

        return self._cfg
