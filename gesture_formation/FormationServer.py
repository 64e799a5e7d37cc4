import json

import zmq

from gesture_formation.ModeStateMachine import AppMode


# ==========================================
# SNAPSHOT / COMMAND PAYLOADS
# ==========================================
def build_snapshot(modes, hand, camera_pose, engine, fps=None):
    """One JSON-friendly frame for the renderer."""
    return {
        "mode": modes.mode.value,
        "gesture": modes.last_gesture.value,
        "hand": hand.to_dict(),
        "camera": camera_pose.to_dict(),
        "time": engine.time,
        "buffers": {kind.value: buf.to_dict() for kind, buf in engine.buffers().items()},
        "photos": [e.url for e in engine.photos.records],
        "fps": fps,
    }


def apply_command(msg, engine, modes):
    """
    Apply one inbound command. Returns True when it was understood.
        {"cmd": "add_photos", "urls": [...]}
        {"cmd": "hover", "index": n | null}
        {"cmd": "set_mode", "mode": "TREE" | "SCATTER" | "ZOOM"}
    """
    if not isinstance(msg, dict):
        print("[NET] Ignoring non-object command:", msg)
        return False

    cmd = msg.get("cmd")
    if cmd == "add_photos":
        urls = msg.get("urls") or []
        if not isinstance(urls, list) or not all(isinstance(u, str) for u in urls):
            print("[NET] add_photos expects a list of strings")
            return False
        engine.add_photos(urls)
        return True
    if cmd == "hover":
        index = msg.get("index")
        # bool is an int subclass and would index every card
        if index is not None and (isinstance(index, bool) or not isinstance(index, int)):
            print("[NET] hover expects an integer index or null")
            return False
        engine.set_hovered(index)
        return True
    if cmd == "set_mode":
        try:
            modes.force(AppMode(msg.get("mode")))
        except ValueError:
            print("[NET] Unknown mode:", msg.get("mode"))
            return False
        return True

    print("[NET] Unknown command:", cmd)
    return False


# ==========================================
# NETWORK ENGINE
# ==========================================
class FormationServer:
    def __init__(self, pub_endpoint="tcp://127.0.0.1:5556", cmd_endpoint="tcp://127.0.0.1:5557", context=None):
        self._own_context = context is None
        self.context = context or zmq.Context()

        self.pub = self.context.socket(zmq.PUB)
        self.pub.setsockopt(zmq.LINGER, 0)
        self.pub.bind(pub_endpoint)

        self.cmd = self.context.socket(zmq.PULL)
        self.cmd.setsockopt(zmq.LINGER, 0)
        self.cmd.bind(cmd_endpoint)
        print(f"[NET] Publishing on {pub_endpoint}, commands on {cmd_endpoint}")

    def send_snapshot(self, snapshot):
        """One JSON document per tick; a failed send drops the frame."""
        try:
            self.pub.send_string(json.dumps(snapshot), flags=zmq.NOBLOCK)
            return True
        except zmq.ZMQError as e:
            print("[NET] Send failed:", e)
            return False

    def poll_commands(self, limit=32):
        """Drain pending commands without blocking."""
        commands = []
        while len(commands) < limit:
            try:
                raw = self.cmd.recv_string(flags=zmq.NOBLOCK)
            except zmq.Again:
                break
            try:
                commands.append(json.loads(raw))
            except ValueError:
                print("[NET] Dropping malformed command:", raw[:80])
        return commands

    def close(self):
        self.pub.close()
        self.cmd.close()
        if self._own_context:
            self.context.term()
