import json
import time

import pytest
import zmq

from conftest import make_hand
from gesture_formation.CameraController import CameraController
from gesture_formation.FormationEngine import FormationEngine
from gesture_formation.FormationServer import FormationServer, apply_command, build_snapshot
from gesture_formation.HandFrame import HandFrame
from gesture_formation.ModeStateMachine import AppMode, ModeStateMachine


@pytest.fixture
def engine():
    return FormationEngine({"formation": {"particle_count": 20, "seed": 2}})


def test_add_photos_command(engine):
    modes = ModeStateMachine()
    assert apply_command({"cmd": "add_photos", "urls": ["a", "b"]}, engine, modes)
    assert [e.url for e in engine.photos.records] == ["a", "b"]


def test_hover_command(engine):
    modes = ModeStateMachine()
    assert apply_command({"cmd": "hover", "index": 0}, engine, modes)
    assert engine.hovered == 0
    assert apply_command({"cmd": "hover", "index": None}, engine, modes)
    assert engine.hovered is None


def test_set_mode_command(engine):
    modes = ModeStateMachine()
    assert apply_command({"cmd": "set_mode", "mode": "SCATTER"}, engine, modes)
    assert modes.mode is AppMode.SCATTER


@pytest.mark.parametrize(
    "msg",
    [
        "add_photos",
        {"cmd": "explode"},
        {"cmd": "set_mode", "mode": "SPIN"},
        {"cmd": "add_photos", "urls": "a.jpg"},
        {"cmd": "hover", "index": "first"},
        {"cmd": "hover", "index": True},
    ],
)
def test_bad_commands_are_ignored(engine, msg):
    modes = ModeStateMachine()
    assert apply_command(msg, engine, modes) is False
    assert modes.mode is AppMode.TREE
    assert len(engine.photos) == 0


def test_snapshot_is_json_ready(engine):
    modes = ModeStateMachine()
    engine.add_photos(["a"])
    engine.update(AppMode.TREE, 0.0)
    hand = HandFrame.from_landmarks(make_hand())
    snap = build_snapshot(modes, hand, CameraController().pose, engine, fps=59.5)
    decoded = json.loads(json.dumps(snap))
    assert decoded["mode"] == "TREE"
    assert decoded["gesture"] == "NONE"
    assert decoded["hand"]["present"] is True
    assert decoded["camera"]["position"] == [0.0, 0.0, 25.0]
    assert decoded["photos"] == ["a"]
    total = sum(b["count"] for b in decoded["buffers"].values())
    assert total == len(engine)
    assert set(decoded["buffers"]) == {"SPHERE", "CUBE", "PHOTO"}


def _poll(fn, timeout=2.0):
    deadline = time.time() + timeout
    while time.time() < deadline:
        result = fn()
        if result:
            return result
        time.sleep(0.01)
    return None


def test_server_round_trip(engine):
    ctx = zmq.Context()
    server = FormationServer("inproc://snapshots", "inproc://commands", context=ctx)
    push = ctx.socket(zmq.PUSH)
    sub = ctx.socket(zmq.SUB)
    try:
        push.connect("inproc://commands")
        push.send_string(json.dumps({"cmd": "add_photos", "urls": ["x"]}))
        push.send_string("{not json")
        commands = _poll(server.poll_commands)
        assert commands == [{"cmd": "add_photos", "urls": ["x"]}]

        sub.connect("inproc://snapshots")
        sub.setsockopt_string(zmq.SUBSCRIBE, "")

        def receive():
            server.send_snapshot({"mode": "TREE"})
            if sub.poll(20):
                return json.loads(sub.recv_string())
            return None

        assert _poll(receive) == {"mode": "TREE"}
    finally:
        push.close(0)
        sub.close(0)
        server.close()
        ctx.term()


def test_boolean_hover_index_leaves_cards_alone(engine):
    modes = ModeStateMachine()
    engine.add_photos(["a", "b", "c"])
    assert apply_command({"cmd": "hover", "index": True}, engine, modes) is False
    assert engine.hovered is None
    for k in range(200):
        engine.update(AppMode.TREE, k / 60)
    assert engine.photos.scale == pytest.approx([1.0, 1.0, 1.0])
