import math

import numpy as np
import pytest

from conftest import make_hand
from gesture_formation.CameraController import CameraController
from gesture_formation.HandFrame import HandFrame
from gesture_formation.ModeStateMachine import AppMode


def present_hand(palm_x, palm_y):
    # palm x is mirrored, so place the wrist on the other side
    wrist = (1.0 - palm_x, palm_y + 0.05, 0.0)
    return HandFrame.from_landmarks(make_hand(wrist=wrist))


def test_starts_on_tree_framing():
    cam = CameraController()
    assert cam.pose.position == (0.0, 0.0, 25.0)
    assert cam.pose.look_at == (0.0, 0.0, 0.0)


def test_tree_and_zoom_targets():
    cam = CameraController()
    np.testing.assert_allclose(cam.target_for(AppMode.TREE, HandFrame.empty(), 3.0), (0, 0, 25))
    np.testing.assert_allclose(cam.target_for(AppMode.ZOOM, HandFrame.empty(), 3.0), (0, 0, 8))


def test_scatter_target_follows_palm():
    cam = CameraController()
    hand = present_hand(0.75, 0.25)
    assert hand.palm_position == pytest.approx((0.75, 0.25))
    t = 2.0
    target = cam.target_for(AppMode.SCATTER, hand, t)
    sway = math.sin(t * 0.1) * 10
    np.testing.assert_allclose(target, (sway + 5.0, -2.5, 20.0))


def test_scatter_without_hand_only_sways():
    cam = CameraController()
    target = cam.target_for(AppMode.SCATTER, HandFrame.empty(), 5.0)
    np.testing.assert_allclose(target, (math.sin(0.5) * 10, 0.0, 20.0))


def test_update_moves_fixed_fraction():
    cam = CameraController()
    pose = cam.update(AppMode.ZOOM, HandFrame.empty(), 0.0)
    assert pose.position[2] == pytest.approx(25 + (8 - 25) * 0.05)
    for _ in range(400):
        pose = cam.update(AppMode.ZOOM, HandFrame.empty(), 0.0)
    assert pose.position == pytest.approx((0.0, 0.0, 8.0), abs=1e-6)


def test_configured_distances():
    cam = CameraController({"camera": {"tree_distance": 30.0, "lerp_factor": 1.0}})
    pose = cam.update(AppMode.TREE, HandFrame.empty(), 0.0)
    assert pose.position == pytest.approx((0.0, 0.0, 30.0))
