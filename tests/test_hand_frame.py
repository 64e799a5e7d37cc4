import threading
import time

import pytest

from conftest import make_hand
from gesture_formation.HandFrame import HandFrame
from gesture_formation.HandFrameSlot import HandFrameSlot


def test_palm_is_mirrored_midpoint_of_wrist_and_middle_base():
    points = make_hand(wrist=(0.2, 0.8, 0.0))
    frame = HandFrame.from_landmarks(points, timestamp=1.5)
    assert frame.is_present
    assert frame.palm_position[0] == pytest.approx(0.8)
    assert frame.palm_position[1] == pytest.approx(0.75)
    assert len(frame.landmarks) == 21
    assert frame.timestamp == 1.5


def test_short_landmarks_give_neutral_frame():
    frame = HandFrame.from_landmarks(make_hand()[:10])
    assert not frame.is_present
    assert frame.landmarks == ()
    assert frame.palm_position == (0.5, 0.5)


def test_slot_before_first_delivery_is_neutral():
    seq, frame = HandFrameSlot().latest()
    assert seq == 0
    assert frame == HandFrame.empty()


def test_slot_replaces_and_counts():
    slot = HandFrameSlot()
    first = HandFrame.from_landmarks(make_hand(), timestamp=1.0)
    second = HandFrame.from_landmarks(make_hand(wrist=(0.3, 0.9, 0.0)), timestamp=2.0)
    slot.publish(first)
    slot.publish(second)
    seq, frame = slot.latest()
    assert seq == 2
    assert frame is second
    # reading does not consume
    assert slot.latest() == (2, second)


def test_slot_neutralizes_absent_frames():
    slot = HandFrameSlot()
    slot.publish(HandFrame(is_present=False, palm_position=(0.1, 0.9), timestamp=3.0))
    _, frame = slot.latest()
    assert frame.palm_position == (0.5, 0.5)
    assert frame.timestamp == 3.0


def test_closed_slot_discards_late_results():
    slot = HandFrameSlot()
    slot.publish(HandFrame.from_landmarks(make_hand()))
    slot.close()
    assert slot.closed
    assert slot.publish(HandFrame.from_landmarks(make_hand())) is False
    _, frame = slot.latest()
    assert not frame.is_present


def test_close_wins_over_racing_publishers():
    slot = HandFrameSlot()
    hand = HandFrame.from_landmarks(make_hand())
    stop = threading.Event()

    def spam():
        while not stop.is_set():
            slot.publish(hand)

    workers = [threading.Thread(target=spam) for _ in range(4)]
    for w in workers:
        w.start()
    time.sleep(0.05)
    slot.close()
    stop.set()
    for w in workers:
        w.join()
    _, frame = slot.latest()
    assert not frame.is_present
