from gesture_formation.GestureClassifier import Gesture
from gesture_formation.ModeStateMachine import AppMode, ModeStateMachine


def test_starts_in_tree():
    assert ModeStateMachine().mode is AppMode.TREE


def test_gesture_sequence_scenario():
    modes = ModeStateMachine()
    seen = [modes.observe(g) for g in (Gesture.OPEN, Gesture.NONE, Gesture.NONE, Gesture.FIST)]
    assert seen == [AppMode.SCATTER, AppMode.SCATTER, AppMode.SCATTER, AppMode.TREE]


def test_none_never_transitions():
    modes = ModeStateMachine()
    modes.observe(Gesture.PINCH)
    before = modes.transitions
    for _ in range(5):
        assert modes.observe(Gesture.NONE) is AppMode.ZOOM
    assert modes.transitions == before


def test_repeat_gesture_is_still_a_transition():
    modes = ModeStateMachine()
    modes.observe(Gesture.FIST)
    modes.observe(Gesture.FIST)
    assert modes.mode is AppMode.TREE
    assert modes.transitions == 2


def test_listeners_see_every_observation():
    modes = ModeStateMachine()
    events = []
    unsubscribe = modes.subscribe(lambda mode, gesture: events.append((mode, gesture)))
    modes.observe(Gesture.OPEN)
    modes.observe(Gesture.NONE)
    unsubscribe()
    modes.observe(Gesture.PINCH)
    assert events == [(AppMode.SCATTER, Gesture.OPEN), (AppMode.SCATTER, Gesture.NONE)]
    assert modes.last_gesture is Gesture.PINCH


def test_force_keeps_last_gesture():
    modes = ModeStateMachine()
    modes.observe(Gesture.OPEN)
    assert modes.force(AppMode.ZOOM) is AppMode.ZOOM
    assert modes.last_gesture is Gesture.OPEN


def test_scattered_modes():
    assert AppMode.SCATTER.is_scattered
    assert AppMode.ZOOM.is_scattered
    assert not AppMode.TREE.is_scattered
