import math

import pytest

from gesture_formation.Config import DEFAULT_CONFIG, merge_config

WRIST = (0.5, 0.9, 0.0)
TIP_INDICES = (8, 12, 16, 20)


def make_hand(reach=0.4, thumb_offset=(0.3, 0.0, 0.0), wrist=WRIST):
    """
    Synthetic 21-point hand. Fingertips fan out above the wrist at `reach`
    (one value or four, index..pinky); the thumb tip sits at `thumb_offset`
    from the wrist, away from the index tip unless told otherwise.
    """
    if isinstance(reach, (int, float)):
        reach = [reach] * 4
    wx, wy, wz = wrist
    points = [(wx, wy - 0.05, wz)] * 21
    points[0] = wrist
    points[9] = (wx, wy - 0.1, wz)  # middle MCP
    points[4] = (wx + thumb_offset[0], wy + thumb_offset[1], wz + thumb_offset[2])
    for k, (idx, r) in enumerate(zip(TIP_INDICES, reach)):
        theta = math.radians(60 + 20 * k)
        points[idx] = (wx + r * math.cos(theta), wy - r * math.sin(theta), wz)
    return points


@pytest.fixture
def hand():
    return make_hand


@pytest.fixture
def cfg():
    return merge_config(
        DEFAULT_CONFIG,
        {"formation": {"particle_count": 200, "seed": 7}, "photos": []},
    )
