import math

import numpy as np

from spsevb.physics.focal_plane import (
    INVALID_VALUE,
    delay_line_position,
    focal_plane_angle,
    reconstruct_focal_plane,
    weighted_position,
)

def test_delay_line_position_requires_both_ends():
    assert delay_line_position(INVALID_VALUE, 10.0, 1.0) == INVALID_VALUE
    assert delay_line_position(10.0, INVALID_VALUE, 1.0) == INVALID_VALUE
    assert np.isclose(delay_line_position(100.0, 80.0, 1.0 / 2.1), 20.0 * 0.5 / 2.1)

def test_angle_branches():
    assert np.isclose(focal_plane_angle(0.0, 3.6), math.atan(0.1))
    assert np.isclose(focal_plane_angle(3.6, 0.0), math.pi + math.atan(-0.1))
    assert focal_plane_angle(2.0, 2.0) == math.pi * 0.5
    # negative differences stay in (pi/2, pi)
    assert math.pi * 0.5 < focal_plane_angle(5.0, -5.0) < math.pi

def test_weighted_position_without_weights_is_unset():
    assert weighted_position(1.0, 2.0, None) == INVALID_VALUE
    assert np.isclose(weighted_position(1.0, 2.0, (0.25, 0.75)), 1.75)

def test_reconstruct_partial():
    res = reconstruct_focal_plane(100.0, 80.0, INVALID_VALUE, 60.0, weights=(0.5, 0.5))
    assert not res.complete
    assert np.isclose(res.x1, 20.0 * 0.5 / 2.1)
    assert res.x2 == INVALID_VALUE
    assert res.theta == INVALID_VALUE
    assert res.xavg == INVALID_VALUE
