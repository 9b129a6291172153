# src/spsevb/physics/focal_plane.py
"""
Focal-plane reconstruction from delay-line timing.

Each delay line reads out at both ends; the timing difference between the
left and right signals locates the avalanche along the wire. Two such planes
(front and back wire) give two position estimates, X1 and X2, separated by a
fixed distance, from which the track angle Theta follows.

All inputs and outputs use INVALID_VALUE as the "not present" marker.
"""
from __future__ import annotations
from dataclasses import dataclass
import math
from typing import Optional, Tuple

# -1.0e6 as an IEEE-754 double: 0xC12E848000000000
INVALID_VALUE: float = -1.0e6

# Propagation-speed normalizations of the two delay lines
FRONT_DELAY_SCALE = 1.0 / 2.1
BACK_DELAY_SCALE = 1.0 / 1.98

# Separation of the front and back wires, in the same units as X1/X2
WIRE_SEPARATION = 36.0

Weights = Tuple[float, float]


def is_valid(value: float) -> bool:
    return value != INVALID_VALUE


def delay_line_position(t_left: float, t_right: float, scale: float) -> float:
    """Half the left/right timing difference times the line scale, or INVALID_VALUE."""
    if not (is_valid(t_left) and is_valid(t_right)):
        return INVALID_VALUE
    return (t_left - t_right) * 0.5 * scale


def focal_plane_angle(x1: float, x2: float) -> float:
    """
    Track angle [rad] from the two wire positions.

    The atan branch is shifted by pi for negative differences so the result
    stays in (0, pi); equal positions give exactly pi/2.
    """
    diff = x2 - x1
    if diff > 0.0:
        return math.atan(diff / WIRE_SEPARATION)
    elif diff < 0.0:
        return math.pi + math.atan(diff / WIRE_SEPARATION)
    return math.pi * 0.5


def weighted_position(x1: float, x2: float, weights: Optional[Weights]) -> float:
    # No weights configured collapses onto the same marker as missing data.
    if weights is None:
        return INVALID_VALUE
    return weights[0] * x1 + weights[1] * x2


@dataclass(slots=True)
class FocalPlaneResult:
    x1: float = INVALID_VALUE
    x2: float = INVALID_VALUE
    xavg: float = INVALID_VALUE
    theta: float = INVALID_VALUE

    @property
    def complete(self) -> bool:
        return is_valid(self.x1) and is_valid(self.x2)


def reconstruct_focal_plane(
    front_left: float,
    front_right: float,
    back_left: float,
    back_right: float,
    weights: Optional[Weights] = None,
) -> FocalPlaneResult:
    res = FocalPlaneResult(
        x1=delay_line_position(front_left, front_right, FRONT_DELAY_SCALE),
        x2=delay_line_position(back_left, back_right, BACK_DELAY_SCALE),
    )
    if res.complete:
        res.theta = focal_plane_angle(res.x1, res.x2)
        res.xavg = weighted_position(res.x1, res.x2, weights)
    return res
